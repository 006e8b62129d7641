import logging
import os
from celery import Celery
from celery.signals import after_setup_logger

from factguard_core import config

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
RESULT_URL = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

app = Celery("factguard", broker=BROKER_URL, backend=RESULT_URL, include=["factguard_tasks.tasks"])
app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    result_expires=86400,  # 1 day
    # one document per worker slot
    worker_prefetch_multiplier=1,
    task_acks_late=True,
)


@after_setup_logger.connect
def configure_worker_logging(logger, **kwargs):
    """Worker logs use the same level and format as the API."""
    logger.setLevel(config.LOG_LEVEL)
    for handler in logger.handlers:
        handler.setFormatter(logging.Formatter(config.LOG_FORMAT))


# === Beat schedule (enable with REVERIFY_ENABLE=1) ===
if os.getenv("REVERIFY_ENABLE", "0") != "0":
    from celery.schedules import crontab
    REVERIFY_CRON = os.getenv("REVERIFY_CRON", "0")          # minute field; hourly by default
    REVERIFY_BATCH_SIZE = int(os.getenv("REVERIFY_BATCH_SIZE", "20"))
    app.conf.beat_schedule = {
        "batch-reverify": {
            "task": "batch_reverify_task",
            "schedule": crontab(minute=REVERIFY_CRON),
            "args": (REVERIFY_BATCH_SIZE, False),
        }
    }
