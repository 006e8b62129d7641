import os
from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()

# OpenAI or any OpenAI-compatible gateway. Checked per request by require_llm_api_key().
LLM_API_KEY = os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY")
LLM_BASE_URL = os.getenv("LLM_BASE_URL") or None
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
LLM_TIMEOUT_SEC = float(os.getenv("LLM_TIMEOUT_SEC", "60"))

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "fs")  # "fs" | "redis"
DOCSTORE_ROOT = os.getenv("DOCSTORE_ROOT", ".docstore")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/2")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

MAX_ATTEMPTS = 3

SUMMARY_SOURCE_CHARS = 12000
VERIFY_SOURCE_CHARS = 15000
SUMMARY_MAX_TOKENS = 600
VERIFY_MAX_TOKENS = 1000


def require_llm_api_key() -> str:
    if not LLM_API_KEY:
        raise ConfigurationError("LLM_API_KEY not configured")
    return LLM_API_KEY
