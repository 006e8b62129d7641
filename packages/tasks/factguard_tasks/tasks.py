from __future__ import annotations

from typing import Any, Dict

from factguard_core.llm import TextGenerator
from factguard_store import get_store
from factguard_verify import SummaryCertifier, reverify_batch

from .celery_app import app


def _certifier() -> SummaryCertifier:
    # raises ConfigurationError before anything is read or written
    llm = TextGenerator.from_config()
    return SummaryCertifier(get_store(), llm)


@app.task(bind=True, name="verify_document_task")
def verify_document_task(self, document_id: str, force_regenerate: bool = False) -> Dict[str, Any]:
    """Run the certification loop for one document; the result is the response body of /verify-document."""
    self.update_state(state="STARTED", meta={"step": "verify"})
    outcome = _certifier().run(document_id, force_regenerate=force_regenerate)
    return outcome.to_wire()


@app.task(bind=True, name="batch_reverify_task")
def batch_reverify_task(self, batch_size: int = 20, dry_run: bool = False) -> Dict[str, Any]:
    self.update_state(state="STARTED", meta={"step": "reverify"})
    certifier = _certifier()
    return reverify_batch(certifier.store, certifier, batch_size=batch_size, dry_run=dry_run)
