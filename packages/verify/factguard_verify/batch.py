import logging
import time
from typing import Any, Dict, List

from factguard_core.errors import FactguardError, TextGenerationError
from factguard_core.models import VerificationStatus

log = logging.getLogger(__name__)

REVERIFY_STATUSES = (VerificationStatus.MANUAL_REVIEW, VerificationStatus.REJECTED)


def _short(title: str) -> str:
    return (title or "")[:50]


def reverify_batch(store, certifier, *, batch_size: int = 20, dry_run: bool = False,
                   delay_sec: float = 0.5) -> Dict[str, Any]:
    """
    Give documents stuck in manual_review/rejected a fresh certification run
    (regenerated summary, new attempt budget), one document at a time.
    A 429 from the text-generation gateway ends the batch early.
    """
    candidates = [d for d in store.list_documents(REVERIFY_STATUSES, limit=batch_size) if d.source_content]
    log.info("batch reverification: %d candidates (batch_size=%d, dry_run=%s)",
             len(candidates), batch_size, dry_run)

    if not candidates:
        return {"message": "No documents to reverify", "processed": 0, "verified": 0, "stillRejected": 0}

    if dry_run:
        return {
            "message": "Dry run - would process these documents",
            "count": len(candidates),
            "documents": [{"id": d.id, "title": _short(d.title)} for d in candidates],
        }

    verified = still_rejected = errors = 0
    results: List[Dict[str, Any]] = []

    for i, doc in enumerate(candidates):
        if i and delay_sec > 0:
            time.sleep(delay_sec)
        try:
            outcome = certifier.run(doc.id, force_regenerate=True)
        except TextGenerationError as e:
            if e.rate_limited:
                log.warning("rate limited, stopping batch after %d documents", i)
                break
            log.error("reverification of %s failed: %s", doc.id, e)
            errors += 1
            continue
        except FactguardError as e:
            log.error("reverification of %s failed: %s", doc.id, e)
            errors += 1
            continue

        if outcome.status == VerificationStatus.VERIFIED:
            verified += 1
        else:
            still_rejected += 1
        results.append({
            "id": doc.id,
            "title": _short(doc.title),
            "newStatus": outcome.status.value,
            "attempts": outcome.attempts,
        })

    log.info("batch complete: %d verified, %d still rejected, %d errors", verified, still_rejected, errors)
    return {
        "message": "Batch reverification complete",
        "processed": len(candidates),
        "verified": verified,
        "stillRejected": still_rejected,
        "errors": errors,
        "verificationRate": f"{round(verified / len(candidates) * 100)}%",
        "results": results,
    }
