"""
Certification loop: generate -> (verify -> correct)* until verified or out of attempts.

The loop is an explicit state machine over the stored document (status enum,
attempt counter, append-only feedback history). State is written back after
every verification and every correction, each write guarded by the version
last seen, so a run that dies half way can be resumed by invoking it again and
a concurrent run on the same document fails instead of interleaving.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from factguard_core import config
from factguard_core.models import (
    Document,
    FeedbackEntry,
    Verdict,
    VerificationOutcome,
    VerificationStatus,
)

from .correct import generate_corrected_summary
from .summarize import generate_summary
from .verifier import verify_summary

log = logging.getLogger(__name__)

MAX_ATTEMPTS = config.MAX_ATTEMPTS


@dataclass
class RunState:
    """In-memory mirror of the mutable document fields for one run."""

    summary: Optional[str]
    status: VerificationStatus
    attempts: int
    history: List[FeedbackEntry] = field(default_factory=list)
    version: int = 0
    last_verdict: Optional[Verdict] = None

    @classmethod
    def from_document(cls, doc: Document) -> "RunState":
        return cls(
            summary=doc.summary,
            status=doc.verification_status,
            attempts=doc.attempt_count,
            history=list(doc.feedback_history),
            version=doc.version,
        )

    def fields(self) -> dict:
        return {
            "summary": self.summary,
            "verification_status": self.status,
            "attempt_count": self.attempts,
            "feedback_history": self.history,
        }


class SummaryCertifier:
    def __init__(self, store, llm, *, max_attempts: int = MAX_ATTEMPTS):
        self.store = store
        self.llm = llm
        self.max_attempts = max_attempts

    def _persist(self, document_id: str, state: RunState) -> None:
        doc = self.store.update_document(document_id, state.fields(), expected_version=state.version)
        state.version = doc.version

    def _outcome(self, document_id: str, state: RunState, message: Optional[str] = None) -> VerificationOutcome:
        return VerificationOutcome(
            document_id=document_id,
            status=state.status,
            attempts=state.attempts,
            summary=state.summary,
            feedback_history=state.history,
            last_verdict=state.last_verdict,
            message=message,
        )

    def run(self, document_id: str, *, force_regenerate: bool = False) -> VerificationOutcome:
        doc = self.store.get_document(document_id)
        state = RunState.from_document(doc)

        if state.status == VerificationStatus.VERIFIED and not force_regenerate:
            return self._outcome(document_id, state, message="Document already verified")

        if (state.attempts >= self.max_attempts
                and state.status == VerificationStatus.MANUAL_REVIEW
                and not force_regenerate):
            return self._outcome(document_id, state,
                                 message="Document requires manual review - max attempts exceeded")

        if not state.summary or force_regenerate:
            log.info("generating initial summary for document %s", document_id)
            state.summary = generate_summary(self.llm, doc.title, doc.source_content, doc.category)
            state.attempts = 0
            state.history = []
            state.status = VerificationStatus.PENDING
            self._persist(document_id, state)
        elif state.status != VerificationStatus.PENDING:
            # resuming a stored rejected/manual_review run that still has attempts left
            state.status = VerificationStatus.PENDING

        while state.attempts < self.max_attempts:
            state.attempts += 1
            log.info("verification attempt %d/%d for document %s",
                     state.attempts, self.max_attempts, document_id)

            verdict = verify_summary(self.llm, doc.title, doc.source_content, state.summary, state.attempts)
            state.last_verdict = verdict
            entry = verdict.to_feedback(state.attempts)
            state.history.append(entry)

            if verdict.is_valid:
                state.status = VerificationStatus.VERIFIED
            elif state.attempts >= self.max_attempts:
                state.status = VerificationStatus.MANUAL_REVIEW
            else:
                state.status = VerificationStatus.PENDING
            self._persist(document_id, state)

            if state.status == VerificationStatus.VERIFIED:
                log.info("document %s VERIFIED on attempt %d", document_id, state.attempts)
                break
            if state.status == VerificationStatus.MANUAL_REVIEW:
                log.warning("document %s needs MANUAL_REVIEW after %d attempts", document_id, state.attempts)
                break

            log.info("document %s rejected (%d errors), generating correction", document_id, len(entry.errors))
            state.summary = generate_corrected_summary(
                self.llm, doc.title, doc.source_content, doc.category,
                entry.errors, verdict.fabricated_claims,
            )
            self._persist(document_id, state)

        if state.status not in (VerificationStatus.VERIFIED, VerificationStatus.MANUAL_REVIEW):
            # entered with the attempt budget already spent and no valid verdict on record
            state.status = VerificationStatus.MANUAL_REVIEW

        self._persist(document_id, state)
        return self._outcome(document_id, state)
