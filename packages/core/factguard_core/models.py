from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Model(BaseModel):
    # snake_case in Python, camelCase on the wire and in storage
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class VerificationStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
    MANUAL_REVIEW = "manual_review"


FeedbackStatus = Literal["verified", "rejected", "pending"]


class MismatchDetail(_Model):
    type: str
    claim_in_summary: str
    source_evidence: Optional[str] = None
    explanation: str = ""


class FeedbackEntry(_Model):
    """Audit record of one verification attempt."""

    attempt: int = Field(ge=1)
    timestamp: datetime
    status: FeedbackStatus
    errors: List[str] = Field(default_factory=list)
    mismatch_details: Optional[List[MismatchDetail]] = None
    claims_checked: int = Field(default=0, ge=0)
    claims_verified: int = Field(default=0, ge=0)
    claims_rejected: int = Field(default=0, ge=0)


class Verdict(_Model):
    is_valid: bool
    status: FeedbackStatus
    errors: List[str] = Field(default_factory=list)
    mismatch_details: Optional[List[MismatchDetail]] = None
    claims_checked: int = Field(default=0, ge=0)
    claims_verified: int = Field(default=0, ge=0)
    claims_rejected: int = Field(default=0, ge=0)
    fabricated_claims: List[str] = Field(default_factory=list)

    def to_feedback(self, attempt: int, timestamp: Optional[datetime] = None) -> FeedbackEntry:
        if self.is_valid:
            status = "verified"
        elif self.status == "pending":
            status = "pending"
        else:
            status = "rejected"
        return FeedbackEntry(
            attempt=attempt,
            timestamp=timestamp or utcnow(),
            status=status,
            errors=[] if self.is_valid else list(self.errors),
            mismatch_details=self.mismatch_details,
            claims_checked=self.claims_checked,
            claims_verified=self.claims_verified,
            claims_rejected=self.claims_rejected,
        )


class Document(_Model):
    """The persisted article record this service reads and writes."""

    id: str = Field(min_length=1)
    title: str = ""
    source_content: str = ""
    category: Optional[str] = None
    summary: Optional[str] = None
    verification_status: VerificationStatus = VerificationStatus.PENDING
    attempt_count: int = Field(default=0, ge=0)
    feedback_history: List[FeedbackEntry] = Field(default_factory=list)
    version: int = Field(default=0, ge=0)
    updated_at: Optional[datetime] = None


class VerificationOutcome(_Model):
    document_id: str
    status: VerificationStatus
    attempts: int
    summary: Optional[str] = None
    feedback_history: List[FeedbackEntry] = Field(default_factory=list)
    last_verdict: Optional[Verdict] = None
    message: Optional[str] = None
