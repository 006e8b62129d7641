from typing import Any, Literal, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from factguard_core.models import Verdict


class _Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VerifyDocumentRequest(_Schema):
    # optional here so a missing id is answered with 400, not a validation 422
    document_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("documentId", "document_id", "articleId"))
    force_regenerate: bool = False


class VerifySummaryRequest(_Schema):
    title: str = ""
    source_content: Optional[str] = None
    summary: Optional[str] = None
    attempt_number: int = Field(default=1, ge=1)


class VerifySummaryResponse(Verdict):
    corrected_summary: Optional[str] = None


class BatchReverifyRequest(_Schema):
    batch_size: int = Field(default=20, ge=1, le=200)
    dry_run: bool = False


class ErrorResponse(_Schema):
    error: str
    status: Literal["error"] = "error"


class JobSubmissionResponse(_Schema):
    job_id: str


class JobStatusResponse(_Schema):
    job_id: str
    state: Literal["PENDING", "STARTED", "PROGRESS", "SUCCESS", "FAILURE", "RETRY", "REVOKED"]
    detail: Optional[str] = None
    result: Optional[Any] = None
