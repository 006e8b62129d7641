import logging
from fastapi import APIRouter, Depends

from factguard_core.errors import InvalidRequest, RateLimited, TextGenerationError
from factguard_core.models import VerificationOutcome
from factguard_api.deps import get_certifier, get_text_generator
from factguard_api.schemas import (
    ErrorResponse,
    VerifyDocumentRequest,
    VerifySummaryRequest,
    VerifySummaryResponse,
)
from factguard_verify import MAX_ATTEMPTS, SummaryCertifier, generate_corrected_summary, verify_summary

log = logging.getLogger(__name__)

router = APIRouter(tags=["verify"])

ERRORS = {code: {"model": ErrorResponse} for code in (400, 404, 409, 429, 500)}


@router.post("/verify-document", response_model=VerificationOutcome, response_model_exclude_none=True,
             responses=ERRORS)
def verify_document(req: VerifyDocumentRequest, certifier: SummaryCertifier = Depends(get_certifier)):
    if not req.document_id:
        raise InvalidRequest("documentId is required")
    return certifier.run(req.document_id, force_regenerate=req.force_regenerate)


@router.post("/verify-summary", response_model=VerifySummaryResponse, response_model_exclude_none=True,
             responses=ERRORS)
def verify_summary_only(req: VerifySummaryRequest, llm=Depends(get_text_generator)):
    if not req.source_content or not req.summary:
        raise InvalidRequest("sourceContent and summary are required")
    try:
        verdict = verify_summary(llm, req.title, req.source_content, req.summary, req.attempt_number)
    except TextGenerationError as e:
        if e.rate_limited:
            raise RateLimited(str(e)) from e
        raise
    out = VerifySummaryResponse(**verdict.model_dump())

    # unparsable verdicts are pending and carry nothing to correct against
    if verdict.status == "rejected" and verdict.errors and req.attempt_number < MAX_ATTEMPTS:
        try:
            out.corrected_summary = generate_corrected_summary(
                llm, req.title, req.source_content, None, verdict.errors, verdict.fabricated_claims)
        except TextGenerationError as e:
            log.warning("correction for attempt %d failed: %s", req.attempt_number, e)
    return out
