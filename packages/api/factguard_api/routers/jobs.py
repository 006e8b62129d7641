from celery.result import AsyncResult
from fastapi import APIRouter

from factguard_core import config
from factguard_core.errors import InvalidRequest
from factguard_api.schemas import (
    BatchReverifyRequest,
    JobStatusResponse,
    JobSubmissionResponse,
    VerifyDocumentRequest,
)
from factguard_tasks.celery_app import app as celery_app
from factguard_tasks.tasks import batch_reverify_task, verify_document_task

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("/verify-document", response_model=JobSubmissionResponse)
def enqueue_verify_document(req: VerifyDocumentRequest):
    config.require_llm_api_key()
    if not req.document_id:
        raise InvalidRequest("documentId is required")
    job = verify_document_task.delay(req.document_id, req.force_regenerate)
    return JobSubmissionResponse(job_id=job.id)


@router.post("/batch-reverify", response_model=JobSubmissionResponse)
def enqueue_batch_reverify(req: BatchReverifyRequest):
    config.require_llm_api_key()
    job = batch_reverify_task.delay(req.batch_size, req.dry_run)
    return JobSubmissionResponse(job_id=job.id)


@router.get("/{job_id}", response_model=JobStatusResponse)
def get_status(job_id: str):
    ar = AsyncResult(job_id, app=celery_app)
    state = ar.state
    meta = ar.info if isinstance(ar.info, dict) else {}
    detail = meta.get("step")
    if state == "FAILURE":
        detail = str(ar.info)
    result = ar.result if state == "SUCCESS" else None
    return JobStatusResponse(job_id=job_id, state=state, detail=detail, result=result)
