import logging
import os
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from factguard_core import config
from factguard_core.errors import FactguardError
from factguard_api.routers import jobs, verify

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
log = logging.getLogger(__name__)

app = FastAPI(title="Factguard Summary Verification API", version="0.1.0")

origins = os.getenv("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FactguardError)
async def factguard_error(request: Request, exc: FactguardError):
    if exc.http_status >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.http_status, content={"error": str(exc), "status": "error"})


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body") or "body"
    msg = f"Invalid request: {field}: {first.get('msg', 'malformed body')}"
    return JSONResponse(status_code=400, content={"error": msg, "status": "error"})


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    log.exception("%s %s crashed", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Unknown error", "status": "error"})


@app.get("/healthz")
def healthz():
    return {"ok": True}

app.include_router(verify.router)
app.include_router(jobs.router)
