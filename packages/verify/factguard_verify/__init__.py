from .batch import reverify_batch
from .correct import generate_corrected_summary
from .orchestrator import MAX_ATTEMPTS, SummaryCertifier
from .summarize import generate_summary
from .verifier import parse_verdict, verify_summary

__all__ = [
    "MAX_ATTEMPTS",
    "SummaryCertifier",
    "generate_corrected_summary",
    "generate_summary",
    "parse_verdict",
    "reverify_batch",
    "verify_summary",
]
