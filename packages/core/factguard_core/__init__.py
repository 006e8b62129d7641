from .errors import (
    ConcurrentUpdateError,
    ConfigurationError,
    DocumentNotFound,
    FactguardError,
    InvalidRequest,
    StorageError,
    TextGenerationError,
)
from .models import (
    Document,
    FeedbackEntry,
    MismatchDetail,
    Verdict,
    VerificationOutcome,
    VerificationStatus,
)

__all__ = [
    "ConcurrentUpdateError",
    "ConfigurationError",
    "DocumentNotFound",
    "FactguardError",
    "InvalidRequest",
    "StorageError",
    "TextGenerationError",
    "Document",
    "FeedbackEntry",
    "MismatchDetail",
    "Verdict",
    "VerificationOutcome",
    "VerificationStatus",
]
