from typing import Optional


class FactguardError(Exception):
    """Base class; `http_status` is what the API boundary answers with."""

    http_status = 500


class InvalidRequest(FactguardError):
    http_status = 400


class DocumentNotFound(FactguardError):
    http_status = 404

    def __init__(self, document_id: str):
        super().__init__(f"Document not found: {document_id}")
        self.document_id = document_id


class ConcurrentUpdateError(FactguardError):
    http_status = 409

    def __init__(self, document_id: str, expected: int, found: Optional[int] = None):
        msg = f"Document {document_id} was modified concurrently (expected version {expected}"
        msg += f", found {found})" if found is not None else ")"
        super().__init__(msg)
        self.document_id = document_id
        self.expected = expected
        self.found = found


class ConfigurationError(FactguardError):
    pass


class StorageError(FactguardError):
    pass


class TextGenerationError(FactguardError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429


class RateLimited(FactguardError):
    http_status = 429
