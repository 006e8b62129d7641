from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from factguard_core.errors import ConcurrentUpdateError, StorageError
from factguard_core.models import Document, VerificationStatus, utcnow

# Fields this service may change; everything else belongs to ingestion.
WRITABLE_FIELDS = frozenset({
    "summary",
    "verification_status",
    "attempt_count",
    "feedback_history",
})


class DocumentStore(ABC):
    """
    Read/write access to persisted documents.

    `update_document` is a read-compare-write: when `expected_version` is given
    and the stored version differs, nothing is written and ConcurrentUpdateError
    is raised. Every successful write bumps `version` and stamps `updated_at`.
    """

    @abstractmethod
    def get_document(self, document_id: str) -> Document:
        ...

    @abstractmethod
    def update_document(self, document_id: str, fields: Dict[str, Any], *,
                        expected_version: Optional[int] = None) -> Document:
        ...

    @abstractmethod
    def put_document(self, doc: Document) -> Document:
        ...

    @abstractmethod
    def list_documents(self, statuses: Optional[Iterable[VerificationStatus]] = None,
                       limit: Optional[int] = None) -> List[Document]:
        ...


def merge_update(current: Document, fields: Dict[str, Any],
                 expected_version: Optional[int]) -> Document:
    unknown = set(fields) - WRITABLE_FIELDS
    if unknown:
        raise ValueError(f"Not writable: {sorted(unknown)}")
    if expected_version is not None and current.version != expected_version:
        raise ConcurrentUpdateError(current.id, expected_version, current.version)

    data = current.model_dump()
    data.update(fields)
    data["version"] = current.version + 1
    data["updated_at"] = utcnow()
    return Document.model_validate(data)


def decode_document(raw: str, where: str) -> Document:
    try:
        return Document.model_validate_json(raw)
    except ValidationError as e:
        raise StorageError(f"Corrupt document record at {where}: {e}") from e


def matches(doc: Document, statuses: Optional[Iterable[VerificationStatus]]) -> bool:
    if statuses is None:
        return True
    return doc.verification_status in set(statuses)
