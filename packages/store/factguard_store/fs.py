from __future__ import annotations
import fcntl
import json
import os
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional

from factguard_core.errors import DocumentNotFound
from factguard_core.models import Document, VerificationStatus

from .base import DocumentStore, decode_document, matches, merge_update
from .client import sha1


class FsDocumentStore(DocumentStore):
    """
    One JSON file per document, named by the SHA-1 of its id.
    Writes hold an exclusive flock on a sibling `.lock` file, so every store
    instance, thread and process sharing the root sees the same critical section.
    """

    def __init__(self, root: str):
        self.root = root
        os.makedirs(self.root, exist_ok=True)

    def _path(self, document_id: str) -> str:
        return os.path.join(self.root, f"{sha1(document_id)}.json")

    @contextmanager
    def _locked(self, document_id: str):
        lock_path = os.path.join(self.root, f"{sha1(document_id)}.lock")
        with open(lock_path, "a") as fh:
            fcntl.flock(fh, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(fh, fcntl.LOCK_UN)

    def _read(self, document_id: str) -> Document:
        path = self._path(document_id)
        if not os.path.exists(path):
            raise DocumentNotFound(document_id)
        with open(path, "r", encoding="utf-8") as f:
            return decode_document(f.read(), path)

    def _write(self, doc: Document) -> None:
        # atomic replace
        fd, tmp = tempfile.mkstemp(dir=self.root, suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(doc.to_wire(), f, ensure_ascii=False, indent=2)
        os.replace(tmp, self._path(doc.id))

    def get_document(self, document_id: str) -> Document:
        return self._read(document_id)

    def update_document(self, document_id: str, fields: Dict[str, Any], *,
                        expected_version: Optional[int] = None) -> Document:
        with self._locked(document_id):
            updated = merge_update(self._read(document_id), fields, expected_version)
            self._write(updated)
        return updated

    def put_document(self, doc: Document) -> Document:
        with self._locked(doc.id):
            self._write(doc)
        return doc

    def list_documents(self, statuses: Optional[Iterable[VerificationStatus]] = None,
                       limit: Optional[int] = None) -> List[Document]:
        statuses = list(statuses) if statuses is not None else None
        out: List[Document] = []
        for name in sorted(os.listdir(self.root)):
            if not name.endswith(".json"):
                continue
            path = os.path.join(self.root, name)
            with open(path, "r", encoding="utf-8") as f:
                doc = decode_document(f.read(), path)
            if matches(doc, statuses):
                out.append(doc)
                if limit is not None and len(out) >= limit:
                    break
        return out
