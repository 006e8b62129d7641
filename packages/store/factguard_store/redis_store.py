from __future__ import annotations
import json
from typing import Any, Dict, Iterable, List, Optional

import redis

from factguard_core.errors import ConcurrentUpdateError, DocumentNotFound
from factguard_core.models import Document, VerificationStatus

from .base import DocumentStore, decode_document, matches, merge_update
from .client import key_document


class RedisDocumentStore(DocumentStore):
    """
    Documents as JSON strings under `doc:<id>`.
    The version check runs inside WATCH/MULTI, so it holds across processes:
    if another writer touches the key between our read and our write, EXEC
    aborts and the update is reported as a conflict.
    """

    def __init__(self, r: "redis.Redis"):
        self.r = r

    def get_document(self, document_id: str) -> Document:
        key = key_document(document_id)
        raw = self.r.get(key)
        if raw is None:
            raise DocumentNotFound(document_id)
        return decode_document(raw, key)

    def update_document(self, document_id: str, fields: Dict[str, Any], *,
                        expected_version: Optional[int] = None) -> Document:
        key = key_document(document_id)
        with self.r.pipeline() as pipe:
            try:
                pipe.watch(key)
                raw = pipe.get(key)
                if raw is None:
                    raise DocumentNotFound(document_id)
                current = decode_document(raw, key)
                updated = merge_update(current, fields, expected_version)
                pipe.multi()
                pipe.set(key, json.dumps(updated.to_wire(), ensure_ascii=False))
                pipe.execute()
            except redis.WatchError as e:
                raise ConcurrentUpdateError(document_id, current.version) from e
        return updated

    def put_document(self, doc: Document) -> Document:
        self.r.set(key_document(doc.id), json.dumps(doc.to_wire(), ensure_ascii=False))
        return doc

    def list_documents(self, statuses: Optional[Iterable[VerificationStatus]] = None,
                       limit: Optional[int] = None) -> List[Document]:
        statuses = list(statuses) if statuses is not None else None
        out: List[Document] = []
        for key in self.r.scan_iter(match=key_document("*"), count=200):
            raw = self.r.get(key)
            if raw is None:
                continue
            doc = decode_document(raw, key)
            if matches(doc, statuses):
                out.append(doc)
                if limit is not None and len(out) >= limit:
                    break
        return out
