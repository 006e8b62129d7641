import json

import pytest

from factguard_core.models import Document
from factguard_store import FsDocumentStore

SOURCE = (
    "Warsaw city council approved a budget of 15 million zloty for the renovation of the "
    "Poniatowski Bridge on 12 March 2024. Mayor Rafal Trzaskowski said works will start in June. "
    "The budget is 20% higher than in 2023."
)

VALID = json.dumps({
    "is_valid": True,
    "status": "verified",
    "mismatch_details": [],
    "claimsChecked": 4,
    "claimsVerified": 4,
    "claimsRejected": 0,
    "fabricatedClaims": [],
    "errors": [],
})


def rejected(claim="Works will end in 2025.", kind="HALLUCINATION"):
    return json.dumps({
        "is_valid": False,
        "status": "rejected",
        "mismatch_details": [{
            "type": kind,
            "claim_in_summary": claim,
            "source_evidence": None,
            "explanation": "not in the source",
        }],
        "claimsChecked": 4,
        "claimsVerified": 3,
        "claimsRejected": 1,
    })


class ScriptedLLM:
    """
    Stand-in for TextGenerator. Replies are scripted per prompt kind and consumed
    in order; an Exception instance is raised, a callable is called with the prompt.
    """

    def __init__(self, summaries=(), verdicts=(), corrections=()):
        self.script = {
            "summary": list(summaries),
            "verify": list(verdicts),
            "correct": list(corrections),
        }
        self.calls = []

    @staticmethod
    def kind(prompt):
        if "CURRENT_SUMMARY TO AUDIT" in prompt:
            return "verify"
        if "correction mode" in prompt:
            return "correct"
        return "summary"

    def count(self, kind):
        return sum(1 for k, _ in self.calls if k == kind)

    def generate(self, prompt, *, max_tokens, temperature=0.0):
        kind = self.kind(prompt)
        self.calls.append((kind, prompt))
        if not self.script[kind]:
            raise AssertionError(f"unexpected {kind} call")
        reply = self.script[kind].pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply


class RecordingStore(FsDocumentStore):
    """FsDocumentStore that keeps a snapshot of every successful write."""

    def __init__(self, root):
        super().__init__(root)
        self.writes = []

    def update_document(self, document_id, fields, *, expected_version=None):
        doc = super().update_document(document_id, fields, expected_version=expected_version)
        self.writes.append(doc)
        return doc


@pytest.fixture
def store(tmp_path):
    return RecordingStore(str(tmp_path / "docs"))


@pytest.fixture
def make_doc(store):
    def _make(doc_id="doc-1", **fields):
        data = {"id": doc_id, "title": "Bridge renovation budget approved",
                "source_content": SOURCE, "category": "local"}
        data.update(fields)
        return store.put_document(Document.model_validate(data))
    return _make
