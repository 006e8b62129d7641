import pytest
from fastapi.testclient import TestClient

from factguard_api import deps
from factguard_api.app import app
from factguard_core import config
from factguard_core.errors import TextGenerationError

from conftest import VALID, ScriptedLLM, rejected


@pytest.fixture
def client(store):
    app.dependency_overrides[deps.get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def use_llm():
    def _use(llm):
        app.dependency_overrides[deps.get_text_generator] = lambda: llm
        return llm
    return _use


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": True}


def test_missing_document_id_is_400(client, use_llm):
    use_llm(ScriptedLLM())
    resp = client.post("/verify-document", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "documentId is required", "status": "error"}


def test_unknown_document_is_404(client, use_llm):
    use_llm(ScriptedLLM())
    resp = client.post("/verify-document", json={"documentId": "ghost"})
    assert resp.status_code == 404
    assert resp.json()["status"] == "error"


def test_missing_credential_is_500_and_touches_nothing(client, store, make_doc, monkeypatch):
    make_doc()
    monkeypatch.setattr(config, "LLM_API_KEY", None)

    resp = client.post("/verify-document", json={"documentId": "doc-1"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "LLM_API_KEY not configured", "status": "error"}
    assert store.get_document("doc-1").version == 0


def test_full_run_response_contract(client, use_llm, make_doc):
    make_doc()
    use_llm(ScriptedLLM(summaries=["S0"], verdicts=[rejected(), VALID], corrections=["S1"]))

    resp = client.post("/verify-document", json={"documentId": "doc-1"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["documentId"] == "doc-1"
    assert body["status"] == "verified"
    assert body["attempts"] == 2
    assert body["summary"] == "S1"
    assert [e["status"] for e in body["feedbackHistory"]] == ["rejected", "verified"]
    assert body["feedbackHistory"][0]["mismatchDetails"][0]["claimInSummary"] == "Works will end in 2025."
    assert body["lastVerdict"]["isValid"] is True


def test_short_circuit_and_legacy_article_id(client, use_llm, make_doc):
    make_doc(summary="done", verification_status="verified", attempt_count=1)
    llm = use_llm(ScriptedLLM())

    resp = client.post("/verify-document", json={"articleId": "doc-1"})

    assert resp.status_code == 200
    assert resp.json()["message"] == "Document already verified"
    assert resp.json()["summary"] == "done"
    assert llm.calls == []


def test_force_regenerate_flag(client, use_llm, make_doc):
    make_doc(summary="done", verification_status="verified", attempt_count=1)
    use_llm(ScriptedLLM(summaries=["fresh"], verdicts=[VALID]))

    resp = client.post("/verify-document", json={"documentId": "doc-1", "forceRegenerate": True})

    assert resp.json()["summary"] == "fresh"
    assert resp.json()["attempts"] == 1


def test_generation_failure_is_500(client, use_llm, make_doc):
    make_doc()
    use_llm(ScriptedLLM(summaries=[TextGenerationError("Failed to generate summary: 503", status_code=503)]))

    resp = client.post("/verify-document", json={"documentId": "doc-1"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate summary: 503", "status": "error"}


def test_verify_summary_endpoint(client, use_llm):
    use_llm(ScriptedLLM(verdicts=[rejected("Works will end in 2025.")], corrections=["Works start in June."]))

    resp = client.post("/verify-summary", json={
        "title": "Bridge", "sourceContent": "Works start in June.", "summary": "Works will end in 2025.",
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["isValid"] is False
    assert body["fabricatedClaims"] == ["Works will end in 2025."]


def test_verify_summary_requires_content(client, use_llm):
    use_llm(ScriptedLLM())
    resp = client.post("/verify-summary", json={"title": "Bridge", "summary": "x"})
    assert resp.status_code == 400


def test_verify_summary_returns_correction_while_attempts_remain(client, use_llm):
    llm = use_llm(ScriptedLLM(verdicts=[rejected("Works will end in 2025.")], corrections=["Works start in June."]))

    resp = client.post("/verify-summary", json={
        "title": "Bridge", "sourceContent": "Works start in June.", "summary": "Works will end in 2025.",
        "attemptNumber": 2,
    })

    assert resp.status_code == 200
    assert resp.json()["correctedSummary"] == "Works start in June."
    correction = [p for k, p in llm.calls if k == "correct"][0]
    assert "1. Works will end in 2025." in correction


def test_verify_summary_on_last_attempt_has_no_correction(client, use_llm):
    llm = use_llm(ScriptedLLM(verdicts=[rejected()]))

    resp = client.post("/verify-summary", json={
        "title": "Bridge", "sourceContent": "Works start in June.", "summary": "Works will end in 2025.",
        "attemptNumber": 3,
    })

    assert resp.status_code == 200
    assert resp.json()["isValid"] is False
    assert "correctedSummary" not in resp.json()
    assert llm.count("correct") == 0


def test_verify_summary_valid_or_unparsable_has_no_correction(client, use_llm):
    llm = use_llm(ScriptedLLM(verdicts=[VALID, "not json"]))
    payload = {"title": "Bridge", "sourceContent": "Works start in June.", "summary": "Works start in June."}

    assert "correctedSummary" not in client.post("/verify-summary", json=payload).json()
    pending = client.post("/verify-summary", json=payload).json()
    assert pending["status"] == "pending"
    assert "correctedSummary" not in pending
    assert llm.count("correct") == 0


def test_verify_summary_correction_failure_still_returns_verdict(client, use_llm):
    use_llm(ScriptedLLM(verdicts=[rejected()],
                        corrections=[TextGenerationError("Failed to generate corrected summary: 500", 500)]))

    resp = client.post("/verify-summary", json={
        "title": "Bridge", "sourceContent": "Works start in June.", "summary": "Works will end in 2025.",
    })

    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"
    assert "correctedSummary" not in resp.json()


def test_verify_summary_rate_limit_is_429(client, use_llm):
    use_llm(ScriptedLLM(verdicts=[TextGenerationError("Rate limit exceeded", status_code=429)]))

    resp = client.post("/verify-summary", json={"title": "Bridge", "sourceContent": "x", "summary": "y"})

    assert resp.status_code == 429
    assert resp.json() == {"error": "Rate limit exceeded", "status": "error"}


def test_verify_summary_upstream_failure_is_500(client, use_llm):
    use_llm(ScriptedLLM(verdicts=[TextGenerationError("Verification failed: 502", status_code=502)]))

    resp = client.post("/verify-summary", json={"title": "Bridge", "sourceContent": "x", "summary": "y"})

    assert resp.status_code == 500


def test_missing_body_is_400(client, use_llm):
    use_llm(ScriptedLLM())
    resp = client.post("/verify-document")
    assert resp.status_code == 400
    assert resp.json()["status"] == "error"
    assert resp.json()["error"].startswith("Invalid request")


def test_non_string_document_id_is_400(client, use_llm):
    llm = use_llm(ScriptedLLM())
    resp = client.post("/verify-document", json={"documentId": 123})
    assert resp.status_code == 400
    assert resp.json()["status"] == "error"
    assert llm.calls == []
