import pytest
from fastapi.testclient import TestClient

from ats_score_service import app, scorer

HEADERS = {"x-api-key": "test-key"}


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


def analyze(client, resume_text, job_description=None):
    response = client.post("/analyze/text", headers=HEADERS,
                           json={"resume_text": resume_text, "job_description": job_description})
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_api_key_is_required(client, tech_resume):
    assert client.post("/analyze/text", json={"resume_text": tech_resume}).status_code == 403
    assert client.get("/analyses/history", headers={"x-api-key": "wrong"}).status_code == 403


def test_analyze_text(client, tech_resume):
    body = analyze(client, tech_resume, "Python Kubernetes AWS")
    assert body["analysis_id"]
    assert body["industry"] == "tech"
    assert 0 <= body["total_score"] <= 100
    assert body["ai_suggestions"]
    assert {s["kind"] for s in body["suggestions"]} >= {"threshold", "industry"}


def test_empty_text_is_a_validation_error(client):
    response = client.post("/analyze/text", headers=HEADERS, json={"resume_text": ""})
    assert response.status_code == 422


def test_get_analysis_from_cache_then_database(client, tech_resume):
    body = analyze(client, tech_resume + "\nAwards\nHackathon winner", None)
    analysis_id = body["analysis_id"]

    cached = client.get(f"/analyses/{analysis_id}", headers=HEADERS).json()
    assert cached["cached"] is True
    assert cached["total_score"] == body["total_score"]

    scorer.cache.delete(analysis_id)
    stored = client.get(f"/analyses/{analysis_id}", headers=HEADERS).json()
    assert stored["cached"] is False
    assert stored["total_score"] == body["total_score"]
    assert stored["suggestions"] == body["suggestions"]


def test_delete(client, bare_resume):
    analysis_id = analyze(client, bare_resume)["analysis_id"]
    assert client.delete(f"/analyses/{analysis_id}", headers=HEADERS).json() == {"deleted": analysis_id}
    assert client.get(f"/analyses/{analysis_id}", headers=HEADERS).status_code == 404
    assert client.delete(f"/analyses/{analysis_id}", headers=HEADERS).status_code == 404


def test_history_filters(client, tech_resume):
    analyze(client, tech_resume + "\nInterests\nChess")
    history = client.get("/analyses/history", headers=HEADERS, params={"industry": "tech"}).json()
    assert history["total"] >= 1
    assert all(row["industry"] == "tech" for row in history["results"])

    high = client.get("/analyses/history", headers=HEADERS, params={"min_score": 100}).json()
    assert all(row["total_score"] >= 100 for row in high["results"])

    bad = client.get("/analyses/history", headers=HEADERS, params={"start_date": "yesterday"})
    assert bad.status_code == 400


def test_export_csv(client, tech_resume):
    analyze(client, tech_resume + "\nLanguages\nSpanish")
    response = client.get("/analyses/export", headers=HEADERS)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.splitlines()[0].startswith("Analysis ID,File,Industry,Total")


def test_upload_txt(client, tech_resume):
    response = client.post(
        "/analyze", headers=HEADERS,
        files={"file": ("jane.txt", tech_resume.encode("utf-8"), "text/plain")},
        data={"job_description": "Python developer"},
    )
    assert response.status_code == 200, response.text
    assert response.json()["industry"] == "tech"


def test_upload_unsupported_type(client):
    response = client.post("/analyze", headers=HEADERS,
                           files={"file": ("resume.pages", b"binary", "application/octet-stream")})
    assert response.status_code == 400
    assert "PDF, DOCX or TXT" in response.json()["detail"]


def test_ai_analysis_falls_back_locally(client, tech_resume):
    body = client.post("/ai-analysis", headers=HEADERS, json={"resume_text": tech_resume}).json()
    assert body["used_fallback"] is True
    assert body["suggestions"]
    assert 20 <= body["score"] <= 100


def test_trending_keywords(client, tech_resume):
    for n in range(3):
        analyze(client, tech_resume + f"\nCertifications\nCert {n}", "Python Docker")
    scorer.analytics.join()
    body = client.get("/keywords/trending", headers=HEADERS, params={"industry": "tech"}).json()
    assert body["industry"] == "tech"
    assert any(row["keyword"].lower() == "python" for row in body["keywords"])


def test_resubmitting_the_same_resume_reuses_the_stored_analysis(client, tech_resume):
    text = tech_resume + "\nPublications\nScaling queues"
    first = analyze(client, text, "Python")
    total = client.get("/analyses/history", headers=HEADERS).json()["total"]

    second = analyze(client, text, "Python")
    assert second["analysis_id"] == first["analysis_id"]
    assert client.get("/analyses/history", headers=HEADERS).json()["total"] == total


def test_cache_failure_does_not_fail_the_request(client, tech_resume, monkeypatch):
    def broken_put(key, result):
        raise RuntimeError("cache down")

    monkeypatch.setattr(scorer.cache, "put", broken_put)
    body = analyze(client, tech_resume + "\nReferences\nOn request")
    assert body["analysis_id"]
