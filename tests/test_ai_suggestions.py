import httpx
import pytest

from ai_suggestions import (
    GENERIC_SUGGESTIONS, AISuggestionClient, AISuggestionError, AISuggestionService,
    local_fallback, local_score, parse_suggestions,
)

URL = "http://ai.test/suggest"


def client_for(handler):
    return AISuggestionClient(url=URL, timeout=1, transport=httpx.MockTransport(handler))


def test_successful_response_is_used():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"suggestions": [f"Tip {n}" for n in range(7)], "score": 150})

    result = AISuggestionService(client_for(handler)).suggest("resume text", "job text")
    assert not result.used_fallback
    assert result.suggestions == ["Tip 0", "Tip 1", "Tip 2", "Tip 3", "Tip 4"]
    assert result.score == 100
    assert len(requests) == 1
    assert b"Job Description" in requests[0].content


def test_numbered_text_is_parsed():
    text = "1. Add metrics\n2) Use action verbs\n\n3 Tailor keywords"
    assert parse_suggestions({"text": text}) == ["Add metrics", "Use action verbs", "Tailor keywords"]


def test_payload_without_suggestions_is_an_error():
    with pytest.raises(AISuggestionError):
        parse_suggestions({"answer": "?"})


def test_server_error_falls_back():
    service = AISuggestionService(client_for(lambda request: httpx.Response(500)))
    result = service.suggest("resume", None, ["Check your resume for grammar and spelling errors."])
    assert result.used_fallback
    assert result.suggestions == ["Check your resume for grammar and spelling errors."]


def test_timeout_falls_back():
    def handler(request):
        raise httpx.ConnectTimeout("too slow", request=request)

    result = AISuggestionService(client_for(handler)).suggest("resume")
    assert result.used_fallback
    assert result.suggestions == GENERIC_SUGGESTIONS


def test_no_url_skips_the_network():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"suggestions": ["x"]})

    client = AISuggestionClient(url="", transport=httpx.MockTransport(handler))
    result = AISuggestionService(client).suggest("resume")
    assert result.used_fallback
    assert calls == []


def test_fallback_keeps_at_most_seven():
    result = local_fallback("resume", None, [f"s{n}" for n in range(10)])
    assert result.suggestions == [f"s{n}" for n in range(7)]


def test_local_score_components():
    text = "jane@x.com 555-123-4567\nSummary\nSkills\nEducation\nIncreased revenue by 20%"
    # 50 base + contact 10 + summary 10 + one metric 3 + skills 10 + education 5
    assert local_score(text) == 88


def test_local_score_job_overlap():
    # python and developer of python/developer/wanted: 2/3 of 15
    assert local_score("Python developer", "Python developer wanted") == 60


def test_local_score_is_capped():
    text = "a@b.com 555-123-4567 summary skills education\n" + "\n".join(["20%"] * 10)
    text += "\n" + " ".join(["kubernetes"] * 3)
    assert local_score(text, "kubernetes kubernetes") == 100


@pytest.mark.parametrize("raw_score", [b"Infinity", b"-Infinity", b"NaN", b"1e400", b'"high"', b"[90]"])
def test_unusable_score_falls_back(raw_score):
    def handler(request):
        body = b'{"suggestions": ["tip"], "score": ' + raw_score + b"}"
        return httpx.Response(200, content=body, headers={"content-type": "application/json"})

    client = client_for(handler)
    with pytest.raises(AISuggestionError):
        client.fetch("resume")

    result = AISuggestionService(client).suggest("resume", None, ["Use more action verbs."])
    assert result.used_fallback
    assert result.suggestions == ["Use more action verbs."]


def test_unexpected_client_failure_falls_back():
    class ExplodingClient(AISuggestionClient):
        def fetch(self, resume_text, job_description=None):
            raise OverflowError("boom")

    result = AISuggestionService(ExplodingClient(url=URL)).suggest("resume")
    assert result.used_fallback
    assert result.suggestions == GENERIC_SUGGESTIONS
