import pytest

from cache import AnalysisCache
from resume_scorer import ResumeScorer


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def result(tech_resume):
    return ResumeScorer(cache=AnalysisCache()).analyze(tech_resume, "Python AWS")


def test_miss_returns_none():
    assert AnalysisCache().get("nope") is None


def test_entry_lives_until_ttl(result):
    clock = FakeClock()
    cache = AnalysisCache(ttl_seconds=60, clock=clock)
    cache.put("r1", result)

    clock.now += 59
    assert cache.get("r1") == result

    clock.now += 1
    assert cache.get("r1") is None
    assert len(cache) == 0


def test_cached_copy_is_independent(result):
    cache = AnalysisCache()
    cache.put("r1", result)
    first = cache.get("r1")
    second = cache.get("r1")
    assert first == second
    assert first is not second


def test_delete_and_clear(result):
    cache = AnalysisCache()
    cache.put("a", result)
    cache.put("b", result)
    assert cache.delete("a")
    assert not cache.delete("a")
    cache.clear()
    assert cache.get("b") is None
