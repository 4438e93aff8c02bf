import itertools
import random

import pytest

from keyword_processor import (
    KeywordProcessor, StaticImportanceLookup, calculate_importance, categorize_keyword,
    extract_keywords, extract_phrases, job_keyword_stats, normalize_keyword,
)


@pytest.mark.parametrize("raw", [
    "  Node.JS  ", "C++ / C#", "problem-solving!!", "Machine   Learning", "AWS", "", "---", "Ünïcode Wörds",
])
def test_normalize_is_idempotent(raw):
    once = normalize_keyword(raw)
    assert normalize_keyword(once) == once


def test_normalize_keeps_hyphens_and_collapses_space():
    assert normalize_keyword("  Problem-Solving,   Skills. ") == "problem-solving skills"


def test_extract_keywords_filters_stop_words_numbers_and_short_tokens():
    terms = dict(extract_keywords("The API and the 2024 go Python python PYTHON"))
    assert terms["python"] == 3
    assert "the" not in terms
    assert "2024" not in terms
    assert "go" not in terms


def test_phrases_need_two_occurrences():
    text = "Built data pipelines. Maintained data pipelines. Wrote unit tests."
    phrases = extract_phrases(text)
    assert phrases["data pipelines"] == 2
    assert "unit tests" not in phrases


def test_categorize_by_pattern_then_context():
    assert categorize_keyword("Python") == "technical"
    assert categorize_keyword("leadership") == "soft_skill"
    assert categorize_keyword("certified") == "certification"
    assert categorize_keyword("blender", "Skills: blender, inkscape") == "technical"
    assert categorize_keyword("firstaid", "Education and certification: firstaid") == "certification"
    assert categorize_keyword("woodworking", "Experience with woodworking") == "general"
    assert categorize_keyword("woodworking") == "general"


@pytest.mark.parametrize("keyword,count,expected", [
    ("api", 1, 1),
    ("api", 3, 2),
    ("api", 6, 3),
    ("kubernetes", 6, 4),
    ("kubernetes", 1, 2),
])
def test_base_importance(keyword, count, expected):
    assert calculate_importance(keyword, count) == expected


def test_lookup_raises_importance_but_never_lowers_it():
    assert calculate_importance("aws", 1, lookup_value=5) == 5
    assert calculate_importance("aws", 4, lookup_value=3) == 4
    assert calculate_importance("kubernetes", 6, lookup_value=1) == 4
    assert calculate_importance("aws", 9, lookup_value=5) == 5


def test_react_node_aws_all_match():
    keywords = KeywordProcessor().process(
        "Experienced React developer with Node and AWS", "React Node AWS", "tech")
    by_term = {k.normalized_text: k for k in keywords}
    for term in ("react", "node", "aws"):
        assert by_term[term].is_match
        assert by_term[term].is_from_job_description
        assert by_term[term].source == "resume"
    assert job_keyword_stats(keywords) == (3, 3)


def test_match_ignores_case_and_punctuation():
    keywords = KeywordProcessor().process("Deployed KUBERNETES, daily.", "kubernetes!", "tech")
    kube = [k for k in keywords if k.normalized_text == "kubernetes"]
    assert len(kube) == 1
    assert kube[0].is_match


def test_missing_job_terms_are_emitted_with_zero_count():
    keywords = KeywordProcessor().process("Python developer", "Python Terraform", "tech")
    terraform = next(k for k in keywords if k.normalized_text == "terraform")
    assert terraform.count == 0
    assert terraform.is_from_job_description
    assert not terraform.is_match
    assert terraform.source == "job_description"


def test_one_keyword_per_normalized_form(tech_resume):
    keywords = KeywordProcessor().process(tech_resume, "Python python PYTHON developer", "tech")
    normalized = [k.normalized_text for k in keywords]
    assert len(normalized) == len(set(normalized))


def test_resume_only_terms_are_not_job_keywords():
    keywords = KeywordProcessor().process("Python developer", None, "tech")
    assert keywords
    assert all(not k.is_from_job_description and not k.is_match for k in keywords)
    assert job_keyword_stats(keywords) == (0, 0)


def test_industry_lookup_is_batched_once():
    class CountingLookup(StaticImportanceLookup):
        calls = 0

        def lookup_many(self, terms, industry):
            CountingLookup.calls += 1
            return super().lookup_many(terms, industry)

    keywords = KeywordProcessor(CountingLookup()).process("Python python git", "Kubernetes", "tech")
    assert CountingLookup.calls == 1
    assert next(k for k in keywords if k.normalized_text == "python").importance == 5


def test_failing_lookup_falls_back_to_base_importance():
    class BrokenLookup:
        def lookup_many(self, terms, industry):
            raise RuntimeError("database down")

    keywords = KeywordProcessor(BrokenLookup()).process("Python developer", None, "tech")
    assert next(k for k in keywords if k.normalized_text == "python").importance == 1


def filler_words(n):
    return ["".join(letters) for letters in itertools.islice(itertools.product("bcdfgklmnprstvz", repeat=4), n)]


def test_rare_shared_term_matches_past_the_keyword_cap():
    resume = " ".join(filler_words(200)) + " terraform"
    keywords = KeywordProcessor().process(resume, "Terraform", "tech")
    terraform = [k for k in keywords if k.normalized_text == "terraform"]
    assert [(k.count, k.is_match, k.source) for k in terraform] == [(1, True, "resume")]
    assert job_keyword_stats(keywords) == (1, 1)


def test_resume_only_listing_is_still_capped():
    keywords = KeywordProcessor(max_keywords=50).process(" ".join(filler_words(200)), None, "general")
    assert len(keywords) == 50


@pytest.mark.parametrize("seed", range(20))
def test_terms_in_both_documents_always_match(seed):
    rng = random.Random(seed)
    vocabulary = filler_words(400) + ["Python", "Kubernetes", "SQL", "Docker", "leadership", "Node.js"]
    resume = " ".join(rng.choice(vocabulary) for _ in range(rng.randint(50, 600)))
    job = ", ".join(rng.choice(vocabulary) for _ in range(rng.randint(1, 40)))

    keywords = KeywordProcessor(max_keywords=rng.choice([10, 150])).process(resume, job, "tech")
    shared = ({normalize_keyword(t) for t, _ in extract_keywords(resume, max_keywords=None)}
              & {normalize_keyword(t) for t, _ in extract_keywords(job, max_keywords=None)})

    by_term = {k.normalized_text: k for k in keywords}
    assert len(by_term) == len(keywords)
    for term in shared:
        assert by_term[term].is_match
        assert by_term[term].count > 0
