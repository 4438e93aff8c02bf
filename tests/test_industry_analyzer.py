import pytest

from industry_analyzer import (
    INDUSTRY_CRITERIA, calculate_industry_score, detect_industry, get_detailed_industry_analysis,
    get_industry_recommendations, industry_match_counts,
)


def test_detects_tech(tech_resume):
    assert detect_industry(tech_resume) == "tech"


def test_detects_finance():
    text = "Financial analyst in investment banking. Built portfolio models, audit and tax forecasts."
    assert detect_industry(text) == "finance"


def test_no_matches_is_general():
    assert detect_industry("I enjoy hiking and woodworking on weekends.") == "general"
    assert detect_industry("") == "general"


def test_whole_word_case_insensitive():
    counts = industry_match_counts("PYTHON python pythonic")
    assert counts["tech"] == 2


def test_tie_goes_to_first_industry_in_table():
    # one tech keyword, one finance keyword
    assert detect_industry("software finance") == "tech"
    assert detect_industry("finance software") == "tech"


def test_detection_is_pure(tech_resume):
    assert {detect_industry(tech_resume) for _ in range(5)} == {"tech"}


@pytest.mark.parametrize("industry", sorted(INDUSTRY_CRITERIA))
def test_weight_rows_sum_to_one(industry):
    assert sum(INDUSTRY_CRITERIA[industry].values()) == pytest.approx(1.0)


def test_industry_score_with_perfect_sections():
    scores = {k: 100 for k in
              ("skills", "projects", "experience", "education", "certifications", "actionVerbs", "formatting")}
    for industry in INDUSTRY_CRITERIA:
        assert calculate_industry_score(industry, scores) == 100


def test_industry_score_ignores_missing_sections():
    assert calculate_industry_score("tech", {"skills": 80}) == 20
    assert calculate_industry_score("tech", {}) == 0


def test_unknown_industry_uses_general_weights():
    scores = {"experience": 100}
    assert calculate_industry_score("astronomy", scores) == calculate_industry_score("general", scores)


def test_recommendations_fall_back_to_general():
    assert get_industry_recommendations("astronomy") == get_industry_recommendations("general")
    assert len(get_industry_recommendations("tech")) == 5


def test_detailed_analysis_reports_missing_elements():
    fit = get_detailed_industry_analysis("tech", 62, "Wrote software. Developer.", {"skills": 40})
    assert "62/100" in fit.analysis
    assert "Version control experience (Git, GitHub, etc.)" in fit.missing_elements
    assert "Quantifiable achievements with specific numbers and percentages" in fit.missing_elements
    assert any("technical skills" in i for i in fit.improvements)


def test_detailed_analysis_defaults_when_nothing_stands_out():
    fit = get_detailed_industry_analysis("general", 75, "", {"actionVerbs": 75, "formatting": 80})
    assert fit.strengths == ["Resume demonstrates basic professional structure and content organization"]
    assert fit.improvements == ["Focus on adding more quantifiable achievements and industry-specific terminology"]
