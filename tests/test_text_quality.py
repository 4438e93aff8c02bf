import pytest

from text_quality import MAX_GRAMMAR_ISSUES, TextQualityAnalyzer, TextQualityResult


@pytest.fixture(scope="module")
def analyzer():
    return TextQualityAnalyzer()


def test_empty_text_gives_neutral_defaults(analyzer):
    result = analyzer.analyze("")
    assert result.sentiment_score == 50
    assert result.sentiment_label == "neutral"
    assert result.readability_score == 50
    assert result.complexity_score == 50
    assert result.action_verb_count == 0
    assert result.technical_skills_found == []
    assert result.grammar_issues == []
    assert result.key_phrases == []
    assert result.language_metrics.formality_score == 50


def test_none_is_treated_as_empty(analyzer):
    assert analyzer.analyze(None).sentiment_score == 50


def test_analyzer_failure_degrades_to_defaults(analyzer, monkeypatch):
    def boom(text):
        raise RuntimeError("tokenizer exploded")

    monkeypatch.setattr(analyzer, "tokenize", boom)
    assert analyzer.analyze("Some text here.") == TextQualityResult()


def test_positive_and_negative_sentiment(analyzer):
    positive = analyzer.analyze("Outstanding, successful, excellent leader. Awarded for exceptional results.")
    negative = analyzer.analyze("Failed project. Terrible errors, lost customers, poor and weak delivery.")
    assert positive.sentiment_label == "positive"
    assert negative.sentiment_label == "negative"
    assert positive.sentiment_score > 50 > negative.sentiment_score


def test_readability_formula(analyzer):
    # 4 short words in 1 sentence, none longer than 6 chars: 100 - 2*4 - 0
    assert analyzer.analyze("Led team to win.").readability_score == 92


def test_action_verb_density(analyzer):
    # 1 verb in 25 tokens is the 4% target
    text = "Managed " + " ".join(["alpha"] * 24) + "."
    result = analyzer.analyze(text)
    assert result.action_verb_count == 1
    assert result.action_verb_score == 100


def test_technical_skills_are_matched_on_boundaries(analyzer):
    result = analyzer.analyze("Python, SQL and Docker. Going to the gym.")
    assert {"python", "sql", "docker"} <= set(result.technical_skills_found)
    assert "go" not in result.technical_skills_found
    assert result.technical_skills_score == 5 * len(result.technical_skills_found)


def test_grammar_flags_passive_voice_and_weak_words(analyzer):
    result = analyzer.analyze("The report was reviewed by me. It was very really good.")
    types = [i.type for i in result.grammar_issues]
    assert "passive_voice" in types
    assert types.count("weak_word") == 2


def test_grammar_issues_are_capped(analyzer):
    result = analyzer.analyze(" ".join(["very"] * 30))
    assert len(result.grammar_issues) == MAX_GRAMMAR_ISSUES


def test_formality_score(analyzer):
    formal = analyzer.analyze("Professional expertise and achievement.")
    informal = analyzer.analyze("Lots of cool stuff and awesome things.")
    assert formal.language_metrics.formality_score == 80
    assert informal.language_metrics.formality_score == 0


def test_language_metrics_counts(analyzer):
    metrics = analyzer.analyze("One two three. Four five six.").language_metrics
    assert metrics.word_count == 6
    assert metrics.sentence_count == 2
    assert metrics.average_words_per_sentence == 3.0


def test_key_phrases_rank_by_frequency_and_length(analyzer):
    text = "Data pipeline design. Data pipeline design. Cloud migration."
    phrases = analyzer.analyze(text).key_phrases
    assert phrases[0].phrase == "data pipeline design"
    assert phrases[0].frequency == 2
    assert phrases[0].importance == 6


def test_scores_stay_in_range(analyzer, tech_resume, bare_resume):
    for text in (tech_resume, bare_resume, "!!!", "a " * 500):
        r = analyzer.analyze(text)
        for value in (r.sentiment_score, r.readability_score, r.complexity_score,
                      r.action_verb_score, r.technical_skills_score, r.language_metrics.formality_score):
            assert 0 <= value <= 100
