import pytest

from issue_analyzer import (
    DEFAULT_STRENGTH, STANDING_RECOMMENDATIONS, IssueAnalyzer, IssueRule, ResumeContext,
    calculate_overall_score, create_action_plan, run_pass,
)
from keyword_processor import KeywordProcessor
from models import Issue


def make_issue(issue_id, severity, category="experience", priority=50):
    return Issue(id=issue_id, category=category, severity=severity, title=issue_id,
                 description="", impact="", solution=f"fix {issue_id}", priority=priority)


@pytest.fixture(scope="module")
def analyzer():
    return IssueAnalyzer()


def ids(report):
    return [i.id for i in report.issues]


def test_missing_contact_details_give_three_issues(analyzer, bare_resume):
    report = analyzer.analyze(bare_resume, "general")
    contact = [i for i in report.issues if i.category == "contact_information"]
    assert [(i.id, i.priority) for i in contact] == [
        ("contact_no_email", 100),
        ("contact_no_phone", 80),
        ("contact_no_linkedin", 50),
    ]


def test_complete_contact_block_has_no_contact_issues(analyzer, tech_resume):
    report = analyzer.analyze(tech_resume, "tech")
    assert not [i for i in report.issues if i.category == "contact_information"]


def test_unprofessional_email(analyzer):
    report = analyzer.analyze("jdoe@yahoo.com (555) 123-4567 linkedin.com/in/jdoe", "general")
    assert "contact_unprofessional_email" in ids(report)
    assert "contact_no_email" not in ids(report)


def test_date_ranges_are_not_phone_numbers(analyzer):
    report = analyzer.analyze("Engineer 2019 - 2021, 2015 - 2019", "general")
    assert "contact_no_phone" in ids(report)


def test_missing_section_gates_the_rest_of_its_pass(analyzer, bare_resume):
    report = analyzer.analyze(bare_resume, "tech")
    experience = [i.id for i in report.issues if i.category == "experience"]
    skills = [i.id for i in report.issues if i.category == "skills"]
    assert experience == ["experience_missing"]
    assert skills == ["skills_missing"]


def test_short_summary(analyzer):
    text = "Summary\nBackend engineer.\n\nEducation\nBSc"
    assert "summary_too_short" in ids(analyzer.analyze(text, "general"))


def test_keyword_pass_needs_a_job_description(analyzer):
    resume = "Python developer. Experience with Django."
    job = "Python Terraform Kubernetes Ansible"
    keywords = KeywordProcessor().process(resume, job, "tech")

    with_job = analyzer.analyze(resume, "tech", job, keywords)
    missing = next(i for i in with_job.issues if i.id == "keywords_missing_important")
    assert missing.description.startswith("3 important keywords")
    assert "keywords_low_match_rate" in ids(with_job)

    without_job = analyzer.analyze(resume, "tech", None, keywords)
    assert not [i for i in without_job.issues if i.category == "keywords"]


def test_industry_requirements_for_tech(analyzer):
    report = analyzer.analyze("Software developer writing code.", "tech")
    requirement = next(i for i in report.issues if i.id == "industry_tech_requirements")
    assert requirement.title == "Missing Technical Portfolio"
    assert requirement.solution == "Add relevant tech elements: github, portfolio, projects"


def test_no_requirement_checklist_for_general(analyzer):
    report = analyzer.analyze("Some text", "general")
    assert not [i for i in report.issues if i.category == "industry_specific"]


def test_employment_gap():
    ctx = ResumeContext("Experience\nAcme 2018 - 2020\nBeta 2010 - 2012", "general")
    analyzer = IssueAnalyzer()
    assert "experience_employment_gaps" in [i.id for i in analyzer.find_issues(ctx)]


def test_length_issues(analyzer, make_words):
    short = analyzer.analyze(make_words(150), "general")
    long = analyzer.analyze(make_words(1200), "general")
    assert "length_too_short" in ids(short)
    assert "length_too_long" in ids(long)
    assert "150 words" in next(i for i in short.issues if i.id == "length_too_short").description


def test_issues_are_sorted_by_priority(analyzer, bare_resume):
    priorities = [i.priority for i in analyzer.analyze(bare_resume, "tech").issues]
    assert priorities == sorted(priorities, reverse=True)


def test_overall_score_formula():
    issues = [make_issue("a", "critical"), make_issue("b", "low")]
    # penalty 23 -> issue score 77; section average 75
    assert calculate_overall_score(issues, {"skills": 80, "experience": 70}) == 76


def test_overall_score_penalty_is_capped():
    issues = [make_issue(str(n), "critical") for n in range(8)]
    assert calculate_overall_score(issues, {"skills": 60}) == 30


def test_overall_score_is_deterministic():
    issues = [make_issue("a", "high"), make_issue("b", "medium"), make_issue("c", "low")]
    scores = {"skills": 82, "experience": 64, "education": 71}
    first = calculate_overall_score(issues, scores)
    assert all(calculate_overall_score(issues, scores) == first for _ in range(5))


def test_action_plan_tiers():
    issues = ([make_issue(f"c{n}", "critical") for n in range(1, 5)]
              + [make_issue(f"h{n}", "high") for n in range(1, 5)]
              + [make_issue(f"m{n}", "medium") for n in range(1, 6)])
    plan = create_action_plan(issues, ["i1", "i2", "i3"])

    assert plan.immediate == ["fix c1", "fix c2", "fix c3", "fix h1", "fix h2"]
    assert plan.short_term == ["fix h3", "fix h4", "fix m1", "fix m2", "fix m3"]
    assert plan.long_term == ["fix m4", "fix m5", "i3"] + STANDING_RECOMMENDATIONS


def test_action_plan_standing_items_always_present():
    plan = create_action_plan([], [])
    assert plan.immediate == []
    assert plan.long_term == STANDING_RECOMMENDATIONS


def test_default_strength(analyzer, bare_resume):
    report = analyzer.analyze(bare_resume, "general", section_scores={"skills": 50})
    assert report.strengths == [DEFAULT_STRENGTH]


def test_strengths_for_a_strong_resume(analyzer, tech_resume):
    report = analyzer.analyze(tech_resume, "tech", section_scores={"experience": 90, "skills": 70})
    assert "Uses quantifiable achievements with specific metrics and numbers" in report.strengths
    assert "Strong experience section with comprehensive content" in report.strengths


def test_quick_wins_skip_critical_and_other_categories(analyzer, bare_resume):
    report = analyzer.analyze(bare_resume, "general")
    formatting_titles = {i.title for i in report.issues if i.category == "formatting"}
    assert report.quick_wins
    assert len(report.quick_wins) <= 5
    assert all(win.split(":")[0] in formatting_titles for win in report.quick_wins)


def test_report_includes_industry_fit(analyzer, tech_resume):
    report = analyzer.analyze(tech_resume, "tech", industry_score=88)
    assert report.industry_fit is not None
    assert "88/100" in report.industry_fit.analysis


def test_run_pass_stops_after_a_gate():
    fired = []

    def check(name):
        def _check(ctx):
            fired.append(name)
            return {}
        return _check

    rules = [
        IssueRule("gate", "x", "high", 90, "Gate", "", "", "", check("gate"), gate=True),
        IssueRule("after", "x", "low", 10, "After", "", "", "", check("after")),
    ]
    issues = run_pass(rules, ResumeContext("text"))
    assert [i.id for i in issues] == ["gate"]
    assert fired == ["gate"]
