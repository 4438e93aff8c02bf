# resume_scorer.py
# Score aggregator: runs every analyzer over one resume and assembles the result.
#
# Collaborators are constructed once and injected, so tests can swap any of
# them. Each call is synchronous and keeps no state between resumes; the only
# side effects (cache store, analytics) are best-effort.
#
# Total score weights:
#   ats .15  keyword .15  grammar .10  formatting .10  section .10
#   action_verb .10  relevance .10  bullet_point .05  language_tone .05
#   length .05  industry .05

import logging
import re
import time
from typing import Callable, Dict, List, Optional, Tuple

from ai_suggestions import AISuggestionService
from analytics_queue import AnalyticsQueue
from ats_checker import check_ats_compatibility
from cache import AnalysisCache
from industry_analyzer import calculate_industry_score, detect_industry, get_industry_recommendations
from issue_analyzer import IssueAnalyzer
from keyword_processor import KeywordProcessor, job_keyword_stats
from models import (
    AISuggestion, ATSIssue, AnalysisResult, HeatmapCell, Issue, IndustrySuggestion, IssueSuggestion,
    Keyword, Section, ThresholdSuggestion,
)
from text_quality import TextQualityAnalyzer

logger = logging.getLogger(__name__)

# ==============================================
# CONSTANTS
# ==============================================

SCORE_WEIGHTS: Dict[str, float] = {
    "ats": 0.15,
    "keyword": 0.15,
    "grammar": 0.10,
    "formatting": 0.10,
    "section": 0.10,
    "action_verb": 0.10,
    "relevance": 0.10,
    "bullet_point": 0.05,
    "language_tone": 0.05,
    "length": 0.05,
    "industry": 0.05,
}

RESUME_SECTIONS = [
    "summary", "objective", "experience", "education", "skills", "projects",
    "certifications", "publications", "awards", "languages", "interests",
]
ESSENTIAL_SECTIONS = ["summary", "experience", "education", "skills"]
POINTS_PER_SECTION = 25

# Header text -> canonical section (longest headers first so aliases win)
SECTION_HEADERS: List[Tuple[str, str]] = [
    ("employment history", "experience"),
    ("work experience", "experience"),
    ("technical skills", "skills"),
    ("certifications", "certifications"),
    ("publications", "publications"),
    ("experience", "experience"),
    ("references", "references"),
    ("languages", "languages"),
    ("education", "education"),
    ("interests", "interests"),
    ("objective", "objective"),
    ("projects", "projects"),
    ("summary", "summary"),
    ("skills", "skills"),
    ("awards", "awards"),
]
MAX_HEADER_LENGTH = 30

SECTION_ACTION_VERBS = [
    "achieved", "improved", "trained", "maintained", "managed", "created", "resolved",
    "volunteered", "influenced", "increased", "decreased", "researched", "authored",
    "developed", "designed", "implemented", "launched", "spearheaded", "coordinated", "executed",
]

HEATMAP_KEY_SECTIONS = {
    "tech": {"skills", "projects"},
    "finance": {"experience", "education"},
    "healthcare": {"education", "certifications"},
}

NO_JOB_KEYWORD_SCORE = 70
ATS_ISSUE_PRIORITY = {"high": 75, "medium": 50, "low": 25}

UPPERCASE_HEADER = re.compile(r"^[A-Z][A-Z \t]+$", re.MULTILINE)
LINE_BULLET = re.compile(r"^\s*[•\-\*]", re.MULTILINE)
BLANK_GAP = re.compile(r"\n\s*\n")
ANY_BULLET = re.compile(r"[•\-\*]")
NUMERIC_TOKEN = re.compile(r"\d+[%$]?")
SENTENCE_BREAK = re.compile(r"[.!?]+")


# ==============================================
# SECTIONS
# ==============================================

def detect_sections(text: str) -> List[str]:
    lower = text.lower()
    return [s for s in RESUME_SECTIONS if s in lower]


def calculate_section_score(detected: List[str]) -> int:
    return POINTS_PER_SECTION * sum(1 for s in ESSENTIAL_SECTIONS if s in detected)


def _header_for(line: str) -> Optional[str]:
    if not line or len(line) >= MAX_HEADER_LENGTH:
        return None
    if not (line.upper() == line or line[0].isupper()):
        return None
    lowered = line.lower()
    for header, canonical in SECTION_HEADERS:
        if header in lowered:
            return canonical
    return None


def extract_sections(text: str) -> Dict[str, str]:
    """Split text on header lines; lines before the first header land in 'header'."""
    sections: Dict[str, List[str]] = {"header": []}
    current = "header"
    for raw in text.split("\n"):
        line = raw.strip()
        canonical = _header_for(line)
        if canonical:
            current = canonical
            sections.setdefault(current, [])
        else:
            sections[current].append(line)
    return {name: "\n".join(lines).strip() for name, lines in sections.items()}


def extract_section_content(text: str, section: str) -> str:
    lower = text.lower()
    start = lower.find(section)
    if start == -1:
        return ""
    newline = lower.find("\n", start)
    content_start = newline + 1 if newline != -1 else len(text)

    content_end = len(text)
    for other in RESUME_SECTIONS:
        if other == section:
            continue
        idx = lower.find(other, content_start)
        if idx != -1 and idx < content_end:
            content_end = idx
    return text[content_start:content_end].strip()


def section_quality_score(content: str) -> int:
    if not content:
        return 0

    word_count = len(content.split())
    bullets = len(ANY_BULLET.findall(content))
    lower = content.lower()
    verbs = sum(1 for v in SECTION_ACTION_VERBS if v in lower)
    sentences = [s for s in SENTENCE_BREAK.split(content) if s.strip()]

    score = 40
    if word_count > 50:
        score += 20
    elif word_count > 30:
        score += 15
    elif word_count > 15:
        score += 10

    if bullets > 3:
        score += 20
    elif bullets > 0:
        score += 15

    if re.search(r"\d", content):
        score += 15

    if verbs > 2:
        score += 15
    elif verbs > 0:
        score += 10

    if len(sentences) > 2 and bullets > 0:
        score += 5
    return min(score, 100)


def section_suggestions(section: str, content: str) -> str:
    if not content:
        return f"Add a {section} section to your resume."

    word_count = len(content.split())
    suggestions = []
    if section in ("experience", "projects"):
        if not ANY_BULLET.search(content):
            suggestions.append("Use bullet points to highlight achievements.")
        if not re.search(r"\d", content):
            suggestions.append("Add quantifiable achievements with numbers and percentages.")
        if word_count < 50:
            suggestions.append("Expand this section with more details about your achievements.")
    if section == "skills" and word_count < 20:
        suggestions.append("Add more relevant skills to showcase your expertise.")
    return " ".join(suggestions)


def section_quality_scores(text: str) -> Dict[str, int]:
    """Quality per canonical section; 'header' (the contact block) is not scored."""
    scores: Dict[str, int] = {}
    for name, content in extract_sections(text).items():
        if name == "header":
            continue
        scores[name] = max(scores.get(name, 0), section_quality_score(content))
    return scores


def build_heatmap(text: str, detected: List[str], industry: str) -> List[HeatmapCell]:
    key_sections = HEATMAP_KEY_SECTIONS.get(industry, set())
    return [
        HeatmapCell(
            name=section,
            score=section_quality_score(extract_section_content(text, section)),
            weight=2 if section in key_sections else 1,
        )
        for section in detected
    ]


# ==============================================
# SUB-SCORES
# ==============================================

def structure_score(text: str) -> int:
    score = 50
    score += min(len(UPPERCASE_HEADER.findall(text)) * 10, 30)
    if LINE_BULLET.search(text):
        score += 15
    if len(BLANK_GAP.findall(text)) > 2:
        score += 10
    return min(score, 100)


def bullet_point_score(text: str, action_verb_count: int) -> int:
    bullets = len(ANY_BULLET.findall(text))
    sentences = len(SENTENCE_BREAK.split(text))
    ratio = bullets / sentences if sentences else 0

    score = 40
    if ratio > 0.3:
        score += 30
    elif ratio > 0.2:
        score += 20
    elif ratio > 0.1:
        score += 10
    if action_verb_count > 5:
        score += 20
    if len(NUMERIC_TOKEN.findall(text)) > 3:
        score += 10
    return min(score, 100)


def length_score(text: str) -> int:
    words = len(text.split())
    if words < 200:
        return 50
    if words < 300:
        return 70
    if words <= 700:
        return 100
    if words <= 900:
        return 80
    return 60


def keyword_scores(keywords: List[Keyword], has_job_description: bool) -> Tuple[int, int]:
    """(keyword score, relevance score)"""
    matched, total = job_keyword_stats(keywords)
    if total == 0:
        return NO_JOB_KEYWORD_SCORE, 0
    pct = min(100, int(round(100 * matched / total)))
    return pct, pct if has_job_description else 0


def calculate_total_score(scores: Dict[str, int]) -> int:
    return int(round(sum(scores[name] * weight for name, weight in SCORE_WEIGHTS.items())))


def _bounded(value: float) -> int:
    return int(max(0, min(100, round(value))))


# ==============================================
# SUGGESTIONS & ISSUES
# ==============================================

ThresholdRule = Tuple[str, Callable[[Dict[str, int]], bool], str]

THRESHOLD_RULES: List[ThresholdRule] = [
    ("ats", lambda s: s["ats"] < 80,
     "Your resume may not be ATS-friendly. Avoid complex formatting, tables, and graphics."),
    ("keyword", lambda s: s["keyword"] < 70,
     "Include more keywords from the job description to improve your match rate."),
    ("grammar", lambda s: s["grammar"] < 80,
     "Check your resume for grammar and spelling errors."),
    ("formatting", lambda s: s["formatting"] < 80,
     "Improve your resume formatting for better readability and ATS compatibility."),
    ("section", lambda s: s["section"] < 100,
     "Add the following sections to your resume: {missing}."),
    ("action_verb", lambda s: s["action_verb"] < 70,
     "Use more action verbs to describe your achievements and responsibilities."),
    ("relevance", lambda s: 0 < s["relevance"] < 70,
     "Your resume is not highly relevant to the job description. Tailor it more specifically."),
    ("bullet_point", lambda s: s["bullet_point"] < 80,
     "Use more bullet points to highlight your achievements and make your resume more scannable."),
    ("language_tone", lambda s: s["language_tone"] < 80,
     "Maintain a consistent and professional tone throughout your resume."),
    ("length", lambda s: s["length"] < 80,
     "Adjust the length of your resume to be between 300-700 words for optimal readability."),
]


def threshold_suggestions(scores: Dict[str, int], detected: List[str]) -> List[ThresholdSuggestion]:
    missing = [s for s in ESSENTIAL_SECTIONS if s not in detected]
    suggestions = []
    for metric, triggered, message in THRESHOLD_RULES:
        if not triggered(scores):
            continue
        if metric == "section":
            if not missing:
                continue
            message = message.format(missing=", ".join(missing))
        suggestions.append(ThresholdSuggestion(metric=metric, message=message))
    return suggestions


def ats_issue_to_issue(ats_issue: ATSIssue) -> Issue:
    if ats_issue.impact > 15:
        severity = "high"
    elif ats_issue.impact > 8:
        severity = "medium"
    else:
        severity = "low"
    return Issue(
        id=f"ats_{ats_issue.type}",
        category="ats_compatibility",
        severity=severity,
        title=ats_issue.type.replace("_", " ").title(),
        description=ats_issue.description,
        impact=f"Deducts {ats_issue.impact} points from ATS compatibility.",
        solution=ats_issue.solution,
        priority=ATS_ISSUE_PRIORITY[severity],
    )


# ==============================================
# AGGREGATOR
# ==============================================

class ResumeScorer:
    def __init__(self,
                 keyword_processor: Optional[KeywordProcessor] = None,
                 text_analyzer: Optional[TextQualityAnalyzer] = None,
                 issue_analyzer: Optional[IssueAnalyzer] = None,
                 ats_checker=check_ats_compatibility,
                 cache: Optional[AnalysisCache] = None,
                 analytics: Optional[AnalyticsQueue] = None,
                 analytics_store=None,
                 ai_advisor: Optional[AISuggestionService] = None):
        self.keyword_processor = keyword_processor or KeywordProcessor()
        self.text_analyzer = text_analyzer or TextQualityAnalyzer()
        self.issue_analyzer = issue_analyzer or IssueAnalyzer()
        self.ats_checker = ats_checker
        self.cache = cache if cache is not None else AnalysisCache()
        self.analytics = analytics
        self.analytics_store = analytics_store
        self.ai_advisor = ai_advisor if ai_advisor is not None else AISuggestionService()

    # ----- best-effort side effects -----

    def _cached(self, resume_id: Optional[str]) -> Optional[AnalysisResult]:
        if not resume_id:
            return None
        try:
            return self.cache.get(resume_id)
        except Exception:
            logger.warning("Cache lookup failed for %s", resume_id, exc_info=True)
            return None

    def store(self, resume_id: Optional[str], result: AnalysisResult) -> None:
        """Best-effort cache put; also used for keys other than the content hash."""
        if not resume_id:
            return
        try:
            self.cache.put(resume_id, result)
        except Exception:
            logger.warning("Cache store failed for %s", resume_id, exc_info=True)

    def _record_analytics(self, keywords: List[Keyword], industry: str) -> None:
        if self.analytics is None or self.analytics_store is None or not keywords:
            return
        self.analytics.submit(self.analytics_store.record, keywords, industry)

    # ----- pipeline -----

    def analyze(self, resume_text: str, job_description: Optional[str] = None,
                file_type: str = "application/pdf", file_name: str = "resume.pdf",
                resume_id: Optional[str] = None) -> AnalysisResult:
        cached = self._cached(resume_id)
        if cached is not None:
            logger.debug("Cache hit for %s", resume_id)
            return cached

        started = time.perf_counter()
        text = resume_text or ""
        job_description = job_description or None

        industry = detect_industry(text)
        keywords = self.keyword_processor.process(text, job_description, industry)
        ats = self.ats_checker(text, file_type, file_name)
        quality = self.text_analyzer.analyze(text)
        formality = quality.language_metrics.formality_score

        detected = detect_sections(text)
        keyword_score, relevance_score = keyword_scores(keywords, job_description is not None)
        formatting_score = _bounded(0.5 * quality.readability_score
                                    + 0.3 * quality.complexity_score
                                    + 0.2 * structure_score(text))

        section_scores: Dict[str, float] = dict(section_quality_scores(text))
        section_scores["actionVerbs"] = quality.action_verb_score
        section_scores["formatting"] = formatting_score

        scores = {
            "ats": _bounded(ats.score),
            "keyword": _bounded(keyword_score),
            "grammar": _bounded(0.6 * formality + 0.4 * quality.readability_score),
            "formatting": formatting_score,
            "section": _bounded(calculate_section_score(detected)),
            "action_verb": _bounded(quality.action_verb_score),
            "relevance": _bounded(relevance_score),
            "bullet_point": _bounded(bullet_point_score(text, quality.action_verb_count)),
            "language_tone": _bounded(0.7 * quality.sentiment_score + 0.3 * formality),
            "length": length_score(text),
            "industry": _bounded(calculate_industry_score(industry, section_scores)),
        }
        total = calculate_total_score(scores)

        report = self.issue_analyzer.analyze(
            text, industry, job_description, keywords, section_scores, scores["industry"])

        issues = list(report.issues) + [ats_issue_to_issue(i) for i in ats.issues]
        issues.sort(key=lambda i: i.priority, reverse=True)

        thresholds = threshold_suggestions(scores, detected)
        suggestions = (
            thresholds
            + [IssueSuggestion(issue_id=i.id, severity=i.severity, message=i.solution) for i in report.issues]
            + [IndustrySuggestion(industry=industry, message=m) for m in get_industry_recommendations(industry)]
        )

        sections = [
            Section(
                name=name,
                content=content,
                score=section_quality_score(content),
                suggestions=section_suggestions(name, content),
            )
            for name, content in ((s, extract_section_content(text, s)) for s in detected)
        ]

        ai = self.ai_advisor.suggest(text, job_description, [s.message for s in thresholds])
        if not ai.used_fallback:
            suggestions += [AISuggestion(message=m) for m in ai.suggestions]

        result = AnalysisResult(
            ats_score=scores["ats"],
            keyword_score=scores["keyword"],
            grammar_score=scores["grammar"],
            formatting_score=scores["formatting"],
            section_score=scores["section"],
            action_verb_score=scores["action_verb"],
            relevance_score=scores["relevance"],
            bullet_point_score=scores["bullet_point"],
            language_tone_score=scores["language_tone"],
            length_score=scores["length"],
            industry_score=scores["industry"],
            total_score=total,
            industry=industry,
            keywords=keywords,
            sections=sections,
            issues=issues,
            suggestions=suggestions,
            section_heatmap=build_heatmap(text, detected, industry),
            ats_check=ats,
            report=report,
            ai_suggestions=ai.suggestions,
            ai_score=ai.score,
        )

        self._record_analytics(keywords, industry)
        self.store(resume_id, result)
        logger.debug("Analyzed resume %s in %.1f ms (total %d, industry %s)",
                     resume_id or "-", (time.perf_counter() - started) * 1000, total, industry)
        return result
