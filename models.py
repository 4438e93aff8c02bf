"""
ResumeScore result models
Pydantic schemas shared by the scoring pipeline, persistence and the API
"""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


KeywordCategory = Literal["technical", "soft_skill", "certification", "general"]
KeywordSource = Literal["resume", "job_description"]
Severity = Literal["critical", "high", "medium", "low"]


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Keyword(FrozenModel):
    text: str
    normalized_text: str
    count: int = 0
    is_from_job_description: bool = False
    is_match: bool = False
    category: KeywordCategory = "general"
    importance: int = Field(1, ge=1, le=5)
    source: KeywordSource = "resume"


class Issue(FrozenModel):
    id: str
    category: str
    severity: Severity
    title: str
    description: str
    impact: str
    solution: str
    examples: List[str] = Field(default_factory=list)
    priority: int = Field(0, ge=0, le=100)


class Section(FrozenModel):
    name: str
    content: str
    score: int = Field(0, ge=0, le=100)
    suggestions: str = ""


class ATSIssue(FrozenModel):
    type: str
    description: str
    impact: int  # points deducted
    solution: str


class ATSCheckResult(FrozenModel):
    score: int = Field(..., ge=0, le=100)
    issues: List[ATSIssue] = Field(default_factory=list)
    passed_checks: List[str] = Field(default_factory=list)


class HeatmapCell(FrozenModel):
    name: str
    score: int
    weight: int


# ===== Suggestions (tagged by kind) =====

class ThresholdSuggestion(FrozenModel):
    kind: Literal["threshold"] = "threshold"
    metric: str
    message: str


class IssueSuggestion(FrozenModel):
    kind: Literal["issue"] = "issue"
    issue_id: str
    severity: Severity
    message: str


class IndustrySuggestion(FrozenModel):
    kind: Literal["industry"] = "industry"
    industry: str
    message: str


class AISuggestion(FrozenModel):
    kind: Literal["ai"] = "ai"
    message: str


Suggestion = Annotated[
    Union[ThresholdSuggestion, IssueSuggestion, IndustrySuggestion, AISuggestion],
    Field(discriminator="kind"),
]

SuggestionList = TypeAdapter(List[Suggestion])


# ===== Issue analyzer report =====

class IndustryFit(FrozenModel):
    analysis: str
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    key_words: List[str] = Field(default_factory=list)
    missing_elements: List[str] = Field(default_factory=list)


class ActionPlan(FrozenModel):
    immediate: List[str] = Field(default_factory=list)
    short_term: List[str] = Field(default_factory=list)
    long_term: List[str] = Field(default_factory=list)


class IssueReport(FrozenModel):
    issues: List[Issue] = Field(default_factory=list)
    overall_score: int = 0
    strengths: List[str] = Field(default_factory=list)
    quick_wins: List[str] = Field(default_factory=list)
    action_plan: ActionPlan = Field(default_factory=ActionPlan)
    industry_fit: Optional[IndustryFit] = None


class AIResult(FrozenModel):
    suggestions: List[str] = Field(default_factory=list)
    score: int = Field(50, ge=20, le=100)
    used_fallback: bool = False


class AnalysisResult(FrozenModel):
    """Everything one analysis produces; handed to persistence and the caller."""
    ats_score: int
    keyword_score: int
    grammar_score: int
    formatting_score: int
    section_score: int
    action_verb_score: int
    relevance_score: int
    bullet_point_score: int
    language_tone_score: int
    length_score: int
    industry_score: int
    total_score: int
    industry: str
    keywords: List[Keyword] = Field(default_factory=list)
    sections: List[Section] = Field(default_factory=list)
    issues: List[Issue] = Field(default_factory=list)
    suggestions: List[Suggestion] = Field(default_factory=list)
    section_heatmap: List[HeatmapCell] = Field(default_factory=list)
    ats_check: Optional[ATSCheckResult] = None
    report: Optional[IssueReport] = None
    ai_suggestions: Optional[List[str]] = None
    ai_score: Optional[int] = None

    def sub_scores(self) -> Dict[str, int]:
        return {
            "ats": self.ats_score,
            "keyword": self.keyword_score,
            "grammar": self.grammar_score,
            "formatting": self.formatting_score,
            "section": self.section_score,
            "action_verb": self.action_verb_score,
            "relevance": self.relevance_score,
            "bullet_point": self.bullet_point_score,
            "language_tone": self.language_tone_score,
            "length": self.length_score,
            "industry": self.industry_score,
        }
