# keyword_processor.py
# Keyword extraction, normalization, categorization and resume/job matching.
#
# - Unigrams plus repeated 2-3 word phrases
# - One Keyword per normalized form; resume/job duplicates are merged
# - Importance from frequency and length, raised by an industry lookup

import logging
import re
from collections import Counter
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from models import Keyword

logger = logging.getLogger(__name__)

# ==============================================
# VOCABULARY
# ==============================================

STOP_WORDS = {
    "and", "the", "for", "with", "that", "this", "from", "are", "was", "were",
    "been", "have", "has", "had", "will", "would", "could", "should", "can",
    "may", "might", "must", "shall", "does", "did", "not", "you", "your",
    "our", "their", "his", "her", "its", "they", "them", "than", "then",
}

TECHNICAL_PATTERNS = [
    re.compile(r"\b(java|python|javascript|typescript|react|angular|vue|node|sql|html|css)\b"),
    re.compile(r"\b(aws|azure|gcp|docker|kubernetes|api|rest|graphql|mongodb|postgresql)\b"),
    re.compile(r"\b(agile|scrum|devops|ci/cd|git|github|jenkins|terraform)\b"),
]

SOFT_SKILL_PATTERNS = [
    re.compile(r"\b(leadership|communication|teamwork|problem[\s-]solving|analytical)\b"),
    re.compile(r"\b(project[\s-]management|time[\s-]management|critical[\s-]thinking)\b"),
]

CERTIFICATION_PATTERNS = [
    re.compile(r"\b(aws|azure|google|microsoft|cisco|pmp|six[\s-]sigma|scrum[\s-]master)\b"),
    re.compile(r"\b(certified|certification|professional|associate|expert|specialist)\b"),
]

# (context cue, category); "experience" cues fall through to general
CONTEXT_CUES = [
    (("skill", "technical"), "technical"),
    (("education", "certification"), "certification"),
]

CONTEXT_WINDOW = 60
RESUME_MAX_KEYWORDS = 150

# Seeded industry importances (normalized keyword -> 1..5)
SEED_IMPORTANCE: Dict[str, Dict[str, int]] = {
    "tech": {
        "javascript": 5, "typescript": 5, "python": 5, "java": 5, "react": 5,
        "nodejs": 4, "angular": 4, "vuejs": 4, "docker": 4, "kubernetes": 4,
        "aws": 5, "azure": 4, "git": 5, "github": 4, "jenkins": 3,
        "postgresql": 4, "mongodb": 4, "mysql": 4, "redis": 3,
        "agile": 4, "scrum": 4, "devops": 4, "cicd": 4,
        "leadership": 4, "problem solving": 4, "team collaboration": 4, "communication": 5,
    },
    "finance": {
        "excel": 5, "financial modeling": 5, "risk management": 4, "portfolio management": 4,
        "bloomberg terminal": 4, "sql": 4, "python": 4, "r": 3, "cfa": 5, "frm": 4,
        "analytical thinking": 4, "attention to detail": 5,
    },
    "healthcare": {
        "patient care": 5, "medical records": 4, "hipaa": 5, "electronic health records": 4,
        "clinical research": 4, "healthcare compliance": 4, "empathy": 5,
        "communication": 5, "critical thinking": 4,
    },
}


# ==============================================
# IMPORTANCE LOOKUP
# ==============================================

class ImportanceLookup(Protocol):
    def lookup_many(self, terms: Iterable[str], industry: str) -> Dict[str, int]:
        ...


class StaticImportanceLookup:
    """In-memory industry importance table, seeded with the default keyword set."""

    def __init__(self, table: Optional[Dict[str, Dict[str, int]]] = None):
        self.table = table if table is not None else SEED_IMPORTANCE

    def lookup_many(self, terms: Iterable[str], industry: str) -> Dict[str, int]:
        known = self.table.get(industry, {})
        return {t: known[t] for t in terms if t in known}


# ==============================================
# HELPERS
# ==============================================

def normalize_keyword(keyword: str) -> str:
    """Lowercase, drop punctuation except hyphens, collapse whitespace."""
    text = keyword.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    return re.sub(r"\s+", " ", text).strip()


def _words(text: str, min_length: int) -> List[str]:
    cleaned = re.sub(r"[^\w\s-]", " ", text.lower())
    return [w for w in cleaned.split()
            if len(w) >= min_length and w not in STOP_WORDS and not w.isdigit()]


def extract_phrases(text: str, min_length: int = 3) -> Dict[str, int]:
    """2- and 3-word phrases per sentence, kept when they occur at least twice."""
    phrases: Counter = Counter()
    for sentence in re.split(r"[.!?]+", text):
        words = [w for w in re.sub(r"[^\w\s-]", " ", sentence.lower()).split()
                 if len(w) >= min_length and w not in STOP_WORDS]
        for i in range(len(words) - 1):
            phrase = f"{words[i]} {words[i + 1]}"
            if len(phrase) >= min_length * 2:
                phrases[phrase] += 1
        for i in range(len(words) - 2):
            phrase = f"{words[i]} {words[i + 1]} {words[i + 2]}"
            if len(phrase) >= min_length * 3:
                phrases[phrase] += 1
    return {p: c for p, c in phrases.items() if c >= 2}


def extract_keywords(text: str, min_length: int = 3, max_keywords: Optional[int] = 200) -> List[Tuple[str, int]]:
    """(term, count) pairs, most frequent first; max_keywords=None keeps all."""
    if not text:
        return []
    counts: Dict[str, int] = dict(Counter(_words(text, min_length)))
    counts.update(extract_phrases(text, min_length))
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return ranked[:max_keywords]


def keyword_context(text: str, term: str, window: int = CONTEXT_WINDOW) -> str:
    """Text surrounding the first occurrence of term."""
    idx = text.lower().find(term)
    if idx == -1:
        return ""
    return text[max(0, idx - window): idx + len(term) + window]


def categorize_keyword(keyword: str, context: str = "") -> str:
    lowered = keyword.lower()
    for patterns, category in ((TECHNICAL_PATTERNS, "technical"),
                               (SOFT_SKILL_PATTERNS, "soft_skill"),
                               (CERTIFICATION_PATTERNS, "certification")):
        if any(p.search(lowered) for p in patterns):
            return category

    context = context.lower()
    for cues, category in CONTEXT_CUES:
        if any(cue in context for cue in cues):
            return category
    return "general"


def base_importance(keyword: str, count: int) -> int:
    importance = 1
    if count > 5:
        importance += 2
    elif count > 2:
        importance += 1
    if len(keyword) > 8:
        importance += 1
    return min(5, importance)


def calculate_importance(keyword: str, count: int, lookup_value: Optional[int] = None) -> int:
    importance = base_importance(keyword, count)
    if lookup_value is not None:
        boosted = min(5, lookup_value + (1 if count > 3 else 0))
        importance = max(importance, boosted)
    return importance


# ==============================================
# PROCESSOR
# ==============================================

class KeywordProcessor:
    """
    Builds the merged resume/job keyword list for one analysis.
    The importance lookup is injected; it is queried once per analysis.
    """

    def __init__(self, importance_lookup: Optional[ImportanceLookup] = None,
                 min_length: int = 3, max_keywords: int = RESUME_MAX_KEYWORDS):
        self.importance_lookup = importance_lookup or StaticImportanceLookup()
        self.min_length = min_length
        self.max_keywords = max_keywords

    def _lookup(self, terms: List[str], industry: str) -> Dict[str, int]:
        try:
            return self.importance_lookup.lookup_many(terms, industry)
        except Exception:
            logger.warning("Importance lookup failed for industry %s", industry, exc_info=True)
            return {}

    def process(self, resume_text: str, job_description: Optional[str], industry: str) -> List[Keyword]:
        # Matching uses every term of both documents; only the resume-only
        # listing is capped at max_keywords.
        resume_index = _index(extract_keywords(resume_text or "", self.min_length, None))
        job_index = _index(extract_keywords(job_description or "", self.min_length, None))

        kept = list(resume_index)[:self.max_keywords]
        capped = set(kept)
        kept += [n for n in job_index if n in resume_index and n not in capped]
        lookup = self._lookup(sorted(set(kept) | set(job_index)), industry)

        merged: Dict[str, Keyword] = {}
        for normalized in kept:
            if normalized in merged:
                continue
            term, count = resume_index[normalized]
            in_job = normalized in job_index
            merged[normalized] = Keyword(
                text=term,
                normalized_text=normalized,
                count=count,
                is_from_job_description=in_job,
                is_match=in_job,
                category=categorize_keyword(term, keyword_context(resume_text, term)),
                importance=calculate_importance(term, count, lookup.get(normalized)),
                source="resume",
            )

        for normalized, (term, count) in job_index.items():
            if normalized in merged:
                continue
            merged[normalized] = Keyword(
                text=term,
                normalized_text=normalized,
                count=0,
                is_from_job_description=True,
                is_match=False,
                category=categorize_keyword(term, keyword_context(job_description or "", term)),
                importance=calculate_importance(term, count, lookup.get(normalized)),
                source="job_description",
            )

        return list(merged.values())


def _index(terms: List[Tuple[str, int]]) -> Dict[str, Tuple[str, int]]:
    """normalized form -> first (term, count), in rank order."""
    index: Dict[str, Tuple[str, int]] = {}
    for term, count in terms:
        normalized = normalize_keyword(term)
        if normalized:
            index.setdefault(normalized, (term, count))
    return index


def job_keyword_stats(keywords: List[Keyword]) -> Tuple[int, int]:
    """(matched, total) over keywords that came from the job description."""
    job = [k for k in keywords if k.is_from_job_description]
    return sum(1 for k in job if k.is_match), len(job)
