# ai_suggestions.py
# Optional AI suggestion collaborator.
#
# AISuggestionClient talks to an external suggestion endpoint over httpx with
# a bounded timeout. AISuggestionService wraps it: any failure (no URL, timeout,
# bad payload) is logged and replaced by a deterministic local fallback.

import logging
import os
import re
from typing import Any, Dict, List, Optional

import httpx

from models import AIResult

logger = logging.getLogger(__name__)

AI_SUGGESTIONS_URL = os.getenv("AI_SUGGESTIONS_URL", "")
AI_SUGGESTIONS_TIMEOUT = float(os.getenv("AI_SUGGESTIONS_TIMEOUT", "10"))

MAX_AI_SUGGESTIONS = 5
MAX_FALLBACK_SUGGESTIONS = 7
MIN_AI_SCORE, MAX_AI_SCORE = 20, 100

PROMPT = (
    "You are an AI resume reviewer. Analyze the following resume and return 5 specific "
    "improvement suggestions to make it more ATS-friendly, impactful, and tailored to the "
    "job description.\n\nResume:\n{resume}\n\n{job}\nReturn the suggestions in numbered list format."
)

GENERIC_SUGGESTIONS = [
    "Consider adding more quantifiable achievements with specific numbers and percentages",
    "Ensure your resume includes relevant keywords from the job description",
    "Use strong action verbs to begin each bullet point in your experience section",
    "Add a professional summary that highlights your key qualifications",
    "Review formatting to ensure ATS compatibility with standard fonts and clear section headers",
]

LIST_PREFIX = re.compile(r"^\d+[).]?\s*")
CONTACT_PHONE = re.compile(r"\d{3}[-.\s]?\d{3}[-.\s]?\d{4}")
QUANTIFIED = re.compile(r"\d+%|\$\d+|\d+\+|increased.*\d+|reduced.*\d+|improved.*\d+", re.IGNORECASE)


class AISuggestionError(RuntimeError):
    pass


# ==============================================
# LOCAL SCORE
# ==============================================

def local_score(resume_text: str, job_description: Optional[str] = None) -> int:
    text = resume_text or ""
    lower = text.lower()
    score = 50

    if "@" in text and CONTACT_PHONE.search(text):
        score += 10
    if "summary" in lower or "objective" in lower:
        score += 10

    # QUANTIFIED is greedy per line, so count per line
    matches = sum(len(QUANTIFIED.findall(line)) for line in text.split("\n"))
    score += min(matches * 3, 15)

    if "skill" in lower or "technical" in lower:
        score += 10
    if "education" in lower or "degree" in lower:
        score += 5

    if job_description:
        important = [w for w in job_description.lower().split() if len(w) > 4]
        if important:
            matching = [w for w in important if w in lower]
            score += round(len(matching) / len(important) * 15)

    return max(MIN_AI_SCORE, min(MAX_AI_SCORE, score))


def local_fallback(resume_text: str, job_description: Optional[str] = None,
                   threshold_suggestions: Optional[List[str]] = None) -> AIResult:
    suggestions = list(threshold_suggestions or GENERIC_SUGGESTIONS)[:MAX_FALLBACK_SUGGESTIONS]
    return AIResult(
        suggestions=suggestions,
        score=local_score(resume_text, job_description),
        used_fallback=True,
    )


# ==============================================
# CLIENT
# ==============================================

def parse_suggestions(payload: Dict[str, Any]) -> List[str]:
    """Accepts {"suggestions": [...]} or a numbered list under "text"."""
    if isinstance(payload.get("suggestions"), list):
        lines = [str(s) for s in payload["suggestions"]]
    elif isinstance(payload.get("text"), str):
        lines = payload["text"].split("\n")
    else:
        raise AISuggestionError("response has no suggestions")
    cleaned = [LIST_PREFIX.sub("", line.strip()) for line in lines]
    return [line for line in cleaned if line][:MAX_AI_SUGGESTIONS]


class AISuggestionClient:
    def __init__(self, url: str = AI_SUGGESTIONS_URL, timeout: float = AI_SUGGESTIONS_TIMEOUT,
                 transport: Optional[httpx.BaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def fetch(self, resume_text: str, job_description: Optional[str] = None) -> AIResult:
        if not self.url:
            raise AISuggestionError("AI_SUGGESTIONS_URL is not configured")

        body = {
            "prompt": PROMPT.format(
                resume=resume_text,
                job=f"Job Description:\n{job_description}\n" if job_description else "",
            ),
            "resume_text": resume_text,
            "job_description": job_description,
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.url, json=body)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise AISuggestionError(f"AI suggestion request failed: {e}") from e

        if not isinstance(payload, dict):
            raise AISuggestionError("unexpected response shape")
        suggestions = parse_suggestions(payload)
        if not suggestions:
            raise AISuggestionError("empty suggestion list")

        raw_score = payload.get("score")
        if raw_score is None:
            score = local_score(resume_text, job_description)
        else:
            try:
                score = int(raw_score)
            except (TypeError, ValueError, OverflowError) as e:
                raise AISuggestionError(f"unusable score {raw_score!r}") from e
        return AIResult(
            suggestions=suggestions,
            score=max(MIN_AI_SCORE, min(MAX_AI_SCORE, score)),
            used_fallback=False,
        )


class AISuggestionService:
    """Never raises: the client is tried once, then the local fallback is used."""

    def __init__(self, client: Optional[AISuggestionClient] = None):
        self.client = client or AISuggestionClient()

    def suggest(self, resume_text: str, job_description: Optional[str] = None,
                threshold_suggestions: Optional[List[str]] = None) -> AIResult:
        if not self.client.url:
            logger.debug("No AI suggestion endpoint configured, using local fallback")
            return local_fallback(resume_text, job_description, threshold_suggestions)
        try:
            return self.client.fetch(resume_text, job_description)
        except Exception:
            logger.warning("AI suggestions unavailable, using local fallback", exc_info=True)
            return local_fallback(resume_text, job_description, threshold_suggestions)
