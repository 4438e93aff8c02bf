# text_quality.py
# Deterministic text-quality signals for resume prose:
# sentiment, readability, complexity, action verbs, technical skills,
# grammar heuristics, language metrics and key phrases.
#
# Every metric falls back to a neutral value instead of raising.

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from nltk.stem import PorterStemmer
from nltk.tokenize import RegexpTokenizer

logger = logging.getLogger(__name__)

# ==============================================
# LEXICONS
# ==============================================

ACTION_VERBS = {
    "achieved", "analyzed", "built", "created", "designed", "developed", "executed",
    "implemented", "improved", "increased", "led", "managed", "optimized", "organized",
    "performed", "planned", "produced", "reduced", "solved", "streamlined", "supervised",
    "delivered", "collaborated", "initiated", "maintained", "established", "enhanced",
    "facilitated", "generated", "accelerated", "administered", "coordinated", "conducted",
}

TECHNICAL_SKILLS: Dict[str, List[str]] = {
    "programming": [
        "javascript", "python", "java", "typescript", "react", "node.js", "angular", "vue",
        "php", "ruby", "go", "rust", "swift", "kotlin", "scala", "c++", "c#", "html", "css",
    ],
    "databases": [
        "sql", "postgresql", "mysql", "mongodb", "redis", "elasticsearch", "sqlite",
        "oracle", "cassandra", "dynamodb", "firestore",
    ],
    "cloud": [
        "aws", "azure", "gcp", "docker", "kubernetes", "terraform", "ansible", "jenkins",
        "ci/cd", "microservices", "serverless",
    ],
    "tools": [
        "git", "jira", "confluence", "slack", "figma", "adobe", "photoshop", "illustrator",
        "sketch", "postman", "tableau", "power bi",
    ],
}

WEAK_WORDS = ["very", "really", "quite", "somewhat", "rather"]
FORMAL_WORDS = {"achievement", "accomplishment", "professional", "experience", "expertise", "proficient"}
INFORMAL_WORDS = {"stuff", "things", "lots", "great", "awesome", "cool"}

# AFINN-style polarity values in [-5, 5]
POLARITY_LEXICON: Dict[str, int] = {
    "accomplish": 2, "accomplished": 2, "achieve": 2, "achieved": 2, "achievement": 2,
    "active": 1, "advance": 1, "advanced": 1, "advantage": 2, "award": 3, "awarded": 3,
    "benefit": 2, "best": 3, "better": 2, "boost": 1, "brilliant": 4, "capable": 1,
    "celebrate": 3, "clear": 1, "collaborate": 1, "commitment": 2, "confident": 2,
    "creative": 2, "dedicated": 2, "dependable": 2, "effective": 2, "efficient": 2,
    "encourage": 2, "energetic": 2, "enhance": 2, "enjoy": 2, "enthusiastic": 3,
    "excellence": 3, "excellent": 3, "exceptional": 4, "expert": 2, "fantastic": 4,
    "favorable": 2, "good": 3, "grow": 1, "growth": 2, "honored": 2, "ideal": 2,
    "impressive": 3, "improve": 2, "improved": 2, "improvement": 2, "innovative": 2,
    "inspire": 2, "inspired": 2, "leader": 1, "leading": 2, "motivated": 1,
    "outstanding": 5, "passion": 1, "passionate": 2, "positive": 2, "praised": 3,
    "productive": 2, "proficient": 2, "progress": 2, "promote": 1, "promoted": 1,
    "proud": 2, "recognized": 2, "recommend": 2, "reliable": 2, "resolve": 2,
    "resolved": 2, "reward": 2, "robust": 2, "skilled": 2, "smart": 1, "solid": 2,
    "solution": 1, "strength": 2, "strong": 2, "success": 2, "successful": 3,
    "successfully": 3, "superb": 5, "support": 2, "talented": 2, "thrive": 2,
    "top": 2, "trust": 1, "valuable": 2, "win": 4, "won": 3, "wonderful": 4,
    "abandon": -2, "angry": -3, "bad": -3, "broken": -1, "careless": -2, "complain": -2,
    "conflict": -2, "confused": -2, "crisis": -3, "critical": -2, "damage": -3,
    "decline": -1, "declined": -1, "defect": -3, "deficit": -2, "delay": -1,
    "difficult": -1, "disappoint": -2, "disappointed": -2, "dismissed": -2,
    "error": -2, "fail": -2, "failed": -2, "failure": -2, "fault": -2, "fired": -2,
    "frustrated": -2, "hate": -3, "lack": -2, "lacking": -2, "lazy": -1, "lose": -3,
    "loss": -3, "lost": -3, "mistake": -2, "negative": -2, "neglect": -2, "poor": -2,
    "problem": -2, "problems": -2, "reject": -1, "rejected": -1, "risk": -2,
    "struggle": -2, "struggled": -2, "terminated": -2, "terrible": -3, "unable": -2,
    "unfortunately": -2, "weak": -2, "weakness": -2, "worse": -3, "worst": -3,
}

NEUTRAL_SCORE = 50
MAX_GRAMMAR_ISSUES = 10
MAX_KEY_PHRASES = 20
ACTION_VERB_TARGET_DENSITY = 0.04

PASSIVE_VOICE = re.compile(r"\b(?:am|is|are|was|were|be|been|being)\s+\w+(?:ed|en)\b", re.IGNORECASE)
SENTENCE_SPLIT = re.compile(r"[.!?]+")

# lightweight tagger for noun-phrase chunking; deterministic
ADJECTIVE_SUFFIXES = ("ive", "al", "ful", "ous", "able", "ible", "ic", "less", "ary")
FUNCTION_WORDS = {
    "a", "an", "the", "and", "or", "but", "of", "to", "in", "on", "at", "by", "for", "with",
    "from", "as", "into", "over", "under", "about", "is", "are", "was", "were", "be",
    "been", "being", "have", "has", "had", "i", "me", "my", "we", "our", "you", "your",
    "he", "she", "it", "its", "they", "their", "this", "that", "these", "those", "which",
    "who", "will", "would", "can", "could", "should", "may", "might", "not", "no", "so",
    "than", "then", "also", "very", "really", "quite", "somewhat", "rather",
}


@dataclass
class GrammarIssue:
    type: str
    text: str
    suggestion: str
    position: int


@dataclass
class KeyPhrase:
    phrase: str
    frequency: int
    importance: int


@dataclass
class LanguageMetrics:
    word_count: int = 0
    sentence_count: int = 0
    average_words_per_sentence: float = 0.0
    unique_word_ratio: float = 0.0
    formality_score: int = NEUTRAL_SCORE


@dataclass
class TextQualityResult:
    """All text-quality signals for one document"""
    sentiment_score: int = NEUTRAL_SCORE
    sentiment_label: str = "neutral"
    readability_score: int = NEUTRAL_SCORE
    complexity_score: int = NEUTRAL_SCORE
    action_verb_count: int = 0
    action_verb_score: int = 0
    technical_skills_found: List[str] = field(default_factory=list)
    technical_skills_score: int = 0
    grammar_issues: List[GrammarIssue] = field(default_factory=list)
    language_metrics: LanguageMetrics = field(default_factory=LanguageMetrics)
    key_phrases: List[KeyPhrase] = field(default_factory=list)


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def split_sentences(text: str) -> List[str]:
    return [s for s in SENTENCE_SPLIT.split(text) if s.strip()]


class TextQualityAnalyzer:
    """
    Lexicon and heuristic text analysis.
    Stateless after construction; safe to share between concurrent analyses.
    """

    def __init__(self):
        self.tokenizer = RegexpTokenizer(r"[A-Za-z0-9_]+")
        self.stemmer = PorterStemmer()
        self.polarity = {self.stemmer.stem(w): v for w, v in POLARITY_LEXICON.items()}
        self.skill_patterns = {
            skill: re.compile(r"(?<![\w+#.])" + re.escape(skill) + r"(?![\w+#])")
            for skills in TECHNICAL_SKILLS.values() for skill in skills
        }

    def tokenize(self, text: str) -> List[str]:
        return [t.lower() for t in self.tokenizer.tokenize(text)]

    def analyze(self, text: str) -> TextQualityResult:
        try:
            return self._analyze(text or "")
        except Exception:
            logger.warning("Text quality analysis failed; using neutral defaults", exc_info=True)
            return TextQualityResult()

    def _analyze(self, text: str) -> TextQualityResult:
        tokens = self.tokenize(text)
        clean_tokens = [t for t in tokens if len(t) >= 3 and t.isalpha()]
        sentences = split_sentences(text)

        score, label = self.sentiment(clean_tokens)
        verb_count, verb_score = self.action_verbs(tokens)
        skills, skills_score = self.technical_skills(text)

        return TextQualityResult(
            sentiment_score=score,
            sentiment_label=label,
            readability_score=self.readability(tokens, sentences),
            complexity_score=self.complexity(tokens),
            action_verb_count=verb_count,
            action_verb_score=verb_score,
            technical_skills_found=skills,
            technical_skills_score=skills_score,
            grammar_issues=self.grammar(text),
            language_metrics=self.language_metrics(tokens, sentences),
            key_phrases=self.key_phrases(text),
        )

    # ----- individual signals -----

    def sentiment(self, tokens: List[str]) -> Tuple[int, str]:
        if not tokens:
            return NEUTRAL_SCORE, "neutral"
        raw = sum(self.polarity.get(self.stemmer.stem(t), 0) for t in tokens) / len(tokens)
        score = int(round(clamp((raw + 1) * 50)))
        if raw > 0.1:
            label = "positive"
        elif raw < -0.1:
            label = "negative"
        else:
            label = "neutral"
        return score, label

    def readability(self, tokens: List[str], sentences: List[str]) -> int:
        if not tokens or not sentences:
            return NEUTRAL_SCORE
        avg_words = len(tokens) / len(sentences)
        complex_ratio = sum(1 for t in tokens if len(t) > 6) / len(tokens)
        return int(round(clamp(100 - avg_words * 2 - complex_ratio * 30)))

    def complexity(self, tokens: List[str]) -> int:
        if not tokens:
            return NEUTRAL_SCORE
        diversity = len(set(tokens)) / len(tokens)
        avg_length = sum(len(t) for t in tokens) / len(tokens)
        return int(round(min(100, diversity * 80 + avg_length * 5)))

    def action_verbs(self, tokens: List[str]) -> Tuple[int, int]:
        if not tokens:
            return 0, 0
        count = sum(1 for t in tokens if t in ACTION_VERBS)
        density = count / len(tokens)
        return count, int(round(min(100, density / ACTION_VERB_TARGET_DENSITY * 100)))

    def technical_skills(self, text: str) -> Tuple[List[str], int]:
        lowered = text.lower()
        found = [skill for skill, pattern in self.skill_patterns.items() if pattern.search(lowered)]
        return found, min(100, len(found) * 5)

    def grammar(self, text: str) -> List[GrammarIssue]:
        issues = [
            GrammarIssue("passive_voice", m.group(0),
                         "Consider using active voice for stronger impact", m.start())
            for m in PASSIVE_VOICE.finditer(text)
        ]
        for word in WEAK_WORDS:
            for m in re.finditer(r"\b" + word + r"\b", text, re.IGNORECASE):
                issues.append(GrammarIssue(
                    "weak_word", m.group(0),
                    f'Consider removing or replacing "{word}" with a stronger word', m.start()))
        return issues[:MAX_GRAMMAR_ISSUES]

    def language_metrics(self, tokens: List[str], sentences: List[str]) -> LanguageMetrics:
        if not tokens or not sentences:
            return LanguageMetrics(word_count=len(tokens), sentence_count=len(sentences))
        formal = sum(1 for t in tokens if t in FORMAL_WORDS)
        informal = sum(1 for t in tokens if t in INFORMAL_WORDS)
        return LanguageMetrics(
            word_count=len(tokens),
            sentence_count=len(sentences),
            average_words_per_sentence=round(len(tokens) / len(sentences), 1),
            unique_word_ratio=round(len(set(tokens)) / len(tokens), 2),
            formality_score=int(round(clamp(50 + (formal - informal) * 10))),
        )

    # ----- key phrases -----

    def _tag(self, word: str) -> str:
        if word in FUNCTION_WORDS or word.isdigit():
            return "X"
        if word in ACTION_VERBS or word.endswith("ing") or word.endswith("ed"):
            return "VB"
        if word.endswith("ly"):
            return "RB"
        if word.endswith(ADJECTIVE_SUFFIXES):
            return "JJ"
        return "NN"

    def key_phrases(self, text: str) -> List[KeyPhrase]:
        counts: Counter = Counter()
        for chunk in re.split(r"[.!?,;:\n•]+", text):
            words = self.tokenize(chunk)
            tags = [self._tag(w) for w in words]
            i = 0
            while i < len(words):
                start = i
                if tags[i] == "JJ" and i + 1 < len(words) and tags[i + 1] == "NN":
                    i += 1
                if tags[i] != "NN":
                    i = start + 1
                    continue
                while i < len(words) and tags[i] == "NN":
                    i += 1
                phrase = " ".join(words[start:i])
                if len(phrase) > 3:
                    counts[phrase] += 1

        phrases = [KeyPhrase(p, f, f * len(p.split())) for p, f in counts.items()]
        phrases.sort(key=lambda kp: kp.importance, reverse=True)
        return phrases[:MAX_KEY_PHRASES]
