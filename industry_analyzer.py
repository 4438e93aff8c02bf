# industry_analyzer.py
# Industry detection from keyword frequency, per-industry section weights,
# industry score, recommendations and the detailed industry-fit block.

import re
from typing import Dict, List

from models import IndustryFit


# ==============================================
# INDUSTRY DIAGNOSTIC KEYWORDS
# ==============================================

# Iteration order matters: on a tie the first industry listed wins.
INDUSTRY_KEYWORDS: Dict[str, List[str]] = {
    "tech": [
        "software", "developer", "engineer", "programming", "code", "java", "python",
        "javascript", "react", "angular", "node", "aws", "cloud", "devops", "fullstack",
        "frontend", "backend", "web", "mobile", "app", "database", "sql", "nosql",
        "machine learning", "artificial intelligence", "data science", "algorithm",
    ],
    "finance": [
        "finance", "accounting", "investment", "banking", "financial", "analyst",
        "portfolio", "trading", "stocks", "bonds", "securities", "audit", "tax", "budget",
        "forecast", "revenue", "profit", "loss", "balance sheet", "income statement",
        "cash flow", "equity", "asset", "liability", "hedge fund", "private equity",
    ],
    "healthcare": [
        "healthcare", "medical", "clinical", "patient", "doctor", "nurse", "physician",
        "hospital", "pharmacy", "pharmaceutical", "health", "care", "treatment",
        "diagnosis", "therapy", "medicine", "surgery", "laboratory", "research",
        "biotech", "life science", "clinical trial", "regulatory",
    ],
    "marketing": [
        "marketing", "brand", "advertising", "market research", "digital marketing",
        "social media", "content", "seo", "sem", "campaign", "customer", "consumer",
        "product", "promotion", "public relations", "communications", "creative",
        "strategy", "analytics", "conversion", "engagement", "audience",
    ],
    "legal": [
        "legal", "law", "attorney", "lawyer", "counsel", "litigation", "contract",
        "compliance", "regulation", "policy", "legislation", "court", "judge",
        "paralegal", "intellectual property", "patent", "trademark", "copyright",
    ],
}


def word_pattern(term: str) -> "re.Pattern[str]":
    """Whole-word, case-insensitive pattern for a literal term."""
    return re.compile(r"\b" + re.escape(term) + r"\b", re.IGNORECASE)


_INDUSTRY_PATTERNS = {
    industry: [word_pattern(kw) for kw in keywords]
    for industry, keywords in INDUSTRY_KEYWORDS.items()
}


def industry_match_counts(text: str) -> Dict[str, int]:
    return {
        industry: sum(len(p.findall(text)) for p in patterns)
        for industry, patterns in _INDUSTRY_PATTERNS.items()
    }


def detect_industry(text: str) -> str:
    """Industry with the most keyword occurrences, or 'general' when nothing matches."""
    if not text:
        return "general"

    best_industry, best_count = "general", 0
    for industry, count in industry_match_counts(text).items():
        if count > best_count:
            best_industry, best_count = industry, count
    return best_industry


# ==============================================
# INDUSTRY SCORING CRITERIA
# ==============================================

INDUSTRY_CRITERIA: Dict[str, Dict[str, float]] = {
    "tech": {
        "technical_skills": 0.25, "projects": 0.20, "experience": 0.20, "education": 0.15,
        "certification": 0.10, "action_verb": 0.05, "formatting": 0.05,
    },
    "finance": {
        "technical_skills": 0.20, "projects": 0.05, "experience": 0.25, "education": 0.20,
        "certification": 0.15, "action_verb": 0.10, "formatting": 0.05,
    },
    "healthcare": {
        "technical_skills": 0.15, "projects": 0.05, "experience": 0.20, "education": 0.25,
        "certification": 0.20, "action_verb": 0.10, "formatting": 0.05,
    },
    "marketing": {
        "technical_skills": 0.15, "projects": 0.20, "experience": 0.25, "education": 0.10,
        "certification": 0.05, "action_verb": 0.15, "formatting": 0.10,
    },
    "legal": {
        "technical_skills": 0.10, "projects": 0.05, "experience": 0.25, "education": 0.25,
        "certification": 0.20, "action_verb": 0.10, "formatting": 0.05,
    },
    "general": {
        "technical_skills": 0.15, "projects": 0.15, "experience": 0.20, "education": 0.20,
        "certification": 0.10, "action_verb": 0.10, "formatting": 0.10,
    },
}

# section-score key -> criteria weight
SECTION_WEIGHT_KEYS = {
    "skills": "technical_skills",
    "projects": "projects",
    "experience": "experience",
    "education": "education",
    "certifications": "certification",
    "actionVerbs": "action_verb",
    "formatting": "formatting",
}


def criteria_for(industry: str) -> Dict[str, float]:
    return INDUSTRY_CRITERIA.get(industry, INDUSTRY_CRITERIA["general"])


def calculate_industry_score(industry: str, section_scores: Dict[str, float]) -> int:
    criteria = criteria_for(industry)
    total = 0.0
    for section, weight_key in SECTION_WEIGHT_KEYS.items():
        score = section_scores.get(section)
        if score:
            total += score * criteria[weight_key]
    return int(round(total))


INDUSTRY_RECOMMENDATIONS: Dict[str, List[str]] = {
    "tech": [
        "Highlight specific programming languages and technologies in a dedicated technical skills section",
        "Include GitHub/portfolio links to showcase your code",
        "Quantify your achievements with metrics (e.g., improved performance by 30%)",
        "List specific technical projects with your role and technologies used",
        "Include system design or architecture experience if applicable",
    ],
    "finance": [
        "Emphasize financial certifications (CFA, CPA, etc.)",
        "Highlight experience with financial software and tools",
        "Include quantitative achievements and financial metrics",
        "Demonstrate knowledge of regulations and compliance",
        "Showcase analytical and modeling skills",
    ],
    "healthcare": [
        "List all relevant certifications and licenses prominently",
        "Include experience with electronic health record (EHR) systems",
        "Highlight patient care metrics and outcomes if applicable",
        "Emphasize knowledge of healthcare regulations (HIPAA, etc.)",
        "Include specialized medical knowledge or procedures",
    ],
    "marketing": [
        "Showcase campaign results with specific metrics (ROI, conversion rates, etc.)",
        "Highlight experience with marketing tools and platforms",
        "Include examples of creative work or content creation",
        "Demonstrate knowledge of analytics and data-driven decision making",
        "Emphasize brand strategy and positioning experience",
    ],
    "legal": [
        "Highlight specific areas of legal expertise",
        "Include case outcomes and settlements if applicable",
        "Emphasize research and writing skills",
        "List relevant bar admissions and jurisdictions",
        "Showcase knowledge of specific regulations and compliance areas",
    ],
    "general": [
        "Tailor your resume to the specific job description",
        "Quantify achievements with specific metrics",
        "Use strong action verbs to begin bullet points",
        "Ensure consistent formatting throughout",
        "Include relevant certifications and technical skills",
    ],
}


def get_industry_recommendations(industry: str) -> List[str]:
    return list(INDUSTRY_RECOMMENDATIONS.get(industry, INDUSTRY_RECOMMENDATIONS["general"]))


# ==============================================
# DETAILED INDUSTRY FIT
# ==============================================

# (element description, evidence keywords)
INDUSTRY_CHECKLIST: Dict[str, List[tuple]] = {
    "tech": [
        ("Version control experience (Git, GitHub, etc.)", ["git", "github", "gitlab", "svn"]),
        ("Cloud platform experience (AWS, Azure, GCP)", ["aws", "azure", "gcp", "cloud"]),
        ("Agile methodology experience", ["agile", "scrum", "kanban", "sprint"]),
        ("Testing and quality assurance experience", ["test", "testing", "unit test", "integration"]),
        ("Continuous integration/deployment experience", ["ci/cd", "jenkins", "pipeline", "deployment"]),
    ],
    "finance": [
        ("Financial modeling and valuation skills", ["model", "modeling", "financial model", "valuation"]),
        ("Risk assessment and management experience", ["risk", "risk management", "var", "stress test"]),
        ("Regulatory compliance and audit experience", ["sec", "compliance", "regulation", "audit"]),
        ("Proficiency with financial software and tools", ["bloomberg", "excel", "sql", "tableau"]),
    ],
    "healthcare": [
        ("Direct patient care or clinical experience", ["clinical", "patient", "bedside", "rounds"]),
        ("Electronic health record system experience", ["ehr", "electronic health", "epic", "cerner"]),
        ("Professional medical certifications and licenses", ["board certified", "license", "certification", "cme"]),
        ("Medical research or clinical trial experience", ["research", "clinical trial", "publication", "study"]),
    ],
    "marketing": [
        ("Digital marketing and SEO experience", ["seo", "sem", "ppc", "google ads"]),
        ("Marketing analytics and automation tools", ["google analytics", "adobe", "hubspot", "salesforce"]),
        ("Content creation and brand management", ["content", "copywriting", "creative", "brand"]),
        ("Marketing campaign management and optimization", ["campaign", "roi", "conversion", "attribution"]),
    ],
    "legal": [
        ("Legal research and brief writing experience", ["westlaw", "lexis", "research", "brief"]),
        ("Litigation and court appearance experience", ["litigation", "court", "trial", "deposition"]),
        ("Contract drafting and negotiation skills", ["contract", "agreement", "negotiation", "draft"]),
        ("Regulatory compliance and policy development", ["compliance", "regulatory", "policy", "procedure"]),
    ],
}

BULLET_ACTION_VERBS = {
    "achieved", "improved", "trained", "maintained", "managed", "created", "resolved",
    "volunteered", "influenced", "increased", "decreased", "researched", "authored",
    "developed", "designed", "implemented", "launched", "spearheaded", "coordinated",
    "executed", "optimized", "streamlined", "established", "initiated", "built",
    "led", "supervised", "mentored", "delivered", "exceeded", "generated", "reduced",
    "saved", "accelerated", "transformed", "revitalized", "strengthened", "enhanced",
}

DEFAULT_FIT_STRENGTH = "Resume demonstrates basic professional structure and content organization"
DEFAULT_FIT_IMPROVEMENT = "Focus on adding more quantifiable achievements and industry-specific terminology"


def _has_any(text: str, terms: List[str]) -> bool:
    return any(word_pattern(t).search(text) for t in terms)


def _fit_summary(industry: str, score: int, strong: List[str], weak: List[str],
                 present: int, missing: int) -> str:
    name = industry.capitalize()
    text = f"Your resume shows a {score}/100 fit for {name} positions. "
    if score >= 85:
        text += f"This is an excellent match! Your resume demonstrates strong alignment with {name} industry expectations."
    elif score >= 70:
        text += f"This is a good match with room for optimization. Your resume shows solid foundation for {name} roles."
    elif score >= 55:
        text += (f"This is a moderate match. While you have some relevant elements, significant "
                 f"improvements could better position you for {name} roles.")
    else:
        text += (f"This shows limited alignment with {name} requirements. Substantial improvements "
                 f"are needed to strengthen your candidacy.")

    text += f" You have {present} relevant industry keywords, but are missing {missing} important terms."
    if strong:
        text += f" Your strongest areas include: {', '.join(strong)}."
    if weak:
        text += f" Areas needing improvement: {', '.join(weak)}."
    return text


def get_detailed_industry_analysis(industry: str, industry_score: int, resume_text: str,
                                   section_scores: Dict[str, float]) -> IndustryFit:
    text = (resume_text or "").lower()
    criteria = criteria_for(industry)
    keywords = INDUSTRY_KEYWORDS.get(industry, [])

    present = [kw for kw in keywords if word_pattern(kw).search(text)]
    missing = [kw for kw in keywords if kw not in present]

    strong = [name for name, score in section_scores.items() if score >= 80]
    weak = [name for name, score in section_scores.items() if score < 60]

    strengths = []
    if "skills" in strong or "technical skills" in strong:
        strengths.append(f"Strong technical skills section showcases relevant {industry} expertise")
    if "experience" in strong:
        strengths.append(f"Well-developed experience section demonstrates practical {industry} knowledge")
    if "projects" in strong:
        strengths.append(f"Project portfolio effectively highlights hands-on {industry} experience")
    if "education" in strong:
        strengths.append(f"Educational background aligns well with {industry} requirements")
    if len(present) >= 10:
        strengths.append(f"Good use of industry-specific terminology ({len(present)} relevant keywords found)")
    if section_scores.get("actionVerbs", 0) >= 80:
        strengths.append("Strong use of action verbs demonstrates impact and initiative")
    if section_scores.get("formatting", 0) >= 85:
        strengths.append("Professional formatting enhances readability and ATS compatibility")

    improvements = []
    weak_section_advice = [
        ("skills", "technical_skills",
         "Expand technical skills section - it's crucial for {industry} roles ({pct}% of industry score)"),
        ("experience", "experience",
         "Strengthen experience section with more detailed achievements ({pct}% of industry score)"),
        ("projects", "projects",
         "Add relevant project portfolio to demonstrate practical application ({pct}% of industry score)"),
        ("education", "education",
         "Enhance education section with relevant coursework and achievements ({pct}% of industry score)"),
    ]
    for section, weight_key, template in weak_section_advice:
        weight = criteria[weight_key]
        if section in weak and weight > 0.15:
            improvements.append(template.format(industry=industry, pct=int(round(weight * 100))))
    if len(missing) > 10:
        improvements.append(f"Incorporate more industry-specific keywords (missing {len(missing)} important terms)")
    if section_scores.get("actionVerbs", 0) < 70:
        improvements.append("Use more powerful action verbs to describe achievements and responsibilities")
    if section_scores.get("formatting", 0) < 80:
        improvements.append("Improve formatting consistency for better professional presentation")

    missing_elements = [desc for desc, terms in INDUSTRY_CHECKLIST.get(industry, [])
                        if not _has_any(text, terms)]
    if not re.search(r"\d", text):
        missing_elements.append("Quantifiable achievements with specific numbers and percentages")
    bullets = re.findall(r"[•\-\*]\s*([a-z]+)", text)
    if bullets:
        verb_bullets = sum(1 for first in bullets if first in BULLET_ACTION_VERBS)
        if verb_bullets / len(bullets) < 0.7:
            missing_elements.append("More action verbs at the beginning of bullet points")

    return IndustryFit(
        analysis=_fit_summary(industry, industry_score, strong, weak, len(present), len(missing)),
        strengths=strengths or [DEFAULT_FIT_STRENGTH],
        improvements=improvements or [DEFAULT_FIT_IMPROVEMENT],
        key_words=present[:15],
        missing_elements=missing_elements,
    )
