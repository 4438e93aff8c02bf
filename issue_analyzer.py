# issue_analyzer.py
# Comprehensive resume issue analysis.
#
# Ten passes of declarative IssueRule tables. Each rule's check returns
# None (no issue) or a dict of values used to fill its text templates.
# A gate rule that fires stops the rest of its pass.
#
# Aggregates: overall score, strengths, quick wins, action plan, industry fit.

import re
from collections import Counter
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Callable, Dict, List, Optional, Tuple

from industry_analyzer import get_detailed_industry_analysis
from keyword_processor import job_keyword_stats
from models import ActionPlan, Issue, IssueReport, Keyword

# ==============================================
# CONSTANTS
# ==============================================

SEVERITY_PENALTY = {"critical": 20, "high": 15, "medium": 8, "low": 3}
MAX_PENALTY = 100

DEFAULT_SECTION_SCORES = {
    "skills": 75,
    "experience": 80,
    "education": 70,
    "projects": 65,
    "actionVerbs": 70,
    "formatting": 75,
}
DEFAULT_INDUSTRY_SCORE = 75

EMAIL = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE = re.compile(r"(?<!\d)(\+\d{1,3}[\s.-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}(?!\d)")
LINKEDIN = re.compile(r"linkedin|\bin/[\w-]+")
METRIC = re.compile(r"\d+[%$,.]")
YEAR = re.compile(r"\b(?:19|20)\d{2}\b")
BULLET_LINE = re.compile(r"^\s*[•\-\*]\s*")
BULLET_FIRST_WORD = re.compile(r"^\s*[•\-\*]\s*([A-Za-z]+)", re.MULTILINE)
BULLET_GLYPH = re.compile(r"^\s*([•\-\*])", re.MULTILINE)
TECH_CONTEXT = re.compile(r"\b(?:using|with|in)\s+(?:react|javascript|python|java|aws|docker)\b")
SMART_QUOTES = re.compile(r"[“”‘’‚„]")
BOX_DRAWING = ("│", "┌", "└")
DATE_TOKEN = re.compile(
    r"\b(\d{4}-\d{4}|\d{1,2}/\d{1,2}/\d{2,4}|\d{4}|Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\b")
PRONOUN = re.compile(r"\b(?:i|me|my|mine)\b")
PASSIVE_MARKER = re.compile(r"\b(?:was|were|been|being)\b")
CAUSAL_CONTEXT = re.compile(r"\b(?:by|through|using|with|for)\b")

SUMMARY_HEADERS = ["summary", "profile", "objective", "about"]
SUMMARY_STOP_WORDS = ["experience", "education", "skills"]
EXPERIENCE_HEADERS = ["experience", "employment", "work history"]
SKILLS_HEADERS = ["skills", "technical", "competencies"]
SKILL_CATEGORY_WORDS = ["programming", "frameworks", "languages", "databases", "tools"]
EDUCATION_WORDS = ["education", "degree", "university", "college"]
RESULT_VERBS = ["improved", "increased", "reduced", "developed"]
CONTEXT_RESULT_VERBS = ["improved", "increased", "reduced", "created", "developed"]
BULLET_ACTION_VERBS = {
    "achieved", "improved", "managed", "created", "developed", "implemented",
    "launched", "led", "built", "designed", "optimized",
}
STRENGTH_ACTION_VERBS = {
    "achieved", "improved", "managed", "created", "developed", "implemented", "launched", "led",
}
LEADERSHIP_WORDS = ["led", "managed", "supervised", "mentored", "guided", "directed", "coordinated"]
COLLABORATION_WORDS = ["collaborated", "communicated", "presented"]
SOFT_SKILL_WORDS = ["communication", "leadership", "teamwork", "problem-solving", "analytical", "creative"]
PROFICIENCY_WORDS = ["proficient", "expert", "advanced", "beginner", "years"]
OUTDATED_TECH = ["flash", "silverlight", "internet explorer", "jquery", "perl", "cobol"]
CERTIFICATION_WORDS = ["aws", "azure", "google cloud", "certified"]
UNPROFESSIONAL_EMAIL_DOMAINS = ["hotmail", "yahoo", "aol", "live"]
BUZZWORDS = ["synergy", "leverage", "utilize", "paradigm", "innovative", "dynamic",
             "results-oriented", "think outside the box"]
MISSPELLINGS = ["recieve", "seperate", "occured", "achievment", "responsable", "maintainance"]
VAGUE_PHRASES = ["responsible for", "helped with", "worked on", "involved in", "participated in"]
REPETITION_EXEMPT = {"experience", "skills", "development", "management"}
ESSENTIAL_SECTIONS = ["contact", "experience", "education", "skills"]

INDUSTRY_SKILLS = {
    "tech": {
        "required": ["programming", "software", "development", "javascript", "python", "java", "react", "node"],
        "advanced": ["microservices", "cloud", "devops", "kubernetes", "docker", "ci/cd"],
    },
    "finance": {
        "required": ["financial", "analysis", "excel", "modeling", "valuation", "risk", "accounting"],
        "advanced": ["bloomberg", "vba", "sql", "tableau", "python"],
    },
    "healthcare": {
        "required": ["clinical", "patient", "medical", "healthcare", "ehr", "hipaa"],
        "advanced": ["epic", "cerner", "medical coding", "quality improvement"],
    },
    "marketing": {
        "required": ["marketing", "digital", "seo", "analytics", "campaign", "social media"],
        "advanced": ["google ads", "facebook ads", "hubspot", "salesforce", "a/b testing"],
    },
    "legal": {
        "required": ["legal", "litigation", "compliance", "contract", "research", "law"],
        "advanced": ["westlaw", "lexis", "ediscovery", "case management"],
    },
}

INDUSTRY_REQUIREMENTS = {
    "tech": (["github", "portfolio", "projects"], "Missing Technical Portfolio",
             "Tech resumes should include links to GitHub, portfolio, or project examples."),
    "finance": (["excel", "financial modeling", "certification"], "Missing Financial Credentials",
                "Finance resumes should highlight certifications, Excel skills, and financial modeling experience."),
    "healthcare": (["license", "certification", "clinical"], "Missing Healthcare Credentials",
                   "Healthcare resumes must prominently display licenses and certifications."),
}

QUICK_WIN_CATEGORIES = {"formatting", "keywords"}
STANDING_RECOMMENDATIONS = [
    "Consider professional resume review and optimization",
    "Regularly update resume with new achievements and skills",
]
DEFAULT_STRENGTH = "Resume demonstrates basic professional structure"
TIER_LIMIT = 5


# ==============================================
# CONTEXT
# ==============================================

class ResumeContext:
    """Resume text plus derived views shared by all rules."""

    def __init__(self, text: str, industry: str = "general", job_description: Optional[str] = None,
                 keywords: Optional[List[Keyword]] = None):
        self.text = text or ""
        self.lower = self.text.lower()
        self.lines = self.text.split("\n")
        self.industry = industry
        self.job_description = job_description
        self.keywords = keywords or []

    def has_any(self, words: List[str]) -> bool:
        return any(w in self.lower for w in words)

    def count_any(self, words: List[str]) -> int:
        return sum(len(re.findall(r"\b" + re.escape(w) + r"\b", self.lower)) for w in words)

    @cached_property
    def word_count(self) -> int:
        return len(self.text.split())

    @cached_property
    def bullet_lines(self) -> List[str]:
        return [line.lower() for line in self.lines if BULLET_LINE.match(line) or "•" in line]

    @cached_property
    def bullet_first_words(self) -> List[str]:
        return [w.lower() for w in BULLET_FIRST_WORD.findall(self.text)]

    @cached_property
    def summary(self) -> Optional[str]:
        for i, line in enumerate(self.lines):
            if any(h in line.lower() for h in SUMMARY_HEADERS):
                collected = []
                for following in self.lines[i + 1:i + 10]:
                    lowered = following.lower()
                    if not following.strip() or any(s in lowered for s in SUMMARY_STOP_WORDS):
                        break
                    collected.append(following)
                return " ".join(collected).strip()
        return None


def ratio(part: int, whole: int) -> float:
    return part / whole if whole else 0.0


def fires(condition: bool, **values: Any) -> Optional[Dict[str, Any]]:
    return values if condition else None


# ==============================================
# CHECKS
# ==============================================

def check_no_email(ctx):
    return fires(not EMAIL.search(ctx.lower))


def check_unprofessional_email(ctx):
    match = EMAIL.search(ctx.lower)
    return fires(bool(match) and any(d in match.group(0) for d in UNPROFESSIONAL_EMAIL_DOMAINS))


def check_no_phone(ctx):
    return fires(not PHONE.search(ctx.text))


def check_no_linkedin(ctx):
    return fires(not LINKEDIN.search(ctx.lower))


def check_summary_missing(ctx):
    return fires(not ctx.has_any(SUMMARY_HEADERS))


def check_summary_too_short(ctx):
    return fires(bool(ctx.summary) and len(ctx.summary) < 100)


def check_summary_too_long(ctx):
    return fires(bool(ctx.summary) and len(ctx.summary) > 300)


def check_experience_missing(ctx):
    return fires(not ctx.has_any(EXPERIENCE_HEADERS))


def check_no_metrics(ctx):
    return fires(not METRIC.search(ctx.lower))


def check_insufficient_metrics(ctx):
    lines = [l for l in ctx.bullet_lines if any(v in l for v in RESULT_VERBS)]
    with_numbers = [l for l in lines if re.search(r"\d", l)]
    return fires(bool(lines) and len(with_numbers) < len(lines) * 0.7,
                 pct=int(round(ratio(len(with_numbers), len(lines)) * 100)))


def check_weak_action_verbs(ctx):
    words = ctx.bullet_first_words
    strong = sum(1 for w in words if w in BULLET_ACTION_VERBS)
    return fires(bool(words) and ratio(strong, len(words)) < 0.6,
                 pct=int(round(ratio(strong, len(words)) * 100)))


def check_missing_leadership(ctx):
    return fires(ctx.industry == "tech" and not ctx.has_any(LEADERSHIP_WORDS))


def check_missing_collaboration(ctx):
    return fires(not ctx.has_any(COLLABORATION_WORDS))


def check_tech_context(ctx):
    return fires(ctx.industry == "tech" and len(TECH_CONTEXT.findall(ctx.lower)) < 3)


def check_employment_gaps(ctx):
    years = sorted((int(y) for y in YEAR.findall(ctx.text)), reverse=True)
    if len(years) < 4:
        return None
    return fires(any(a - b > 2 for a, b in zip(years, years[1:])))


def _expected_skills(industry: str) -> Dict[str, List[str]]:
    return INDUSTRY_SKILLS.get(industry, INDUSTRY_SKILLS["tech"])


def check_skills_missing(ctx):
    return fires(not ctx.has_any(SKILLS_HEADERS))


def check_skills_organization(ctx):
    return fires(not ctx.has_any(SKILL_CATEGORY_WORDS))


def check_industry_skills(ctx):
    required = _expected_skills(ctx.industry)["required"]
    present = [s for s in required if s in ctx.lower]
    return fires(len(present) < len(required) * 0.4,
                 industry=ctx.industry, industry_title=ctx.industry.capitalize(),
                 sample=", ".join(required[:5]))


def check_advanced_skills(ctx):
    advanced = _expected_skills(ctx.industry)["advanced"]
    present = [s for s in advanced if s in ctx.lower]
    return fires(ctx.industry == "tech" and len(present) < 2)


def check_proficiency(ctx):
    return fires(not ctx.has_any(PROFICIENCY_WORDS))


def check_soft_skills(ctx):
    return fires(sum(1 for s in SOFT_SKILL_WORDS if s in ctx.lower) < 2)


def check_outdated(ctx):
    return fires(ctx.has_any(OUTDATED_TECH))


def check_certifications(ctx):
    return fires(ctx.industry == "tech" and not ctx.has_any(CERTIFICATION_WORDS))


def check_education_missing(ctx):
    return fires(not ctx.has_any(EDUCATION_WORDS))


def check_bullet_glyphs(ctx):
    return fires(len(set(BULLET_GLYPH.findall(ctx.text))) > 1)


def check_smart_quotes(ctx):
    return fires(bool(SMART_QUOTES.search(ctx.text)))


def check_box_drawing(ctx):
    return fires(any(ch in ctx.text for ch in BOX_DRAWING))


def check_header_casing(ctx):
    headers = [l for l in ctx.lines
               if l.strip() and any(h in l.lower() for h in ("experience", "education", "skills", "summary"))]
    return fires(any(h != h.upper() and h != h.lower() for h in headers))


def check_whitespace(ctx):
    blank = sum(1 for l in ctx.lines if not l.strip())
    return fires(blank > len(ctx.lines) * 0.3)


def check_contact_prominence(ctx):
    top = " ".join(ctx.lines[:5]).lower()
    present = [
        "@" in top,
        bool(re.search(r"\(\d{3}\)|\d{3}[-.\s]\d{3}", top)),
        bool(re.search(r"city|state|,", top)),
    ]
    return fires(sum(present) < 2)


def _date_format(token: str) -> str:
    if re.fullmatch(r"\d{4}-\d{4}", token):
        return "year-range"
    if re.fullmatch(r"\d{4}", token):
        return "year-only"
    if "/" in token:
        return "mm/dd/yyyy"
    return "month-name"


def check_date_formats(ctx):
    formats = {_date_format(t) for t in DATE_TOKEN.findall(ctx.text)}
    return fires(len(formats) > 2)


def check_always(ctx):
    return {}


def check_pronouns(ctx):
    return fires(len(PRONOUN.findall(ctx.lower)) > 3)


def check_passive_markers(ctx):
    return fires(len(PASSIVE_MARKER.findall(ctx.lower)) > 5)


def check_buzzwords(ctx):
    return fires(ctx.count_any(BUZZWORDS) > 3)


def check_misspellings(ctx):
    return fires(ctx.count_any(MISSPELLINGS) > 0)


def check_repetition(ctx):
    counts = Counter(re.findall(r"\b[a-z][a-z'-]{4,}\b", ctx.lower))
    overused = [w for w, c in counts.items() if c > 4 and w not in REPETITION_EXEMPT]
    return fires(bool(overused), words=", ".join(overused[:3]))


def check_vague(ctx):
    return fires(sum(ctx.lower.count(p) for p in VAGUE_PHRASES) > 2)


def check_achievement_context(ctx):
    lines = [l for l in ctx.bullet_lines if any(v in l for v in CONTEXT_RESULT_VERBS)]
    with_context = [l for l in lines if CAUSAL_CONTEXT.search(l)]
    return fires(bool(lines) and len(with_context) < len(lines) * 0.5)


def _missing_job_keywords(ctx) -> List[Keyword]:
    missing = [k for k in ctx.keywords if not k.is_match and k.count == 0]
    return sorted(missing, key=lambda k: k.importance, reverse=True)[:10]


def check_missing_keywords(ctx):
    missing = _missing_job_keywords(ctx)
    return fires(bool(missing), count=len(missing), sample=", ".join(k.text for k in missing[:5]))


def check_match_rate(ctx):
    matched, total = job_keyword_stats(ctx.keywords)
    return fires(total > 0 and matched < total * 0.4, pct=int(round(ratio(matched, total) * 100)))


def check_industry_requirements(ctx):
    entry = INDUSTRY_REQUIREMENTS.get(ctx.industry)
    if not entry:
        return None
    requirements, title, description = entry
    present = [r for r in requirements if r in ctx.lower]
    return fires(len(present) < len(requirements) * 0.5,
                 industry=ctx.industry, req_title=title, req_description=description,
                 requirements=", ".join(requirements))


def check_too_short(ctx):
    return fires(ctx.word_count < 200, words=ctx.word_count)


def check_too_long(ctx):
    return fires(ctx.word_count > 1000, words=ctx.word_count)


def check_missing_sections(ctx):
    missing = [s for s in ESSENTIAL_SECTIONS
               if not (s in ctx.lower or (s == "contact" and "@" in ctx.text))]
    return fires(bool(missing), missing=", ".join(missing))


# ==============================================
# RULE TABLES
# ==============================================

@dataclass(frozen=True)
class IssueRule:
    id: str
    category: str
    severity: str
    priority: int
    title: str
    description: str
    impact: str
    solution: str
    check: Callable[[ResumeContext], Optional[Dict[str, Any]]]
    examples: Tuple[str, ...] = ()
    gate: bool = False

    def evaluate(self, ctx: ResumeContext) -> Optional[Issue]:
        values = self.check(ctx)
        if values is None:
            return None
        return Issue(
            id=self.id.format(**values),
            category=self.category,
            severity=self.severity,
            title=self.title.format(**values),
            description=self.description.format(**values),
            impact=self.impact,
            solution=self.solution.format(**values),
            examples=list(self.examples),
            priority=self.priority,
        )


CONTACT_RULES = [
    IssueRule("contact_no_email", "contact_information", "critical", 100,
              "Missing Email Address",
              "Your resume doesn't include an email address in the contact section.",
              "Recruiters cannot contact you, making your resume essentially useless.",
              "Add a professional email address at the top of your resume. Use firstname.lastname@domain.com format.",
              check_no_email),
    IssueRule("contact_unprofessional_email", "contact_information", "medium", 40,
              "Unprofessional Email Provider",
              "Using an outdated email provider can make you appear less tech-savvy.",
              "May create a negative first impression with recruiters.",
              "Consider switching to Gmail or creating a custom domain email for better professional appearance.",
              check_unprofessional_email),
    IssueRule("contact_no_phone", "contact_information", "high", 80,
              "Missing Phone Number",
              "No phone number found in your contact information.",
              "Recruiters prefer to call candidates for quick screening conversations.",
              "Add your phone number with area code. Format: (555) 123-4567 or +1-555-123-4567 for international.",
              check_no_phone),
    IssueRule("contact_no_linkedin", "contact_information", "medium", 50,
              "Missing LinkedIn Profile",
              "LinkedIn profile URL not found in contact information.",
              "Recruiters often check LinkedIn for additional information and professional network.",
              "Add your LinkedIn profile URL: linkedin.com/in/yourname",
              check_no_linkedin),
]

SUMMARY_RULES = [
    IssueRule("summary_missing", "professional_summary", "high", 85,
              "Missing Professional Summary",
              "No professional summary or objective statement found.",
              "Recruiters won't understand your value proposition in the first 6 seconds of scanning.",
              "Add a 2-3 sentence professional summary highlighting your key skills, experience, and career goals.",
              check_summary_missing,
              examples=("Experienced software engineer with 5+ years developing scalable web applications...",
                        "Results-driven marketing professional with expertise in digital campaigns..."),
              gate=True),
    IssueRule("summary_too_short", "professional_summary", "medium", 60,
              "Professional Summary Too Brief",
              "Your professional summary is very short and doesn't provide enough context.",
              "Fails to capture recruiter attention and showcase your value proposition.",
              "Expand your summary to 2-3 sentences (100-200 words) highlighting key achievements and skills.",
              check_summary_too_short),
    IssueRule("summary_too_long", "professional_summary", "medium", 45,
              "Professional Summary Too Lengthy",
              "Your professional summary is too long and may lose recruiter attention.",
              "Recruiters may skip reading it entirely due to its length.",
              "Condense your summary to 2-3 impactful sentences focusing on your strongest qualifications.",
              check_summary_too_long),
]

EXPERIENCE_RULES = [
    IssueRule("experience_missing", "experience", "critical", 95,
              "Missing Experience Section",
              "No work experience section found in your resume.",
              "Employers cannot evaluate your professional background and qualifications.",
              "Add a work experience section with your most recent positions, including job titles, "
              "companies, dates, and achievements.",
              check_experience_missing, gate=True),
    IssueRule("experience_no_metrics", "experience", "high", 90,
              "Missing Quantifiable Achievements",
              "Your experience section lacks specific numbers, percentages, or metrics.",
              "Without metrics, your achievements appear less credible and impactful.",
              "Add specific numbers: 'Increased sales by 25%', 'Managed team of 8', 'Reduced costs by $50K'",
              check_no_metrics,
              examples=("Instead of: 'Improved customer satisfaction'",
                        "Write: 'Improved customer satisfaction scores by 23% through streamlined support process'")),
    IssueRule("experience_insufficient_metrics", "experience", "high", 85,
              "Insufficient Quantified Results",
              "Only {pct}% of your achievement statements include specific metrics.",
              "Achievements without numbers are less compelling and harder to verify.",
              "Add specific metrics to at least 70% of your achievement statements. Include percentages, "
              "dollar amounts, time savings, or team sizes.",
              check_insufficient_metrics,
              examples=("Change: 'Led team of developers' → 'Led team of 5 developers'",
                        "Change: 'Improved performance' → 'Improved application performance by 40%'")),
    IssueRule("experience_weak_action_verbs", "experience", "medium", 65,
              "Weak Action Verbs",
              "Only {pct}% of your bullet points start with strong action verbs.",
              "Weak verbs make your achievements sound passive and less impressive.",
              "Start each bullet point with powerful action verbs like 'achieved', 'improved', 'managed', 'created'.",
              check_weak_action_verbs,
              examples=("Instead of: 'Responsible for maintaining applications'",
                        "Write: 'Maintained and optimized 5 critical applications'")),
    IssueRule("experience_missing_leadership", "experience", "medium", 70,
              "No Leadership Experience Highlighted",
              "Your resume doesn't showcase any leadership or team management experience.",
              "Many senior roles require leadership skills, and their absence may limit advancement opportunities.",
              "Add examples of leading projects, mentoring colleagues, or coordinating team efforts.",
              check_missing_leadership,
              examples=("Led cross-functional team of 4 in feature development",
                        "Mentored 2 junior developers on best practices")),
    IssueRule("experience_missing_soft_skills", "experience", "medium", 55,
              "Limited Soft Skills Demonstration",
              "Your experience section doesn't demonstrate important soft skills like collaboration or communication.",
              "Technical skills alone aren't enough; employers also value teamwork and communication abilities.",
              "Include examples of collaboration, communication, or presentation skills in your achievement statements.",
              check_missing_collaboration,
              examples=("Collaborated with design team to implement pixel-perfect UIs",
                        "Presented technical solutions to stakeholders")),
    IssueRule("experience_insufficient_tech_context", "experience", "medium", 60,
              "Insufficient Technology Context",
              "Your achievements don't clearly specify which technologies or tools you used.",
              "Recruiters and hiring managers want to see specific technology experience for relevance assessment.",
              "Add technology context to your achievements: 'Built web application using React and Node.js'",
              check_tech_context,
              examples=("Change: 'Developed applications' → 'Developed React applications with Node.js backend'",
                        "Change: 'Improved performance' → 'Improved PostgreSQL query performance by 40%'")),
    IssueRule("experience_employment_gaps", "experience", "medium", 55,
              "Employment Gaps Need Explanation",
              "There appear to be gaps in your employment history.",
              "Unexplained gaps raise questions about your career continuity.",
              "Add brief explanations for gaps: education, family care, freelancing, or professional development.",
              check_employment_gaps),
]

SKILLS_RULES = [
    IssueRule("skills_missing", "skills", "high", 80,
              "Missing Skills Section",
              "No dedicated skills section found in your resume.",
              "ATS systems and recruiters look for specific skills to match job requirements.",
              "Add a skills section with relevant technical and soft skills for your industry.",
              check_skills_missing, gate=True),
    IssueRule("skills_poor_organization", "skills", "medium", 60,
              "Skills Not Properly Categorized",
              "Your skills section lists items without clear categories or organization.",
              "Unorganized skills are harder for recruiters to quickly assess your technical breadth.",
              "Organize skills into categories like 'Programming Languages', 'Frameworks', 'Databases', "
              "'Cloud Technologies'.",
              check_skills_organization,
              examples=("Programming Languages: JavaScript, Python, Java",
                        "Frameworks: React, Node.js, Express",
                        "Databases: PostgreSQL, MongoDB")),
    IssueRule("skills_industry_mismatch", "skills", "high", 75,
              "Missing Key {industry_title} Skills",
              "Your skills section lacks important {industry} industry keywords.",
              "ATS systems may not identify you as a qualified candidate for the role.",
              "Add relevant {industry} skills like: {sample}",
              check_industry_skills),
    IssueRule("skills_missing_advanced_tech", "skills", "medium", 65,
              "Limited Advanced Technical Skills",
              "Your resume lacks advanced technical skills that demonstrate senior-level expertise.",
              "For senior roles, employers expect knowledge of advanced technologies and methodologies.",
              "Add advanced skills like: cloud platforms (AWS/Azure), containerization (Docker/Kubernetes), "
              "CI/CD pipelines, microservices architecture.",
              check_advanced_skills,
              examples=("Cloud: AWS, Docker, Kubernetes",
                        "DevOps: Jenkins, CI/CD, Infrastructure as Code")),
    IssueRule("skills_no_proficiency_levels", "skills", "low", 35,
              "No Skill Proficiency Levels Indicated",
              "Your skills section doesn't indicate your proficiency level with different technologies.",
              "Employers can't gauge your expertise level, which may lead to mismatched role assignments.",
              "Consider adding proficiency indicators: 'Expert in JavaScript (5+ years)', 'Proficient in Python', "
              "'Familiar with Kubernetes'.",
              check_proficiency,
              examples=("Expert: JavaScript, React (5+ years)",
                        "Proficient: Python, Node.js (2-3 years)",
                        "Familiar: Kubernetes, Docker (< 1 year)")),
    IssueRule("skills_missing_soft_skills", "skills", "medium", 50,
              "Insufficient Soft Skills Listed",
              "Your skills section focuses heavily on technical skills but lacks important soft skills.",
              "Employers value both technical and soft skills; an imbalance suggests poor self-awareness.",
              "Add 2-3 relevant soft skills that complement your technical abilities.",
              check_soft_skills,
              examples=("Technical Skills + Leadership, Communication",
                        "Programming Skills + Problem-solving, Team Collaboration")),
    IssueRule("skills_outdated_technologies", "skills", "medium", 45,
              "Outdated Technologies Listed",
              "Your skills section includes outdated or less relevant technologies.",
              "Listing outdated skills can make you appear out of touch with current industry standards.",
              "Remove outdated technologies and replace with modern alternatives or focus on currently relevant skills.",
              check_outdated,
              examples=("Replace jQuery with modern JavaScript/React",
                        "Replace Flash with HTML5/CSS3")),
    IssueRule("skills_missing_certifications", "skills", "low", 40,
              "No Technical Certifications Mentioned",
              "Your resume doesn't mention any professional certifications or cloud platform credentials.",
              "Certifications demonstrate commitment to professional development and validate expertise.",
              "If you have certifications, add them to your skills or create a dedicated certifications section.",
              check_certifications,
              examples=("AWS Certified Developer Associate",
                        "Google Cloud Professional Developer",
                        "Microsoft Azure Fundamentals")),
]

EDUCATION_RULES = [
    IssueRule("education_missing", "education", "medium", 60,
              "Missing Education Section",
              "No education section found in your resume.",
              "Many employers require degree information for qualification verification.",
              "Add an education section with your highest degree, institution, and graduation year.",
              check_education_missing),
]

FORMATTING_RULES = [
    IssueRule("formatting_inconsistent_bullets", "formatting", "low", 30,
              "Inconsistent Bullet Point Formatting",
              "Multiple bullet point styles used throughout the resume.",
              "Inconsistent formatting appears unprofessional and distracts from content.",
              "Use consistent bullet points throughout (• recommended for ATS compatibility).",
              check_bullet_glyphs),
    IssueRule("formatting_special_characters", "formatting", "medium", 70,
              "ATS-Unfriendly Special Characters",
              "Smart quotes or special characters detected that may cause ATS parsing issues.",
              "ATS systems may not parse your resume correctly, leading to rejection.",
              "Replace smart quotes with standard quotes (\" ') and avoid special symbols.",
              check_smart_quotes),
    IssueRule("formatting_complex_tables", "formatting", "high", 85,
              "Complex Table Formatting Detected",
              "Tables or complex formatting elements found in resume.",
              "ATS systems often cannot parse table content correctly.",
              "Convert table content to simple text format with clear headings and bullet points.",
              check_box_drawing),
    IssueRule("formatting_inconsistent_headers", "formatting", "low", 35,
              "Inconsistent Section Header Formatting",
              "Section headers use inconsistent capitalization or formatting styles.",
              "Inconsistent headers make your resume appear less polished and professional.",
              "Use consistent formatting for all section headers (either ALL CAPS, Title Case, or lowercase).",
              check_header_casing,
              examples=("Consistent: WORK EXPERIENCE, EDUCATION, SKILLS",
                        "Or: Work Experience, Education, Skills")),
    IssueRule("formatting_excessive_whitespace", "formatting", "medium", 45,
              "Excessive White Space",
              "Your resume has too much empty space, which wastes valuable real estate.",
              "Excessive white space makes your resume appear sparse and may suggest lack of experience.",
              "Remove unnecessary blank lines and optimize spacing to fit more relevant content.",
              check_whitespace),
    IssueRule("formatting_contact_not_prominent", "formatting", "medium", 60,
              "Contact Information Not Prominently Displayed",
              "Your contact information isn't clearly formatted or positioned at the top of your resume.",
              "Recruiters should be able to quickly find your contact details.",
              "Place contact information prominently at the top with clear formatting: Name, Phone, Email, Location.",
              check_contact_prominence,
              examples=("John Smith",
                        "(555) 123-4567 | john.smith@email.com | San Francisco, CA")),
    IssueRule("formatting_inconsistent_dates", "formatting", "low", 25,
              "Inconsistent Date Formatting",
              "Multiple date formats used throughout your resume.",
              "Inconsistent formatting reduces professionalism and can confuse ATS systems.",
              "Use consistent date format throughout: either 'Month Year' or 'MM/YYYY' format.",
              check_date_formats,
              examples=("Consistent: Jan 2021 - Present, Sep 2019 - Dec 2020",
                        "Or: 01/2021 - Present, 09/2019 - 12/2020")),
    IssueRule("formatting_file_format_advice", "formatting", "low", 20,
              "File Format Optimization Recommendation",
              "Ensure your resume is saved in ATS-friendly format.",
              "Wrong file formats can prevent ATS systems from parsing your resume correctly.",
              "Save your resume as a .docx or .pdf file. Avoid .pages, .txt, or image formats.",
              check_always,
              examples=("Preferred: resume.docx or resume.pdf",
                        "Avoid: resume.pages, resume.jpg")),
]

CONTENT_RULES = [
    IssueRule("content_personal_pronouns", "content_quality", "medium", 45,
              "Excessive Use of Personal Pronouns",
              "Too many personal pronouns (I, me, my) found in resume content.",
              "Makes resume sound less professional and takes up valuable space.",
              "Remove personal pronouns. Start bullet points with action verbs instead.",
              check_pronouns,
              examples=("Instead of: 'I managed a team of 5 people'",
                        "Write: 'Managed team of 5 people'")),
    IssueRule("content_passive_voice", "content_quality", "medium", 50,
              "Excessive Passive Voice",
              "Too much passive voice makes your achievements sound less impactful.",
              "Passive voice weakens the impact of your accomplishments.",
              "Use active voice with strong action verbs to describe your achievements.",
              check_passive_markers),
    IssueRule("content_empty_buzzwords", "content_quality", "low", 35,
              "Overuse of Empty Buzzwords",
              "Too many generic buzzwords without specific context or achievements.",
              "Buzzwords without substance make your resume appear generic and unconvincing.",
              "Replace buzzwords with specific achievements and concrete examples of your work.",
              check_buzzwords),
    IssueRule("content_spelling_errors", "content_quality", "high", 85,
              "Potential Spelling Errors Detected",
              "Common misspellings found in your resume content.",
              "Spelling errors create a negative impression and suggest lack of attention to detail.",
              "Carefully proofread your resume and use spell-check tools before submitting.",
              check_misspellings,
              examples=("recieve → receive", "seperate → separate", "achievment → achievement")),
    IssueRule("content_repetitive_language", "content_quality", "medium", 40,
              "Repetitive Language Usage",
              "Overuse of certain words: {words}",
              "Repetitive language makes your resume monotonous and less engaging.",
              "Use synonyms and varied vocabulary to describe your achievements and responsibilities.",
              check_repetition,
              examples=("Instead of repeating 'developed' use: created, built, designed, implemented",
                        "Instead of repeating 'managed' use: led, supervised, coordinated, directed")),
    IssueRule("content_vague_descriptions", "content_quality", "medium", 60,
              "Vague Job Descriptions",
              "Too many vague phrases that don't clearly describe your contributions.",
              "Vague descriptions fail to demonstrate your actual impact and value.",
              "Replace vague terms with specific action verbs and concrete achievements.",
              check_vague,
              examples=("Instead of: 'Responsible for database management'",
                        "Write: 'Optimized PostgreSQL databases, reducing query time by 30%'")),
    IssueRule("content_missing_context", "content_quality", "medium", 65,
              "Achievements Lack Context",
              "Many achievements don't explain how or why they were accomplished.",
              "Without context, achievements appear less credible and impressive.",
              "Add context to your achievements explaining methods, tools, or approaches used.",
              check_achievement_context,
              examples=("Change: 'Improved performance by 40%'",
                        "To: 'Improved application performance by 40% through database optimization "
                        "and code refactoring'")),
]

KEYWORD_RULES = [
    IssueRule("keywords_missing_important", "keywords", "high", 85,
              "Missing Important Job Keywords",
              "{count} important keywords from the job description are missing from your resume.",
              "ATS systems may rank your resume lower due to poor keyword matching.",
              "Consider incorporating these keywords naturally: {sample}",
              check_missing_keywords),
    IssueRule("keywords_low_match_rate", "keywords", "medium", 70,
              "Low Keyword Match Rate",
              "Only {pct}% keyword match with job description.",
              "Low keyword matching reduces your chances of passing ATS screening.",
              "Aim for 60-70% keyword match by naturally incorporating relevant terms from the job posting.",
              check_match_rate),
]

INDUSTRY_RULES = [
    IssueRule("industry_{industry}_requirements", "industry_specific", "medium", 65,
              "{req_title}",
              "{req_description}",
              "Industry-specific requirements are often mandatory for consideration.",
              "Add relevant {industry} elements: {requirements}",
              check_industry_requirements),
]

STRUCTURE_RULES = [
    IssueRule("length_too_short", "structure", "high", 80,
              "Resume Too Short",
              "Your resume is only {words} words, which is significantly below the recommended length.",
              "Short resumes suggest lack of experience or detail about your qualifications.",
              "Expand your resume to 300-800 words by adding more detail about your achievements and responsibilities.",
              check_too_short),
    IssueRule("length_too_long", "structure", "medium", 50,
              "Resume Too Long",
              "Your resume is {words} words, which may be too lengthy for most positions.",
              "Lengthy resumes may overwhelm recruiters and reduce the impact of your key qualifications.",
              "Condense your resume to 300-800 words by focusing on most relevant and recent achievements.",
              check_too_long),
    IssueRule("structure_missing_sections", "structure", "high", 90,
              "Missing Essential Resume Sections",
              "Missing critical sections: {missing}",
              "Incomplete resume structure makes it difficult for recruiters to find key information.",
              "Add the missing sections: {missing}",
              check_missing_sections),
]

# (pass name, rules, runs only with a job description)
ANALYSIS_PASSES: List[Tuple[str, List[IssueRule], bool]] = [
    ("contact", CONTACT_RULES, False),
    ("summary", SUMMARY_RULES, False),
    ("experience", EXPERIENCE_RULES, False),
    ("skills", SKILLS_RULES, False),
    ("education", EDUCATION_RULES, False),
    ("formatting", FORMATTING_RULES, False),
    ("content", CONTENT_RULES, False),
    ("keywords", KEYWORD_RULES, True),
    ("industry", INDUSTRY_RULES, False),
    ("structure", STRUCTURE_RULES, False),
]


def run_pass(rules: List[IssueRule], ctx: ResumeContext) -> List[Issue]:
    issues = []
    for rule in rules:
        issue = rule.evaluate(ctx)
        if issue is None:
            continue
        issues.append(issue)
        if rule.gate:
            break
    return issues


# ==============================================
# AGGREGATES
# ==============================================

def calculate_overall_score(issues: List[Issue], section_scores: Optional[Dict[str, float]] = None) -> int:
    scores = section_scores or DEFAULT_SECTION_SCORES
    penalty = sum(SEVERITY_PENALTY[i.severity] for i in issues)
    issue_score = max(0, 100 - min(penalty, MAX_PENALTY))
    avg_section = sum(scores.values()) / len(scores)
    return int(round((issue_score + avg_section) / 2))


def identify_strengths(ctx: ResumeContext, section_scores: Dict[str, float]) -> List[str]:
    strengths = []
    if METRIC.search(ctx.lower):
        strengths.append("Uses quantifiable achievements with specific metrics and numbers")

    words = ctx.bullet_first_words
    strong = sum(1 for w in words if w in STRENGTH_ACTION_VERBS)
    if words and strong / len(words) > 0.7:
        strengths.append("Effectively uses strong action verbs to describe achievements")

    for section, score in section_scores.items():
        if score >= 85:
            strengths.append(f"Strong {section.replace('_', ' ')} section with comprehensive content")

    matched, total = job_keyword_stats(ctx.keywords)
    if total and matched / total > 0.6:
        strengths.append("Good keyword optimization matching job requirements")

    if ctx.text.count("•") > len(re.findall(r"[-*]", ctx.text)):
        strengths.append("Uses consistent and professional formatting throughout")

    return strengths or [DEFAULT_STRENGTH]


def create_action_plan(issues: List[Issue], industry_improvements: List[str]) -> ActionPlan:
    by_severity: Dict[str, List[str]] = {"critical": [], "high": [], "medium": []}
    for issue in issues:
        if issue.severity in by_severity:
            by_severity[issue.severity].append(issue.solution)
    critical, high, medium = by_severity["critical"], by_severity["high"], by_severity["medium"]

    immediate = critical[:3] + high[:2]
    short_term = high[2:] + medium[:3] + industry_improvements[:2]
    long_term = medium[3:] + industry_improvements[2:] + STANDING_RECOMMENDATIONS
    return ActionPlan(
        immediate=immediate[:TIER_LIMIT],
        short_term=short_term[:TIER_LIMIT],
        long_term=long_term[:TIER_LIMIT],
    )


class IssueAnalyzer:
    """Runs every analysis pass and assembles the report."""

    def __init__(self, passes: List[Tuple[str, List[IssueRule], bool]] = ANALYSIS_PASSES):
        self.passes = passes

    def find_issues(self, ctx: ResumeContext) -> List[Issue]:
        issues: List[Issue] = []
        for _name, rules, needs_job in self.passes:
            if needs_job and not ctx.job_description:
                continue
            issues.extend(run_pass(rules, ctx))
        return issues

    def analyze(self, resume_text: str, industry: str, job_description: Optional[str] = None,
                keywords: Optional[List[Keyword]] = None,
                section_scores: Optional[Dict[str, float]] = None,
                industry_score: Optional[int] = None) -> IssueReport:
        ctx = ResumeContext(resume_text, industry, job_description, keywords)
        scores = section_scores or DEFAULT_SECTION_SCORES

        issues = self.find_issues(ctx)
        fit = get_detailed_industry_analysis(
            industry,
            DEFAULT_INDUSTRY_SCORE if industry_score is None else industry_score,
            ctx.text,
            scores,
        )
        ranked = sorted(issues, key=lambda i: i.priority, reverse=True)
        quick_wins = [f"{i.title}: {i.solution}" for i in ranked
                      if i.severity != "critical" and i.category in QUICK_WIN_CATEGORIES][:TIER_LIMIT]

        return IssueReport(
            issues=ranked,
            overall_score=calculate_overall_score(issues, scores),
            strengths=identify_strengths(ctx, scores),
            quick_wins=quick_wins,
            action_plan=create_action_plan(issues, fit.improvements),
            industry_fit=fit,
        )
