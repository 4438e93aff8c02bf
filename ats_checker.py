# ats_checker.py
# ATS compatibility rule engine.
#
# Start at 100; every violated rule deducts its fixed impact.
# Rules are independent: no rule looks at another rule's outcome.

import re
from dataclasses import dataclass
from typing import Callable, List

from models import ATSCheckResult, ATSIssue

# ==============================================
# MARKERS & PATTERNS
# ==============================================

COMPATIBLE_FILE_TYPES = {
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
    "text/plain",
    "text/rtf",
}

TABLE_MARKERS = ["<table", "<tr", "<td", "<th", "|---|", "+---+"]
COLUMN_MARKERS = ["<column", "column-count", "multi-column"]
IMAGE_MARKERS = ["<img", "<image", ".jpg", ".png", ".gif", ".jpeg", "data:image"]
HEADER_FOOTER_MARKERS = ["<header", "<footer", "header:", "footer:"]
FANCY_FONT_MARKERS = [
    "font-family:", "comic", "papyrus", "brush script", "impact", "copperplate",
    "courier", "symbol", "wingdings", "webdings",
]
TEXT_BOX_MARKERS = ["<textbox", "text-box", "textbox", "text box", "text frame"]
STANDARD_HEADINGS = [
    "experience", "work experience", "employment", "education", "skills",
    "qualifications", "summary", "objective", "profile", "certifications",
    "projects", "publications", "awards",
]

MARKDOWN_ROW = re.compile(r"\|.*\|")
TAB_RUN = re.compile(r"\t{2,}")
SPACE_RUN = re.compile(r"\s{5,}")
PAGE_OF = re.compile(r"page\s*\d+\s*of\s*\d+", re.IGNORECASE)
SPECIAL_CHAR = re.compile(r"""[^\w\s.,;:'"!?@#$%&*()\[\]{}/\-+<>=]""")
BAD_FILENAME_CHAR = re.compile(r"[^\w\-.]")
HEADING_PATTERNS = [re.compile(r"\b" + re.escape(h) + r"\b", re.IGNORECASE) for h in STANDARD_HEADINGS]

TOP_OF_RESUME = 500
EMAIL = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE = re.compile(r"\b(\+\d{1,3}[ -]?)?\(?\d{3}\)?[ -]?\d{3}[ -]?\d{4}\b")
LINKEDIN = re.compile(r"linkedin\.com/in/[a-z0-9-]+")

SPECIAL_CHAR_LIMIT = 10
MIN_STANDARD_HEADINGS = 3


@dataclass(frozen=True)
class ResumeFile:
    content: str
    file_type: str
    file_name: str


# ==============================================
# DETECTORS
# ==============================================

def _contains_any(text: str, markers: List[str]) -> bool:
    return any(m in text for m in markers)


def bad_file_type(doc: ResumeFile) -> bool:
    return (doc.file_type or "").lower() not in COMPATIBLE_FILE_TYPES


def bad_file_name(doc: ResumeFile) -> bool:
    return bool(BAD_FILENAME_CHAR.search(doc.file_name or ""))


def has_tables(doc: ResumeFile) -> bool:
    return _contains_any(doc.content, TABLE_MARKERS) or len(MARKDOWN_ROW.findall(doc.content)) > 2


def has_columns(doc: ResumeFile) -> bool:
    return (_contains_any(doc.content.lower(), COLUMN_MARKERS)
            or len(TAB_RUN.findall(doc.content)) > 3
            or len(SPACE_RUN.findall(doc.content)) > 5)


def has_images(doc: ResumeFile) -> bool:
    return _contains_any(doc.content.lower(), IMAGE_MARKERS)


def has_headers_footers(doc: ResumeFile) -> bool:
    return _contains_any(doc.content.lower(), HEADER_FOOTER_MARKERS) or bool(PAGE_OF.search(doc.content))


def has_fancy_fonts(doc: ResumeFile) -> bool:
    return _contains_any(doc.content.lower(), FANCY_FONT_MARKERS)


def has_special_characters(doc: ResumeFile) -> bool:
    return len(SPECIAL_CHAR.findall(doc.content)) > SPECIAL_CHAR_LIMIT


def has_text_boxes(doc: ResumeFile) -> bool:
    return _contains_any(doc.content.lower(), TEXT_BOX_MARKERS)


def lacks_standard_headings(doc: ResumeFile) -> bool:
    found = sum(1 for p in HEADING_PATTERNS if p.search(doc.content))
    return found < MIN_STANDARD_HEADINGS


def contact_not_at_top(doc: ResumeFile) -> bool:
    top = doc.content[:TOP_OF_RESUME].lower()
    return not (EMAIL.search(top) or PHONE.search(top) or LINKEDIN.search(top))


# ==============================================
# RULE TABLE
# ==============================================

@dataclass(frozen=True)
class ATSRule:
    type: str
    violated: Callable[[ResumeFile], bool]
    impact: int
    description: str
    solution: str
    passed: str


ATS_RULES: List[ATSRule] = [
    ATSRule("file_format", bad_file_type, 15,
            "File format {file_type} may not be fully compatible with all ATS systems.",
            "Convert your resume to a standard .docx or .pdf format for better compatibility.",
            "File format is ATS-compatible"),
    ATSRule("file_name", bad_file_name, 5,
            "File name contains spaces or special characters that may cause issues with some ATS systems.",
            "Rename your file using only letters, numbers, and underscores (e.g., John_Smith_Resume.pdf).",
            "File name is ATS-compatible"),
    ATSRule("complex_tables", has_tables, 20,
            "Complex tables detected in resume, which many ATS systems cannot parse correctly.",
            "Replace tables with simple bullet points or plain text formatting.",
            "No complex tables detected"),
    ATSRule("columns", has_columns, 15,
            "Multi-column layout detected, which can confuse ATS systems.",
            "Use a single-column layout for better ATS compatibility.",
            "Single-column layout detected"),
    ATSRule("images", has_images, 10,
            "Images or graphics detected in resume, which ATS systems cannot read.",
            "Remove images, logos, and graphics from your resume.",
            "No images detected"),
    ATSRule("headers_footers", has_headers_footers, 10,
            "Headers or footers detected, which may be ignored by ATS systems.",
            "Move important information from headers/footers into the main body of your resume.",
            "No headers/footers detected"),
    ATSRule("fancy_fonts", has_fancy_fonts, 5,
            "Non-standard fonts detected, which may not render correctly in ATS systems.",
            "Use standard fonts like Arial, Calibri, or Times New Roman.",
            "Standard fonts detected"),
    ATSRule("special_characters", has_special_characters, 5,
            "Special characters or symbols detected that may not parse correctly in ATS systems.",
            "Replace special characters with standard text alternatives.",
            "No problematic special characters detected"),
    ATSRule("text_boxes", has_text_boxes, 10,
            "Text boxes detected, which may not be read by ATS systems.",
            "Convert text boxes to standard text in the document body.",
            "No text boxes detected"),
    ATSRule("section_headings", lacks_standard_headings, 10,
            "Non-standard section headings detected, which may confuse ATS systems.",
            "Use standard section headings like 'Experience', 'Education', and 'Skills'.",
            "Standard section headings detected"),
    ATSRule("contact_info", contact_not_at_top, 5,
            "Contact information may not be at the top of the resume, which is preferred for ATS systems.",
            "Place your name and contact information at the top of your resume.",
            "Contact information properly positioned"),
]


def check_ats_compatibility(content: str, file_type: str, file_name: str,
                            rules: List[ATSRule] = ATS_RULES) -> ATSCheckResult:
    doc = ResumeFile(content or "", file_type or "", file_name or "")
    issues: List[ATSIssue] = []
    passed: List[str] = []

    for rule in rules:
        if rule.violated(doc):
            issues.append(ATSIssue(
                type=rule.type,
                description=rule.description.format(file_type=doc.file_type or "unknown"),
                impact=rule.impact,
                solution=rule.solution,
            ))
        else:
            passed.append(rule.passed)

    score = max(0, 100 - sum(i.impact for i in issues))
    return ATSCheckResult(score=score, issues=issues, passed_checks=passed)
