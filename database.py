"""
ResumeScore Database Models
SQLAlchemy ORM for storing resume analyses, keyword importance and keyword analytics
"""

import logging
import os
import uuid
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text,
    UniqueConstraint, create_engine,
)
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker

from keyword_processor import SEED_IMPORTANCE
from models import AnalysisResult, Keyword, SuggestionList

logger = logging.getLogger(__name__)

Base = declarative_base()

DEFAULT_USER_ID = "default_user"
TRENDING_MIN_OCCURRENCES = 5


class Analysis(Base):
    """
    Stores one complete resume analysis; keywords, sections and issues hang off it
    """
    __tablename__ = 'analyses'

    # Primary identifiers
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    resume_id = Column(String(64), index=True)

    # Resume info
    filename = Column(String(255))
    file_type = Column(String(255))
    resume_text = Column(Text)  # Store full text for re-analysis
    job_description = Column(Text)
    word_count = Column(Integer)

    # Scores
    ats_score = Column(Integer, nullable=False)
    keyword_score = Column(Integer, nullable=False)
    grammar_score = Column(Integer, nullable=False)
    formatting_score = Column(Integer, nullable=False)
    section_score = Column(Integer, nullable=False)
    action_verb_score = Column(Integer, nullable=False)
    relevance_score = Column(Integer, nullable=False)
    bullet_point_score = Column(Integer, nullable=False)
    language_tone_score = Column(Integer, nullable=False)
    length_score = Column(Integer, nullable=False)
    industry_score = Column(Integer, nullable=False)
    total_score = Column(Integer, nullable=False, index=True)
    industry = Column(String(100), index=True)

    # Structured payloads stored as JSON
    suggestions = Column(JSON)
    section_heatmap = Column(JSON)
    ats_check = Column(JSON)
    report = Column(JSON)
    ai_suggestions = Column(JSON)
    ai_score = Column(Integer)

    # Metadata
    analyzed_at = Column(DateTime, default=datetime.utcnow, index=True)

    keywords = relationship("AnalysisKeyword", cascade="all, delete-orphan")
    sections = relationship("AnalysisSection", cascade="all, delete-orphan")
    issues = relationship("AnalysisIssue", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Analysis(id={self.id}, industry={self.industry}, score={self.total_score})>"

    def to_dict(self):
        """Convert to dictionary for JSON response"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "resume_id": self.resume_id,
            "filename": self.filename,
            "file_type": self.file_type,
            "industry": self.industry,
            "total_score": self.total_score,
            "scores": {
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
            },
            "word_count": self.word_count,
            "ai_score": self.ai_score,
            "analyzed_at": self.analyzed_at.isoformat() if self.analyzed_at else None
        }

    def to_result(self) -> AnalysisResult:
        """Rebuild the full AnalysisResult from the stored rows"""
        return AnalysisResult(
            ats_score=self.ats_score,
            keyword_score=self.keyword_score,
            grammar_score=self.grammar_score,
            formatting_score=self.formatting_score,
            section_score=self.section_score,
            action_verb_score=self.action_verb_score,
            relevance_score=self.relevance_score,
            bullet_point_score=self.bullet_point_score,
            language_tone_score=self.language_tone_score,
            length_score=self.length_score,
            industry_score=self.industry_score,
            total_score=self.total_score,
            industry=self.industry or "general",
            keywords=[k.to_keyword() for k in self.keywords],
            sections=[s.to_dict() for s in self.sections],
            issues=[i.to_dict() for i in sorted(self.issues, key=lambda i: i.priority, reverse=True)],
            suggestions=SuggestionList.validate_python(self.suggestions or []),
            section_heatmap=self.section_heatmap or [],
            ats_check=self.ats_check,
            report=self.report,
            ai_suggestions=self.ai_suggestions,
            ai_score=self.ai_score,
        )


class AnalysisKeyword(Base):
    __tablename__ = 'analysis_keywords'
    __table_args__ = (UniqueConstraint('analysis_id', 'normalized_keyword', name='uq_analysis_keyword'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    analysis_id = Column(String(36), ForeignKey('analyses.id', ondelete='CASCADE'), nullable=False, index=True)
    keyword = Column(String(255), nullable=False)
    normalized_keyword = Column(String(255), nullable=False, index=True)
    count = Column(Integer, default=0)
    is_from_job_description = Column(Boolean, default=False)
    is_match = Column(Boolean, default=False)
    category = Column(String(50))
    importance = Column(Integer, default=1)
    source = Column(String(50))

    def to_keyword(self) -> Keyword:
        return Keyword(
            text=self.keyword,
            normalized_text=self.normalized_keyword,
            count=self.count or 0,
            is_from_job_description=bool(self.is_from_job_description),
            is_match=bool(self.is_match),
            category=self.category or "general",
            importance=self.importance or 1,
            source=self.source or "resume",
        )


class AnalysisSection(Base):
    __tablename__ = 'analysis_sections'

    id = Column(Integer, primary_key=True, autoincrement=True)
    analysis_id = Column(String(36), ForeignKey('analyses.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    content = Column(Text)
    score = Column(Integer, default=0)
    suggestions = Column(Text)

    def to_dict(self):
        return {"name": self.name, "content": self.content or "", "score": self.score or 0,
                "suggestions": self.suggestions or ""}


class AnalysisIssue(Base):
    __tablename__ = 'analysis_issues'

    id = Column(Integer, primary_key=True, autoincrement=True)
    analysis_id = Column(String(36), ForeignKey('analyses.id', ondelete='CASCADE'), nullable=False, index=True)
    issue_id = Column(String(100), nullable=False)
    category = Column(String(100))
    severity = Column(String(20), nullable=False)
    title = Column(String(255))
    description = Column(Text)
    impact = Column(Text)
    solution = Column(Text)
    examples = Column(JSON)
    priority = Column(Integer, default=0)

    def to_dict(self):
        return {
            "id": self.issue_id,
            "category": self.category,
            "severity": self.severity,
            "title": self.title,
            "description": self.description,
            "impact": self.impact,
            "solution": self.solution,
            "examples": self.examples or [],
            "priority": self.priority or 0,
        }


class IndustryKeyword(Base):
    """Reference table: how important a keyword is for an industry (1-5)"""
    __tablename__ = 'industry_keywords'
    __table_args__ = (UniqueConstraint('normalized_keyword', 'industry', name='uq_industry_keyword'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    keyword = Column(String(255), nullable=False)
    normalized_keyword = Column(String(255), nullable=False)
    industry = Column(String(100), nullable=False, index=True)
    importance = Column(Integer, nullable=False, default=1)


class KeywordAnalytics(Base):
    """Running per-industry keyword counters, updated with atomic upserts"""
    __tablename__ = 'keyword_analytics'
    __table_args__ = (UniqueConstraint('normalized_keyword', 'industry', name='uq_keyword_analytics'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    keyword = Column(String(255), nullable=False)
    normalized_keyword = Column(String(255), nullable=False)
    industry = Column(String(100), nullable=False, index=True)
    total_occurrences = Column(Integer, nullable=False, default=0)
    times_seen = Column(Integer, nullable=False, default=0)
    times_matched = Column(Integer, nullable=False, default=0)
    last_seen = Column(DateTime, default=datetime.utcnow)

    @property
    def match_rate(self) -> float:
        return self.times_matched / self.times_seen if self.times_seen else 0.0

    def to_dict(self):
        return {
            "keyword": self.keyword,
            "industry": self.industry,
            "match_rate": round(self.match_rate, 3),
            "total_occurrences": self.total_occurrences,
            "last_seen": self.last_seen.isoformat() if self.last_seen else None,
        }


# Database connection setup
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./resumescore.db")

# Handle Railway PostgreSQL URL format (starts with postgres:// instead of postgresql://)
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# Analytics run on a worker thread, so SQLite connections must be shareable
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=False, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _insert_for(db: Session):
    """Dialect-specific INSERT that supports ON CONFLICT"""
    if db.get_bind().dialect.name == "postgresql":
        return pg_insert
    return sqlite_insert


def init_db():
    """Initialize database - create all tables and seed industry keywords"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seeded = seed_industry_keywords(db)
    finally:
        db.close()
    logger.info("Database initialized (%d industry keywords seeded)", seeded)


def get_db():
    """Dependency for getting DB session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def seed_industry_keywords(db: Session, table: Optional[Dict[str, Dict[str, int]]] = None) -> int:
    rows = [
        {"keyword": kw, "normalized_keyword": kw, "industry": industry, "importance": importance}
        for industry, keywords in (table or SEED_IMPORTANCE).items()
        for kw, importance in keywords.items()
    ]
    if not rows:
        return 0
    insert = _insert_for(db)
    stmt = insert(IndustryKeyword).values(rows).on_conflict_do_nothing(
        index_elements=["normalized_keyword", "industry"])
    db.execute(stmt)
    db.commit()
    return len(rows)


# ==============================================
# ANALYSES
# ==============================================

def save_analysis(
    db: Session,
    result: AnalysisResult,
    resume_text: str,
    filename: str,
    file_type: Optional[str] = None,
    job_description: Optional[str] = None,
    resume_id: Optional[str] = None,
    user_id: str = DEFAULT_USER_ID
) -> Analysis:
    """Save analysis and its keywords, sections and issues"""

    analysis = Analysis(
        user_id=user_id,
        resume_id=resume_id,
        filename=filename,
        file_type=file_type,
        resume_text=resume_text,
        job_description=job_description,
        word_count=len(resume_text.split()),
        ats_score=result.ats_score,
        keyword_score=result.keyword_score,
        grammar_score=result.grammar_score,
        formatting_score=result.formatting_score,
        section_score=result.section_score,
        action_verb_score=result.action_verb_score,
        relevance_score=result.relevance_score,
        bullet_point_score=result.bullet_point_score,
        language_tone_score=result.language_tone_score,
        length_score=result.length_score,
        industry_score=result.industry_score,
        total_score=result.total_score,
        industry=result.industry,
        suggestions=SuggestionList.dump_python(result.suggestions, mode="json"),
        section_heatmap=[c.model_dump() for c in result.section_heatmap],
        ats_check=result.ats_check.model_dump() if result.ats_check else None,
        report=result.report.model_dump(mode="json") if result.report else None,
        ai_suggestions=result.ai_suggestions,
        ai_score=result.ai_score,
    )
    db.add(analysis)
    db.flush()

    for section in result.sections:
        db.add(AnalysisSection(analysis_id=analysis.id, **section.model_dump()))
    for issue in result.issues:
        db.add(AnalysisIssue(
            analysis_id=analysis.id,
            issue_id=issue.id,
            category=issue.category,
            severity=issue.severity,
            title=issue.title,
            description=issue.description,
            impact=issue.impact,
            solution=issue.solution,
            examples=issue.examples,
            priority=issue.priority,
        ))
    db.flush()

    insert_keywords(db, analysis.id, result.keywords)

    db.commit()
    db.refresh(analysis)
    return analysis


def insert_keywords(db: Session, analysis_id: str, keywords: List[Keyword]) -> None:
    """Bulk insert; rows whose (analysis_id, normalized_keyword) already exist are skipped"""
    if not keywords:
        return
    rows = [
        {
            "analysis_id": analysis_id,
            "keyword": k.text,
            "normalized_keyword": k.normalized_text,
            "count": k.count,
            "is_from_job_description": k.is_from_job_description,
            "is_match": k.is_match,
            "category": k.category,
            "importance": k.importance,
            "source": k.source,
        }
        for k in keywords
    ]
    insert = _insert_for(db)
    stmt = insert(AnalysisKeyword).values(rows).on_conflict_do_nothing(
        index_elements=["analysis_id", "normalized_keyword"])
    db.execute(stmt)


def delete_analysis(db: Session, analysis_id: str) -> bool:
    analysis = db.query(Analysis).filter(Analysis.id == analysis_id).first()
    if not analysis:
        return False
    db.delete(analysis)
    db.commit()
    return True


# ==============================================
# KEYWORD IMPORTANCE & ANALYTICS
# ==============================================

class DatabaseImportanceLookup:
    """Reads IndustryKeyword importances in one query per analysis"""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def lookup_many(self, terms: Iterable[str], industry: str) -> Dict[str, int]:
        terms = list(terms)
        if not terms:
            return {}
        db = self.session_factory()
        try:
            rows = (
                db.query(IndustryKeyword.normalized_keyword, IndustryKeyword.importance)
                .filter(IndustryKeyword.industry == industry)
                .filter(IndustryKeyword.normalized_keyword.in_(terms))
                .all()
            )
        finally:
            db.close()
        return {keyword: importance for keyword, importance in rows}


class KeywordAnalyticsStore:
    """
    Per-industry keyword counters.
    record() is one INSERT ... ON CONFLICT DO UPDATE per keyword, so the
    increments happen in the database and concurrent analyses never lose counts.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def record(self, keywords: List[Keyword], industry: str) -> None:
        if not keywords:
            return
        db = self.session_factory()
        try:
            insert = _insert_for(db)
            now = datetime.utcnow()
            for k in keywords:
                stmt = insert(KeywordAnalytics).values(
                    keyword=k.text,
                    normalized_keyword=k.normalized_text,
                    industry=industry,
                    total_occurrences=k.count,
                    times_seen=1,
                    times_matched=1 if k.is_match else 0,
                    last_seen=now,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["normalized_keyword", "industry"],
                    set_={
                        "total_occurrences": KeywordAnalytics.total_occurrences + stmt.excluded.total_occurrences,
                        "times_seen": KeywordAnalytics.times_seen + stmt.excluded.times_seen,
                        "times_matched": KeywordAnalytics.times_matched + stmt.excluded.times_matched,
                        "last_seen": stmt.excluded.last_seen,
                    },
                )
                db.execute(stmt)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


def get_trending_keywords(db: Session, industry: str, limit: int = 20) -> List[KeywordAnalytics]:
    """Keywords seen at least TRENDING_MIN_OCCURRENCES times, best match rate first"""
    match_rate = KeywordAnalytics.times_matched * 1.0 / KeywordAnalytics.times_seen
    return (
        db.query(KeywordAnalytics)
        .filter(KeywordAnalytics.industry == industry)
        .filter(KeywordAnalytics.total_occurrences >= TRENDING_MIN_OCCURRENCES)
        .filter(KeywordAnalytics.times_seen > 0)
        .order_by(match_rate.desc(), KeywordAnalytics.total_occurrences.desc())
        .limit(limit)
        .all()
    )


# Run on import (for development)
if __name__ == "__main__":
    init_db()
