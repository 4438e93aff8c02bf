from fastapi import FastAPI, UploadFile, File, Form, Header, HTTPException, Depends, Query
from fastapi.responses import JSONResponse, StreamingResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from typing import Optional
import csv
import hashlib
import io
import logging
import os
from datetime import datetime

# Our modules
from ai_suggestions import AISuggestionService
from analytics_queue import AnalyticsQueue
from cache import AnalysisCache
from database import (
    DEFAULT_USER_ID, Analysis, DatabaseImportanceLookup, KeywordAnalyticsStore,
    delete_analysis, get_db, get_trending_keywords, init_db, save_analysis,
)
from keyword_processor import KeywordProcessor
from resume_scorer import ResumeScorer
from text_extraction import TextExtractionError, extract_text_from_bytes, mime_type_for

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "ResumeScore ATS Analyzer"
SERVICE_VERSION = "1.0"

app = FastAPI(
    title=SERVICE_NAME,
    version=SERVICE_VERSION,
    description="ATS compatibility, keyword and content scoring for resumes"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Lock down in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API Key
API_KEY = os.getenv("RS_API_KEY", "changeme123!!")


def build_scorer() -> ResumeScorer:
    """Wire the scorer to the database-backed lookup and analytics store"""
    return ResumeScorer(
        keyword_processor=KeywordProcessor(importance_lookup=DatabaseImportanceLookup()),
        cache=AnalysisCache(),
        analytics=AnalyticsQueue(),
        analytics_store=KeywordAnalyticsStore(),
        ai_advisor=AISuggestionService(),
    )


scorer = build_scorer()


def get_scorer() -> ResumeScorer:
    return scorer


# Initialize database on startup
@app.on_event("startup")
async def startup_event():
    init_db()
    logger.info("%s %s started", SERVICE_NAME, SERVICE_VERSION)


@app.on_event("shutdown")
async def shutdown_event():
    if scorer.analytics is not None:
        scorer.analytics.stop()


def require_api_key(x_api_key: Optional[str]) -> None:
    if x_api_key != API_KEY:
        raise HTTPException(status_code=403, detail="Invalid or missing API key")


def content_hash(*parts: Optional[str]) -> str:
    digest = hashlib.sha256()
    for part in parts:
        digest.update((part or "").encode("utf-8"))
        digest.update(b"\x00")
    return digest.hexdigest()


class AnalyzeTextRequest(BaseModel):
    resume_text: str = Field(..., min_length=1)
    job_description: Optional[str] = None
    file_type: str = "text/plain"
    file_name: str = "resume.txt"


class AIAnalysisRequest(BaseModel):
    resume_text: str = Field(..., min_length=1)
    job_description: Optional[str] = None


def run_analysis(db: Session, service: ResumeScorer, text: str, job_description: Optional[str],
                 file_type: str, file_name: str) -> dict:
    """Score, persist and cache one resume; returns the response payload"""
    resume_id = content_hash(text, job_description, file_type, file_name)
    result = service.analyze(text, job_description, file_type, file_name, resume_id=resume_id)

    analysis = (
        db.query(Analysis)
        .filter(Analysis.user_id == DEFAULT_USER_ID, Analysis.resume_id == resume_id)
        .first()
    )
    if analysis is None:
        analysis = save_analysis(db, result, text, file_name, file_type=file_type,
                                 job_description=job_description, resume_id=resume_id)
    service.store(analysis.id, result)

    response = result.model_dump(mode="json")
    response["analysis_id"] = analysis.id
    response["analyzed_at"] = analysis.analyzed_at.isoformat()
    logger.info("Analysis %s stored (total %d, industry %s)", analysis.id, result.total_score, result.industry)
    return response


@app.get("/")
def root():
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "description": "Scores resumes against ATS expectations and an optional job description",
        "features": [
            "ATS compatibility checks",
            "Keyword matching against job descriptions",
            "Industry detection and industry-weighted scoring",
            "Prioritized issues with an action plan",
            "Analysis history & trending keywords"
        ]
    }


@app.get("/health")
def health():
    return {"status": "ok", "version": SERVICE_VERSION}


@app.post("/analyze")
async def analyze_upload(
    file: UploadFile = File(...),
    job_description: Optional[str] = Form(None),
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    service: ResumeScorer = Depends(get_scorer)
):
    """Upload a PDF, DOCX or TXT resume and score it"""

    require_api_key(x_api_key)

    try:
        content = await file.read()
        text = extract_text_from_bytes(content, file.filename)
        response = run_analysis(db, service, text, job_description,
                                mime_type_for(file.filename), file.filename)
        return JSONResponse(response)

    except TextExtractionError as te:
        raise HTTPException(status_code=400, detail=str(te))
    except Exception as e:
        logger.exception("Analysis of %s failed", file.filename)
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@app.post("/analyze/text")
async def analyze_text(
    request: AnalyzeTextRequest,
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    service: ResumeScorer = Depends(get_scorer)
):
    """Score resume text that was extracted elsewhere"""

    require_api_key(x_api_key)

    try:
        response = run_analysis(db, service, request.resume_text, request.job_description,
                                request.file_type, request.file_name)
        return JSONResponse(response)
    except Exception as e:
        logger.exception("Text analysis failed")
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@app.get("/analyses/history")
async def get_history(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    min_score: Optional[float] = Query(None, ge=0, le=100),
    max_score: Optional[float] = Query(None, ge=0, le=100),
    industry: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Get paginated history with filtering"""

    require_api_key(x_api_key)

    query = db.query(Analysis).filter(Analysis.user_id == DEFAULT_USER_ID)

    if min_score is not None:
        query = query.filter(Analysis.total_score >= min_score)
    if max_score is not None:
        query = query.filter(Analysis.total_score <= max_score)
    if industry:
        query = query.filter(Analysis.industry == industry)
    try:
        if start_date:
            query = query.filter(Analysis.analyzed_at >= datetime.fromisoformat(start_date))
        if end_date:
            query = query.filter(Analysis.analyzed_at <= datetime.fromisoformat(end_date))
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=f"Invalid date: {ve}")

    total = query.count()
    analyses = query.order_by(Analysis.analyzed_at.desc()).offset(offset).limit(limit).all()

    return {
        "total": total,
        "limit": limit,
        "offset": offset,
        "results": [analysis.to_dict() for analysis in analyses]
    }


@app.get("/analyses/export")
async def export_analyses(
    industry: Optional[str] = None,
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Export analysis scores to CSV"""

    require_api_key(x_api_key)

    query = db.query(Analysis).filter(Analysis.user_id == DEFAULT_USER_ID)
    if industry:
        query = query.filter(Analysis.industry == industry)
    analyses = query.order_by(Analysis.analyzed_at.desc()).all()

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([
        "Analysis ID", "File", "Industry", "Total", "ATS", "Keyword", "Grammar",
        "Formatting", "Section", "Action Verbs", "Relevance", "Analyzed At"
    ])
    for analysis in analyses:
        writer.writerow([
            analysis.id,
            analysis.filename,
            analysis.industry or "general",
            analysis.total_score,
            analysis.ats_score,
            analysis.keyword_score,
            analysis.grammar_score,
            analysis.formatting_score,
            analysis.section_score,
            analysis.action_verb_score,
            analysis.relevance_score,
            analysis.analyzed_at.isoformat()
        ])

    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=resumescore_export_{datetime.utcnow().strftime('%Y%m%d')}.csv"}
    )


@app.get("/analyses/{analysis_id}")
async def get_analysis(
    analysis_id: str,
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    service: ResumeScorer = Depends(get_scorer)
):
    """Retrieve a full analysis by ID, from cache when possible"""

    require_api_key(x_api_key)

    cached = service.cache.get(analysis_id)
    if cached is not None:
        return {**cached.model_dump(mode="json"), "analysis_id": analysis_id, "cached": True}

    analysis = db.query(Analysis).filter(Analysis.id == analysis_id).first()

    if not analysis:
        raise HTTPException(status_code=404, detail="Analysis not found")

    result = analysis.to_result()
    service.cache.put(analysis_id, result)
    return {
        **result.model_dump(mode="json"),
        "analysis_id": analysis.id,
        "analyzed_at": analysis.analyzed_at.isoformat(),
        "cached": False
    }


@app.delete("/analyses/{analysis_id}")
async def remove_analysis(
    analysis_id: str,
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    service: ResumeScorer = Depends(get_scorer)
):
    """Delete an analysis and everything stored with it"""

    require_api_key(x_api_key)

    service.cache.delete(analysis_id)
    if not delete_analysis(db, analysis_id):
        raise HTTPException(status_code=404, detail="Analysis not found")
    return {"deleted": analysis_id}


@app.get("/keywords/trending")
async def trending_keywords(
    industry: str = Query("tech"),
    limit: int = Query(20, ge=1, le=100),
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Keywords with the best match rate for an industry"""

    require_api_key(x_api_key)

    rows = get_trending_keywords(db, industry, limit)
    return {"industry": industry, "keywords": [row.to_dict() for row in rows]}


@app.post("/ai-analysis")
async def ai_analysis(
    request: AIAnalysisRequest,
    x_api_key: Optional[str] = Header(None),
    service: ResumeScorer = Depends(get_scorer)
):
    """AI suggestions only; falls back to local suggestions when the AI service is unavailable"""

    require_api_key(x_api_key)

    result = service.ai_advisor.suggest(request.resume_text, request.job_description)
    return result.model_dump()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
