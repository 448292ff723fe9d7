"""
Resume Routes

POST /resume/parse     - Upload resume -> n8n parsing -> stored on profile
POST /resume/ats       - ATS score and improvement suggestions
POST /resume/jd-match  - Match a parsed resume against a job description
POST /resume/keywords  - Enhanced matching keywords
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from resumate.api.deps import get_n8n_client, get_resume_service, get_student_profiles
from resumate.core.auth import get_current_user, require_student
from resumate.core.exceptions import ExternalServiceFailure
from resumate.schemas.schemas import (
    ATSAnalysis,
    ATSRequest,
    JDMatchRequest,
    KeywordsRequest,
    KeywordsResponse,
    ParsedResumeResponse,
    ResumeJDMatch,
)
from resumate.services.mongo_service import StudentProfileService
from resumate.services.n8n_client import N8nClient
from resumate.services.profile_normalizer import normalize_subject
from resumate.services.resume_service import ResumeIntelligenceService
from resumate.utils.file_upload import read_resume_upload

router = APIRouter(prefix="/resume", tags=["Resume"])


@router.post("/parse", response_model=ParsedResumeResponse)
async def parse_resume(
    file: UploadFile = File(...),
    student: dict = Depends(require_student),
    n8n: N8nClient = Depends(get_n8n_client),
    students: StudentProfileService = Depends(get_student_profiles)
):
    """
    Upload a resume (PDF/DOC/DOCX/TXT, max 5MB).

    The n8n workflow parses it; the structured output is stored on the
    student's profile and becomes the source of truth for matching.
    """
    content, filename, mimetype = await read_resume_upload(file)

    try:
        parsed = n8n.parse_resume(student["user_id"], filename, mimetype, content)
    except ExternalServiceFailure as e:
        raise HTTPException(status_code=502, detail=f"Resume parsing failed: {e.detail}")

    students.save_parsed_resume(student["user_id"], parsed)

    subject = normalize_subject({**parsed, "userId": student["user_id"]})
    return ParsedResumeResponse(parsed_resume=parsed, subject=subject)


@router.post("/ats", response_model=ATSAnalysis)
def ats_analysis(
    body: ATSRequest,
    user: dict = Depends(get_current_user),
    service: ResumeIntelligenceService = Depends(get_resume_service)
):
    """ATS score (0-100), missing skills, suggestions, strengths."""
    return service.analyze_ats(body.parsed_resume, body.target_role)


@router.post("/jd-match", response_model=ResumeJDMatch)
def jd_match(
    body: JDMatchRequest,
    user: dict = Depends(get_current_user),
    service: ResumeIntelligenceService = Depends(get_resume_service)
):
    """Match score (0.0-1.0) of a resume against a job description."""
    return service.match_resume_to_jd(body.parsed_resume, body.job_description)


@router.post("/keywords", response_model=KeywordsResponse)
def enhanced_keywords(
    body: KeywordsRequest,
    user: dict = Depends(get_current_user),
    service: ResumeIntelligenceService = Depends(get_resume_service)
):
    """Keywords inferred from skills, projects and goals."""
    return KeywordsResponse(keywords=service.extract_enhanced_keywords(body.parsed_resume))
