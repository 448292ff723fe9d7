"""
Match Routes

POST /match/alumni                    - Rank mentors for the logged-in student
POST /match/jobs                      - Rank open jobs for the logged-in student
POST /match/jobs/{job_id}/students    - Rank students for a job posting
POST /match/preview                   - Stateless matching on inline profiles

Matching never fails because the AI provider is down: results then
come from the rule-based fallback (source = "fallback").
"""

from fastapi import APIRouter, Depends, HTTPException

from resumate.api.deps import (
    get_job_postings,
    get_matching_service,
    get_mentor_profiles,
    get_student_profiles,
)
from resumate.core.auth import get_current_user, require_alumni_or_admin, require_student
from resumate.schemas.schemas import (
    AlumniMatchRequest,
    JobStudentsMatchRequest,
    MatchListResponse,
    MatchMode,
    MatchPreviewRequest,
    StudentJobsMatchRequest,
)
from resumate.services.matching_service import MatchingService
from resumate.services.mongo_service import (
    JobPostingService,
    MentorProfileService,
    StudentProfileService,
)
from resumate.services.profile_normalizer import (
    flatten_student_document,
    normalize_candidate,
    normalize_subject,
)

router = APIRouter(prefix="/match", tags=["Matching"])


def _load_student_subject(user_id: str, students: StudentProfileService):
    doc = students.get_by_user_id(user_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Student profile not found. Upload a resume first.")
    return normalize_subject(flatten_student_document(doc))


@router.post("/alumni", response_model=MatchListResponse)
def match_alumni(
    body: AlumniMatchRequest,
    student: dict = Depends(require_student),
    students: StudentProfileService = Depends(get_student_profiles),
    mentors: MentorProfileService = Depends(get_mentor_profiles),
    matching: MatchingService = Depends(get_matching_service)
):
    """
    Find mentors for the logged-in student.

    Candidates come from the request body when given, otherwise from
    the available mentor profiles (best impact first).
    """
    subject = _load_student_subject(student["user_id"], students)
    records = body.candidates if body.candidates is not None else mentors.list_profiles(body.limit)
    candidates = [normalize_candidate(r, MatchMode.alumni_mentor) for r in records]

    results = matching.match_candidates(subject, candidates, MatchMode.alumni_mentor)
    return MatchListResponse(mode=MatchMode.alumni_mentor, results=results, total=len(results))


@router.post("/jobs", response_model=MatchListResponse)
def match_jobs(
    body: StudentJobsMatchRequest,
    student: dict = Depends(require_student),
    students: StudentProfileService = Depends(get_student_profiles),
    jobs: JobPostingService = Depends(get_job_postings),
    matching: MatchingService = Depends(get_matching_service)
):
    """Rank job postings (inline or all open ones) for the logged-in student."""
    subject = _load_student_subject(student["user_id"], students)
    records = body.jobs if body.jobs is not None else jobs.list_open(body.limit)
    candidates = [normalize_candidate(r, MatchMode.job_posting) for r in records]

    results = matching.match_candidates(
        subject, candidates, MatchMode.job_posting,
        weights=body.weights, context=body.context
    )
    return MatchListResponse(mode=MatchMode.job_posting, results=results, total=len(results))


@router.post("/jobs/{job_id}/students", response_model=MatchListResponse)
def match_students_to_job(
    job_id: str,
    body: JobStudentsMatchRequest,
    user: dict = Depends(require_alumni_or_admin),
    jobs: JobPostingService = Depends(get_job_postings),
    students: StudentProfileService = Depends(get_student_profiles),
    matching: MatchingService = Depends(get_matching_service)
):
    """
    Rank students for a job posting. Result ids are student ids.
    """
    job_doc = jobs.get_by_id(job_id)
    if not job_doc:
        raise HTTPException(status_code=404, detail="Job not found")

    job = normalize_candidate(job_doc, MatchMode.job_posting)
    records = body.students if body.students is not None else students.list_profiles()
    subjects = [normalize_subject(flatten_student_document(r)) for r in records]

    results = matching.rank_students_for_job(job, subjects, weights=body.weights)
    return MatchListResponse(mode=MatchMode.job_posting, results=results, total=len(results))


@router.post("/preview", response_model=MatchListResponse)
def match_preview(
    body: MatchPreviewRequest,
    user: dict = Depends(get_current_user),
    matching: MatchingService = Depends(get_matching_service)
):
    """Score inline profiles without touching stored data."""
    subject = normalize_subject(body.subject)
    candidates = [normalize_candidate(r, body.mode) for r in body.candidates]

    results = matching.match_candidates(
        subject, candidates, body.mode,
        weights=body.weights, context=body.context
    )
    return MatchListResponse(mode=body.mode, results=results, total=len(results))
