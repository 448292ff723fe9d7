"""
Pydantic Schemas - Matching types and Request/Response Validation

All matching types and API schemas in one file for simplicity.
"""

import math
from datetime import date
from enum import Enum
from typing import Optional, List, Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive scores (round() would bank)."""
    return int(math.floor(value + 0.5))


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    alumni = "alumni"
    admin = "admin"


class MatchMode(str, Enum):
    """
    Which kind of pairing is being scored. Chosen by the caller;
    each mode fixes its score range and the id key the model returns.
    """
    alumni_mentor = "alumni_mentor"
    job_posting = "job_posting"

    @property
    def score_min(self) -> float:
        return 0.0 if self is MatchMode.alumni_mentor else 0

    @property
    def score_max(self) -> float:
        return 1.0 if self is MatchMode.alumni_mentor else 100

    @property
    def integer_scores(self) -> bool:
        return self is MatchMode.job_posting

    @property
    def id_key(self) -> str:
        """Key holding the candidate id in model output."""
        return "alumniId" if self is MatchMode.alumni_mentor else "jobId"

    @property
    def reasons_key(self) -> str:
        return "reasons" if self is MatchMode.alumni_mentor else "matchReasons"

    def clamp(self, value: Any) -> Union[int, float]:
        """Clamp a raw score into range. Non-numeric input becomes the minimum."""
        try:
            number = float(value)
        except OverflowError:
            # ints beyond float range
            number = float(self.score_max) if value > 0 else float(self.score_min)
        except (TypeError, ValueError):
            number = float(self.score_min)
        if number != number:  # NaN
            number = float(self.score_min)
        number = min(max(number, self.score_min), self.score_max)
        if self.integer_scores:
            return round_half_up(number)
        return number


class ScoreSource(str, Enum):
    ai = "ai"
    fallback = "fallback"


class SessionStatus(str, Enum):
    requested = "requested"
    accepted = "accepted"
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


# ============================================================
# MATCHING SCHEMAS
# ============================================================

class SubjectProfile(BaseModel):
    """Student or resume being matched. Read-only snapshot."""
    model_config = ConfigDict(frozen=True)

    id: str
    skills: List[str] = Field(default_factory=list)
    career_goals: str = ""
    domain: str = ""
    gpa: Optional[float] = None
    projects: List[str] = Field(default_factory=list)
    internships: List[str] = Field(default_factory=list)
    name: str = ""
    branch: str = ""
    batch: str = ""
    total_experience: str = ""
    match_keywords: List[str] = Field(default_factory=list)


class CandidateProfile(BaseModel):
    """Alumni mentor or job posting being scored against the subject."""
    model_config = ConfigDict(frozen=True)

    id: str
    skills: List[str] = Field(default_factory=list)
    required_skills: List[str] = Field(default_factory=list)
    preferred_skills: List[str] = Field(default_factory=list)
    role: str = ""
    description: str = ""
    domains: List[str] = Field(default_factory=list)
    experience: str = ""
    total_experience: str = ""
    match_keywords: List[str] = Field(default_factory=list)


class WeightConfig(BaseModel):
    """Scoring weights. Defaults reproduce the 50/20/15/15 job rubric."""
    model_config = ConfigDict(frozen=True)

    required_weight: float = Field(50, ge=0, le=100)
    preferred_weight: float = Field(20, ge=0, le=100)
    experience_weight: float = Field(15, ge=0, le=100)
    academic_weight: float = Field(15, ge=0, le=100)


class JobMatchContext(BaseModel):
    """Job-wide details shared by every job candidate (defaults for missing skill lists)."""
    model_config = ConfigDict(frozen=True)

    job_description: str = ""
    required_skills: List[str] = Field(default_factory=list)
    preferred_skills: List[str] = Field(default_factory=list)


class MatchResult(BaseModel):
    candidate_id: str
    score: Union[int, float]
    reasons: List[str] = Field(default_factory=list)
    skill_overlap: List[str] = Field(default_factory=list)
    domain_overlap: List[str] = Field(default_factory=list)
    skill_gaps: List[str] = Field(default_factory=list)
    source: ScoreSource = ScoreSource.ai


# ============================================================
# RESUME SCHEMAS
# ============================================================

class ATSAnalysis(BaseModel):
    ats_score: int = Field(0, ge=0, le=100)
    missing_skills: List[str] = Field(default_factory=list)
    improvement_suggestions: List[str] = Field(default_factory=list)
    strength_areas: List[str] = Field(default_factory=list)


class ResumeJDMatch(BaseModel):
    match_score: float = Field(0.0, ge=0, le=1)
    reasons: List[str] = Field(default_factory=list)
    source: ScoreSource = ScoreSource.ai


class ATSRequest(BaseModel):
    parsed_resume: Dict[str, Any]
    target_role: Optional[str] = None


class JDMatchRequest(BaseModel):
    parsed_resume: Dict[str, Any]
    job_description: str = Field(..., min_length=1)


class KeywordsRequest(BaseModel):
    parsed_resume: Dict[str, Any]


class KeywordsResponse(BaseModel):
    keywords: List[str]


class ParsedResumeResponse(BaseModel):
    parsed_resume: Dict[str, Any]
    subject: SubjectProfile


# ============================================================
# MATCH API SCHEMAS
# ============================================================

class MatchPreviewRequest(BaseModel):
    subject: Dict[str, Any]
    candidates: List[Dict[str, Any]] = Field(default_factory=list)
    mode: MatchMode = MatchMode.alumni_mentor
    weights: Optional[WeightConfig] = None
    context: Optional[JobMatchContext] = None


class AlumniMatchRequest(BaseModel):
    candidates: Optional[List[Dict[str, Any]]] = None
    limit: int = Field(20, ge=1, le=100)


class StudentJobsMatchRequest(BaseModel):
    jobs: Optional[List[Dict[str, Any]]] = None
    weights: Optional[WeightConfig] = None
    context: Optional[JobMatchContext] = None
    limit: int = Field(50, ge=1, le=200)


class JobStudentsMatchRequest(BaseModel):
    students: Optional[List[Dict[str, Any]]] = None
    weights: Optional[WeightConfig] = None


class MatchListResponse(BaseModel):
    mode: MatchMode
    results: List[MatchResult]
    total: int


# ============================================================
# ALUMNI DIRECTORY SCHEMAS
# ============================================================

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class AlumniListResponse(BaseModel):
    data: List[Dict[str, Any]]
    pagination: Pagination


class CountBucket(BaseModel):
    key: Optional[str] = None
    count: int


class AlumniStatsResponse(BaseModel):
    total: int
    by_course: List[CountBucket]
    by_batch: List[CountBucket]
    top_cities: List[CountBucket]


# ============================================================
# MENTORSHIP SCHEMAS
# ============================================================

class StudentFeedbackRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    usefulness: int = Field(..., ge=1, le=5)
    clarity: int = Field(..., ge=1, le=5)
    comments: str = ""


class MentorMetrics(BaseModel):
    alumni_id: str
    sessions_completed: int
    average_rating: float
    impact_score: float


class SessionRequest(BaseModel):
    """Student asks a mentor for a session slot."""
    alumni_id: str = Field(..., min_length=1)
    session_type: str = Field(..., min_length=1)
    scheduled_date: date
    start_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    agenda: str = ""


class SessionAcceptRequest(BaseModel):
    meeting_link: str = ""


class SessionCompleteRequest(BaseModel):
    notes: str = ""


class AlumniFeedbackRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    preparedness: int = Field(..., ge=1, le=5)
    engagement: int = Field(..., ge=1, le=5)
    comments: str = ""


class SessionResponse(BaseModel):
    message: str
    success: bool = True
    session: Dict[str, Any]


class SessionListResponse(BaseModel):
    sessions: List[Dict[str, Any]]
    total: int


class RatingCount(BaseModel):
    rating: int
    count: int


class FeedbackSummaryResponse(BaseModel):
    total_feedbacks: int
    total_alumni_feedbacks: int
    average_rating: float
    average_usefulness: float
    average_clarity: float
    average_preparedness: float
    average_engagement: float
    rating_distribution: List[RatingCount]


class DomainCount(BaseModel):
    domain: str
    count: int


class PopularDomainsResponse(BaseModel):
    student_preferences: List[DomainCount]
    alumni_expertise: List[DomainCount]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
