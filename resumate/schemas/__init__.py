"""
Schemas module - matching types plus request/response schemas for API endpoints.
"""
from resumate.schemas.schemas import (
    MatchMode,
    SubjectProfile,
    CandidateProfile,
    WeightConfig,
    JobMatchContext,
    MatchResult,
    ScoreSource,
)

__all__ = [
    "MatchMode",
    "SubjectProfile",
    "CandidateProfile",
    "WeightConfig",
    "JobMatchContext",
    "MatchResult",
    "ScoreSource",
]
