"""
Service dependencies for route handlers.

The AI client is built once per process from Settings and injected into
every service that needs it. Tests override these with
app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends

from resumate.core.config import Settings, get_settings
from resumate.services.llm_client import TextGenerationClient
from resumate.services.matching_service import MatchingService
from resumate.services.mentorship_service import MentorMetricsService, MentorshipStatsService
from resumate.services.mongo_service import (
    AlumniDirectoryService,
    JobPostingService,
    MentorProfileService,
    SessionService,
    StudentProfileService,
)
from resumate.services.n8n_client import N8nClient
from resumate.services.resume_service import ResumeIntelligenceService


@lru_cache()
def get_text_client() -> TextGenerationClient:
    return TextGenerationClient(get_settings())


def get_matching_service(
    client: TextGenerationClient = Depends(get_text_client)
) -> MatchingService:
    return MatchingService(client)


def get_resume_service(
    client: TextGenerationClient = Depends(get_text_client)
) -> ResumeIntelligenceService:
    return ResumeIntelligenceService(client)


def get_n8n_client(settings: Settings = Depends(get_settings)) -> N8nClient:
    return N8nClient(settings)


def get_alumni_directory() -> AlumniDirectoryService:
    return AlumniDirectoryService()


def get_mentor_profiles() -> MentorProfileService:
    return MentorProfileService()


def get_student_profiles() -> StudentProfileService:
    return StudentProfileService()


def get_job_postings() -> JobPostingService:
    return JobPostingService()


def get_mentor_metrics() -> MentorMetricsService:
    return MentorMetricsService()


def get_sessions() -> SessionService:
    return SessionService()


def get_mentorship_stats() -> MentorshipStatsService:
    return MentorshipStatsService()
