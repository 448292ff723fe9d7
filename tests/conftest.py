"""Pytest fixtures for ResuMate tests."""
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from resumate.core.config import Settings
from resumate.schemas.schemas import CandidateProfile, SubjectProfile
from resumate.services.llm_client import TextGenerationClient


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's .env and API keys."""
    values = {
        "ai_provider": "auto",
        "anthropic_api_key": "",
        "groq_api_key": "",
        "deepseek_api_key": "",
        "n8n_resume_parse_webhook": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_ai_client(response=None, side_effect=None, configured=True):
    """Mock TextGenerationClient returning a canned response."""
    client = MagicMock(spec=TextGenerationClient)
    client.is_configured = configured
    client.provider = "anthropic" if configured else "none"
    client.complete.return_value = response
    client.complete.side_effect = side_effect
    return client


# =============================================================================
# PROFILE FIXTURES
# =============================================================================


@pytest.fixture
def student():
    """Student from the job-mode fallback scenario."""
    return SubjectProfile(
        id="stu-1",
        skills=["React", "Node.js"],
        gpa=8.5,
        projects=["Campus marketplace app"],
        career_goals="Become a backend engineer at a product company",
        domain="Backend",
    )


@pytest.fixture
def mentor_subject():
    return SubjectProfile(
        id="stu-2",
        skills=["Python", "React", "SQL"],
        domain="Backend",
        career_goals="Become a backend engineer at a product company",
    )


@pytest.fixture
def alumni_candidates():
    return [
        CandidateProfile(
            id="al-weak",
            skills=["Java"],
            domains=["Finance"],
            role="Analyst",
        ),
        CandidateProfile(
            id="al-strong",
            skills=["Python", "SQL"],
            domains=["Backend"],
            role="Senior Backend Engineer",
            experience="5 years at Acme",
        ),
    ]


@pytest.fixture
def job_candidates():
    return [
        CandidateProfile(
            id="job-1",
            role="Full Stack Developer",
            required_skills=["React", "Node.js", "Docker"],
            preferred_skills=["AWS"],
        ),
        CandidateProfile(
            id="job-2",
            role="Data Engineer",
            required_skills=["Spark", "Airflow"],
        ),
    ]


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def make_client():
    """Factory for mock AI clients: make_client(response=..., side_effect=..., configured=...)."""
    return make_ai_client


@pytest.fixture
def settings_factory():
    """Factory for isolated Settings: settings_factory(groq_api_key="k", ...)."""
    return make_settings
