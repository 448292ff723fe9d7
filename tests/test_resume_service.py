"""Tests for ATS analysis, resume/JD matching and keyword extraction."""
import pytest

from resumate.core.exceptions import ExternalServiceFailure
from resumate.schemas.schemas import ScoreSource
from resumate.services.resume_service import ResumeIntelligenceService


@pytest.fixture
def parsed_resume():
    return {
        "UseID": "u1",
        "Name": "Asha",
        "skill keyword": ["Python", "Docker", "Kubernetes", "python"],
        "Domain": "Cloud",
        "Branch": "CSE",
    }


class TestAnalyzeAts:
    """Tests for analyze_ats."""

    def test_parses_fenced_object(self, make_client, parsed_resume):
        client = make_client(response=(
            '```json\n{"atsScore": 120, "missingSkills": ["Terraform"], '
            '"improvementSuggestions": null, "strengthAreas": ["Containers"]}\n```'
        ))
        analysis = ResumeIntelligenceService(client).analyze_ats(parsed_resume, "DevOps Engineer")

        assert analysis.ats_score == 100
        assert analysis.missing_skills == ["Terraform"]
        assert analysis.improvement_suggestions == []
        assert analysis.strength_areas == ["Containers"]

    def test_huge_integer_score_clamped(self, make_client, parsed_resume):
        client = make_client(response='{"atsScore": 1' + "0" * 400 + "}")
        analysis = ResumeIntelligenceService(client).analyze_ats(parsed_resume)

        assert analysis.ats_score == 100

    def test_provider_failure_gives_empty_analysis(self, make_client, parsed_resume):
        client = make_client(side_effect=ExternalServiceFailure("groq", "HTTP 500"))
        analysis = ResumeIntelligenceService(client).analyze_ats(parsed_resume)

        assert analysis.ats_score == 0
        assert analysis.missing_skills == []


class TestMatchResumeToJd:
    """Tests for match_resume_to_jd."""

    def test_ai_score_clamped(self, make_client, parsed_resume):
        client = make_client(response='{"matchScore": 1.7, "reasons": ["Strong cloud skills"]}')
        match = ResumeIntelligenceService(client).match_resume_to_jd(parsed_resume, "Cloud role")

        assert match.match_score == 1.0
        assert match.reasons == ["Strong cloud skills"]
        assert match.source == ScoreSource.ai

    def test_huge_negative_score_clamped(self, make_client, parsed_resume):
        client = make_client(response='{"matchScore": -1' + "0" * 400 + "}")
        match = ResumeIntelligenceService(client).match_resume_to_jd(parsed_resume, "Cloud role")

        assert match.match_score == 0.0

    def test_keyword_coverage_fallback(self, make_client, parsed_resume):
        client = make_client(response="Sorry, no.")
        match = ResumeIntelligenceService(client).match_resume_to_jd(
            parsed_resume, "We need Python and Docker experience"
        )

        assert match.match_score == 0.67
        assert match.source == ScoreSource.fallback
        assert match.reasons == ["Mentions 2/3 resume skills", "Matched skills: Python, Docker"]

    def test_no_skills(self):
        match = ResumeIntelligenceService.keyword_coverage({}, "Anything")

        assert match.match_score == 0.0
        assert match.reasons == ["No skills found in resume"]


class TestExtractEnhancedKeywords:
    """Tests for extract_enhanced_keywords."""

    def test_ai_keywords(self, make_client, parsed_resume):
        client = make_client(response='{"keywords": ["Cloud Native", "Python", "python"]}')

        assert ResumeIntelligenceService(client).extract_enhanced_keywords(parsed_resume) == [
            "Cloud Native", "Python"
        ]

    def test_fallback_keywords(self, make_client, parsed_resume):
        client = make_client(side_effect=ExternalServiceFailure("groq", "request timed out"))

        assert ResumeIntelligenceService(client).extract_enhanced_keywords(parsed_resume) == [
            "Python", "Docker", "Kubernetes", "Cloud", "CSE"
        ]

    def test_empty_keyword_list_uses_fallback(self, make_client):
        client = make_client(response='{"keywords": []}')
        keywords = ResumeIntelligenceService(client).extract_enhanced_keywords(
            {"skill keyword": ["Go"], "Domain": "", "Branch": None}
        )

        assert keywords == ["Go"]
