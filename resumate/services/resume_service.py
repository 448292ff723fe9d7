"""
Resume Intelligence Service - ATS analysis, resume/JD matching, keyword extraction.

Input is always the structured resume produced by the n8n parser;
this service never parses raw files itself.

Every operation degrades instead of failing:
- ATS analysis      -> zero analysis
- resume/JD match   -> share of resume skills mentioned in the JD
- keyword extraction -> skills + domain + branch
"""

import logging
from typing import Any, Dict, List, Optional

from resumate.core.exceptions import ExternalServiceFailure, MalformedResponse
from resumate.schemas.schemas import ATSAnalysis, ResumeJDMatch, ScoreSource, round_half_up
from resumate.services import prompts
from resumate.services.llm_client import TextGenerationClient
from resumate.services.response_parser import as_string_list, extract_json

logger = logging.getLogger(__name__)


def _clamp(value: Any, low: float, high: float) -> float:
    try:
        number = float(value)
    except OverflowError:
        return high if value > 0 else low
    except (TypeError, ValueError):
        return low
    if number != number:
        return low
    return min(max(number, low), high)


def _unique_keywords(values: List[str]) -> List[str]:
    """Drop blanks and case-insensitive duplicates, keeping first casing."""
    seen = set()
    result = []
    for value in values:
        value = str(value).strip()
        if value and value.lower() not in seen:
            seen.add(value.lower())
            result.append(value)
    return result


def resume_skills(parsed_resume: Dict[str, Any]) -> List[str]:
    return as_string_list(parsed_resume.get("skill keyword") or parsed_resume.get("skills"))


class ResumeIntelligenceService:
    """
    AI-assisted resume insights on top of n8n parsed data.
    """

    def __init__(self, ai_client: TextGenerationClient):
        self.ai_client = ai_client

    def analyze_ats(
        self,
        parsed_resume: Dict[str, Any],
        target_role: Optional[str] = None
    ) -> ATSAnalysis:
        """
        ATS score (0-100) with missing skills and suggestions.
        Returns an all-zero analysis if the provider fails.
        """
        logger.info("Performing ATS analysis")
        try:
            response = self.ai_client.complete(
                prompts.build_ats_prompt(parsed_resume, target_role),
                max_tokens=2048
            )
            data = extract_json(response, expect="object")
        except (ExternalServiceFailure, MalformedResponse) as e:
            logger.warning("ATS analysis failed: %s", e)
            return ATSAnalysis()

        if not isinstance(data, dict):
            return ATSAnalysis()

        analysis = ATSAnalysis(
            ats_score=round_half_up(_clamp(data.get("atsScore"), 0, 100)),
            missing_skills=as_string_list(data.get("missingSkills")),
            improvement_suggestions=as_string_list(data.get("improvementSuggestions")),
            strength_areas=as_string_list(data.get("strengthAreas")),
        )
        logger.info("ATS analysis complete: score %d", analysis.ats_score)
        return analysis

    def match_resume_to_jd(
        self,
        parsed_resume: Dict[str, Any],
        job_description: str
    ) -> ResumeJDMatch:
        """
        Match score (0.0-1.0) of a resume against a free-text JD.
        Falls back to keyword coverage if the provider fails.
        """
        logger.info("Matching resume to job description")
        try:
            response = self.ai_client.complete(
                prompts.build_resume_jd_prompt(parsed_resume, job_description),
                max_tokens=1024
            )
            data = extract_json(response, expect="object")
            if not isinstance(data, dict):
                raise MalformedResponse("expected a JSON object", raw_text=response)
        except (ExternalServiceFailure, MalformedResponse) as e:
            logger.warning("JD matching failed, using keyword coverage: %s", e)
            return self.keyword_coverage(parsed_resume, job_description)

        return ResumeJDMatch(
            match_score=_clamp(data.get("matchScore"), 0.0, 1.0),
            reasons=as_string_list(data.get("reasons")),
            source=ScoreSource.ai,
        )

    @staticmethod
    def keyword_coverage(parsed_resume: Dict[str, Any], job_description: str) -> ResumeJDMatch:
        """Share of resume skills that appear in the JD text."""
        skills = _unique_keywords(resume_skills(parsed_resume))
        if not skills:
            return ResumeJDMatch(
                match_score=0.0,
                reasons=["No skills found in resume"],
                source=ScoreSource.fallback,
            )

        jd_text = job_description.lower()
        found = [skill for skill in skills if skill.lower() in jd_text]
        reasons = [f"Mentions {len(found)}/{len(skills)} resume skills"]
        if found:
            reasons.append(f"Matched skills: {', '.join(found)}")

        return ResumeJDMatch(
            match_score=round(len(found) / len(skills), 2),
            reasons=reasons,
            source=ScoreSource.fallback,
        )

    def extract_enhanced_keywords(self, parsed_resume: Dict[str, Any]) -> List[str]:
        """
        Keywords for matching, inferred from skills, projects and goals.
        Falls back to skills + domain + branch.
        """
        logger.info("Extracting enhanced keywords from resume")
        try:
            response = self.ai_client.complete(
                prompts.build_keywords_prompt(parsed_resume),
                max_tokens=2048
            )
            data = extract_json(response, expect="object")
            keywords = as_string_list(data.get("keywords")) if isinstance(data, dict) else []
        except (ExternalServiceFailure, MalformedResponse) as e:
            logger.warning("Keyword extraction failed: %s", e)
            keywords = []

        if not keywords:
            keywords = resume_skills(parsed_resume) + [
                str(parsed_resume.get("Domain") or ""),
                str(parsed_resume.get("Branch") or ""),
            ]

        keywords = _unique_keywords(keywords)
        logger.info("Extracted %d keywords", len(keywords))
        return keywords
