"""
Matching Service

PURPOSE:
Rank candidates for a subject profile:
- student -> alumni mentors (scores 0.0-1.0)
- student -> job postings (scores 0-100)
- job posting -> students (scores 0-100)

HOW IT WORKS:
1. Caller passes normalized profiles and an explicit MatchMode
2. One prompt listing every candidate goes to the AI provider
3. The response is parsed and clamped (response_parser)
4. Provider down, timeout, or unparseable reply -> fallback_scorer
5. Candidates the model skipped are filled from the fallback
6. Results sorted by score descending (stable)

GUARANTEE:
Callers only ever see a sorted list with one result per candidate,
or InvalidProfile. Provider failures never escape this module.
"""

import logging
from typing import Callable, List, Optional, Sequence

from resumate.core.exceptions import ExternalServiceFailure, InvalidProfile, MalformedResponse
from resumate.schemas.schemas import (
    CandidateProfile,
    JobMatchContext,
    MatchMode,
    MatchResult,
    SubjectProfile,
    WeightConfig,
)
from resumate.services import fallback_scorer, prompts
from resumate.services.llm_client import TextGenerationClient
from resumate.services.response_parser import parse_match_response

logger = logging.getLogger(__name__)


def _require_id(profile) -> None:
    if profile is None or not getattr(profile, "id", "") or not str(profile.id).strip():
        raise InvalidProfile("Profile is missing its identifier")


def merge_results(
    expected_ids: Sequence[str],
    ai_results: List[MatchResult],
    fallback: Callable[[], List[MatchResult]],
) -> List[MatchResult]:
    """
    Keep exactly one result per expected id, in input order, then sort.

    Unknown ids and duplicates from the model are dropped. Missing ids
    are filled from the fallback scorer (computed only when needed).
    """
    wanted = set(expected_ids)
    by_id = {}
    for result in ai_results:
        if result.candidate_id in wanted and result.candidate_id not in by_id:
            by_id[result.candidate_id] = result

    missing = [cid for cid in expected_ids if cid not in by_id]
    if missing:
        logger.info("AI response skipped %d candidates, filling from fallback", len(missing))
        for result in fallback():
            if result.candidate_id in missing and result.candidate_id not in by_id:
                by_id[result.candidate_id] = result

    ordered = [by_id[cid] for cid in expected_ids]
    return fallback_scorer.sort_results(ordered)


class MatchingService:
    """
    Orchestrates AI scoring with rule-based fallback.
    """

    def __init__(self, ai_client: TextGenerationClient):
        self.ai_client = ai_client

    # ------------------------------------------------------------
    # Prompt-based scorer
    # ------------------------------------------------------------

    def score_with_ai(
        self,
        subject: SubjectProfile,
        candidates: Sequence[CandidateProfile],
        mode: MatchMode,
        weights: WeightConfig,
        context: Optional[JobMatchContext] = None,
    ) -> List[MatchResult]:
        """
        Single blocking call to the AI provider. No retries.

        Raises:
            ExternalServiceFailure, MalformedResponse
        """
        if not candidates:
            return []

        if mode is MatchMode.alumni_mentor:
            prompt = prompts.build_alumni_matching_prompt(subject, candidates)
        else:
            prompt = prompts.build_job_matching_prompt(subject, candidates, weights, context)

        response_text = self.ai_client.complete(prompt)
        return parse_match_response(response_text, mode)

    # ------------------------------------------------------------
    # Orchestrator
    # ------------------------------------------------------------

    def match_candidates(
        self,
        subject: SubjectProfile,
        candidates: Sequence[CandidateProfile],
        mode: MatchMode,
        weights: Optional[WeightConfig] = None,
        context: Optional[JobMatchContext] = None,
    ) -> List[MatchResult]:
        """
        Rank candidates for a subject.

        Args:
            subject: Student / resume profile
            candidates: Alumni mentors or job postings
            mode: Which pairing is being scored
            weights: Rubric weights (defaults 50/20/15/15)
            context: Job-wide skill lists for job mode

        Returns:
            One MatchResult per candidate, score descending

        Raises:
            InvalidProfile if the subject or a candidate has no id
        """
        _require_id(subject)
        for candidate in candidates:
            _require_id(candidate)

        if not candidates:
            return []

        weights = weights or WeightConfig()

        def run_fallback() -> List[MatchResult]:
            return fallback_scorer.fallback_match(subject, candidates, mode, weights, context)

        if not self.ai_client.is_configured:
            logger.info("Using rule-based fallback scoring for %d candidates", len(candidates))
            return run_fallback()

        logger.info(
            "Matching %s with %d candidates (%s) using %s",
            subject.id, len(candidates), mode.value, self.ai_client.provider
        )
        try:
            ai_results = self.score_with_ai(subject, candidates, mode, weights, context)
        except (ExternalServiceFailure, MalformedResponse) as e:
            logger.warning("AI matching failed, using fallback scoring: %s", e)
            return run_fallback()

        return merge_results([c.id for c in candidates], ai_results, run_fallback)

    def rank_students_for_job(
        self,
        job: CandidateProfile,
        students: Sequence[SubjectProfile],
        weights: Optional[WeightConfig] = None,
    ) -> List[MatchResult]:
        """
        Rank students for one job posting. Results carry student ids.

        Raises:
            InvalidProfile if the job or a student has no id
        """
        _require_id(job)
        for student in students:
            _require_id(student)

        if not students:
            return []

        weights = weights or WeightConfig()
        required, preferred = fallback_scorer.job_skill_lists(job)

        def run_fallback() -> List[MatchResult]:
            return fallback_scorer.rank_students_for_job(students, required, preferred, weights)

        if not self.ai_client.is_configured:
            return run_fallback()

        logger.info("Matching %d students to job %s", len(students), job.id)
        prompt = prompts.build_students_for_job_prompt(
            job.description, required, preferred, students, weights
        )
        try:
            response_text = self.ai_client.complete(prompt)
            ai_results = parse_match_response(response_text, MatchMode.job_posting, id_key="studentId")
        except (ExternalServiceFailure, MalformedResponse) as e:
            logger.warning("Student-job matching failed, using fallback scoring: %s", e)
            return run_fallback()

        return merge_results([s.id for s in students], ai_results, run_fallback)
