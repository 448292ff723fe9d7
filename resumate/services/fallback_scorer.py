"""
Fallback Scorer - rule-based matching used when no AI provider answers.

Pure functions only: no I/O, no randomness, no clock. The same input
always gives the same output, which is what lets matching stay
available while the AI provider is down.

JOB MODE (0-100, integer):
    required skills matched / required   * required_weight   (50)
    preferred skills matched / preferred * preferred_weight  (20)
    any project or internship            + experience_weight (15)
    GPA >= 8 / >= 7 / >= 6 (10-pt scale) + academic_weight * 1, 2/3, 1/3

ALUMNI MODE (0.0-1.0):
    skill overlap 40%, domain overlap 30%, career alignment 20%,
    experience seniority 10%
"""

import re
from typing import Iterable, List, Optional, Sequence

from resumate.schemas.schemas import (
    CandidateProfile,
    JobMatchContext,
    MatchMode,
    MatchResult,
    ScoreSource,
    SubjectProfile,
    WeightConfig,
    round_half_up,
)


PLACEHOLDER_REASON = "Profile available for review"

ALUMNI_SKILL_WEIGHT = 0.4
ALUMNI_DOMAIN_WEIGHT = 0.3
ALUMNI_CAREER_WEIGHT = 0.2
ALUMNI_SENIORITY_WEIGHT = 0.1

_WORD = re.compile(r"[a-z0-9+#.]+")


def _lower_unique(values: Iterable[str]) -> List[str]:
    """Lower-case and de-duplicate, keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        key = value.strip().lower()
        if key and key not in seen:
            seen.add(key)
            result.append(key)
    return result


def sort_results(results: List[MatchResult]) -> List[MatchResult]:
    """Descending by score; ties keep input order."""
    return sorted(results, key=lambda r: r.score, reverse=True)


# ============================================================
# JOB MODE
# ============================================================

def gpa_bonus(gpa: Optional[float], academic_weight: float) -> float:
    if gpa is None:
        return 0.0
    if gpa >= 8.0:
        return academic_weight
    if gpa >= 7.0:
        return academic_weight * 2 / 3
    if gpa >= 6.0:
        return academic_weight / 3
    return 0.0


def score_job_pair(
    subject: SubjectProfile,
    result_id: str,
    required_skills: Sequence[str],
    preferred_skills: Sequence[str],
    weights: Optional[WeightConfig] = None,
) -> MatchResult:
    """
    Score one student against one job's required/preferred skills.

    result_id is the id reported on the MatchResult: the job id when a
    student is matched to jobs, the student id when students are ranked
    for a job.
    """
    weights = weights or WeightConfig()

    student_skills = set(_lower_unique(subject.skills))
    required = _lower_unique(required_skills)
    preferred = _lower_unique(preferred_skills)

    required_matches = [skill for skill in required if skill in student_skills]
    preferred_matches = [skill for skill in preferred if skill in student_skills]
    skill_matches = [
        skill for skill in subject.skills
        if skill.lower() in required or skill.lower() in preferred
    ]

    reasons = []
    score = 0.0

    if required:
        contribution = len(required_matches) / len(required) * weights.required_weight
        score += contribution
        if contribution > 0:
            reasons.append(f"Matches {len(required_matches)}/{len(required)} required skills")

    if preferred:
        contribution = len(preferred_matches) / len(preferred) * weights.preferred_weight
        score += contribution
        if contribution > 0:
            reasons.append(f"Has {len(preferred_matches)} preferred skills")

    if (subject.projects or subject.internships) and weights.experience_weight > 0:
        score += weights.experience_weight
        experience = []
        if subject.projects:
            experience.append(f"{len(subject.projects)} relevant projects")
        if subject.internships:
            experience.append(f"{len(subject.internships)} internships")
        reasons.append(" and ".join(experience))

    bonus = gpa_bonus(subject.gpa, weights.academic_weight)
    if bonus > 0:
        score += bonus
        if subject.gpa >= 8.0:
            reasons.append(f"Strong academic performance ({subject.gpa:g} CGPA)")
        elif subject.gpa >= 7.0:
            reasons.append(f"Good academic performance ({subject.gpa:g} CGPA)")
        else:
            reasons.append(f"Fair academic performance ({subject.gpa:g} CGPA)")

    return MatchResult(
        candidate_id=result_id,
        score=round_half_up(score),
        reasons=reasons or [PLACEHOLDER_REASON],
        skill_overlap=skill_matches,
        skill_gaps=[skill for skill in required if skill not in student_skills],
        source=ScoreSource.fallback,
    )


def job_skill_lists(candidate: CandidateProfile, context: Optional[JobMatchContext] = None):
    """
    Required and preferred lists for a job candidate.

    The posting's own lists win; context lists fill in when the posting
    has none. A posting with plain keywords and no split treats them all
    as required.
    """
    required = list(candidate.required_skills)
    preferred = list(candidate.preferred_skills)
    if context is not None:
        required = required or list(context.required_skills)
        preferred = preferred or list(context.preferred_skills)
    if not required and not preferred:
        required = list(candidate.skills)
    return required, preferred


def score_job_candidates(
    subject: SubjectProfile,
    candidates: Sequence[CandidateProfile],
    weights: Optional[WeightConfig] = None,
    context: Optional[JobMatchContext] = None,
) -> List[MatchResult]:
    results = []
    for candidate in candidates:
        required, preferred = job_skill_lists(candidate, context)
        results.append(score_job_pair(subject, candidate.id, required, preferred, weights))
    return sort_results(results)


def rank_students_for_job(
    students: Sequence[SubjectProfile],
    required_skills: Sequence[str],
    preferred_skills: Sequence[str],
    weights: Optional[WeightConfig] = None,
) -> List[MatchResult]:
    """Rank many students for one job posting. Results carry student ids."""
    results = [
        score_job_pair(student, student.id, required_skills, preferred_skills, weights)
        for student in students
    ]
    return sort_results(results)


# ============================================================
# ALUMNI MODE
# ============================================================

def _words(text: str) -> set:
    return {word for word in _WORD.findall(text.lower()) if len(word) >= 4}


def score_alumni_pair(subject: SubjectProfile, candidate: CandidateProfile) -> MatchResult:
    alumni_terms = set(_lower_unique(list(candidate.skills) + list(candidate.match_keywords)))
    skill_overlap = []
    seen = set()
    for skill in subject.skills:
        key = skill.lower()
        if key in alumni_terms and key not in seen:
            seen.add(key)
            skill_overlap.append(skill)

    interest_terms = set(_lower_unique([subject.domain] + list(subject.match_keywords)))
    domain_overlap = []
    for domain in candidate.domains:
        key = domain.lower()
        if key in interest_terms or (subject.domain and (
                key in subject.domain.lower() or subject.domain.lower() in key)):
            domain_overlap.append(domain)

    reasons = []
    score = 0.0

    student_skill_count = len(_lower_unique(subject.skills))
    if student_skill_count and skill_overlap:
        score += len(skill_overlap) / student_skill_count * ALUMNI_SKILL_WEIGHT
        reasons.append(f"Shared skills: {', '.join(skill_overlap)}")

    if domain_overlap:
        score += ALUMNI_DOMAIN_WEIGHT
        reasons.append(f"Expertise in {', '.join(domain_overlap)}")

    goal_words = _words(f"{subject.career_goals} {subject.domain}")
    alumni_text = " ".join([candidate.role, candidate.description] + list(candidate.domains))
    if goal_words and goal_words & _words(alumni_text):
        score += ALUMNI_CAREER_WEIGHT
        reasons.append("Career path aligns with stated goals")

    if candidate.experience or candidate.total_experience:
        score += ALUMNI_SENIORITY_WEIGHT
        reasons.append("Has industry experience to mentor from")

    return MatchResult(
        candidate_id=candidate.id,
        score=MatchMode.alumni_mentor.clamp(round(score, 2)),
        reasons=reasons or [PLACEHOLDER_REASON],
        skill_overlap=skill_overlap,
        domain_overlap=domain_overlap,
        source=ScoreSource.fallback,
    )


def score_alumni_candidates(
    subject: SubjectProfile,
    candidates: Sequence[CandidateProfile],
) -> List[MatchResult]:
    return sort_results([score_alumni_pair(subject, candidate) for candidate in candidates])


def fallback_match(
    subject: SubjectProfile,
    candidates: Sequence[CandidateProfile],
    mode: MatchMode,
    weights: Optional[WeightConfig] = None,
    context: Optional[JobMatchContext] = None,
) -> List[MatchResult]:
    """Rule-based scores for every candidate, sorted descending."""
    if mode is MatchMode.job_posting:
        return score_job_candidates(subject, candidates, weights, context)
    return score_alumni_candidates(subject, candidates)
