"""Tests for rule-based fallback scoring."""
import pytest

from resumate.schemas.schemas import (
    CandidateProfile,
    JobMatchContext,
    MatchMode,
    ScoreSource,
    SubjectProfile,
    WeightConfig,
)
from resumate.services.fallback_scorer import (
    PLACEHOLDER_REASON,
    fallback_match,
    gpa_bonus,
    job_skill_lists,
    rank_students_for_job,
    round_half_up,
    score_alumni_pair,
    score_job_pair,
)


class TestRoundHalfUp:
    """Scores round half up, not to even."""

    @pytest.mark.parametrize("value,expected", [
        (12.5, 13),
        (63.33, 63),
        (62.5, 63),
        (0.49, 0),
        (100.0, 100),
    ])
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected

    def test_model_scores_use_same_rounding(self):
        assert MatchMode.job_posting.clamp(62.5) == 63
        assert MatchMode.job_posting.clamp(12.5) == 13


class TestGpaBonus:
    """Tests for GPA tiers on a 10-point scale."""

    @pytest.mark.parametrize("gpa,expected", [
        (9.1, 15),
        (8.0, 15),
        (7.5, 10),
        (6.2, 5),
        (5.9, 0),
        (None, 0),
    ])
    def test_tiers(self, gpa, expected):
        assert gpa_bonus(gpa, 15) == pytest.approx(expected)


class TestScoreJobPair:
    """Tests for the weighted job rubric."""

    def test_reference_scenario(self, student):
        """2/3 required, 0/1 preferred, a project and GPA 8.5 gives 63."""
        result = score_job_pair(student, "job-1", ["React", "Node.js", "Docker"], ["AWS"])

        assert result.score == 63
        assert result.skill_gaps == ["docker"]
        assert result.skill_overlap == ["React", "Node.js"]
        assert result.source == ScoreSource.fallback
        assert result.reasons == [
            "Matches 2/3 required skills",
            "1 relevant projects",
            "Strong academic performance (8.5 CGPA)",
        ]

    def test_case_insensitive_matching(self):
        subject = SubjectProfile(id="s", skills=["react", "NODE.JS"])
        result = score_job_pair(subject, "j", ["React", "Node.js"], [])

        assert result.score == 50
        assert result.skill_gaps == []

    def test_custom_weights(self, student):
        weights = WeightConfig(
            required_weight=80, preferred_weight=0, experience_weight=10, academic_weight=10
        )
        result = score_job_pair(student, "job-1", ["React", "Node.js", "Docker"], ["AWS"], weights)

        assert result.score == 73

    def test_half_point_rounds_up(self):
        subject = SubjectProfile(id="s", skills=["Go"])
        result = score_job_pair(subject, "j", ["Go", "Rust", "C", "Zig"], [])

        assert result.score == 13

    def test_placeholder_reason_when_nothing_contributes(self):
        subject = SubjectProfile(id="s")
        result = score_job_pair(subject, "j", ["Go"], [])

        assert result.score == 0
        assert result.reasons == [PLACEHOLDER_REASON]
        assert result.skill_gaps == ["go"]

    def test_internships_count_as_experience(self):
        subject = SubjectProfile(id="s", internships=["Acme"], gpa=6.5)
        result = score_job_pair(subject, "j", [], [])

        assert result.score == 20
        assert result.reasons == ["1 internships", "Fair academic performance (6.5 CGPA)"]

    def test_one_experience_reason_for_projects_and_internships(self):
        subject = SubjectProfile(id="s", projects=["Ledger", "Chat"], internships=["Acme"])
        result = score_job_pair(subject, "j", [], [])

        assert result.score == 15
        assert result.reasons == ["2 relevant projects and 1 internships"]

    def test_duplicate_skills_counted_once(self):
        subject = SubjectProfile(id="s", skills=["React"])
        result = score_job_pair(subject, "j", ["React", "react", "Docker"], [])

        assert result.score == 25
        assert result.reasons == ["Matches 1/2 required skills"]

    def test_deterministic(self, student):
        first = score_job_pair(student, "job-1", ["React", "Docker"], ["AWS"])
        second = score_job_pair(student, "job-1", ["React", "Docker"], ["AWS"])
        assert first == second


class TestJobSkillLists:
    """Tests for picking a job candidate's skill lists."""

    def test_posting_lists_win(self):
        job = CandidateProfile(id="j", required_skills=["Go"], preferred_skills=["K8s"])
        context = JobMatchContext(required_skills=["Java"], preferred_skills=["AWS"])

        assert job_skill_lists(job, context) == (["Go"], ["K8s"])

    def test_context_fills_missing_lists(self):
        job = CandidateProfile(id="j", required_skills=["Go"])
        context = JobMatchContext(required_skills=["Java"], preferred_skills=["AWS"])

        assert job_skill_lists(job, context) == (["Go"], ["AWS"])

    def test_plain_skills_are_required(self):
        job = CandidateProfile(id="j", skills=["Python", "SQL"])

        assert job_skill_lists(job) == (["Python", "SQL"], [])


class TestRankStudentsForJob:
    """Tests for ranking students against one posting."""

    def test_results_carry_student_ids_sorted(self):
        students = [
            SubjectProfile(id="s1", skills=["React"], gpa=9.0),
            SubjectProfile(id="s2", skills=["React", "Docker"], projects=["Infra"]),
        ]
        results = rank_students_for_job(students, ["React", "Docker"], [])

        assert [r.candidate_id for r in results] == ["s2", "s1"]
        assert [r.score for r in results] == [65, 40]


class TestScoreAlumniPair:
    """Tests for the alumni mentor rubric."""

    def test_strong_mentor(self, mentor_subject, alumni_candidates):
        result = score_alumni_pair(mentor_subject, alumni_candidates[1])

        assert result.score == pytest.approx(0.87)
        assert result.skill_overlap == ["Python", "SQL"]
        assert result.domain_overlap == ["Backend"]
        assert "Career path aligns with stated goals" in result.reasons

    def test_unrelated_mentor_gets_placeholder(self, mentor_subject, alumni_candidates):
        result = score_alumni_pair(mentor_subject, alumni_candidates[0])

        assert result.score == 0.0
        assert result.reasons == [PLACEHOLDER_REASON]

    def test_score_within_range(self):
        subject = SubjectProfile(id="s", skills=["Python"], domain="AI", career_goals="research scientist")
        candidate = CandidateProfile(
            id="a", skills=["Python"], domains=["AI"], role="Research Scientist", experience="10 years"
        )
        result = score_alumni_pair(subject, candidate)

        assert 0.0 <= result.score <= 1.0
        assert result.score == pytest.approx(1.0)


class TestFallbackMatch:
    """Tests for the mode dispatcher."""

    def test_job_mode_sorted(self, student, job_candidates):
        results = fallback_match(student, job_candidates, MatchMode.job_posting)

        assert [r.candidate_id for r in results] == ["job-1", "job-2"]
        assert [r.score for r in results] == [63, 30]

    def test_alumni_mode_sorted(self, mentor_subject, alumni_candidates):
        results = fallback_match(mentor_subject, alumni_candidates, MatchMode.alumni_mentor)

        assert [r.candidate_id for r in results] == ["al-strong", "al-weak"]

    def test_ties_keep_input_order(self):
        subject = SubjectProfile(id="s")
        candidates = [CandidateProfile(id=f"j{i}", required_skills=["Go"]) for i in range(4)]

        results = fallback_match(subject, candidates, MatchMode.job_posting)

        assert [r.candidate_id for r in results] == ["j0", "j1", "j2", "j3"]
