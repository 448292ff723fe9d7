"""Tests for the AI + fallback matching orchestrator."""
import json

import pytest

from resumate.core.exceptions import ExternalServiceFailure, InvalidProfile
from resumate.schemas.schemas import (
    CandidateProfile,
    MatchMode,
    ScoreSource,
    SubjectProfile,
)
from resumate.services.fallback_scorer import fallback_match
from resumate.services.matching_service import MatchingService, merge_results


def alumni_response(*entries):
    return json.dumps([
        {"alumniId": cid, "matchScore": score, "reasons": [f"reason for {cid}"]}
        for cid, score in entries
    ])


class TestMatchCandidates:
    """Tests for MatchingService.match_candidates."""

    def test_empty_candidates_makes_no_call(self, make_client, mentor_subject):
        client = make_client(response="[]")
        service = MatchingService(client)

        assert service.match_candidates(mentor_subject, [], MatchMode.alumni_mentor) == []
        client.complete.assert_not_called()

    def test_ai_scores_used_and_sorted(self, make_client, mentor_subject, alumni_candidates):
        client = make_client(response=alumni_response(("al-weak", 0.2), ("al-strong", 1.4)))
        service = MatchingService(client)

        results = service.match_candidates(mentor_subject, alumni_candidates, MatchMode.alumni_mentor)

        assert [r.candidate_id for r in results] == ["al-strong", "al-weak"]
        assert results[0].score == 1.0
        assert all(r.source == ScoreSource.ai for r in results)
        client.complete.assert_called_once()

    def test_skipped_candidates_filled_from_fallback(self, make_client, mentor_subject, alumni_candidates):
        client = make_client(response=alumni_response(("al-weak", 0.5)))
        service = MatchingService(client)

        results = service.match_candidates(mentor_subject, alumni_candidates, MatchMode.alumni_mentor)
        by_id = {r.candidate_id: r for r in results}

        assert set(by_id) == {"al-weak", "al-strong"}
        assert by_id["al-weak"].source == ScoreSource.ai
        assert by_id["al-strong"].source == ScoreSource.fallback
        assert by_id["al-strong"].score == pytest.approx(0.87)

    def test_unknown_and_duplicate_ids_dropped(self, make_client, mentor_subject, alumni_candidates):
        client = make_client(response=alumni_response(
            ("ghost", 0.99), ("al-weak", 0.3), ("al-weak", 0.9), ("al-strong", 0.6)
        ))
        service = MatchingService(client)

        results = service.match_candidates(mentor_subject, alumni_candidates, MatchMode.alumni_mentor)

        assert [(r.candidate_id, r.score) for r in results] == [("al-strong", 0.6), ("al-weak", 0.3)]

    def test_provider_failure_falls_back(self, make_client, mentor_subject, alumni_candidates):
        client = make_client(side_effect=ExternalServiceFailure("anthropic", "request timed out"))
        service = MatchingService(client)

        results = service.match_candidates(mentor_subject, alumni_candidates, MatchMode.alumni_mentor)

        assert results == fallback_match(mentor_subject, alumni_candidates, MatchMode.alumni_mentor)
        assert all(r.source == ScoreSource.fallback for r in results)

    def test_refusal_falls_back(self, make_client, mentor_subject, alumni_candidates):
        client = make_client(response="I cannot complete this request.")
        service = MatchingService(client)

        results = service.match_candidates(mentor_subject, alumni_candidates, MatchMode.alumni_mentor)

        assert len(results) == 2
        assert all(r.source == ScoreSource.fallback for r in results)

    def test_unconfigured_client_never_called(self, make_client, student, job_candidates):
        client = make_client(configured=False)
        service = MatchingService(client)

        results = service.match_candidates(student, job_candidates, MatchMode.job_posting)

        client.complete.assert_not_called()
        assert [r.score for r in results] == [63, 30]

    def test_job_mode_scores_clamped_to_integers(self, make_client, student, job_candidates):
        client = make_client(response=json.dumps([
            {"jobId": "job-2", "matchScore": 150, "matchReasons": ["Great"]},
            {"jobId": "job-1", "matchScore": 41.7},
        ]))
        service = MatchingService(client)

        results = service.match_candidates(student, job_candidates, MatchMode.job_posting)

        assert [(r.candidate_id, r.score) for r in results] == [("job-2", 100), ("job-1", 42)]

    def test_single_object_response_used(self, make_client, mentor_subject, alumni_candidates):
        client = make_client(response='Here you go: {"alumniId":"al-weak","matchScore":0.8,"reasons":["x"]}')
        service = MatchingService(client)

        results = service.match_candidates(mentor_subject, alumni_candidates, MatchMode.alumni_mentor)
        by_id = {r.candidate_id: r for r in results}

        assert by_id["al-weak"].source == ScoreSource.ai
        assert by_id["al-weak"].score == 0.8
        assert by_id["al-strong"].source == ScoreSource.fallback

    def test_huge_score_does_not_raise(self, make_client, student, job_candidates):
        client = make_client(response='[{"jobId":"job-1","matchScore":1' + "0" * 400 + "}]")
        service = MatchingService(client)

        results = service.match_candidates(student, job_candidates, MatchMode.job_posting)

        assert (results[0].candidate_id, results[0].score) == ("job-1", 100)

    def test_equal_scores_keep_input_order(self, make_client, mentor_subject):
        candidates = [CandidateProfile(id=f"a{i}") for i in range(3)]
        client = make_client(response=alumni_response(("a2", 0.5), ("a0", 0.5), ("a1", 0.5)))
        service = MatchingService(client)

        results = service.match_candidates(mentor_subject, candidates, MatchMode.alumni_mentor)

        assert [r.candidate_id for r in results] == ["a0", "a1", "a2"]

    def test_deterministic_fallback(self, make_client, student, job_candidates):
        service = MatchingService(make_client(configured=False))

        first = service.match_candidates(student, job_candidates, MatchMode.job_posting)
        second = service.match_candidates(student, job_candidates, MatchMode.job_posting)

        assert first == second

    def test_blank_subject_id_rejected(self, make_client, alumni_candidates):
        service = MatchingService(make_client(response="[]"))

        with pytest.raises(InvalidProfile):
            service.match_candidates(SubjectProfile(id="  "), alumni_candidates, MatchMode.alumni_mentor)

    def test_blank_candidate_id_rejected(self, make_client, mentor_subject):
        client = make_client(response="[]")
        service = MatchingService(client)

        with pytest.raises(InvalidProfile):
            service.match_candidates(mentor_subject, [CandidateProfile(id="")], MatchMode.alumni_mentor)
        client.complete.assert_not_called()


class TestRankStudentsForJob:
    """Tests for MatchingService.rank_students_for_job."""

    def test_ai_results_keyed_by_student(self, make_client):
        job = CandidateProfile(id="job-1", required_skills=["React"], description="Frontend role")
        students = [SubjectProfile(id="s1", skills=["React"]), SubjectProfile(id="s2")]
        client = make_client(response=json.dumps([
            {"studentId": "s2", "matchScore": 70},
            {"studentId": "s1", "matchScore": 90},
        ]))
        service = MatchingService(client)

        results = service.rank_students_for_job(job, students)

        assert [(r.candidate_id, r.score) for r in results] == [("s1", 90), ("s2", 70)]

    def test_echoed_job_id_ignored(self, make_client):
        job = CandidateProfile(id="job-9", required_skills=["React"])
        students = [SubjectProfile(id="s1"), SubjectProfile(id="s2")]
        client = make_client(response=json.dumps([
            {"studentId": "s1", "jobId": "job-9", "matchScore": 91},
            {"studentId": "s2", "jobId": "job-9", "matchScore": 12},
        ]))
        service = MatchingService(client)

        results = service.rank_students_for_job(job, students)

        assert [(r.candidate_id, r.score) for r in results] == [("s1", 91), ("s2", 12)]
        assert [r.source for r in results] == [ScoreSource.ai, ScoreSource.ai]

    def test_fallback_when_unconfigured(self, make_client):
        job = CandidateProfile(id="job-1", required_skills=["React", "Docker"])
        students = [
            SubjectProfile(id="s1", skills=["React"], gpa=9.0),
            SubjectProfile(id="s2", skills=["React", "Docker"], projects=["Infra"]),
        ]
        service = MatchingService(make_client(configured=False))

        results = service.rank_students_for_job(job, students)

        assert [(r.candidate_id, r.score) for r in results] == [("s2", 65), ("s1", 40)]

    def test_no_students(self, make_client):
        service = MatchingService(make_client(response="[]"))
        assert service.rank_students_for_job(CandidateProfile(id="j"), []) == []


class TestMergeResults:
    """Tests for merge_results."""

    def test_fallback_not_computed_when_complete(self, mentor_subject, alumni_candidates):
        ai_results = fallback_match(mentor_subject, alumni_candidates, MatchMode.alumni_mentor)

        def explode():
            raise AssertionError("fallback should not run")

        merged = merge_results(["al-weak", "al-strong"], ai_results, explode)
        assert [r.candidate_id for r in merged] == ["al-strong", "al-weak"]
