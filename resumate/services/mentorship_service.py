"""
Mentorship Metrics Service

Keeps each mentor's sessionsCompleted, averageRating and impactScore
in step with student feedback, and serves the admin leaderboard and
feedback / domain stats.

IMPACT SCORE:
    impact = average_rating + min(sessions_completed / 10, 1) * 2

average_rating is 1-5, the session bonus tops out at 2 after ten
sessions, so impact is 0-7 (0 only before any feedback).
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from pymongo.collection import Collection

from resumate.core.exceptions import FeedbackRejected, SessionNotFound
from resumate.db.mongodb import get_collection, COLLECTIONS
from resumate.schemas.schemas import (
    DomainCount,
    FeedbackSummaryResponse,
    MentorMetrics,
    PopularDomainsResponse,
    RatingCount,
    SessionStatus,
    StudentFeedbackRequest,
)

logger = logging.getLogger(__name__)

SESSION_STATUS_COMPLETED = SessionStatus.completed.value
SESSION_BONUS_CAP = 10
SESSION_BONUS_WEIGHT = 2.0
POPULAR_DOMAINS_LIMIT = 15


def clamp_rating(value: float) -> float:
    return min(max(value, 1), 5)


def average_rating(ratings: Iterable[float]) -> float:
    """Mean of ratings clamped to 1-5. No ratings gives 0."""
    ratings = [clamp_rating(r) for r in ratings if r is not None]
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def compute_impact_score(avg_rating: float, sessions_completed: int) -> float:
    session_bonus = min(max(sessions_completed, 0) / SESSION_BONUS_CAP, 1) * SESSION_BONUS_WEIGHT
    return avg_rating + session_bonus


class MentorMetricsService:
    """
    Records student feedback and recomputes mentor metrics.
    """

    def __init__(self, sessions: Collection = None, profiles: Collection = None):
        self.sessions = sessions if sessions is not None else get_collection(COLLECTIONS["sessions"])
        self.profiles = profiles if profiles is not None else get_collection(COLLECTIONS["alumni_profiles"])

    def record_student_feedback(
        self,
        session_id: str,
        student_id: str,
        feedback: StudentFeedbackRequest
    ) -> Optional[MentorMetrics]:
        """
        Attach feedback to a completed session and refresh the mentor's metrics.

        Raises:
            SessionNotFound if the session does not exist
            FeedbackRejected if the student is not the participant, the
            session is not completed, or feedback was already given
        """
        session = self.sessions.find_one({"sessionId": session_id})
        if not session:
            raise SessionNotFound(session_id)
        if session.get("studentId") != student_id:
            raise FeedbackRejected("You can only provide feedback for your own sessions", status_code=403)
        if session.get("status") != SESSION_STATUS_COMPLETED:
            raise FeedbackRejected("Cannot submit feedback for incomplete session")
        if session.get("studentFeedback"):
            raise FeedbackRejected("Feedback already submitted for this session", status_code=409)

        self.sessions.update_one(
            {"sessionId": session_id},
            {"$set": {"studentFeedback": {
                "rating": clamp_rating(feedback.rating),
                "usefulness": clamp_rating(feedback.usefulness),
                "clarity": clamp_rating(feedback.clarity),
                "comments": feedback.comments,
                "submittedAt": datetime.now(timezone.utc),
            }}}
        )

        return self.refresh_metrics(session["alumniId"], rating=feedback.rating)

    def refresh_metrics(self, alumni_id: str, rating: Optional[float] = None) -> Optional[MentorMetrics]:
        """
        Increment sessionsCompleted and recompute averageRating / impactScore.

        rating is the feedback just written; it stands in for the
        average when no rated session is visible yet.
        """
        profile = self.profiles.find_one({"userId": alumni_id})
        if not profile:
            logger.warning("No mentor profile for alumni %s, metrics not updated", alumni_id)
            return None

        sessions_completed = int(profile.get("sessionsCompleted", 0)) + 1

        rated = self.sessions.find(
            {
                "alumniId": alumni_id,
                "status": SESSION_STATUS_COMPLETED,
                "studentFeedback.rating": {"$exists": True},
            },
            {"studentFeedback.rating": 1}
        )
        ratings = [s["studentFeedback"]["rating"] for s in rated]
        if rating is not None and not ratings:
            ratings = [rating]

        avg = average_rating(ratings)
        impact = compute_impact_score(avg, sessions_completed)

        self.profiles.update_one(
            {"userId": alumni_id},
            {"$set": {
                "sessionsCompleted": sessions_completed,
                "averageRating": avg,
                "impactScore": impact,
            }}
        )
        logger.info("Updated metrics for %s: rating %.2f, impact %.2f", alumni_id, avg, impact)

        return MentorMetrics(
            alumni_id=alumni_id,
            sessions_completed=sessions_completed,
            average_rating=round(avg, 2),
            impact_score=round(impact, 2),
        )

    def top_alumni(self, limit: int = 20) -> List[dict]:
        """Leaderboard: impact, then rating, then sessions."""
        cursor = (
            self.profiles.find({}, {"_id": 0})
            .sort([("impactScore", -1), ("averageRating", -1), ("sessionsCompleted", -1)])
            .limit(limit)
        )
        return [
            {
                "userId": doc.get("userId"),
                "currentRole": doc.get("currentRole", ""),
                "company": doc.get("company", ""),
                "sessionsCompleted": doc.get("sessionsCompleted", 0),
                "averageRating": round(float(doc.get("averageRating", 0)), 2),
                "impactScore": round(float(doc.get("impactScore", 0)), 2),
                "domainsOfExpertise": doc.get("domainsOfExpertise", []),
            }
            for doc in cursor
        ]


def _mean(values: List[float]) -> float:
    return round(sum(values) / len(values), 2) if values else 0.0


class MentorshipStatsService:
    """
    Admin views over session feedback and profile domains.
    """

    def __init__(
        self,
        sessions: Collection = None,
        alumni_profiles: Collection = None,
        student_profiles: Collection = None
    ):
        self.sessions = sessions if sessions is not None else get_collection(COLLECTIONS["sessions"])
        self.alumni_profiles = (
            alumni_profiles if alumni_profiles is not None else get_collection(COLLECTIONS["alumni_profiles"])
        )
        self.student_profiles = (
            student_profiles if student_profiles is not None else get_collection(COLLECTIONS["student_profiles"])
        )

    def feedback_summary(self) -> FeedbackSummaryResponse:
        """
        Averages over completed sessions that have a student rating.

        Mentor-side averages (preparedness, engagement) only count
        sessions that also carry alumni feedback. No data gives zeros.
        """
        rated = list(self.sessions.find(
            {"status": SESSION_STATUS_COMPLETED, "studentFeedback.rating": {"$exists": True}},
            {"_id": 0, "studentFeedback": 1, "alumniFeedback": 1}
        ))
        student = [s["studentFeedback"] for s in rated]
        alumni = [s["alumniFeedback"] for s in rated if s.get("alumniFeedback")]

        return FeedbackSummaryResponse(
            total_feedbacks=len(student),
            total_alumni_feedbacks=len(alumni),
            average_rating=_mean([f.get("rating") or 0 for f in student]),
            average_usefulness=_mean([f.get("usefulness") or 0 for f in student]),
            average_clarity=_mean([f.get("clarity") or 0 for f in student]),
            average_preparedness=_mean([f.get("preparedness") or 0 for f in alumni]),
            average_engagement=_mean([f.get("engagement") or 0 for f in alumni]),
            rating_distribution=[
                RatingCount(rating=r, count=sum(1 for f in student if f.get("rating") == r))
                for r in range(1, 6)
            ],
        )

    @staticmethod
    def _domain_counts(collection: Collection, field: str) -> List[DomainCount]:
        rows = collection.aggregate([
            {"$unwind": f"${field}"},
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
            {"$sort": {"count": -1}},
            {"$limit": POPULAR_DOMAINS_LIMIT},
        ])
        return [DomainCount(domain=str(row["_id"]), count=row["count"]) for row in rows if row["_id"]]

    def popular_domains(self) -> PopularDomainsResponse:
        """Most common student preferences and mentor expertise domains."""
        return PopularDomainsResponse(
            student_preferences=self._domain_counts(self.student_profiles, "preferredDomains"),
            alumni_expertise=self._domain_counts(self.alumni_profiles, "domainsOfExpertise"),
        )
