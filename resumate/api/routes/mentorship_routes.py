"""
Mentorship Routes

POST /mentorship/sessions                              - Student requests a session
GET  /mentorship/sessions/mine                         - Sessions the caller takes part in
GET  /mentorship/sessions/{session_id}                 - One session (participants only)
POST /mentorship/sessions/{session_id}/accept          - Mentor accepts a request
POST /mentorship/sessions/{session_id}/reject          - Mentor declines a request
POST /mentorship/sessions/{session_id}/complete        - Either participant marks it done
POST /mentorship/sessions/{session_id}/feedback        - Student rates a completed session
POST /mentorship/sessions/{session_id}/feedback/alumni - Mentor rates the student
GET  /mentorship/alumni/top                            - Mentor leaderboard (admin)
GET  /mentorship/admin/stats/feedback-summary          - Feedback averages (admin)
GET  /mentorship/admin/stats/popular-domains           - Top domains (admin)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from resumate.api.deps import get_mentor_metrics, get_mentorship_stats, get_sessions
from resumate.core.auth import get_current_user, require_admin, require_alumni, require_student
from resumate.core.exceptions import SessionActionRejected, SessionNotFound
from resumate.schemas.schemas import (
    AlumniFeedbackRequest,
    FeedbackSummaryResponse,
    MessageResponse,
    PopularDomainsResponse,
    SessionAcceptRequest,
    SessionCompleteRequest,
    SessionListResponse,
    SessionRequest,
    SessionResponse,
    SessionStatus,
    StudentFeedbackRequest,
)
from resumate.services.mentorship_service import MentorMetricsService, MentorshipStatsService
from resumate.services.mongo_service import SessionService

router = APIRouter(prefix="/mentorship", tags=["Mentorship"])


def _session_http_error(e: Exception) -> HTTPException:
    if isinstance(e, SessionNotFound):
        return HTTPException(status_code=404, detail="Session not found")
    return HTTPException(status_code=e.status_code, detail=e.reason)


# ============================================================
# SESSION LIFECYCLE
# ============================================================

@router.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def request_session(
    body: SessionRequest,
    student: dict = Depends(require_student),
    sessions: SessionService = Depends(get_sessions)
):
    """Request a session slot with a mentor."""
    try:
        session = sessions.request_session(student["user_id"], body)
    except SessionActionRejected as e:
        raise _session_http_error(e)
    return SessionResponse(message="Session request sent successfully", session=session)


@router.get("/sessions/mine", response_model=SessionListResponse)
def my_sessions(
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    user: dict = Depends(get_current_user),
    sessions: SessionService = Depends(get_sessions)
):
    return sessions.list_for_user(user["user_id"], status_filter)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: str,
    user: dict = Depends(get_current_user),
    sessions: SessionService = Depends(get_sessions)
):
    try:
        session = sessions.get_for_participant(session_id, user["user_id"])
    except (SessionNotFound, SessionActionRejected) as e:
        raise _session_http_error(e)
    return SessionResponse(message="Session found", session=session)


@router.post("/sessions/{session_id}/accept", response_model=SessionResponse)
def accept_session(
    session_id: str,
    body: Optional[SessionAcceptRequest] = None,
    alumni: dict = Depends(require_alumni),
    sessions: SessionService = Depends(get_sessions)
):
    meeting_link = body.meeting_link if body else ""
    try:
        session = sessions.accept(session_id, alumni["user_id"], meeting_link)
    except (SessionNotFound, SessionActionRejected) as e:
        raise _session_http_error(e)
    return SessionResponse(message="Session accepted successfully", session=session)


@router.post("/sessions/{session_id}/reject", response_model=SessionResponse)
def reject_session(
    session_id: str,
    alumni: dict = Depends(require_alumni),
    sessions: SessionService = Depends(get_sessions)
):
    try:
        session = sessions.reject(session_id, alumni["user_id"])
    except (SessionNotFound, SessionActionRejected) as e:
        raise _session_http_error(e)
    return SessionResponse(message="Session rejected", session=session)


@router.post("/sessions/{session_id}/complete", response_model=SessionResponse)
def complete_session(
    session_id: str,
    body: Optional[SessionCompleteRequest] = None,
    user: dict = Depends(get_current_user),
    sessions: SessionService = Depends(get_sessions)
):
    """Mark an accepted session as completed. Feedback opens after this."""
    notes = body.notes if body else ""
    try:
        session = sessions.complete(session_id, user["user_id"], notes)
    except (SessionNotFound, SessionActionRejected) as e:
        raise _session_http_error(e)
    return SessionResponse(message="Session marked as completed", session=session)


# ============================================================
# FEEDBACK
# ============================================================

@router.post("/sessions/{session_id}/feedback", response_model=MessageResponse)
def submit_student_feedback(
    session_id: str,
    body: StudentFeedbackRequest,
    student: dict = Depends(require_student),
    metrics: MentorMetricsService = Depends(get_mentor_metrics)
):
    """
    Rate a completed session (rating, usefulness, clarity: 1-5).

    Updates the mentor's average rating and impact score.
    """
    try:
        updated = metrics.record_student_feedback(session_id, student["user_id"], body)
    except (SessionNotFound, SessionActionRejected) as e:
        raise _session_http_error(e)

    message = "Feedback submitted successfully"
    if updated:
        message += f" (mentor impact score {updated.impact_score:.2f})"
    return MessageResponse(message=message)


@router.post("/sessions/{session_id}/feedback/alumni", response_model=MessageResponse)
def submit_alumni_feedback(
    session_id: str,
    body: AlumniFeedbackRequest,
    alumni: dict = Depends(require_alumni),
    sessions: SessionService = Depends(get_sessions)
):
    """Mentor rates the student (rating, preparedness, engagement: 1-5)."""
    try:
        sessions.record_alumni_feedback(session_id, alumni["user_id"], body)
    except (SessionNotFound, SessionActionRejected) as e:
        raise _session_http_error(e)
    return MessageResponse(message="Feedback submitted successfully")


# ============================================================
# ADMIN
# ============================================================

@router.get("/alumni/top", response_model=List[dict])
def top_alumni(
    limit: int = Query(20, ge=1, le=100),
    admin: dict = Depends(require_admin),
    metrics: MentorMetricsService = Depends(get_mentor_metrics)
):
    """Top mentors by impact score, then rating, then sessions."""
    return metrics.top_alumni(limit)


@router.get("/admin/stats/feedback-summary", response_model=FeedbackSummaryResponse)
def feedback_summary(
    admin: dict = Depends(require_admin),
    stats: MentorshipStatsService = Depends(get_mentorship_stats)
):
    return stats.feedback_summary()


@router.get("/admin/stats/popular-domains", response_model=PopularDomainsResponse)
def popular_domains(
    admin: dict = Depends(require_admin),
    stats: MentorshipStatsService = Depends(get_mentorship_stats)
):
    return stats.popular_domains()
