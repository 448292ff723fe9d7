"""
MongoDB Service - read/write operations for document collections.

Collections in this database:
1. users             - userId + role, used by header auth
2. alumni            - alumni directory rows (CSV import)
3. alumni_profiles   - mentor profiles with session metrics
4. student_profiles  - student profiles with parsed resume data
5. jobs              - job postings with required/preferred skills
6. mentorship_sessions - session requests, status and feedback

Each service takes an optional collection so tests can pass a mock.
"""

import logging
import math
import re
import uuid
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from pymongo.collection import Collection

from resumate.core.exceptions import FeedbackRejected, SessionActionRejected, SessionNotFound
from resumate.db.mongodb import get_collection, COLLECTIONS
from resumate.schemas.schemas import AlumniFeedbackRequest, SessionRequest, SessionStatus

logger = logging.getLogger(__name__)


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


# ============================================================
# USERS COLLECTION
# ============================================================

class UserService:
    """Looks up users for the x-user-id header."""

    def __init__(self, collection: Collection = None):
        self.collection = collection if collection is not None else get_collection(COLLECTIONS["users"])

    def get_by_user_id(self, user_id: str) -> Optional[dict]:
        doc = self.collection.find_one({"userId": user_id}, {"_id": 0})
        return doc


# ============================================================
# ALUMNI DIRECTORY COLLECTION
# Rows imported from the alumni CSV export
# ============================================================

class AlumniDirectoryService:
    """
    Search, filter and aggregate the alumni directory.
    """

    def __init__(self, collection: Collection = None):
        self.collection = collection if collection is not None else get_collection(COLLECTIONS["alumni"])

    @staticmethod
    def build_query(
        search: str = "",
        course: str = "",
        batch: str = "",
        city: str = "",
        company: str = ""
    ) -> Dict[str, Any]:
        """
        Build the Mongo filter.

        - search: full-text over name, email, skills, experience, course, batch, city
        - course / batch: exact match
        - city: case-insensitive, matches livesIn or homeTown
        - company: case-insensitive, matched inside the experience text
        """
        query: Dict[str, Any] = {}
        if search:
            query["$text"] = {"$search": search}
        if course:
            query["course.name"] = course
        if batch:
            query["batch.year"] = batch
        if city:
            pattern = {"$regex": re.escape(city), "$options": "i"}
            query["$or"] = [{"livesIn.city": pattern}, {"homeTown.city": pattern}]
        if company:
            query["experience"] = {"$regex": re.escape(company), "$options": "i"}
        return query

    def search(
        self,
        search: str = "",
        course: str = "",
        batch: str = "",
        city: str = "",
        company: str = "",
        page: int = 1,
        limit: int = 12
    ) -> Dict[str, Any]:
        """
        Paginated directory listing.

        Returns:
            {"data": [...], "pagination": {...}}
        """
        page = max(page, 1)
        limit = max(limit, 1)
        query = self.build_query(search, course, batch, city, company)

        if search:
            projection = {"__v": 0, "score": {"$meta": "textScore"}}
            sort = [("score", {"$meta": "textScore"})]
        else:
            projection = {"__v": 0}
            sort = [("name", 1)]

        cursor = (
            self.collection.find(query, projection)
            .sort(sort)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        data = serialize_docs(list(cursor))
        total = self.collection.count_documents(query)
        total_pages = math.ceil(total / limit)

        return {
            "data": data,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": total_pages,
                "has_next_page": page < total_pages,
                "has_prev_page": page > 1,
            },
        }

    def stats(self) -> Dict[str, Any]:
        """Totals by course, by batch, and the top 10 cities."""
        by_course = self.collection.aggregate([
            {"$group": {"_id": "$course.name", "count": {"$sum": 1}}},
            {"$sort": {"count": -1}},
        ])
        by_batch = self.collection.aggregate([
            {"$group": {"_id": "$batch.year", "count": {"$sum": 1}}},
            {"$sort": {"_id": -1}},
        ])
        top_cities = self.collection.aggregate([
            {"$group": {"_id": "$livesIn.city", "count": {"$sum": 1}}},
            {"$match": {"_id": {"$ne": ""}}},
            {"$sort": {"count": -1}},
            {"$limit": 10},
        ])

        def buckets(rows):
            return [{"key": row["_id"], "count": row["count"]} for row in rows]

        return {
            "total": self.collection.count_documents({}),
            "by_course": buckets(by_course),
            "by_batch": buckets(by_batch),
            "top_cities": buckets(top_cities),
        }

    def get_by_id(self, alumni_id: str) -> Optional[dict]:
        doc = self.collection.find_one({"id": alumni_id}, {"__v": 0})
        return serialize_doc(doc)


# ============================================================
# ALUMNI MENTOR PROFILES COLLECTION
# ============================================================

class MentorProfileService:
    """Mentor profiles used as matching candidates."""

    def __init__(self, collection: Collection = None):
        self.collection = collection if collection is not None else get_collection(COLLECTIONS["alumni_profiles"])

    def list_profiles(self, limit: int = 20) -> List[dict]:
        """Mentors available for matching, best impact first."""
        cursor = (
            self.collection.find({"isAvailable": {"$ne": False}}, {"_id": 0})
            .sort([("impactScore", -1), ("averageRating", -1)])
            .limit(limit)
        )
        return list(cursor)

    def get_by_user_id(self, user_id: str) -> Optional[dict]:
        return self.collection.find_one({"userId": user_id}, {"_id": 0})


# ============================================================
# STUDENT PROFILES COLLECTION
# ============================================================

class StudentProfileService:
    """Student profiles, including the latest parsed resume."""

    def __init__(self, collection: Collection = None):
        self.collection = collection if collection is not None else get_collection(COLLECTIONS["student_profiles"])

    def get_by_user_id(self, user_id: str) -> Optional[dict]:
        return self.collection.find_one({"userId": user_id}, {"_id": 0})

    def list_profiles(self, limit: int = 100) -> List[dict]:
        return list(self.collection.find({}, {"_id": 0}).limit(limit))

    def save_parsed_resume(self, user_id: str, parsed_resume: dict) -> bool:
        """Store n8n output as the profile's source of truth."""
        result = self.collection.update_one(
            {"userId": user_id},
            {"$set": {
                "parsedResume": parsed_resume,
                "resumeParsedAt": datetime.now(timezone.utc),
            }},
            upsert=True
        )
        return result.acknowledged


# ============================================================
# JOB POSTINGS COLLECTION
# ============================================================

class JobPostingService:
    """Job postings with required/preferred skills."""

    def __init__(self, collection: Collection = None):
        self.collection = collection if collection is not None else get_collection(COLLECTIONS["jobs"])

    def get_by_id(self, job_id: str) -> Optional[dict]:
        return self.collection.find_one({"jobId": job_id}, {"_id": 0})

    def list_open(self, limit: int = 50) -> List[dict]:
        return list(self.collection.find({"status": "open"}, {"_id": 0}).limit(limit))


# ============================================================
# MENTORSHIP SESSIONS COLLECTION
# requested -> accepted -> completed, or requested -> cancelled
# ============================================================

class SessionService:
    """
    Session requests between students and mentors, and their lifecycle.

    Only participants may see or change a session. Student feedback and
    mentor metrics live in MentorMetricsService.
    """

    def __init__(
        self,
        collection: Collection = None,
        alumni_profiles: Collection = None,
        student_profiles: Collection = None
    ):
        self.collection = collection if collection is not None else get_collection(COLLECTIONS["sessions"])
        self.alumni_profiles = (
            alumni_profiles if alumni_profiles is not None else get_collection(COLLECTIONS["alumni_profiles"])
        )
        self.student_profiles = (
            student_profiles if student_profiles is not None else get_collection(COLLECTIONS["student_profiles"])
        )

    def _get(self, session_id: str) -> dict:
        session = self.collection.find_one({"sessionId": session_id}, {"_id": 0})
        if not session:
            raise SessionNotFound(session_id)
        return session

    def _update(self, session: dict, changes: dict) -> dict:
        changes["updatedAt"] = datetime.now(timezone.utc)
        self.collection.update_one({"sessionId": session["sessionId"]}, {"$set": changes})
        session.update(changes)
        return session

    def request_session(self, student_id: str, body: SessionRequest) -> dict:
        """
        Create a session in "requested" state.

        Raises:
            SessionActionRejected (404) if either profile is missing,
            (409) if the mentor already has that slot accepted or scheduled
        """
        if not self.alumni_profiles.find_one({"userId": body.alumni_id}, {"_id": 1}):
            raise SessionActionRejected("Alumni profile not found", status_code=404)
        if not self.student_profiles.find_one({"userId": student_id}, {"_id": 1}):
            raise SessionActionRejected(
                "Student profile not found. Please complete your profile first.", status_code=404
            )

        scheduled_date = datetime.combine(body.scheduled_date, datetime.min.time(), tzinfo=timezone.utc)
        conflict = self.collection.find_one({
            "alumniId": body.alumni_id,
            "scheduledDate": scheduled_date,
            "startTime": body.start_time,
            "status": {"$in": [SessionStatus.scheduled.value, SessionStatus.accepted.value]},
        }, {"_id": 1})
        if conflict:
            raise SessionActionRejected("Time slot conflict. Please choose another time.", status_code=409)

        now = datetime.now(timezone.utc)
        session = {
            "sessionId": str(uuid.uuid4()),
            "studentId": student_id,
            "alumniId": body.alumni_id,
            "sessionType": body.session_type,
            "scheduledDate": scheduled_date,
            "startTime": body.start_time,
            "endTime": body.end_time,
            "status": SessionStatus.requested.value,
            "agenda": body.agenda,
            "meetingLink": "",
            "notes": "",
            "createdAt": now,
            "updatedAt": now,
        }
        # insert_one adds _id to the dict it is given
        self.collection.insert_one(dict(session))
        logger.info("Session %s requested by %s with %s", session["sessionId"], student_id, body.alumni_id)
        return session

    def _respond(self, session_id: str, alumni_id: str, status: SessionStatus, changes: dict) -> dict:
        session = self._get(session_id)
        if session.get("alumniId") != alumni_id:
            raise SessionActionRejected("You can only respond to your own session requests", status_code=403)
        if session.get("status") != SessionStatus.requested.value:
            raise SessionActionRejected(f"Session is already {session.get('status')}")
        changes["status"] = status.value
        return self._update(session, changes)

    def accept(self, session_id: str, alumni_id: str, meeting_link: str = "") -> dict:
        session = self._respond(session_id, alumni_id, SessionStatus.accepted, {"meetingLink": meeting_link})
        logger.info("Session %s accepted by %s", session_id, alumni_id)
        return session

    def reject(self, session_id: str, alumni_id: str) -> dict:
        session = self._respond(session_id, alumni_id, SessionStatus.cancelled, {})
        logger.info("Session %s rejected by %s", session_id, alumni_id)
        return session

    def complete(self, session_id: str, user_id: str, notes: str = "") -> dict:
        """Either participant marks an accepted or scheduled session done."""
        session = self._get(session_id)
        if user_id not in (session.get("studentId"), session.get("alumniId")):
            raise SessionActionRejected("Not authorized to complete this session", status_code=403)
        if session.get("status") not in (SessionStatus.accepted.value, SessionStatus.scheduled.value):
            raise SessionActionRejected(f"Cannot complete session with status: {session.get('status')}")

        changes = {"status": SessionStatus.completed.value}
        if notes:
            changes["notes"] = notes
        logger.info("Session %s completed by %s", session_id, user_id)
        return self._update(session, changes)

    def list_for_user(self, user_id: str, status: Optional[SessionStatus] = None) -> Dict[str, Any]:
        """Sessions where the user is either participant, newest date first."""
        query: Dict[str, Any] = {"$or": [{"studentId": user_id}, {"alumniId": user_id}]}
        if status:
            query["status"] = status.value
        cursor = self.collection.find(query, {"_id": 0}).sort([("scheduledDate", -1), ("createdAt", -1)])
        sessions = list(cursor)
        return {"sessions": sessions, "total": len(sessions)}

    def get_for_participant(self, session_id: str, user_id: str) -> dict:
        session = self._get(session_id)
        if user_id not in (session.get("studentId"), session.get("alumniId")):
            raise SessionActionRejected("Not authorized to view this session", status_code=403)
        return session

    def record_alumni_feedback(self, session_id: str, alumni_id: str, feedback: AlumniFeedbackRequest) -> dict:
        """
        Mentor rates the student after a completed session.

        Raises:
            SessionNotFound if the session does not exist
            FeedbackRejected if the mentor is not the participant, the
            session is not completed, or feedback was already given
        """
        session = self._get(session_id)
        if session.get("alumniId") != alumni_id:
            raise FeedbackRejected("You can only provide feedback for your own sessions", status_code=403)
        if session.get("status") != SessionStatus.completed.value:
            raise FeedbackRejected("Cannot submit feedback for incomplete session")
        if session.get("alumniFeedback"):
            raise FeedbackRejected("Feedback already submitted for this session", status_code=409)

        return self._update(session, {"alumniFeedback": {
            "rating": feedback.rating,
            "preparedness": feedback.preparedness,
            "engagement": feedback.engagement,
            "comments": feedback.comments,
            "submittedAt": datetime.now(timezone.utc),
        }})
