"""Exceptions raised by the matching and resume services."""


class ResumateError(Exception):
    """Base exception for ResuMate service errors."""

    pass


class InvalidProfile(ResumateError):
    """Raised when a profile record is missing its identifier."""

    def __init__(self, reason: str = "Profile is missing its identifier"):
        self.reason = reason
        super().__init__(reason)


class ExternalServiceFailure(ResumateError):
    """Raised when an AI provider or webhook call fails (network, auth, timeout, non-2xx)."""

    def __init__(self, service: str, detail: str):
        self.service = service
        self.detail = detail
        super().__init__(f"{service} call failed: {detail}")


class MalformedResponse(ResumateError):
    """Raised when a 2xx response body cannot be parsed into the expected structure."""

    def __init__(self, detail: str, raw_text: str = ""):
        self.detail = detail
        self.raw_text = raw_text
        super().__init__(f"Malformed response: {detail}")


class SessionNotFound(ResumateError):
    """Raised when a mentorship session id does not exist."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class SessionActionRejected(ResumateError):
    """
    Raised when a session action is not allowed.

    status_code carries the HTTP status the route should answer with
    (403 not a participant, 404 missing profile, 409 conflict, else 400).
    """

    def __init__(self, reason: str, status_code: int = 400):
        self.reason = reason
        self.status_code = status_code
        super().__init__(reason)


class FeedbackRejected(SessionActionRejected):
    """Raised when session feedback is not allowed (wrong user, incomplete, duplicate)."""
