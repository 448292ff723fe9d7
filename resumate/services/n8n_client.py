"""
n8n Resume Parsing Client

The n8n workflow is the only resume parser in the system: it takes a
base64 file and returns structured JSON under "output". This client
only transports and normalizes; no AI reasoning happens here.
"""
import base64
import logging
from typing import Any, Dict

import requests

from resumate.core.config import Settings
from resumate.core.exceptions import ExternalServiceFailure

logger = logging.getLogger(__name__)

# Keys of the n8n output object
TEXT_FIELDS = (
    "UseID", "Name", "Domain", "ATS Score", "CGPA", "Branch", "Email",
    "Phone Number", "Total year of experience", "Profile Summary", "Batch",
    "LinkedIn", "github", "portfolio URL", "Resume URL", "Goal",
)
LIST_FIELDS = ("Internship", "skill keyword", "Projects", "Certificate")


def normalize_parsed_resume(output: Dict[str, Any]) -> Dict[str, Any]:
    """Missing text -> "", non-list list fields -> []."""
    parsed = {}
    for key in TEXT_FIELDS:
        value = output.get(key)
        parsed[key] = str(value).strip() if value not in (None, "") else ""
    for key in LIST_FIELDS:
        value = output.get(key)
        parsed[key] = [str(v).strip() for v in value if v] if isinstance(value, list) else []
    return parsed


class N8nClient:
    """Posts resumes to the n8n webhook."""

    def __init__(self, settings: Settings, session: requests.Session = None):
        self.webhook_url = settings.n8n_resume_parse_webhook
        self.timeout = settings.n8n_timeout_seconds
        self.session = session or requests.Session()

    def parse_resume(
        self,
        user_id: str,
        filename: str,
        mimetype: str,
        content: bytes
    ) -> Dict[str, Any]:
        """
        Parse a resume file via n8n.

        Returns:
            Normalized parsed resume dict (n8n key names)

        Raises:
            ExternalServiceFailure on missing webhook, HTTP errors,
            timeouts, or an empty/invalid body
        """
        if not self.webhook_url:
            raise ExternalServiceFailure("n8n", "resume parse webhook not configured")

        logger.info("Parsing resume for user: %s", user_id)
        payload = {
            "userId": user_id,
            "filename": filename,
            "mimetype": mimetype,
            "content_base64": base64.b64encode(content).decode("ascii"),
        }

        try:
            resp = self.session.post(self.webhook_url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise ExternalServiceFailure("n8n", "request timed out") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "HTTPError"
            raise ExternalServiceFailure("n8n", f"HTTP {status}") from e
        except requests.exceptions.RequestException as e:
            raise ExternalServiceFailure("n8n", str(e)) from e

        # n8n answers 200 with an empty body when the workflow errors
        try:
            body = resp.json() if resp.content else None
        except ValueError:
            body = None
        if isinstance(body, list) and body:
            body = body[0]
        if not isinstance(body, dict) or not isinstance(body.get("output"), dict):
            raise ExternalServiceFailure("n8n", "empty or invalid response")

        parsed = normalize_parsed_resume(body["output"])
        logger.info(
            "Parsed resume for %s with %d skills",
            parsed["Name"] or user_id, len(parsed["skill keyword"])
        )
        return parsed

    def test_webhook(self) -> bool:
        """Test n8n webhook connectivity"""
        if not self.webhook_url:
            return False
        try:
            resp = self.session.post(
                self.webhook_url,
                json={
                    "userId": "test-user",
                    "filename": "test.pdf",
                    "mimetype": "application/pdf",
                    "content_base64": "dGVzdA==",
                },
                timeout=5,
            )
            resp.raise_for_status()
            return True
        except requests.exceptions.RequestException as e:
            logger.warning("n8n webhook test failed: %s", e)
            return False
