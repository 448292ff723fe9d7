"""Tests for the n8n resume parsing client."""
import base64
from unittest.mock import MagicMock

import pytest
import requests

from resumate.core.exceptions import ExternalServiceFailure
from resumate.services.n8n_client import N8nClient, normalize_parsed_resume

WEBHOOK = "https://n8n.example.com/webhook/parse-resume"


def make_response(body=None, status=200, content=b"{}"):
    resp = MagicMock()
    resp.status_code = status
    resp.content = content
    resp.json.return_value = body
    if status >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(response=resp)
    return resp


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def n8n(settings_factory, session):
    return N8nClient(settings_factory(n8n_resume_parse_webhook=WEBHOOK), session=session)


class TestNormalizeParsedResume:
    """Tests for normalize_parsed_resume."""

    def test_fills_missing_fields(self):
        parsed = normalize_parsed_resume({
            "Name": " Asha ",
            "CGPA": 8.4,
            "skill keyword": ["React", None, "Node.js"],
            "Projects": "not a list",
        })

        assert parsed["Name"] == "Asha"
        assert parsed["CGPA"] == "8.4"
        assert parsed["Email"] == ""
        assert parsed["skill keyword"] == ["React", "Node.js"]
        assert parsed["Projects"] == []
        assert parsed["Internship"] == []


class TestParseResume:
    """Tests for N8nClient.parse_resume."""

    def test_posts_base64_payload(self, n8n, session):
        session.post.return_value = make_response({"output": {"Name": "Asha", "skill keyword": ["Go"]}})

        parsed = n8n.parse_resume("u1", "cv.pdf", "application/pdf", b"%PDF-1.4")

        args, kwargs = session.post.call_args
        assert args[0] == WEBHOOK
        assert kwargs["json"]["userId"] == "u1"
        assert kwargs["json"]["filename"] == "cv.pdf"
        assert base64.b64decode(kwargs["json"]["content_base64"]) == b"%PDF-1.4"
        assert kwargs["timeout"] == 30.0
        assert parsed["Name"] == "Asha"
        assert parsed["skill keyword"] == ["Go"]

    def test_list_body_accepted(self, n8n, session):
        session.post.return_value = make_response([{"output": {"Name": "Ravi"}}])

        assert n8n.parse_resume("u1", "cv.txt", "text/plain", b"text")["Name"] == "Ravi"

    def test_empty_body(self, n8n, session):
        session.post.return_value = make_response(None, content=b"")

        with pytest.raises(ExternalServiceFailure):
            n8n.parse_resume("u1", "cv.pdf", "application/pdf", b"x")

    def test_missing_output(self, n8n, session):
        session.post.return_value = make_response({"error": "workflow failed"})

        with pytest.raises(ExternalServiceFailure):
            n8n.parse_resume("u1", "cv.pdf", "application/pdf", b"x")

    def test_http_error(self, n8n, session):
        session.post.return_value = make_response(status=500)

        with pytest.raises(ExternalServiceFailure) as exc_info:
            n8n.parse_resume("u1", "cv.pdf", "application/pdf", b"x")
        assert exc_info.value.detail == "HTTP 500"

    def test_timeout(self, n8n, session):
        session.post.side_effect = requests.exceptions.Timeout()

        with pytest.raises(ExternalServiceFailure) as exc_info:
            n8n.parse_resume("u1", "cv.pdf", "application/pdf", b"x")
        assert exc_info.value.detail == "request timed out"

    def test_webhook_not_configured(self, settings_factory, session):
        client = N8nClient(settings_factory(), session=session)

        with pytest.raises(ExternalServiceFailure):
            client.parse_resume("u1", "cv.pdf", "application/pdf", b"x")
        session.post.assert_not_called()


class TestWebhookCheck:
    """Tests for N8nClient.test_webhook."""

    def test_reachable(self, n8n, session):
        session.post.return_value = make_response({"output": {}})
        assert n8n.test_webhook() is True

    def test_unreachable(self, n8n, session):
        session.post.side_effect = requests.exceptions.ConnectionError()
        assert n8n.test_webhook() is False
