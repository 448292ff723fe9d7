"""
Text Generation Client

Anthropic, Groq and DeepSeek all expose OpenAI-compatible chat APIs,
so one wrapper around the openai library covers every provider.

The client is built from a Settings instance and handed to the services
that need it; nothing is created at import time.

CONTRACT:
- complete() sends one prompt and returns free-form text
- no retries here (max_retries=0); callers decide what to do on failure
- every provider error surfaces as ExternalServiceFailure
"""
import logging
from typing import Optional

from openai import OpenAI, APIError, APIConnectionError, APITimeoutError

from resumate.core.config import Settings
from resumate.core.exceptions import ExternalServiceFailure

logger = logging.getLogger(__name__)


class TextGenerationClient:
    """
    Wrapper for the configured AI provider.
    """

    def __init__(self, settings: Settings, client: Optional[OpenAI] = None):
        self.settings = settings
        self.provider = settings.resolved_provider()
        self.model = ""
        self.client = client

        if self.provider == "none":
            logger.warning("No AI provider configured. Matching will use fallback scoring.")
            return

        api_key, base_url, model = settings.provider_credentials(self.provider)
        self.model = model
        if self.client is None:
            self.client = OpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=settings.ai_timeout_seconds,
                max_retries=0,
            )
        logger.info("Using AI provider: %s (%s)", self.provider, self.model)

    @property
    def is_configured(self) -> bool:
        return self.provider != "none" and self.client is not None

    def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Send one prompt and return the raw text response.

        Raises:
            ExternalServiceFailure on missing provider, network, auth,
            rate-limit, non-2xx or timeout errors
        """
        if not self.is_configured:
            raise ExternalServiceFailure("ai", "no AI provider configured")

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens or self.settings.ai_max_tokens,
                temperature=self.settings.ai_temperature,
            )
        except APITimeoutError as e:
            raise ExternalServiceFailure(self.provider, "request timed out") from e
        except APIConnectionError as e:
            raise ExternalServiceFailure(self.provider, f"connection error: {e}") from e
        except APIError as e:
            raise ExternalServiceFailure(self.provider, str(e)) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def test_connection(self) -> bool:
        """Test if the AI provider is reachable"""
        try:
            response = self.complete(
                "Reply with exactly: OK",
                system_prompt="You are a test assistant.",
                max_tokens=10,
            )
            return "OK" in response.upper()
        except ExternalServiceFailure as e:
            logger.warning("AI provider connection failed: %s", e)
            return False
