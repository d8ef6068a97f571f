"""
LLM Providers for moderation.

Real LLM integration over plain HTTP (requests):
- Anthropic Messages API (via ANTHROPIC_API_KEY)
- OpenAI Chat Completions API (via OPENAI_API_KEY)

Both enforce the configured timeout and raise OracleError on failure.
"""

from app.services.moderation.base import OracleError, OracleResponseError, OracleUnavailableError, TextOracle
from typing import Dict, Optional
import logging
import requests

logger = logging.getLogger(__name__)


class AnthropicOracle(TextOracle):
    """
    Anthropic Messages API provider.

    Requires ANTHROPIC_API_KEY in environment variables.
    """

    API_URL = "https://api.anthropic.com/v1/messages"
    API_VERSION = "2023-06-01"
    MODEL_VERSION = "1.0"

    def __init__(self, api_key: Optional[str], model: str, timeout_seconds: float = 10.0):
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.enabled = bool(api_key and api_key.strip())

        if self.enabled:
            logger.info(f"✅ Anthropic oracle initialized: {self.model}")
        else:
            logger.info("⚠️ Anthropic oracle disabled: No API key configured")

    def is_enabled(self) -> bool:
        return self.enabled

    def get_model_info(self) -> Dict[str, str]:
        return {"name": self.model, "version": self.MODEL_VERSION}

    def get_timeout_seconds(self) -> float:
        return self.timeout_seconds

    def generate(self, prompt: str, max_tokens: int = 1000) -> str:
        if not self.enabled:
            raise OracleUnavailableError("Anthropic API key not configured")

        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": self.API_VERSION,
            "content-type": "application/json",
        }
        payload = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

        try:
            response = requests.post(self.API_URL, headers=headers, json=payload, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            raise OracleError(f"Anthropic API request failed: {e}") from e

        if response.status_code != 200:
            raise OracleResponseError(f"Anthropic API returned status {response.status_code}: {response.text[:200]}")

        try:
            data = response.json()
            blocks = data.get("content") or []
            text_blocks = [block.get("text", "") for block in blocks if block.get("type") == "text"]
        except (ValueError, AttributeError) as e:
            raise OracleResponseError(f"Unexpected Anthropic response envelope: {e}") from e

        if not text_blocks:
            raise OracleResponseError("Unexpected content type from Anthropic response")

        return text_blocks[0]


class OpenAIOracle(TextOracle):
    """
    OpenAI Chat Completions provider.

    Requires OPENAI_API_KEY in environment variables.
    """

    API_URL = "https://api.openai.com/v1/chat/completions"
    MODEL_VERSION = "1.0"
    SYSTEM_MESSAGE = "Je bent een assistent voor een buurtveiligheidsplatform. Volg de instructies exact."

    def __init__(self, api_key: Optional[str], model: str, timeout_seconds: float = 10.0):
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.enabled = bool(api_key and api_key.strip())

        if self.enabled:
            logger.info(f"✅ OpenAI oracle initialized: {self.model}")
        else:
            logger.info("⚠️ OpenAI oracle disabled: No API key configured")

    def is_enabled(self) -> bool:
        return self.enabled

    def get_model_info(self) -> Dict[str, str]:
        return {"name": self.model, "version": self.MODEL_VERSION}

    def get_timeout_seconds(self) -> float:
        return self.timeout_seconds

    def generate(self, prompt: str, max_tokens: int = 1000) -> str:
        if not self.enabled:
            raise OracleUnavailableError("OpenAI API key not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.SYSTEM_MESSAGE},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0.3,
            "max_tokens": max_tokens,
        }

        try:
            response = requests.post(self.API_URL, headers=headers, json=payload, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            raise OracleError(f"OpenAI API request failed: {e}") from e

        if response.status_code != 200:
            raise OracleResponseError(f"OpenAI API returned status {response.status_code}: {response.text[:200]}")

        try:
            data = response.json()
            text = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise OracleResponseError(f"Unexpected OpenAI response envelope: {e}") from e

        if not isinstance(text, str):
            raise OracleResponseError("OpenAI response content is not text")
        return text
