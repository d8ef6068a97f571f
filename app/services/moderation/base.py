"""
Text Oracle Base Interface.

Defines the contract for the external text-generation service that backs
both moderation stages. The oracle is untrusted: callers must treat every
answer as free text that may or may not contain the JSON they asked for,
and every call as one that may fail.
"""

from abc import ABC, abstractmethod
from typing import Dict
import logging

logger = logging.getLogger(__name__)


class OracleError(Exception):
    """Any failure to obtain an answer from the oracle (network, timeout, HTTP error)."""


class OracleUnavailableError(OracleError):
    """The oracle is disabled or has no credentials configured."""


class OracleResponseError(OracleError):
    """The oracle answered, but not with a usable envelope."""


class TextOracle(ABC):
    """
    Abstract base class for text-generation providers.

    An oracle RAISES on failure (OracleError). The moderation stages decide what a failure means:
    the content filter rejects, the formalizer passes text through.
    """

    @abstractmethod
    def is_enabled(self) -> bool:
        """
        Check if this provider is enabled.

        Returns:
            True if provider is configured and ready, False otherwise
        """
        pass

    @abstractmethod
    def get_model_info(self) -> Dict[str, str]:
        """
        Get model information (name, version).

        Returns:
            Dict with 'name' and 'version' keys
        """
        pass

    @abstractmethod
    def get_timeout_seconds(self) -> float:
        """Get the per-call network timeout (in seconds)."""
        pass

    @abstractmethod
    def generate(self, prompt: str, max_tokens: int = 1000) -> str:
        """
        Send one prompt and return the raw text answer.

        This method MUST:
        - Block for at most get_timeout_seconds()
        - Raise OracleError (or a subclass) on any failure

        Args:
            prompt: Full prompt (rubric + submitted text)
            max_tokens: Upper bound on the answer length

        Returns:
            The answer text, unparsed
        """
        pass


class DisabledOracle(TextOracle):
    """
    Stand-in used when AI is switched off or no API key is configured.

    Every call fails, so the content filter safety-rejects and nothing
    reaches the public feed unmoderated.
    """

    MODEL_NAME = "disabled"
    MODEL_VERSION = "0"

    def __init__(self, reason: str = "AI moderation is disabled"):
        self.reason = reason

    def is_enabled(self) -> bool:
        return False

    def get_model_info(self) -> Dict[str, str]:
        return {"name": self.MODEL_NAME, "version": self.MODEL_VERSION}

    def get_timeout_seconds(self) -> float:
        return 0.0

    def generate(self, prompt: str, max_tokens: int = 1000) -> str:
        raise OracleUnavailableError(self.reason)
