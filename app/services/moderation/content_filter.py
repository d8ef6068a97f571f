"""
Content Filter - admit/deny stage of report moderation.

FAILURE POLICY (safety-first):
- Any failure (network, timeout, malformed or incomplete JSON) produces a
  REJECTION, never an approval. An oracle outage must not let unmoderated
  content reach the public feed.
- filter() never raises.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from app.core.settings import settings
from app.services.moderation.base import OracleError, TextOracle
from app.services.moderation.prompts import (
    CONTENT_FILTER_OUTPUT_CONTRACT,
    DEFAULT_CONTENT_FILTER_PROMPT,
    render_submission,
)
from app.utils.json_extract import JSONExtractionError, extract_json_object

logger = logging.getLogger(__name__)

REQUIRED_FLAGS = ("isApproved", "isSpam", "hasInappropriateContent", "hasPII")


@dataclass(frozen=True)
class FilterResult:
    is_approved: bool
    is_spam: bool
    has_inappropriate_content: bool
    has_pii: bool
    reason: Optional[str] = None

    @property
    def is_rejected(self) -> bool:
        return self.is_spam or self.has_inappropriate_content or self.has_pii or not self.is_approved

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isApproved": self.is_approved,
            "isSpam": self.is_spam,
            "hasInappropriateContent": self.has_inappropriate_content,
            "hasPII": self.has_pii,
            "reason": self.reason,
        }


class FilterResponseError(ValueError):
    """Oracle output did not match the filter schema."""


class ContentFilter:
    """
    Classifies a submission as approved / spam / inappropriate / PII-bearing.

    The oracle is injected so tests can script its answers.
    """

    UNAVAILABLE_REASON = "AI moderation temporarily unavailable, the report has been held back for review"
    def __init__(self, oracle: TextOracle, max_tokens: Optional[int] = None):
        self.oracle = oracle
        self.max_tokens = max_tokens or settings.AI_MAX_TOKENS

    @classmethod
    def safety_reject(cls, detail: Optional[str] = None) -> FilterResult:
        """The result used whenever the oracle cannot be trusted for this call."""
        if detail:
            logger.debug(f"Content filter failure detail: {detail}")
        return FilterResult(
            is_approved=False,
            is_spam=True,
            has_inappropriate_content=True,
            has_pii=False,
            reason=cls.UNAVAILABLE_REASON,
        )

    def build_prompt(self, title: str, description: str, custom_instructions: Optional[str] = None) -> str:
        rubric = custom_instructions if custom_instructions and custom_instructions.strip() else DEFAULT_CONTENT_FILTER_PROMPT
        return f"{rubric}\n\n{CONTENT_FILTER_OUTPUT_CONTRACT}\n\n{render_submission(title, description)}"

    @staticmethod
    def parse_result(text: str) -> FilterResult:
        """
        Parse and validate oracle output.

        Raises:
            JSONExtractionError: no JSON object in the text
            FilterResponseError: a required flag is missing or not a boolean
        """
        parsed = extract_json_object(text)

        for flag in REQUIRED_FLAGS:
            if not isinstance(parsed.get(flag), bool):
                raise FilterResponseError(f"Missing or non-boolean field '{flag}' in filter response")

        reason = parsed.get("reason")
        if not isinstance(reason, str) or not reason.strip():
            reason = None

        return FilterResult(
            is_approved=parsed["isApproved"],
            is_spam=parsed["isSpam"],
            has_inappropriate_content=parsed["hasInappropriateContent"],
            has_pii=parsed["hasPII"],
            reason=reason.strip() if reason else None,
        )

    def filter(self, title: str, description: str, custom_instructions: Optional[str] = None) -> FilterResult:
        """
        Classify a submission.

        Returns:
            FilterResult from the oracle, or the safety-reject result on any failure
        """
        prompt = self.build_prompt(title, description, custom_instructions)

        try:
            raw = self.oracle.generate(prompt, max_tokens=self.max_tokens)
            logger.debug(f"Content filter raw response: {raw!r}")
            result = self.parse_result(raw)
        except (OracleError, JSONExtractionError, FilterResponseError) as e:
            logger.warning(f"⚠️ Content filter unavailable, rejecting submission: {e}")
            return self.safety_reject(str(e))
        except Exception as e:
            logger.error(f"❌ Unexpected content filter error, rejecting submission: {e}", exc_info=True)
            return self.safety_reject(str(e))

        if result.is_rejected:
            logger.info(f"Content filter rejected submission: {result.to_dict()}")
        else:
            logger.info("✅ Content filter approved submission")
        return result
