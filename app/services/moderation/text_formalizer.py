"""
Text Formalizer - rewrites approved reports into neutral, PII-free language.

Only ever runs on content the filter approved, so its failure is not a
safety problem: formalize_or_passthrough() returns the original text when
the oracle fails or answers with something unusable.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from app.core.settings import settings
from app.services.moderation.base import OracleError, TextOracle
from app.services.moderation.prompts import (
    DEFAULT_TEXT_FORMALIZATION_PROMPT,
    TEXT_FORMALIZATION_OUTPUT_CONTRACT,
    render_submission,
)
from app.utils.json_extract import JSONExtractionError, extract_json_object

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormalizedText:
    title: str
    description: str


class FormalizationError(ValueError):
    """Oracle output did not contain two non-empty strings."""


class TextFormalizer:
    def __init__(self, oracle: TextOracle, max_tokens: Optional[int] = None):
        self.oracle = oracle
        self.max_tokens = max_tokens or settings.AI_MAX_TOKENS

    def build_prompt(self, title: str, description: str, custom_instructions: Optional[str] = None) -> str:
        rubric = custom_instructions if custom_instructions and custom_instructions.strip() else DEFAULT_TEXT_FORMALIZATION_PROMPT
        return f"{rubric}\n\n{TEXT_FORMALIZATION_OUTPUT_CONTRACT}\n\n{render_submission(title, description)}"

    @staticmethod
    def parse_result(text: str) -> FormalizedText:
        try:
            parsed = extract_json_object(text)
        except JSONExtractionError as e:
            raise FormalizationError(str(e)) from e

        title = parsed.get("formalizedTitle")
        description = parsed.get("formalizedDescription")

        if not isinstance(title, str) or not title.strip():
            raise FormalizationError("Missing or empty 'formalizedTitle' in formalizer response")
        if not isinstance(description, str) or not description.strip():
            raise FormalizationError("Missing or empty 'formalizedDescription' in formalizer response")

        return FormalizedText(title=title.strip(), description=description.strip())

    def formalize(self, title: str, description: str, custom_instructions: Optional[str] = None) -> FormalizedText:
        """
        Rewrite title and description.

        Raises:
            OracleError: the oracle call failed
            FormalizationError: the answer was not two non-empty strings
        """
        prompt = self.build_prompt(title, description, custom_instructions)
        raw = self.oracle.generate(prompt, max_tokens=self.max_tokens)
        logger.debug(f"Formalizer raw response: {raw!r}")
        return self.parse_result(raw)

    def formalize_or_passthrough(
        self,
        title: str,
        description: str,
        custom_instructions: Optional[str] = None,
    ) -> Tuple[FormalizedText, bool]:
        """
        Formalize, falling back to the original text on any failure.

        Returns:
            (text, formalized) where formalized is False when the original was passed through
        """
        try:
            return self.formalize(title, description, custom_instructions), True
        except (OracleError, FormalizationError) as e:
            logger.warning(f"⚠️ Formalizer unavailable, publishing original text: {e}")
        except Exception as e:
            logger.error(f"❌ Unexpected formalizer error, publishing original text: {e}", exc_info=True)
        return FormalizedText(title=title, description=description), False
