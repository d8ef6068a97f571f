"""
Moderation Orchestrator - sequences the two AI stages and decides publication.

Flow:
1. Content filter. Any non-approval stops the pipeline; the formalizer is
   never called for rejected content.
2. Text formalizer on the original text (pass-through on failure).
3. Decision with a single outcome, Approved or Rejected(reason), from
   which both moderation_status and is_public are derived.
"""

from dataclasses import dataclass
from typing import Optional, Union
import logging
import re

from app.models.report import ModerationPrompts, ModerationStatus, ReportCategory, category_name
from app.services.moderation.base import TextOracle
from app.services.moderation.content_filter import ContentFilter, FilterResult
from app.services.moderation.text_formalizer import TextFormalizer

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_REASON = "Content appears to be spam or inappropriate"
REJECTED_PLACEHOLDER_DESCRIPTION = "Melding is gemodereerd vanwege ongepaste inhoud."
EMPTY_PLACEHOLDER_DESCRIPTION = "Melding zonder verdere beschrijving."


@dataclass(frozen=True)
class Approved:
    status: str = ModerationStatus.APPROVED.value


@dataclass(frozen=True)
class Rejected:
    reason: str
    status: str = ModerationStatus.REJECTED.value


ModerationOutcome = Union[Approved, Rejected]


def placeholder_title(category: Optional[ReportCategory], rejected: bool) -> str:
    label = category_name(category) if category else "onbekende categorie"
    return f"Gemodereerde melding: {label}" if rejected else f"Melding: {label}"


def _normalize(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip().lower()


def has_significant_changes(original: str, rewritten: str) -> bool:
    """True when the rewrite differs from the original beyond whitespace and case."""
    return _normalize(original) != _normalize(rewritten)


@dataclass(frozen=True)
class ModerationDecision:
    filter_result: FilterResult
    outcome: ModerationOutcome
    title: str
    description: str
    was_formalized: bool = False

    @property
    def should_auto_reject(self) -> bool:
        result = self.filter_result
        return result.is_spam or result.has_inappropriate_content or result.has_pii

    @property
    def is_public(self) -> bool:
        return isinstance(self.outcome, Approved)

    @property
    def moderation_status(self) -> str:
        return self.outcome.status

    @property
    def reason(self) -> Optional[str]:
        if isinstance(self.outcome, Rejected):
            return self.outcome.reason
        return self.filter_result.reason


class ModerationOrchestrator:
    def __init__(self, content_filter: ContentFilter, text_formalizer: TextFormalizer):
        self.content_filter = content_filter
        self.text_formalizer = text_formalizer

    @classmethod
    def from_oracle(cls, oracle: TextOracle, max_tokens: Optional[int] = None) -> "ModerationOrchestrator":
        """Both stages share one oracle; max_tokens defaults to AI_MAX_TOKENS."""
        return cls(ContentFilter(oracle, max_tokens), TextFormalizer(oracle, max_tokens))

    def moderate(
        self,
        title: str,
        description: str,
        category: Optional[ReportCategory] = None,
        prompts: Optional[ModerationPrompts] = None,
    ) -> ModerationDecision:
        prompts = prompts or ModerationPrompts()

        filter_result = self.content_filter.filter(title, description, prompts.content_filter)

        if filter_result.is_rejected:
            reason = filter_result.reason or DEFAULT_REJECTION_REASON
            logger.info(f"Moderation decision: rejected ({reason})")
            return ModerationDecision(
                filter_result=filter_result,
                outcome=Rejected(reason=reason),
                title=placeholder_title(category, rejected=True),
                description=REJECTED_PLACEHOLDER_DESCRIPTION,
            )

        formalized, applied = self.text_formalizer.formalize_or_passthrough(
            title, description, prompts.text_formalization
        )

        final_title = formalized.title if formalized.title.strip() else placeholder_title(category, rejected=False)
        final_description = formalized.description if formalized.description.strip() else EMPTY_PLACEHOLDER_DESCRIPTION

        was_formalized = applied and (
            has_significant_changes(title, final_title) or has_significant_changes(description, final_description)
        )
        logger.info(f"✅ Moderation decision: approved (formalized: {was_formalized})")

        return ModerationDecision(
            filter_result=filter_result,
            outcome=Approved(),
            title=final_title,
            description=final_description,
            was_formalized=was_formalized,
        )
