"""
AI moderation pipeline.

Two independent oracle-backed stages with different failure policies:
- ContentFilter: admit/deny, rejects on any failure
- TextFormalizer: rewrite, passes the original text through on failure
ModerationOrchestrator sequences them and produces the publication decision.
"""

from app.services.moderation.base import (
    DisabledOracle,
    OracleError,
    OracleResponseError,
    OracleUnavailableError,
    TextOracle,
)
from app.services.moderation.content_filter import ContentFilter, FilterResult
from app.services.moderation.orchestrator import (
    Approved,
    ModerationDecision,
    ModerationOrchestrator,
    Rejected,
)
from app.services.moderation.registry import get_oracle
from app.services.moderation.text_formalizer import FormalizationError, FormalizedText, TextFormalizer

__all__ = [
    "Approved",
    "ContentFilter",
    "DisabledOracle",
    "FilterResult",
    "FormalizationError",
    "FormalizedText",
    "ModerationDecision",
    "ModerationOrchestrator",
    "OracleError",
    "OracleResponseError",
    "OracleUnavailableError",
    "Rejected",
    "TextFormalizer",
    "TextOracle",
    "get_oracle",
]
