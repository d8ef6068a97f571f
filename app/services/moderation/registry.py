"""
Oracle Registry.

Selects the text oracle from configuration. There is deliberately no
rule-based fallback provider: without a working oracle the content filter
rejects, it never approves on its own.
"""

from app.services.moderation.base import DisabledOracle, TextOracle
from app.services.moderation.llm_provider import AnthropicOracle, OpenAIOracle
from app.core.settings import settings
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def build_oracle() -> TextOracle:
    """Instantiate the configured provider, or a DisabledOracle."""
    if not settings.AI_ENABLED:
        logger.info("⚠️ AI is disabled globally (AI_ENABLED=false), all submissions will be held back")
        return DisabledOracle("AI moderation is disabled")

    provider_name = (settings.AI_PROVIDER or "anthropic").lower()

    if provider_name == "openai":
        provider: TextOracle = OpenAIOracle(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            timeout_seconds=settings.AI_TIMEOUT_SECONDS,
        )
    elif provider_name == "anthropic":
        provider = AnthropicOracle(
            api_key=settings.ANTHROPIC_API_KEY,
            model=settings.ANTHROPIC_MODEL,
            timeout_seconds=settings.AI_TIMEOUT_SECONDS,
        )
    else:
        logger.error(f"❌ Unknown AI_PROVIDER '{settings.AI_PROVIDER}'")
        return DisabledOracle(f"Unknown AI provider: {settings.AI_PROVIDER}")

    if not provider.is_enabled():
        return DisabledOracle(f"No API key configured for {provider_name}")

    logger.info(f"✅ Oracle registered: {provider.get_model_info()['name']}")
    return provider


# Global registry instance (singleton)
_oracle: Optional[TextOracle] = None


def get_oracle() -> TextOracle:
    """
    Get the configured oracle (FastAPI dependency).

    Returns:
        The active TextOracle; a DisabledOracle when AI is unavailable
    """
    global _oracle
    if _oracle is None:
        _oracle = build_oracle()
    return _oracle


def reset_oracle() -> None:
    """Drop the cached oracle so the next call re-reads settings."""
    global _oracle
    _oracle = None
