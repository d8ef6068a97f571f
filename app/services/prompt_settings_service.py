"""
Moderation prompt settings - operator-supplied rubric overrides.

Stored separately from reports (Firestore document
SETTINGS_COLLECTION/moderation_prompts, or in memory) and passed through to
the moderation stages unchanged.
"""

from typing import Optional
import logging

from app.core.settings import settings
from app.models.report import ModerationPrompts
from app.services.moderation.prompts import DEFAULT_CONTENT_FILTER_PROMPT, DEFAULT_TEXT_FORMALIZATION_PROMPT

logger = logging.getLogger(__name__)

PROMPTS_DOCUMENT_ID = "moderation_prompts"


class PromptSettingsService:
    """Reads and writes the operator prompts; memory-backed when no db is given."""

    def __init__(self, db=None, collection_name: Optional[str] = None, use_memory: bool = False):
        self._db = db
        self.collection_name = collection_name or settings.SETTINGS_COLLECTION
        self.use_memory = use_memory
        self._memory = ModerationPrompts()

    @property
    def db(self):
        if self._db is None:
            from app.config.firebase import get_db
            self._db = get_db()
        return self._db

    def _doc_ref(self):
        return self.db.collection(self.collection_name).document(PROMPTS_DOCUMENT_ID)

    def get_prompts(self) -> ModerationPrompts:
        """Stored overrides; fields are None where the operator set nothing."""
        if self.use_memory:
            return self._memory

        doc = self._doc_ref().get()
        if not doc.exists:
            return ModerationPrompts()
        return ModerationPrompts(**(doc.to_dict() or {}))

    def get_effective_prompts(self) -> ModerationPrompts:
        """Stored overrides with the embedded defaults filled in."""
        stored = self.get_prompts()
        return ModerationPrompts(
            content_filter=stored.content_filter or DEFAULT_CONTENT_FILTER_PROMPT,
            text_formalization=stored.text_formalization or DEFAULT_TEXT_FORMALIZATION_PROMPT,
        )

    def save_prompts(self, content_filter: str, text_formalization: str) -> ModerationPrompts:
        prompts = ModerationPrompts(content_filter=content_filter, text_formalization=text_formalization)
        if self.use_memory:
            self._memory = prompts
        else:
            self._doc_ref().set(prompts.model_dump())
        logger.info("✅ Moderation prompts updated by operator")
        return prompts


# Global service instance (singleton)
_service: Optional[PromptSettingsService] = None


def get_prompt_settings_service() -> PromptSettingsService:
    global _service
    if _service is None:
        _service = PromptSettingsService(use_memory=settings.USE_MOCK_DB)
    return _service
