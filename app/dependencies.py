"""
FastAPI dependencies.

Every collaborator of the routes is injected here so tests can swap in a
scripted oracle and an in-memory repository via app.dependency_overrides.
"""

from fastapi import Depends

from app.services.moderation.base import TextOracle
from app.services.moderation.orchestrator import ModerationOrchestrator
from app.services.moderation.registry import get_oracle
from app.services.prompt_settings_service import PromptSettingsService, get_prompt_settings_service
from app.services.report_repository import ReportRepository, get_report_repository


def get_orchestrator(oracle: TextOracle = Depends(get_oracle)) -> ModerationOrchestrator:
    return ModerationOrchestrator.from_oracle(oracle)


__all__ = [
    "PromptSettingsService",
    "ReportRepository",
    "get_oracle",
    "get_orchestrator",
    "get_prompt_settings_service",
    "get_report_repository",
]
