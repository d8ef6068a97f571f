"""
Admin endpoints - moderation audit and operator configuration.

SCOPE OF ADMIN:
✅ See every report, including rejected ones (audit false rejections)
✅ Bulk reset of the report store
✅ Override the moderation rubrics for both AI stages

❌ NOT edit report content (originals are write-once)
❌ NOT flip visibility by hand; visibility only comes from the pipeline
"""

from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.dependencies import get_prompt_settings_service, get_report_repository
from app.models.base import ActionResponse
from app.models.report import ModerationPrompts, ModerationPromptsUpdate, Report
from app.services.prompt_settings_service import PromptSettingsService
from app.services.report_repository import ReportRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/reports", response_model=List[Report])
async def get_admin_reports(
    category: Optional[str] = Query(None, description="Category key, or 'all'"),
    repository: ReportRepository = Depends(get_report_repository),
):
    """
    Every report regardless of moderation outcome, newest first.

    Shows both the published text and the verbatim original so reviewers
    can judge the AI's decisions.
    """
    try:
        if category and category != "all":
            reports = repository.get_reports_by_category(category)
        else:
            reports = repository.get_all_reports()
    except Exception as e:
        logger.error(f"❌ GET /admin/reports failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch admin reports: {e}",
        )

    logger.info(f"Admin reports fetched: {len(reports)}")
    return reports


@router.delete("/reports", response_model=ActionResponse)
async def delete_all_reports(repository: ReportRepository = Depends(get_report_repository)):
    """Permanently remove every report (admin reset)."""
    success = repository.delete_all_reports()
    logger.warning(f"Admin bulk delete requested (success: {success})")
    return ActionResponse(
        success=success,
        message="All reports deleted" if success else "Failed to delete reports",
    )


@router.get("/moderation-prompts", response_model=ModerationPrompts)
async def get_moderation_prompts(
    prompt_settings: PromptSettingsService = Depends(get_prompt_settings_service),
):
    """Current rubrics for both stages; the embedded defaults where none is stored."""
    try:
        return prompt_settings.get_effective_prompts()
    except Exception as e:
        logger.error(f"❌ Error fetching moderation prompts: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch moderation prompts")


@router.post("/moderation-prompts", response_model=ActionResponse)
async def save_moderation_prompts(
    request: ModerationPromptsUpdate,
    prompt_settings: PromptSettingsService = Depends(get_prompt_settings_service),
):
    """Replace both rubrics. Both fields must be strings (400 otherwise)."""
    try:
        prompt_settings.save_prompts(request.content_filter, request.text_formalization)
    except Exception as e:
        logger.error(f"❌ Error saving moderation prompts: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save moderation prompts")
    return ActionResponse(success=True, message="Moderation prompts saved")
