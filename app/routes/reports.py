"""
Report endpoints - resident submission and the public read surface.
"""

from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.core.settings import settings
from app.dependencies import get_orchestrator, get_prompt_settings_service, get_report_repository
from app.models.base import ActionResponse, ErrorResponse
from app.models.report import ModerationPrompts, Report
from app.services.moderation.orchestrator import ModerationOrchestrator
from app.services.prompt_settings_service import PromptSettingsService
from app.services.report_repository import ReportRepository
from app.services.report_service import coerce_form_fields, submit_report, validate_submission
from app.utils.uploads import UploadRejectedError, check_image_upload, store_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


def _error(error: str, reason: Optional[str] = None, **extra) -> JSONResponse:
    body = ErrorResponse(error=error, reason=reason, **extra)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=jsonable_encoder(body.model_dump(exclude_none=True)))


def _load_prompts(prompt_settings: PromptSettingsService) -> ModerationPrompts:
    try:
        return prompt_settings.get_prompts()
    except Exception as e:
        # Embedded rubrics still apply; this only loses the operator override
        logger.warning(f"⚠️ Could not load moderation prompts, using defaults: {e}")
        return ModerationPrompts()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Report)
async def create_report(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    subcategory: Optional[str] = Form(None),
    latitude: Optional[str] = Form(None),
    longitude: Optional[str] = Form(None),
    location_description: Optional[str] = Form(None, alias="locationDescription"),
    authorities_contacted: Optional[str] = Form(None, alias="authoritiesContacted"),
    involvement_type: Optional[str] = Form(None, alias="involvementType"),
    incident_date_time: Optional[str] = Form(None, alias="incidentDateTime"),
    image: Optional[UploadFile] = File(None),
    repository: ReportRepository = Depends(get_report_repository),
    orchestrator: ModerationOrchestrator = Depends(get_orchestrator),
    prompt_settings: PromptSettingsService = Depends(get_prompt_settings_service),
):
    """
    Submit a new incident report (multipart form).

    This endpoint:
    1. Validates the form fields (400 with field details on failure)
    2. Runs AI moderation (content filter, then formalizer)
    3. Stores the report, approved or rejected
    4. Returns 201 with the published report, or 400 with the rejection reason
    """
    payload = coerce_form_fields({
        "title": title,
        "description": description,
        "category": category,
        "subcategory": subcategory,
        "latitude": latitude,
        "longitude": longitude,
        "locationDescription": location_description,
        "authoritiesContacted": authorities_contacted,
        "involvementType": involvement_type,
        "incidentDateTime": incident_date_time,
    })

    image_bytes = None
    if image is not None and image.filename:
        image_bytes = await image.read()
        try:
            check_image_upload(image.content_type, len(image_bytes), settings.MAX_UPLOAD_BYTES)
        except UploadRejectedError as e:
            return _error("Invalid image upload", str(e))

    try:
        submission = validate_submission(payload)
    except ValidationError as e:
        logger.info(f"POST /reports - validation failed: {e.error_count()} error(s)")
        return _error("Validation failed", details=e.errors(include_url=False, include_context=False))

    try:
        if image_bytes is not None:
            image_url = await run_in_threadpool(store_image, image_bytes, image.filename, settings.UPLOAD_DIR)
            submission = submission.model_copy(update={"image_url": image_url})

        prompts = await run_in_threadpool(_load_prompts, prompt_settings)
        outcome = await run_in_threadpool(submit_report, submission, repository, orchestrator, prompts)
    except Exception as e:
        logger.error(f"❌ POST /reports - Report creation failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Report creation failed: {e}",
        )

    if not outcome.accepted:
        return _error("Content rejected by moderation", outcome.decision.reason, reportId=outcome.report.id)

    return outcome.report


@router.get("", response_model=List[Report])
async def get_reports(
    category: Optional[str] = Query(None, description="Category key, or 'all'"),
    repository: ReportRepository = Depends(get_report_repository),
):
    """Public reports only, newest first."""
    try:
        if category and category != "all":
            return repository.get_public_reports_by_category(category)
        return repository.get_all_public_reports()
    except Exception as e:
        logger.error(f"❌ GET /reports failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to retrieve reports: {e}")


@router.get("/{report_id}", response_model=Report)
async def get_report(report_id: str, repository: ReportRepository = Depends(get_report_repository)):
    report = repository.get_public_report(report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    return report


@router.delete("/{report_id}", response_model=ActionResponse)
async def delete_report(report_id: str, repository: ReportRepository = Depends(get_report_repository)):
    if not repository.delete_report(report_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    return ActionResponse(success=True, message=f"Report {report_id} deleted")
