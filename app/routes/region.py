"""
Region endpoints - postal code lookup, public reports per area, AI summary
and per-category pattern analysis.
"""

from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool

from app.dependencies import get_oracle, get_report_repository
from app.services.moderation.base import TextOracle
from app.services.region_service import (
    analyze_category_patterns,
    get_category_region_reports,
    get_region_reports,
    summarize_region,
)
from app.services.report_repository import ReportRepository
from app.utils.geocoding import PostalCodeInfo, get_postal_code_info

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Regions"])


def _require_postal_info(postal_code: str) -> PostalCodeInfo:
    postal_info = get_postal_code_info(postal_code)
    if postal_info is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Postal code not found")
    return postal_info


@router.get("/geocode/{postal_code}", response_model=PostalCodeInfo)
async def geocode_postal_code(postal_code: str):
    return _require_postal_info(postal_code)


@router.get("/region/{postal_code}/reports")
async def get_postal_code_reports(
    postal_code: str,
    category: Optional[str] = Query(None, description="Category key, or 'all'"),
    repository: ReportRepository = Depends(get_report_repository),
):
    """Public reports within the configured radius of the postal code centre."""
    postal_info = _require_postal_info(postal_code)
    reports = get_region_reports(postal_info, repository, category=category)
    return {
        "postalCode": postal_info,
        "reports": reports,
        "count": len(reports),
    }


@router.get("/region/{postal_code}/ai-summary")
async def get_postal_code_summary(
    postal_code: str,
    repository: ReportRepository = Depends(get_report_repository),
    oracle: TextOracle = Depends(get_oracle),
):
    """Per-category summary of the public reports in the area."""
    postal_info = _require_postal_info(postal_code)
    reports = get_region_reports(postal_info, repository)
    summary = await run_in_threadpool(summarize_region, reports, oracle)
    return {"summary": summary}


@router.get("/region/{postal_code}/category/{category}/analysis")
async def get_category_analysis(
    postal_code: str,
    category: str,
    repository: ReportRepository = Depends(get_report_repository),
    oracle: TextOracle = Depends(get_oracle),
):
    """
    Journalistic pattern note for one category in the area.

    `analysis` is null when fewer than two public reports match, when no
    notable pattern is found, or when the AI is unavailable.
    """
    postal_info = _require_postal_info(postal_code)
    reports = get_category_region_reports(postal_info, repository, category)
    analysis = await run_in_threadpool(analyze_category_patterns, category, reports, oracle)
    return {"analysis": analysis}
