"""
Tests for report model validation and the camelCase wire format.
"""

import pytest
from pydantic import ValidationError

from app.models.report import (
    CATEGORIES,
    ModerationPrompts,
    ReportCategory,
    ReportCreate,
    ReportRecord,
    subcategories_for,
)
from tests.test_report_repository import make_record


class TestReportCreate:

    def test_accepts_camel_case_and_snake_case(self):
        camel = ReportCreate(title="t", description="d", category="theft", involvementType="witness")
        snake = ReportCreate(title="t", description="d", category="theft", involvement_type="witness")
        assert camel == snake

    def test_blank_optional_fields_become_none(self):
        report = ReportCreate(
            title="t", description="d", category="theft", involvement_type="victim",
            subcategory=" ", locationDescription="", incidentDateTime="",
        )
        assert report.subcategory is None
        assert report.location_description is None
        assert report.incident_date_time is None

    def test_unknown_fields_are_ignored(self):
        report = ReportCreate(
            title="t", description="d", category="theft", involvement_type="victim",
            isPublic=True, moderationStatus="approved",
        )
        assert not hasattr(report, "is_public")

    @pytest.mark.parametrize("field", ["title", "description"])
    def test_whitespace_only_text_is_rejected(self, field):
        fields = {"title": "t", "description": "d", field: "   \n\t"}
        with pytest.raises(ValidationError, match="must not be blank"):
            ReportCreate(**fields, category="theft", involvement_type="victim")

    def test_surrounding_whitespace_is_kept_verbatim(self):
        report = ReportCreate(title="  Fiets weg ", description="d", category="theft", involvement_type="victim")
        assert report.title == "  Fiets weg "

    def test_subcategory_must_belong_to_category(self):
        with pytest.raises(ValidationError, match="not valid for category"):
            ReportCreate(title="t", description="d", category="cyber", subcategory="Bike theft", involvement_type="victim")

    @pytest.mark.parametrize("latitude,longitude", [(90.1, 4.0), (51.0, 180.5), (51.0, None), (None, 4.0)])
    def test_coordinates(self, latitude, longitude):
        with pytest.raises(ValidationError):
            ReportCreate(
                title="t", description="d", category="theft", involvement_type="victim",
                latitude=latitude, longitude=longitude,
            )


class TestReportRecord:

    def test_visibility_must_match_status(self):
        with pytest.raises(ValidationError):
            make_record(public=True, moderation_status="rejected")

    def test_serializes_with_camel_case_aliases(self):
        data = make_record().model_dump(by_alias=True)

        assert data["isPublic"] is True
        assert data["moderationStatus"] == "approved"
        assert data["originalTitle"] == "Mijn fiets is gejat!"
        assert data["wasFormalized"] is False

    def test_record_is_moderated_by_default(self):
        assert isinstance(make_record(), ReportRecord)
        assert make_record().is_moderated is True


def test_every_category_has_subcategories():
    for category in ReportCategory:
        assert subcategories_for(category) == CATEGORIES[category]["subcategories"]
        assert subcategories_for(category)


def test_moderation_prompts_default_to_none():
    prompts = ModerationPrompts()
    assert prompts.content_filter is None
    assert prompts.text_formalization is None
