"""
Report service - ingestion pipeline for resident submissions.

Flow (synchronous, one submission at a time):
1. Coerce form-encoded fields and validate against ReportCreate
2. Run the moderation orchestrator (filter, then formalizer if approved)
3. ALWAYS persist the result, approved or rejected, so admins can audit
   false rejections
4. Report the outcome to the caller; a rejection is a caller-visible
   failure even though the row was saved

The originals are copied verbatim from the submission and never touched
again; title/description come from the moderation decision only.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
import logging

from app.models.report import ModerationPrompts, Report, ReportCreate, ReportRecord
from app.services.moderation.orchestrator import ModerationDecision, ModerationOrchestrator
from app.services.report_repository import ReportRepository

logger = logging.getLogger(__name__)

FLOAT_FIELDS = ("latitude", "longitude")
BOOL_FIELDS = ("authoritiesContacted",)


def coerce_form_fields(form: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Turn multipart/form-encoded strings into typed values.

    - latitude/longitude: "" -> None, numeric strings -> float; anything
      else is left as-is so validation reports it per field
    - authoritiesContacted: only the string "true" (any case) is True
    - incidentDateTime: "" -> None
    """
    payload = {key: value for key, value in form.items() if value is not None}

    for field in FLOAT_FIELDS:
        if field not in payload:
            continue
        value = payload[field]
        if isinstance(value, str):
            value = value.strip()
            if not value:
                payload[field] = None
                continue
            try:
                payload[field] = float(value)
            except ValueError:
                payload[field] = value

    for field in BOOL_FIELDS:
        value = payload.get(field)
        if isinstance(value, str):
            payload[field] = value.strip().lower() == "true"
        elif value is None:
            payload[field] = False

    if isinstance(payload.get("incidentDateTime"), str) and not payload["incidentDateTime"].strip():
        payload["incidentDateTime"] = None

    return payload


def validate_submission(payload: Mapping[str, Any]) -> ReportCreate:
    """Raises pydantic.ValidationError with field-level detail."""
    return ReportCreate.model_validate(dict(payload))


def build_report_record(submission: ReportCreate, decision: ModerationDecision) -> ReportRecord:
    """
    Combine the submission and the decision into the record to persist.
    moderation_status and is_public both come from decision.outcome.
    """
    fields = submission.model_dump(exclude={"title", "description"})
    return ReportRecord(
        **fields,
        title=decision.title,
        description=decision.description,
        original_title=submission.title,
        original_description=submission.description,
        moderation_status=decision.moderation_status,
        moderation_reason=decision.reason,
        is_moderated=True,
        is_public=decision.is_public,
        was_formalized=decision.was_formalized,
    )


@dataclass(frozen=True)
class SubmissionOutcome:
    report: Report
    decision: ModerationDecision

    @property
    def accepted(self) -> bool:
        return self.decision.is_public


def submit_report(
    submission: ReportCreate,
    repository: ReportRepository,
    orchestrator: ModerationOrchestrator,
    prompts: Optional[ModerationPrompts] = None,
) -> SubmissionOutcome:
    """
    Moderate and persist one validated submission.

    Raises:
        Exception: whatever the repository raises on a failed write; nothing
            is persisted in that case
    """
    logger.info(f"📝 Moderating submission: category={submission.category}")

    decision = orchestrator.moderate(
        submission.title,
        submission.description,
        category=submission.category,
        prompts=prompts,
    )

    record = build_report_record(submission, decision)
    report = repository.create_with_moderation(record)

    if decision.is_public:
        logger.info(f"✅ Report {report.id} published")
    else:
        logger.info(f"Report {report.id} stored as rejected: {decision.reason}")

    return SubmissionOutcome(report=report, decision=decision)
