"""
Pydantic schemas for check responses.
"""

from typing import Literal, Optional
from pydantic import BaseModel

from app.services.checks.models import AssessmentSummary, CheckTypeDefinition, CheckWarning
from app.services.checks.validator import (
    MissingRequiredDetails,
    MissingRequiredTasks,
    SoftPolicyWarning,
    ValidationResult,
)


class WarningResult(BaseModel):
    """Reviewer-facing warning."""
    severity: Literal["fail", "warning", "info"]
    icon: str
    message: str

    @classmethod
    def from_domain(cls, warning: CheckWarning) -> "WarningResult":
        return cls(severity=warning.severity.value, icon=warning.icon, message=warning.message)


class AssessmentResult(BaseModel):
    """Renderable assessment summary."""
    outcome: Literal["CLEAR", "CONSIDER"]
    warnings: list[WarningResult] = []
    monitoring_enabled: bool = False
    safe_harbour_badge_visible: bool = False
    label: str = ""
    enhanced: bool = False
    consider_reasons: list[str] = []

    @classmethod
    def from_domain(cls, summary: AssessmentSummary) -> "AssessmentResult":
        return cls(
            outcome=summary.outcome.value,
            warnings=[WarningResult.from_domain(w) for w in summary.warnings],
            monitoring_enabled=summary.monitoring_enabled,
            safe_harbour_badge_visible=summary.safe_harbour_badge_visible,
            label=summary.label,
            enhanced=summary.enhanced,
            consider_reasons=summary.consider_reasons,
        )


class ValidationResponse(BaseModel):
    """Outcome of task selection validation."""
    status: Literal["ok", "missing_required_tasks", "missing_required_details", "soft_policy_warning"]
    missing: list[str] = []
    reason: Optional[str] = None

    @classmethod
    def from_domain(cls, result: ValidationResult) -> "ValidationResponse":
        if isinstance(result, MissingRequiredTasks):
            return cls(status="missing_required_tasks", missing=sorted(result.missing))
        if isinstance(result, MissingRequiredDetails):
            return cls(status="missing_required_details", missing=sorted(result.missing))
        if isinstance(result, SoftPolicyWarning):
            return cls(status="soft_policy_warning", reason=result.reason)
        return cls(status="ok")


class CheckTypeResult(BaseModel):
    """Check type definition as rendered by the request form."""
    id: str
    label: str
    visible_sections: list[str]
    relevant_tasks: list[str]
    hidden_tasks: list[str]
    visible_tasks: list[str]
    visible_categories: list[str]
    default_tasks: list[str]
    required_tasks: list[str]
    required_details: list[str]

    @classmethod
    def from_domain(cls, definition: CheckTypeDefinition, categories: list[str]) -> "CheckTypeResult":
        return cls(
            id=definition.id,
            label=definition.label,
            visible_sections=sorted(definition.visible_sections),
            relevant_tasks=sorted(definition.relevant_tasks),
            hidden_tasks=sorted(definition.hidden_tasks),
            visible_tasks=sorted(definition.visible_tasks),
            visible_categories=categories,
            default_tasks=sorted(definition.default_tasks),
            required_tasks=sorted(definition.required_tasks),
            required_details=sorted(definition.required_details),
        )


class SubmissionError(BaseModel):
    """422 detail for a check that cannot be submitted."""
    status: Literal["missing_required_tasks", "missing_required_details", "soft_policy_unconfirmed"]
    message: str
    missing: list[str] = []
    reason: Optional[str] = None


class SubmitResult(BaseModel):
    check_id: str
    submittable: bool = True


class RefreshResult(BaseModel):
    """Check state after pulling the provider summary."""
    check_id: str
    status: str
    task_outcomes: list[str]
    assessment: AssessmentResult
    provider_circuit: Literal["closed", "open", "half_open"] = "closed"
