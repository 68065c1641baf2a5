"""
Pydantic schemas for check requests.
"""

from typing import Any, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from app.services.checks.models import (
    AssessmentOutcome,
    Check,
    CheckStatus,
    ExplicitAssessment,
    ProviderTask,
    SafeHarbour,
    TaskOutcome,
    TaskResult,
)


StatusValue = Literal["open", "processing", "closed", "aborted", "cancelled"]
ResultValue = Literal["clear", "alert", "fail"]


class TaskOutcomeBody(BaseModel):
    """Provider outcome for a single task."""
    result: ResultValue
    data: dict[str, Any] = Field(default_factory=dict)
    status: Optional[str] = Field(None, description="Provider report status, e.g. unobtainable")

    def to_domain(self, task_type: str) -> TaskOutcome:
        return TaskOutcome(
            task_type=task_type,
            result=TaskResult(self.result),
            data=dict(self.data),
            status=self.status,
        )


class ProviderTaskBody(BaseModel):
    """Task as sent to the provider."""
    type: str
    opts: dict[str, Any] = Field(default_factory=dict)


class ExplicitAssessmentBody(BaseModel):
    """Assessment supplied by the provider."""
    outcome: Literal["CLEAR", "CONSIDER"]
    confidence: Optional[float] = None
    reasons: list[str] = Field(default_factory=list)

    @field_validator("outcome", mode="before")
    @classmethod
    def upper_outcome(cls, v):
        return v.upper() if isinstance(v, str) else v


class SafeHarbourBody(BaseModel):
    is_compliant: bool
    criteria: dict[str, bool] = Field(default_factory=dict)


class CheckRequest(BaseModel):
    """Snapshot of a check as held by the case-management store."""
    id: str = Field(..., description="Check ID")
    type: str = Field(..., description="Check type id, e.g. electronic-id")
    status: StatusValue = "open"
    selected_tasks: list[str] = Field(default_factory=list)
    task_outcomes: dict[str, TaskOutcomeBody] = Field(
        default_factory=dict, description="Outcomes keyed by report type, in recorded order"
    )
    explicit_assessment: Optional[ExplicitAssessmentBody] = None
    safe_harbour: Optional[SafeHarbourBody] = None
    provider_tasks: list[ProviderTaskBody] = Field(default_factory=list)
    matter_category: Optional[str] = None
    details: dict[str, str] = Field(default_factory=dict)
    consider_reasons: list[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "id": "chk_123",
                "type": "electronic-id",
                "status": "closed",
                "selected_tasks": ["idv", "document-verification", "aml-screen"],
                "task_outcomes": {
                    "document": {"result": "clear"},
                    "peps": {"result": "alert", "data": {"total_hits": 2}}
                },
                "provider_tasks": [{"type": "report:peps", "opts": {"monitored": True}}]
            }
        }

    def to_domain(self) -> Check:
        return Check(
            id=self.id,
            type=self.type,
            status=CheckStatus(self.status),
            selected_tasks=frozenset(self.selected_tasks),
            task_outcomes={k: v.to_domain(k) for k, v in self.task_outcomes.items()},
            explicit_assessment=ExplicitAssessment(
                outcome=AssessmentOutcome(self.explicit_assessment.outcome),
                confidence=self.explicit_assessment.confidence,
                reasons=tuple(self.explicit_assessment.reasons),
            ) if self.explicit_assessment else None,
            safe_harbour=SafeHarbour(
                is_compliant=self.safe_harbour.is_compliant,
                criteria=dict(self.safe_harbour.criteria),
            ) if self.safe_harbour else None,
            provider_tasks=tuple(ProviderTask(type=t.type, opts=dict(t.opts)) for t in self.provider_tasks),
            matter_category=self.matter_category,
            details=dict(self.details),
            consider_reasons=tuple(self.consider_reasons),
        )


class SubmitRequest(CheckRequest):
    """Draft check plus the caller's answer to any soft policy prompt."""
    confirmed: bool = Field(False, description="Caller accepted the soft policy warning")


class ClassifyRequest(BaseModel):
    """Classify a single task outcome."""
    task_type: str
    result: ResultValue
    data: dict[str, Any] = Field(default_factory=dict)
    status: StatusValue = "closed"
    check_type: Optional[str] = None

    def to_outcome(self) -> TaskOutcome:
        return TaskOutcome(task_type=self.task_type, result=TaskResult(self.result), data=dict(self.data))
