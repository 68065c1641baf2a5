"""
Check domain models.

Plain dataclasses shared by the catalog, validator, classifier and aggregator.
All of them are treated as immutable snapshots by the core.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class TaskResult(str, Enum):
    """Raw result reported by the provider for a single task."""
    CLEAR = "clear"
    ALERT = "alert"
    FAIL = "fail"


class CheckStatus(str, Enum):
    """Check lifecycle states."""
    OPEN = "open"
    PROCESSING = "processing"
    CLOSED = "closed"
    ABORTED = "aborted"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({CheckStatus.CLOSED, CheckStatus.ABORTED, CheckStatus.CANCELLED})


class Severity(str, Enum):
    """Warning severity levels."""
    FAIL = "fail"
    WARNING = "warning"
    INFO = "info"


class AssessmentOutcome(str, Enum):
    """Overall check outcome shown to reviewers."""
    CLEAR = "CLEAR"
    CONSIDER = "CONSIDER"


SEVERITY_ICONS = {
    Severity.FAIL: "cross",
    Severity.WARNING: "alert",
    Severity.INFO: "info",
}


@dataclass(frozen=True)
class SoftPolicy:
    """Confirm-or-abort rule: fires when `task` is not selected."""
    task: str
    reason: str
    matter_category: Optional[str] = None  # None = any category


@dataclass(frozen=True)
class CheckTypeDefinition:
    """Declarative rules for one check type."""
    id: str
    label: str
    visible_sections: frozenset[str] = frozenset()
    relevant_tasks: frozenset[str] = frozenset()
    hidden_tasks: frozenset[str] = frozenset()
    default_tasks: frozenset[str] = frozenset()
    required_tasks: frozenset[str] = frozenset()
    required_details: frozenset[str] = frozenset()
    soft_policies: tuple[SoftPolicy, ...] = ()

    @property
    def visible_tasks(self) -> frozenset[str]:
        # hidden wins even when a task is also listed as relevant
        return self.relevant_tasks - self.hidden_tasks


@dataclass(frozen=True)
class TaskOutcome:
    """Outcome of one provider report."""
    task_type: str
    result: TaskResult
    data: dict[str, Any] = field(default_factory=dict)
    status: Optional[str] = None  # provider report status, e.g. "closed", "unobtainable"

    @property
    def unobtainable(self) -> bool:
        return self.status == "unobtainable"


@dataclass(frozen=True)
class ProviderTask:
    """Task entry as sent to the provider (e.g. report:peps)."""
    type: str
    opts: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExplicitAssessment:
    """Assessment returned directly by the provider."""
    outcome: AssessmentOutcome
    confidence: Optional[float] = None
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class SafeHarbour:
    """Safe Harbour designation and the criteria it was derived from."""
    is_compliant: bool
    criteria: dict[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class Check:
    """Snapshot of a single verification case."""
    id: str
    type: str
    status: CheckStatus = CheckStatus.OPEN
    selected_tasks: frozenset[str] = frozenset()
    # insertion order is the order outcomes were recorded
    task_outcomes: dict[str, TaskOutcome] = field(default_factory=dict)
    explicit_assessment: Optional[ExplicitAssessment] = None
    safe_harbour: Optional[SafeHarbour] = None
    provider_tasks: tuple[ProviderTask, ...] = ()
    matter_category: Optional[str] = None
    details: dict[str, str] = field(default_factory=dict)
    consider_reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class CheckWarning:
    """Reviewer-facing warning derived from a task outcome."""
    severity: Severity
    message: str
    icon: str = ""

    def __post_init__(self):
        if not self.icon:
            object.__setattr__(self, "icon", SEVERITY_ICONS[self.severity])


@dataclass
class AssessmentSummary:
    """Renderable summary of a check."""
    outcome: AssessmentOutcome
    warnings: list[CheckWarning] = field(default_factory=list)
    monitoring_enabled: bool = False
    safe_harbour_badge_visible: bool = False
    label: str = ""
    enhanced: bool = False
    consider_reasons: list[str] = field(default_factory=list)
