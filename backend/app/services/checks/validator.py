"""
Task Selection Validator - Gate a draft check before submission.

Rules, in order:
1. Required tasks must all be selected (hard)
2. Required details must all be present (hard)
3. Soft policies ask the caller to confirm or abort
"""

from dataclasses import dataclass
from typing import Optional, Union

from app.logger import logger
from app.services.checks.catalog import CheckTypeCatalog, get_catalog
from app.services.checks.errors import (
    MissingRequiredDetailsError,
    MissingRequiredTasksError,
    SoftPolicyUnconfirmed,
)
from app.services.checks.models import Check


@dataclass(frozen=True)
class Ok:
    """Selection can be submitted."""


@dataclass(frozen=True)
class MissingRequiredTasks:
    missing: frozenset[str]


@dataclass(frozen=True)
class MissingRequiredDetails:
    missing: frozenset[str]


@dataclass(frozen=True)
class SoftPolicyWarning:
    reason: str


ValidationResult = Union[Ok, MissingRequiredTasks, MissingRequiredDetails, SoftPolicyWarning]


class TaskSelectionValidator:
    """Checks a draft check's task selection against its type's rules."""

    def __init__(self, catalog: Optional[CheckTypeCatalog] = None):
        self.catalog = catalog or get_catalog()

    def validate(self, check: Check) -> ValidationResult:
        """Validate the task selection of a draft check.

        Raises:
            UnknownCheckType: if check.type is not in the catalog
        """
        definition = self.catalog.lookup(check.type)

        missing_tasks = definition.required_tasks - check.selected_tasks
        if missing_tasks:
            return MissingRequiredTasks(missing=frozenset(missing_tasks))

        missing_details = frozenset(
            name for name in definition.required_details
            if not (check.details.get(name) or "").strip()
        )
        if missing_details:
            return MissingRequiredDetails(missing=missing_details)

        for policy in definition.soft_policies:
            if policy.task in check.selected_tasks:
                continue
            if policy.matter_category and policy.matter_category != check.matter_category:
                continue
            return SoftPolicyWarning(reason=policy.reason)

        return Ok()

    def ensure_submittable(self, check: Check, confirmed: bool = False) -> Check:
        """Raise unless the check may be submitted.

        Args:
            check: Draft check
            confirmed: Caller already confirmed any soft policy warning

        Returns:
            The same check, for chaining
        """
        result = self.validate(check)

        if isinstance(result, MissingRequiredTasks):
            logger.info(f"Check {check.id} missing tasks: {sorted(result.missing)}")
            raise MissingRequiredTasksError(check.type, result.missing)
        if isinstance(result, MissingRequiredDetails):
            logger.info(f"Check {check.id} missing details: {sorted(result.missing)}")
            raise MissingRequiredDetailsError(check.type, result.missing)
        if isinstance(result, SoftPolicyWarning) and not confirmed:
            raise SoftPolicyUnconfirmed(result.reason)

        return check
