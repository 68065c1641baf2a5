"""
Assessment Aggregator - Combine task outcomes into a reviewer summary.

- Outcome: explicit provider assessment wins, else CONSIDER on any alert/fail
- Warnings: classifier output, in the order outcomes were recorded
- Monitoring: PEP-type provider task with opts.monitored
- Safe Harbour: computed for any check type, badge shown for electronic-id only
"""

from typing import Optional

from app.logger import logger
from app.services.checks.catalog import CheckTypeCatalog, get_catalog
from app.services.checks.classifier import ELECTRONIC_ID, TaskOutcomeClassifier
from app.services.checks.errors import UnknownCheckType
from app.services.checks.models import (
    AssessmentOutcome,
    AssessmentSummary,
    Check,
    CheckStatus,
    CheckWarning,
    SafeHarbour,
    Severity,
    TaskResult,
)


MONITORABLE_TASKS = frozenset({
    "report:peps",
    "report:screening:lite",
    "company:peps",
    "company:sanctions",
})

ENHANCED_DOWNGRADE = "Enhanced Downgrade"
SKIPPED_PROOF_OF_OWNERSHIP = "skipped proof of ownership"


def derive_outcome(check: Check) -> AssessmentOutcome:
    """Explicit outcome if present, otherwise CONSIDER on any alert or fail."""
    if check.explicit_assessment is not None:
        return check.explicit_assessment.outcome
    if any(o.result in (TaskResult.ALERT, TaskResult.FAIL) for o in check.task_outcomes.values()):
        return AssessmentOutcome.CONSIDER
    return AssessmentOutcome.CLEAR


def nfc_obtained(check: Check) -> bool:
    """NFC chip read was obtained for this check."""
    nfc = check.task_outcomes.get("nfc")
    return nfc is not None and not nfc.unobtainable


def is_enhanced(check: Check) -> bool:
    """Electronic ID check backed by an NFC chip read."""
    return check.type == ELECTRONIC_ID and nfc_obtained(check)


def monitoring_enabled(check: Check) -> bool:
    return any(
        task.type in MONITORABLE_TASKS and task.opts.get("monitored") is True
        for task in check.provider_tasks
    )


def assess_safe_harbour(check: Check) -> SafeHarbour:
    """Evaluate Safe Harbour criteria. Independent of check type."""
    outcomes = check.task_outcomes

    def clear_or_absent(task_type: str) -> bool:
        outcome = outcomes.get(task_type)
        return outcome is None or outcome.result == TaskResult.CLEAR

    nfc = outcomes.get("nfc")
    reasons = [r.lower() for r in check.consider_reasons]

    criteria = {
        "enhanced": nfc_obtained(check),
        "nfc_confirmed": nfc is not None and (nfc.result == TaskResult.CLEAR or nfc.status == "closed"),
        "address_clear": clear_or_absent("address"),
        "peps_clear": clear_or_absent("peps"),
        "identity_clear": clear_or_absent("identity"),
        "liveness_clear": clear_or_absent("liveness"),
        "proof_of_ownership": SKIPPED_PROOF_OF_OWNERSHIP not in reasons,
    }
    return SafeHarbour(is_compliant=all(criteria.values()), criteria=criteria)


class AssessmentAggregator:
    """Builds the renderable assessment summary for a check."""

    def __init__(
        self,
        catalog: Optional[CheckTypeCatalog] = None,
        classifier: Optional[TaskOutcomeClassifier] = None,
    ):
        self.catalog = catalog or get_catalog()
        self.classifier = classifier or TaskOutcomeClassifier()

    def aggregate(self, check: Check) -> AssessmentSummary:
        """Summarise a check snapshot. Never raises for data problems."""
        warnings = self.collect_warnings(check)

        safe_harbour = check.safe_harbour or assess_safe_harbour(check)
        enhanced = is_enhanced(check)

        reasons = list(check.consider_reasons)
        if not reasons and check.explicit_assessment is not None:
            reasons = list(check.explicit_assessment.reasons)

        summary = AssessmentSummary(
            outcome=derive_outcome(check),
            warnings=warnings,
            monitoring_enabled=monitoring_enabled(check),
            safe_harbour_badge_visible=safe_harbour.is_compliant and check.type == ELECTRONIC_ID,
            label=self._label(check, enhanced),
            enhanced=enhanced,
            consider_reasons=reasons,
        )
        logger.debug(
            f"Check {check.id}: outcome={summary.outcome.value}, warnings={len(warnings)}, "
            f"monitoring={summary.monitoring_enabled}"
        )
        return summary

    def collect_warnings(self, check: Check) -> list[CheckWarning]:
        warnings: list[CheckWarning] = []
        for task_type, outcome in check.task_outcomes.items():
            warnings.extend(
                self.classifier.classify(task_type, outcome, status=check.status, check_type=check.type)
            )

        # NFC unobtainable on an electronic ID is a downgrade even without an identity signal
        nfc = check.task_outcomes.get("nfc")
        if (
            check.status == CheckStatus.CLOSED
            and check.type == ELECTRONIC_ID
            and nfc is not None
            and nfc.unobtainable
            and not any(w.message == ENHANCED_DOWNGRADE for w in warnings)
        ):
            warnings.append(CheckWarning(Severity.INFO, ENHANCED_DOWNGRADE))
        return warnings

    def _label(self, check: Check, enhanced: bool) -> str:
        if check.type == ELECTRONIC_ID:
            return "Enhanced ID Check" if enhanced else "Original ID Check"
        try:
            return self.catalog.lookup(check.type).label
        except UnknownCheckType:
            return "Verification Check"
