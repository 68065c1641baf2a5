"""
Task Outcome Classifier - Turn one provider outcome into reviewer warnings.

Rules (closed checks only):
- address: fail → "Address count less than 2"; quality < 80 → warning
- facial_similarity: comparison other than good_match → info
- document: integrity other than passed → fail
- identity: electronic-id without NFC → "Enhanced Downgrade"
- peps / sanctions: total_hits > 0 → warning
- anything else: alert → warning, fail → fail

Clear results never raise warnings.
"""

from typing import Any, Callable, Optional

from app.services.checks.models import (
    CheckStatus,
    CheckWarning,
    Severity,
    TaskOutcome,
    TaskResult,
)


ADDRESS_QUALITY_THRESHOLD = 80
ELECTRONIC_ID = "electronic-id"


def _number(value: Any) -> Optional[float]:
    """Numeric field value, or None when absent or not a number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _count(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


class TaskOutcomeClassifier:
    """Per-task-type warning rules."""

    def __init__(self):
        self._rules: dict[str, Callable[[TaskOutcome, Optional[str]], list[CheckWarning]]] = {
            "address": self._address,
            "facial_similarity": self._facial_similarity,
            "document": self._document,
            "identity": self._identity,
            "peps": self._peps,
            "sanctions": self._sanctions,
        }

    def classify(
        self,
        task_type: str,
        outcome: TaskOutcome,
        status: CheckStatus = CheckStatus.CLOSED,
        check_type: Optional[str] = None,
    ) -> list[CheckWarning]:
        """Derive warnings for one task outcome.

        Args:
            task_type: Provider report type (e.g. "peps")
            outcome: Raw outcome for that report
            status: Status of the enclosing check
            check_type: Type id of the enclosing check

        Returns:
            Zero or more warnings; empty unless the check is closed
        """
        if status != CheckStatus.CLOSED:
            return []
        if outcome.result == TaskResult.CLEAR:
            return []

        rule = self._rules.get(task_type)
        if rule is None:
            return self._default(task_type, outcome)
        return rule(outcome, check_type)

    def _address(self, outcome: TaskOutcome, check_type: Optional[str]) -> list[CheckWarning]:
        warnings = []
        if outcome.result == TaskResult.FAIL:
            warnings.append(CheckWarning(Severity.FAIL, "Address count less than 2"))

        quality = _number(outcome.data.get("quality"))
        if quality is not None and quality < ADDRESS_QUALITY_THRESHOLD:
            warnings.append(CheckWarning(Severity.WARNING, "Address quality not sufficient"))
        return warnings

    def _facial_similarity(self, outcome: TaskOutcome, check_type: Optional[str]) -> list[CheckWarning]:
        comparison = outcome.data.get("comparison")
        if comparison is None or comparison == "good_match":
            return []
        similarity = "60%" if comparison == "poor_match" else "80%"
        return [CheckWarning(Severity.INFO, f"Facial similarity only {similarity}")]

    def _document(self, outcome: TaskOutcome, check_type: Optional[str]) -> list[CheckWarning]:
        integrity = outcome.data.get("integrity")
        if integrity is None or integrity == "passed":
            return []
        return [CheckWarning(Severity.FAIL, "Document integrity failed")]

    def _identity(self, outcome: TaskOutcome, check_type: Optional[str]) -> list[CheckWarning]:
        # only an explicit false counts; absent means no signal
        if check_type == ELECTRONIC_ID and outcome.data.get("nfc_used") is False:
            return [CheckWarning(Severity.INFO, "Enhanced Downgrade")]
        return []

    def _peps(self, outcome: TaskOutcome, check_type: Optional[str]) -> list[CheckWarning]:
        return self._hits(outcome, "PEP")

    def _sanctions(self, outcome: TaskOutcome, check_type: Optional[str]) -> list[CheckWarning]:
        return self._hits(outcome, "Sanctions")

    def _hits(self, outcome: TaskOutcome, label: str) -> list[CheckWarning]:
        total_hits = _number(outcome.data.get("total_hits"))
        if total_hits is None or total_hits <= 0:
            return []
        return [CheckWarning(Severity.WARNING, f"{_count(total_hits)} {label} hits")]

    def _default(self, task_type: str, outcome: TaskOutcome) -> list[CheckWarning]:
        if outcome.result == TaskResult.ALERT:
            return [CheckWarning(Severity.WARNING, f"{task_type} alert")]
        if outcome.result == TaskResult.FAIL:
            return [CheckWarning(Severity.FAIL, f"{task_type} failed")]
        return []
