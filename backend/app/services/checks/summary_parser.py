"""
Provider Summary Parser - Map a transaction summary to task outcomes.

The provider reports each task as {result, status, data}. Results are
normalised to clear/alert/fail; reports that are still pending are skipped.
Unobtainable reports are kept as outcomes but never add consider reasons.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from app.logger import logger
from app.services.checks.models import TaskOutcome, TaskResult


RESULT_ALIASES = {
    "clear": TaskResult.CLEAR,
    "alert": TaskResult.ALERT,
    "consider": TaskResult.ALERT,
    "review": TaskResult.ALERT,
    "fail": TaskResult.FAIL,
}

CONSIDER_REASONS = {
    "peps": "PEP hits",
    "screening:lite": "PEP hits",
    "identity": "document integrity",
    "facial_similarity": "facial similarity",
    "address": "address verification",
    "document": "document authenticity",
    "sanctions": "sanctions hits",
    "footprint": "digital footprint",
}


@dataclass
class ParsedSummary:
    """Task outcomes and consider reasons extracted from a summary."""
    task_outcomes: dict[str, TaskOutcome] = field(default_factory=dict)
    consider_reasons: list[str] = field(default_factory=list)
    status: Optional[str] = None

    @property
    def has_alerts(self) -> bool:
        return bool(self.consider_reasons)


def normalise_result(raw: Any) -> Optional[TaskResult]:
    if not isinstance(raw, str):
        return None
    return RESULT_ALIASES.get(raw.lower())


def consider_reasons_for(outcomes: Iterable[TaskOutcome], existing: Iterable[str] = ()) -> list[str]:
    """Consider reasons for non-clear, obtainable outcomes, appended to `existing`."""
    reasons = list(existing)
    for outcome in outcomes:
        if outcome.result == TaskResult.CLEAR or outcome.unobtainable:
            continue
        reason = CONSIDER_REASONS.get(outcome.task_type)
        if reason and reason not in reasons:
            reasons.append(reason)
    return reasons


def parse_transaction_summary(summary: Optional[dict]) -> ParsedSummary:
    """Parse a provider transaction summary. Never raises on bad input."""
    if not summary or not isinstance(summary, dict):
        logger.info("Empty transaction summary")
        return ParsedSummary()

    parsed = ParsedSummary(status=summary.get("status"))
    reports = summary.get("reports") or {}

    # A list means the provider has not produced reports yet
    if isinstance(reports, list):
        if reports:
            logger.warning(f"Reports returned as non-empty list, ignoring {len(reports)} entries")
        return parsed
    if not isinstance(reports, dict):
        logger.warning(f"Unexpected reports payload: {type(reports).__name__}")
        return parsed

    for report_type, report in reports.items():
        if not isinstance(report, dict):
            continue

        result = normalise_result(report.get("result"))
        if result is None:
            logger.debug(f"Report {report_type} not ready (result={report.get('result')})")
            continue

        data = report.get("data") if isinstance(report.get("data"), dict) else {}
        parsed.task_outcomes[report_type] = TaskOutcome(
            task_type=report_type,
            result=result,
            data=data,
            status=report.get("status"),
        )

    parsed.consider_reasons = consider_reasons_for(parsed.task_outcomes.values())
    logger.info(
        f"Parsed summary: {len(parsed.task_outcomes)} outcomes, "
        f"{len(parsed.consider_reasons)} consider reasons"
    )
    return parsed
