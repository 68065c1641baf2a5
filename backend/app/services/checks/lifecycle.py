"""
Check lifecycle - React to provider-reported state.

Status is a terminal sink:
    open → processing → {closed, aborted, cancelled}

Outcomes are append-only and only accepted for requested tasks.
Both helpers return a new Check snapshot; inputs are never mutated.
"""

from dataclasses import replace

from app.logger import logger
from app.services.checks.catalog import REPORT_SOURCES
from app.services.checks.errors import (
    CheckFinalised,
    InvalidStatusTransition,
    OutcomeAlreadyRecorded,
    OutcomeNotRequested,
)
from app.services.checks.models import Check, CheckStatus, TaskOutcome


ALLOWED_TRANSITIONS = {
    CheckStatus.OPEN: frozenset({
        CheckStatus.PROCESSING, CheckStatus.CLOSED, CheckStatus.ABORTED, CheckStatus.CANCELLED,
    }),
    CheckStatus.PROCESSING: frozenset({CheckStatus.CLOSED, CheckStatus.ABORTED, CheckStatus.CANCELLED}),
    CheckStatus.CLOSED: frozenset(),
    CheckStatus.ABORTED: frozenset(),
    CheckStatus.CANCELLED: frozenset(),
}


def can_transition(current: CheckStatus, reported: CheckStatus) -> bool:
    return reported in ALLOWED_TRANSITIONS[current]


def apply_reported_status(check: Check, reported: CheckStatus) -> Check:
    """Apply a status reported by the provider.

    Raises:
        InvalidStatusTransition: if the move is not allowed
    """
    if reported == check.status:
        return check
    if not can_transition(check.status, reported):
        raise InvalidStatusTransition(check.status, reported)

    logger.info(f"Check {check.id}: {check.status.value} → {reported.value}")
    return replace(check, status=reported)


def is_requested(check: Check, task_type: str) -> bool:
    """Whether a selected task produces reports of this type."""
    sources = REPORT_SOURCES.get(task_type)
    if sources is None:
        return task_type in check.selected_tasks
    return bool(sources & check.selected_tasks)


def record_outcome(check: Check, outcome: TaskOutcome) -> Check:
    """Append a provider outcome to the check.

    Raises:
        CheckFinalised: check already reached a terminal status
        OutcomeNotRequested: no selected task produces this report
        OutcomeAlreadyRecorded: an outcome for this report already exists
    """
    if check.status.is_terminal:
        raise CheckFinalised(check.id)
    if not is_requested(check, outcome.task_type):
        raise OutcomeNotRequested(outcome.task_type)
    if outcome.task_type in check.task_outcomes:
        raise OutcomeAlreadyRecorded(outcome.task_type)

    outcomes = dict(check.task_outcomes)
    outcomes[outcome.task_type] = outcome
    return replace(check, task_outcomes=outcomes)
