"""Shared fixtures for check engine tests."""

import pytest

from app.services.checks.aggregator import AssessmentAggregator
from app.services.checks.catalog import CheckTypeCatalog
from app.services.checks.classifier import TaskOutcomeClassifier
from app.services.checks.models import Check, CheckStatus, TaskOutcome, TaskResult
from app.services.checks.validator import TaskSelectionValidator


@pytest.fixture
def catalog():
    """Catalog with the built-in check types."""
    return CheckTypeCatalog(path=None)


@pytest.fixture
def classifier():
    return TaskOutcomeClassifier()


@pytest.fixture
def validator(catalog):
    return TaskSelectionValidator(catalog)


@pytest.fixture
def aggregator(catalog, classifier):
    return AssessmentAggregator(catalog, classifier)


def outcome(task_type, result="clear", data=None, status=None):
    """Build a TaskOutcome from plain values."""
    return TaskOutcome(task_type=task_type, result=TaskResult(result), data=data or {}, status=status)


def make_check(type="electronic-id", status=CheckStatus.CLOSED, outcomes=None, selected=None, **kwargs):
    """Build a Check; outcomes is a list of TaskOutcome in recorded order."""
    return Check(
        id=kwargs.pop("id", "chk_test"),
        type=type,
        status=status,
        selected_tasks=frozenset(selected or ()),
        task_outcomes={o.task_type: o for o in (outcomes or [])},
        **kwargs,
    )
