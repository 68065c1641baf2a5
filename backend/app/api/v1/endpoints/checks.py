"""
Check API endpoints.
"""
from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException

from app.logger import logger
from app.schemas.check_request import CheckRequest, ClassifyRequest, SubmitRequest
from app.schemas.check_result import (
    AssessmentResult,
    RefreshResult,
    SubmissionError,
    SubmitResult,
    ValidationResponse,
    WarningResult,
)
from app.services.checks.aggregator import AssessmentAggregator
from app.services.checks.catalog import CheckTypeCatalog, get_catalog
from app.services.checks.classifier import TaskOutcomeClassifier
from app.services.checks.errors import (
    InvalidStatusTransition,
    MissingRequiredDetailsError,
    MissingRequiredTasksError,
    OutcomeNotRequested,
    ProviderError,
    SoftPolicyUnconfirmed,
    UnknownCheckType,
    ValidationError,
)
from app.services.checks.lifecycle import apply_reported_status, record_outcome
from app.services.checks.models import CheckStatus
from app.services.checks.summary_parser import consider_reasons_for, parse_transaction_summary
from app.services.checks.validator import TaskSelectionValidator
from app.services.provider_client import ProviderClient

router = APIRouter(tags=["Checks"])

_classifier = TaskOutcomeClassifier()


def get_provider_client() -> ProviderClient:
    return ProviderClient()


def _submission_error(e: ValidationError) -> SubmissionError:
    if isinstance(e, MissingRequiredTasksError):
        return SubmissionError(status="missing_required_tasks", message=str(e), missing=sorted(e.missing))
    if isinstance(e, MissingRequiredDetailsError):
        return SubmissionError(status="missing_required_details", message=str(e), missing=sorted(e.missing))
    if isinstance(e, SoftPolicyUnconfirmed):
        return SubmissionError(status="soft_policy_unconfirmed", message=str(e), reason=e.reason)
    raise e


@router.post("/validate", response_model=ValidationResponse)
async def validate_check(request: CheckRequest, catalog: CheckTypeCatalog = Depends(get_catalog)):
    """Validate a draft check's task selection."""
    try:
        result = TaskSelectionValidator(catalog).validate(request.to_domain())
    except UnknownCheckType as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ValidationResponse.from_domain(result)


@router.post("/submit", response_model=SubmitResult)
async def submit_check(request: SubmitRequest, catalog: CheckTypeCatalog = Depends(get_catalog)):
    """Gate a draft check before it is sent to the provider.

    Returns 422 with the missing tasks/details or the unconfirmed soft
    policy reason when the check cannot be submitted.
    """
    try:
        check = TaskSelectionValidator(catalog).ensure_submittable(
            request.to_domain(), confirmed=request.confirmed
        )
    except UnknownCheckType as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=_submission_error(e).model_dump())

    logger.info(f"Check {check.id} ({check.type}) accepted for submission")
    return SubmitResult(check_id=check.id)


@router.post("/classify", response_model=list[WarningResult])
async def classify_outcome(request: ClassifyRequest):
    """Derive warnings for a single task outcome."""
    warnings = _classifier.classify(
        request.task_type,
        request.to_outcome(),
        status=CheckStatus(request.status),
        check_type=request.check_type,
    )
    return [WarningResult.from_domain(w) for w in warnings]


@router.post("/assessment", response_model=AssessmentResult)
async def assess_check(request: CheckRequest, catalog: CheckTypeCatalog = Depends(get_catalog)):
    """Summarise a check's outcome, warnings and badges."""
    summary = AssessmentAggregator(catalog, _classifier).aggregate(request.to_domain())
    return AssessmentResult.from_domain(summary)


@router.post("/{transaction_id}/refresh", response_model=RefreshResult)
async def refresh_check(
    transaction_id: str,
    request: CheckRequest,
    catalog: CheckTypeCatalog = Depends(get_catalog),
    client: ProviderClient = Depends(get_provider_client),
):
    """Pull the provider summary, merge new outcomes and re-assess."""
    try:
        summary = await client.fetch_transaction_summary(transaction_id)
    except ProviderError as e:
        logger.error(f"Refresh of {transaction_id} failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    parsed = parse_transaction_summary(summary)
    check = request.to_domain()

    # terminal checks are re-assessed exactly as supplied
    if not check.status.is_terminal:
        accepted = []
        for task_type, outcome in parsed.task_outcomes.items():
            if task_type in check.task_outcomes:
                continue
            try:
                check = record_outcome(check, outcome)
            except OutcomeNotRequested:
                logger.warning(f"Check {check.id}: ignoring unrequested {task_type} report")
                continue
            accepted.append(outcome)

        if accepted:
            reasons = consider_reasons_for(accepted, existing=check.consider_reasons)
            check = replace(check, consider_reasons=tuple(reasons))

    if parsed.status in {s.value for s in CheckStatus}:
        try:
            check = apply_reported_status(check, CheckStatus(parsed.status))
        except InvalidStatusTransition as e:
            raise HTTPException(status_code=409, detail=str(e))

    assessment = AssessmentAggregator(catalog, _classifier).aggregate(check)
    return RefreshResult(
        check_id=check.id,
        status=check.status.value,
        task_outcomes=list(check.task_outcomes),
        assessment=AssessmentResult.from_domain(assessment),
        provider_circuit=client.circuit_state("transactions"),
    )
