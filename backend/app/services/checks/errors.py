"""
Check engine error taxonomy.

- ConfigurationError: bad or missing check-type configuration (operator action)
- ValidationError: task selection cannot be submitted (caller corrects it)
- LifecycleError: a reported update conflicts with the check's state
- ProviderError: provider unreachable or failing (boundary only, retryable)
"""


class CheckEngineError(Exception):
    """Base class for all check engine errors."""


class ConfigurationError(CheckEngineError):
    """Check-type configuration is invalid."""


class UnknownCheckType(ConfigurationError):
    def __init__(self, type_id: str):
        self.type_id = type_id
        super().__init__(f"Unknown check type: {type_id}")


class ValidationError(CheckEngineError):
    """Task selection cannot be submitted as-is."""


class MissingRequiredTasksError(ValidationError):
    def __init__(self, type_id: str, missing: frozenset[str]):
        self.type_id = type_id
        self.missing = missing
        super().__init__(f"{type_id} requires tasks: {', '.join(sorted(missing))}")


class MissingRequiredDetailsError(ValidationError):
    def __init__(self, type_id: str, missing: frozenset[str]):
        self.type_id = type_id
        self.missing = missing
        super().__init__(f"{type_id} requires details: {', '.join(sorted(missing))}")


class SoftPolicyUnconfirmed(ValidationError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class LifecycleError(CheckEngineError):
    """Reported update is not valid for the check's current state."""


class InvalidStatusTransition(LifecycleError):
    def __init__(self, current, reported):
        self.current = current
        self.reported = reported
        super().__init__(f"Cannot move check from {current.value} to {reported.value}")


class CheckFinalised(LifecycleError):
    def __init__(self, check_id: str):
        self.check_id = check_id
        super().__init__(f"Check {check_id} is in a terminal state")


class OutcomeNotRequested(LifecycleError):
    def __init__(self, task_type: str):
        self.task_type = task_type
        super().__init__(f"No selected task produces a '{task_type}' report")


class OutcomeAlreadyRecorded(LifecycleError):
    def __init__(self, task_type: str):
        self.task_type = task_type
        super().__init__(f"Outcome for '{task_type}' already recorded")


class ProviderError(CheckEngineError):
    """Verification provider request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
