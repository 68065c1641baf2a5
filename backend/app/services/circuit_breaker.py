"""
Provider circuits - One breaker per provider endpoint.

Transaction summaries and check fetches are served by different provider
endpoints and fail independently, so each gets its own circuit:
- CLOSED: calls pass, consecutive failures are counted
- OPEN: calls rejected with ProviderError until the cooldown elapses
- HALF_OPEN: a single trial call decides between CLOSED and OPEN
"""

import time
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Optional

from app.config import settings
from app.logger import logger
from app.services.checks.errors import ProviderError


PROVIDER_ENDPOINTS = ("transactions", "checks")


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreakerConfig:
    """Circuit breaker configuration."""
    failure_threshold: int = 5  # Open after N consecutive failures
    cooldown_seconds: int = 60  # Wait before the trial call


class EndpointCircuit:
    """Breaker guarding a single provider endpoint."""

    def __init__(self, endpoint: str, config: CircuitBreakerConfig):
        self.endpoint = endpoint
        self.config = config
        self.consecutive_failures = 0
        self.opened_at: Optional[float] = None
        self.trial_in_flight = False
        self._lock = Lock()

    @property
    def state(self) -> CircuitState:
        if self.opened_at is None:
            return CircuitState.CLOSED
        if self.trial_in_flight or time.time() - self.opened_at >= self.config.cooldown_seconds:
            return CircuitState.HALF_OPEN
        return CircuitState.OPEN

    def before_call(self):
        """Admit a call or raise.

        Raises:
            ProviderError: circuit is open, or a trial call is already running
        """
        with self._lock:
            state = self.state
            if state == CircuitState.CLOSED:
                return
            if state == CircuitState.HALF_OPEN and not self.trial_in_flight:
                logger.info(f"Provider circuit [{self.endpoint}]: trial call after cooldown")
                self.trial_in_flight = True
                return
            remaining = max(0, int(self.config.cooldown_seconds - (time.time() - self.opened_at)))
            raise ProviderError(f"Provider unavailable: {self.endpoint} circuit open ({remaining}s left)")

    def record_success(self):
        with self._lock:
            if self.opened_at is not None:
                logger.info(f"Provider circuit [{self.endpoint}]: recovered")
            self.consecutive_failures = 0
            self.opened_at = None
            self.trial_in_flight = False

    def record_failure(self):
        with self._lock:
            self.consecutive_failures += 1
            if self.trial_in_flight or self.consecutive_failures >= self.config.failure_threshold:
                if self.opened_at is None or self.trial_in_flight:
                    logger.error(
                        f"Provider circuit [{self.endpoint}]: OPEN after "
                        f"{self.consecutive_failures} failures (cooldown {self.config.cooldown_seconds}s)"
                    )
                self.opened_at = time.time()
                self.trial_in_flight = False
            else:
                logger.warning(
                    f"Provider circuit [{self.endpoint}]: failure "
                    f"{self.consecutive_failures}/{self.config.failure_threshold}"
                )

    def get_status(self) -> dict:
        return {
            "state": self.state.value,
            "consecutive_failures": self.consecutive_failures,
            "failure_threshold": self.config.failure_threshold,
            "cooldown_seconds": self.config.cooldown_seconds,
        }


class ProviderCircuits:
    """Registry of endpoint circuits."""

    def __init__(self, config: Optional[CircuitBreakerConfig] = None):
        self.config = config or CircuitBreakerConfig()
        self._circuits = {name: EndpointCircuit(name, self.config) for name in PROVIDER_ENDPOINTS}
        self._lock = Lock()

    def get(self, endpoint: str) -> EndpointCircuit:
        with self._lock:
            if endpoint not in self._circuits:
                self._circuits[endpoint] = EndpointCircuit(endpoint, self.config)
            return self._circuits[endpoint]

    def get_status(self) -> dict:
        return {name: circuit.get_status() for name, circuit in self._circuits.items()}


# Global registry instance
_circuits: ProviderCircuits | None = None


def get_provider_circuits() -> ProviderCircuits:
    """Get global circuit registry (singleton)."""
    global _circuits
    if _circuits is None:
        _circuits = ProviderCircuits(CircuitBreakerConfig(
            failure_threshold=settings.CIRCUIT_FAILURE_THRESHOLD,
            cooldown_seconds=settings.CIRCUIT_COOLDOWN_SECONDS,
        ))
    return _circuits
