"""
Provider Client - Fetch transaction and check summaries from the verification provider.

Handles:
- Bearer auth
- Retry with linear backoff on 5xx / 429 / transport errors
- One circuit per provider endpoint so a failing endpoint is not hammered
"""

import asyncio
from typing import Optional

import httpx

from app.config import settings
from app.logger import logger
from app.services.checks.errors import ProviderError
from app.services.circuit_breaker import ProviderCircuits, get_provider_circuits


class ProviderClient:
    """Thin async client for the provider's read endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        circuits: Optional[ProviderCircuits] = None,
        backoff_seconds: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.PROVIDER_API_URL).rstrip("/")
        self.token = token if token is not None else settings.PROVIDER_API_TOKEN
        self.timeout = settings.PROVIDER_TIMEOUT
        self.max_attempts = settings.PROVIDER_MAX_RETRIES + 1
        self.backoff_seconds = settings.PROVIDER_BACKOFF_SECONDS if backoff_seconds is None else backoff_seconds
        self.transport = transport
        self.circuits = circuits or get_provider_circuits()

    async def fetch_transaction_summary(self, transaction_id: str) -> dict:
        """Get the structured summary of a transaction."""
        return await self._get("transactions", f"/transactions/{transaction_id}/_summary")

    async def fetch_check(self, check_id: str) -> dict:
        """Get a full check (checks have no summary endpoint)."""
        return await self._get("checks", f"/checks/{check_id}")

    def circuit_state(self, endpoint: str) -> str:
        return self.circuits.get(endpoint).state.value

    async def _get(self, endpoint: str, path: str) -> dict:
        circuit = self.circuits.get(endpoint)
        circuit.before_call()

        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        last_error = "unknown"
        last_status = None
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            for attempt in range(1, self.max_attempts + 1):
                try:
                    resp = await client.get(path, headers=headers)
                except httpx.HTTPError as e:
                    last_error, last_status = str(e) or type(e).__name__, None
                else:
                    if resp.status_code < 400:
                        try:
                            body = resp.json()
                        except ValueError:
                            # maintenance pages and proxies answer 200 with HTML
                            circuit.record_failure()
                            logger.error(f"Provider GET {path} → {resp.status_code} with non-JSON body")
                            raise ProviderError(f"Provider returned a non-JSON body for {path}", resp.status_code)
                        circuit.record_success()
                        logger.info(f"Provider GET {path} → {resp.status_code}")
                        return body

                    last_error, last_status = f"HTTP {resp.status_code}", resp.status_code
                    if resp.status_code != 429 and resp.status_code < 500:
                        # provider is up; the request itself was rejected
                        circuit.record_success()
                        raise ProviderError(f"Provider rejected {path}: {last_error}", resp.status_code)

                logger.warning(
                    f"Provider GET {path} failed (attempt {attempt}/{self.max_attempts}): {last_error}"
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.backoff_seconds * attempt)

        circuit.record_failure()
        raise ProviderError(f"Provider request failed for {path}: {last_error}", last_status)
