# sweetbloom/services/health_checker.py

"""Connectivity health checker for the remote services."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from sweetbloom.clients.base_client import RemoteClient
from sweetbloom.clients.firestore_client import FirestoreClient
from sweetbloom.clients.identity_client import IdentityClient
from sweetbloom.config.settings import Settings

logger = logging.getLogger("sweetbloom.health")

_HEALTH_TIMEOUT = 10  # seconds per service


@dataclass
class HealthResult:
    """Result of a single service health check."""

    service: str
    status: str  # "ok", "slow", "down", "disabled"
    latency_ms: float
    message: str


def probe_service(
    client: RemoteClient,
    url: str,
    params: dict[str, str],
    is_healthy: Callable[[int], bool],
) -> HealthResult:
    """Send one unretried GET and classify the outcome."""
    start = time.monotonic()
    try:
        resp = client.session.get(
            url,
            headers=client.settings.DEFAULT_HEADERS,
            params=params or None,
            timeout=_HEALTH_TIMEOUT,
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        if not is_healthy(resp.status_code):
            return HealthResult(
                service=client.service_name,
                status="down",
                latency_ms=elapsed_ms,
                message=f"HTTP {resp.status_code}",
            )

        if elapsed_ms > Settings.HEALTH_SLOW_MS:
            return HealthResult(
                service=client.service_name,
                status="slow",
                latency_ms=elapsed_ms,
                message="High latency",
            )

        return HealthResult(
            service=client.service_name,
            status="ok",
            latency_ms=elapsed_ms,
            message="",
        )

    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            service=client.service_name,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )


def _disabled(service: str, reason: str) -> HealthResult:
    return HealthResult(
        service=service, status="disabled", latency_ms=0.0, message=reason
    )


class HealthChecker:
    """Runs concurrent health probes against the document store and
    the identity service."""

    def __init__(
        self,
        firestore: FirestoreClient | None = None,
        identity: IdentityClient | None = None,
    ) -> None:
        self.firestore = firestore or FirestoreClient()
        self.identity = identity or IdentityClient()

    def _probe_firestore(self) -> HealthResult:
        if not self.firestore.is_configured:
            return _disabled("firestore", "FIREBASE_PROJECT_ID not set")
        url = (
            f"{self.firestore._get_base_url()}/"
            f"{self.firestore.settings.PRODUCTS_COLLECTION}"
        )
        return probe_service(
            self.firestore,
            url,
            {**self.firestore._api_params(), "pageSize": "1"},
            lambda status: status == 200,
        )

    def _probe_identity(self) -> HealthResult:
        if not self.identity.settings.FIREBASE_API_KEY:
            return _disabled("identity", "FIREBASE_API_KEY not set")
        # Any non-5xx answer proves the endpoint is reachable
        return probe_service(
            self.identity,
            self.identity._get_base_url(),
            self.identity._api_params(),
            lambda status: status < 500,
        )

    async def check_all(self) -> list[HealthResult]:
        """Probe every remote service concurrently."""
        results: list[HealthResult] = list(
            await asyncio.gather(
                asyncio.to_thread(self._probe_firestore),
                asyncio.to_thread(self._probe_identity),
            )
        )
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.service,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
