# sweetbloom/clients/base_client.py

"""Abstract base class for the remote service clients."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests

from sweetbloom.config.settings import Settings


class RemoteClient(ABC):
    """Shared HTTP plumbing: retries, adaptive back-off, circuit breaker."""

    # Statuses that mean "slow down" rather than "broken"
    _THROTTLE_STATUSES: tuple[int, ...] = (429, 503)

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name
        self.logger = logging.getLogger(
            f"sweetbloom.{service_name}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._current_delay: float = self.settings.REQUEST_DELAY
        self._consecutive_failures: int = 0
        self._circuit_open: bool = False
        self._circuit_opened_at: float = 0.0
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _api_params(self) -> dict[str, str]:
        """Query parameters sent with every request (the API key)."""
        if self.settings.FIREBASE_API_KEY:
            return {"key": self.settings.FIREBASE_API_KEY}
        return {}

    def _is_json(self, resp: curl_requests.Response) -> bool:
        """Reject HTML error pages served with a 2xx status."""
        text = resp.text.lstrip()
        if not text or text.startswith(("{", "[")):
            return True
        self.logger.warning(
            "[%s] Non-JSON response body (%d bytes)",
            self.service_name,
            len(text),
        )
        return False

    def _check_circuit(self) -> bool:
        """Return True if the circuit breaker blocks this request.

        After CIRCUIT_BREAKER_COOLDOWN seconds the breaker enters a
        half-open state, allowing a single probe request through.
        """
        if not self._circuit_open:
            return False
        elapsed = time.time() - self._circuit_opened_at
        if elapsed >= self.settings.CIRCUIT_BREAKER_COOLDOWN:
            self.logger.info(
                "[%s] Circuit breaker half-open after %.0fs",
                self.service_name,
                elapsed,
            )
            self._circuit_open = False
            return False
        return True

    def _record_success(self) -> None:
        """Reset failure counters after a successful call."""
        self._consecutive_failures = 0
        self._circuit_open = False
        self._circuit_opened_at = 0.0
        self._current_delay = self.settings.REQUEST_DELAY

    def _record_failure(self) -> None:
        """Track failure and open circuit breaker if needed."""
        self._consecutive_failures += 1
        threshold = self.settings.CIRCUIT_BREAKER_THRESHOLD
        if self._consecutive_failures >= threshold:
            self._circuit_open = True
            self._circuit_opened_at = time.time()
            self.logger.error(
                "[%s] Circuit breaker opened after %d "
                "consecutive failures",
                self.service_name,
                self._consecutive_failures,
            )

    def _escalate_delay(self) -> None:
        """Double the current delay up to the configured max."""
        max_delay = (
            self.settings.REQUEST_DELAY
            * self.settings.MAX_DELAY_MULTIPLIER
        )
        self._current_delay = min(self._current_delay * 2, max_delay)
        self.logger.warning(
            "[%s] Throttled, delay escalated to %.1fs",
            self.service_name,
            self._current_delay,
        )

    def _request(
        self,
        method: str,
        url: str,
        payload: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        accept_status: tuple[int, ...] = (200,),
    ) -> curl_requests.Response | None:
        """Send a request with retries, back-off and circuit breaker.

        Responses whose status is in *accept_status* are returned as-is
        without retrying, so callers can interpret e.g. a 404 or a 400
        error body.  Returns ``None`` once retries are exhausted.
        """
        if self._check_circuit():
            self.logger.warning(
                "[%s] Circuit open, skipping %s %s",
                self.service_name,
                method,
                url,
            )
            return None

        query = {**self._api_params(), **(params or {})}
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.request(
                    method,  # type: ignore[arg-type]
                    url,
                    headers=self.settings.DEFAULT_HEADERS,
                    params=query or None,
                    json=payload,
                    timeout=self._request_timeout,
                )
                if resp.status_code in accept_status:
                    if not self._is_json(resp):
                        time.sleep(self._current_delay)
                        continue
                    self._record_success()
                    return resp
                self.logger.warning(
                    "[%s] HTTP %d on attempt %d",
                    self.service_name,
                    resp.status_code,
                    attempt + 1,
                )
                if resp.status_code in self._THROTTLE_STATUSES:
                    self._escalate_delay()
                    time.sleep(self._current_delay)
            except Exception as exc:
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.service_name,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                time.sleep(self._current_delay * (attempt + 1))
        self._record_failure()
        return None

    def _fetch_get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        accept_status: tuple[int, ...] = (200,),
    ) -> curl_requests.Response | None:
        """GET with retries, adaptive delay, and circuit breaker."""
        return self._request(
            "GET", url, params=params, accept_status=accept_status
        )

    def _fetch_post(
        self,
        url: str,
        payload: dict[str, Any],
        accept_status: tuple[int, ...] = (200,),
    ) -> curl_requests.Response | None:
        """POST with retries, adaptive delay, and circuit breaker."""
        return self._request(
            "POST", url, payload=payload, accept_status=accept_status
        )

    @abstractmethod
    def _get_base_url(self) -> str:
        """Return the service root, used by health probes."""
        ...
