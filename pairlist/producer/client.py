from __future__ import annotations

import json
import logging
import random
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

import httpx

from pairlist.config import ProducerConfig
from pairlist.obs.logging import log_event
from pairlist.producer.errors import FatalHttpError, RateLimitedError, TransientHttpError
from pairlist.producer.ratelimit import TokenBucket


@dataclass
class ProducerMetrics:
    http_requests_total: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    http_retries_total: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    http_latency_ms: list[float] = field(default_factory=list)

    def record_request(self, status: str, latency_ms: float) -> None:
        self.http_requests_total[status] += 1
        self.http_latency_ms.append(latency_ms)

    def record_retry(self, reason: str) -> None:
        self.http_retries_total[reason] += 1


class ProducerClient:
    """
    Fetch the pair list published by a producer instance over HTTP.

    ``get_pairs`` has the remote pair provider signature, so a client can be
    passed straight to ``PairListManager(remote_provider=client.get_pairs)``.
    """

    def __init__(
        self,
        config: ProducerConfig,
        *,
        logger: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
        rate_limiter: TokenBucket | None = None,
    ) -> None:
        self._config = config
        self._logger = logger or logging.getLogger(__name__)
        self._metrics = ProducerMetrics()
        timeout = httpx.Timeout(
            connect=config.timeout_s,
            read=config.timeout_s,
            write=config.timeout_s,
            pool=config.timeout_s,
        )
        self._client = httpx.Client(base_url=config.base_url, timeout=timeout, transport=transport)
        self._rate_limiter = rate_limiter or TokenBucket(rate_per_sec=config.max_rps)

    @property
    def metrics(self) -> ProducerMetrics:
        return self._metrics

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ProducerClient":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def get_pairs(self) -> list[str]:
        payload = self._request(self._config.path)
        pairs = self._coerce_pair_list(payload)
        if pairs is None:
            raise FatalHttpError("Producer response must be a list of pairs", payload=payload)
        return pairs

    def _request(self, endpoint: str) -> Any:
        attempts = self._config.max_retries + 1

        for attempt in range(1, attempts + 1):
            self._rate_limiter.acquire()
            start = time.monotonic()

            try:
                response = self._client.get(endpoint)
            except httpx.TimeoutException as exc:
                self._metrics.record_request("timeout", (time.monotonic() - start) * 1000)
                if attempt <= self._config.max_retries:
                    self._retry(endpoint, "timeout", attempt)
                    continue
                self._log_fail(endpoint, "timeout")
                raise TransientHttpError("Request timed out") from exc
            except httpx.RequestError as exc:
                self._metrics.record_request("connection_error", (time.monotonic() - start) * 1000)
                if attempt <= self._config.max_retries:
                    self._retry(endpoint, "connection_error", attempt)
                    continue
                self._log_fail(endpoint, "connection_error")
                raise TransientHttpError("Request failed", payload=str(exc)) from exc

            latency_ms = (time.monotonic() - start) * 1000
            self._metrics.record_request(str(response.status_code), latency_ms)
            log_event(
                self._logger,
                logging.DEBUG,
                "http_request",
                f"GET {endpoint}",
                endpoint=endpoint,
                status=response.status_code,
                attempt=attempt,
                latency_ms=round(latency_ms, 2),
            )

            if response.status_code == 429:
                if attempt <= self._config.max_retries:
                    self._retry(endpoint, "rate_limited", attempt)
                    continue
                self._log_fail(endpoint, "rate_limited")
                raise RateLimitedError("Rate limit exceeded", status_code=429, response_text=response.text)

            if response.status_code >= 500:
                if attempt <= self._config.max_retries:
                    self._retry(endpoint, "server_error", attempt)
                    continue
                self._log_fail(endpoint, "server_error")
                raise TransientHttpError(
                    "Server error", status_code=response.status_code, response_text=response.text
                )

            if response.status_code >= 400:
                self._log_fail(endpoint, "client_error")
                raise FatalHttpError("HTTP error", status_code=response.status_code, response_text=response.text)

            try:
                return response.json()
            except json.JSONDecodeError as exc:
                if attempt <= self._config.max_retries:
                    self._retry(endpoint, "invalid_json", attempt)
                    continue
                self._log_fail(endpoint, "invalid_json")
                raise TransientHttpError(
                    "Invalid JSON response", status_code=response.status_code, response_text=response.text
                ) from exc

        raise TransientHttpError("Request failed after retries")

    def _retry(self, endpoint: str, reason: str, attempt: int) -> None:
        self._metrics.record_retry(reason)
        log_event(
            self._logger,
            logging.WARNING,
            "producer_retry",
            "Producer request failed; backing off",
            endpoint=endpoint,
            reason=reason,
            attempt=attempt,
        )
        self._backoff_sleep(attempt)

    def _backoff_sleep(self, attempt: int) -> None:
        base = self._config.backoff_base_s
        capped = min(self._config.backoff_max_s, base * (2 ** (attempt - 1)))
        jitter = random.uniform(0, base)
        time.sleep(min(self._config.backoff_max_s, capped + jitter))

    @staticmethod
    def _coerce_pair_list(payload: Any) -> list[str] | None:
        if isinstance(payload, list):
            if all(isinstance(item, str) for item in payload):
                return payload
            return None
        if isinstance(payload, dict):
            for key in ("pairs", "pairlist", "symbols", "data"):
                value = payload.get(key)
                if isinstance(value, list):
                    return ProducerClient._coerce_pair_list(value)
        return None

    def _log_fail(self, endpoint: str, error_type: str) -> None:
        log_event(
            self._logger,
            logging.ERROR,
            "producer_request_failed",
            f"Request failed for {endpoint}",
            endpoint=endpoint,
            error_type=error_type,
        )
