"""
Pair list manager: runs the filter chain and publishes the working set.

Refresh flow:
    market provider -> active symbols -> ticker provider -> filter chain -> publish

The published list, the filter chain, the last refresh time and the
statistics counters share one lock. Filters run outside the lock so readers
are never blocked by slow providers; the new list is swapped in as a single
step once the whole chain has finished. Two overlapping ``refresh`` calls
(e.g., a manual call racing the scheduler) are not serialized against each
other, only their publish steps are.

Example:
    >>> manager = PairListManager(market_provider=fetch_markets, ticker_provider=fetch_tickers)
    >>> manager.load_from_config({"pairlist_filters": [{"method": "VolumePairList", "number_assets": 20}]})
    >>> manager.refresh()
    >>> manager.start_auto_refresh(1800)
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import ValidationError

from pairlist.config import ConfigError, PairlistConfig
from pairlist.filters.base import (
    FilterProviders,
    MarketProvider,
    PairFilter,
    PerformanceProvider,
    RemotePairProvider,
    TickerProvider,
)
from pairlist.filters.factory import create_filter_from_config
from pairlist.models import TickerInfo
from pairlist.obs.logging import log_event

DEFAULT_REFRESH_INTERVAL_S = 1800


def _to_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class PairListStatistics:
    """
    Point-in-time snapshot of manager state.

    Attributes:
        pair_count: Number of pairs currently published.
        filter_count: Number of filters in the chain.
        refresh_count: Completed refreshes that published a list.
        total_filter_executions: Filter invocations across all refreshes.
        last_refresh_time: ISO-8601 UTC time of the last publish.
        auto_refresh_running: Whether the background scheduler is active.
        refresh_interval: Scheduler interval in seconds.
        filters: Filter names in chain order.
    """
    pair_count: int
    filter_count: int
    refresh_count: int
    total_filter_executions: int
    last_refresh_time: str
    auto_refresh_running: bool
    refresh_interval: int
    filters: list[str]

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


class PairListManager:
    def __init__(
        self,
        *,
        market_provider: MarketProvider | None = None,
        ticker_provider: TickerProvider | None = None,
        performance_provider: PerformanceProvider | None = None,
        remote_provider: RemotePairProvider | None = None,
        metadata_provider: MarketProvider | None = None,
        refresh_interval: int = DEFAULT_REFRESH_INTERVAL_S,
        logger: logging.Logger | None = None,
    ) -> None:
        if refresh_interval <= 0:
            raise ValueError("refresh_interval must be positive")
        self._logger = logger or logging.getLogger(__name__)
        self._market_provider = market_provider
        self._ticker_provider = ticker_provider
        self._performance_provider = performance_provider
        self._remote_provider = remote_provider
        self._metadata_provider = metadata_provider

        self._lock = threading.Lock()
        self._filters: list[PairFilter] = []
        self._pairs: list[str] = []
        self._last_refresh_time = datetime.now(timezone.utc)
        self._refresh_interval = refresh_interval
        self._refresh_count = 0
        self._filter_executions = 0

        self._scheduler_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def set_market_provider(self, provider: MarketProvider | None) -> None:
        self._market_provider = provider
        self._rebind_filters()

    def set_ticker_provider(self, provider: TickerProvider | None) -> None:
        self._ticker_provider = provider

    def set_performance_provider(self, provider: PerformanceProvider | None) -> None:
        self._performance_provider = provider
        self._rebind_filters()

    def set_remote_provider(self, provider: RemotePairProvider | None) -> None:
        self._remote_provider = provider
        self._rebind_filters()

    def set_metadata_provider(self, provider: MarketProvider | None) -> None:
        self._metadata_provider = provider
        self._rebind_filters()

    def filter_providers(self) -> FilterProviders:
        return FilterProviders(
            market_provider=self._metadata_provider or self._market_provider,
            performance_provider=self._performance_provider,
            remote_provider=self._remote_provider,
        )

    def _rebind_filters(self) -> None:
        providers = self.filter_providers()
        with self._lock:
            for pair_filter in self._filters:
                pair_filter.bind_providers(providers)

    def load_from_config(self, config: PairlistConfig | Mapping[str, Any]) -> None:
        if not isinstance(config, PairlistConfig):
            try:
                config = PairlistConfig.model_validate(dict(config))
            except (ValidationError, TypeError, ValueError) as exc:
                raise ConfigError(str(exc)) from exc

        providers = self.filter_providers()
        filters: list[PairFilter] = []
        for entry in config.pairlist_filters:
            pair_filter = create_filter_from_config(entry, logger=self._logger)
            if pair_filter is None:
                continue
            pair_filter.bind_providers(providers)
            filters.append(pair_filter)
            log_event(self._logger, logging.INFO, "filter_loaded", f"Loaded filter: {pair_filter.name()}")

        with self._lock:
            self._filters = filters
            if config.refresh_period is not None:
                self._refresh_interval = config.refresh_period

        log_event(
            self._logger,
            logging.INFO,
            "pairlist_configured",
            f"PairListManager configured with {len(filters)} filters",
            filters=[pair_filter.name() for pair_filter in filters],
            refresh_interval=self._refresh_interval,
        )

    def add_filter(self, pair_filter: PairFilter) -> None:
        pair_filter.bind_providers(self.filter_providers())
        with self._lock:
            self._filters.append(pair_filter)
        log_event(self._logger, logging.INFO, "filter_added", f"Added filter: {pair_filter.name()}")

    def clear_filters(self) -> None:
        with self._lock:
            self._filters = []

    @property
    def filters(self) -> list[PairFilter]:
        with self._lock:
            return list(self._filters)

    def _active_symbols(self) -> list[str]:
        if self._market_provider is None:
            return []
        return [market.symbol for market in self._market_provider() if market.active]

    def _tickers(self) -> Mapping[str, TickerInfo]:
        if self._ticker_provider is None:
            return {}
        return self._ticker_provider()

    def refresh(self) -> list[str]:
        """
        Rebuild the pair list and publish it.

        Returns the published list. When the market provider yields no
        active symbols the previous list stays published and is returned.
        Provider and filter exceptions propagate to the caller.
        """
        start = time.monotonic()
        all_pairs = self._active_symbols()
        if not all_pairs:
            log_event(
                self._logger,
                logging.WARNING,
                "pairlist_universe_empty",
                "No pairs available from market provider; keeping previous pair list",
                retained=self.get_pair_count(),
            )
            return self.get_pairs()

        log_event(
            self._logger,
            logging.INFO,
            "pairlist_refresh_started",
            f"Starting pair list refresh with {len(all_pairs)} initial pairs",
            initial_pairs=len(all_pairs),
        )

        tickers = self._tickers()
        log_event(self._logger, logging.DEBUG, "tickers_fetched", "Fetched ticker data", tickers=len(tickers))

        with self._lock:
            filters = list(self._filters)

        pairs = all_pairs
        for pair_filter in filters:
            if not pairs:
                break
            pairs = pair_filter.filter(pairs, tickers)
            with self._lock:
                self._filter_executions += 1

        published = list(pairs)
        with self._lock:
            self._pairs = published
            self._last_refresh_time = datetime.now(timezone.utc)
            self._refresh_count += 1

        log_event(
            self._logger,
            logging.INFO,
            "pairlist_refreshed",
            f"Pair list refreshed: {len(published)} pairs",
            pair_count=len(published),
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
        return list(published)

    def get_pairs(self) -> list[str]:
        with self._lock:
            return list(self._pairs)

    def get_pair_count(self) -> int:
        with self._lock:
            return len(self._pairs)

    def has_pair(self, pair: str) -> bool:
        with self._lock:
            return pair in self._pairs

    def get_last_refresh_time(self) -> datetime:
        with self._lock:
            return self._last_refresh_time

    @property
    def refresh_interval(self) -> int:
        return self._refresh_interval

    def get_statistics(self) -> PairListStatistics:
        running = self.is_auto_refreshing()
        with self._lock:
            return PairListStatistics(
                pair_count=len(self._pairs),
                filter_count=len(self._filters),
                refresh_count=self._refresh_count,
                total_filter_executions=self._filter_executions,
                last_refresh_time=_to_iso(self._last_refresh_time),
                auto_refresh_running=running,
                refresh_interval=self._refresh_interval,
                filters=[pair_filter.name() for pair_filter in self._filters],
            )

    def start_auto_refresh(self, interval: int | None = None) -> None:
        with self._scheduler_lock:
            if self._thread is not None and self._thread.is_alive():
                log_event(self._logger, logging.WARNING, "auto_refresh_already_running", "Auto refresh already running")
                return
            if interval is not None:
                if interval <= 0:
                    raise ValueError("interval must be positive")
                with self._lock:
                    self._refresh_interval = interval

            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._auto_refresh_loop,
                name="pairlist-auto-refresh",
                daemon=True,
            )
            self._thread.start()

        log_event(
            self._logger,
            logging.INFO,
            "auto_refresh_started",
            f"Started auto refresh (interval: {self._refresh_interval}s)",
            interval_s=self._refresh_interval,
        )

    def stop_auto_refresh(self) -> None:
        with self._scheduler_lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()
            if thread is not threading.current_thread():
                thread.join()
            self._thread = None

        log_event(self._logger, logging.INFO, "auto_refresh_stopped", "Stopped auto refresh")

    def is_auto_refreshing(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    def _auto_refresh_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.refresh()
            except Exception as exc:  # noqa: BLE001
                log_event(
                    self._logger,
                    logging.ERROR,
                    "pairlist_auto_refresh_failed",
                    "Error in auto refresh",
                    exc_info=True,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
            if self._stop_event.wait(self._refresh_interval):
                break

    def close(self) -> None:
        self.stop_auto_refresh()

    def __enter__(self) -> "PairListManager":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
