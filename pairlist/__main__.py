from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from secrets import token_hex

from pairlist import __version__
from pairlist.config import AppConfig, ConfigError, load_config
from pairlist.io import (
    SnapshotParseError,
    export_pairlist,
    load_markets,
    load_pair_list,
    load_performance,
    load_tickers,
)
from pairlist.manager import PairListManager
from pairlist.obs.logging import LogSettings, build_logger, log_event
from pairlist.producer import ProducerClient

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_REFRESH_ERROR = 3


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {parsed}")
    return parsed


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", required=True, help="Path to pairlist config YAML")
    parser.add_argument("--markets", required=True, help="Path to markets snapshot JSON")
    parser.add_argument("--tickers", required=True, help="Path to tickers snapshot JSON")
    parser.add_argument("--performance", help="Path to per-pair performance JSON")
    parser.add_argument("--producer-file", help="Path to a producer pair list JSON (overrides config producer)")
    parser.add_argument("--output", help="Directory to write pairlist.json into")
    parser.add_argument("--log-level", help="Logging level (overrides config)")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pair list CLI")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Refresh the pair list once")
    _add_common_args(run_parser)

    watch_parser = subparsers.add_parser("watch", help="Refresh the pair list on a schedule")
    _add_common_args(watch_parser)
    watch_parser.add_argument("--interval", type=_positive_int, help="Refresh interval in seconds (overrides config)")
    watch_parser.add_argument("--duration-s", type=float, help="Stop after this many seconds")

    return parser.parse_args(argv)


def generate_run_id() -> str:
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%SZ")
    return f"{timestamp}_{token_hex(3)}"


def build_manager(
    args: argparse.Namespace,
    config: AppConfig,
    logger: logging.Logger,
) -> tuple[PairListManager, ProducerClient | None]:
    markets_path = Path(args.markets)
    tickers_path = Path(args.tickers)
    performance_path = Path(args.performance) if args.performance else None
    producer_path = Path(args.producer_file) if args.producer_file else None
    producer = ProducerClient(config.producer, logger=logger) if config.producer and not producer_path else None
    remote_provider = producer.get_pairs if producer else None
    if producer_path:
        remote_provider = lambda: load_pair_list(producer_path)  # noqa: E731

    manager = PairListManager(
        market_provider=lambda: load_markets(markets_path, logger=logger),
        ticker_provider=lambda: load_tickers(tickers_path, logger=logger),
        performance_provider=(lambda: load_performance(performance_path)) if performance_path else None,
        remote_provider=remote_provider,
        logger=logger,
    )
    manager.load_from_config(config)
    return manager, producer


def _emit(manager: PairListManager, args: argparse.Namespace, logger: logging.Logger) -> None:
    pairs = manager.get_pairs()
    statistics = manager.get_statistics()
    if args.output:
        paths = export_pairlist(Path(args.output), pairs, statistics)
        log_event(logger, logging.INFO, "pairlist_exported", "Pair list exported", path=str(paths.pairlist_path))
    print(json.dumps({"pairs": pairs, "statistics": statistics.to_payload()}, ensure_ascii=False, indent=2))


def _watch(manager: PairListManager, args: argparse.Namespace) -> None:
    stop = threading.Event()
    manager.start_auto_refresh(args.interval)
    try:
        stop.wait(args.duration_s)
    except KeyboardInterrupt:
        pass
    finally:
        manager.stop_auto_refresh()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    run_id = generate_run_id()
    bootstrap_logger = build_logger(
        LogSettings(level=(args.log_level or "INFO").upper(), run_id=run_id, log_file=None, jsonl=True)
    )

    try:
        loaded = load_config(Path(args.config))
    except ConfigError as exc:
        log_event(bootstrap_logger, logging.ERROR, "config_invalid", str(exc))
        return EXIT_CONFIG_ERROR

    config = loaded.config
    logger = build_logger(
        LogSettings(
            level=(args.log_level or config.obs.log_level).upper(),
            run_id=run_id,
            log_file=None,
            jsonl=config.obs.log_jsonl,
        )
    )

    manager, producer = build_manager(args, config, logger)
    try:
        if args.command == "run":
            try:
                manager.refresh()
            except (OSError, SnapshotParseError) as exc:
                log_event(logger, logging.ERROR, "snapshot_unreadable", str(exc))
                return EXIT_IO_ERROR
            except Exception as exc:  # noqa: BLE001
                log_event(logger, logging.ERROR, "pairlist_refresh_failed", str(exc), error_type=type(exc).__name__)
                return EXIT_REFRESH_ERROR
        else:
            _watch(manager, args)

        try:
            _emit(manager, args, logger)
        except OSError as exc:
            log_event(logger, logging.ERROR, "output_not_writable", str(exc))
            return EXIT_IO_ERROR
    finally:
        manager.close()
        if producer:
            producer.close()

    log_event(logger, logging.INFO, "run_complete", "Run complete", pair_count=manager.get_pair_count())
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
