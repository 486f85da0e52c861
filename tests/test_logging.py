import json
import logging
from pathlib import Path

from pairlist.obs import LogSettings, build_logger, log_event


def test_jsonl_records(tmp_path: Path) -> None:
    log_file = tmp_path / "run.jsonl"
    logger = build_logger(LogSettings(level="DEBUG", run_id="run42", log_file=log_file, jsonl=True))

    log_event(logger, logging.INFO, "pairlist_refreshed", "Pair list refreshed: 2 pairs", pair_count=2)
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        log_event(logger, logging.ERROR, "pairlist_auto_refresh_failed", "Error in auto refresh", exc_info=True)
    for handler in logger.handlers:
        handler.flush()

    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]

    assert lines[0]["event"] == "pairlist_refreshed"
    assert lines[0]["run_id"] == "run42"
    assert lines[0]["extra"] == {"pair_count": 2}
    assert lines[0]["ts"].endswith("Z")
    assert "RuntimeError: boom" in lines[1]["exc"]
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_logger_is_isolated() -> None:
    logger = build_logger(LogSettings(level="INFO", run_id="iso", log_file=None, jsonl=False))

    assert logger.name == "pairlist.iso"
    assert logger.propagate is False
    assert len(logger.handlers) == 1
