import json
from pathlib import Path

import pytest

from pairlist.__main__ import EXIT_CONFIG_ERROR, EXIT_IO_ERROR, EXIT_OK, main


@pytest.fixture()
def snapshot_dir(tmp_path: Path) -> Path:
    (tmp_path / "markets.json").write_text(
        json.dumps(
            [
                {"symbol": "BTC/USDT"},
                {"symbol": "ETH/USDT"},
                {"symbol": "DOGE/USDT"},
                {"symbol": "DEAD/USDT", "active": False},
            ]
        ),
        encoding="utf-8",
    )
    (tmp_path / "tickers.json").write_text(
        json.dumps(
            {
                "BTC/USDT": {"last": 100, "bid": 99.99, "ask": 100, "quoteVolume": 9e8},
                "ETH/USDT": {"last": 10, "bid": 9.99, "ask": 10, "quoteVolume": 5e8},
                "DOGE/USDT": {"last": 0.1, "bid": 0.09, "ask": 0.1, "quoteVolume": 7e8},
            }
        ),
        encoding="utf-8",
    )
    (tmp_path / "config.yaml").write_text(
        """
pairlist_filters:
  - method: VolumePairList
    number_assets: 3
  - method: SpreadFilter
    max_spread_ratio: 0.01
obs:
  log_level: WARNING
""",
        encoding="utf-8",
    )
    return tmp_path


def _args(base: Path, *extra: str) -> list[str]:
    return [
        "run",
        "--config",
        str(base / "config.yaml"),
        "--markets",
        str(base / "markets.json"),
        "--tickers",
        str(base / "tickers.json"),
        *extra,
    ]


def test_run_writes_pairlist(snapshot_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    output_dir = snapshot_dir / "out"

    exit_code = main(_args(snapshot_dir, "--output", str(output_dir)))

    assert exit_code == EXIT_OK
    printed = json.loads(capsys.readouterr().out)
    assert printed["pairs"] == ["BTC/USDT", "ETH/USDT"]
    assert printed["statistics"]["filters"] == ["VolumePairList", "SpreadFilter"]
    exported = json.loads((output_dir / "pairlist.json").read_text(encoding="utf-8"))
    assert exported["pairs"] == ["BTC/USDT", "ETH/USDT"]


def test_invalid_config_exit_code(snapshot_dir: Path) -> None:
    (snapshot_dir / "config.yaml").write_text("refresh_period: -5\n", encoding="utf-8")

    assert main(_args(snapshot_dir)) == EXIT_CONFIG_ERROR


def test_missing_snapshot_exit_code(snapshot_dir: Path) -> None:
    (snapshot_dir / "markets.json").unlink()

    assert main(_args(snapshot_dir)) == EXIT_IO_ERROR


def test_watch_with_duration(snapshot_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    argv = _args(snapshot_dir, "--interval", "60", "--duration-s", "0.2")
    argv[0] = "watch"

    assert main(argv) == EXIT_OK
    printed = json.loads(capsys.readouterr().out)
    assert printed["statistics"]["refresh_interval"] == 60


@pytest.mark.parametrize("interval", ["0", "-5", "soon"])
def test_watch_rejects_non_positive_interval(snapshot_dir: Path, interval: str) -> None:
    argv = _args(snapshot_dir, "--interval", interval, "--duration-s", "0.1")
    argv[0] = "watch"

    with pytest.raises(SystemExit) as exc_info:
        main(argv)

    assert exc_info.value.code == EXIT_CONFIG_ERROR


def test_run_with_producer_file(snapshot_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (snapshot_dir / "producer.json").write_text(json.dumps({"pairs": ["SOL/USDT", "ADA/USDT"]}), encoding="utf-8")
    (snapshot_dir / "config.yaml").write_text(
        """
pairlist_filters:
  - method: ProducerPairList
    producer_name: main
  - method: BlacklistFilter
    blacklist: [ADA/USDT]
obs:
  log_level: WARNING
""",
        encoding="utf-8",
    )

    exit_code = main(_args(snapshot_dir, "--producer-file", str(snapshot_dir / "producer.json")))

    assert exit_code == EXIT_OK
    assert json.loads(capsys.readouterr().out)["pairs"] == ["SOL/USDT"]
