"""Tests for ChartConfigStore JSON persistence."""

from __future__ import annotations

import json
from pathlib import Path

from nicetimechart.chart_widget.config import ChartConfig, SeriesConfig
from nicetimechart.chart_widget.config_store import SCHEMA_VERSION, ChartConfigStore


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    store = ChartConfigStore.load(config_path=tmp_path / "missing.json")
    assert store.config == ChartConfig()


def test_missing_file_uses_supplied_default(tmp_path: Path) -> None:
    default = ChartConfig(width=600)
    store = ChartConfigStore.load(config_path=tmp_path / "missing.json", default=default)
    assert store.config is default


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "chart.json"
    cfg = ChartConfig(series=(SeriesConfig(name="a"), SeriesConfig(name="b")), tick_unit="month")
    ChartConfigStore(path=path, config=cfg).save()

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["schema_version"] == SCHEMA_VERSION
    assert raw["chart"]["tick_unit"] == "month"

    assert ChartConfigStore.load(config_path=path).config == cfg


def test_invalid_json_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "chart.json"
    path.write_text("{not json", encoding="utf-8")
    assert ChartConfigStore.load(config_path=path).config == ChartConfig()


def test_schema_mismatch_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "chart.json"
    path.write_text(json.dumps({"schema_version": SCHEMA_VERSION + 1, "chart": {"width": 600}}), encoding="utf-8")
    assert ChartConfigStore.load(config_path=path).config.width == 800

    kept = ChartConfigStore.load(config_path=path, reset_on_version_mismatch=False)
    assert kept.config.width == 600


def test_invalid_chart_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "chart.json"
    path.write_text(json.dumps({"schema_version": SCHEMA_VERSION, "chart": {"width": 10}}), encoding="utf-8")
    assert ChartConfigStore.load(config_path=path).config == ChartConfig()


def test_default_config_path_uses_app_name() -> None:
    path = ChartConfigStore.default_config_path(app_name="nicetimechart-test", filename="c.json")
    assert path.name == "c.json"
    assert "nicetimechart-test" in str(path)
