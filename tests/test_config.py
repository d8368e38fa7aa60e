from __future__ import annotations

import json

import pytest
from inline_snapshot import snapshot
from pydantic import ValidationError

from spinlog.config import (
    Config,
    DisplayConfig,
    LogManagerConfig,
    get_default_config,
    load_config,
    save_config,
)
from spinlog.exception import ConfigError


def test_default_config_dump():
    config = get_default_config()
    assert config.model_dump_json(indent=2, exclude_none=True) == snapshot(
        """\
{
  "manager": {
    "max_active_logs": 20,
    "max_completed_logs": 5,
    "retention_time_ms": 3000,
    "refresh_rate": 16
  },
  "display": {
    "trailer": "Press Ctrl+C to exit | Tasks tracked in background",
    "show_trailer": true,
    "indent_width": 2
  }
}\
"""
    )


def test_manager_config_invalid_values_fallback():
    config = LogManagerConfig(
        max_active_logs=-1,
        max_completed_logs=-2,
        retention_time_ms=-5,
        refresh_rate=0,
    )
    assert config == LogManagerConfig()
    assert DisplayConfig(indent_width=-4).indent_width == 2


def test_zero_values_are_kept():
    config = LogManagerConfig(max_active_logs=0, max_completed_logs=0, retention_time_ms=0)
    assert config.max_active_logs == 0
    assert config.max_completed_logs == 0
    assert config.keeps_finished_forever
    assert LogManagerConfig(refresh_rate=250).refresh_interval == 0.25


def test_load_config_creates_default_file(tmp_path):
    config_file = tmp_path / "config.json"
    config = load_config(config_file)
    assert config == get_default_config()
    assert json.loads(config_file.read_text(encoding="utf-8"))["manager"]["refresh_rate"] == 16


def test_load_config_reads_saved_values(tmp_path):
    config_file = tmp_path / "config.json"
    save_config(Config(manager=LogManagerConfig(retention_time_ms=0)), config_file)
    assert load_config(config_file).manager.keeps_finished_forever


def test_load_config_rejects_invalid_json(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_config(config_file)


def test_load_config_rejects_multiline_trailer(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"display": {"trailer": "a\nb"}}), encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid configuration file"):
        load_config(config_file)


def test_display_config_rejects_multiline_trailer():
    with pytest.raises(ValidationError, match="single line"):
        DisplayConfig(trailer="a\nb")
    assert DisplayConfig(trailer="a\nb", show_trailer=False).trailer == "a\nb"
