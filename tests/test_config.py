"""Tests for the configuration management subsystem."""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from curasync.config import Config, parse_size, parse_time


def test_config_defaults() -> None:
    """Verifies that the configuration initializes with sensible defaults."""
    conf = Config()
    assert conf.core.remote_name == "origin"
    assert conf.core.branch == "main"
    assert conf.core.commit_tag == "[curasync]"
    assert conf.cura.directory is None
    assert conf.cura.version == "5.6"
    assert conf.cura.process_name == "UltiMaker-Cura"
    assert conf.guard.grace_period == 1.0


def test_config_load_missing_file_uses_defaults(tmp_path: Path) -> None:
    assert Config.load(tmp_path / "absent.toml") == Config()


def test_config_load_merges_sections(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text(
        '[core]\nremote_name = "upstream"\n'
        '[cura]\ndirectory = "/opt/cura"\nversion = "5.7"\n'
        '[guard]\ngrace_period = "500ms"\n'
        '[limits]\nmax_log_size = "2mb"\n'
    )

    conf = Config.load(config_file)

    assert conf.core.remote_name == "upstream"
    assert conf.core.branch == "main"
    assert conf.cura.directory == "/opt/cura"
    assert conf.cura.version == "5.7"
    assert conf.guard.grace_period == pytest.approx(0.5)
    assert conf.limits.max_log_size == 2 * 1024 * 1024


def test_config_load_default_path(tmp_path: Path, mocker: MagicMock) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text('[core]\nbranch = "trunk"\n')
    mocker.patch("curasync.config.CONFIG_FILE", config_file)

    assert Config.load().core.branch == "trunk"


def test_config_empty_directory_keeps_default(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text('[cura]\ndirectory = ""\n')

    assert Config.load(config_file).cura.directory is None


def test_config_invalid_keys_and_values(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Verifies that unknown keys are ignored and invalid values fall back to defaults."""
    caplog.set_level(logging.WARNING)

    config_file = tmp_path / "config.toml"
    config_file.write_text(
        "[guard]\n"
        'grace_period = "forever"\n'
        'fake_setting = "ignored"\n'
        "[limits]\n"
        'max_log_size = "10 gallons"\n'
        "[daemon]\n"
        "interval = 5\n"
    )

    conf = Config.load(config_file)

    assert conf.guard.grace_period == 1.0
    assert conf.limits.max_log_size == 1024 * 1024
    assert "Unknown config keys in [guard]: fake_setting" in caplog.text
    assert "Unknown config sections" in caplog.text
    assert "Config error in [guard].grace_period: Invalid time format" in caplog.text
    assert "Config error in [limits].max_log_size: Invalid size format" in caplog.text


def test_config_syntax_error_uses_defaults(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[core\nremote_name = \n")

    conf = Config.load(config_file)

    assert conf == Config()
    assert "Config syntax error" in caplog.text


def test_parse_size() -> None:
    """Verifies that human-readable sizes are correctly converted to bytes."""
    assert parse_size(100) == 100
    assert parse_size("100kb") == 102400
    assert parse_size("10 MB") == 10485760

    with pytest.raises(ValueError, match=r"Invalid size format '100 bits'"):
        parse_size("100 bits")


def test_parse_time() -> None:
    """Verifies that human-readable durations are correctly converted to seconds."""
    assert parse_time(0) == 0.0
    assert parse_time(2.5) == 2.5
    assert parse_time("1s") == 1.0
    assert parse_time("2 sec") == 2.0
    assert parse_time("250ms") == pytest.approx(0.25)

    with pytest.raises(ValueError, match=r"Invalid time format '10 lightyears'"):
        parse_time("10 lightyears")
    with pytest.raises(ValueError):
        parse_time(-1)
