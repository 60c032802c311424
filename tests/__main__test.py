from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from maxdirsize import __main__

ENVIRON = {
    "DIRECTORY": "tests",
    "INTERVAL_SECONDS": "5",
    "MAX_SIZE_MB": "100",
}


def test_parse_args():
    args = __main__.parse_args(["--config", "config.ini", "--once"])
    assert args.config == "config.ini"
    assert args.once is True


def test_parse_args_defaults():
    args = __main__.parse_args([])
    assert args.config is None
    assert args.once is False
    assert args.debug is False
    assert args.log_file is None
    assert args.make_config is None


def test_main_once():
    with patch.dict("os.environ", ENVIRON):
        with patch("maxdirsize.__main__.DirSizeGuard.run_once") as mock_guard:
            result = __main__.main(cli_args=["--once"])

    assert result == 0
    assert mock_guard.call_count == 1


def test_main_loop():
    with patch.dict("os.environ", ENVIRON):
        with patch("maxdirsize.__main__.DirSizeGuard.run_loop") as mock_guard:
            result = __main__.main(cli_args=[])

    assert result == 0
    assert mock_guard.call_count == 1


def test_main_logs_startup_banner(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.INFO)

    with patch.dict("os.environ", ENVIRON):
        with patch("maxdirsize.__main__.DirSizeGuard.run_once"):
            __main__.main(cli_args=["--once"])

    assert "running every 5 seconds on tests with a limit of 100 MB" in caplog.text
    assert f"maxdirsize-v{__main__.__version__}" in caplog.text


def test_main_invalid_config_exits_non_zero(caplog: pytest.LogCaptureFixture):
    with patch.dict("os.environ", {**ENVIRON, "MARGIN": "101"}):
        with patch("maxdirsize.__main__.DirSizeGuard") as mock_guard:
            result = __main__.main(cli_args=["--once"])

    assert result == 1
    assert mock_guard.call_count == 0
    assert "Invalid configuration" in caplog.text


def test_main_create_config():
    cli_args = ["--make-config", "tests/new_test_config.ini"]

    with patch("maxdirsize.__main__.write_new_config") as mock_write:
        result = __main__.main(cli_args=cli_args)

    assert result == 0
    mock_write.assert_called_once_with("tests/new_test_config.ini")


def test_main_creates_log_file(tmp_path: Path):
    log_file = tmp_path / "maxdirsize.log"
    cli_args = ["--once", "--log-file", str(log_file)]

    try:
        with patch.dict("os.environ", ENVIRON):
            with patch("maxdirsize.__main__.DirSizeGuard.run_once") as mock_guard:
                result = __main__.main(cli_args=cli_args)

        assert result == 0
        assert mock_guard.call_count == 1
        assert log_file.exists()

    finally:
        for handler in logging.root.handlers[:]:
            if isinstance(handler, logging.FileHandler):
                handler.close()
                logging.root.handlers.remove(handler)
