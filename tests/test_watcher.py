"""
Tests for the watcher entry point and its logging helpers.
"""

from __future__ import annotations

import asyncio
import json
import logging
from types import SimpleNamespace

import pytest

from notify.config import ConfigError
from watcher import watcher
from watcher.logging_utils import setup_logging
from watcher.poller import FatalError, Poller, Target


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch):
    """Point logs at tmp_path and undo the handler setup afterwards."""
    monkeypatch.setenv("MCWATCH_LOG_DIR", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    for name in watcher.LOGGER_NAMES:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


def fail_with(error):
    async def fake_main_async(cli_args, logger):
        raise error

    return fake_main_async


def test_fatal_error_exits_with_failure(monkeypatch, isolated_logging):
    monkeypatch.setattr(watcher, "main_async", fail_with(FatalError("Failed to request status 10 times!")))

    assert watcher.main(["play.example.net"]) == 1
    log_text = (isolated_logging / "mcwatch.log").read_text(encoding="utf-8")
    assert "CRITICAL" in log_text
    assert "Failed to request status 10 times!" in log_text


def test_config_error_exits_with_failure(monkeypatch):
    monkeypatch.setattr(watcher, "main_async", fail_with(ConfigError("bad config")))

    assert watcher.main(["play.example.net"]) == 1


def test_main_async_wires_target_and_services(monkeypatch, isolated_logging):
    seen = {}

    async def fake_run(self):
        seen["target"] = self.target
        seen["interval"] = self.interval
        raise FatalError("stop")

    monkeypatch.setattr(Poller, "run", fake_run)
    args = SimpleNamespace(
        hostname="play.example.net",
        port=25566,
        no_srv=True,
        config=str(isolated_logging / "notify.json"),
        interval=2.0,
        timeout=0,
    )

    with pytest.raises(FatalError):
        asyncio.run(watcher.main_async(args, logging.getLogger("test")))

    assert seen == {"target": Target("play.example.net", 25566), "interval": 2.0}
    assert (isolated_logging / "notify.json").exists()


def test_package_loggers_share_the_log_file(tmp_path):
    log_file = setup_logging(
        (tmp_path / "logs" / "mcwatch.log",),
        watcher.LOGGER_NAMES,
        level=logging.DEBUG,
    )

    logging.getLogger("mcping.client").debug("writing request")
    logging.getLogger("notify.services").info("webhook delivered")
    for handler in logging.getLogger(watcher.LOGGER_NAME).handlers:
        handler.flush()

    assert log_file == tmp_path / "logs" / "mcwatch.log"
    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG    mcping.client: writing request" in text
    assert "INFO     notify.services: webhook delivered" in text


def test_unwritable_log_path_falls_back(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    log_file = setup_logging(
        (blocker / "mcwatch.log", tmp_path / "fallback" / "mcwatch.log"),
        watcher.LOGGER_NAMES,
    )

    assert log_file == tmp_path / "fallback" / "mcwatch.log"


def test_no_writable_log_path_logs_to_console_only(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    assert setup_logging((blocker / "mcwatch.log",), watcher.LOGGER_NAMES) is None
    handlers = logging.getLogger(watcher.LOGGER_NAME).handlers
    assert [type(handler) for handler in handlers] == [logging.StreamHandler]


def test_invalid_service_config_exits_with_failure(isolated_logging):
    config_path = isolated_logging / "notify.json"
    config_path.write_text(
        json.dumps({"services": [{"type": "webhook", "url": "http://example.net/hook", "headers": ["x"]}]}),
        encoding="utf-8",
    )

    assert watcher.main(["play.example.net", "--no-srv", "--config", str(config_path)]) == 1
    log_text = (isolated_logging / "mcwatch.log").read_text(encoding="utf-8")
    assert "field 'headers' must be an object" in log_text
