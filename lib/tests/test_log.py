from __future__ import annotations

import logging

import pytest

from protopedia_client.log import (
    NOOP_LOGGER,
    CallLog,
    LeveledLogger,
    StdlibLogger,
    log_level_value,
    normalize_log_level,
    should_log,
)


class ErrorOnlyLogger:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def error(self, *args) -> None:
        self.calls.append(args)


class InfoAndErrorLogger(ErrorOnlyLogger):
    def __init__(self) -> None:
        super().__init__()
        self.info_calls: list[tuple] = []

    def info(self, *args) -> None:
        self.info_calls.append(args)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("debug", "debug"),
        ("  INFO ", "info"),
        ("Warning", "warn"),
        ("warn", "warn"),
        ("silent", "silent"),
        ("error", "error"),
        ("", None),
        ("verbose", None),
        (None, None),
    ],
)
def test_normalize_log_level(raw, expected) -> None:
    assert normalize_log_level(raw) == expected


def test_level_values_are_ordered() -> None:
    assert log_level_value("silent") < log_level_value("error") < log_level_value("warn")
    assert log_level_value("warn") < log_level_value("info") < log_level_value("debug")
    with pytest.raises(ValueError):
        log_level_value("loud")


def test_should_log() -> None:
    assert should_log(log_level_value("warn"), "error")
    assert should_log(log_level_value("warn"), "warn")
    assert not should_log(log_level_value("warn"), "info")
    assert not should_log(log_level_value("silent"), "error")
    assert not should_log(log_level_value("debug"), "silent")


def test_missing_methods_fall_back_to_lower_severity() -> None:
    target = ErrorOnlyLogger()
    logger = LeveledLogger(target)

    logger.debug("d", {"k": 1})
    logger.info("i")
    logger.warn("w")

    assert target.calls == [("d", {"k": 1}), ("i",), ("w",)]


def test_fallback_prefers_nearest_existing_method() -> None:
    target = InfoAndErrorLogger()
    logger = LeveledLogger(target)

    logger.debug("d")
    logger.warn("w")

    assert target.info_calls == [("d",)]
    assert target.calls == [("w",)]


def test_logger_without_methods_is_noop() -> None:
    logger = LeveledLogger(object())
    logger.error("nothing happens")
    logger.debug("nothing happens")


def test_noop_logger_accepts_metadata() -> None:
    NOOP_LOGGER.error("x", {"a": 1})
    NOOP_LOGGER.debug("x")


def test_stdlib_logger_forwards_to_logging(caplog) -> None:
    logger = StdlibLogger(logging.getLogger("protopedia_client.test"))
    with caplog.at_level(logging.DEBUG, logger="protopedia_client.test"):
        logger.warn("HTTP request aborted", {"url": "https://example.com"})
        logger.debug("plain")

    assert [r.levelno for r in caplog.records] == [logging.WARNING, logging.DEBUG]
    assert "HTTP request aborted" in caplog.records[0].getMessage()
    assert "https://example.com" in caplog.records[0].getMessage()
    assert caplog.records[1].getMessage() == "plain"


def test_call_log_filters_by_level() -> None:
    target = ErrorOnlyLogger()
    log = CallLog(LeveledLogger(target), log_level_value("error"))

    log("debug", "hidden")
    log("error", "shown", {"status": 500})

    assert not log.enabled("warn")
    assert target.calls == [("shown", {"status": 500})]
