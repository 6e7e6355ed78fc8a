"""Leveled logging for the client.

Any object exposing some of ``error/warn/info/debug(message, metadata=None)``
can be plugged in. Missing methods are replaced once, at construction time,
by the next lower severity that does exist, so a logger that only knows
``error`` still receives everything the configured level lets through.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Literal, Protocol

LogLevel = Literal["silent", "error", "warn", "info", "debug"]
MethodLevel = Literal["error", "warn", "info", "debug"]

LogMethod = Callable[..., None]

DEFAULT_LOG_LEVEL: LogLevel = "error"

_LEVEL_VALUES: dict[str, int] = {
    "silent": -1,
    "error": 0,
    "warn": 1,
    "info": 2,
    "debug": 3,
}


class Logger(Protocol):
    def error(self, message: str, metadata: Any = None) -> None: ...

    def warn(self, message: str, metadata: Any = None) -> None: ...

    def info(self, message: str, metadata: Any = None) -> None: ...

    def debug(self, message: str, metadata: Any = None) -> None: ...


def _noop(message: str, metadata: Any = None) -> None:
    return None


class _NoopLogger:
    error = staticmethod(_noop)
    warn = staticmethod(_noop)
    info = staticmethod(_noop)
    debug = staticmethod(_noop)


NOOP_LOGGER: Logger = _NoopLogger()


class StdlibLogger:
    """Adapter from the client's logger interface to a ``logging.Logger``."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("protopedia_client")

    def _emit(self, level: int, message: str, metadata: Any) -> None:
        if metadata is None:
            self._logger.log(level, "%s", message)
        else:
            self._logger.log(level, "%s %r", message, metadata)

    def error(self, message: str, metadata: Any = None) -> None:
        self._emit(logging.ERROR, message, metadata)

    def warn(self, message: str, metadata: Any = None) -> None:
        self._emit(logging.WARNING, message, metadata)

    def info(self, message: str, metadata: Any = None) -> None:
        self._emit(logging.INFO, message, metadata)

    def debug(self, message: str, metadata: Any = None) -> None:
        self._emit(logging.DEBUG, message, metadata)


def _method(logger: Any, name: str) -> LogMethod | None:
    candidate = getattr(logger, name, None)
    return candidate if callable(candidate) else None


def _wrap(method: LogMethod) -> LogMethod:
    def call(message: str, metadata: Any = None) -> None:
        if metadata is None:
            method(message)
        else:
            method(message, metadata)

    return call


class LeveledLogger:
    """Wraps a possibly partial logger and resolves severity fallbacks up front."""

    def __init__(self, logger: Any):
        error = _method(logger, "error")
        warn = _method(logger, "warn") or error
        info = _method(logger, "info") or warn
        debug = _method(logger, "debug") or info
        self.error: LogMethod = _wrap(error) if error else _noop
        self.warn: LogMethod = _wrap(warn) if warn else _noop
        self.info: LogMethod = _wrap(info) if info else _noop
        self.debug: LogMethod = _wrap(debug) if debug else _noop

    def method(self, level: MethodLevel) -> LogMethod:
        return getattr(self, level)


def normalize_log_level(value: str | None) -> LogLevel | None:
    if not isinstance(value, str):
        return None
    v = value.strip().lower()
    if v == "warning":
        return "warn"
    if v in _LEVEL_VALUES:
        return v  # type: ignore[return-value]
    return None


def log_level_value(level: str) -> int:
    try:
        return _LEVEL_VALUES[level]
    except KeyError:
        raise ValueError(f"unknown log level: {level!r}") from None


def should_log(configured_value: int, message_level: str) -> bool:
    if configured_value < 0:
        return False
    message_value = _LEVEL_VALUES.get(message_level, -1)
    if message_value < 0:
        return False
    return message_value <= configured_value


class CallLog:
    """Level-filtered view of a logger, bound for the duration of one call."""

    def __init__(self, logger: LeveledLogger, level_value: int):
        self._logger = logger
        self.level_value = level_value

    def enabled(self, level: MethodLevel) -> bool:
        return should_log(self.level_value, level)

    def __call__(self, level: MethodLevel, message: str, metadata: Any = None) -> None:
        if not self.enabled(level):
            return
        self._logger.method(level)(message, metadata)
