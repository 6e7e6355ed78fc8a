from __future__ import annotations

import math
from dataclasses import dataclass
from importlib import metadata
from typing import TYPE_CHECKING, Any, Mapping

from .log import DEFAULT_LOG_LEVEL, LogLevel, normalize_log_level

if TYPE_CHECKING:
    from .signals import CancellationToken
    from .transport import Transport

DEFAULT_BASE_URL = "https://protopedia.net/v2/api"
DEFAULT_TIMEOUT_S = 15.0


def client_version() -> str:
    try:
        return metadata.version("protopedia-client")
    except metadata.PackageNotFoundError:
        return "0.0.0"


DEFAULT_USER_AGENT = f"ProtoPedia API Ver 2.0 Python Client/{client_version()}"


def to_timeout(candidate: Any, fallback: float) -> float:
    """Keep non-negative finite numbers, fall back for anything else. ``0`` disables the timeout."""
    if isinstance(candidate, bool) or not isinstance(candidate, (int, float)):
        return fallback
    if not math.isfinite(candidate) or candidate < 0:
        return fallback
    return float(candidate)


def resolve_log_level(value: str | None, fallback: LogLevel = DEFAULT_LOG_LEVEL) -> LogLevel:
    if value is None:
        return fallback
    level = normalize_log_level(value)
    if level is None:
        raise ValueError(f"unknown log level: {value!r}")
    return level


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    token: str | None = None
    timeout_s: float = DEFAULT_TIMEOUT_S
    user_agent: str | None = DEFAULT_USER_AGENT
    transport: Transport | None = None
    logger: Any = None
    log_level: LogLevel = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", (self.base_url or DEFAULT_BASE_URL).rstrip("/"))
        object.__setattr__(self, "timeout_s", to_timeout(self.timeout_s, DEFAULT_TIMEOUT_S))
        object.__setattr__(self, "log_level", resolve_log_level(self.log_level))


@dataclass(frozen=True)
class RequestOptions:
    """Per-call knobs. Unset fields defer to the client's configuration."""

    cancel: CancellationToken | None = None
    headers: Mapping[str, str] | None = None
    log_level: LogLevel | None = None
    timeout_s: float | None = None
