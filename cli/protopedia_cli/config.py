from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from typing import Any

import tomli_w
from platformdirs import user_config_dir
from protopedia_client.config_types import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S, to_timeout
from protopedia_client.env import ENV_BASE_URL, ENV_LOG_LEVEL, ENV_TOKEN
from protopedia_client.log import normalize_log_level

from . import console

APP_NAME = "protopedia"
CONFIG_FILENAME = "config.toml"

_WARNED_BASE_URL_SCHEME = False


@dataclass
class AppConfig:
    base_url: str = DEFAULT_BASE_URL
    token: str = ""
    log_level: str = "error"
    timeout_s: float = DEFAULT_TIMEOUT_S


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig()


def normalize_base_url(raw: str | None, *, warn: bool = False) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"

    normalized = f"{scheme}{value}"
    if warn:
        _warn_missing_scheme(normalized)
    return normalized


def _warn_missing_scheme(normalized: str) -> None:
    global _WARNED_BASE_URL_SCHEME
    if _WARNED_BASE_URL_SCHEME:
        return
    console.warn(f"base_url missing scheme, assuming {normalized}")
    _WARNED_BASE_URL_SCHEME = True


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "base_url": cfg.base_url,
        "log_level": cfg.log_level,
        "timeout_s": cfg.timeout_s,
        "auth": {"token": cfg.token},
    }


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    base_url = normalize_base_url(str(data.get("base_url") or ""), warn=True)
    if base_url:
        cfg.base_url = base_url
    auth_raw = data.get("auth") or {}
    if isinstance(auth_raw, dict):
        cfg.token = str(auth_raw.get("token") or "")
    level = normalize_log_level(str(data.get("log_level") or ""))
    if level is not None:
        cfg.log_level = level
    cfg.timeout_s = to_timeout(data.get("timeout_s"), DEFAULT_TIMEOUT_S)
    return cfg


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return from_toml(data)
    except FileNotFoundError:
        return default_config()


def apply_env(cfg: AppConfig) -> AppConfig:
    """Environment variables override the settings file."""
    token = os.getenv(ENV_TOKEN, "").strip()
    base_url = normalize_base_url(os.getenv(ENV_BASE_URL, ""))
    level = normalize_log_level(os.getenv(ENV_LOG_LEVEL))
    return AppConfig(
        base_url=base_url or cfg.base_url,
        token=token or cfg.token,
        log_level=level or cfg.log_level,
        timeout_s=cfg.timeout_s,
    )


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
