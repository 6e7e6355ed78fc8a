from __future__ import annotations

import os
from typing import Any, Mapping

from .client import ProtoPediaClient, create_client
from .config_types import DEFAULT_BASE_URL, ClientConfig
from .log import normalize_log_level

ENV_TOKEN = "PROTOPEDIA_API_V2_TOKEN"
ENV_BASE_URL = "PROTOPEDIA_API_V2_BASE_URL"
ENV_LOG_LEVEL = "PROTOPEDIA_API_LOG_LEVEL"


def config_from_env(env: Mapping[str, str] | None = None, **overrides: Any) -> ClientConfig:
    """Build a ``ClientConfig`` from environment variables; keyword arguments win."""
    source = os.environ if env is None else env
    values: dict[str, Any] = {}

    token = (source.get(ENV_TOKEN) or "").strip()
    if token:
        values["token"] = token
    base_url = (source.get(ENV_BASE_URL) or "").strip()
    values["base_url"] = base_url or DEFAULT_BASE_URL
    # an unparsable level in the environment is ignored rather than fatal
    level = normalize_log_level(source.get(ENV_LOG_LEVEL))
    if level is not None:
        values["log_level"] = level

    values.update({k: v for k, v in overrides.items() if v is not None})
    return ClientConfig(**values)


def create_client_from_env(env: Mapping[str, str] | None = None, **overrides: Any) -> ProtoPediaClient:
    return create_client(config_from_env(env, **overrides))
