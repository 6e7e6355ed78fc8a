from __future__ import annotations

import asyncio
import contextlib
import signal
from typing import Awaitable, Callable, TypeVar

from protopedia_client import CancellationToken, ProtoPediaClient
from protopedia_client.config_types import ClientConfig

from .config import AppConfig, apply_env, normalize_base_url

T = TypeVar("T")


def make_client(
    cfg: AppConfig,
    *,
    base_url_override: str | None,
    timeout_override: float | None = None,
    verbose: bool = False,
) -> ProtoPediaClient:
    effective_cfg = apply_env(cfg)
    base_url = normalize_base_url(base_url_override or effective_cfg.base_url, warn=True)
    return ProtoPediaClient(
        ClientConfig(
            base_url=base_url,
            token=effective_cfg.token or None,
            timeout_s=timeout_override if timeout_override is not None else effective_cfg.timeout_s,
            log_level="debug" if verbose else effective_cfg.log_level,
        )
    )


def run_call(call: Callable[[CancellationToken], Awaitable[T]]) -> T:
    """Run one client call; Ctrl-C cancels the call's token instead of killing the loop."""

    async def _main() -> T:
        token = CancellationToken()
        loop = asyncio.get_running_loop()
        installed = False
        with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
            loop.add_signal_handler(signal.SIGINT, token.cancel)
            installed = True
        try:
            return await call(token)
        finally:
            if installed:
                loop.remove_signal_handler(signal.SIGINT)

    return asyncio.run(_main())
