from __future__ import annotations

import typer
from protopedia_client.config_types import to_timeout
from protopedia_client.log import normalize_log_level

from .. import console
from ..config import apply_env, config_path, load_config, normalize_base_url, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/protopedia/config.toml).")


@app.command("show")
def show_settings(
        effective: bool = typer.Option(False, "--effective", help="Apply environment overrides first."),
):
    cfg = load_config()
    if effective:
        cfg = apply_env(cfg)
    token_state = "(set)" if (cfg.token or "").strip() else "(empty)"
    console.console.print(
        f"base_url={cfg.base_url} token={token_state} log_level={cfg.log_level} timeout_s={cfg.timeout_s}"
    )


@app.command("path")
def show_path():
    console.console.print(config_path())


@app.command("set")
def set_setting(
        base_url: str | None = typer.Option(None, "--base-url", help="Set API base URL."),
        token: str | None = typer.Option(None, "--token", help="Set API token."),
        log_level: str | None = typer.Option(None, "--log-level", help="silent, error, warn, info or debug."),
        timeout: float | None = typer.Option(None, "--timeout", help="Request timeout in seconds (0 disables)."),
):
    cfg = load_config()
    if base_url is not None:
        normalized = normalize_base_url(base_url, warn=True)
        if not normalized:
            console.err("Base URL cannot be empty.")
            raise typer.Exit(code=2)
        cfg.base_url = normalized
    if token is not None:
        cfg.token = token.strip()
    if log_level is not None:
        level = normalize_log_level(log_level)
        if level is None:
            console.err(f"Unknown log level: {log_level}")
            raise typer.Exit(code=2)
        cfg.log_level = level
    if timeout is not None:
        cfg.timeout_s = to_timeout(timeout, cfg.timeout_s)
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
