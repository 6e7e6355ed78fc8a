from __future__ import annotations

import asyncio
import logging

import httpx
from typer.testing import CliRunner

from protopedia_cli import config, main
from protopedia_cli.commands import prototypes_cmd
from protopedia_client import ClientConfig, HttpxTransport, ProtoPediaClient

SAMPLE = {
    "metadata": {"status": 200, "title": "OK", "detail": "ok"},
    "count": 1,
    "links": {"self": {"href": "/v2/api/prototype/list"}},
    "results": [
        {"id": 42, "prototypeNm": "Test Work", "teamNm": "Team", "status": 2, "viewCount": 10, "goodCount": 3}
    ],
}


def _isolate_config(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    for name in ("PROTOPEDIA_API_V2_TOKEN", "PROTOPEDIA_API_V2_BASE_URL", "PROTOPEDIA_API_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def _patch_client(monkeypatch, handler, captured: dict | None = None, **cfg) -> None:
    def _make_client(app_cfg, *, base_url_override, timeout_override=None, verbose=False):
        if captured is not None:
            captured["timeout_override"] = timeout_override
            captured["base_url_override"] = base_url_override
            captured["verbose"] = verbose
        return ProtoPediaClient(
            ClientConfig(
                base_url="https://example.com/api/v2",
                token="t",
                log_level="debug" if verbose else "silent",
                transport=HttpxTransport(transport=httpx.MockTransport(handler)),
                **cfg,
            )
        )

    monkeypatch.setattr(prototypes_cmd, "make_client", _make_client)


def test_list_renders_table(monkeypatch, tmp_path) -> None:
    _isolate_config(monkeypatch, tmp_path)
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=SAMPLE)

    _patch_client(monkeypatch, handler)
    result = CliRunner().invoke(main._build_app(), ["list", "--tag", "IoT", "--limit", "5"])

    assert result.exit_code == 0, result.output
    assert "Test Work" in result.output
    assert dict(seen[0].url.params) == {"tagNm": "IoT", "limit": "5"}


def test_list_json_output(monkeypatch, tmp_path) -> None:
    _isolate_config(monkeypatch, tmp_path)
    _patch_client(monkeypatch, lambda request: httpx.Response(200, json=SAMPLE))

    result = CliRunner().invoke(main._build_app(), ["list", "--id", "42", "--json"])

    assert result.exit_code == 0, result.output
    assert '"prototypeNm": "Test Work"' in result.output


def test_list_unauthorized_exits_with_code_2(monkeypatch, tmp_path) -> None:
    _isolate_config(monkeypatch, tmp_path)
    _patch_client(monkeypatch, lambda request: httpx.Response(401, text="unauthorised"))

    result = CliRunner().invoke(main._build_app(), ["list"])

    assert result.exit_code == 2
    assert "Unauthorized" in result.output


def test_list_server_error_exits_with_code_2(monkeypatch, tmp_path) -> None:
    _isolate_config(monkeypatch, tmp_path)
    _patch_client(monkeypatch, lambda request: httpx.Response(500, text="<html>oops</html>"))

    result = CliRunner().invoke(main._build_app(), ["list"])

    assert result.exit_code == 2
    assert "500" in result.output


def test_list_timeout_exits_with_code_3(monkeypatch, tmp_path) -> None:
    _isolate_config(monkeypatch, tmp_path)

    async def slow(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1)
        return httpx.Response(200, json=SAMPLE)

    _patch_client(monkeypatch, slow, timeout_s=0.01)

    result = CliRunner().invoke(main._build_app(), ["list"])

    assert result.exit_code == 3
    assert "timed out" in result.output


def test_list_network_error_exits_with_code_4(monkeypatch, tmp_path) -> None:
    _isolate_config(monkeypatch, tmp_path)

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _patch_client(monkeypatch, handler)

    result = CliRunner().invoke(main._build_app(), ["list"])

    assert result.exit_code == 4
    assert "connection refused" in result.output


def test_tsv_to_stdout(monkeypatch, tmp_path) -> None:
    _isolate_config(monkeypatch, tmp_path)
    payload = "id\ttitle\n1\tWork\n"
    _patch_client(
        monkeypatch,
        lambda request: httpx.Response(200, text=payload, headers={"Content-Type": "text/tab-separated-values"}),
    )

    result = CliRunner().invoke(main._build_app(), ["tsv", "--user", "alice"])

    assert result.exit_code == 0, result.output
    assert payload in result.output


def test_tsv_to_file(monkeypatch, tmp_path) -> None:
    _isolate_config(monkeypatch, tmp_path)
    payload = "id\ttitle\n1\tWork\n"
    _patch_client(monkeypatch, lambda request: httpx.Response(200, text=payload))
    out = tmp_path / "prototypes.tsv"

    result = CliRunner().invoke(main._build_app(), ["tsv", "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == payload


def test_timeout_option_is_forwarded(monkeypatch, tmp_path) -> None:
    _isolate_config(monkeypatch, tmp_path)
    captured: dict = {}
    _patch_client(monkeypatch, lambda request: httpx.Response(200, json=SAMPLE), captured)

    result = CliRunner().invoke(main._build_app(), ["list", "--timeout", "0", "--base-url", "api.example.test"])

    assert result.exit_code == 0, result.output
    assert captured == {"timeout_override": 0.0, "base_url_override": "api.example.test", "verbose": False}


def test_global_verbose_flag_logs_http_traffic(monkeypatch, tmp_path, caplog) -> None:
    _isolate_config(monkeypatch, tmp_path)
    captured: dict = {}
    _patch_client(monkeypatch, lambda request: httpx.Response(200, json=SAMPLE), captured)

    with caplog.at_level(logging.DEBUG):
        result = CliRunner().invoke(main._build_app(), ["-v", "list"])

    assert result.exit_code == 0, result.output
    assert captured["verbose"] is True
    assert logging.getLogger("protopedia_client").level == logging.DEBUG
    messages = [r.getMessage() for r in caplog.records if r.name == "protopedia_client"]
    assert any(m.startswith("HTTP request ") for m in messages)
    assert any(m.startswith("HTTP response ") for m in messages)


def test_without_verbose_flag_client_logger_stays_quiet(monkeypatch, tmp_path) -> None:
    _isolate_config(monkeypatch, tmp_path)
    captured: dict = {}
    _patch_client(monkeypatch, lambda request: httpx.Response(200, json=SAMPLE), captured)

    result = CliRunner().invoke(main._build_app(), ["list"])

    assert result.exit_code == 0, result.output
    assert captured["verbose"] is False
    assert logging.getLogger("protopedia_client").level == logging.WARNING


def test_per_command_verbose_option_is_gone(monkeypatch, tmp_path) -> None:
    _isolate_config(monkeypatch, tmp_path)
    _patch_client(monkeypatch, lambda request: httpx.Response(200, json=SAMPLE))

    result = CliRunner().invoke(main._build_app(), ["list", "--verbose"])

    assert result.exit_code == 2
