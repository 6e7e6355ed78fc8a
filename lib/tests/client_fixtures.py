from __future__ import annotations

from typing import Any

import httpx

from protopedia_client import ClientConfig, HttpxTransport, ProtoPediaClient

BASE_URL = "https://example.com/api/v2"

SAMPLE_API_RESPONSE: dict[str, Any] = {
    "metadata": {
        "status": 200,
        "title": "OK",
        "detail": "The request sent by the client was successful.",
    },
    "count": 1,
    "links": {"self": {"href": "/v2/api/protopedia/list"}},
    "results": [
        {
            "id": 42,
            "prototypeNm": "Test Work",
            "summary": "Summary",
            "mainUrl": "https://example.com/prototypes/42",
            "status": 2,
        }
    ],
}


class RecordingLogger:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []

    def _record(self, level: str, message: str, metadata: Any = None) -> None:
        self.calls.append((level, message, metadata))

    def error(self, message: str, metadata: Any = None) -> None:
        self._record("error", message, metadata)

    def warn(self, message: str, metadata: Any = None) -> None:
        self._record("warn", message, metadata)

    def info(self, message: str, metadata: Any = None) -> None:
        self._record("info", message, metadata)

    def debug(self, message: str, metadata: Any = None) -> None:
        self._record("debug", message, metadata)

    def messages(self, level: str) -> list[str]:
        return [m for lvl, m, _ in self.calls if lvl == level]


def mock_client(handler, **cfg: Any) -> ProtoPediaClient:
    cfg.setdefault("base_url", BASE_URL)
    cfg.setdefault("token", "token-123")
    cfg.setdefault("log_level", "silent")
    transport = HttpxTransport(transport=httpx.MockTransport(handler))
    return ProtoPediaClient(ClientConfig(transport=transport, **cfg))
