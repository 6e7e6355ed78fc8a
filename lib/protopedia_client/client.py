from __future__ import annotations

import contextlib
import dataclasses
from typing import Any, AsyncIterator, Mapping
from urllib.parse import quote, urlencode

import httpx

from .config_types import ClientConfig, RequestOptions, resolve_log_level, to_timeout
from .decoding import decode_json, decode_text
from .errors import ApiErrorRequest
from .headers import merge_headers
from .log import CallLog, LeveledLogger, StdlibLogger, log_level_value
from .params import ParamsLike, serialize_list_params
from .signals import compose_signal
from .transport import HttpxTransport, RequestDescriptor, invoke
from .types import ListPrototypesResponse

LIST_PATH = "/prototype/list"
TSV_PATH = "/prototype/list/tsv"

_JSON_ACCEPT = {"Accept": "application/json"}


class ProtoPediaClient:
    """Asynchronous client for the ProtoPedia API v2.

    Calls share nothing but the immutable :class:`ClientConfig`; each one
    builds its own request, timeout and cancellation wiring, so a client can
    be used from many tasks at once.
    """

    def __init__(self, cfg: ClientConfig | None = None):
        self._cfg = cfg or ClientConfig()
        self._transport = self._cfg.transport or HttpxTransport()
        self._logger = LeveledLogger(self._cfg.logger if self._cfg.logger is not None else StdlibLogger())

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    # --- API methods ---
    async def list_prototypes(
            self,
            params: ParamsLike = None,
            *,
            options: RequestOptions | None = None,
            **overrides: Any,
    ) -> ListPrototypesResponse:
        """``GET /prototype/list``. The payload is returned as the API sent it."""
        opts = _resolve_options(options, overrides)
        log = self._call_log(opts)
        url = self.build_url(LIST_PATH, serialize_list_params(params))
        req = ApiErrorRequest(method="GET", url=url)

        async with self._exchange(url, "GET", _JSON_ACCEPT, opts, log) as response:
            payload = await decode_json(response, "listPrototype", req)
        log("debug", "listPrototype response payload", payload)
        return payload

    async def download_prototypes_tsv(
            self,
            params: ParamsLike = None,
            *,
            options: RequestOptions | None = None,
            **overrides: Any,
    ) -> str:
        """``GET /prototype/list/tsv``. The TSV document is returned verbatim."""
        opts = _resolve_options(options, overrides)
        log = self._call_log(opts)
        url = self.build_url(TSV_PATH, serialize_list_params(params))

        # the upstream answers with TSV regardless of Accept
        async with self._exchange(url, "GET", _JSON_ACCEPT, opts, log) as response:
            text = await decode_text(response)
        log("debug", "downloadPrototypesTsv response payload", text)
        return text

    # --- plumbing ---
    def build_url(self, path: str, query: list[tuple[str, str]]) -> str:
        url = f"{self._cfg.base_url}/{path.lstrip('/')}"
        pairs = [(key, value) for key, value in query if value != ""]
        if pairs:
            url += "?" + urlencode(pairs, safe="", quote_via=quote)
        return url

    def _call_log(self, opts: RequestOptions) -> CallLog:
        level = resolve_log_level(opts.log_level, self._cfg.log_level)
        return CallLog(self._logger, log_level_value(level))

    def _timeout_for(self, opts: RequestOptions) -> float:
        if opts.timeout_s is None:
            return self._cfg.timeout_s
        return to_timeout(opts.timeout_s, self._cfg.timeout_s)

    @contextlib.asynccontextmanager
    async def _exchange(
            self,
            url: str,
            method: str,
            headers: Mapping[str, str] | None,
            opts: RequestOptions,
            log: CallLog,
            body: bytes | None = None,
    ) -> AsyncIterator[httpx.Response]:
        cfg = self._cfg
        merged = merge_headers(
            {"Authorization": f"Bearer {cfg.token}"} if cfg.token else None,
            {"X-Client-User-Agent": cfg.user_agent} if cfg.user_agent else None,
            headers,
            opts.headers,
        )
        signal = compose_signal(opts.cancel, self._timeout_for(opts))
        try:
            request = RequestDescriptor(url=url, method=method, headers=merged, signal=signal, body=body)
            yield await invoke(request, self._transport, cancel=opts.cancel, log=log)
        finally:
            signal.dispose()


def _resolve_options(options: RequestOptions | None, overrides: dict[str, Any]) -> RequestOptions:
    opts = options or RequestOptions()
    if overrides:
        opts = dataclasses.replace(opts, **overrides)
    return opts


def create_client(cfg: ClientConfig) -> ProtoPediaClient:
    """Like ``ProtoPediaClient(cfg)`` but refuses to build a client without a token."""
    if not cfg.token:
        raise ValueError("Missing PROTOPEDIA_API_V2_TOKEN.")
    return ProtoPediaClient(cfg)
