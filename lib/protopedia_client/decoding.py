from __future__ import annotations

import enum
import json
from typing import Any, Callable

import httpx

from .errors import ApiError, ApiErrorRequest
from .headers import headers_snapshot


class BodyStrategy(enum.Enum):
    JSON = "json"
    TEXT = "text"


def select_strategy(content_type: str | None) -> BodyStrategy:
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if "json" in media_type:
        return BodyStrategy.JSON
    return BodyStrategy.TEXT


def parse_json_body(content: bytes, encoding: str | None = None) -> Any:
    """``json.loads`` detects UTF-8/16/32 itself, so ``encoding`` is ignored."""
    return json.loads(content)


def parse_text_body(content: bytes, encoding: str | None = None) -> str:
    # strict: an undecodable buffer must fail so the next strategy is tried
    return content.decode(encoding or "utf-8")


def recover_text(content: bytes, encoding: str | None = None) -> str:
    try:
        return content.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")


_PARSERS: dict[BodyStrategy, Callable[[bytes, str | None], Any]] = {
    BodyStrategy.JSON: parse_json_body,
    BodyStrategy.TEXT: parse_text_body,
}

_FALLBACK_ORDER: dict[BodyStrategy, tuple[BodyStrategy, ...]] = {
    BodyStrategy.JSON: (BodyStrategy.JSON, BodyStrategy.TEXT),
    BodyStrategy.TEXT: (BodyStrategy.TEXT, BodyStrategy.JSON),
}


async def read_body(response: httpx.Response) -> bytes:
    """Materialize the body once; later reads hit httpx's cached ``content``."""
    return await response.aread()


def request_summary(response: httpx.Response, fallback: ApiErrorRequest | None = None) -> ApiErrorRequest:
    if fallback is not None:
        return fallback
    try:
        request = response.request
    except RuntimeError:
        return ApiErrorRequest(method="", url="")
    return ApiErrorRequest(method=request.method, url=str(request.url))


async def decode_json(response: httpx.Response, context: str, req: ApiErrorRequest | None = None) -> Any:
    content: bytes | None = None
    try:
        content = await read_body(response)
        return json.loads(content)
    except (ValueError, httpx.StreamError, httpx.TransportError) as exc:
        text = recover_text(content, response.encoding) if content is not None else None
        raise ApiError(
            f"Failed to parse {context} response as JSON",
            req=request_summary(response, req),
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=headers_snapshot(response.headers),
            body=text,
            cause=exc,
        ) from exc


async def decode_text(response: httpx.Response) -> str:
    await read_body(response)
    return response.text


async def build_error(response: httpx.Response, req: ApiErrorRequest | None = None) -> ApiError:
    """Build an ``ApiError`` for a non-2xx response. Never raises."""
    body: Any = None
    failure: BaseException | None = None
    content: bytes | None = None

    try:
        content = await read_body(response)
    except Exception as exc:
        failure = exc

    if content is not None:
        strategy = select_strategy(response.headers.get("content-type"))
        encoding = response.charset_encoding
        for candidate in _FALLBACK_ORDER[strategy]:
            try:
                body = _PARSERS[candidate](content, encoding)
                failure = None
                break
            except (ValueError, LookupError) as exc:
                failure = exc
        else:
            body = recover_text(content, encoding)
            failure = None

    if failure is not None:
        body = {"parse_error": str(failure)}

    return ApiError(
        f"Request failed with status {response.status_code}",
        req=request_summary(response, req),
        status=response.status_code,
        status_text=response.reason_phrase,
        headers=headers_snapshot(response.headers),
        body=body,
    )

