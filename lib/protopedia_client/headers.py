from __future__ import annotations

from typing import Mapping, Sequence

import httpx

HeaderSource = httpx.Headers | Mapping[str, str] | Sequence[tuple[str, str]] | None

_MASKED_NAME_PARTS = ("auth", "token")


def merge_headers(*sources: HeaderSource) -> httpx.Headers:
    """Merge header sources, lowest priority first.

    Names compare case-insensitively and a later value replaces an earlier
    one for the same name.
    """
    merged = httpx.Headers()
    for source in sources:
        if not source:
            continue
        for key, value in httpx.Headers(source).items():
            merged[key] = value
    return merged


def headers_snapshot(headers: httpx.Headers | Mapping[str, str] | None) -> dict[str, str]:
    if headers is None:
        return {}
    return {key.lower(): value for key, value in httpx.Headers(headers).items()}


def headers_for_logging(headers: httpx.Headers | Mapping[str, str] | None) -> dict[str, str] | None:
    if headers is None:
        return None
    out: dict[str, str] = {}
    for key, value in headers_snapshot(headers).items():
        masked = any(part in key for part in _MASKED_NAME_PARTS)
        out[key] = "***" if masked else value
    return out
