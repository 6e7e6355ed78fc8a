from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from .decoding import build_error
from .errors import ApiError, ApiErrorRequest, CancellationError, RequestAbortedError
from .headers import headers_for_logging
from .log import CallLog
from .signals import CancelKind, CancellationToken, ComposedSignal


@dataclass(frozen=True)
class RequestDescriptor:
    url: str
    method: str
    headers: httpx.Headers
    signal: ComposedSignal
    body: bytes | None = None

    def summary(self) -> ApiErrorRequest:
        return ApiErrorRequest(method=self.method, url=self.url)


Transport = Callable[[RequestDescriptor], Awaitable[httpx.Response]]


class HttpxTransport:
    """Default transport: one short-lived ``httpx.AsyncClient`` per call.

    ``transport`` lets tests (or callers with special networking needs) swap
    the underlying httpx transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(
            self,
            *,
            transport: httpx.AsyncBaseTransport | None = None,
            follow_redirects: bool = True,
    ):
        self._transport = transport
        self._follow_redirects = follow_redirects

    async def __call__(self, request: RequestDescriptor) -> httpx.Response:
        # the composed signal owns the deadline, so httpx gets no timeout of its own
        async with httpx.AsyncClient(
                transport=self._transport,
                follow_redirects=self._follow_redirects,
                timeout=None,
        ) as client:
            return await client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body,
            )


def caller_reason(cancel: CancellationToken) -> BaseException:
    reason = cancel.reason
    if isinstance(reason, BaseException):
        return reason
    return RequestAbortedError(reason=reason)


async def _race(transport: Transport, request: RequestDescriptor) -> httpx.Response:
    signal = request.signal
    if signal.cancelled:
        raise _signal_error(signal)

    task = asyncio.ensure_future(transport(request))
    try:
        await asyncio.wait({task, signal.fired}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise

    if task.done():
        return task.result()

    task.cancel()
    # wait for the transport to unwind; its own exception is superseded by the signal
    await asyncio.gather(task, return_exceptions=True)
    raise _signal_error(signal)


def _signal_error(signal: ComposedSignal) -> CancellationError:
    if signal.kind is CancelKind.TIMEOUT:
        return signal.reason
    return RequestAbortedError(reason=signal.reason)


async def invoke(
        request: RequestDescriptor,
        transport: Transport,
        *,
        cancel: CancellationToken | None,
        log: CallLog,
) -> httpx.Response:
    """Send ``request`` and return the response if its status is 2xx.

    Non-2xx responses become ``ApiError``. A cancellation while the caller's
    token is cancelled re-raises the token's own reason. Everything else the
    transport raises propagates unchanged.
    """
    method, url = request.method, request.url
    try:
        log("debug", "HTTP request", {
            "method": method,
            "url": url,
            "headers": headers_for_logging(request.headers),
        })
        response = await _race(transport, request)
        log("debug", "HTTP response", {
            "method": method,
            "url": url,
            "status": response.status_code,
            "headers": headers_for_logging(response.headers),
        })
        if not response.is_success:
            api_error = await build_error(response, request.summary())
            log("error", "HTTP request failed", {
                "method": method,
                "url": url,
                "status": response.status_code,
                "error": api_error,
            })
            raise api_error
        return response
    except ApiError:
        raise
    except CancellationError as exc:
        if cancel is not None and cancel.cancelled:
            log("warn", "HTTP request aborted by caller", {
                "method": method,
                "url": url,
                "reason": cancel.reason,
            })
            reason = caller_reason(cancel)
            if reason is exc:
                raise
            raise reason from None
        log("warn", "HTTP request aborted", {"method": method, "url": url, "error": exc})
        raise
    except Exception as exc:
        log("error", "HTTP request threw an unexpected error", {"method": method, "url": url, "error": exc})
        raise
