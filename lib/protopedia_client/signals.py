"""Cooperative cancellation for a single call.

A call can be stopped by two independent sources: the client's own timeout
and a :class:`CancellationToken` owned by the caller. :func:`compose_signal`
races them into one :class:`ComposedSignal`; the first source to fire fixes
the reason, and :meth:`ComposedSignal.dispose` releases the timer and the
token listener.

Tokens and signals are not thread-safe. Cancel a token from the event loop
thread (``loop.call_soon_threadsafe(token.cancel)`` from elsewhere).
"""
from __future__ import annotations

import asyncio
import enum
import math
from typing import Any, Callable

from .errors import RequestAbortedError, RequestTimeoutError

Listener = Callable[[Any], None]


class CancelKind(enum.Enum):
    NONE = "none"
    TIMEOUT = "timeout"
    CALLER = "caller"


class CancellationToken:
    """Caller-side handle used to stop an in-flight call."""

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: Any = None
        self._listeners: list[Listener] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> Any:
        return self._reason

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def cancel(self, reason: Any = None) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = reason if reason is not None else RequestAbortedError()
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(self._reason)

    def add_listener(self, listener: Listener) -> None:
        if self._cancelled:
            return
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass


class ComposedSignal:
    def __init__(self, loop: asyncio.AbstractEventLoop):
        self._fired: asyncio.Future[Any] = loop.create_future()
        self._token: CancellationToken | None = None
        self._listener: Listener | None = None
        self.timer: asyncio.TimerHandle | None = None
        self.kind = CancelKind.NONE
        self.reason: Any = None
        self.disposed = False

    @property
    def cancelled(self) -> bool:
        return self.kind is not CancelKind.NONE

    @property
    def fired(self) -> asyncio.Future[Any]:
        """Future resolved with the winning reason once the signal fires."""
        return self._fired

    async def wait(self) -> Any:
        return await self._fired

    def _fire(self, kind: CancelKind, reason: Any) -> None:
        if self.cancelled or self.disposed:
            return
        self.kind = kind
        self.reason = reason
        if not self._fired.done():
            self._fired.set_result(reason)

    def _on_timeout(self, timeout_s: float) -> None:
        self.timer = None
        self._fire(CancelKind.TIMEOUT, RequestTimeoutError(timeout_s))

    def _attach(self, token: CancellationToken) -> None:
        def on_cancel(reason: Any) -> None:
            self._fire(CancelKind.CALLER, reason)

        self._token = token
        self._listener = on_cancel
        token.add_listener(on_cancel)

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None
        if self._token is not None and self._listener is not None:
            self._token.remove_listener(self._listener)
        self._token = None
        self._listener = None
        if not self._fired.done():
            self._fired.cancel()


def has_timeout(timeout_s: float) -> bool:
    return math.isfinite(timeout_s) and timeout_s > 0


def compose_signal(
        cancel: CancellationToken | None,
        timeout_s: float,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
) -> ComposedSignal:
    """Race the timeout against ``cancel``. Must run inside an event loop."""
    loop = loop or asyncio.get_running_loop()
    signal = ComposedSignal(loop)

    if cancel is not None and cancel.cancelled:
        signal._fire(CancelKind.CALLER, cancel.reason)
        return signal

    if has_timeout(timeout_s):
        signal.timer = loop.call_later(timeout_s, signal._on_timeout, timeout_s)
    if cancel is not None:
        signal._attach(cancel)
    return signal
