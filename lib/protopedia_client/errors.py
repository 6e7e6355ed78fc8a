from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping


class ProtoPediaClientError(Exception):
    """Base client error."""


@dataclass(frozen=True)
class ApiErrorRequest:
    method: str
    url: str


class ApiError(ProtoPediaClientError):
    """Non-2xx response, or a 2xx response whose body could not be decoded."""

    def __init__(
            self,
            message: str,
            *,
            req: ApiErrorRequest,
            status: int,
            status_text: str = "",
            body: Any = None,
            headers: Mapping[str, str] | None = None,
            cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.req = ApiErrorRequest(method=req.method, url=req.url)
        self.status = status
        self.status_text = status_text
        self.body = body
        # snapshot: never share the caller's or the response's header object
        self.headers: dict[str, str] = {str(k): str(v) for k, v in (headers or {}).items()}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": type(self).__name__,
            "message": self.message,
            "req": asdict(self.req),
            "status": self.status,
            "statusText": self.status_text,
            "body": self.body,
            "headers": dict(self.headers),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r}, url={self.req.url!r})"


class CancellationError(ProtoPediaClientError):
    """A call was stopped before a response arrived."""


class RequestAbortedError(CancellationError):
    """Raised for caller-side cancellation when the caller supplied no exception of its own."""

    def __init__(self, message: str = "This operation was aborted", *, reason: Any = None):
        super().__init__(message)
        self.reason = reason


class RequestTimeoutError(CancellationError):
    def __init__(self, timeout_s: float):
        super().__init__(f"Request timed out after {_as_ms(timeout_s)} ms")
        self.timeout_s = timeout_s


def _as_ms(timeout_s: float) -> int | float:
    ms = timeout_s * 1000
    return int(ms) if float(ms).is_integer() else ms
