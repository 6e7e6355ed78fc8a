from .client import ProtoPediaClient, create_client
from .config_types import ClientConfig, RequestOptions
from .env import create_client_from_env
from .errors import (
    ApiError,
    ApiErrorRequest,
    CancellationError,
    ProtoPediaClientError,
    RequestAbortedError,
    RequestTimeoutError,
)
from .params import ListPrototypesParams
from .signals import CancellationToken
from .transport import HttpxTransport, RequestDescriptor
from .types import ListPrototypesResponse, PrototypeRecord

__all__ = [
    "ProtoPediaClient",
    "create_client",
    "create_client_from_env",
    "ClientConfig",
    "RequestOptions",
    "ApiError",
    "ApiErrorRequest",
    "CancellationError",
    "ProtoPediaClientError",
    "RequestAbortedError",
    "RequestTimeoutError",
    "ListPrototypesParams",
    "CancellationToken",
    "HttpxTransport",
    "RequestDescriptor",
    "ListPrototypesResponse",
    "PrototypeRecord",
]
