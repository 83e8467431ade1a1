"""Python SDK for the SOLUS IO cloud management API."""

from ._version import __version__
from .auth import Authenticator, PasswordExchange, StaticToken
from .client import SolusClient
from .context import Context
from .exceptions import ErrorKind, SolusError, format_field_errors, is_not_found, normalize_http_error
from .filters import (
    IconFilter,
    LocationFilter,
    OsImageFilter,
    PlanFilter,
    SSHKeyFilter,
    TaskFilter,
    VirtualServerFilter,
)
from .models import Credentials, Task, TaskAction, TaskStatus
from .pagination import PaginatedResponse
from .request_options import RequestOptions
from .retry import RetryPolicy
from .waiter import wait_for

__all__ = [
    "Authenticator",
    "Context",
    "Credentials",
    "ErrorKind",
    "IconFilter",
    "LocationFilter",
    "OsImageFilter",
    "PaginatedResponse",
    "PasswordExchange",
    "PlanFilter",
    "RequestOptions",
    "RetryPolicy",
    "SSHKeyFilter",
    "SolusClient",
    "SolusError",
    "StaticToken",
    "Task",
    "TaskAction",
    "TaskFilter",
    "TaskStatus",
    "VirtualServerFilter",
    "__version__",
    "format_field_errors",
    "is_not_found",
    "normalize_http_error",
    "wait_for",
]
