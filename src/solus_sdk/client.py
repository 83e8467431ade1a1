"""Synchronous client for the SOLUS IO API."""

from __future__ import annotations

import enum
import json
import logging
import os
from typing import Any, Mapping, TypeVar, cast

import httpx
from pydantic import BaseModel

from ._version import __version__
from .auth import Authenticator, PasswordExchange, StaticToken, resolve_credentials
from .context import Context, ensure_context
from .exceptions import ErrorKind, SolusError, normalize_http_error
from .filters import (
    IconFilter,
    LocationFilter,
    OsImageFilter,
    PlanFilter,
    SSHKeyFilter,
    TaskFilter,
    VirtualServerFilter,
    filter_query,
)
from .models import (
    AuthLoginRequest,
    AuthLoginResponse,
    BootMode,
    Credentials,
    Icon,
    IPBlock,
    IPBlockCreateRequest,
    Location,
    LocationCreateRequest,
    OsImage,
    OsImageRequest,
    OsImageVersion,
    OsImageVersionRequest,
    Plan,
    PlanCreateRequest,
    PlanUpdateRequest,
    Project,
    ProjectCreateRequest,
    SSHKey,
    SSHKeyCreateRequest,
    Task,
    VirtualServer,
    VirtualServerCreateRequest,
    VirtualServerResizeRequest,
    VirtualServerStatus,
    VirtualServerUpdateRequest,
)
from .pagination import Page, PaginatedResponse, parse_page
from .request_options import RequestOptions, with_body, with_query
from .retry import RetryPolicy, retry, should_retry
from .security import sanitize_headers, sanitize_payload, same_origin, validate_base_url
from .waiter import DEFAULT_POLL_INTERVAL, wait_for

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

TASK_WITHOUT_ID_MESSAGE = "task doesn't have an id"


def _coerce_json_payload(payload: Any) -> Any:
    if payload is None:
        return None
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(payload, Mapping):
        return dict(payload)
    return payload


def _coerce_query_value(value: Any) -> str:
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _coerce_query_params(query: Mapping[str, Any] | None) -> dict[str, list[str]] | None:
    if not query:
        return None
    normalized: dict[str, list[str]] = {}
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple, set, frozenset)):
            normalized[key] = [_coerce_query_value(v) for v in value if v is not None]
            continue
        normalized[key] = [_coerce_query_value(value)]
    return normalized or None


def _normalize_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    if not headers:
        return {}
    clean: dict[str, str] = {}
    for key, value in headers.items():
        clean[str(key)] = str(value)
    return clean


def _decode_data(body: bytes, model: type[M], *, allow_empty: bool = False) -> M:
    """Decode a ``{"data": ...}`` envelope into ``model``.

    With ``allow_empty`` a missing or null ``data`` decodes to ``model()``.
    """
    try:
        payload = json.loads(body)
        if not isinstance(payload, Mapping):
            raise ValueError("response body is not an object")
        data = payload.get("data")
        if data is None and allow_empty:
            data = {}
        return model.model_validate(data)
    except ValueError as exc:
        raise SolusError(
            ErrorKind.INVALID_RESPONSE,
            f"failed to decode {body[:500]!r}: {exc}",
            body=body,
            cause=exc,
        ) from exc


def _decode_page(body: bytes, model: type[M]) -> Page:
    try:
        payload = json.loads(body)
        if not isinstance(payload, Mapping):
            raise ValueError("response body is not an object")
        return parse_page(payload, model)
    except ValueError as exc:
        raise SolusError(
            ErrorKind.INVALID_RESPONSE,
            f"failed to decode {body[:500]!r}: {exc}",
            body=body,
            cause=exc,
        ) from exc


class SolusClient:
    """Synchronous SOLUS IO client.

    Credentials are obtained once, in the constructor, and reused for the
    lifetime of the client. Every call blocks the calling thread for its whole
    duration, retry delays and poll intervals included, and accepts an
    optional :class:`Context` to cancel those waits.
    """

    default_timeout = 35.0
    default_retries = 5
    default_retry_after = 1.0
    default_max_attempts = 10

    def __init__(
        self,
        *,
        base_url: str | None = None,
        authenticator: Authenticator | None = None,
        timeout: float = default_timeout,
        retries: int = default_retries,
        retry_after: float = default_retry_after,
        max_attempts: int = default_max_attempts,
        headers: Mapping[str, str] | None = None,
        user_agent: str | None = None,
        allow_insecure: bool = False,
        allow_http: bool = False,
        httpx_client: httpx.Client | None = None,
        base_url_env_var: str = "SOLUS_API_URL",
        token_env_var: str = "SOLUS_API_TOKEN",
        email_env_var: str = "SOLUS_API_EMAIL",
        password_env_var: str = "SOLUS_API_PASSWORD",
    ) -> None:
        resolved_base_url = base_url or os.getenv(base_url_env_var)
        if not resolved_base_url:
            raise ValueError(f"base_url is required; pass it explicitly or set {base_url_env_var}")
        self.base_url = resolved_base_url.rstrip("/")
        validate_base_url(self.base_url, allow_http=allow_http)
        if timeout <= 0:
            raise ValueError("timeout must be greater than 0")
        self.timeout = float(timeout)
        self.retry_policy = RetryPolicy(retries=retries, retry_after=retry_after, max_attempts=max_attempts)
        authenticator = authenticator or self._authenticator_from_env(
            token_env_var=token_env_var,
            email_env_var=email_env_var,
            password_env_var=password_env_var,
        )

        self._default_headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": user_agent or f"solus-python-sdk/{__version__}",
        }
        if headers:
            self._default_headers.update(_normalize_headers(headers))

        self._httpx = httpx_client or httpx.Client(
            base_url=self.base_url + "/",
            timeout=self.timeout,
            verify=not allow_insecure,
            trust_env=False,
        )

        self.credentials: Credentials = resolve_credentials(authenticator, self._login)
        self._default_headers["Authorization"] = self.credentials.authorization

        logger.info(
            "SolusClient initialized",
            extra={
                "base_url": self.base_url,
                "timeout_seconds": self.timeout,
                "retries": self.retry_policy.retries,
                "retry_after": self.retry_policy.retry_after,
            },
        )

    @staticmethod
    def _authenticator_from_env(*, token_env_var: str, email_env_var: str, password_env_var: str) -> Authenticator:
        token = os.getenv(token_env_var)
        if token:
            return StaticToken(token)
        email = os.getenv(email_env_var)
        password = os.getenv(password_env_var)
        if email and password:
            return PasswordExchange(email=email, password=password)
        raise ValueError(
            f"authenticator is required; pass it explicitly or set {token_env_var} "
            f"(or {email_env_var} and {password_env_var})"
        )

    def __enter__(self) -> "SolusClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._httpx.close()

    def _url(self, path: str) -> str:
        if "\x00" in path:
            raise ValueError("Invalid path characters")
        if "://" in path:
            if not same_origin(path, self.base_url):
                raise SolusError(
                    ErrorKind.INVALID_RESPONSE,
                    f"refusing to follow link outside of {self.base_url}: {path}",
                )
            return path
        return path.lstrip("/")

    def _headers(self, request_options: RequestOptions) -> dict[str, str]:
        merged = dict(self._default_headers)
        if request_options.headers:
            merged.update(_normalize_headers(request_options.headers))
        return merged

    def _build_request_timeout(self, request_options: RequestOptions) -> float:
        timeout = request_options.timeout if request_options.timeout is not None else self.timeout
        if timeout <= 0:
            raise ValueError("timeout must be greater than 0")
        return float(timeout)

    def _read(self, request: httpx.Request) -> tuple[bytes, int]:
        response = self._httpx.send(request, stream=True)
        chunks: list[bytes] = []
        try:
            for chunk in response.iter_bytes():
                chunks.append(chunk)
        except (httpx.HTTPError, OSError):
            # iter_bytes closes the response after the last chunk and sets
            # is_closed first, so a closed response means only the close failed.
            if not response.is_closed:
                raise
            logger.error(
                "Failed to close response body for %s %s",
                request.method,
                request.url,
                exc_info=True,
            )
        finally:
            if not response.is_closed:
                response.close()
        return b"".join(chunks), response.status_code

    def request(
        self,
        method: str,
        path: str,
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> tuple[bytes, int]:
        """Send one API request through the retry policy.

        Returns the raw response body and status code; deciding whether the
        status is a success is up to the caller. Transport failures and
        ``0``/5xx responses are retried with a fixed delay; a failure that
        outlives the attempt budget raises ``RETRIES_EXHAUSTED``.
        """
        ctx = ensure_context(ctx)
        request_options = options or RequestOptions()
        method = method.upper()
        url = self._url(path)
        headers = self._headers(request_options)
        params = _coerce_query_params(request_options.query)
        payload = _coerce_json_payload(request_options.json)
        content = json.dumps(payload).encode() if payload is not None else None
        log_body = json.dumps(sanitize_payload(payload)) if payload is not None else ""
        timeout = self._build_request_timeout(request_options)

        def attempt(number: int) -> tuple[bool, SolusError | None, tuple[bytes, int] | None]:
            ctx.raise_if_done()
            request = self._httpx.build_request(
                method,
                url,
                headers=headers,
                params=params,
                content=content,
                timeout=timeout,
            )
            logger.debug(
                "[%s] %s with body %r",
                method,
                request.url,
                log_body,
                extra={"attempt": number, "headers": sanitize_headers(headers)},
            )
            try:
                body, status_code = self._read(request)
            except httpx.TransportError as exc:
                error = SolusError(
                    ErrorKind.TRANSPORT,
                    f"HTTP {method} {path} failed: {exc}",
                    method=method,
                    path=path,
                    cause=exc,
                )
                return should_retry(None, exc), error, None

            if should_retry(status_code, None):
                return True, normalize_http_error(body, method, path, status_code), None
            return False, None, (body, status_code)

        return cast(tuple[bytes, int], retry(attempt, self.retry_policy, ctx))

    def _expect(
        self,
        method: str,
        path: str,
        expected_status: int,
        *,
        ctx: Context | None,
        options: RequestOptions | None,
    ) -> bytes:
        body, status_code = self.request(method, path, ctx=ctx, options=options)
        if status_code != expected_status:
            raise normalize_http_error(body, method.upper(), path, status_code)
        return body

    def _create(self, path: str, data: Any, model: type[M], *, ctx: Context | None, options: RequestOptions | None) -> M:
        body = self._expect("POST", path, 201, ctx=ctx, options=with_body(options, data))
        return _decode_data(body, model)

    def _get(self, path: str, model: type[M], *, ctx: Context | None, options: RequestOptions | None) -> M:
        body = self._expect("GET", path, 200, ctx=ctx, options=options)
        return _decode_data(body, model)

    def _update(self, path: str, data: Any, model: type[M], *, ctx: Context | None, options: RequestOptions | None) -> M:
        body = self._expect("PUT", path, 200, ctx=ctx, options=with_body(options, data))
        return _decode_data(body, model)

    def _patch(self, path: str, data: Any, model: type[M], *, ctx: Context | None, options: RequestOptions | None) -> M:
        body = self._expect("PATCH", path, 200, ctx=ctx, options=with_body(options, data))
        return _decode_data(body, model)

    def _sync_delete(self, path: str, *, ctx: Context | None, options: RequestOptions | None) -> None:
        self._expect("DELETE", path, 204, ctx=ctx, options=options)

    def _task_request(self, method: str, path: str, *, ctx: Context | None, options: RequestOptions | None) -> Task:
        body = self._expect(method, path, 200, ctx=ctx, options=options)
        task = _decode_data(body, Task, allow_empty=True)
        if task.id == 0:
            raise SolusError(ErrorKind.INVALID_RESPONSE, TASK_WITHOUT_ID_MESSAGE, body=body)
        return task

    def _async_delete(self, path: str, *, ctx: Context | None, options: RequestOptions | None) -> Task:
        return self._task_request("DELETE", path, ctx=ctx, options=options)

    def _async_post(self, path: str, data: Any = None, *, ctx: Context | None, options: RequestOptions | None) -> Task:
        return self._task_request("POST", path, ctx=ctx, options=with_body(options, data))

    def _list(
        self,
        path: str,
        model: type[M],
        *,
        query: Mapping[str, Any] | None = None,
        ctx: Context | None,
        options: RequestOptions | None,
    ) -> PaginatedResponse[M]:
        def fetch_page(link: str, page_ctx: Context) -> Page:
            page_body = self._expect("GET", link, 200, ctx=page_ctx, options=None)
            return _decode_page(page_body, model)

        body = self._expect("GET", path, 200, ctx=ctx, options=with_query(options, query))
        links, meta, items = _decode_page(body, model)
        return PaginatedResponse(links=links, meta=meta, data=items, fetch_page=fetch_page)

    def _login(self, data: AuthLoginRequest) -> Credentials:
        options = RequestOptions(json=data)
        body, status_code = self.request("POST", "auth/login", options=options)
        if status_code != 200:
            raise normalize_http_error(body, "POST", "auth/login", status_code)
        return _decode_data(body, AuthLoginResponse).credentials

    # Tasks

    def list_tasks(
        self,
        filter: TaskFilter | None = None,
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse[Task]:
        return self._list("tasks", Task, query=filter_query(filter), ctx=ctx, options=options)

    def get_task(self, task_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> Task:
        return self._get(f"tasks/{task_id}", Task, ctx=ctx, options=options)

    def wait_for_task(
        self,
        task: Task | int,
        *,
        ctx: Context | None = None,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> Task:
        """Block until the task reaches a terminal status.

        Returns the finished task when it ends ``done``. Any other terminal
        status raises ``TASK_FAILED`` carrying the task output; errors while
        fetching the task propagate as they are.
        """
        task_id = task.id if isinstance(task, Task) else task
        finished: list[Task] = []

        def is_done() -> bool:
            current = self.get_task(task_id, ctx=ctx)
            logger.debug(
                "Polled task",
                extra={"task_id": task_id, "status": current.status_value, "progress": current.progress},
            )
            if not current.is_finished:
                return False
            if not current.is_successful:
                raise SolusError(
                    ErrorKind.TASK_FAILED,
                    current.output or f"task {task_id} finished with status {current.status_value}",
                    task=current,
                )
            finished.append(current)
            return True

        wait_for(ctx, interval, is_done)
        return finished[-1]

    # Locations

    def create_location(
        self,
        payload: LocationCreateRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> Location:
        return self._create("locations", payload, Location, ctx=ctx, options=options)

    def list_locations(
        self,
        filter: LocationFilter | None = None,
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse[Location]:
        return self._list("locations", Location, query=filter_query(filter), ctx=ctx, options=options)

    def get_location(self, location_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> Location:
        return self._get(f"locations/{location_id}", Location, ctx=ctx, options=options)

    def update_location(
        self,
        location_id: int,
        payload: LocationCreateRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> Location:
        return self._update(f"locations/{location_id}", payload, Location, ctx=ctx, options=options)

    def delete_location(self, location_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> None:
        self._sync_delete(f"locations/{location_id}", ctx=ctx, options=options)

    # Projects

    def create_project(
        self,
        payload: ProjectCreateRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> Project:
        return self._create("projects", payload, Project, ctx=ctx, options=options)

    def list_projects(self, *, ctx: Context | None = None, options: RequestOptions | None = None) -> PaginatedResponse[Project]:
        return self._list("projects", Project, ctx=ctx, options=options)

    def get_project(self, project_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> Project:
        return self._get(f"projects/{project_id}", Project, ctx=ctx, options=options)

    def update_project(
        self,
        project_id: int,
        payload: ProjectCreateRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> Project:
        return self._update(f"projects/{project_id}", payload, Project, ctx=ctx, options=options)

    def delete_project(self, project_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> None:
        self._sync_delete(f"projects/{project_id}", ctx=ctx, options=options)

    def list_project_servers(
        self,
        project_id: int,
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse[VirtualServer]:
        return self._list(f"projects/{project_id}/servers", VirtualServer, ctx=ctx, options=options)

    # SSH keys

    def create_ssh_key(
        self,
        payload: SSHKeyCreateRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> SSHKey:
        return self._create("ssh_keys", payload, SSHKey, ctx=ctx, options=options)

    def list_ssh_keys(
        self,
        filter: SSHKeyFilter | None = None,
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse[SSHKey]:
        return self._list("ssh_keys", SSHKey, query=filter_query(filter), ctx=ctx, options=options)

    def get_ssh_key(self, ssh_key_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> SSHKey:
        return self._get(f"ssh_keys/{ssh_key_id}", SSHKey, ctx=ctx, options=options)

    def delete_ssh_key(self, ssh_key_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> None:
        self._sync_delete(f"ssh_keys/{ssh_key_id}", ctx=ctx, options=options)

    # Plans

    def create_plan(
        self,
        payload: PlanCreateRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> Plan:
        return self._create("plans", payload, Plan, ctx=ctx, options=options)

    def list_plans(
        self,
        filter: PlanFilter | None = None,
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse[Plan]:
        return self._list("plans", Plan, query=filter_query(filter), ctx=ctx, options=options)

    def get_plan(self, plan_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> Plan:
        return self._get(f"plans/{plan_id}", Plan, ctx=ctx, options=options)

    def update_plan(
        self,
        plan_id: int,
        payload: PlanUpdateRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> Plan:
        return self._update(f"plans/{plan_id}", payload, Plan, ctx=ctx, options=options)

    def delete_plan(self, plan_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> None:
        self._sync_delete(f"plans/{plan_id}", ctx=ctx, options=options)

    # OS images

    def create_os_image(
        self,
        payload: OsImageRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> OsImage:
        return self._create("os_images", payload, OsImage, ctx=ctx, options=options)

    def list_os_images(
        self,
        filter: OsImageFilter | None = None,
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse[OsImage]:
        return self._list("os_images", OsImage, query=filter_query(filter), ctx=ctx, options=options)

    def get_os_image(self, os_image_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> OsImage:
        return self._get(f"os_images/{os_image_id}", OsImage, ctx=ctx, options=options)

    def update_os_image(
        self,
        os_image_id: int,
        payload: OsImageRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> OsImage:
        return self._update(f"os_images/{os_image_id}", payload, OsImage, ctx=ctx, options=options)

    def delete_os_image(self, os_image_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> None:
        self._sync_delete(f"os_images/{os_image_id}", ctx=ctx, options=options)

    # OS image versions

    def create_os_image_version(
        self,
        os_image_id: int,
        payload: OsImageVersionRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> OsImageVersion:
        return self._create(f"os_images/{os_image_id}/versions", payload, OsImageVersion, ctx=ctx, options=options)

    def list_os_image_versions(
        self,
        os_image_id: int,
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse[OsImageVersion]:
        return self._list(f"os_images/{os_image_id}/versions", OsImageVersion, ctx=ctx, options=options)

    def get_os_image_version(
        self,
        version_id: int,
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> OsImageVersion:
        return self._get(f"os_image_versions/{version_id}", OsImageVersion, ctx=ctx, options=options)

    def update_os_image_version(
        self,
        version_id: int,
        payload: OsImageVersionRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> OsImageVersion:
        return self._update(f"os_image_versions/{version_id}", payload, OsImageVersion, ctx=ctx, options=options)

    def delete_os_image_version(self, version_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> None:
        self._sync_delete(f"os_image_versions/{version_id}", ctx=ctx, options=options)

    # IP blocks

    def create_ip_block(
        self,
        payload: IPBlockCreateRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> IPBlock:
        return self._create("ip_blocks", payload, IPBlock, ctx=ctx, options=options)

    def list_ip_blocks(self, *, ctx: Context | None = None, options: RequestOptions | None = None) -> PaginatedResponse[IPBlock]:
        return self._list("ip_blocks", IPBlock, ctx=ctx, options=options)

    def get_ip_block(self, ip_block_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> IPBlock:
        return self._get(f"ip_blocks/{ip_block_id}", IPBlock, ctx=ctx, options=options)

    def update_ip_block(
        self,
        ip_block_id: int,
        payload: IPBlockCreateRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> IPBlock:
        return self._update(f"ip_blocks/{ip_block_id}", payload, IPBlock, ctx=ctx, options=options)

    def delete_ip_block(self, ip_block_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> None:
        self._sync_delete(f"ip_blocks/{ip_block_id}", ctx=ctx, options=options)

    # Icons

    def list_icons(
        self,
        filter: IconFilter | None = None,
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse[Icon]:
        return self._list("icons", Icon, query=filter_query(filter), ctx=ctx, options=options)

    def get_icon(self, icon_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> Icon:
        return self._get(f"icons/{icon_id}", Icon, ctx=ctx, options=options)

    # Virtual servers

    def create_virtual_server(
        self,
        payload: VirtualServerCreateRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> VirtualServer:
        if isinstance(payload, Mapping) and not payload.get("boot_mode"):
            payload = {**payload, "boot_mode": BootMode.DISK.value}
        return self._create("servers", payload, VirtualServer, ctx=ctx, options=options)

    def list_virtual_servers(
        self,
        filter: VirtualServerFilter | None = None,
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> PaginatedResponse[VirtualServer]:
        return self._list("servers", VirtualServer, query=filter_query(filter), ctx=ctx, options=options)

    def get_virtual_server(self, server_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> VirtualServer:
        return self._get(f"servers/{server_id}", VirtualServer, ctx=ctx, options=options)

    def patch_virtual_server(
        self,
        server_id: int,
        payload: VirtualServerUpdateRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> VirtualServer:
        return self._patch(f"servers/{server_id}", payload, VirtualServer, ctx=ctx, options=options)

    def start_virtual_server(self, server_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> Task:
        return self._async_post(f"servers/{server_id}/start", ctx=ctx, options=options)

    def stop_virtual_server(self, server_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> Task:
        return self._async_post(f"servers/{server_id}/stop", ctx=ctx, options=options)

    def restart_virtual_server(self, server_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> Task:
        return self._async_post(f"servers/{server_id}/restart", ctx=ctx, options=options)

    def resize_virtual_server(
        self,
        server_id: int,
        payload: VirtualServerResizeRequest | Mapping[str, Any],
        *,
        ctx: Context | None = None,
        options: RequestOptions | None = None,
    ) -> Task:
        return self._async_post(f"servers/{server_id}/resize", payload, ctx=ctx, options=options)

    def delete_virtual_server(self, server_id: int, *, ctx: Context | None = None, options: RequestOptions | None = None) -> Task:
        return self._async_delete(f"servers/{server_id}", ctx=ctx, options=options)

    def delete_virtual_server_and_wait(
        self,
        server_id: int,
        *,
        ctx: Context | None = None,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> Task:
        task = self.delete_virtual_server(server_id, ctx=ctx)
        return self.wait_for_task(task, ctx=ctx, interval=interval)

    def wait_for_virtual_server(
        self,
        server_id: int,
        *,
        ctx: Context | None = None,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> VirtualServer:
        """Block until the server stops processing and return it.

        A server that settles in any status other than ``started`` raises
        ``TASK_FAILED``.
        """
        settled: list[VirtualServer] = []

        def is_ready() -> bool:
            server = self.get_virtual_server(server_id, ctx=ctx)
            if server.is_processing:
                return False
            status = server.status.value if isinstance(server.status, enum.Enum) else server.status
            if status != VirtualServerStatus.STARTED.value:
                raise SolusError(
                    ErrorKind.TASK_FAILED,
                    f"virtual server didn't start, actual status {status!r}",
                )
            settled.append(server)
            return True

        wait_for(ctx, interval, is_ready)
        return settled[-1]
