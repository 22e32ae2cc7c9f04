"""Shared GitLab API client: request construction, transport and error normalization."""
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Tuple, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from gitlab_deployments.config import normalize_base_url, settings
from gitlab_deployments.core.errors import DecodeError, HTTPStatusError, InvalidIdentifier, TransportError

logger = logging.getLogger(__name__)

RequestOptionFunc = Callable[[httpx.Request], None]

SENSITIVE_HEADERS = {"private-token", "authorization", "job-token"}

_TOKEN_HEADERS = {
    "private": "PRIVATE-TOKEN",
    "job": "JOB-TOKEN",
}


class ListOptions(BaseModel):
    """Pagination options shared by every list endpoint."""

    page: Optional[int] = Field(None, ge=1)
    per_page: Optional[int] = Field(None, ge=1, le=100)

    model_config = ConfigDict(extra="forbid")


@dataclass
class GitLabResponse:
    """Transport metadata of a GitLab API response."""

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers, repr=False)
    total_items: int = 0
    total_pages: int = 0
    items_per_page: int = 0
    current_page: int = 0
    next_page: int = 0
    previous_page: int = 0

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "GitLabResponse":
        headers = response.headers
        return cls(
            status_code=response.status_code,
            headers=headers,
            total_items=_int_header(headers, "X-Total"),
            total_pages=_int_header(headers, "X-Total-Pages"),
            items_per_page=_int_header(headers, "X-Per-Page"),
            current_page=_int_header(headers, "X-Page"),
            next_page=_int_header(headers, "X-Next-Page"),
            previous_page=_int_header(headers, "X-Prev-Page"),
        )


def _int_header(headers: httpx.Headers, name: str) -> int:
    value = headers.get(name)
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0


class APIClient(Protocol):
    """Anything that can build a GitLab request and decode its response."""

    def new_request(
        self,
        method: str,
        path: str,
        opt: Any = None,
        options: Sequence[RequestOptionFunc] = (),
    ) -> httpx.Request:
        ...

    async def do(self, request: httpx.Request, model: Any = None) -> Tuple[Any, GitLabResponse]:
        ...


def parse_id(pid: Union[int, str]) -> str:
    """Turn a numeric project ID or a ``namespace/project`` path into a string ID."""
    # bool is an int subclass but never a valid ID
    if isinstance(pid, int) and not isinstance(pid, bool):
        return str(pid)
    if isinstance(pid, str) and pid.strip():
        return pid
    raise InvalidIdentifier(f"invalid ID type {pid!r}, the ID must be an int or a string")


def path_escape(value: str) -> str:
    """Percent-encode a value so it can be used as a single path segment."""
    # "." and ".." segments would be collapsed by URL normalization
    return quote(value, safe="").replace(".", "%2E")


def query_params(opt: Any) -> Dict[str, Any]:
    """Dump an options object to query parameters, leaving out unset fields."""
    if opt is None:
        return {}
    if isinstance(opt, BaseModel):
        data = opt.model_dump(mode="json", by_alias=True, exclude_none=True)
    else:
        data = {key: value for key, value in dict(opt).items() if value is not None}
    return {key: value for key, value in data.items() if value != ""}


def with_sudo(uid: Union[int, str]) -> RequestOptionFunc:
    """Run the request as another user (administrators only)."""
    sudo = parse_id(uid)

    def apply(request: httpx.Request) -> None:
        request.headers["Sudo"] = sudo

    return apply


def with_header(name: str, value: str) -> RequestOptionFunc:
    def apply(request: httpx.Request) -> None:
        request.headers[name] = value

    return apply


@lru_cache(maxsize=64)
def _type_adapter(model: Any) -> TypeAdapter:
    return TypeAdapter(model)


def _error_message(payload: Any) -> str:
    if isinstance(payload, dict):
        for key in ("message", "error"):
            if key in payload:
                return _flatten(payload[key])
    if isinstance(payload, str):
        return payload.strip()
    return ""


def _flatten(value: Any) -> str:
    if isinstance(value, dict):
        return "; ".join(f"{key}: {_flatten(item)}" for key, item in value.items())
    if isinstance(value, list):
        return ", ".join(_flatten(item) for item in value)
    return str(value)


class GitLabClient:
    """Thin async client for the GitLab REST API v4."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        token_type: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the HTTP client; explicit arguments win over settings."""
        self.base_url = normalize_base_url(base_url or settings.GITLAB_BASE_URL)
        self._token = token if token is not None else settings.GITLAB_TOKEN
        self._token_type = token_type or settings.GITLAB_TOKEN_TYPE
        if self._token_type not in ("private", "oauth", "job"):
            raise ValueError(f"Unknown token type: {self._token_type}")
        self._user_agent = user_agent or settings.GITLAB_USER_AGENT
        self.client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.GITLAB_TIMEOUT,
            transport=transport,
        )

    def _get_headers(self) -> Dict[str, str]:
        """Get standard GitLab API headers."""
        headers = {
            "Accept": "application/json",
            "User-Agent": self._user_agent,
        }
        if self._token:
            if self._token_type == "oauth":
                headers["Authorization"] = f"Bearer {self._token}"
            else:
                headers[_TOKEN_HEADERS[self._token_type]] = self._token
        return headers

    def new_request(
        self,
        method: str,
        path: str,
        opt: Any = None,
        options: Sequence[RequestOptionFunc] = (),
    ) -> httpx.Request:
        """
        Build a request against the API base URL.

        Args:
            method: HTTP method
            path: API path relative to the base URL, already escaped
            opt: Options object; sent as query string for GET/HEAD, JSON body otherwise
            options: Request option functions applied in order

        Returns:
            The unsent httpx.Request
        """
        method = method.upper()
        url = self.base_url + path.lstrip("/")
        params = query_params(opt)

        if method in ("GET", "HEAD"):
            request = self.client.build_request(method, url, params=params, headers=self._get_headers())
        else:
            request = self.client.build_request(method, url, json=params or None, headers=self._get_headers())

        for option in options:
            option(request)
        return request

    async def do(self, request: httpx.Request, model: Any = None) -> Tuple[Any, GitLabResponse]:
        """
        Send a request and decode the JSON response.

        Args:
            request: Request built by new_request
            model: Type to decode the body into (anything pydantic.TypeAdapter accepts);
                None returns the raw JSON

        Returns:
            Tuple of decoded body and response metadata

        Raises:
            TransportError: the request failed before a response arrived
            HTTPStatusError: the response status was not 2xx
            DecodeError: the body was not valid JSON or did not match ``model``
        """
        logger.info(f"📤 {request.method} {request.url.path}")
        safe_headers = {k: v for k, v in request.headers.items() if k.lower() not in SENSITIVE_HEADERS}
        logger.debug(f"🔍 Headers: {safe_headers}")

        try:
            response = await self.client.send(request)
        except httpx.RequestError as e:
            logger.error(f"❌ GitLab request failed: {e}")
            raise TransportError(f"{request.method} {request.url}: {e}") from e

        try:
            meta = GitLabResponse.from_httpx(response)
            logger.info(f"📥 {request.method} {request.url.path} - {response.status_code}")
            self._check_response(request, response, meta)

            if not response.content:
                return None, meta

            try:
                data = response.json()
            except ValueError as e:
                raise DecodeError(f"invalid JSON in response body: {e}", response=meta) from e

            if model is None:
                return data, meta

            try:
                decoded = _type_adapter(model).validate_python(data)
            except ValidationError as e:
                raise DecodeError(f"unexpected response shape: {e}", response=meta) from e
            return decoded, meta
        finally:
            await response.aclose()

    def _check_response(self, request: httpx.Request, response: httpx.Response, meta: GitLabResponse) -> None:
        if 200 <= response.status_code < 300:
            return

        try:
            payload = response.json()
        except ValueError:
            payload = response.text

        detail = _error_message(payload) or response.reason_phrase
        logger.warning(f"⚠️ GitLab API error {response.status_code} for {request.method} {request.url.path}: {detail}")
        raise HTTPStatusError(response.status_code, detail, payload=payload, response=meta)

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "GitLabClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
