"""Remote schema loading over HTTP.

Fetches schema payloads with httpx, classifies every failure into a
SchemaLoadError kind, and tracks the latest request so that responses to
superseded requests are discarded by request id rather than relying on
cancellation alone.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from schemaform.config import EnvVar, get_environment, get_schema_base_url, is_production
from schemaform.core import SchemaFormError
from schemaform.schema import SchemaEnvelope
from schemaform.validation import validate_schema_payload

logger = logging.getLogger(__name__)

_JSON_CONTENT_TYPE = re.compile(r"json", re.IGNORECASE)


class LoadErrorKind(str, Enum):
    """Classification of schema load failures."""

    INVALID_URL = "invalid-url"
    HTTP = "http"
    NETWORK = "network"
    ABORTED = "aborted"
    INVALID_JSON = "invalid-json"
    VALIDATION = "validation"


class SchemaLoadError(SchemaFormError):
    """Error while loading a remote schema.

    Attributes:
        kind: Failure classification.
        message: Headline message.
        details: Diagnostic detail (status line, validation issues, ...).
    """

    def __init__(self, kind: LoadErrorKind, message: str, details: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details


def is_supported_schema_url(url: str) -> bool:
    """Accept "/"-relative paths and http(s) URLs, never "//" protocol-relative ones.

    Example:
        >>> is_supported_schema_url("/schemas/a.json"), is_supported_schema_url("//evil")
        (True, False)
    """
    if url.startswith("//"):
        return False
    return url.startswith(("/", "https://", "http://"))


def resolve_schema_url(url: str, base_url: str | None = None) -> str:
    """Join a "/"-relative URL onto the schema base URL."""
    if url.startswith("/") and not url.startswith("//"):
        return get_schema_base_url(base_url) + url
    return url


async def fetch_json(client: httpx.AsyncClient, url: str) -> Any:
    """GET a URL and decode its JSON body.

    Raises:
        SchemaLoadError: kind NETWORK, HTTP or INVALID_JSON.
    """
    try:
        response = await client.get(url, headers={"Accept": "application/json"})
    except httpx.TimeoutException as e:
        details = None if is_production() else str(e)
        raise SchemaLoadError(
            LoadErrorKind.NETWORK, "Schema request timed out.", details
        ) from e
    except httpx.RequestError as e:
        details = None if is_production() else str(e) or e.__class__.__name__
        raise SchemaLoadError(LoadErrorKind.NETWORK, "Failed to fetch schema.", details) from e

    content_type = response.headers.get("content-type", "")
    if not response.is_success:
        raise SchemaLoadError(
            LoadErrorKind.HTTP,
            f"Schema request failed with status {response.status_code}.",
            f"status={response.status_code} statusText={response.reason_phrase} "
            f"content-type={content_type or '(missing)'}",
        )

    if not _JSON_CONTENT_TYPE.search(content_type):
        raise SchemaLoadError(
            LoadErrorKind.INVALID_JSON,
            "Schema response did not have a JSON content-type.",
            f"content-type={content_type or '(missing)'}",
        )

    try:
        return response.json()
    except ValueError as e:
        raise SchemaLoadError(
            LoadErrorKind.INVALID_JSON, "Schema response was not valid JSON."
        ) from e


async def load_schema(
    client: httpx.AsyncClient, url: str, base_url: str | None = None
) -> SchemaEnvelope:
    """Fetch and validate a schema payload.

    Args:
        client: HTTP client to issue the request with.
        url: "/"-relative path or http(s) URL.
        base_url: Base for relative paths; defaults to SCHEMAFORM_SCHEMA_BASE_URL.

    Returns:
        The validated SchemaEnvelope. The version gate is left to
        `prepare_form`.

    Raises:
        SchemaLoadError: On any failure, classified by kind.
    """
    url = url.strip()
    if not is_supported_schema_url(url):
        raise SchemaLoadError(
            LoadErrorKind.INVALID_URL,
            "Schema URL must be a relative path (starting with /) or an http(s) URL.",
            f"Received: {url}",
        )

    payload = await fetch_json(client, resolve_schema_url(url, base_url))
    result = validate_schema_payload(payload)
    if not result.is_valid:
        raise SchemaLoadError(
            LoadErrorKind.VALIDATION,
            "Schema payload did not match the expected shape.",
            "\n".join(issue.format() for issue in result.issues),
        )
    return result.envelope


# =============================================================================
# Stateful loader
# =============================================================================


class LoadStatus(str, Enum):
    """Lifecycle of a schema load."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class LoadState:
    """Current state of a SchemaLoader."""

    status: LoadStatus = LoadStatus.IDLE
    url: str | None = None
    kind: LoadErrorKind | None = None
    message: str | None = None
    details: str | None = None
    data: SchemaEnvelope | None = None

    @property
    def title(self) -> str | None:
        """Headline for an error panel."""
        if self.status != LoadStatus.ERROR:
            return None
        if self.kind == LoadErrorKind.INVALID_URL:
            return "Unsupported schema URL"
        return "Schema load failed"

    @property
    def visible_details(self) -> str | None:
        """Details safe to display; hidden in production."""
        if is_production():
            return None
        return self.details


class SchemaLoader:
    """Loads schemas and keeps only the latest request's outcome.

    Every `load` call takes a new request id. When a response arrives for
    an id that is no longer current, it is discarded and the caller gets
    an ABORTED state while `state` keeps the newer outcome.

    Example:
        >>> async with SchemaLoader() as loader:
        ...     state = await loader.load("/schemas/profile.json")
        ...     state.status == "success"
        True
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=get_environment(EnvVar.SCHEMAFORM_LOAD_TIMEOUT, override=timeout)
        )
        self.base_url = get_schema_base_url(base_url)
        self.state = LoadState()
        self._request_id = 0
        self._task: asyncio.Task[LoadState] | None = None

    async def __aenter__(self) -> "SchemaLoader":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Cancel any in-flight task and close an owned client."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if self._owns_client:
            await self._client.aclose()

    def _is_current(self, request_id: int) -> bool:
        return request_id == self._request_id

    async def load(self, url: str) -> LoadState:
        """Load a schema and record the outcome if still current.

        A blank URL resets to IDLE.
        """
        url = url.strip()
        self._request_id += 1
        request_id = self._request_id

        if not url:
            self.state = LoadState()
            return self.state

        self.state = LoadState(status=LoadStatus.LOADING, url=url)
        try:
            envelope = await load_schema(self._client, url, self.base_url)
            outcome = LoadState(status=LoadStatus.SUCCESS, url=url, data=envelope)
        except SchemaLoadError as e:
            outcome = LoadState(
                status=LoadStatus.ERROR,
                url=url,
                kind=e.kind,
                message=e.message,
                details=e.details,
            )

        if not self._is_current(request_id):
            logger.debug("Discarding stale schema response for %s", url)
            return LoadState(
                status=LoadStatus.ERROR,
                url=url,
                kind=LoadErrorKind.ABORTED,
                message="Schema request was superseded by a newer request.",
            )

        if outcome.status == LoadStatus.ERROR and not is_production():
            logger.error("Failed to load schema from %s: %s", url, outcome.message)
        self.state = outcome
        return outcome

    def start(self, url: str) -> "asyncio.Task[LoadState]":
        """Schedule a load, cancelling the previous in-flight one."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.get_running_loop().create_task(self.load(url))
        return self._task


__all__ = [
    "LoadErrorKind",
    "LoadState",
    "LoadStatus",
    "SchemaLoadError",
    "SchemaLoader",
    "fetch_json",
    "is_supported_schema_url",
    "load_schema",
    "resolve_schema_url",
]
