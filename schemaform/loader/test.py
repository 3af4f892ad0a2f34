"""Tests for remote schema loading."""

import asyncio

import httpx
import pytest

from schemaform.form import PreparedForm, prepare_form

from .lib import (
    LoadErrorKind,
    LoadState,
    LoadStatus,
    SchemaLoadError,
    SchemaLoader,
    fetch_json,
    is_supported_schema_url,
    load_schema,
    resolve_schema_url,
)

BASE_URL = "http://schemas.test"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _json_handler(payload, status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return handler


class TestUrls:
    """Tests for URL checks."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("/schemas/a.json", True),
            ("https://example.com/a.json", True),
            ("http://example.com/a.json", True),
            ("//example.com/a.json", False),
            ("ftp://example.com/a.json", False),
            ("schemas/a.json", False),
            ("javascript:alert(1)", False),
        ],
    )
    def test_is_supported_schema_url(self, url, expected):
        assert is_supported_schema_url(url) is expected

    @pytest.mark.unit
    def test_resolve_relative(self):
        assert resolve_schema_url("/a.json", "http://host/") == "http://host/a.json"
        assert resolve_schema_url("https://x/a.json", "http://host") == "https://x/a.json"


class TestFetchJson:
    """Tests for fetch_json."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sends_accept_header(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["accept"] = request.headers["accept"]
            return httpx.Response(200, json={"ok": True})

        async with _client(handler) as client:
            assert await fetch_json(client, f"{BASE_URL}/a.json") == {"ok": True}
        assert seen["accept"] == "application/json"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_http_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="missing", headers={"content-type": "text/plain"})

        async with _client(handler) as client:
            with pytest.raises(SchemaLoadError) as excinfo:
                await fetch_json(client, f"{BASE_URL}/a.json")
        error = excinfo.value
        assert error.kind == LoadErrorKind.HTTP
        assert error.message == "Schema request failed with status 404."
        assert "status=404" in error.details
        assert "content-type=text/plain" in error.details

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_wrong_content_type(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>", headers={"content-type": "text/html"})

        async with _client(handler) as client:
            with pytest.raises(SchemaLoadError) as excinfo:
                await fetch_json(client, f"{BASE_URL}/a.json")
        assert excinfo.value.kind == LoadErrorKind.INVALID_JSON
        assert excinfo.value.details == "content-type=text/html"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_malformed_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, content=b"{not json", headers={"content-type": "application/json"}
            )

        async with _client(handler) as client:
            with pytest.raises(SchemaLoadError) as excinfo:
                await fetch_json(client, f"{BASE_URL}/a.json")
        assert excinfo.value.kind == LoadErrorKind.INVALID_JSON

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(SchemaLoadError) as excinfo:
                await fetch_json(client, f"{BASE_URL}/a.json")
        assert excinfo.value.kind == LoadErrorKind.NETWORK
        assert excinfo.value.message == "Failed to fetch schema."
        assert "connection refused" in excinfo.value.details

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_network_details_hidden_in_production(self, monkeypatch):
        monkeypatch.setenv("SCHEMAFORM_ENV", "production")

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(SchemaLoadError) as excinfo:
                await fetch_json(client, f"{BASE_URL}/a.json")
        assert excinfo.value.details is None


class TestLoadSchema:
    """Tests for load_schema."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_url(self):
        async with _client(_json_handler({})) as client:
            with pytest.raises(SchemaLoadError) as excinfo:
                await load_schema(client, "//evil.test/a.json", BASE_URL)
        assert excinfo.value.kind == LoadErrorKind.INVALID_URL
        assert excinfo.value.details == "Received: //evil.test/a.json"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_validation_error(self):
        async with _client(_json_handler({"uiSchema": {"fields": []}})) as client:
            with pytest.raises(SchemaLoadError) as excinfo:
                await load_schema(client, "/a.json", BASE_URL)
        assert excinfo.value.kind == LoadErrorKind.VALIDATION
        assert "uiSchema.title" in excinfo.value.details

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_success_feeds_prepare_form(self, age_payload):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json={"version": "1", **age_payload})

        async with _client(handler) as client:
            envelope = await load_schema(client, " /schemas/age.json ", BASE_URL)
        assert requested == [f"{BASE_URL}/schemas/age.json"]
        form = prepare_form(envelope)
        assert isinstance(form, PreparedForm)
        assert [f.id for f in form.fields] == ["age"]


class TestSchemaLoader:
    """Tests for SchemaLoader state tracking."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success_state(self, age_payload):
        async with _client(_json_handler(age_payload)) as client:
            loader = SchemaLoader(client=client, base_url=BASE_URL)
            state = await loader.load("/age.json")
        assert state.status == LoadStatus.SUCCESS
        assert state.url == "/age.json"
        assert state.data.ui_schema.title == "T"
        assert loader.state is state

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_blank_url_is_idle(self):
        async with _client(_json_handler({})) as client:
            loader = SchemaLoader(client=client, base_url=BASE_URL)
            state = await loader.load("   ")
        assert state == LoadState()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_error_state_titles(self):
        async with _client(_json_handler({}, status_code=500)) as client:
            loader = SchemaLoader(client=client, base_url=BASE_URL)
            http_state = await loader.load("/a.json")
            url_state = await loader.load("ftp://a.json")
        assert http_state.kind == LoadErrorKind.HTTP
        assert http_state.title == "Schema load failed"
        assert url_state.kind == LoadErrorKind.INVALID_URL
        assert url_state.title == "Unsupported schema URL"

    @pytest.mark.unit
    def test_visible_details_hidden_in_production(self, monkeypatch):
        state = LoadState(status=LoadStatus.ERROR, details="status=500")
        assert state.visible_details == "status=500"
        monkeypatch.setenv("SCHEMAFORM_ENV", "production")
        assert state.visible_details is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stale_response_discarded(self, age_payload):
        release = asyncio.Event()
        slow_payload = {"uiSchema": {**age_payload["uiSchema"], "title": "Slow"}}
        fast_payload = {"uiSchema": {**age_payload["uiSchema"], "title": "Fast"}}

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/slow.json":
                await release.wait()
                return httpx.Response(200, json=slow_payload)
            return httpx.Response(200, json=fast_payload)

        async with _client(handler) as client:
            loader = SchemaLoader(client=client, base_url=BASE_URL)
            first = asyncio.create_task(loader.load("/slow.json"))
            await asyncio.sleep(0)
            second = await loader.load("/fast.json")
            release.set()
            stale = await first

        assert second.status == LoadStatus.SUCCESS
        assert stale.kind == LoadErrorKind.ABORTED
        assert loader.state.url == "/fast.json"
        assert loader.state.data.ui_schema.title == "Fast"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_start_cancels_previous(self, age_payload):
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/slow.json":
                await release.wait()
            return httpx.Response(200, json=age_payload)

        async with _client(handler) as client:
            loader = SchemaLoader(client=client, base_url=BASE_URL)
            first = loader.start("/slow.json")
            await asyncio.sleep(0)
            second = loader.start("/fast.json")
            state = await second
            with pytest.raises(asyncio.CancelledError):
                await first

        assert first.cancelled()
        assert state.status == LoadStatus.SUCCESS
        assert loader.state.url == "/fast.json"
