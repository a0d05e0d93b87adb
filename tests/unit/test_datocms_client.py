"""
Tests del cliente de DatoCMS (GraphQL + CMA) usando httpx.MockTransport.
"""
import json

import httpx
import pytest

from esa_sync.domain.entities.target_post import AuthorKind, NewTargetPost, Seo, TargetPostUpdate
from esa_sync.infrastructure.external.datocms.datocms_client import (
    FALLBACK_AUTHOR_NAME,
    DatoCmsClient,
    DatoCmsCredentials,
)
from esa_sync.shared.exceptions.external import DatoCmsApiError


GRAPHQL_URL = "https://graphql.datocms.com/preview"
CMA_URL = "https://site-api.datocms.com"


class Recorder:
    """Transporte que responde con una cola fija y guarda los requests."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responses.pop(0)

    def json_body(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


def _client(recorder: Recorder) -> DatoCmsClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    creds = DatoCmsCredentials(token="dato", item_type_post="model-1", build_trigger_id="bt-9")
    return DatoCmsClient(creds, client=http)


def _data(data: dict) -> httpx.Response:
    return httpx.Response(200, json={"data": data})


class TestGraphqlReads:

    @pytest.mark.asyncio
    async def test_post_lookup_sends_source_url_as_variable(self):
        recorder = Recorder(_data({"post": {"id": "123"}}))

        post_id = await _client(recorder).get_post_id_by_source_url("https://docs.esa.io/posts/1")

        assert post_id == "123"
        assert str(recorder.requests[0].url) == GRAPHQL_URL
        assert recorder.requests[0].headers["Authorization"] == "Bearer dato"
        assert recorder.json_body()["variables"] == {"sourceUrl": "https://docs.esa.io/posts/1"}

    @pytest.mark.asyncio
    async def test_post_lookup_returns_none_when_missing(self):
        recorder = Recorder(_data({"post": None}))

        assert await _client(recorder).get_post_id_by_source_url("https://docs.esa.io/posts/1") is None

    @pytest.mark.asyncio
    async def test_known_author(self):
        recorder = Recorder(_data({"author": {"id": "a-1"}, "fallbackAuthor": {"id": "fb"}}))

        author = await _client(recorder).get_author_id_by_username("alice")

        assert author.kind is AuthorKind.KNOWN
        assert author.author_id == "a-1"
        assert recorder.json_body()["variables"] == {
            "esaUsername": "alice",
            "fallbackName": FALLBACK_AUTHOR_NAME,
        }

    @pytest.mark.asyncio
    async def test_unknown_author_resolves_to_fallback(self):
        recorder = Recorder(_data({"author": None, "fallbackAuthor": {"id": "fb"}}))

        author = await _client(recorder).get_author_id_by_username("mallory")

        assert author.kind is AuthorKind.UNKNOWN
        assert author.author_id == "fb"

    @pytest.mark.asyncio
    async def test_missing_fallback_author_is_an_error(self):
        recorder = Recorder(_data({"author": None, "fallbackAuthor": None}))

        with pytest.raises(DatoCmsApiError, match=FALLBACK_AUTHOR_NAME):
            await _client(recorder).get_author_id_by_username("mallory")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,expected", [("published", True), ("draft", False), ("updated", False)])
    async def test_publication_status(self, status, expected):
        recorder = Recorder(_data({"post": {"_status": status}}))

        assert await _client(recorder).is_post_published("123") is expected
        assert recorder.json_body()["variables"] == {"id": "123"}

    @pytest.mark.asyncio
    async def test_publication_status_of_missing_post(self):
        recorder = Recorder(_data({"post": None}))

        with pytest.raises(DatoCmsApiError, match="Post not found: 123"):
            await _client(recorder).is_post_published("123")

    @pytest.mark.asyncio
    async def test_graphql_errors_are_raised(self):
        recorder = Recorder(httpx.Response(200, json={"errors": [{"message": "bad filter"}, {"message": "other"}]}))

        with pytest.raises(DatoCmsApiError, match="bad filter; other"):
            await _client(recorder).get_post_id_by_source_url("x")

    @pytest.mark.asyncio
    async def test_graphql_http_error_keeps_status(self):
        recorder = Recorder(httpx.Response(401, text="unauthorized"))

        with pytest.raises(DatoCmsApiError) as exc_info:
            await _client(recorder).get_post_id_by_source_url("x")

        assert exc_info.value.upstream_status == 401


class TestCmaWrites:

    @pytest.mark.asyncio
    async def test_create_post_serializes_record(self):
        recorder = Recorder(httpx.Response(201, json={"data": {"id": "new-1", "type": "item"}}))
        post = NewTargetPost(
            slug="1",
            title="Launch",
            author="a-1",
            date="2024-05-01T09:00:00Z",
            tags=("howto", "日本語"),
            category="Public/docs",
            body="<p>hola</p>",
            body_source="hola",
            source_url="https://docs.esa.io/posts/1",
            seo=Seo(title="SEO"),
            path_aliases=("/old/1",),
        )

        post_id = await _client(recorder).create_post(post)

        request = recorder.requests[0]
        assert post_id == "new-1"
        assert request.method == "POST"
        assert str(request.url) == f"{CMA_URL}/items"
        assert request.headers["X-Api-Version"] == "3"
        assert request.headers["Content-Type"] == "application/vnd.api+json"

        data = recorder.json_body()["data"]
        assert data["type"] == "item"
        assert data["relationships"]["item_type"]["data"] == {"type": "item_type", "id": "model-1"}
        attributes = data["attributes"]
        assert attributes["slug"] == "1"
        assert attributes["source_url"] == "https://docs.esa.io/posts/1"
        assert json.loads(attributes["tags"]) == ["howto", "日本語"]
        assert "日本語" in attributes["tags"]
        assert json.loads(attributes["path_aliases"]) == ["/old/1"]
        assert attributes["seo"] == {"title": "SEO"}

    @pytest.mark.asyncio
    async def test_update_post_only_sends_mutable_fields(self):
        recorder = Recorder(httpx.Response(200, json={"data": {"id": "123"}}))
        changes = TargetPostUpdate(
            title="Launch v2",
            author="a-2",
            tags=("guide",),
            category="Public/guides",
            body="<p>nuevo</p>",
            body_source="nuevo",
        )

        await _client(recorder).update_post("123", changes)

        request = recorder.requests[0]
        assert request.method == "PUT"
        assert str(request.url) == f"{CMA_URL}/items/123"
        attributes = recorder.json_body()["data"]["attributes"]
        assert set(attributes) == {"title", "author", "tags", "category", "body", "body_source"}
        assert json.loads(attributes["tags"]) == ["guide"]

    @pytest.mark.asyncio
    async def test_lifecycle_endpoints(self):
        recorder = Recorder(*(httpx.Response(200, json={}) for _ in range(3)), httpx.Response(204))
        client = _client(recorder)

        await client.publish_post("123")
        await client.unpublish_post("123")
        await client.deploy()
        await client.delete_post("123")

        assert [(r.method, r.url.path) for r in recorder.requests] == [
            ("PUT", "/items/123/publish"),
            ("PUT", "/items/123/unpublish"),
            ("POST", "/build_triggers/bt-9/trigger"),
            ("DELETE", "/items/123"),
        ]

    @pytest.mark.asyncio
    async def test_cma_error_is_raised_with_status(self):
        recorder = Recorder(httpx.Response(422, json={"data": [{"id": "INVALID_FIELD"}]}))

        with pytest.raises(DatoCmsApiError) as exc_info:
            await _client(recorder).delete_post("123")

        assert exc_info.value.upstream_status == 422
        assert "INVALID_FIELD" in exc_info.value.message
