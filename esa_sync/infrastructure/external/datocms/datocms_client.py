"""
Cliente de DatoCMS. Implementa el puerto TargetCms.

- Lectura: Content Delivery API (GraphQL, endpoint preview para ver borradores).
- Escritura: Content Management API (REST, JSON:API).

Los campos `tags` y `path_aliases` se guardan como JSON en campos de texto
del modelo Post, por eso se serializan aquí.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from loguru import logger

from esa_sync.domain.entities.target_post import (
    AuthorKind,
    AuthorResolution,
    NewTargetPost,
    TargetPostUpdate,
)
from esa_sync.shared.exceptions.external import DatoCmsApiError

FALLBACK_AUTHOR_NAME = "__fallbackAuthor"

_POST_BY_SOURCE_URL = """
query PostBySourceUrl($sourceUrl: String) {
  post(filter: { sourceUrl: { eq: $sourceUrl } }) {
    id
  }
}
"""

_AUTHOR_BY_ESA_USERNAME = """
query AuthorByEsaUsername($esaUsername: String, $fallbackName: String) {
  author: author(filter: { esaUsername: { eq: $esaUsername } }) {
    id
  }
  fallbackAuthor: author(filter: { name: { eq: $fallbackName } }) {
    id
  }
}
"""

_POST_STATUS = """
query PostStatus($id: ItemId) {
  post(filter: { id: { eq: $id } }) {
    _status
  }
}
"""


@dataclass(frozen=True)
class DatoCmsCredentials:
    token: str
    item_type_post: str
    build_trigger_id: str


class DatoCmsClient:
    """
    Cliente HTTP de DatoCMS.

    Se puede inyectar un httpx.AsyncClient (tests con MockTransport);
    si no, se crea uno propio que se cierra con `aclose()`.
    """

    def __init__(
        self,
        credentials: DatoCmsCredentials,
        *,
        client: Optional[httpx.AsyncClient] = None,
        graphql_url: str = "https://graphql.datocms.com/preview",
        cma_base_url: str = "https://site-api.datocms.com",
        timeout_s: float = 30.0,
    ) -> None:
        self._creds = credentials
        self._graphql_url = graphql_url
        self._cma_base_url = cma_base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Lectura (GraphQL)
    # ------------------------------------------------------------------

    async def get_post_id_by_source_url(self, source_url: str) -> Optional[str]:
        data = await self._query(_POST_BY_SOURCE_URL, {"sourceUrl": source_url})
        post = data.get("post")
        return post["id"] if post else None

    async def get_author_id_by_username(self, username: str) -> AuthorResolution:
        data = await self._query(
            _AUTHOR_BY_ESA_USERNAME,
            {"esaUsername": username, "fallbackName": FALLBACK_AUTHOR_NAME},
        )
        author = data.get("author")
        if author:
            return AuthorResolution(kind=AuthorKind.KNOWN, author_id=author["id"])

        fallback = data.get("fallbackAuthor")
        if not fallback:
            raise DatoCmsApiError(
                f"No existe el autor de respaldo '{FALLBACK_AUTHOR_NAME}' en DatoCMS"
            )
        return AuthorResolution(kind=AuthorKind.UNKNOWN, author_id=fallback["id"])

    async def is_post_published(self, post_id: str) -> bool:
        data = await self._query(_POST_STATUS, {"id": post_id})
        post = data.get("post")
        if not post:
            raise DatoCmsApiError(f"Post not found: {post_id}")
        return post.get("_status") == "published"

    # ------------------------------------------------------------------
    # Escritura (CMA)
    # ------------------------------------------------------------------

    async def create_post(self, post: NewTargetPost) -> str:
        body = {
            "data": {
                "type": "item",
                "attributes": {
                    "slug": post.slug,
                    "title": post.title,
                    "author": post.author,
                    "date": post.date,
                    "tags": json.dumps(list(post.tags), ensure_ascii=False),
                    "category": post.category,
                    "body": post.body,
                    "body_source": post.body_source,
                    "source_url": post.source_url,
                    "seo": post.seo.to_dict(),
                    "path_aliases": json.dumps(list(post.path_aliases), ensure_ascii=False),
                },
                "relationships": {
                    "item_type": {
                        "data": {"type": "item_type", "id": self._creds.item_type_post},
                    },
                },
            }
        }
        data = await self._cma("POST", "/items", json_body=body)
        return data["data"]["id"]

    async def update_post(self, post_id: str, changes: TargetPostUpdate) -> None:
        body = {
            "data": {
                "type": "item",
                "id": post_id,
                "attributes": {
                    "title": changes.title,
                    "author": changes.author,
                    "tags": json.dumps(list(changes.tags), ensure_ascii=False),
                    "category": changes.category,
                    "body": changes.body,
                    "body_source": changes.body_source,
                },
            }
        }
        await self._cma("PUT", f"/items/{post_id}", json_body=body)

    async def publish_post(self, post_id: str) -> None:
        await self._cma("PUT", f"/items/{post_id}/publish")

    async def unpublish_post(self, post_id: str) -> None:
        await self._cma("PUT", f"/items/{post_id}/unpublish")

    async def delete_post(self, post_id: str) -> None:
        await self._cma("DELETE", f"/items/{post_id}")

    async def deploy(self) -> None:
        await self._cma("POST", f"/build_triggers/{self._creds.build_trigger_id}/trigger")

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def _query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self._creds.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        try:
            resp = await self._client.post(
                self._graphql_url,
                json={"query": query, "variables": variables},
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise DatoCmsApiError(f"DatoCMS GraphQL request falló: {e}") from e

        if resp.status_code != 200:
            raise DatoCmsApiError(
                f"DatoCMS GraphQL error {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )

        payload = resp.json()
        if payload.get("errors"):
            messages = "; ".join(err.get("message", str(err)) for err in payload["errors"])
            raise DatoCmsApiError(f"DatoCMS GraphQL error: {messages}")
        return payload.get("data") or {}

    async def _cma(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self._creds.token}",
            "Accept": "application/json",
            "Content-Type": "application/vnd.api+json",
            "X-Api-Version": "3",
        }
        url = f"{self._cma_base_url}{path}"
        logger.debug(f"DatoCMS CMA {method} {path}")
        try:
            resp = await self._client.request(method, url, json=json_body, headers=headers)
        except httpx.HTTPError as e:
            raise DatoCmsApiError(f"DatoCMS request falló: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise DatoCmsApiError(
                f"DatoCMS {method} {path} falló {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )

        if not resp.content:
            return {}
        return resp.json()
