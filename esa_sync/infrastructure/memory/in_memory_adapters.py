"""
Implementaciones en memoria de los puertos EsaSource y TargetCms.

Sirven para tests unitarios y para el modo --dry-run del CLI:
guardan el estado en dicts y registran cada llamada de escritura.
"""

from __future__ import annotations

from dataclasses import replace
from itertools import count
from typing import Iterable, Optional

from esa_sync.domain.entities.esa_post import EsaPost, EsaPostsPage
from esa_sync.domain.entities.target_post import (
    AuthorKind,
    AuthorResolution,
    NewTargetPost,
    TargetPost,
    TargetPostUpdate,
)
from esa_sync.shared.exceptions.external import DatoCmsApiError


class InMemoryEsaSource:
    """Origen esa en memoria, indexado por numero de post."""

    def __init__(self, posts: Iterable[EsaPost] = ()) -> None:
        self.posts: dict[int, EsaPost] = {p.number: p for p in posts}
        self.get_post_calls: list[int] = []

    def put(self, post: EsaPost) -> None:
        self.posts[post.number] = post

    def remove(self, number: int) -> None:
        self.posts.pop(number, None)

    async def get_post(self, number: int) -> Optional[EsaPost]:
        self.get_post_calls.append(number)
        return self.posts.get(number)

    async def get_posts(
        self,
        *,
        page: int,
        per_page: int,
        sort: str = "number",
        order: str = "asc",
    ) -> EsaPostsPage:
        ordered = sorted(self.posts.values(), key=lambda p: p.number, reverse=(order == "desc"))
        start = (page - 1) * per_page
        chunk = ordered[start:start + per_page]
        next_page = page + 1 if start + per_page < len(ordered) else None
        return EsaPostsPage(posts=chunk, next_page=next_page)


class InMemoryTargetCms:
    """
    CMS en memoria.

    `calls` registra (operacion, id) de cada escritura, en orden,
    para verificar idempotencia en los tests.
    """

    def __init__(
        self,
        *,
        authors: Optional[dict[str, str]] = None,
        fallback_author_id: str = "fallback-author",
    ) -> None:
        self.authors: dict[str, str] = dict(authors or {})
        self.fallback_author_id = fallback_author_id
        self.posts: dict[str, TargetPost] = {}
        self.calls: list[tuple[str, Optional[str]]] = []
        self._ids = count(1)

    def calls_of(self, operation: str) -> list[tuple[str, Optional[str]]]:
        return [c for c in self.calls if c[0] == operation]

    def post_by_source_url(self, source_url: str) -> Optional[TargetPost]:
        for post in self.posts.values():
            if post.source_url == source_url:
                return post
        return None

    async def get_post_id_by_source_url(self, source_url: str) -> Optional[str]:
        post = self.post_by_source_url(source_url)
        return post.id if post else None

    async def get_author_id_by_username(self, username: str) -> AuthorResolution:
        if username in self.authors:
            return AuthorResolution(kind=AuthorKind.KNOWN, author_id=self.authors[username])
        return AuthorResolution(kind=AuthorKind.UNKNOWN, author_id=self.fallback_author_id)

    async def create_post(self, post: NewTargetPost) -> str:
        post_id = str(next(self._ids))
        self.posts[post_id] = TargetPost(
            id=post_id,
            slug=post.slug,
            title=post.title,
            author=post.author,
            date=post.date,
            tags=post.tags,
            category=post.category,
            body=post.body,
            body_source=post.body_source,
            source_url=post.source_url,
            seo=post.seo,
            path_aliases=post.path_aliases,
        )
        self.calls.append(("create", post_id))
        return post_id

    async def update_post(self, post_id: str, changes: TargetPostUpdate) -> None:
        current = self._get(post_id)
        self.posts[post_id] = replace(
            current,
            title=changes.title,
            author=changes.author,
            tags=changes.tags,
            category=changes.category,
            body=changes.body,
            body_source=changes.body_source,
        )
        self.calls.append(("update", post_id))

    async def is_post_published(self, post_id: str) -> bool:
        return self._get(post_id).published

    async def publish_post(self, post_id: str) -> None:
        self._get(post_id).published = True
        self.calls.append(("publish", post_id))

    async def unpublish_post(self, post_id: str) -> None:
        self._get(post_id).published = False
        self.calls.append(("unpublish", post_id))

    async def delete_post(self, post_id: str) -> None:
        self._get(post_id)
        del self.posts[post_id]
        self.calls.append(("delete", post_id))

    async def deploy(self) -> None:
        self.calls.append(("deploy", None))

    def _get(self, post_id: str) -> TargetPost:
        try:
            return self.posts[post_id]
        except KeyError:
            raise DatoCmsApiError(f"Post not found: {post_id}") from None
