"""
Entidades del dominio.
"""
from esa_sync.domain.entities.esa_post import EsaPost, EsaPostsPage, esa_post_url
from esa_sync.domain.entities.target_post import (
    AuthorKind,
    AuthorResolution,
    NewTargetPost,
    Seo,
    TargetPost,
    TargetPostUpdate,
)

__all__ = [
    "EsaPost",
    "EsaPostsPage",
    "esa_post_url",
    "AuthorKind",
    "AuthorResolution",
    "NewTargetPost",
    "Seo",
    "TargetPost",
    "TargetPostUpdate",
]
