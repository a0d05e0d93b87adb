"""
Configuración de fixtures para pytest.
"""
import re
from typing import Callable

import pytest

from esa_sync.application.use_cases.post_sync_use_cases import PostSyncUseCases
from esa_sync.domain.entities.esa_post import EsaPost
from esa_sync.infrastructure.memory.in_memory_adapters import InMemoryEsaSource, InMemoryTargetCms


TEAM = "docs"
PRIVATE_CATEGORY = re.compile(r"^(Private|Archived)(/.+)?$")
FIXED_DATE = "2024-05-01T09:00:00Z"


def build_esa_post(number: int = 1, **overrides) -> EsaPost:
    """Post de esa publicable por defecto (autor conocido, sin WIP)."""
    fields = dict(
        number=number,
        name="Launch",
        body_html="<p>hola</p>",
        body_md="hola",
        created_at="2020-01-02T03:04:05+09:00",
        created_by_screen_name="alice",
        wip=False,
        category="Public/docs",
        tags=("howto",),
        url=f"https://{TEAM}.esa.io/posts/{number}",
    )
    fields.update(overrides)
    if "tags" in overrides:
        fields["tags"] = tuple(overrides["tags"])
    return EsaPost(**fields)


@pytest.fixture
def make_esa_post() -> Callable[..., EsaPost]:
    return build_esa_post


@pytest.fixture
def esa_source() -> InMemoryEsaSource:
    return InMemoryEsaSource()


@pytest.fixture
def target_cms() -> InMemoryTargetCms:
    """CMS en memoria con alice y bob registrados."""
    return InMemoryTargetCms(authors={"alice": "author-alice", "bob": "author-bob"})


@pytest.fixture
def post_sync(esa_source: InMemoryEsaSource, target_cms: InMemoryTargetCms) -> PostSyncUseCases:
    return PostSyncUseCases(
        esa=esa_source,
        target_cms=target_cms,
        private_category=PRIVATE_CATEGORY,
        team=TEAM,
    )
