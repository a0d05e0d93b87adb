"""
Políticas puras del sync de posts.

Este módulo NO toca HTTP, esa ni DatoCMS.
Sirve para testear las reglas de exclusión, autoría y publicación.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

AUTHOR_TAG_PATTERN = re.compile(r"^@([a-zA-Z0-9_-]+)$")
WIP_TITLE_PREFIX = "WIP:"


def extract_author(tags: Sequence[str], screen_name: str) -> tuple[str, tuple[str, ...]]:
    """
    Separa el tag de autor (`@usuario`) del resto de tags.

    Reglas:
    - Una sola pasada: cada tag que coincide se quita; gana el último.
    - Los tags que no coinciden conservan su orden.
    - Sin tag de autor, el autor es quien creó el post.
    """
    username = screen_name
    remaining: list[str] = []
    for tag in tags:
        m = AUTHOR_TAG_PATTERN.match(tag)
        if m:
            username = m.group(1)
        else:
            remaining.append(tag)
    return username, tuple(remaining)


def is_excluded_category(category: Optional[str], private_category: re.Pattern) -> bool:
    """
    Determina si un post no debe existir en el CMS por su categoría.

    La raíz (None o "") siempre queda excluida, sin importar la regex.
    """
    if not category:
        return True
    return private_category.search(category) is not None


@dataclass(frozen=True)
class PublishDecision:
    publishes: bool
    reasons: list[str] = field(default_factory=list)


def decide_publication(*, wip: bool, title: str, author_known: bool) -> PublishDecision:
    """
    Decide si el post debe quedar publicado.

    Cada condición bloquea por sí sola; se acumulan las razones para el log.
    """
    reasons: list[str] = []
    if wip:
        reasons.append("esa post is wip")
    if title.startswith(WIP_TITLE_PREFIX):
        reasons.append(f"title starts with `{WIP_TITLE_PREFIX}`")
    if not author_known:
        reasons.append("author is not registered in the CMS")
    return PublishDecision(publishes=not reasons, reasons=reasons)
