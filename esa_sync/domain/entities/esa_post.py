"""
Post de esa (origen de verdad), como snapshot de solo lectura.

Se mantiene libre de I/O: el adaptador HTTP lo construye con `from_api`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class EsaPost:
    """
    Post de esa con los campos que usa el sync.

    - category: ruta separada por '/', o None si el post vive en la raiz
    - tags: en orden; un tag `@usuario` sobreescribe el autor
    """

    number: int
    name: str
    body_html: str
    body_md: str
    created_at: str
    created_by_screen_name: str
    wip: bool = False
    category: Optional[str] = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    url: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "EsaPost":
        """Construye el post desde el JSON de la API v1 de esa."""
        created_by = data.get("created_by") or {}
        return cls(
            number=int(data["number"]),
            name=data.get("name") or "",
            body_html=data.get("body_html") or "",
            body_md=data.get("body_md") or "",
            created_at=data.get("created_at") or "",
            created_by_screen_name=created_by.get("screen_name") or "",
            wip=bool(data.get("wip", False)),
            # esa manda "" o null para la raiz; ambos significan "sin categoria"
            category=data.get("category") or None,
            tags=tuple(data.get("tags") or ()),
            url=data.get("url"),
        )


@dataclass(frozen=True)
class EsaPostsPage:
    """Una pagina del listado de posts; next_page es None en la ultima."""

    posts: list[EsaPost]
    next_page: Optional[int] = None


def esa_post_url(team: str, number: int) -> str:
    """URL canonica del post en esa; es la clave de union con el CMS."""
    return f"https://{team}.esa.io/posts/{number}"
