"""
Registro de post en el CMS destino y resolucion de autores.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Optional


class AuthorKind(Enum):
    """Resultado de mapear un usuario de esa a un autor del CMS."""
    KNOWN = "known"
    UNKNOWN = "unknown"     # se usa el autor de respaldo


@dataclass(frozen=True)
class AuthorResolution:
    """
    Autor resuelto en el CMS.

    Nunca representa un error: si el usuario no existe en el CMS,
    `author_id` apunta al autor de respaldo y `kind` es UNKNOWN.
    """

    kind: AuthorKind
    author_id: str

    @property
    def is_known(self) -> bool:
        return self.kind is AuthorKind.KNOWN


@dataclass(frozen=True)
class Seo:
    title: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> dict[str, str]:
        data: dict[str, str] = {}
        if self.title is not None:
            data["title"] = self.title
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class TargetPostUpdate:
    """
    Campos mutables de un post existente.

    slug, date, source_url, seo y path_aliases quedan fijos tras la creacion.
    """

    title: str
    author: str
    tags: tuple[str, ...]
    category: str
    body: str
    body_source: str


@dataclass(frozen=True)
class NewTargetPost:
    """Todos los campos necesarios para crear un post en el CMS."""

    slug: str
    title: str
    author: str
    date: str
    tags: tuple[str, ...]
    category: str
    body: str
    body_source: str
    source_url: str
    seo: Seo = field(default_factory=Seo)
    path_aliases: tuple[str, ...] = field(default_factory=tuple)

    def with_overrides(self, overrides: Optional[Mapping[str, Any]]) -> "NewTargetPost":
        """
        Aplica overrides del caller sobre los campos calculados.

        Raises:
            ValueError: Si un override no corresponde a ningun campo
        """
        if not overrides:
            return self
        unknown = set(overrides) - set(self.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Campos de override desconocidos: {sorted(unknown)}")
        values = dict(overrides)
        for key in ("tags", "path_aliases"):
            if key in values:
                values[key] = tuple(values[key])
        return replace(self, **values)


@dataclass
class TargetPost:
    """Post tal como vive en el CMS (lo usa el adaptador en memoria)."""

    id: str
    slug: str
    title: str
    author: str
    date: str
    tags: tuple[str, ...]
    category: str
    body: str
    body_source: str
    source_url: str
    seo: Seo = field(default_factory=Seo)
    path_aliases: tuple[str, ...] = field(default_factory=tuple)
    published: bool = False
