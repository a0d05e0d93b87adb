"""
Interfaz del CMS destino.

Mantiene Clean Architecture: el caso de uso de sync habla con este
contrato, nunca con DatoCMS directamente.
"""

from __future__ import annotations

from typing import Optional, Protocol

from esa_sync.domain.entities.target_post import (
    AuthorResolution,
    NewTargetPost,
    TargetPostUpdate,
)


class TargetCms(Protocol):
    """
    Escritura/lectura de posts en el CMS.

    Implementaciones:
    - DatoCmsClient (GraphQL de lectura + REST de escritura).
    - InMemoryTargetCms para tests / dry-run.

    Reglas del caso de uso:
    - "No encontrado" se expresa con None, nunca con excepcion.
    - Cualquier fallo de red/API debe lanzar excepcion.
    """

    async def get_post_id_by_source_url(self, source_url: str) -> Optional[str]:
        """Retorna el id del post cuyo sourceUrl coincide, o None."""

    async def get_author_id_by_username(self, username: str) -> AuthorResolution:
        """Mapea un usuario de esa a un autor; cae al autor de respaldo si no existe."""

    async def create_post(self, post: NewTargetPost) -> str:
        """Crea el post y retorna el id asignado por el CMS."""

    async def update_post(self, post_id: str, changes: TargetPostUpdate) -> None:
        """Actualiza los campos mutables de un post existente."""

    async def is_post_published(self, post_id: str) -> bool:
        """Indica si el post esta publicado."""

    async def publish_post(self, post_id: str) -> None:
        """Publica el post."""

    async def unpublish_post(self, post_id: str) -> None:
        """Despublica el post."""

    async def delete_post(self, post_id: str) -> None:
        """Elimina el post."""

    async def deploy(self) -> None:
        """Dispara el build/deploy del sitio estatico."""
