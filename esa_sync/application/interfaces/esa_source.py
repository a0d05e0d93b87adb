"""
Interfaz del origen de posts (esa).

Este contrato existe para:
- Que el motor de sync no dependa del cliente HTTP de esa.
- Facilitar tests unitarios con un origen en memoria.
"""

from __future__ import annotations

from typing import Optional, Protocol

from esa_sync.domain.entities.esa_post import EsaPost, EsaPostsPage


class EsaSource(Protocol):
    """
    Lectura de posts de un team de esa.

    Implementaciones:
    - EsaClient (API v1 de esa).
    - InMemoryEsaSource para tests / dry-run.
    """

    async def get_post(self, number: int) -> Optional[EsaPost]:
        """
        Obtiene un post por numero.

        Un post borrado NO es un error: debe retornar None.
        """

    async def get_posts(
        self,
        *,
        page: int,
        per_page: int,
        sort: str = "number",
        order: str = "asc",
    ) -> EsaPostsPage:
        """Obtiene una pagina del listado de posts."""
