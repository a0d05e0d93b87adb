"""
Cliente mínimo de la API v1 de esa (sin SDKs externos).

Requisitos cubiertos:
- httpx asíncrono
- un post por número (404 -> None, no es error)
- listado paginado por page / next_page
- rate-limit/backoff (429, 5xx)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from loguru import logger

from esa_sync.domain.entities.esa_post import EsaPost, EsaPostsPage
from esa_sync.shared.exceptions.external import EsaApiError


@dataclass(frozen=True)
class EsaCredentials:
    token: str
    team: str


class EsaClient:
    """
    Cliente HTTP de esa. Implementa el puerto EsaSource.

    Se puede inyectar un httpx.AsyncClient (tests con MockTransport);
    si no, se crea uno propio que se cierra con `aclose()`.
    """

    def __init__(
        self,
        credentials: EsaCredentials,
        *,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = "https://api.esa.io",
        timeout_s: float = 30.0,
        max_retries: int = 4,
        min_backoff_s: float = 1.0,
        max_backoff_s: float = 60.0,
    ) -> None:
        self._creds = credentials
        self._base_url = base_url.rstrip("/")
        self._max_retries = max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def _posts_url(self) -> str:
        return f"{self._base_url}/v1/teams/{self._creds.team}/posts"

    async def get_post(self, number: int) -> Optional[EsaPost]:
        """Obtiene un post; None si fue borrado (404)."""
        data = await self._request_json("GET", f"{self._posts_url}/{number}", allow_not_found=True)
        if data is None:
            return None
        return EsaPost.from_api(data)

    async def get_posts(
        self,
        *,
        page: int,
        per_page: int,
        sort: str = "number",
        order: str = "asc",
    ) -> EsaPostsPage:
        """Obtiene una página del listado de posts del team."""
        params = {"page": page, "per_page": per_page, "sort": sort, "order": order}
        data = await self._request_json("GET", self._posts_url, params=params)
        posts = [EsaPost.from_api(p) for p in data.get("posts") or []]
        return EsaPostsPage(posts=posts, next_page=data.get("next_page"))

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> Optional[dict[str, Any]]:
        """
        Request HTTP con backoff para 429/5xx.

        Estrategia:
        - 429: respeta Retry-After si existe, si no exponencial.
        - 5xx: exponencial.
        - 404 con allow_not_found: None.
        - Otros 4xx: error inmediato (token/team mal configurados).
        """
        headers = {
            "Authorization": f"Bearer {self._creds.token}",
            "Accept": "application/json",
        }

        for attempt in range(self._max_retries + 1):
            try:
                resp = await self._client.request(method, url, params=params, headers=headers)
            except httpx.HTTPError as e:
                raise EsaApiError(f"esa request falló: {e}") from e

            if 200 <= resp.status_code < 300:
                return resp.json()

            if resp.status_code == 404 and allow_not_found:
                return None

            # Errores recuperables
            if resp.status_code == 429 or 500 <= resp.status_code < 600:
                if attempt >= self._max_retries:
                    raise EsaApiError(
                        f"esa error {resp.status_code} tras {attempt} reintentos: {resp.text}",
                        status_code=resp.status_code,
                    )

                retry_after = resp.headers.get("Retry-After")
                if retry_after:
                    try:
                        sleep_s = float(retry_after)
                    except ValueError:
                        sleep_s = self._min_backoff_s
                else:
                    sleep_s = min(self._max_backoff_s, self._min_backoff_s * (2**attempt))

                logger.warning(f"esa respondió {resp.status_code}; reintentando en {sleep_s:.1f}s")
                await asyncio.sleep(sleep_s)
                continue

            # Errores no recuperables
            raise EsaApiError(
                f"esa request falló {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )

        raise EsaApiError("esa request agotó los reintentos")
