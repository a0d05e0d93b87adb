"""
Caso de uso: re-sincronizar todos los posts de esa (re-indexado completo).

Diseñado para ejecutarse como job (CLI / cron) o desde el endpoint de sync.
No es reanudable: cada corrida empieza desde la pagina 1.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AsyncIterator

from loguru import logger

from esa_sync.application.interfaces.esa_source import EsaSource
from esa_sync.application.interfaces.target_cms import TargetCms
from esa_sync.application.use_cases.post_sync_use_cases import PostSyncUseCases
from esa_sync.domain.entities.esa_post import EsaPost
from esa_sync.shared.exceptions.domain import SyncAbortedException

PER_PAGE = 100


@dataclass(frozen=True)
class SyncFailure:
    number: int
    message: str


@dataclass
class SyncAllResult:
    """Resultado agregado de una corrida completa."""

    total: int = 0
    succeeded: int = 0
    failures: list[SyncFailure] = field(default_factory=list)
    deployed: bool = False

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def success(self) -> bool:
        return not self.failures


class SyncAllUseCases:
    """
    Recorre el listado paginado de esa e invoca el motor por post.

    Politica ante fallos de un post (configurable):
    - "continue": se registra el error y se sigue con el siguiente post.
    - "abort": se corta la corrida con SyncAbortedException.
    Un fallo de paginacion siempre corta la corrida.
    """

    def __init__(
        self,
        *,
        esa: EsaSource,
        target_cms: TargetCms,
        post_sync: PostSyncUseCases,
        per_page: int = PER_PAGE,
    ) -> None:
        self._esa = esa
        self._cms = target_cms
        self._post_sync = post_sync
        self._per_page = per_page

    async def iter_all_posts(self) -> AsyncIterator[EsaPost]:
        """Genera todos los posts en orden de numero ascendente."""
        page = 1
        while page is not None:
            logger.debug(f"Obteniendo pagina {page} de esa (per_page={self._per_page}) ...")
            result = await self._esa.get_posts(
                page=page, per_page=self._per_page, sort="number", order="asc"
            )
            for post in result.posts:
                yield post
            page = result.next_page

    async def sync_all(
        self,
        *,
        skip_deploy: bool = True,
        failure_policy: str = "continue",
        deploy_at_end: bool = True,
        preserve_created_at: bool = False,
    ) -> SyncAllResult:
        """
        Ejecuta la corrida completa.

        Args:
            skip_deploy: No disparar deploy por cada post
            failure_policy: "continue" o "abort"
            deploy_at_end: Con skip_deploy, disparar un unico deploy al final
            preserve_created_at: Usar la fecha de creacion de esa en posts nuevos

        Returns:
            SyncAllResult: Totales y lista de fallos
        """
        if failure_policy not in ("continue", "abort"):
            raise ValueError(f"failure_policy invalida: {failure_policy}")

        result = SyncAllResult()
        wrote_any = False

        async for post in self.iter_all_posts():
            result.total += 1
            with logger.contextualize(esa_post=post.number):
                logger.info(f"#{post.number} {post.name}")
                try:
                    post_result = await self._post_sync.sync_post(
                        post.number,
                        esa_post=post,
                        skip_deploy=skip_deploy,
                        date_provider=(lambda p=post: p.created_at) if preserve_created_at else None,
                    )
                except Exception as e:
                    logger.exception(f"Fallo el sync del post #{post.number}: {e}")
                    if failure_policy == "abort":
                        raise SyncAbortedException(post.number, str(e)) from e
                    result.failures.append(SyncFailure(number=post.number, message=str(e)))
                    continue

            result.succeeded += 1
            if post_result.action != "skipped":
                wrote_any = True

        if skip_deploy and deploy_at_end and wrote_any:
            logger.info("Disparando deploy unico al final de la corrida ...")
            await self._cms.deploy()
            result.deployed = True

        logger.info(
            f"Sync completo: total={result.total}, ok={result.succeeded}, fallidos={result.failed}"
        )
        return result
