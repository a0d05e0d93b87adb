"""
Caso de uso: sincronizar un post de esa hacia el CMS.

Pipeline estrictamente secuencial por post:
    lookup en CMS -> fetch en esa -> decision -> create/update -> publish -> deploy

Estrategia de idempotencia:
- El sourceUrl (URL canonica del post en esa) es la clave de union: si ya
  existe un registro con ese sourceUrl se actualiza, nunca se duplica.
- publish/unpublish solo se llaman si el estado actual difiere del deseado.
- No hay estado entre invocaciones: cada llamada relee ambos sistemas.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from loguru import logger

from esa_sync.application.interfaces.esa_source import EsaSource
from esa_sync.application.interfaces.target_cms import TargetCms
from esa_sync.application.services.post_sync_policy import (
    decide_publication,
    extract_author,
    is_excluded_category,
)
from esa_sync.domain.entities.esa_post import EsaPost, esa_post_url
from esa_sync.domain.entities.target_post import NewTargetPost, TargetPostUpdate
from esa_sync.shared.utils.datetime_utils import DateTimeUtils


DateProvider = Callable[[], str]


@dataclass(frozen=True)
class PostSyncResult:
    """
    Resumen de lo que hizo una llamada a sync_post.

    action: created | updated | deleted | skipped
    publish_action: published | unpublished | unchanged (None en la rama de borrado)
    """

    number: int
    action: str
    target_post_id: Optional[str] = None
    publish_action: Optional[str] = None
    deployed: bool = False


class PostSyncUseCases:
    """
    Motor de reconciliacion esa -> CMS.

    Solo depende de los puertos EsaSource y TargetCms; la configuracion
    (regex privada, team) llega por constructor.
    """

    def __init__(
        self,
        *,
        esa: EsaSource,
        target_cms: TargetCms,
        private_category: re.Pattern,
        team: str,
    ) -> None:
        self._esa = esa
        self._cms = target_cms
        self._private_category = private_category
        self._team = team

    @property
    def team(self) -> str:
        return self._team

    async def sync_post(
        self,
        number: int,
        *,
        esa_post: Optional[EsaPost] = None,
        date_provider: Optional[DateProvider] = None,
        skip_deploy: bool = False,
        post_overrides: Optional[Mapping[str, Any]] = None,
        log=None,
    ) -> PostSyncResult:
        """
        Sincroniza un post de esa.

        Args:
            number: Numero del post en esa
            esa_post: Post ya obtenido por el caller (evita el fetch)
            date_provider: Fecha de creacion para posts nuevos (por defecto, ahora en UTC)
            skip_deploy: No disparar el deploy al terminar
            post_overrides: Campos que pisan los calculados al crear el post
            log: Logger loguru; por defecto el del modulo con el numero de post

        Returns:
            PostSyncResult: Resumen de las acciones realizadas

        Raises:
            Cualquier error de los puertos se propaga: no hay reintentos aqui.
        """
        log = log or logger.bind(esa_post=number)
        source_url = esa_post_url(self._team, number)

        # 1. Registro existente en el CMS
        log.debug(f"Buscando post destino de {source_url} ...")
        target_post_id = await self._cms.get_post_id_by_source_url(source_url)
        if target_post_id is not None:
            log.debug(f"Post destino encontrado: {target_post_id}")
        else:
            log.debug("Post destino aun no creado")

        # 2. Post en esa
        if esa_post is None:
            log.debug(f"Obteniendo post #{number} de esa ({self._team}) ...")
            esa_post = await self._esa.get_post(number)

        # 3. Rama de borrado: borrado en esa, en la raiz o en categoria privada
        if esa_post is None:
            log.info(f"Post #{number} no existe en esa")
            return await self._delete_if_exists(number, target_post_id, log)

        if is_excluded_category(esa_post.category, self._private_category):
            log.info(
                f"Categoria {esa_post.category!r} es raiz o privada "
                f"({self._private_category.pattern})"
            )
            return await self._delete_if_exists(number, target_post_id, log)

        # 4. Autor
        username, tags = extract_author(esa_post.tags, esa_post.created_by_screen_name)
        log.debug(f"Resolviendo autor para {username!r} ...")
        author = await self._cms.get_author_id_by_username(username)
        log.debug(f"Autor asignado: {author.kind.value} ({author.author_id})")

        # 5. Crear o actualizar
        if target_post_id is not None:
            log.info(f"Actualizando post destino {target_post_id} ...")
            await self._cms.update_post(
                target_post_id,
                TargetPostUpdate(
                    title=esa_post.name,
                    author=author.author_id,
                    tags=tags,
                    category=esa_post.category,
                    body=esa_post.body_html,
                    body_source=esa_post.body_md,
                ),
            )
            action = "updated"
        else:
            log.info("Creando nuevo post destino ...")
            new_post = NewTargetPost(
                slug=str(esa_post.number),
                title=esa_post.name,
                author=author.author_id,
                date=(date_provider or DateTimeUtils.now_iso)(),
                tags=tags,
                category=esa_post.category,
                body=esa_post.body_html,
                body_source=esa_post.body_md,
                source_url=source_url,
            ).with_overrides(post_overrides)
            target_post_id = await self._cms.create_post(new_post)
            log.info(f"Post destino creado: {target_post_id}")
            action = "created"

        # 6. Publicar / despublicar
        decision = decide_publication(
            wip=esa_post.wip,
            title=esa_post.name,
            author_known=author.is_known,
        )
        for reason in decision.reasons:
            log.info(f"No se publica: {reason}")

        is_published = await self._cms.is_post_published(target_post_id)
        log.debug(f"Publicado actualmente: {is_published}")
        publish_action = "unchanged"
        if decision.publishes and not is_published:
            log.info(f"Publicando post destino {target_post_id} ...")
            await self._cms.publish_post(target_post_id)
            publish_action = "published"
        elif not decision.publishes and is_published:
            log.info(f"Despublicando post destino {target_post_id} ...")
            await self._cms.unpublish_post(target_post_id)
            publish_action = "unpublished"

        # 7. Deploy
        deployed = False
        if not skip_deploy:
            log.info("Disparando deploy ...")
            await self._cms.deploy()
            deployed = True

        return PostSyncResult(
            number=number,
            action=action,
            target_post_id=target_post_id,
            publish_action=publish_action,
            deployed=deployed,
        )

    async def _delete_if_exists(self, number: int, target_post_id: Optional[str], log) -> PostSyncResult:
        if target_post_id is None:
            log.info("El post destino no fue creado; nada que borrar")
            return PostSyncResult(number=number, action="skipped")

        log.info(f"Borrando post destino {target_post_id} ...")
        await self._cms.delete_post(target_post_id)
        log.info(f"Post destino borrado: {target_post_id}")
        return PostSyncResult(number=number, action="deleted", target_post_id=target_post_id)
