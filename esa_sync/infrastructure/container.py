"""
Construccion "oficial" de los servicios a partir de Settings.

Es el unico punto que lee la configuracion: el motor y el dispatcher
reciben todo por parametro.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from esa_sync.application.interfaces.esa_source import EsaSource
from esa_sync.application.interfaces.target_cms import TargetCms
from esa_sync.application.services.webhook_dispatcher import EsaWebhookDispatcher
from esa_sync.application.use_cases.post_sync_use_cases import PostSyncUseCases
from esa_sync.application.use_cases.sync_all_use_cases import SyncAllUseCases
from esa_sync.application.use_cases.webhook_use_cases import WebhookUseCases, build_sync_handlers
from esa_sync.core.config import Settings
from esa_sync.infrastructure.external.datocms.datocms_client import DatoCmsClient, DatoCmsCredentials
from esa_sync.infrastructure.external.esa.esa_client import EsaClient, EsaCredentials


@dataclass
class SyncServices:
    esa: EsaSource
    target_cms: TargetCms
    post_sync: PostSyncUseCases
    sync_all: SyncAllUseCases
    webhook_dispatcher: EsaWebhookDispatcher

    async def aclose(self) -> None:
        """Cierra los clientes HTTP propios de los adaptadores."""
        for adapter in (self.esa, self.target_cms):
            aclose = getattr(adapter, "aclose", None)
            if aclose is not None:
                await aclose()


def build_services(
    config: Settings,
    *,
    esa: Optional[EsaSource] = None,
    target_cms: Optional[TargetCms] = None,
) -> SyncServices:
    """
    Arma adaptadores, casos de uso y dispatcher.

    Args:
        config: Configuracion ya validada
        esa: Origen alternativo (p.ej. en memoria)
        target_cms: CMS alternativo (p.ej. en memoria para --dry-run)
    """
    esa = esa or EsaClient(
        EsaCredentials(token=config.ESA_API_TOKEN, team=config.ESA_TEAM),
        base_url=config.ESA_API_BASE_URL,
        timeout_s=config.HTTP_TIMEOUT_SECONDS,
    )
    target_cms = target_cms or DatoCmsClient(
        DatoCmsCredentials(
            token=config.DATOCMS_FULL_ACCESS_API_TOKEN,
            item_type_post=config.DATOCMS_POST_ITEM_ID,
            build_trigger_id=config.DATOCMS_BUILD_TRIGGER_ID,
        ),
        timeout_s=config.HTTP_TIMEOUT_SECONDS,
    )

    post_sync = PostSyncUseCases(
        esa=esa,
        target_cms=target_cms,
        private_category=config.private_category_pattern(),
        team=config.ESA_TEAM,
    )
    sync_all = SyncAllUseCases(esa=esa, target_cms=target_cms, post_sync=post_sync)
    dispatcher = EsaWebhookDispatcher(
        secret=config.ESA_WEBHOOK_SECRET,
        handlers=build_sync_handlers(WebhookUseCases(post_sync)),
    )
    return SyncServices(
        esa=esa,
        target_cms=target_cms,
        post_sync=post_sync,
        sync_all=sync_all,
        webhook_dispatcher=dispatcher,
    )
