"""
Handlers de webhooks de esa que delegan en el motor de sync.

Los cuatro eventos (create, update, archive, delete) se resuelven igual:
re-sincronizar el post del evento. El motor decide si crea, actualiza,
borra o no hace nada, releyendo el estado de esa y del CMS.
"""

from __future__ import annotations

from loguru import logger

from esa_sync.application.dto.webhook_dto import PAYLOAD_KINDS, EsaWebhookPayload
from esa_sync.application.services.webhook_dispatcher import WebhookHandler, WebhookResponse
from esa_sync.application.use_cases.post_sync_use_cases import PostSyncUseCases


class WebhookUseCases:
    """Convierte un payload de esa en una llamada a sync_post."""

    def __init__(self, post_sync: PostSyncUseCases, *, skip_deploy: bool = False) -> None:
        self._post_sync = post_sync
        self._skip_deploy = skip_deploy

    async def handle(self, payload: EsaWebhookPayload) -> WebhookResponse:
        """
        Sincroniza el post del evento.

        Returns:
            WebhookResponse: 200 OK, o 500 con el mensaje del error
        """
        number = payload.post.number
        if payload.team.name != self._post_sync.team:
            logger.warning(
                f"Webhook del team {payload.team.name!r} ignorado "
                f"(configurado: {self._post_sync.team!r})"
            )
            return WebhookResponse.ok()

        try:
            result = await self._post_sync.sync_post(number, skip_deploy=self._skip_deploy)
        except Exception as e:
            logger.exception(f"Fallo el sync del post #{number} ({payload.kind})")
            return WebhookResponse(status_code=500, body=f"Failed to sync post #{number}: {e}")

        logger.info(
            f"Post #{number} sincronizado: {result.action}"
            + (f", {result.publish_action}" if result.publish_action else "")
        )
        return WebhookResponse.ok()


def build_sync_handlers(webhook_use_cases: WebhookUseCases) -> dict[str, WebhookHandler]:
    """Registra el mismo handler para los cuatro tipos de evento."""
    return {kind: webhook_use_cases.handle for kind in PAYLOAD_KINDS}
