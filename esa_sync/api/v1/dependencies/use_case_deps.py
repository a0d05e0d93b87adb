"""
Dependencias para inyeccion de casos de uso.

Los servicios se construyen una sola vez en el startup (app.state.services);
los tests los reemplazan con `app.dependency_overrides`.
"""
from fastapi import Request

from esa_sync.application.services.webhook_dispatcher import EsaWebhookDispatcher
from esa_sync.application.use_cases.post_sync_use_cases import PostSyncUseCases
from esa_sync.application.use_cases.sync_all_use_cases import SyncAllUseCases
from esa_sync.infrastructure.container import SyncServices


def get_services(request: Request) -> SyncServices:
    """
    Dependencia para obtener los servicios construidos al inicio.

    Returns:
        SyncServices: Adaptadores y casos de uso
    """
    return request.app.state.services


def get_webhook_dispatcher(request: Request) -> EsaWebhookDispatcher:
    """Dependencia para obtener el dispatcher de webhooks de esa."""
    return get_services(request).webhook_dispatcher


def get_post_sync_use_cases(request: Request) -> PostSyncUseCases:
    """Dependencia para obtener el motor de sync de un post."""
    return get_services(request).post_sync


def get_sync_all_use_cases(request: Request) -> SyncAllUseCases:
    """Dependencia para obtener el caso de uso de sync masivo."""
    return get_services(request).sync_all
