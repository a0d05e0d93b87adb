"""
Casos de uso de la aplicacion.
"""
from .post_sync_use_cases import PostSyncResult, PostSyncUseCases
from .sync_all_use_cases import SyncAllResult, SyncAllUseCases
from .webhook_use_cases import WebhookUseCases

__all__ = [
    "PostSyncResult",
    "PostSyncUseCases",
    "SyncAllResult",
    "SyncAllUseCases",
    "WebhookUseCases",
]
