"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .webhook_dto import (
    EsaWebhookPayload,
    PostArchivePayload,
    PostCreatePayload,
    PostDeletePayload,
    PostUpdatePayload,
)
from .sync_dto import (
    PostSyncResultDTO,
    SyncAllRequestDTO,
    SyncAllResultDTO,
    SyncFailureDTO,
)

__all__ = [
    "EsaWebhookPayload",
    "PostArchivePayload",
    "PostCreatePayload",
    "PostDeletePayload",
    "PostUpdatePayload",
    "PostSyncResultDTO",
    "SyncAllRequestDTO",
    "SyncAllResultDTO",
    "SyncFailureDTO",
]
