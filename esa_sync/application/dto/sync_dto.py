"""
DTOs para los endpoints de sincronizacion manual.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class SyncAllRequestDTO(BaseModel):
    """Opciones de una corrida completa."""

    skip_deploy: Optional[bool] = Field(
        None,
        description="No disparar deploy por post. Si se omite, se usa SYNC_ALL_SKIP_DEPLOY."
    )
    failure_policy: Optional[Literal["continue", "abort"]] = Field(
        None,
        description="Que hacer si falla un post. Si se omite, se usa SYNC_ALL_FAILURE_POLICY."
    )
    preserve_created_at: bool = Field(
        False,
        description="Usar la fecha de creacion de esa (en vez de ahora) para posts nuevos"
    )


class SyncFailureDTO(BaseModel):
    number: int
    message: str


class SyncAllResultDTO(BaseModel):
    """Resultado agregado de la sincronizacion."""

    success: bool
    total: int
    succeeded: int
    failed: int
    deployed: bool
    failures: List[SyncFailureDTO] = Field(default_factory=list)
    message: str


class PostSyncResultDTO(BaseModel):
    """Resultado de sincronizar un unico post."""

    number: int
    action: str
    target_post_id: Optional[str] = None
    publish_action: Optional[str] = None
    deployed: bool = False
