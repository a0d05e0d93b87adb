"""
Endpoints para sincronizacion manual esa -> DatoCMS.
Permiten re-sincronizar todo el team o un post puntual sin webhook.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from loguru import logger

from esa_sync.api.v1.dependencies.use_case_deps import (
    get_post_sync_use_cases,
    get_sync_all_use_cases,
)
from esa_sync.application.dto.sync_dto import (
    PostSyncResultDTO,
    SyncAllRequestDTO,
    SyncAllResultDTO,
    SyncFailureDTO,
)
from esa_sync.application.use_cases.post_sync_use_cases import PostSyncUseCases
from esa_sync.application.use_cases.sync_all_use_cases import SyncAllUseCases
from esa_sync.core.config import settings
from esa_sync.shared.exceptions.base import AppException


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "/all",
    response_model=SyncAllResultDTO,
    status_code=status.HTTP_200_OK,
    summary="Re-sincronizar todos los posts de esa"
)
async def sync_all(
    dto: Optional[SyncAllRequestDTO] = Body(default=None),
    use_cases: SyncAllUseCases = Depends(get_sync_all_use_cases)
):
    """
    Recorre todos los posts de esa y sincroniza cada uno.

    - Responde 200 si todos los posts se sincronizaron.
    - Responde 500 (con el mismo cuerpo) si alguno fallo.
    """
    dto = dto or SyncAllRequestDTO()
    skip_deploy = settings.SYNC_ALL_SKIP_DEPLOY if dto.skip_deploy is None else dto.skip_deploy
    failure_policy = dto.failure_policy or settings.SYNC_ALL_FAILURE_POLICY

    logger.info(f"Iniciando sync completo desde API (policy={failure_policy}, skip_deploy={skip_deploy})")
    try:
        result = await use_cases.sync_all(
            skip_deploy=skip_deploy,
            failure_policy=failure_policy,
            preserve_created_at=dto.preserve_created_at,
        )
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error en sync completo: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al sincronizar: {str(e)}"
        )

    response = SyncAllResultDTO(
        success=result.success,
        total=result.total,
        succeeded=result.succeeded,
        failed=result.failed,
        deployed=result.deployed,
        failures=[SyncFailureDTO(number=f.number, message=f.message) for f in result.failures],
        message=(
            f"Sincronizados {result.succeeded}/{result.total} post(s)"
            if result.success
            else f"Fallaron {result.failed} de {result.total} post(s)"
        ),
    )
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=response.model_dump(),
        )
    return response


@router.post(
    "/posts/{number}",
    response_model=PostSyncResultDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar un post de esa"
)
async def sync_post(
    number: int,
    skip_deploy: bool = Query(default=False, description="No disparar el deploy al terminar"),
    use_cases: PostSyncUseCases = Depends(get_post_sync_use_cases)
) -> PostSyncResultDTO:
    """Sincroniza un post puntual, igual que si llegara su webhook."""
    try:
        result = await use_cases.sync_post(number, skip_deploy=skip_deploy)
    except Exception as e:
        logger.exception(f"Fallo el sync del post #{number}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to sync post #{number}: {str(e)}"
        )

    return PostSyncResultDTO(
        number=result.number,
        action=result.action,
        target_post_id=result.target_post_id,
        publish_action=result.publish_action,
        deployed=result.deployed,
    )
