"""
Endpoint receptor de webhooks de esa.

Acepta cualquier metodo para que el dispatcher responda 405 con su propio
mensaje; la firma se verifica sobre el body crudo, antes de parsear JSON.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from esa_sync.api.v1.dependencies.use_case_deps import get_webhook_dispatcher
from esa_sync.application.services.webhook_dispatcher import EsaWebhookDispatcher, WebhookRequest


router = APIRouter(prefix="/webhooks", tags=["Webhooks"])


@router.api_route(
    "/esa",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    response_class=PlainTextResponse,
    summary="Recibir webhook de esa"
)
async def esa_webhook(
    request: Request,
    dispatcher: EsaWebhookDispatcher = Depends(get_webhook_dispatcher)
) -> PlainTextResponse:
    """
    Autentica el webhook y sincroniza el post del evento.

    Respuestas:
    - 200 `OK`
    - 400 firma invalida, JSON invalido o payload desconocido
    - 405 metodo distinto de POST
    - 500 fallo al sincronizar (el body trae el mensaje)
    """
    raw = await request.body()
    # Un body no UTF-8 no puede coincidir con la firma: cae en 400
    body = raw.decode("utf-8", errors="replace") if raw else None

    response = await dispatcher.dispatch(
        WebhookRequest(method=request.method, headers=dict(request.headers), body=body)
    )
    return PlainTextResponse(content=response.body, status_code=response.status_code)
