"""
Dispatcher de webhooks de esa.

Independiente del transporte: recibe (method, headers, body crudo) y
devuelve (status_code, body). El endpoint FastAPI solo adapta tipos.

Cada paso es una compuerta que corta con error inmediato:
    405 metodo -> 400 body -> 400 firma -> 400 JSON -> 400 payload -> handler
"""

from __future__ import annotations

import hashlib
import hmac
import json
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Mapping, Optional

from loguru import logger

from esa_sync.application.dto.webhook_dto import EsaWebhookPayload
from esa_sync.application.services.webhook_payload_validator import validate_payload

SIGNATURE_HEADER = "x-esa-signature"


@dataclass(frozen=True)
class WebhookRequest:
    method: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    def header(self, name: str) -> Optional[str]:
        """Busca un header sin distinguir mayusculas."""
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return None


@dataclass(frozen=True)
class WebhookResponse:
    status_code: int
    body: str

    @classmethod
    def ok(cls) -> "WebhookResponse":
        return cls(status_code=200, body="OK")


WebhookHandler = Callable[[EsaWebhookPayload], Awaitable[WebhookResponse]]


def compute_signature(secret: str, body: str) -> str:
    """`sha256=` + HMAC-SHA256 hex del body crudo."""
    digest = hmac.new(secret.encode("utf-8"), body.encode("utf-8"), hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def _error(status_code: int, message: str, detail: Optional[str] = None) -> WebhookResponse:
    logger.warning(f"< {status_code}: {message}")
    if detail:
        logger.debug(detail)
    return WebhookResponse(status_code=status_code, body=message)


class EsaWebhookDispatcher:
    """
    Autentica, valida y enruta webhooks por `kind`.

    Un `kind` valido sin handler registrado se ignora (200 OK).
    El handler es responsable de su respuesta final, incluido el 500.
    """

    def __init__(self, *, secret: str, handlers: Mapping[str, WebhookHandler]) -> None:
        self._secret = secret
        self._handlers = dict(handlers)

    async def dispatch(self, request: WebhookRequest) -> WebhookResponse:
        if request.method.upper() != "POST":
            return _error(405, "This endpoint only supports POST method.")

        if not isinstance(request.body, str):
            return _error(400, "Body must be provided.")

        # La firma se calcula sobre el body crudo, antes de parsear
        given = request.header(SIGNATURE_HEADER)
        if given is None:
            return _error(400, "X-Esa-Signature didn't match.", f"{SIGNATURE_HEADER} header is required")
        calculated = compute_signature(self._secret, request.body)
        if not hmac.compare_digest(given.encode("utf-8"), calculated.encode("utf-8")):
            return _error(
                400,
                "X-Esa-Signature didn't match.",
                f"Signatures didn't match! given: {given}",
            )

        try:
            data = json.loads(request.body)
        except ValueError as e:
            return _error(400, "Invalid JSON body.", str(e))

        errors: list[str] = []
        payload = validate_payload(data, errors)
        if payload is None:
            return _error(400, " ".join(errors))

        handler = self._handlers.get(payload.kind)
        if handler is None:
            logger.info(f"Webhook {payload.kind} sin handler registrado; se ignora")
            return WebhookResponse.ok()

        logger.info(f"> {payload.kind} #{payload.post.number} ({payload.team.name})")
        return await handler(payload)
