"""
Validación de payloads de webhooks de esa.

Recibe JSON ya parseado de forma desconocida y lo reduce a una de las
cuatro variantes tipadas, acumulando mensajes legibles si falla.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from esa_sync.application.dto.webhook_dto import PAYLOAD_KINDS, EsaWebhookPayload

_payload_adapter: TypeAdapter = TypeAdapter(EsaWebhookPayload)


def validate_payload(raw: Any, errors: list[str]) -> Optional[EsaWebhookPayload]:
    """
    Valida un payload de webhook.

    Args:
        raw: JSON parseado (cualquier tipo)
        errors: Acumulador donde se agregan los mensajes de error

    Returns:
        La variante tipada del payload, o None si no es válido
    """
    if not isinstance(raw, dict):
        errors.append("The payload is not an type object.")
        return None

    kind = raw.get("kind")
    if not isinstance(kind, str):
        errors.append("The `kind` is not type string.")
        return None

    if kind not in PAYLOAD_KINDS:
        errors.append(f"The `kind` value {json.dumps(kind)} is not supported.")
        return None

    try:
        return _payload_adapter.validate_python(raw)
    except ValidationError as e:
        for err in e.errors():
            # El primer elemento del loc es el tag del discriminador
            loc = ".".join(str(part) for part in err["loc"][1:])
            errors.append(f"{loc}: {err['msg']}")
        return None
