"""
Excepciones relacionadas con la lógica de dominio y la configuración.
"""
from typing import List

from esa_sync.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class ConfigurationException(AppException):
    """
    Configuración incompleta o inválida.

    Se lanza al arrancar (API o CLI), antes de procesar cualquier request.
    """

    def __init__(self, errors: List[str]):
        super().__init__(
            message=" ".join(errors),
            status_code=500,
            error_code="CONFIGURATION_ERROR",
            details={"errors": list(errors)}
        )
        self.errors = list(errors)


class SyncAbortedException(DomainException):
    """El sync masivo se cortó en el primer post fallido (política `abort`)."""

    def __init__(self, number: int, message: str):
        super().__init__(
            message=f"Sync abortado en el post #{number}: {message}",
            error_code="SYNC_ABORTED",
            details={"number": number}
        )
        self.status_code = 500
        self.number = number
