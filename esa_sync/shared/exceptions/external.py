"""
Errores de integración con servicios externos (esa, DatoCMS).
"""
from typing import Optional

from esa_sync.shared.exceptions.base import AppException


class ExternalServiceException(AppException):
    """Excepción base para fallos de un servicio externo."""

    def __init__(
        self,
        service: str,
        message: str,
        status_code: Optional[int] = None,
        error_code: str = "EXTERNAL_SERVICE_ERROR",
    ):
        super().__init__(
            message=message,
            status_code=502,
            error_code=error_code,
            details={"service": service, "upstream_status": status_code}
        )
        self.service = service
        self.upstream_status = status_code


class EsaApiError(ExternalServiceException):
    """Error de integración con la API de esa."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("esa", message, status_code, error_code="ESA_API_ERROR")


class DatoCmsApiError(ExternalServiceException):
    """Error de integración con DatoCMS (CDA GraphQL o CMA REST)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("datocms", message, status_code, error_code="DATOCMS_API_ERROR")
