"""
Excepcion base de la aplicacion.

Todas las excepciones propias llevan un `error_code` estable y un status HTTP,
de modo que el handler global de FastAPI y el CLI las reportan igual.
"""
from typing import Any, Dict, Optional


class AppException(Exception):
    """
    Excepcion base de la aplicacion.
    Todas las excepciones personalizadas deben heredar de esta clase.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            message: Mensaje de error legible
            status_code: Status HTTP con el que se responde
            error_code: Codigo estable para clientes y logs
            details: Datos extra (numero de post, status del servicio externo, ...)
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Cuerpo JSON de la respuesta de error."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }
