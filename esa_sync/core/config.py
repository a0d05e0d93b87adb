"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.

La instancia `settings` se construye una sola vez al arrancar el proceso;
el motor de sincronizacion nunca la lee directamente, recibe sus valores
por parametro desde la capa de composicion (events / dependencies / CLI).
"""
import re
from typing import List, Sequence

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings

from esa_sync.shared.exceptions.domain import ConfigurationException


# Variables obligatorias: sin ellas el servicio no puede arrancar.
REQUIRED_KEYS = (
    "ESA_WEBHOOK_SECRET",
    "ESA_PRIVATE_CATEGORY_REGEX",
    "DATOCMS_FULL_ACCESS_API_TOKEN",
    "DATOCMS_POST_ITEM_ID",
    "DATOCMS_BUILD_TRIGGER_ID",
    "ESA_API_TOKEN",
    "ESA_TEAM",
)

FAILURE_POLICIES = ("continue", "abort")


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    Las credenciales de esa / DatoCMS no tienen default real: se dejan vacias
    y `validate_settings` falla al inicio si falta alguna.
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="esa -> DatoCMS sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # esa (origen)
    ESA_WEBHOOK_SECRET: str = Field(default="")
    ESA_API_TOKEN: str = Field(default="")
    ESA_TEAM: str = Field(default="")
    # Regex de categorias privadas: los posts que coinciden no se publican en el CMS
    ESA_PRIVATE_CATEGORY_REGEX: str = Field(default="")
    ESA_API_BASE_URL: str = Field(default="https://api.esa.io")

    # DatoCMS (destino)
    DATOCMS_FULL_ACCESS_API_TOKEN: str = Field(default="")
    DATOCMS_POST_ITEM_ID: str = Field(default="")
    DATOCMS_BUILD_TRIGGER_ID: str = Field(default="")

    # HTTP saliente
    HTTP_TIMEOUT_SECONDS: float = Field(default=30.0)

    # Sync masivo
    # Si True, no se dispara un deploy por post sino uno solo al final.
    SYNC_ALL_SKIP_DEPLOY: bool = Field(default=True)
    # "continue": registra el fallo y sigue; "abort": corta en el primer fallo.
    SYNC_ALL_FAILURE_POLICY: str = Field(default="continue")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    def private_category_pattern(self) -> re.Pattern:
        """Compila la regex de categorias privadas."""
        return re.compile(self.ESA_PRIVATE_CATEGORY_REGEX)

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def validate_settings(config: Settings, required_keys: Sequence[str] = REQUIRED_KEYS) -> None:
    """
    Valida que la configuracion critica este presente.

    Raises:
        ConfigurationException: Con todos los problemas encontrados, no solo el primero
    """
    errors: List[str] = []

    for key in required_keys:
        if not getattr(config, key):
            errors.append(f"env variable {key} was not set.")

    if config.ESA_PRIVATE_CATEGORY_REGEX:
        try:
            re.compile(config.ESA_PRIVATE_CATEGORY_REGEX)
        except re.error as e:
            errors.append(f"ESA_PRIVATE_CATEGORY_REGEX is not a valid regular expression: {e}")

    if config.SYNC_ALL_FAILURE_POLICY not in FAILURE_POLICIES:
        errors.append(
            f"SYNC_ALL_FAILURE_POLICY must be one of {', '.join(FAILURE_POLICIES)}."
        )

    if errors:
        raise ConfigurationException(errors)


# Instancia global de configuracion
settings = Settings()
