"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Encontrar la raíz del proyecto (donde está el .env)
# config.py -> habitar/ -> src/ -> habitar (project root)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: str = Field(..., description="URL del proyecto Supabase")
    supabase_key: str = Field(..., description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para operaciones admin"
    )

    # Webhook de automatización (notificación de invitaciones)
    webhook_url: str = Field(
        "https://hook.make.com/example-webhook-id",
        description="URL del webhook externo que recibe las invitaciones",
    )
    app_version: str = Field("1.0.0", description="Versión enviada en X-App-Version")

    # Storage
    documents_bucket: str = Field(
        "tenant-documents", description="Bucket para documentos de inquilinos"
    )
    max_upload_bytes: int = Field(
        10 * 1024 * 1024, gt=0, description="Tamaño máximo de archivo (10 MB)"
    )

    # Acceso
    default_fallback_path: str = Field(
        "/auth", description="Ruta de redirección cuando el rol no está permitido"
    )

    # Visitas
    enforce_showing_transitions: bool = Field(
        True,
        description="Validar transiciones de estado de visitas (False = sobrescritura libre)",
    )

    # Web
    web_host: str = Field("0.0.0.0", description="Host de escucha HTTP")
    web_port: int = Field(8080, description="Puerto de escucha HTTP")

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Constantes del sistema
DOCUMENT_TYPES = [
    "id_document",
    "proof_of_income",
    "bank_statement",
    "employment_letter",
    "reference_letter",
    "credit_report",
    "other",
]

PROPERTY_TYPES = ["house", "townhouse_condo", "apartment"]

THREAD_TYPES = ["general", "showing", "application", "transaction"]
