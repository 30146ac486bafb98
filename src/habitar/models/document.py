"""
Modelo de documento de postulación subido por un inquilino.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VerificationStatus(str, Enum):
    pending = "pending"
    verified = "verified"
    rejected = "rejected"


class ApplicationDocument(BaseModel):
    """Fila de application_documents."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: Optional[str] = Field(None, description="UUID generado por Supabase")
    tenant_id: str = Field(..., description="FK al inquilino")
    document_type: str = Field(..., description="Tipo de documento")
    file_name: str = Field(..., description="Nombre original del archivo")
    file_url: str = Field(..., description="bucket/path del objeto")
    file_size: Optional[int] = Field(None, description="Tamaño en bytes")
    storage_path: Optional[str] = None
    bucket_id: Optional[str] = None
    verification_status: VerificationStatus = Field(default=VerificationStatus.pending)
    upload_date: str = Field(default_factory=lambda: datetime.utcnow().isoformat())

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para inserción en Supabase."""
        return self.model_dump(mode="json", exclude={"id", "upload_date"})
