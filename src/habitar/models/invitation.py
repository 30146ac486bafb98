"""
Modelo de Invitación

Registro creado por un agente/propietario/admin que invita
a un inquilino a conocer una propiedad.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_INVITE_MESSAGE = "Me gustaría invitarte a conocer esta propiedad."


class InvitationStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"


class InvitationSender(BaseModel):
    email: str = "Desconocido"
    role: str = "unknown"


class InvitationListing(BaseModel):
    address: Optional[str] = "Desconocida"
    city: Optional[str] = "Desconocida"
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    price: Optional[float] = None


class Invitation(BaseModel):
    """Invitación de un remitente a un inquilino para un listing."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = Field(None, description="UUID generado por Supabase")
    sender_id: str = Field(..., description="FK al usuario que invita")
    tenant_id: str = Field(..., description="FK al inquilino invitado")
    listing_id: str = Field(..., description="FK al listing")
    message: Optional[str] = Field(DEFAULT_INVITE_MESSAGE, description="Mensaje al inquilino")
    status: InvitationStatus = Field(default=InvitationStatus.pending)
    created_at: str = Field(
        default_factory=lambda: datetime.utcnow().isoformat(),
        description="Fecha de creación",
    )

    # Joins opcionales (solo lectura)
    sender: Optional[InvitationSender] = None
    listing: Optional[InvitationListing] = None

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para inserción en Supabase."""
        return self.model_dump(
            mode="json", exclude={"id", "created_at", "sender", "listing"}
        )
