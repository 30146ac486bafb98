"""
Modelo de Visita (PropertyShowing)

Una solicitud de visita presencial o virtual de un inquilino
a un listing, con su ciclo de vida de estados.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ShowingStatus(str, Enum):
    requested = "requested"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"
    rescheduled = "rescheduled"


TERMINAL_STATUSES = frozenset({ShowingStatus.completed, ShowingStatus.cancelled})

# Estado actual -> estados a los que puede pasar
SHOWING_TRANSITIONS: dict[ShowingStatus, frozenset[ShowingStatus]] = {
    ShowingStatus.requested: frozenset(
        {ShowingStatus.confirmed, ShowingStatus.cancelled, ShowingStatus.rescheduled}
    ),
    ShowingStatus.confirmed: frozenset(
        {ShowingStatus.completed, ShowingStatus.cancelled, ShowingStatus.rescheduled}
    ),
    ShowingStatus.rescheduled: frozenset(
        {ShowingStatus.confirmed, ShowingStatus.cancelled}
    ),
    ShowingStatus.completed: frozenset(),
    ShowingStatus.cancelled: frozenset(),
}


class ShowingListing(BaseModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


class ShowingTenant(BaseModel):
    email: Optional[str] = None


class PropertyShowing(BaseModel):
    """Visita a una propiedad."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = Field(None, description="UUID generado por Supabase")
    listing_id: str = Field(..., description="FK al listing")
    tenant_id: str = Field(..., description="FK al inquilino")
    requested_date: str = Field(..., description="Fecha pedida (YYYY-MM-DD)")
    requested_time: str = Field(..., description="Hora pedida (HH:MM)")
    actual_date: Optional[str] = Field(None, description="Fecha acordada")
    actual_time: Optional[str] = Field(None, description="Hora acordada")
    status: ShowingStatus = Field(default=ShowingStatus.requested)
    message: Optional[str] = Field(None, description="Mensaje del inquilino")
    notes: Optional[str] = Field(None, description="Notas del anfitrión")
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())

    listing: Optional[ShowingListing] = None
    tenant: Optional[ShowingTenant] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para inserción en Supabase."""
        return self.model_dump(
            mode="json",
            exclude={"id", "created_at", "updated_at", "listing", "tenant"},
        )
