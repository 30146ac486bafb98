"""
Modelo de Listing (propiedad publicada).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Listing(BaseModel):
    """Propiedad en alquiler publicada por un agente o propietario."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str = Field(..., description="UUID generado por Supabase")
    owner_id: Optional[str] = Field(None, description="FK al agente/propietario")
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_feet: Optional[int] = None
    price: Optional[float] = Field(None, description="Alquiler mensual")
    available_date: Optional[str] = None
    is_active: bool = True
    property_type: Optional[str] = None
    listing_status: Optional[str] = None
    pets_allowed: Optional[bool] = None
    featured: Optional[bool] = None
    description: Optional[str] = None
