"""
Perfiles por rol.

TenantProfile es además la entrada de los filtros del directorio
de inquilinos; el core nunca lo modifica.
"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class BaseProfile(BaseModel):
    """Campos comunes a todos los perfiles."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str = Field(..., description="Mismo UUID que el usuario de Auth")
    status: str = Field(default="incomplete", description="incomplete, basic, verified, premium")
    bio: Optional[str] = None


class TenantProfile(BaseProfile):
    """Perfil del inquilino con datos de hogar y preferencias."""

    user_email: Optional[str] = None
    move_in_date: Optional[date] = None
    household_size: Optional[int] = None
    household_income: Optional[float] = None
    pets: Optional[bool] = None
    preferred_locations: Optional[list[str]] = None
    is_pre_screened: Optional[bool] = None
    profile_image_url: Optional[str] = None
    screening_status: Optional[str] = None
    last_activity: Optional[str] = None
    contact_preferences: Optional[Any] = None

    # Preferencias de alquiler
    desired_move_date: Optional[date] = None
    move_date_flexibility: Optional[str] = None
    max_monthly_rent: Optional[float] = None
    desired_cities: Optional[list[str]] = None
    desired_state: Optional[str] = None
    desired_zip_code: Optional[str] = None
    desired_property_types: Optional[list[str]] = None
    min_bedrooms: Optional[int] = None
    min_bathrooms: Optional[float] = None
    pets_allowed: Optional[bool] = None


class LandlordProfile(BaseProfile):
    property_count: Optional[int] = None
    years_experience: Optional[int] = None
    is_verified: Optional[bool] = None
    management_type: Optional[str] = None
    preferred_tenant_criteria: Optional[str] = None


class RealtorProfile(BaseProfile):
    license_number: Optional[str] = None
    agency: Optional[str] = None
    years_experience: Optional[int] = None
