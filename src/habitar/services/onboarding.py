"""
Formularios de onboarding por rol.

Los formularios se validan con pydantic antes de cualquier escritura;
los errores se traducen a ValidationError con un mensaje por campo.
"""

from datetime import date
from typing import Literal, Optional, Union

import structlog
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from habitar.config import PROPERTY_TYPES
from habitar.database import ProfileRepository, SupabaseClient
from habitar.errors import ValidationError
from habitar.models import Role

logger = structlog.get_logger()


def _split_list(value: Optional[str]) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class TenantOnboardingForm(BaseModel):
    """Datos del hogar y preferencias de alquiler."""

    household_size: int = Field(..., ge=1, le=20)
    household_income: float = Field(..., ge=0, le=1_000_000)
    pets: bool = False
    bio: str = Field("", max_length=1000)
    move_in_date: date
    desired_move_date: date
    move_date_flexibility: Literal["exact_date", "earliest_move", "anytime_30_days"]
    max_monthly_rent: float = Field(..., ge=500, le=50_000)
    desired_cities: str = Field(..., min_length=1)
    desired_state: str = Field(..., min_length=2)
    desired_zip_code: Optional[str] = None
    desired_property_types: list[str] = Field(..., min_length=1)
    min_bedrooms: int = Field(..., ge=0, le=10)
    min_bathrooms: float = Field(..., ge=0.5, le=10)
    pets_allowed: bool = False
    preferred_locations: Optional[str] = None

    @field_validator("move_in_date", "desired_move_date")
    @classmethod
    def must_be_future(cls, value: date) -> date:
        if value < date.today():
            raise ValueError("La fecha tiene que ser futura")
        return value

    @field_validator("desired_property_types")
    @classmethod
    def known_property_types(cls, value: list[str]) -> list[str]:
        unknown = [v for v in value if v not in PROPERTY_TYPES]
        if unknown:
            raise ValueError(f"Tipos de propiedad desconocidos: {', '.join(unknown)}")
        return value

    def to_profile_row(self) -> dict:
        data = self.model_dump(mode="json")
        data["desired_cities"] = _split_list(self.desired_cities)
        data["preferred_locations"] = _split_list(self.preferred_locations)
        return data


class AgentOnboardingForm(BaseModel):
    license_number: str = Field(..., min_length=1)
    agency: str = Field(..., min_length=1)
    years_experience: int = Field(..., ge=0)
    bio: Optional[str] = None

    def to_profile_row(self) -> dict:
        return self.model_dump(mode="json")


class LandlordOnboardingForm(BaseModel):
    property_count: int = Field(..., ge=1)
    years_experience: int = Field(..., ge=0)
    management_type: Literal["self", "company", "hybrid"]
    preferred_tenant_criteria: Optional[str] = None
    bio: Optional[str] = None

    def to_profile_row(self) -> dict:
        return self.model_dump(mode="json")


OnboardingForm = Union[TenantOnboardingForm, AgentOnboardingForm, LandlordOnboardingForm]

ONBOARDING_FORMS: dict[Role, type] = {
    Role.tenant: TenantOnboardingForm,
    Role.agent: AgentOnboardingForm,
    Role.landlord: LandlordOnboardingForm,
}


def validate_onboarding(role: Role, data: dict) -> OnboardingForm:
    """
    Valida el formulario del rol.

    Raises:
        ValidationError: Con los errores por campo
    """
    form_cls = ONBOARDING_FORMS.get(role)
    if form_cls is None:
        raise ValidationError(f"El rol {role.value} no tiene onboarding", field="role")
    try:
        return form_cls.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


class OnboardingService:
    """Valida y guarda el perfil del usuario."""

    def __init__(
        self,
        client: Optional[SupabaseClient] = None,
        profile_repo: Optional[ProfileRepository] = None,
    ):
        self.profile_repo = profile_repo or ProfileRepository(client)

    def save_profile(self, role: Role, user_id: str, data: dict) -> dict:
        form = validate_onboarding(role, data)
        row = self.profile_repo.upsert_profile(role, user_id, form.to_profile_row())
        logger.info("Onboarding completado", role=role.value, user_id=user_id)
        return row
