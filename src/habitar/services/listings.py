"""
Alta de propiedades por agentes y propietarios.
"""

from datetime import date
from typing import Literal, Optional

import structlog
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from habitar.database import ListingRepository, SupabaseClient
from habitar.errors import ValidationError
from habitar.models import Listing

logger = structlog.get_logger()


class ListingForm(BaseModel):
    """Formulario de publicación de una propiedad."""

    property_type: Literal["house", "townhouse_condo", "apartment"]
    listing_status: Literal["active", "coming_soon"] = "active"

    address: str = Field(..., min_length=5)
    city: str = Field(..., min_length=2)
    state: str = Field(..., min_length=2)
    zip: str = Field(..., min_length=5)

    bedrooms: int = Field(..., ge=0, le=20)
    full_baths: int = Field(1, ge=0, le=20)
    three_quarter_baths: int = Field(0, ge=0, le=20)
    half_baths: int = Field(0, ge=0, le=20)
    square_feet: int = Field(..., ge=100, le=50_000)

    price: float = Field(..., ge=100, le=100_000)
    available_date: date
    pets_allowed: bool = False

    description: Optional[str] = Field(None, max_length=2000)

    def to_db_dict(self, owner_id: str) -> dict:
        data = self.model_dump(mode="json")
        data["description"] = data["description"] or None
        # Toda publicación nueva arranca activa y destacada
        return {**data, "owner_id": owner_id, "is_active": True, "featured": True}


class ListingService:
    def __init__(
        self,
        client: Optional[SupabaseClient] = None,
        repo: Optional[ListingRepository] = None,
    ):
        self.repo = repo or ListingRepository(client)

    def create_listing(self, owner_id: str, data: dict) -> Listing:
        """
        Valida y publica una propiedad a nombre de owner_id.

        Raises:
            ValidationError: Con los errores por campo, antes de escribir
            PersistenceError: Si falla el insert
        """
        try:
            form = ListingForm.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        row = self.repo.create(form.to_db_dict(owner_id))
        logger.info("Propiedad publicada", owner_id=owner_id, listing_id=row.get("id"))
        return Listing.model_validate(row)
