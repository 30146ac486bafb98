"""
Filtros del directorio de inquilinos.

Funciones puras sobre colecciones en memoria. Cada filtro es
independiente; combinados se comportan como un AND sin importar
el orden de aplicación.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal, Optional, Sequence, Union

from habitar.models import TenantProfile

PetsFilter = Literal["any", "yes", "no"]

DEFAULT_INCOME_RANGE: tuple[float, float] = (0, 20000)


def _matches_locations(tenant: TenantProfile, query: str) -> bool:
    return any(query in location.lower() for location in tenant.preferred_locations or [])


def filter_tenants_by_query(
    tenants: Sequence[TenantProfile], search_query: Optional[str]
) -> list[TenantProfile]:
    """Búsqueda libre sobre email, ubicaciones preferidas y bio."""
    if not search_query:
        return list(tenants)

    query = search_query.lower()
    return [
        tenant
        for tenant in tenants
        if (tenant.user_email and query in tenant.user_email.lower())
        or _matches_locations(tenant, query)
        or (tenant.bio and query in tenant.bio.lower())
    ]


def filter_tenants_by_income(
    tenants: Sequence[TenantProfile], income_range: tuple[float, float]
) -> list[TenantProfile]:
    """
    Rango de ingresos inclusivo.

    Los inquilinos sin ingreso declarado pasan siempre.
    """
    low, high = income_range
    return [
        tenant
        for tenant in tenants
        if tenant.household_income is None or low <= tenant.household_income <= high
    ]


def filter_tenants_by_move_in_date(
    tenants: Sequence[TenantProfile],
    selected_date: Optional[Union[date, datetime]],
    is_filtering_by_date: bool,
) -> list[TenantProfile]:
    """
    Fecha de mudanza igual o posterior a la seleccionada (desde el inicio del día).

    Con el filtro activo, los inquilinos sin fecha quedan afuera.
    """
    if not is_filtering_by_date or selected_date is None:
        return list(tenants)

    if isinstance(selected_date, datetime):
        selected_date = selected_date.date()
    return [
        tenant
        for tenant in tenants
        if tenant.move_in_date is not None and tenant.move_in_date >= selected_date
    ]


def filter_tenants_by_location(
    tenants: Sequence[TenantProfile], location_query: Optional[str]
) -> list[TenantProfile]:
    """Substring sobre ciudad/estado/zip de las ubicaciones preferidas."""
    if not location_query:
        return list(tenants)

    query = location_query.lower()
    return [tenant for tenant in tenants if _matches_locations(tenant, query)]


def filter_tenants_by_household_size(
    tenants: Sequence[TenantProfile], household_size: Optional[int]
) -> list[TenantProfile]:
    if not household_size:
        return list(tenants)
    return [tenant for tenant in tenants if tenant.household_size == household_size]


def filter_tenants_by_pets(
    tenants: Sequence[TenantProfile], pets_filter: PetsFilter
) -> list[TenantProfile]:
    if pets_filter == "any":
        return list(tenants)
    has_pets = pets_filter == "yes"
    return [tenant for tenant in tenants if tenant.pets is has_pets]


@dataclass
class TenantFilterCriteria:
    """Estado de los filtros del directorio."""

    search_query: str = ""
    income_range: tuple[float, float] = DEFAULT_INCOME_RANGE
    selected_date: Optional[date] = None
    is_filtering_by_date: bool = False
    location_query: str = ""
    pets: PetsFilter = "any"
    household_size: Optional[int] = None

    def cleared(self) -> "TenantFilterCriteria":
        """Criterios por defecto, conservando la búsqueda libre."""
        return TenantFilterCriteria(search_query=self.search_query)


def apply_tenant_filters(
    tenants: Sequence[TenantProfile], criteria: TenantFilterCriteria
) -> list[TenantProfile]:
    """Aplica todos los filtros activos (AND lógico)."""
    result = filter_tenants_by_query(tenants, criteria.search_query)
    result = filter_tenants_by_income(result, criteria.income_range)
    result = filter_tenants_by_move_in_date(
        result, criteria.selected_date, criteria.is_filtering_by_date
    )
    result = filter_tenants_by_location(result, criteria.location_query)
    result = filter_tenants_by_pets(result, criteria.pets)
    result = filter_tenants_by_household_size(result, criteria.household_size)
    return result
