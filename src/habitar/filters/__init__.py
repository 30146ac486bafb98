"""
Filtros en memoria para directorios de inquilinos y propiedades.
"""

from habitar.filters.tenants import (
    TenantFilterCriteria,
    apply_tenant_filters,
    filter_tenants_by_query,
    filter_tenants_by_income,
    filter_tenants_by_move_in_date,
    filter_tenants_by_location,
    filter_tenants_by_household_size,
    filter_tenants_by_pets,
)
from habitar.filters.listings import (
    ListingFilterCriteria,
    apply_listing_filters,
    unique_cities,
)

__all__ = [
    # Inquilinos
    "TenantFilterCriteria",
    "apply_tenant_filters",
    "filter_tenants_by_query",
    "filter_tenants_by_income",
    "filter_tenants_by_move_in_date",
    "filter_tenants_by_location",
    "filter_tenants_by_household_size",
    "filter_tenants_by_pets",
    # Propiedades
    "ListingFilterCriteria",
    "apply_listing_filters",
    "unique_cities",
]
