"""
Filtros del directorio de propiedades (vista del inquilino).
"""

from dataclasses import dataclass
from typing import Sequence

from habitar.models import Listing

DEFAULT_PRICE_RANGE: tuple[float, float] = (0, 10000)


@dataclass
class ListingFilterCriteria:
    search_query: str = ""
    price_range: tuple[float, float] = DEFAULT_PRICE_RANGE
    bedrooms: str = "any"
    property_type: str = "any"
    city: str = "any"


def _matches_search(listing: Listing, query: str) -> bool:
    if not query:
        return True
    query = query.lower()
    return any(
        field and query in field.lower()
        for field in (listing.address, listing.city, listing.description)
    )


def _matches_price(listing: Listing, price_range: tuple[float, float]) -> bool:
    # Un listing sin precio no entra en ningún rango
    if not listing.price:
        return False
    low, high = price_range
    return low <= listing.price <= high


def listing_matches(listing: Listing, criteria: ListingFilterCriteria) -> bool:
    return (
        listing.is_active
        and _matches_search(listing, criteria.search_query)
        and _matches_price(listing, criteria.price_range)
        and (criteria.bedrooms == "any" or listing.bedrooms == int(criteria.bedrooms))
        and (criteria.property_type == "any" or listing.property_type == criteria.property_type)
        and (criteria.city == "any" or listing.city == criteria.city)
    )


def apply_listing_filters(
    listings: Sequence[Listing], criteria: ListingFilterCriteria
) -> list[Listing]:
    return [listing for listing in listings if listing_matches(listing, criteria)]


def unique_cities(listings: Sequence[Listing]) -> list[str]:
    """Ciudades distintas en orden de aparición."""
    return list(dict.fromkeys(listing.city for listing in listings if listing.city))
