import itertools
from datetime import date, datetime

import pytest

from habitar.filters import (
    ListingFilterCriteria,
    TenantFilterCriteria,
    apply_listing_filters,
    apply_tenant_filters,
    filter_tenants_by_household_size,
    filter_tenants_by_income,
    filter_tenants_by_location,
    filter_tenants_by_move_in_date,
    filter_tenants_by_pets,
    filter_tenants_by_query,
    unique_cities,
)
from habitar.models import Listing, TenantProfile


@pytest.fixture
def tenants():
    return [
        TenantProfile(
            id="t1",
            user_email="ana@mail.test",
            household_income=3000,
            move_in_date=date(2026, 11, 1),
            preferred_locations=["Austin, TX 78701"],
            pets=True,
            household_size=2,
            bio="Busco algo tranquilo",
        ),
        TenantProfile(
            id="t2",
            user_email="bruno@mail.test",
            household_income=None,
            move_in_date=None,
            preferred_locations=["Dallas, TX"],
            pets=False,
            household_size=1,
        ),
        TenantProfile(
            id="t3",
            user_email="carla@mail.test",
            household_income=8000,
            move_in_date=date(2027, 1, 15),
            preferred_locations=None,
            pets=None,
            household_size=4,
        ),
    ]


def ids(profiles):
    return [p.id for p in profiles]


def test_query_matches_email_location_and_bio(tenants):
    assert ids(filter_tenants_by_query(tenants, "BRUNO")) == ["t2"]
    assert ids(filter_tenants_by_query(tenants, "austin")) == ["t1"]
    assert ids(filter_tenants_by_query(tenants, "tranquilo")) == ["t1"]
    assert ids(filter_tenants_by_query(tenants, "")) == ["t1", "t2", "t3"]


def test_income_is_inclusive_and_null_passes(tenants):
    assert ids(filter_tenants_by_income(tenants, (3000, 5000))) == ["t1", "t2"]
    assert ids(filter_tenants_by_income(tenants, (3001, 7999))) == ["t2"]


def test_move_in_date_only_when_active(tenants):
    assert ids(filter_tenants_by_move_in_date(tenants, date(2026, 12, 1), False)) == [
        "t1",
        "t2",
        "t3",
    ]
    assert ids(filter_tenants_by_move_in_date(tenants, date(2026, 11, 1), True)) == ["t1", "t3"]


def test_move_in_date_uses_start_of_day(tenants):
    selected = datetime(2026, 11, 1, 18, 30)
    assert ids(filter_tenants_by_move_in_date(tenants, selected, True)) == ["t1", "t3"]


def test_location_household_and_pets(tenants):
    assert ids(filter_tenants_by_location(tenants, "tx")) == ["t1", "t2"]
    assert ids(filter_tenants_by_location(tenants, "78701")) == ["t1"]
    assert ids(filter_tenants_by_household_size(tenants, 4)) == ["t3"]
    assert ids(filter_tenants_by_household_size(tenants, None)) == ["t1", "t2", "t3"]
    assert ids(filter_tenants_by_pets(tenants, "yes")) == ["t1"]
    assert ids(filter_tenants_by_pets(tenants, "no")) == ["t2"]
    assert ids(filter_tenants_by_pets(tenants, "any")) == ["t1", "t2", "t3"]


def test_filters_do_not_mutate_input(tenants):
    original = list(tenants)
    filter_tenants_by_pets(tenants, "yes")
    assert tenants == original


def test_filters_commute(tenants):
    steps = [
        lambda ts: filter_tenants_by_query(ts, "mail"),
        lambda ts: filter_tenants_by_income(ts, (0, 5000)),
        lambda ts: filter_tenants_by_location(ts, "tx"),
        lambda ts: filter_tenants_by_pets(ts, "yes"),
    ]
    results = set()
    for order in itertools.permutations(steps):
        current = tenants
        for step in order:
            current = step(current)
        results.add(tuple(ids(current)))
    assert results == {("t1",)}


def test_apply_tenant_filters_and_cleared(tenants):
    criteria = TenantFilterCriteria(
        search_query="mail",
        income_range=(0, 10000),
        selected_date=date(2026, 10, 1),
        is_filtering_by_date=True,
        pets="any",
    )
    assert ids(apply_tenant_filters(tenants, criteria)) == ["t1", "t3"]

    cleared = criteria.cleared()
    assert cleared.search_query == "mail"
    assert not cleared.is_filtering_by_date
    assert ids(apply_tenant_filters(tenants, cleared)) == ["t1", "t2", "t3"]


@pytest.fixture
def listings():
    return [
        Listing(id="l1", address="Calle 1", city="Austin", price=1500, bedrooms=2,
                property_type="apartment", is_active=True),
        Listing(id="l2", address="Calle 2", city="Dallas", price=None, bedrooms=3,
                property_type="house", is_active=True),
        Listing(id="l3", address="Calle 3", city="Austin", price=2500, bedrooms=3,
                property_type="house", is_active=False),
        Listing(id="l4", address="Calle 4", city="Houston", price=2200, bedrooms=3,
                property_type="house", is_active=True, description="Con patio"),
    ]


def test_listing_filters(listings):
    assert ids(apply_listing_filters(listings, ListingFilterCriteria())) == ["l1", "l4"]
    assert ids(apply_listing_filters(listings, ListingFilterCriteria(bedrooms="3"))) == ["l4"]
    assert ids(apply_listing_filters(listings, ListingFilterCriteria(search_query="patio"))) == ["l4"]
    assert ids(apply_listing_filters(listings, ListingFilterCriteria(city="Austin"))) == ["l1"]
    assert ids(
        apply_listing_filters(listings, ListingFilterCriteria(price_range=(2000, 3000)))
    ) == ["l4"]


def test_unique_cities_keeps_first_appearance(listings):
    assert unique_cities(listings) == ["Austin", "Dallas", "Houston"]
