import pytest

from habitar.errors import PersistenceError, ValidationError
from habitar.services import ListingService


@pytest.fixture
def service(client):
    return ListingService(client)


def listing_data(**overrides):
    data = {
        "property_type": "apartment",
        "address": "Av. Corrientes 1234",
        "city": "Austin",
        "state": "TX",
        "zip": "78701",
        "bedrooms": 2,
        "full_baths": 1,
        "square_feet": 850,
        "price": 1800,
        "available_date": "2026-12-01",
        "pets_allowed": True,
    }
    return {**data, **overrides}


def test_create_listing(service, fake):
    listing = service.create_listing("agent-1", listing_data(description=""))

    assert listing.owner_id == "agent-1"
    assert listing.price == 1800
    assert listing.listing_status == "active"

    row = fake.db.rows("listings")[0]
    assert row["is_active"] is True
    assert row["featured"] is True
    assert row["available_date"] == "2026-12-01"
    assert row["description"] is None
    assert row["three_quarter_baths"] == 0


def test_new_listing_shows_in_directory(service, fake):
    service.create_listing("agent-1", listing_data())
    active = fake.db.rows("listings")
    assert service.repo.get_active()[0]["id"] == active[0]["id"]


def test_invalid_listing_is_not_written(service, fake):
    with pytest.raises(ValidationError) as exc:
        service.create_listing(
            "agent-1", listing_data(property_type="castle", zip="12", price=50)
        )

    assert set(exc.value.details["errors"]) == {"property_type", "zip", "price"}
    assert fake.db.rows("listings") == []


def test_rented_status_is_not_allowed_on_create(service):
    with pytest.raises(ValidationError):
        service.create_listing("agent-1", listing_data(listing_status="rented"))


def test_insert_failure(service, fake):
    fake.db.fail("listings", "insert")
    with pytest.raises(PersistenceError):
        service.create_listing("agent-1", listing_data())
