from datetime import date, timedelta

import pytest

from habitar.errors import ValidationError
from habitar.models import Role
from habitar.services import OnboardingService, validate_onboarding
from habitar.services.onboarding import TenantOnboardingForm


def tenant_form(**overrides):
    future = (date.today() + timedelta(days=30)).isoformat()
    data = {
        "household_size": 2,
        "household_income": 4500,
        "pets": True,
        "bio": "Pareja con un gato",
        "move_in_date": future,
        "desired_move_date": future,
        "move_date_flexibility": "earliest_move",
        "max_monthly_rent": 1800,
        "desired_cities": "Austin, Round Rock ,",
        "desired_state": "TX",
        "desired_property_types": ["apartment", "house"],
        "min_bedrooms": 1,
        "min_bathrooms": 1,
        "preferred_locations": "Austin TX, 78701",
    }
    data.update(overrides)
    return data


def test_valid_tenant_form():
    form = validate_onboarding(Role.tenant, tenant_form())
    assert isinstance(form, TenantOnboardingForm)

    row = form.to_profile_row()
    assert row["desired_cities"] == ["Austin", "Round Rock"]
    assert row["preferred_locations"] == ["Austin TX", "78701"]


@pytest.mark.parametrize(
    "field,value",
    [
        ("household_size", 0),
        ("household_size", 21),
        ("max_monthly_rent", 499),
        ("min_bathrooms", 0),
        ("desired_property_types", []),
        ("desired_property_types", ["castle"]),
        ("move_date_flexibility", "whenever"),
        ("move_in_date", (date.today() - timedelta(days=1)).isoformat()),
    ],
)
def test_invalid_tenant_fields(field, value):
    with pytest.raises(ValidationError) as exc:
        validate_onboarding(Role.tenant, tenant_form(**{field: value}))
    assert any(key.startswith(field) for key in exc.value.details["errors"])


def test_landlord_form():
    form = validate_onboarding(
        Role.landlord, {"property_count": 3, "years_experience": 5, "management_type": "self"}
    )
    assert form.to_profile_row()["property_count"] == 3


def test_agent_form_requires_license():
    with pytest.raises(ValidationError) as exc:
        validate_onboarding(Role.agent, {"agency": "Acme", "years_experience": 2})
    assert "license_number" in exc.value.details["errors"]


def test_admin_has_no_onboarding():
    with pytest.raises(ValidationError):
        validate_onboarding(Role.admin, {})


def test_save_profile_upserts(client, fake):
    service = OnboardingService(client)

    service.save_profile(Role.tenant, "u1", tenant_form())
    service.save_profile(Role.tenant, "u1", tenant_form(household_size=3))

    rows = fake.db.rows("tenant_profiles")
    assert len(rows) == 1
    assert rows[0]["id"] == "u1"
    assert rows[0]["household_size"] == 3


def test_invalid_form_does_not_write(client, fake):
    with pytest.raises(ValidationError):
        OnboardingService(client).save_profile(Role.tenant, "u1", tenant_form(household_size=0))
    assert fake.db.rows("tenant_profiles") == []
