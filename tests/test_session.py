import pytest

from habitar.models import AccessTier, Role
from habitar.services import SessionLoader


@pytest.fixture
def loader(client):
    return SessionLoader(client)


def test_load_verified_tenant(loader, fake):
    fake.auth.add_user("tok", "u1", "ana@mail.test", "tenant")
    fake.db.seed("tenant_profiles", {"id": "u1", "status": "verified"})

    session = loader.load("tok")

    assert session.user_id == "u1"
    assert session.email == "ana@mail.test"
    assert session.role == Role.tenant
    assert session.tier == AccessTier.verified
    assert session.is_verified


def test_load_without_profile_is_basic(loader, fake):
    fake.auth.add_user("tok", "u2", "bob@mail.test", "landlord")

    session = loader.load("tok")

    assert session.tier == AccessTier.basic
    assert not session.is_verified
    assert session.profile_status is None


def test_agent_reads_realtor_profile(loader, fake):
    fake.auth.add_user("tok", "u3", "agente@mail.test", "agent")
    fake.db.seed("realtor_profiles", {"id": "u3", "status": "premium"})

    session = loader.load("tok")

    assert session.tier == AccessTier.premium
    assert session.is_verified


def test_admin_has_no_profile_table(loader, fake):
    fake.auth.add_user("tok", "u4", "admin@mail.test", "admin")

    session = loader.load("tok")

    assert session.role == Role.admin
    assert ("tenant_profiles", "select") not in fake.db.calls


def test_invalid_token(loader):
    assert loader.load("nope") is None


def test_unknown_role(loader, fake):
    fake.auth.add_user("tok", "u5", "x@mail.test", "janitor")
    assert loader.load("tok") is None


def test_missing_role(loader, fake):
    fake.auth.add_user("tok", "u6", "x@mail.test", None)
    assert loader.load("tok") is None


def test_refresh_picks_up_verification(loader, fake):
    fake.auth.add_user("tok", "u1", "ana@mail.test", "tenant")
    fake.db.seed("tenant_profiles", {"id": "u1", "status": "basic"})
    session = loader.load("tok")
    assert not session.is_verified

    fake.db.rows("tenant_profiles")[0]["status"] = "verified"
    refreshed = loader.refresh(session)

    assert refreshed.is_verified
    assert not session.is_verified
