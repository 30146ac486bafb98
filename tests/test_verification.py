import pytest

from habitar.errors import NotFoundError, ValidationError
from habitar.models import AccessTier
from habitar.services import SessionLoader, VerificationService


@pytest.fixture
def service(client):
    return VerificationService(client)


def test_verify_moves_tenant_to_verified(service, client, fake):
    fake.db.seed("users", {"id": "u1", "email": "ana@mail.test", "role": "tenant"})
    fake.db.seed("tenant_profiles", {"id": "u1", "status": "basic", "is_verified": False})
    fake.auth.add_user("tok", "u1", "ana@mail.test", "tenant")

    assert SessionLoader(client).load("tok").tier == AccessTier.basic

    profile = service.verify_user("u1", "admin-1")

    assert profile["status"] == "verified"
    assert profile["is_verified"] is True
    session = SessionLoader(client).load("tok")
    assert session.tier == AccessTier.verified
    assert session.is_verified


def test_verify_uses_role_table(service, fake):
    fake.db.seed("users", {"id": "a1", "email": "agente@mail.test", "role": "agent"})
    fake.db.seed("realtor_profiles", {"id": "a1", "status": "basic"})

    service.verify_user("a1", "admin-1")

    assert fake.db.rows("realtor_profiles")[0]["status"] == "verified"


def test_unknown_user(service):
    with pytest.raises(NotFoundError):
        service.verify_user("ghost", "admin-1")


def test_user_without_profile(service, fake):
    fake.db.seed("users", {"id": "u2", "email": "bob@mail.test", "role": "landlord"})
    with pytest.raises(NotFoundError):
        service.verify_user("u2", "admin-1")


@pytest.mark.parametrize("role", ["admin", None])
def test_roles_without_profile_table(service, fake, role):
    fake.db.seed("users", {"id": "x", "email": "x@mail.test", "role": role})
    with pytest.raises(ValidationError) as exc:
        service.verify_user("x", "admin-1")
    assert exc.value.field == "role"
