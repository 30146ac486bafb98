import pytest

from habitar.errors import NotFoundError
from habitar.models import InvitationStatus
from habitar.models.invitation import DEFAULT_INVITE_MESSAGE
from habitar.services.notifications import build_invite_payload, sanitize_value
from habitar.workflows import InvitationService
from tests.fakes import RecordingNotifier


@pytest.fixture
def service(client, notifier):
    return InvitationService(client, notifier=notifier)


async def test_send_invite_persists_once_and_notifies(service, fake, notifier):
    sent = await service.send_invite("tenant-1", "agent-1", "listing-1")

    assert sent is True
    rows = fake.db.rows("invites")
    assert len(rows) == 1
    assert rows[0]["status"] == InvitationStatus.pending.value
    assert rows[0]["message"] == DEFAULT_INVITE_MESSAGE
    assert notifier.sent == [
        {"tenant_id": "tenant-1", "sender_id": "agent-1", "listing_id": "listing-1"}
    ]


async def test_custom_message_is_kept(service, fake):
    await service.send_invite("tenant-1", "agent-1", "listing-1", "Pasá el sábado")
    assert fake.db.rows("invites")[0]["message"] == "Pasá el sábado"


async def test_webhook_failure_does_not_fail_invite(client, fake):
    service = InvitationService(client, notifier=RecordingNotifier(delivered=False))

    assert await service.send_invite("tenant-1", "agent-1", "listing-1") is True
    assert len(fake.db.rows("invites")) == 1


async def test_persistence_failure_skips_webhook(service, fake, notifier):
    fake.db.fail("invites", "insert")

    assert await service.send_invite("tenant-1", "agent-1", "listing-1") is False
    assert notifier.sent == []
    assert fake.db.rows("invites") == []


async def test_duplicate_invites_are_allowed(service, fake):
    await service.send_invite("tenant-1", "agent-1", "listing-1")
    await service.send_invite("tenant-1", "agent-1", "listing-1")
    assert len(fake.db.rows("invites")) == 2


def test_express_interest_uses_listing_owner(service, fake):
    fake.db.seed("listings", {"id": "listing-1", "owner_id": "owner-9", "address": "Calle 1"})

    invitation = service.express_interest("tenant-1", "listing-1")

    assert invitation.sender_id == "owner-9"
    assert invitation.tenant_id == "tenant-1"
    assert "Calle 1" in invitation.message
    assert invitation.id is not None


def test_express_interest_unknown_listing(service):
    with pytest.raises(NotFoundError):
        service.express_interest("tenant-1", "missing")


def test_list_for_tenant_fills_placeholders(service, fake):
    fake.db.seed(
        "invites",
        {"tenant_id": "tenant-1", "sender_id": "agent-1", "listing_id": "l1", "status": "pending"},
        {
            "tenant_id": "tenant-1",
            "sender_id": "agent-2",
            "listing_id": "l2",
            "status": "accepted",
            "sender": {"email": "agente@mail.test", "role": "agent"},
        },
        {"tenant_id": "otro", "sender_id": "agent-1", "listing_id": "l1", "status": "pending"},
    )

    invitations = service.list_for_tenant("tenant-1")

    assert len(invitations) == 2
    by_sender = {i.sender_id: i for i in invitations}
    assert by_sender["agent-1"].sender.email == "Desconocido"
    assert by_sender["agent-1"].listing.address == "Desconocida"
    assert by_sender["agent-2"].sender.email == "agente@mail.test"


def test_list_sent(service, fake):
    fake.db.seed(
        "invites",
        {"tenant_id": "t1", "sender_id": "agent-1", "listing_id": "l1", "status": "pending"},
        {"tenant_id": "t2", "sender_id": "agent-2", "listing_id": "l1", "status": "pending"},
    )
    assert [i.tenant_id for i in service.list_sent("agent-1")] == ["t1"]


def test_payload_is_sanitized():
    payload = build_invite_payload("<t1>", "s1", "l<1>")
    assert payload["tenant_id"] == "t1"
    assert payload["listing_id"] == "l1"
    assert payload["timestamp"].endswith("+00:00")
    assert sanitize_value("a<b>c") == "abc"
