"""
Flujo de invitaciones a inquilinos.

Pasos, siempre en secuencia:
1. Persistir la invitación en estado pending (si falla, se corta acá).
2. Notificar al webhook de automatización (best-effort, sin reintentos).

El resultado refleja únicamente el paso 1.
"""

from typing import Optional

import structlog

from habitar.database import InvitationRepository, ListingRepository, SupabaseClient
from habitar.errors import NotFoundError, PersistenceError
from habitar.models import Invitation, InvitationStatus
from habitar.models.invitation import (
    DEFAULT_INVITE_MESSAGE,
    InvitationListing,
    InvitationSender,
)
from habitar.services.notifications import WebhookNotifier

logger = structlog.get_logger()


class InvitationService:
    """Orquesta el alta de invitaciones y su notificación."""

    def __init__(
        self,
        client: Optional[SupabaseClient] = None,
        repo: Optional[InvitationRepository] = None,
        listing_repo: Optional[ListingRepository] = None,
        notifier: Optional[WebhookNotifier] = None,
    ):
        self.repo = repo or InvitationRepository(client)
        self.listing_repo = listing_repo or ListingRepository(self.repo.client)
        self.notifier = notifier or WebhookNotifier()

    def create_invite_record(
        self,
        tenant_id: str,
        sender_id: str,
        listing_id: str,
        message: Optional[str] = None,
    ) -> Invitation:
        """
        Inserta la invitación en estado pending.

        No hay control de duplicados: el mismo (remitente, inquilino,
        listing) puede invitarse más de una vez.

        Raises:
            PersistenceError: Si el backend rechaza el insert
        """
        invitation = Invitation(
            tenant_id=tenant_id,
            sender_id=sender_id,
            listing_id=listing_id,
            message=message or DEFAULT_INVITE_MESSAGE,
            status=InvitationStatus.pending,
        )
        row = self.repo.create(invitation.to_db_dict())
        return Invitation.model_validate({**invitation.model_dump(), **row})

    async def send_invite(
        self,
        tenant_id: str,
        sender_id: str,
        listing_id: str,
        message: Optional[str] = None,
    ) -> bool:
        """
        Invita a un inquilino a un listing y notifica al webhook.

        Returns:
            True si la invitación quedó persistida (aunque falle la notificación)
        """
        try:
            self.create_invite_record(tenant_id, sender_id, listing_id, message)
        except PersistenceError as e:
            logger.error(
                "Error enviando invitación",
                tenant_id=tenant_id,
                sender_id=sender_id,
                listing_id=listing_id,
                error=e.message,
            )
            return False

        delivered = await self.notifier.notify_invite(tenant_id, sender_id, listing_id)
        logger.info(
            "Invitación enviada",
            tenant_id=tenant_id,
            listing_id=listing_id,
            notified=delivered,
        )
        return True

    def express_interest(self, tenant_id: str, listing_id: str) -> Invitation:
        """
        El inquilino muestra interés: se crea una invitación cuyo
        remitente es el dueño del listing.

        Raises:
            NotFoundError: Si el listing no existe
            PersistenceError: Si el backend rechaza el insert
        """
        listing = self.listing_repo.get_by_id(listing_id)
        if not listing:
            raise NotFoundError("Listing", listing_id)

        address = listing.get("address") or "dirección desconocida"
        return self.create_invite_record(
            tenant_id=tenant_id,
            sender_id=listing["owner_id"],
            listing_id=listing_id,
            message=f"El inquilino mostró interés en tu propiedad en {address}",
        )

    def list_for_tenant(self, tenant_id: str) -> list[Invitation]:
        """Invitaciones recibidas; los joins faltantes se completan con placeholders."""
        invitations = []
        for row in self.repo.get_by_tenant(tenant_id):
            invitations.append(
                Invitation.model_validate(
                    {
                        **row,
                        "sender": row.get("sender") or InvitationSender(),
                        "listing": row.get("listing") or InvitationListing(),
                    }
                )
            )
        return invitations

    def list_sent(self, sender_id: str) -> list[Invitation]:
        return [Invitation.model_validate(row) for row in self.repo.get_by_sender(sender_id)]
