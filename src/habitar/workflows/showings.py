"""
Flujo de visitas a propiedades.

requested -> confirmed -> completed, con cancelled desde requested o
confirmed y el desvío requested|confirmed -> rescheduled -> confirmed.
completed y cancelled son terminales.

Cada operación que modifica una visita vuelve a leer la lista
visible para la sesión en lugar de actualizar un estado local.
"""

from typing import Optional

import structlog

from habitar.config import get_settings
from habitar.database import ListingRepository, ShowingRepository, SupabaseClient
from habitar.errors import InvalidTransition, NotFoundError
from habitar.models import PropertyShowing, Role, ShowingStatus, ThreadCreateParams, UserSession
from habitar.models.messaging import NewParticipant
from habitar.models.showing import SHOWING_TRANSITIONS
from habitar.services.messaging import MessagingService

logger = structlog.get_logger()


def can_transition(current: ShowingStatus, new: ShowingStatus) -> bool:
    """Repetir el estado actual siempre vale (actualiza solo las notas)."""
    return new == current or new in SHOWING_TRANSITIONS[current]


class ShowingService:
    """Alta, cambio de estado y reprogramación de visitas."""

    def __init__(
        self,
        client: Optional[SupabaseClient] = None,
        repo: Optional[ShowingRepository] = None,
        listing_repo: Optional[ListingRepository] = None,
        messaging: Optional[MessagingService] = None,
        enforce_transitions: Optional[bool] = None,
    ):
        self.repo = repo or ShowingRepository(client)
        self.listing_repo = listing_repo or ListingRepository(self.repo.client)
        self.messaging = messaging or MessagingService(self.repo.client)
        if enforce_transitions is None:
            enforce_transitions = get_settings().enforce_showing_transitions
        self.enforce_transitions = enforce_transitions

    def list_showings(self, session: UserSession) -> list[PropertyShowing]:
        """
        Visitas visibles para la sesión.

        El inquilino ve las que pidió, el agente/propietario las de sus
        propiedades y el admin todas.
        """
        if session.role == Role.admin:
            rows = self.repo.get_all()
        elif session.role == Role.tenant:
            rows = self.repo.get_by_tenant(session.user_id)
        else:
            owned = [listing["id"] for listing in self.listing_repo.get_by_owner(session.user_id)]
            rows = self.repo.get_by_listings(owned)
        return [PropertyShowing.model_validate(row) for row in rows]

    def _owns(self, session: UserSession, row: dict) -> bool:
        if session.role == Role.admin or row.get("tenant_id") == session.user_id:
            return True
        listing = self.listing_repo.get_by_id(row.get("listing_id"))
        return bool(listing) and listing.get("owner_id") == session.user_id

    def _get(self, session: UserSession, showing_id: str) -> PropertyShowing:
        # Una visita ajena se reporta igual que una inexistente
        row = self.repo.get_by_id(showing_id)
        if row is None or not self._owns(session, row):
            raise NotFoundError("Visita", showing_id)
        return PropertyShowing.model_validate(row)

    def _check_transition(self, showing: PropertyShowing, new_status: ShowingStatus) -> None:
        if self.enforce_transitions and not can_transition(showing.status, new_status):
            logger.warning(
                "Transición de visita rechazada",
                showing_id=showing.id,
                current=showing.status.value,
                requested=new_status.value,
            )
            raise InvalidTransition(showing.status.value, new_status.value)

    def request_showing(
        self,
        tenant_id: str,
        listing_id: str,
        requested_date: str,
        requested_time: str,
        message: Optional[str] = None,
    ) -> PropertyShowing:
        """
        Crea la visita en estado requested y abre un hilo con el dueño.

        Raises:
            NotFoundError: Si el listing no existe
            PersistenceError: Si falla el insert de la visita o del hilo
        """
        listing = self.listing_repo.get_by_id(listing_id)
        if not listing:
            raise NotFoundError("Listing", listing_id)

        note = (message or "").strip() or None
        showing = PropertyShowing(
            listing_id=listing_id,
            tenant_id=tenant_id,
            requested_date=requested_date,
            requested_time=requested_time,
            message=note,
            status=ShowingStatus.requested,
        )
        row = self.repo.create(showing.to_db_dict())
        created = PropertyShowing.model_validate({**showing.model_dump(), **row})

        initial = f"Me gustaría coordinar una visita el {requested_date} a las {requested_time}."
        if note:
            initial = f"{initial}\n\n{note}"
        self.messaging.create_thread(
            creator_id=tenant_id,
            creator_role=Role.tenant.value,
            params=ThreadCreateParams(
                title=f"Pedido de visita: {listing.get('address')}, {listing.get('city')}",
                thread_type="showing",
                listing_id=listing_id,
                property_showing_id=created.id,
                participants=[
                    NewParticipant(user_id=listing["owner_id"], role=Role.landlord.value)
                ],
                initial_message=initial,
            ),
        )
        return created

    def update_status(
        self,
        session: UserSession,
        showing_id: str,
        new_status: ShowingStatus,
        notes: Optional[str] = None,
    ) -> list[PropertyShowing]:
        """
        Cambia el estado de una visita y opcionalmente sus notas.

        Raises:
            InvalidTransition: Si la transición no está permitida
            NotFoundError: Si la visita no existe o no es de la sesión
            PersistenceError: Si falla el update
        """
        new_status = ShowingStatus(new_status)
        self._check_transition(self._get(session, showing_id), new_status)

        self.repo.update(showing_id, {"status": new_status.value, "notes": notes or None})
        logger.info("Estado de visita actualizado", showing_id=showing_id, status=new_status.value)
        return self.list_showings(session)

    def reschedule(
        self, session: UserSession, showing_id: str, new_date: str, new_time: str
    ) -> list[PropertyShowing]:
        """
        Reprograma la visita.

        Guarda la nueva fecha/hora en actual_date/actual_time y deja la
        visita en confirmed (no en rescheduled): la reprogramación se
        considera ya acordada.
        """
        self._check_transition(self._get(session, showing_id), ShowingStatus.confirmed)

        self.repo.update(
            showing_id,
            {
                "actual_date": new_date,
                "actual_time": new_time,
                "status": ShowingStatus.confirmed.value,
            },
        )
        logger.info(
            "Visita reprogramada",
            showing_id=showing_id,
            actual_date=new_date,
            actual_time=new_time,
        )
        return self.list_showings(session)
