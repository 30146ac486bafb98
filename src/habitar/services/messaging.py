"""
Mensajería entre inquilinos, agentes y propietarios.

Capa fina de CRUD sobre message_threads, thread_participants y
messages. La lectura es por consulta; no hay suscripción en tiempo real.
"""

from typing import Optional

import structlog

from habitar.database import MessagingRepository, SupabaseClient, UserRepository
from habitar.errors import NotFoundError, ValidationError
from habitar.models import Message, MessageThread, ThreadCreateParams

logger = structlog.get_logger()


class MessagingService:
    """Hilos y mensajes de un usuario."""

    def __init__(
        self,
        client: Optional[SupabaseClient] = None,
        repo: Optional[MessagingRepository] = None,
        user_repo: Optional[UserRepository] = None,
    ):
        self.repo = repo or MessagingRepository(client)
        self.user_repo = user_repo or UserRepository(self.repo.client)

    def list_threads(self, user_id: str) -> list[MessageThread]:
        """Hilos del usuario con el último mensaje y los no leídos."""
        thread_ids = self.repo.get_thread_ids_for_user(user_id)
        threads = []
        for row in self.repo.get_threads(thread_ids):
            last = self.repo.get_last_message(row["id"])
            threads.append(
                MessageThread.model_validate(
                    {
                        **row,
                        "participants": row.get("participants") or [],
                        "last_message": last,
                        "unread_count": self.repo.count_unread(row["id"], user_id),
                    }
                )
            )
        return threads

    def _require_participant(self, thread_id: str, user_id: str) -> None:
        # Un hilo del que no se participa se reporta como inexistente
        if not self.repo.is_participant(thread_id, user_id):
            logger.warning("Acceso a hilo ajeno", thread_id=thread_id, user_id=user_id)
            raise NotFoundError("Hilo", thread_id)

    def get_thread_messages(self, thread_id: str, reader_id: str) -> list[Message]:
        """Mensajes en orden cronológico; marca como leídos los ajenos."""
        self._require_participant(thread_id, reader_id)
        messages = [Message.model_validate(m) for m in self.repo.get_messages(thread_id)]
        self.repo.mark_read(thread_id, reader_id)
        return messages

    def send_message(self, thread_id: str, sender_id: str, content: str) -> Message:
        """
        Raises:
            ValidationError: Si el mensaje está vacío
            NotFoundError: Si el remitente no participa del hilo
        """
        content = (content or "").strip()
        if not content:
            raise ValidationError("El mensaje no puede estar vacío", field="content")
        self._require_participant(thread_id, sender_id)

        row = self.repo.create_message(
            {"thread_id": thread_id, "sender_id": sender_id, "content": content}
        )
        self.repo.touch_thread(thread_id)
        logger.info("Mensaje enviado", thread_id=thread_id, sender_id=sender_id)

        sender = self.user_repo.get_by_id(sender_id)
        return Message.model_validate({**row, "sender": sender})

    def create_thread(
        self, creator_id: str, creator_role: str, params: ThreadCreateParams
    ) -> str:
        """
        Crea un hilo con sus participantes.

        El creador se agrega como participante si no vino en la lista.

        Returns:
            ID del hilo creado
        """
        thread = self.repo.create_thread(
            {
                "title": params.title,
                "thread_type": params.thread_type,
                "listing_id": params.listing_id,
                "property_showing_id": params.property_showing_id,
            }
        )
        thread_id = thread["id"]

        participants = [p.model_dump() for p in params.participants]
        if not any(p["user_id"] == creator_id for p in participants):
            participants.insert(0, {"user_id": creator_id, "role": creator_role})

        self.repo.add_participants(
            [{"thread_id": thread_id, **p} for p in participants]
        )

        if params.initial_message:
            self.send_message(thread_id, creator_id, params.initial_message)

        logger.info(
            "Hilo creado",
            thread_id=thread_id,
            thread_type=params.thread_type,
            participants=len(participants),
        )
        return thread_id
