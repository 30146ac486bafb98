"""
Repositorios para operaciones CRUD en Supabase.

Cada repositorio maneja una tabla/entidad específica.
Los errores de PostgREST se traducen a PersistenceError en este borde.
"""

from datetime import datetime
from typing import Optional

import structlog
from postgrest.exceptions import APIError

from habitar.database.supabase_client import get_supabase_client, SupabaseClient
from habitar.errors import PersistenceError
from habitar.models import Role

logger = structlog.get_logger()


class BaseRepository:
    """Clase base para repositorios."""

    TABLE: str = ""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client

    def _execute(self, query, operation: str, table: Optional[str] = None):
        """Ejecuta una query y traduce el error del backend."""
        table = table or self.TABLE
        try:
            return query.execute()
        except APIError as e:
            logger.error(
                "Error en Supabase",
                table=table,
                operation=operation,
                code=e.code,
                error=e.message,
            )
            raise PersistenceError(operation, table, e.message) from e


class InvitationRepository(BaseRepository):
    """Repositorio para invitaciones."""

    TABLE = "invites"

    TENANT_VIEW_SELECT = (
        "*, "
        "sender:users!invites_sender_id_fkey(email, role), "
        "listing:listings!invites_listing_id_fkey(address, city, bedrooms, bathrooms, price)"
    )

    def create(self, data: dict) -> dict:
        """
        Inserta una invitación.

        Returns:
            El registro insertado con su ID
        """
        response = self._execute(self.client.table(self.TABLE).insert(data), "insert")
        logger.info(
            "Invitación creada",
            tenant_id=data.get("tenant_id"),
            sender_id=data.get("sender_id"),
            listing_id=data.get("listing_id"),
        )
        return response.data[0] if response.data else {}

    def get_by_tenant(self, tenant_id: str) -> list[dict]:
        """Invitaciones recibidas por un inquilino, más recientes primero."""
        response = self._execute(
            self.client.table(self.TABLE)
            .select(self.TENANT_VIEW_SELECT)
            .eq("tenant_id", tenant_id)
            .order("created_at", desc=True),
            "select",
        )
        return response.data

    def get_by_sender(self, sender_id: str) -> list[dict]:
        """Invitaciones enviadas por un agente/propietario."""
        response = self._execute(
            self.client.table(self.TABLE)
            .select("*")
            .eq("sender_id", sender_id)
            .order("created_at", desc=True),
            "select",
        )
        return response.data

    def get_statuses(self) -> list[dict]:
        """Solo la columna status de todas las invitaciones."""
        response = self._execute(self.client.table(self.TABLE).select("status"), "select")
        return response.data


class ShowingRepository(BaseRepository):
    """Repositorio para visitas a propiedades."""

    TABLE = "property_showings"

    LIST_SELECT = "*, listing:listings(address, city, state), tenant:users(email)"

    def create(self, data: dict) -> dict:
        response = self._execute(self.client.table(self.TABLE).insert(data), "insert")
        logger.info(
            "Visita solicitada",
            listing_id=data.get("listing_id"),
            tenant_id=data.get("tenant_id"),
        )
        return response.data[0] if response.data else {}

    def get_by_id(self, showing_id: str) -> Optional[dict]:
        response = self._execute(
            self.client.table(self.TABLE)
            .select("*")
            .eq("id", showing_id)
            .limit(1),
            "select",
        )
        return response.data[0] if response.data else None

    def get_all(self) -> list[dict]:
        """Todas las visitas, más recientes primero. Solo para admins."""
        response = self._execute(
            self.client.table(self.TABLE)
            .select(self.LIST_SELECT)
            .order("created_at", desc=True),
            "select",
        )
        return response.data

    def get_by_tenant(self, tenant_id: str) -> list[dict]:
        response = self._execute(
            self.client.table(self.TABLE)
            .select(self.LIST_SELECT)
            .eq("tenant_id", tenant_id)
            .order("created_at", desc=True),
            "select",
        )
        return response.data

    def get_by_listings(self, listing_ids: list[str]) -> list[dict]:
        """Visitas a las propiedades indicadas (las de un dueño)."""
        if not listing_ids:
            return []
        response = self._execute(
            self.client.table(self.TABLE)
            .select(self.LIST_SELECT)
            .in_("listing_id", listing_ids)
            .order("created_at", desc=True),
            "select",
        )
        return response.data

    def update(self, showing_id: str, data: dict) -> dict:
        data = {**data, "updated_at": datetime.utcnow().isoformat()}
        response = self._execute(
            self.client.table(self.TABLE).update(data).eq("id", showing_id),
            "update",
        )
        return response.data[0] if response.data else {}


class ListingRepository(BaseRepository):
    """Repositorio para listings."""

    TABLE = "listings"

    def get_by_id(self, listing_id: str) -> Optional[dict]:
        response = self._execute(
            self.client.table(self.TABLE)
            .select("*")
            .eq("id", listing_id)
            .limit(1),
            "select",
        )
        return response.data[0] if response.data else None

    def create(self, data: dict) -> dict:
        response = self._execute(self.client.table(self.TABLE).insert(data), "insert")
        logger.info(
            "Listing creado",
            owner_id=data.get("owner_id"),
            city=data.get("city"),
        )
        return response.data[0] if response.data else {}

    def get_active(self) -> list[dict]:
        """Listings activos y publicados, más recientes primero."""
        response = self._execute(
            self.client.table(self.TABLE)
            .select("*")
            .eq("is_active", True)
            .eq("listing_status", "active")
            .order("created_at", desc=True),
            "select",
        )
        return response.data

    def get_by_owner(self, owner_id: str) -> list[dict]:
        response = self._execute(
            self.client.table(self.TABLE)
            .select("*")
            .eq("owner_id", owner_id)
            .order("created_at", desc=True),
            "select",
        )
        return response.data

    def count_active(self) -> int:
        response = self._execute(
            self.client.table(self.TABLE)
            .select("*", count="exact", head=True)
            .eq("is_active", True),
            "count",
        )
        return response.count or 0

    def get_active_prices(self) -> list[float]:
        response = self._execute(
            self.client.table(self.TABLE)
            .select("price")
            .eq("is_active", True),
            "select",
        )
        return [r["price"] for r in response.data if r.get("price") is not None]


class ProfileRepository(BaseRepository):
    """Repositorio para los perfiles de cada rol."""

    PROFILE_TABLES = {
        Role.tenant: "tenant_profiles",
        Role.agent: "realtor_profiles",
        Role.landlord: "landlord_profiles",
    }

    TENANT_DIRECTORY_SELECT = "*, user_email:users(email)"

    def table_for(self, role: Role) -> Optional[str]:
        return self.PROFILE_TABLES.get(role)

    def get_profile(self, role: Role, user_id: str) -> Optional[dict]:
        """Obtiene el perfil de un usuario según su rol (None si no tiene)."""
        table = self.table_for(role)
        if table is None:
            return None
        response = self._execute(
            self.client.table(table)
            .select("*")
            .eq("id", user_id)
            .limit(1),
            "select",
            table=table,
        )
        return response.data[0] if response.data else None

    def get_verified_tenants(self) -> list[dict]:
        """
        Directorio de inquilinos verificados.

        El join con users devuelve {"email": ...}; se aplana a user_email.
        """
        table = self.PROFILE_TABLES[Role.tenant]
        response = self._execute(
            self.client.table(table)
            .select(self.TENANT_DIRECTORY_SELECT)
            .eq("status", "verified")
            .order("created_at", desc=True),
            "select",
            table=table,
        )
        tenants = []
        for row in response.data:
            email = row.get("user_email")
            if isinstance(email, dict):
                email = email.get("email")
            tenants.append({**row, "user_email": email or "Sin email"})
        return tenants

    def upsert_profile(self, role: Role, user_id: str, data: dict) -> dict:
        table = self.table_for(role)
        if table is None:
            raise PersistenceError("upsert", f"perfil de {role.value}", "rol sin tabla de perfil")
        response = self._execute(
            self.client.table(table).upsert({**data, "id": user_id}, on_conflict="id"),
            "upsert",
            table=table,
        )
        logger.info("Perfil guardado", role=role.value, user_id=user_id)
        return response.data[0] if response.data else {}

    def verify(self, role: Role, user_id: str) -> Optional[dict]:
        """
        Marca el perfil como verificado.

        Returns:
            El perfil actualizado, o None si el usuario no tiene perfil
        """
        table = self.table_for(role)
        if table is None:
            return None
        response = self._execute(
            self.client.table(table)
            .update({"status": "verified", "is_verified": True})
            .eq("id", user_id),
            "update",
            table=table,
        )
        if not response.data:
            return None
        logger.info("Perfil verificado", role=role.value, user_id=user_id)
        return response.data[0]


class UserRepository(BaseRepository):
    """Repositorio para la tabla pública de usuarios."""

    TABLE = "users"

    def get_roles(self) -> list[dict]:
        response = self._execute(self.client.table(self.TABLE).select("role"), "select")
        return response.data

    def get_by_id(self, user_id: str) -> Optional[dict]:
        response = self._execute(
            self.client.table(self.TABLE)
            .select("email, role")
            .eq("id", user_id)
            .limit(1),
            "select",
        )
        return response.data[0] if response.data else None


class DocumentRepository(BaseRepository):
    """Repositorio para documentos de postulación."""

    TABLE = "application_documents"

    def create(self, data: dict) -> dict:
        response = self._execute(self.client.table(self.TABLE).insert(data), "insert")
        logger.info(
            "Documento registrado",
            tenant_id=data.get("tenant_id"),
            document_type=data.get("document_type"),
        )
        return response.data[0] if response.data else {}

    def get_by_tenant(self, tenant_id: str) -> list[dict]:
        response = self._execute(
            self.client.table(self.TABLE)
            .select("*")
            .eq("tenant_id", tenant_id)
            .order("upload_date", desc=True),
            "select",
        )
        return response.data

    def get_by_id(self, document_id: str) -> Optional[dict]:
        response = self._execute(
            self.client.table(self.TABLE)
            .select("*")
            .eq("id", document_id)
            .limit(1),
            "select",
        )
        return response.data[0] if response.data else None

    def delete(self, document_id: str) -> bool:
        response = self._execute(
            self.client.table(self.TABLE).delete().eq("id", document_id),
            "delete",
        )
        return len(response.data) > 0


class MessagingRepository(BaseRepository):
    """Repositorio para hilos, participantes y mensajes."""

    THREADS = "message_threads"
    PARTICIPANTS = "thread_participants"
    MESSAGES = "messages"

    def create_thread(self, data: dict) -> dict:
        response = self._execute(
            self.client.table(self.THREADS).insert(data), "insert", table=self.THREADS
        )
        return response.data[0] if response.data else {}

    def add_participants(self, rows: list[dict]) -> list[dict]:
        response = self._execute(
            self.client.table(self.PARTICIPANTS).insert(rows),
            "insert",
            table=self.PARTICIPANTS,
        )
        return response.data

    def get_thread_ids_for_user(self, user_id: str) -> list[str]:
        response = self._execute(
            self.client.table(self.PARTICIPANTS)
            .select("thread_id")
            .eq("user_id", user_id),
            "select",
            table=self.PARTICIPANTS,
        )
        return [r["thread_id"] for r in response.data]

    def is_participant(self, thread_id: str, user_id: str) -> bool:
        response = self._execute(
            self.client.table(self.PARTICIPANTS)
            .select("id")
            .eq("thread_id", thread_id)
            .eq("user_id", user_id)
            .limit(1),
            "select",
            table=self.PARTICIPANTS,
        )
        return bool(response.data)

    def get_threads(self, thread_ids: list[str]) -> list[dict]:
        if not thread_ids:
            return []
        response = self._execute(
            self.client.table(self.THREADS)
            .select("*, participants:thread_participants(*)")
            .in_("id", thread_ids)
            .order("updated_at", desc=True),
            "select",
            table=self.THREADS,
        )
        return response.data

    def get_last_message(self, thread_id: str) -> Optional[dict]:
        response = self._execute(
            self.client.table(self.MESSAGES)
            .select("*")
            .eq("thread_id", thread_id)
            .order("created_at", desc=True)
            .limit(1),
            "select",
            table=self.MESSAGES,
        )
        return response.data[0] if response.data else None

    def count_unread(self, thread_id: str, user_id: str) -> int:
        response = self._execute(
            self.client.table(self.MESSAGES)
            .select("*", count="exact", head=True)
            .eq("thread_id", thread_id)
            .is_("read_at", "null")
            .neq("sender_id", user_id),
            "count",
            table=self.MESSAGES,
        )
        return response.count or 0

    def get_messages(self, thread_id: str) -> list[dict]:
        response = self._execute(
            self.client.table(self.MESSAGES)
            .select("*, sender:users(email, role)")
            .eq("thread_id", thread_id)
            .order("created_at"),
            "select",
            table=self.MESSAGES,
        )
        return response.data

    def mark_read(self, thread_id: str, reader_id: str) -> None:
        self._execute(
            self.client.table(self.MESSAGES)
            .update({"read_at": datetime.utcnow().isoformat()})
            .eq("thread_id", thread_id)
            .neq("sender_id", reader_id)
            .is_("read_at", "null"),
            "update",
            table=self.MESSAGES,
        )

    def create_message(self, data: dict) -> dict:
        response = self._execute(
            self.client.table(self.MESSAGES).insert(data), "insert", table=self.MESSAGES
        )
        return response.data[0] if response.data else {}

    def touch_thread(self, thread_id: str) -> None:
        self._execute(
            self.client.table(self.THREADS)
            .update({"updated_at": datetime.utcnow().isoformat()})
            .eq("id", thread_id),
            "update",
            table=self.THREADS,
        )

