"""
Carga del snapshot de sesión.

Combina Supabase Auth (id, email, rol en user_metadata) con la
tabla de perfil del rol para derivar tier y verificación. El
snapshot se pasa explícitamente a quien lo necesite y se refresca
con una llamada explícita, nunca de forma implícita.
"""

from typing import Optional

import structlog
from supabase import AuthError

from habitar.access.permissions import is_verified_status, tier_from_status
from habitar.database import ProfileRepository, SupabaseClient, get_supabase_client
from habitar.models import Role, UserSession

logger = structlog.get_logger()


class SessionLoader:
    """Construye UserSession a partir de un access token."""

    def __init__(
        self,
        client: Optional[SupabaseClient] = None,
        profile_repo: Optional[ProfileRepository] = None,
    ):
        self.client = client or get_supabase_client()
        self.profile_repo = profile_repo or ProfileRepository(self.client)

    def _get_auth_user(self, access_token: str):
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as e:
            logger.info("Token rechazado por Supabase Auth", error=str(e))
            return None
        return response.user if response else None

    def build(self, user_id: str, email: Optional[str], role: Role) -> UserSession:
        """Arma la sesión leyendo el perfil del rol."""
        profile = self.profile_repo.get_profile(role, user_id)
        status = profile.get("status") if profile else None
        return UserSession(
            user_id=user_id,
            email=email,
            role=role,
            tier=tier_from_status(status),
            is_verified=is_verified_status(status),
            profile_status=status,
        )

    def load(self, access_token: str) -> Optional[UserSession]:
        """
        Resuelve la sesión del token.

        Returns:
            UserSession, o None si el token es inválido o el usuario no tiene rol
        """
        user = self._get_auth_user(access_token)
        if user is None:
            return None

        raw_role = (user.user_metadata or {}).get("role")
        try:
            role = Role(raw_role)
        except ValueError:
            logger.warning("Usuario sin rol válido", user_id=user.id, role=raw_role)
            return None

        session = self.build(user.id, user.email, role)
        logger.debug(
            "Sesión cargada",
            user_id=session.user_id,
            role=session.role.value,
            tier=session.tier.value,
        )
        return session

    def refresh(self, session: UserSession) -> UserSession:
        """Vuelve a leer el perfil (cambio de rol, re-login, verificación)."""
        return self.build(session.user_id, session.email, session.role)
