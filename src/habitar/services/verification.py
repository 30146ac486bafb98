"""
Verificación manual de usuarios por parte de un admin.

Es el único camino por el que un perfil pasa de basic a verified.
"""

from typing import Optional

import structlog

from habitar.database import ProfileRepository, SupabaseClient, UserRepository
from habitar.errors import NotFoundError, ValidationError
from habitar.models import Role

logger = structlog.get_logger()


class VerificationService:
    def __init__(
        self,
        client: Optional[SupabaseClient] = None,
        profile_repo: Optional[ProfileRepository] = None,
        user_repo: Optional[UserRepository] = None,
    ):
        self.profile_repo = profile_repo or ProfileRepository(client)
        self.user_repo = user_repo or UserRepository(self.profile_repo.client)

    def verify_user(self, user_id: str, admin_id: str) -> dict:
        """
        Marca como verificado el perfil del usuario según su rol.

        Raises:
            NotFoundError: Si el usuario o su perfil no existen
            ValidationError: Si el rol no tiene perfil (admin o desconocido)
        """
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("Usuario", user_id)

        try:
            role = Role(user.get("role"))
        except ValueError as e:
            raise ValidationError("Tipo de usuario desconocido", field="role") from e
        if self.profile_repo.table_for(role) is None:
            raise ValidationError(
                f"El rol {role.value} no tiene perfil para verificar", field="role"
            )

        profile = self.profile_repo.verify(role, user_id)
        if profile is None:
            raise NotFoundError("Perfil", user_id)

        logger.info("Usuario verificado", user_id=user_id, role=role.value, admin_id=admin_id)
        return profile
