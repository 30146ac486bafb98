"""
Modelo de Usuario y Sesión

Define los roles, niveles de cuenta y el snapshot de sesión
que consume el resolver de permisos.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Rol funcional del usuario."""

    tenant = "tenant"
    agent = "agent"
    landlord = "landlord"
    admin = "admin"


class AccessTier(str, Enum):
    """Nivel de cuenta. El orden importa: basic < verified < premium."""

    basic = "basic"
    verified = "verified"
    premium = "premium"

    @property
    def level(self) -> int:
        return _TIER_LEVELS[self]


_TIER_LEVELS = {
    AccessTier.basic: 0,
    AccessTier.verified: 1,
    AccessTier.premium: 2,
}


class UserSession(BaseModel):
    """
    Snapshot de identidad de un usuario autenticado.

    Es de solo lectura para el core: lo construye el SessionLoader
    a partir de Supabase Auth y la tabla de perfil del rol.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., description="UUID de Supabase Auth")
    email: Optional[str] = Field(None, description="Email del usuario")
    role: Role = Field(..., description="Rol del usuario")
    tier: AccessTier = Field(default=AccessTier.basic, description="Nivel de cuenta")
    is_verified: bool = Field(default=False, description="Perfil verificado")
    profile_status: Optional[str] = Field(None, description="Status crudo del perfil")
