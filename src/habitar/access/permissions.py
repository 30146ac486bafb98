"""
Resolver de permisos.

El conjunto efectivo de permisos es una función pura de
(rol, tier, verificado): no se guarda ni se cachea, se recalcula
en cada consulta.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from habitar.errors import PermissionsNotLoaded
from habitar.models import AccessTier, Role, UserSession


class Permission(str, Enum):
    """Capacidades conocidas por la aplicación."""

    view_tenant_directory = "view_tenant_directory"
    create_listing = "create_listing"
    manage_listings = "manage_listings"
    admin_access = "admin_access"
    create_invite = "create_invite"
    view_invites = "view_invites"
    profile_management = "profile_management"
    use_messaging = "use_messaging"
    schedule_showings = "schedule_showings"
    review_applications = "review_applications"
    advanced_screening = "advanced_screening"


class AccessState(str, Enum):
    LOADING = "loading"
    ALLOWED = "allowed"
    DENIED = "denied"


@dataclass(frozen=True)
class PermissionRule:
    """Roles habilitados y tier mínimo para una capacidad."""

    roles: frozenset[Role]
    min_tier: AccessTier = AccessTier.basic


_ALL_ROLES = frozenset(Role)
_LISTERS = frozenset({Role.agent, Role.landlord, Role.admin})

PERMISSION_POLICY: dict[Permission, PermissionRule] = {
    Permission.view_tenant_directory: PermissionRule(_LISTERS, AccessTier.verified),
    Permission.create_listing: PermissionRule(_LISTERS),
    Permission.manage_listings: PermissionRule(_LISTERS),
    Permission.admin_access: PermissionRule(frozenset({Role.admin})),
    Permission.create_invite: PermissionRule(_LISTERS),
    Permission.view_invites: PermissionRule(_ALL_ROLES),
    Permission.profile_management: PermissionRule(_ALL_ROLES),
    Permission.use_messaging: PermissionRule(_ALL_ROLES, AccessTier.verified),
    Permission.schedule_showings: PermissionRule(_ALL_ROLES),
    Permission.review_applications: PermissionRule(_LISTERS),
    Permission.advanced_screening: PermissionRule(
        frozenset({Role.admin}), AccessTier.premium
    ),
}

# Status del perfil que cuentan como verificados
VERIFIED_STATUSES = frozenset({"verified", "premium"})


def tier_from_status(profile_status: Optional[str]) -> AccessTier:
    """premium -> premium, verified -> verified, cualquier otro -> basic."""
    if profile_status == "premium":
        return AccessTier.premium
    if profile_status == "verified":
        return AccessTier.verified
    return AccessTier.basic


def is_verified_status(profile_status: Optional[str]) -> bool:
    return profile_status in VERIFIED_STATUSES


def effective_tier(role: Role, tier: AccessTier) -> AccessTier:
    """Los admins siempre operan como premium."""
    if role == Role.admin:
        return AccessTier.premium
    return tier


def resolve_permissions(
    role: Role, tier: AccessTier, is_verified: bool
) -> frozenset[Permission]:
    """
    Calcula el conjunto efectivo de permisos.

    Args:
        role: Rol del usuario
        tier: Nivel de cuenta según el perfil
        is_verified: Si el perfil está verificado

    Returns:
        Permisos habilitados
    """
    tier = effective_tier(role, tier)
    # Un perfil sin verificar nunca supera basic
    if not is_verified and role != Role.admin:
        tier = AccessTier.basic
    return frozenset(
        permission
        for permission, rule in PERMISSION_POLICY.items()
        if role in rule.roles and tier.level >= rule.min_tier.level
    )


class PermissionResolver:
    """
    Resuelve permisos sobre un snapshot explícito de sesión.

    Sin sesión cargada el resolver está en estado LOADING; los
    llamadores no deben confundirlo con DENIED.
    """

    def __init__(self, session: Optional[UserSession], loading: bool = False):
        self._session = session
        self._loading = loading

    @classmethod
    def loading_state(cls) -> "PermissionResolver":
        return cls(None, loading=True)

    @classmethod
    def anonymous(cls) -> "PermissionResolver":
        return cls(None, loading=False)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def session(self) -> Optional[UserSession]:
        return self._session

    @property
    def role(self) -> Optional[Role]:
        return self._session.role if self._session else None

    @property
    def tier(self) -> AccessTier:
        if not self._session:
            return AccessTier.basic
        return effective_tier(self._session.role, self._session.tier)

    @property
    def is_verified(self) -> bool:
        return bool(self._session and self._session.is_verified)

    def permissions(self) -> frozenset[Permission]:
        if self._loading:
            raise PermissionsNotLoaded()
        if not self._session:
            return frozenset()
        return resolve_permissions(
            self._session.role, self._session.tier, self._session.is_verified
        )

    def state(self, permission: Permission) -> AccessState:
        if self._loading:
            return AccessState.LOADING
        if permission in self.permissions():
            return AccessState.ALLOWED
        return AccessState.DENIED

    def can_access(self, permission: Permission) -> bool:
        """
        True si el permiso está habilitado.

        Raises:
            PermissionsNotLoaded: Si la sesión todavía se está cargando
        """
        return permission in self.permissions()

    def meets_tier(self, required_tier: Optional[AccessTier]) -> bool:
        if required_tier is None:
            return True
        return self.tier.level >= required_tier.level
