"""
Gates de acceso.

FeatureGate protege una porción de contenido; RouteGate protege una
pantalla completa. Ambos consultan el mismo PermissionResolver y
devuelven una decisión que la capa web traduce a una respuesta.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional
from urllib.parse import quote

from habitar.access.permissions import AccessState, Permission, PermissionResolver
from habitar.models import AccessTier, Role

FEATURE_MESSAGES = {
    AccessTier.premium: "Esta función requiere una cuenta premium.",
    AccessTier.verified: "Esta función requiere verificar tu cuenta.",
    None: "No tenés acceso a esta función.",
}

PERMISSION_DENIED_MESSAGE = "No tenés permiso para acceder a esta función."
VERIFICATION_HINT = " Completá la verificación para desbloquearla."
VERIFICATION_REQUIRED_MESSAGE = (
    "Esta función requiere verificar tu cuenta. "
    "Completá la verificación de tu perfil para continuar."
)


class GateKind(str, Enum):
    LOADING = "loading"
    CONTENT = "content"
    FALLBACK = "fallback"
    DENIED = "denied"


@dataclass(frozen=True)
class GateResult:
    kind: GateKind
    content: Any = None
    message: Optional[str] = None
    upgrade_label: Optional[str] = None
    upgrade_action: Optional[Callable[[], Any]] = None

    @property
    def allowed(self) -> bool:
        return self.kind == GateKind.CONTENT


class FeatureGate:
    """Muestra el contenido o una explicación/fallback si falta acceso."""

    def __init__(
        self,
        permission: Permission,
        required_tier: Optional[AccessTier] = None,
        fallback: Any = None,
        show_upgrade: bool = True,
        upgrade_action: Optional[Callable[[], Any]] = None,
    ):
        self.permission = permission
        self.required_tier = required_tier
        self.fallback = fallback
        self.show_upgrade = show_upgrade
        self.upgrade_action = upgrade_action

    def evaluate(self, resolver: PermissionResolver, content: Any = None) -> GateResult:
        state = resolver.state(self.permission)
        if state == AccessState.LOADING:
            return GateResult(GateKind.LOADING)

        if state == AccessState.ALLOWED and resolver.meets_tier(self.required_tier):
            return GateResult(GateKind.CONTENT, content=content)

        if self.fallback is not None:
            return GateResult(GateKind.FALLBACK, content=self.fallback)

        upgrade_label = None
        if self.show_upgrade and self.upgrade_action is not None:
            upgrade_label = (
                "Mejorar plan" if self.required_tier == AccessTier.premium else "Verificar cuenta"
            )
        return GateResult(
            GateKind.DENIED,
            message=FEATURE_MESSAGES.get(self.required_tier, FEATURE_MESSAGES[None]),
            upgrade_label=upgrade_label,
            upgrade_action=self.upgrade_action if upgrade_label else None,
        )


class RouteOutcome(str, Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    PERMISSION_DENIED = "permission_denied"
    VERIFICATION_REQUIRED = "verification_required"
    ALLOW = "allow"


@dataclass(frozen=True)
class RouteDecision:
    outcome: RouteOutcome
    location: Optional[str] = None
    message: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome == RouteOutcome.ALLOW


def redirect_location(fallback_path: str, target: Optional[str]) -> str:
    """Arma la redirección conservando el destino original en ?next=."""
    if not target:
        return fallback_path
    separator = "&" if "?" in fallback_path else "?"
    return f"{fallback_path}{separator}next={quote(target, safe='')}"


class RouteGate:
    """
    Protege una pantalla completa.

    Los chequeos se evalúan en este orden y cortan en el primero que falla:
    carga -> rol -> permiso -> verificación.
    """

    def __init__(
        self,
        allowed_roles: Optional[Iterable[Role]] = None,
        required_permission: Optional[Permission] = None,
        fallback_path: str = "/auth",
        require_verification: bool = False,
    ):
        self.allowed_roles = frozenset(allowed_roles) if allowed_roles is not None else None
        self.required_permission = required_permission
        self.fallback_path = fallback_path
        self.require_verification = require_verification

    def evaluate(self, resolver: PermissionResolver, target: Optional[str] = None) -> RouteDecision:
        if resolver.loading:
            return RouteDecision(RouteOutcome.LOADING)

        if self.allowed_roles is not None and (
            resolver.role is None or resolver.role not in self.allowed_roles
        ):
            return RouteDecision(
                RouteOutcome.REDIRECT,
                location=redirect_location(self.fallback_path, target),
            )

        needs_verification = self.require_verification and not resolver.is_verified

        if self.required_permission is not None and not resolver.can_access(
            self.required_permission
        ):
            message = PERMISSION_DENIED_MESSAGE
            if needs_verification:
                message += VERIFICATION_HINT
            return RouteDecision(RouteOutcome.PERMISSION_DENIED, message=message)

        if needs_verification:
            return RouteDecision(
                RouteOutcome.VERIFICATION_REQUIRED, message=VERIFICATION_REQUIRED_MESSAGE
            )

        return RouteDecision(RouteOutcome.ALLOW)
