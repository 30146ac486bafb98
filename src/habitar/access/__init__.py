"""
Control de acceso por rol y nivel de cuenta.
"""

from habitar.access.permissions import (
    AccessState,
    Permission,
    PermissionResolver,
    PERMISSION_POLICY,
    resolve_permissions,
    tier_from_status,
    is_verified_status,
)
from habitar.access.gates import (
    FeatureGate,
    GateKind,
    GateResult,
    RouteGate,
    RouteDecision,
    RouteOutcome,
)

__all__ = [
    # Permisos
    "AccessState",
    "Permission",
    "PermissionResolver",
    "PERMISSION_POLICY",
    "resolve_permissions",
    "tier_from_status",
    "is_verified_status",
    # Gates
    "FeatureGate",
    "GateKind",
    "GateResult",
    "RouteGate",
    "RouteDecision",
    "RouteOutcome",
]
