"""
Adaptador de los gates de acceso a aiohttp.

La decisión se toma en habitar.access.gates; acá solo se traduce a
respuestas HTTP.
"""

import functools
from typing import Any, Awaitable, Callable, Iterable, Optional

from aiohttp import web

from habitar.access import FeatureGate, GateKind, Permission, RouteGate, RouteOutcome
from habitar.access.permissions import PermissionResolver
from habitar.models import AccessTier, Role, UserSession
from habitar.web.container import FALLBACK_PATH_KEY

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

RESOLVER_KEY = web.RequestKey("resolver", PermissionResolver)
# None para requests anónimos
SESSION_KEY = web.RequestKey("session", UserSession)
LOADING_RETRY_SECONDS = "1"


def get_resolver(request: web.Request) -> PermissionResolver:
    return request.get(RESOLVER_KEY) or PermissionResolver.anonymous()


def route_gate(
    allowed_roles: Optional[Iterable[Role]] = None,
    required_permission: Optional[Permission] = None,
    fallback_path: Optional[str] = None,
    require_verification: bool = False,
) -> Callable[[Handler], Handler]:
    """
    Decorador que protege un handler completo.

    Sin fallback_path explícito se usa el de la configuración de la app.
    """

    def decorator(handler: Handler) -> Handler:
        @functools.wraps(handler)
        async def wrapper(request: web.Request) -> web.StreamResponse:
            gate = RouteGate(
                allowed_roles=allowed_roles,
                required_permission=required_permission,
                fallback_path=fallback_path or request.app[FALLBACK_PATH_KEY],
                require_verification=require_verification,
            )
            decision = gate.evaluate(get_resolver(request), target=request.path_qs)

            if decision.outcome == RouteOutcome.LOADING:
                return web.json_response(
                    {"state": "loading"},
                    status=503,
                    headers={"Retry-After": LOADING_RETRY_SECONDS},
                )
            if decision.outcome == RouteOutcome.REDIRECT:
                raise web.HTTPFound(decision.location)
            if decision.outcome in (
                RouteOutcome.PERMISSION_DENIED,
                RouteOutcome.VERIFICATION_REQUIRED,
            ):
                return web.json_response(
                    {"reason": decision.outcome.value, "message": decision.message},
                    status=403,
                )
            return await handler(request)

        return wrapper

    return decorator


def feature_section(
    request: web.Request,
    permission: Permission,
    content: Callable[[], Any],
    required_tier: Optional[AccessTier] = None,
    fallback: Any = None,
    upgrade_path: Optional[str] = None,
) -> dict:
    """
    Evalúa un FeatureGate y devuelve la sección serializable.

    content es perezoso: solo se consulta el backend si hay acceso.
    """
    gate = FeatureGate(
        permission,
        required_tier=required_tier,
        fallback=fallback,
        upgrade_action=(lambda: upgrade_path) if upgrade_path else None,
    )
    result = gate.evaluate(get_resolver(request))

    if result.kind == GateKind.CONTENT:
        return {"state": result.kind.value, "content": content()}
    if result.kind == GateKind.FALLBACK:
        return {"state": result.kind.value, "content": result.content}
    if result.kind == GateKind.LOADING:
        return {"state": result.kind.value}

    section = {"state": result.kind.value, "message": result.message}
    if result.upgrade_label:
        section["upgrade"] = {"label": result.upgrade_label, "path": result.upgrade_action()}
    return section
