"""
Middlewares de la app web: sesión por request y mapeo de errores.
"""

import structlog
from aiohttp import web

from habitar.access.permissions import PermissionResolver
from habitar.errors import HabitarError, PersistenceError
from habitar.web.container import SERVICES_KEY
from habitar.web.gating import RESOLVER_KEY, SESSION_KEY

logger = structlog.get_logger()

PERSISTENCE_USER_MESSAGE = "No se pudo completar la operación. Intentá de nuevo."


def _bearer_token(request: web.Request):
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


@web.middleware
async def session_middleware(request: web.Request, handler):
    """Carga el snapshot de sesión del token; sin token el usuario es anónimo."""
    token = _bearer_token(request)
    session = None
    if token:
        session = request.app[SERVICES_KEY].session_loader.load(token)
    request[RESOLVER_KEY] = PermissionResolver(session)
    request[SESSION_KEY] = session
    return await handler(request)


@web.middleware
async def error_middleware(request: web.Request, handler):
    """Traduce los errores de dominio a JSON con su status HTTP."""
    try:
        return await handler(request)
    except PersistenceError as e:
        logger.error("Error de persistencia", path=request.path, **e.details)
        return web.json_response(
            {"error": "persistence_error", "message": PERSISTENCE_USER_MESSAGE},
            status=e.status_code,
        )
    except HabitarError as e:
        logger.info(
            "Request rechazado",
            path=request.path,
            error=type(e).__name__,
            message=e.message,
        )
        return web.json_response(
            {"error": type(e).__name__, "message": e.message, "details": e.details},
            status=e.status_code,
        )
