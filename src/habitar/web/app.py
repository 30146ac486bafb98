"""
Construcción de la app aiohttp.
"""

from typing import Optional

from aiohttp import web

from habitar.config import get_settings
from habitar.web.container import FALLBACK_PATH_KEY, SERVICES_KEY, AppServices
from habitar.web.handlers import routes
from habitar.web.middleware import error_middleware, session_middleware


def create_app(
    services: Optional[AppServices] = None,
    fallback_path: Optional[str] = None,
) -> web.Application:
    """
    Crea la aplicación web.

    Args:
        services: Servicios ya armados (los tests inyectan fakes)
        fallback_path: Destino de las redirecciones por rol

    Returns:
        Aplicación lista para run_app o para un cliente de test
    """
    settings = get_settings()

    # error_middleware va primero para envolver también la carga de sesión
    app = web.Application(middlewares=[error_middleware, session_middleware])
    app[SERVICES_KEY] = services or AppServices.build()
    app[FALLBACK_PATH_KEY] = fallback_path or settings.default_fallback_path
    app.add_routes(routes)
    return app
