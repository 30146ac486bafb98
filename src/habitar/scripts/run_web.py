"""
Script para levantar la API web.

Uso:
    python -m habitar.scripts.run_web
"""

import logging
import sys

import structlog
from aiohttp import web

from habitar.config import get_settings
from habitar.web import create_app

# Configurar logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


def main():
    """Entry point de la API."""
    settings = get_settings()
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=settings.log_level)

    logger.info(
        "Iniciando API HABITAR...",
        host=settings.web_host,
        port=settings.web_port,
        version=settings.app_version,
    )

    try:
        web.run_app(
            create_app(),
            host=settings.web_host,
            port=settings.web_port,
            print=None,
        )
    except KeyboardInterrupt:
        logger.info("API detenida por usuario")
        sys.exit(0)
    except Exception as e:
        logger.error("Error fatal en API", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
