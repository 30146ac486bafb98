"""
API HTTP sobre aiohttp.
"""

from habitar.web.app import create_app
from habitar.web.container import AppServices

__all__ = ["create_app", "AppServices"]
