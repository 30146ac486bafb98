"""
Notificaciones al webhook de automatización.

Es una tarea best-effort: un único POST, sin reintentos y sin leer
la respuesta. Los fallos se loguean y nunca se propagan al flujo
que la disparó.
"""

import asyncio
import re
from datetime import datetime, timezone
from typing import Optional

import aiohttp
import structlog

from habitar.config import get_settings
from habitar.errors import NotificationDeliveryFailure

logger = structlog.get_logger()

_UNSAFE_CHARS = re.compile(r"[<>]")

INVITE_PAYLOAD_FIELDS = ("tenant_id", "sender_id", "listing_id")


def sanitize_value(value) -> str:
    return _UNSAFE_CHARS.sub("", str(value))


def build_invite_payload(tenant_id: str, sender_id: str, listing_id: str) -> dict:
    """Payload de invitación, con ids saneados y timestamp ISO."""
    payload = {
        "tenant_id": tenant_id,
        "sender_id": sender_id,
        "listing_id": listing_id,
    }
    clean = {key: sanitize_value(payload[key]) for key in INVITE_PAYLOAD_FIELDS}
    clean["timestamp"] = datetime.now(timezone.utc).isoformat()
    return clean


class WebhookNotifier:
    """Cliente del webhook externo."""

    def __init__(
        self,
        url: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        settings = get_settings()
        self.url = url or settings.webhook_url
        self.app_version = settings.app_version
        self._session = session

    async def _post(self, payload: dict) -> None:
        headers = {"X-App-Version": self.app_version}
        try:
            if self._session is not None:
                async with self._session.post(self.url, json=payload, headers=headers) as resp:
                    resp.raise_for_status()
            else:
                async with aiohttp.ClientSession() as session:
                    async with session.post(self.url, json=payload, headers=headers) as resp:
                        resp.raise_for_status()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NotificationDeliveryFailure(self.url, str(e)) from e

    async def notify(self, payload: dict) -> bool:
        """
        Envía el payload una sola vez.

        Returns:
            True si el webhook respondió sin error, False si falló
        """
        try:
            await self._post(payload)
        except NotificationDeliveryFailure as e:
            logger.warning(
                "Falló la notificación al webhook",
                url=e.url,
                error=e.details.get("cause"),
            )
            return False
        logger.info("Webhook notificado", url=self.url)
        return True

    async def notify_invite(self, tenant_id: str, sender_id: str, listing_id: str) -> bool:
        return await self.notify(build_invite_payload(tenant_id, sender_id, listing_id))
