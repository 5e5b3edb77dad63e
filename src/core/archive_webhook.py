from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from src.core.config import get_settings
from src.core.errors import ArchiveDeliveryError

logger = logging.getLogger(__name__)


class ArchiveWebhookClient:
    """Mirrors each daily submission into the reporting spreadsheet.

    The spreadsheet side is a script webhook that appends a row for
    ``insertData`` and closes the month's sheet first for ``archiveAndInsert``.
    Delivery is best effort: the caller only learns whether it went through.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self.url = (url if url is not None else settings.archive_webhook_url) or ""
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.archive_timeout_seconds
        )
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.url.strip())

    def send(self, payload: Dict[str, Any]) -> bool:
        if not self.is_configured:
            logger.warning("Skipping archive export: ARCHIVE_WEBHOOK_URL is not configured")
            return False
        body = {**payload, "timestamp": datetime.now(timezone.utc).isoformat()}
        try:
            self._post(body)
        except ArchiveDeliveryError as exc:
            logger.error("Archive export failed for %s: %s", payload.get("employeeName"), exc)
            return False
        logger.info(
            "Archive export sent for %s (action=%s)",
            payload.get("employeeName"),
            payload.get("action"),
        )
        return True

    def _post(self, body: Dict[str, Any]) -> None:
        try:
            with httpx.Client(
                timeout=self.timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = client.post(self.url, json=body)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ArchiveDeliveryError(str(exc)) from exc
