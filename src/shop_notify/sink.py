"""Admin notification sink — fire-and-forget push to administrators.

The sink POSTs ``{title, body, url}`` to a configured webhook (a push relay
in front of the admins' devices). With no webhook configured the sink is not
"ready" and every notify() is a no-op. Delivery failures are logged and never
propagate: a charge request must succeed even when nobody gets pinged.
"""

import logging
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


class AdminNotifierProtocol(Protocol):
    @property
    def is_ready(self) -> bool: ...

    async def notify(self, title: str, body: str, link: str) -> None: ...


class WebhookAdminNotifier:
    def __init__(self, client: httpx.AsyncClient, webhook_url: str, timeout: float) -> None:
        self._client = client
        self._url = webhook_url
        self._timeout = timeout

    @property
    def is_ready(self) -> bool:
        return bool(self._url)

    async def notify(self, title: str, body: str, link: str) -> None:
        if not self.is_ready:
            return
        try:
            resp = await self._client.post(
                self._url,
                json={"title": title, "body": body, "url": link},
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Admin notification %r not delivered: %s", title, e)
