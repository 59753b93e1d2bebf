"""Notification backends.

Every backend exposes the same capability: an async `init()`, an async
`notify(status)` delivering one snapshot, and an async `close()`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol

import aiohttp

from mcping import Status
from watcher.poller import WatchContext

MAX_RETRIES = 5
REQUEST_TIMEOUT = 5.0
SUCCESS_STATUSES = (200, 204)
DEFAULT_PLAYERS_SEPARATOR = "\n"

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    """A backend gave up delivering a notification."""


class NotifyService(Protocol):
    name: str

    async def init(self) -> None: ...

    async def notify(self, status: Status) -> None: ...

    async def close(self) -> None: ...


## ---------------------------- Log service ---------------------------- ##
class LogService:
    """Write player count changes to the application log."""

    def __init__(
        self,
        context: WatchContext,
        name: str = "log",
        players_separator: str = ", ",
    ):
        self.context = context
        self.name = name
        self.players_separator = players_separator

    @classmethod
    def from_config(cls, entry: dict, context: WatchContext) -> "LogService":
        return cls(
            context,
            name=entry.get("name", "log"),
            players_separator=entry.get("players_separator", ", "),
        )

    async def init(self) -> None:
        pass

    async def notify(self, status: Status) -> None:
        players = status.players.names(self.players_separator)
        logger.info(
            "%s (%s:%s) now has %s/%s players online%s",
            self.context.hostname,
            status.host,
            status.port,
            status.players.online,
            status.players.max,
            f": {players}" if players else "",
        )

    async def close(self) -> None:
        pass

    def __str__(self) -> str:
        return self.name


## ---------------------------- Webhook service ---------------------------- ##
class WebhookService:
    """POST the status snapshot as JSON to a configured URL."""

    def __init__(
        self,
        url: str,
        context: WatchContext,
        name: str = "webhook",
        headers: Optional[dict[str, str]] = None,
        custom_data: Optional[dict[str, Any]] = None,
        empty_custom_data: Optional[dict[str, Any]] = None,
        players_separator: str = DEFAULT_PLAYERS_SEPARATOR,
        max_retries: int = MAX_RETRIES,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.url = url
        self.context = context
        self.name = name
        self.headers = dict(headers or {})
        self.custom_data = custom_data
        self.empty_custom_data = empty_custom_data
        self.players_separator = players_separator
        self.max_retries = max_retries
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_config(cls, entry: dict, context: WatchContext) -> "WebhookService":
        return cls(
            entry["url"],
            context,
            name=entry.get("name", "webhook"),
            headers=entry.get("headers"),
            custom_data=entry.get("custom_data"),
            empty_custom_data=entry.get("empty_custom_data"),
            players_separator=entry.get("players_separator", DEFAULT_PLAYERS_SEPARATOR),
        )

    async def init(self) -> None:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )

    def build_body(self, status: Status) -> dict[str, Any]:
        custom_data = self.custom_data
        if status.players.online == 0 and self.empty_custom_data is not None:
            custom_data = self.empty_custom_data
        body = {
            "status": status.to_dict(),
            "hostname": self.context.hostname,
            "host": status.host,
            "port": status.port,
            "players": status.players.names(self.players_separator),
        }
        if custom_data is not None:
            body["custom_data"] = custom_data
        return body

    async def notify(self, status: Status) -> None:
        if self._session is None:
            raise DeliveryError(f"{self.name} service used before init()")
        await self._post(self.build_body(status))

    async def _post(self, body: dict[str, Any]) -> None:
        headers = {"Content-Type": "application/json", **self.headers}
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                async with self._session.post(self.url, json=body, headers=headers) as response:
                    if response.status in SUCCESS_STATUSES:
                        return
                    text = await response.text()
                    logger.warning(
                        "%s request failed (attempt %s/%s). Status: %s\n%s",
                        self.name,
                        attempt,
                        attempts,
                        response.status,
                        text,
                    )
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error("%s failed to send request (attempt %s/%s): %s", self.name, attempt, attempts, e)
        raise DeliveryError(f"request failed too many times ({attempts} attempts)")

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    def __str__(self) -> str:
        return self.name


SERVICE_TYPES = {
    "log": LogService,
    "webhook": WebhookService,
}
