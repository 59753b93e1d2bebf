"""Poll loop: pings one server forever and reports player count changes.

Pings are strictly sequential. Each failure lands on one of two tracks:

- the transient track (connect errors, timeouts, bad lengths, generic
  payload errors), which ends the process after `MAX_FAILURES` in a row;
- the control-character track, for Forge servers whose mod data breaks the
  JSON decoder now and then. These are retried immediately, and every
  `MAX_CONTROL_CHARACTER_FAILURES`th one is passed on to the transient track.

Both counters reset after a successful ping.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from dataclasses import dataclass
from functools import partial
from typing import Awaitable, Callable, Optional

from mcping import MalformedPayload, ProtocolError, Status, build_handshake, ping

DEFAULT_PORT = 25565
POLL_INTERVAL = 1.0
MAX_FAILURES = 10
MAX_CONTROL_CHARACTER_FAILURES = 10

logger = logging.getLogger(__name__)


## ---------------------------- Class declarations ---------------------------- ##
@dataclass(frozen=True)
class Target:
    host: str
    port: int = DEFAULT_PORT

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class WatchContext:
    """What notifiers may know about the watched server besides the status."""

    hostname: str
    target: Target


@dataclass
class PollState:
    # An empty server at startup is not reported; any other first count is.
    last_online: int = 0
    failures: int = 0
    control_character_failures: int = 0


class FatalError(Exception):
    """The server failed too many pings in a row."""


Query = Callable[[bytes, str, int], Awaitable[Status]]


class Poller:
    """Drive status pings against a single target at a fixed cadence."""

    def __init__(
        self,
        target: Target,
        dispatch: Callable[[Status], None],
        query: Optional[Query] = None,
        interval: float = POLL_INTERVAL,
        timeout: Optional[float] = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.target = target
        self.dispatch = dispatch
        self.query = query or partial(ping, timeout=timeout)
        self.interval = interval
        self.sleep = sleep
        self.state = PollState()
        self.handshake = build_handshake(target.host, target.port)

    async def poll_once(self) -> bool:
        """Run one ping and update the state.

        Returns True when the next ping should start right away.
        Raises `FatalError` once the transient track is exhausted.
        """
        try:
            status = await self.query(self.handshake, self.target.host, self.target.port)
        except (ProtocolError, OSError) as e:
            return self.record_failure(e)
        self.record_success(status)
        return False

    def record_success(self, status: Status) -> None:
        self.state.failures = 0
        self.state.control_character_failures = 0
        online = status.players.online
        if online == self.state.last_online:
            return

        self.state.last_online = online
        logger.info(
            "Status for %s: %s %s/%s",
            self.target,
            status.description,
            online,
            status.players.max,
        )
        self.dispatch(dataclasses.replace(status, host=self.target.host, port=self.target.port))

    def record_failure(self, error: Exception) -> bool:
        if isinstance(error, MalformedPayload) and error.is_control_character_error():
            self.state.control_character_failures += 1
            if self.state.control_character_failures < MAX_CONTROL_CHARACTER_FAILURES:
                logger.debug(
                    "control character in status payload (%s/%s), retrying",
                    self.state.control_character_failures,
                    MAX_CONTROL_CHARACTER_FAILURES,
                )
                return True
            self.state.control_character_failures = 0
            error = ProtocolError("forge data control character parse failure")

        self.state.failures += 1
        if self.state.failures >= MAX_FAILURES:
            raise FatalError(f"Failed to request status {MAX_FAILURES} times! Error: {error}") from error
        logger.error("Failed to request status: %s", error)
        return False

    async def run(self) -> None:
        """Poll until a `FatalError` ends the loop."""
        logger.info("Polling %s every %ss", self.target, self.interval)
        while True:
            if await self.poll_once():
                continue
            await self.sleep(self.interval)
