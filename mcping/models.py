"""Status snapshot returned by a successful ping."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional


## ---------------------------- Class declarations ---------------------------- ##
@dataclass(frozen=True)
class Version:
    name: str
    protocol: int


@dataclass(frozen=True)
class Player:
    name: str
    id: str


@dataclass(frozen=True)
class Players:
    max: int
    online: int
    sample: Optional[tuple[Player, ...]] = None

    def names(self, separator: str = "\n") -> str:
        if not self.sample:
            return ""
        return separator.join(player.name for player in self.sample)


@dataclass(frozen=True)
class Status:
    """One parsed status response.

    `host` and `port` are not part of the payload; the watcher fills them in
    with the resolved target before handing the snapshot to notifiers.
    """

    version: Version
    players: Players
    description: str
    favicon: Optional[str] = None
    enforces_secure_chat: bool = False
    previews_chat: bool = False
    host: str = ""
    port: int = 0

    @classmethod
    def from_json(cls, raw: bytes) -> "Status":
        """Decode the UTF-8 JSON body of a status response.

        Raises `json.JSONDecodeError` for invalid JSON and `ValueError` when a
        field is missing or has the wrong type.
        """
        payload = json.loads(raw.decode("utf-8"))
        if not isinstance(payload, dict):
            raise ValueError("status payload is not a JSON object")
        return cls.from_dict(payload)

    @classmethod
    def from_dict(cls, payload: dict) -> "Status":
        try:
            version = payload["version"]
            players = payload["players"]
            sample = players.get("sample")
            return cls(
                version=Version(name=_string(version["name"]), protocol=_integer(version["protocol"])),
                players=Players(
                    max=_integer(players["max"]),
                    online=_integer(players["online"]),
                    sample=None if sample is None else tuple(
                        Player(name=_string(entry["name"]), id=_string(entry["id"])) for entry in sample
                    ),
                ),
                description=_description_text(payload["description"]),
                favicon=payload.get("favicon"),
                enforces_secure_chat=_boolean(payload.get("enforcesSecureChat", False)),
                previews_chat=_boolean(payload.get("previewsChat", False)),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"invalid status payload: {e!r}") from e

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the wire field names. Host and port are left out."""
        players: dict[str, Any] = {"max": self.players.max, "online": self.players.online}
        if self.players.sample is not None:
            players["sample"] = [{"name": p.name, "id": p.id} for p in self.players.sample]
        return {
            "version": {"name": self.version.name, "protocol": self.version.protocol},
            "players": players,
            "description": {"text": self.description},
            "favicon": self.favicon,
            "enforcesSecureChat": self.enforces_secure_chat,
            "previewsChat": self.previews_chat,
        }


## ---------------------------- Helper functions ---------------------------- ##
def _string(value) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {type(value).__name__}")
    return value


def _integer(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected integer, got {type(value).__name__}")
    return value


def _boolean(value) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected boolean, got {type(value).__name__}")
    return value


def _description_text(description) -> str:
    # Plain string, or a chat component with optional `extra` parts.
    if isinstance(description, str):
        return description
    text = _string(description.get("text", ""))
    for part in description.get("extra") or []:
        if isinstance(part, dict):
            text += str(part.get("text", ""))
        elif isinstance(part, str):
            text += part
    return text
