"""Minecraft server list ping codec and status client.

Builds the handshake and status request packets, decodes the status
response, and exposes the `Status` snapshot consumed by the watcher.
"""

from mcping.client import ping
from mcping.errors import (
    ConnectFailed,
    InvalidStatusLength,
    InvalidStringLength,
    MalformedPayload,
    ProtocolError,
    VarIntTooLong,
)
from mcping.handshake import build_handshake
from mcping.models import Status

__all__ = [
    "ConnectFailed",
    "InvalidStatusLength",
    "InvalidStringLength",
    "MalformedPayload",
    "ProtocolError",
    "Status",
    "VarIntTooLong",
    "build_handshake",
    "ping",
]
