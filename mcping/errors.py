"""Error taxonomy for one status ping."""

from __future__ import annotations

import json

# Message prefix of the decoder error raised for raw control characters
# inside a string, as sent by some modded servers in their forgeData.
CONTROL_CHARACTER_SIGNATURE = "Invalid control character"


class ProtocolError(Exception):
    """Base class for every failure of a single status ping."""


class ConnectFailed(ProtocolError):
    """The peer could not be reached, or the stream broke mid-ping."""


class InvalidStatusLength(ProtocolError):
    """The server announced a non-positive status packet length."""

    def __init__(self, length: int):
        super().__init__(f"invalid status length: {length}")
        self.length = length


class MalformedPayload(ProtocolError):
    """The status JSON could not be decoded into a `Status`."""

    def __init__(self, error: Exception):
        super().__init__(str(error))
        self.error = error

    def is_control_character_error(self) -> bool:
        return isinstance(self.error, json.JSONDecodeError) and self.error.msg.startswith(
            CONTROL_CHARACTER_SIGNATURE
        )


class VarIntTooLong(ProtocolError):
    """More than five bytes were consumed without a terminating VarInt byte."""

    def __init__(self):
        super().__init__("varint too long")


class InvalidStringLength(ProtocolError):
    """The status string length is negative or does not fit in the packet."""

    def __init__(self, string_length: int, packet_length: int):
        super().__init__(f"invalid status string length: {string_length} (packet length {packet_length})")
        self.string_length = string_length
        self.packet_length = packet_length
