"""Handshake and status request packets."""

from mcping.varint import encode_varint

# Marker appended to the host so Forge servers include their mod data.
FML_MARKER = "\0FML3\0"

# Protocol version -1 asks the server to answer with whatever it runs.
ANY_PROTOCOL_VERSION = -1

HANDSHAKE_PACKET_ID = 0x00
NEXT_STATE_STATUS = 1

STATUS_REQUEST = bytes([1, 0])


def build_handshake(host: str, port: int, protocol_version: int = ANY_PROTOCOL_VERSION) -> bytes:
    """Build the length-prefixed handshake packet opening a status session."""
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port out of range: {port}")
    address = (host + FML_MARKER).encode("utf-8")

    data = bytearray(encode_varint(protocol_version))
    data += encode_varint(len(address))
    data += address
    data.append(port & 0xFF)
    data.append((port >> 8) & 0xFF)
    data.append(NEXT_STATE_STATUS)

    # Length covers the packet id byte plus the body.
    return encode_varint(len(data) + 1) + bytes([HANDSHAKE_PACKET_ID]) + bytes(data)
