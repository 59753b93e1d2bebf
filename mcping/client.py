"""Status client: one connection per ping, over asyncio streams."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from mcping.errors import ConnectFailed, InvalidStatusLength, InvalidStringLength, MalformedPayload
from mcping.handshake import STATUS_REQUEST
from mcping.models import Status
from mcping.varint import read_varint

logger = logging.getLogger(__name__)

# Errors raised by the transport that mean the ping could not complete.
TRANSPORT_ERRORS = (OSError, EOFError, asyncio.TimeoutError)


async def _bounded(awaitable, timeout: Optional[float]):
    if timeout is None:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout)


async def request_status(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    handshake: bytes,
    timeout: Optional[float] = None,
) -> Status:
    """Run the handshake/request/response exchange on an open stream.

    Transport errors propagate unchanged; the caller decides how to wrap them.
    """
    logger.debug("writing handshake %s", handshake.hex(" "))
    writer.write(handshake)
    logger.debug("writing request")
    writer.write(STATUS_REQUEST)
    await _bounded(writer.drain(), timeout)

    async def read(n: int) -> bytes:
        return await _bounded(reader.read(n), timeout)

    length = await read_varint(read)
    logger.debug("length %s", length)
    if length <= 0:
        raise InvalidStatusLength(length)

    prefix = await read_varint(read)
    logger.debug("string prefix: %s", prefix)

    string_length = await read_varint(read)
    logger.debug("string length: %s", string_length)
    if not 0 <= string_length <= length:
        raise InvalidStringLength(string_length, length)
    raw = await _bounded(reader.readexactly(string_length), timeout)
    logger.debug("read status (%s bytes)\n%s", string_length, raw.decode("utf-8", errors="replace"))

    try:
        return Status.from_json(raw)
    except ValueError as e:
        raise MalformedPayload(e) from e


async def close_stream(writer: asyncio.StreamWriter) -> None:
    """Send the empty closing frame and shut both directions down.

    The ping result is already decided at this point, so failures are only
    logged.
    """
    try:
        writer.write(b"")
        if writer.can_write_eof():
            writer.write_eof()
        writer.close()
        await writer.wait_closed()
    except (OSError, RuntimeError) as e:
        logger.warning("failed to close connection cleanly: %s", e)


async def ping(handshake: bytes, host: str, port: int, timeout: Optional[float] = 5.0) -> Status:
    """Perform one status ping against host:port.

    Raises a `ProtocolError` subclass on failure. Transport problems, including
    timeouts, surface as `ConnectFailed`.
    """
    logger.debug("connecting to: %s:%s", host, port)
    try:
        reader, writer = await _bounded(asyncio.open_connection(host, port), timeout)
    except TRANSPORT_ERRORS as e:
        raise ConnectFailed(f"unable to connect to {host}:{port}: {e!r}") from e

    try:
        return await request_status(reader, writer, handshake, timeout=timeout)
    except TRANSPORT_ERRORS as e:
        raise ConnectFailed(f"connection to {host}:{port} failed: {e!r}") from e
    finally:
        await close_stream(writer)
