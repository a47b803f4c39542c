import asyncio
import logging

from ._protocol import HEADER_SIZE, read_length
from .exceptions import converted

DEFAULT_PORT = 9999
DEFAULT_TIMEOUT = 10.0

logger = logging.getLogger(__name__)


async def send_request(
    host: str,
    payload: bytes,
    *,
    port: int = DEFAULT_PORT,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    """Send a framed request over TCP and return the encrypted reply body.

    Raises CommunicationError on any connection, I/O or timeout failure.
    """
    logger.debug(f"Sending {len(payload)} bytes to {host}:{port}")
    with converted():
        async with asyncio.timeout(timeout):
            reader, writer = await asyncio.open_connection(host, port)
            try:
                writer.write(payload)
                await writer.drain()
                header = await reader.readexactly(HEADER_SIZE)
                body = await reader.readexactly(read_length(header))
            finally:
                writer.close()
                await writer.wait_closed()
    logger.debug(f"Received {len(body)} bytes from {host}:{port}")
    return body
