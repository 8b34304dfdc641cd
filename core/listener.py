"""UDP listener feeding received datagrams into the registry."""

import asyncio
import logging
from typing import Dict, Optional, Tuple

from core.exceptions import DecodeError, ParseError
from core.registry import Registry
from core.wire import parse_packet

logger = logging.getLogger(__name__)


class TelemetryListener(asyncio.DatagramProtocol):
    """Handles datagrams one at a time, in arrival order."""

    def __init__(self, registry: Registry):
        self.registry = registry
        self.transport: Optional[asyncio.DatagramTransport] = None
        self.stats: Dict[str, int] = {"received": 0, "accepted": 0, "dropped": 0, "errors": 0}

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport
        logger.info(f"Listening for telemetry on {transport.get_extra_info('sockname')}")

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        self.handle_datagram(data, addr)

    def handle_datagram(self, data: bytes, addr: Optional[Tuple[str, int]] = None) -> bool:
        """
        Decode, parse and record one datagram.

        Malformed packets are logged and dropped; registry state is untouched.

        Args:
            data: Raw obfuscated datagram
            addr: Sender address

        Returns:
            True if the packet was recorded
        """
        self.stats["received"] += 1
        source = (addr[0], addr[1]) if addr else None
        try:
            identity, entry = parse_packet(data, source=source)
        except DecodeError as e:
            self.stats["dropped"] += 1
            logger.warning(f"Dropping undecodable packet from {addr}: {str(e)}")
            return False
        except ParseError as e:
            self.stats["dropped"] += 1
            logger.warning(f"Dropping malformed packet from {addr}: {str(e)}")
            return False

        self.registry.record(identity, entry)
        self.stats["accepted"] += 1
        logger.debug(f"Recorded message from {identity} at {entry.timestamp}")
        return True

    def error_received(self, exc: Exception) -> None:
        self.stats["errors"] += 1
        logger.error(f"Receive error on telemetry socket: {str(exc)}")

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if exc is not None:
            logger.error(f"Telemetry socket closed with error: {str(exc)}")
        else:
            logger.info("Telemetry socket closed")


async def start_listener(registry: Registry, host: str, port: int) -> Tuple[asyncio.DatagramTransport, TelemetryListener]:
    """
    Bind the UDP socket and start receiving.

    Raises:
        OSError: If the socket cannot be bound
    """
    loop = asyncio.get_running_loop()
    try:
        return await loop.create_datagram_endpoint(
            lambda: TelemetryListener(registry),
            local_addr=(host, port)
        )
    except OSError as e:
        logger.critical(f"Cannot bind telemetry socket {host}:{port}: {str(e)}")
        raise
