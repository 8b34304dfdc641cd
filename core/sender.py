"""Client-side send path: build, obfuscate and transmit one message."""

import logging
import re
import socket
import uuid
from typing import Optional, Tuple

from core.codec import encode_text
from core.exceptions import ClientError
from core.wire import create_message
from models.entry import Timestamp

logger = logging.getLogger(__name__)

_PORT_RE = re.compile(r'[0-9]+')


def parse_address(address: str) -> Tuple[str, int]:
    """
    Split a ``host:port`` string.

    Raises:
        ClientError: If the address has no valid port
    """
    host, sep, port = address.rpartition(':')
    if not sep or not host or not _PORT_RE.fullmatch(port) or not 0 < int(port) <= 65535:
        raise ClientError(f"Invalid address {address!r}, expected host:port")
    return host, int(port)


def send_message(address: str, identity: uuid.UUID, payload: str,
                 timestamp: Optional[Timestamp] = None) -> int:
    """
    Send one telemetry message as a single datagram.

    There is no acknowledgement; delivery is not guaranteed.

    Args:
        address: Collector address as ``host:port``
        identity: Sender identity
        payload: Message text
        timestamp: Optional fixed timestamp, defaults to now

    Returns:
        Number of bytes sent
    """
    host, port = parse_address(address)
    packet = encode_text(create_message(identity, payload, timestamp))
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sent = sock.sendto(packet, (host, port))
    logger.debug(f"Sent {sent} bytes to {host}:{port} as {identity}")
    return sent
