"""Wire message format: ``<identity>(<sec>,<nsec>)<payload>``."""

import re
import uuid
from typing import Optional, Tuple

from core.codec import decode_text
from core.exceptions import InvalidIdentityError, MalformedTimestampError
from models.entry import Entry, Timestamp

IDENTITY_LENGTH = 36

_IDENTITY_RE = re.compile(
    r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'
)
_INTEGER_RE = re.compile(r'[+-]?[0-9]+')

_I64 = (-2 ** 63, 2 ** 63 - 1)
_I32 = (-2 ** 31, 2 ** 31 - 1)


def parse_identity(text: str) -> uuid.UUID:
    """
    Parse a canonical hyphenated client identity.

    Raises:
        InvalidIdentityError: If text is not 8-4-4-4-12 hex digits
    """
    if not _IDENTITY_RE.fullmatch(text):
        raise InvalidIdentityError(f"Invalid client identity: {text!r}")
    return uuid.UUID(text)


def _parse_bounded_int(text: str, bounds: Tuple[int, int]) -> int:
    if not _INTEGER_RE.fullmatch(text):
        raise MalformedTimestampError(f"Timestamp field is not an integer: {text!r}")
    value = int(text)
    if not bounds[0] <= value <= bounds[1]:
        raise MalformedTimestampError(f"Timestamp field out of range: {text!r}")
    return value


def parse_timestamp(text: str) -> Timestamp:
    """
    Parse the text between the timestamp parentheses.

    A missing comma yields ``(0, 0)`` rather than an error.
    """
    seconds, comma, nanoseconds = text.partition(',')
    if not comma:
        return Timestamp(0, 0)
    return Timestamp(_parse_bounded_int(seconds, _I64), _parse_bounded_int(nanoseconds, _I32))


def parse_message(text: str) -> Tuple[uuid.UUID, Entry]:
    """
    Split decoded packet text into the sender identity and its entry.

    Args:
        text: Decoded wire message

    Returns:
        Tuple of client identity and the parsed entry

    Raises:
        InvalidIdentityError: If the first 36 characters are not an identity
        MalformedTimestampError: If the parenthesised timestamp is missing or invalid
    """
    identity = parse_identity(text[:IDENTITY_LENGTH])

    rest = text[IDENTITY_LENGTH:]
    if not rest.startswith('('):
        raise MalformedTimestampError(f"Missing timestamp after identity {identity}")
    end = rest.find(')')
    if end == -1:
        raise MalformedTimestampError(f"Unterminated timestamp from {identity}")

    timestamp = parse_timestamp(rest[1:end])
    return identity, Entry(timestamp=timestamp, payload=rest[end + 1:])


def parse_packet(data: bytes, source: Optional[Tuple[str, int]] = None) -> Tuple[uuid.UUID, Entry]:
    """
    Decode and parse one obfuscated datagram.

    Raises:
        DecodeError: If the datagram is not valid text
        ParseError: If the text is not a valid wire message
    """
    identity, entry = parse_message(decode_text(data))
    if source is not None:
        entry = Entry(timestamp=entry.timestamp, payload=entry.payload, source=source)
    return identity, entry


def create_message(identity: uuid.UUID, payload: str, timestamp: Optional[Timestamp] = None) -> str:
    """
    Build the plaintext wire message for a payload.

    The timestamp is sampled from the local clock unless one is given.
    """
    if timestamp is None:
        timestamp = Timestamp.now()
    return f"{identity}({timestamp.seconds},{timestamp.nanoseconds}){payload}"
