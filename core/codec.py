"""Reversible XOR obfuscation applied to datagrams on the wire."""

from core.exceptions import DecodeError

KEY = 0x11

_TABLE = bytes(b ^ KEY for b in range(256))


def encode(data: bytes) -> bytes:
    """Obfuscate bytes for transmission."""
    return bytes(data).translate(_TABLE)


def decode(data: bytes) -> bytes:
    """Reverse ``encode``. The transform is its own inverse."""
    return bytes(data).translate(_TABLE)


def encode_text(text: str) -> bytes:
    return encode(text.encode('utf-8'))


def decode_text(data: bytes) -> str:
    """
    De-obfuscate a datagram and interpret it as UTF-8 text.

    Raises:
        DecodeError: If the de-obfuscated bytes are not valid UTF-8
    """
    try:
        return decode(data).decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecodeError(f"Packet is not valid text: {str(e)}") from e
