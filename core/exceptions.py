"""Custom exceptions for the telemetry collector."""


class TelemetryError(Exception):
    """Base exception for collector errors."""
    pass


class DecodeError(TelemetryError):
    """Exception raised when a de-obfuscated packet is not valid text."""
    pass


class ParseError(TelemetryError):
    """Exception raised when decoded text is not a valid wire message."""
    pass


class InvalidIdentityError(ParseError):
    """Exception raised when the leading 36 characters are not a client identity."""
    pass


class MalformedTimestampError(ParseError):
    """Exception raised when the parenthesised timestamp cannot be read."""
    pass


class ClientError(TelemetryError):
    """Exception raised for sender-side errors."""
    pass
