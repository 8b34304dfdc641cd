"""Timestamp and entry models for received telemetry."""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

NANOS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True, order=True)
class Timestamp:
    """Sender wall-clock time, ordered by seconds then nanoseconds."""

    seconds: int
    nanoseconds: int

    @classmethod
    def now(cls) -> 'Timestamp':
        """Sample the local wall clock."""
        seconds, nanoseconds = divmod(time.time_ns(), NANOS_PER_SECOND)
        return cls(seconds, nanoseconds)

    def __str__(self) -> str:
        return f"({self.seconds},{self.nanoseconds})"


@dataclass(frozen=True)
class Entry:
    """One timestamped payload stored in a client's history."""

    timestamp: Timestamp
    payload: str
    source: Optional[Tuple[str, int]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to dictionary representation."""
        return {
            'timestamp': str(self.timestamp),
            'payload': self.payload,
            'source': f"{self.source[0]}:{self.source[1]}" if self.source else None
        }
