"""Client record model for known telemetry senders."""

import uuid
from dataclasses import dataclass, field

from core.history import History, DEFAULT_CAPACITY
from models.entry import Entry


@dataclass
class ClientRecord:
    """Represents a known sender with its bounded message history."""

    identity: uuid.UUID
    display_name: str = ""
    history: History[Entry] = field(default_factory=lambda: History(DEFAULT_CAPACITY))

    @property
    def label(self) -> str:
        """Display label in the form ``name :: identity``."""
        return f"{self.display_name} :: {self.identity}"

    def add_message(self, entry: Entry) -> None:
        """Add a message to this client's history."""
        self.history.put(entry)

    def __repr__(self) -> str:
        return f"ClientRecord(identity={self.identity!r}, display_name={self.display_name!r})"
