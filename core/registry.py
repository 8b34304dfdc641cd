"""Registry of known clients and their message histories."""

import threading
import uuid
from typing import Dict, List, Optional, Tuple

from core.history import History, DEFAULT_CAPACITY
from models.client import ClientRecord
from models.entry import Entry


class Registry:
    """
    Thread-safe directory mapping client identities to their records.

    One lock guards the map and every history it owns. Each operation holds it
    only while mutating or copying a single record, so critical sections stay
    bounded by the history capacity. Sorting and formatting for readers happen
    outside the lock on copied data.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """
        Initialize an empty registry.

        Args:
            capacity: History capacity for every client record
        """
        # History validates the capacity.
        self.capacity = History(capacity).capacity
        self._clients: Dict[uuid.UUID, ClientRecord] = {}
        self._lock = threading.Lock()
        self._revision = 0

    def _get_or_create(self, identity: uuid.UUID) -> ClientRecord:
        # Caller must hold self._lock.
        client = self._clients.get(identity)
        if client is None:
            client = ClientRecord(identity=identity, history=History(self.capacity))
            self._clients[identity] = client
        return client

    def ensure(self, identity: uuid.UUID, display_name: Optional[str] = None) -> None:
        """
        Register a client if it is not already known.

        Args:
            identity: Client identity
            display_name: Optional label to set on the record
        """
        with self._lock:
            changed = identity not in self._clients
            client = self._get_or_create(identity)
            if display_name is not None and display_name != client.display_name:
                client.display_name = display_name
                changed = True
            if changed:
                self._revision += 1

    def record(self, identity: uuid.UUID, entry: Entry) -> None:
        """Store an entry in the client's history, creating the client on first sight."""
        with self._lock:
            self._get_or_create(identity).add_message(entry)
            self._revision += 1

    def list_identities(self) -> List[uuid.UUID]:
        """Snapshot of all known identities, in no particular order."""
        with self._lock:
            return list(self._clients)

    def list_display_names(self) -> List[str]:
        """Snapshot of ``name :: identity`` labels, in no particular order."""
        with self._lock:
            return [client.label for client in self._clients.values()]

    def messages_for(self, identity: uuid.UUID) -> List[Tuple[str, str]]:
        """
        Get a client's messages in timestamp order.

        Entries with equal timestamps keep their ring order. Unknown identities
        yield an empty list and are not registered.

        Args:
            identity: Client identity

        Returns:
            List of (formatted timestamp, payload) pairs
        """
        return [(str(entry.timestamp), entry.payload) for entry in self.entries_for(identity)]

    def entries_for(self, identity: uuid.UUID) -> List[Entry]:
        """Copies of a client's entries in timestamp order, including sender addresses."""
        with self._lock:
            client = self._clients.get(identity)
            if client is None:
                return []
            entries = client.history.snapshot()

        entries.sort(key=lambda entry: entry.timestamp)
        return entries

    @property
    def revision(self) -> int:
        """Counter bumped on every mutation."""
        with self._lock:
            return self._revision

    def __contains__(self, identity: uuid.UUID) -> bool:
        with self._lock:
            return identity in self._clients

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)
