"""Unit tests for model classes."""

import uuid
from models.entry import Entry, Timestamp
from models.client import ClientRecord


def test_timestamp_ordering():
    """Test Timestamp orders by seconds, then nanoseconds."""
    assert Timestamp(1, 0) < Timestamp(1, 500) < Timestamp(2, 0)
    assert Timestamp(-1, 999) < Timestamp(0, 0)
    assert Timestamp(3, 4) == Timestamp(3, 4)
    assert sorted([Timestamp(2, 0), Timestamp(1, 500), Timestamp(1, 0)]) == [
        Timestamp(1, 0), Timestamp(1, 500), Timestamp(2, 0)
    ]


def test_timestamp_now_and_format():
    """Test Timestamp sampling and its text form."""
    now = Timestamp.now()
    assert now.seconds > 0
    assert 0 <= now.nanoseconds < 1_000_000_000
    assert str(Timestamp(100, 200)) == "(100,200)"


def test_entry_creation():
    """Test Entry model creation and dictionary form."""
    entry = Entry(Timestamp(100, 200), "hello")
    assert entry.payload == "hello"
    assert entry.source is None
    assert entry.to_dict() == {"timestamp": "(100,200)", "payload": "hello", "source": None}

    sourced = Entry(Timestamp(1, 2), "x", source=("10.0.0.1", 4000))
    assert sourced.to_dict()["source"] == "10.0.0.1:4000"


def test_client_record():
    """Test ClientRecord defaults and message storage."""
    identity = uuid.uuid4()
    client = ClientRecord(identity)

    assert client.identity == identity
    assert client.display_name == ""
    assert client.label == f" :: {identity}"
    assert len(client.history) == 0
    assert client.history.capacity == 10

    entry = Entry(Timestamp(1, 0), "test_data")
    client.add_message(entry)
    assert client.history.snapshot() == [entry]

    client.display_name = "sensor"
    assert client.label == f"sensor :: {identity}"
