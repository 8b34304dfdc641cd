"""Tests for the status HTTP application."""

import json
import socket
import uuid

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.registry import Registry
from core.status import render_status_page, status_events
from main import create_app
from models.entry import Entry, Timestamp

IDENTITY = uuid.UUID("deadbeef-dead-dead-dead-beefbeefbeef")


@pytest.fixture
def registry():
    registry = Registry()
    registry.record(IDENTITY, Entry(Timestamp(2, 0), "second"))
    registry.record(IDENTITY, Entry(Timestamp(1, 0), "<first>"))
    return registry


@pytest.fixture
def client(registry):
    """Test client without the UDP listener."""
    return TestClient(create_app(registry, Settings(), listen=False))


def test_health_check(client):
    """Test health endpoint reports client count."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "clients": 1, "packets": None}


def test_list_clients(client):
    """Test identities and labels are exposed."""
    response = client.get("/clients")
    assert response.status_code == 200
    assert response.json() == {"identities": [str(IDENTITY)], "labels": [f" :: {IDENTITY}"]}


def test_messages_sorted(client):
    """Test messages are returned oldest first."""
    response = client.get(f"/clients/{IDENTITY}/messages")
    assert response.status_code == 200
    assert response.json()["messages"] == [
        {"timestamp": "(1,0)", "payload": "<first>", "source": None},
        {"timestamp": "(2,0)", "payload": "second", "source": None},
    ]


def test_unknown_client_messages(client, registry):
    """Test reading an unknown client is empty and registers nothing."""
    unknown = uuid.uuid4()
    response = client.get(f"/clients/{unknown}/messages")
    assert response.status_code == 200
    assert response.json() == {"client_id": str(unknown), "messages": []}
    assert unknown not in registry


def test_invalid_client_id(client):
    """Test a malformed identity is a validation error."""
    assert client.get("/clients/not-a-uuid/messages").status_code == 422


def test_status_page(client):
    """Test the HTML page lists clients and escapes payloads."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    body = response.text
    assert "<h1>Server details</h1>" in body
    assert f"<h2>{IDENTITY}</h2>" in body
    assert "<li>(1,0) &lt;first&gt;</li><li>(2,0) second</li>" in body


def test_seed_clients_registered():
    """Test configured seed clients appear with their names."""
    registry = Registry()
    settings = Settings(seed_clients={str(IDENTITY): "lab sensor"})
    client = TestClient(create_app(registry, settings, listen=False))

    assert client.get("/clients").json()["labels"] == [f"lab sensor :: {IDENTITY}"]


def test_render_empty_registry():
    """Test the page renders with no clients."""
    page = render_status_page(Registry())
    assert "<h2>Clients</h2><ul></ul>" in page


@pytest.mark.asyncio
async def test_status_events_follow_revision(registry):
    """Test the event feed emits on start and after each change."""
    events = status_events(registry, poll_interval=0.01, max_events=2)

    first = await events.__anext__()
    assert first["event"] == "status"
    assert json.loads(first["data"])["identities"] == [str(IDENTITY)]

    other = uuid.uuid4()
    registry.record(other, Entry(Timestamp(1, 0), "new"))
    second = json.loads((await events.__anext__())["data"])
    assert str(other) in second["identities"]
    assert second["revision"] == registry.revision

    with pytest.raises(StopAsyncIteration):
        await events.__anext__()


def test_messages_include_sender_address(client, registry):
    """Test the datagram source address is exposed with each message."""
    registry.record(IDENTITY, Entry(Timestamp(3, 0), "third", source=("10.0.0.7", 40001)))

    messages = client.get(f"/clients/{IDENTITY}/messages").json()["messages"]
    assert messages[-1] == {"timestamp": "(3,0)", "payload": "third", "source": "10.0.0.7:40001"}


def test_startup_fails_when_udp_port_taken():
    """Test a UDP bind failure aborts application startup."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as taken:
        taken.bind(("127.0.0.1", 0))
        port = taken.getsockname()[1]
        settings = Settings(udp_host="127.0.0.1", udp_port=port)
        app = create_app(Registry(), settings, listen=True)

        with pytest.raises(OSError):
            with TestClient(app):
                pass
