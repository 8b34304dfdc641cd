"""Main FastAPI application serving collector status, plus the command line."""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import click
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from sse_starlette.sse import EventSourceResponse

from core.config import Settings, get_settings
from core.exceptions import ClientError, InvalidIdentityError
from core.listener import start_listener
from core.registry import Registry
from core.sender import send_message
from core.status import client_summary, render_status_page, status_events
from core.wire import parse_identity

logger = logging.getLogger(__name__)


def create_app(registry: Registry, settings: Optional[Settings] = None, listen: bool = True) -> FastAPI:
    """
    Build the status application around a shared registry.

    Args:
        registry: Registry fed by the listener and read by the endpoints
        settings: Collector settings, defaults to the environment
        listen: Bind the UDP listener for the lifetime of the app
    """
    settings = settings or get_settings()

    for identity, display_name in settings.seed_clients.items():
        registry.ensure(identity, display_name)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        transport = None
        if listen:
            # Bind failure propagates and aborts startup.
            transport, listener = await start_listener(registry, settings.udp_host, settings.udp_port)
            app.state.listener = listener
        try:
            yield
        finally:
            if transport is not None:
                transport.close()

    app = FastAPI(title="Telemetry Collector", version="1.0.0", lifespan=lifespan)
    app.state.registry = registry
    app.state.listener = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=HTMLResponse)
    def status_page():
        """Status page listing every client and its recent messages."""
        return render_status_page(registry)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        listener = app.state.listener
        return {
            "status": "healthy",
            "clients": len(registry),
            "packets": dict(listener.stats) if listener else None
        }

    @app.get("/clients")
    def get_clients():
        """Known client identities and display labels."""
        return client_summary(registry)

    @app.get("/clients/{client_id}/messages")
    def get_messages(client_id: uuid.UUID):
        """Messages for one client, oldest first. Unknown clients have none."""
        return {
            "client_id": str(client_id),
            "messages": [entry.to_dict() for entry in registry.entries_for(client_id)]
        }

    @app.get("/events")
    async def events():
        """Stream a status event whenever the registry changes."""
        return EventSourceResponse(status_events(registry, settings.events_poll_interval))

    return app


@click.group()
def cli() -> None:
    """Telemetry collector - receive and inspect client telemetry over UDP."""
    pass


@cli.command()
@click.option("--udp-host", default=None, help="Address the UDP listener binds to")
@click.option("--udp-port", type=int, default=None, help="UDP listener port")
@click.option("--http-host", default=None, help="Address the status server binds to")
@click.option("--http-port", type=int, default=None, help="Status server port")
def server(udp_host: Optional[str], udp_port: Optional[int],
           http_host: Optional[str], http_port: Optional[int]) -> None:
    """Run the UDP listener and the status server."""
    overrides = {
        "udp_host": udp_host, "udp_port": udp_port,
        "http_host": http_host, "http_port": http_port,
    }
    settings = get_settings().model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )
    logging.basicConfig(level=settings.log_level.upper())

    registry = Registry(capacity=settings.history_capacity)
    logger.info(f"Starting collector: UDP {settings.udp_host}:{settings.udp_port}, "
                f"HTTP {settings.http_host}:{settings.http_port}")
    app = create_app(registry, settings)
    uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_level=settings.log_level.lower())


@cli.command()
@click.argument("addr")
@click.argument("guid")
@click.argument("message")
def client(addr: str, guid: str, message: str) -> None:
    """Send MESSAGE to the collector at ADDR (host:port) as client GUID."""
    try:
        identity = parse_identity(guid)
    except InvalidIdentityError as e:
        raise click.BadParameter(str(e), param_hint="GUID") from e

    try:
        sent = send_message(addr, identity, message)
    except ClientError as e:
        raise click.BadParameter(str(e), param_hint="ADDR") from e
    except OSError as e:
        raise click.ClickException(f"Failed to send to {addr}: {str(e)}") from e
    click.echo(f"Sent {sent} bytes to {addr}")


if __name__ == "__main__":
    cli()
