"""Read-only views of the registry: HTML status page and live event feed."""

import asyncio
import html
import json
from typing import Any, AsyncIterator, Dict, List, Optional

from core.registry import Registry


def format_list(items: List[str]) -> str:
    """Render strings as an escaped HTML list."""
    return "<ul>" + "".join(f"<li>{html.escape(item)}</li>" for item in items) + "</ul>"


def render_status_page(registry: Registry) -> str:
    """Render the status page listing every client and its recent messages."""
    parts = [
        "<html><head><title>Telemetry collector</title></head><body>",
        "<h1>Server details</h1>",
        "<h2>Clients</h2>",
        format_list(sorted(registry.list_display_names())),
    ]

    for identity in sorted(registry.list_identities(), key=str):
        messages = registry.messages_for(identity)
        parts.append(f"<h2>{identity}</h2>")
        parts.append(format_list([f"{timestamp} {payload}" for timestamp, payload in messages]))

    parts.append("</body></html>")
    return "".join(parts)


def client_summary(registry: Registry) -> Dict[str, Any]:
    """Identities and labels currently known to the registry."""
    return {
        "identities": [str(identity) for identity in registry.list_identities()],
        "labels": registry.list_display_names(),
    }


async def status_events(registry: Registry, poll_interval: float = 0.5,
                        max_events: Optional[int] = None) -> AsyncIterator[Dict[str, Any]]:
    """
    Yield a server-sent event whenever the registry revision changes.

    Args:
        registry: Registry to watch
        poll_interval: Seconds between revision checks
        max_events: Stop after this many events, unbounded if None
    """
    last_revision = None
    sent = 0
    try:
        while max_events is None or sent < max_events:
            revision = registry.revision
            if revision == last_revision:
                await asyncio.sleep(poll_interval)
                continue
            last_revision = revision
            summary = client_summary(registry)
            summary["revision"] = revision
            sent += 1
            yield {"event": "status", "data": json.dumps(summary)}
    except asyncio.CancelledError:
        pass
