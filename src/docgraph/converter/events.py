"""Per-run publish/subscribe hooks.

Each Converter owns one EventBus. Emitting an event runs every listener
registered for it and waits for all of them before returning, so the next
conversion phase never starts while a listener of the previous one is still
running. Listeners of one batch may interleave with each other.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Iterable
from typing import Any

from docgraph.core.errors import RegistryError
from docgraph.core.logging import get_logger

log = get_logger("converter.events")

Listener = Callable[..., Any]


class EventBus:
    """Ordered listener registry over a closed set of event names."""

    def __init__(self, events: Iterable[str]) -> None:
        self._listeners: dict[str, list[tuple[Listener, bool]]] = {event: [] for event in events}

    @property
    def events(self) -> tuple[str, ...]:
        return tuple(self._listeners)

    def _entries(self, event: str) -> list[tuple[Listener, bool]]:
        try:
            return self._listeners[event]
        except KeyError:
            raise RegistryError.unknown_event(event) from None

    def on(self, event: str, listener: Listener) -> None:
        """Call ``listener`` on every emission of ``event``."""
        self._entries(event).append((listener, False))

    def once(self, event: str, listener: Listener) -> None:
        """Call ``listener`` on the next emission of ``event`` only."""
        self._entries(event).append((listener, True))

    def off(self, event: str, listener: Listener) -> None:
        entries = self._entries(event)
        entries[:] = [entry for entry in entries if entry[0] != listener]

    def listener_count(self, event: str) -> int:
        return len(self._entries(event))

    async def emit(self, event: str, *args: Any) -> None:
        """Run every listener of ``event`` and await them as one batch.

        The listener list is snapshotted first: listeners added or removed by
        a running listener take effect from the next emission.
        """
        entries = self._entries(event)
        batch = list(entries)
        if any(once for _, once in batch):
            entries[:] = [entry for entry in entries if not entry[1]]

        pending = []
        for listener, _ in batch:
            result = listener(*args)
            if inspect.isawaitable(result):
                pending.append(result)
        if pending:
            await asyncio.gather(*pending)
        log.debug("event.emitted", event_name=event, listeners=len(batch))
