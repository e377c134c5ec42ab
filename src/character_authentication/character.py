"""Character host context.

The host owns the database and an event bus. Authenticators receive it at
construction and emit their events through it.
"""

import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Union

from character_authentication.database import Database

logger = logging.getLogger(__name__)

Listener = Callable[[Dict[str, Any]], Union[None, Awaitable[None]]]


class Character:
    """Host application context shared by all authenticators."""

    def __init__(self, database: Database):
        self.database = database
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> None:
        """Subscribe a listener (plain function or coroutine function) to an event."""
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        """Remove a previously registered listener."""
        if listener in self._listeners.get(event, []):
            self._listeners[event].remove(listener)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    async def emit(self, event: str, payload: Dict[str, Any]) -> bool:
        """Call every listener of an event in registration order.

        Listener exceptions propagate to the emitter.

        Returns:
            True if the event had listeners
        """
        listeners = list(self._listeners.get(event, []))
        logger.debug(f"Emitting {event} to {len(listeners)} listener(s)")
        for listener in listeners:
            result = listener(payload)
            if inspect.isawaitable(result):
                await result
        return bool(listeners)
