"""Cart events.

Fire-and-forget notifications raised by cart operations. Listener failures
are logged and never reach the caller of the cart operation.

Events:
- cart.added     (CartItem)
- cart.updated   (CartItem)
- cart.removed   (CartItem)
- cart.stored    (no payload)
- cart.restored  (no payload)
- cart.erased    (no payload)
"""

import inspect
import json
from collections import defaultdict
from typing import Any, Callable

from shopping_cart.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[[Any], Any]


class CartEvents:
    """Event names fired by the cart."""

    ADDED = "cart.added"
    UPDATED = "cart.updated"
    REMOVED = "cart.removed"
    STORED = "cart.stored"
    RESTORED = "cart.restored"
    ERASED = "cart.erased"

    ALL = (ADDED, UPDATED, REMOVED, STORED, RESTORED, ERASED)


class EventDispatcher:
    """In-process listener registry. Listeners may be sync or async."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> Listener:
        self._listeners[event].append(listener)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        if listener in self._listeners.get(event, []):
            self._listeners[event].remove(listener)

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, []))

    async def trigger(self, event: str, payload: Any = None) -> None:
        """Call every listener of ``event`` with ``payload``."""
        for listener in self.listeners(event):
            try:
                result = listener(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(f"Listener for {event} failed: {e}", exc_info=True)


class RedisStreamPublisher:
    """Mirror cart events to Upstash Redis streams (``stream:cart:<event>``).

    Attach with ``publisher.attach(dispatcher)``.
    """

    STREAM_PREFIX = "stream:cart:"

    def __init__(self, redis, session_id: str) -> None:
        self.redis = redis
        self.session_id = session_id

    def attach(self, dispatcher: EventDispatcher) -> None:
        for event in CartEvents.ALL:
            dispatcher.on(event, self._listener_for(event))

    def _listener_for(self, event: str) -> Listener:
        async def publish(payload: Any) -> None:
            await self.publish(event, payload)
        return publish

    async def publish(self, event: str, payload: Any = None) -> None:
        data = {
            "event": event,
            "session_id": self.session_id,
            "item": payload.to_dict() if hasattr(payload, "to_dict") else None,
        }
        await self.redis.xadd(f"{self.STREAM_PREFIX}{event}", "*", {"data": json.dumps(data)})
        logger.debug(f"Emitted {event}")
