import asyncio
from collections import defaultdict
from typing import Any, Awaitable, Callable, DefaultDict, List, Type

Handler = Callable[[Any], Awaitable[None]]


class EventBus:
    """Async pub/sub for change notifications such as token rotations."""

    def __init__(self) -> None:
        self._handlers: DefaultDict[Type[Any], List[Handler]] = defaultdict(list)
        self._lock = asyncio.Lock()

    async def subscribe(self, event_type: Type[Any], handler: Handler) -> None:
        async with self._lock:
            self._handlers[event_type].append(handler)

    async def unsubscribe(self, event_type: Type[Any], handler: Handler) -> None:
        async with self._lock:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

    async def publish(self, event: Any) -> int:
        """Deliver ``event`` to its type's handlers in order, returning how many ran."""
        handlers = list(self._handlers[type(event)])
        for handler in handlers:
            await handler(event)
        return len(handlers)
