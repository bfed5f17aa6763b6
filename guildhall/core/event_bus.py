"""EventBus - synchronous notifications between services and the scheduler.

A chain is one top-level emit plus everything its handlers emit in turn.
Each top-level emit (a scheduler call-in, a direct service call) starts a
fresh chain, so independent calls never suppress each other.

Within a chain:
- propagation depth is capped at MAX_DEPTH
- the same source may not emit the same event about the same subject twice
  (subject = the first of SUBJECT_KEYS found in the payload)

Services never import each other; events carry ids and small scalars only.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from guildhall.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5

# payload keys naming what an event is about, most specific first
SUBJECT_KEYS: tuple[str, ...] = ("instance_id", "adventurer_id", "party_id")


@dataclass
class GameEvent:
    """Event payload container.

    Args:
        event_type: event identifier (see EventTypes)
        data: ids and scalars only
        source: name of the emitting service
    """

    event_type: str
    data: dict[str, Any]
    source: str

    # set by the bus
    _depth: int = field(default=0, repr=False)

    @property
    def subject(self) -> Optional[str]:
        for key in SUBJECT_KEYS:
            value = self.data.get(key)
            if value is not None:
                return str(value)
        return None

    @property
    def chain_key(self) -> str:
        return f"{self.source}:{self.event_type}:{self.subject or '*'}"


EventHandler = Callable[[GameEvent], None]


class EventBus:
    """Synchronous event bus.

    Usage:
        bus = EventBus()
        bus.subscribe(EventTypes.NEW_DAY, party_service.handle_new_day)
        bus.emit(GameEvent(event_type=EventTypes.NEW_DAY, data={"day": 3}, source="scheduler"))
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._current_depth: int = 0
        self._emitted_in_chain: set[str] = set()

    @property
    def in_chain(self) -> bool:
        """True while handlers of a top-level emit are running."""
        return self._current_depth > 0

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("EventBus subscribe: %s -> %s", event_type, handler.__qualname__)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers is None or handler not in handlers:
            logger.warning(
                "EventBus handler not registered: %s -> %s",
                event_type,
                handler.__qualname__,
            )
            return
        handlers.remove(handler)

    def emit(self, event: GameEvent) -> int:
        """Dispatch an event to its handlers synchronously.

        Returns the number of handlers invoked. Events past MAX_DEPTH and
        repeats within the current chain are dropped with a warning.
        """
        top_level = not self.in_chain
        if top_level:
            self._emitted_in_chain.clear()

        if self._current_depth >= MAX_DEPTH:
            logger.warning(
                "EventBus depth limit (%d) reached, dropped %s", MAX_DEPTH, event.chain_key
            )
            return 0

        if event.chain_key in self._emitted_in_chain:
            logger.warning("EventBus duplicate event dropped: %s", event.chain_key)
            return 0
        self._emitted_in_chain.add(event.chain_key)
        event._depth = self._current_depth

        handlers = list(self._handlers.get(event.event_type, []))
        if not handlers:
            logger.debug("EventBus: no subscribers for %s", event.event_type)
            return 0

        logger.info(
            "EventBus dispatch: %s (depth=%d, handlers=%d)",
            event.chain_key,
            self._current_depth,
            len(handlers),
        )
        self._current_depth += 1
        try:
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "EventBus handler failed: %s (event=%s)",
                        handler.__qualname__,
                        event.event_type,
                    )
        finally:
            self._current_depth -= 1
        return len(handlers)

    def reset_chain(self) -> None:
        """Forget the current chain (end of a simulation step)."""
        self._emitted_in_chain.clear()
        self._current_depth = 0

    def clear(self) -> None:
        """Drop every subscription (tests)."""
        self._handlers.clear()
        self.reset_chain()

    @property
    def handler_count(self) -> int:
        return sum(len(h) for h in self._handlers.values())
