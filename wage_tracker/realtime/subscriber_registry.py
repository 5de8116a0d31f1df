"""Registry for realtime event subscribers."""
import inspect
import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class SubscriberRegistry:
    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[Any], Any]]] = {}

    def subscribe(self, topic: str, handler: Callable[[Any], Any]) -> Callable[[], None]:
        self._subscribers.setdefault(topic, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._subscribers.get(topic, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    async def publish(self, topic: str, event: Any) -> None:
        for handler in list(self._subscribers.get(topic, [])):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Subscriber for %r failed", topic)
