# pgl_core/common/events.py
import logging
from collections import defaultdict
from typing import Callable, Dict, List, Any

Handler = Callable[[Dict[str, Any]], None]

logger = logging.getLogger(__name__)

_registry: Dict[str, List[Handler]] = defaultdict(list)


def subscribe(event_name: str):
    """
    Decorator to register an event handler.
    Usage:
        @subscribe("entry.signed")
        def handler(payload): ...
    """
    def _decorator(fn: Handler) -> Handler:
        _registry[event_name].append(fn)
        return fn
    return _decorator


def publish(event_name: str, payload: Dict[str, Any]) -> None:
    """
    Publish an event to in-process subscribers.
    Keep payloads ID-based to avoid cross-app imports.
    """
    handlers = _registry.get(event_name, [])
    logger.debug("event=%s handlers=%d", event_name, len(handlers))
    for handler in handlers:
        handler(payload)
