"""
Observer channel between the parser and the surrounding build

BlockParser publishes block progress, notices, warnings and build
instructions here; the CLI (or any other orchestrator) subscribes to the
events it acts on.

Example:
    >>> bus = EventBus()
    >>> seen = []
    >>> bus.on(EventName.UGLIFY, seen.append)
    >>> bus.emit(EventName.UGLIFY, "payload")
    >>> seen
    ['payload']
"""

from typing import Any, Callable, Dict, List, Union

from ..models.events import EventName


Listener = Callable[[Any], None]


class EventBus:
    """
    Minimal synchronous publish/subscribe bus

    Listeners run in subscription order, in the emitting thread. An exception
    raised by a listener propagates to the emitter.
    """

    def __init__(self) -> None:
        self.listeners: Dict[EventName, List[Listener]] = {}

    def on(self, name: Union[EventName, str], listener: Listener) -> None:
        """Subscribe a listener to an event"""
        self.listeners.setdefault(EventName(name), []).append(listener)

    def off(self, name: Union[EventName, str], listener: Listener) -> None:
        """Unsubscribe a listener; unknown listeners are ignored"""
        registered = self.listeners.get(EventName(name), [])
        if listener in registered:
            registered.remove(listener)

    def emit(self, name: Union[EventName, str], payload: Any) -> None:
        """Deliver payload to every listener of the event"""
        for listener in list(self.listeners.get(EventName(name), [])):
            listener(payload)
