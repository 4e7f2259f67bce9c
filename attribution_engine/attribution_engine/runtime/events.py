from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from attribution_engine.models.snapshot import SessionSnapshot


logger = logging.getLogger(__name__)

E = TypeVar("E")


@dataclass(frozen=True)
class NavigateEvent:
    """
    Emitted after the engine moved to another step (or into DONE).
    """
    step_id: str
    previous_step_id: Optional[str]
    answer_id: Optional[str]
    done: bool = False


@dataclass(frozen=True)
class UpdateEvent:
    """
    Emitted after the answer store changed; snapshot reflects the change.
    """
    snapshot: SessionSnapshot
    step_id: str
    answer_id: Optional[str]


class Channel(Generic[E]):
    """
    Explicit, per-engine callback list.

    Handlers run synchronously in subscription order. A failing handler is
    propagated to the caller of emit(); the remaining handlers are skipped.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: List[Callable[[E], None]] = []

    def subscribe(self, handler: Callable[[E], None]) -> Callable[[], None]:
        if not callable(handler):
            raise TypeError(f"{self.name} handler must be callable")
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _unsubscribe

    def emit(self, event: E) -> None:
        logger.debug("emit %s to %d handler(s)", self.name, len(self._handlers))
        for handler in tuple(self._handlers):
            handler(event)

    def __len__(self) -> int:
        return len(self._handlers)


class EngineEvents:
    """
    The "navigate" and "update" channels of one engine.
    """

    def __init__(self) -> None:
        self.navigate: Channel[NavigateEvent] = Channel("navigate")
        self.update: Channel[UpdateEvent] = Channel("update")

    def channels(self) -> Dict[str, Channel]:
        return {"navigate": self.navigate, "update": self.update}
