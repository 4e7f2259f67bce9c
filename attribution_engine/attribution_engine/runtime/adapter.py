from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Protocol, runtime_checkable

from attribution_engine.errors import InvalidAnswer
from attribution_engine.models.snapshot import SessionSnapshot
from attribution_engine.models.step import AnswerSpec, StepDefinition
from attribution_engine.models.types import AnswerValue

from .engine import DialogueEngine
from .events import NavigateEvent


logger = logging.getLogger(__name__)

SubmitHandler = Callable[[str, Optional[AnswerValue]], None]


@dataclass(frozen=True)
class RenderRequest:
    """
    Everything an adapter needs to draw one step.

    disabled answers are listed so they can be shown greyed out.
    """
    step: StepDefinition
    current_answers: Mapping[str, AnswerValue]
    enabled: tuple[AnswerSpec, ...]
    disabled: tuple[AnswerSpec, ...]


@runtime_checkable
class PresentationAdapter(Protocol):
    """
    Adapter contract (UI side).

    The kernel never renders; it asks the adapter to, and receives submitted
    values through the handler registered with on_submit().
    """

    def render_step(self, request: RenderRequest) -> None: ...

    def on_submit(self, handler: SubmitHandler) -> None: ...

    def show_done(self, snapshot: SessionSnapshot) -> None: ...


def render_request(engine: DialogueEngine) -> Optional[RenderRequest]:
    step = engine.current_step
    if step is None:
        return None
    ctx = engine.context()
    return RenderRequest(
        step=step,
        current_answers=engine.current_answers(),
        enabled=step.available_answers(ctx),
        disabled=step.disabled_answers(ctx),
    )


def bind_adapter(engine: DialogueEngine, adapter: PresentationAdapter, *, render_now: bool = True) -> Callable[[], None]:
    """
    Wire engine ↔ adapter.

    - navigate events re-render the new step (or show completion)
    - submitted values go to engine.submit(); an InvalidAnswer keeps the current
      step rendered and is not propagated to the UI

    Returns a function that detaches the navigate subscription.
    """

    def _on_navigate(event: NavigateEvent) -> None:
        _render(engine, adapter)

    def _on_submit(answer_id: str, value: Optional[AnswerValue] = None) -> None:
        try:
            engine.submit(answer_id, value)
        except InvalidAnswer as exc:
            logger.info("ignored submit from adapter: %s", exc)

    unsubscribe = engine.events.navigate.subscribe(_on_navigate)
    adapter.on_submit(_on_submit)
    if render_now:
        _render(engine, adapter)
    return unsubscribe


def _render(engine: DialogueEngine, adapter: PresentationAdapter) -> None:
    # Terminal result pages are rendered (they carry notes) and also complete the flow.
    request = render_request(engine)
    if request is not None:
        adapter.render_step(request)
    if engine.is_done:
        adapter.show_done(engine.snapshot())
