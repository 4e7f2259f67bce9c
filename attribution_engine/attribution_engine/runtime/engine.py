from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Tuple

from attribution_engine.errors import ConfigurationError, InvalidAnswer, StepNotFound
from attribution_engine.invariants.validate import require_valid_table
from attribution_engine.models.asset import Asset
from attribution_engine.models.licence import Licence
from attribution_engine.models.snapshot import SessionSnapshot
from attribution_engine.models.step import AnswerSpec, StepDefinition, TransitionContext
from attribution_engine.models.types import DONE, AnswerValue, normalize_id
from attribution_engine.tables.table import DEFAULT_EXTENSIONS, ExtensionRegistry, StepTable

from .answer_store import AnswerStore
from .events import EngineEvents, NavigateEvent, UpdateEvent


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine runtime configuration.
    Keep small; flow rules live in the step tables.
    """
    # Validate the table (dangling targets etc.) when the engine is constructed.
    validate_on_start: bool = True
    # A step records one decision: submitting an answer drops the step's other
    # choices, so re-answering after back-navigation does not leave stale entries.
    replace_step_answers: bool = True


@dataclass(frozen=True)
class SessionContext:
    """
    Session-level facts transition rules may read besides the answers.
    """
    asset: Optional[Asset] = None
    licence: Optional[Licence] = None
    flags: Mapping[str, Any] = field(default_factory=dict)


ContextProvider = Callable[[AnswerStore], SessionContext]


def _empty_context(store: AnswerStore) -> SessionContext:
    return SessionContext()


class DialogueEngine:
    """
    Generic state machine over a StepTable.

    States are step ids plus DONE. submit() records the answer, emits "update",
    resolves the step's transition rule and moves on, emitting "navigate".
    A transition to an unregistered step is a ConfigurationError; the engine is
    then failed and refuses further input.
    """

    def __init__(
        self,
        table: StepTable,
        *,
        store: Optional[AnswerStore] = None,
        current_step_id: Optional[str] = None,
        config: Optional[EngineConfig] = None,
        context_provider: Optional[ContextProvider] = None,
    ) -> None:
        self.config = config or EngineConfig()
        if self.config.validate_on_start:
            require_valid_table(table)

        self.table = table
        self.store = store if store is not None else AnswerStore.for_table(table)
        self.events = EngineEvents()
        self._context_provider = context_provider or _empty_context
        self._error: Optional[ConfigurationError] = None

        start = normalize_id(current_step_id, what="step id") if current_step_id is not None else table.entry_step_id
        if start != DONE:
            table.get_step(start)
        self._current = start
        self._history: list[str] = [start]

    # -----------------------
    # Snapshots
    # -----------------------

    @classmethod
    def from_snapshot(
        cls,
        table: StepTable,
        snapshot: SessionSnapshot,
        *,
        extensions: ExtensionRegistry = DEFAULT_EXTENSIONS,
        config: Optional[EngineConfig] = None,
        context_provider: Optional[ContextProvider] = None,
    ) -> "DialogueEngine":
        """
        Rebuild an engine from a snapshot taken on the same base table.

        Extensions recorded in the snapshot are re-applied first so the restored
        table, and therefore every later transition, matches the snapshotted session.
        The visited history is restored too, so back() walks the same path.
        """
        table = extensions.apply(table, snapshot.extensions)
        store = AnswerStore.from_dict(snapshot.answers, known_steps=table.step_ids())
        engine = cls(
            table,
            store=store,
            current_step_id=snapshot.current_step_id,
            config=config,
            context_provider=context_provider,
        )

        history = list(snapshot.history)
        for step_id in history:
            if step_id != DONE:
                table.get_step(step_id)
        if not history or history[-1] != engine.current_step_id:
            history.append(engine.current_step_id)
        engine._history = history
        return engine

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            current_step_id=self._current,
            answers=self.store.to_dict(),
            extensions=tuple(self.table.extensions),
            history=tuple(self._history),
            done=self.is_done,
        )

    # -----------------------
    # State
    # -----------------------

    @property
    def current_step_id(self) -> str:
        return self._current

    @property
    def current_step(self) -> Optional[StepDefinition]:
        if self._current == DONE:
            return None
        return self.table.get_step(self._current)

    @property
    def state(self) -> str:
        if self._error is not None:
            return "error"
        return self._current

    @property
    def is_done(self) -> bool:
        step = self.current_step
        return step is None or step.terminal

    @property
    def error(self) -> Optional[ConfigurationError]:
        return self._error

    def history(self) -> Tuple[str, ...]:
        return tuple(self._history)

    def context(self, answer_id: Optional[str] = None) -> TransitionContext:
        extra = self._context_provider(self.store)
        return TransitionContext(
            step_id=self._current,
            answer_id=answer_id,
            answers=self.store,
            asset=extra.asset,
            licence=extra.licence,
            flags=dict(extra.flags),
            extensions=self.table.extensions,
        )

    def available_answers(self) -> Tuple[AnswerSpec, ...]:
        step = self.current_step
        if step is None:
            return tuple()
        return step.available_answers(self.context())

    def current_answers(self) -> Mapping[str, AnswerValue]:
        if self._current == DONE:
            return {}
        return self.store.answers_for(self._current)

    def grouped_view(self) -> Mapping[str, Mapping[str, str]]:
        return self.store.to_grouped_view(self.table)

    # -----------------------
    # Input
    # -----------------------

    def submit(self, answer_id: Any, value: Optional[AnswerValue] = None) -> str:
        """
        Record (current step, answer_id, value) and advance.

        value None records True for choice answers; for the free-text answer it
        commits the text already typed. Returns the new state (a step id or DONE).
        Raises InvalidAnswer, leaving the engine untouched, when the answer is not
        offered here.
        """
        step = self._require_open_step(answer_id)
        aid = normalize_id(answer_id, what="answer id")

        if not step.accepts(aid, self.context(aid)):
            reason = "disabled" if step.answer(aid) is not None else "not offered"
            logger.warning("rejected answer %s on step %s (%s)", aid, step.step_id, reason)
            raise InvalidAnswer(step.step_id, aid, reason)

        if step.is_free_text_answer(aid):
            ft = step.free_text
            assert ft is not None
            if aid == ft.answer_id:
                text = value if isinstance(value, str) else self.store.get(step.step_id, ft.answer_id, "")
                self._record_text(step, text if isinstance(text, str) else "")
            else:
                self._record_text(step, "")
        else:
            if self.config.replace_step_answers:
                self.store.clear_step(step.step_id)
            self.store.set(step.step_id, aid, value)
            self._emit_update(aid)

        return self._advance(step, aid)

    def input_text(self, text: Optional[str]) -> None:
        """
        Keystroke on the current step's free-text input; records without advancing.
        """
        step = self._require_open_step(None)
        if step.free_text is None:
            raise InvalidAnswer(step.step_id, "<text>", "step has no free-text input")
        self._record_text(step, text or "")

    def confirm_text(self, text: Optional[str] = None) -> str:
        """
        Explicit submit of the free-text input (enter key / confirm action).
        """
        step = self._require_open_step(None)
        if step.free_text is None:
            raise InvalidAnswer(step.step_id, "<text>", "step has no free-text input")
        return self.submit(step.free_text.answer_id, text)

    def replay_inputs(self) -> Mapping[str, str]:
        """
        Re-log the strings already stored for the current step (e.g. after
        re-rendering it) so connected components see them again.
        """
        step = self.current_step
        if step is None or step.free_text is None:
            return {}
        strings = self.store.strings_for(step.step_id)
        text = strings.get(step.free_text.answer_id)
        if text:
            self._record_text(step, text)
        return strings

    # -----------------------
    # Navigation
    # -----------------------

    def go_to(self, step_id: str) -> str:
        """
        Jump to a registered step without answering (resume, links back).
        """
        self._require_healthy()
        sid = normalize_id(step_id, what="step id")
        if sid != DONE:
            self.table.get_step(sid)
        self._move(sid, answer_id=None)
        return sid

    def back(self) -> str:
        """
        Return to the previously visited step; recorded answers are kept.
        """
        self._require_healthy()
        if len(self._history) < 2:
            return self._current
        self._history.pop()
        previous = self._current
        self._current = self._history[-1]
        logger.debug("back %s -> %s", previous, self._current)
        self.events.navigate.emit(
            NavigateEvent(step_id=self._current, previous_step_id=previous, answer_id=None, done=False)
        )
        return self._current

    # -----------------------
    # Internals
    # -----------------------

    def _require_healthy(self) -> None:
        if self._error is not None:
            raise self._error

    def _require_open_step(self, answer_id: Any) -> StepDefinition:
        self._require_healthy()
        step = self.current_step
        aid = str(answer_id) if answer_id is not None else "<text>"
        if step is None:
            raise InvalidAnswer(DONE, aid, "dialogue is finished")
        if step.terminal:
            raise InvalidAnswer(step.step_id, aid, "step is terminal")
        return step

    def _record_text(self, step: StepDefinition, text: str) -> None:
        ft = step.free_text
        assert ft is not None
        sid = step.step_id
        if self.config.replace_step_answers:
            for aid in tuple(self.store.answers_for(sid)):
                if not step.is_free_text_answer(aid):
                    self.store.delete(sid, aid)

        value = text.strip()
        if value:
            self.store.set(sid, ft.answer_id, value)
            if ft.empty_answer_id is not None:
                self.store.delete(sid, ft.empty_answer_id)
            self._emit_update(ft.answer_id)
        else:
            self.store.delete(sid, ft.answer_id)
            if ft.empty_answer_id is not None:
                self.store.set(sid, ft.empty_answer_id)
            self._emit_update(ft.empty_answer_id)

    def _advance(self, step: StepDefinition, answer_id: str) -> str:
        target = step.target_for(answer_id)
        if target is None:
            err = ConfigurationError(f"Step {step.step_id!r} answer {answer_id!r} has no transition")
            self._fail(err)
            raise err

        next_id = target.resolve(self.context(answer_id)).strip()
        if next_id != DONE and not self.table.has_step(next_id):
            err = StepNotFound(next_id, referenced_from=step.step_id)
            self._fail(err)
            raise err

        self._move(next_id, answer_id=answer_id)
        return next_id

    def _move(self, step_id: str, *, answer_id: Optional[str]) -> None:
        previous = self._current
        self._current = step_id
        self._history.append(step_id)
        logger.debug("step %s --%s--> %s", previous, answer_id, step_id)
        self.events.navigate.emit(
            NavigateEvent(
                step_id=step_id,
                previous_step_id=previous,
                answer_id=answer_id,
                done=step_id == DONE,
            )
        )

    def _emit_update(self, answer_id: Optional[str]) -> None:
        self.events.update.emit(
            UpdateEvent(snapshot=self.snapshot(), step_id=self._current, answer_id=answer_id)
        )

    def _fail(self, err: ConfigurationError) -> None:
        logger.error("dialogue %s failed on step %s: %s", self.table.name, self._current, err)
        self._error = err
