from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, FrozenSet, Mapping, Optional, Sequence, Tuple, Union

from .types import normalize_id

if TYPE_CHECKING:
    from .asset import Asset
    from .licence import Licence
    from attribution_engine.runtime.answer_store import AnswerStore


# ----------------------------
# Evaluation context
# ----------------------------

@dataclass(frozen=True)
class TransitionContext:
    """
    Read-only view handed to computed transition rules and disabled-answer predicates.

    Built by the engine at navigation time, after the triggering answer was recorded.
    """
    step_id: str
    answer_id: Optional[str]
    answers: "AnswerStore"
    asset: Optional["Asset"] = None
    licence: Optional["Licence"] = None
    flags: Mapping[str, Any] = field(default_factory=dict)
    extensions: FrozenSet[str] = field(default_factory=frozenset)

    def flag(self, name: str, default: Any = False) -> Any:
        return self.flags.get(name, default)

    def has_extension(self, name: str) -> bool:
        return name in self.extensions


# ----------------------------
# Transition targets (tagged variants)
# ----------------------------

@dataclass(frozen=True)
class Constant:
    step_id: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "step_id", normalize_id(self.step_id, what="target step id"))

    def resolve(self, ctx: TransitionContext) -> str:
        return self.step_id

    def candidates(self) -> Tuple[str, ...]:
        return (self.step_id,)


@dataclass(frozen=True)
class Computed:
    """
    Target computed from the context at navigation time.

    possible_targets lists every id fn may return so tables can be validated
    statically; an empty tuple means "validate at navigation time only".
    """
    fn: Callable[[TransitionContext], str]
    possible_targets: Tuple[str, ...] = ()
    description: str = ""

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise TypeError("Computed.fn must be callable")
        object.__setattr__(self, "possible_targets", tuple(self.possible_targets))

    def resolve(self, ctx: TransitionContext) -> str:
        return str(self.fn(ctx))

    def candidates(self) -> Tuple[str, ...]:
        return self.possible_targets


Target = Union[Constant, Computed]


def as_target(value: Union[str, Target]) -> Target:
    if isinstance(value, (Constant, Computed)):
        return value
    return Constant(value)


# ----------------------------
# Step definition
# ----------------------------

@dataclass(frozen=True)
class AnswerSpec:
    """
    A selectable answer.

    - field_name/value: where the answer lands in the grouped view; value None means
      "use the recorded value"
    - text_only: only recorded strings are projected; choosing the answer without
      a value leaves field_name out of the grouped view
    - disabled_when: predicate that withdraws the answer (still rendered, not selectable)
    """
    answer_id: str
    target: Target
    label: str = ""
    field_name: Optional[str] = None
    value: Optional[str] = None
    text_only: bool = False
    disabled_when: Optional[Callable[[TransitionContext], bool]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "answer_id", normalize_id(self.answer_id, what="answer id"))
        object.__setattr__(self, "target", as_target(self.target))

    def is_enabled(self, ctx: TransitionContext) -> bool:
        return self.disabled_when is None or not self.disabled_when(ctx)


@dataclass(frozen=True)
class FreeTextSpec:
    """
    Free-text input of a step.

    Keystrokes log trimmed text as answer_id and clear empty_answer_id; an emptied
    input clears answer_id and logs empty_answer_id. Confirming advances to target.
    If allow_empty_choice, empty_answer_id may also be submitted directly
    ("unknown"/"no value" alternative), which clears the text and advances.
    """
    target: Target
    answer_id: str = "1"
    empty_answer_id: Optional[str] = "2"
    allow_empty_choice: bool = True
    label: str = ""
    field_name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "target", as_target(self.target))
        object.__setattr__(self, "answer_id", normalize_id(self.answer_id, what="answer id"))
        if self.empty_answer_id is not None:
            object.__setattr__(
                self, "empty_answer_id", normalize_id(self.empty_answer_id, what="empty answer id")
            )
            if self.empty_answer_id == self.answer_id:
                raise ValueError("FreeTextSpec.empty_answer_id must differ from answer_id")

    def answer_ids(self) -> Tuple[str, ...]:
        if self.empty_answer_id is None:
            return (self.answer_id,)
        return (self.answer_id, self.empty_answer_id)


def _as_tuple(seq: Sequence[AnswerSpec]) -> Tuple[AnswerSpec, ...]:
    return tuple(seq)


@dataclass(frozen=True)
class StepDefinition:
    """
    One screen of a dialogue.

    terminal steps offer no answers; reaching one ends the flow (result pages).
    group names the grouped-view bucket the step's answers are projected into.
    """
    step_id: str
    answers: Sequence[AnswerSpec] = field(default_factory=tuple)
    free_text: Optional[FreeTextSpec] = None
    terminal: bool = False
    group: Optional[str] = None
    headline: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "step_id", normalize_id(self.step_id, what="step id"))
        object.__setattr__(self, "answers", _as_tuple(self.answers))

        seen = set()
        for spec in self.answers:
            if spec.answer_id in seen:
                raise ValueError(f"Step {self.step_id!r} defines answer {spec.answer_id!r} twice")
            seen.add(spec.answer_id)
        if self.free_text is not None:
            clash = seen.intersection(self.free_text.answer_ids())
            if clash:
                raise ValueError(f"Step {self.step_id!r}: free-text answer ids clash with {sorted(clash)}")

        if self.terminal and (self.answers or self.free_text is not None):
            raise ValueError(f"Terminal step {self.step_id!r} cannot offer answers")

    # -----------------------
    # Lookup
    # -----------------------

    def answer(self, answer_id: str) -> Optional[AnswerSpec]:
        for spec in self.answers:
            if spec.answer_id == answer_id:
                return spec
        return None

    def answer_ids(self) -> Tuple[str, ...]:
        """
        Every answer id the step may record (selectable + free-text ids).
        """
        ids = [a.answer_id for a in self.answers]
        if self.free_text is not None:
            ids.extend(self.free_text.answer_ids())
        return tuple(ids)

    def is_free_text_answer(self, answer_id: str) -> bool:
        return self.free_text is not None and answer_id in self.free_text.answer_ids()

    def field_for(self, answer_id: str) -> Optional[str]:
        spec = self.answer(answer_id)
        if spec is not None:
            return spec.field_name
        if self.free_text is not None and answer_id == self.free_text.answer_id:
            return self.free_text.field_name
        return None

    def targets(self) -> Tuple[Tuple[str, Target], ...]:
        out = [(a.answer_id, a.target) for a in self.answers]
        if self.free_text is not None:
            out.append((self.free_text.answer_id, self.free_text.target))
        return tuple(out)

    # -----------------------
    # Context-dependent views
    # -----------------------

    def available_answers(self, ctx: TransitionContext) -> Tuple[AnswerSpec, ...]:
        return tuple(a for a in self.answers if a.is_enabled(ctx))

    def disabled_answers(self, ctx: TransitionContext) -> Tuple[AnswerSpec, ...]:
        return tuple(a for a in self.answers if not a.is_enabled(ctx))

    def accepts(self, answer_id: str, ctx: TransitionContext) -> bool:
        spec = self.answer(answer_id)
        if spec is not None:
            return spec.is_enabled(ctx)
        if self.free_text is None:
            return False
        if answer_id == self.free_text.answer_id:
            return True
        return answer_id == self.free_text.empty_answer_id and self.free_text.allow_empty_choice

    def target_for(self, answer_id: str) -> Optional[Target]:
        spec = self.answer(answer_id)
        if spec is not None:
            return spec.target
        if self.is_free_text_answer(answer_id):
            return self.free_text.target  # type: ignore[union-attr]
        return None
