from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from attribution_engine.errors import UnknownStep
from attribution_engine.models.types import ABSENT, AnswerValue, as_form_value, is_absent, normalize_id

if TYPE_CHECKING:
    from attribution_engine.tables.table import StepTable


Key = Tuple[str, str]


class AnswerStore:
    """
    Mapping (step_id, answer_id) -> recorded value.

    - set() with no value records boolean True ("answer chosen, no text")
    - delete() restores the absent state; deleting an absent entry is a no-op
    - get() returns ABSENT for entries never recorded (never "" or None)

    Ids must be non-blank strings (ints are stringified); anything else raises
    ValueError. When known_steps is given, set() and delete() on any other step
    raise UnknownStep.
    """

    def __init__(self, *, known_steps: Optional[Iterable[str]] = None) -> None:
        # step_id -> {answer_id -> value}; both levels keep first-insertion order.
        self._data: Dict[str, Dict[str, AnswerValue]] = {}
        self._known: Optional[frozenset[str]] = (
            frozenset(normalize_id(s, what="step id") for s in known_steps) if known_steps is not None else None
        )

    # -----------------------
    # Construction helpers
    # -----------------------

    @classmethod
    def for_table(cls, table: "StepTable") -> "AnswerStore":
        return cls(known_steps=table.step_ids())

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Mapping[str, AnswerValue]],
        *,
        known_steps: Optional[Iterable[str]] = None,
    ) -> "AnswerStore":
        store = cls(known_steps=known_steps)
        for step_id, entries in data.items():
            for answer_id, value in entries.items():
                store.set(step_id, answer_id, value)
        return store

    def copy(self) -> "AnswerStore":
        out = AnswerStore(known_steps=self._known)
        out._data = {sid: dict(entries) for sid, entries in self._data.items()}
        return out

    # -----------------------
    # Core API
    # -----------------------

    def _key(self, step_id: Any, answer_id: Any) -> Key:
        sid = normalize_id(step_id, what="step id")
        aid = normalize_id(answer_id, what="answer id")
        if self._known is not None and sid not in self._known:
            raise UnknownStep(sid)
        return sid, aid

    def set(self, step_id: Any, answer_id: Any, value: Optional[AnswerValue] = None) -> None:
        sid, aid = self._key(step_id, answer_id)
        if value is None:
            value = True
        if not isinstance(value, (str, bool)):
            raise ValueError(f"Answer value must be str or bool, got {type(value).__name__}")
        self._data.setdefault(sid, {})[aid] = value

    def delete(self, step_id: Any, answer_id: Any) -> None:
        sid, aid = self._key(step_id, answer_id)
        entries = self._data.get(sid)
        if entries is None or aid not in entries:
            return
        del entries[aid]
        if not entries:
            del self._data[sid]

    def get(self, step_id: Any, answer_id: Any, default: Any = ABSENT) -> Any:
        sid = normalize_id(step_id, what="step id")
        aid = normalize_id(answer_id, what="answer id")
        return self._data.get(sid, {}).get(aid, default)

    def has(self, step_id: Any, answer_id: Any) -> bool:
        return not is_absent(self.get(step_id, answer_id))

    def answers_for(self, step_id: Any) -> Mapping[str, AnswerValue]:
        sid = normalize_id(step_id, what="step id")
        return dict(self._data.get(sid, {}))

    def strings_for(self, step_id: Any) -> Mapping[str, str]:
        """
        Free-text strings recorded for a step (booleans are not strings).
        """
        return {aid: v for aid, v in self.answers_for(step_id).items() if isinstance(v, str)}

    def merge(self, other: "AnswerStore") -> None:
        """
        Copy every entry of other into self; last write wins per key.
        """
        for sid, aid, value in other.items():
            self.set(sid, aid, value)

    def clear_step(self, step_id: Any) -> None:
        sid = normalize_id(step_id, what="step id")
        self._data.pop(sid, None)

    def items(self) -> Iterator[Tuple[str, str, AnswerValue]]:
        for sid, entries in self._data.items():
            for aid, value in entries.items():
                yield sid, aid, value

    def step_ids(self) -> Tuple[str, ...]:
        return tuple(self._data.keys())

    def to_dict(self) -> Dict[str, Dict[str, AnswerValue]]:
        return {sid: dict(entries) for sid, entries in self._data.items()}

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._data.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnswerStore):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"AnswerStore({self._data!r})"

    # -----------------------
    # Projection
    # -----------------------

    def to_grouped_view(self, table: "StepTable") -> Dict[str, Dict[str, str]]:
        """
        Project entries into {group: {field: value}} using the table's step order.

        Only steps that declare a group and answers that declare a field take part.
        A group appears once at least one of its fields has been recorded.
        Fixed answer values win over the recorded value; recorded booleans are
        serialized as "true"/"false" unless the answer is text_only.
        """
        view: Dict[str, Dict[str, str]] = {}
        for step in table.steps():
            if not step.group:
                continue
            entries = self._data.get(step.step_id)
            if not entries:
                continue
            for aid in step.answer_ids():
                if aid not in entries:
                    continue
                field_name = step.field_for(aid)
                if not field_name:
                    continue
                spec = step.answer(aid)
                recorded = entries[aid]
                if spec is not None and spec.value is not None:
                    out = spec.value
                elif spec is not None and spec.text_only and not isinstance(recorded, str):
                    continue
                else:
                    out = as_form_value(recorded)
                view.setdefault(step.group, {})[field_name] = out
        return view
