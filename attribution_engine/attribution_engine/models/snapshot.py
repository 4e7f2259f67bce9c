from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .types import AnswerValue, normalize_id


SNAPSHOT_VERSION = 1


def _freeze_answers(answers: Mapping[str, Mapping[str, AnswerValue]]) -> Dict[str, Dict[str, AnswerValue]]:
    # Preserve step order and answer order (dicts are insertion-ordered).
    out: Dict[str, Dict[str, AnswerValue]] = {}
    for step_id, entries in answers.items():
        sid = normalize_id(step_id, what="snapshot step id")
        bucket = out.setdefault(sid, {})
        for answer_id, value in entries.items():
            if not isinstance(value, (str, bool)):
                raise ValueError(
                    f"Snapshot value for ({sid!r}, {answer_id!r}) must be str or bool, got {type(value).__name__}"
                )
            bucket[normalize_id(answer_id, what="snapshot answer id")] = value
    return out


@dataclass(frozen=True)
class SessionSnapshot:
    """
    Serializable state of a dialogue session.

    - answers: ordered {step_id: {answer_id: value}}
    - current_step_id: step to resume at (the DONE literal once finished)
    - extensions: table extensions that were applied (e.g. "editing-steps")
    - history: visited step ids, oldest first, ending at current_step_id
    - done: the flow is finished (DONE or a terminal result page)
    """
    current_step_id: str
    answers: Mapping[str, Mapping[str, AnswerValue]] = field(default_factory=dict)
    extensions: Sequence[str] = field(default_factory=tuple)
    history: Sequence[str] = field(default_factory=tuple)
    done: bool = False
    version: int = SNAPSHOT_VERSION

    def __post_init__(self) -> None:
        object.__setattr__(self, "current_step_id", normalize_id(self.current_step_id, what="current step id"))
        object.__setattr__(self, "answers", _freeze_answers(self.answers))
        object.__setattr__(self, "extensions", tuple(sorted(set(self.extensions))))
        object.__setattr__(
            self, "history", tuple(normalize_id(s, what="history step id") for s in self.history)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "current_step_id": self.current_step_id,
            "done": self.done,
            "extensions": list(self.extensions),
            "history": list(self.history),
            "answers": {sid: dict(entries) for sid, entries in self.answers.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionSnapshot":
        version = int(data.get("version", SNAPSHOT_VERSION))
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported snapshot version: {version}")
        if "current_step_id" not in data:
            raise ValueError("Snapshot is missing current_step_id")
        return cls(
            current_step_id=data["current_step_id"],
            answers=data.get("answers") or {},
            extensions=tuple(data.get("extensions") or ()),
            history=tuple(data.get("history") or ()),
            done=bool(data.get("done", False)),
            version=version,
        )

    def to_json(self, *, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "SessionSnapshot":
        return cls.from_dict(json.loads(text))

    def step_ids(self) -> Tuple[str, ...]:
        return tuple(self.answers.keys())
