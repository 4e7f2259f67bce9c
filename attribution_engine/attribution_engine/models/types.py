from __future__ import annotations

from typing import Union


class _Absent:
    """
    Marker for "no answer recorded".

    Distinct from "" and from False: absence drives alternate transitions
    (e.g. route to a manual entry form).
    """

    _instance = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

# A recorded answer value. Omitted values are stored as True.
AnswerValue = Union[str, bool]

# Literal target meaning "end of flow".
DONE = "done"

# Table extension that unlocks the editing branch of the short wizard.
EDITING_STEPS = "editing-steps"


def is_absent(value: object) -> bool:
    return value is ABSENT


def as_form_value(value: AnswerValue) -> str:
    """
    Form serialization of a recorded value: booleans become "true"/"false".
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_id(value: object, *, what: str) -> str:
    """
    Step and answer ids are opaque strings; ints are accepted and stringified.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValueError(f"{what} must be a string id, got {type(value).__name__}")
    out = str(value).strip()
    if not out:
        raise ValueError(f"{what} must be non-empty")
    return out
