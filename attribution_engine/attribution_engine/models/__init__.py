"""
Core kernel models.

Licence → Asset → Step → Snapshot
"""

from .types import (
    ABSENT,
    DONE,
    EDITING_STEPS,
    AnswerValue,
    as_form_value,
    is_absent,
)

from .licence import Licence
from .asset import Asset, AssetAttributes, Author
from .step import (
    AnswerSpec,
    Computed,
    Constant,
    FreeTextSpec,
    StepDefinition,
    Target,
    TransitionContext,
)
from .snapshot import SessionSnapshot

__all__ = [
    "ABSENT",
    "DONE",
    "EDITING_STEPS",
    "AnswerValue",
    "as_form_value",
    "is_absent",
    "Licence",
    "Asset",
    "AssetAttributes",
    "Author",
    "AnswerSpec",
    "Computed",
    "Constant",
    "FreeTextSpec",
    "StepDefinition",
    "Target",
    "TransitionContext",
    "SessionSnapshot",
]
