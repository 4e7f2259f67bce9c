from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from attribution_engine.models.step import Computed
from attribution_engine.models.types import DONE
from attribution_engine.tables.table import StepTable


@dataclass(frozen=True)
class InvariantViolation:
    rule: str
    message: str
    step_id: str = ""


# ---------------------------
# Table shape
# ---------------------------

def require_entry_step(table: StepTable) -> Sequence[InvariantViolation]:
    if not table.has_step(table.entry_step_id):
        return (
            InvariantViolation(
                rule="missing_entry_step",
                message=f"Table {table.name!r} has no entry step {table.entry_step_id!r}",
                step_id=table.entry_step_id,
            ),
        )
    return tuple()


def require_no_reserved_step_ids(table: StepTable) -> Sequence[InvariantViolation]:
    """
    DONE is a target literal, not a step.
    """
    if table.has_step(DONE):
        return (
            InvariantViolation(
                rule="reserved_step_id",
                message=f"Table {table.name!r} defines a step named {DONE!r}",
                step_id=DONE,
            ),
        )
    return tuple()


def require_steps_offer_answers(table: StepTable) -> Sequence[InvariantViolation]:
    """
    Non-terminal steps must offer at least one way forward.
    """
    violations: list[InvariantViolation] = []
    for step in table.steps():
        if step.terminal:
            continue
        if not step.answers and step.free_text is None:
            violations.append(
                InvariantViolation(
                    rule="empty_step",
                    message=f"Step {step.step_id!r} is not terminal but offers no answers",
                    step_id=step.step_id,
                )
            )
    return tuple(violations)


# ---------------------------
# Transitions
# ---------------------------

def require_targets_exist(table: StepTable) -> Sequence[InvariantViolation]:
    """
    Every constant target, and every declared possible target of a computed rule,
    must be a registered step or DONE.
    """
    violations: list[InvariantViolation] = []
    for step in table.steps():
        for answer_id, target in step.targets():
            for candidate in target.candidates():
                if candidate == DONE or table.has_step(candidate):
                    continue
                kind = "computed" if isinstance(target, Computed) else "constant"
                violations.append(
                    InvariantViolation(
                        rule="dangling_target",
                        message=(
                            f"Step {step.step_id!r} answer {answer_id!r} has {kind} target "
                            f"{candidate!r} which is not registered"
                        ),
                        step_id=step.step_id,
                    )
                )
    return tuple(violations)


def validate_all(table: StepTable) -> Sequence[InvariantViolation]:
    violations: list[InvariantViolation] = []
    violations.extend(require_entry_step(table))
    violations.extend(require_no_reserved_step_ids(table))
    violations.extend(require_steps_offer_answers(table))
    violations.extend(require_targets_exist(table))
    return tuple(violations)
