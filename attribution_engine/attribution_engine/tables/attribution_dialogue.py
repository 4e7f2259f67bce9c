"""
Short attribution wizard.

    0 typeOfUse → 1 author → 2 compilation → done

with_editing_steps() adds the editing branch:

    2 compilation → 3 editing ─ edited → 4 change → 5 creator → done
                              └ not edited → done
"""
from __future__ import annotations

from attribution_engine.models.step import AnswerSpec, FreeTextSpec, StepDefinition
from attribution_engine.models.types import DONE, EDITING_STEPS

from .table import DEFAULT_EXTENSIONS, StepTable


ATTRIBUTION_DIALOGUE = "attribution-dialogue"
ENTRY_STEP = "0"

GROUPS = ("typeOfUse", "author", "compilation", "editing", "change", "creator")


def _compilation_step(next_step_id: str) -> StepDefinition:
    return StepDefinition(
        step_id="2",
        group="compilation",
        headline="dialogue.compilation-headline",
        answers=(
            AnswerSpec("0", next_step_id, label="dialogue.compilation-true", field_name="compilation", value="true"),
            AnswerSpec("1", next_step_id, label="dialogue.compilation-false", field_name="compilation", value="false"),
        ),
    )


def attribution_dialogue_steps() -> tuple[StepDefinition, ...]:
    return (
        StepDefinition(
            step_id="0",
            group="typeOfUse",
            headline="dialogue.type-of-use-headline",
            answers=(
                AnswerSpec("0", "1", label="dialogue.type-of-use-print", field_name="type", value="print"),
                AnswerSpec("1", "1", label="dialogue.type-of-use-online", field_name="type", value="online"),
            ),
        ),
        StepDefinition(
            step_id="1",
            group="author",
            headline="dialogue.author-headline",
            answers=(
                AnswerSpec("0", "2", label="dialogue.no-author", field_name="no-author", value="true"),
            ),
            free_text=FreeTextSpec(target="2", answer_id="1", empty_answer_id=None, field_name="author"),
        ),
        _compilation_step(DONE),
    )


def editing_steps() -> tuple[StepDefinition, ...]:
    return (
        StepDefinition(
            step_id="3",
            group="editing",
            headline="dialogue.editing-headline",
            answers=(
                AnswerSpec("0", "4", label="dialogue.edited-true", field_name="edited", value="true"),
                AnswerSpec("1", DONE, label="dialogue.edited-false", field_name="edited", value="false"),
            ),
        ),
        StepDefinition(
            step_id="4",
            group="change",
            headline="dialogue.change-substep-headline",
            free_text=FreeTextSpec(target="5", answer_id="0", empty_answer_id=None, field_name="change"),
        ),
        StepDefinition(
            step_id="5",
            group="creator",
            headline="dialogue.creator-substep-headline",
            free_text=FreeTextSpec(target=DONE, answer_id="0", empty_answer_id=None, field_name="name"),
        ),
    )


def attribution_dialogue_table() -> StepTable:
    return StepTable.build(ATTRIBUTION_DIALOGUE, ENTRY_STEP, attribution_dialogue_steps())


def with_editing_steps(table: StepTable) -> StepTable:
    """
    Apply the editing extension: compilation now leads to the editing step.

    Must be applied before the session starts; the applied extension is visible
    via table.has_extension(EDITING_STEPS) and is carried in snapshots.
    """
    if table.has_extension(EDITING_STEPS):
        return table
    return table.with_steps(_compilation_step("3"), *editing_steps(), extension=EDITING_STEPS)


DEFAULT_EXTENSIONS.register(EDITING_STEPS, with_editing_steps)
