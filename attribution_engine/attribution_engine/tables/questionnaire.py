"""
Long questionnaire: decides how an asset must be attributed under its licence.

Page ids and routing follow the "Webtool für Creative Commons-Lizenzen"
questionnaire. Entry page is "2" (licence confirmation); result-* pages and a
few numbered pages are terminal notes.
"""
from __future__ import annotations

from typing import Callable

from attribution_engine.models.step import (
    AnswerSpec,
    Computed,
    FreeTextSpec,
    StepDefinition,
    TransitionContext,
)

from .table import StepTable


QUESTIONNAIRE = "questionnaire"
ENTRY_STEP = "2"

# Session flags read by the rules below (provided by QuestionnaireSession).
FLAG_EXCEPTIONAL_USE = "attribution_although_exceptional_use"
FLAG_USE_CASE = "use_case"

FORM_AUTHOR = "form-author"
FORM_TITLE = "form-title"
FORM_URL = "form-url"

RESULT_SUCCESS = "result-success"
RESULT_NOTE_CC0 = "result-note-cc0"
RESULT_NOTE_PRIVATE_USE = "result-note-privateUse"

TERMINAL_STEPS = ("5a", "6", "12c", "15", RESULT_NOTE_CC0, RESULT_NOTE_PRIVATE_USE, RESULT_SUCCESS)


# ---------------------------
# Computed rules
# ---------------------------

def _missing_asset_form(ctx: TransitionContext) -> str:
    """
    After confirming the licence: ask for whatever the asset lacks, in order
    author → title → URL, then continue with the type of use.
    """
    asset = ctx.asset
    if asset is None or not asset.get_authors():
        return FORM_AUTHOR
    if not asset.get_title():
        return FORM_TITLE
    if not asset.get_url():
        return FORM_URL
    return "3"


def _after_form(step_id: str) -> Callable[[TransitionContext], str]:
    def _rule(ctx: TransitionContext) -> str:
        asset = ctx.asset
        title = asset.get_title() if asset is not None else None
        url = asset.get_url() if asset is not None else None
        if step_id == FORM_AUTHOR and not title:
            return FORM_TITLE
        if step_id != FORM_URL and not url:
            return FORM_URL
        return "3"

    return _rule


def _private_use(ctx: TransitionContext) -> str:
    # CC 2.0 DE licences do not exempt private use.
    if ctx.licence is not None and ctx.licence.is_in_group("cc2de"):
        return "7"
    return RESULT_NOTE_PRIVATE_USE


def _exceptional_use_withdrawn(ctx: TransitionContext) -> bool:
    return bool(ctx.flag(FLAG_EXCEPTIONAL_USE))


def _by_use_case(ctx: TransitionContext) -> str:
    return "8" if ctx.flag(FLAG_USE_CASE) == "print" else "12a"


def _form(step_id: str, field_name: str, targets: tuple[str, ...]) -> StepDefinition:
    return StepDefinition(
        step_id=step_id,
        group="asset",
        headline=f"questionnaire.{step_id}",
        free_text=FreeTextSpec(
            target=Computed(_after_form(step_id), possible_targets=targets, description="next missing asset field"),
            field_name=field_name,
        ),
    )


# ---------------------------
# Table
# ---------------------------

def questionnaire_steps() -> tuple[StepDefinition, ...]:
    return (
        StepDefinition(
            step_id="2",
            group="licence",
            answers=(
                # value: the confirmed licence id
                AnswerSpec(
                    "1",
                    Computed(
                        _missing_asset_form,
                        possible_targets=(FORM_AUTHOR, FORM_TITLE, FORM_URL, "3"),
                        description="first missing asset field, else 3",
                    ),
                    field_name="licenceId",
                    text_only=True,
                ),
                AnswerSpec("9", RESULT_NOTE_CC0, field_name="licenceId", value="cc-zero"),
                AnswerSpec("10", "15"),
            ),
        ),
        _form(FORM_AUTHOR, "author", (FORM_TITLE, FORM_URL, "3")),
        _form(FORM_TITLE, "title", (FORM_URL, "3")),
        _form(FORM_URL, "url", ("3",)),
        StepDefinition(
            step_id="3",
            group="useCase",
            answers=(
                AnswerSpec("1", "7", field_name="type", value="print"),
                AnswerSpec("2", "7", field_name="type", value="online"),
                AnswerSpec(
                    "3",
                    Computed(_private_use, possible_targets=("7", RESULT_NOTE_PRIVATE_USE), description="cc2de → 7"),
                    field_name="type",
                    value="private",
                ),
                AnswerSpec("4", "5", field_name="type", value="exceptional", disabled_when=_exceptional_use_withdrawn),
                AnswerSpec("5", "6", field_name="type", value="other"),
            ),
        ),
        StepDefinition(
            step_id="5",
            group="exceptionalUse",
            answers=(
                AnswerSpec("1", "3", field_name="attributionRequired", value="true"),
                AnswerSpec("2", "5a", field_name="attributionRequired", value="false"),
            ),
        ),
        StepDefinition(
            step_id="7",
            answers=(
                AnswerSpec("1", Computed(_by_use_case, possible_targets=("8", "12a"), description="print → 8")),
                AnswerSpec("2", Computed(_by_use_case, possible_targets=("8", "12a"), description="print → 8")),
            ),
        ),
        StepDefinition(
            step_id="8",
            answers=(
                AnswerSpec("1", "12a"),
                AnswerSpec("2", "12a"),
            ),
        ),
        StepDefinition(step_id="9", free_text=FreeTextSpec(target="3")),
        StepDefinition(
            step_id="12a",
            answers=(
                AnswerSpec("1", RESULT_SUCCESS),
                AnswerSpec("2", "12b"),
            ),
        ),
        StepDefinition(
            step_id="12b",
            answers=(
                AnswerSpec("1", "13"),
                AnswerSpec("2", "12c"),
            ),
        ),
        StepDefinition(
            step_id="13",
            free_text=FreeTextSpec(target=RESULT_SUCCESS, allow_empty_choice=False),
        ),
    ) + tuple(StepDefinition(step_id=sid, terminal=True) for sid in TERMINAL_STEPS)


def questionnaire_table() -> StepTable:
    return StepTable.build(QUESTIONNAIRE, ENTRY_STEP, questionnaire_steps())
