# attribution_engine/scripts/run_dialogue_demo.py
from __future__ import annotations

import logging

from attribution_engine.invariants.validate import validate_table
from attribution_engine.models.asset import Asset, AssetAttributes, Author
from attribution_engine.registry.licences import DEFAULT_LICENCES
from attribution_engine.runtime.adapter import bind_adapter
from attribution_engine.runtime.attribution import attribution_for_dialogue, attribution_for_questionnaire
from attribution_engine.runtime.engine import DialogueEngine
from attribution_engine.runtime.session import QuestionnaireSession
from attribution_engine.tables.attribution_dialogue import attribution_dialogue_table, with_editing_steps
from attribution_engine.tables.questionnaire import questionnaire_table
from attribution_engine.testing.stubs import RecordingAdapter


def _demo_asset() -> Asset:
    return Asset(
        title="Eiffel Tower at night.jpg",
        attributes=AssetAttributes(
            url="https://commons.wikimedia.org/wiki/File:Eiffel_Tower_at_night.jpg",
            authors=(Author(name="Jane Doe"),),
            licence=DEFAULT_LICENCES.find("CC-BY-SA-4.0"),
            descriptions={"en": "The Eiffel Tower, illuminated"},
        ),
    )


def _print_report(title: str, table) -> None:
    report = validate_table(table)
    print(f"\n== {report.subject} ({title}) ==")
    print(f"OK: {report.ok}")
    if report.violations:
        print("Violations:")
        for v in report.violations:
            print(f"  - {v.rule}: {v.message}")


def run_short_wizard() -> None:
    asset = _demo_asset()
    table = with_editing_steps(attribution_dialogue_table())
    _print_report("short wizard + editing", table)

    engine = DialogueEngine(table)
    adapter = RecordingAdapter()
    bind_adapter(engine, adapter)

    adapter.click("0")          # print
    adapter.type_text("Blah")   # author
    adapter.click("0")          # compilation: true
    adapter.click("0")          # edited: true
    adapter.type_text("cropped")
    adapter.type_text("Meh")

    data = engine.grouped_view()
    print(f"Visited: {' -> '.join(engine.history())}")
    print("Data:")
    for group, values in data.items():
        print(f"  {group}: {dict(values)}")
    print(f"Attribution: {attribution_for_dialogue(asset, asset.get_licence(), data)}")


def run_questionnaire() -> None:
    asset = _demo_asset()
    _print_report("questionnaire", questionnaire_table())

    session = QuestionnaireSession(asset)
    session.submit("1", "cc-by-sa-4.0")    # licence confirmed
    session.submit("2")                    # online
    session.submit("2")                    # step 7
    session.submit("1")                    # step 12a → result

    print(f"Visited: {' -> '.join(session.engine.history())}")
    print(f"Done: {session.is_done}")
    print(f"Snapshot: {session.snapshot().to_json()}")
    print(f"Attribution: {attribution_for_questionnaire(session.result())}")


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    run_short_wizard()
    run_questionnaire()


if __name__ == "__main__":
    main()
