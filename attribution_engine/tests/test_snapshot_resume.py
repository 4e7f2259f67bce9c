# tests/test_snapshot_resume.py
import pytest

from attribution_engine.errors import ConfigurationError, StepNotFound
from attribution_engine.models.snapshot import SessionSnapshot
from attribution_engine.models.types import DONE, EDITING_STEPS
from attribution_engine.runtime.engine import DialogueEngine
from attribution_engine.runtime.session import QuestionnaireSession
from attribution_engine.tables.attribution_dialogue import attribution_dialogue_table
from attribution_engine.tables.questionnaire import RESULT_NOTE_PRIVATE_USE


def _first_half(engine):
    engine.submit("0")
    engine.confirm_text("Blah")
    engine.submit("0")
    engine.submit("0")


def _second_half(engine):
    engine.confirm_text("cropped")
    engine.confirm_text("Meh")


def test_replayed_snapshot_reaches_same_state_as_direct_traversal(dialogue_engine):
    direct = dialogue_engine(editing=True)
    _first_half(direct)
    _second_half(direct)

    partial = dialogue_engine(editing=True)
    _first_half(partial)
    restored = DialogueEngine.from_snapshot(
        attribution_dialogue_table(),
        SessionSnapshot.from_json(partial.snapshot().to_json()),
    )

    assert restored.current_step_id == "4"
    assert restored.table.has_extension(EDITING_STEPS)
    assert restored.store == partial.store

    _second_half(restored)

    assert restored.current_step_id == direct.current_step_id == DONE
    assert restored.grouped_view() == direct.grouped_view()
    assert restored.snapshot() == direct.snapshot()


def test_snapshot_json_round_trip(dialogue_engine):
    engine = dialogue_engine(editing=True)
    _first_half(engine)

    snap = engine.snapshot()
    again = SessionSnapshot.from_json(snap.to_json())

    assert again == snap
    assert again.answers["0"] == {"0": True}
    assert again.answers["1"] == {"1": "Blah"}
    assert again.extensions == (EDITING_STEPS,)
    assert again.step_ids() == ("0", "1", "2", "3")


def test_done_snapshot_restores_as_done(dialogue_engine):
    engine = dialogue_engine()
    engine.submit("1")
    engine.submit("0")
    engine.submit("1")

    snap = engine.snapshot()
    assert snap.done

    restored = DialogueEngine.from_snapshot(attribution_dialogue_table(), snap)
    assert restored.is_done
    assert restored.grouped_view() == engine.grouped_view()


def test_unknown_extension_is_a_configuration_error():
    snap = SessionSnapshot(current_step_id="0", extensions=("no-such-extension",))
    with pytest.raises(ConfigurationError):
        DialogueEngine.from_snapshot(attribution_dialogue_table(), snap)


def test_snapshot_version_and_shape_are_checked():
    with pytest.raises(ValueError):
        SessionSnapshot.from_dict({"version": 99, "current_step_id": "0"})
    with pytest.raises(ValueError):
        SessionSnapshot.from_dict({"answers": {}})
    with pytest.raises(ValueError):
        SessionSnapshot(current_step_id="0", answers={"0": {"0": 3}})


def test_questionnaire_session_resumes_with_asset(make_session, make_asset):
    session = make_session(make_asset(licence="cc-by-2.0-de"))
    session.submit("1", "cc-by-2.0-de")

    resumed = QuestionnaireSession.from_snapshot(make_asset(licence="cc-by-2.0-de"), session.snapshot())

    assert resumed.current_step_id == "3"
    assert resumed.licence().licence_id == "cc-by-2.0-de"
    assert resumed.submit("3") == "7"


def test_replay_inputs_relogs_stored_text(dialogue_engine):
    engine = dialogue_engine()
    engine.submit("0")
    engine.confirm_text("Blah")
    engine.back()

    updates = []
    engine.events.update.subscribe(updates.append)

    assert engine.replay_inputs() == {"1": "Blah"}
    assert len(updates) == 1
    assert updates[0].snapshot.answers["1"] == {"1": "Blah"}


def test_restored_engine_walks_back_the_same_path(dialogue_engine):
    direct = dialogue_engine(editing=True)
    direct.submit("0")
    direct.confirm_text("Blah")
    direct.submit("0")

    restored = DialogueEngine.from_snapshot(
        attribution_dialogue_table(),
        SessionSnapshot.from_json(direct.snapshot().to_json()),
    )

    assert restored.history() == direct.history() == ("0", "1", "2", "3")
    assert restored.back() == direct.back() == "2"
    assert restored.back() == direct.back() == "1"
    assert restored.snapshot() == direct.snapshot()


def test_snapshot_without_history_starts_at_current_step():
    snap = SessionSnapshot.from_dict({"current_step_id": "1", "answers": {"0": {"0": True}}})
    engine = DialogueEngine.from_snapshot(attribution_dialogue_table(), snap)

    assert engine.history() == ("1",)
    assert engine.back() == "1"


def test_snapshot_history_must_name_registered_steps():
    snap = SessionSnapshot(current_step_id="1", history=("0", "ghost", "1"))
    with pytest.raises(StepNotFound):
        DialogueEngine.from_snapshot(attribution_dialogue_table(), snap)


def test_terminal_page_snapshot_is_done_and_keeps_page(make_session, make_asset):
    session = make_session(current_step_id="3")
    session.submit("3")

    snap = session.snapshot()
    assert session.is_done
    assert snap.done
    assert snap.current_step_id == RESULT_NOTE_PRIVATE_USE

    resumed = QuestionnaireSession.from_snapshot(make_asset(), SessionSnapshot.from_json(snap.to_json()))
    assert resumed.current_step_id == RESULT_NOTE_PRIVATE_USE
    assert resumed.is_done
    assert resumed.snapshot() == snap
