# tests/test_adapter_binding.py
from attribution_engine.models.types import DONE
from attribution_engine.runtime.adapter import PresentationAdapter, bind_adapter
from attribution_engine.tables.questionnaire import RESULT_NOTE_PRIVATE_USE
from attribution_engine.testing.stubs import RecordingAdapter


def test_recording_adapter_satisfies_protocol():
    assert isinstance(RecordingAdapter(), PresentationAdapter)


def test_adapter_drives_short_wizard_to_done(dialogue_engine):
    engine = dialogue_engine()
    adapter = RecordingAdapter()
    bind_adapter(engine, adapter)

    assert adapter.rendered_step_ids() == ["0"]

    adapter.click("1")
    adapter.type_text("Blah")
    adapter.click("1")

    assert adapter.rendered_step_ids() == ["0", "1", "2"]
    assert engine.current_step_id == DONE
    assert len(adapter.done) == 1
    assert adapter.done[0].done
    assert adapter.done[0].answers["1"] == {"1": "Blah"}


def test_invalid_click_keeps_current_step(dialogue_engine):
    engine = dialogue_engine()
    adapter = RecordingAdapter()
    bind_adapter(engine, adapter)

    adapter.click("9")

    assert engine.current_step_id == "0"
    assert adapter.rendered_step_ids() == ["0"]


def test_render_request_carries_stored_answers(dialogue_engine):
    engine = dialogue_engine()
    adapter = RecordingAdapter()
    bind_adapter(engine, adapter)

    adapter.click("0")
    adapter.type_text("Blah")
    engine.back()

    assert adapter.rendered[-1].step.step_id == "1"
    assert adapter.rendered[-1].current_answers == {"1": "Blah"}


def test_terminal_page_is_rendered_and_completes(make_session):
    session = make_session(current_step_id="3")
    adapter = RecordingAdapter()
    bind_adapter(session.engine, adapter, render_now=False)

    adapter.click("3")

    assert adapter.rendered_step_ids() == [RESULT_NOTE_PRIVATE_USE]
    assert len(adapter.done) == 1


def test_unsubscribe_detaches_rendering(dialogue_engine):
    engine = dialogue_engine()
    adapter = RecordingAdapter()
    unsubscribe = bind_adapter(engine, adapter)
    unsubscribe()

    engine.submit("0")

    assert adapter.rendered_step_ids() == ["0"]
