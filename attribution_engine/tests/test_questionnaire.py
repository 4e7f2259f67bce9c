# tests/test_questionnaire.py
import pytest

from attribution_engine.errors import InvalidAnswer
from attribution_engine.models.types import ABSENT
from attribution_engine.runtime.adapter import render_request
from attribution_engine.tables.questionnaire import (
    FORM_AUTHOR,
    FORM_TITLE,
    FORM_URL,
    RESULT_NOTE_CC0,
    RESULT_NOTE_PRIVATE_USE,
    RESULT_SUCCESS,
)


def test_entry_step_is_licence_confirmation(make_session):
    assert make_session().current_step_id == "2"


def test_missing_author_routes_to_author_form(make_session, make_asset):
    session = make_session(make_asset(authors=()))
    assert session.submit("1", "cc-by-sa-4.0") == FORM_AUTHOR


def test_complete_asset_routes_to_type_of_use(make_session):
    session = make_session()
    assert session.submit("1", "cc-by-sa-4.0") == "3"


@pytest.mark.parametrize(
    "overrides, expected",
    [
        ({"title": None}, FORM_TITLE),
        ({"url": None}, FORM_URL),
        ({"title": None, "url": None}, FORM_TITLE),
    ],
)
def test_missing_fields_route_to_first_missing_form(make_session, make_asset, overrides, expected):
    session = make_session(make_asset(**overrides))
    assert session.submit("1") == expected


def test_forms_chain_until_asset_is_complete(make_session, make_asset):
    session = make_session(make_asset(authors=(), title=None, url=None))

    assert session.submit("1") == FORM_AUTHOR
    assert session.confirm_text("Jane Doe") == FORM_TITLE
    assert session.confirm_text("Foo.jpg") == FORM_URL
    assert session.confirm_text("https://example.org/foo") == "3"

    result = session.result()
    assert result.asset.author_names() == "Jane Doe"
    assert result.asset.get_title() == "Foo.jpg"
    assert result.asset.get_url() == "https://example.org/foo"
    assert result.groups["asset"] == {
        "author": "Jane Doe",
        "title": "Foo.jpg",
        "url": "https://example.org/foo",
    }


def test_unknown_author_choice_skips_the_field(make_session, make_asset):
    session = make_session(make_asset(authors=()))
    session.submit("1")
    assert session.submit("2") == "3"
    assert session.store.get(FORM_AUTHOR, "2") is True


@pytest.mark.parametrize("licence_id", ["cc-by-2.0-de", "cc-by-sa-2.0-de"])
def test_private_use_with_cc2de_licence_routes_to_7(make_session, make_asset, licence_id):
    session = make_session(make_asset(licence=licence_id), current_step_id="3")
    assert session.submit("3") == "7"


def test_private_use_with_other_licence_ends_with_note(make_session, make_asset):
    session = make_session(make_asset(licence="cc-by-sa-4.0"), current_step_id="3")
    assert session.submit("3") == RESULT_NOTE_PRIVATE_USE
    assert session.is_done


def test_confirmed_licence_overrides_asset_licence(make_session, make_asset):
    session = make_session(make_asset(licence="cc-by-sa-4.0"))
    session.submit("1", "cc-by-2.0-de")
    assert session.licence().licence_id == "cc-by-2.0-de"
    assert session.submit("3") == "7"


def test_unregistered_confirmed_licence_falls_back_to_unknown(make_session):
    session = make_session()
    session.submit("1", "no-such-licence")
    assert session.licence().is_unknown()


def test_cc_zero_answer_ends_with_note(make_session):
    session = make_session()
    assert session.submit("9") == RESULT_NOTE_CC0
    assert session.is_done
    assert session.licence().licence_id == "cc-zero"
    assert session.result().groups["licence"] == {"licenceId": "cc-zero"}


def test_exceptional_use_disabled_after_attribution_confirmed(make_session):
    session = make_session(current_step_id="3")

    assert session.submit("4") == "5"
    assert session.submit("1") == "3"
    assert session.attribution_although_exceptional_use()

    request = render_request(session.engine)
    assert [a.answer_id for a in request.enabled] == ["1", "2", "3", "5"]
    assert [a.answer_id for a in request.disabled] == ["4"]

    before = session.store.to_dict()
    with pytest.raises(InvalidAnswer) as exc:
        session.submit("4")

    assert exc.value.reason == "disabled"
    assert session.current_step_id == "3"
    assert session.store.to_dict() == before


def test_print_use_visits_step_8(make_session):
    session = make_session(current_step_id="3")
    session.submit("1")
    assert session.use_case() == "print"
    assert session.submit("1") == "8"
    assert session.submit("2") == "12a"


def test_online_use_skips_step_8(make_session):
    session = make_session(current_step_id="3")
    session.submit("2")
    assert session.submit("2") == "12a"


def test_modified_work_path_reaches_success(make_session):
    session = make_session(current_step_id="12a")
    assert session.submit("2") == "12b"
    assert session.submit("1") == "13"
    assert session.confirm_text("cropped") == RESULT_SUCCESS
    assert session.is_done


def test_free_text_keystrokes_toggle_empty_marker(make_session):
    session = make_session(current_step_id=FORM_AUTHOR)

    session.input_text("  Jane ")
    assert session.store.get(FORM_AUTHOR, "1") == "Jane"
    assert session.store.get(FORM_AUTHOR, "2") is ABSENT

    session.input_text("")
    assert session.store.get(FORM_AUTHOR, "1") is ABSENT
    assert session.store.get(FORM_AUTHOR, "2") is True

    session.input_text("J")
    assert session.store.get(FORM_AUTHOR, "2") is ABSENT
    assert session.current_step_id == FORM_AUTHOR


def test_empty_choice_not_offered_on_step_13(make_session):
    session = make_session(current_step_id="13")
    with pytest.raises(InvalidAnswer) as exc:
        session.submit("2")
    assert exc.value.reason == "not offered"


def test_input_text_on_choice_step_is_rejected(make_session):
    session = make_session(current_step_id="3")
    with pytest.raises(InvalidAnswer):
        session.input_text("hello")


def test_licence_not_applicable_ends_on_15(make_session):
    session = make_session()
    assert session.submit("10") == "15"
    assert session.is_done


def test_licence_group_only_carries_a_confirmed_licence_id(make_session):
    session = make_session()
    session.submit("1")
    assert "licence" not in session.result().groups

    session = make_session()
    session.submit("1", "cc-by-4.0")
    assert session.result().groups["licence"] == {"licenceId": "cc-by-4.0"}
