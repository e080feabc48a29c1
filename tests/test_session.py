import logging

import pytest

from tagcomplete.config import CompletionConfig
from tagcomplete.hooks import SessionEvent
from tagcomplete.scanner import MatchDescriptor
from tagcomplete.session import (
    Anchor,
    Direction,
    SessionState,
    SuggestionSession,
    passes_gating,
)

WORDS = ["world", "work", "worm"]


@pytest.fixture
def session():
    return SuggestionSession(CompletionConfig(), WORDS)


def test_initial_state(session):
    assert session.state == SessionState()
    assert not session.visible
    assert session.state.selected is None


def test_text_change_shows_suggestions(session):
    state = session.on_text_changed("hello @wo", 9)
    assert state.visible
    assert state.match == MatchDescriptor("@", 7, 2, ("world", "work", "worm"))
    assert state.selected_index == 0
    assert state.selected == "world"
    assert state.text == "hello @wo"
    assert state.caret == 9


def test_navigation_wraps(session):
    session.on_text_changed("@wo", 3)
    assert session.on_navigate(Direction.UP).selected_index == 2
    assert session.on_navigate("down").selected_index == 0
    assert session.on_navigate("down").selected_index == 1


def test_navigation_is_noop_when_idle(session):
    state = session.on_navigate("down")
    assert state == SessionState()


def test_invalid_direction(session):
    with pytest.raises(ValueError):
        session.on_navigate("sideways")


def test_single_exact_candidate_is_gated():
    session = SuggestionSession(CompletionConfig(), ["world"])
    state = session.on_text_changed("hello @world", 12)
    assert not state.visible
    assert state.match is None


def test_single_longer_candidate_is_shown():
    session = SuggestionSession(CompletionConfig(), ["world"])
    assert session.on_text_changed("hello @wor", 10).visible


def test_min_chars_gating():
    config = CompletionConfig(min_chars=2)
    session = SuggestionSession(config, ["alice", "alfred"])
    assert not session.on_text_changed("@a", 2).visible
    assert session.on_text_changed("@al", 3).visible


def test_min_chars_can_be_disabled_per_trigger():
    config = CompletionConfig(min_chars=2, disable_min_chars_for=["@"])
    session = SuggestionSession(config, ["alice", "alfred"])
    assert session.on_text_changed("@a", 2).visible


def test_passes_gating():
    config = CompletionConfig(min_chars=1)
    assert passes_gating(MatchDescriptor("@", 1, 1, ("ab", "ac")), config)
    assert not passes_gating(MatchDescriptor("@", 1, 0, ("ab", "ac")), config)
    assert not passes_gating(MatchDescriptor("@", 1, 2, ("ab",)), config)
    assert not passes_gating(MatchDescriptor("@", 1, 1, ()), config)


def test_request_options_when_nothing_matches():
    requested = []
    session = SuggestionSession(
        CompletionConfig(), ["bob"], on_request_options=requested.append
    )
    state = session.on_text_changed("hey @al", 7)
    assert not state.visible
    assert requested == ["al"]


def test_no_request_when_options_exist_and_gated():
    requested = []
    session = SuggestionSession(
        CompletionConfig(), ["alice"], on_request_options=requested.append
    )
    session.on_text_changed("@alice", 6)
    assert requested == []


def test_request_whenever_gated_if_configured():
    requested = []
    session = SuggestionSession(
        CompletionConfig(request_only_if_no_options=False),
        ["alice"],
        on_request_options=requested.append,
    )
    session.on_text_changed("@alice", 6)
    assert requested == ["alice"]


def test_no_request_without_a_match(session):
    requested = []
    session.hooks.register(SessionEvent.REQUEST_OPTIONS, requested.append)
    session.on_text_changed("plain text", 10)
    assert requested == []


def test_options_update_rescans_current_text():
    session = SuggestionSession(CompletionConfig(), [])
    session.on_text_changed("@a", 2)
    session.on_text_changed("@b", 2)
    state = session.on_options_updated(["alice", "bob"])
    assert state.visible
    assert state.candidates == ("bob",)


def test_request_hook_can_supply_options_synchronously():
    session = SuggestionSession(CompletionConfig(), [])
    session.hooks.register(
        SessionEvent.REQUEST_OPTIONS,
        lambda partial: session.on_options_updated([partial + "ice", partial + "fred"]),
    )
    state = session.on_text_changed("@al", 3)
    assert state.visible
    assert state.candidates == ("alice", "alfred")


def test_selection_kept_while_still_in_range(session):
    session.on_text_changed("@wo", 3)
    session.on_navigate("down")
    session.on_navigate("down")
    state = session.on_text_changed("@wor", 4)
    assert state.selected_index == 2


def test_selection_resets_when_candidates_shrink(session):
    session.on_text_changed("@wo", 3)
    session.on_navigate("up")
    state = session.on_text_changed("@worl", 5)
    assert state.visible
    assert state.candidates == ("world",)
    assert state.selected_index == 0


def test_empty_candidates_hide_the_list(session):
    session.on_text_changed("@wo", 3)
    state = session.on_text_changed("@wox", 4)
    assert not state.visible
    assert state.selected_index == 0


def test_empty_text_hides_the_list(session):
    session.on_text_changed("@wo", 3)
    assert not session.on_text_changed("", 0).visible


def test_commit_splices_buffer():
    committed = []
    session = SuggestionSession(CompletionConfig(), WORDS, on_committed=committed.append)
    session.on_text_changed("hello @wo", 9)
    session.on_navigate("down")
    state = session.on_commit()
    assert state.text == "hello @work "
    assert state.caret == 12
    assert not state.visible
    assert state.match is None
    assert state.space_removal_armed
    assert committed == ["hello @work "]


def test_commit_keeps_suffix(session):
    session.on_text_changed("hi @wo there", 6)
    state = session.on_commit(0)
    assert state.text == "hi @world  there"
    assert state.caret == 10


def test_commit_empty_trigger_mid_text():
    session = SuggestionSession(CompletionConfig(triggers=[""]), ["abacus", "abbey", "xyz"])
    state = session.on_text_changed("ab cd", 2)
    assert state.match == MatchDescriptor("", 0, 2, ("abacus", "abbey"))
    state = session.on_commit(0)
    assert state.text == "abacus  cd"
    assert state.caret == 7


def test_commit_without_separator():
    config = CompletionConfig(disable_separator_for=["@"])
    session = SuggestionSession(config, WORDS)
    session.on_text_changed("hello @wo", 9)
    state = session.on_commit(0)
    assert state.text == "hello @world"
    assert state.caret == len("hello @world")


def test_commit_with_custom_render():
    session = SuggestionSession(
        CompletionConfig(), WORDS, render=lambda trigger, candidate: f"[{candidate}]"
    )
    session.on_text_changed("hello @wo", 9)
    assert session.on_commit(2).text == "hello [worm] "


def test_commit_out_of_range_is_ignored(session, caplog):
    session.on_text_changed("@wo", 3)
    before = session.state
    with caplog.at_level(logging.WARNING, logger="tagcomplete"):
        assert session.on_commit(7) == before
    assert "Ignoring commit" in caplog.text


def test_commit_when_idle_is_ignored(session):
    assert session.on_commit(0) == SessionState()


def test_rescan_after_commit_does_not_rematch(session):
    session.on_text_changed("hello @wo", 9)
    state = session.on_commit(0)
    assert not session.on_text_changed(state.text, state.caret).visible


def test_cancel(session):
    session.on_text_changed("@wo", 3)
    state = session.on_cancel()
    assert not state.visible
    assert state.text == "@wo"


def test_separator_rewrite_after_commit():
    rewritten = []
    session = SuggestionSession(CompletionConfig(), ["bob", "bobby"])
    session.hooks.register(SessionEvent.REWRITTEN, rewritten.append)
    session.on_text_changed("@bo", 3)
    assert session.on_commit(0).text == "@bob "
    state = session.on_text_changed("@bob ,", 6)
    assert state.text == "@bob, "
    assert state.caret == 6
    assert not state.space_removal_armed
    assert rewritten == ["@bob, "]


def test_separator_rewrite_disarms_after_one_change():
    session = SuggestionSession(CompletionConfig(), ["bob", "bobby"])
    session.on_text_changed("@bo", 3)
    session.on_commit(0)
    state = session.on_text_changed("@bob x", 6)
    assert state.text == "@bob x"
    assert not state.space_removal_armed
    assert session.on_text_changed("@bob x ,", 8).text == "@bob x ,"


def test_separator_rewrite_requires_commit():
    session = SuggestionSession(CompletionConfig(), ["bob"])
    session.on_text_changed("@bob ", 5)
    assert session.on_text_changed("@bob ,", 6).text == "@bob ,"


def test_caret_locator_sets_anchor():
    session = SuggestionSession(
        CompletionConfig(), WORDS, caret_locator=lambda caret: Anchor(top=1, left=caret)
    )
    assert session.on_text_changed("hello @wo", 9).anchor == Anchor(top=1, left=9)
    assert session.on_cancel().anchor is None


def test_invalid_regex_is_not_fatal(caplog):
    session = SuggestionSession(CompletionConfig(token_regex="[a-"), WORDS)
    with caplog.at_level(logging.ERROR, logger="tagcomplete"):
        state = session.on_text_changed("@wo", 3)
    assert not state.visible
    assert "Scan aborted" in caplog.text


def test_config_change_rescans(session):
    session.on_text_changed("#wo", 3)
    assert not session.visible
    state = session.on_config_changed(CompletionConfig(triggers=["#"]))
    assert state.visible
    assert state.match.trigger == "#"


def test_visible_candidates_respects_max_options():
    session = SuggestionSession(CompletionConfig(max_options=2), WORDS)
    assert session.visible_candidates() == ()
    session.on_text_changed("@wo", 3)
    assert session.visible_candidates() == ("world", "work")


def test_failing_hook_does_not_break_commit(session):
    def explode(text):
        raise RuntimeError("boom")

    session.hooks.register(SessionEvent.COMMITTED, explode)
    session.on_text_changed("@wo", 3)
    assert session.on_commit(0).text == "@world "


def test_reset(session):
    session.on_text_changed("@wo", 3)
    assert session.reset() == SessionState()
