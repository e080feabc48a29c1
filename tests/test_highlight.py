from prompt_toolkit.formatted_text import to_plain_text

from tagcomplete.highlight import (
    highlight_formatted,
    highlight_text,
    split_highlight,
    suggestion_fragments,
)


def test_split_highlight():
    assert split_highlight("Network", "OR") == ("Netw", "or", "k")
    assert split_highlight("world", "wo") == ("", "wo", "rld")


def test_split_highlight_without_match():
    assert split_highlight("alice", "zz") == ("alice", "", "")
    assert split_highlight("alice", "") == ("alice", "", "")


def test_highlight_text():
    text = highlight_text("world", "wo")
    assert text.plain == "world"
    assert len(text.spans) == 1
    assert text.spans[0].start == 0
    assert text.spans[0].end == 2


def test_highlight_formatted():
    formatted = highlight_formatted("world", "or")
    assert to_plain_text(formatted) == "world"
    assert ("bold fg:ansired", "or") in list(formatted)


def test_suggestion_fragments_reverse_the_selection():
    fragments = suggestion_fragments(["world", "work"], "wo", selected_index=1)
    assert to_plain_text(fragments) == "world  work"
    selected = [style for style, text in fragments if text == "rk"]
    assert selected == ["reverse"]
    assert ("reverse bold fg:ansired", "wo") in fragments
