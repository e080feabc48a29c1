import pytest
from prompt_toolkit.completion import Completion
from prompt_toolkit.document import Document

from tagcomplete.completer import TriggerCompleter
from tagcomplete.config import CompletionConfig


@pytest.fixture
def completer():
    return TriggerCompleter(CompletionConfig(), ["world", "work", "alice"])


def test_completions_for_token(completer):
    results = list(completer.get_completions(Document("hello @wo"), None))
    assert all(isinstance(c, Completion) for c in results)
    assert [c.text for c in results] == ["@world ", "@work "]
    assert all(c.start_position == -3 for c in results)
    assert [c.display_text for c in results] == ["world", "work"]


def test_no_completions_without_trigger(completer):
    assert not list(completer.get_completions(Document("hello wo"), None))


def test_no_completions_for_exact_single_match(completer):
    assert not list(completer.get_completions(Document("@alice"), None))


def test_cursor_in_middle_of_text(completer):
    doc = Document("ping @al and more", cursor_position=8)
    results = list(completer.get_completions(doc, None))
    assert [c.text for c in results] == ["@alice "]
    assert results[0].start_position == -3


def test_custom_render_and_disabled_separator():
    completer = TriggerCompleter(
        CompletionConfig(disable_separator_for=["@"]),
        ["world", "work"],
        render=lambda trigger, candidate: f"<{candidate}>",
    )
    results = list(completer.get_completions(Document("@wo"), None))
    assert [c.text for c in results] == ["<world>", "<work>"]


def test_max_options():
    completer = TriggerCompleter(CompletionConfig(max_options=1), ["world", "work"])
    results = list(completer.get_completions(Document("@wo"), None))
    assert [c.text for c in results] == ["@world "]


def test_callable_options_are_read_each_time():
    names = ["alice"]
    completer = TriggerCompleter(CompletionConfig(), lambda: names)
    assert [c.text for c in completer.get_completions(Document("@a"), None)] == [
        "@alice "
    ]
    names.append("alfred")
    assert len(list(completer.get_completions(Document("@a"), None))) == 2


def test_nested_options():
    completer = TriggerCompleter(
        CompletionConfig(), {"@": {"team": {"alice": 1, "bob": 1}}}
    )
    results = list(completer.get_completions(Document("@team@"), None))
    assert [c.text for c in results] == ["@alice ", "@bob "]


def test_invalid_regex_yields_nothing():
    completer = TriggerCompleter(CompletionConfig(token_regex="[a-"), ["world"])
    assert not list(completer.get_completions(Document("@wo"), None))
    assert completer.get_match(Document("@wo")) is None
