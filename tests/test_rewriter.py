import pytest

from tagcomplete.config import CompletionConfig
from tagcomplete.rewriter import remove_separator_space


@pytest.fixture
def config():
    return CompletionConfig()


def test_moves_punctuation_before_separator(config):
    assert remove_separator_space("@bob ", "@bob ,", 6, ["bob"], config) == ("@bob, ", 6)


@pytest.mark.parametrize("char", [".", "!", "?"])
def test_other_removable_chars(config, char):
    result = remove_separator_space("hi @bob ", f"hi @bob {char}", 9, ["bob"], config)
    assert result == (f"hi @bob{char} ", 9)


def test_keeps_following_text(config):
    result = remove_separator_space("@bob  more", "@bob , more", 6, ["bob"], config)
    assert result == ("@bob,  more", 6)


def test_ignores_regular_characters(config):
    assert remove_separator_space("@bob ", "@bob x", 6, ["bob"], config) is None


def test_ignores_removable_before_separator(config):
    assert remove_separator_space("hi. ", "hi. ,", 5, ["bob"], config) is None


def test_requires_a_token_before_separator(config):
    assert remove_separator_space("bob ", "bob ,", 5, ["bob"], config) is None


def test_requires_options_for_the_trigger(config):
    assert remove_separator_space("@bob ", "@bob ,", 6, {"#": ["bob"]}, config) is None


def test_no_change(config):
    assert remove_separator_space("@bob ", "@bob ", 5, ["bob"], config) is None


def test_disabled_without_removable_chars():
    config = CompletionConfig(separator_removable_chars=[])
    assert remove_separator_space("@bob ", "@bob ,", 6, ["bob"], config) is None


def test_disabled_without_separator():
    config = CompletionConfig(separator_char="")
    assert remove_separator_space("@bob ", "@bob ,", 6, ["bob"], config) is None


def test_custom_separator():
    config = CompletionConfig(separator_char="_", token_regex=r"^[a-z]+$")
    assert remove_separator_space("@bob_", "@bob_!", 6, ["bob"], config) == ("@bob!_", 6)
