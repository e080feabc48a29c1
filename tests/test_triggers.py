import re

import pytest

from tagcomplete.config import DEFAULT_TOKEN_REGEX
from tagcomplete.exceptions import ConfigError
from tagcomplete.triggers import TriggerDescriptor, build_trigger_table


def test_single_tag():
    table = build_trigger_table("@", DEFAULT_TOKEN_REGEX)
    assert table == (TriggerDescriptor(tag="@", length=1, tag_matches_token_regex=False),)


def test_tags_are_sorted_and_deduplicated():
    table = build_trigger_table(["@", "#", "@", "::"], DEFAULT_TOKEN_REGEX)
    assert [descriptor.tag for descriptor in table] == ["#", "::", "@"]
    assert table[1].length == 2


def test_tag_made_of_token_characters():
    (descriptor,) = build_trigger_table(["tag"], re.compile(DEFAULT_TOKEN_REGEX))
    assert descriptor.tag_matches_token_regex


def test_empty_tag():
    (descriptor,) = build_trigger_table([""], DEFAULT_TOKEN_REGEX)
    assert descriptor.length == 0
    assert not descriptor.tag_matches_token_regex


def test_descriptors_are_immutable():
    (descriptor,) = build_trigger_table("@", DEFAULT_TOKEN_REGEX)
    with pytest.raises(AttributeError):
        descriptor.tag = "#"


def test_invalid_regex():
    with pytest.raises(ConfigError):
        build_trigger_table("@", "(unclosed")
