# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""triggers.py"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from tagcomplete.config import compile_token_regex


@dataclass(frozen=True)
class TriggerDescriptor:
    """
    One configured trigger tag, precomputed for the backward scan.

    Attributes:
        tag (str): The trigger string, e.g. "@". May be empty to trigger on
            any word.
        length (int): `len(tag)`.
        tag_matches_token_regex (bool): Whether the tag itself is made of token
            characters, in which case the scan treats the current index as the
            start of the tag rather than its end.
    """

    tag: str
    length: int
    tag_matches_token_regex: bool

    @classmethod
    def from_tag(cls, tag: str, token_regex: re.Pattern[str]) -> TriggerDescriptor:
        return cls(
            tag=tag,
            length=len(tag),
            tag_matches_token_regex=token_regex.search(tag) is not None,
        )


def build_trigger_table(
    triggers: str | Iterable[str], token_regex: str | re.Pattern[str]
) -> tuple[TriggerDescriptor, ...]:
    """
    Normalize configured trigger tags into a sorted tuple of descriptors.

    A single tag or any iterable of tags is accepted. Duplicates collapse and
    the result is sorted lexicographically, which fixes the scan order.

    Raises:
        ConfigError: If `token_regex` is a string that does not compile.
    """
    if isinstance(token_regex, str):
        token_regex = compile_token_regex(token_regex)
    tags = {triggers} if isinstance(triggers, str) else set(triggers)
    return tuple(TriggerDescriptor.from_tag(tag, token_regex) for tag in sorted(tags))
