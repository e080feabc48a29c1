# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Backward scan that finds the token under the caret and its candidates.

`scan()` walks left from the caret once per trigger descriptor, in sorted tag
order, looking for the trigger that opens the token being typed. A non-empty
tag must occur at the token boundary and every character between it and the
caret must satisfy the token regex. The empty tag treats the last space
before the caret as the boundary instead.

When several triggers match at once, the one scanned last wins. That is a
compatibility quirk, not a precedence rule: results are not merged or ranked.

Example:
    scan("hello @wor", 10, FlatList(("world", "work")), CompletionConfig())
    # MatchDescriptor(trigger="@", match_start=7, match_length=3,
    #                 candidates=("world", "work"))
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable

from tagcomplete.config import CompletionConfig
from tagcomplete.logger import logger
from tagcomplete.options import OptionSource, option_source, resolve
from tagcomplete.triggers import TriggerDescriptor, build_trigger_table


@dataclass(frozen=True)
class MatchDescriptor:
    """The token under the caret and the candidates that complete it."""

    trigger: str
    match_start: int
    match_length: int
    candidates: tuple[str, ...]

    @property
    def match_end(self) -> int:
        return self.match_start + self.match_length

    def typed_text(self, text: str) -> str:
        """Return the partial token as it appears in `text`."""
        return text[self.match_start : self.match_end]


def filter_candidates(
    candidates: Iterable[str], typed: str, match_any: bool = False
) -> tuple[str, ...]:
    """Keep candidates containing `typed` case-insensitively, as a prefix unless `match_any`."""
    needle = typed.lower()
    kept = []
    for candidate in candidates:
        index = candidate.lower().find(needle)
        if index == 0 or (index > 0 and match_any):
            kept.append(candidate)
    return tuple(kept)


def _find_token_start(
    descriptor: TriggerDescriptor,
    text: str,
    caret: int,
    token_regex: re.Pattern[str],
    min_chars: int,
) -> int | None:
    if descriptor.length == 0:
        space_index = text.rfind(" ", 0, caret)
        token_start = space_index + 1 if space_index >= 0 else 0
        if caret - token_start < min_chars - 1:
            return None
        return token_start

    for i in range(caret - 1, -1, -1):
        if descriptor.tag_matches_token_regex:
            tag_start = i
        else:
            tag_start = i - descriptor.length + 1
        if tag_start < 0:
            return None
        if text[tag_start : tag_start + descriptor.length] == descriptor.tag:
            return tag_start + descriptor.length
        if token_regex.search(text[i:caret]) is None:
            return None
    return None


def scan(
    text: str,
    caret: int,
    options: OptionSource | Any,
    config: CompletionConfig,
    triggers: tuple[TriggerDescriptor, ...] | None = None,
) -> MatchDescriptor | None:
    """
    Find the trigger token ending at `caret` and filter its candidates.

    Args:
        text (str): The full text buffer.
        caret (int): Caret index into `text`.
        options (OptionSource | Any): Candidate source; raw lists and mappings
            are coerced with `option_source()`.
        config (CompletionConfig): Matching configuration.
        triggers (tuple[TriggerDescriptor, ...] | None): A prebuilt trigger
            table; built from `config` when omitted.

    Returns:
        MatchDescriptor | None: The match of the last trigger that produced
        one, or None.

    Raises:
        ConfigError: If the configured token regex is invalid.
    """
    token_regex = config.compiled_regex()
    if triggers is None:
        triggers = build_trigger_table(config.triggers, token_regex)
    caret = min(caret, len(text))
    if caret <= 0:
        return None
    source = option_source(options)

    result: MatchDescriptor | None = None
    for descriptor in triggers:
        token_start = _find_token_start(
            descriptor, text, caret, token_regex, config.min_chars
        )
        if token_start is None:
            continue

        raw_candidates = resolve(
            descriptor.tag, text, token_start, source, config.path_separator
        )
        if raw_candidates is None:
            logger.debug("No options configured for trigger '%s'", descriptor.tag)
            continue

        typed = text[token_start:caret]
        result = MatchDescriptor(
            trigger=descriptor.tag,
            match_start=token_start,
            match_length=len(typed),
            candidates=filter_candidates(raw_candidates, typed, config.match_any),
        )

    if result is not None:
        logger.debug(
            "Matched trigger '%s' at %d (%d chars, %d candidates)",
            result.trigger,
            result.match_start,
            result.match_length,
            len(result.candidates),
        )
    return result
