# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""Splits candidates around the typed text so hosts can emphasize the match."""
from __future__ import annotations

from typing import Sequence

from prompt_toolkit.formatted_text import FormattedText
from rich.text import Text

from tagcomplete.themes import MATCH_STYLE


def split_highlight(candidate: str, typed: str) -> tuple[str, str, str]:
    """Return `(before, matched, after)`; `matched` is empty when `typed` is absent."""
    start = candidate.lower().find(typed.lower())
    if start < 0 or not typed:
        return candidate, "", ""
    end = start + len(typed)
    return candidate[:start], candidate[start:end], candidate[end:]


def highlight_text(candidate: str, typed: str, style: str = MATCH_STYLE) -> Text:
    """Rich `Text` with the matched part styled."""
    before, matched, after = split_highlight(candidate, typed)
    text = Text(before)
    text.append(matched, style=style)
    text.append(after)
    return text


def highlight_formatted(
    candidate: str, typed: str, style: str = "bold fg:ansired"
) -> FormattedText:
    """prompt_toolkit formatted text with the matched part styled."""
    before, matched, after = split_highlight(candidate, typed)
    fragments = [("", before)]
    if matched:
        fragments.append((style, matched))
    fragments.append(("", after))
    return FormattedText(fragments)


def suggestion_fragments(
    candidates: Sequence[str],
    typed: str,
    selected_index: int = 0,
    selected_style: str = "reverse",
) -> FormattedText:
    """One-line prompt_toolkit rendering of a suggestion list, selection reversed."""
    fragments: list[tuple[str, str]] = []
    for index, candidate in enumerate(candidates):
        if index:
            fragments.append(("", "  "))
        item = highlight_formatted(candidate, typed)
        if index == selected_index:
            item = [(f"{selected_style} {style}".strip(), text) for style, text in item]
        fragments.extend(item)
    return FormattedText(fragments)
