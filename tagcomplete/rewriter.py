# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Moves punctuation typed after a committed completion in front of its separator.

Committing `@bob` inserts `@bob ` so the user can keep typing. When the very
next keystroke is punctuation the result would read `@bob ,`; this pass turns
it into `@bob, `:

    remove_separator_space("@bob ", "@bob ,", 6, options, config)
    # ("@bob, ", 6)
"""
from __future__ import annotations

from typing import Any

from tagcomplete.config import CompletionConfig
from tagcomplete.exceptions import ConfigError
from tagcomplete.logger import logger
from tagcomplete.scanner import scan


def _first_divergence(old: str, new: str) -> int | None:
    for index in range(max(len(old), len(new))):
        old_char = old[index] if index < len(old) else None
        new_char = new[index] if index < len(new) else None
        if old_char != new_char:
            return index
    return None


def remove_separator_space(
    old: str,
    new: str,
    caret: int,
    options: Any,
    config: CompletionConfig,
) -> tuple[str, int] | None:
    """
    Swap a separator and the punctuation typed right after it.

    Fires when the first change between `old` and `new` is a removable
    character typed directly after the separator, the character before the
    separator is not itself removable, and the text before it still scans as
    a completed token.

    Args:
        old (str): The buffer right after the commit.
        new (str): The buffer after the next keystroke.
        caret (int): Caret index in `new`.
        options (Any): The option source used for the confirming rescan.
        config (CompletionConfig): Separator and removable-char settings.

    Returns:
        tuple[str, int] | None: The rewritten text and its caret, or None when
        the pass does not apply.
    """
    separator = config.separator_char
    removable = config.separator_removable_chars
    if not removable or not separator or len(new) <= 2:
        return None

    i = _first_divergence(old, new)
    if i is None or i < 2 or i >= len(new):
        return None
    if new[i - 1] != separator or new[i - 2] in removable or new[i] not in removable:
        return None

    try:
        match = scan(new[: i - 2], caret - 3, options, config)
    except ConfigError as error:
        logger.warning("Skipping separator rewrite: %s", error)
        return None
    if match is None:
        return None

    rewritten = new[: i - 1] + new[i] + new[i - 1] + new[i + 1 :]
    logger.debug("Moved '%s' before separator at %d", new[i], i - 1)
    return rewritten, i + 1
