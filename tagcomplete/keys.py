# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Routes navigation keys to a `SuggestionSession` while suggestions are shown.

`route_key()` is toolkit-agnostic: a host translates its own key events into
key names and forwards them. `build_key_bindings()` does that translation for
a Prompt Toolkit `Buffer`, and `attach_buffer()` reports its edits.

Key map:
- up / down: move the highlighted candidate
- enter / tab: commit the highlighted candidate
- escape: hide the suggestions
"""
from __future__ import annotations

from enum import Enum

from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent

from tagcomplete.session import Direction, SuggestionSession


class KeyAction(Enum):
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    TAB = "tab"
    ESCAPE = "escape"

    @classmethod
    def _missing_(cls, value: object) -> KeyAction:
        if isinstance(value, str):
            normalized = value.strip().lower()
            aliases = {"return": "enter", "c-m": "enter", "c-i": "tab", "esc": "escape"}
            normalized = aliases.get(normalized, normalized)
            for member in cls:
                if member.value == normalized:
                    return member
        raise ValueError(f"Invalid {cls.__name__}: {value!r}")


def route_key(session: SuggestionSession, key: KeyAction | str) -> bool:
    """
    Apply a key press to the session.

    Returns:
        bool: True when the key was consumed and the host should not process
        it further. Keys are never consumed while suggestions are hidden, and
        Enter is passed through when `pass_through_enter` is set.
    """
    if not session.visible:
        return False
    try:
        action = KeyAction(key)
    except ValueError:
        return False

    if action is KeyAction.ESCAPE:
        session.on_cancel()
        return True
    if action is KeyAction.UP:
        session.on_navigate(Direction.UP)
        return True
    if action is KeyAction.DOWN:
        session.on_navigate(Direction.DOWN)
        return True
    session.on_commit()
    if action is KeyAction.ENTER:
        return not session.config.pass_through_enter
    return True


def sync_buffer(session: SuggestionSession, buffer: Buffer) -> None:
    """Write the session's text and caret back into a Prompt Toolkit buffer."""
    state = session.state
    if buffer.text != state.text or buffer.cursor_position != state.caret:
        buffer.document = Document(state.text, min(state.caret, len(state.text)))


def attach_buffer(session: SuggestionSession, buffer: Buffer) -> None:
    """
    Feed every edit of `buffer` to `session` and write rewrites back.

    Edits that only echo the session's own text, such as the one made by
    `sync_buffer()` after a commit, are skipped so the separator rewrite
    stays armed for the next real keystroke.
    """

    def _changed(_: Buffer) -> None:
        state = session.state
        if buffer.text == state.text and buffer.cursor_position == state.caret:
            return
        session.on_text_changed(buffer.text, buffer.cursor_position)
        sync_buffer(session, buffer)

    buffer.on_text_changed += _changed


def build_key_bindings(session: SuggestionSession, buffer: Buffer) -> KeyBindings:
    """Bind navigation keys to `session`, active only while suggestions are visible."""
    bindings = KeyBindings()
    suggesting = Condition(lambda: session.visible)

    def _handler(action: KeyAction):
        def handle(event: KeyPressEvent) -> None:
            route_key(session, action)
            sync_buffer(session, buffer)

        return handle

    bindings.add("up", filter=suggesting)(_handler(KeyAction.UP))
    bindings.add("down", filter=suggesting)(_handler(KeyAction.DOWN))
    bindings.add("tab", filter=suggesting)(_handler(KeyAction.TAB))
    bindings.add("escape", filter=suggesting, eager=True)(_handler(KeyAction.ESCAPE))

    @bindings.add("enter", filter=suggesting)
    def _(event: KeyPressEvent) -> None:
        consumed = route_key(session, KeyAction.ENTER)
        sync_buffer(session, buffer)
        if not consumed:
            buffer.validate_and_handle()

    return bindings
