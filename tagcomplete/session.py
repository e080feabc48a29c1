# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Suggestion session state machine for a single editing surface.

A `SuggestionSession` sits between a host UI and the scanner. The host
reports text changes and key presses; the session rescans, applies gating
and keeps the state the host renders from:

    Idle ──text change, gating passes──▶ Suggesting
    Suggesting ──commit / cancel / gating fails──▶ Idle

Every operation returns the new immutable `SessionState`. The session always
re-derives from the text and caret it holds, so options that arrive late
through `on_options_updated()` are applied to the live buffer and never to a
stale snapshot.

Usage:
    session = SuggestionSession(CompletionConfig(), ["world", "work"])
    session.on_text_changed("hello @wo", 9).visible       # True
    session.on_navigate("down").selected_index             # 1
    session.on_commit().text                               # "hello @work "
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from threading import RLock
from typing import Any, Callable

from tagcomplete.config import CompletionConfig
from tagcomplete.exceptions import ConfigError
from tagcomplete.hooks import HookManager, SessionEvent
from tagcomplete.logger import logger
from tagcomplete.options import OptionSource, option_source
from tagcomplete.rewriter import remove_separator_space
from tagcomplete.scanner import MatchDescriptor, scan
from tagcomplete.triggers import TriggerDescriptor, build_trigger_table

Render = Callable[[str, str], str]


def default_render(trigger: str, candidate: str) -> str:
    return trigger + candidate


@dataclass(frozen=True)
class Anchor:
    """Logical popup position supplied by the host; never computed here."""

    top: float
    left: float


class Direction(Enum):
    UP = "up"
    DOWN = "down"

    @classmethod
    def _missing_(cls, value: object) -> Direction:
        if isinstance(value, str):
            for member in cls:
                if member.value == value.strip().lower():
                    return member
        raise ValueError(f"Invalid {cls.__name__}: {value!r}")


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of a suggestion session.

    Attributes:
        visible (bool): Whether the suggestion list is shown.
        match (MatchDescriptor | None): The match being suggested for.
        selected_index (int): Highlighted candidate while visible.
        anchor (Anchor | None): Host-supplied popup position.
        text (str): The buffer the session last saw or produced.
        caret (int): The caret the session last saw or produced.
        space_removal_armed (bool): Set by a commit; the next text change runs
            the separator rewrite and disarms it.
    """

    visible: bool = False
    match: MatchDescriptor | None = None
    selected_index: int = 0
    anchor: Anchor | None = None
    text: str = ""
    caret: int = 0
    space_removal_armed: bool = False

    @property
    def candidates(self) -> tuple[str, ...]:
        return self.match.candidates if self.match else ()

    @property
    def selected(self) -> str | None:
        if not self.visible or not self.candidates:
            return None
        return self.candidates[self.selected_index]


def passes_gating(match: MatchDescriptor, config: CompletionConfig) -> bool:
    """
    Decide whether a match is worth showing as a suggestion list.

    The token must be long enough (unless its trigger is exempt), and the list
    must offer something beyond what is already typed: a single candidate equal
    in length to the typed text is suppressed.
    """
    long_enough = (
        match.match_length >= config.min_chars
        or match.trigger in config.disable_min_chars_for
    )
    candidates = match.candidates
    has_completion = len(candidates) > 1 or (
        len(candidates) == 1 and len(candidates[0]) != match.match_length
    )
    return long_enough and has_completion


class SuggestionSession:
    """
    Holds the suggestion state for one editing surface.

    Args:
        config (CompletionConfig | None): Matching and commit settings.
        options (OptionSource | Any): Candidate source; raw lists and
            mappings are accepted.
        render (Render | None): Turns `(trigger, candidate)` into the committed
            text. Defaults to concatenation.
        on_request_options (Callable[[str], Any] | None): Called with the
            partial token when gating fails and more candidates may help.
        on_committed (Callable[[str], Any] | None): Called with the new buffer
            text after a commit.
        caret_locator (Callable[[int], Anchor] | None): Maps a caret index to
            the host's popup anchor.
        hooks (HookManager | None): Shared hook manager, if the host has one.

    Calls are serialized by a per-session lock since commit, navigation and
    text changes do not commute.
    """

    def __init__(
        self,
        config: CompletionConfig | None = None,
        options: OptionSource | Any = None,
        *,
        render: Render | None = None,
        on_request_options: Callable[[str], Any] | None = None,
        on_committed: Callable[[str], Any] | None = None,
        caret_locator: Callable[[int], Anchor] | None = None,
        hooks: HookManager | None = None,
    ) -> None:
        self.config = config or CompletionConfig()
        self.options: OptionSource = option_source(options)
        self.render: Render = render or default_render
        self.caret_locator = caret_locator
        self.hooks = hooks or HookManager()
        if on_request_options:
            self.hooks.register(SessionEvent.REQUEST_OPTIONS, on_request_options)
        if on_committed:
            self.hooks.register(SessionEvent.COMMITTED, on_committed)
        self.state = SessionState()
        self._triggers: tuple[TriggerDescriptor, ...] | None = None
        self._lock = RLock()

    @property
    def visible(self) -> bool:
        return self.state.visible

    def _trigger_table(self) -> tuple[TriggerDescriptor, ...]:
        if self._triggers is None:
            self._triggers = build_trigger_table(
                self.config.triggers, self.config.compiled_regex()
            )
        return self._triggers

    def _idle(self, state: SessionState) -> SessionState:
        return replace(state, visible=False, match=None, selected_index=0, anchor=None)

    def _rescan(self, state: SessionState) -> tuple[SessionState, str | None]:
        """Return the rescanned state and the partial token to request options for."""
        if not state.text:
            return self._idle(state), None
        try:
            match = scan(
                state.text, state.caret, self.options, self.config, self._trigger_table()
            )
        except ConfigError as error:
            logger.error("Scan aborted: %s", error)
            return self._idle(state), None

        if match is None:
            return self._idle(state), None

        if passes_gating(match, self.config):
            selected_index = state.selected_index if state.visible else 0
            if selected_index >= len(match.candidates):
                selected_index = 0
            anchor = self.caret_locator(state.caret) if self.caret_locator else None
            visible = replace(
                state,
                visible=True,
                match=match,
                selected_index=selected_index,
                anchor=anchor,
            )
            return visible, None

        if not self.config.request_only_if_no_options or not match.candidates:
            return self._idle(state), match.typed_text(state.text)
        return self._idle(state), None

    def _update(self, state: SessionState) -> SessionState:
        self.state, partial = self._rescan(state)
        if partial is not None:
            logger.debug("Requesting options for '%s'", partial)
            # hooks may re-enter through on_options_updated
            self.hooks.trigger(SessionEvent.REQUEST_OPTIONS, partial)
        return self.state

    def on_text_changed(self, text: str, caret: int) -> SessionState:
        """Record a buffer change, run the armed separator rewrite, and rescan."""
        with self._lock:
            previous = self.state
            state = replace(previous, text=text, caret=caret, space_removal_armed=False)
            if previous.space_removal_armed:
                rewritten = remove_separator_space(
                    previous.text, text, caret, self.options, self.config
                )
                if rewritten is not None:
                    new_text, new_caret = rewritten
                    self.state = replace(state, text=new_text, caret=new_caret)
                    self.hooks.trigger(SessionEvent.REWRITTEN, new_text)
                    return self.state
            return self._update(state)

    def on_options_updated(self, options: OptionSource | Any) -> SessionState:
        """Replace the option source and rescan the current buffer."""
        with self._lock:
            self.options = option_source(options)
            return self._update(self.state)

    def on_config_changed(self, config: CompletionConfig) -> SessionState:
        """Replace the configuration and rescan the current buffer."""
        with self._lock:
            self.config = config
            self._triggers = None
            return self._update(self.state)

    def on_navigate(self, direction: Direction | str) -> SessionState:
        """Move the highlighted candidate, wrapping at both ends."""
        with self._lock:
            direction = Direction(direction)
            count = len(self.state.candidates)
            if not self.state.visible or not count:
                return self.state
            step = -1 if direction is Direction.UP else 1
            self.state = replace(
                self.state,
                selected_index=(self.state.selected_index + count + step) % count,
            )
            return self.state

    def on_commit(self, index: int | None = None) -> SessionState:
        """
        Replace the trigger and token with the chosen candidate.

        Args:
            index (int | None): Candidate to commit; defaults to the
                highlighted one.

        Returns:
            SessionState: Idle, holding the new text and caret, with the
            separator rewrite armed for the next text change.
        """
        with self._lock:
            state = self.state
            if not state.visible or state.match is None:
                return state
            if index is None:
                index = state.selected_index
            if not 0 <= index < len(state.candidates):
                logger.warning(
                    "Ignoring commit of index %d with %d candidates",
                    index,
                    len(state.candidates),
                )
                return state

            match = state.match
            prefix = state.text[: match.match_start - len(match.trigger)]
            suffix = state.text[match.match_end :]
            rendered = self.render(match.trigger, state.candidates[index])
            if match.trigger in self.config.disable_separator_for:
                separator = ""
            else:
                separator = self.config.separator_char
            text = f"{prefix}{rendered}{separator}{suffix}"
            caret = min(len(prefix) + len(rendered) + 1, len(text))

            self.state = SessionState(text=text, caret=caret, space_removal_armed=True)
            logger.debug("Committed '%s' at %d", rendered, len(prefix))
            self.hooks.trigger(SessionEvent.COMMITTED, text)
            return self.state

    def on_cancel(self) -> SessionState:
        """Hide the suggestion list (escape, blur, resize)."""
        with self._lock:
            self.state = self._idle(self.state)
            return self.state

    def reset(self) -> SessionState:
        """Forget the buffer and any match, e.g. when the surface is cleared."""
        with self._lock:
            self.state = SessionState()
            return self.state

    def visible_candidates(self) -> tuple[str, ...]:
        """Return the candidates to display, truncated to `max_options`."""
        if not self.state.visible:
            return ()
        if self.config.max_options:
            return self.state.candidates[: self.config.max_options]
        return self.state.candidates
