# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the `HookManager` and `SessionEvent` used to notify the host of
suggestion-session events.

The engine never owns the text buffer or fetches candidates itself; it tells
the host when something needs doing and carries on synchronously. Hooks are
plain callables invoked in registration order.

Key Components:
- SessionEvent: The events a host can subscribe to
- HookManager: Registers and triggers hooks per event

Usage:
    hooks = HookManager()
    hooks.register(SessionEvent.REQUEST_OPTIONS, fetch_users)
    hooks.trigger(SessionEvent.REQUEST_OPTIONS, "al")
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from tagcomplete.logger import logger

Hook = Callable[..., Any]


class SessionEvent(Enum):
    """
    Enum of events raised by a `SuggestionSession`.

    Members:
        REQUEST_OPTIONS: A token matched but gating failed; the hook receives
            the partial token and may fetch more candidates. Fire-and-forget.
        COMMITTED: A candidate was committed; the hook receives the new text.
        REWRITTEN: The separator rewrite changed the text; the hook receives
            the new text.

    Aliases:
        "request" → "request_options"
        "commit" → "committed"
        "select" → "committed"

    Example:
        SessionEvent("commit") → SessionEvent.COMMITTED
    """

    REQUEST_OPTIONS = "request_options"
    COMMITTED = "committed"
    REWRITTEN = "rewritten"

    @classmethod
    def choices(cls) -> list[SessionEvent]:
        """Return a list of all event choices."""
        return list(cls)

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "request": "request_options",
            "commit": "committed",
            "select": "committed",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> SessionEvent:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower()
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


class HookManager:
    """
    Manages host callbacks for a suggestion session.

    Methods:
        register(event, hook): Register a callable for a given event.
        clear(event): Remove hooks for one or all events.
        trigger(event, payload): Call every hook registered for an event.
    """

    def __init__(self) -> None:
        self._hooks: dict[SessionEvent, list[Hook]] = {
            event: [] for event in SessionEvent
        }

    def register(self, event: SessionEvent | str, hook: Hook) -> None:
        """
        Register a new hook for an event.

        Raises:
            ValueError: If the event is invalid.
            TypeError: If the hook is not callable.
        """
        event = SessionEvent(event)
        if not callable(hook):
            raise TypeError(f"Hook for '{event}' must be callable, got {hook!r}")
        self._hooks[event].append(hook)

    def clear(self, event: SessionEvent | str | None = None) -> None:
        """Clear hooks for one event, or for all events when `event` is None."""
        if event:
            self._hooks[SessionEvent(event)] = []
        else:
            for registered in self._hooks:
                self._hooks[registered] = []

    def trigger(self, event: SessionEvent, payload: Any) -> None:
        """
        Invoke all hooks registered for an event.

        Hook exceptions are logged and skipped so one failing host callback
        cannot corrupt the session state.
        """
        for hook in self._hooks[event]:
            try:
                hook(payload)
            except Exception as hook_error:
                logger.warning(
                    "[Hook:%s] raised an exception during '%s': %s",
                    getattr(hook, "__name__", repr(hook)),
                    event,
                    hook_error,
                )

    def __str__(self) -> str:
        """Return a formatted string of registered hooks grouped by event."""

        def format_hook_list(hooks: list[Hook]) -> str:
            return (
                ", ".join(getattr(h, "__name__", repr(h)) for h in hooks) if hooks else "-"
            )

        lines = ["<HookManager>"]
        for event in SessionEvent:
            lines.append(f"  {event.value}: {format_hook_list(self._hooks[event])}")
        return "\n".join(lines)
