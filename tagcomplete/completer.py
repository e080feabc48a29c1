# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `TriggerCompleter`, a Prompt Toolkit completer backed by the
Tagcomplete scanner.

The completer is a ready-made host for terminal prompts:
- Detects the trigger token under the cursor with `scan()`
- Applies the same gating as a `SuggestionSession`
- Replaces the trigger and partial token with the rendered candidate plus
  the configured separator
- Highlights the typed part of each candidate in the completion menu

Example:
    completer = TriggerCompleter(CompletionConfig(triggers=["@", "#"]), options)
    PromptSession(completer=completer, complete_while_typing=True)
"""
from __future__ import annotations

from typing import Any, Callable, Iterable

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from tagcomplete.config import CompletionConfig
from tagcomplete.exceptions import ConfigError
from tagcomplete.highlight import highlight_formatted
from tagcomplete.logger import logger
from tagcomplete.options import OptionSource, option_source
from tagcomplete.scanner import MatchDescriptor, scan
from tagcomplete.session import Render, default_render, passes_gating


class TriggerCompleter(Completer):
    """
    Prompt Toolkit completer for mention-style tokens.

    Args:
        config (CompletionConfig): Matching and separator settings.
        options (OptionSource | Any): Candidate source; raw lists and mappings
            are accepted. A zero-argument callable is re-read on every
            completion request, for options that change while typing.
        render (Render | None): Builds the inserted text from trigger and
            candidate. Defaults to concatenation.
    """

    def __init__(
        self,
        config: CompletionConfig,
        options: OptionSource | Any | Callable[[], Any] = None,
        render: Render | None = None,
    ):
        self.config = config
        self._options = options
        self.render = render or default_render

    @property
    def options(self) -> OptionSource:
        options = self._options() if callable(self._options) else self._options
        return option_source(options)

    def get_match(self, document: Document) -> MatchDescriptor | None:
        """Scan the document, returning a match only if it passes gating."""
        try:
            match = scan(
                document.text, document.cursor_position, self.options, self.config
            )
        except ConfigError as error:
            logger.error("Completion skipped: %s", error)
            return None
        if match is None or not passes_gating(match, self.config):
            return None
        return match

    def get_completions(
        self, document: Document, complete_event: CompleteEvent | None
    ) -> Iterable[Completion]:
        """
        Yield a completion per candidate for the token under the cursor.

        Args:
            document (Document): The current Prompt Toolkit document.
            complete_event: The triggering event; not used here.

        Yields:
            Completion: One per candidate, up to `max_options`.
        """
        match = self.get_match(document)
        if match is None:
            return

        typed = match.typed_text(document.text)
        start_position = -(len(match.trigger) + match.match_length)
        if match.trigger in self.config.disable_separator_for:
            separator = ""
        else:
            separator = self.config.separator_char

        candidates = match.candidates
        if self.config.max_options:
            candidates = candidates[: self.config.max_options]
        for candidate in candidates:
            yield Completion(
                self.render(match.trigger, candidate) + separator,
                start_position=start_position,
                display=highlight_formatted(candidate, typed),
            )
