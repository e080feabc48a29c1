"""
Tagcomplete

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging
import os
import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Any, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import FormattedText
from rich import box
from rich.markup import escape
from rich.table import Table

from tagcomplete.completer import TriggerCompleter
from tagcomplete.config import CompletionConfig, loader
from tagcomplete.console import console
from tagcomplete.exceptions import TagcompleteError
from tagcomplete.highlight import highlight_text, suggestion_fragments
from tagcomplete.keys import attach_buffer, build_key_bindings
from tagcomplete.options import FlatList, OptionSource
from tagcomplete.scanner import MatchDescriptor, scan
from tagcomplete.session import SuggestionSession, passes_gating
from tagcomplete.utils import setup_logging


def find_config() -> Path | None:
    candidates = [
        Path.cwd() / "tagcomplete.yaml",
        Path.cwd() / "tagcomplete.toml",
        Path.cwd() / ".tagcomplete.yaml",
        Path.cwd() / ".tagcomplete.toml",
        Path(os.environ.get("TAGCOMPLETE_CONFIG", "tagcomplete.yaml")),
        Path.home() / ".config" / "tagcomplete" / "tagcomplete.yaml",
        Path.home() / ".config" / "tagcomplete" / "tagcomplete.toml",
    ]
    return next((p for p in candidates if p.is_file()), None)


def get_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="tagcomplete",
        description="Detect trigger tokens like @name or #tag and list completions.",
    )
    parser.add_argument(
        "--config", type=Path, help="YAML or TOML file with settings and options."
    )
    parser.add_argument(
        "--log-mode", choices=["cli", "json"], help="Console logging format."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to the console."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Show the match for a text and caret",
        description="Scan TEXT at the caret and print the trigger match.",
    )
    scan_parser.add_argument("text", type=str, help="Text buffer to scan.")
    scan_parser.add_argument(
        "--caret", type=int, help="Caret index; defaults to the end of TEXT."
    )
    scan_parser.add_argument(
        "-t",
        "--trigger",
        action="append",
        dest="triggers",
        help="Trigger tag; repeat for several. Overrides the config file.",
    )
    scan_parser.add_argument(
        "-o",
        "--option",
        action="append",
        dest="options",
        help="Candidate; repeat for several. Overrides the config file options.",
    )
    scan_parser.add_argument(
        "--match-any", action="store_true", help="Match candidates by substring."
    )

    prompt_parser = subparsers.add_parser(
        "prompt",
        help="Interactive prompt with completions",
        description="Open a prompt that completes trigger tokens as you type.",
    )
    prompt_parser.add_argument(
        "--menu",
        action="store_true",
        help="Use the completion menu instead of the suggestion toolbar.",
    )
    return parser


def load_settings(args: Namespace) -> tuple[CompletionConfig, OptionSource]:
    config_path = args.config or find_config()
    if config_path:
        config, options = loader(config_path)
    else:
        config, options = CompletionConfig(), FlatList()

    overrides: dict[str, Any] = {}
    if getattr(args, "triggers", None):
        overrides["triggers"] = args.triggers
    if getattr(args, "match_any", False):
        overrides["match_any"] = True
    if overrides:
        config = CompletionConfig(**{**config.model_dump(), **overrides})
    if getattr(args, "options", None):
        options = FlatList(tuple(args.options))
    return config, options


def render_match(
    text: str, match: MatchDescriptor | None, config: CompletionConfig
) -> Table:
    table = Table(title="Match", box=box.SIMPLE, show_header=False)
    table.add_column(style="muted")
    table.add_column()
    if match is None:
        table.add_row("result", "[muted]no match[/]")
        return table
    typed = match.typed_text(text)
    table.add_row("trigger", f"[trigger]{escape(match.trigger) or '(word)'}[/]")
    table.add_row("start", str(match.match_start))
    table.add_row("typed", escape(typed))
    table.add_row("shown", "yes" if passes_gating(match, config) else "no")
    candidates = match.candidates
    if config.max_options:
        candidates = candidates[: config.max_options]
    for index, candidate in enumerate(candidates):
        table.add_row("candidate" if index == 0 else "", highlight_text(candidate, typed))
    return table


def run_scan(args: Namespace, config: CompletionConfig, options: OptionSource) -> int:
    caret = len(args.text) if args.caret is None else args.caret
    match = scan(args.text, caret, options, config)
    console.print(render_match(args.text, match, config))
    return 0 if match is not None else 1


def build_prompt_session(
    config: CompletionConfig,
    options: OptionSource,
    menu: bool = False,
    **prompt_kwargs: Any,
) -> tuple[PromptSession, SuggestionSession]:
    """
    Build the interactive prompt.

    By default suggestions come from a `SuggestionSession` shown in the bottom
    toolbar and driven by the arrow, Tab, Enter and Escape keys. With `menu`
    set, prompt_toolkit's completion menu is used through `TriggerCompleter`.
    """
    suggestions = SuggestionSession(config, options)
    if menu:
        prompt_session: PromptSession = PromptSession(
            completer=TriggerCompleter(config, options),
            complete_while_typing=True,
            **prompt_kwargs,
        )
        return prompt_session, suggestions

    def toolbar() -> FormattedText:
        state = suggestions.state
        if not state.visible or state.match is None:
            return FormattedText([("class:bottom-toolbar.text", " ")])
        return suggestion_fragments(
            suggestions.visible_candidates(),
            state.match.typed_text(state.text),
            state.selected_index,
        )

    prompt_session = PromptSession(bottom_toolbar=toolbar, **prompt_kwargs)
    buffer = prompt_session.default_buffer
    attach_buffer(suggestions, buffer)
    prompt_session.key_bindings = build_key_bindings(suggestions, buffer)
    return prompt_session, suggestions


def run_prompt(
    config: CompletionConfig, options: OptionSource, menu: bool = False
) -> int:
    prompt_session, suggestions = build_prompt_session(config, options, menu)
    console.print(
        f"[muted]Triggers: {escape(' '.join(config.triggers))}. Ctrl-D to exit.[/]"
    )
    while True:
        try:
            line = prompt_session.prompt("> ")
        except KeyboardInterrupt:
            suggestions.reset()
            continue
        except EOFError:
            return 0
        suggestions.reset()
        console.print(line, markup=False, highlight=False)


def main(argv: Sequence[str] | None = None) -> int:
    args = get_parser().parse_args(argv)
    setup_logging(
        mode=args.log_mode,
        console_log_level=logging.DEBUG if args.verbose else logging.WARNING,
    )
    try:
        config, options = load_settings(args)
        if args.command == "scan":
            return run_scan(args, config, options)
        return run_prompt(config, options, args.menu)
    except (TagcompleteError, FileNotFoundError) as error:
        console.print(f"[error]❌ {escape(str(error))}[/]", highlight=False)
        return 2


if __name__ == "__main__":
    sys.exit(main())
