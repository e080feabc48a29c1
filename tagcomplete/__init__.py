"""
Tagcomplete

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging

from .config import CompletionConfig, loader
from .exceptions import ConfigError, TagcompleteError
from .options import ByTrigger, FlatList, FlatOptions, NestedOptions, resolve
from .rewriter import remove_separator_space
from .scanner import MatchDescriptor, scan
from .session import Anchor, Direction, SessionState, SuggestionSession
from .triggers import TriggerDescriptor, build_trigger_table
from .version import __version__

logger = logging.getLogger("tagcomplete")


__all__ = [
    "Anchor",
    "ByTrigger",
    "CompletionConfig",
    "ConfigError",
    "Direction",
    "FlatList",
    "FlatOptions",
    "MatchDescriptor",
    "NestedOptions",
    "SessionState",
    "SuggestionSession",
    "TagcompleteError",
    "TriggerDescriptor",
    "__version__",
    "build_trigger_table",
    "loader",
    "remove_separator_space",
    "resolve",
    "scan",
]
