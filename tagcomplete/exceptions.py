# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the exception classes used by the Tagcomplete engine.

Only configuration problems are errors. An unmatched caret, a missing option
key or a wrongly shaped option tree are routine while typing and degrade to
"no match" or an empty candidate list instead of raising.

Exception Hierarchy:
- TagcompleteError
    └── ConfigError
"""


class TagcompleteError(Exception):
    """Base exception for the Tagcomplete engine."""


class ConfigError(TagcompleteError):
    """Exception raised for an invalid token regex or an unreadable configuration."""
