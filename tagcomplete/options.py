# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Option sources and the resolver that turns them into raw candidate lists.

An option source is either:
- `FlatList`: one list of candidates shared by every trigger.
- `ByTrigger`: a mapping from trigger tag to an `OptionNode`.

An `OptionNode` is a small tagged union:
- `FlatOptions`: a flat list of candidates.
- `NestedOptions`: a mapping from key to child node, of arbitrary depth. A
  child of `None` is a leaf, as produced from `{"alice": 1}`.

Nested trees are addressed by a key path taken from the text just before the
token, so `@team@al` offers the keys under `team`. `path_separator` lets the
same tree be addressed as `@team.al` when the path is typed before a token.

Resolution is total: a missing key or a wrongly shaped node resolves to no
candidates rather than raising.

Typical Usage:
    source = option_source({"@": {"team": {"alice": 1, "bob": 1}}})
    resolve("@", "@team@al", 6, source)   # ("alice", "bob")
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, Union

from tagcomplete.logger import logger

QUOTE_CHARS = "'\""


@dataclass(frozen=True)
class FlatOptions:
    """A flat, ordered list of candidates."""

    items: tuple[str, ...] = ()


@dataclass(frozen=True)
class NestedOptions:
    """A mapping from key to child node; the keys double as candidates."""

    children: Mapping[str, "OptionNode | None"] = field(default_factory=dict)

    def keys(self) -> tuple[str, ...]:
        return tuple(self.children)


OptionNode = Union[FlatOptions, NestedOptions]


@dataclass(frozen=True)
class FlatList:
    """Option source applying the same candidates to every trigger."""

    items: tuple[str, ...] = ()


@dataclass(frozen=True)
class ByTrigger:
    """Option source keyed by trigger tag."""

    nodes: Mapping[str, OptionNode] = field(default_factory=dict)


OptionSource = Union[FlatList, ByTrigger]


class _NotFound:
    """Sentinel for a key path that leads nowhere in a nested option tree."""

    _instance: _NotFound | None = None

    def __new__(cls) -> _NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


def option_node(raw: Any) -> OptionNode | None:
    """
    Convert a raw list or mapping into an `OptionNode`.

    Strings inside a list are kept as candidates, mappings become
    `NestedOptions` with their values converted recursively, and any other
    value (numbers, booleans, None) becomes a leaf.
    """
    if isinstance(raw, (FlatOptions, NestedOptions)):
        return raw
    if isinstance(raw, Mapping):
        return NestedOptions({str(key): option_node(value) for key, value in raw.items()})
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        return FlatOptions(tuple(str(item) for item in raw))
    return None


def option_source(raw: Any) -> OptionSource:
    """
    Coerce a raw option source into a `FlatList` or `ByTrigger`.

    Raises:
        TypeError: If `raw` is neither a sequence of strings nor a mapping.
    """
    if isinstance(raw, (FlatList, ByTrigger)):
        return raw
    if raw is None:
        return FlatList()
    if isinstance(raw, Mapping):
        nodes: dict[str, OptionNode] = {}
        for tag, value in raw.items():
            node = option_node(value)
            if node is None:
                logger.debug("Ignoring non-container options for trigger '%s'", tag)
                continue
            nodes[str(tag)] = node
        return ByTrigger(nodes)
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        return FlatList(tuple(str(item) for item in raw))
    raise TypeError(
        f"Options must be a list of strings or a mapping, got {type(raw).__name__}"
    )


def walk(node: OptionNode | None, path: Sequence[str]) -> OptionNode | None | _NotFound:
    """Follow `path` through nested nodes, returning `NOT_FOUND` on a dead end."""
    current = node
    for key in path:
        if not isinstance(current, NestedOptions) or key not in current.children:
            return NOT_FOUND
        current = current.children[key]
    return current


def option_path(
    tag: str, text: str, token_start: int, path_separator: str | None = "."
) -> list[str]:
    """Extract the nested key path typed between the last space and the token."""
    space_index = text.rfind(" ", 0, token_start)
    raw_path = text[max(space_index, 0) : token_start]
    segments = raw_path.split(tag) if tag else [raw_path]
    if path_separator:
        segments = [part for segment in segments for part in segment.split(path_separator)]
    path = []
    for segment in segments:
        cleaned = segment.strip()
        for quote in QUOTE_CHARS:
            cleaned = cleaned.replace(quote, "")
        if cleaned:
            path.append(cleaned)
    return path


def resolve(
    tag: str,
    text: str,
    token_start: int,
    source: OptionSource,
    path_separator: str | None = ".",
) -> tuple[str, ...] | None:
    """
    Resolve the raw, unfiltered candidates for `tag` at `token_start`.

    Args:
        tag (str): The trigger tag that produced the token.
        text (str): The full text buffer.
        token_start (int): Index of the first character of the token.
        source (OptionSource): Where candidates come from.
        path_separator (str | None): Extra separator for nested key paths.

    Returns:
        tuple[str, ...] | None: The candidates, `()` when a nested path leads
        nowhere, or None when `tag` has no entry in a `ByTrigger` source.
    """
    if isinstance(source, FlatList):
        return source.items

    node = source.nodes.get(tag)
    if node is None:
        return None
    if isinstance(node, FlatOptions):
        return node.items

    path = option_path(tag, text, token_start, path_separator)
    if not path:
        return ()
    target = walk(node, path)
    if isinstance(target, FlatOptions):
        return target.items
    if isinstance(target, NestedOptions):
        return target.keys()
    logger.debug("No options at path %s for trigger '%s'", path, tag)
    return ()
