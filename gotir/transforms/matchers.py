"""Matcher builders for transforms.

Type and Field both expose ``name`` and ``type_names()``, so name and type
matchers work on either. Tag matchers only ever accept fields; path matchers
only accept imports.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Any

from gotir.ir.models import Field, Import
from gotir.transforms.models import Matcher


def name_is(*names: str) -> Matcher:
    wanted = set(names)

    def match(node: Any) -> bool:
        return getattr(node, "name", None) in wanted

    return match


def name_matches(*patterns: str) -> Matcher:
    """Match nodes whose name fits any of the glob patterns."""

    def match(node: Any) -> bool:
        name = getattr(node, "name", None)
        if not name:
            return False
        return any(fnmatchcase(name, p) for p in patterns)

    return match


def type_matches(*patterns: str) -> Matcher:
    """Match nodes that reference a type fitting any of the glob patterns."""

    def match(node: Any) -> bool:
        type_names = getattr(node, "type_names", None)
        if type_names is None:
            return False
        return any(fnmatchcase(t, p) for t in type_names() for p in patterns)

    return match


def has_tag(key: str, value: str | None = None) -> Matcher:
    """Match fields carrying tag ``key``; with ``value``, its first token must equal it."""

    def match(node: Any) -> bool:
        if not isinstance(node, Field) or key not in node.tags:
            return False
        if value is None:
            return True
        tokens = node.tags[key]
        return bool(tokens) and tokens[0] == value

    return match


def path_is(*paths: str) -> Matcher:
    wanted = set(paths)

    def match(node: Any) -> bool:
        return isinstance(node, Import) and node.path in wanted

    return match


def path_matches(*patterns: str) -> Matcher:
    def match(node: Any) -> bool:
        return isinstance(node, Import) and any(fnmatchcase(node.path, p) for p in patterns)

    return match


def all_of(*matchers: Matcher) -> Matcher:
    def match(node: Any) -> bool:
        return all(m(node) for m in matchers)

    return match


def any_of(*matchers: Matcher) -> Matcher:
    def match(node: Any) -> bool:
        return any(m(node) for m in matchers)

    return match


def negate(matcher: Matcher) -> Matcher:
    def match(node: Any) -> bool:
        return not matcher(node)

    return match
