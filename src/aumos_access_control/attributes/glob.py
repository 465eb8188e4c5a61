"""Attribute glob engine: matching, filtering and union of attribute patterns.

An attribute pattern is a dotted path into a nested mapping, optionally
containing ``*`` wildcard segments and an optional leading ``!`` negation::

    "*"                      every top-level attribute (and everything below)
    "account.*"              every attribute directly under ``account``
    "!account.balance.credit" remove ``account.balance.credit``

Filtering applies patterns least-specific first so that later, more specific
or negated patterns override broader inclusions::

    >>> filter_attributes({"id": 1, "name": "x"}, ["*", "!id"])
    {'name': 'x'}

Union
-----
:func:`union` merges two pattern lists into one that grants whatever either
list grants.  A negation is dropped when the other list grants all of the
negated path, so ``union(["*", "!id", "!pwd"], ["*"]) == ["*"]`` while
``union(["*", "!pwd"], ["*", "!id", "!pwd"]) == ["*", "!pwd"]``.  When the
other list grants only part of it, the negation stays and the granted part
is added back as a positive.
"""
from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from aumos_access_control.errors import AccessControlError

logger = logging.getLogger(__name__)

WILDCARD = "*"
NEGATION = "!"


# ---------------------------------------------------------------------------
# AttributeGlob
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AttributeGlob:
    """A parsed attribute pattern.

    Attributes
    ----------
    segments:
        The dotted path split into its segments; ``"*"`` is a wildcard.
    negated:
        Whether the pattern removes (``True``) or includes (``False``)
        matching attributes when filtering.
    """

    segments: tuple[str, ...]
    negated: bool = False

    @classmethod
    def parse(cls, pattern: object) -> AttributeGlob:
        """Parse a pattern string such as ``"!account.*"``.

        Raises
        ------
        AccessControlError
            If the pattern is not a string or has an empty segment.
        """
        if not isinstance(pattern, str):
            raise AccessControlError(f"Invalid attribute pattern: {pattern!r}")
        text = pattern.strip()
        negated = text.startswith(NEGATION)
        if negated:
            text = text[1:].strip()
        segments = tuple(s.strip() for s in text.split("."))
        if not text or any(s == "" for s in segments):
            raise AccessControlError(f"Invalid attribute pattern: {pattern!r}")
        return cls(segments=segments, negated=negated)

    @property
    def path(self) -> str:
        """The dotted path without the negation prefix."""
        return ".".join(self.segments)

    @property
    def wildcard_count(self) -> int:
        return sum(1 for s in self.segments if s == WILDCARD)

    @property
    def sort_key(self) -> tuple[int, int, bool]:
        """Fewer segments first, then more wildcards, then positives before negations."""
        return (len(self.segments), -self.wildcard_count, self.negated)

    def matches(self, path: str) -> bool:
        """Return True if *path* has the same depth and every segment matches.

        The negation flag does not affect matching.
        """
        parts = path.split(".")
        if len(parts) != len(self.segments):
            return False
        return all(g == WILDCARD or g == p for g, p in zip(self.segments, parts))

    def covers(self, other: AttributeGlob) -> bool:
        """Return True if every attribute selected by *other* is selected by self.

        A shorter pattern covers the whole sub-tree below it, so ``"a"`` and
        ``"*"`` both cover ``"a.b"``; a literal segment never covers a
        wildcard segment.
        """
        if len(self.segments) > len(other.segments):
            return False
        return all(g == WILDCARD or g == o for g, o in zip(self.segments, other.segments))

    def overlaps(self, other: AttributeGlob) -> bool:
        """Return True if self and *other* can select a common attribute."""
        return all(
            g == WILDCARD or o == WILDCARD or g == o
            for g, o in zip(self.segments, other.segments)
        )

    def __str__(self) -> str:
        return (NEGATION if self.negated else "") + self.path


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_patterns(patterns: Iterable[object]) -> list[AttributeGlob]:
    """Parse every pattern in *patterns*."""
    return [AttributeGlob.parse(p) for p in patterns]


def sort_globs(globs: Iterable[AttributeGlob]) -> list[AttributeGlob]:
    """Return globs in application order (least specific first, stable)."""
    return sorted(globs, key=lambda g: g.sort_key)


def sort_patterns(patterns: Iterable[str]) -> list[str]:
    """Return pattern strings in the order :func:`filter_attributes` applies them."""
    return [str(g) for g in sort_globs(parse_patterns(patterns))]


def matches(pattern: str, path: str) -> bool:
    """Return True if *pattern* matches the dotted *path* (``*`` = one segment)."""
    return AttributeGlob.parse(pattern).matches(path)


def is_granted(patterns: Iterable[str] | None) -> bool:
    """Return True if at least one pattern is not negated."""
    if not patterns:
        return False
    return any(not p.strip().startswith(NEGATION) for p in patterns)


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def _matching_keys(node: Mapping[object, object], segment: str) -> list[object]:
    return [k for k in node if segment == WILDCARD or str(k) == segment]


def _include(
    source: Mapping[object, object],
    target: dict[object, object],
    segments: tuple[str, ...],
) -> None:
    head, rest = segments[0], segments[1:]
    for key in _matching_keys(source, head):
        value = source[key]
        if not rest:
            target[key] = copy.deepcopy(value)
            continue
        if not isinstance(value, Mapping):
            continue
        child = target.get(key)
        created = not isinstance(child, dict)
        if created:
            child = {}
        _include(value, child, rest)  # type: ignore[arg-type]
        if created and child:
            target[key] = child


def _exclude(target: dict[object, object], segments: tuple[str, ...]) -> None:
    head, rest = segments[0], segments[1:]
    for key in _matching_keys(target, head):
        if not rest:
            del target[key]
        elif isinstance(target[key], dict):
            _exclude(target[key], rest)  # type: ignore[arg-type]


def filter_attributes(
    obj: object,
    patterns: Iterable[str] | None,
) -> dict[object, object]:
    """Return a deep copy of *obj* containing only the permitted attributes.

    Parameters
    ----------
    obj:
        A (possibly nested) mapping. Anything else yields ``{}``.
    patterns:
        Attribute patterns. An empty or missing list yields ``{}``.

    Returns
    -------
    dict
        A new mapping; *obj* is never modified.
    """
    pattern_list = list(patterns or [])
    if not pattern_list or not isinstance(obj, Mapping):
        return {}

    result: dict[object, object] = {}
    for glob in sort_globs(parse_patterns(pattern_list)):
        if glob.negated:
            _exclude(result, glob.segments)
        else:
            _include(obj, result, glob.segments)
    return result


def filter_all(data: object, patterns: Iterable[str] | None) -> object:
    """Filter one mapping, or each mapping of a list, with *patterns*."""
    pattern_list = list(patterns or [])
    if isinstance(data, (list, tuple)):
        return [filter_attributes(item, pattern_list) for item in data]
    return filter_attributes(data, pattern_list)


# ---------------------------------------------------------------------------
# Union
# ---------------------------------------------------------------------------


def _coverage(
    ordered: list[AttributeGlob], target: AttributeGlob
) -> tuple[bool, list[AttributeGlob]]:
    """Return how filtering with *ordered* treats the *target* path.

    The first item tells whether the whole of *target* is kept. The second
    lists the positives that keep only part of it.
    """
    whole = False
    partial: list[AttributeGlob] = []
    for glob in ordered:
        if glob.covers(target):
            whole = not glob.negated
            partial = []
        elif not glob.negated and glob.overlaps(target):
            partial.append(glob)
    return whole, partial


def _intersection(first: AttributeGlob, second: AttributeGlob) -> AttributeGlob:
    """Return the positive glob matching what both overlapping globs match."""
    segments = [
        b if a == WILDCARD else a
        for a, b in zip(first.segments, second.segments)
    ]
    longer = first if len(first.segments) > len(second.segments) else second
    segments.extend(longer.segments[len(segments):])
    return AttributeGlob(segments=tuple(segments))


def _is_redundant(
    glob: AttributeGlob,
    positives: list[AttributeGlob],
    negations: list[AttributeGlob],
) -> bool:
    for other in positives:
        if other == glob or not other.covers(glob):
            continue
        # A negation applied between the broader positive and this one would
        # otherwise swallow what this positive adds back.
        shadowed = any(
            other.sort_key < neg.sort_key < glob.sort_key and neg.overlaps(glob)
            for neg in negations
        )
        if not shadowed:
            return True
    return False


def union(first: Iterable[str], second: Iterable[str]) -> list[str]:
    """Return the pattern list granting what *first* OR *second* grants.

    Positives from both lists are kept in first-seen order, minus those
    already covered by a broader positive. A negation is dropped when the
    other list grants all of the negated path. When the other list grants
    only part of it, the negation is kept together with positives for the
    granted part, so ``union(["a.*", "!a.b"], ["a.b.c"])`` yields
    ``["a.*", "a.b.c", "!a.b"]``. Negations no kept positive reaches are
    dropped, and positives are listed before negations.
    """
    first_globs = parse_patterns(first)
    second_globs = parse_patterns(second)
    first_ordered = sort_globs(first_globs)
    second_ordered = sort_globs(second_globs)

    negations: list[AttributeGlob] = []
    granted_parts: list[AttributeGlob] = []
    candidates = [(g, second_ordered) for g in first_globs if g.negated] + [
        (g, first_ordered) for g in second_globs if g.negated
    ]
    for glob, other in candidates:
        whole, partial = _coverage(other, glob)
        if whole:
            continue
        if glob not in negations:
            negations.append(glob)
        granted_parts.extend(_intersection(pos, glob) for pos in partial)

    seen: list[AttributeGlob] = []
    for glob in first_globs + second_globs + granted_parts:
        if not glob.negated and glob not in seen:
            seen.append(glob)
    positives = [g for g in seen if not _is_redundant(g, seen, negations)]

    reachable = [
        neg
        for neg in negations
        if any(pos.sort_key < neg.sort_key and pos.overlaps(neg) for pos in positives)
    ]

    merged = [str(g) for g in positives] + [str(g) for g in reachable]
    logger.debug("Union of %s and %s -> %s", first_globs, second_globs, merged)
    return merged
