"""Attribute glob patterns: matching, filtering and union.

Example
-------
::

    from aumos_access_control.attributes import filter_attributes, union

    union(["*", "!id"], ["*"])                              # ["*"]
    filter_attributes({"id": 1, "title": "x"}, ["*", "!id"])  # {"title": "x"}
"""
from __future__ import annotations

from aumos_access_control.attributes.glob import (
    AttributeGlob,
    filter_all,
    filter_attributes,
    is_granted,
    matches,
    sort_patterns,
    union,
)

__all__ = [
    "AttributeGlob",
    "filter_all",
    "filter_attributes",
    "is_granted",
    "matches",
    "sort_patterns",
    "union",
]
