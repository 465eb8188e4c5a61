"""Validation and normalisation of access and query descriptions.

Roles, resources and attributes may each be given as a single string, a list
of strings, or a comma/semicolon-delimited string (``"admin, user; guest"``).
Actions may carry their possession inline (``"create:own"``); when the
possession is omitted it defaults to ``any``.

The normalisers never mutate their input: they always return a new
:class:`AccessInfo` / :class:`QueryInfo`.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Union

from aumos_access_control.errors import AccessControlError, ErrorKind
from aumos_access_control.grants.enums import ACTIONS, POSSESSIONS, RESERVED_KEYWORDS, Possession

_DELIMITER = re.compile(r"\s*[;,]\s*")

StringOrList = Union[str, list[str], tuple[str, ...]]


class _Missing:
    """Marks an argument that was not passed (distinct from an explicit ``None``)."""

    def __repr__(self) -> str:
        return "<missing>"


MISSING = _Missing()


# ---------------------------------------------------------------------------
# Info objects
# ---------------------------------------------------------------------------


@dataclass
class AccessInfo:
    """Describes a single grant or deny.

    Attributes
    ----------
    role:
        Role name(s) the access applies to.
    resource:
        Resource name(s) the access applies to.
    action:
        ``create``, ``read``, ``update`` or ``delete``, optionally with an
        inline possession (``"read:own"``).
    possession:
        ``own`` or ``any``. Overrides an inline possession when set.
    attributes:
        Attribute patterns. ``None`` means all attributes (``["*"]``).
    denied:
        When ``True`` the stored attributes are forced to ``[]``.
    """

    role: StringOrList | None = None
    resource: StringOrList | None = None
    action: str | None = None
    possession: str | None = None
    attributes: StringOrList | None = None
    denied: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | AccessInfo) -> AccessInfo:
        """Build an AccessInfo from a plain mapping (unknown keys are ignored)."""
        if isinstance(data, AccessInfo):
            return replace(data)
        if not isinstance(data, Mapping):
            raise AccessControlError(f"Invalid access info: {data!r}")
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})  # type: ignore[arg-type]


@dataclass
class QueryInfo:
    """Describes a single permission query."""

    role: StringOrList | None = None
    resource: str | None = None
    action: str | None = None
    possession: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | QueryInfo) -> QueryInfo:
        """Build a QueryInfo from a plain mapping (unknown keys are ignored)."""
        if isinstance(data, QueryInfo):
            return replace(data)
        if not isinstance(data, Mapping):
            raise AccessControlError(f"Invalid query info: {data!r}")
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------


def to_string_list(value: object) -> list[str]:
    """Convert a string, list or tuple into a list of strings.

    Strings are split on commas and semicolons. Any other type yields ``[]``.

    >>> to_string_list("a, b; c")
    ['a', 'b', 'c']
    """
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return _DELIMITER.split(value.strip())
    return []


def is_filled_string_list(values: list[object]) -> bool:
    """Return True if every item is a non-blank string (``[]`` passes)."""
    return all(isinstance(v, str) and v.strip() != "" for v in values)


def uniq_concat(first: list[str], second: list[str]) -> list[str]:
    """Concatenate two lists keeping the first occurrence of each item."""
    merged = list(first)
    for item in second:
        if item not in merged:
            merged.append(item)
    return merged


def subtract_list(first: list[str], second: list[str]) -> list[str]:
    """Return the items of *first* that are not in *second*."""
    return [item for item in first if item not in second]


def valid_name(name: object, raise_on_invalid: bool = True) -> bool:
    """Check that *name* can be used as a role or resource name.

    Raises
    ------
    AccessControlError
        If the name is blank, not a string, or reserved, and
        ``raise_on_invalid`` is set.
    """
    if not isinstance(name, str) or name.strip() == "":
        if raise_on_invalid:
            raise AccessControlError(
                f"Invalid name, expected a valid string: {name!r}",
                ErrorKind.INVALID_NAME,
            )
        return False
    if name in RESERVED_KEYWORDS:
        if raise_on_invalid:
            raise AccessControlError(
                f'Cannot use reserved name: "{name}"', ErrorKind.INVALID_NAME
            )
        return False
    return True


def has_valid_names(names: object, raise_on_invalid: bool = True) -> bool:
    """Apply :func:`valid_name` to every name in a string or list."""
    return all(valid_name(n, raise_on_invalid) for n in to_string_list(names))


# ---------------------------------------------------------------------------
# Normalisers
# ---------------------------------------------------------------------------


def normalize_action_possession(
    action: object,
    possession: object = None,
) -> tuple[str, str]:
    """Parse ``"action[:possession]"`` into a validated ``(action, possession)``.

    An explicit *possession* wins over the inline one; when neither is given
    the possession defaults to ``any``.
    """
    if not isinstance(action, str):
        raise AccessControlError(f"Invalid action: {action!r}", ErrorKind.INVALID_ACTION)

    parts = action.split(":")
    name = parts[0].strip().lower()
    if len(parts) > 2 or name not in ACTIONS:
        raise AccessControlError(f"Invalid action: {action!r}", ErrorKind.INVALID_ACTION)

    raw_possession = possession or (parts[1] if len(parts) == 2 else None)
    if not raw_possession:
        return name, Possession.ANY.value

    if not isinstance(raw_possession, str) or raw_possession.strip().lower() not in POSSESSIONS:
        raise AccessControlError(
            f"Invalid action possession: {raw_possession!r}",
            ErrorKind.INVALID_POSSESSION,
        )
    return name, raw_possession.strip().lower()


def action_key(action: object, possession: object = None) -> str:
    """Return the ``"action:possession"`` key used inside a resource definition."""
    name, poss = normalize_action_possession(action, possession)
    return f"{name}:{poss}"


def _normalize_roles(value: object) -> list[str]:
    roles = to_string_list(value)
    if not roles or not is_filled_string_list(roles):
        raise AccessControlError(f"Invalid role(s): {value!r}", ErrorKind.INVALID_NAME)
    return roles


def normalize_query_info(
    query: Mapping[str, object] | QueryInfo | None,
    normalize_all: bool = False,
) -> QueryInfo:
    """Validate a query and return a normalised copy.

    Parameters
    ----------
    query:
        QueryInfo or mapping with ``role``, ``resource`` and, when
        ``normalize_all`` is set, ``action`` / ``possession``.
    normalize_all:
        Also validate and normalise ``action`` and ``possession``.
    """
    if query is None:
        raise AccessControlError("Invalid query info: None")
    info = QueryInfo.from_mapping(query)
    info.role = _normalize_roles(info.role)

    resource = info.resource
    if not isinstance(resource, str) or resource.strip() == "":
        raise AccessControlError(f"Invalid resource: {resource!r}", ErrorKind.INVALID_NAME)
    info.resource = resource.strip()
    valid_name(info.resource)

    if normalize_all:
        info.action, info.possession = normalize_action_possession(info.action, info.possession)
    return info


def normalize_access_info(
    access: Mapping[str, object] | AccessInfo | None,
    normalize_all: bool = False,
) -> AccessInfo:
    """Validate an access description and return a normalised copy.

    Roles and resources become non-empty lists of valid names. Attributes
    become ``[]`` when denied or explicitly empty, ``["*"]`` when omitted, and
    a list of non-empty patterns otherwise.
    """
    if access is None:
        raise AccessControlError("Invalid access info: None")
    info = AccessInfo.from_mapping(access)

    info.role = _normalize_roles(info.role)
    has_valid_names(info.role)

    resources = to_string_list(info.resource)
    if not resources or not is_filled_string_list(resources):
        raise AccessControlError(
            f"Invalid resource(s): {info.resource!r}", ErrorKind.INVALID_NAME
        )
    has_valid_names(resources)
    info.resource = resources

    attributes = info.attributes
    if info.denied or (isinstance(attributes, (list, tuple)) and len(attributes) == 0):
        info.attributes = []
    elif not attributes:
        info.attributes = ["*"]
    else:
        patterns = to_string_list(attributes)
        if not patterns or not is_filled_string_list(patterns):
            raise AccessControlError(f"Invalid attributes: {attributes!r}")
        info.attributes = [p.strip() for p in patterns]

    if normalize_all:
        info.action, info.possession = normalize_action_possession(info.action, info.possession)
    return info


def is_info_fulfilled(info: AccessInfo | QueryInfo) -> bool:
    """Return True when role, resource and action are all set."""
    return info.role is not None and info.resource is not None and info.action is not None
