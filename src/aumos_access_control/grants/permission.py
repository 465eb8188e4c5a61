"""Permission: the immutable answer to a permission query."""
from __future__ import annotations

from collections.abc import Iterable

from aumos_access_control.attributes.glob import filter_all, is_granted


class Permission:
    """Result of resolving a query against a grants model.

    A Permission is a snapshot: it never changes after creation, and later
    changes to the grants model do not affect it. It is truthy when granted,
    so it can be used directly in an ``if`` statement::

        permission = ac.can("user").read_any("video")
        if permission:
            payload = permission.filter(video)

    Parameters
    ----------
    roles:
        The queried role names, in the order given.
    resource:
        The queried resource name.
    action:
        The normalised action (``"create"``, ``"read"`` ...).
    possession:
        The normalised possession (``"own"`` or ``"any"``).
    attributes:
        The effective attribute patterns; ``[]`` when nothing is granted.
    """

    __slots__ = ("_roles", "_resource", "_action", "_possession", "_attributes")

    def __init__(
        self,
        roles: Iterable[str],
        resource: str,
        action: str,
        possession: str,
        attributes: Iterable[str],
    ) -> None:
        self._roles = tuple(roles)
        self._resource = resource
        self._action = action
        self._possession = possession
        self._attributes = tuple(attributes)

    @property
    def roles(self) -> list[str]:
        return list(self._roles)

    @property
    def resource(self) -> str:
        return self._resource

    @property
    def action(self) -> str:
        return self._action

    @property
    def possession(self) -> str:
        return self._possession

    @property
    def attributes(self) -> list[str]:
        """A fresh list of the effective attribute patterns."""
        return list(self._attributes)

    @property
    def granted(self) -> bool:
        """True when at least one attribute pattern is not a negation."""
        return is_granted(self._attributes)

    def __bool__(self) -> bool:
        return self.granted

    def filter(self, data: object) -> object:
        """Return a filtered deep copy of *data* (a mapping or list of mappings)."""
        return filter_all(data, self._attributes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Permission):
            return NotImplemented
        return (
            self._roles == other._roles
            and self._resource == other._resource
            and self._action == other._action
            and self._possession == other._possession
            and self._attributes == other._attributes
        )

    def __hash__(self) -> int:
        return hash(
            (self._roles, self._resource, self._action, self._possession, self._attributes)
        )

    def __repr__(self) -> str:
        return (
            f"Permission(roles={list(self._roles)!r}, resource={self._resource!r}, "
            f"action={self._action!r}, possession={self._possession!r}, "
            f"attributes={list(self._attributes)!r}, granted={self.granted})"
        )
