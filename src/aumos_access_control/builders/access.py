"""Access: fluent builder for granting and denying permissions.

Every action method commits immediately, so one chain can define several
permissions::

    ac.grant("user") \\
        .create_own("video") \\
        .read_any("video", ["*", "!id"]) \\
        .grant("admin") \\
        .extend("user") \\
        .delete_any("video")

Attributes passed to an action method apply to that call only; the next
action falls back to ``["*"]`` unless :meth:`Access.attributes` is called
again.
"""
from __future__ import annotations

from collections.abc import Mapping

from aumos_access_control.errors import AccessControlError
from aumos_access_control.grants.enums import Action, Possession
from aumos_access_control.grants.normalize import (
    MISSING,
    AccessInfo,
    StringOrList,
    has_valid_names,
    is_filled_string_list,
    is_info_fulfilled,
    to_string_list,
)
from aumos_access_control.grants.store import GrantsStore

_REQUIRED_KEYS = ("role", "resource", "action")


def _is_complete(source: object, info: AccessInfo) -> bool:
    # A mapping counts as complete when the keys are present, even if a value
    # is None, so that the bad value is reported by the commit.
    if isinstance(source, Mapping):
        return all(key in source for key in _REQUIRED_KEYS)
    return is_info_fulfilled(info)


class Access:
    """Collects role(s), resource(s) and attributes and commits grants or denies.

    Parameters
    ----------
    store:
        Store that receives the commits.
    role_or_info:
        Role name(s), or a complete AccessInfo / mapping. A complete info is
        committed straight away.
    denied:
        When ``True`` every commit stores ``[]`` (no access).
    """

    def __init__(
        self,
        store: GrantsStore,
        role_or_info: object = MISSING,
        denied: bool = False,
    ) -> None:
        self._store = store
        self._info = AccessInfo(denied=denied)

        if isinstance(role_or_info, (str, list, tuple)):
            self.role(role_or_info)
        elif isinstance(role_or_info, (Mapping, AccessInfo)):
            if isinstance(role_or_info, Mapping) and not role_or_info:
                raise AccessControlError("Invalid access info: {}")
            info = AccessInfo.from_mapping(role_or_info)
            info.denied = denied
            self._info = info
            if _is_complete(role_or_info, info):
                self._store.commit(info, normalize_all=True)
        elif role_or_info is not MISSING:
            raise AccessControlError(
                f"Invalid role(s), expected a valid string, list or AccessInfo: {role_or_info!r}"
            )

    @property
    def denied(self) -> bool:
        """Whether this builder records denies."""
        return self._info.denied

    def role(self, value: StringOrList) -> Access:
        """Set the role(s) to grant to, creating them if they do not exist."""
        self._store.pre_create_roles(value)
        self._info.role = value
        return self

    def resource(self, value: StringOrList) -> Access:
        """Set the resource(s) for the following actions."""
        names = to_string_list(value)
        if not names or not is_filled_string_list(names):
            raise AccessControlError(f"Invalid resource(s): {value!r}")
        has_valid_names(names)
        self._info.resource = value
        return self

    def attributes(self, value: StringOrList) -> Access:
        """Set the attribute patterns for the next action."""
        self._info.attributes = value
        return self

    def extend(self, roles: StringOrList) -> Access:
        """Make the current role(s) inherit from *roles*."""
        self._store.extend(self._info.role, roles)
        return self

    inherit = extend

    def grant(self, role_or_info: object = MISSING) -> Access:
        """Start a new grant chain on the same store."""
        return Access(self._store, role_or_info, denied=False)

    def deny(self, role_or_info: object = MISSING) -> Access:
        """Start a new deny chain on the same store."""
        return Access(self._store, role_or_info, denied=True)

    def lock(self) -> Access:
        """Lock the underlying grants model."""
        self._store.lock()
        return self

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def create_own(
        self,
        resource: StringOrList | None = None,
        attributes: StringOrList | None = None,
    ) -> Access:
        return self._prepare_and_commit(Action.CREATE, Possession.OWN, resource, attributes)

    def create_any(
        self,
        resource: StringOrList | None = None,
        attributes: StringOrList | None = None,
    ) -> Access:
        return self._prepare_and_commit(Action.CREATE, Possession.ANY, resource, attributes)

    create = create_any

    def read_own(
        self,
        resource: StringOrList | None = None,
        attributes: StringOrList | None = None,
    ) -> Access:
        return self._prepare_and_commit(Action.READ, Possession.OWN, resource, attributes)

    def read_any(
        self,
        resource: StringOrList | None = None,
        attributes: StringOrList | None = None,
    ) -> Access:
        return self._prepare_and_commit(Action.READ, Possession.ANY, resource, attributes)

    read = read_any

    def update_own(
        self,
        resource: StringOrList | None = None,
        attributes: StringOrList | None = None,
    ) -> Access:
        return self._prepare_and_commit(Action.UPDATE, Possession.OWN, resource, attributes)

    def update_any(
        self,
        resource: StringOrList | None = None,
        attributes: StringOrList | None = None,
    ) -> Access:
        return self._prepare_and_commit(Action.UPDATE, Possession.ANY, resource, attributes)

    update = update_any

    def delete_own(
        self,
        resource: StringOrList | None = None,
        attributes: StringOrList | None = None,
    ) -> Access:
        return self._prepare_and_commit(Action.DELETE, Possession.OWN, resource, attributes)

    def delete_any(
        self,
        resource: StringOrList | None = None,
        attributes: StringOrList | None = None,
    ) -> Access:
        return self._prepare_and_commit(Action.DELETE, Possession.ANY, resource, attributes)

    delete = delete_any

    def _prepare_and_commit(
        self,
        action: Action,
        possession: Possession,
        resource: StringOrList | None,
        attributes: StringOrList | None,
    ) -> Access:
        self._info.action = action.value
        self._info.possession = possession.value
        if resource is not None:
            self._info.resource = resource
        if attributes is not None:
            self._info.attributes = attributes
        self._store.commit(self._info, normalize_all=True)
        self._info.attributes = None
        return self

    def __repr__(self) -> str:
        return (
            f"Access(role={self._info.role!r}, resource={self._info.resource!r}, "
            f"denied={self._info.denied})"
        )
