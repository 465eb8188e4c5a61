"""AccessControl: the public entry point for defining and checking grants.

Example
-------
::

    from aumos_access_control import AccessControl

    ac = AccessControl()
    ac.grant("user").create_own("video").read_any("video", ["*", "!id"])
    ac.grant("admin").extend("user").update_any("video").delete_any("video")

    permission = ac.can("user").read_any("video")
    permission.granted                      # True
    permission.filter({"id": 1, "title": "x"})   # {"title": "x"}
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from aumos_access_control.attributes.glob import filter_all
from aumos_access_control.builders.access import Access
from aumos_access_control.builders.query import Query
from aumos_access_control.errors import AccessControlError, is_access_control_error
from aumos_access_control.grants.enums import Action, Possession
from aumos_access_control.grants.hierarchy import RoleHierarchyResolver
from aumos_access_control.grants.normalize import MISSING, QueryInfo, StringOrList
from aumos_access_control.grants.permission import Permission
from aumos_access_control.grants.resolver import PermissionResolver
from aumos_access_control.grants.store import GrantsStore

logger = logging.getLogger(__name__)


class AccessControl:
    """Role and attribute based access control over one grants model.

    Parameters
    ----------
    grants:
        Optional initial grants, either the nested mapping form or a flat
        list of access descriptions. Omit it to start empty; passing ``None``
        explicitly is an error.

    Raises
    ------
    AccessControlError
        If *grants* is given but invalid.
    """

    Action = Action
    Possession = Possession
    Error = AccessControlError

    def __init__(self, grants: object = MISSING) -> None:
        self._hierarchy = RoleHierarchyResolver()
        self._store = GrantsStore(self._hierarchy)
        self._resolver = PermissionResolver(self._hierarchy)
        if grants is not MISSING:
            self._store.set_grants(grants)

    # ------------------------------------------------------------------
    # Grants model
    # ------------------------------------------------------------------

    def get_grants(self) -> Mapping[str, Mapping[str, object]]:
        """Return the grants model.

        While unlocked this is a deep copy holding plain dicts and lists.
        Once locked it is the frozen model itself: mappings become read-only
        ``MappingProxyType`` views and every list (attribute patterns and
        ``$extend``) becomes a tuple, so ``["*"]`` reads back as ``("*",)``.
        Compare with ``list(...)`` when the shape matters.
        """
        return self._store.as_dict()

    def set_grants(self, grants: object) -> AccessControl:
        """Validate *grants* and replace the whole model with it."""
        self._store.set_grants(grants)
        return self

    def reset(self) -> AccessControl:
        """Remove every role and resource."""
        self._store.reset()
        return self

    def lock(self) -> AccessControl:
        """Freeze the grants model permanently.

        Raises
        ------
        AccessControlError
            If the model is empty.
        """
        self._store.lock()
        return self

    @property
    def is_locked(self) -> bool:
        return self._store.is_locked

    # ------------------------------------------------------------------
    # Roles and resources
    # ------------------------------------------------------------------

    def extend_role(self, roles: StringOrList, extender_roles: StringOrList) -> AccessControl:
        """Make *roles* inherit every permission of *extender_roles*.

        Roles in *roles* that do not exist yet are created.

        Raises
        ------
        AccessControlError
            If an extender role does not exist, a role would extend itself,
            or the new edge would create an inheritance cycle.
        """
        self._store.extend(roles, extender_roles)
        return self

    def remove_roles(self, roles: StringOrList) -> AccessControl:
        """Remove roles and detach them from every role that extends them."""
        self._store.remove_roles(roles)
        return self

    def remove_resources(
        self,
        resources: StringOrList,
        roles: StringOrList | None = None,
    ) -> AccessControl:
        """Remove resource definitions from *roles* (default: every role)."""
        self._store.remove_permission(resources, roles)
        return self

    def remove_permission(
        self,
        resources: StringOrList,
        roles: StringOrList | None = None,
        action_possession: str | None = None,
    ) -> AccessControl:
        """Remove one action (e.g. ``"update:own"``) or whole resources."""
        self._store.remove_permission(resources, roles, action_possession)
        return self

    def get_roles(self) -> list[str]:
        return self._store.roles

    def get_resources(self) -> list[str]:
        return self._store.resources

    def get_inherited_roles_of(self, role: str) -> list[str]:
        """Return every role *role* inherits from, directly or transitively."""
        return self._hierarchy.inherited_roles_of(self._store.data, role)

    get_extended_roles_of = get_inherited_roles_of

    def has_role(self, role: StringOrList) -> bool:
        return self._store.has_role(role)

    def has_resource(self, resource: StringOrList) -> bool:
        return self._store.has_resource(resource)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def grant(self, role_or_info: object = MISSING) -> Access:
        """Start a grant chain for role(s), or commit a complete AccessInfo."""
        return Access(self._store, role_or_info, denied=False)

    allow = grant

    def deny(self, role_or_info: object = MISSING) -> Access:
        """Start a deny chain for role(s), or commit a complete AccessInfo."""
        return Access(self._store, role_or_info, denied=True)

    reject = deny

    def can(self, role_or_info: object = MISSING) -> Query:
        """Start a permission query for role(s) or a QueryInfo."""
        return Query(self._store, self._resolver, role_or_info)

    query = can

    def permission(self, query_info: QueryInfo | Mapping[str, object]) -> Permission:
        """Resolve a complete query (role, resource, action) in one call."""
        return self._resolver.resolve(self._store.data, query_info)

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------

    @staticmethod
    def filter(data: object, attributes: Iterable[str]) -> object:
        """Return a filtered deep copy of *data* (mapping or list of mappings)."""
        return filter_all(data, attributes)

    @staticmethod
    def is_access_control_error(obj: object) -> bool:
        return is_access_control_error(obj)

    def __repr__(self) -> str:
        return (
            f"AccessControl(roles={len(self._store.roles)}, "
            f"locked={self._store.is_locked})"
        )
