"""Query: fluent builder for permission checks.

Example
-------
::

    permission = ac.can("user").read_own("video")
    permission = ac.can(["user", "editor"]).resource("video").update_any()
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace

from aumos_access_control.errors import AccessControlError
from aumos_access_control.grants.enums import Action, Possession
from aumos_access_control.grants.normalize import MISSING, QueryInfo, StringOrList
from aumos_access_control.grants.permission import Permission
from aumos_access_control.grants.resolver import PermissionResolver
from aumos_access_control.grants.store import GrantsStore


class Query:
    """Collects roles and a resource, then resolves one action into a Permission.

    Parameters
    ----------
    store:
        Store holding the grants to query.
    resolver:
        Resolver used to turn the query into a Permission.
    role_or_info:
        Role name(s), or a QueryInfo / mapping. May be omitted and set later
        with :meth:`role`.
    """

    def __init__(
        self,
        store: GrantsStore,
        resolver: PermissionResolver,
        role_or_info: object = MISSING,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._info = QueryInfo()

        if isinstance(role_or_info, (str, list, tuple)):
            self.role(role_or_info)
        elif isinstance(role_or_info, (Mapping, QueryInfo)):
            if isinstance(role_or_info, Mapping) and not role_or_info:
                raise AccessControlError("Invalid query info: {}")
            self._info = QueryInfo.from_mapping(role_or_info)
        elif role_or_info is not MISSING:
            raise AccessControlError(
                f"Invalid role(s), expected a valid string, list or QueryInfo: {role_or_info!r}"
            )

    def role(self, value: StringOrList) -> Query:
        """Set the role(s) to check."""
        self._info.role = value
        return self

    def resource(self, value: str) -> Query:
        """Set the resource to check."""
        self._info.resource = value
        return self

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def create_own(self, resource: str | None = None) -> Permission:
        return self._get_permission(Action.CREATE, Possession.OWN, resource)

    def create_any(self, resource: str | None = None) -> Permission:
        return self._get_permission(Action.CREATE, Possession.ANY, resource)

    create = create_any

    def read_own(self, resource: str | None = None) -> Permission:
        return self._get_permission(Action.READ, Possession.OWN, resource)

    def read_any(self, resource: str | None = None) -> Permission:
        return self._get_permission(Action.READ, Possession.ANY, resource)

    read = read_any

    def update_own(self, resource: str | None = None) -> Permission:
        return self._get_permission(Action.UPDATE, Possession.OWN, resource)

    def update_any(self, resource: str | None = None) -> Permission:
        return self._get_permission(Action.UPDATE, Possession.ANY, resource)

    update = update_any

    def delete_own(self, resource: str | None = None) -> Permission:
        return self._get_permission(Action.DELETE, Possession.OWN, resource)

    def delete_any(self, resource: str | None = None) -> Permission:
        return self._get_permission(Action.DELETE, Possession.ANY, resource)

    delete = delete_any

    def _get_permission(
        self,
        action: Action,
        possession: Possession,
        resource: str | None,
    ) -> Permission:
        info = replace(self._info, action=action.value, possession=possession.value)
        if resource is not None:
            info.resource = resource
        return self._resolver.resolve(self._store.data, info)

    def __repr__(self) -> str:
        return f"Query(role={self._info.role!r}, resource={self._info.resource!r})"
