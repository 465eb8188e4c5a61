"""Resolution of permission queries against a grants model.

For a query ``(roles, resource, action, possession)`` the resolver:

1. flattens the queried roles through their ``$extend`` chains,
2. collects, for every flattened role defining the resource, the attribute
   list stored under ``"action:possession"`` (an ``own`` query falls back to
   ``"action:any"`` since any-possession implies own-possession),
3. folds the collected lists with the attribute union.

The grants mapping is only read, never written.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import reduce

from aumos_access_control.attributes.glob import union
from aumos_access_control.grants.enums import Possession
from aumos_access_control.grants.hierarchy import RoleHierarchyResolver
from aumos_access_control.grants.normalize import QueryInfo, normalize_query_info
from aumos_access_control.grants.permission import Permission

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Turns query descriptions into :class:`Permission` objects.

    Parameters
    ----------
    hierarchy:
        Role hierarchy resolver used to flatten the queried roles.
    """

    def __init__(self, hierarchy: RoleHierarchyResolver | None = None) -> None:
        self._hierarchy = hierarchy or RoleHierarchyResolver()

    def collect(
        self,
        grants: Mapping[str, Mapping[str, object]],
        info: QueryInfo,
    ) -> list[list[str]]:
        """Return the attribute lists each flattened role contributes."""
        flat_roles = self._hierarchy.flatten_all(grants, info.role)
        key = f"{info.action}:{info.possession}"
        fallback = f"{info.action}:{Possession.ANY.value}"

        collected: list[list[str]] = []
        for role_name in flat_roles:
            resource_def = grants[role_name].get(info.resource)  # type: ignore[arg-type]
            if not isinstance(resource_def, Mapping):
                continue
            patterns = resource_def.get(key)
            if patterns is None and info.possession == Possession.OWN.value:
                patterns = resource_def.get(fallback)
            if patterns is not None:
                collected.append(list(patterns))
        return collected

    def resolve(
        self,
        grants: Mapping[str, Mapping[str, object]],
        query: QueryInfo | Mapping[str, object],
    ) -> Permission:
        """Resolve *query* and return the resulting Permission.

        Raises
        ------
        AccessControlError
            If the query is incomplete or invalid, or a queried role (or one
            it inherits from) is not defined.
        """
        info = normalize_query_info(query, normalize_all=True)
        collected = self.collect(grants, info)
        attributes = reduce(union, collected) if collected else []

        permission = Permission(
            roles=info.role,  # type: ignore[arg-type]
            resource=info.resource,  # type: ignore[arg-type]
            action=info.action,  # type: ignore[arg-type]
            possession=info.possession,  # type: ignore[arg-type]
            attributes=attributes,
        )
        logger.debug("Resolved %r", permission)
        return permission
