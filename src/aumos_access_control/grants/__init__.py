"""The grants model: storage, validation, role hierarchy and query resolution.

Example
-------
::

    from aumos_access_control.grants import GrantsStore, PermissionResolver

    store = GrantsStore()
    store.commit(
        {"role": "user", "resource": "video", "action": "read:any"},
        normalize_all=True,
    )
    permission = PermissionResolver().resolve(
        store.data,
        {"role": "user", "resource": "video", "action": "read", "possession": "own"},
    )
    assert permission.granted
"""
from __future__ import annotations

from aumos_access_control.grants.enums import EXTEND_KEY, RESERVED_KEYWORDS, Action, Possession
from aumos_access_control.grants.hierarchy import RoleHierarchyResolver
from aumos_access_control.grants.normalize import AccessInfo, QueryInfo
from aumos_access_control.grants.permission import Permission
from aumos_access_control.grants.resolver import PermissionResolver
from aumos_access_control.grants.store import GrantsStore
from aumos_access_control.grants.validator import GrantsValidator

__all__ = [
    # Enumerations
    "Action",
    "Possession",
    "EXTEND_KEY",
    "RESERVED_KEYWORDS",
    # Descriptions
    "AccessInfo",
    "QueryInfo",
    # Components
    "GrantsStore",
    "GrantsValidator",
    "RoleHierarchyResolver",
    "PermissionResolver",
    "Permission",
]
