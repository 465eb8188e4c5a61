"""aumos-access-control: role and attribute based access control for Python applications.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import aumos_access_control as acl
>>> acl.__version__
'0.1.0'
>>> ac = acl.AccessControl()
>>> _ = ac.grant("user").read_any("video", ["*", "!id"])
>>> permission = ac.can("user").read_own("video")
>>> permission.granted
True
>>> permission.filter({"id": 7, "title": "Intro"})
{'title': 'Intro'}
"""
from __future__ import annotations

__version__: str = "0.1.0"

from aumos_access_control.access_control import AccessControl

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from aumos_access_control.errors import AccessControlError, ErrorKind, is_access_control_error

# ---------------------------------------------------------------------------
# Grants model
# ---------------------------------------------------------------------------
from aumos_access_control.grants.enums import Action, Possession
from aumos_access_control.grants.normalize import AccessInfo, QueryInfo
from aumos_access_control.grants.permission import Permission
from aumos_access_control.grants.store import GrantsStore
from aumos_access_control.grants.validator import GrantsValidator
from aumos_access_control.grants.hierarchy import RoleHierarchyResolver
from aumos_access_control.grants.resolver import PermissionResolver

# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
from aumos_access_control.builders.access import Access
from aumos_access_control.builders.query import Query

# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------
from aumos_access_control.attributes.glob import (
    AttributeGlob,
    filter_all,
    filter_attributes,
    is_granted,
    matches,
    union,
)

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
from aumos_access_control.config.loader import GrantsConfig, GrantsLoader

__all__ = [
    "__version__",
    # Facade
    "AccessControl",
    # Errors
    "AccessControlError",
    "ErrorKind",
    "is_access_control_error",
    # Grants model
    "Action",
    "Possession",
    "AccessInfo",
    "QueryInfo",
    "Permission",
    "GrantsStore",
    "GrantsValidator",
    "RoleHierarchyResolver",
    "PermissionResolver",
    # Builders
    "Access",
    "Query",
    # Attributes
    "AttributeGlob",
    "filter_all",
    "filter_attributes",
    "is_granted",
    "matches",
    "union",
    # Config
    "GrantsConfig",
    "GrantsLoader",
]
