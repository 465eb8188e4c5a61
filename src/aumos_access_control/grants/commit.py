"""Writing normalised access descriptions into a grants mapping."""
from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping

from aumos_access_control.errors import AccessControlError, ErrorKind
from aumos_access_control.grants.normalize import (
    AccessInfo,
    action_key,
    has_valid_names,
    is_filled_string_list,
    normalize_access_info,
    to_string_list,
)

logger = logging.getLogger(__name__)


def commit_to_grants(
    grants: MutableMapping[str, dict[str, object]],
    access: AccessInfo | Mapping[str, object],
    normalize_all: bool = True,
) -> None:
    """Store *access* for every (role, resource) pair it names.

    Each pair gets ``grants[role][resource]["action:possession"]`` set to a
    fresh copy of the normalised attributes, overwriting any previous value.
    The action key is validated and normalised even when *normalize_all* is
    off, so ``"READ:any"`` and ``"read"`` both land under ``"read:any"``.
    """
    info = normalize_access_info(access, normalize_all=normalize_all)
    key = action_key(info.action, info.possession)
    for role in info.role:  # type: ignore[union-attr]
        role_def = grants.setdefault(role, {})
        for resource in info.resource:  # type: ignore[union-attr]
            resource_def = role_def.setdefault(resource, {})
            resource_def[key] = list(info.attributes)  # type: ignore[arg-type]
    logger.debug(
        "Committed %s on %s for %s -> %s",
        key,
        info.resource,
        info.role,
        info.attributes,
    )


def pre_create_roles(
    grants: MutableMapping[str, dict[str, object]],
    roles: object,
) -> list[str]:
    """Create an empty entry for each named role that does not exist yet."""
    names = to_string_list(roles)
    if not names or not is_filled_string_list(names):
        raise AccessControlError(f"Invalid role(s): {roles!r}", ErrorKind.INVALID_NAME)
    has_valid_names(names)
    for name in names:
        grants.setdefault(name, {})
    return names
