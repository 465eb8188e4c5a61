"""GrantsStore: owner of the grants model and every mutation applied to it.

The store keeps the nested grants mapping, funnels every change through
validation, and enforces the lock. Once :meth:`GrantsStore.lock` succeeds the
model is frozen in place (mappings become read-only proxies, lists become
tuples) and every mutating method raises :class:`AccessControlError`.

Example
-------
::

    store = GrantsStore()
    store.commit({"role": "user", "resource": "video", "action": "read:any"})
    store.lock()
    store.reset()   # raises AccessControlError (locked)
"""
from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from types import MappingProxyType

from aumos_access_control.errors import ERR_LOCK, AccessControlError, ErrorKind
from aumos_access_control.grants.commit import commit_to_grants, pre_create_roles
from aumos_access_control.grants.enums import EXTEND_KEY
from aumos_access_control.grants.hierarchy import RoleHierarchyResolver
from aumos_access_control.grants.normalize import (
    AccessInfo,
    action_key,
    has_valid_names,
    is_filled_string_list,
    subtract_list,
    to_string_list,
    valid_name,
)
from aumos_access_control.grants.validator import GrantsValidator

logger = logging.getLogger(__name__)


def _deep_freeze(value: object) -> object:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _deep_freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_deep_freeze(v) for v in value)
    return value


def _names_or_raise(value: object, what: str) -> list[str]:
    names = to_string_list(value)
    if not names or not is_filled_string_list(names):
        raise AccessControlError(f"Invalid {what}(s): {value!r}", ErrorKind.INVALID_NAME)
    has_valid_names(names)
    return names


class GrantsStore:
    """Holds one grants model and applies validated changes to it.

    Parameters
    ----------
    hierarchy:
        Role hierarchy resolver shared with the validator.
    """

    def __init__(self, hierarchy: RoleHierarchyResolver | None = None) -> None:
        self._hierarchy = hierarchy or RoleHierarchyResolver()
        self._validator = GrantsValidator(self._hierarchy)
        self._grants: dict[str, dict[str, object]] = {}
        self._locked = False

    # ------------------------------------------------------------------
    # Lock
    # ------------------------------------------------------------------

    @property
    def is_locked(self) -> bool:
        return self._locked

    def _assert_unlocked(self) -> None:
        if self._locked:
            raise AccessControlError(ERR_LOCK, ErrorKind.LOCKED)

    def lock(self) -> None:
        """Freeze the model. Locking an already locked store does nothing.

        Raises
        ------
        AccessControlError
            If the model is empty.
        """
        if self._locked:
            return
        if not self._grants:
            raise AccessControlError(
                "Cannot lock empty or invalid grants model.", ErrorKind.INVALID_GRANTS
            )
        self._grants = _deep_freeze(self._grants)  # type: ignore[assignment]
        self._locked = True
        logger.info("Grants model locked (%d roles)", len(self._grants))

    # ------------------------------------------------------------------
    # Whole-model operations
    # ------------------------------------------------------------------

    @property
    def data(self) -> Mapping[str, Mapping[str, object]]:
        """The live grants mapping. Callers must treat it as read-only."""
        return self._grants

    def as_dict(self) -> Mapping[str, Mapping[str, object]]:
        """Return a deep copy of the model, or the frozen model once locked."""
        if self._locked:
            return self._grants
        return copy.deepcopy(self._grants)

    def set_grants(self, grants: object) -> None:
        """Validate *grants* and replace the whole model with it."""
        self._assert_unlocked()
        self._grants = self._validator.inspect(grants)
        logger.info("Grants model set (%d roles)", len(self._grants))

    def reset(self) -> None:
        self._assert_unlocked()
        self._grants = {}
        logger.info("Grants model reset")

    # ------------------------------------------------------------------
    # Incremental changes
    # ------------------------------------------------------------------

    def commit(
        self,
        access: AccessInfo | Mapping[str, object],
        normalize_all: bool = True,
    ) -> None:
        """Store a grant or deny. Nothing changes when validation fails."""
        self._assert_unlocked()
        commit_to_grants(self._grants, access, normalize_all=normalize_all)

    def pre_create_roles(self, roles: object) -> list[str]:
        """Ensure the named roles exist, creating empty ones as needed."""
        self._assert_unlocked()
        return pre_create_roles(self._grants, roles)

    def extend(self, roles: object, extender_roles: object) -> None:
        """Make *roles* inherit from *extender_roles* (see :class:`RoleHierarchyResolver`)."""
        self._assert_unlocked()
        self._hierarchy.extend(self._grants, roles, extender_roles)

    def remove_permission(
        self,
        resources: object,
        roles: object = None,
        action_possession: str | None = None,
    ) -> None:
        """Remove resource definitions, or a single action of them.

        Parameters
        ----------
        resources:
            Resource name(s) to remove.
        roles:
            Restrict removal to these role(s). ``None`` means every role.
        action_possession:
            When given (``"create"``, ``"read:own"`` ...), only that action key
            is removed; otherwise the whole resource definition goes.
        """
        self._assert_unlocked()
        resource_names = _names_or_raise(resources, "resource")
        role_names = list(self._grants) if roles is None else _names_or_raise(roles, "role")
        key = action_key(action_possession) if action_possession is not None else None

        for role_name in role_names:
            role_def = self._grants.get(role_name)
            if role_def is None:
                continue
            for resource in resource_names:
                resource_def = role_def.get(resource)
                if not isinstance(resource_def, dict):
                    continue
                if key is None:
                    del role_def[resource]
                else:
                    resource_def.pop(key, None)
        logger.debug("Removed %s from %s for %s", key or "all actions", resource_names, role_names)

    def remove_roles(self, roles: object) -> None:
        """Delete the named roles and strip them from every ``$extend`` list.

        Every name is checked before anything is removed.
        """
        self._assert_unlocked()
        names = to_string_list(roles)
        if not names or not is_filled_string_list(names):
            raise AccessControlError(f"Invalid role(s): {roles!r}", ErrorKind.INVALID_NAME)
        for name in names:
            valid_name(name)
            if name not in self._grants:
                raise AccessControlError(
                    f'Cannot remove a non-existing role: "{name}"', ErrorKind.ROLE_NOT_FOUND
                )

        for name in names:
            self._grants.pop(name, None)
        for role_def in self._grants.values():
            extenders = role_def.get(EXTEND_KEY)
            if not extenders:
                continue
            remaining = subtract_list(list(extenders), names)  # type: ignore[arg-type]
            if remaining:
                role_def[EXTEND_KEY] = remaining
            else:
                del role_def[EXTEND_KEY]
        logger.debug("Removed roles %s", names)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def roles(self) -> list[str]:
        return list(self._grants)

    @property
    def resources(self) -> list[str]:
        """Every resource name defined under any role, in first-seen order."""
        names: list[str] = []
        for role_def in self._grants.values():
            for key in role_def:
                if key != EXTEND_KEY and key not in names:
                    names.append(key)
        return names

    def has_role(self, role: object) -> bool:
        """Return True if the role exists, or for a list, if all of them exist."""
        if isinstance(role, str):
            return role in self._grants
        if isinstance(role, (list, tuple)) and role:
            return all(isinstance(r, str) and r in self._grants for r in role)
        return False

    def has_resource(self, resource: object) -> bool:
        """Return True if the resource exists, or for a list, if all of them exist."""
        known = self.resources
        if isinstance(resource, str):
            return resource != EXTEND_KEY and resource in known
        if isinstance(resource, (list, tuple)) and resource:
            return all(isinstance(r, str) and r in known for r in resource)
        return False
