"""Role inheritance: flattening, cycle detection and extension.

Inheritance is stored inside the grants mapping itself, under the reserved
``"$extend"`` key of each role::

    {"admin": {"$extend": ["user"], "video": {...}}, "user": {...}}

A role's hierarchy is the role itself followed by every role it inherits
from, collected depth-first in declaration order without duplicates.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping

from aumos_access_control.errors import AccessControlError, ErrorKind
from aumos_access_control.grants.enums import EXTEND_KEY
from aumos_access_control.grants.normalize import (
    is_filled_string_list,
    to_string_list,
    uniq_concat,
    valid_name,
)

logger = logging.getLogger(__name__)

GrantsMapping = Mapping[str, Mapping[str, object]]


class RoleHierarchyResolver:
    """Walks and extends the ``$extend`` graph of a grants mapping.

    The resolver is stateless; every method takes the grants mapping to work
    on, so a single instance can serve both the live and the locked model.

    Example
    -------
    ::

        resolver = RoleHierarchyResolver()
        grants = {"admin": {"$extend": ["user"]}, "user": {}}
        resolver.flatten(grants, "admin")   # ["admin", "user"]
    """

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def flatten(self, grants: GrantsMapping, role_name: str) -> list[str]:
        """Return *role_name* followed by every role it inherits from.

        Raises
        ------
        AccessControlError
            ``ROLE_NOT_FOUND`` if a role in the chain is undefined,
            ``SELF_EXTENSION`` if a role lists itself, and
            ``CROSS_INHERITANCE`` if the chain loops back on itself.
        """
        if not isinstance(role_name, str) or role_name not in grants:
            raise AccessControlError(
                f'Role not found: "{role_name}"', ErrorKind.ROLE_NOT_FOUND
            )
        return self._walk(grants, role_name, (role_name,), {})

    def _walk(
        self,
        grants: GrantsMapping,
        role_name: str,
        path: tuple[str, ...],
        done: dict[str, list[str]],
    ) -> list[str]:
        if role_name in done:
            return done[role_name]

        result = [role_name]
        for parent in grants[role_name].get(EXTEND_KEY) or ():
            if parent not in grants:
                raise AccessControlError(
                    f'Role not found: "{parent}"', ErrorKind.ROLE_NOT_FOUND
                )
            if parent == role_name:
                raise AccessControlError(
                    f'Cannot extend role "{role_name}" by itself.', ErrorKind.SELF_EXTENSION
                )
            if parent in path:
                raise AccessControlError(
                    f'Cross inheritance is not allowed. Role "{parent}" already '
                    f'extends "{role_name}".',
                    ErrorKind.CROSS_INHERITANCE,
                )
            result = uniq_concat(result, self._walk(grants, parent, path + (parent,), done))

        done[role_name] = result
        return result

    def flatten_all(self, grants: GrantsMapping, roles: object) -> list[str]:
        """Return the input roles followed by the union of their hierarchies."""
        names = to_string_list(roles)
        if not names or not is_filled_string_list(names):
            raise AccessControlError(f"Invalid role(s): {roles!r}", ErrorKind.INVALID_NAME)

        flat = uniq_concat([], names)
        for name in names:
            flat = uniq_concat(flat, self.flatten(grants, name))
        return flat

    def inherited_roles_of(self, grants: GrantsMapping, role_name: str) -> list[str]:
        """Return the roles *role_name* inherits from, excluding itself."""
        return [r for r in self.flatten(grants, role_name) if r != role_name]

    def cross_extending_role(
        self,
        grants: GrantsMapping,
        role_name: str,
        extender_roles: list[str],
    ) -> str | None:
        """Return the first extender that already inherits from *role_name*."""
        for extender in extender_roles:
            if extender == role_name:
                continue
            if role_name in self.flatten(grants, extender):
                return extender
        return None

    @staticmethod
    def non_existent_roles(grants: GrantsMapping, roles: list[str]) -> list[str]:
        return [r for r in roles if r not in grants]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def extend(
        self,
        grants: MutableMapping[str, dict[str, object]],
        roles: object,
        extender_roles: object,
    ) -> None:
        """Make every role in *roles* inherit from every role in *extender_roles*.

        Target roles that do not exist yet are created. Every check runs
        before *grants* is touched, so a failed call leaves it unchanged.
        An empty extender list is a no-op.

        Raises
        ------
        AccessControlError
            If an extender does not exist, a role would extend itself, or the
            new edge would close an inheritance cycle.
        """
        targets = to_string_list(roles)
        if not targets or not is_filled_string_list(targets):
            raise AccessControlError(f"Invalid role(s): {roles!r}", ErrorKind.INVALID_NAME)
        if isinstance(extender_roles, (list, tuple)) and len(extender_roles) == 0:
            return

        extenders = to_string_list(extender_roles)
        if not extenders or not is_filled_string_list(extenders):
            raise AccessControlError(
                f"Invalid extender role(s): {extender_roles!r}", ErrorKind.INVALID_NAME
            )

        missing = self.non_existent_roles(grants, extenders)
        if missing:
            raise AccessControlError(
                f'Cannot extend with non-existent role(s): "{", ".join(missing)}"',
                ErrorKind.NON_EXISTENT_ROLE,
            )

        for role_name in targets:
            valid_name(role_name)
            if role_name in extenders:
                raise AccessControlError(
                    f'Cannot extend role "{role_name}" by itself.', ErrorKind.SELF_EXTENSION
                )
            cross = self.cross_extending_role(grants, role_name, extenders)
            if cross is not None:
                raise AccessControlError(
                    f'Cross inheritance is not allowed. Role "{cross}" already '
                    f'extends "{role_name}".',
                    ErrorKind.CROSS_INHERITANCE,
                )

        for role_name in targets:
            entry = grants.setdefault(role_name, {})
            current = list(entry.get(EXTEND_KEY) or [])
            entry[EXTEND_KEY] = uniq_concat(current, extenders)
            logger.debug("Role %r now extends %s", role_name, entry[EXTEND_KEY])
