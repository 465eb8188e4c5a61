"""Validation of whole grants models before they are installed.

Two input shapes are accepted.

Nested mapping::

    {
        "admin": {
            "$extend": ["user"],
            "video": {"create:any": ["*"], "delete:any": ["*"]},
        },
        "user": {"video": {"read:any": ["*", "!id"]}},
    }

Flat list of access descriptions::

    [
        {"role": "admin", "resource": "video", "action": "create:any"},
        {"role": "user", "resource": "video", "action": "read:own",
         "attributes": ["*", "!id"]},
    ]

Either way :meth:`GrantsValidator.inspect` returns a brand new nested mapping
with action keys normalised to ``"action:possession"`` and attribute lists
copied. The input is never kept or modified.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping

from aumos_access_control.errors import AccessControlError, ErrorKind
from aumos_access_control.grants.commit import commit_to_grants
from aumos_access_control.grants.enums import EXTEND_KEY
from aumos_access_control.grants.hierarchy import RoleHierarchyResolver
from aumos_access_control.grants.normalize import (
    AccessInfo,
    action_key,
    is_info_fulfilled,
    valid_name,
)

logger = logging.getLogger(__name__)

GrantsDict = dict[str, dict[str, object]]


class GrantsValidator:
    """Checks a grants model and returns a normalised, independent copy.

    Parameters
    ----------
    hierarchy:
        Resolver used to apply ``$extend`` entries. A fresh one is created
        when omitted.
    """

    def __init__(self, hierarchy: RoleHierarchyResolver | None = None) -> None:
        self._hierarchy = hierarchy or RoleHierarchyResolver()

    def inspect(self, grants: object) -> GrantsDict:
        """Validate *grants* and return the normalised nested mapping.

        Raises
        ------
        AccessControlError
            If the value is neither a mapping nor a list, or any role,
            resource, action, attribute list or inheritance edge is invalid.
        """
        if isinstance(grants, Mapping):
            result = self._inspect_mapping(grants)
        elif isinstance(grants, (list, tuple)):
            result = self._inspect_list(grants)
        else:
            raise AccessControlError(
                f"Invalid grants object: expected a mapping or a list, "
                f"got {type(grants).__name__}.",
                ErrorKind.INVALID_GRANTS,
            )
        logger.debug("Inspected grants for %d role(s)", len(result))
        return result

    # ------------------------------------------------------------------
    # Nested form
    # ------------------------------------------------------------------

    def _inspect_mapping(self, grants: Mapping[object, object]) -> GrantsDict:
        result: GrantsDict = {}
        pending: list[tuple[str, list[str]]] = []

        for role_name, role_def in grants.items():
            valid_name(role_name)
            if not isinstance(role_def, Mapping):
                raise AccessControlError(
                    f'Invalid definition for role "{role_name}": expected a mapping, '
                    f"got {type(role_def).__name__}."
                )
            entry: dict[str, object] = {}
            for key, value in role_def.items():
                if key == EXTEND_KEY:
                    extenders = self._inspect_extend(role_name, value)  # type: ignore[arg-type]
                    if extenders:
                        pending.append((role_name, extenders))  # type: ignore[arg-type]
                    continue
                valid_name(key)
                entry[key] = self.inspect_resource(role_name, key, value)  # type: ignore[arg-type]
            result[role_name] = entry  # type: ignore[index]

        # Edges are applied once every role exists so that declaration order
        # does not matter.
        for role_name, extenders in pending:
            self._hierarchy.extend(result, [role_name], extenders)
        return result

    @staticmethod
    def _inspect_extend(role_name: str, value: object) -> list[str]:
        # Grants data must spell inheritance as a list; delimited strings are
        # only accepted by the fluent API.
        if not isinstance(value, (list, tuple)):
            raise AccessControlError(
                f'Invalid "{EXTEND_KEY}" for role "{role_name}", expected a list: {value!r}',
                ErrorKind.INVALID_NAME,
            )
        for name in value:
            valid_name(name)
        return [name.strip() for name in value]

    def inspect_resource(
        self,
        role_name: str,
        resource: str,
        resource_def: object,
    ) -> dict[str, list[str]]:
        """Validate one resource definition and return it with normalised keys."""
        if not isinstance(resource_def, Mapping):
            raise AccessControlError(
                f'Invalid definition for resource "{resource}" of role "{role_name}": '
                f"expected a mapping, got {type(resource_def).__name__}."
            )
        normalised: dict[str, list[str]] = {}
        for key, attributes in resource_def.items():
            normalised[action_key(key)] = self._inspect_attributes(
                role_name, resource, key, attributes
            )
        return normalised

    @staticmethod
    def _inspect_attributes(
        role_name: str,
        resource: str,
        key: object,
        attributes: object,
    ) -> list[str]:
        if not isinstance(attributes, (list, tuple)) or not all(
            isinstance(a, str) and a.strip() != "" for a in attributes
        ):
            raise AccessControlError(
                f'Invalid attributes for "{key}" on resource "{resource}" of role '
                f'"{role_name}": {attributes!r}'
            )
        return [a.strip() for a in attributes]

    # ------------------------------------------------------------------
    # Flat form
    # ------------------------------------------------------------------

    @staticmethod
    def _inspect_list(items: list[object] | tuple[object, ...]) -> GrantsDict:
        result: GrantsDict = {}
        for index, item in enumerate(items):
            if not isinstance(item, (Mapping, AccessInfo)) or (
                isinstance(item, Mapping) and not item
            ):
                raise AccessControlError(f"Invalid grant item at index {index}: {item!r}")
            info = AccessInfo.from_mapping(item)  # type: ignore[arg-type]
            if not is_info_fulfilled(info):
                raise AccessControlError(
                    f"Invalid grant item at index {index}: role, resource and "
                    f"action are required."
                )
            commit_to_grants(result, info, normalize_all=True)
        return result
