"""The single error type raised by the access-control core.

Every violated invariant (bad grants shape, reserved names, unknown roles,
inheritance cycles, mutation after lock) surfaces as
:class:`AccessControlError`.  Callers distinguish failures by ``kind`` when
they need to; the message is always human readable.

Example
-------
>>> from aumos_access_control.errors import AccessControlError, ErrorKind
>>> err = AccessControlError('Role not found: "ghost"', ErrorKind.ROLE_NOT_FOUND)
>>> err.kind is ErrorKind.ROLE_NOT_FOUND
True
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Tag describing which invariant an :class:`AccessControlError` reports."""

    INVALID_GRANTS = "invalid_grants"
    INVALID_NAME = "invalid_name"
    INVALID_ACTION = "invalid_action"
    INVALID_POSSESSION = "invalid_possession"
    ROLE_NOT_FOUND = "role_not_found"
    SELF_EXTENSION = "self_extension"
    NON_EXISTENT_ROLE = "non_existent_role"
    CROSS_INHERITANCE = "cross_inheritance"
    LOCKED = "locked"
    INVALID_CONFIG = "invalid_config"


class AccessControlError(Exception):
    """Raised for every failure in the grants model and its queries.

    Attributes
    ----------
    message:
        Human-readable description of the failure.
    kind:
        The :class:`ErrorKind` tag. Defaults to ``INVALID_GRANTS``.
    """

    def __init__(
        self,
        message: str = "",
        kind: ErrorKind = ErrorKind.INVALID_GRANTS,
    ) -> None:
        self.message = message
        self.kind = kind
        super().__init__(message)


ERR_LOCK = "Cannot alter the underlying grants model. AccessControl instance is locked."


def is_access_control_error(obj: object) -> bool:
    """Return True if *obj* is an :class:`AccessControlError` instance."""
    return isinstance(obj, AccessControlError)
