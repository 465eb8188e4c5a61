"""Action and possession enumerations plus reserved keywords."""
from __future__ import annotations

from enum import Enum


class Action(str, Enum):
    """CRUD actions a grant can cover."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class Possession(str, Enum):
    """Whether a grant applies to the subject's own instances or any instance."""

    OWN = "own"
    ANY = "any"


ACTIONS: tuple[str, ...] = tuple(a.value for a in Action)
POSSESSIONS: tuple[str, ...] = tuple(p.value for p in Possession)

# Key under a role holding the names of the roles it inherits from.
EXTEND_KEY = "$extend"

RESERVED_KEYWORDS: tuple[str, ...] = ("$", EXTEND_KEY)
