"""Fluent builders over the grants store: Access for mutation, Query for checks."""
from __future__ import annotations

from aumos_access_control.builders.access import Access
from aumos_access_control.builders.query import Query

__all__ = ["Access", "Query"]
