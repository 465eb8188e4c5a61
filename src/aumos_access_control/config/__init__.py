"""Loading grants models from YAML or JSON files."""
from __future__ import annotations

from aumos_access_control.config.loader import GrantsConfig, GrantsLoader

__all__ = ["GrantsConfig", "GrantsLoader"]
