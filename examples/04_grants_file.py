#!/usr/bin/env python3
"""Example: Grants File

Loads a locked AccessControl from a YAML grants file and shows that the
model can be queried but no longer changed.

Usage:
    python examples/04_grants_file.py

Requirements:
    pip install aumos-access-control
"""
from __future__ import annotations

from pathlib import Path

from aumos_access_control import AccessControlError, GrantsLoader

_GRANTS_FILE = Path(__file__).parent / "grants.yaml"


def main() -> None:
    # Step 1: Load and validate the file
    ac = GrantsLoader(strict=True).load(_GRANTS_FILE)
    print(f"Loaded {len(ac.get_roles())} roles from {_GRANTS_FILE.name} (locked={ac.is_locked})")

    # Step 2: Query
    for role in ac.get_roles():
        permission = ac.can(role).update_own("article")
        print(f"  {role:<7} update:own article -> {permission.attributes}")

    # Step 3: Mutations are refused once locked
    try:
        ac.grant("intruder").delete_any("article")
    except AccessControlError as exc:
        print(f"\nRefused: [{exc.kind.value}] {exc.message}")


if __name__ == "__main__":
    main()
