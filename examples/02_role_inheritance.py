#!/usr/bin/env python3
"""Example: Role Inheritance

Demonstrates multi-level role hierarchies, attribute union across inherited
roles, and the errors raised for self and cross inheritance.

Usage:
    python examples/02_role_inheritance.py

Requirements:
    pip install aumos-access-control
"""
from __future__ import annotations

import aumos_access_control as acl
from aumos_access_control import AccessControl, AccessControlError


def main() -> None:
    print(f"aumos-access-control version: {acl.__version__}")

    # Step 1: Build a hierarchy from the nested grants form
    ac = AccessControl({
        "viewer": {"devices": {"read:any": ["*", "!serial", "!location"]}},
        "operator": {
            "$extend": ["viewer"],
            "devices": {"read:any": ["*", "!serial"], "update:any": ["status"]},
        },
        "admin": {"$extend": ["operator"], "devices": {"delete:any": ["*"]}},
    })

    for role in ac.get_roles():
        print(f"  {role:<9} inherits {ac.get_inherited_roles_of(role)}")

    # Step 2: Inherited attribute lists are merged
    permission = ac.can("admin").read_any("devices")
    print(f"\nadmin read:any devices -> {permission.attributes}")

    # Step 3: Extend an existing role after the fact
    ac.grant("auditor").read_any("logs")
    ac.extend_role("admin", "auditor")
    print(f"admin can read logs: {ac.can('admin').read_any('logs').granted}")

    # Step 4: Invalid hierarchies are rejected
    for role, parent in [("viewer", "admin"), ("viewer", "viewer")]:
        try:
            ac.extend_role(role, parent)
        except AccessControlError as exc:
            print(f"  rejected {role} -> {parent}: [{exc.kind.value}] {exc.message}")

    # Step 5: Removing a role detaches it from its children
    ac.remove_roles("auditor")
    print(f"\nadmin inherits after removal: {ac.get_inherited_roles_of('admin')}")


if __name__ == "__main__":
    main()
