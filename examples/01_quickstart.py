#!/usr/bin/env python3
"""Example: Quickstart for aumos-access-control

Minimal working example: grant permissions to two roles, check them,
and filter a document down to the permitted attributes.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install aumos-access-control
"""
from __future__ import annotations

import aumos_access_control as acl


def main() -> None:
    print(f"aumos-access-control version: {acl.__version__}")

    # Step 1: Define grants with the fluent builder
    ac = acl.AccessControl()
    ac.grant("user") \
        .create_own("video") \
        .delete_own("video") \
        .read_any("video", ["*", "!views"])
    ac.grant("admin") \
        .extend("user") \
        .update_any("video", ["title"]) \
        .delete_any("video")
    print(f"Roles: {ac.get_roles()}  Resources: {ac.get_resources()}")

    # Step 2: Check permissions
    checks = [
        ("user", "read:any"),
        ("user", "update:any"),
        ("admin", "update:any"),
        ("admin", "create:own"),
    ]
    print("\nPermission checks:")
    for role, action in checks:
        permission = ac.permission({"role": role, "resource": "video", "action": action})
        icon = "ALLOW" if permission.granted else "DENY"
        print(f"  [{icon}] {role:<6} {action:<11} attributes={permission.attributes}")

    # Step 3: Filter a document
    video = {"id": 42, "title": "Intro", "views": 1_000, "owner": "alice"}
    permission = ac.can("user").read_any("video")
    print(f"\nUser sees: {permission.filter(video)}")


if __name__ == "__main__":
    main()
