#!/usr/bin/env python3
"""Example: Attribute Filtering

Shows how attribute glob patterns select and remove fields of nested
documents, and how two pattern lists are merged.

Usage:
    python examples/03_attribute_filtering.py

Requirements:
    pip install aumos-access-control
"""
from __future__ import annotations

from aumos_access_control import AccessControl, filter_all, union


def main() -> None:
    company = {
        "name": "Company, LTD.",
        "address": {"city": "istanbul", "country": "TR"},
        "account": {"id": 33, "taxNo": 12345, "balance": {"credit": 100, "deposit": 0}},
    }

    # Step 1: Filter through a granted permission
    ac = AccessControl()
    ac.grant("clerk").read_any("company", ["*", "!account.balance.credit", "!account.id"])
    permission = ac.can("clerk").read_any("company")
    print(f"clerk sees: {permission.filter(company)}")

    # Step 2: Filter without a permission object
    patterns = ["address.*", "account.balance.*", "!account.balance.deposit"]
    print(f"static filter: {AccessControl.filter(company, patterns)}")

    # Step 3: Lists of documents are filtered item by item
    people = [{"id": 1, "name": "Ada", "salary": 10}, {"id": 2, "name": "Alan", "salary": 20}]
    print(f"list filter: {filter_all(people, ['*', '!salary'])}")

    # Step 4: Union of two pattern lists
    pairs = [
        (["*", "!id", "!pwd"], ["*"]),
        (["*", "!pwd", "title"], ["*", "!id", "!pwd"]),
        (["image", "name"], ["*", "!location"]),
    ]
    print("\nUnion:")
    for first, second in pairs:
        print(f"  {first} + {second} -> {union(first, second)}")


if __name__ == "__main__":
    main()
