"""Tests for the Access and Query builders."""
from __future__ import annotations

import pytest

from aumos_access_control.builders import Access, Query
from aumos_access_control.errors import AccessControlError
from aumos_access_control.grants.normalize import AccessInfo, QueryInfo
from aumos_access_control.grants.resolver import PermissionResolver
from aumos_access_control.grants.store import GrantsStore


@pytest.fixture()
def store() -> GrantsStore:
    return GrantsStore()


@pytest.fixture()
def resolver() -> PermissionResolver:
    return PermissionResolver()


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------


class TestAccess:
    def test_role_pre_created(self, store: GrantsStore) -> None:
        Access(store, "user")
        assert store.roles == ["user"]

    def test_omitted_role_creates_nothing(self, store: GrantsStore) -> None:
        access = Access(store)
        assert store.roles == []
        assert access.denied is False

    def test_denied_flag(self, store: GrantsStore) -> None:
        assert Access(store, "user", denied=True).denied is True

    def test_complete_info_committed(self, store: GrantsStore) -> None:
        Access(store, AccessInfo(role="user", resource="video", action="read:own"))
        assert store.as_dict() == {"user": {"video": {"read:own": ["*"]}}}

    def test_incomplete_info_waits_for_action(self, store: GrantsStore) -> None:
        access = Access(store, {"role": "user", "resource": "video"})
        assert store.as_dict() == {}
        access.delete_own()
        assert store.as_dict() == {"user": {"video": {"delete:own": ["*"]}}}

    def test_denied_info_overrides_mapping_flag(self, store: GrantsStore) -> None:
        Access(
            store,
            {"role": "user", "resource": "video", "action": "read", "denied": False},
            denied=True,
        )
        assert store.as_dict()["user"]["video"]["read:any"] == []  # type: ignore[index]

    def test_attributes_apply_to_next_action_only(self, store: GrantsStore) -> None:
        Access(store, "user").attributes(["title"]).read_any("video").update_any("video")
        video = store.as_dict()["user"]["video"]
        assert video["read:any"] == ["title"]  # type: ignore[index]
        assert video["update:any"] == ["*"]  # type: ignore[index]

    def test_explicit_attributes_win(self, store: GrantsStore) -> None:
        Access(store, "user").attributes(["title"]).read_any("video", ["id"])
        assert store.as_dict()["user"]["video"]["read:any"] == ["id"]  # type: ignore[index]

    def test_resource_validated(self, store: GrantsStore) -> None:
        access = Access(store, "user")
        for value in ("", [], ["video", ""], "$extend"):
            with pytest.raises(AccessControlError):
                access.resource(value)

    def test_chain_returns_new_builders(self, store: GrantsStore) -> None:
        first = Access(store, "user")
        second = first.deny("guest")
        assert second is not first
        assert second.denied is True
        assert isinstance(second.grant("admin"), Access)

    def test_extend_and_lock(self, store: GrantsStore) -> None:
        Access(store, "user").read_any("video").grant("admin").inherit("user").lock()
        assert store.is_locked
        assert store.as_dict()["admin"]["$extend"] == ("user",)  # type: ignore[index]

    @pytest.mark.parametrize("value", [None, 3, {}, object()])
    def test_invalid_argument(self, store: GrantsStore, value: object) -> None:
        with pytest.raises(AccessControlError):
            Access(store, value)

    def test_repr(self, store: GrantsStore) -> None:
        assert "Access(role='user'" in repr(Access(store, "user"))


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------


class TestQuery:
    @pytest.fixture()
    def loaded(self, store: GrantsStore) -> GrantsStore:
        store.set_grants(
            {
                "user": {"video": {"read:any": ["*", "!id"], "update:own": ["title"]}},
                "admin": {"$extend": ["user"], "video": {"delete:any": ["*"]}},
            }
        )
        return store

    def test_role_then_resource(self, loaded: GrantsStore, resolver: PermissionResolver) -> None:
        permission = Query(loaded, resolver).role("admin").resource("video").read_own()
        assert permission.attributes == ["*", "!id"]

    def test_resource_argument_does_not_stick(
        self, loaded: GrantsStore, resolver: PermissionResolver
    ) -> None:
        query = Query(loaded, resolver, "user")
        assert query.update_own("video").granted is True
        with pytest.raises(AccessControlError):
            query.update_own()

    def test_query_info_not_mutated(
        self, loaded: GrantsStore, resolver: PermissionResolver
    ) -> None:
        info = QueryInfo(role="admin", resource="video")
        Query(loaded, resolver, info).delete_any()
        assert info.action is None
        assert info.possession is None

    def test_mapping_info(self, loaded: GrantsStore, resolver: PermissionResolver) -> None:
        query = Query(loaded, resolver, {"role": ["user", "admin"], "resource": "video"})
        assert query.delete().granted is True
        assert query.create().granted is False

    @pytest.mark.parametrize("value", [None, 1, {}, object()])
    def test_invalid_argument(
        self, loaded: GrantsStore, resolver: PermissionResolver, value: object
    ) -> None:
        with pytest.raises(AccessControlError):
            Query(loaded, resolver, value)

    def test_missing_role_on_resolve(
        self, loaded: GrantsStore, resolver: PermissionResolver
    ) -> None:
        with pytest.raises(AccessControlError):
            Query(loaded, resolver).read_any("video")
