"""Tests for GrantsStore mutations, reads and locking."""
from __future__ import annotations

import pytest

from aumos_access_control.errors import AccessControlError, ErrorKind
from aumos_access_control.grants.store import GrantsStore


@pytest.fixture()
def store() -> GrantsStore:
    store = GrantsStore()
    store.set_grants(
        {
            "user": {
                "video": {"read:any": ["*"], "create:own": ["*"]},
                "photo": {"read:any": ["*"]},
            },
            "editor": {"$extend": ["user"], "video": {"update:any": ["*"]}},
            "admin": {"$extend": ["editor", "user"], "video": {"delete:any": ["*"]}},
        }
    )
    return store


class TestCommit:
    def test_cartesian_product(self) -> None:
        store = GrantsStore()
        store.commit(
            {"role": ["a", "b"], "resource": "x, y", "action": "read:own"},
            normalize_all=True,
        )
        expected = {"x": {"read:own": ["*"]}, "y": {"read:own": ["*"]}}
        assert store.as_dict() == {"a": expected, "b": expected}

    def test_overwrites_previous_value(self, store: GrantsStore) -> None:
        store.commit(
            {"role": "user", "resource": "video", "action": "read", "attributes": ["title"]},
            normalize_all=True,
        )
        assert store.as_dict()["user"]["video"]["read:any"] == ["title"]  # type: ignore[index]

    def test_denied(self, store: GrantsStore) -> None:
        store.commit(
            {"role": "user", "resource": "video", "action": "read", "denied": True},
            normalize_all=True,
        )
        assert store.as_dict()["user"]["video"]["read:any"] == []  # type: ignore[index]

    def test_invalid_commit_changes_nothing(self, store: GrantsStore) -> None:
        before = store.as_dict()
        with pytest.raises(AccessControlError):
            store.commit({"role": "newbie", "resource": "video", "action": "fly"}, True)
        assert store.as_dict() == before

    def test_default_flag_normalises_action_key(self) -> None:
        store = GrantsStore()
        store.commit({"role": "user", "resource": "video", "action": "read:any"})
        store.commit({"role": "user", "resource": "video", "action": "UPDATE"})
        assert store.as_dict() == {
            "user": {"video": {"read:any": ["*"], "update:any": ["*"]}}
        }

    def test_default_flag_rejects_unknown_action(self, store: GrantsStore) -> None:
        before = store.as_dict()
        with pytest.raises(AccessControlError):
            store.commit({"role": "user", "resource": "video", "action": "fly"})
        assert store.as_dict() == before

    def test_pre_create_roles(self) -> None:
        store = GrantsStore()
        assert store.pre_create_roles("a; b") == ["a", "b"]
        assert store.roles == ["a", "b"]

    @pytest.mark.parametrize("roles", [[], "", None, ["a", ""], "$"])
    def test_pre_create_invalid(self, roles: object) -> None:
        with pytest.raises(AccessControlError):
            GrantsStore().pre_create_roles(roles)


class TestRemovePermission:
    def test_single_action(self, store: GrantsStore) -> None:
        store.remove_permission("video", "user", "create")
        store.remove_permission("video", "user", "create:own")
        assert store.as_dict()["user"]["video"] == {"read:any": ["*"]}

    def test_whole_resource_every_role(self, store: GrantsStore) -> None:
        store.remove_permission("video")
        assert store.resources == ["photo"]
        assert store.as_dict()["editor"] == {"$extend": ["user"]}

    def test_restricted_to_roles(self, store: GrantsStore) -> None:
        store.remove_permission(["video", "photo"], ["user"])
        assert store.as_dict()["user"] == {}
        assert "video" in store.as_dict()["admin"]

    @pytest.mark.parametrize("resources", [[], "", ["video", " "], "$extend"])
    def test_invalid_resources(self, store: GrantsStore, resources: object) -> None:
        with pytest.raises(AccessControlError):
            store.remove_permission(resources)

    def test_invalid_roles(self, store: GrantsStore) -> None:
        with pytest.raises(AccessControlError):
            store.remove_permission("video", [])


class TestRemoveRoles:
    def test_detaches_from_extend_lists(self, store: GrantsStore) -> None:
        store.remove_roles("user")
        grants = store.as_dict()
        assert "user" not in grants
        assert "$extend" not in grants["editor"]
        assert grants["admin"]["$extend"] == ["editor"]

    def test_non_existing_role_removes_nothing(self, store: GrantsStore) -> None:
        with pytest.raises(AccessControlError, match="non-existing") as exc_info:
            store.remove_roles(["user", "ghost"])
        assert exc_info.value.kind is ErrorKind.ROLE_NOT_FOUND
        assert store.has_role("user")

    @pytest.mark.parametrize("roles", [[], "", ["user", " "]])
    def test_invalid_input(self, store: GrantsStore, roles: object) -> None:
        with pytest.raises(AccessControlError):
            store.remove_roles(roles)


class TestReads:
    def test_roles_in_insertion_order(self, store: GrantsStore) -> None:
        assert store.roles == ["user", "editor", "admin"]

    def test_resources_skip_extend(self, store: GrantsStore) -> None:
        assert store.resources == ["video", "photo"]

    def test_has_role(self, store: GrantsStore) -> None:
        assert store.has_role("user") is True
        assert store.has_role(["user", "admin"]) is True
        assert store.has_role(["user", "ghost"]) is False
        assert store.has_role([]) is False
        assert store.has_role(None) is False

    def test_has_resource(self, store: GrantsStore) -> None:
        assert store.has_resource("photo") is True
        assert store.has_resource(["video", "photo"]) is True
        assert store.has_resource(["video", "music"]) is False
        assert store.has_resource("$extend") is False

    def test_as_dict_is_a_copy(self, store: GrantsStore) -> None:
        copy = store.as_dict()
        copy["user"]["video"]["read:any"].append("!id")  # type: ignore[index, union-attr]
        assert store.as_dict()["user"]["video"]["read:any"] == ["*"]  # type: ignore[index]


class TestLock:
    def test_lock_freezes(self, store: GrantsStore) -> None:
        store.lock()
        assert store.is_locked is True
        frozen = store.as_dict()
        with pytest.raises(TypeError):
            frozen["hacker"] = {}  # type: ignore[index]
        with pytest.raises(TypeError):
            frozen["user"]["video"]["read:any"][0] = "!*"  # type: ignore[index]
        assert frozen["user"]["video"]["read:any"] == ("*",)  # type: ignore[index]

    @pytest.mark.parametrize(
        "mutation",
        [
            lambda s: s.reset(),
            lambda s: s.set_grants({}),
            lambda s: s.commit({"role": "x", "resource": "y", "action": "read"}, True),
            lambda s: s.pre_create_roles("x"),
            lambda s: s.extend("x", "user"),
            lambda s: s.remove_roles("user"),
            lambda s: s.remove_permission("video"),
        ],
    )
    def test_mutations_rejected_after_lock(self, store: GrantsStore, mutation) -> None:
        store.lock()
        with pytest.raises(AccessControlError, match="locked") as exc_info:
            mutation(store)
        assert exc_info.value.kind is ErrorKind.LOCKED

    def test_lock_empty_rejected(self) -> None:
        with pytest.raises(AccessControlError, match="empty or invalid"):
            GrantsStore().lock()

    def test_lock_is_idempotent(self, store: GrantsStore) -> None:
        store.lock()
        store.lock()
        assert store.is_locked

    def test_reads_work_after_lock(self, store: GrantsStore) -> None:
        store.lock()
        assert store.roles == ["user", "editor", "admin"]
        assert store.has_resource("video")
