import pytest
from app.core.exceptions import ConflictException
from app.models.records import GroupRecord
from tests.conftest import ACME, GLOBEX, HOME, make_group, make_role, make_user


class TestScopedLookups:
    """Tests for partition-aware reads (run against every backend)"""

    def test_put_assigns_version_and_scope(self, stores):
        group = make_group(stores, "Admins", ACME)

        assert group.version == 1
        assert group.scope == ACME
        assert group.created_at is not None

    def test_get_by_id_ignores_scope(self, stores):
        group = make_group(stores, "Admins", ACME)

        found = stores.groups.get_by_id(group.id)

        assert found is not None
        assert found.scope == ACME

    def test_get_by_id_in_scope_filters(self, stores):
        group = make_group(stores, "Admins", ACME)

        assert stores.groups.get_by_id_in_scope(ACME, group.id) is not None
        assert stores.groups.get_by_id_in_scope(HOME, group.id) is None
        assert stores.groups.get_by_id_in_scope(GLOBEX, group.id) is None

    def test_find_by_name_is_case_sensitive(self, stores):
        make_group(stores, "Admins", ACME)

        assert stores.groups.find_by_name_in_scope(ACME, "Admins") is not None
        assert stores.groups.find_by_name_in_scope(ACME, "admins") is None
        assert stores.groups.find_by_name_in_scope(HOME, "Admins") is None

    def test_users_found_by_email(self, stores):
        user = make_user(stores, ACME, email="ops@acme.io")

        found = stores.users.find_by_name_in_scope(ACME, "ops@acme.io")

        assert found.id == user.id

    def test_list_in_scope(self, stores):
        make_group(stores, "Admins", HOME)
        make_group(stores, "Admins", ACME)
        make_group(stores, "Developers", ACME)

        names = sorted(g.name for g in stores.groups.list_in_scope(ACME))

        assert names == ["Admins", "Developers"]
        assert len(stores.groups.list_in_scope(HOME)) == 1

    def test_delete_only_in_scope(self, stores):
        role = make_role(stores, "Viewer", ACME)

        stores.roles.delete(HOME, role.id)
        assert stores.roles.get_by_id(role.id) is not None

        stores.roles.delete(ACME, role.id)
        assert stores.roles.get_by_id(role.id) is None

    def test_role_scope_config_round_trips(self, stores):
        role = make_role(stores, "Viewer", HOME)

        assert stores.roles.get_by_id(role.id).scope_config == {"pipelines": [{"resource": "build"}]}


class TestOptimisticConcurrency:
    """Tests for version checks on put"""

    def test_update_increments_version(self, stores):
        group = make_group(stores, "Admins", ACME)

        group.description = "Account administrators"
        updated = stores.groups.put(ACME, group)

        assert updated.version == 2
        assert stores.groups.get_by_id(group.id).description == "Account administrators"

    def test_stale_write_rejected(self, stores):
        user = make_user(stores, ACME)
        first = stores.users.get_by_id(user.id)
        second = stores.users.get_by_id(user.id)

        first.assigned_groups = ["g-1"]
        stores.users.put(ACME, first)

        second.assigned_groups = ["g-2"]
        with pytest.raises(ConflictException):
            stores.users.put(ACME, second)

        assert stores.users.get_by_id(user.id).assigned_groups == ["g-1"]

    def test_write_to_deleted_record_rejected(self, stores):
        group = make_group(stores, "Admins", ACME)
        stores.groups.delete(ACME, group.id)

        with pytest.raises(ConflictException):
            stores.groups.put(ACME, group)

    def test_duplicate_group_name_in_scope_rejected(self, stores):
        make_group(stores, "Admins", ACME)

        with pytest.raises(ConflictException):
            stores.groups.put(ACME, GroupRecord(name="Admins"))

    def test_same_group_name_allowed_across_scopes(self, stores):
        home = make_group(stores, "Admins", HOME)
        acme = make_group(stores, "Admins", ACME)

        assert home.id != acme.id

    def test_returned_records_are_detached(self, stores):
        group = make_group(stores, "Admins", ACME, assigned_roles=["r-1"])

        copy = stores.groups.get_by_id(group.id)
        copy.assigned_roles.append("r-2")

        assert stores.groups.get_by_id(group.id).assigned_roles == ["r-1"]
