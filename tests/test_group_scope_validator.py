from app.models.assignment import Substitution, WarningCode
from app.services.group_scope_validator import GroupScopeValidator
from tests.conftest import ACME, GLOBEX, HOME, make_group


class TestGroupScopeValidator:
    """Tests for reconciling group references against a target partition"""

    def test_same_scope_accepted(self, stores):
        group = make_group(stores, "Admins", HOME)

        result = GroupScopeValidator(stores.groups).validate([group.id], HOME)

        assert result.valid_ids == [group.id]
        assert result.warnings == []
        assert result.substitutions == []

    def test_unknown_id_is_dangling(self, stores):
        result = GroupScopeValidator(stores.groups).validate(["missing"], ACME)

        assert result.valid_ids == []
        assert [w.code for w in result.warnings] == [WarningCode.DANGLING_REFERENCE]
        assert result.warnings[0].group_id == "missing"

    def test_home_group_substituted_by_name(self, stores):
        home = make_group(stores, "Admins", HOME)
        acme = make_group(stores, "Admins", ACME)

        result = GroupScopeValidator(stores.groups).validate([home.id], ACME)

        assert result.valid_ids == [acme.id]
        assert result.substitutions == [Substitution(original=home.id, replacement=acme.id, name="Admins")]
        assert result.warnings == []

    def test_substitution_name_match_is_case_sensitive(self, stores):
        home = make_group(stores, "Admins", HOME)
        make_group(stores, "admins", ACME)

        result = GroupScopeValidator(stores.groups).validate([home.id], ACME)

        assert result.valid_ids == []
        assert [w.code for w in result.warnings] == [WarningCode.SCOPE_MISMATCH_NO_ALTERNATIVE]

    def test_home_group_without_alternative_dropped(self, stores):
        home = make_group(stores, "Admins", HOME)

        result = GroupScopeValidator(stores.groups).validate([home.id], ACME)

        assert result.valid_ids == []
        assert str(result.warnings[0]).startswith("scope-mismatch-no-alternative")

    def test_cross_account_never_substituted(self, stores):
        """A same-named group in the target account does not rescue a foreign account's group"""
        globex = make_group(stores, "Admins", GLOBEX)
        make_group(stores, "Admins", ACME)

        result = GroupScopeValidator(stores.groups).validate([globex.id], ACME)

        assert result.valid_ids == []
        assert result.substitutions == []
        assert [w.code for w in result.warnings] == [WarningCode.CROSS_ACCOUNT_REFERENCE]

    def test_account_group_never_substituted_into_home(self, stores):
        """Substitution only runs from Home towards an account"""
        acme = make_group(stores, "Admins", ACME)
        make_group(stores, "Admins", HOME)

        result = GroupScopeValidator(stores.groups).validate([acme.id], HOME)

        assert result.valid_ids == []
        assert result.substitutions == []
        assert len(result.warnings) == 1

    def test_enterprise_qualified_scope_is_distinct(self, stores):
        from app.models.scope import Scope

        enterprise_scope = Scope.account("acc-1", "Acme", "ent-1", "Acme Holdings")
        group = make_group(stores, "Admins", ACME)

        result = GroupScopeValidator(stores.groups).validate([group.id], enterprise_scope)

        assert result.valid_ids == []
        assert result.warnings[0].code == WarningCode.CROSS_ACCOUNT_REFERENCE

    def test_duplicates_collapse_in_first_seen_order(self, stores):
        a = make_group(stores, "A", ACME)
        b = make_group(stores, "B", ACME)

        result = GroupScopeValidator(stores.groups).validate([b.id, a.id, b.id, a.id], ACME)

        assert result.valid_ids == [b.id, a.id]
        assert result.duplicates_removed == 2
        assert result.warnings == []

    def test_substitution_collapses_with_direct_reference(self, stores):
        home = make_group(stores, "Admins", HOME)
        acme = make_group(stores, "Admins", ACME)

        result = GroupScopeValidator(stores.groups).validate([acme.id, home.id], ACME)

        assert result.valid_ids == [acme.id]
        assert result.duplicates_removed == 1
        assert len(result.substitutions) == 1

    def test_mixed_request_keeps_input_order(self, stores):
        home_admins = make_group(stores, "Admins", HOME)
        home_devs = make_group(stores, "Developers", HOME)
        acme_admins = make_group(stores, "Admins", ACME)
        acme_devs = make_group(stores, "Developers", ACME)
        globex = make_group(stores, "Ops", GLOBEX)

        result = GroupScopeValidator(stores.groups).validate(
            [home_devs.id, globex.id, "gone", home_admins.id], ACME
        )

        assert result.valid_ids == [acme_devs.id, acme_admins.id]
        assert [w.code for w in result.warnings] == [
            WarningCode.CROSS_ACCOUNT_REFERENCE,
            WarningCode.DANGLING_REFERENCE,
        ]

    def test_valid_ids_always_in_target_scope(self, stores):
        """Whatever mix is requested, every accepted id lives in the target partition"""
        ids = [
            make_group(stores, "Admins", HOME).id,
            make_group(stores, "Admins", ACME).id,
            make_group(stores, "Admins", GLOBEX).id,
            make_group(stores, "Readers", HOME).id,
            make_group(stores, "Readers", GLOBEX).id,
        ]

        for target in (HOME, ACME, GLOBEX):
            result = GroupScopeValidator(stores.groups).validate(ids, target)
            for group_id in result.valid_ids:
                assert stores.groups.get_by_id(group_id).scope == target
