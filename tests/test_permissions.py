"""Tests for permission tokens, sets, hierarchy expansion and conditions."""

from __future__ import annotations

import json

import pytest

from accessgate import (
    DEFAULT_HIERARCHY,
    AllOf,
    AnyOf,
    ConfigurationError,
    HierarchyGraph,
    InvalidPermissionError,
    Leaf,
    Permissions,
    PermissionSet,
    all_of,
    any_of,
    expand,
    flatten_grants,
    parse_condition,
)
from accessgate.permissions import (
    PermissionContext,
    contains,
    contains_wildcard,
    is_ownership_qualified,
    resource_hierarchy,
    to_dict,
    union,
    validate_permission,
)


class TestTokens:
    """Tests for token validation and the Own suffix."""

    def test_valid_token_returned_unchanged(self) -> None:
        assert validate_permission("user.edit") == "user.edit"

    @pytest.mark.parametrize("token", ["", " ", "user edit", "user.edit\n"])
    def test_malformed_tokens_rejected(self, token: str) -> None:
        with pytest.raises(InvalidPermissionError):
            validate_permission(token)

    def test_non_string_rejected(self) -> None:
        with pytest.raises(InvalidPermissionError):
            validate_permission(42)

    def test_own_suffix(self) -> None:
        assert is_ownership_qualified("report.editOwn")
        assert not is_ownership_qualified("report.edit")
        # Case-sensitive: "own" in lowercase is an ordinary token.
        assert not is_ownership_qualified("report.editown")


class TestPermissionSet:
    """Tests for PermissionSet value semantics."""

    @pytest.mark.parametrize(
        "a,b",
        [
            ([], []),
            (["a"], ["b"]),
            (["a", "b"], ["b", "c"]),
            (["*"], ["x.y"]),
        ],
    )
    def test_union_commutative(self, a: list[str], b: list[str]) -> None:
        sa, sb = PermissionSet.of(a), PermissionSet.of(b)
        assert union(sa, sb) == union(sb, sa)

    def test_union_idempotent(self) -> None:
        s = PermissionSet.of(["a", "b"])
        assert union(s, s) == s

    def test_union_deduplicates(self) -> None:
        result = PermissionSet.of(["a", "b"]) | PermissionSet.of(["b", "c"])
        assert len(result) == 3

    def test_contains_is_exact(self) -> None:
        s = PermissionSet.of(["user.edit"])
        assert contains(s, "user.edit")
        assert not contains(s, "User.edit")
        assert not contains(s, "user")

    def test_contains_wildcard(self) -> None:
        assert contains_wildcard(PermissionSet.wildcard())
        assert not contains_wildcard(PermissionSet.of(["user.edit"]))

    def test_of_validates(self) -> None:
        with pytest.raises(InvalidPermissionError):
            PermissionSet.of(["ok", ""])

    def test_equality_with_builtin_sets(self) -> None:
        assert PermissionSet.of(["a", "b"]) == {"a", "b"}

    def test_flatten_grants(self) -> None:
        """Category keys are dropped and duplicates merged."""
        result = flatten_grants({"user": ["a", "b"], "note": ["a"]})
        assert result == {"a", "b"}

    def test_flatten_grants_empty(self) -> None:
        assert flatten_grants(None) == set()
        assert flatten_grants({"user": []}) == set()

    def test_flatten_grants_flat_list(self) -> None:
        assert flatten_grants(["user.view", "note.list", "user.view"]) == {"user.view", "note.list"}

    def test_flatten_grants_rejects_string(self) -> None:
        with pytest.raises(InvalidPermissionError):
            flatten_grants("user.view")


class TestExpand:
    """Tests for hierarchy closure."""

    def test_direct_inheritance(self) -> None:
        graph = HierarchyGraph.from_mapping({"admin.manage": ["user.edit", "user.delete"]})
        result = expand(PermissionSet(["admin.manage"]), graph)
        assert result == {"admin.manage", "user.edit", "user.delete"}

    def test_transitive_expansion(self) -> None:
        graph = HierarchyGraph.from_mapping({"a": ["b"], "b": ["c"], "c": ["d"]})
        assert expand(PermissionSet(["a"]), graph) == {"a", "b", "c", "d"}

    def test_two_node_cycle_terminates(self) -> None:
        graph = HierarchyGraph.from_mapping({"A": ["B"], "B": ["A"]})
        assert expand(PermissionSet(["A"]), graph) == {"A", "B"}

    def test_self_loop_terminates(self) -> None:
        graph = HierarchyGraph.from_mapping({"A": ["A", "B"]})
        assert expand(PermissionSet(["A"]), graph) == {"A", "B"}

    def test_unknown_token_contributes_itself(self) -> None:
        graph = HierarchyGraph.from_mapping({"a": ["b"]})
        assert expand(PermissionSet(["zzz"]), graph) == {"zzz"}

    def test_empty_seed(self) -> None:
        assert expand(PermissionSet(), DEFAULT_HIERARCHY) == set()

    def test_idempotent(self) -> None:
        graph = HierarchyGraph.from_mapping({"a": ["b", "c"], "c": ["a", "d"], "x": ["y"]})
        once = expand(PermissionSet(["a", "x"]), graph)
        assert expand(once, graph) == once

    def test_order_independent(self) -> None:
        forward = HierarchyGraph.from_mapping({"a": ["b", "c"], "b": ["d"]})
        backward = HierarchyGraph.from_mapping({"b": ["d"], "a": ["c", "b"]})
        r1 = expand(PermissionSet(["a", "b"]), forward)
        r2 = expand(PermissionSet(["b", "a"]), backward)
        assert r1 == r2

    def test_wildcard_not_expanded(self) -> None:
        graph = HierarchyGraph.from_mapping({"*": ["should.not.appear"]})
        assert expand(PermissionSet(["*"]), graph) == {"*"}

    def test_wildcard_reachable_through_hierarchy(self) -> None:
        graph = HierarchyGraph.from_mapping({"root.all": ["*"]})
        assert expand(PermissionSet(["root.all"]), graph).contains_wildcard()


class TestHierarchyGraph:
    """Tests for HierarchyGraph construction and loading."""

    def test_duplicate_parents_merge(self) -> None:
        graph = HierarchyGraph.from_mapping({"a": ["b", "b", "c"]})
        assert graph.implied("a") == frozenset({"b", "c"})

    def test_rejects_empty_child(self) -> None:
        with pytest.raises(InvalidPermissionError):
            HierarchyGraph.from_mapping({"a": [""]})

    def test_rejects_string_children(self) -> None:
        with pytest.raises(InvalidPermissionError):
            HierarchyGraph.from_mapping({"a": "b"})

    def test_null_children_is_leaf_parent(self) -> None:
        graph = HierarchyGraph.from_mapping({"a": None})
        assert "a" in graph
        assert graph.implied("a") == frozenset()

    def test_merged(self) -> None:
        g1 = HierarchyGraph.from_mapping({"a": ["b"]})
        g2 = HierarchyGraph.from_mapping({"a": ["c"], "x": ["y"]})
        merged = g1.merged(g2)
        assert merged.implied("a") == frozenset({"b", "c"})
        assert "x" in merged
        assert g1.implied("a") == frozenset({"b"})

    def test_from_json_file(self, tmp_path) -> None:
        path = tmp_path / "hierarchy.json"
        path.write_text(json.dumps({"report.manage": ["report.edit", "report.view"]}))
        graph = HierarchyGraph.from_json_file(path)
        assert graph.implied("report.manage") == frozenset({"report.edit", "report.view"})

    def test_from_json_file_missing(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            HierarchyGraph.from_json_file(tmp_path / "missing.json")

    def test_from_json_file_not_object(self, tmp_path) -> None:
        path = tmp_path / "hierarchy.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError, match="JSON object"):
            HierarchyGraph.from_json_file(path)

    def test_from_json_file_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "hierarchy.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            HierarchyGraph.from_json_file(path)


class TestCatalog:
    """Tests for the permission catalog and default hierarchy."""

    def test_builders(self) -> None:
        assert Permissions.action("candidate", "list") == "candidate.list"
        assert Permissions.own("note", "edit") == "note.editOwn"

    def test_unique_constants(self) -> None:
        values = [
            getattr(Permissions, attr)
            for attr in dir(Permissions)
            if attr.isupper() and not callable(getattr(Permissions, attr))
        ]
        assert len(values) == len(set(values)), "Duplicate permission values found"

    def test_resource_hierarchy_edges(self) -> None:
        edges = resource_hierarchy("team")
        assert edges["team.archive"] == ("team.delete",)
        assert "team.viewOwn" not in {c for children in edges.values() for c in children}

    def test_archive_implies_view_transitively(self) -> None:
        """archive → delete → view (transitive)."""
        result = expand(PermissionSet([Permissions.USER_ARCHIVE]), DEFAULT_HIERARCHY)
        assert Permissions.USER_DELETE in result
        assert Permissions.USER_VIEW in result
        assert Permissions.USER_VIEW_OWN in result

    def test_export_implies_search(self) -> None:
        result = expand(PermissionSet(["note.export"]), DEFAULT_HIERARCHY)
        assert "note.list" in result
        assert "note.search" in result

    def test_edit_own_implies_view_own(self) -> None:
        result = expand(PermissionSet([Permissions.NOTE_EDIT_OWN]), DEFAULT_HIERARCHY)
        assert Permissions.NOTE_VIEW_OWN in result
        assert Permissions.NOTE_VIEW not in result

    def test_system_config_reset_chain(self) -> None:
        result = expand(PermissionSet([Permissions.SYSTEM_CONFIG_RESET]), DEFAULT_HIERARCHY)
        assert Permissions.SYSTEM_CONFIG_EDIT in result
        assert Permissions.SYSTEM_CONFIG_VIEW in result

    def test_no_wildcard_in_default_hierarchy(self) -> None:
        for parent in DEFAULT_HIERARCHY:
            assert "*" not in DEFAULT_HIERARCHY.implied(parent)


class TestConditions:
    """Tests for condition construction and parsing."""

    def test_leaf_rejects_empty(self) -> None:
        with pytest.raises(InvalidPermissionError):
            Leaf("")

    def test_parse_string(self) -> None:
        assert parse_condition("user.edit") == Leaf("user.edit")

    def test_parse_nested(self) -> None:
        tree = parse_condition({"any": ["user.edit", {"all": ["user.editOwn", "user.viewOwn"]}]})
        assert tree == AnyOf((Leaf("user.edit"), AllOf((Leaf("user.editOwn"), Leaf("user.viewOwn")))))

    def test_parse_returns_trees_unchanged(self) -> None:
        tree = AllOf((Leaf("a"),))
        assert parse_condition(tree) is tree

    def test_parse_empty_combinators(self) -> None:
        assert parse_condition({"any": []}) == AnyOf()
        assert parse_condition({"all": []}) == AllOf()

    @pytest.mark.parametrize(
        "raw",
        [
            {"one": ["a"]},
            {"any": ["a"], "all": ["b"]},
            {},
            {"any": "a"},
            42,
            None,
        ],
    )
    def test_parse_rejects_bad_shapes(self, raw) -> None:
        with pytest.raises(InvalidPermissionError):
            parse_condition(raw)

    def test_helpers_accept_strings(self) -> None:
        assert any_of("a", Leaf("b")) == AnyOf((Leaf("a"), Leaf("b")))
        assert all_of("a") == AllOf((Leaf("a"),))

    def test_to_dict(self) -> None:
        raw = {"all": ["a", {"any": ["b", "c"]}]}
        assert to_dict(parse_condition(raw)) == raw

    def test_leaf_ownership_flag(self) -> None:
        assert Leaf("note.editOwn").ownership_qualified
        assert not Leaf("note.edit").ownership_qualified


class TestPermissionContext:
    """Tests for ownership predicate."""

    def test_target_user_matches(self) -> None:
        assert PermissionContext(target_user_id="u1").is_owner("u1")

    def test_resource_owner_matches(self) -> None:
        assert PermissionContext(resource_owner_id="u1").is_owner("u1")

    def test_other_subject_does_not_match(self) -> None:
        ctx = PermissionContext(target_user_id="u1", resource_owner_id="u3")
        assert not ctx.is_owner("u2")

    def test_empty_context_never_matches(self) -> None:
        assert not PermissionContext().is_owner("u1")

    def test_log_dict_skips_missing(self) -> None:
        ctx = PermissionContext(resource_owner_id="u1", resource_type="note")
        assert ctx.as_log_dict() == {"resource_owner_id": "u1", "resource_type": "note"}
