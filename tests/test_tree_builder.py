"""Test ancestry tree construction and its projections."""

import pytest

from family_tree.engine.ancestors import parents_of
from family_tree.engine.cancellation import Deadline
from family_tree.engine.tree_builder import build_ancestry, to_members, to_nested
from family_tree.errors import InconsistentGraph, PersonNotFound, TraversalCancelled
from family_tree.storage.sqlite import GraphReader


@pytest.fixture
def diamond(people, raw_link):
    """G is grandparent of C through both P1 and P2."""
    ids = people("G", "P1", "P2", "C")
    raw_link(ids["G"], ids["P1"])
    raw_link(ids["G"], ids["P2"])
    raw_link(ids["P1"], ids["C"])
    raw_link(ids["P2"], ids["C"])
    return ids


def _relationships(member):
    return sorted((r.name, r.relationship) for r in member.relationships)


class TestAncestorResolver:
    """Tests for the one-hop parent lookup."""

    def test_unknown_person_has_no_parents(self, db):
        with db.read_session() as reader:
            assert parents_of(reader, "missing") == []

    def test_parents_are_distinct(self, db, people, raw_link):
        ids = people("P", "C")
        raw_link(ids["P"], ids["C"])
        with db.read_session() as reader:
            assert [p.name for p in parents_of(reader, ids["C"])] == ["P"]


class TestBuildAncestry:
    """Tests for the breadth-first tree builder."""

    def test_single_parent(self, db, people, raw_link):
        ids = people("P1", "C1")
        raw_link(ids["P1"], ids["C1"])

        with db.read_session() as reader:
            family = to_members(build_ancestry(reader, ids["C1"]))

        root = family.root()
        assert root.name == "C1"
        assert _relationships(root) == [("P1", "parent")]

    def test_person_without_parents(self, db, people, raw_link):
        ids = people("P1", "C1")
        raw_link(ids["P1"], ids["C1"])

        with db.read_session() as reader:
            tree = build_ancestry(reader, ids["P1"])

        family = to_members(tree)
        assert len(tree) == 1
        assert [m.name for m in family.members] == ["P1"]
        assert family.root().relationships == []

    def test_missing_root(self, db):
        with db.read_session() as reader:
            with pytest.raises(PersonNotFound):
                build_ancestry(reader, "missing")

    def test_each_person_expanded_once(self, db, diamond, monkeypatch):
        expanded = []
        original = GraphReader.find_parents

        def counting(self, child_id):
            expanded.append(child_id)
            return original(self, child_id)

        monkeypatch.setattr(GraphReader, "find_parents", counting)

        with db.read_session() as reader:
            tree = build_ancestry(reader, diamond["C"])

        assert sorted(expanded) == sorted(diamond.values())
        assert tree.order[0] == diamond["C"]
        assert tree.order[-1] == diamond["G"]

    def test_shared_ancestor_listed_under_each_child(self, db, diamond):
        with db.read_session() as reader:
            family = to_members(build_ancestry(reader, diamond["C"]))

        by_name = {m.name: m for m in family.members}
        assert sorted(by_name) == ["C", "G", "P1", "P2"]
        assert _relationships(by_name["C"]) == [("P1", "parent"), ("P2", "parent")]
        assert _relationships(by_name["P1"]) == [("G", "parent")]
        assert _relationships(by_name["P2"]) == [("G", "parent")]
        assert by_name["G"].relationships == []

    def test_members_with_children(self, db, diamond):
        with db.read_session() as reader:
            family = to_members(build_ancestry(reader, diamond["C"]), include_children=True)

        by_name = {m.name: m for m in family.members}
        assert _relationships(by_name["G"]) == [("P1", "child"), ("P2", "child")]
        assert _relationships(by_name["P1"]) == [("C", "child"), ("G", "parent")]

    def test_descendants_are_not_included(self, db, people, raw_link):
        ids = people("P", "C", "GC")
        raw_link(ids["P"], ids["C"])
        raw_link(ids["C"], ids["GC"])

        with db.read_session() as reader:
            tree = build_ancestry(reader, ids["C"])

        assert ids["GC"] not in tree
        assert set(tree.order) == {ids["C"], ids["P"]}

    def test_parent_deleted_mid_walk_is_skipped(self, db, people, raw_link, monkeypatch):
        ids = people("GP1", "GP2", "P", "C")
        raw_link(ids["GP1"], ids["P"])
        raw_link(ids["GP2"], ids["P"])
        raw_link(ids["P"], ids["C"])
        original = GraphReader.find_parents
        calls = []

        def deleting(self, child_id):
            if not calls:
                db.delete_person(ids["GP1"])
            calls.append(child_id)
            return original(self, child_id)

        monkeypatch.setattr(GraphReader, "find_parents", deleting)

        with db.read_session() as reader:
            family = to_members(build_ancestry(reader, ids["C"]))

        by_name = {m.name: m for m in family.members}
        assert sorted(by_name) == ["C", "GP2", "P"]
        assert _relationships(by_name["P"]) == [("GP2", "parent")]

    def test_nested_projection(self, db, diamond):
        with db.read_session() as reader:
            root = to_nested(build_ancestry(reader, diamond["C"]))

        assert root.name == "C"
        p1, p2 = root.parents
        assert (p1.name, p2.name) == ("P1", "P2")
        assert [(g.name, g.ref) for g in p1.parents] == [("G", False)]
        assert [(g.name, g.ref) for g in p2.parents] == [("G", True)]
        assert p2.parents[0].parents == []

    def test_nested_projection_of_lone_person(self, db, people):
        ids = people("Solo")
        with db.read_session() as reader:
            root = to_nested(build_ancestry(reader, ids["Solo"]))
        assert root.model_dump() == {"id": ids["Solo"], "name": "Solo", "parents": [], "ref": False}

    def test_nested_projection_grows_with_edges(self, db, people, raw_link):
        # Two people per generation, each a parent of both people in the next
        generations = 18
        names = [f"{side}{g}" for g in range(generations) for side in "AB"]
        ids = people("Root", *names)
        raw_link(ids["A0"], ids["Root"])
        raw_link(ids["B0"], ids["Root"])
        for g in range(1, generations):
            for parent in (f"A{g}", f"B{g}"):
                for child in (f"A{g - 1}", f"B{g - 1}"):
                    raw_link(ids[parent], ids[child])

        with db.read_session() as reader:
            tree = build_ancestry(reader, ids["Root"])
        dumped = to_nested(tree).model_dump()

        count = 0
        expanded = []
        stack = [dumped]
        while stack:
            node = stack.pop()
            count += 1
            if not node["ref"]:
                expanded.append(node["id"])
            stack.extend(node["parents"])

        assert len(tree) == 2 * generations + 1
        assert count == tree.graph.number_of_edges() + 1
        assert sorted(expanded) == sorted(ids.values())


class TestMalformedGraphs:
    """Tests for cycle safety and the traversal bound."""

    def test_cycle_is_reported(self, db, people, raw_link):
        ids = people("A", "B", "C")
        raw_link(ids["A"], ids["C"])
        raw_link(ids["B"], ids["A"])
        raw_link(ids["A"], ids["B"])

        with db.read_session() as reader:
            with pytest.raises(InconsistentGraph, match="cycle"):
                build_ancestry(reader, ids["C"])

    def test_cycle_through_root(self, db, people, raw_link):
        ids = people("A", "B")
        raw_link(ids["A"], ids["B"])
        raw_link(ids["B"], ids["A"])

        with db.read_session() as reader:
            with pytest.raises(InconsistentGraph):
                build_ancestry(reader, ids["A"])

    def test_node_limit(self, db, people, raw_link):
        ids = people("GP", "P", "C")
        raw_link(ids["GP"], ids["P"])
        raw_link(ids["P"], ids["C"])

        with db.read_session() as reader:
            with pytest.raises(InconsistentGraph, match="traversal bound"):
                build_ancestry(reader, ids["C"], node_limit=2)
            assert len(build_ancestry(reader, ids["C"], node_limit=3)) == 3


class TestCancellation:
    """Tests for deadline handling during a build."""

    def test_cancelled_before_start(self, db, people):
        ids = people("A")
        deadline = Deadline()
        deadline.cancel()
        with db.read_session() as reader:
            with pytest.raises(TraversalCancelled):
                build_ancestry(reader, ids["A"], deadline=deadline)

    def test_cancelled_mid_walk(self, db, diamond, monkeypatch):
        deadline = Deadline()
        original = GraphReader.find_parents

        def cancelling(self, child_id):
            deadline.cancel()
            return original(self, child_id)

        monkeypatch.setattr(GraphReader, "find_parents", cancelling)

        with db.read_session() as reader:
            with pytest.raises(TraversalCancelled):
                build_ancestry(reader, diamond["C"], deadline=deadline)
