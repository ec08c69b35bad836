"""Test the SQLite graph store."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from family_tree.errors import GraphStoreError, PersonNotFound, RelationshipNotFound
from family_tree.storage.sqlite import GraphReader


class TestPeople:
    """Tests for person records."""

    def test_add_and_get_person(self, db):
        person = db.add_person("Ana")
        fetched = db.get_person(person.id)
        assert fetched.name == "Ana"
        assert fetched.created_at is not None
        assert fetched.deleted_at is None

    def test_ids_are_unique(self, db):
        a, b = db.add_people(["Ana", "Ana"])
        assert a.id != b.id

    def test_get_missing_person(self, db):
        with pytest.raises(PersonNotFound):
            db.get_person("nobody")

    def test_update_person(self, db):
        person = db.add_person("Ana")
        db.update_person(person.id, "Ana Maria")
        assert db.get_person(person.id).name == "Ana Maria"

    def test_delete_person_hides_person_and_edges(self, db, people, raw_link):
        ids = people("P1", "C1")
        raw_link(ids["P1"], ids["C1"])

        db.delete_person(ids["P1"])

        with pytest.raises(PersonNotFound):
            db.get_person(ids["P1"])
        assert [p.id for p in db.list_people()] == [ids["C1"]]
        assert db.list_relationships() == []

    def test_stats(self, db, people, raw_link):
        ids = people("P1", "C1", "C2")
        raw_link(ids["P1"], ids["C1"])
        assert db.get_stats() == {"total_people": 3, "total_relationships": 1}

    def test_store_failure_in_crud_becomes_graph_store_error(self, db, monkeypatch):
        def boom(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(Session, "query", boom)
        with pytest.raises(GraphStoreError):
            db.list_people()
        with pytest.raises(GraphStoreError):
            db.get_stats()
        with pytest.raises(GraphStoreError):
            db.delete_relationship("anyone")


class TestGraphReader:
    """Tests for the primitives the engine reads through."""

    def test_find_parents(self, db, people, raw_link):
        ids = people("Mother", "Father", "Child")
        raw_link(ids["Mother"], ids["Child"])
        raw_link(ids["Father"], ids["Child"])

        with db.read_session() as reader:
            names = sorted(p.name for p in reader.find_parents(ids["Child"]))
            assert names == ["Father", "Mother"]
            assert reader.find_parents(ids["Mother"]) == []
            assert reader.find_parents("unknown") == []

    def test_find_edges_touches_either_endpoint(self, db, people, raw_link):
        ids = people("A", "B", "C", "D")
        ab = raw_link(ids["A"], ids["B"])
        cb = raw_link(ids["C"], ids["B"])
        raw_link(ids["C"], ids["D"])

        with db.read_session() as reader:
            edges = {e.id for e in reader.find_edges(ids["A"], ids["B"])}
        assert edges == {ab, cb}

    def test_insert_edge_revives_deleted_pair(self, db, people, raw_link):
        ids = people("P", "C")
        edge_id = raw_link(ids["P"], ids["C"])
        db.delete_relationship(edge_id)
        assert db.list_relationships() == []

        assert raw_link(ids["P"], ids["C"]) == edge_id
        assert [r.id for r in db.list_relationships()] == [edge_id]

    def test_count_people_skips_deleted(self, db, people):
        ids = people("A", "B")
        db.delete_person(ids["A"])
        with db.read_session() as reader:
            assert reader.count_people() == 1

    def test_store_failure_becomes_graph_store_error(self, db, monkeypatch):
        with db.read_session() as reader:

            def boom(*args, **kwargs):
                raise OperationalError("SELECT", {}, Exception("disk I/O error"))

            monkeypatch.setattr(reader.session, "query", boom)
            with pytest.raises(GraphStoreError):
                reader.find_parents("anyone")


class TestTransactions:
    """Tests for the write transaction boundary."""

    def test_write_transaction_commits(self, db, people):
        ids = people("P", "C")
        with db.write_transaction() as reader:
            reader.insert_edge(ids["P"], ids["C"])
        assert len(db.list_relationships()) == 1

    def test_write_transaction_rolls_back_on_error(self, db, people):
        ids = people("P", "C")
        with pytest.raises(RuntimeError):
            with db.write_transaction() as reader:
                reader.insert_edge(ids["P"], ids["C"])
                raise RuntimeError("abort")
        assert db.list_relationships() == []

    def test_write_transaction_yields_reader(self, db):
        with db.write_transaction() as reader:
            assert isinstance(reader, GraphReader)

    def test_delete_missing_relationship(self, db):
        with pytest.raises(RelationshipNotFound):
            db.delete_relationship("missing")
