"""Pytest fixtures for family tree tests."""

import pytest

from family_tree.config import Settings
from family_tree.service import FamilyTreeService
from family_tree.storage.sqlite import FamilyTreeDatabase


@pytest.fixture
def db(tmp_path):
    """Empty database in a temporary directory."""
    return FamilyTreeDatabase(db_path=tmp_path / "familytree.db")


@pytest.fixture
def config(db):
    """Engine settings pointing at the test database."""
    return Settings(db_path=db.db_path, traversal_timeout=None)


@pytest.fixture
def service(db, config):
    """FamilyTreeService over the test database."""
    return FamilyTreeService(db, config)


@pytest.fixture
def people(db):
    """Create people by name and return a name -> id mapping."""

    def make(*names: str) -> dict[str, str]:
        return {p.name: p.id for p in db.add_people(list(names))}

    return make


@pytest.fixture
def raw_link(db):
    """Write an edge straight to the store, skipping the guard.

    Used to set up data the guard would refuse, such as cycles.
    """

    def link(parent_id: str, child_id: str) -> str:
        with db.write_transaction() as reader:
            return reader.insert_edge(parent_id, child_id)

    return link
