"""SQLite database for the family graph.

This module defines the database schema and provides access to people and the
parent/child edges between them. It is the source of truth for the graph; the
engine re-reads it on every call.
"""

import functools
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    String,
    UniqueConstraint,
    create_engine,
    or_,
    text,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from family_tree.errors import GraphStoreError, PersonNotFound, RelationshipNotFound

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> str:
    return datetime.utcnow().isoformat()


class Person(Base):
    """Person node."""

    __tablename__ = "people"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    created_at = Column(String, default=_now)
    updated_at = Column(String, default=_now, onupdate=_now)
    deleted_at = Column(String, index=True)

    def __repr__(self) -> str:
        return f"<Person(id={self.id}, name='{self.name}')>"


class Relationship(Base):
    """Directed parent -> child edge."""

    __tablename__ = "relationships"
    __table_args__ = (
        UniqueConstraint("parent_id", "child_id", name="uq_relationship_pair"),
        CheckConstraint("parent_id != child_id", name="ck_relationship_not_self"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    parent_id = Column(String(36), ForeignKey("people.id"), nullable=False, index=True)
    child_id = Column(String(36), ForeignKey("people.id"), nullable=False, index=True)
    created_at = Column(String, default=_now)
    updated_at = Column(String, default=_now, onupdate=_now)
    deleted_at = Column(String, index=True)

    def __repr__(self) -> str:
        return (
            f"<Relationship(id={self.id}, "
            f"parent={self.parent_id}, "
            f"child={self.child_id})>"
        )


def _store_call(method):
    """Translate SQLAlchemy failures into GraphStoreError."""

    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except SQLAlchemyError as e:
            raise GraphStoreError(f"{method.__name__} failed: {e}") from e

    return wrapper


class GraphReader:
    """Graph store primitives bound to a single session.

    The engine only talks to the store through this class, so every query it
    issues runs inside whichever session (and transaction) the caller opened.
    """

    def __init__(self, session: Session):
        self.session = session

    @_store_call
    def get_person(self, person_id: str) -> Person | None:
        """Get a live person by id, or None."""
        return (
            self.session.query(Person)
            .filter(Person.id == person_id, Person.deleted_at.is_(None))
            .first()
        )

    @_store_call
    def find_parents(self, child_id: str) -> list[Person]:
        """Get the live parents of a person (empty if there are none)."""
        return (
            self.session.query(Person)
            .join(Relationship, Relationship.parent_id == Person.id)
            .filter(
                Relationship.child_id == child_id,
                Relationship.deleted_at.is_(None),
                Person.deleted_at.is_(None),
            )
            .all()
        )

    @_store_call
    def find_edges(self, a_id: str, b_id: str) -> list[Relationship]:
        """Get every live edge that touches either id, as parent or as child."""
        ids = (a_id, b_id)
        return (
            self.session.query(Relationship)
            .filter(
                or_(Relationship.parent_id.in_(ids), Relationship.child_id.in_(ids)),
                Relationship.deleted_at.is_(None),
            )
            .all()
        )

    @_store_call
    def insert_edge(self, parent_id: str, child_id: str) -> str:
        """Persist a parent -> child edge and return its id.

        A soft-deleted edge for the same pair is revived instead of inserting a
        second row.
        """
        rel = (
            self.session.query(Relationship)
            .filter(Relationship.parent_id == parent_id, Relationship.child_id == child_id)
            .first()
        )
        if rel is None:
            rel = Relationship(parent_id=parent_id, child_id=child_id)
            self.session.add(rel)
        else:
            rel.deleted_at = None
        self.session.flush()
        return rel.id

    @_store_call
    def get_relationship(self, relationship_id: str) -> Relationship | None:
        """Get a live edge by id, or None."""
        return (
            self.session.query(Relationship)
            .filter(Relationship.id == relationship_id, Relationship.deleted_at.is_(None))
            .first()
        )

    @_store_call
    def retire_edge(self, rel: Relationship) -> None:
        """Hide an edge from later reads in this session."""
        rel.deleted_at = _now()
        self.session.flush()

    @_store_call
    def repoint_edge(self, rel: Relationship, parent_id: str, child_id: str) -> str:
        """Give an existing edge new endpoints and make it live again.

        A soft-deleted row already holding the new pair is purged first so the
        unique constraint on the pair holds.
        """
        stale = (
            self.session.query(Relationship)
            .filter(
                Relationship.parent_id == parent_id,
                Relationship.child_id == child_id,
                Relationship.id != rel.id,
            )
            .first()
        )
        if stale is not None:
            self.session.delete(stale)
            self.session.flush()
        rel.parent_id = parent_id
        rel.child_id = child_id
        rel.deleted_at = None
        self.session.flush()
        return rel.id

    @_store_call
    def count_people(self) -> int:
        """Count live people."""
        return self.session.query(Person).filter(Person.deleted_at.is_(None)).count()


class FamilyTreeDatabase:
    """Database manager for the family graph."""

    def __init__(self, db_path: Path | None = None):
        """Initialize the database.

        Args:
            db_path: Path to SQLite database file (default: ./familytree.db)
        """
        self.db_path = db_path or Path("./familytree.db")
        self.engine = create_engine(f"sqlite:///{self.db_path}")
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine)

    def get_session(self) -> Session:
        """Get a new database session."""
        return self.Session()

    @contextmanager
    def read_session(self) -> Iterator[GraphReader]:
        """Open a session for read-only traversal."""
        session = self.get_session()
        try:
            yield GraphReader(session)
        finally:
            session.close()

    @contextmanager
    def write_transaction(self) -> Iterator[GraphReader]:
        """Open a serializing write transaction.

        BEGIN IMMEDIATE takes SQLite's write lock up front, so a check and the
        insert that depends on it cannot interleave with another writer. The
        transaction commits on normal exit and rolls back on any exception.
        """
        session = self.get_session()
        try:
            try:
                session.execute(text("BEGIN IMMEDIATE"))
            except SQLAlchemyError as e:
                raise GraphStoreError(f"could not start write transaction: {e}") from e
            yield GraphReader(session)
            try:
                session.commit()
            except SQLAlchemyError as e:
                raise GraphStoreError(f"could not commit write transaction: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def add_person(self, name: str) -> Person:
        """Add a person record.

        Args:
            name: Display name

        Returns:
            Created Person object
        """
        return self.add_people([name])[0]

    @_store_call
    def add_people(self, names: list[str]) -> list[Person]:
        """Add several person records in one transaction.

        Args:
            names: Display names

        Returns:
            Created Person objects, in input order
        """
        session = self.get_session()
        try:
            people = [Person(name=name) for name in names]
            session.add_all(people)
            session.commit()
            for person in people:
                session.refresh(person)
            return people
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @_store_call
    def list_people(self) -> list[Person]:
        """Get all live people, oldest first."""
        session = self.get_session()
        try:
            return (
                session.query(Person)
                .filter(Person.deleted_at.is_(None))
                .order_by(Person.created_at, Person.name)
                .all()
            )
        finally:
            session.close()

    @_store_call
    def get_person(self, person_id: str) -> Person:
        """Get a live person by id.

        Raises:
            PersonNotFound: If the id does not resolve
        """
        session = self.get_session()
        try:
            person = GraphReader(session).get_person(person_id)
            if person is None:
                raise PersonNotFound(person_id)
            return person
        finally:
            session.close()

    @_store_call
    def update_person(self, person_id: str, name: str) -> Person:
        """Rename a person.

        Raises:
            PersonNotFound: If the id does not resolve
        """
        session = self.get_session()
        try:
            person = GraphReader(session).get_person(person_id)
            if person is None:
                raise PersonNotFound(person_id)
            person.name = name
            session.commit()
            session.refresh(person)
            return person
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @_store_call
    def delete_person(self, person_id: str) -> None:
        """Soft-delete a person along with every edge touching them.

        Raises:
            PersonNotFound: If the id does not resolve
        """
        session = self.get_session()
        try:
            person = GraphReader(session).get_person(person_id)
            if person is None:
                raise PersonNotFound(person_id)

            now = _now()
            person.deleted_at = now
            session.query(Relationship).filter(
                or_(Relationship.parent_id == person_id, Relationship.child_id == person_id),
                Relationship.deleted_at.is_(None),
            ).update({"deleted_at": now}, synchronize_session=False)

            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @_store_call
    def list_relationships(self) -> list[Relationship]:
        """Get all live edges."""
        session = self.get_session()
        try:
            return (
                session.query(Relationship)
                .filter(Relationship.deleted_at.is_(None))
                .order_by(Relationship.created_at)
                .all()
            )
        finally:
            session.close()

    @_store_call
    def get_relationship(self, relationship_id: str) -> Relationship:
        """Get a live edge by id.

        Raises:
            RelationshipNotFound: If the id does not resolve
        """
        session = self.get_session()
        try:
            rel = GraphReader(session).get_relationship(relationship_id)
            if rel is None:
                raise RelationshipNotFound(relationship_id)
            return rel
        finally:
            session.close()

    @_store_call
    def delete_relationship(self, relationship_id: str) -> None:
        """Soft-delete an edge.

        Raises:
            RelationshipNotFound: If the id does not resolve
        """
        session = self.get_session()
        try:
            rel = GraphReader(session).get_relationship(relationship_id)
            if rel is None:
                raise RelationshipNotFound(relationship_id)
            rel.deleted_at = _now()
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @_store_call
    def get_stats(self) -> dict[str, Any]:
        """Get database statistics.

        Returns:
            Dictionary with database stats
        """
        session = self.get_session()
        try:
            return {
                "total_people": session.query(Person)
                .filter(Person.deleted_at.is_(None))
                .count(),
                "total_relationships": session.query(Relationship)
                .filter(Relationship.deleted_at.is_(None))
                .count(),
            }
        finally:
            session.close()
