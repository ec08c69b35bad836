"""Write path for new parent/child edges.

Every edge that enters the graph goes through EdgeMutationGuard: the
relatedness check and the insert share one serializing transaction, so two
concurrent writers cannot both pass the check against a stale view.
"""

import logging

from family_tree.config import CONSANGUINITY_RADIUS
from family_tree.engine.cancellation import Deadline
from family_tree.engine.relatedness import RelatednessChecker
from family_tree.errors import (
    IncestuousOffspring,
    PersonNotFound,
    RelationshipNotFound,
    SelfParentage,
)
from family_tree.storage.sqlite import FamilyTreeDatabase, GraphReader

logger = logging.getLogger(__name__)


def validate_pair(parent_id: str, child_id: str) -> None:
    """Reject a person proposed as their own parent."""
    if parent_id == child_id:
        raise SelfParentage(parent_id)


class EdgeMutationGuard:
    """Check-then-insert for relationship edges."""

    def __init__(self, db: FamilyTreeDatabase, radius: int = CONSANGUINITY_RADIUS):
        self.db = db
        self.radius = radius

    def add_relationship(
        self, parent_id: str, child_id: str, deadline: Deadline | None = None
    ) -> str:
        """Add one parent -> child edge.

        Args:
            parent_id: Proposed parent
            child_id: Proposed child
            deadline: Optional cancellation signal

        Returns:
            Id of the new edge

        Raises:
            SelfParentage: If both ids are the same (the store is not touched)
            PersonNotFound: If either person does not exist
            IncestuousOffspring: If the two people are already related
            GraphStoreError: If the store fails; nothing is persisted
        """
        validate_pair(parent_id, child_id)
        with self.db.write_transaction() as reader:
            return self._check_and_insert(reader, parent_id, child_id, deadline)

    def add_relationships(
        self, pairs: list[tuple[str, str]], deadline: Deadline | None = None
    ) -> list[str]:
        """Add a batch of edges, all or nothing.

        Each pair is checked against the store plus the pairs already accepted
        earlier in the same batch.
        """
        for parent_id, child_id in pairs:
            validate_pair(parent_id, child_id)
        with self.db.write_transaction() as reader:
            return [
                self._check_and_insert(reader, parent_id, child_id, deadline)
                for parent_id, child_id in pairs
            ]

    def update_relationship(
        self,
        relationship_id: str,
        parent_id: str,
        child_id: str,
        deadline: Deadline | None = None,
    ) -> str:
        """Give an existing edge new endpoints, under the same rules as a new edge.

        Raises:
            RelationshipNotFound: If the edge does not exist
        """
        validate_pair(parent_id, child_id)
        with self.db.write_transaction() as reader:
            rel = reader.get_relationship(relationship_id)
            if rel is None:
                raise RelationshipNotFound(relationship_id)
            # The edge being moved must not count as evidence against itself
            reader.retire_edge(rel)
            self._check(reader, parent_id, child_id, deadline)
            edge_id = reader.repoint_edge(rel, parent_id, child_id)
        logger.info("Moved relationship %s to %s -> %s", edge_id, parent_id, child_id)
        return edge_id

    def _check(
        self, reader: GraphReader, parent_id: str, child_id: str, deadline: Deadline | None
    ) -> None:
        for person_id in (parent_id, child_id):
            if reader.get_person(person_id) is None:
                raise PersonNotFound(person_id)

        evidence = RelatednessChecker(reader, self.radius).evaluate(parent_id, child_id, deadline)
        if evidence.related:
            logger.info(
                "Rejected relationship %s -> %s (direct edges: %d, shared ancestors: %s)",
                parent_id,
                child_id,
                len(evidence.direct_edges),
                evidence.shared_ancestors,
            )
            raise IncestuousOffspring(parent_id, child_id, evidence.shared_ancestors)

    def _check_and_insert(
        self, reader: GraphReader, parent_id: str, child_id: str, deadline: Deadline | None
    ) -> str:
        self._check(reader, parent_id, child_id, deadline)
        edge_id = reader.insert_edge(parent_id, child_id)
        logger.info("Added relationship %s: %s -> %s", edge_id, parent_id, child_id)
        return edge_id
