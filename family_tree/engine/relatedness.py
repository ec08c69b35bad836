"""Relatedness (consanguinity) check for proposed parent/child edges.

Two people are related when an edge between them already exists in either
direction, or when their ancestor sets overlap within ``radius`` generations.
Each candidate counts as their own ancestor at generation 0, so one being the
other's parent or grandparent is caught by the same overlap test.
"""

import logging
from dataclasses import dataclass, field

from family_tree.config import CONSANGUINITY_RADIUS
from family_tree.engine.ancestors import parents_of
from family_tree.engine.cancellation import Deadline, check_deadline
from family_tree.errors import GraphStoreError
from family_tree.storage.sqlite import GraphReader, Relationship

logger = logging.getLogger(__name__)


@dataclass
class RelatednessEvidence:
    """What the checker saw for one candidate pair."""

    a_id: str
    b_id: str
    edges: list[Relationship] = field(default_factory=list)
    direct_edges: list[Relationship] = field(default_factory=list)
    ancestors_a: dict[str, int] = field(default_factory=dict)
    ancestors_b: dict[str, int] = field(default_factory=dict)

    @property
    def shared_ancestors(self) -> list[str]:
        """Ids present in both ancestor sets, closest first."""
        shared = self.ancestors_a.keys() & self.ancestors_b.keys()
        return sorted(shared, key=lambda p: (self.ancestors_a[p] + self.ancestors_b[p], p))

    @property
    def related(self) -> bool:
        return bool(self.direct_edges) or bool(self.shared_ancestors)


class RelatednessChecker:
    """Decide whether two people already share lineage."""

    def __init__(self, reader: GraphReader, radius: int = CONSANGUINITY_RADIUS):
        """Initialize the checker.

        Args:
            reader: Graph store primitives for the current session
            radius: Parent generations to climb from each candidate (>= 1)
        """
        if radius < 1:
            raise ValueError(f"radius must be at least 1, got {radius}")
        self.reader = reader
        self.radius = radius

    def are_related(self, a_id: str, b_id: str, deadline: Deadline | None = None) -> bool:
        """Check whether an edge between a and b, either way round, must be refused."""
        return self.evaluate(a_id, b_id, deadline).related

    def evaluate(
        self, a_id: str, b_id: str, deadline: Deadline | None = None
    ) -> RelatednessEvidence:
        """Collect the evidence for a candidate pair.

        The result is the same whichever way round the pair is given.

        Raises:
            GraphStoreError: If any store read fails; never reported as unrelated
            TraversalCancelled: If the deadline passes
        """
        evidence = RelatednessEvidence(a_id=a_id, b_id=b_id)
        try:
            check_deadline(deadline)
            evidence.edges = self.reader.find_edges(a_id, b_id)
            evidence.direct_edges = [
                e for e in evidence.edges if {e.parent_id, e.child_id} == {a_id, b_id}
            ]
            if evidence.direct_edges:
                return evidence

            evidence.ancestors_a = self._ancestors(a_id, deadline)
            evidence.ancestors_b = self._ancestors(b_id, deadline)
        except GraphStoreError:
            logger.error(
                "Graph store failed while checking relatedness of %s and %s",
                a_id,
                b_id,
                exc_info=True,
            )
            raise

        if evidence.related:
            logger.debug(
                "%s and %s share ancestors %s", a_id, b_id, evidence.shared_ancestors
            )
        return evidence

    def _ancestors(self, person_id: str, deadline: Deadline | None) -> dict[str, int]:
        """Map each ancestor within the radius to the generation it was first reached."""
        generations = {person_id: 0}
        current = [person_id]
        for depth in range(1, self.radius + 1):
            if not current:
                break
            next_level = []
            for node in current:
                for parent in parents_of(self.reader, node, deadline):
                    if parent.id not in generations:
                        generations[parent.id] = depth
                        next_level.append(parent.id)
            current = next_level
        return generations
