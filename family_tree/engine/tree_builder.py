"""Ancestry tree construction.

The tree is built once, breadth-first, into a canonical graph of the people
reached from the root by following parent edges. Callers that want a nested
tree or a flat member list use the projection functions at the bottom of this
module; neither of them touches the store.
"""

import logging
from collections import deque
from dataclasses import dataclass, field

import networkx as nx

from family_tree.engine.ancestors import parents_of
from family_tree.engine.cancellation import Deadline, check_deadline
from family_tree.errors import GraphStoreError, InconsistentGraph, PersonNotFound
from family_tree.schemas.tree import FamilyRelationship, FamilyTree, Member, TreeNode
from family_tree.storage.sqlite import GraphReader

logger = logging.getLogger(__name__)


@dataclass
class AncestryTree:
    """People reachable from a root through parent edges.

    ``graph`` holds one node per person (attribute ``name``) and one
    parent -> child edge per recorded relationship between them. ``order`` is
    the breadth-first order in which people were expanded, root first.
    """

    root_id: str
    graph: nx.DiGraph
    order: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def __contains__(self, person_id: str) -> bool:
        return person_id in self.graph

    def name(self, person_id: str) -> str:
        return self.graph.nodes[person_id]["name"]

    def parents(self, person_id: str) -> list[str]:
        return sorted(self.graph.predecessors(person_id), key=lambda p: (self.name(p), p))

    def children(self, person_id: str) -> list[str]:
        return sorted(self.graph.successors(person_id), key=lambda c: (self.name(c), c))


def build_ancestry(
    reader: GraphReader,
    root_id: str,
    deadline: Deadline | None = None,
    node_limit: int | None = None,
) -> AncestryTree:
    """Build the ancestry tree of a person.

    Each person is expanded at most once, however many paths lead to them.
    The number of expansions is capped by the number of people in the store
    (or ``node_limit`` when that is smaller), and the collected graph must be
    acyclic.

    Args:
        reader: Graph store primitives for the current session
        root_id: Person whose ancestry is wanted
        deadline: Optional cancellation signal, checked at every queue pop
        node_limit: Optional extra cap on the number of expansions

    Returns:
        The complete AncestryTree

    Raises:
        PersonNotFound: If the root does not exist
        InconsistentGraph: If the cap is exceeded or a cycle is found
        TraversalCancelled: If the deadline passes
        GraphStoreError: If the store fails
    """
    try:
        check_deadline(deadline)
        root = reader.get_person(root_id)
        if root is None:
            raise PersonNotFound(root_id)

        limit = reader.count_people()
        if node_limit is not None:
            limit = min(limit, node_limit)
        limit = max(limit, 1)

        graph = nx.DiGraph()
        graph.add_node(root.id, name=root.name)
        tree = AncestryTree(root_id=root.id, graph=graph)

        visited: set[str] = set()
        frontier = deque([root.id])
        while frontier:
            check_deadline(deadline)
            person_id = frontier.popleft()
            if person_id in visited:
                continue
            visited.add(person_id)
            tree.order.append(person_id)
            if len(visited) > limit:
                logger.warning(
                    "Ancestry of %s exceeded %d expansions; stored edges look malformed",
                    root_id,
                    limit,
                )
                raise InconsistentGraph(
                    f"ancestry of {root_id} exceeded the traversal bound of {limit} people"
                )

            for parent in parents_of(reader, person_id, deadline):
                if parent.id not in graph:
                    graph.add_node(parent.id, name=parent.name)
                graph.add_edge(parent.id, person_id)
                if parent.id not in visited:
                    frontier.append(parent.id)

    except GraphStoreError:
        logger.error("Graph store failed while building ancestry of %s", root_id, exc_info=True)
        raise

    _ensure_acyclic(tree)
    logger.debug("Built ancestry of %s with %d people", root_id, len(tree))
    return tree


def _ensure_acyclic(tree: AncestryTree) -> None:
    try:
        cycle = nx.find_cycle(tree.graph, orientation="original")
    except nx.NetworkXNoCycle:
        return

    cycle_ids = [edge[0] for edge in cycle]
    logger.warning("Cycle in parent/child edges reachable from %s: %s", tree.root_id, cycle_ids)
    raise InconsistentGraph(f"cycle in parent/child edges: {' -> '.join(cycle_ids)}")


# ─────────────────────────────────────────
# Projections
# ─────────────────────────────────────────


def to_nested(tree: AncestryTree) -> TreeNode:
    """Render the tree as nested nodes, each holding its parents.

    A person reachable through several children is expanded once, at the
    closest generation they are reached from the root. Every later occurrence
    is a ``ref`` node without parents, so the output grows with the number of
    edges in the tree rather than the number of paths through it.
    """
    root = TreeNode(id=tree.root_id, name=tree.name(tree.root_id))
    expanded = {tree.root_id}
    queue = deque([root])
    while queue:
        node = queue.popleft()
        for parent_id in tree.parents(node.id):
            if parent_id in expanded:
                node.parents.append(TreeNode(id=parent_id, name=tree.name(parent_id), ref=True))
                continue
            expanded.add(parent_id)
            parent = TreeNode(id=parent_id, name=tree.name(parent_id))
            node.parents.append(parent)
            queue.append(parent)
    return root


def to_members(tree: AncestryTree, include_children: bool = False) -> FamilyTree:
    """Render the tree as a flat member list, root first.

    Args:
        tree: Tree built by build_ancestry
        include_children: Also list each member's children within the tree
    """
    members = []
    for person_id in tree.order:
        relationships = [
            FamilyRelationship(name=tree.name(p), relationship="parent")
            for p in tree.parents(person_id)
        ]
        if include_children:
            relationships.extend(
                FamilyRelationship(name=tree.name(c), relationship="child")
                for c in tree.children(person_id)
            )
        members.append(
            Member(id=person_id, name=tree.name(person_id), relationships=relationships)
        )
    return FamilyTree(members=members)
