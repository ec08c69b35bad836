"""Typed errors raised by the family graph engine and its store."""


class FamilyTreeError(Exception):
    """Base class for all family tree errors."""


class PersonNotFound(FamilyTreeError):
    """A person id does not resolve to a live person."""

    def __init__(self, person_id: str):
        super().__init__(f"person not found: {person_id}")
        self.person_id = person_id


class RelationshipNotFound(FamilyTreeError):
    """A relationship id does not resolve to a live edge."""

    def __init__(self, relationship_id: str):
        super().__init__(f"relationship not found: {relationship_id}")
        self.relationship_id = relationship_id


class ValidationError(FamilyTreeError):
    """Malformed input, rejected before the graph is read."""


class SelfParentage(ValidationError):
    """A person was proposed as their own parent."""

    def __init__(self, person_id: str):
        super().__init__(f"a person cannot be their own parent: {person_id}")
        self.person_id = person_id


class IncestuousOffspring(FamilyTreeError):
    """The two people are already related, so the edge is not allowed."""

    def __init__(self, parent_id: str, child_id: str, shared: list[str] | None = None):
        super().__init__(f"this relationship is not allowed: {parent_id} -> {child_id}")
        self.parent_id = parent_id
        self.child_id = child_id
        self.shared = shared or []


class InconsistentGraph(FamilyTreeError):
    """The stored edges contain a cycle or exceed the traversal bound."""


class TraversalCancelled(FamilyTreeError):
    """The caller's deadline passed or the traversal was cancelled."""


class GraphStoreError(FamilyTreeError):
    """The graph store failed to answer a query."""
