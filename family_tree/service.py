"""Application service combining the store and the graph engine.

Usage:
    service = FamilyTreeService(FamilyTreeDatabase(Path("family.db")))
    ana = service.add_person("Ana")
    rui = service.add_person("Rui")
    service.add_relationship(ana.id, rui.id)
    tree = service.ancestry_members(rui.id)
"""

from family_tree.config import Settings, settings as default_settings
from family_tree.engine.cancellation import Deadline
from family_tree.engine.guard import EdgeMutationGuard
from family_tree.engine.relatedness import RelatednessChecker, RelatednessEvidence
from family_tree.engine.tree_builder import AncestryTree, build_ancestry, to_members, to_nested
from family_tree.errors import PersonNotFound
from family_tree.schemas.tree import FamilyTree, TreeNode
from family_tree.storage.sqlite import FamilyTreeDatabase, Person, Relationship


class FamilyTreeService:
    """Entry point used by the HTTP API and the CLI."""

    def __init__(self, db: FamilyTreeDatabase, config: Settings | None = None):
        self.db = db
        self.config = config or default_settings
        self.guard = EdgeMutationGuard(db, radius=self.config.consanguinity_radius)

    def new_deadline(self, timeout: float | None = None) -> Deadline:
        """Create a deadline using the configured traversal timeout by default."""
        return Deadline(timeout if timeout is not None else self.config.traversal_timeout)

    # ─────────────────────────────────────────
    # People
    # ─────────────────────────────────────────

    def add_person(self, name: str) -> Person:
        return self.db.add_person(name)

    def add_people(self, names: list[str]) -> list[Person]:
        return self.db.add_people(names)

    def list_people(self) -> list[Person]:
        return self.db.list_people()

    def get_person(self, person_id: str) -> Person:
        return self.db.get_person(person_id)

    def update_person(self, person_id: str, name: str) -> Person:
        return self.db.update_person(person_id, name)

    def delete_person(self, person_id: str) -> None:
        self.db.delete_person(person_id)

    # ─────────────────────────────────────────
    # Relationships
    # ─────────────────────────────────────────

    def list_relationships(self) -> list[Relationship]:
        return self.db.list_relationships()

    def add_relationship(
        self, parent_id: str, child_id: str, deadline: Deadline | None = None
    ) -> str:
        return self.guard.add_relationship(parent_id, child_id, deadline)

    def add_relationships(
        self, pairs: list[tuple[str, str]], deadline: Deadline | None = None
    ) -> list[str]:
        return self.guard.add_relationships(pairs, deadline)

    def update_relationship(
        self,
        relationship_id: str,
        parent_id: str,
        child_id: str,
        deadline: Deadline | None = None,
    ) -> str:
        return self.guard.update_relationship(relationship_id, parent_id, child_id, deadline)

    def delete_relationship(self, relationship_id: str) -> None:
        self.db.delete_relationship(relationship_id)

    def check_relationship(
        self, parent_id: str, child_id: str, deadline: Deadline | None = None
    ) -> RelatednessEvidence:
        """Run the relatedness check without writing anything.

        Raises:
            PersonNotFound: If either person does not exist
        """
        with self.db.read_session() as reader:
            for person_id in (parent_id, child_id):
                if reader.get_person(person_id) is None:
                    raise PersonNotFound(person_id)
            checker = RelatednessChecker(reader, self.config.consanguinity_radius)
            return checker.evaluate(parent_id, child_id, deadline)

    # ─────────────────────────────────────────
    # Ancestry
    # ─────────────────────────────────────────

    def build_ancestry(self, person_id: str, deadline: Deadline | None = None) -> AncestryTree:
        with self.db.read_session() as reader:
            return build_ancestry(
                reader,
                person_id,
                deadline=deadline,
                node_limit=self.config.traversal_node_limit,
            )

    def ancestry_members(
        self,
        person_id: str,
        include_children: bool = False,
        deadline: Deadline | None = None,
    ) -> FamilyTree:
        return to_members(self.build_ancestry(person_id, deadline), include_children)

    def ancestry_nested(self, person_id: str, deadline: Deadline | None = None) -> TreeNode:
        return to_nested(self.build_ancestry(person_id, deadline))

    def get_stats(self) -> dict:
        return self.db.get_stats()
