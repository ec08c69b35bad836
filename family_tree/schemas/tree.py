"""Pydantic schemas for rendered ancestry trees.

Both shapes are projections of the same traversal: a nested tree rooted at the
queried person, or a flat list of members with named relationships.
"""

from typing import Literal

from pydantic import BaseModel, Field


class FamilyRelationship(BaseModel):
    """A named link from one member to another."""

    name: str = Field(description="Display name of the related person")
    relationship: Literal["parent", "child"] = Field(
        description="What the related person is to the member"
    )


class Member(BaseModel):
    """One person in a flat ancestry listing."""

    id: str = Field(description="Person id")
    name: str = Field(description="Display name")
    relationships: list[FamilyRelationship] = Field(
        default_factory=list, description="Direct parents (and children, when requested)"
    )


class FamilyTree(BaseModel):
    """Flat ancestry listing, root first."""

    members: list[Member] = Field(default_factory=list)

    def root(self) -> Member | None:
        """Get the member the tree was built for."""
        return self.members[0] if self.members else None


class TreeNode(BaseModel):
    """Nested ancestry node."""

    id: str = Field(description="Person id")
    name: str = Field(description="Display name")
    parents: list["TreeNode"] = Field(default_factory=list)
    ref: bool = Field(
        default=False,
        description="Person is expanded elsewhere in the tree; parents are omitted here",
    )


TreeNode.model_rebuild()
