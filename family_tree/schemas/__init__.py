"""Pydantic schemas for people, relationships and ancestry trees."""

from family_tree.schemas.graph import (
    PersonCreate,
    PersonOut,
    PersonUpdate,
    RelatednessReport,
    RelationshipCreate,
    RelationshipOut,
)
from family_tree.schemas.tree import FamilyRelationship, FamilyTree, Member, TreeNode

__all__ = [
    "PersonCreate",
    "PersonUpdate",
    "PersonOut",
    "RelationshipCreate",
    "RelationshipOut",
    "RelatednessReport",
    "FamilyRelationship",
    "Member",
    "FamilyTree",
    "TreeNode",
]
