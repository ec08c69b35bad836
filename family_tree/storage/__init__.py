"""Storage module for the family graph database."""

from family_tree.storage.sqlite import (
    FamilyTreeDatabase,
    GraphReader,
    Person,
    Relationship,
)

__all__ = [
    "FamilyTreeDatabase",
    "GraphReader",
    "Person",
    "Relationship",
]
