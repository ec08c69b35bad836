"""Family graph engine: ancestry trees and relatedness checks."""

from family_tree.engine.ancestors import parents_of
from family_tree.engine.cancellation import Deadline
from family_tree.engine.guard import EdgeMutationGuard
from family_tree.engine.relatedness import RelatednessChecker, RelatednessEvidence
from family_tree.engine.tree_builder import AncestryTree, build_ancestry, to_members, to_nested

__all__ = [
    "AncestryTree",
    "Deadline",
    "EdgeMutationGuard",
    "RelatednessChecker",
    "RelatednessEvidence",
    "build_ancestry",
    "parents_of",
    "to_members",
    "to_nested",
]
