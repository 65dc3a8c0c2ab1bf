"""Detection of clause boundaries in constituency trees.

A boundary is placed before and after every clause of a sentence, using the
clause tags of the Penn Treebank bracketing guidelines. Clauses introduced
by a relative pronoun are not closed at the pronoun so that they stay
attached to the clause they modify.
"""

import re
from enum import Enum

from .tokens import OPENING_QUOTE
from .tree import ConstituencyTree, TreeNode

CLAUSE_INDICATORS = frozenset({"s", "sbar", "sbarq", "sinv", "sq", "frag"})

RELATIVE_PRONOUNS = frozenset({"who", "whom", "whose", "which", "that"})

# Children of determiners are never relative pronouns ("that" in "that book")
NON_RELATIVE_PRONOUN_TAG = "dt"

OPENING_BRACKET_LABEL = re.compile(r"-l.b-")


class NodeKind(Enum):
    CLAUSE = "clause"
    DETERMINER = "determiner"
    OTHER = "other"


def node_kind(node: TreeNode) -> NodeKind:
    tag = node.tag.lower()
    if not node.is_leaf and tag in CLAUSE_INDICATORS:
        return NodeKind.CLAUSE
    if tag == NON_RELATIVE_PRONOUN_TAG:
        return NodeKind.DETERMINER
    return NodeKind.OTHER


def _opens_clause(label: str) -> bool:
    label = label.lower()
    return label == OPENING_QUOTE or OPENING_BRACKET_LABEL.fullmatch(label) is not None


class ClauseBoundaryVisitor:
    """Single pre-order pass marking clause boundaries.

    ``boundaries[i]`` is True when a clause boundary falls right after leaf
    ``i``. The pass also collects the children of determiners, which are
    exempt from the relative pronoun rule applied afterwards.
    """

    def __init__(self, tree: ConstituencyTree):
        self.tree = tree
        self.boundaries = [False] * tree.num_leaves
        if self.boundaries:
            self.boundaries[-1] = True
        self.non_relative_pronouns: set[int] = set()
        self._handlers = {
            NodeKind.CLAUSE: self.visit_clause,
            NodeKind.DETERMINER: self.visit_determiner,
            NodeKind.OTHER: self.visit_other,
        }

    def visit(self, node_index: int) -> None:
        node = self.tree.nodes[node_index]
        if node.span is None:
            return
        self._handlers[node_kind(node)](node)

    def visit_clause(self, node: TreeNode) -> None:
        self.mark_start(node, True)
        self.mark_end(node, True)

    def visit_determiner(self, node: TreeNode) -> None:
        self.non_relative_pronouns.update(node.children)

    def visit_other(self, node: TreeNode) -> None:
        pass

    def mark_start(self, node: TreeNode, value: bool) -> None:
        """Set the boundary before the node, in front of opening quotes and brackets."""
        start = node.span[0]
        if start > 0:
            begin = start
            while begin > 1 and _opens_clause(self.tree.leaf_label(begin - 1)):
                begin -= 1
            self.boundaries[begin - 1] = value

    def mark_end(self, node: TreeNode, value: bool) -> None:
        self.boundaries[node.span[1] - 1] = value

    def suppress_relative_clause_ends(self) -> None:
        """Clear the boundary after each relative pronoun that is not a determiner."""
        for leaf_position, node_index in enumerate(self.tree.leaves):
            if self.tree.leaf_label(leaf_position).lower() not in RELATIVE_PRONOUNS:
                continue
            if node_index in self.non_relative_pronouns:
                continue
            parent = self.tree.parent(node_index)
            if parent is not None and self.tree.nodes[parent].span is not None:
                self.mark_end(self.tree.nodes[parent], False)

    def run(self) -> list[bool]:
        for node_index in self.tree.preorder():
            self.visit(node_index)
        self.suppress_relative_clause_ends()
        return self.boundaries


def detect_clause_boundaries(tree: ConstituencyTree) -> list[bool]:
    """Compute the clause boundary flag of every leaf of ``tree``.

    The last leaf always ends a clause. Nodes without a span are ignored.

    Args:
        tree: Constituency tree of one sentence

    Returns:
        One flag per leaf; True if a clause boundary follows the leaf
    """
    return ClauseBoundaryVisitor(tree).run()
