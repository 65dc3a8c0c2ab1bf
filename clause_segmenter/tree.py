"""Constituency trees stored as a flat node arena.

Nodes are addressed by their index in ``ConstituencyTree.nodes``. Parents
refer to children and children to their parent by index only, and the arena
is filled in pre-order, so iterating over the indices is a pre-order
traversal.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Union

from nltk import Tree

NULL_ELEMENT_TAG = "-NONE-"


@dataclass
class TreeNode:
    """A node of a constituency tree.

    Leaves carry the surface form of their token as ``tag``. ``span`` is the
    half-open interval of leaf indices covered by the node, or None for nodes
    collapsed out of the leaf sequence (null elements).
    """

    tag: str
    span: Optional[tuple[int, int]] = None
    parent: Optional[int] = None
    children: list[int] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


class ConstituencyTree:
    """Arena representation of a parsed sentence."""

    def __init__(self, nodes: list[TreeNode], leaves: list[int]):
        """Initialize the tree.

        Args:
            nodes: Nodes in pre-order; index 0 is the root
            leaves: Node indices of the leaves in sentence order, excluding
                leaves of null elements
        """
        self.nodes = nodes
        self.leaves = leaves

    @classmethod
    def from_nltk(cls, tree: Union[Tree, str]) -> "ConstituencyTree":
        """Build the arena from an nltk tree."""
        nodes: list[TreeNode] = []
        leaves: list[int] = []

        # (subtree, parent index, inside a null element)
        stack: list[tuple[Union[Tree, str], Optional[int], bool]] = [(tree, None, False)]
        while stack:
            subtree, parent, is_null = stack.pop()
            index = len(nodes)
            if isinstance(subtree, Tree):
                tag = subtree.label()
                nodes.append(TreeNode(tag=tag, parent=parent))
                is_null = is_null or tag == NULL_ELEMENT_TAG
                for child in reversed(subtree):
                    stack.append((child, index, is_null))
            else:
                nodes.append(TreeNode(tag=str(subtree), parent=parent))
                if not is_null:
                    nodes[index].span = (len(leaves), len(leaves) + 1)
                    leaves.append(index)
            if parent is not None:
                nodes[parent].children.append(index)

        # Children precede their parents in reverse pre-order
        for node in reversed(nodes):
            if node.is_leaf:
                continue
            child_spans = [nodes[c].span for c in node.children if nodes[c].span is not None]
            if child_spans:
                node.span = (min(s[0] for s in child_spans), max(s[1] for s in child_spans))

        return cls(nodes, leaves)

    @classmethod
    def from_bracketed(cls, text: str) -> "ConstituencyTree":
        """Build the arena from a Penn Treebank bracketed string."""
        return cls.from_nltk(Tree.fromstring(text))

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def num_leaves(self) -> int:
        return len(self.leaves)

    def preorder(self) -> Iterator[int]:
        return iter(range(len(self.nodes)))

    def leaf_label(self, leaf_index: int) -> str:
        """Surface form of the leaf at position ``leaf_index`` of the sentence."""
        return self.nodes[self.leaves[leaf_index]].tag

    def parent(self, node_index: int) -> Optional[int]:
        return self.nodes[node_index].parent

    def relabel_leaves(self, labels: Sequence[str]) -> None:
        """Replace the surface forms of all leaves, in sentence order.

        Raises:
            ValueError: If the number of labels differs from the leaf count
        """
        if len(labels) != len(self.leaves):
            raise ValueError(
                f"Tree has {len(self.leaves)} leaves but {len(labels)} labels were given"
            )
        for node_index, label in zip(self.leaves, labels):
            self.nodes[node_index].tag = label
