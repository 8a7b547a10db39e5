"""Tree traversal strategies for DazzlePrefs.

Traversers implement different algorithms for walking through trees.
They work with any TreeAdapter: removal walks post-order, flushing walks
breadth-first and subtree export walks depth-first pre-order.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional, Set, Deque, Tuple
from collections import deque
from .node import TreeNode
from .adapter import TreeAdapter


class TreeTraverser(ABC):
    """Abstract base class for tree traversal strategies.

    Traversers implement the algorithms for walking through trees in
    different orders. They are independent of the tree structure,
    working through the TreeAdapter.
    """

    def __init__(self, adapter: TreeAdapter):
        """Initialize traverser with an adapter.

        Args:
            adapter: TreeAdapter for navigating the tree
        """
        self.adapter = adapter

    @abstractmethod
    def traverse(self,
                 root: TreeNode,
                 max_depth: Optional[int] = None) -> Iterator[Tuple[TreeNode, int]]:
        """Traverse the tree starting from root.

        Args:
            root: Starting node for traversal
            max_depth: Maximum depth to traverse (None = unlimited)

        Yields:
            Tuples of (node, depth) where depth is relative to root
        """
        pass

    def _should_explore(self, depth: int, max_depth: Optional[int]) -> bool:
        """Check if children of node at given depth should be explored."""
        if max_depth is None:
            return True
        return depth < max_depth


class BreadthFirstTraverser(TreeTraverser):
    """Breadth-first (level-order) traversal strategy.

    Visits all nodes at depth N before visiting nodes at depth N+1.
    Ancestors are therefore always visited before their descendants.
    """

    def traverse(self,
                 root: TreeNode,
                 max_depth: Optional[int] = None) -> Iterator[Tuple[TreeNode, int]]:
        queue: Deque[Tuple[TreeNode, int]] = deque([(root, 0)])
        visited: Set[str] = set()

        while queue:
            node, depth = queue.popleft()

            node_id = node.identifier()
            if node_id in visited:
                continue
            visited.add(node_id)

            yield (node, depth)

            if self._should_explore(depth, max_depth) and not node.is_leaf():
                for child in self.adapter.get_children(node):
                    queue.append((child, depth + 1))


class DepthFirstPreOrderTraverser(TreeTraverser):
    """Depth-first pre-order traversal strategy.

    Visits parent before children. Good for copying trees or for
    emitting nested documents.
    """

    def traverse(self,
                 root: TreeNode,
                 max_depth: Optional[int] = None) -> Iterator[Tuple[TreeNode, int]]:
        visited: Set[str] = set()

        def _traverse_recursive(node: TreeNode, depth: int) -> Iterator[Tuple[TreeNode, int]]:
            node_id = node.identifier()
            if node_id in visited:
                return
            visited.add(node_id)

            # Yield parent first (pre-order)
            yield (node, depth)

            if self._should_explore(depth, max_depth) and not node.is_leaf():
                for child in self.adapter.get_children(node):
                    yield from _traverse_recursive(child, depth + 1)

        yield from _traverse_recursive(root, 0)


class DepthFirstPostOrderTraverser(TreeTraverser):
    """Depth-first post-order traversal strategy.

    Visits children before parent. Processes nodes after their entire
    subtree has been processed. Good for deletion.
    """

    def traverse(self,
                 root: TreeNode,
                 max_depth: Optional[int] = None) -> Iterator[Tuple[TreeNode, int]]:
        visited: Set[str] = set()

        def _traverse_recursive(node: TreeNode, depth: int) -> Iterator[Tuple[TreeNode, int]]:
            node_id = node.identifier()
            if node_id in visited:
                return
            visited.add(node_id)

            if self._should_explore(depth, max_depth) and not node.is_leaf():
                for child in self.adapter.get_children(node):
                    yield from _traverse_recursive(child, depth + 1)

            # Then yield parent (post-order)
            yield (node, depth)

        yield from _traverse_recursive(root, 0)


def create_traverser(strategy: str, adapter: TreeAdapter) -> TreeTraverser:
    """Create a traverser instance by strategy name.

    Args:
        strategy: Name of traversal strategy (bfs, dfs_pre, dfs_post)
        adapter: TreeAdapter for the tree structure

    Returns:
        TreeTraverser instance

    Raises:
        ValueError: If strategy name is not recognized
    """
    strategies = {
        'bfs': BreadthFirstTraverser,
        'breadth_first': BreadthFirstTraverser,
        'dfs_pre': DepthFirstPreOrderTraverser,
        'depth_first_pre': DepthFirstPreOrderTraverser,
        'dfs_post': DepthFirstPostOrderTraverser,
        'depth_first_post': DepthFirstPostOrderTraverser,
    }

    strategy_lower = strategy.lower()
    if strategy_lower not in strategies:
        raise ValueError(
            f"Unknown traversal strategy: {strategy}. "
            f"Choose from: {', '.join(strategies.keys())}"
        )

    return strategies[strategy_lower](adapter)
