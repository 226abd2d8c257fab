from dataclasses import dataclass
from typing import Iterable, List, Set

from locktree.core.graph import DependencyGraph, NodeId, build_graph
from locktree.core.model import PackageRecord, TreeNode


def walk(graph: DependencyGraph, roots: Iterable[NodeId]) -> List[TreeNode]:
    """
    Depth-first, pre-order walk from each root.

    A package is expanded the first time the walk reaches it. Any later
    occurrence, under the same root or a later one, becomes a leaf reference.
    With diamonds this means the first parent in traversal order (first
    root, first child, depth first) gets the full subtree.
    """
    visited: Set[NodeId] = set()
    rendered: List[TreeNode] = []

    # (node, list the rendered node is appended to); children are pushed in
    # reverse so they are popped in dependency order
    stack = [(node_id, rendered) for node_id in reversed(list(roots))]

    while stack:
        node_id, siblings = stack.pop()
        package = graph[node_id]

        if node_id in visited:
            siblings.append(TreeNode(package.label, reference=True, package=package))
            continue

        visited.add(node_id)
        node = TreeNode(package.label, package=package)
        siblings.append(node)

        for child_id in reversed(graph.dependencies(node_id)):
            stack.append((child_id, node.children))

    return rendered


@dataclass(frozen=True)
class Tree:
    graph: DependencyGraph
    roots: List[NodeId]

    @classmethod
    def from_records(cls, records: Iterable[PackageRecord]) -> "Tree":
        graph = build_graph(records)
        return cls(graph, graph.roots())

    def render(self) -> List[TreeNode]:
        return walk(self.graph, self.roots)


def dependency_tree(records: Iterable[PackageRecord]) -> Tree:
    return Tree.from_records(records)
