from typing import List

from rich.markup import escape
from rich.tree import Tree as RichTree

from locktree.core.model import TreeNode

REFERENCE_MARK = " (*)"


def build_rich_tree(nodes: List[TreeNode], title: str) -> RichTree:
    """Plain terminal rendering; repeated packages are marked with (*)."""
    tree = RichTree(f"[bold]{escape(title)}[/]")

    # (rich node, rendered children to add under it); each list is added whole so
    # sibling order is kept whatever order the stack is drained in
    stack = [(tree, nodes)]
    while stack:
        parent, children = stack.pop()
        for child in children:
            if child.reference:
                parent.add(f"{escape(child.label)}[dim]{REFERENCE_MARK}[/]")
            else:
                stack.append((parent.add(escape(child.label)), child.children))

    return tree
