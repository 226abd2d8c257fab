import logging
from typing import List, Optional

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Footer, Header, Label, TextArea, Tree

from locktree.__version__ import __version__
from locktree.core.exceptions import LockTreeError
from locktree.core.model import TreeNode
from locktree.core.tree import dependency_tree
from locktree.parsers import parse_lock_text


class LockTreeApp(App):
    TITLE = "Locktree"
    SUB_TITLE = f"v{__version__}"

    DEFAULT_CSS = """
    Screen { layout: vertical; }

    #info-bar {
        height: 3;
        dock: top;
        background: $surface;
        border-bottom: solid $primary;
        align: left middle;
        padding: 0 1;
    }

    .info-label {
        width: auto;
        height: 1;
        padding: 0 2;
        color: $text;
    }

    #input-pane { width: 2fr; margin: 0 1; }
    #lock-input { height: 1fr; }
    #submit-btn { width: 100%; }

    #output-pane { width: 3fr; margin: 0 1; }
    #error-label { padding: 1; width: 100%; }
    Tree { padding: 1; background: $surface; height: 1fr; }
    """

    BINDINGS = [
        Binding("ctrl+r", "submit", "Render"),
        Binding("q", "quit", "Quit"),
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
        Binding("l", "expand_node", "Expand"),
        Binding("h", "collapse_node", "Collapse"),
        Binding("space", "toggle_node", "Toggle"),
    ]

    format_name: str = "..."
    total_pkgs: int = 0
    root_count: int = 0

    def __init__(self, initial_text: str = "") -> None:
        super().__init__()
        self.initial_text = initial_text
        self.error_message: Optional[str] = None
        self.rendered: List[TreeNode] = []

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal(id="info-bar"):
            yield Label(f"[b]Format:[/b] [cyan]{self.format_name}[/]", id="lbl-format", classes="info-label")
            yield Label(f"[b]Packages:[/b] [blue]{self.total_pkgs}[/]", id="lbl-total", classes="info-label")
            yield Label(f"[b]Roots:[/b] [green]{self.root_count}[/]", id="lbl-roots", classes="info-label")

        with Horizontal(id="main-area"):
            with Vertical(id="input-pane"):
                yield Label("Paste a Cargo.lock, Gemfile.lock or poetry.lock file here:")
                yield TextArea(self.initial_text, id="lock-input")
                yield Button("Submit", variant="primary", id="submit-btn")

            with Vertical(id="output-pane"):
                yield Label("", id="error-label")
                yield Tree("Dependencies", id="dep-tree")

        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#error-label").display = False
        if self.initial_text:
            self.show_lock_text(self.initial_text)

    # --- ACTIONS ---

    def action_submit(self) -> None:
        self.show_lock_text(self.query_one("#lock-input", TextArea).text)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "submit-btn":
            self.action_submit()

    def action_cursor_down(self) -> None:
        self.query_one("#dep-tree", Tree).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#dep-tree", Tree).action_cursor_up()

    def action_expand_node(self) -> None:
        tree = self.query_one("#dep-tree", Tree)
        if tree.cursor_node:
            tree.cursor_node.expand()

    def action_collapse_node(self) -> None:
        tree = self.query_one("#dep-tree", Tree)
        node = tree.cursor_node
        if node:
            if node.is_expanded:
                node.collapse()
            elif node.parent:
                tree.select_node(node.parent)
                node.parent.collapse()

    def action_toggle_node(self) -> None:
        tree = self.query_one("#dep-tree", Tree)
        if tree.cursor_node:
            tree.cursor_node.toggle()

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        node_data = event.node.data
        if node_data and node_data.reference:
            self.notify(f"{node_data.label} is expanded at its first occurrence.", severity="information")

    # --- LOGIC ---

    def show_lock_text(self, text: str) -> None:
        """Parses and renders a lock file; the outcome replaces whatever was shown before."""
        try:
            parser, records = parse_lock_text(text)
            tree = dependency_tree(records)
            rendered = tree.render()
        except LockTreeError as e:
            logging.warning(f"Lock file rejected: {e}")
            self.show_error(str(e))
            return
        except Exception as e:
            logging.exception("Fatal error while building the tree:")
            self.show_error(f"Fatal Error: {e}")
            return

        logging.info(f"{parser.name}: {len(tree.graph)} packages, {len(tree.roots)} roots.")
        self.error_message = None
        self.format_name = parser.name
        self.total_pkgs = len(tree.graph)
        self.root_count = len(tree.roots)
        self.update_dashboard_ui()
        self.render_tree(rendered)

        if not tree.roots and len(tree.graph):
            self.notify("No root packages: every package is part of a dependency cycle.", severity="warning")

    def update_dashboard_ui(self) -> None:
        self.query_one("#lbl-format", Label).update(f"[b]Format:[/b] [cyan]{escape(self.format_name)}[/]")
        self.query_one("#lbl-total", Label).update(f"[b]Packages:[/b] [blue]{self.total_pkgs}[/]")
        self.query_one("#lbl-roots", Label).update(f"[b]Roots:[/b] [green]{self.root_count}[/]")

    def show_error(self, message: str) -> None:
        self.error_message = message
        self.rendered = []
        self.format_name = "..."
        self.total_pkgs = 0
        self.root_count = 0
        self.update_dashboard_ui()

        tree = self.query_one("#dep-tree", Tree)
        tree.clear()
        tree.display = False

        error_label = self.query_one("#error-label", Label)
        error_label.update(f"[bold red]Error:[/]\n{escape(message)}")
        error_label.display = True

    def render_tree(self, nodes: List[TreeNode]) -> None:
        self.rendered = nodes
        self.query_one("#error-label").display = False

        tree = self.query_one("#dep-tree", Tree)
        tree.clear()
        tree.root.label = f"📂 {escape(self.format_name)}"
        tree.root.expand()

        # (widget node, rendered children to add under it), drained without recursion
        stack = [(tree.root, nodes)]
        while stack:
            tree_node, children = stack.pop()
            for child in children:
                safe_name = escape(child.package.name)
                safe_ver = escape(child.package.version)

                if child.reference:
                    tree_node.add_leaf(f"[dim](*) {safe_name} {safe_ver}[/]", data=child)
                    continue

                if not child.children:
                    tree_node.add_leaf(f"[green](•) {safe_name} [dim]{safe_ver}[/]", data=child)
                    continue

                count_suffix = f" [dim]↳[/] {len(child.children)}"
                new_node = tree_node.add(f"[green](•) {safe_name} [dim]{safe_ver}[/]{count_suffix}", data=child)
                stack.append((new_node, child.children))

        tree.display = True
