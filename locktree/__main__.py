import argparse
import logging
import sys

from rich.console import Console
from rich.markup import escape

from locktree.config import configure_logging
from locktree.core.exceptions import LockTreeError
from locktree.core.tree import dependency_tree
from locktree.parsers import detect_lock_file, parse_lock_text
from locktree.render import build_rich_tree


def read_lock_text(path):
    if path:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    found = detect_lock_file(".")
    if not found:
        return ""

    parser, lock_file = found
    logging.info(f"Found {lock_file} ({parser.name})")
    with open(lock_file, "r", encoding="utf-8") as f:
        return f.read()


def print_tree(text: str) -> int:
    console = Console()
    try:
        parser, records = parse_lock_text(text)
        nodes = dependency_tree(records).render()
    except LockTreeError as e:
        Console(stderr=True).print(f"[bold red]Error:[/] {escape(str(e))}", highlight=False)
        return 1

    console.print(build_rich_tree(nodes, parser.name))
    return 0


def main(argv=None):
    """ Entrypoint when is installed via pip """
    parser = argparse.ArgumentParser(
        prog="locktree",
        description="Show the dependency tree of a Cargo.lock, Gemfile.lock or poetry.lock file.",
    )
    parser.add_argument("path", nargs="?", help="lock file to open (default: the one in the current directory)")
    parser.add_argument("--print", dest="print_only", action="store_true",
                        help="print the tree to the terminal instead of opening the browser")
    args = parser.parse_args(argv)

    configure_logging()

    try:
        text = read_lock_text(args.path)
    except OSError as e:
        logging.error(f"Cannot read lock file: {e}")
        print(f"locktree: {e}", file=sys.stderr)
        return 1

    if args.print_only:
        return print_tree(text)

    from locktree.app import LockTreeApp

    app = LockTreeApp(initial_text=text)
    app.run()
    return 0


# Development mode
if __name__ == "__main__":
    sys.exit(main())
