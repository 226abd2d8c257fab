import os
import logging

LOG_FILE = os.getenv("LOCKTREE_LOG_FILE", "debug.log")
LOG_LEVEL = os.getenv("LOCKTREE_LOG_LEVEL", "DEBUG").upper()


def configure_logging() -> None:
    """File logging, the terminal belongs to the TUI."""
    logging.basicConfig(
        filename=LOG_FILE,
        level=getattr(logging, LOG_LEVEL, logging.DEBUG),
        filemode="w",
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
