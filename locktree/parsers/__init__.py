import os
from typing import List, Optional, Tuple

from locktree.core.exceptions import MalformedInput
from locktree.core.model import PackageRecord
from .base import LockParser
from .cargo import CargoLockParser
from .python import PoetryLockParser
from .ruby import GemfileLockParser

# Detection order matters: Cargo.lock matches any text holding [[package]]
CARGO = CargoLockParser()

PARSERS = [
    GemfileLockParser(),
    PoetryLockParser(),
    CARGO,
]


def detect_parser(text: str) -> Optional[LockParser]:
    """Returns the parser whose format the pasted text looks like."""
    for parser in PARSERS:
        if parser.detect_text(text):
            return parser

    return None


def detect_lock_file(path: str = ".") -> Optional[Tuple[LockParser, str]]:
    """Checks files in a directory and returns the parser and the lock file it reads."""
    files = os.listdir(path)

    for parser in PARSERS:
        if parser.detect(files):
            for lock_file in parser.lock_files:
                if lock_file in files:
                    return parser, os.path.join(path, lock_file)

    return None


def parse_lock_text(text: str, parser: Optional[LockParser] = None) -> Tuple[LockParser, List[PackageRecord]]:
    if parser is None:
        if not text.strip():
            # An empty Cargo.lock is a valid, empty lock file
            return CARGO, []

        parser = detect_parser(text)
        if parser is None:
            raise MalformedInput("Unrecognized lock file format (expected Cargo.lock, Gemfile.lock or poetry.lock)")

    return parser, parser.parse(text)
