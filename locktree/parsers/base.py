from abc import ABC, abstractmethod
from typing import Dict, List

from locktree.core.exceptions import MalformedInput
from locktree.core.model import Package, PackageRecord


class LockParser(ABC):
    """Base class inherited by all lock-file parsers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Friendly format name (e.g., Cargo, Bundler, Poetry)."""
        pass

    @property
    @abstractmethod
    def lock_files(self) -> List[str]:
        """Exact filenames this parser reads from disk."""
        pass

    def detect(self, files: List[str]) -> bool:
        """
        Returns True if one of the given filenames is a lock file of this format.
        """
        for lock_file in self.lock_files:
            if lock_file in files:
                return True
        return False

    @abstractmethod
    def detect_text(self, text: str) -> bool:
        """Returns True if pasted text looks like a lock file of this format."""
        pass

    @abstractmethod
    def parse(self, text: str) -> List[PackageRecord]:
        """Turns lock-file text into package records, in file order."""
        pass

    @staticmethod
    def _resolve_by_name(owner: Package, dep_name: str, by_name: Dict[str, List[Package]]) -> Package:
        candidates = by_name.get(dep_name, [])
        if len(candidates) == 1:
            return candidates[0]
        if not candidates:
            raise MalformedInput(f"{owner.label} depends on '{dep_name}', which is not in the lock file")

        versions = ", ".join(p.version for p in candidates)
        raise MalformedInput(
            f"{owner.label} depends on '{dep_name}' without a version, "
            f"but several versions are locked ({versions})"
        )
