import re
import logging
from typing import Any, Dict, List

from locktree.core.exceptions import MalformedInput
from locktree.core.model import DependencyRef, Package, PackageRecord
from locktree.parsers.base import LockParser
from locktree.parsers.cargo import load_toml, locked_packages


def normalize_name(name: str) -> str:
    """PEP 503 normalisation, poetry.lock mixes spellings between sections."""
    return re.sub(r"[-_.]+", "-", name).lower()


def _may_be_unlocked(constraint: Any) -> bool:
    """Optional or environment-marked dependencies are only locked when they can apply."""
    if isinstance(constraint, dict):
        return bool(constraint.get("optional", False)) or "markers" in constraint
    if isinstance(constraint, list) and constraint:
        return all(_may_be_unlocked(c) for c in constraint)
    return False


class PoetryLockParser(LockParser):
    @property
    def name(self) -> str:
        return "Poetry (Python)"

    @property
    def lock_files(self) -> list[str]:
        return ["poetry.lock"]

    def detect_text(self, text: str) -> bool:
        patterns = (
            r"^# This file is automatically @generated by Poetry",
            r"^content-hash\s*=",
            r"^\[package\.dependencies\]",
        )
        return any(re.search(p, text, re.MULTILINE) for p in patterns)

    def parse(self, text: str) -> List[PackageRecord]:
        logging.debug("Parsing poetry.lock...")
        data = load_toml(text, "poetry.lock")
        packages = locked_packages(data, "poetry.lock")

        by_name: Dict[str, List[Package]] = {}
        locked = []
        for pkg in packages:
            package = Package(pkg["name"], pkg["version"])
            by_name.setdefault(normalize_name(package.name), []).append(package)
            locked.append((package, pkg.get("dependencies", {})))

        records = []
        for package, dep_table in locked:
            if not isinstance(dep_table, dict):
                raise MalformedInput(f"Invalid poetry.lock: dependencies of {package.label} must be a table")

            deps = []
            for dep_name, constraint in dep_table.items():
                key = normalize_name(dep_name)
                if key not in by_name and _may_be_unlocked(constraint):
                    logging.debug(f"Skipping {dep_name} (optional or marked) of {package.label}, not locked.")
                    continue
                target = self._resolve_by_name(package, key, by_name)
                deps.append(DependencyRef(target.name, target.version))
            records.append(PackageRecord(package, tuple(deps)))

        logging.debug(f"poetry.lock parsed. {len(records)} packages.")
        return records
