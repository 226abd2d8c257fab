import re
import sys
import logging
from typing import Any, Dict, List

from locktree.core.exceptions import MalformedInput
from locktree.core.model import DependencyRef, Package, PackageRecord
from locktree.parsers.base import LockParser

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


def load_toml(text: str, file_name: str) -> Dict[str, Any]:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise MalformedInput(f"Invalid {file_name}: {e}") from e


def locked_packages(data: Dict[str, Any], file_name: str) -> List[Dict[str, Any]]:
    """Returns the [[package]] tables, checking each has a name and a version."""
    packages = data.get("package", [])
    if not isinstance(packages, list):
        raise MalformedInput(f"Invalid {file_name}: 'package' must be an array of tables")

    for pos, pkg in enumerate(packages, start=1):
        if not isinstance(pkg, dict):
            raise MalformedInput(f"Invalid {file_name}: package #{pos} is not a table")
        for field_name in ("name", "version"):
            if not isinstance(pkg.get(field_name), str) or not pkg[field_name]:
                raise MalformedInput(f"Invalid {file_name}: package #{pos} has no {field_name}")

    return packages


class CargoLockParser(LockParser):
    @property
    def name(self) -> str:
        return "Cargo (Rust)"

    @property
    def lock_files(self) -> list[str]:
        return ["Cargo.lock"]

    def detect_text(self, text: str) -> bool:
        patterns = (
            r"^# This file is automatically @generated by Cargo",
            r"^\[\[package\]\]",
        )
        return any(re.search(p, text, re.MULTILINE) for p in patterns)

    def parse(self, text: str) -> List[PackageRecord]:
        logging.debug("Parsing Cargo.lock...")
        data = load_toml(text, "Cargo.lock")
        packages = locked_packages(data, "Cargo.lock")

        by_name: Dict[str, List[Package]] = {}
        locked = []
        for pkg in packages:
            package = Package(pkg["name"], pkg["version"])
            by_name.setdefault(package.name, []).append(package)
            locked.append((package, pkg.get("dependencies", [])))

        records = []
        for package, dep_entries in locked:
            if not isinstance(dep_entries, list):
                raise MalformedInput(f"Invalid Cargo.lock: dependencies of {package.label} must be an array")

            deps = []
            for dep_entry in dep_entries:
                deps.append(self._parse_dependency(package, dep_entry, by_name))
            records.append(PackageRecord(package, tuple(deps)))

        logging.debug(f"Cargo.lock parsed. {len(records)} packages.")
        return records

    def _parse_dependency(self, owner: Package, entry: Any, by_name: Dict[str, List[Package]]) -> DependencyRef:
        # "name", "name version" or "name version (source)"
        parts = entry.split() if isinstance(entry, str) else []
        if not parts:
            raise MalformedInput(f"Invalid Cargo.lock: bad dependency {entry!r} in {owner.label}")

        dep_name = parts[0]
        if len(parts) >= 2:
            return DependencyRef(dep_name, parts[1])

        target = self._resolve_by_name(owner, dep_name, by_name)
        return DependencyRef(target.name, target.version)
