import re
import logging
from typing import Dict, List

from locktree.core.model import DependencyRef, Package, PackageRecord
from locktree.parsers.base import LockParser


class GemfileLockParser(LockParser):
    @property
    def name(self) -> str:
        return "Bundler (Ruby)"

    @property
    def lock_files(self) -> list[str]:
        return ["Gemfile.lock"]

    def detect_text(self, text: str) -> bool:
        return re.search(r"^ {2}specs:\s*$", text, re.MULTILINE) is not None

    def parse(self, text: str) -> List[PackageRecord]:
        logging.debug("Parsing Gemfile.lock...")

        packages: List[Package] = []
        adjacency: Dict[Package, List[str]] = {}  # { rails 7.0.0: ["actionpack", "activesupport"] }

        # Get name (version), version may carry a platform suffix
        re_spec = re.compile(r'^ {4}([a-zA-Z0-9\-_.]+) \(([^)]+)\)\s*$')

        # Get dependency
        re_dep = re.compile(r'^ {6}([a-zA-Z0-9\-_.]+)')

        # Parser state
        current_parent = None
        in_gem_block = False

        for line in text.splitlines():
            if line.strip() == "specs:":
                in_gem_block = True
                continue

            if in_gem_block and line.strip() and not line.startswith(" "):
                in_gem_block = False
                current_parent = None

            if in_gem_block:
                match_spec = re_spec.match(line)
                if match_spec:
                    current_parent = Package(match_spec.group(1), match_spec.group(2))
                    if current_parent not in adjacency:
                        packages.append(current_parent)
                        adjacency[current_parent] = []
                    continue

                match_dep = re_dep.match(line)
                if match_dep and current_parent:
                    adjacency[current_parent].append(match_dep.group(1))

        logging.debug(f"Parser done. {len(packages)} gems found.")

        by_name: Dict[str, List[Package]] = {}
        for package in packages:
            by_name.setdefault(package.name, []).append(package)

        records = []
        for package in packages:
            deps = []
            for dep_name in adjacency[package]:
                # Platform-specific and optional gems are not always part of the specs
                if dep_name not in by_name:
                    logging.debug(f"Skipping {dep_name} (required by {package.label}), not locked.")
                    continue
                # One entry per platform build of the same gem
                for target in by_name[dep_name]:
                    deps.append(DependencyRef(target.name, target.version))
            records.append(PackageRecord(package, tuple(deps)))

        return records
