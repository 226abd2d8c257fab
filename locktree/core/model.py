from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Package:
    name: str
    version: str

    @property
    def label(self) -> str:
        return f"{self.name} {self.version}"

    @property
    def key(self) -> Tuple[str, str]:
        return (self.name, self.version)


@dataclass(frozen=True)
class DependencyRef:
    """An already resolved reference to another locked package."""
    name: str
    version: str

    @property
    def key(self) -> Tuple[str, str]:
        return (self.name, self.version)


@dataclass(frozen=True)
class PackageRecord:
    package: Package
    dependencies: Tuple[DependencyRef, ...] = ()


@dataclass
class TreeNode:
    label: str
    children: List['TreeNode'] = field(default_factory=list)

    # Set on every occurrence after the first one in a walk
    reference: bool = False

    package: Optional[Package] = None
