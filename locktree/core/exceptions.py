"""Errors raised while turning lock-file text into a dependency tree."""


class LockTreeError(Exception):
    """Base exception for lock-file and graph errors."""
    pass


class MalformedInput(LockTreeError):
    """Raised when the lock-file text cannot be turned into package records."""
    pass


class UnresolvedDependency(LockTreeError):
    """Raised when a dependency names a package that is not in the lock file."""
    def __init__(self, package, dependency):
        self.package = package
        self.dependency = dependency
        super().__init__(
            f"{package.name} {package.version} depends on "
            f"{dependency.name} {dependency.version}, which is not in the lock file"
        )


class AmbiguousDependency(LockTreeError):
    """Raised when more than one package record shares a name and version."""
    def __init__(self, name: str, version: str):
        self.name = name
        self.version = version
        super().__init__(f"Package '{name} {version}' is listed more than once")
