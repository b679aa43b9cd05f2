"""Data models for working-area version reconciliation."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class PackageDependency:
    """Parent-framework version declared by one package of the source tree."""
    name: str
    parent_version: str
    mandatory: bool
    path: Optional[str] = None


@dataclass
class Inconsistency:
    """A package disagreeing with the running candidate version."""
    reference: Optional[str]
    reference_version: str
    package: str
    package_version: str

    def describe(self) -> str:
        return (
            f"Inconsistent packages: {self.reference} asks for {self.reference_version},"
            f" {self.package} for {self.package_version}."
        )


@dataclass
class VersionDecision:
    """Outcome of a reconciliation over a source tree."""
    version: Optional[str]
    reference: Optional[str] = None
    packages: List[PackageDependency] = field(default_factory=list)
    inconsistencies: List[Inconsistency] = field(default_factory=list)
    aborted: bool = False
    errors: int = 0

    @property
    def resolved(self) -> bool:
        return bool(self.version) and not self.aborted and not self.errors
