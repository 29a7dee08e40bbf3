"""
Data model for aggregated package records.

AggregatedPackage is what the cache stores and what listings return.
OperationOutcome is what update/uninstall return to the caller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple


class Category(Enum):
    """Functional category of a package, derived from its rpm group."""
    MANUAL = "Manual"
    DESKTOP_ENVIRONMENT = "DesktopEnvironment"
    SYSTEM = "System"
    LIBRARY = "Library"
    DEVELOPMENT = "Development"
    MULTIMEDIA = "Multimedia"
    OFFICE = "Office"
    GAMES = "Games"
    UTILITY = "Utility"
    NETWORK = "Network"
    SECURITY = "Security"
    OTHER_APPLICATION = "OtherApplication"
    UNKNOWN = "Unknown"

    @classmethod
    def from_value(cls, value: str) -> 'Category':
        """Map a stored value back to a Category, Unknown if unrecognized."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class RemoveMode(Enum):
    """How a package should be removed."""
    SAFE = "safe"                    # dnf remove, dependencies honored
    FORCE = "force"                  # rpm -e --nodeps
    DRY_RUN_SAFE = "dry-run-safe"
    DRY_RUN_FORCE = "dry-run-force"

    @property
    def is_dry_run(self) -> bool:
        return self in (RemoveMode.DRY_RUN_SAFE, RemoveMode.DRY_RUN_FORCE)

    @property
    def privileged(self) -> bool:
        return not self.is_dry_run


@dataclass(frozen=True)
class AggregatedPackage:
    """One user-installed package with its direct dependencies.

    Use build() to construct: it sorts and deduplicates dependencies and
    drops self references.
    """
    name: str
    category: Category = Category.UNKNOWN
    dependencies: Tuple[str, ...] = ()

    @classmethod
    def build(cls, name: str, category: Category = Category.UNKNOWN,
              dependencies: Iterable[str] = ()) -> 'AggregatedPackage':
        deps = sorted({d for d in dependencies if d and d != name})
        return cls(name=name, category=category, dependencies=tuple(deps))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'category': self.category.value,
            'dependencies': list(self.dependencies),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AggregatedPackage':
        """Rebuild a record from its to_dict() form.

        Raises:
            KeyError: 'name' is missing
            TypeError: fields have the wrong shape
        """
        name = data['name']
        if not isinstance(name, str) or not name:
            raise TypeError(f"invalid package name: {name!r}")
        deps = data.get('dependencies', [])
        if not isinstance(deps, list):
            raise TypeError(f"dependencies of {name} must be a list")
        return cls.build(
            name,
            Category.from_value(data.get('category', Category.UNKNOWN.value)),
            (str(d) for d in deps),
        )


@dataclass
class OperationOutcome:
    """Result of a privileged (or dry-run) package operation."""
    success: bool
    message: str
    details: Optional[str] = None
