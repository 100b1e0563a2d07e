# In src/cargo_deps/dependency.py
from dataclasses import dataclass
from typing import Dict

UNKNOWN_VERSION = "unknown"


@dataclass(frozen=True)
class DependencyRecord:
    """One external dependency declared in a Cargo manifest."""

    project: str
    section: str
    name: str
    version: str = UNKNOWN_VERSION

    def to_dict(self) -> Dict[str, str]:
        """Return the record as a dict in report field order."""
        return {
            "project": self.project,
            "section": self.section,
            "name": self.name,
            "version": self.version,
        }
