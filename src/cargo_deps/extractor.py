"""
Dependency extraction from parsed Cargo manifests.

Decides which declared dependency entries are external (registry or git)
and which are local (``path``) or inherited from the workspace
(``workspace = true``), and turns every external entry into a
:class:`DependencyRecord`.
"""

from typing import Any, List, Mapping, Optional

from .dependency import UNKNOWN_VERSION, DependencyRecord

# Scanned at the top level of every manifest, in this order
DEPENDENCY_SECTIONS = ("dependencies", "dev-dependencies", "build-dependencies")
WORKSPACE_SECTION = "workspace.dependencies"

# Keys looked up, in order, for the display version of a table declaration
VERSION_KEYS = ("version", "git")


def _as_table(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def is_local(declaration: Any) -> bool:
    """Return True for a table declaration carrying a ``path`` key."""
    table = _as_table(declaration)
    return table is not None and "path" in table


def is_workspace_inherited(declaration: Any) -> bool:
    """Return True for a table declaration with ``workspace = true``."""
    table = _as_table(declaration)
    return table is not None and _as_bool(table.get("workspace")) is True


def resolve_version(declaration: Any) -> str:
    """
    Resolve the display version of one declaration.

    A bare string is the version itself. For a table the first present key
    of ``version`` then ``git`` wins, provided it holds a string. Everything
    else, empty strings included, resolves to ``"unknown"``.
    """
    version = _as_str(declaration)
    if version is not None:
        return version or UNKNOWN_VERSION

    table = _as_table(declaration)
    if table is not None:
        for key in VERSION_KEYS:
            if key in table:
                return _as_str(table[key]) or UNKNOWN_VERSION

    return UNKNOWN_VERSION


def extract(project_id: str, section_name: str, section_value: Any) -> List[DependencyRecord]:
    """
    Extract external dependency records from one dependency section.

    Args:
        project_id: Identifier of the manifest the section belongs to
        section_name: Section label copied onto every record
        section_value: The section's parsed value; anything other than a
            table yields no records

    Returns:
        List[DependencyRecord]: One record per external entry, in table order
    """
    table = _as_table(section_value)
    if table is None:
        return []

    records = []
    for name, declaration in table.items():
        if is_local(declaration) or is_workspace_inherited(declaration):
            continue

        records.append(
            DependencyRecord(
                project=project_id,
                section=section_name,
                name=name,
                version=resolve_version(declaration),
            )
        )

    return records


def extract_manifest(project_id: str, manifest: Any) -> List[DependencyRecord]:
    """Extract records from every recognised section of a parsed manifest."""
    root = _as_table(manifest)
    if root is None:
        return []

    records: List[DependencyRecord] = []
    for section in DEPENDENCY_SECTIONS:
        if section in root:
            records.extend(extract(project_id, section, root[section]))

    workspace = _as_table(root.get("workspace"))
    if workspace is not None and "dependencies" in workspace:
        records.extend(
            extract(project_id, WORKSPACE_SECTION, workspace["dependencies"])
        )

    return records
