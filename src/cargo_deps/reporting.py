"""
Report rendering for scanned dependency records.

Each encoding is an order-preserving transcription of the record list,
followed by a one-line count summary.
"""

import json
from typing import Callable, Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from .dependency import DependencyRecord

SUPPORTED_FORMATS = ("json", "csv", "md", "markdown")

CSV_HEADER = "project,section,name,version"
MARKDOWN_HEADER = "| Project | Section | Dependency | Version |"
MARKDOWN_RULE = "|---------|---------|------------|---------|"


class UnsupportedFormatError(ValueError):
    """Raised for an output format selector that has no renderer."""

    def __init__(self, output_format: str):
        self.output_format = output_format
        super().__init__(
            f"Unsupported format: '{output_format}'. Use 'json', 'csv', or 'markdown'."
        )


def summary_line(records: Sequence[DependencyRecord]) -> str:
    return f"found {len(records)} deps !"


def render_json(records: Sequence[DependencyRecord]) -> List[str]:
    """Pretty-printed JSON array of record objects."""
    payload = json.dumps(
        [record.to_dict() for record in records], indent=2, ensure_ascii=False
    )
    return [payload]


def render_csv(records: Sequence[DependencyRecord]) -> List[str]:
    """Comma-joined rows without quoting; values are simple identifiers."""
    lines = [CSV_HEADER]
    for record in records:
        lines.append(
            f"{record.project},{record.section},{record.name},{record.version}"
        )
    return lines


def render_markdown(records: Sequence[DependencyRecord]) -> List[str]:
    lines = [MARKDOWN_HEADER, MARKDOWN_RULE]
    for record in records:
        lines.append(
            f"| `{record.project}` | `{record.section}` "
            f"| `{record.name}` | `{record.version}` |"
        )
    return lines


_RENDERERS: Dict[str, Callable[[Sequence[DependencyRecord]], List[str]]] = {
    "json": render_json,
    "csv": render_csv,
    "md": render_markdown,
    "markdown": render_markdown,
}


def render_report(records: Sequence[DependencyRecord], output_format: str) -> str:
    """
    Render records in the selected format.

    Args:
        records: Records in accumulation order
        output_format: One of ``json``, ``csv``, ``md``, ``markdown``

    Returns:
        str: The report, newline terminated, ending with the count summary

    Raises:
        UnsupportedFormatError: If the selector is not recognised
    """
    renderer = _RENDERERS.get(output_format)
    if renderer is None:
        raise UnsupportedFormatError(output_format)

    lines = renderer(records)
    lines.append(summary_line(records))
    return "\n".join(lines) + "\n"


class ScanReporter:
    """Prints a human-readable scan summary next to the rendered report."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def print_summary(
        self,
        records: Sequence[DependencyRecord],
        manifest_count: int,
        skipped: Sequence[str],
    ) -> None:
        """
        Print per-section counts and any skipped manifests.

        Args:
            records: Records produced by the scan
            manifest_count: Number of distinct manifests visited
            skipped: Manifests that could not be read or parsed
        """
        by_section: Dict[str, int] = {}
        for record in records:
            by_section[record.section] = by_section.get(record.section, 0) + 1

        table = Table(title="📊 Scan Summary", box=box.ROUNDED, title_style="bold cyan")
        table.add_column("Section", style="bold")
        table.add_column("Dependencies", justify="right")
        for section, count in by_section.items():
            table.add_row(section, str(count))
        table.add_row("[dim]manifests[/dim]", str(manifest_count))

        self.console.print(table)

        if skipped:
            self.console.print(
                f"⚠️  Skipped {len(skipped)} unreadable or malformed manifest(s):",
                style="yellow",
            )
            for project in skipped:
                self.console.print(f"  • {project}", style="yellow")
