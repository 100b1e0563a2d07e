"""
Whole-tree aggregation of dependency records.

Deduplicates manifests by project identifier (first occurrence wins) and
accumulates the extracted records in discovery order. A manifest that cannot
be read or parsed is reported and skipped; it never aborts the scan.
"""

import time
import uuid
from pathlib import Path
from typing import Any, List, Optional, Set, Union

from .cli_config import ComprehensiveConfig, get_config
from .dependency import DependencyRecord
from .discovery import iter_manifests
from .extractor import extract_manifest
from .parsers import load_manifest
from .error_handling import sanitize_message
from .structured_logging import (
    log_manifest_processed,
    log_manifest_skipped,
    log_scan_complete,
    log_scan_start,
)


class DependencyAggregator:
    """Visited-set plus ordered record list for one scan."""

    def __init__(self, config: Optional[ComprehensiveConfig] = None):
        self.config = config or get_config()
        self._visited: Set[str] = set()
        self._records: List[DependencyRecord] = []
        self._skipped: List[str] = []

    @property
    def records(self) -> List[DependencyRecord]:
        return list(self._records)

    @property
    def skipped(self) -> List[str]:
        """Projects whose manifest could not be read or parsed."""
        return list(self._skipped)

    @property
    def manifest_count(self) -> int:
        return len(self._visited)

    def visit(self, project_id: str) -> bool:
        """Mark ``project_id`` as seen; False if it already was."""
        if project_id in self._visited:
            return False
        self._visited.add(project_id)
        return True

    def add_parsed(self, project_id: str, manifest: Any) -> int:
        """
        Add the records of an already-parsed manifest.

        Returns:
            int: Number of records appended (0 for a repeat project)
        """
        if not self.visit(project_id):
            return 0
        return self._append(project_id, manifest)

    def add_manifest(self, path: Union[str, Path]) -> int:
        """
        Read, parse and extract one manifest file.

        Returns:
            int: Number of records appended (0 for a repeat or skipped project)
        """
        project_id = str(path)
        if not self.visit(project_id):
            return 0

        try:
            manifest = load_manifest(path, self.config)
        except ValueError as e:
            self._skipped.append(project_id)
            log_manifest_skipped(project_id, sanitize_message(str(e)))
            return 0

        return self._append(project_id, manifest)

    def _append(self, project_id: str, manifest: Any) -> int:
        records = extract_manifest(project_id, manifest)
        self._records.extend(records)
        log_manifest_processed(project_id, len(records))
        return len(records)


def scan_tree(
    root: Union[str, Path], config: Optional[ComprehensiveConfig] = None
) -> DependencyAggregator:
    """
    Scan every Cargo.toml under ``root``.

    Args:
        root: Directory to scan
        config: Scan configuration (global config if None)

    Returns:
        DependencyAggregator: Holds the records in discovery order
    """
    config = config or get_config()
    aggregator = DependencyAggregator(config)

    scan_id = f"scan_{uuid.uuid4().hex[:12]}"
    started = time.monotonic()
    log_scan_start(scan_id, str(root))

    for path in iter_manifests(
        root,
        exclude_dirs=config.scan.exclude_dirs,
        follow_symlinks=config.scan.follow_symlinks,
    ):
        aggregator.add_manifest(path)

    log_scan_complete(
        int((time.monotonic() - started) * 1000),
        aggregator.manifest_count,
        len(aggregator.records),
        len(aggregator.skipped),
    )
    return aggregator
