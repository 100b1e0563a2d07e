"""cargo-deps core package.

Scans a directory tree for Cargo.toml manifests and reports every
externally-resolved dependency they declare.
"""

__all__ = [
    "aggregator",
    "extractor",
    "reporting",
]
