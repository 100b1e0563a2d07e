"""
Shared fixtures for cargo-deps tests.
"""

from pathlib import Path

import pytest

from cargo_deps.cli_config import reset_config
from cargo_deps.error_handling import setup_error_handling
from cargo_deps.structured_logging import configure_logging


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep config discovery away from the developer's real files."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    reset_config()
    setup_error_handling()
    configure_logging("WARNING")
    yield
    reset_config()
    configure_logging("WARNING")


@pytest.fixture
def temp_dir(tmp_path):
    """Scratch directory separate from the fake home."""
    work = tmp_path / "work"
    work.mkdir()
    return work


@pytest.fixture
def write_manifest():
    """Return a helper writing a Cargo.toml into a (new) directory."""

    def _write(directory: Path, content: str) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        manifest = directory / "Cargo.toml"
        manifest.write_text(content, encoding="utf-8")
        return manifest

    return _write


SAMPLE_APP_MANIFEST = """
[package]
name = "app"
version = "0.1.0"

[dependencies]
serde = "1.0"
local_lib = { path = "../local_lib" }
tokio = { version = "1.28", features = ["full"] }

[dev-dependencies]
mockall = "0.11"

[build-dependencies]
cc = { git = "https://github.com/rust-lang/cc-rs" }
"""

SAMPLE_LIB_MANIFEST = """
[package]
name = "local_lib"
version = "0.1.0"

[dependencies]
anyhow = { workspace = true }
thiserror = "1"
"""

SAMPLE_WORKSPACE_MANIFEST = """
[workspace]
members = ["app", "local_lib"]

[workspace.dependencies]
anyhow = "1.0.71"
shared = { path = "shared" }
"""


@pytest.fixture
def sample_workspace(temp_dir, write_manifest):
    """A small workspace: root manifest plus two member crates."""
    write_manifest(temp_dir, SAMPLE_WORKSPACE_MANIFEST)
    write_manifest(temp_dir / "app", SAMPLE_APP_MANIFEST)
    write_manifest(temp_dir / "local_lib", SAMPLE_LIB_MANIFEST)
    return temp_dir
