"""cqlpy: interactive CQL shell for Cassandra-compatible clusters."""
from __future__ import annotations
from importlib import metadata
import pathlib
import re

PACKAGE_NAME = "cqlpy"
_VERSION_RE = re.compile(r'^version\s*=\s*"([^"]+)"', re.MULTILINE)


def _source_tree_version() -> str | None:
    # Editable checkouts without installed metadata fall back to pyproject.toml
    pyproject = pathlib.Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        text = pyproject.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None
    m = _VERSION_RE.search(text)
    return m.group(1) if m else None


try:
    __version__ = metadata.version(PACKAGE_NAME)
except metadata.PackageNotFoundError:
    __version__ = _source_tree_version() or "0.0.0.dev0"

__all__ = ["__version__"]
