"""Catalog configuration.

The catalog directory is resolved in this order:

    1. The ``base_dir`` passed to ``CatalogConfig``.
    2. The ``SATTRACK_TLE_DIR`` environment variable.
    3. ``~/.sattrack/tle``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

ENV_TLE_DIR = "SATTRACK_TLE_DIR"
DEFAULT_TLE_DIR = Path.home() / ".sattrack" / "tle"
DEFAULT_SUFFIX = ".tle"


@dataclass(frozen=True)
class CatalogConfig:
    """Where catalog files live.

    Attributes:
        base_dir: Directory holding the catalog files.
        suffix: File name suffix of catalog files.
    """

    base_dir: Path = field(default_factory=lambda: DEFAULT_TLE_DIR)
    suffix: str = DEFAULT_SUFFIX

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_dir", Path(self.base_dir).expanduser())

    @classmethod
    def from_env(cls, base_dir: str | Path | None = None) -> CatalogConfig:
        """Build a config, falling back to ``SATTRACK_TLE_DIR``."""
        if base_dir is None:
            base_dir = os.environ.get(ENV_TLE_DIR) or DEFAULT_TLE_DIR
        return cls(base_dir=Path(base_dir))

    def path_for(self, filename: str) -> Path:
        """Full path of a catalog file name."""
        return self.base_dir / filename

    def catalog_files(self) -> list[Path]:
        """Catalog files in the base directory, sorted by name."""
        if not self.base_dir.is_dir():
            return []
        return sorted(
            p for p in self.base_dir.iterdir() if p.is_file() and p.suffix == self.suffix
        )
