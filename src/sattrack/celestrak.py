"""CelesTrak client for refreshing local catalog files.

Downloads element sets in three-line format from CelesTrak's GP query
interface and writes them into the catalog directory, one file per
group (``<group>.tle``), where ``CatalogIndex`` will pick them up.

No account is required. Downloads are cached on disk by file age so
repeated updates within ``max_age_hours`` do not hit the network.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

import requests

from .config import CatalogConfig
from .tle_parser import ElementSet

logger = logging.getLogger(__name__)

BASE_URL = "https://celestrak.org"
GP_URL = f"{BASE_URL}/NORAD/elements/gp.php"

REQUEST_TIMEOUT = 30.0  # seconds


class CelestrakClient:
    """Fetches element sets from CelesTrak into a catalog directory."""

    def __init__(
        self,
        config: Optional[CatalogConfig] = None,
        max_age_hours: float = 24.0,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or CatalogConfig.from_env()
        self.max_age_hours = max_age_hours
        self.session = session or requests.Session()

    def _get(self, params: dict) -> str:
        logger.info("Querying %s with %s", GP_URL, params)
        resp = self.session.get(GP_URL, params=params, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()

        text = resp.text
        if "No GP data found" in text or not text.strip():
            raise ConnectionError(f"CelesTrak returned no data for {params}")
        return text

    def _is_fresh(self, path: Path) -> bool:
        if not path.exists():
            return False
        age_hours = (time.time() - path.stat().st_mtime) / 3600
        return age_hours < self.max_age_hours

    def update_group(self, group: str, force: bool = False) -> Path:
        """Download a CelesTrak group (e.g. ``stations``, ``amateur``).

        Args:
            group: CelesTrak group name.
            force: Download even if the local file is still fresh.

        Returns:
            Path of the written catalog file.
        """
        path = self.config.path_for(f"{group}{self.config.suffix}")
        if not force and self._is_fresh(path):
            logger.debug("Cache hit: %s", path.name)
            return path

        text = self._get({"GROUP": group, "FORMAT": "tle"})
        records = ElementSet.parse_batch(text)
        if not records:
            raise ConnectionError(f"CelesTrak group '{group}' contained no element sets")

        self.config.base_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(_normalize(text))
        logger.info("Wrote %d element sets to %s", len(records), path)
        return path

    def fetch_latest(self, catnum: int) -> Optional[ElementSet]:
        """Fetch the current element set for one catalog number."""
        text = self._get({"CATNR": catnum, "FORMAT": "tle"})
        records = ElementSet.parse_batch(text)
        return records[0] if records else None


def _normalize(text: str) -> str:
    """Strip trailing blanks and blank lines; end with a newline."""
    lines = [line.rstrip() for line in text.splitlines() if line.strip()]
    return "\n".join(lines) + "\n"
