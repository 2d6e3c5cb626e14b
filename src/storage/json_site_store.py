# src/storage/json_site_store.py — v1
"""JSON file-based site store (default SITE_STORE_PATH).

All records live in one document, ``{"sites": {name: record}}``. Writes go
to a temporary file that replaces the original, so a crash mid-write never
leaves a truncated store behind.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sitestack.core.models import ResourceRecord
from sitestack.storage.base_site_store import BaseSiteStore, SiteStoreError

logger = logging.getLogger(__name__)


class JsonSiteStore(BaseSiteStore):
    """Site store backed by a single JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    async def save(self, record: ResourceRecord) -> None:
        document = self._read()
        document["sites"][record.site_name] = record.model_dump(mode="json")
        self._write(document)
        logger.debug("Saved record for %s to %s", record.site_name, self._path)

    async def load(self, site_name: str) -> ResourceRecord | None:
        data = self._read()["sites"].get(site_name)
        if data is None:
            return None
        try:
            return ResourceRecord.model_validate(data)
        except ValidationError as e:
            raise SiteStoreError(
                f"Stored record for {site_name} is invalid: {e}"
            ) from e

    async def list_sites(self) -> list[str]:
        return sorted(self._read()["sites"])

    async def delete(self, site_name: str) -> bool:
        document = self._read()
        if site_name not in document["sites"]:
            return False
        del document["sites"][site_name]
        self._write(document)
        return True

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {"sites": {}}
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SiteStoreError(f"Cannot read site store {self._path}: {e}") from e
        if not isinstance(document, dict) or not isinstance(document.get("sites"), dict):
            raise SiteStoreError(f"Site store {self._path} has an unexpected layout")
        return document

    def _write(self, document: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(document, indent=2), encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise SiteStoreError(f"Cannot write site store {self._path}: {e}") from e
