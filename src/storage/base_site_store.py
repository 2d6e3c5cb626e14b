# src/storage/base_site_store.py — v1
"""Abstract site store interface: where ResourceRecords are persisted."""

from __future__ import annotations

from abc import ABC, abstractmethod

from sitestack.core.models import ResourceRecord


class SiteStoreError(Exception):
    """The store could not be read or written."""


class BaseSiteStore(ABC):
    """Unified interface for resource record persistence."""

    @abstractmethod
    async def save(self, record: ResourceRecord) -> None:
        """Store the record, replacing any previous one for the site."""

    @abstractmethod
    async def load(self, site_name: str) -> ResourceRecord | None:
        """Retrieve the record of a site, or None if unknown."""

    @abstractmethod
    async def list_sites(self) -> list[str]:
        """Names of all stored sites, sorted."""

    @abstractmethod
    async def delete(self, site_name: str) -> bool:
        """Remove a site's record. Returns True if one existed."""
