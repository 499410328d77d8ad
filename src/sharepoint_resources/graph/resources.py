"""Typed reads of SharePoint sites, drives and drive items."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar
from urllib.parse import quote

from sharepoint_resources.graph.client import GraphClient, graph_client_from_config
from sharepoint_resources.schema.drives import Drive, DriveItem
from sharepoint_resources.schema.sites import Site

if TYPE_CHECKING:
    from sharepoint_resources.config import AppConfig

logger = logging.getLogger(__name__)

R = TypeVar("R")


def _segment(value: str) -> str:
    """Percent-encode a single URL path segment (ids keep their ',' and '!')."""
    return quote(value, safe="!,")


class ResourceReader:
    """Fetches Graph resources and decodes them into schema types.

    Each call is a single GET. Collection reads return only the first page
    of results; a trailing @odata.nextLink is logged and left unfollowed.
    """

    def __init__(self, graph_client: GraphClient, strict_quota: bool = True) -> None:
        """Initialise the reader.

        Args:
            graph_client: Authenticated GraphClient instance.
            strict_quota: Whether a quota missing a byte count is rejected
                (True) or read as 0 (False).
        """
        self._graph = graph_client
        self._strict = strict_quota

    def _one(self, cls: type[R], path: str) -> R:
        return self._graph.get_resource(path, cls, strict=self._strict)

    def _many(self, cls: type[R], path: str, caller: str) -> list[R]:
        items, next_link = self._graph.get_collection(path, cls, strict=self._strict)
        if next_link is not None:
            logger.warning(
                "[%s] response has further pages that were not fetched; path:%s;item_count:%d",
                caller,
                path,
                len(items),
            )
        return items

    # ------------------------------------------------------------------
    # Sites
    # ------------------------------------------------------------------

    def get_root_site(self) -> Site:
        """Return the tenant's root site (GET /sites/root)."""
        return self._one(Site, "/sites/root")

    def get_site(self, site_id: str) -> Site:
        """Return a site by its composite id (GET /sites/{site_id})."""
        return self._one(Site, f"/sites/{_segment(site_id)}")

    def get_site_by_path(self, hostname: str, relative_path: str) -> Site:
        """Return a site addressed by hostname and server-relative path.

        Args:
            hostname: Site collection hostname, e.g. "contoso.sharepoint.com".
            relative_path: Server-relative path, e.g. "/sites/Finance".

        Returns:
            The decoded Site.
        """
        path = quote(relative_path.strip("/"), safe="/")
        return self._one(Site, f"/sites/{_segment(hostname)}:/{path}")

    def list_site_drives(self, site_id: str) -> list[Drive]:
        """Return the document libraries of a site (GET /sites/{site_id}/drives)."""
        return self._many(Drive, f"/sites/{_segment(site_id)}/drives", "list_site_drives")

    def get_default_drive(self, site_id: str) -> Drive:
        """Return the default document library of a site."""
        return self._one(Drive, f"/sites/{_segment(site_id)}/drive")

    # ------------------------------------------------------------------
    # Drives and items
    # ------------------------------------------------------------------

    def get_drive(self, drive_id: str) -> Drive:
        return self._one(Drive, f"/drives/{_segment(drive_id)}")

    def get_drive_root(self, drive_id: str) -> DriveItem:
        return self._one(DriveItem, f"/drives/{_segment(drive_id)}/root")

    def get_item(self, drive_id: str, item_id: str) -> DriveItem:
        return self._one(DriveItem, f"/drives/{_segment(drive_id)}/items/{_segment(item_id)}")

    def list_children(self, drive_id: str, item_id: str | None = None) -> list[DriveItem]:
        """List the direct children of a folder.

        Args:
            drive_id: Drive containing the folder.
            item_id: Folder item id, or None for the drive root.

        Returns:
            Decoded children from the first page of the listing.
        """
        container = "root" if item_id is None else f"items/{_segment(item_id)}"
        return self._many(
            DriveItem, f"/drives/{_segment(drive_id)}/{container}/children", "list_children"
        )


def resource_reader_from_config(config: AppConfig) -> ResourceReader:
    """Construct a ResourceReader from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured ResourceReader instance.
    """
    return ResourceReader(
        graph_client=graph_client_from_config(config),
        strict_quota=config.strict_quota,
    )
