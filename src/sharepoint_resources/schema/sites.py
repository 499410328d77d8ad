"""Site and site collection resources from the Graph sites API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sharepoint_resources.schema.codec import Absent, GraphResource, is_set, wire_field

# Graph API JSON field names
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_DISPLAY_NAME = "displayName"
FIELD_DESCRIPTION = "description"
FIELD_WEB_URL = "webUrl"
FIELD_CREATED_DATE_TIME = "createdDateTime"
FIELD_LAST_MODIFIED_DATE_TIME = "lastModifiedDateTime"
FIELD_ROOT = "root"
FIELD_SITE_COLLECTION = "siteCollection"
FIELD_HOSTNAME = "hostname"


@dataclass
class SiteCollection(GraphResource):
    """Tenant-level site collection a site belongs to (e.g. "contoso.sharepoint.com")."""

    hostname: str | None | Absent = wire_field(FIELD_HOSTNAME, str)


@dataclass
class Site(GraphResource):
    """A SharePoint site.

    Attributes:
        id: Composite identifier "hostname,siteCollectionId,webId".
        name: Short internal name of the site.
        display_name: User-facing title.
        root: Present (usually as an empty object) only on a root site.
            Kept as whatever JSON value Graph sent, unvalidated.
    """

    id: str | None | Absent = wire_field(FIELD_ID, str)
    name: str | None | Absent = wire_field(FIELD_NAME, str)
    display_name: str | None | Absent = wire_field(FIELD_DISPLAY_NAME, str)
    description: str | None | Absent = wire_field(FIELD_DESCRIPTION, str)
    web_url: str | None | Absent = wire_field(FIELD_WEB_URL, str)
    created_date_time: str | None | Absent = wire_field(FIELD_CREATED_DATE_TIME, str)
    last_modified_date_time: str | None | Absent = wire_field(
        FIELD_LAST_MODIFIED_DATE_TIME, str
    )
    root: Any = wire_field(FIELD_ROOT, object)
    site_collection: SiteCollection | None | Absent = wire_field(
        FIELD_SITE_COLLECTION, SiteCollection
    )

    @property
    def is_root(self) -> bool:
        return is_set(self.root)
