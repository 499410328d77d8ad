"""Drive, quota and drive item resources from the Graph files API."""

from __future__ import annotations

from dataclasses import dataclass

from sharepoint_resources.schema.codec import Absent, GraphResource, is_set, wire_field

# Graph API JSON field names
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_DESCRIPTION = "description"
FIELD_WEB_URL = "webUrl"
FIELD_CREATED_DATE_TIME = "createdDateTime"
FIELD_LAST_MODIFIED_DATE_TIME = "lastModifiedDateTime"
FIELD_DRIVE_TYPE = "driveType"
FIELD_QUOTA = "quota"
FIELD_DELETED = "deleted"
FIELD_REMAINING = "remaining"
FIELD_STATE = "state"
FIELD_TOTAL = "total"
FIELD_USED = "used"
FIELD_E_TAG = "eTag"
FIELD_C_TAG = "cTag"
FIELD_SIZE = "size"
FIELD_FILE = "file"
FIELD_FOLDER = "folder"
FIELD_PARENT_REFERENCE = "parentReference"
FIELD_MIME_TYPE = "mimeType"
FIELD_HASHES = "hashes"
FIELD_QUICK_XOR_HASH = "quickXorHash"
FIELD_CHILD_COUNT = "childCount"
FIELD_DRIVE_ID = "driveId"
FIELD_PATH = "path"


@dataclass
class Quota(GraphResource):
    """Storage usage of a drive, in bytes.

    The four byte counts are required. ``state`` is free text; Graph
    documents "normal", "nearing", "critical" and "exceeded" but any
    string is accepted.
    """

    deleted: int = wire_field(FIELD_DELETED, int, required=True)
    remaining: int = wire_field(FIELD_REMAINING, int, required=True)
    total: int = wire_field(FIELD_TOTAL, int, required=True)
    used: int = wire_field(FIELD_USED, int, required=True)
    state: str | None | Absent = wire_field(FIELD_STATE, str)


@dataclass
class FileHashInfo(GraphResource):
    """Content hashes of a file."""

    quick_xor_hash: str | None | Absent = wire_field(FIELD_QUICK_XOR_HASH, str)


@dataclass
class FileMetadata(GraphResource):
    """File facet of a drive item; its presence marks the item as a file."""

    mime_type: str | None | Absent = wire_field(FIELD_MIME_TYPE, str)
    hashes: FileHashInfo | None | Absent = wire_field(FIELD_HASHES, FileHashInfo)


@dataclass
class FolderMetadata(GraphResource):
    """Folder facet of a drive item; its presence marks the item as a folder."""

    child_count: int | None | Absent = wire_field(FIELD_CHILD_COUNT, int)


@dataclass
class ParentItemInfo(GraphResource):
    """Reference to the container of a drive item.

    Attributes:
        drive_id: Identifier of the drive holding the item.
        drive_type: Type of that drive (e.g. "documentLibrary").
        path: Percent-encoded path of the parent, e.g. "/drive/root:/Shared".
        id: Identifier of the parent item.
        name: Display name of the parent item.
    """

    drive_id: str | None | Absent = wire_field(FIELD_DRIVE_ID, str)
    drive_type: str | None | Absent = wire_field(FIELD_DRIVE_TYPE, str)
    path: str | None | Absent = wire_field(FIELD_PATH, str)
    id: str | None | Absent = wire_field(FIELD_ID, str)
    name: str | None | Absent = wire_field(FIELD_NAME, str)


@dataclass
class Drive(GraphResource):
    """A document library (or OneDrive) as returned by /drives/{id}."""

    id: str | None | Absent = wire_field(FIELD_ID, str)
    name: str | None | Absent = wire_field(FIELD_NAME, str)
    description: str | None | Absent = wire_field(FIELD_DESCRIPTION, str)
    web_url: str | None | Absent = wire_field(FIELD_WEB_URL, str)
    created_date_time: str | None | Absent = wire_field(FIELD_CREATED_DATE_TIME, str)
    last_modified_date_time: str | None | Absent = wire_field(
        FIELD_LAST_MODIFIED_DATE_TIME, str
    )
    drive_type: str | None | Absent = wire_field(FIELD_DRIVE_TYPE, str)
    quota: Quota | None | Absent = wire_field(FIELD_QUOTA, Quota)


@dataclass
class DriveItem(GraphResource):
    """A file or folder within a drive.

    ``file`` and ``folder`` are independent facets. Graph sets exactly one
    of them in practice, but both are decoded as given and neither is
    inferred from the other.

    Timestamps are kept as the ISO 8601 strings Graph returns.
    """

    id: str | None | Absent = wire_field(FIELD_ID, str)
    name: str | None | Absent = wire_field(FIELD_NAME, str)
    web_url: str | None | Absent = wire_field(FIELD_WEB_URL, str)
    e_tag: str | None | Absent = wire_field(FIELD_E_TAG, str)
    c_tag: str | None | Absent = wire_field(FIELD_C_TAG, str)
    size: int | None | Absent = wire_field(FIELD_SIZE, int)
    created_date_time: str | None | Absent = wire_field(FIELD_CREATED_DATE_TIME, str)
    last_modified_date_time: str | None | Absent = wire_field(
        FIELD_LAST_MODIFIED_DATE_TIME, str
    )
    file: FileMetadata | None | Absent = wire_field(FIELD_FILE, FileMetadata)
    folder: FolderMetadata | None | Absent = wire_field(FIELD_FOLDER, FolderMetadata)
    parent_reference: ParentItemInfo | None | Absent = wire_field(
        FIELD_PARENT_REFERENCE, ParentItemInfo
    )

    @property
    def is_file(self) -> bool:
        return is_set(self.file)

    @property
    def is_folder(self) -> bool:
        return is_set(self.folder)
