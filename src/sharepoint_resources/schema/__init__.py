"""Resource schema for Graph SharePoint sites, drives and drive items."""

from sharepoint_resources.schema.codec import (
    ABSENT,
    Absent,
    GraphResource,
    MalformedPayloadError,
    decode,
    decode_collection,
    dumps,
    encode,
    is_set,
    loads,
    parse_object,
    present_fields,
)
from sharepoint_resources.schema.drives import (
    Drive,
    DriveItem,
    FileHashInfo,
    FileMetadata,
    FolderMetadata,
    ParentItemInfo,
    Quota,
)
from sharepoint_resources.schema.sites import Site, SiteCollection

__all__ = [
    "ABSENT",
    "Absent",
    "Drive",
    "DriveItem",
    "FileHashInfo",
    "FileMetadata",
    "FolderMetadata",
    "GraphResource",
    "MalformedPayloadError",
    "ParentItemInfo",
    "Quota",
    "Site",
    "SiteCollection",
    "decode",
    "decode_collection",
    "dumps",
    "encode",
    "is_set",
    "loads",
    "parse_object",
    "present_fields",
]
