"""Unit tests for graph/resources.py: ResourceReader behaviour."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from sharepoint_resources.config import AppConfig
from sharepoint_resources.graph.client import GraphApiError, GraphClient
from sharepoint_resources.graph.resources import ResourceReader, resource_reader_from_config
from sharepoint_resources.schema.codec import ABSENT, MalformedPayloadError
from sharepoint_resources.schema.drives import Drive, DriveItem, Quota
from sharepoint_resources.schema.sites import Site

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_SITE_ID = "contoso.sharepoint.com,aaaa-1111,bbbb-2222"


def _graph_client(get: MagicMock) -> GraphClient:
    """Return a GraphClient with a mocked MSAL app and its raw get() replaced."""
    with patch("sharepoint_resources.graph.client.msal.ConfidentialClientApplication"):
        client = GraphClient("cid", "cs", "tid")
    client.get = get  # type: ignore[method-assign]
    return client


def _make_reader(response: object, strict_quota: bool = True) -> tuple[ResourceReader, MagicMock]:
    """Return (reader, mock_get) with the client's get() returning response."""
    mock_get = MagicMock(return_value=response)
    reader = ResourceReader(graph_client=_graph_client(mock_get), strict_quota=strict_quota)
    return reader, mock_get


# ---------------------------------------------------------------------------
# Sites
# ---------------------------------------------------------------------------


class TestSites:
    def test_get_root_site(self) -> None:
        reader, mock_get = _make_reader({"id": _SITE_ID, "root": {}})
        site = reader.get_root_site()
        mock_get.assert_called_once_with("/sites/root")
        assert isinstance(site, Site)
        assert site.is_root is True

    def test_get_site_keeps_composite_id_separators(self) -> None:
        reader, mock_get = _make_reader({"id": _SITE_ID})
        reader.get_site(_SITE_ID)
        mock_get.assert_called_once_with(f"/sites/{_SITE_ID}")

    def test_get_site_by_path(self) -> None:
        reader, mock_get = _make_reader({"name": "Finance Team"})
        site = reader.get_site_by_path("contoso.sharepoint.com", "/sites/Finance Team/")
        mock_get.assert_called_once_with("/sites/contoso.sharepoint.com:/sites/Finance%20Team")
        assert site.name == "Finance Team"

    def test_list_site_drives(self) -> None:
        reader, mock_get = _make_reader(
            {"value": [{"id": "b!1", "name": "Documents"}, {"id": "b!2", "name": "Archive"}]}
        )
        drives = reader.list_site_drives(_SITE_ID)
        mock_get.assert_called_once_with(f"/sites/{_SITE_ID}/drives")
        assert [d.name for d in drives] == ["Documents", "Archive"]
        assert all(isinstance(d, Drive) for d in drives)

    def test_get_default_drive(self) -> None:
        reader, mock_get = _make_reader({"id": "b!1"})
        drive = reader.get_default_drive(_SITE_ID)
        mock_get.assert_called_once_with(f"/sites/{_SITE_ID}/drive")
        assert drive.id == "b!1"


# ---------------------------------------------------------------------------
# Drives and items
# ---------------------------------------------------------------------------


class TestDrives:
    def test_get_drive_decodes_quota(self) -> None:
        reader, mock_get = _make_reader(
            {
                "id": "b!abc123",
                "driveType": "documentLibrary",
                "quota": {"deleted": 0, "remaining": 10, "total": 20, "used": 10},
            }
        )
        drive = reader.get_drive("b!abc123")
        mock_get.assert_called_once_with("/drives/b!abc123")
        assert drive.quota == Quota(deleted=0, remaining=10, total=20, used=10)

    def test_strict_reader_rejects_incomplete_quota(self) -> None:
        reader, _ = _make_reader({"id": "b!1", "quota": {"total": 20}})
        with pytest.raises(MalformedPayloadError):
            reader.get_drive("b!1")

    def test_lenient_reader_defaults_incomplete_quota(self) -> None:
        reader, _ = _make_reader({"id": "b!1", "quota": {"total": 20}}, strict_quota=False)
        drive = reader.get_drive("b!1")
        assert drive.quota == Quota(deleted=0, remaining=0, total=20, used=0)

    def test_get_drive_root(self) -> None:
        reader, mock_get = _make_reader({"id": "01ROOT", "folder": {"childCount": 2}})
        root = reader.get_drive_root("b!1")
        mock_get.assert_called_once_with("/drives/b!1/root")
        assert root.is_folder is True

    def test_get_item(self) -> None:
        reader, mock_get = _make_reader({"id": "01FILE", "size": None})
        item = reader.get_item("b!1", "01FILE")
        mock_get.assert_called_once_with("/drives/b!1/items/01FILE")
        assert item.size is None

    def test_get_item_encodes_path_characters(self) -> None:
        reader, mock_get = _make_reader({})
        reader.get_item("b!1", "a/b")
        mock_get.assert_called_once_with("/drives/b!1/items/a%2Fb")

    def test_list_children_of_root(self) -> None:
        reader, mock_get = _make_reader({"value": [{"id": "01A"}, {"id": "01B", "file": {}}]})
        children = reader.list_children("b!1")
        mock_get.assert_called_once_with("/drives/b!1/root/children")
        assert [c.id for c in children] == ["01A", "01B"]
        assert children[0].file is ABSENT
        assert children[1].is_file is True

    def test_list_children_of_folder(self) -> None:
        reader, mock_get = _make_reader({"value": []})
        assert reader.list_children("b!1", "01FOLDER") == []
        mock_get.assert_called_once_with("/drives/b!1/items/01FOLDER/children")

    def test_list_children_warns_on_unfetched_pages(self, caplog: pytest.LogCaptureFixture) -> None:
        reader, _ = _make_reader(
            {
                "value": [{"id": "01A"}],
                "@odata.nextLink": "https://graph.microsoft.com/v1.0/drives/b!1/root/children?$skiptoken=x",
            }
        )
        with caplog.at_level(logging.WARNING, logger="sharepoint_resources.graph.resources"):
            children = reader.list_children("b!1")
        assert len(children) == 1
        assert "[list_children] response has further pages" in caplog.text

    def test_malformed_child_fails_whole_listing(self) -> None:
        reader, _ = _make_reader({"value": [{"id": "01A"}, {"id": "01B", "size": "10"}]})
        with pytest.raises(MalformedPayloadError) as exc_info:
            reader.list_children("b!1")
        assert exc_info.value.path == "value[1].size"

    def test_api_errors_propagate(self) -> None:
        mock_get = MagicMock(side_effect=GraphApiError(404, "Item not found", code="itemNotFound"))
        reader = ResourceReader(graph_client=_graph_client(mock_get))
        with pytest.raises(GraphApiError):
            reader.get_item("b!1", "missing")


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class TestResourceReaderFromConfig:
    def test_wires_client_and_strictness(self) -> None:
        config = AppConfig(client_id="cid", client_secret="cs", tenant_id="tid", strict_quota=False)
        graph_client = _graph_client(MagicMock(return_value={"quota": {}}))
        with patch(
            "sharepoint_resources.graph.resources.graph_client_from_config",
            return_value=graph_client,
        ) as mock_factory:
            reader = resource_reader_from_config(config)

        mock_factory.assert_called_once_with(config)
        drive = reader.get_drive("b!1")
        assert isinstance(drive, Drive)
        assert drive.quota == Quota(deleted=0, remaining=0, total=0, used=0)

    def test_decoded_items_are_drive_items(self) -> None:
        reader, _ = _make_reader({"value": [{"name": "a.txt"}]})
        assert isinstance(reader.list_children("b!1")[0], DriveItem)
