import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, Mock, patch

import requests
from office365.runtime.client_request import ClientRequest
from office365.sharepoint.client_context import ClientContext
from office365.sharepoint.files.file import File

from spstorage.client.factory import site_url
from spstorage.client.sharepoint_client import SharePointClient, _object_to_descriptor
from spstorage.errors import ApiError, NetworkError, NotFoundError, PermissionError
from spstorage.models import ItemDescriptor, ItemKind
from spstorage.storage import SharePointStorage

SITE_URL = "https://contoso.sharepoint.com"


def _http_error(status_code: int) -> requests.HTTPError:
    response = requests.Response()
    response.status_code = status_code
    response._content = b"{}"
    return requests.HTTPError(f"HTTP {status_code}", response=response)


def _sp_object(**properties) -> Mock:
    obj = Mock()
    obj.properties = dict(properties)
    return obj


def _collection(*objects) -> MagicMock:
    coll = MagicMock()
    coll.__iter__.return_value = iter(objects)
    coll.expand.return_value = coll
    return coll


class TestSharePointClientHelpers(unittest.TestCase):
    def test_object_to_descriptor_parses_properties(self) -> None:
        obj = _sp_object(
            Name="a.txt",
            ServerRelativeUrl="/Docs/a.txt",
            Length="10",
            TimeLastModified="2025-01-01T00:00:00Z",
        )
        item = _object_to_descriptor(obj, ItemKind.FILE, "/fallback")

        self.assertEqual(item.remote_path, "/Docs/a.txt")
        self.assertEqual(item.name, "a.txt")
        self.assertEqual(item.size, 10)
        self.assertEqual(item.last_modified, datetime(2025, 1, 1, tzinfo=timezone.utc))
        self.assertIs(item.handle, obj)

    def test_object_to_descriptor_falls_back_to_path(self) -> None:
        item = _object_to_descriptor(_sp_object(TimeLastModified="garbage"), ItemKind.FOLDER, "/Docs/sub")
        self.assertEqual(item.remote_path, "/Docs/sub")
        self.assertEqual(item.name, "sub")
        self.assertIsNone(item.size)
        self.assertIsNone(item.last_modified)

    def test_site_url(self) -> None:
        self.assertEqual(site_url("contoso.sharepoint.com/"), "https://contoso.sharepoint.com")
        self.assertEqual(site_url("http://sp.local"), "http://sp.local")


class TestSharePointClientMocked(unittest.TestCase):
    def setUp(self) -> None:
        self.ctx = Mock()
        self.client = SharePointClient.from_context(self.ctx)

    def test_fetch_file_or_folder_tries_file_first(self) -> None:
        file_obj = _sp_object(Name="a.txt", ServerRelativeUrl="/Docs/a.txt", Length=3)
        self.ctx.web.get_file_by_server_relative_url.return_value = file_obj

        item = self.client.fetch_file_or_folder("/Docs/a.txt")

        self.assertEqual(item.kind, ItemKind.FILE)
        self.assertEqual(item.size, 3)
        self.ctx.web.get_folder_by_server_relative_url.assert_not_called()

    def test_fetch_file_or_folder_falls_back_to_folder(self) -> None:
        folder_obj = _sp_object(Name="sub", ServerRelativeUrl="/Docs/sub")
        self.ctx.web.get_folder_by_server_relative_url.return_value = folder_obj
        self.ctx.execute_query_retry.side_effect = [_http_error(404), None]

        item = self.client.fetch_file_or_folder("/Docs/sub")

        self.assertEqual(item.kind, ItemKind.FOLDER)
        self.assertEqual(self.ctx.execute_query_retry.call_count, 2)

    def test_fetch_file_or_folder_not_found(self) -> None:
        self.ctx.execute_query_retry.side_effect = _http_error(404)

        with self.assertRaises(NotFoundError):
            self.client.fetch_file_or_folder("/Docs/missing")

    def test_fetch_with_kind_hint_makes_one_attempt(self) -> None:
        self.ctx.execute_query_retry.side_effect = _http_error(404)

        with self.assertRaises(NotFoundError):
            self.client.fetch_file_or_folder("/Docs/missing", as_file=False)
        self.assertEqual(self.ctx.execute_query_retry.call_count, 1)

    def test_403_is_not_mapped_to_not_found(self) -> None:
        self.ctx.execute_query_retry.side_effect = _http_error(403)

        with self.assertRaises(PermissionError):
            self.client.fetch_file_or_folder("/Docs/secret")

    def test_not_found_error_number_in_500_body(self) -> None:
        error = _http_error(500)
        error.response._content = (
            b'{"odata.error": {"code": "-2130575338, Microsoft.SharePoint.SPException",'
            b' "message": {"lang": "en-US", "value": "File Not Found."}}}'
        )
        self.ctx.execute_query_retry.side_effect = error

        with self.assertRaises(NotFoundError) as ctx:
            self.client.fetch_file_or_folder("/Docs/missing.txt", as_file=True)

        self.assertEqual(
            ctx.exception.cause.details["error_code"],
            "-2130575338, Microsoft.SharePoint.SPException",
        )
        self.assertEqual(str(ctx.exception.cause), "File Not Found.")

    def test_fetch_folder_contents_builds_listing(self) -> None:
        folder_obj = Mock()
        folder_obj.files = _collection(
            _sp_object(Name="a.txt", ServerRelativeUrl="/Docs/a.txt", Length="10")
        )
        folder_obj.folders = _collection(_sp_object(Name="sub"))
        self.ctx.web.get_folder_by_server_relative_url.return_value = folder_obj

        listing = self.client.fetch_folder_contents("/Docs")

        self.assertEqual(listing.remote_path, "/Docs")
        self.assertEqual([i.name for i in listing.items], ["a.txt", "sub"])
        self.assertEqual(listing.items[1].remote_path, "/Docs/sub")
        self.assertEqual(listing.items[1].kind, ItemKind.FOLDER)

    def test_fetch_folder_contents_reuses_cached_folder_handle(self) -> None:
        folder_obj = Mock()
        folder_obj.files = _collection()
        folder_obj.folders = _collection()
        cached = ItemDescriptor(ItemKind.FOLDER, "/Docs", "Docs", handle=folder_obj)

        self.client.fetch_folder_contents("/Docs", folder=cached)

        self.ctx.web.get_folder_by_server_relative_url.assert_not_called()

    def test_is_hidden(self) -> None:
        visible = ItemDescriptor(
            ItemKind.FOLDER,
            "/Docs/sub",
            "sub",
            handle=_sp_object(ListItemAllFields=_sp_object(Id=7)),
        )
        forms = ItemDescriptor(
            ItemKind.FOLDER,
            "/Docs/Forms",
            "Forms",
            handle=_sp_object(ListItemAllFields=_sp_object()),
        )
        a_file = ItemDescriptor(ItemKind.FILE, "/Docs/a.txt", "a.txt", handle=_sp_object())

        self.assertFalse(self.client.is_hidden(visible))
        self.assertTrue(self.client.is_hidden(forms))
        self.assertFalse(self.client.is_hidden(a_file))

    def test_delete_object_as_folder(self) -> None:
        folder_obj = Mock()
        self.ctx.web.get_folder_by_server_relative_url.return_value = folder_obj

        self.client.delete_object("/Docs/sub", as_file=False)

        folder_obj.delete_object.assert_called_once_with()
        self.ctx.execute_query_retry.assert_called_once()

    def test_create_folder(self) -> None:
        self.ctx.web.folders.add.return_value = _sp_object(ServerRelativeUrl="/Docs/new")

        item = self.client.create_folder("/Docs/new")

        self.ctx.web.folders.add.assert_called_once_with("/Docs/new")
        self.assertEqual(item.kind, ItemKind.FOLDER)

    def test_unknown_error_is_api_error(self) -> None:
        self.ctx.execute_query_retry.side_effect = ValueError("boom")

        with self.assertRaises(ApiError):
            self.client.create_folder("/Docs/new")


class TestSharePointClientRetry(unittest.TestCase):
    """Requests are sent through a real ClientContext; only the transport is patched."""

    def setUp(self) -> None:
        self.client = SharePointClient.from_context(ClientContext(SITE_URL))
        sleep_patcher = patch("office365.runtime.retry.sleep", return_value=None)
        self.sleep = sleep_patcher.start()
        self.addCleanup(sleep_patcher.stop)

    def _send(self, *outcomes):
        return patch.object(ClientRequest, "execute_query", side_effect=list(outcomes))

    def test_delete_is_resent_after_503(self) -> None:
        with self._send(_http_error(503), None) as send:
            self.client.delete_object("/Docs/a.txt", as_file=True)

        self.assertEqual(send.call_count, 2)
        self.assertIs(send.call_args_list[0].args[0], send.call_args_list[1].args[0])
        self.assertEqual(self.sleep.call_count, 1)

    def test_fetch_is_resent_after_throttling(self) -> None:
        with self._send(_http_error(429), _http_error(502), None) as send:
            item = self.client.fetch_file_or_folder("/Docs/a.txt", as_file=True)

        self.assertEqual(send.call_count, 3)
        self.assertEqual(item.remote_path, "/Docs/a.txt")

    def test_not_found_is_not_retried(self) -> None:
        with self._send(_http_error(404)) as send:
            with self.assertRaises(NotFoundError):
                self.client.delete_object("/Docs/missing.txt", as_file=True)

        self.assertEqual(send.call_count, 1)
        self.sleep.assert_not_called()

    def test_exhausted_retries_raise_api_error(self) -> None:
        with self._send(*[_http_error(503)] * 4) as send:
            with self.assertRaises(ApiError) as ctx:
                self.client.create_folder("/Docs/new")

        self.assertEqual(send.call_count, 4)
        self.assertEqual(ctx.exception.details.get("status_code"), 503)

    def test_connection_error_is_retried_then_network_error(self) -> None:
        down = requests.ConnectionError("down")
        with self._send(down, down, down, down) as send:
            with self.assertRaises(NetworkError):
                self.client.create_folder("/Docs/new")

        self.assertEqual(send.call_count, 4)

    def test_failed_query_is_not_left_queued(self) -> None:
        with self._send(_http_error(404)):
            with self.assertRaises(NotFoundError):
                self.client.delete_object("/Docs/missing.txt", as_file=True)

        with self._send(None) as send:
            self.client.create_folder("/Docs/new")

        self.assertEqual(send.call_count, 1)


class TestSharePointClientTimestamps(unittest.TestCase):
    def _file(self, time_last_modified: str) -> File:
        file = File(ClientContext(SITE_URL))
        file.set_property("TimeLastModified", time_last_modified)
        file.set_property("Length", "10")
        file.set_property("ServerRelativeUrl", "/Docs/a.txt")
        return file

    def test_offset_less_mtime_is_utc(self) -> None:
        item = _object_to_descriptor(self._file("2025-01-01T00:00:00"), ItemKind.FILE, "/Docs/a.txt")

        self.assertEqual(item.last_modified, datetime(2025, 1, 1, tzinfo=timezone.utc))
        self.assertEqual(item.size, 10)

    def test_stat_of_file_with_offset_less_mtime(self) -> None:
        ctx = Mock()
        ctx.web.get_file_by_server_relative_url.return_value = self._file("2025-01-01T00:00:00")
        factory = Mock()
        factory.get_client.return_value = SharePointClient.from_context(ctx)
        storage = SharePointStorage.from_parameters(
            {
                "host": "contoso.sharepoint.com",
                "documentLibrary": "Docs",
                "user": "alice",
                "password": "secret",
                "client_factory": factory,
            }
        )

        result = storage.stat("a.txt")

        self.assertIsNotNone(result)
        self.assertEqual(result.size, 10)
        self.assertEqual(result.mtime, int(datetime(2025, 1, 1, tzinfo=timezone.utc).timestamp()))
        ctx.web.get_file_by_server_relative_url.assert_called_once_with("/Docs/a.txt")


if __name__ == "__main__":
    unittest.main()
