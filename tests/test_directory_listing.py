import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx
import pytest

from algoclient.core.exceptions import (
    DecodeError,
    HttpError,
    NotFound,
    RemoteError,
    UnexpectedDataType,
)
from algoclient.data.dir import DataDir, DataDirItem, DataFileItem, fetch_directory_page
from algoclient.transport.http import HttpClient
from algoclient.transport.types import ClientConnection

DIR_URL = "https://api.test/v1/connector/data/.my/photos"


def _http(client):
    conn = ClientConnection(base_url="https://api.test", timeout_seconds=1.0)
    return HttpClient(conn, client=client)


def _page(folders=(), files=(), marker=None, acl=None):
    body = {
        "folders": [{"name": name} for name in folders],
        "files": [
            {"filename": name, "size": 10, "last_modified": "2016-01-06T00:52:34.000Z"}
            for name in files
        ],
    }
    if marker is not None:
        body["marker"] = marker
    if acl is not None:
        body["acl"] = acl
    return httpx.Response(
        200,
        content=json.dumps(body).encode("utf-8"),
        headers={"X-Data-Type": "directory"},
    )


def _listing(*responses):
    client = MagicMock(spec=httpx.Client)
    client.request.side_effect = list(responses)
    return client, DataDir(_http(client), "data://.my/photos").list()


def _names(entries):
    names = []
    for entry in entries:
        if isinstance(entry, DataDirItem):
            names.append(("dir", entry.dir.basename()))
        else:
            names.append(("file", entry.file.basename()))
    return names


def test_single_page_folders_before_files():
    _, listing = _listing(_page(folders=["a", "b"], files=["x.txt", "y.txt", "z.txt"]))

    assert _names(listing) == [
        ("dir", "a"),
        ("dir", "b"),
        ("file", "x.txt"),
        ("file", "y.txt"),
        ("file", "z.txt"),
    ]


def test_file_item_carries_size_and_last_modified():
    _, listing = _listing(_page(files=["x.txt"]))

    entry = next(listing)

    assert isinstance(entry, DataFileItem)
    assert entry.size == 10
    assert entry.last_modified == datetime(2016, 1, 6, 0, 52, 34, tzinfo=timezone.utc)
    assert entry.file.to_data_uri() == "data://.my/photos/x.txt"


def test_multiple_pages_follow_marker_in_order():
    client, listing = _listing(
        _page(folders=["a"], files=["1.txt"], marker="m1"),
        _page(folders=["b", "c"], files=[], marker="m2"),
        _page(folders=[], files=["2.txt", "3.txt"]),
    )

    entries = list(listing)

    assert _names(entries) == [
        ("dir", "a"),
        ("file", "1.txt"),
        ("dir", "b"),
        ("dir", "c"),
        ("file", "2.txt"),
        ("file", "3.txt"),
    ]
    params = [call.kwargs["params"] for call in client.request.call_args_list]
    assert params == [None, {"marker": "m1"}, {"marker": "m2"}]
    assert listing.pages_fetched == 3


def test_each_page_yields_folders_before_files_and_counts_match():
    pages = [
        (["d1", "d2"], ["f1"], "m1"),
        ([], ["f2", "f3"], "m2"),
        (["d3"], [], "m3"),
        ([], [], None),
    ]
    _, listing = _listing(*[_page(folders=f, files=fs, marker=m) for f, fs, m in pages])

    entries = _names(listing)

    expected = []
    for folders, files, _ in pages:
        expected += [("dir", name) for name in folders]
        expected += [("file", name) for name in files]
    assert entries == expected
    assert len(entries) == 6


def test_empty_directory():
    client, listing = _listing(_page())
    assert list(listing) == []
    assert client.request.call_count == 1


def test_exhausted_listing_stays_exhausted():
    client, listing = _listing(_page(files=["x.txt"]))

    assert len(list(listing)) == 1
    with pytest.raises(StopIteration):
        next(listing)
    with pytest.raises(StopIteration):
        next(listing)
    assert client.request.call_count == 1


def test_pages_are_fetched_lazily():
    client, listing = _listing(
        _page(folders=["a"], marker="m1"),
        _page(folders=["b"]),
    )
    assert client.request.call_count == 0

    next(listing)
    assert client.request.call_count == 1

    next(listing)
    assert client.request.call_count == 2


def test_acl_is_recorded_from_page():
    _, listing = _listing(_page(acl={"read": ["user://*"]}))
    list(listing)
    assert listing.acl.read == ["user://*"]


def test_not_found():
    _, listing = _listing(httpx.Response(404, content=b'{"error":"not found"}'))
    with pytest.raises(NotFound) as exc_info:
        next(listing)
    assert exc_info.value.location == DIR_URL


def test_error_status_with_envelope():
    _, listing = _listing(httpx.Response(403, content=b'{"error":"permission denied"}'))
    with pytest.raises(RemoteError) as exc_info:
        next(listing)
    assert exc_info.value.message == "permission denied"
    assert exc_info.value.status_code == 403


def test_error_status_without_envelope():
    _, listing = _listing(httpx.Response(500, content=b"oops"))
    with pytest.raises(RemoteError) as exc_info:
        next(listing)
    assert exc_info.value.message == "HTTP status 500"


def test_undecodable_page():
    _, listing = _listing(httpx.Response(200, content=b'{"files": "nope"}'))
    with pytest.raises(DecodeError) as exc_info:
        next(listing)
    assert exc_info.value.context == "directory listing"


def test_file_where_directory_expected():
    _, listing = _listing(httpx.Response(200, content=b"data", headers={"X-Data-Type": "file"}))
    with pytest.raises(UnexpectedDataType) as exc_info:
        next(listing)
    assert exc_info.value.expected == "directory"
    assert exc_info.value.actual == "file"


def test_transport_failure_is_http_error():
    _, listing = _listing(httpx.ReadTimeout("timed out"))
    with pytest.raises(HttpError) as exc_info:
        next(listing)
    assert "data://.my/photos" in str(exc_info.value)


def test_error_on_later_page_after_earlier_entries():
    _, listing = _listing(
        _page(folders=["a"], marker="m1"),
        httpx.Response(500, content=b'{"error":"backend down"}'),
    )
    assert _names([next(listing)]) == [("dir", "a")]
    with pytest.raises(RemoteError):
        next(listing)


def test_fetch_directory_page_passes_marker():
    client = MagicMock(spec=httpx.Client)
    client.request.return_value = _page(folders=["a"], marker="next")

    page = fetch_directory_page(DataDir(_http(client), "data://.my/photos"), marker="abc")

    assert client.request.call_args.args == ("GET", DIR_URL)
    assert client.request.call_args.kwargs["params"] == {"marker": "abc"}
    assert page.marker == "next"
    assert [f.name for f in page.folders] == ["a"]


def test_empty_marker_is_sent_on_the_next_request():
    client, listing = _listing(
        _page(folders=["a"], marker=""),
        _page(files=["1.txt"]),
    )

    assert _names(listing) == [("dir", "a"), ("file", "1.txt")]
    params = [call.kwargs["params"] for call in client.request.call_args_list]
    assert params == [None, {"marker": ""}]
