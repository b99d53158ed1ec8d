"""Tests for release resolution and trivy download."""

import os
import re

import pytest
import requests

from trivy_action.core.downloader import Downloader, check_platform
from trivy_action.errors import (
    AssetNotFoundError,
    ExtractionError,
    UnsupportedPlatformError,
)

from conftest import DOWNLOAD, RELEASES, FakeResponse, FakeSession, make_archive


def test_check_platform_linux():
    assert check_platform("linux") == "Linux"


def test_check_platform_darwin():
    assert check_platform("darwin") == "macOS"


def test_check_platform_other():
    with pytest.raises(UnsupportedPlatformError, match="Sorry, other is not supported."):
        check_platform("other")


def test_latest_linux(release_session):
    downloader = Downloader(session=release_session)
    url = downloader.resolve_download_url("latest", "Linux")
    assert re.search(
        r"releases/download/v[0-9]+\.[0-9]+\.[0-9]+/trivy_[0-9]+\.[0-9]+\.[0-9]+_Linux-64bit\.tar\.gz$",
        url,
    )
    assert release_session.calls[0]["url"] == f"{RELEASES}/latest"


def test_exact_version_macos(release_session):
    downloader = Downloader(session=release_session)
    url = downloader.resolve_download_url("0.18.3", "macOS")
    assert url == f"{DOWNLOAD}/v0.18.3/trivy_0.18.3_macOS-64bit.tar.gz"
    assert release_session.calls[0]["url"] == f"{RELEASES}/tags/v0.18.3"


def test_latest_tag_without_v_prefix():
    payload = {
        "tag_name": "0.20.0",
        "assets": [{
            "name": "trivy_0.20.0_Linux-64bit.tar.gz",
            "browser_download_url": "https://example.com/trivy_0.20.0_Linux-64bit.tar.gz",
        }],
    }
    session = FakeSession({f"{RELEASES}/latest": FakeResponse(json_data=payload)})
    assets, version = Downloader(session=session).get_assets("latest")
    assert version == "0.20.0"
    assert assets[0].name == "trivy_0.20.0_Linux-64bit.tar.gz"


def test_unknown_version(release_session):
    downloader = Downloader(session=release_session)
    with pytest.raises(AssetNotFoundError, match="Could not find Trivy asset that you specified."):
        downloader.resolve_download_url("none", "Linux")


def test_unknown_os(release_session):
    downloader = Downloader(session=release_session)
    with pytest.raises(AssetNotFoundError) as excinfo:
        downloader.resolve_download_url("latest", "none")
    assert "Version: latest" in str(excinfo.value)
    assert "OS: none" in str(excinfo.value)


def test_network_error_is_not_surfaced():
    class BrokenSession(FakeSession):
        def get(self, url, **kwargs):
            raise requests.ConnectionError("connection refused")

    downloader = Downloader(session=BrokenSession())
    with pytest.raises(AssetNotFoundError) as excinfo:
        downloader.resolve_download_url("0.18.3", "Linux")
    assert "connection refused" not in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


@pytest.mark.parametrize("payload", [
    {"tag_name": None, "assets": []},
    {"assets": []},
    ["not", "a", "release"],
    {"tag_name": "v0.58.1", "assets": ["junk"]},
    {"tag_name": "v0.58.1", "assets": "junk"},
])
def test_malformed_release_payload(payload):
    session = FakeSession({f"{RELEASES}/latest": FakeResponse(json_data=payload)})
    with pytest.raises(AssetNotFoundError, match="Could not find Trivy asset that you specified."):
        Downloader(session=session).resolve_download_url("latest", "Linux")


def test_token_is_sent():
    downloader = Downloader(token="abc", session=FakeSession())
    assert downloader.session.headers["Authorization"] == "token abc"


def test_download_trivy_cmd(tmp_path):
    url = f"{DOWNLOAD}/v0.18.3/trivy_0.18.3_Linux-64bit.tar.gz"
    archive = make_archive({
        "LICENSE": b"Apache-2.0",
        "README.md": b"# Trivy",
        "trivy": b"#!/bin/sh\necho trivy\n",
        "contrib/html.tpl": b"<html></html>",
    })
    session = FakeSession({url: FakeResponse(content=archive)})

    path = Downloader(session=session).download_trivy_cmd(url, str(tmp_path))

    assert path == str(tmp_path / "trivy")
    assert sorted(os.listdir(tmp_path)) == ["trivy"]
    assert (tmp_path / "trivy").read_bytes() == b"#!/bin/sh\necho trivy\n"
    assert os.access(path, os.X_OK)
    assert session.calls[0]["stream"] is True


def test_download_archive_without_trivy(tmp_path):
    url = "https://example.com/empty.tar.gz"
    session = FakeSession({url: FakeResponse(content=make_archive({"README.md": b"x"}))})
    with pytest.raises(ExtractionError, match="Failed to extract Trivy command file."):
        Downloader(session=session).download_trivy_cmd(url, str(tmp_path))


def test_download_corrupt_archive(tmp_path):
    url = "https://example.com/broken.tar.gz"
    session = FakeSession({url: FakeResponse(content=b"this is not gzip")})
    with pytest.raises(ExtractionError):
        Downloader(session=session).download_trivy_cmd(url, str(tmp_path))


def test_download_truncated_archive_leaves_no_trivy(tmp_path):
    url = "https://example.com/truncated.tar.gz"
    archive = make_archive({"trivy": os.urandom(256 * 1024)})
    session = FakeSession({url: FakeResponse(content=archive[: len(archive) // 2])})

    with pytest.raises(ExtractionError):
        Downloader(session=session).download_trivy_cmd(url, str(tmp_path))

    assert not Downloader.trivy_exists(str(tmp_path))
    assert os.listdir(tmp_path) == []


def test_download_replaces_existing_trivy(tmp_path):
    (tmp_path / "trivy").write_bytes(b"old")
    url = "https://example.com/trivy.tar.gz"
    session = FakeSession({url: FakeResponse(content=make_archive({"trivy": b"new"}))})

    Downloader(session=session).download_trivy_cmd(url, str(tmp_path))

    assert os.listdir(tmp_path) == ["trivy"]
    assert (tmp_path / "trivy").read_bytes() == b"new"


def test_download_invalid_url(tmp_path):
    downloader = Downloader(session=FakeSession())
    with pytest.raises(requests.HTTPError):
        downloader.download_trivy_cmd("https://github.com/this_is_invalid", str(tmp_path))


def test_download_composes_steps(tmp_path, release_session):
    url = f"{DOWNLOAD}/v0.18.3/trivy_0.18.3_Linux-64bit.tar.gz"
    release_session.routes[url] = FakeResponse(content=make_archive({"trivy": b"bin"}))

    path = Downloader(session=release_session).download("0.18.3", str(tmp_path), platform="linux")

    assert path == str(tmp_path / "trivy")
    assert [c["url"] for c in release_session.calls] == [f"{RELEASES}/tags/v0.18.3", url]


def test_download_unsupported_platform(tmp_path, release_session):
    with pytest.raises(UnsupportedPlatformError, match="win32"):
        Downloader(session=release_session).download("0.18.3", str(tmp_path), platform="win32")
    assert release_session.calls == []


def test_trivy_exists(tmp_path):
    (tmp_path / "trivy").write_text("")
    assert Downloader.trivy_exists(str(tmp_path))


def test_trivy_does_not_exist(tmp_path):
    (tmp_path / "downloader.py").write_text("")
    (tmp_path / "trivy.tar.gz").write_text("")
    assert not Downloader.trivy_exists(str(tmp_path))


def test_trivy_exists_missing_directory(tmp_path):
    assert not Downloader.trivy_exists(str(tmp_path / "missing"))
