"""Shared fixtures: a stub HTTP session and Trivy payloads."""

import io
import logging
import stat
import tarfile
from typing import Any, Dict, List, Optional

import pytest
import requests


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(
        self,
        status_code: int = 200,
        json_data: Any = None,
        content: bytes = b"",
        links: Optional[Dict[str, Dict[str, str]]] = None,
    ):
        self.status_code = status_code
        self._json = json_data
        self.raw = io.BytesIO(content)
        self.links = links or {}
        self.text = "" if json_data is None else str(json_data)

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


class FakeSession:
    """Records requests and answers them from a URL table."""

    def __init__(self, routes: Optional[Dict[str, FakeResponse]] = None):
        self.routes = routes or {}
        self.headers: Dict[str, str] = {}
        self.calls: List[Dict[str, Any]] = []

    def _respond(self, method: str, url: str, **kwargs) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        key = f"{method} {url}"
        if key in self.routes:
            return self.routes[key]
        if url in self.routes:
            return self.routes[url]
        return FakeResponse(status_code=404, json_data={"message": "Not Found"})

    def get(self, url, **kwargs):
        return self._respond("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._respond("POST", url, **kwargs)

    def patch(self, url, **kwargs):
        return self._respond("PATCH", url, **kwargs)


RELEASES = "https://api.github.com/repos/aquasecurity/trivy/releases"
DOWNLOAD = "https://github.com/aquasecurity/trivy/releases/download"


def release_payload(version: str) -> Dict[str, Any]:
    """A GitHub release with the usual Trivy assets."""
    names = [
        f"trivy_{version}_Linux-64bit.tar.gz",
        f"trivy_{version}_Linux-ARM64.tar.gz",
        f"trivy_{version}_macOS-64bit.tar.gz",
        f"trivy_{version}_checksums.txt",
    ]
    return {
        "tag_name": f"v{version}",
        "assets": [
            {"name": name, "browser_download_url": f"{DOWNLOAD}/v{version}/{name}"}
            for name in names
        ],
    }


def make_archive(files: Dict[str, bytes]) -> bytes:
    """Build a .tar.gz archive in memory."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        for name, data in files.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(data)
            info.mode = 0o644
            archive.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


@pytest.fixture
def release_session() -> FakeSession:
    """Session answering the latest (0.58.1) and 0.18.3 release lookups."""
    return FakeSession({
        f"{RELEASES}/latest": FakeResponse(json_data=release_payload("0.58.1")),
        f"{RELEASES}/tags/v0.18.3": FakeResponse(json_data=release_payload("0.18.3")),
    })


@pytest.fixture
def trivy_results() -> List[Dict[str, Any]]:
    """Trivy JSON output with one clean target and one vulnerable target."""
    return [
        {
            "Target": "knqyf263/vuln-image (alpine 3.7.1)",
            "Vulnerabilities": [
                {
                    "VulnerabilityID": "CVE-2018-0732",
                    "PkgName": "libssl1.0",
                    "InstalledVersion": "1.0.2o-r0",
                    "FixedVersion": "1.0.2o-r1",
                    "Title": "openssl: Malicious server can send large prime",
                    "Severity": "HIGH",
                    "References": [
                        "https://nvd.nist.gov/vuln/detail/CVE-2018-0732",
                        "https://www.openssl.org/news/secadv/20180612.txt",
                    ],
                },
            ],
        },
        {
            "Target": "node-app/package-lock.json",
            "Vulnerabilities": None,
        },
    ]


FAKE_TRIVY = """#!/bin/sh
dir=$(dirname "$0")
printf '%s\\n' "$@" > "$dir/args.txt"
cat "$dir/stdout.txt"
echo "2021-05-01T00:00:00.000Z WARN fake warning" >&2
"""


@pytest.fixture
def fake_trivy(tmp_path):
    """A shell script standing in for trivy; prints stdout.txt."""
    path = tmp_path / "trivy"
    path.write_text(FAKE_TRIVY)
    path.chmod(path.stat().st_mode | stat.S_IXUSR)

    def install(stdout: str) -> str:
        (tmp_path / "stdout.txt").write_text(stdout)
        return str(path)

    return install


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to a previous test's captured stderr."""
    yield
    logging.getLogger("trivy_action").handlers.clear()
