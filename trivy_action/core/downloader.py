"""Download of the trivy executable from GitHub releases."""

import os
import shutil
import stat
import sys
import tarfile
import tempfile
from pathlib import Path
from typing import Optional, List, Tuple

import requests

from ..errors import AssetNotFoundError, ExtractionError, UnsupportedPlatformError
from ..models.vulnerability import ReleaseAsset
from ..utils.logging import get_logger

logger = get_logger(__name__)

TRIVY_CMD = "trivy"


def check_platform(platform: str) -> str:
    """
    Map a ``sys.platform`` value to the OS name used in release assets.

    Args:
        platform: Raw platform identifier

    Returns:
        "Linux" or "macOS"
    """
    if platform == "linux":
        return "Linux"
    if platform == "darwin":
        return "macOS"
    raise UnsupportedPlatformError(
        f"Sorry, {platform} is not supported.\n"
        "Trivy support Linux, MacOS, FreeBSD and OpenBSD."
    )


class Downloader:
    """Resolve, download and extract Trivy release archives."""

    DEFAULT_API_URL = "https://api.github.com"
    TRIVY_OWNER = "aquasecurity"
    TRIVY_REPO = "trivy"

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        """
        Initialize downloader.

        Args:
            token: GitHub token, raises the API rate limit when set
            api_url: GitHub REST API base URL
            session: HTTP session (a new one is created if None)
            timeout: Timeout for each HTTP request in seconds
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/vnd.github+json"})
        if token:
            self.session.headers.update({"Authorization": f"token {token}"})

    @property
    def _releases_url(self) -> str:
        return f"{self.api_url}/repos/{self.TRIVY_OWNER}/{self.TRIVY_REPO}/releases"

    def get_assets(self, version: str) -> Tuple[List[ReleaseAsset], str]:
        """
        Fetch the assets of a Trivy release.

        Args:
            version: Release version without the ``v`` prefix, or "latest"

        Returns:
            Tuple of (assets, effective version)
        """
        if version == "latest":
            url = f"{self._releases_url}/latest"
        else:
            url = f"{self._releases_url}/tags/v{version}"

        logger.debug(f"Fetching release: {url}")
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        release = response.json()
        if not isinstance(release, dict):
            raise LookupError(f"Unexpected release payload from {url}")

        if version == "latest":
            tag = release.get("tag_name")
            if not isinstance(tag, str):
                raise LookupError(f"Release at {url} has no tag name")
            version = tag[1:] if tag.startswith("v") else tag
            logger.debug(f"Latest Trivy release: {version}")

        assets = [ReleaseAsset.from_dict(a) for a in release.get("assets") or []]
        return assets, version

    def resolve_download_url(self, version: str, os_name: str) -> str:
        """
        Find the download URL of the release archive for an OS.

        Args:
            version: Release version, or "latest"
            os_name: Normalized OS name ("Linux" or "macOS")

        Returns:
            Browser download URL of the matching asset
        """
        try:
            assets, effective_version = self.get_assets(version)
            filename = f"trivy_{effective_version}_{os_name}-64bit.tar.gz"
            for asset in assets:
                if asset.name == filename:
                    return asset.download_url
            raise LookupError(f"{filename} does not include in GitHub releases")
        except (requests.RequestException, LookupError, ValueError, TypeError) as e:
            logger.error(str(e))
            raise AssetNotFoundError(
                "Could not find Trivy asset that you specified.\n"
                f"Version: {version}\n"
                f"OS: {os_name}"
            ) from e

    def download_trivy_cmd(self, download_url: str, saved_path: str = ".") -> str:
        """
        Stream a release archive and extract the trivy executable.

        Args:
            download_url: URL of a ``.tar.gz`` release asset
            saved_path: Directory to extract into

        Returns:
            Path of the extracted executable
        """
        target_dir = Path(saved_path)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / TRIVY_CMD

        logger.debug(f"Downloading {download_url}")
        with self.session.get(
            download_url,
            headers={"Accept": "application/octet-stream"},
            stream=True,
            timeout=self.timeout,
        ) as response:
            response.raise_for_status()
            partial = None
            try:
                with tarfile.open(fileobj=response.raw, mode="r|gz") as archive:
                    for member in archive:
                        if member.name != TRIVY_CMD or not member.isfile():
                            continue
                        source = archive.extractfile(member)
                        # Only a complete copy may ever be named trivy
                        with tempfile.NamedTemporaryFile(
                            dir=target_dir, prefix=f".{TRIVY_CMD}-", delete=False
                        ) as f:
                            partial = f.name
                            shutil.copyfileobj(source, f)
                        os.chmod(
                            partial,
                            stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP
                            | stat.S_IROTH | stat.S_IXOTH,
                        )
                        os.replace(partial, target)
                        partial = None
                        break
            except (tarfile.TarError, EOFError, OSError) as e:
                logger.error(f"Failed to read archive: {e}")
                raise ExtractionError("Failed to extract Trivy command file.") from e
            finally:
                if partial is not None and os.path.exists(partial):
                    os.remove(partial)

        if not self.trivy_exists(saved_path):
            raise ExtractionError("Failed to extract Trivy command file.")

        return str(target)

    @staticmethod
    def trivy_exists(target_dir: str) -> bool:
        """
        Check whether a directory holds the trivy executable.

        Args:
            target_dir: Directory to look in

        Returns:
            True if exactly one entry named ``trivy`` is present
        """
        if not os.path.isdir(target_dir):
            return False
        matches = [f for f in os.listdir(target_dir) if f == TRIVY_CMD]
        return len(matches) == 1

    def download(
        self,
        version: str,
        trivy_cmd_dir: str,
        platform: str = sys.platform,
    ) -> str:
        """
        Download trivy for the current platform.

        Args:
            version: Release version, or "latest"
            trivy_cmd_dir: Directory to place the executable in
            platform: Raw platform identifier

        Returns:
            Path of the extracted executable
        """
        os_name = check_platform(platform)
        download_url = self.resolve_download_url(version, os_name)
        logger.debug(f"Download URL: {download_url}")
        trivy_cmd_path = self.download_trivy_cmd(download_url, trivy_cmd_dir)
        logger.debug(f"Trivy Command Path: {trivy_cmd_path}")
        return trivy_cmd_path
