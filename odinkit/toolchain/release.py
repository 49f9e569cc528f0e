"""
Prebuilt release download.

Looks up an Odin release on GitHub, picks the asset built for the current OS
and architecture, and extracts it into the install path. Every way a release
can be unavailable (no token, unknown tag, no asset for this platform, failed
download) makes the fetcher report "not viable" so the caller can fall back to
the cache or a source build.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

import requests
from requests.exceptions import RequestException

from odinkit.config.inputs import AcquisitionRequest
from odinkit.core.exceptions import InvalidRepositoryError, ReleaseError
from odinkit.core.filesystem import (
    extract_archive,
    make_executable,
    move_directory_contents,
    temporary_directory,
)
from odinkit.core.platform import PlatformInfo, detect_platform

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"

# Releases after dev-2024-03 are zipped in CI and zipped again by GitHub
LEGACY_NESTED_ARCHIVE = "dist.zip"
LEGACY_NESTED_DIR = "dist"

# Darwin releases from 2023-10 onwards need LLVM 13 from Homebrew
DARWIN_RELEASE_LLVM_VERSION = "13"

_ARCHIVE_SUFFIXES = (".zip", ".tar.gz", ".tgz")


def parse_repository(repository: str) -> Tuple[str, str]:
    """
    Split a repository identifier into owner and name.

    Accepts 'owner/repo' or any URL ending in it.

    Raises:
        InvalidRepositoryError: If fewer than two path segments are present

    Example:
        >>> parse_repository("https://github.com/odin-lang/Odin")
        ('odin-lang', 'Odin')
    """
    parts = repository.rstrip("/").split("/")
    if len(parts) < 2:
        raise InvalidRepositoryError(repository)

    owner, repo = parts[-2], parts[-1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return owner, repo


class GitHubReleaseClient:
    """Minimal client for the GitHub releases API."""

    def __init__(
        self,
        token: str,
        api_url: str = GITHUB_API_URL,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "odinkit",
            }
        )

    def _get_json(self, path: str) -> dict:
        url = f"{self.api_url}{path}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (RequestException, ValueError) as e:
            raise ReleaseError(f"Request to {url} failed: {e}") from e

    def get_latest_release(self, owner: str, repo: str) -> dict:
        return self._get_json(f"/repos/{owner}/{repo}/releases/latest")

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> dict:
        return self._get_json(f"/repos/{owner}/{repo}/releases/tags/{tag}")

    def download_asset(
        self, owner: str, repo: str, asset_id: int, destination: Path
    ) -> Path:
        """
        Download a release asset as a binary stream.

        Raises:
            ReleaseError: If the download fails
        """
        url = f"{self.api_url}/repos/{owner}/{repo}/releases/assets/{asset_id}"
        destination.parent.mkdir(parents=True, exist_ok=True)

        try:
            with self.session.get(
                url,
                headers={"Accept": "application/octet-stream"},
                stream=True,
                timeout=self.timeout,
                allow_redirects=True,
            ) as response:
                response.raise_for_status()
                with open(destination, "wb") as f:
                    for chunk in response.iter_content(chunk_size=8192):
                        if chunk:
                            f.write(chunk)
        except RequestException as e:
            raise ReleaseError(f"Downloading asset {asset_id} failed: {e}") from e

        return destination


class ReleaseFetcher:
    """
    Installs Odin from a prebuilt GitHub release.

    Example:
        >>> fetcher = ReleaseFetcher(install_dependencies=installer_callback)
        >>> if fetcher.fetch(request):
        ...     print("Installed from release")
    """

    def __init__(
        self,
        install_dependencies: Callable[[str], None],
        platform: Optional[PlatformInfo] = None,
        client_factory: Callable[[str], GitHubReleaseClient] = GitHubReleaseClient,
    ):
        """
        Initialize release fetcher.

        Args:
            install_dependencies: Called with an LLVM version to install the
                native dependency (used for Darwin releases)
            platform: Platform information (auto-detected if None)
            client_factory: Creates the API client from an access token
        """
        self.install_dependencies = install_dependencies
        self.platform = platform or detect_platform()
        self.client_factory = client_factory

    def asset_prefix(self, request: AcquisitionRequest) -> Optional[str]:
        """Asset name prefix for this platform, e.g. 'odin-ubuntu-amd64'."""
        suffix = self.platform.release_suffix()
        if suffix is None:
            return None
        return f"{request.release_asset_name()}-{suffix}"

    def fetch(self, request: AcquisitionRequest) -> bool:
        """
        Try to install the requested release.

        Returns:
            True if a usable install was produced, False to fall back

        Raises:
            InvalidRepositoryError: If the repository identifier is malformed
            ArchiveExtractionError: If a downloaded asset cannot be extracted
        """
        owner, repo = parse_repository(request.repository)

        if not request.access_token:
            logger.warning("Invalid access token, falling back to git based install.")
            return False

        client = self.client_factory(request.access_token)

        try:
            if request.release_tag == "latest":
                release = client.get_latest_release(owner, repo)
            else:
                logger.info(f"Looking for release tagged: {request.release_tag}")
                release = client.get_release_by_tag(owner, repo, request.release_tag)
        except ReleaseError as e:
            logger.warning(
                f"Could not resolve release, falling back to git based install: {e}"
            )
            return False

        prefix = self.asset_prefix(request)
        if prefix is None:
            logger.warning(
                f"No releases are published for {self.platform}, "
                "falling back to git based install."
            )
            return False

        assets = release.get("assets") or []
        logger.info(
            f"Release has {len(assets)} assets, Looking for asset prefix: {prefix}"
        )

        asset = next(
            (a for a in assets if a.get("name", "").startswith(prefix)), None
        )
        if asset is None:
            logger.warning(
                "could not find release asset to download, "
                "falling back to git based install."
            )
            return False

        with temporary_directory(prefix="odinkit_release_") as tmp:
            archive_name = asset["name"]
            if not archive_name.lower().endswith(_ARCHIVE_SUFFIXES):
                archive_name += ".zip"

            logger.info("Downloading release")
            try:
                archive = client.download_asset(
                    owner, repo, asset["id"], tmp / archive_name
                )
            except ReleaseError as e:
                logger.warning(f"{e}, falling back to git based install.")
                return False

            logger.info("Unzipping release")
            extract_archive(archive, request.install_path)

        return self._finish_install(request)

    def _finish_install(self, request: AcquisitionRequest) -> bool:
        install_path = Path(request.install_path)

        nested_archive = install_path / LEGACY_NESTED_ARCHIVE
        if nested_archive.exists():
            logger.debug(f"Found nested {LEGACY_NESTED_ARCHIVE}, extracting it")
            extract_archive(nested_archive, install_path)
            move_directory_contents(install_path / LEGACY_NESTED_DIR, install_path)
            return True

        # Releases after dev-2024-03 already carry the executable bit
        if self.platform.is_posix:
            try:
                make_executable(install_path / "odin")
            except OSError as e:
                logger.warning(f"Failed making the compiler executable: {e}")

        if self.platform.os == "macos":
            self.install_dependencies(DARWIN_RELEASE_LLVM_VERSION)

        return True


__all__ = [
    "GITHUB_API_URL",
    "DARWIN_RELEASE_LLVM_VERSION",
    "GitHubReleaseClient",
    "ReleaseFetcher",
    "parse_repository",
]
