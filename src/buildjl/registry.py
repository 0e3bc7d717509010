"""Latest registered version lookup.

Packages in a Julia registry live under ``<Initial>/<Name>/`` and list their
released versions as the top-level tables of ``Versions.toml``.
"""

import tomllib
from pathlib import Path

import requests
from semver import Version

from buildjl.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    GENERAL_REGISTRY_URL,
    HTTP_NOT_FOUND,
    HTTP_OK,
    REGISTRY_VERSIONS_FILE,
)
from buildjl.exceptions import InvalidVersionError, VersionResolutionError
from buildjl.logger import get_logger
from buildjl.versions import parse_version, version_sort_key

logger = get_logger(__name__)


def registry_relpath(package: str) -> str:
    """Relative path of a package's directory inside the registry."""
    return f"{package[0].upper()}/{package}"


def parse_versions(text: str, source: str = REGISTRY_VERSIONS_FILE) -> list[str]:
    """Parse the version keys of a Versions.toml document.

    Keys are returned as written, in ascending version order; keys that are
    not valid versions are logged and skipped.

    Raises:
        VersionResolutionError: If the document is not valid TOML

    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise VersionResolutionError(f"invalid TOML: {e}", target=source) from e

    versions: dict[str, Version] = {}
    for key in data:
        try:
            versions[key] = parse_version(key)
        except InvalidVersionError:
            logger.debug("Skipping unparseable version '%s' in %s", key, source)
    return sorted(versions, key=lambda k: version_sort_key(versions[k]))


class RegistryClient:
    """Reads package versions from a local registry clone or over HTTP."""

    def __init__(
        self,
        url: str = GENERAL_REGISTRY_URL,
        path: Path | None = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the registry client.

        Args:
            url: Base URL serving raw registry files
            path: Local registry clone; preferred over ``url`` when set
            timeout: HTTP timeout in seconds
            session: Optional requests session (used by tests)

        """
        self.url = url.rstrip("/")
        self.path = path
        self.timeout = timeout
        self.session = session or requests.Session()

    def _read_versions_file(self, package: str) -> str | None:
        relpath = f"{registry_relpath(package)}/{REGISTRY_VERSIONS_FILE}"

        if self.path is not None:
            local = self.path / relpath
            logger.debug("Reading %s", local)
            if not local.is_file():
                return None
            return local.read_text(encoding="utf-8")

        url = f"{self.url}/{relpath}"
        logger.debug("Fetching %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise VersionResolutionError(str(e), target=package) from e

        if response.status_code == HTTP_NOT_FOUND:
            return None
        if response.status_code != HTTP_OK:
            raise VersionResolutionError(
                f"registry returned HTTP {response.status_code}", target=package
            )
        return response.text

    def versions(self, package: str) -> list[str]:
        """All registered versions of ``package`` (empty if unregistered)."""
        text = self._read_versions_file(package)
        if text is None:
            logger.debug("%s is not registered", package)
            return []
        return parse_versions(text, source=package)

    def latest_version(self, package: str) -> str | None:
        """Highest registered version of ``package``, or None."""
        versions = self.versions(package)
        if not versions:
            return None
        latest = versions[-1]
        logger.debug("Latest version of %s is %s", package, latest)
        return latest
