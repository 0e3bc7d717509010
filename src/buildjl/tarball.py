"""Tarball name parsing.

Release tarballs are named ``<name>.v<version>.<triplet>.tar.gz``, e.g.
``LLVM.v11.0.1.x86_64-linux-gnu-cxx11.tar.gz``.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath

from semver import Version

from buildjl.constants import BUILD_SCRIPT_PREFIX, SCRIPT_EXTENSION
from buildjl.exceptions import (
    InvalidVersionError,
    PlatformError,
    TarballNameError,
)
from buildjl.logger import get_logger
from buildjl.platforms import (
    Platform,
    UnknownPlatform,
    classify_triplet,
    host_platform,
)
from buildjl.versions import parse_version

logger = get_logger(__name__)

TARBALL_PATTERN = re.compile(
    r"^(?P<name>.*?)\.v(?P<version>.*?)\."
    r"(?P<triplet>[^.\-]+-[^.\-]+-(?:[^\-]+-){0,2}[^\-]+)\.tar\.gz$"
)


class PlatformFallback(Enum):
    """What extract_platform() returns when a name cannot be parsed."""

    HOST = "host"
    UNKNOWN = "unknown"
    RAISE = "raise"


@dataclass(frozen=True)
class TarballInfo:
    """Name, version and platform recovered from a tarball file name."""

    name: str
    version: Version
    platform: Platform
    triplet: str


def is_build_script(filename: str) -> bool:
    """Check for stray ``build*.jl`` helper files attached to a release."""
    name = PurePath(filename).name
    return name.startswith(BUILD_SCRIPT_PREFIX) and name.endswith(SCRIPT_EXTENSION)


def extract_name_version_platform(path: str) -> TarballInfo:
    """Parse the name, version and platform of a tarball.

    Args:
        path: Tarball file name or path; only the basename is inspected

    Returns:
        TarballInfo for the tarball

    Raises:
        TarballNameError: If the name or version cannot be parsed
        PlatformError: If the triplet cannot be classified

    """
    basename = PurePath(path).name
    match = TARBALL_PATTERN.match(basename)
    if match is None:
        raise TarballNameError(
            "expected <name>.v<version>.<triplet>.tar.gz", target=basename
        )

    try:
        version = parse_version(match.group("version"))
    except InvalidVersionError as e:
        raise TarballNameError(
            f"invalid version '{match.group('version')}'", target=basename
        ) from e

    triplet = match.group("triplet")
    return TarballInfo(
        name=match.group("name"),
        version=version,
        platform=classify_triplet(triplet),
        triplet=triplet,
    )


def extract_platform(
    path: str, fallback: PlatformFallback = PlatformFallback.HOST
) -> Platform:
    """Return the platform of a tarball, applying ``fallback`` on failure.

    Args:
        path: Tarball file name or path
        fallback: HOST substitutes the running machine's platform, UNKNOWN
            returns UnknownPlatform(), RAISE propagates the parse error

    Returns:
        The tarball's platform, or the fallback descriptor

    Raises:
        TarballNameError: Only with PlatformFallback.RAISE
        PlatformError: Only with PlatformFallback.RAISE

    """
    try:
        return extract_name_version_platform(path).platform
    except (TarballNameError, PlatformError) as e:
        if fallback is PlatformFallback.RAISE:
            raise
        if fallback is PlatformFallback.UNKNOWN:
            logger.debug("No platform for %s: %s", path, e)
            return UnknownPlatform()
        host = host_platform()
        logger.warning(
            "Could not extract the platform key of %s; continuing with %s",
            path,
            host,
        )
        return host
