"""Product hashes from a GitHub release.

Downloads every platform tarball of a release into a scratch directory and
records its SHA-256 digest under the tarball's platform descriptor.
"""

import tempfile
from dataclasses import dataclass
from pathlib import Path

from buildjl.github import GitHubClient, ReleaseAsset
from buildjl.hashing import HashCalculator
from buildjl.logger import get_logger
from buildjl.platforms import Platform, UnknownPlatform
from buildjl.tarball import PlatformFallback, extract_platform, is_build_script

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProductHash:
    """Tarball file name and its hex digest."""

    filename: str
    sha256: str


ProductHashes = dict[Platform, ProductHash]


def select_platform_assets(
    assets: list[ReleaseAsset], verbose: bool = True
) -> list[tuple[Platform, ReleaseAsset]]:
    """Keep the assets whose platform can be determined.

    Stray ``build*.jl`` files are skipped without parsing. When two assets
    map to the same platform the first one is kept.

    Args:
        assets: Release assets in API order
        verbose: Log skipped files at INFO instead of DEBUG

    Returns:
        (platform, asset) pairs in API order

    """
    log_skip = logger.info if verbose else logger.debug
    selected: dict[Platform, ReleaseAsset] = {}

    for asset in assets:
        if is_build_script(asset.name):
            logger.debug("Skipping build script %s", asset.name)
            continue

        platform = extract_platform(asset.name, fallback=PlatformFallback.UNKNOWN)
        if isinstance(platform, UnknownPlatform):
            log_skip("Ignoring file %s; can't extract its platform key", asset.name)
            continue

        if platform in selected:
            logger.warning(
                "%s and %s both map to %s; keeping %s",
                selected[platform].name,
                asset.name,
                platform,
                selected[platform].name,
            )
            continue
        selected[platform] = asset

    return list(selected.items())


def product_hashes_from_github_release(
    client: GitHubClient,
    repo_name: str,
    tag_name: str,
    verbose: bool = True,
) -> ProductHashes:
    """Download and hash every platform tarball of a release.

    Args:
        client: GitHub API client
        repo_name: ``owner/repo`` hosting the release
        tag_name: Release tag
        verbose: Log skipped files and computed hashes at INFO

    Returns:
        Mapping of platform descriptor to (file name, sha256)

    Raises:
        ReleaseFetchError: If the release or any asset cannot be fetched
        OSError: If a downloaded file cannot be read back

    """
    release = client.get_release(repo_name, tag_name)
    selected = select_platform_assets(release.assets, verbose=verbose)
    calculator = HashCalculator()
    log_hash = logger.info if verbose else logger.debug

    product_hashes: ProductHashes = {}
    with tempfile.TemporaryDirectory(prefix="buildjl-") as scratch:
        for platform, asset in selected:
            filepath = client.download(
                asset.browser_download_url, Path(scratch) / asset.name
            )
            digest = calculator.calculate_file_hash(filepath)
            product_hashes[platform] = ProductHash(asset.name, digest)
            log_hash("Calculated %s for %s", digest, asset.name)

    return product_hashes
