"""End-to-end generation of a build.jl script.

Ties the pieces together: declaration -> release hashes -> build.jl.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from buildjl.constants import (
    DEFAULT_ORG_PREFIX,
    GITHUB_DOWNLOAD_URL,
    JLL_REPO_SUFFIX,
    JLL_SUFFIX,
    SCRIPT_EXTENSION,
)
from buildjl.declaration import BuildDeclaration, load_build_declaration
from buildjl.exceptions import UsageError, VersionResolutionError
from buildjl.fetch import ProductHashes, product_hashes_from_github_release
from buildjl.github import GitHubClient, release_download_url
from buildjl.logger import get_logger
from buildjl.manifest import render_buildjl
from buildjl.registry import RegistryClient

logger = get_logger(__name__)

# Recipe directories may carry a version suffix: LLVM_assert@11.0.1
_VERSIONED_DIR_RE = re.compile(r"@[^@/]*$")


@dataclass(frozen=True)
class GenerationResult:
    """What a generation run produced."""

    declaration: BuildDeclaration
    repo_name: str
    tag_name: str
    product_hashes: ProductHashes
    output_path: Path


def source_name(build_tarballs_path: str | Path) -> str:
    """Name of the recipe, taken from the declaration's directory."""
    dirname = Path(build_tarballs_path).resolve().parent.name
    return _VERSIONED_DIR_RE.sub("", dirname)


def default_repo_name(src_name: str, org_prefix: str = DEFAULT_ORG_PREFIX) -> str:
    """``<org>/<name>_jll.jl``, the wrapper repository hosting the releases."""
    return f"{org_prefix}/{src_name}{JLL_REPO_SUFFIX}"


def resolve_tag_name(
    registry: RegistryClient,
    src_name: str,
    build_tarballs_path: str | Path,
    repo_name: str,
) -> str:
    """Derive ``<name>-v<latest version>`` from the registry.

    Raises:
        VersionResolutionError: If the wrapper package has no registered
            versions

    """
    package = f"{src_name}{JLL_SUFFIX}"
    latest = registry.latest_version(package)
    if latest is None:
        raise VersionResolutionError(
            "no registered versions found; please specify the tag as third "
            "argument:\n"
            f"    generate_buildjl {build_tarballs_path} {repo_name} <tag_name>",
            target=src_name,
        )
    return f"{src_name}-v{latest}"


def buildjl_output_path(output_dir: Path, declaration: BuildDeclaration) -> Path:
    """``<output_dir>/build_<name>.v<version>.jl``."""
    return output_dir / (
        f"build_{declaration.name}.v{declaration.version}{SCRIPT_EXTENSION}"
    )


def generate_buildjl(
    build_tarballs_path: str | Path,
    client: GitHubClient,
    registry: RegistryClient,
    output_dir: Path,
    repo_name: str | None = None,
    tag_name: str | None = None,
    org_prefix: str = DEFAULT_ORG_PREFIX,
    download_url: str = GITHUB_DOWNLOAD_URL,
    verbose: bool = True,
) -> GenerationResult:
    """Generate the build.jl for a build declaration.

    Args:
        build_tarballs_path: Path to the build declaration
        client: GitHub API client
        registry: Registry client used when ``tag_name`` is omitted
        output_dir: Directory receiving the generated script
        repo_name: ``owner/repo``; derived from the declaration's directory
            when omitted
        tag_name: Release tag; resolved through the registry when omitted
        org_prefix: Organisation used for the derived repository name
        download_url: Base URL for release downloads
        verbose: Log skipped files and hashes at INFO

    Returns:
        GenerationResult describing the written script

    Raises:
        UsageError: If the declaration file does not exist
        VersionResolutionError: If no tag was given and none can be derived
        DeclarationError: If the declaration cannot be evaluated
        ReleaseFetchError: If the release or an asset cannot be fetched

    """
    path = Path(build_tarballs_path)
    logger.info("Build tarballs script: %s", path)
    if not path.is_file():
        raise UsageError("unable to open build declaration", target=str(path))

    src_name = source_name(path)
    repo_name = repo_name or default_repo_name(src_name, org_prefix)
    logger.info("Repo name: %s", repo_name)

    if tag_name is None:
        tag_name = resolve_tag_name(registry, src_name, path, repo_name)
    logger.info("Tag name: %s", tag_name)

    declaration = load_build_declaration(path)
    product_hashes = product_hashes_from_github_release(
        client, repo_name, tag_name, verbose=verbose
    )

    bin_path = release_download_url(repo_name, tag_name, download_url)
    # Render fully before touching the output so a failure leaves no file
    text = render_buildjl(declaration.products, product_hashes, bin_path)

    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = buildjl_output_path(output_dir, declaration)
    logger.info("Writing out to %s", output_path)
    output_path.write_text(text, encoding="utf-8")

    return GenerationResult(
        declaration=declaration,
        repo_name=repo_name,
        tag_name=tag_name,
        product_hashes=product_hashes,
        output_path=output_path,
    )
