"""Semantic version parsing for tarball names and registry keys.

Julia packages use semantic versions, so prerelease identifiers such as
``1.0.0-x.7.z.92`` and build metadata such as ``11.0.1+3`` are both valid.
"""

from semver import Version

from buildjl.exceptions import InvalidVersionError


def parse_version(text: str) -> Version:
    """Parse a semantic version, accepting a leading ``v``.

    Missing minor and patch components default to zero, so ``1.2`` parses
    as ``1.2.0``.

    Raises:
        InvalidVersionError: If ``text`` is not a semantic version

    """
    try:
        return Version.parse(text.removeprefix("v"), optional_minor_and_patch=True)
    except (TypeError, ValueError) as e:
        raise InvalidVersionError(f"invalid version '{text}'", target=text) from e


def _identifier_key(identifier: str) -> tuple[int, int, str]:
    # Numeric identifiers sort before alphanumeric ones
    if identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier)


def version_sort_key(version: Version) -> tuple:
    """Total ordering key for versions, build metadata included.

    Semantic version precedence ignores build metadata; registries still need
    ``11.0.1+3`` ordered before ``11.0.1+10``.
    """
    build = version.build.split(".") if version.build else []
    return (version, tuple(_identifier_key(i) for i in build))
