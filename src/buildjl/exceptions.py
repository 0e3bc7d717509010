"""Exception classes for buildjl operations."""


class BuildjlError(Exception):
    """Base exception for buildjl operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the target that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class UsageError(BuildjlError):
    """Raised for bad command-line input (missing files, bad arguments)."""

    error_prefix = "Usage error"


class DeclarationError(BuildjlError):
    """Raised when a build declaration cannot be evaluated."""

    error_prefix = "Build declaration failed"


class TarballNameError(BuildjlError):
    """Raised when a tarball name does not follow the release naming scheme."""

    error_prefix = "Could not parse tarball name"


class PlatformError(BuildjlError):
    """Raised when a platform triplet cannot be classified."""

    error_prefix = "Unsupported platform"


class UnknownVendorError(PlatformError):
    """Raised for a vendor/ABI combination with no known OS family."""

    error_prefix = "Unknown vendor in platform"


class UnknownABIError(PlatformError):
    """Raised for a Linux triplet whose libc ABI is not recognized."""

    error_prefix = "Unknown ABI in platform"


class ReleaseFetchError(BuildjlError):
    """Raised when release metadata or an asset cannot be retrieved."""

    error_prefix = "Release fetch failed"


class VersionResolutionError(BuildjlError):
    """Raised when no released version can be found for a package."""

    error_prefix = "Unable to determine latest version"


class InvalidVersionError(BuildjlError):
    """Raised when a string is not a semantic version."""

    error_prefix = "Invalid version"
