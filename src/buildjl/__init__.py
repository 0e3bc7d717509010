"""Top-level package for buildjl.

Generates BinaryProvider ``build.jl`` companion scripts from released
binary tarballs.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("buildjl")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
