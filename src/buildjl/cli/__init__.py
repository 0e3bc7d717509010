"""Command-line interface for generate_buildjl."""

from buildjl.cli.parser import CLIParser
from buildjl.cli.runner import CLIRunner

__all__ = ["CLIParser", "CLIRunner"]
