"""CLI argument parser for generate_buildjl."""

import argparse
from argparse import Namespace
from collections.abc import Sequence
from pathlib import Path

from buildjl import __version__
from buildjl.config import GlobalConfig


class CLIParser:
    """Command-line argument parser for generate_buildjl."""

    def __init__(self, global_config: GlobalConfig) -> None:
        """Initialize the CLI parser with global configuration.

        Args:
            global_config: Loaded global configuration, used for defaults

        """
        self.global_config = global_config

    def parse_args(self, argv: Sequence[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Exits with status 2 and a usage message on bad arguments, including
        fewer than one or more than three positionals.
        """
        parser = self._create_main_parser()
        self._add_arguments(parser)
        return parser.parse_args(argv)

    def _create_main_parser(self) -> argparse.ArgumentParser:
        org = self.global_config["github"]["org_prefix"]
        return argparse.ArgumentParser(
            prog="generate_buildjl",
            description=(
                "Generate a BinaryProvider build.jl from the tarballs of a "
                "GitHub release."
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=f"""
Examples:
  # Repo defaults to {org}/<dir>_jll.jl, tag to the latest registered version
  %(prog)s L/LLVM/build_tarballs.py

  # Explicit repository and tag
  %(prog)s L/LLVM/build_tarballs.py {org}/LLVM_jll.jl LLVM-v11.0.1+0
            """,
        )

    def _add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "build_tarballs",
            type=Path,
            help="path to the build_tarballs.py build declaration",
        )
        parser.add_argument(
            "repo_name",
            nargs="?",
            help="GitHub repository hosting the release (owner/repo)",
        )
        parser.add_argument(
            "tag_name",
            nargs="?",
            help="release tag (default: <name>-v<latest registered version>)",
        )
        parser.add_argument(
            "-o",
            "--output-dir",
            type=Path,
            default=self.global_config["output"]["directory"],
            help="directory for the generated script (default: %(default)s)",
        )

        verbosity = parser.add_mutually_exclusive_group()
        verbosity.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="show debug output",
        )
        verbosity.add_argument(
            "-q",
            "--quiet",
            action="store_true",
            help="only show warnings and errors",
        )

        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}",
        )
