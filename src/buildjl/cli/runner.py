"""CLI runner: loads configuration, parses arguments and runs generation."""

from argparse import Namespace
from collections.abc import Sequence

from buildjl.cli.parser import CLIParser
from buildjl.config import ConfigManager, GlobalConfig
from buildjl.github import GitHubClient
from buildjl.logger import (
    get_logger,
    set_console_level,
    update_logger_from_config,
)
from buildjl.pipeline import GenerationResult, generate_buildjl
from buildjl.registry import RegistryClient

logger = get_logger(__name__)


class CLIRunner:
    """Runs one generate_buildjl invocation."""

    def __init__(self, config_manager: ConfigManager | None = None) -> None:
        self.config_manager = config_manager or ConfigManager()
        self.global_config: GlobalConfig = self.config_manager.load_global_config()
        update_logger_from_config(self.global_config)

    def _apply_verbosity(self, args: Namespace) -> None:
        if args.verbose:
            set_console_level("DEBUG")
        elif args.quiet:
            set_console_level("WARNING")

    def run(self, argv: Sequence[str] | None = None) -> GenerationResult:
        """Parse ``argv`` and generate the build.jl script.

        Raises:
            BuildjlError: For any expected failure (usage, declaration,
                version resolution, release fetching)

        """
        args = CLIParser(self.global_config).parse_args(argv)
        self._apply_verbosity(args)
        logger.debug("Settings file: %s", self.config_manager.settings_file)

        github_cfg = self.global_config["github"]
        registry_cfg = self.global_config["registry"]
        timeout = self.global_config["network"]["timeout_seconds"]

        registry = RegistryClient(
            url=registry_cfg["url"], path=registry_cfg["path"], timeout=timeout
        )
        with GitHubClient(api_url=github_cfg["api_url"], timeout=timeout) as client:
            return generate_buildjl(
                args.build_tarballs,
                client=client,
                registry=registry,
                output_dir=args.output_dir,
                repo_name=args.repo_name,
                tag_name=args.tag_name,
                org_prefix=github_cfg["org_prefix"],
                download_url=github_cfg["download_url"],
                verbose=not args.quiet,
            )
