"""Main CLI entry point for generate_buildjl."""

import sys

from buildjl.cli import CLIRunner
from buildjl.exceptions import BuildjlError
from buildjl.logger import get_logger

logger = get_logger(__name__)


def main() -> None:
    """Run the CLI application.

    Expected failures are reported as a one-line error; anything else is
    logged with its traceback. Both exit with status 1.
    """
    try:
        CLIRunner().run()
    except BuildjlError as e:
        logger.error("%s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        sys.exit(1)
    except Exception:
        logger.exception("Unexpected error")
        sys.exit(1)


if __name__ == "__main__":
    main()
