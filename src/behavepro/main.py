"""Command line entry point for the Behave Pro client.

Downloads the feature files of one project given explicit credentials, or
of every project listed in a JSON configuration file.
"""

import sys
import logging
import argparse
from typing import Dict, Any, List, Optional

from dotenv import load_dotenv

from . import __version__
from .api.errors import BehaveProError
from .config import Settings, DEFAULT_HOST, DEFAULT_OUTPUT, DEFAULT_CONFIG
from .pipeline import run

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="behavepro",
        description="Download Cucumber feature files of JIRA projects from Behave Pro",
        epilog="Further docs at http://docs.behave.pro"
    )

    # Every option defaults to None so unset flags never override the environment
    connection_group = parser.add_argument_group('Connection Options')
    connection_group.add_argument(
        "--host",
        default=None,
        help=f"Behave Pro host (default: {DEFAULT_HOST})"
    )
    connection_group.add_argument(
        "--id", "--project", "--key",
        dest="project_id",
        default=None,
        metavar="PROJECT_ID",
        help="JIRA project id"
    )
    connection_group.add_argument(
        "--userId", "--user",
        dest="user_id",
        default=None,
        metavar="USER",
        help="Behave Pro user id"
    )
    connection_group.add_argument(
        "--apiKey", "--api", "--password",
        dest="api_key",
        default=None,
        metavar="KEY",
        help="Behave Pro api key"
    )
    connection_group.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: wait indefinitely)"
    )

    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument(
        "--output", "--dir", "--directory",
        dest="output",
        default=None,
        metavar="DIRECTORY",
        help=f"Output directory (default: {DEFAULT_OUTPUT})"
    )
    output_group.add_argument(
        "--manual", "-m",
        action="store_true",
        default=None,
        help="Include scenarios marked as manual"
    )
    output_group.add_argument(
        "--config",
        default=None,
        help=f"JSON config file, relative to the current directory (default: {DEFAULT_CONFIG})"
    )

    system_group = parser.add_argument_group('System Options')
    system_group.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log progress messages"
    )
    system_group.add_argument(
        "--debug",
        action="store_true",
        help="Log debug messages"
    )
    system_group.add_argument(
        "--version",
        action="version",
        version=f"Behave Pro Python client v{__version__}"
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Merge command line values over environment values and defaults."""
    overrides: Dict[str, Any] = {
        'host': args.host,
        'project_id': args.project_id,
        'user_id': args.user_id,
        'api_key': args.api_key,
        'output': args.output,
        'manual': args.manual,
        'config': args.config,
        'timeout': args.timeout,
    }
    return Settings.from_env().merged(overrides)


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the client and return the process exit code."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.debug)

    try:
        settings = settings_from_args(args)
        results = run(settings, on_complete=lambda result: print(result.summary))
    except (BehaveProError, ValueError) as e:
        logger.debug("Fetch failed", exc_info=True)
        print(f"There was an error: {e}", file=sys.stderr)
        return 1

    if not results:
        print("No projects configured, nothing downloaded")
    return 0


if __name__ == "__main__":
    sys.exit(main())
