"""CLI entry point for synchronizing a documentation version."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import httpx
import structlog
import yaml
from pydantic import ValidationError

import docsync
from docsync.api.readme_client import ReadmeClient
from docsync.clients.rdme_client import RdmeClient
from docsync.common.config import Config, ReadmeSettings
from docsync.core.exceptions import DocSyncError
from docsync.core.synchronizer import SyncResult, VersionSynchronizer

logger = structlog.get_logger(__name__)

EXAMPLES = """\
versionTag or version is required!
create or update option is required!

examples:
  docsync --vt=piotr-123 --create
  docsync --v=v2018-08-01-piotr-123 --create
  docsync --vt=piotr-123 --update
  docsync --v=v2018-08-01-piotr-123 --update
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``docsync`` command."""
    parser = argparse.ArgumentParser(
        prog="docsync",
        description="Fork, clean and repopulate a documentation version",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        "--v",
        "-v",
        dest="version",
        help="Full version identifier, e.g. v2018-08-01-piotr-123",
    )
    parser.add_argument(
        "--versionTag",
        "--version-tag",
        "--vt",
        "-vt",
        dest="version_tag",
        help="Tag appended to the base version name",
    )
    parser.add_argument(
        "--create",
        action="store_true",
        help="Fork the version from the base version before populating it",
    )
    parser.add_argument(
        "--update",
        action="store_true",
        help="Clean and populate an existing version",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to a YAML configuration file",
    )
    return parser


def validate_options(
    version: Optional[str],
    version_tag: Optional[str],
    create: bool,
    update: bool,
) -> Optional[str]:
    """
    Check the flag combination.

    Returns:
        A usage error message, or None when the options are valid
    """
    if not version and not version_tag:
        return "missing `version` or `versionTag`"
    if version and version_tag:
        return "you provided conflicting arguments `version` and `versionTag`"
    if not create and not update:
        return "missing `update` or `create`"
    if create and update:
        return "you provided conflicting arguments `update` and `create`"
    return None


async def synchronize(
    config: Config,
    version: str,
    create: bool,
    root: Optional[Path] = None,
) -> SyncResult:
    """Open the API and rdme clients and run the synchronizer."""
    api_key = ReadmeSettings().readme_io_auth

    async with ReadmeClient.from_config(config.readme, api_key=api_key) as client:
        async with RdmeClient.from_config(config.rdme, api_key=api_key) as rdme:
            synchronizer = VersionSynchronizer(
                client=client,
                uploader=rdme,
                config=config.sync,
                tables=config.tables,
                root=root,
            )
            return await synchronizer.run(version, create=create)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the ``docsync`` command.

    Returns:
        0 on success or help, 2 on usage errors, 1 when synchronization fails
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not any((args.version, args.version_tag, args.create, args.update)):
        parser.print_help()
        return 0

    error = validate_options(args.version, args.version_tag, args.create, args.update)
    if error:
        parser.print_usage(sys.stderr)
        print(
            f"invalid arguments, {error}, check `docsync --help` for more information",
            file=sys.stderr,
        )
        return 2

    try:
        config = docsync.configure(config_path=args.config)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        parser.print_usage(sys.stderr)
        print(
            f"invalid arguments, cannot load config {args.config}: {e}",
            file=sys.stderr,
        )
        return 2
    version = args.version or config.sync.version_from_tag(args.version_tag)

    try:
        result = asyncio.run(synchronize(config, version, create=args.create))
    except (DocSyncError, httpx.HTTPError) as e:
        logger.error("sync_failed", version=version, error=str(e), error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\n\nDONE!\nVisit: {result.url}")
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
