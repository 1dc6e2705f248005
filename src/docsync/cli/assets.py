"""CLI command listing relative asset references in the docs tree."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

import docsync
from docsync.core.asset_scanner import scan_docs


def main(argv: Optional[List[str]] = None) -> int:
    """Print every ``../../assets`` reference found under the docs directory."""
    parser = argparse.ArgumentParser(
        prog="docsync-assets",
        description="List markdown docs that reference repository assets",
    )
    parser.add_argument(
        "docs_dir",
        nargs="?",
        type=Path,
        default=Path("docs"),
        help="Docs directory to scan (default: docs)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to a YAML configuration file",
    )
    args = parser.parse_args(argv)

    try:
        docsync.configure(config_path=args.config)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        parser.print_usage(sys.stderr)
        print(
            f"invalid arguments, cannot load config {args.config}: {e}",
            file=sys.stderr,
        )
        return 2

    try:
        references = scan_docs(args.docs_dir)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not references:
        print("No asset references found")
        return 0

    for ref in references:
        print(f"{ref.file}:{ref.line}: {ref.reference}")
    print(f"\n{len(references)} asset reference(s) found")
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
