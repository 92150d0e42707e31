"""Command line entry point."""

import argparse
import json
import sys
from typing import List, Optional

import yaml
from pydantic import ValidationError

from restpager.config import SourceConfig
from restpager.exceptions import RestPagerException
from restpager.pagination import create_pagination_iterator
from restpager.utils.logging import configure_logging, get_logger


def _load_config(path: str, env: Optional[str]) -> Optional[SourceConfig]:
    try:
        return SourceConfig.from_yaml(path, env=env)
    except ValidationError as e:
        get_logger().error("Invalid configuration", path=path, errors=e.error_count())
        print(str(e), file=sys.stderr)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        get_logger().error("Could not load configuration", path=path, error=str(e))
    return None


def pages_command(args) -> int:
    """Walk every page of the configured source and print one JSON line per page."""
    config = _load_config(args.config, args.env)
    if config is None:
        return 1

    if args.log_level is None:
        configure_logging(
            args.structured or config.logging.structured, config.logging.level.value
        )
    if args.max_pages:
        config = config.model_copy(update={"max_pages": args.max_pages})

    pages = 0
    try:
        iterator = create_pagination_iterator(config)
        for page in iterator:
            summary = {
                "number": page.number,
                "status": page.status_code,
                "url": page.url,
                "bytes": len(page.body),
            }
            if args.include_body:
                summary["body"] = page.text
            print(json.dumps(summary))
            pages += 1
    except RestPagerException as e:
        get_logger().error("Pagination failed", pages=pages, error=str(e))
        return 1

    return 0


def validate_command(args) -> int:
    """Load and validate a source config."""
    config = _load_config(args.config, args.env)
    if config is None:
        return 1
    try:
        create_pagination_iterator(config, transport=_NoNetworkTransport())
    except RestPagerException as e:
        get_logger().error("Invalid configuration", path=args.config, error=str(e))
        return 1
    print(f"✓ {args.config} is valid (pagination: {config.pagination_type.value})")
    return 0


class _NoNetworkTransport:
    """Stands in for the real transport when only construction is checked."""

    def execute(self, request):
        raise RuntimeError("validate does not perform requests")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Walk paginated REST endpoints",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  restpager pages source.yaml                  Print every page as a JSON line
  restpager pages source.yaml --max-pages 3    Stop after three pages
  restpager validate source.yaml --env prod    Validate with prod overrides
        """,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging verbosity (default: from config, else INFO)",
    )
    parser.add_argument("--structured", action="store_true", help="Emit JSON log lines")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    pages_parser = subparsers.add_parser("pages", help="Fetch all pages")
    pages_parser.add_argument("config", help="Path to YAML source config")
    pages_parser.add_argument("--env", default=None, help="Environment override to apply")
    pages_parser.add_argument("--max-pages", type=int, default=None, help="Stop after N pages")
    pages_parser.add_argument(
        "--include-body", action="store_true", help="Include the page body in the output"
    )

    validate_parser = subparsers.add_parser("validate", help="Validate a source config")
    validate_parser.add_argument("config", help="Path to YAML source config")
    validate_parser.add_argument("--env", default=None, help="Environment override to apply")

    args = parser.parse_args(argv)

    configure_logging(args.structured, args.log_level or "INFO")

    if args.command == "pages":
        return pages_command(args)
    elif args.command == "validate":
        return validate_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
