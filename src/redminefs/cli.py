"""Command line entry point: mount a Redmine instance as a filesystem."""

import argparse
import logging
import sys

from .config import default_profile, load_settings
from .errors import ConfigError
from .mount import mount
from .nodes import RootNode
from .tracker import RedmineClient

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="redminefs",
        description="Mount Redmine projects and issues as a read-only filesystem.",
    )
    parser.add_argument("mountpoint", help="Directory to mount on")
    parser.add_argument(
        "-p",
        "--profile",
        default=default_profile(),
        help="Settings profile (default: $REDMINEFS_ENV)",
    )
    parser.add_argument(
        "--background",
        action="store_true",
        help="Detach after mounting",
    )
    parser.add_argument(
        "--allow-other",
        action="store_true",
        help="Let other users access the mount",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the redminefs command."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    try:
        settings = load_settings(args.profile)
    except ConfigError as e:
        print(f"redminefs: {e}", file=sys.stderr)
        return 1

    client = RedmineClient(
        settings.endpoint,
        settings.apikey,
        insecure=settings.insecure,
        timeout=settings.timeout,
    )
    logger.info("Serving %s", settings.endpoint)
    mount(
        RootNode(client),
        args.mountpoint,
        foreground=not args.background,
        allow_other=args.allow_other,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
