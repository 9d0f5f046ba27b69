"""Entry point for running the CLI as a module."""

import argparse
import asyncio
import sys

from .relay_cli import main


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Interactive terminal client for the chat relay",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default="localhost",
        help="Server host (default: localhost)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Server port (default: 3000)",
    )
    parser.add_argument(
        "--session-id",
        type=str,
        default=None,
        help="Resume this session instead of generating a new one",
    )
    parser.add_argument(
        "--history-limit",
        type=int,
        default=10,
        help="Turns to show at startup and for /history (default: 10)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args()


def cli_entry() -> None:
    """CLI entry point."""
    args = parse_args()

    try:
        asyncio.run(
            main(
                host=args.host,
                port=args.port,
                session_id=args.session_id,
                history_limit=args.history_limit,
                debug=args.debug,
            )
        )
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    cli_entry()
