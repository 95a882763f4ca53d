"""Application entry point: serve the rift chess relay."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from riftchess.config import LOG_LEVELS, ConfigError, Settings
from riftchess.netplay.server import create_app


def build_settings(argv: list[str] | None = None) -> Settings:
    """Environment settings with command-line overrides applied."""
    parser = argparse.ArgumentParser(
        description="Run the Rift Chess websocket relay.",
    )
    parser.add_argument("--host", default=None, help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Port (default: 8000)")
    parser.add_argument(
        "--log-level", choices=LOG_LEVELS, default=None,
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Seed for the dice of every room (default: unseeded)",
    )
    parser.add_argument(
        "--rift-attempts", type=int, default=None,
        help="Draws allowed when generating random rifts (default: 100)",
    )
    args = parser.parse_args(argv)

    try:
        return Settings.from_env().override(
            host=args.host,
            port=args.port,
            log_level=args.log_level,
            seed=args.seed,
            rift_attempts=args.rift_attempts,
        )
    except ConfigError as exc:
        parser.error(str(exc))


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    settings = build_settings(argv)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
