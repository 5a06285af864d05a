"""
Run the petclinic API under uvicorn.

Usage:
    python -m petclinic [--host HOST] [--port PORT] [--reload] [--log-file PATH]
"""

import argparse
import logging
import sys

import uvicorn

from .utils.config import AppSettings, ConfigError, LoggingConfigurator

logger = logging.getLogger("petclinic")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="petclinic", description="Run the petclinic REST API"
    )
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=9966, help="Port to listen on")
    parser.add_argument(
        "--reload", action="store_true", help="Restart on source changes"
    )
    parser.add_argument(
        "--log-file", help="Append logs to this file instead of standard output"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        settings = AppSettings.from_environment()
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    if args.log_file:
        LoggingConfigurator.configure_basic_logging(
            level=settings.log_level, log_file=args.log_file
        )
    else:
        LoggingConfigurator.configure_structured_logging(level=settings.log_level)
    logger.info(f"Serving petclinic on http://{args.host}:{args.port}")

    uvicorn.run(
        "petclinic.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
