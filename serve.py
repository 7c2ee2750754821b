from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from app import create_app
from endpoints.resource_endpoints import describe_routes
from persistence import DiskResourceStore, ParseFailureError
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="json-server",
        description=(
            "Create a dummy REST API from a JSON file. Array values get GET, GET by id, "
            "POST, PUT by id, PATCH by id and DELETE by id endpoints; any other value "
            "gets a GET endpoint."
        ),
    )
    parser.add_argument("-p", "--port", type=int, default=None, help="Port the server will listen to")
    parser.add_argument("-f", "--file", type=Path, default=None, help="JSON file used as storage")
    parser.add_argument("-l", "--logs", action="store_true", default=None, help="Enable logs")
    parser.add_argument("--host", default=None, help="Interface to bind")
    return parser


def resolve_settings(argv: list[str] | None = None) -> Settings:
    args = build_parser().parse_args(argv)
    return get_settings().with_overrides(
        port=args.port,
        db_file=args.file,
        enable_logs=args.logs,
        host=args.host,
    )


def configure_logging(enabled: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if enabled else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    load_dotenv("local.env")
    settings = resolve_settings(argv)
    configure_logging(settings.enable_logs)

    try:
        store = DiskResourceStore.open(settings.db_file)
    except ParseFailureError as e:
        logger.error("%s", e)
        return 1

    app = create_app(store=store, settings=settings)

    base_url = f"http://localhost:{settings.port}"
    print("JSON Server successfully running\n")
    print("Resources")
    for line in describe_routes(store, base_url):
        print(line)
    print("\nHome")
    print(base_url)
    print()

    # In-flight requests get the grace period, then remaining connections are closed.
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="info" if settings.enable_logs else "warning",
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
