"""CLI entrypoint for serving the manuscript HTTP API."""

from __future__ import annotations

import argparse
import os

import uvicorn

from manuscript.adapters.observability import configure_runtime_logging

APP_FACTORY = "manuscript.api.app:create_app"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the manuscript editing API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument(
        "--db-path",
        default="",
        help="Snapshot store path (default: MANUSCRIPT_DB_PATH or work/local/manuscript.db).",
    )
    parser.add_argument(
        "--backend",
        default="",
        choices=["", "sqlite", "json-file"],
        help="Snapshot store backend (default: MANUSCRIPT_STORE_BACKEND or sqlite).",
    )
    return parser


def store_environment(parsed: argparse.Namespace) -> dict[str, str]:
    """Store settings passed on the command line, as environment overrides.

    The app is built by uvicorn through the factory path, possibly in a reload
    worker, so settings travel through the environment rather than arguments.
    """
    overrides = {
        "MANUSCRIPT_DB_PATH": str(parsed.db_path).strip(),
        "MANUSCRIPT_STORE_BACKEND": str(parsed.backend).strip(),
    }
    return {name: value for name, value in overrides.items() if value}


def main(argv: list[str] | None = None) -> None:
    configure_runtime_logging()
    parsed = build_arg_parser().parse_args(argv)
    os.environ.update(store_environment(parsed))
    uvicorn.run(
        APP_FACTORY,
        factory=True,
        host=str(parsed.host),
        port=int(parsed.port),
        reload=bool(parsed.reload),
    )


if __name__ == "__main__":
    main()
