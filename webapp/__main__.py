from __future__ import annotations

import argparse
import os

import uvicorn

from webapp.config import get_settings


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Users webapp (MongoDB + InfluxDB metrics)")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument("--log-level", default=settings.log_level, help="Log level name, e.g. INFO or DEBUG")
    args = parser.parse_args(argv)

    # The app configures its own logging from settings at startup.
    os.environ["LOG_LEVEL"] = args.log_level.upper()
    get_settings.cache_clear()

    uvicorn.run(
        "webapp.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
