"""Serve the cache admin API: ``python -m touchline [--host H] [--port P] [--workers N]``."""

from __future__ import annotations

import argparse

import uvicorn

from touchline.config import get_settings


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="touchline", description="Touchline cache admin API")
    parser.add_argument("--host", default=settings.server.host)
    parser.add_argument("--port", type=int, default=settings.server.port)
    parser.add_argument("--workers", type=int, default=settings.server.workers)
    args = parser.parse_args(argv)

    uvicorn.run(
        "touchline.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        workers=args.workers,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
