#!/usr/bin/env python3
"""
Scheduled AI cache jobs, meant for cron.

    cache_jobs.py warmup   # nightly, off-peak
    cache_jobs.py sweep    # hourly
"""

import argparse
import asyncio
import json
import sys
from dataclasses import asdict

import structlog

from touchline.common.logging import configure_logging
from touchline.config import get_settings
from touchline.db.session import async_session_factory, engine
from touchline.providers.registry import close_http_client
from touchline.services.jobs import run_sweep, run_warmup

logger = structlog.stdlib.get_logger()


async def _main(job: str) -> int:
    settings = get_settings()
    configure_logging(settings.logging.level, settings.logging.format)

    try:
        if job == "warmup":
            report = await run_warmup(async_session_factory, settings)
            print(json.dumps(asdict(report), indent=2))
            return 0 if report.total_failed == 0 else 1

        removed = await run_sweep(async_session_factory, settings)
        await logger.ainfo("cache_jobs.sweep.done", removed=removed)
        return 0
    finally:
        await close_http_client()
        await engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Touchline AI cache jobs")
    parser.add_argument("job", choices=["warmup", "sweep"])
    args = parser.parse_args()
    return asyncio.run(_main(args.job))


if __name__ == "__main__":
    sys.exit(main())
