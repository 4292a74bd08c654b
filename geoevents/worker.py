"""Reminder sweeper: publish scheduled notifications once they are due.

Run with ``python -m geoevents.worker``. Delivered messages are stored in the
user inbox by the in-process consumer.
"""

from __future__ import annotations

import argparse
import logging

import anyio

from geoevents.container import Container
from geoevents.infrastructure.notifications import NotificationScheduler
from geoevents.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for the sweeper."""

    parser = argparse.ArgumentParser(
        description="Publish scheduled event reminders when they become due.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single sweep and exit.",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between sweeps (default: REMINDER_SWEEP_INTERVAL_SECONDS).",
    )
    return parser.parse_args(argv)


async def run_sweeper(
    scheduler: NotificationScheduler,
    interval: float,
    iterations: int | None = None,
) -> int:
    """Sweep every ``interval`` seconds; return the number of published notifications."""

    published = 0
    completed = 0
    while iterations is None or completed < iterations:
        published += await anyio.to_thread.run_sync(scheduler.sweep)
        completed += 1
        if iterations is not None and completed >= iterations:
            break
        await anyio.sleep(interval)
    return published


def main(argv: list[str] | None = None) -> int:
    """Run the sweeper until interrupted (or once with ``--once``)."""

    args = parse_args(argv)
    setup_logging()
    container = Container.build()
    container.inbox.register(container.channel)
    interval = args.interval or container.settings.reminder_sweep_interval_seconds
    try:
        published = anyio.run(
            run_sweeper,
            container.scheduler,
            interval,
            1 if args.once else None,
        )
    except KeyboardInterrupt:
        logger.info("Reminder sweeper stopped")
        return 0
    finally:
        container.shutdown()
    logger.info("Published %s reminders", published)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
