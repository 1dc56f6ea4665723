"""Command-line entry point: run the activation engine against a profile document."""

import argparse
import asyncio

from loguru import logger

from src.activation.application.dispatcher import ActivationDispatcher
from src.activation.domain.exceptions import ProfileSourceError
from src.activation.infrastructure.container import init_container
from src.activation.infrastructure.logging import configure_logging
from src.config import AppConfig


def log_activation(profile_id: str) -> None:
    """Default activation callback; applying profiles is left to the host application."""
    logger.info(f"→ Profile {profile_id} selected for activation")


async def run_forever(dispatcher: ActivationDispatcher) -> None:
    await dispatcher.start()
    try:
        await asyncio.Event().wait()
    finally:
        await dispatcher.stop()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="profile-autoswitch",
        description="Select profiles automatically from cron schedules and network rules",
    )
    parser.add_argument("--profiles", help="Path to the profiles/schedules JSON document")
    parser.add_argument("--once", action="store_true", help="Run one schedule and rule pass, then exit")
    args = parser.parse_args(argv)

    config = AppConfig()
    if args.profiles:
        config.profiles.path = args.profiles

    configure_logging(config.logging)
    container = init_container(config)

    try:
        dispatcher = container.dispatcher(activate=log_activation)
    except ProfileSourceError as e:
        logger.error(e.message)
        return 1

    if args.once:
        activated = asyncio.run(dispatcher.run_once())
        for profile_id in activated:
            print(profile_id)
        return 0

    logger.info("🚀 Starting activation engine...")
    try:
        asyncio.run(run_forever(dispatcher))
    except KeyboardInterrupt:
        logger.info("🛑 Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
