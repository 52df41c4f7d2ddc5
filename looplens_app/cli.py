"""
Command line entry point for the LoopLens market agent.

Loads .env credentials, configures logging, resolves settings and then
either runs the pipeline once (--once) or hands it to the scheduler until
interrupted.
"""

import argparse
import asyncio
import signal
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .config.loader import ConfigLoader
from .engine import AgentContext, MarketCreationEngine
from .errors import ConfigurationError
from .logging.config import configure_logging, get_logger
from .scheduler import PipelineScheduler

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="looplens-agent",
        description="Generate, arbitrate and create prediction markets on a fixed schedule",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run the pipeline a single time and exit (0 if a market was created)",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory containing settings.yaml (default: bundled config/)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    return parser


async def run_once(context: AgentContext) -> int:
    """Single pipeline run; returns the process exit code."""
    engine = MarketCreationEngine(context)
    try:
        result = await engine.run_once()
    finally:
        await context.aclose()

    if result.succeeded:
        logger.info("Market created", **result.commit.to_dict())
        return 0
    return 1


async def run_scheduled(context: AgentContext, scheduler: PipelineScheduler) -> int:
    """Run the scheduler until SIGINT/SIGTERM."""
    loop = asyncio.get_running_loop()
    try:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, scheduler.stop)
    except NotImplementedError:
        # Windows doesn't support add_signal_handler
        pass

    try:
        await scheduler.run_forever()
    finally:
        await context.aclose()
        logger.info("Scheduler statistics", **scheduler.get_stats())
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    load_dotenv(override=False)
    configure_logging(level=args.log_level, format_json=args.json_logs)

    try:
        settings = ConfigLoader.create(args.config_dir).load_settings()
    except ConfigurationError as e:
        logger.error("Configuration invalid", error=str(e))
        return 2

    context = AgentContext.create(settings)

    if args.once:
        return asyncio.run(run_once(context))

    engine = MarketCreationEngine(context)
    scheduler = PipelineScheduler(engine.run_once, settings.schedule)
    try:
        return asyncio.run(run_scheduled(context, scheduler))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
