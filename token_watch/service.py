"""
Watcher Service

Wires the price client, Telegram adapter, reporter, watcher and command
poller together and runs them until SIGINT/SIGTERM.
"""

import asyncio
import contextlib
import logging
import signal
from typing import Sequence

from .alerts.telegram import AlertConfig, TelegramAlerts
from .api.feeds import PriceClient
from .config import TelegramSettings
from .core.commands import CommandHandler
from .core.reporter import Reporter
from .core.watcher import Watcher
from .models import Token
from .tokens import TOKENS

logger = logging.getLogger(__name__)


async def run_service(
    settings: TelegramSettings,
    tokens: Sequence[Token] = TOKENS,
    interval: float = None,
    dry_run: bool = False,
):
    """
    Run the watcher and the command poller until a shutdown signal.

    In dry-run mode alerts are logged instead of sent and commands are not
    polled.
    """
    logger.info("=" * 60)
    logger.info("TOKEN WATCHER STARTING")
    logger.info("=" * 60)
    logger.info(f"Tokens: {', '.join(t.name for t in tokens)}")
    logger.info(f"Dry run: {dry_run}")

    loop = asyncio.get_running_loop()

    async with PriceClient() as client, \
            TelegramAlerts(AlertConfig.from_settings(settings, dry_run=dry_run)) as alerts:
        reporter = Reporter(tokens, client)
        watcher = Watcher(reporter, alerts, settings.chat_id, interval=interval)
        handler = CommandHandler(reporter, alerts)

        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, watcher.stop, sig.name)

        poll_task = None
        if not dry_run:
            poll_task = asyncio.create_task(handler.poll(watcher.stop_event))

        try:
            await watcher.run()
        finally:
            if poll_task is not None:
                poll_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await poll_task
            for sig in (signal.SIGINT, signal.SIGTERM):
                with contextlib.suppress(NotImplementedError):
                    loop.remove_signal_handler(sig)

    logger.info("TOKEN WATCHER STOPPED")


async def run_once(tokens: Sequence[Token] = TOKENS, report: bool = False) -> str:
    """Run a single check (or report) and return its text."""
    async with PriceClient() as client:
        reporter = Reporter(tokens, client)
        if report:
            return await reporter.report()
        return await reporter.check()
