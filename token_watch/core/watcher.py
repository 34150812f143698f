"""
Watcher

Periodic price check loop:
1. Run Reporter.check() every check interval (first run immediately)
2. Send non-empty alert text to the Telegram chat
3. Stop cleanly when stop() is called

A failing cycle is logged and the loop carries on.
"""

import asyncio
import logging
from typing import Optional, TYPE_CHECKING

from ..config import config
from ..errors import DeliveryError
from .reporter import Reporter

if TYPE_CHECKING:
    from ..alerts.telegram import TelegramAlerts

logger = logging.getLogger(__name__)


class Watcher:
    """
    Runs price checks on a fixed schedule until stopped.

    Ticks are aligned to the start time (fixed rate), so a slow check does
    not push later checks back. stop() is one-shot: the check in progress
    finishes, no further checks run.
    """

    def __init__(
        self,
        reporter: Reporter,
        alerts: "TelegramAlerts",
        chat_id: int,
        interval: float = None,
    ):
        """
        Initialize the watcher.

        Args:
            reporter: Reporter to run checks with
            alerts: Outbound message sink
            chat_id: Chat that receives alerts
            interval: Seconds between checks (default from config)
        """
        self.reporter = reporter
        self.alerts = alerts
        self.chat_id = chat_id
        self.interval = interval if interval is not None else config.check_interval_sec

        self._stop_event: Optional[asyncio.Event] = None
        self._stop_reason: Optional[str] = None
        self.running = False

    @property
    def stop_event(self) -> asyncio.Event:
        # Created lazily so it binds to the running loop
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        return self._stop_event

    @property
    def stopped(self) -> bool:
        return self.stop_event.is_set()

    def stop(self, reason: str = "shutdown"):
        """Request the loop to stop. Only the first reason is kept."""
        if self.stopped:
            return
        logger.info(f"Stop requested: {reason}")
        self._stop_reason = reason
        self.stop_event.set()

    async def run_once(self) -> str:
        """
        Run a single check cycle.

        Returns:
            The alert text that was sent, or "" if nothing was sent
        """
        logger.info("Checking prices...")
        text = await self.reporter.check()
        if not text:
            logger.info("No alerts this cycle")
            return ""

        try:
            await self.alerts.send_message(self.chat_id, text, parse_mode="MarkdownV2")
        except DeliveryError as e:
            logger.error(f"Got error when sending alert: {e}")
        return text

    async def run(self):
        """Main loop. Returns once stop() has been called."""
        loop = asyncio.get_running_loop()
        stop_event = self.stop_event
        self.running = True
        logger.info(f"Watcher started, checking every {self.interval:.0f}s")

        next_tick = loop.time()
        try:
            while not stop_event.is_set():
                try:
                    await self.run_once()
                except Exception as e:
                    logger.exception(f"Error in check cycle: {e}")

                next_tick += self.interval
                now = loop.time()
                if next_tick < now:
                    # Missed ticks fire once, then realign
                    next_tick = now

                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=next_tick - now)
                except asyncio.TimeoutError:
                    continue
        finally:
            self.running = False

        logger.info(f"Watcher stopped: {self._stop_reason}")
