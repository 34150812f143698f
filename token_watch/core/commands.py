"""
Command Handler

Answers the "/p" chat command with the current price report and runs the
getUpdates polling loop that feeds it.
"""

import asyncio
import logging
from typing import Dict, Optional, TYPE_CHECKING

from ..config import config
from ..errors import DeliveryError
from ..utils.formatting import code_block
from .reporter import Reporter

if TYPE_CHECKING:
    from ..alerts.telegram import TelegramAlerts

logger = logging.getLogger(__name__)

REPORT_COMMAND = "/p"


def parse_command(text: Optional[str]) -> Optional[str]:
    """
    Extract the command from a message text.

    "/p", "/p@token_watch_bot" and "/p anything" all give "/p".
    Non-command text gives None.
    """
    if not text or not text.startswith("/"):
        return None
    command = text.split(maxsplit=1)[0]
    return command.split("@", 1)[0].lower()


class CommandHandler:
    """Maps inbound chat commands to reporter calls."""

    def __init__(
        self,
        reporter: Reporter,
        alerts: "TelegramAlerts",
        poll_backoff: float = None,
    ):
        self.reporter = reporter
        self.alerts = alerts
        self.poll_backoff = poll_backoff if poll_backoff is not None else config.poll_error_backoff_sec
        self._offset: Optional[int] = None

    async def report_text(self) -> str:
        """Report formatted as a code block, or a failure message."""
        try:
            text = await self.reporter.report()
        except Exception as e:
            logger.exception(f"Report failed: {e}")
            text = f"fail to report: {e}"
        return code_block(text)

    async def handle_command(self, command: str, chat_id: int) -> bool:
        """
        Handle one command for a chat.

        Returns:
            True if the command was recognised
        """
        if command != REPORT_COMMAND:
            logger.debug(f"Ignoring unknown command {command!r} from chat {chat_id}")
            return False

        logger.info(f"Report requested from chat {chat_id}")
        text = await self.report_text()
        try:
            await self.alerts.send_message(chat_id, text, parse_mode="MarkdownV2")
        except DeliveryError as e:
            logger.error(f"Got error when sending report: {e}")
        return True

    async def handle_update(self, update: Dict) -> bool:
        """Dispatch a single getUpdates entry."""
        message = update.get("message") or {}
        command = parse_command(message.get("text"))
        chat_id = (message.get("chat") or {}).get("id")
        if command is None or chat_id is None:
            return False
        return await self.handle_command(command, chat_id)

    async def poll(self, stop_event: asyncio.Event):
        """
        Poll Telegram for commands until stop_event is set.

        Polling errors are logged and retried after a back-off.
        """
        logger.info("Listening for commands...")

        while not stop_event.is_set():
            try:
                updates = await self.alerts.get_updates(offset=self._offset)
            except DeliveryError as e:
                logger.warning(f"Polling for updates failed: {e}")
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=self.poll_backoff)
                except asyncio.TimeoutError:
                    pass
                continue

            for update in updates:
                update_id = update.get("update_id")
                if isinstance(update_id, int):
                    self._offset = update_id + 1
                try:
                    await self.handle_update(update)
                except Exception as e:
                    logger.exception(f"Error handling update {update_id}: {e}")

        logger.info("Stopped listening for commands")
