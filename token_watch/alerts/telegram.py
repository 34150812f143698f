"""
Telegram Alerts
===============

Telegram Bot API adapter for the token watcher.

- Outbound: sendMessage (alerts and command replies)
- Inbound: getUpdates long polling (commands)

Request URLs contain the bot token, so errors are logged by status code
and exception type only.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import aiohttp
import requests

from ..config import TelegramSettings, config
from ..errors import DeliveryError

logger = logging.getLogger(__name__)


@dataclass
class AlertConfig:
    """Configuration for alert sending."""
    bot_token: str
    chat_id: int
    dry_run: bool = False
    max_message_length: int = 4000
    api_url: str = "https://api.telegram.org"

    @classmethod
    def from_settings(cls, settings: TelegramSettings, dry_run: bool = False) -> "AlertConfig":
        return cls(
            bot_token=settings.bot_token,
            chat_id=settings.chat_id,
            dry_run=dry_run,
            max_message_length=config.max_message_length,
            api_url=config.telegram_api_url,
        )


class TelegramAlerts:
    """
    Telegram sender and update poller.

    send_message() raises DeliveryError on any failure; callers decide
    whether to log and drop.
    """

    def __init__(self, config: AlertConfig):
        """
        Initialize Telegram alerts.

        Args:
            config: AlertConfig with bot token, chat ID, and settings
        """
        self.config = config
        self._validate()
        self._session: Optional[aiohttp.ClientSession] = None

    def _validate(self):
        """Validate configuration."""
        if not self.config.dry_run and not self.config.bot_token:
            raise ValueError("TELEGRAM_BOT_TOKEN is required (or use --dry-run)")

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self):
        if self._session is None:
            self._session = aiohttp.ClientSession()

    async def close(self):
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    def _method_url(self, method: str) -> str:
        return f"{self.config.api_url}/bot{self.config.bot_token}/{method}"

    def _truncate_message(self, text: str) -> str:
        """Truncate message to Telegram's character limit."""
        if len(text) > self.config.max_message_length:
            return text[:self.config.max_message_length - 20] + "\n... (truncated)"
        return text

    async def _call(self, method: str, payload: Dict[str, Any], timeout: float = 10) -> Any:
        """
        Call a Bot API method and return its "result".

        Raises:
            DeliveryError: On network errors, HTTP errors or ok=false
        """
        await self._ensure_session()

        try:
            async with self._session.post(
                self._method_url(method),
                json=payload,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                data = await response.json(content_type=None)
                status = response.status
        except asyncio.TimeoutError:
            raise DeliveryError(f"Telegram {method} timed out") from None
        except aiohttp.ClientError as e:
            raise DeliveryError(f"Telegram {method} failed: {type(e).__name__}") from None
        except ValueError:
            raise DeliveryError(f"Telegram {method} returned invalid JSON") from None

        if status != 200 or not isinstance(data, dict) or not data.get("ok"):
            description = data.get("description") if isinstance(data, dict) else None
            if status == 429:
                logger.warning("Telegram rate limit hit (429)")
            raise DeliveryError(
                f"Telegram {method} HTTP {status}: {description or 'unknown error'}",
                status_code=status,
            )

        return data.get("result")

    async def send_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: Optional[str] = "MarkdownV2",
    ) -> Optional[int]:
        """
        Send a message via Telegram Bot API.

        Args:
            chat_id: Destination chat
            text: Message text
            parse_mode: Telegram parse mode, None for plain text

        Returns:
            message_id of the sent message (None in dry run)

        Raises:
            DeliveryError: If the message could not be sent
        """
        text = self._truncate_message(text)

        if self.config.dry_run:
            logger.info(f"[DRY RUN] Would send Telegram message to {chat_id}:\n{text}")
            return None

        payload = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode

        result = await self._call("sendMessage", payload)
        message_id = result.get("message_id") if isinstance(result, dict) else None
        logger.info(f"Telegram message sent (message_id: {message_id})")
        return message_id

    async def get_updates(self, offset: Optional[int] = None, timeout: int = None) -> List[Dict]:
        """
        Long-poll for new updates.

        Args:
            offset: First update_id to return (last seen + 1)
            timeout: Long polling timeout in seconds (default from config)

        Returns:
            List of update dicts

        Raises:
            DeliveryError: If the request fails
        """
        timeout = timeout if timeout is not None else config.updates_timeout_sec
        payload: Dict[str, Any] = {"timeout": timeout, "allowed_updates": ["message"]}
        if offset is not None:
            payload["offset"] = offset

        # HTTP timeout must outlast the long poll
        result = await self._call("getUpdates", payload, timeout=timeout + 10)
        return result if isinstance(result, list) else []


def send_test_alert(
    bot_token: str = None,
    chat_id: int = None,
    dry_run: bool = False
) -> bool:
    """
    Send a test message to verify Telegram configuration.

    Synchronous, so it can run before the event loop starts.

    Returns:
        True if successful
    """
    if bot_token is None or chat_id is None:
        settings = TelegramSettings.from_env(dry_run=dry_run)
        bot_token = settings.bot_token if bot_token is None else bot_token
        chat_id = settings.chat_id if chat_id is None else chat_id

    text = "Test alert - token watcher configuration verified."

    if dry_run:
        logger.info(f"[DRY RUN] Would send Telegram message to {chat_id}:\n{text}")
        return True

    url = f"{config.telegram_api_url}/bot{bot_token}/sendMessage"
    try:
        response = requests.post(url, json={"chat_id": chat_id, "text": text}, timeout=10)
        response.raise_for_status()
        logger.info("Telegram test message sent successfully")
        return True
    except requests.exceptions.Timeout:
        logger.error("Telegram request timed out")
    except requests.exceptions.HTTPError as e:
        # Log status code without exposing token in URL
        status_code = e.response.status_code if e.response is not None else "unknown"
        logger.error(f"Telegram HTTP error: {status_code}")
    except requests.exceptions.ConnectionError:
        logger.error("Telegram connection error - network issue")
    except requests.exceptions.RequestException:
        logger.error("Telegram request failed")
    return False
