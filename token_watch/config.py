"""
Configuration for the Token Price Watcher

All tunables in one place. Telegram credentials come from the environment
(optionally loaded from a .env file at the project root).
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os

from dotenv import load_dotenv

from .errors import ConfigError

_project_root = Path(__file__).parent.parent
_env_path = _project_root / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class Config:
    """All configuration settings."""

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------
    # Time between price checks (seconds)
    check_interval_sec: float = 60 * 15

    # -------------------------------------------------------------------------
    # Price Feed Settings
    # -------------------------------------------------------------------------
    # Total timeout for a single price request
    request_timeout_sec: float = 30.0

    # Upper bound on simultaneous price requests
    max_concurrent_requests: int = 5

    # -------------------------------------------------------------------------
    # Telegram Settings
    # -------------------------------------------------------------------------
    telegram_api_url: str = "https://api.telegram.org"

    # Long polling timeout for getUpdates (seconds)
    updates_timeout_sec: int = 25

    # Back off this long after a failed getUpdates call
    poll_error_backoff_sec: float = 5.0

    # Telegram hard limit is 4096
    max_message_length: int = 4000

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: str = "INFO"
    log_file: str = "logs/token_watch.log"

    @property
    def telegram_bot_token(self) -> Optional[str]:
        return os.environ.get("TELEGRAM_BOT_TOKEN")

    @property
    def telegram_chat_id(self) -> Optional[str]:
        return os.environ.get("TELEGRAM_CHAT_ID")


@dataclass
class TelegramSettings:
    """Validated Telegram credentials."""
    bot_token: str
    chat_id: int

    @classmethod
    def from_env(cls, dry_run: bool = False) -> "TelegramSettings":
        """
        Read and validate TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID.

        In dry-run mode both are optional: nothing is sent, so a missing
        token becomes "" and a missing chat id becomes 0.

        Raises:
            ConfigError: If a value is missing or the chat id is not an integer
        """
        bot_token = config.telegram_bot_token or ""
        raw_chat_id = (config.telegram_chat_id or "").strip()

        if not bot_token and not dry_run:
            raise ConfigError(
                "TELEGRAM_BOT_TOKEN is required (or use --dry-run)",
                key="TELEGRAM_BOT_TOKEN",
            )

        if not raw_chat_id:
            if not dry_run:
                raise ConfigError(
                    "TELEGRAM_CHAT_ID is required (or use --dry-run)",
                    key="TELEGRAM_CHAT_ID",
                )
            return cls(bot_token=bot_token, chat_id=0)

        try:
            chat_id = int(raw_chat_id)
        except ValueError:
            raise ConfigError(
                f"TELEGRAM_CHAT_ID must be an integer, got {raw_chat_id!r}",
                key="TELEGRAM_CHAT_ID",
            ) from None

        return cls(bot_token=bot_token, chat_id=chat_id)


# Global config instance
config = Config()
