"""
Token Watcher - CLI Entry Point
===============================

Usage:
    # Start watcher (alerts + /p command)
    token-watch

    # Dry run (alerts logged, no Telegram)
    token-watch --dry-run

    # One-off check or report printed to stdout
    token-watch --once
    token-watch --report

    # Test Telegram configuration
    token-watch --test-telegram
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from .alerts.telegram import send_test_alert
from .config import TelegramSettings, config
from .errors import ConfigError
from .service import run_once, run_service


def setup_logging(log_level: str = config.log_level, log_file: str = config.log_file):
    """Configure logging for the watcher."""
    # Create date-stamped log file (e.g., logs/token_watch_2026-01-18.log)
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    date_str = datetime.now().strftime("%Y-%m-%d")
    dated_log_file = log_path.parent / f"{log_path.stem}_{date_str}{log_path.suffix}"

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    file_handler = logging.FileHandler(dated_log_file)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from HTTP libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

    root_logger.info(f"Logging to: {dated_log_file}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Token Price Watcher',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  TELEGRAM_BOT_TOKEN   Bot API token
  TELEGRAM_CHAT_ID     Chat that receives alerts

Examples:
  token-watch                  # Start watcher
  token-watch --dry-run        # Log alerts instead of sending
  token-watch --report         # Print current prices and exit
  token-watch --test-telegram  # Test Telegram setup
        """
    )

    parser.add_argument(
        '--interval',
        type=float,
        default=config.check_interval_sec,
        help=f'Seconds between price checks (default: {config.check_interval_sec:.0f})'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Log alerts instead of sending to Telegram'
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--once',
        action='store_true',
        help='Run a single check, print the alert text and exit'
    )
    mode.add_argument(
        '--report',
        action='store_true',
        help='Print the current price report and exit'
    )
    mode.add_argument(
        '--test-telegram',
        action='store_true',
        help='Send a test message to verify Telegram configuration'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=config.log_level,
        help=f'Log level (default: {config.log_level})'
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    if args.once or args.report:
        text = asyncio.run(run_once(report=args.report))
        print(text if text else "No alerts.")
        return 0

    try:
        settings = TelegramSettings.from_env(dry_run=args.dry_run)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if args.test_telegram:
        if send_test_alert(settings.bot_token, settings.chat_id, dry_run=args.dry_run):
            print("Test alert sent successfully!")
            return 0
        print("Failed to send test alert. Check your TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID.")
        return 1

    try:
        asyncio.run(run_service(settings, interval=args.interval, dry_run=args.dry_run))
    except KeyboardInterrupt:
        logger.info("Watcher stopped by user")
    except Exception as e:
        logger.exception(f"Watcher service error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
