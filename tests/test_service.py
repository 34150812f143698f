"""Tests for service wiring and signal-driven shutdown."""

import asyncio
import logging
import os
import signal

from token_watch.config import TelegramSettings
from token_watch.service import run_once, run_service


def test_sigterm_stops_service(caplog):
    settings = TelegramSettings(bot_token="", chat_id=0)

    async def scenario():
        task = asyncio.create_task(
            run_service(settings, tokens=[], interval=3600, dry_run=True)
        )
        await asyncio.sleep(0.1)
        os.kill(os.getpid(), signal.SIGTERM)
        await asyncio.wait_for(task, timeout=2)

    with caplog.at_level(logging.INFO):
        asyncio.run(scenario())

    assert "Watcher stopped: SIGTERM" in caplog.text
    assert "TOKEN WATCHER STOPPED" in caplog.text


def test_run_once_without_tokens_is_quiet():
    assert asyncio.run(run_once(tokens=[])) == ""
    assert asyncio.run(run_once(tokens=[], report=True)) == ""
