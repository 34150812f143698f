"""Tests for the /p command handler and update polling."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from token_watch.core.commands import CommandHandler, parse_command
from token_watch.errors import DeliveryError
from tests.conftest import FakeAlerts

REPORT = "name: BGS, buy_price: 0.03, current_price: 0.045, diff: +50%\n"


def make_update(update_id, text, chat_id=7):
    return {
        "update_id": update_id,
        "message": {"message_id": update_id, "chat": {"id": chat_id}, "text": text},
    }


@pytest.fixture
def reporter():
    reporter = Mock()
    reporter.report = AsyncMock(return_value=REPORT)
    return reporter


class TestParseCommand:

    @pytest.mark.parametrize("text,command", [
        ("/p", "/p"),
        ("/P", "/p"),
        ("/p@token_watch_bot", "/p"),
        ("/p now please", "/p"),
        ("/start", "/start"),
        ("hello", None),
        ("", None),
        (None, None),
    ])
    def test_parse(self, text, command):
        assert parse_command(text) == command


class TestHandleUpdate:

    def test_report_command_replies_with_code_block(self, reporter, fake_alerts):
        handler = CommandHandler(reporter, fake_alerts)

        handled = asyncio.run(handler.handle_update(make_update(1, "/p", chat_id=99)))

        assert handled
        assert fake_alerts.sent == [{
            "chat_id": 99,
            "text": f"```\n{REPORT}\n```",
            "parse_mode": "MarkdownV2",
        }]

    def test_unknown_command_is_ignored(self, reporter, fake_alerts):
        handler = CommandHandler(reporter, fake_alerts)

        assert not asyncio.run(handler.handle_update(make_update(1, "/start")))
        assert not asyncio.run(handler.handle_update(make_update(2, "what's up")))
        assert not asyncio.run(handler.handle_update({"update_id": 3}))
        reporter.report.assert_not_called()
        assert fake_alerts.sent == []

    def test_report_failure_sends_failure_text(self, reporter, fake_alerts):
        reporter.report = AsyncMock(side_effect=RuntimeError("boom"))
        handler = CommandHandler(reporter, fake_alerts)

        asyncio.run(handler.handle_command("/p", 5))

        assert fake_alerts.sent[0]["text"] == "```\nfail to report: boom\n```"

    def test_delivery_failure_is_swallowed(self, reporter):
        handler = CommandHandler(reporter, FakeAlerts(fail=True))

        assert asyncio.run(handler.handle_command("/p", 5))


class TestPoll:

    def test_dispatches_updates_and_advances_offset(self, reporter):
        alerts = FakeAlerts()

        async def scenario():
            stop = asyncio.Event()
            alerts.update_batches = [
                [make_update(10, "/p"), make_update(11, "hi")],
                DeliveryError("Telegram getUpdates timed out"),
                [make_update(12, "/p@bot")],
            ]
            original = alerts.get_updates

            async def get_updates(offset=None, timeout=None):
                if not alerts.update_batches:
                    stop.set()
                    return []
                return await original(offset=offset, timeout=timeout)

            alerts.get_updates = get_updates
            handler = CommandHandler(reporter, alerts, poll_backoff=0)
            await asyncio.wait_for(handler.poll(stop), timeout=1)

        asyncio.run(scenario())

        assert alerts.offsets == [None, 12, 12]
        assert len(alerts.sent) == 2
        assert reporter.report.await_count == 2

    def test_failed_report_does_not_stop_polling(self, reporter):
        alerts = FakeAlerts()
        reporter.report = AsyncMock(side_effect=[RuntimeError("boom"), REPORT])

        async def scenario():
            stop = asyncio.Event()
            alerts.update_batches = [[make_update(1, "/p")], [make_update(2, "/p")]]
            original = alerts.get_updates

            async def get_updates(offset=None, timeout=None):
                if not alerts.update_batches:
                    stop.set()
                    return []
                return await original(offset=offset, timeout=timeout)

            alerts.get_updates = get_updates
            await asyncio.wait_for(CommandHandler(reporter, alerts).poll(stop), timeout=1)

        asyncio.run(scenario())

        assert [m["text"] for m in alerts.sent] == [
            "```\nfail to report: boom\n```",
            f"```\n{REPORT}\n```",
        ]
