"""Pytest configuration and shared fixtures."""

from typing import Any, Dict, List, Optional

import pytest

from token_watch.api.feeds import PriceFeed
from token_watch.errors import DeliveryError, FeedError
from token_watch.models import Token


class FakePriceClient:
    """Stands in for PriceClient: maps request URLs to decoded JSON bodies."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses = responses or {}
        self.requests: List[str] = []

    def set_pancake_price(self, address: str, price: str):
        self.responses[PriceFeed.PANCAKE.price_endpoint(address)] = {
            "updated_at": 1647000000000,
            "data": {"name": "Token", "symbol": "TKN", "price": price},
        }

    def set_oneinch_quote(self, address: str, from_amount: str, to_amount: str):
        self.responses[PriceFeed.ONEINCH.price_endpoint(address)] = {
            "fromTokenAmount": from_amount,
            "toTokenAmount": to_amount,
        }

    async def get_json(self, url: str) -> Any:
        self.requests.append(url)
        response = self.responses.get(url)
        if response is None:
            raise FeedError(f"HTTP 404 from {url}", url=url)
        if isinstance(response, Exception):
            raise response
        return response


class FakeAlerts:
    """Stands in for TelegramAlerts: records messages instead of sending."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[Dict[str, Any]] = []
        self.update_batches: List[Any] = []
        self.offsets: List[Optional[int]] = []

    async def send_message(self, chat_id: int, text: str, parse_mode: Optional[str] = "MarkdownV2"):
        if self.fail:
            raise DeliveryError("Telegram sendMessage HTTP 400: Bad Request", status_code=400)
        self.sent.append({"chat_id": chat_id, "text": text, "parse_mode": parse_mode})
        return len(self.sent)

    async def get_updates(self, offset: Optional[int] = None, timeout: int = None):
        self.offsets.append(offset)
        batch = self.update_batches.pop(0)
        if isinstance(batch, Exception):
            raise batch
        return batch


BGS_ADDRESS = "0xf339e8c294046e6e7ef6ad4f6fa9e202b59b556b"
WOO_ADDRESS = "0x4691937a7508860f876c9c0a2a617e7d9e945d4b"
SPARTA_ADDRESS = "0x3910db0600ea925f63c36ddb1351ab6e2c6eb102"


@pytest.fixture
def price_client() -> FakePriceClient:
    return FakePriceClient()


@pytest.fixture
def fake_alerts() -> FakeAlerts:
    return FakeAlerts()


@pytest.fixture
def bgs() -> Token:
    return Token(
        name="BGS",
        address=BGS_ADDRESS,
        price_feed=PriceFeed.PANCAKE,
        buy_price=0.03,
        alert_threshold=30.0,
    )


@pytest.fixture
def woo() -> Token:
    return Token(
        name="WOO",
        address=WOO_ADDRESS,
        price_feed=PriceFeed.PANCAKE,
        buy_price=0.75,
        alert_threshold=100.0,
    )


@pytest.fixture
def sparta() -> Token:
    return Token(
        name="SPARTA",
        address=SPARTA_ADDRESS,
        price_feed=PriceFeed.ONEINCH,
        buy_price=0.0,
        alert_threshold=30.0,
    )
