"""
Price Feeds

Single responsibility: turn a token address into a unit price using one of
the upstream quote services.

Feeds:
- PANCAKE: direct price lookup, {"data": {"price": "..."}}
- ONEINCH: swap quote for a fixed notional, price = toTokenAmount / fromTokenAmount
"""

import asyncio
import logging
import math
from enum import Enum
from typing import Any, Optional
from urllib.parse import urlencode

import aiohttp

from ..config import config
from ..errors import FeedError

logger = logging.getLogger(__name__)

PANCAKE_API = "https://api.pancakeswap.info/api/v2/tokens/"
ONEINCH_API = "https://api.1inch.io/v4.0/56/quote"

# Quote currency for 1inch swap quotes (BUSD on BSC)
BUSD_ADDRESS = "0xe9e7cea3dedca5984780bafc599bd69add087d56"

# Notional amount sent as fromTokenAmount
QUOTE_AMOUNT = 1000


class PriceClient:
    """
    Shared async HTTP client for price feeds.

    One GET per call, no retries. Concurrency is bounded by a semaphore so
    that fanning out over many tokens does not hammer the upstream APIs.
    """

    def __init__(
        self,
        timeout: float = None,
        max_concurrent: int = None,
    ):
        self.timeout = timeout or config.request_timeout_sec
        self.max_concurrent = max_concurrent or config.max_concurrent_requests
        self._session: Optional[aiohttp.ClientSession] = None
        self._semaphore: Optional[asyncio.Semaphore] = None

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self):
        """Create session and semaphore if needed."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._semaphore = asyncio.Semaphore(self.max_concurrent)

    async def close(self):
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def get_json(self, url: str) -> Any:
        """
        GET a URL and decode the JSON body.

        Raises:
            FeedError: On network errors, non-2xx status or an undecodable body
        """
        await self._ensure_session()

        try:
            async with self._semaphore:
                async with self._session.get(url) as response:
                    response.raise_for_status()
                    return await response.json(content_type=None)
        except aiohttp.ClientResponseError as e:
            raise FeedError(f"HTTP {e.status} from {url}", url=url) from e
        except aiohttp.ClientError as e:
            raise FeedError(f"request to {url} failed: {e}", url=url) from e
        except asyncio.TimeoutError as e:
            raise FeedError(f"request to {url} timed out", url=url) from e
        except ValueError as e:
            raise FeedError(f"invalid JSON from {url}: {e}", url=url) from e


def _parse_amount(payload: Any, key: str) -> float:
    """Parse a string-encoded number field."""
    value = payload.get(key) if isinstance(payload, dict) else None
    if not isinstance(value, str):
        raise FeedError(f"missing string field {key!r} in response")
    try:
        return float(value)
    except ValueError:
        raise FeedError(f"field {key!r} is not a number: {value!r}") from None


class PriceFeed(Enum):
    """Upstream price source for a token."""
    PANCAKE = "pancake"
    ONEINCH = "1inch"

    @property
    def api_endpoint(self) -> str:
        if self is PriceFeed.PANCAKE:
            return PANCAKE_API
        return ONEINCH_API

    def price_endpoint(self, address: str) -> str:
        """Build the request URL for a token address."""
        if self is PriceFeed.PANCAKE:
            return f"{self.api_endpoint}{address}"

        query = urlencode([
            ("fromTokenAddress", address),
            ("toTokenAddress", BUSD_ADDRESS),
            ("amount", str(QUOTE_AMOUNT)),
        ])
        return f"{self.api_endpoint}?{query}"

    def parse_price(self, payload: Any) -> float:
        """
        Extract a unit price from a decoded response body.

        Raises:
            FeedError: If the body does not have the expected shape or the
                price is not a finite non-negative number
        """
        if self is PriceFeed.PANCAKE:
            data = payload.get("data") if isinstance(payload, dict) else None
            price = _parse_amount(data, "price")
        else:
            from_amount = _parse_amount(payload, "fromTokenAmount")
            to_amount = _parse_amount(payload, "toTokenAmount")
            if from_amount == 0:
                raise FeedError("fromTokenAmount is zero")
            price = to_amount / from_amount

        if not math.isfinite(price) or price < 0:
            raise FeedError(f"invalid price {price}")
        return price

    async def current_price(self, client: PriceClient, address: str) -> float:
        """
        Fetch the current unit price of a token.

        Raises:
            FeedError: If the request or the response parsing fails
        """
        url = self.price_endpoint(address)
        payload = await client.get_json(url)
        try:
            price = self.parse_price(payload)
        except FeedError as e:
            e.feed = self.value
            e.url = url
            raise

        logger.debug(f"{self.value} price for {address}: {price}")
        return price
