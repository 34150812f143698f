"""
Token Models
============

A tracked token and the price deviation derived from it on each check.
"""

from dataclasses import dataclass
from typing import NamedTuple, TYPE_CHECKING

from ..api.feeds import PriceFeed
from ..utils.formatting import format_number, round_pct

if TYPE_CHECKING:
    from ..api.feeds import PriceClient


class PriceDiff(NamedTuple):
    """Current price and its deviation from the buy price."""
    current_price: float
    pct: float
    pct_text: str  # e.g. "+50%", "-12.5%", "0%"


def diff_pct(current_price: float, buy_price: float) -> PriceDiff:
    """
    Calculate percentage deviation of current_price from buy_price.

    A buy price of 0 means "no reference": the deviation is reported as 0.
    The sign character is "+" only when the price is above the buy price.
    """
    sign = "+" if current_price > buy_price else ""

    pct = 0.0
    if buy_price > 0:
        pct = round_pct((current_price - buy_price) / buy_price * 100)

    return PriceDiff(current_price, pct, f"{sign}{format_number(pct)}%")


@dataclass(frozen=True)
class Token:
    """A token whose price is compared against a reference buy price."""
    name: str
    address: str
    price_feed: PriceFeed
    buy_price: float  # 0 = no reference
    alert_threshold: float  # percent

    def __post_init__(self):
        if self.buy_price < 0:
            raise ValueError(f"{self.name}: buy_price must be >= 0, got {self.buy_price}")
        if self.alert_threshold <= 0:
            raise ValueError(
                f"{self.name}: alert_threshold must be > 0, got {self.alert_threshold}"
            )

    async def current_price(self, client: "PriceClient") -> float:
        return await self.price_feed.current_price(client, self.address)

    async def diff_pct(self, client: "PriceClient") -> PriceDiff:
        current_price = await self.current_price(client)
        return diff_pct(current_price, self.buy_price)

    def is_alerting(self, pct: float) -> bool:
        """
        Whether a deviation is outside the no-alarm band (-threshold, threshold).

        Exactly +/-threshold alerts; 0 never does.
        """
        if 0 < pct < self.alert_threshold:
            return False
        if -self.alert_threshold < pct <= 0:
            return False
        return True

    def report_line(self, diff: PriceDiff) -> str:
        return (
            f"name: {self.name}, "
            f"buy_price: {format_number(self.buy_price)}, "
            f"current_price: {format_number(diff.current_price)}, "
            f"diff: {diff.pct_text}"
        )

    async def report(self, client: "PriceClient") -> str:
        diff = await self.diff_pct(client)
        return self.report_line(diff)

    async def check(self, client: "PriceClient") -> str:
        """Report line if the deviation crosses the threshold, "" otherwise."""
        diff = await self.diff_pct(client)
        if not self.is_alerting(diff.pct):
            return ""
        return self.report_line(diff)
