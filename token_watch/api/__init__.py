"""
API Package
===========

External API clients for token prices.

Components:
- feeds.py: PriceFeed (PancakeSwap, 1inch), PriceClient
"""

from .feeds import (
    PriceFeed,
    PriceClient,
    BUSD_ADDRESS,
    QUOTE_AMOUNT,
)

__all__ = [
    "PriceFeed",
    "PriceClient",
    "BUSD_ADDRESS",
    "QUOTE_AMOUNT",
]
