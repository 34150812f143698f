"""
Tracked Tokens

Static list of tokens to watch. Order here is the order of every report.
"""

from .api.feeds import PriceFeed
from .models import Token

TOKENS = (
    Token(
        name="BGS",
        address="0xf339e8c294046e6e7ef6ad4f6fa9e202b59b556b",
        price_feed=PriceFeed.PANCAKE,
        buy_price=0.03,
        alert_threshold=30.0,
    ),
    Token(
        name="ILA",
        address="0x4fBEdC7b946e489208DED562e8E5f2bc83B7de42",
        price_feed=PriceFeed.PANCAKE,
        buy_price=0.01,
        alert_threshold=1200.0,
    ),
    Token(
        name="WOO",
        address="0x4691937a7508860f876c9c0a2a617e7d9e945d4b",
        price_feed=PriceFeed.PANCAKE,
        buy_price=0.75,
        alert_threshold=100.0,
    ),
    Token(
        name="SPARTA",
        address="0x3910db0600ea925f63c36ddb1351ab6e2c6eb102",
        price_feed=PriceFeed.ONEINCH,
        buy_price=0.0,  # no reference, report price only
        alert_threshold=30.0,
    ),
)
