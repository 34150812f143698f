"""
Token Price Watcher
===================

Polls token prices from PancakeSwap and 1inch, compares them with a buy
price and sends a Telegram alert when the deviation crosses a threshold.
"""

__version__ = "0.1.0"
