"""
Shared Data Models
==================

This package contains dataclasses used across the project.
"""

from .token import Token, PriceDiff, diff_pct

__all__ = [
    "Token",
    "PriceDiff",
    "diff_pct",
]
