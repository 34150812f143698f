# Shared helpers
from .formatting import code_block, format_number, round_pct

__all__ = [
    "code_block",
    "format_number",
    "round_pct",
]
