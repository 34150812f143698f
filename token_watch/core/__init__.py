# Core business logic
from .reporter import Reporter, ALERT_HEADER
from .watcher import Watcher
from .commands import CommandHandler, parse_command

__all__ = [
    "Reporter",
    "ALERT_HEADER",
    "Watcher",
    "CommandHandler",
    "parse_command",
]
