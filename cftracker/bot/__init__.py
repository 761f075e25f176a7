"""
Telegram bot interface module for the tracker bot.
"""

from .handlers import (
    TrackerHandlers,
    register_handlers,
    error_handler,
)
from .application import build_application, start_bot, stop_bot
