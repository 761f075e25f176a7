"""
Data management module for the tracker bot.
"""

from .database import (
    GroupStore,
    GroupRecord,
    TrackedHandle,
    AddResult,
    StoreUnavailable,
    GroupNotFound,
)
