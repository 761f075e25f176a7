"""
External platform integrations for the tracker bot.
"""

from .codeforces import (
    CodeforcesClient,
    InvalidHandleOrUpstream,
    count_solved_since,
    start_of_day,
)
