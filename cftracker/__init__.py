"""
Codeforces daily-solve tracker bot for Telegram groups.
"""

__version__ = "1.0.0"
