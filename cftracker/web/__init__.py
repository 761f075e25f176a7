"""
HTTP surface of the tracker bot.
"""

from .app import create_app
