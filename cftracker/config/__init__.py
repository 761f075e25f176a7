"""
Configuration for the tracker bot.
"""
