"""
API module initialization
"""

from . import customers, events, health, home

__all__ = ["customers", "events", "health", "home"]
