"""
API v1 routers.
"""

from intake_bot.api.v1 import conversations, health, messages

__all__ = ["conversations", "health", "messages"]
