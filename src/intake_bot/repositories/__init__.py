"""
Repository implementations for data access.
"""

from intake_bot.repositories.conversation_repo import (
    BaseConversationRepository,
    InMemoryConversationRepository,
)

__all__ = [
    "BaseConversationRepository",
    "InMemoryConversationRepository",
]
