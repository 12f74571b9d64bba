"""
Orchestration module for the conversation lifecycle.
"""

from intake_bot.orchestration.state_machine import (
    CONVERSATION_LIFECYCLE,
    StateMachine,
    create_conversation_state_machine,
)

__all__ = [
    "CONVERSATION_LIFECYCLE",
    "StateMachine",
    "create_conversation_state_machine",
]
