"""
State machine for the conversation lifecycle.
"""

from intake_bot.core.constants import ConversationState


class StateMachine:
    """
    Generic state machine describing legal lifecycle moves.
    """

    def __init__(
        self,
        states: list[str],
        initial_state: str,
        final_states: list[str],
        transitions: dict[str, list[str]],
    ) -> None:
        """
        Initialize the state machine.

        Args:
            states: List of valid states
            initial_state: Starting state
            final_states: Terminal states
            transitions: Valid transitions {from_state: [to_states]}
        """
        self.states = set(states)
        self.initial_state = initial_state
        self.final_states = set(final_states)
        self.transitions = transitions

        if initial_state not in self.states:
            raise ValueError(f"Initial state '{initial_state}' not in states")
        for final in final_states:
            if final not in self.states:
                raise ValueError(f"Final state '{final}' not in states")
        for source, targets in transitions.items():
            for target in [source, *targets]:
                if target not in self.states:
                    raise ValueError(f"Transition references unknown state '{target}'")

    def can_transition(self, from_state: str, to_state: str) -> bool:
        """Check if transition is valid."""
        if from_state not in self.transitions:
            return False
        return to_state in self.transitions[from_state]

    def get_next_states(self, current_state: str) -> list[str]:
        """Get valid next states from current state."""
        return self.transitions.get(current_state, [])

    def is_final(self, state: str) -> bool:
        """Check if state is a final state."""
        return state in self.final_states


CONVERSATION_STATES = [state.value for state in ConversationState]

# completed -> active only happens through an explicit new-topic reset
CONVERSATION_TRANSITIONS = {
    ConversationState.ACTIVE.value: [
        ConversationState.ACTIVE.value,
        ConversationState.AWAITING_CONFIRMATION.value,
    ],
    ConversationState.AWAITING_CONFIRMATION.value: [
        ConversationState.AWAITING_CONFIRMATION.value,
        ConversationState.ACTIVE.value,
        ConversationState.COMPLETED.value,
    ],
    ConversationState.COMPLETED.value: [
        ConversationState.COMPLETED.value,
    ],
}


def create_conversation_state_machine() -> StateMachine:
    """Create state machine for the intake conversation lifecycle."""
    return StateMachine(
        states=CONVERSATION_STATES,
        initial_state=ConversationState.ACTIVE.value,
        final_states=[ConversationState.COMPLETED.value],
        transitions=CONVERSATION_TRANSITIONS,
    )


CONVERSATION_LIFECYCLE = create_conversation_state_machine()
