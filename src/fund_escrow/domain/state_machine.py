"""Escrow Record State Machine Guard.

Enforces legal status transitions at the domain level using python-statemachine.
No matter what the service layer or a host does, an illegal transition
(e.g., RELEASED -> REFUNDED) raises TransitionNotAllowed.

The state machine is instantiated per-record and validates transitions before
the record's status field is updated.

Transition table:
    locked   -> released   (release)
    locked   -> refunded   (refund)
    released -> (terminal)
    refunded -> (terminal)
"""

from __future__ import annotations

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

__all__ = ["EscrowStateMachine", "TransitionNotAllowed", "validate_transition"]


class EscrowStateMachine(StateMachine):
    """State machine that guards escrow record lifecycle transitions.

    Usage:
        sm = EscrowStateMachine(current_status="locked")
        sm.release()         # transitions to released
        sm.status            # "released"
    """

    # --- States ---
    LOCKED = State("locked", value="locked", initial=True)
    RELEASED = State("released", value="released", final=True)
    REFUNDED = State("refunded", value="refunded", final=True)

    # --- Events / Transitions ---
    release = LOCKED.to(RELEASED)
    refund = LOCKED.to(REFUNDED)

    def __init__(self, current_status: str = "locked") -> None:
        """Initialize the state machine at a given status.

        Args:
            current_status: The current EscrowStatus value (e.g., "locked").
                           Must match one of the State value strings exactly.
        """
        valid_values = {s.value for s in self.states}
        if current_status not in valid_values:
            valid = ", ".join(sorted(valid_values))
            raise ValueError(
                f"Unknown status '{current_status}'. Valid states: {valid}"
            )
        super().__init__(start_value=current_status)

    @property
    def status(self) -> str:
        """Return the current state value as a string (matches EscrowStatus enum)."""
        return str(self.current_state.value)

    @property
    def is_final(self) -> bool:
        return bool(self.current_state.final)

    def get_allowed_events(self) -> list[str]:
        """Return a list of event names that can fire from the current state."""
        return [event.id for event in self.allowed_events]


def validate_transition(current_status: str, event_name: str) -> str:
    """Validate a state transition and return the new status.

    This is a convenience function that creates a temporary state machine,
    fires the named event, and returns the resulting status string.

    Args:
        current_status: Current EscrowStatus value.
        event_name: The event to fire (e.g., "release").

    Returns:
        The new status string after the transition.

    Raises:
        TransitionNotAllowed: If the transition is illegal.
        ValueError: If the status or event name is invalid.
    """
    sm = EscrowStateMachine(current_status=current_status)

    if event_name not in {event.id for event in sm.events}:
        raise ValueError(
            f"Unknown event '{event_name}'. "
            f"Allowed events from {current_status}: {sm.get_allowed_events()}"
        )

    sm.send(event_name)
    return sm.status
