"""
FSM State Definitions.

Finite State Machine states for multi-step conversations.
"""

from modules.telegram.states.consultation import ConsultationForm

__all__ = [
    "ConsultationForm",
]
