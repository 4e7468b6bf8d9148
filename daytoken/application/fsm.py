from dataclasses import dataclass
from typing import Dict

from ..domain.errors import AlreadyDecidedError
from ..domain.models import Decision


VALID_TRANSITIONS: Dict[Decision, set[Decision]] = {
    Decision.PENDING: {Decision.AUTHORIZED, Decision.CANCELLED, Decision.REPORTED},
}


@dataclass
class DecisionStateMachine:
    decision: Decision = Decision.PENDING

    @property
    def is_terminal(self) -> bool:
        return not VALID_TRANSITIONS.get(self.decision)

    def transition(self, new_decision: Decision) -> None:
        allowed = VALID_TRANSITIONS.get(self.decision, set())
        if new_decision not in allowed:
            raise AlreadyDecidedError(f"Cannot move from {self.decision.value} to {new_decision.value}")
        self.decision = new_decision
