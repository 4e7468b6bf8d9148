from dataclasses import dataclass
from uuid import UUID

from .models import Decision, RotationCause


@dataclass(frozen=True)
class TokenRotated:
    generation: int
    issued_at: float
    cause: RotationCause


@dataclass(frozen=True)
class DecisionRecorded:
    operation_id: str
    decision: Decision
    decision_id: UUID
