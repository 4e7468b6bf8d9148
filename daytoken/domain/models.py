from dataclasses import dataclass
from enum import Enum


class EngineState(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    ACTIVE = "ACTIVE"


class RotationCause(str, Enum):
    START = "START"
    EXPIRY = "EXPIRY"
    MANUAL = "MANUAL"


@dataclass(frozen=True)
class Credential:
    """A fixed-width digit token and the monotonic time it was issued."""

    value: str
    issued_at: float
    cycle_duration: float


@dataclass(frozen=True)
class TokenSnapshot:
    """Immutable view of the engine after a start, tick or refresh."""

    credential: Credential
    remaining: float
    cycle_duration: float
    generation: int
    cause: RotationCause

    @property
    def progress(self) -> float:
        """Remaining share of the current window, always in [0, 1]."""
        fraction = self.remaining / self.cycle_duration
        return min(1.0, max(0.0, fraction))


class Decision(str, Enum):
    PENDING = "PENDING"
    AUTHORIZED = "AUTHORIZED"
    CANCELLED = "CANCELLED"
    REPORTED = "REPORTED"


@dataclass(frozen=True)
class Operation:
    """Sensitive operation awaiting a decision. Every field is a pre-formatted display string."""

    id: str
    title: str
    debit_account: str
    beneficiary: str
    bank_line: str
    amount: str
