import hashlib
import uuid
from uuid import UUID


def generate_decision_id(operation_id: str, decision: str) -> UUID:
    """Deterministically generate a UUID for an operation's decision."""
    base = f"{operation_id}:{decision}".encode()
    digest = hashlib.sha256(base).hexdigest()
    return uuid.UUID(digest[:32])
