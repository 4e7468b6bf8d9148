import threading
from typing import Callable, Dict, Optional

from ..domain.errors import AlreadyDecidedError
from ..domain.events import DecisionRecorded
from ..domain.models import Decision, Operation
from ..infrastructure.idempotency import generate_decision_id
from ..infrastructure.logging import get_logger
from .fsm import DecisionStateMachine

DecisionHandler = Callable[[DecisionRecorded], None]


class AuthorizationWorkflow:
    """Gates a single operation behind exactly one user decision.

    Each handler is the collaborator that executes the operation, drops it or
    files a fraud report. The workflow does no I/O itself. It guarantees that
    at most one handler fires, once, and only on a legal transition. The
    decision is committed before the handler runs, so a failing handler
    cannot be retried through this workflow.
    """

    def __init__(
        self,
        operation: Operation,
        on_authorize: Optional[DecisionHandler] = None,
        on_cancel: Optional[DecisionHandler] = None,
        on_report: Optional[DecisionHandler] = None,
    ) -> None:
        self.operation = operation
        self._fsm = DecisionStateMachine()
        self._handlers: Dict[Decision, Optional[DecisionHandler]] = {
            Decision.AUTHORIZED: on_authorize,
            Decision.CANCELLED: on_cancel,
            Decision.REPORTED: on_report,
        }
        self._lock = threading.Lock()
        self._logger = get_logger(__name__, operation_id=operation.id)

    @property
    def is_terminal(self) -> bool:
        return self._fsm.is_terminal

    def current_decision(self) -> Decision:
        return self._fsm.decision

    def authorize(self) -> DecisionRecorded:
        return self._decide(Decision.AUTHORIZED)

    def cancel(self) -> DecisionRecorded:
        return self._decide(Decision.CANCELLED)

    def report(self) -> DecisionRecorded:
        return self._decide(Decision.REPORTED)

    def _decide(self, decision: Decision) -> DecisionRecorded:
        with self._lock:
            try:
                self._fsm.transition(decision)
            except AlreadyDecidedError:
                self._logger.info(
                    "duplicate_decision_ignored",
                    attempted=decision.value,
                    decision=self._fsm.decision.value,
                )
                raise
        event = DecisionRecorded(
            operation_id=self.operation.id,
            decision=decision,
            decision_id=generate_decision_id(self.operation.id, decision.value),
        )
        self._logger.info("operation_decided", decision=decision.value, decision_id=str(event.decision_id))
        handler = self._handlers[decision]
        if handler is not None:
            handler(event)
        return event
