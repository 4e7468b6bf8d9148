import threading

import pytest

from daytoken.application.fsm import DecisionStateMachine
from daytoken.application.workflow import AuthorizationWorkflow
from daytoken.domain.errors import AlreadyDecidedError
from daytoken.domain.models import Decision, Operation
from daytoken.infrastructure.idempotency import generate_decision_id


def make_operation(operation_id: str = "op-1") -> Operation:
    return Operation(
        id=operation_id,
        title="TED transfer",
        debit_account="Branch 0001 Account 1234567",
        beneficiary="Joao da Silva",
        bank_line="Bank 0123 Branch 0001 Account 1234567",
        amount="R$ 10.000,00",
    )


class Recorder:
    def __init__(self) -> None:
        self.calls = {"authorize": [], "cancel": [], "report": []}

    def workflow(self, operation: Operation) -> AuthorizationWorkflow:
        return AuthorizationWorkflow(
            operation,
            on_authorize=self.calls["authorize"].append,
            on_cancel=self.calls["cancel"].append,
            on_report=self.calls["report"].append,
        )

    def total(self) -> int:
        return sum(len(events) for events in self.calls.values())


def test_new_workflow_is_pending():
    workflow = AuthorizationWorkflow(make_operation())
    assert workflow.current_decision() is Decision.PENDING
    assert not workflow.is_terminal


def test_cancel_then_authorize_is_rejected():
    recorder = Recorder()
    workflow = recorder.workflow(make_operation())

    event = workflow.cancel()
    assert workflow.current_decision() is Decision.CANCELLED
    assert recorder.calls["cancel"] == [event]
    assert event.operation_id == "op-1"
    assert event.decision is Decision.CANCELLED

    with pytest.raises(AlreadyDecidedError):
        workflow.authorize()
    assert workflow.current_decision() is Decision.CANCELLED
    assert recorder.total() == 1


@pytest.mark.parametrize(
    "first,expected,callback",
    [
        ("authorize", Decision.AUTHORIZED, "authorize"),
        ("cancel", Decision.CANCELLED, "cancel"),
        ("report", Decision.REPORTED, "report"),
    ],
)
def test_terminal_decision_is_immutable(first, expected, callback):
    recorder = Recorder()
    workflow = recorder.workflow(make_operation())
    getattr(workflow, first)()

    for attempt in ("authorize", "cancel", "report") * 2:
        with pytest.raises(AlreadyDecidedError):
            getattr(workflow, attempt)()
        assert workflow.current_decision() is expected

    assert workflow.is_terminal
    assert len(recorder.calls[callback]) == 1
    assert recorder.total() == 1


def test_missing_handlers_are_allowed():
    workflow = AuthorizationWorkflow(make_operation())
    event = workflow.report()
    assert event.decision is Decision.REPORTED


def test_failing_handler_does_not_reopen_decision():
    calls = []

    def on_authorize(event) -> None:
        calls.append(event)
        raise RuntimeError("network down")

    workflow = AuthorizationWorkflow(make_operation(), on_authorize=on_authorize)
    with pytest.raises(RuntimeError):
        workflow.authorize()
    assert workflow.current_decision() is Decision.AUTHORIZED
    with pytest.raises(AlreadyDecidedError):
        workflow.authorize()
    assert len(calls) == 1


def test_decision_id_is_deterministic_idempotency_key():
    event = AuthorizationWorkflow(make_operation("op-9")).authorize()
    assert event.decision_id == generate_decision_id("op-9", "AUTHORIZED")
    assert event.decision_id != generate_decision_id("op-9", "CANCELLED")


def test_duplicate_taps_fire_one_notification():
    recorder = Recorder()
    workflow = recorder.workflow(make_operation())
    barrier = threading.Barrier(8)
    outcomes = []

    def tap(action: str) -> None:
        barrier.wait()
        try:
            getattr(workflow, action)()
            outcomes.append("ok")
        except AlreadyDecidedError:
            outcomes.append("rejected")

    threads = [
        threading.Thread(target=tap, args=(action,))
        for action in ("authorize", "cancel", "report", "authorize") * 2
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("rejected") == 7
    assert recorder.total() == 1


def test_state_machine_rejects_leaving_terminal_state():
    fsm = DecisionStateMachine()
    fsm.transition(Decision.REPORTED)
    assert fsm.is_terminal
    with pytest.raises(AlreadyDecidedError):
        fsm.transition(Decision.AUTHORIZED)
    assert fsm.decision is Decision.REPORTED
