from typing import List, Optional

import pytest

from daytoken.application.engine import TokenLifecycleEngine
from daytoken.domain.errors import GenerationUnavailableError
from daytoken.infrastructure.clock import ManualClock
from daytoken.ports.generator import TokenGenerator


class ScriptedGenerator(TokenGenerator):
    """Issues 000001, 000002, ... unless told to fail or to return a queued value."""

    def __init__(self, digits: int = 6) -> None:
        self.digits = digits
        self.calls = 0
        self.available = True
        self.queued: List[str] = []

    def generate(self) -> str:
        if not self.available:
            raise GenerationUnavailableError("entropy source offline")
        self.calls += 1
        if self.queued:
            return self.queued.pop(0)
        return str(self.calls).zfill(self.digits)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(100.0)


@pytest.fixture
def generator() -> ScriptedGenerator:
    return ScriptedGenerator()


@pytest.fixture
def make_engine(generator, clock):
    def _make(cycle_duration: float = 60.0, source: Optional[TokenGenerator] = None) -> TokenLifecycleEngine:
        return TokenLifecycleEngine(source or generator, clock, cycle_duration=cycle_duration)

    return _make


@pytest.fixture
def engine(make_engine) -> TokenLifecycleEngine:
    return make_engine()
