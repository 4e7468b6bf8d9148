import math
import threading
from datetime import timedelta
from typing import Optional, Union

from ..domain.errors import (
    EngineNotStartedError,
    GenerationUnavailableError,
    InvalidTickError,
    MalformedTokenError,
)
from ..domain.models import Credential, EngineState, RotationCause, TokenSnapshot
from ..infrastructure.clock import Clock
from ..infrastructure.logging import get_logger
from ..ports.generator import TokenGenerator

logger = get_logger(__name__)

Elapsed = Union[int, float, timedelta]


class TokenLifecycleEngine:
    """Owns the current day token and its countdown.

    The token rotates when a tick exhausts the window, or on manual refresh.
    Time beyond expiry is discarded, so every new window starts full. The
    credential, countdown and generation are only written under ``_lock``,
    which keeps a refresh arriving from another thread from interleaving
    with a tick.
    """

    def __init__(
        self,
        generator: TokenGenerator,
        clock: Clock,
        cycle_duration: float = 60.0,
        digits: int = 6,
    ) -> None:
        if cycle_duration <= 0:
            raise ValueError("cycle_duration must be positive")
        if digits <= 0:
            raise ValueError("digits must be positive")
        if getattr(generator, "digits", digits) != digits:
            raise ValueError(f"Generator produces {generator.digits} digits, engine expects {digits}")
        self.cycle_duration = float(cycle_duration)
        self.digits = digits
        self._generator = generator
        self._clock = clock
        self._lock = threading.Lock()
        self._state = EngineState.UNINITIALIZED
        self._credential: Optional[Credential] = None
        self._remaining = 0.0
        self._generation = 0
        self._cause = RotationCause.START

    @property
    def state(self) -> EngineState:
        return self._state

    def start(self) -> TokenSnapshot:
        """Issue the first token. Calling it again behaves like manual_refresh()."""

        with self._lock:
            if self._state is EngineState.UNINITIALIZED:
                return self._rotate(RotationCause.START)
            return self._rotate(RotationCause.MANUAL)

    def tick(self, elapsed: Elapsed, expected_generation: Optional[int] = None) -> TokenSnapshot:
        """Advance the countdown by ``elapsed`` seconds, rotating on expiry.

        When ``expected_generation`` is given and the token was replaced
        since, the elapsed time belongs to a superseded window and is
        discarded, so a tick racing a refresh never rotates again.
        """

        seconds = _to_seconds(elapsed)
        with self._lock:
            self._require_started()
            if expected_generation is not None and self._generation > expected_generation:
                return self._snapshot()
            remaining = self._remaining - seconds
            if remaining > 0:
                self._remaining = remaining
                return self._snapshot()
            return self._rotate(RotationCause.EXPIRY)

    def manual_refresh(self, expected_generation: Optional[int] = None) -> TokenSnapshot:
        """Issue a new token and restart the countdown.

        With ``expected_generation`` set to the generation the caller last
        saw, a refresh that lost the race against an expiry rotation returns
        the already fresh token instead of rotating a second time. Callers
        that refresh without it can still see a racing tick rotate as well;
        TokenTicker.request_refresh always passes it and is the race-safe
        route from a presentation layer.
        """

        with self._lock:
            self._require_started()
            if expected_generation is not None and self._generation > expected_generation:
                logger.info(
                    "manual_refresh_coalesced",
                    generation=self._generation,
                    expected_generation=expected_generation,
                )
                return self._snapshot()
            return self._rotate(RotationCause.MANUAL)

    def current_credential(self) -> Credential:
        with self._lock:
            self._require_started()
            return self._credential

    def current_progress(self) -> float:
        return self.snapshot().progress

    def snapshot(self) -> TokenSnapshot:
        with self._lock:
            self._require_started()
            return self._snapshot()

    def _rotate(self, cause: RotationCause) -> TokenSnapshot:
        try:
            value = self._generator.generate()
        except GenerationUnavailableError:
            logger.warning("token_generation_unavailable", cause=cause.value, generation=self._generation)
            raise
        if not isinstance(value, str) or len(value) != self.digits or not (value.isascii() and value.isdigit()):
            logger.warning("token_generation_malformed", cause=cause.value, generation=self._generation)
            raise MalformedTokenError(f"Generator must return exactly {self.digits} decimal digits")

        issued_at = self._clock.now()
        if self._credential is not None:
            issued_at = max(issued_at, self._credential.issued_at)
        self._credential = Credential(value=value, issued_at=issued_at, cycle_duration=self.cycle_duration)
        self._remaining = self.cycle_duration
        self._generation += 1
        self._cause = cause
        self._state = EngineState.ACTIVE
        logger.info("token_rotated", cause=cause.value, generation=self._generation)
        return self._snapshot()

    def _snapshot(self) -> TokenSnapshot:
        return TokenSnapshot(
            credential=self._credential,
            remaining=self._remaining,
            cycle_duration=self.cycle_duration,
            generation=self._generation,
            cause=self._cause,
        )

    def _require_started(self) -> None:
        if self._state is EngineState.UNINITIALIZED:
            raise EngineNotStartedError("start() must be called before using the engine")


def _to_seconds(elapsed: Elapsed) -> float:
    if isinstance(elapsed, timedelta):
        seconds = elapsed.total_seconds()
    elif isinstance(elapsed, bool) or not isinstance(elapsed, (int, float)):
        raise InvalidTickError(f"Elapsed time must be seconds or a timedelta, got {elapsed!r}")
    else:
        try:
            seconds = float(elapsed)
        except OverflowError:
            if elapsed < 0:
                raise InvalidTickError(
                    f"Elapsed time must be a finite non-negative duration, got {elapsed!r}"
                ) from None
            # beyond float range, so it exhausts any window
            return math.inf
    if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        raise InvalidTickError(f"Elapsed time must be a finite non-negative duration, got {elapsed!r}")
    return seconds
