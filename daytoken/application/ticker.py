import asyncio
from typing import Optional

from ..domain.errors import GenerationUnavailableError
from ..domain.events import TokenRotated
from ..domain.models import EngineState, TokenSnapshot
from ..infrastructure.clock import Clock
from ..infrastructure.logging import get_logger
from .bus import EventBus
from .engine import TokenLifecycleEngine

logger = get_logger(__name__)


class TokenTicker:
    """Periodic asyncio driver feeding elapsed clock time into an engine.

    Use it as an async context manager so the timer task is cancelled and
    awaited on every exit path. Ticks are synchronous, so a tick in flight
    always completes before the task observes cancellation.
    """

    def __init__(
        self,
        engine: TokenLifecycleEngine,
        clock: Clock,
        interval: float = 0.05,
        bus: Optional[EventBus] = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.engine = engine
        self.clock = clock
        self.interval = interval
        self.bus = bus
        self.latest: Optional[TokenSnapshot] = None
        self.ticks_delivered = 0
        self._task: Optional[asyncio.Task[None]] = None
        self._running = False
        self._last_reading = 0.0
        self._published_generation = 0

    @property
    def running(self) -> bool:
        return self._task is not None

    async def __aenter__(self) -> "TokenTicker":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    def start(self) -> None:
        """Start the engine if needed and schedule the tick loop on the running event loop."""

        if self._task is not None:
            return
        if self.engine.state is EngineState.UNINITIALIZED:
            self.latest = self.engine.start()
        else:
            self.latest = self.engine.snapshot()
        self._last_reading = self.clock.now()
        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info("ticker_started", interval=self.interval)

    async def stop(self) -> None:
        self._running = False
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:
            # a crashed task is logged here; stop() never re-raises it
            logger.exception("ticker_task_failed", ticks_delivered=self.ticks_delivered)
            return
        logger.info("ticker_stopped", ticks_delivered=self.ticks_delivered)

    def request_refresh(self) -> TokenSnapshot:
        """Manually rotate, unless a tick already rotated past the last token shown."""

        expected = self.latest.generation if self.latest is not None else None
        self.latest = self.engine.manual_refresh(expected_generation=expected)
        # the window restarted, so time measured before it must not count against it
        self._last_reading = self.clock.now()
        return self.latest

    async def _run(self) -> None:
        while self._running:
            await asyncio.sleep(self.interval)
            if not self._running:
                break
            reading = self.clock.now()
            try:
                snapshot = self.engine.tick(
                    max(0.0, reading - self._last_reading),
                    expected_generation=self.latest.generation if self.latest is not None else None,
                )
            except GenerationUnavailableError:
                # keep the unconsumed time so the next tick retries the rotation
                logger.warning("tick_deferred", retry_in=self.interval)
                continue
            self._last_reading = reading
            self.latest = snapshot
            self.ticks_delivered += 1
            if snapshot.generation != self._published_generation:
                self._published_generation = snapshot.generation
                if self.bus is not None:
                    await self.bus.publish(
                        TokenRotated(
                            generation=snapshot.generation,
                            issued_at=snapshot.credential.issued_at,
                            cause=snapshot.cause,
                        )
                    )
