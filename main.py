import asyncio
import os

from daytoken import config
from daytoken.application.bus import EventBus
from daytoken.application.engine import TokenLifecycleEngine
from daytoken.application.ticker import TokenTicker
from daytoken.application.workflow import AuthorizationWorkflow
from daytoken.domain.errors import AlreadyDecidedError
from daytoken.domain.events import DecisionRecorded, TokenRotated
from daytoken.domain.history import build_timeline
from daytoken.domain.models import Operation
from daytoken.domain.registry import CredentialKind, CredentialRegistry
from daytoken.infrastructure.logging import get_logger

logger = get_logger(__name__)

DEMO_SECONDS = float(os.environ.get("DAYTOKEN_DEMO_SECONDS", "1.0"))


async def run() -> None:
    components = config.build_components()
    settings = components["settings"]
    bus: EventBus = components["bus"]
    engine: TokenLifecycleEngine = components["engine"]
    status_history = components["status_history"]

    registry = CredentialRegistry(CredentialKind.NATIONAL_ID)
    registry.enroll("012.345.678-90", "1234")
    selected = registry.select("012.345.678-90")
    logger.info("credential_selected", kind=selected.kind.value, label=selected.masked_label)

    async def on_rotated(event: TokenRotated) -> None:
        logger.info("token_displayed", generation=event.generation, cause=event.cause.value)

    await bus.subscribe(TokenRotated, on_rotated)

    async with TokenTicker(engine, components["clock"], interval=settings.token.tick_interval, bus=bus) as ticker:
        await asyncio.sleep(DEMO_SECONDS / 2)
        ticker.request_refresh()
        await asyncio.sleep(DEMO_SECONDS / 2)
        logger.info("countdown", progress=round(engine.current_progress(), 3))

    def on_authorize(event: DecisionRecorded) -> None:
        logger.info("operation_submitted", operation_id=event.operation_id, decision_id=str(event.decision_id))

    operation = Operation(
        id="ted-0001",
        title="TED transfer",
        debit_account="Branch 0001 Account 1234567",
        beneficiary="Joao da Silva",
        bank_line="Bank 0123 Branch 0001 Account 1234567",
        amount="R$ 10.000,00",
    )
    workflow = AuthorizationWorkflow(operation, on_authorize=on_authorize)
    workflow.authorize()
    try:
        workflow.cancel()
    except AlreadyDecidedError as exc:
        logger.info("decision_locked", error=str(exc))

    for row in build_timeline(await status_history.fetch_entries()):
        logger.info("status_step", title=row.entry.title, connector=row.connector.value, current=row.entry.is_current)


if __name__ == "__main__":
    asyncio.run(run())
