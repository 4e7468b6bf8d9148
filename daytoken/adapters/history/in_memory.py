from typing import List, Optional, Sequence

from ...domain.history import StatusEntry
from ...ports.history import StatusHistoryPort


DEFAULT_ENTRIES = (
    StatusEntry(id="received", title="Request received", date_string="12/10/25", color_tag="#007AFF"),
    StatusEntry(id="processing", title="Processing", date_string="13/10/25", color_tag="#007AFF"),
    StatusEntry(id="completed", title="Completed", date_string="14/10/25", color_tag="#007AFF", is_current=True),
)


class InMemoryStatusHistory(StatusHistoryPort):
    """Stubbed history feed returning canned entries."""

    def __init__(self, entries: Optional[Sequence[StatusEntry]] = None) -> None:
        self._entries = tuple(DEFAULT_ENTRIES if entries is None else entries)

    async def fetch_entries(self) -> List[StatusEntry]:
        return list(self._entries)
