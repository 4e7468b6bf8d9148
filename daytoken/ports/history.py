from abc import ABC, abstractmethod
from typing import List

from ..domain.history import StatusEntry


class StatusHistoryPort(ABC):
    """Abstract source of an operation's status history."""

    @abstractmethod
    async def fetch_entries(self) -> List[StatusEntry]:
        raise NotImplementedError
