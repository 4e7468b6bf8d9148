from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List


@dataclass(frozen=True)
class StatusEntry:
    """One step of an operation's status history."""

    id: str
    title: str
    date_string: str
    color_tag: str
    is_current: bool = False


class TimelineConnector(str, Enum):
    NONE = "NONE"
    TOP = "TOP"
    BOTTOM = "BOTTOM"
    BOTH = "BOTH"


@dataclass(frozen=True)
class TimelineRow:
    entry: StatusEntry
    connector: TimelineConnector


def connector_for(index: int, total: int) -> TimelineConnector:
    """Which sides of a row's marker link to its neighbours."""
    if not 0 <= index < total:
        raise ValueError(f"Index {index} out of range for {total} entries")
    if total == 1:
        return TimelineConnector.NONE
    if index == 0:
        return TimelineConnector.BOTTOM
    if index == total - 1:
        return TimelineConnector.TOP
    return TimelineConnector.BOTH


def build_timeline(entries: Iterable[StatusEntry]) -> List[TimelineRow]:
    ordered = list(entries)
    return [
        TimelineRow(entry=entry, connector=connector_for(index, len(ordered)))
        for index, entry in enumerate(ordered)
    ]
