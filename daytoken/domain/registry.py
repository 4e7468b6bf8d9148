"""Ordered registry of enrolled identifiers (national IDs or user codes)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Tuple

from .errors import CredentialAlreadyEnrolledError, CredentialNotFoundError


class CredentialKind(str, Enum):
    NATIONAL_ID = "NATIONAL_ID"
    USER_CODE = "USER_CODE"


@dataclass(frozen=True)
class EnrolledCredential:
    """An identifier with a day token bound to it."""

    value: str
    token_suffix: str
    kind: CredentialKind

    @property
    def masked_label(self) -> str:
        return f"Token ending *{self.token_suffix}"


class CredentialRegistry:
    """Keeps enrolled credentials of one kind in insertion order, keyed by value."""

    def __init__(self, kind: CredentialKind) -> None:
        self.kind = kind
        self._entries: Dict[str, EnrolledCredential] = {}

    def enroll(self, value: str, token_suffix: str) -> EnrolledCredential:
        """Add a credential at the end of the list."""

        if not token_suffix or not token_suffix.isdigit():
            raise ValueError(f"Token suffix must be decimal digits, got {token_suffix!r}")
        if value in self._entries:
            raise CredentialAlreadyEnrolledError(f"{self.kind.value} {value} is already enrolled")
        entry = EnrolledCredential(value=value, token_suffix=token_suffix, kind=self.kind)
        self._entries[value] = entry
        return entry

    def select(self, value: str) -> EnrolledCredential:
        """Return the credential for a value, to be used as opaque context."""

        try:
            return self._entries[value]
        except KeyError:
            raise CredentialNotFoundError(f"{self.kind.value} {value} is not enrolled") from None

    def remove(self, value: str) -> EnrolledCredential:
        """Remove and return the credential for a value."""

        try:
            return self._entries.pop(value)
        except KeyError:
            raise CredentialNotFoundError(f"{self.kind.value} {value} is not enrolled") from None

    def values(self) -> Tuple[EnrolledCredential, ...]:
        """Return an immutable snapshot in enrolment order."""

        return tuple(self._entries.values())

    def __contains__(self, value: object) -> bool:
        return value in self._entries

    def __iter__(self) -> Iterator[EnrolledCredential]:
        return iter(self.values())

    def __len__(self) -> int:
        return len(self._entries)
