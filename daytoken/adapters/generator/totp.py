import binascii
import time
from typing import Callable

import pyotp

from ...domain.errors import GenerationUnavailableError
from ...ports.generator import TokenGenerator


class TotpGenerator(TokenGenerator):
    """RFC 6238 time-based token keyed by a base32 shared secret.

    Two rotations inside the same ``interval`` yield the same value, so a
    manual refresh only changes the token once the time step moves on.
    """

    def __init__(
        self,
        secret: str,
        digits: int = 6,
        interval: int = 30,
        time_source: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("A TOTP shared secret is required")
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.digits = digits
        self.interval = interval
        self._time_source = time_source
        self._totp = pyotp.TOTP(secret, digits=digits, interval=interval)

    def generate(self) -> str:
        try:
            return self._totp.at(int(self._time_source()))
        except (binascii.Error, ValueError, TypeError) as exc:
            raise GenerationUnavailableError("TOTP secret could not be decoded") from exc
