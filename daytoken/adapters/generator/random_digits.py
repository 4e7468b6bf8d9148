import secrets

from ...domain.errors import GenerationUnavailableError
from ...ports.generator import TokenGenerator


class RandomDigitGenerator(TokenGenerator):
    """Uniform random token drawn from the operating system CSPRNG."""

    def __init__(self, digits: int = 6) -> None:
        if digits <= 0:
            raise ValueError("digits must be positive")
        self.digits = digits

    def generate(self) -> str:
        try:
            number = secrets.randbelow(10**self.digits)
        except (OSError, NotImplementedError) as exc:
            raise GenerationUnavailableError("System randomness is unavailable") from exc
        return str(number).zfill(self.digits)
