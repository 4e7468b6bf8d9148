from abc import ABC, abstractmethod


class TokenGenerator(ABC):
    """Produces fixed-width decimal tokens on demand."""

    digits: int

    @abstractmethod
    def generate(self) -> str:
        """Return a zero-padded string of exactly ``digits`` decimal digits.

        Raises GenerationUnavailableError when the underlying source cannot
        produce a value.
        """
        raise NotImplementedError
