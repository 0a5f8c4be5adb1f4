from abc import ABC, abstractmethod
from typing import BinaryIO, List

from .models import EngineResult


class ITranscoder(ABC):
    """
    Contract for the external transcoding engine.
    "Can execute a command and report status + logs"; nothing else is assumed.
    """
    @abstractmethod
    def execute(self, arguments: List[str]) -> EngineResult:
        """
        Runs the engine with the given discrete arguments and waits for it.

        Args:
            arguments: Engine arguments, one token per list item. Never joined
                       into a shell string.

        Returns:
            EngineResult with the exit status and the engine's log lines.

        Raises:
            EngineInvocationFailedError: If the engine could not be started at all.
        """
        pass


class IContentOpener(ABC):
    """
    Contract for reading the bytes behind a URI-like handle
    (e.g. a document picker's content:// result).
    """
    @abstractmethod
    def can_open(self, reference: str) -> bool:
        """True if this opener handles the reference's scheme."""
        pass

    @abstractmethod
    def open(self, reference: str) -> BinaryIO:
        """
        Opens the referenced bytes for sequential reading.
        The caller closes the returned stream.
        """
        pass
