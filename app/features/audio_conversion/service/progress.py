import logging
from typing import Callable, List, Optional

from app.core.enums import ProgressPhase
from ..domain.models import ConversionProgress

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ConversionProgress], None]


class ProgressReporter:
    """
    Wraps the caller's progress sink for one request.
    A sink that raises is logged and ignored; it never aborts the conversion.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback
        self.history: List[ConversionProgress] = []

    def emit(self, percent: int, phase: ProgressPhase, error_message: Optional[str] = None) -> None:
        last = self.history[-1] if self.history else None
        if last is not None and phase != ProgressPhase.ERROR and percent < last.percent:
            # Only the error transition may move backwards
            percent = last.percent

        progress = ConversionProgress(percent=percent, phase=phase, error_message=error_message)
        self.history.append(progress)

        if self.callback is None:
            return
        try:
            self.callback(progress)
        except Exception as e:
            logger.warning(f"Progress callback raised {type(e).__name__}: {e} (ignored)")

    def error(self, message: str) -> None:
        self.emit(0, ProgressPhase.ERROR, message)

    @property
    def reported_error(self) -> bool:
        return bool(self.history) and self.history[-1].phase == ProgressPhase.ERROR
