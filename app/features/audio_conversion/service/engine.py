import logging
from typing import Optional

from app.core.enums import FailureKind, ProgressPhase
from app.core.shared_types import MediaFile
from ..data.ffmpeg_adapter import FFmpegTranscoder
from ..domain.errors import EngineInvocationFailedError
from ..domain.interfaces import ITranscoder
from ..domain.models import ConversionFailure, ConversionOutcome, ConversionSuccess, TranscodeCommand
from .command_builder import command_as_string
from .progress import ProgressReporter

logger = logging.getLogger(__name__)

# FFmpeg gives no fine-grained percentage through this boundary;
# the early heartbeat keeps the caller's UI from looking frozen.
HEARTBEAT_PERCENT = 10


class ConversionEngine:
    """
    Runs one TranscodeCommand and classifies the result.
    No retries: a failed transcode goes back to the caller as-is.
    """

    def __init__(self, transcoder: Optional[ITranscoder] = None):
        self.transcoder = transcoder or FFmpegTranscoder()

    def run(self, command: TranscodeCommand, progress: Optional[ProgressReporter] = None) -> ConversionOutcome:
        progress = progress or ProgressReporter()

        progress.emit(HEARTBEAT_PERCENT, ProgressPhase.CONVERTING)
        logger.info(f"Transcode command: {command_as_string(command)}")

        try:
            MediaFile(command.output_path).ensure_parent_dir()
        except OSError as e:
            logger.error(f"Cannot create output directory for {command.output_path}: {e}")
            return self._fail(
                EngineInvocationFailedError(f"Cannot create output directory {command.output_path.parent}: {e}"),
                progress,
            )

        try:
            result = self.transcoder.execute(command.as_list())
        except EngineInvocationFailedError as e:
            return self._fail(e, progress)

        if result.succeeded:
            progress.emit(100, ProgressPhase.COMPLETED)
            return ConversionSuccess(output_path=command.output_path)

        diagnostic_log = result.diagnostic_log
        logger.error(f"FFmpeg error logs:\n{diagnostic_log}")
        return self._fail(EngineInvocationFailedError(diagnostic_log), progress)

    @staticmethod
    def _fail(error: EngineInvocationFailedError, progress: ProgressReporter) -> ConversionFailure:
        progress.error(error.diagnostic_log)
        return ConversionFailure(
            kind=FailureKind.ENGINE_INVOCATION_FAILED,
            diagnostic_log=error.diagnostic_log,
            error=error,
        )
