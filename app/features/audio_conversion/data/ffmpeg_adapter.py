import shlex
import subprocess
import logging
from typing import List, Optional
from app.core.config.settings import settings
from ..domain.errors import EngineInvocationFailedError
from ..domain.interfaces import ITranscoder
from ..domain.models import EngineResult

logger = logging.getLogger(__name__)

class FFmpegTranscoder(ITranscoder):
    """
    Concrete implementation of ITranscoder using the FFmpeg CLI.
    Arguments go to the process as a list, so paths with spaces or
    shell metacharacters stay single tokens.
    """

    def __init__(self, binary: Optional[str] = None):
        self.binary = binary or settings.FFMPEG_BINARY

    def execute(self, arguments: List[str]) -> EngineResult:
        cmd = [self.binary, "-hide_banner", *arguments]

        logger.info(f"Executing FFmpeg: {shlex.join(cmd)}")

        try:
            # capture_output=True keeps stderr around as the diagnostic log.
            # Tags and filenames are not always UTF-8; undecodable bytes become U+FFFD.
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace"
            )
        except OSError as e:
            # Binary missing or not executable
            logger.error(f"FFmpeg could not be started: {e}")
            raise EngineInvocationFailedError(f"Unable to start {self.binary}: {e}") from e

        log_lines = [line for line in (completed.stderr or "").splitlines() if line.strip()]

        if completed.returncode != 0:
            logger.error(f"FFmpeg exited with code {completed.returncode}")

        return EngineResult(return_code=completed.returncode, log_lines=log_lines)
