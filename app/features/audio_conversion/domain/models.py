import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from app.core.config.settings import settings
from app.core.enums import ConversionState, FailureKind, OutputFormat, ProgressPhase
from .errors import ConversionError

BITRATE_PATTERN = re.compile(r"^\d+(\.\d+)?[kKmM]?$")


@dataclass(frozen=True)
class ConversionRequest:
    """
    Caller's intent to convert one audio reference.
    Immutable once submitted; the pipeline only ever reads it.
    """
    input_reference: str
    desired_output_path: Path
    output_format: OutputFormat
    bitrate: str = settings.DEFAULT_BITRATE
    sample_rate: int = settings.DEFAULT_SAMPLE_RATE
    channels: int = settings.DEFAULT_CHANNELS

    def __post_init__(self):
        if not str(self.input_reference).strip():
            raise ValueError("Input reference cannot be empty.")

        # Accept plain strings ("mp3") but store the enum.
        # Formats outside the enum (ogg, flac, wma...) are rejected here.
        raw_format = self.output_format
        if isinstance(raw_format, OutputFormat):
            raw_format = raw_format.value
        try:
            fmt = OutputFormat(str(raw_format).lower().lstrip("."))
        except ValueError:
            raise ValueError(f"Unsupported output format: {self.output_format}")
        object.__setattr__(self, "output_format", fmt)
        object.__setattr__(self, "desired_output_path", Path(self.desired_output_path))

        if not BITRATE_PATTERN.match(self.bitrate):
            raise ValueError(f"Invalid bitrate: {self.bitrate!r} (expected e.g. '192k')")
        if self.sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive: {self.sample_rate}")
        if self.channels <= 0:
            raise ValueError(f"Channel count must be positive: {self.channels}")


@dataclass(frozen=True)
class ResolvedInput:
    """
    A guaranteed-readable local copy of the request's input.
    was_staged=True means the janitor owns local_path and must delete it.
    """
    local_path: Path
    was_staged: bool = False


@dataclass(frozen=True)
class TranscodeCommand:
    """
    Ordered engine arguments, excluding the engine binary itself.
    The output path is always the last token.
    """
    arguments: Tuple[str, ...]

    @property
    def output_path(self) -> Path:
        return Path(self.arguments[-1])

    def as_list(self) -> List[str]:
        return list(self.arguments)


@dataclass(frozen=True)
class EngineResult:
    """Raw answer from the transcoding engine: status code plus its log lines."""
    return_code: int
    log_lines: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.return_code == 0

    @property
    def diagnostic_log(self) -> str:
        return "\n".join(self.log_lines)


@dataclass(frozen=True)
class ConversionProgress:
    percent: int
    phase: ProgressPhase
    error_message: Optional[str] = None

    def __post_init__(self):
        if not 0 <= self.percent <= 100:
            raise ValueError(f"Progress percent out of range: {self.percent}")


@dataclass(frozen=True)
class ConversionSuccess:
    output_path: Path
    state: ConversionState = ConversionState.COMPLETED
    # States the request passed through, filled in by the orchestrator
    history: Tuple[ConversionState, ...] = ()

    @property
    def succeeded(self) -> bool:
        return True

    def unwrap(self) -> Path:
        return self.output_path


@dataclass(frozen=True)
class ConversionFailure:
    """
    Terminal error of a request.
    `error` is the domain exception that caused it; unwrap() re-raises it.
    """
    kind: FailureKind
    diagnostic_log: str
    error: Optional[ConversionError] = None
    state: ConversionState = ConversionState.FAILED
    history: Tuple[ConversionState, ...] = ()

    @property
    def succeeded(self) -> bool:
        return False

    def unwrap(self) -> Path:
        if self.error is not None:
            raise self.error
        raise ConversionError(self.diagnostic_log)


ConversionOutcome = Union[ConversionSuccess, ConversionFailure]


@dataclass(frozen=True)
class StagedFileRecord:
    """A file sitting in the staging directory, as seen by the orphan sweep."""
    path: Path
    created_at: datetime

    def is_older_than(self, threshold: datetime) -> bool:
        return self.created_at < threshold


@dataclass(frozen=True)
class AudioFileInfo:
    name: str
    path: Path
    size_bytes: int
    extension: str
    is_directory: bool
    mime_type: Optional[str] = None
