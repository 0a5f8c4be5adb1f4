from pathlib import Path
from typing import Optional

from app.core.enums import FailureKind


class ConversionError(Exception):
    """Base class for every error raised by the conversion pipeline."""
    kind: Optional[FailureKind] = None


class InputNotFoundError(ConversionError):
    """The input reference does not resolve to readable bytes."""
    kind = FailureKind.INPUT_NOT_FOUND

    def __init__(self, reference: str, reason: str = "not found or inaccessible"):
        self.reference = reference
        super().__init__(f"Input file {reason}: {reference}")


class StagingFailedError(ConversionError):
    """
    Copying a content/file URI into the staging directory failed,
    or the copy was missing afterwards.
    """
    kind = FailureKind.STAGING_FAILED

    def __init__(self, reference: str, message: str, staged_path: Optional[Path] = None):
        self.reference = reference
        # Where the copy was headed; may hold a partial file that still needs removing
        self.staged_path = staged_path
        super().__init__(f"Unable to access file: {message}")


class EngineInvocationFailedError(ConversionError):
    """The transcoding engine reported a non-success status."""
    kind = FailureKind.ENGINE_INVOCATION_FAILED

    def __init__(self, diagnostic_log: str):
        self.diagnostic_log = diagnostic_log
        super().__init__(f"Conversion failed: {diagnostic_log}")


class CleanupWarning(ConversionError):
    """
    A staged file could not be deleted.
    Only ever logged; never becomes the outcome of a conversion.
    """

    def __init__(self, path: Path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to cleanup temporary file {path}: {cause}")

