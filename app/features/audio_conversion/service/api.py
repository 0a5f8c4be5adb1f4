from datetime import timedelta
from pathlib import Path
from typing import List, Optional, Union

from app.core.config.settings import settings
from app.core.enums import OutputFormat
from app.core.shared_types import MediaFile
from ..data.content_openers import FileUriOpener, uri_scheme
from ..data.local_fs import format_file_size, get_file_info
from ..domain.formats import is_supported_audio_file, supported_input_extensions, supported_output_formats
from ..domain.models import ConversionRequest
from .janitor import TempFileJanitor
from .orchestrator import ConversionOrchestrator
from .progress import ProgressCallback

__all__ = [
    "convert_audio",
    "output_path_for",
    "sweep_orphaned_files",
    "purge_staging_files",
    "get_file_info",
    "format_file_size",
    "is_supported_audio_file",
    "supported_input_extensions",
    "supported_output_formats",
]


def output_path_for(
    input_reference: str,
    output_format: Union[OutputFormat, str],
    display_name: Optional[str] = None,
    output_dir: Optional[Path] = None,
) -> Path:
    """
    Default destination: <OUTPUT_DIR>/<input base name>.<format>

    Args:
        input_reference: Path or URI the caller picked.
        output_format: Target format (extension of the result).
        display_name: Name reported by the document picker. Preferred over
                      the reference, since content URIs rarely carry one.
        output_dir: Overrides settings.OUTPUT_DIR.
    """
    fmt = OutputFormat(str(getattr(output_format, "value", output_format)).lower())
    if output_dir is None:
        settings.ensure_dirs()
        directory = settings.OUTPUT_DIR
    else:
        directory = Path(output_dir)
        directory.mkdir(parents=True, exist_ok=True)

    if display_name:
        source = Path(display_name)
    elif uri_scheme(input_reference) == "file":
        source = FileUriOpener.to_path(input_reference)
    else:
        # content://provider/42 -> "42"; plain paths keep their own name
        source = Path(input_reference.rstrip("/").rsplit("/", 1)[-1])

    return MediaFile(source).sibling_in(directory, fmt.value).path


def convert_audio(
    input_reference: str,
    output_format: Union[OutputFormat, str],
    output_path: Optional[str] = None,
    bitrate: str = settings.DEFAULT_BITRATE,
    sample_rate: int = settings.DEFAULT_SAMPLE_RATE,
    channels: int = settings.DEFAULT_CHANNELS,
    on_progress: Optional[ProgressCallback] = None,
    orchestrator: Optional[ConversionOrchestrator] = None,
) -> Path:
    """
    Standalone API: converts one audio file.

    Returns:
        Path of the converted file.

    Raises:
        ValueError: If the request itself is invalid (unsupported format...).
        InputNotFoundError, StagingFailedError, EngineInvocationFailedError:
            The conversion's terminal error.
    """
    destination = Path(output_path) if output_path else output_path_for(input_reference, output_format)

    request = ConversionRequest(
        input_reference=input_reference,
        desired_output_path=destination,
        output_format=output_format,
        bitrate=bitrate,
        sample_rate=sample_rate,
        channels=channels,
    )

    orchestrator = orchestrator or ConversionOrchestrator()
    return orchestrator.convert(request, on_progress).unwrap()


def sweep_orphaned_files(max_age_seconds: Optional[int] = None) -> List[Path]:
    """Best-effort removal of staged files older than the retention window."""
    janitor = TempFileJanitor()
    if max_age_seconds is None:
        return janitor.sweep_orphans()
    return janitor.sweep_orphans(timedelta(seconds=max_age_seconds))


def purge_staging_files() -> bool:
    """Deletes the entire staging directory. Do not call while conversions run."""
    return TempFileJanitor().purge_staging_dir()
