import mimetypes
from pathlib import Path
from ..domain.errors import InputNotFoundError
from ..domain.models import AudioFileInfo

SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def get_file_info(file_path: Path) -> AudioFileInfo:
    """
    Stat a local file for display in the shell (name, size, extension...).

    Raises:
        InputNotFoundError: If the path cannot be stat'ed.
    """
    path = Path(file_path)
    try:
        stats = path.stat()
    except OSError as e:
        raise InputNotFoundError(str(path), reason=f"could not be read ({e.strerror or e})") from e

    mime, _ = mimetypes.guess_type(str(path))
    return AudioFileInfo(
        name=path.name,
        path=path,
        size_bytes=stats.st_size,
        extension=path.suffix.lower().lstrip("."),
        is_directory=path.is_dir(),
        mime_type=mime,
    )


def format_file_size(size_bytes: int) -> str:
    """
    1536 -> "1.5 KB", 0 -> "0 Bytes", 5242880 -> "5 MB"
    Anything beyond GB is still expressed in GB.
    """
    if size_bytes <= 0:
        return "0 Bytes"

    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1

    # 1.50 -> "1.5", 5.00 -> "5"
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[unit]}"
