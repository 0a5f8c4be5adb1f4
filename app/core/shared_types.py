from dataclasses import dataclass
from pathlib import Path

@dataclass(frozen=True)
class MediaFile:
    """
    Entity representing a media file on the filesystem.
    Wraps the path helpers the converter needs for inputs and outputs.
    """
    path: Path

    def __post_init__(self):
        if str(self.path).strip() in (".", ""):
            raise ValueError("File path cannot be empty.")

    def ensure_parent_dir(self) -> None:
        """Creates the directory structure for this file if it doesn't exist."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def sibling_in(self, directory: Path, extension: str) -> "MediaFile":
        """
        Same base name, new directory and extension.
        e.g. /music/song.flac -> <directory>/song.mp3
        """
        return MediaFile(directory / f"{self.path.stem}.{extension.lstrip('.')}")
