# File: app/core/config/settings.py

import os
import shutil
import tempfile
from pathlib import Path


class Settings:
    # --- Paths ---
    # Staged copies of content/file URIs live here until the janitor removes them
    STAGING_DIR: Path = Path(
        os.getenv("AUDIO_CONVERTER_STAGING_DIR", Path(tempfile.gettempdir()) / "audio_converter_temp")
    )

    # Persistent "Output" folder inside the user's documents area
    OUTPUT_DIR: Path = Path(
        os.getenv("AUDIO_CONVERTER_OUTPUT_DIR", Path.home() / "Documents" / "Output")
    )

    # --- External Tools ---
    # Auto-detect ffmpeg or use env var
    FFMPEG_BINARY: str = os.getenv("FFMPEG_BINARY_PATH", shutil.which("ffmpeg") or "ffmpeg")

    # --- Conversion Defaults ---
    DEFAULT_BITRATE: str = "192k"
    DEFAULT_SAMPLE_RATE: int = 44100
    DEFAULT_CHANNELS: int = 2

    # --- Orphan Sweep ---
    # Must exceed the longest expected conversion, otherwise a sweep can race an in-flight file
    ORPHAN_MAX_AGE_SECONDS: int = int(os.getenv("AUDIO_CONVERTER_ORPHAN_MAX_AGE", "3600"))

    def ensure_dirs(self):
        """Creates the output directory if it doesn't exist."""
        self.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
