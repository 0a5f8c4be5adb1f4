from pathlib import PurePath
from typing import Dict, List

from app.core.enums import OutputFormat

# FFmpeg audio encoder per container/extension.
# ogg/flac are not valid OutputFormat values; they stay in the table so
# exposing them later is a one-line enum change.
CODEC_BY_FORMAT: Dict[str, str] = {
    "mp3": "libmp3lame",
    "wav": "pcm_s16le",
    "aac": "aac",
    "m4a": "aac",
    "ogg": "libvorbis",
    "flac": "flac",
}

# Advisory only (used for picker filtering); the pipeline does not enforce it
SUPPORTED_INPUT_EXTENSIONS = (".mp3", ".wav", ".flac", ".ogg", ".aac", ".m4a", ".wma")


def codec_for(output_format: OutputFormat) -> str:
    return CODEC_BY_FORMAT[OutputFormat(output_format).value]


def supported_input_extensions() -> List[str]:
    return list(SUPPORTED_INPUT_EXTENSIONS)


def supported_output_formats() -> List[str]:
    return [fmt.value for fmt in OutputFormat]


def is_supported_audio_file(filename: str) -> bool:
    """
    Case-insensitive extension check against the advisory input list.
    "Song.MP3" -> True, "notes.txt" -> False, "README" -> False
    """
    return PurePath(filename).suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
