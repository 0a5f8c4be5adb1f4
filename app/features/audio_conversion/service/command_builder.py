"""
Builds FFmpeg arguments as a plain tuple of tokens.

Keeping command construction separate means the exact invocation can be
logged before it runs and unit-tested without starting any process.
"""

import shlex
from pathlib import Path
from typing import Union

from app.core.enums import OutputFormat
from ..domain.formats import codec_for
from ..domain.models import ConversionRequest, ResolvedInput, TranscodeCommand


def build(
    resolved_path: Union[str, Path],
    output_path: Union[str, Path],
    output_format: OutputFormat,
    bitrate: str,
    sample_rate: int,
    channels: int,
) -> TranscodeCommand:
    """
    The command structure is:
        -i <input>
        -c:a <codec>      <- picked from the output format
        -b:a <bitrate>
        -ar <sample rate>
        -ac <channels>
        -y                <- overwrite output without prompting
        <output>

    Example:
        ('-i', '/music/my song.wav', '-c:a', 'libmp3lame', '-b:a', '192k',
         '-ar', '44100', '-ac', '2', '-y', '/out/my song.mp3')

    Paths are never quoted: each one is a single token handed straight to
    the process, spaces included.
    """
    return TranscodeCommand(arguments=(
        "-i", str(resolved_path),
        "-c:a", codec_for(output_format),
        "-b:a", bitrate,
        "-ar", str(sample_rate),
        "-ac", str(channels),
        "-y",
        str(output_path),
    ))


def build_for_request(request: ConversionRequest, resolved: ResolvedInput) -> TranscodeCommand:
    return build(
        resolved.local_path,
        request.desired_output_path,
        request.output_format,
        request.bitrate,
        request.sample_rate,
        request.channels,
    )


def command_as_string(command: TranscodeCommand) -> str:
    """Shell-safe rendering of the command for logging or pasting into a terminal."""
    return shlex.join(command.arguments)
