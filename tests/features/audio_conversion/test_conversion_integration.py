import shutil
import pytest
import subprocess
from pathlib import Path

from app.core.config.settings import settings
from app.core.enums import ProgressPhase
from app.features.audio_conversion.domain.errors import EngineInvocationFailedError
from app.features.audio_conversion.service.api import convert_audio

pytestmark = pytest.mark.skipif(shutil.which(settings.FFMPEG_BINARY) is None, reason="ffmpeg not installed")


@pytest.fixture
def sine_wav(tmp_path):
    """
    Generates 1 second of 1kHz sine as a real WAV file using FFmpeg.
    The folder name has spaces to exercise argument passing.
    """
    folder = tmp_path / "My Recordings"
    folder.mkdir()
    wav_path = folder / "sine test.wav"

    cmd = [
        settings.FFMPEG_BINARY, "-y",
        "-f", "lavfi", "-i", "sine=frequency=1000:duration=1",
        str(wav_path)
    ]
    # Suppress output unless error
    subprocess.run(cmd, check=True, capture_output=True)
    return wav_path


def _duration(path: Path) -> float:
    ffprobe = shutil.which("ffprobe")
    if ffprobe is None:
        pytest.skip("ffprobe not installed")
    result = subprocess.run(
        [ffprobe, "-v", "error", "-show_entries", "format=duration",
         "-of", "default=noprint_wrappers=1:nokey=1", str(path)],
        capture_output=True, text=True
    )
    return float(result.stdout.strip())


@pytest.mark.parametrize("fmt", ["mp3", "wav", "m4a"])
def test_real_conversion_from_local_path(sine_wav, tmp_path, fmt):
    events = []
    out = convert_audio(str(sine_wav), fmt, output_path=str(tmp_path / "out dir" / f"result.{fmt}"),
                        on_progress=events.append)

    assert out.exists()
    assert out.stat().st_size > 0
    assert events[-1].phase == ProgressPhase.COMPLETED
    assert 0.9 <= _duration(out) <= 1.2


def test_real_conversion_from_file_uri_cleans_staging(sine_wav, tmp_path):
    out = convert_audio(sine_wav.as_uri(), "mp3", output_path=str(tmp_path / "from_uri.mp3"))

    assert out.exists()
    assert not settings.STAGING_DIR.exists() or list(settings.STAGING_DIR.iterdir()) == []


def test_real_engine_failure_carries_ffmpeg_log(tmp_path):
    garbage = tmp_path / "not_audio.wav"
    garbage.write_bytes(b"this is not a wav file")

    with pytest.raises(EngineInvocationFailedError) as exc_info:
        convert_audio(str(garbage), "mp3", output_path=str(tmp_path / "x.mp3"))

    assert exc_info.value.diagnostic_log
