import subprocess
import sys
import pytest
from pathlib import Path

from app.features.audio_conversion.data.content_openers import FileUriOpener, uri_scheme
from app.features.audio_conversion.data.ffmpeg_adapter import FFmpegTranscoder
from app.features.audio_conversion.domain.errors import EngineInvocationFailedError


def test_missing_binary_raises_invocation_error(tmp_path):
    transcoder = FFmpegTranscoder(binary=str(tmp_path / "no-ffmpeg-here"))

    with pytest.raises(EngineInvocationFailedError) as exc_info:
        transcoder.execute(["-i", "in.wav", "out.mp3"])

    assert isinstance(exc_info.value.__cause__, OSError)


def test_arguments_are_passed_as_list(monkeypatch):
    captured = {}

    def fake_run(cmd, **kwargs):
        captured["cmd"] = cmd
        captured["kwargs"] = kwargs
        return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="line one\n\nline two\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    result = FFmpegTranscoder(binary="ffmpeg").execute(["-i", "/a b/in.wav", "-y", "/c d/out.mp3"])

    assert captured["cmd"] == ["ffmpeg", "-hide_banner", "-i", "/a b/in.wav", "-y", "/c d/out.mp3"]
    assert "shell" not in captured["kwargs"]
    assert result.return_code == 1
    assert not result.succeeded
    assert result.log_lines == ["line one", "line two"]
    assert result.diagnostic_log == "line one\nline two"


@pytest.mark.parametrize("reference, scheme", [
    ("/music/a.mp3", None),
    ("relative/a.mp3", None),
    ("C:\\music\\a.mp3", None),
    ("content://provider/1", "content"),
    ("FILE:///tmp/a.mp3", "file"),
    ("https://example.com/a.mp3", "https"),
])
def test_uri_scheme(reference, scheme):
    assert uri_scheme(reference) == scheme


def test_file_uri_to_path_decodes_escapes():
    assert FileUriOpener.to_path("file:///music/My%20Song.mp3") == Path("/music/My Song.mp3")
    assert FileUriOpener.to_path("file://localhost/music/a.mp3") == Path("/music/a.mp3")


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell script as the fake binary")
def test_undecodable_stderr_is_kept_as_log(tmp_path):
    fake_ffmpeg = tmp_path / "ffmpeg"
    fake_ffmpeg.write_text("#!/bin/sh\nprintf 'Error \\377\\376 bad tag' >&2\nexit 1\n")
    fake_ffmpeg.chmod(0o755)

    result = FFmpegTranscoder(binary=str(fake_ffmpeg)).execute(["-i", "in.wav", "out.mp3"])

    assert result.return_code == 1
    assert result.log_lines == ["Error \ufffd\ufffd bad tag"]
