import io
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from app.features.audio_conversion.data.content_openers import ContentProviderOpener, default_opener
from app.features.audio_conversion.domain.errors import EngineInvocationFailedError
from app.features.audio_conversion.domain.interfaces import ITranscoder
from app.features.audio_conversion.domain.models import EngineResult
from app.features.audio_conversion.service.engine import ConversionEngine
from app.features.audio_conversion.service.janitor import TempFileJanitor
from app.features.audio_conversion.service.orchestrator import ConversionOrchestrator
from app.features.audio_conversion.service.path_resolver import PathResolver


class FakeTranscoder(ITranscoder):
    """
    Stands in for FFmpeg.
    Records every invocation and, on success, writes a dummy output file.
    """

    def __init__(self, return_code: int = 0, log_lines: Optional[List[str]] = None,
                 on_execute: Optional[Callable[[List[str]], None]] = None):
        self.return_code = return_code
        self.log_lines = log_lines or []
        self.on_execute = on_execute
        self.calls: List[List[str]] = []

    def execute(self, arguments: List[str]) -> EngineResult:
        self.calls.append(list(arguments))
        if self.on_execute:
            self.on_execute(arguments)
        if self.return_code == 0:
            Path(arguments[-1]).write_bytes(b"FAKE_AUDIO")
        return EngineResult(return_code=self.return_code, log_lines=list(self.log_lines))

    @property
    def input_paths(self) -> List[Path]:
        return [Path(call[call.index("-i") + 1]) for call in self.calls]


class UnstartableTranscoder(ITranscoder):
    """Behaves like a missing ffmpeg binary."""

    def execute(self, arguments: List[str]) -> EngineResult:
        raise EngineInvocationFailedError("Unable to start ffmpeg: [Errno 2] No such file or directory")


class BrokenStream(io.RawIOBase):
    """A content stream that dies halfway through the copy."""

    def __init__(self):
        self._served = False

    def readable(self):
        return True

    def readinto(self, buffer):
        if not self._served:
            self._served = True
            buffer[:4] = b"RIFF"
            return 4
        raise OSError("Provider connection lost")


@pytest.fixture
def staging_dir(tmp_path):
    return tmp_path / "audio_converter_temp"


@pytest.fixture
def content_blobs():
    """URI -> bytes served by the fake "provider" authority."""
    return {}


@pytest.fixture
def content_provider(content_blobs):
    opener = ContentProviderOpener()
    opener.register("provider", lambda uri: io.BytesIO(content_blobs[uri]))
    opener.register("broken", lambda uri: BrokenStream())
    return opener


@pytest.fixture
def resolver(staging_dir, content_provider):
    return PathResolver(staging_dir=staging_dir, opener=default_opener(content_provider))


@pytest.fixture
def transcoder():
    return FakeTranscoder()


@pytest.fixture
def janitor(staging_dir):
    return TempFileJanitor(staging_dir)


@pytest.fixture
def orchestrator(resolver, transcoder, janitor):
    return ConversionOrchestrator(
        resolver=resolver,
        engine=ConversionEngine(transcoder),
        janitor=janitor,
    )


@pytest.fixture
def wav_file(tmp_path):
    p = tmp_path / "song.wav"
    p.write_bytes(b"RIFF" + b"\x00" * 1024)
    return p


@pytest.fixture
def unstartable_transcoder():
    return UnstartableTranscoder()
