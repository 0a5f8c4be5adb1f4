import os
import re
import shutil
import time
import uuid
import logging
from pathlib import Path
from typing import Optional

from app.core.config.settings import settings
from ..data.content_openers import CONTENT_SCHEME, FILE_SCHEME, default_opener, uri_scheme
from ..domain.errors import InputNotFoundError, StagingFailedError
from ..domain.interfaces import IContentOpener
from ..domain.models import ResolvedInput

logger = logging.getLogger(__name__)

STAGED_FILE_PREFIX = "temp_input_"
STAGEABLE_SCHEMES = {CONTENT_SCHEME, FILE_SCHEME}

# ".../track.FLAC", ".../song.mp3?token=1", ".../a.wav#frag"
EXTENSION_PATTERN = re.compile(r"\.([a-zA-Z0-9]+)(\?|$|#)")


def sniff_extension(reference: str) -> str:
    """
    Guesses a file extension for a staged copy.
    Falls back to .mp3 for references mentioning "audio", else .tmp.
    """
    match = EXTENSION_PATTERN.search(reference)
    if match:
        return "." + match.group(1).lower()
    if "audio" in reference:
        return ".mp3"
    return ".tmp"


class PathResolver:
    """
    Turns any supported input reference into a local path FFmpeg can read
    for the whole invocation.

    1. Existing absolute path  -> used as-is.
    2. content:// or file://   -> copied into the staging directory.
    3. Anything else           -> plain (relative) path, or InputNotFoundError.
    """

    def __init__(self, staging_dir: Optional[Path] = None, opener: Optional[IContentOpener] = None):
        self.staging_dir = Path(staging_dir or settings.STAGING_DIR)
        self.opener = opener or default_opener()

    def resolve(self, input_reference: str) -> ResolvedInput:
        reference = str(input_reference)
        scheme = uri_scheme(reference)

        # 1. Already a stable local file
        if scheme is None and os.path.isabs(reference):
            path = Path(reference)
            if path.is_file():
                return ResolvedInput(local_path=path, was_staged=False)
            raise InputNotFoundError(reference)

        # 2. Opaque handles: copy to a randomly-accessible local file
        if scheme in STAGEABLE_SCHEMES:
            return ResolvedInput(local_path=self._stage(reference), was_staged=True)

        if scheme is not None:
            raise InputNotFoundError(reference, reason=f"uses unsupported scheme '{scheme}'")

        # 3. Last resort: relative path
        path = Path(reference)
        if path.is_file():
            return ResolvedInput(local_path=path, was_staged=False)

        raise InputNotFoundError(reference)

    def staged_path_for(self, reference: str) -> Path:
        """
        Collision-free target inside the staging directory.
        Millisecond timestamp keeps names sortable; the random suffix
        separates requests started in the same millisecond.
        """
        timestamp = int(time.time() * 1000)
        suffix = uuid.uuid4().hex[:12]
        return self.staging_dir / f"{STAGED_FILE_PREFIX}{timestamp}_{suffix}{sniff_extension(reference)}"

    def _stage(self, reference: str) -> Path:
        try:
            # Lazily created, idempotent
            self.staging_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create staging directory {self.staging_dir}: {e}")
            raise StagingFailedError(reference, str(e)) from e

        staged_path = self.staged_path_for(reference)

        try:
            with self.opener.open(reference) as source, open(staged_path, "wb") as target:
                shutil.copyfileobj(source, target)
        except Exception as e:
            logger.error(f"Failed to copy file from URI {reference}: {e}")
            raise StagingFailedError(reference, str(e) or type(e).__name__, staged_path=staged_path) from e

        # Verify the copy actually landed
        if not staged_path.is_file():
            raise StagingFailedError(
                reference, "Failed to copy file to temporary location", staged_path=staged_path
            )

        logger.info(f"Copied URI {reference} to local path {staged_path}")
        return staged_path
