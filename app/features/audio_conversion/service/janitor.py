import shutil
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

from app.core.config.settings import settings
from ..domain.errors import CleanupWarning
from ..domain.models import ResolvedInput, StagedFileRecord

logger = logging.getLogger(__name__)


class TempFileJanitor:
    """
    Owns the removal of staged input copies.

    cleanup() is called once per request, on every exit path, by the
    orchestrator. The janitor itself keeps no per-request bookkeeping.
    sweep_orphans() reclaims files left behind by interrupted or abandoned
    requests; the age threshold protects files still in use.
    """

    def __init__(self, staging_dir: Optional[Path] = None):
        self.staging_dir = Path(staging_dir or settings.STAGING_DIR)

    def cleanup(self, resolved: ResolvedInput) -> Optional[CleanupWarning]:
        """
        Deletes resolved.local_path iff it was staged.
        Never raises: a failed deletion is logged and returned as a CleanupWarning.
        """
        if not resolved.was_staged:
            return None

        path = resolved.local_path
        try:
            path.unlink()
            logger.info(f"Removed staged file: {path}")
        except FileNotFoundError:
            # Partial copy never created, or already swept
            pass
        except OSError as e:
            warning = CleanupWarning(path, e)
            logger.warning(str(warning))
            return warning
        return None

    def list_staged(self) -> List[StagedFileRecord]:
        """Inventory of the staging directory (empty if it was never created)."""
        if not self.staging_dir.is_dir():
            return []

        records = []
        for entry in self.staging_dir.iterdir():
            try:
                mtime = entry.stat().st_mtime
            except OSError:
                # Removed between listing and stat
                continue
            records.append(StagedFileRecord(path=entry, created_at=datetime.fromtimestamp(mtime)))
        return records

    def sweep_orphans(self, max_age: Optional[timedelta] = None) -> List[Path]:
        """
        Deletes staging entries whose modification time is older than now - max_age.
        max_age defaults to settings.ORPHAN_MAX_AGE_SECONDS, read at call time.

        Returns:
            The paths that were removed.
        """
        if max_age is None:
            max_age = timedelta(seconds=settings.ORPHAN_MAX_AGE_SECONDS)
        threshold = datetime.now() - max_age
        removed: List[Path] = []

        for record in self.list_staged():
            if not record.is_older_than(threshold):
                continue
            try:
                if record.path.is_dir():
                    shutil.rmtree(record.path)
                else:
                    record.path.unlink()
                removed.append(record.path)
                logger.info(f"Cleaned up old temp file: {record.path.name}")
            except OSError as e:
                logger.warning(str(CleanupWarning(record.path, e)))

        if removed:
            logger.info(f"Orphan sweep removed {len(removed)} file(s) from {self.staging_dir}")
        return removed

    def purge_staging_dir(self) -> bool:
        """
        Removes the whole staging directory, in-flight files included.
        Only safe when no conversion is running.
        """
        if not self.staging_dir.exists():
            return False
        try:
            shutil.rmtree(self.staging_dir)
        except OSError as e:
            logger.warning(f"Failed to cleanup temp directory {self.staging_dir}: {e}")
            return False
        logger.info(f"Cleaned up temp directory: {self.staging_dir}")
        return True
