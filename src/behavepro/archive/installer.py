"""
Feature Archive Installer

This module persists a downloaded feature archive next to its project
directory, extracts it into that directory and removes the temporary zip.

The zip is only removed after extraction has fully succeeded. A failed
extraction leaves the zip on disk and no partially extracted files in the
project directory: members are first unpacked into a private staging
directory, then merged into place with every replaced entry parked until
the merge completes. A failed merge is rolled back. A failed archive write
removes the partly written zip.
"""

import os
import shutil
import logging
import tempfile
import zipfile
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..api.errors import (
    DirectoryCreateFailed,
    ArchiveWriteFailed,
    ExtractionFailed,
    CleanupFailed
)

logger = logging.getLogger(__name__)


def _is_within_directory(directory: Path, target: Path) -> bool:
    try:
        target.resolve().relative_to(directory.resolve())
    except ValueError:
        return False
    return True


class ArchiveInstaller:
    """Install feature archives into project directories."""

    ARCHIVE_SUFFIX = ".zip"
    STAGING_PREFIX = ".staging-"
    BACKUP_PREFIX = ".backup-"

    def archive_path(self, project_dir: Union[str, Path]) -> Path:
        """Temporary zip location, a sibling of the project directory."""
        project_dir = Path(project_dir)
        return project_dir.parent / f"{project_dir.name}{self.ARCHIVE_SUFFIX}"

    def install(self, archive: bytes, project_dir: Union[str, Path]) -> Path:
        """
        Populate a project directory with the contents of an archive.

        Args:
            archive: Raw zip bytes
            project_dir: Destination directory, created if missing

        Returns:
            The project directory

        Raises:
            DirectoryCreateFailed: If the directory cannot be created
            ArchiveWriteFailed: If the temporary zip cannot be written
            ExtractionFailed: If the zip cannot be extracted
            CleanupFailed: If the temporary zip cannot be removed
        """
        project_dir = Path(project_dir)
        zip_path = self.archive_path(project_dir)

        self._ensure_directory(project_dir)
        self._write_archive(archive, zip_path)
        self._extract(zip_path, project_dir)
        self._remove_archive(zip_path)

        logger.info(f"Installed features into {project_dir}")
        return project_dir

    def _ensure_directory(self, project_dir: Path) -> None:
        try:
            project_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateFailed(project_dir, str(e)) from e

    def _write_archive(self, archive: bytes, zip_path: Path) -> None:
        try:
            with open(zip_path, 'wb') as f:
                f.write(archive)
        except OSError as e:
            self._discard_partial_archive(zip_path)
            raise ArchiveWriteFailed(zip_path, str(e)) from e
        logger.debug(f"Wrote {len(archive)} bytes to {zip_path}")

    @staticmethod
    def _discard_partial_archive(zip_path: Path) -> None:
        if not zip_path.is_file():
            return
        try:
            zip_path.unlink()
        except OSError as e:
            logger.warning(f"Could not remove partial archive {zip_path}: {e}")

    def _extract(self, zip_path: Path, project_dir: Path) -> None:
        """Unpack into a staging directory, then merge it into place."""
        staging = None
        try:
            staging = Path(tempfile.mkdtemp(
                prefix=f"{self.STAGING_PREFIX}{project_dir.name}-",
                dir=project_dir.parent
            ))
            with zipfile.ZipFile(zip_path, 'r') as zf:
                for name in zf.namelist():
                    if not _is_within_directory(staging, staging / name):
                        raise ExtractionFailed(zip_path, f"unsafe member path {name}")
                zf.extractall(path=str(staging))

            self._merge_into_place(staging, project_dir)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, RuntimeError, EOFError) as e:
            logger.error(f"Extraction of {zip_path} failed: {e}")
            raise ExtractionFailed(zip_path, str(e)) from e
        finally:
            if staging is not None:
                shutil.rmtree(staging, ignore_errors=True)

    def _merge_into_place(self, staging: Path, project_dir: Path) -> None:
        """
        Move staged entries into the project directory.

        Existing directories are merged and files of the same name are
        replaced. Replaced entries are parked in a backup directory until
        every entry is in place, so a failure part way through restores the
        project directory to its previous contents.
        """
        backup = Path(tempfile.mkdtemp(
            prefix=f"{self.BACKUP_PREFIX}{project_dir.name}-",
            dir=project_dir.parent
        ))
        journal: List[Tuple[Path, Optional[Path]]] = []
        keep_backup = False
        try:
            for root, dirs, files in os.walk(staging):
                dirs.sort()
                relative = Path(root).relative_to(staging)
                for name in dirs:
                    target = project_dir / relative / name
                    if target.is_dir() and not target.is_symlink():
                        continue
                    parked = self._park(target, backup, len(journal))
                    journal.append((target, parked))
                    target.mkdir()
                for name in sorted(files):
                    target = project_dir / relative / name
                    parked = self._park(target, backup, len(journal))
                    journal.append((target, parked))
                    os.replace(Path(root) / name, target)
        except OSError:
            if not self._roll_back(journal):
                keep_backup = True
                logger.error(f"Replaced entries of {project_dir} were kept in {backup}")
            raise
        finally:
            if not keep_backup:
                shutil.rmtree(backup, ignore_errors=True)

    @staticmethod
    def _park(target: Path, backup: Path, index: int) -> Optional[Path]:
        """Move an existing entry out of the way, returning where it went."""
        if not (target.exists() or target.is_symlink()):
            return None
        parked = backup / str(index)
        os.replace(target, parked)
        return parked

    @staticmethod
    def _roll_back(journal: List[Tuple[Path, Optional[Path]]]) -> bool:
        """Undo a partial merge, returning False if anything could not be restored."""
        restored = True
        for target, parked in reversed(journal):
            try:
                if target.is_dir() and not target.is_symlink():
                    target.rmdir()
                elif target.exists() or target.is_symlink():
                    target.unlink()
                if parked is not None:
                    os.replace(parked, target)
            except OSError as e:
                logger.error(f"Could not restore {target}: {e}")
                restored = False
        return restored

    def _remove_archive(self, zip_path: Path) -> None:
        try:
            zip_path.unlink()
        except OSError as e:
            raise CleanupFailed(zip_path, str(e)) from e
