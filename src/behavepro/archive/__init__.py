"""Archive installation for downloaded feature files."""

from .installer import ArchiveInstaller

__all__ = ['ArchiveInstaller']
