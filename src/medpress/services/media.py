"""Best-effort cleanup of media referenced by content items.

The service never reads media; it only forgets references it no longer needs.
Cleanup failures are logged and swallowed.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Protocol
from urllib.parse import urlsplit

from medpress.core.settings import settings

logger = logging.getLogger(__name__)


class MediaStore(Protocol):
    """Capability to drop an opaque media reference."""

    def discard(self, ref: str) -> bool:
        """Remove the media behind ``ref``; return True if something was removed."""
        ...


class LocalMediaStore:
    """Media stored by the upload service under ``root/<subdir>/<filename>``."""

    def __init__(self, root: str | Path | None = None, subdirs: list[str] | None = None) -> None:
        self.root = Path(root if root is not None else settings.media_root)
        self.subdirs = list(subdirs if subdirs is not None else settings.media_subdirs)

    @staticmethod
    def filename_for(ref: str) -> str:
        """Return the bare filename a reference points at."""
        return PurePosixPath(urlsplit(ref).path).name

    def discard(self, ref: str) -> bool:
        try:
            filename = self.filename_for(ref)
            if not filename:
                return False
            for subdir in self.subdirs:
                candidate = self.root / subdir / filename
                if candidate.is_file():
                    candidate.unlink()
                    logger.info("Removed media file %s", candidate)
                    return True
        except (OSError, ValueError) as exc:
            logger.warning("Could not delete media for %s: %s", ref, exc)
        return False


def discard_quietly(media: MediaStore | None, ref: str | None) -> None:
    """Attempt to drop ``ref`` without ever raising."""
    if media is None or not ref:
        return
    try:
        media.discard(ref)
    except Exception as exc:  # noqa: BLE001 - cleanup must never fail the request
        logger.warning("Media cleanup failed for %s: %s", ref, exc)
