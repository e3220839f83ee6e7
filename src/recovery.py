"""RecoveryStore — keeps a finished transcription when refinement fails."""
import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from src.constants import MSG_SAVE_FAILED, MSG_SAVED_TRANSCRIPT, SAVED_FILE_PREFIX, SAVED_FILE_SUFFIX
from src.models import SavedTranscript

logger = logging.getLogger(__name__)


class RecoveryStore:
    """Writes one markdown note per failed refinement; never edits or deletes them."""

    def __init__(self, directory: Path, clock: Callable[[], datetime] = datetime.now) -> None:
        self._directory = directory
        self._clock = clock

    @property
    def directory(self) -> Path:
        return self._directory

    async def save(self, source_file_name: str, raw_text: str) -> Optional[Path]:
        record = SavedTranscript(
            source_file_name=source_file_name,
            raw_text=raw_text,
            created_at=self._clock(),
        )
        try:
            path = await asyncio.to_thread(self._write, record)
        except Exception as e:
            logger.warning(MSG_SAVE_FAILED, e)
            return None
        logger.info(MSG_SAVED_TRANSCRIPT, path)
        return path

    def _write(self, record: SavedTranscript) -> Path:
        self._directory.mkdir(parents=True, exist_ok=True)
        content = record.render()
        attempt = 0
        while True:
            suffix = f"_{attempt}" if attempt else ""
            path = self._directory / f"{record.file_stem()}{suffix}{SAVED_FILE_SUFFIX}"
            try:
                # "x" fails if the name is taken, so concurrent writers never clobber each other.
                with open(path, "x", encoding="utf-8") as f:
                    f.write(content)
                return path
            except FileExistsError:
                attempt += 1

    def list_saved(self) -> list[Path]:
        match self._directory.is_dir():
            case False:
                return []
            case True:
                files = self._directory.glob(f"{SAVED_FILE_PREFIX}*{SAVED_FILE_SUFFIX}")
                return sorted(files, key=lambda p: p.name, reverse=True)
