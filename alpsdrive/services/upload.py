from __future__ import annotations

import asyncio
import logging
import os
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Protocol

from ..errors import DriveIOError, InvalidNameError, InvalidUploadError, NotFoundError
from .drive import DriveRoot, is_valid_name

logger = logging.getLogger(__name__)

_STAGED_FILENAME = 'upload.bin'


@dataclass(frozen=True)
class StagedUpload:
    temporary_path: Path
    original_filename: str


class IncomingFile(Protocol):
    filename: Optional[str]

    async def read(self, size: int = -1) -> bytes:
        ...


async def discard_staging(directory: Path) -> None:
    try:
        await asyncio.to_thread(shutil.rmtree, directory)
    except FileNotFoundError:
        return
    except OSError as exc:
        logger.warning('Could not clear staging directory %s: %s', directory, exc)


def _flush_to_disk(handle: BinaryIO) -> None:
    handle.flush()
    os.fsync(handle.fileno())


class UploadStager:
    """Writes an incoming multipart body under the staging area.

    Each upload gets its own directory below ``staging_dir`` so that clearing
    one upload never touches another one still in flight.
    """

    def __init__(self, staging_dir: Path, chunk_bytes: int = 1024 * 1024):
        self.staging_dir = Path(staging_dir)
        self.chunk_bytes = chunk_bytes

    async def stage(self, upload: IncomingFile) -> StagedUpload:
        if not upload.filename:
            raise InvalidUploadError('No file provided')

        directory = self.staging_dir / uuid.uuid4().hex
        target = directory / _STAGED_FILENAME
        try:
            await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=False)
            handle = await asyncio.to_thread(target.open, 'wb')
            try:
                while chunk := await upload.read(self.chunk_bytes):
                    await asyncio.to_thread(handle.write, chunk)
                await asyncio.to_thread(_flush_to_disk, handle)
            finally:
                await asyncio.to_thread(handle.close)
        except OSError as exc:
            await discard_staging(directory)
            raise DriveIOError('Could not stage upload') from exc
        return StagedUpload(temporary_path=target, original_filename=upload.filename)


class UploadFinalizer:
    def __init__(self, root: DriveRoot, staging_dir: Path):
        self.root = root
        self.staging_dir = Path(staging_dir)

    async def finalize(self, staged: StagedUpload, destination_dir: Path) -> Path:
        try:
            return await self._move_into_place(staged, destination_dir)
        finally:
            await self._clear(staged)

    async def _move_into_place(self, staged: StagedUpload, destination_dir: Path) -> Path:
        if not await asyncio.to_thread(staged.temporary_path.is_file):
            raise InvalidUploadError('Staged upload is missing')
        if not is_valid_name(staged.original_filename):
            raise InvalidNameError(f'Invalid file name: {staged.original_filename!r}')

        destination_dir = self.root.contain(destination_dir)
        if not await asyncio.to_thread(destination_dir.is_dir):
            raise NotFoundError(f'Folder {self.root.relative(destination_dir)} not found')

        target = self.root.contain(destination_dir / staged.original_filename)
        if target == self.staging_dir or self.staging_dir in target.parents:
            raise InvalidNameError('Cannot upload into the staging area')
        try:
            # Same filesystem as the staging area; refuses to land on a directory.
            await asyncio.to_thread(os.replace, staged.temporary_path, target)
        except OSError as exc:
            raise DriveIOError(f'Could not store {staged.original_filename}') from exc

        logger.info('Stored upload %s', self.root.relative(target))
        return target

    async def _clear(self, staged: StagedUpload) -> None:
        directory = staged.temporary_path.parent
        if self.staging_dir not in directory.parents:
            logger.warning('Refusing to clear %s outside the staging area', directory)
            return
        await discard_staging(directory)
