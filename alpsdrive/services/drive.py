from __future__ import annotations

import asyncio
import logging
import os
import re
import shutil
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from ..errors import AlreadyExistsError, DriveIOError, InvalidNameError, NotFoundError, PathEscapeError
from ..schemas import EntryDescriptor

logger = logging.getLogger(__name__)

OCTET_STREAM = 'application/octet-stream'

# One run of [A-Za-z0-9_-], an optional single dot, then another run.
_NAME_RE = re.compile(r'^[\w-]+\.?[\w-]+$', re.ASCII)


def is_valid_name(name: str) -> bool:
    if not isinstance(name, str):
        return False
    return _NAME_RE.fullmatch(name) is not None


def validate_path(root: Path, *segments: str) -> Path:
    candidate = Path(os.path.normpath(os.path.join(root, *segments)))
    if candidate != root and root not in candidate.parents:
        raise PathEscapeError('Path escapes drive root')
    return candidate


@dataclass(frozen=True)
class Listing:
    entries: list[EntryDescriptor]


@dataclass(frozen=True)
class FileStream:
    path: Path
    media_type: str = OCTET_STREAM


class DriveRoot:
    """Maps client-supplied segments onto the drive root.

    Every path handed out by :meth:`resolve` or :meth:`contain` is the root
    itself or one of its descendants; anything else raises
    :class:`PathEscapeError`. Symlinks are not followed while checking.
    Top-level ``reserved`` names (the upload staging area) are invisible to
    clients: :meth:`resolve` reports anything at or under them as missing.
    """

    def __init__(self, root: Union[Path, str], reserved: Iterable[str] = ()):
        self.path = Path(root).resolve()
        self.reserved = frozenset(reserved)

    def resolve(self, folder: Optional[str] = None, name: Optional[str] = None, *, validate: bool = False) -> Path:
        segments = [segment for segment in (folder, name) if segment is not None]
        if any(segment == '' for segment in segments):
            raise InvalidNameError('Empty path segment')
        if validate and segments and not is_valid_name(segments[-1]):
            raise InvalidNameError(f'Invalid name: {segments[-1]!r}')
        path = validate_path(self.path, *segments)
        if self.is_reserved(path):
            raise NotFoundError(f'{self.relative(path)} not found')
        return path

    def is_reserved(self, path: Path) -> bool:
        if path == self.path:
            return False
        return path.relative_to(self.path).parts[0] in self.reserved

    def contain(self, path: Union[Path, str]) -> Path:
        return validate_path(self.path, str(path))

    def relative(self, path: Path) -> str:
        return path.relative_to(self.path).as_posix()


def _scan_dir(path: Path) -> list[tuple[Path, bool]]:
    return [(child, child.is_dir()) for child in path.iterdir()]


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


class DriveOps:
    def __init__(self, root: DriveRoot):
        self.root = root

    async def _require_exists(self, path: Path) -> None:
        if not await asyncio.to_thread(path.exists):
            raise NotFoundError(f'{self.root.relative(path)} not found')

    async def require_directory(self, path: Path) -> None:
        if not await asyncio.to_thread(path.is_dir):
            raise NotFoundError(f'Folder {self.root.relative(path)} not found')

    async def list_entries(self, path: Path) -> list[EntryDescriptor]:
        await self._require_exists(path)
        try:
            children = await asyncio.to_thread(_scan_dir, path)
        except OSError as exc:
            raise DriveIOError(f'Could not list {self.root.relative(path)}') from exc

        hidden = self.root.reserved if path == self.root.path else frozenset()
        entries: list[EntryDescriptor] = []
        for child, is_dir in children:
            if child.name in hidden:
                continue
            if is_dir:
                entries.append(EntryDescriptor(name=child.name, is_folder=True))
                continue

            size = None
            try:
                size = (await asyncio.to_thread(child.stat)).st_size
            except OSError as exc:
                logger.warning('Listing %s without size: %s', self.root.relative(child), exc)
            entries.append(EntryDescriptor(name=child.name, is_folder=False, size=size))

        entries.sort(key=lambda entry: entry.name)
        return entries

    async def resolve_content(self, path: Path) -> Union[Listing, FileStream]:
        await self._require_exists(path)
        try:
            info = await asyncio.to_thread(path.stat)
        except OSError as exc:
            raise DriveIOError(f'Could not read {self.root.relative(path)}') from exc

        if stat.S_ISDIR(info.st_mode):
            return Listing(entries=await self.list_entries(path))
        return FileStream(path=path)

    async def create_directory(self, path: Path) -> None:
        rel = self.root.relative(path)
        try:
            await asyncio.to_thread(path.mkdir, parents=False, exist_ok=False)
        except FileExistsError as exc:
            raise AlreadyExistsError(f'{rel} already exists') from exc
        except OSError as exc:
            raise DriveIOError(f'Could not create {rel}') from exc
        logger.info('Created folder %s', rel)

    async def delete_entry(self, path: Path) -> None:
        if path == self.root.path or not is_valid_name(path.name):
            raise InvalidNameError(f'Invalid name: {path.name!r}')

        rel = self.root.relative(path)
        try:
            if await asyncio.to_thread(_is_real_dir, path):
                await asyncio.to_thread(shutil.rmtree, path)
            else:
                await asyncio.to_thread(path.unlink)
        except OSError as exc:
            raise DriveIOError(f'Could not delete {rel}') from exc
        logger.info('Deleted %s', rel)
