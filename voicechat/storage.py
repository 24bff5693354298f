"""Audio artifact store.

Generated speech is kept as ``response_<epoch-millis>.mp3`` entries. The store
keeps no registry of what it has written: existence is whatever the backing
storage reports at lookup time. Eviction is purely age based and only runs
when ``purge()`` is called.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import stat as stat_mod
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

log = logging.getLogger(__name__)

AUDIO_PREFIX = "response_"
AUDIO_SUFFIX = ".mp3"
AUDIO_URL_PREFIX = "/audio/"

_SAFE_NAME = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]*")


@dataclass(slots=True, frozen=True)
class StoredAudio:
    name: str
    url: str


@dataclass(slots=True, frozen=True)
class AudioEntry:
    """One stored artifact: a file on disk (``path``) or bytes in memory (``data``)."""

    name: str
    size: int
    mtime: float
    path: Path | None = None
    data: bytes | None = None


def is_safe_name(name: str) -> bool:
    """True for a bare file name that cannot escape the store directory."""
    return bool(_SAFE_NAME.fullmatch(name)) and ".." not in name


class AudioStore(ABC):
    """Base class for artifact storage backends."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last_ms = 0
        self._written = 0
        self._purged = 0

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location for diagnostics."""

    @abstractmethod
    async def _create(self, name: str, data: bytes) -> bool:
        """Store ``data`` under a new ``name``; False if the name is taken."""

    @abstractmethod
    async def lookup(self, name: str) -> AudioEntry | None:
        """Return the entry for ``name``, or None when it does not exist."""

    @abstractmethod
    async def _purge(self, max_age_s: float, now: float) -> int:
        raise NotImplementedError

    async def write(self, data: bytes) -> StoredAudio:
        """Persist ``data`` under a fresh time-based name."""
        while True:
            name = self._allocate_name()
            if await self._create(name, data):
                break
            log.warning("Audio name %s already taken; allocating another", name)
        self._written += 1
        log.info("Stored audio %s (%d bytes)", name, len(data))
        return StoredAudio(name=name, url=f"{AUDIO_URL_PREFIX}{name}")

    async def purge(self, max_age_s: float) -> int:
        """Delete entries older than ``max_age_s`` seconds; return the count."""
        deleted = await self._purge(max_age_s, self._clock())
        self._purged += deleted
        if deleted:
            log.info("Purged %d audio files older than %.0fs", deleted, max_age_s)
        return deleted

    def _allocate_name(self) -> str:
        # Runs on the event loop without awaiting, so allocation is atomic.
        ms = int(self._clock() * 1000)
        if ms <= self._last_ms:
            ms = self._last_ms + 1
        self._last_ms = ms
        return f"{AUDIO_PREFIX}{ms}{AUDIO_SUFFIX}"

    def debug_snapshot(self) -> dict:
        return {
            "location": self.location,
            "written": self._written,
            "purged": self._purged,
        }


# ---------------------------------------------------------------------------
# Disk
# ---------------------------------------------------------------------------


class DiskAudioStore(AudioStore):
    """Stores artifacts as files in one directory; blocking IO runs in threads."""

    def __init__(
        self, directory: str | os.PathLike[str], clock: Callable[[], float] = time.time
    ) -> None:
        super().__init__(clock)
        self._dir = Path(directory).resolve()
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._dir

    @property
    def location(self) -> str:
        return str(self._dir)

    async def _create(self, name: str, data: bytes) -> bool:
        return await asyncio.to_thread(self._create_sync, name, data)

    def _create_sync(self, name: str, data: bytes) -> bool:
        path = self._dir / name
        try:
            fh = open(path, "xb")
        except FileExistsError:
            return False
        try:
            with fh:
                fh.write(data)
        except BaseException:
            # A partial write must not become a servable artifact.
            path.unlink(missing_ok=True)
            raise
        return True

    async def lookup(self, name: str) -> AudioEntry | None:
        if not is_safe_name(name):
            return None
        return await asyncio.to_thread(self._lookup_sync, name)

    def _lookup_sync(self, name: str) -> AudioEntry | None:
        path = self._dir / name
        try:
            st = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return None
        if not stat_mod.S_ISREG(st.st_mode):
            return None
        return AudioEntry(name=name, size=st.st_size, mtime=st.st_mtime, path=path)

    async def _purge(self, max_age_s: float, now: float) -> int:
        return await asyncio.to_thread(self._purge_sync, max_age_s, now)

    def _purge_sync(self, max_age_s: float, now: float) -> int:
        with os.scandir(self._dir) as it:
            entries = list(it)

        deleted = 0
        for entry in entries:
            try:
                if not entry.is_file(follow_symlinks=False):
                    continue
                mtime = entry.stat(follow_symlinks=False).st_mtime
            except FileNotFoundError:
                continue
            if now - mtime <= max_age_s:
                continue
            try:
                os.unlink(entry.path)
            except FileNotFoundError:
                # Removed by a concurrent purge.
                log.debug("Audio file %s already gone", entry.name)
                continue
            deleted += 1
        return deleted


# ---------------------------------------------------------------------------
# Memory
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class _MemoryEntry:
    data: bytes
    mtime: float


class MemoryAudioStore(AudioStore):
    """Dict-backed store for tests and ephemeral deployments."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        super().__init__(clock)
        self._entries: dict[str, _MemoryEntry] = {}

    @property
    def location(self) -> str:
        return ":memory:"

    def names(self) -> list[str]:
        return sorted(self._entries)

    def set_mtime(self, name: str, mtime: float) -> None:
        self._entries[name].mtime = mtime

    async def _create(self, name: str, data: bytes) -> bool:
        if name in self._entries:
            return False
        self._entries[name] = _MemoryEntry(data=bytes(data), mtime=self._clock())
        return True

    async def lookup(self, name: str) -> AudioEntry | None:
        entry = self._entries.get(name)
        if entry is None:
            return None
        return AudioEntry(
            name=name, size=len(entry.data), mtime=entry.mtime, data=entry.data
        )

    async def _purge(self, max_age_s: float, now: float) -> int:
        stale = [n for n, e in self._entries.items() if now - e.mtime > max_age_s]
        deleted = 0
        for name in stale:
            if self._entries.pop(name, None) is not None:
                deleted += 1
        return deleted
