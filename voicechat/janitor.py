"""Optional periodic purge of stale audio files."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from voicechat.storage import AudioStore

log = logging.getLogger(__name__)


class AudioJanitor:
    """Runs ``store.purge(max_age_s)`` every ``interval_s`` seconds."""

    def __init__(self, store: AudioStore, *, interval_s: float, max_age_s: float) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self._store = store
        self._interval_s = interval_s
        self._max_age_s = max_age_s
        self._task: asyncio.Task[None] | None = None
        self._passes = 0
        self._deleted = 0
        self._errors = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run_loop(), name="audio-janitor")
        log.info(
            "Audio janitor started (every %.0fs, max age %.0fs)",
            self._interval_s,
            self._max_age_s,
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        log.info("Audio janitor stopped")

    async def run_once(self) -> int:
        """One purge pass; failures are logged and counted, not raised."""
        self._passes += 1
        try:
            deleted = await self._store.purge(self._max_age_s)
        except OSError as exc:
            self._errors += 1
            log.warning("Audio janitor pass failed: %s", exc)
            return 0
        self._deleted += deleted
        return deleted

    async def _run_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval_s)
            await self.run_once()

    def debug_snapshot(self) -> dict:
        return {
            "running": self.running,
            "interval_s": self._interval_s,
            "max_age_s": self._max_age_s,
            "passes": self._passes,
            "deleted": self._deleted,
            "errors": self._errors,
        }
