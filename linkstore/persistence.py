"""Snapshot file and background autosave for the link store."""

import asyncio
import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional


class SnapshotFile:
    """JSON snapshot of the full record list, overwritten wholesale on save."""

    def __init__(self, path: str, indent: int = 2):
        """Initialize snapshot file.

        Args:
            path: Location of the JSON file
            indent: Indentation used when pretty-printing
        """
        self.path = path
        self.indent = indent

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def read(self) -> List[Dict[str, Any]]:
        """Read the records from disk.

        Returns:
            List of record dictionaries

        Raises:
            OSError: If the file cannot be read
            ValueError: If the content is not a JSON array of objects
        """
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)

        # null is accepted as an empty record list
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError(f"Snapshot must be a JSON array, got {type(data).__name__}")
        for item in data:
            if not isinstance(item, dict):
                raise ValueError(f"Snapshot entries must be objects, got {type(item).__name__}")
        return data

    def write(self, records: List[Dict[str, Any]]) -> None:
        """Replace the snapshot with the given records.

        The content goes to a temporary sibling first so a failed write
        never leaves a truncated snapshot behind.

        Raises:
            OSError: If the file cannot be written
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=self.indent, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


class AutosaveWorker:
    """Background task that saves the store when notified and on an interval.

    Redirects call ``notify()`` after bumping a visit count; the save itself
    happens here, off the request path. Notifications arriving while a save
    is running coalesce into one follow-up save.
    """

    def __init__(
        self,
        save: Callable[[], bool],
        interval_seconds: float = 30.0,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize autosave worker.

        Args:
            save: Blocking callable that persists the store
            interval_seconds: Period of the unconditional backstop save
            logger: Optional logger
        """
        self._save = save
        self.interval_seconds = interval_seconds
        self.logger = logger or logging.getLogger(__name__)
        self._wakeup: Optional[asyncio.Event] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task] = None
        self.saves = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the worker on the running event loop."""
        if self.running:
            return
        self._loop = asyncio.get_running_loop()
        self._wakeup = asyncio.Event()
        self._task = self._loop.create_task(self._run())
        self.logger.info(f"Autosave worker started (interval={self.interval_seconds}s)")

    def notify(self) -> None:
        """Request a save without waiting for it."""
        if not self.running:
            return
        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            current = None
        if current is self._loop:
            self._wakeup.set()
        else:
            self._loop.call_soon_threadsafe(self._wakeup.set)

    async def stop(self) -> None:
        """Stop the worker and perform a final flush."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        await self._save_once("shutdown")
        self.logger.info("Autosave worker stopped")

    async def _run(self) -> None:
        while True:
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=self.interval_seconds)
                reason = "change"
            except asyncio.TimeoutError:
                reason = "interval"
            self._wakeup.clear()
            await self._save_once(reason)

    async def _save_once(self, reason: str) -> None:
        try:
            ok = await asyncio.to_thread(self._save)
        except Exception as e:
            self.logger.error(f"Autosave ({reason}) failed: {e}")
            return
        self.saves += 1
        if ok:
            self.logger.debug(f"Autosave ({reason}) complete")
