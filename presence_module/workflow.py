"""Starts and stops one camera session at a time on the current event loop.

This keeps the camera closed until explicitly invoked by the UI/consumer.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from presence_module.session import CameraSession
from utils.log_utils import log, log_error


class SessionAlreadyRunning(RuntimeError):
    pass


class PresenceWorkflow:
    def __init__(self, session_factory: Callable[..., CameraSession] = CameraSession) -> None:
        self._session_factory = session_factory
        self._session: CameraSession | None = None
        self._task: asyncio.Task | None = None

    def is_running(self) -> bool:
        return bool(self._task and not self._task.done())

    async def start_session(self, *, show_window: bool = False) -> CameraSession:
        """Open the camera and start the presence loop as a background task."""
        if self.is_running():
            raise SessionAlreadyRunning("Camera session already running")
        self._session = self._session_factory(show_window=show_window)
        self._task = asyncio.get_running_loop().create_task(self._session.run())
        self._task.add_done_callback(self._on_task_done)
        # Let the task open the camera before callers poll status.
        await asyncio.sleep(0)
        return self._session

    async def stop_session(self) -> None:
        if self._session is not None:
            self._session.stop()
        if self._task is not None:
            try:
                await self._task
            finally:
                self._task = None

    def _on_task_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            log("SESSION", "Camera session cancelled", variant="WARN")
            return
        if (exc := task.exception()) is not None:
            log_error("SESSION", "Camera session crashed", exc)

    def status(self) -> dict:
        if self._session is None:
            return {
                "running": False,
                "label": None,
                "state": "idle",
                "elapsed_seconds": 0,
                "timer": "00:00",
            }
        return self._session.status()

    def latest_jpeg(self) -> bytes | None:
        return self._session.latest_jpeg() if self._session is not None else None
