"""Fire-and-forget delivery of finalized durations to the stats backend.

Delivery is best-effort: a failed write is logged and dropped. With
``max_attempts > 1`` a failed write is retried after ``retry_delay_secs``;
the presence timer never waits on the outcome either way.
"""

from __future__ import annotations

import asyncio

import aiohttp

from presence_module.models import FinalizedDuration
from stats_module.client import StatsBackendError, StatsClient
from utils.log_utils import log, log_error


class StatsReporter:
    def __init__(
        self,
        client: StatsClient,
        *,
        max_attempts: int = 1,
        retry_delay_secs: float = 1.0,
    ) -> None:
        self.client = client
        self.max_attempts = max(1, int(max_attempts))
        self.retry_delay_secs = max(0.0, float(retry_delay_secs))
        self._pending: set[asyncio.Task] = set()

    def report(self, duration: FinalizedDuration) -> None:
        """Schedule the write on the running loop and return immediately."""
        task = asyncio.get_running_loop().create_task(self._send(duration.seconds))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def pending(self) -> int:
        return len(self._pending)

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for in-flight writes; anything still running after ``timeout`` is cancelled."""
        if not self._pending:
            return
        tasks = list(self._pending)
        _, still_running = await asyncio.wait(tasks, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
            log("STATS", f"Dropped {len(still_running)} unsent report(s) on shutdown", variant="WARN")

    async def _send(self, seconds: int) -> bool:
        for attempt in range(1, self.max_attempts + 1):
            try:
                await self.client.submit_seconds(seconds)
            except (StatsBackendError, aiohttp.ClientError, asyncio.TimeoutError) as exc:
                log_error("STATS", f"Error sending {seconds}s to backend (attempt {attempt}/{self.max_attempts})", exc)
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_delay_secs)
                continue
            log("STATS", f"Timer value sent to the backend: {seconds}")
            return True
        return False
