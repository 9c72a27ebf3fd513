"""Camera session: frames in, presence timer and annotated preview out.

One session owns the camera, the hand detector, the renderer, the presence
timer and the stats reporter. Everything runs on the caller's event loop:
blocking camera reads and inference are pushed to a worker thread and awaited,
so only one frame is in flight at a time and the timer is only ever touched
from the loop thread.
"""

from __future__ import annotations

import asyncio
import os

from presence_module.labels import NO_HANDS, describe_hands, format_time
from presence_module.models import PresenceState
from presence_module.timer import PresenceTimer
from stats_module.client import StatsClient
from stats_module.reporter import StatsReporter
from utils.log_utils import log, log_error
from utils.settings_store import deep_log, get_settings
from video_module import FrameRenderer, HandDetector, VideoStream


class CameraSession:
    def __init__(
        self,
        *,
        settings: dict | None = None,
        stream: VideoStream | None = None,
        detector: HandDetector | None = None,
        renderer: FrameRenderer | None = None,
        reporter: StatsReporter | None = None,
        show_window: bool = False,
    ) -> None:
        cfg = dict(settings or get_settings())
        self.settings = cfg
        device_index = int(os.getenv("CAMERA_DEVICE_INDEX", cfg.get("device_index", 0)))
        self.stream = stream or VideoStream(
            device_index=device_index,
            frame_width=cfg.get("frame_width"),
            frame_height=cfg.get("frame_height"),
        )
        self.detector = detector or HandDetector(
            max_num_hands=int(cfg.get("max_num_hands", 2)),
            detection_confidence=float(cfg.get("detection_threshold", 0.6)),
            tracking_confidence=float(cfg.get("tracking_threshold", 0.6)),
            model_complexity=int(cfg.get("model_complexity", 1)),
        )
        self.renderer = renderer or FrameRenderer(
            show_window=show_window,
            mirror=bool(cfg.get("mirror_preview", True)),
        )
        self.reporter = reporter or StatsReporter(
            StatsClient(timeout_secs=cfg.get("stats_timeout_secs")),
            max_attempts=int(cfg.get("report_max_attempts", 1)),
            retry_delay_secs=float(cfg.get("report_retry_delay_secs", 1.0)),
        )
        self.timer: PresenceTimer | None = None
        self.active = False
        self._label = NO_HANDS

    async def run(self) -> None:
        """Open resources, process frames until stopped, then release everything."""
        if self.active:
            log("SESSION", "Camera session already running")
            return
        loop = asyncio.get_running_loop()
        self.timer = PresenceTimer(
            loop,
            on_finalize=self.reporter.report,
            tick_secs=float(self.settings.get("tick_secs", 1.0)),
            grace_secs=float(self.settings.get("grace_secs", 5.0)),
        )
        try:
            await asyncio.to_thread(self.stream.open)
        except (RuntimeError, OSError) as exc:
            log_error("CAMERA", "Camera unavailable; session not started", exc)
            self.timer = None
            return

        self.detector.open()
        self.active = True
        self._label = NO_HANDS
        log("SESSION", "Camera session started")
        try:
            while self.active:
                ok, frame = await asyncio.to_thread(self.stream.read)
                if not ok or frame is None:
                    log("CAMERA", "Failed to read from camera.", variant="WARN")
                    break
                await self.process_frame(frame)
                if self.renderer.quit_requested:
                    break
        finally:
            await self._close()

    async def process_frame(self, frame) -> None:
        """Detect hands in one frame, feed the timer and render the preview."""
        detection = await asyncio.to_thread(self.detector.detect, frame)
        if detection is not None and self.timer is not None:
            self.timer.observe(detection.sample.hand_count)
            self._label = describe_hands(detection.sample)
        else:
            self._label = NO_HANDS
        deep_log(f"[DEEP][SESSION] label={self._label!r} state={self.state()}")
        hands = detection.landmarks if detection is not None else []
        self.renderer.render(frame, hands, self.status_text())

    def stop(self) -> None:
        self.active = False

    async def _close(self) -> None:
        self.active = False
        if self.timer is not None:
            self.timer.close()
        await asyncio.to_thread(self.stream.close)
        self.detector.close()
        self.renderer.close()
        await self.reporter.drain(timeout=5.0)
        log("SESSION", "Camera session stopped")

    def elapsed_seconds(self) -> int:
        return self.timer.elapsed_seconds if self.timer is not None else 0

    def state(self) -> PresenceState:
        return self.timer.state if self.timer is not None else PresenceState.IDLE

    def status_text(self) -> str:
        return f"{self._label} - Timer: {format_time(self.elapsed_seconds())}"

    def status(self) -> dict:
        return {
            "running": self.active,
            "label": self._label,
            "state": self.state().value,
            "elapsed_seconds": self.elapsed_seconds(),
            "timer": format_time(self.elapsed_seconds()),
        }

    def latest_jpeg(self) -> bytes | None:
        return self.renderer.latest_jpeg()
