"""Draws hand overlays and the status line onto camera frames."""

from __future__ import annotations

import cv2
import mediapipe as mp
import numpy as np

from utils.log_utils import log_error


def placeholder_frame(width: int = 640, height: int = 480, text: str = "Camera unavailable") -> np.ndarray:
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    cv2.putText(frame, text, (20, height // 2), cv2.FONT_HERSHEY_SIMPLEX, 0.8, (200, 200, 200), 2, cv2.LINE_AA)
    return frame


def placeholder_jpeg(text: str = "Camera unavailable") -> bytes:
    ok, buffer = cv2.imencode(".jpg", placeholder_frame(text=text))
    return buffer.tobytes() if ok else b""


class FrameRenderer:
    """Renders one annotated frame per call, optionally into an OpenCV window.

    The preview is mirrored after the landmarks are drawn so the overlay
    follows the hands, and the status text is drawn last so it stays readable.
    """

    def __init__(
        self,
        *,
        window_name: str = "Camera 1",
        show_window: bool = False,
        mirror: bool = True,
        jpeg_quality: int = 80,
    ) -> None:
        self.window_name = window_name
        self.show_window = show_window
        self.mirror = mirror
        self.jpeg_quality = jpeg_quality
        self.quit_requested = False
        self._window_open = False
        self._latest_jpeg: bytes | None = None

    def render(self, frame: np.ndarray, hands, status_text: str) -> np.ndarray:
        canvas = frame.copy()
        for hand in hands or []:
            mp.solutions.drawing_utils.draw_landmarks(canvas, hand, mp.solutions.hands.HAND_CONNECTIONS)
        if self.mirror:
            canvas = cv2.flip(canvas, 1)
        cv2.putText(canvas, status_text, (20, 40), cv2.FONT_HERSHEY_SIMPLEX, 0.8, (0, 255, 255), 2, cv2.LINE_AA)

        ok, buffer = cv2.imencode(".jpg", canvas, [int(cv2.IMWRITE_JPEG_QUALITY), self.jpeg_quality])
        if ok:
            self._latest_jpeg = buffer.tobytes()

        if self.show_window:
            try:
                cv2.imshow(self.window_name, canvas)
                self._window_open = True
                if (cv2.waitKey(1) & 0xFF) == ord("q"):
                    self.quit_requested = True
            except cv2.error as exc:
                log_error("CAMERA", "Preview window failed; continuing headless", exc)
                self.show_window = False
        return canvas

    def latest_jpeg(self) -> bytes | None:
        return self._latest_jpeg

    def close(self) -> None:
        if self._window_open:
            cv2.destroyWindow(self.window_name)
            cv2.waitKey(1)
            self._window_open = False
