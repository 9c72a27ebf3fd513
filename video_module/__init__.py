"""Camera capture, hand detection and frame rendering."""

from video_module.hand_detector import HandDetection, HandDetector
from video_module.renderer import FrameRenderer, placeholder_frame, placeholder_jpeg
from video_module.video_stream import VideoStream

__all__ = [
    "FrameRenderer",
    "HandDetection",
    "HandDetector",
    "VideoStream",
    "placeholder_frame",
    "placeholder_jpeg",
]
