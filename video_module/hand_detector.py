"""MediaPipe Hands wrapper that turns a frame into a PresenceSample.

The detector is optional at runtime: when the model cannot be created or a
frame fails inference, ``detect`` returns None and the caller keeps its
previous presence state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import cv2
import mediapipe as mp

from presence_module.models import PresenceSample
from utils.log_utils import log, log_error


@dataclass(frozen=True)
class HandDetection:
    sample: PresenceSample
    landmarks: list = field(default_factory=list)


class HandDetector:
    def __init__(
        self,
        *,
        max_num_hands: int = 2,
        detection_confidence: float = 0.6,
        tracking_confidence: float = 0.6,
        model_complexity: int = 1,
    ) -> None:
        self.max_num_hands = max_num_hands
        self.detection_confidence = detection_confidence
        self.tracking_confidence = tracking_confidence
        self.model_complexity = model_complexity
        self._hands = None

    def open(self) -> bool:
        if self._hands is not None:
            return True
        try:
            self._hands = mp.solutions.hands.Hands(
                static_image_mode=False,
                max_num_hands=self.max_num_hands,
                min_detection_confidence=self.detection_confidence,
                min_tracking_confidence=self.tracking_confidence,
                model_complexity=self.model_complexity,
            )
        except (AttributeError, RuntimeError, OSError, ValueError) as exc:
            log_error("DETECTOR", "Hand detector unavailable; rendering without overlays", exc)
            self._hands = None
            return False
        log("DETECTOR", f"MediaPipe Hands ready (max_num_hands={self.max_num_hands})")
        return True

    def detect(self, frame) -> HandDetection | None:
        if self._hands is None or frame is None:
            return None
        try:
            results = self._hands.process(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
        except (cv2.error, RuntimeError, ValueError) as exc:
            log_error("DETECTOR", "Inference failed for frame", exc)
            return None

        landmarks = list(results.multi_hand_landmarks or [])[: self.max_num_hands]
        labels: list[str | None] = []
        for hand in list(results.multi_handedness or [])[: len(landmarks)]:
            labels.append(hand.classification[0].label if hand.classification else None)
        labels.extend([None] * (len(landmarks) - len(labels)))
        return HandDetection(
            sample=PresenceSample(hand_count=len(landmarks), handedness=tuple(labels)),
            landmarks=landmarks,
        )

    def close(self) -> None:
        if self._hands is not None:
            self._hands.close()
            self._hands = None
