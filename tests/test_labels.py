"""Tests for presence labels and timer formatting."""

import pytest

from presence_module.labels import (
    BOTH_HANDS,
    LEFT_HAND,
    NO_HANDS,
    RIGHT_HAND,
    describe_hands,
    format_time,
)
from presence_module.models import PresenceSample


class TestDescribeHands:
    """The single-hand label is mirrored relative to the detector."""

    def test_no_hands(self):
        assert describe_hands(PresenceSample(hand_count=0)) == NO_HANDS

    def test_missing_sample_means_no_hands(self):
        assert describe_hands(None) == NO_HANDS

    def test_detector_right_is_shown_as_left(self):
        assert describe_hands(PresenceSample.from_labels(["Right"])) == LEFT_HAND

    def test_detector_left_is_shown_as_right(self):
        assert describe_hands(PresenceSample.from_labels(["Left"])) == RIGHT_HAND

    def test_unknown_handedness_falls_back_to_right(self):
        assert describe_hands(PresenceSample(hand_count=1)) == RIGHT_HAND

    def test_two_hands(self):
        assert describe_hands(PresenceSample.from_labels(["Left", "Right"])) == BOTH_HANDS

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            PresenceSample(hand_count=-1)


class TestFormatTime:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "00:00"), (5, "00:05"), (65, "01:05"), (600, "10:00"), (3599, "59:59"), (6000, "100:00")],
    )
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected
