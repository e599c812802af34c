"""
Tests for darkmaker.services.pipeline.timing
"""

import pytest

from darkmaker.services.pipeline.timing import compute_duration_per_image, resolve_duration_per_image


class TestComputeDurationPerImage:
    def test_quotient_when_long_enough(self):
        assert compute_duration_per_image(30.0, 3) == 10.0
        assert compute_duration_per_image(4.0, 2) == 2.0

    def test_floor_at_two_seconds(self):
        assert compute_duration_per_image(3.0, 10) == 2.0

    def test_zero_images_treated_as_one(self):
        assert compute_duration_per_image(7.5, 0) == 7.5

    def test_unknown_duration(self):
        assert compute_duration_per_image(0.0, 1) == 2.0

    @pytest.mark.parametrize("total", [0.0, 0.5, 1.99, 2.0, 9.0, 61.3, 3600.0])
    @pytest.mark.parametrize("count", [0, 1, 2, 7, 50])
    def test_never_below_floor(self, total, count):
        duration = compute_duration_per_image(total, count)
        assert duration >= 2.0
        quotient = total / max(1, count)
        if quotient >= 2.0:
            assert duration == quotient


class TestResolveDurationPerImage:
    def test_override_wins(self):
        assert resolve_duration_per_image(30.0, 3, 5.0) == 5.0

    def test_override_is_floored(self):
        assert resolve_duration_per_image(30.0, 3, 0.5) == 2.0

    @pytest.mark.parametrize("override", [None, 0, -1.0])
    def test_missing_override(self, override):
        assert resolve_duration_per_image(30.0, 3, override) == 10.0
