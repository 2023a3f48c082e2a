"""Unit tests for wips.utils.angles.

Covers the compass-heading helpers used by the
heading-proxy classifier, in particular differences across north.
"""

import numpy as np
import pytest

from wips.utils import heading_diff_deg, wrap_heading_deg


class TestWrapHeadingDeg:
    @pytest.mark.parametrize(
        "heading, expected",
        [(0.0, 0.0), (-90.0, 270.0), (725.0, 5.0), (360.0, 0.0), (359.5, 359.5)],
    )
    def test_scalar(self, heading, expected):
        assert wrap_heading_deg(heading) == pytest.approx(expected)

    def test_scalar_returns_float(self):
        assert isinstance(wrap_heading_deg(-10.0), float)

    def test_tiny_negative_stays_below_360(self):
        h = wrap_heading_deg(-1e-14)
        assert 0.0 <= h < 360.0

    def test_array(self):
        h = wrap_heading_deg(np.array([-90.0, 370.0, 45.0]))
        assert isinstance(h, np.ndarray)
        np.testing.assert_allclose(h, [270.0, 10.0, 45.0])


class TestHeadingDiffDeg:
    def test_across_north(self):
        """359° and 1° are 2° apart, not 358°."""
        assert heading_diff_deg(359.0, 1.0) == pytest.approx(2.0)
        assert heading_diff_deg(1.0, 359.0) == pytest.approx(2.0)

    def test_opposite(self):
        assert heading_diff_deg(90.0, 270.0) == pytest.approx(180.0)

    def test_equal(self):
        assert heading_diff_deg(123.0, 123.0) == 0.0

    def test_unwrapped_inputs(self):
        assert heading_diff_deg(-10.0, 370.0) == pytest.approx(20.0)

    def test_never_exceeds_180(self):
        a = np.linspace(0.0, 359.0, 50)
        b = np.linspace(359.0, 0.0, 50)
        d = heading_diff_deg(a, b)
        assert np.all(d >= 0.0)
        assert np.all(d <= 180.0)
