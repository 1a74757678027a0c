"""
Tests for the boxed pair counters against the brute-force correlation sum.
"""

import numpy as np
import pytest

from boxcorr import (
    boxed_correlationsum,
    boxed_correlationsum_2,
    boxed_correlationsum_q,
    correlationsum,
    data_boxing,
    inner_correlationsum_2,
    inner_correlationsum_q,
)

RADII = np.geomspace(0.02, 0.3, 10)


class TestBoxedSumTwo:
    """q = 2 specialisation."""

    @pytest.mark.parametrize("w", [0, 1, 5])
    @pytest.mark.parametrize("P", [1, 2, 3])
    def test_matches_brute_force(self, random_points, w, P):
        boxed = boxed_correlationsum(random_points, RADII, P=P, w=w)
        brute = correlationsum(random_points, RADII, w=w)
        np.testing.assert_allclose(boxed, brute, rtol=1e-12, atol=1e-15)

    @pytest.mark.parametrize("norm", ["euclidean", "chebyshev", "cityblock"])
    def test_matches_brute_force_for_each_norm(self, random_points, norm):
        boxed = boxed_correlationsum(random_points, RADII, norm=norm)
        brute = correlationsum(random_points, RADII, norm=norm)
        np.testing.assert_allclose(boxed, brute, rtol=1e-12, atol=1e-15)

    def test_monotone_and_bounded(self, random_points):
        Cs = boxed_correlationsum(random_points, np.geomspace(0.01, 0.5, 15))
        assert np.all(np.diff(Cs) >= 0)
        assert np.all(Cs >= 0)
        assert np.all(Cs <= 1 + 1e-12)

    def test_all_pairs_within_large_radius(self, random_points):
        # every pair is closer than 2 in the unit cube
        Cs = boxed_correlationsum(random_points, [2.0])
        np.testing.assert_allclose(Cs, [1.0])

    def test_from_precomputed_boxes(self, random_points):
        boxes, contents = data_boxing(random_points, RADII[-1], 2)
        Cs = boxed_correlationsum_2(boxes, contents, random_points, RADII)
        np.testing.assert_allclose(Cs, correlationsum(random_points, RADII))

    def test_unsorted_radii_rejected(self, random_points):
        with pytest.raises(ValueError, match="Sorted radii"):
            boxed_correlationsum(random_points, [0.3, 0.1, 0.2])

    def test_prism_dimension_above_data_dimension_rejected(self, random_points):
        with pytest.raises(ValueError, match="Prism dimension"):
            boxed_correlationsum(random_points, RADII, P=4)

    def test_smaller_box_size_warns(self, random_points):
        with pytest.warns(UserWarning, match="smaller than the largest radius"):
            boxed_correlationsum(random_points, RADII, r0=0.1)

    def test_progress_callback_called_per_box(self, random_points):
        boxes, contents = data_boxing(random_points, 0.3, 2)
        calls = []
        Cs = boxed_correlationsum_2(boxes, contents, random_points, RADII,
                                    progress_callback=lambda i, m: calls.append((i, m)))
        assert calls == [(i, len(boxes)) for i in range(len(boxes))]
        np.testing.assert_allclose(Cs, boxed_correlationsum_2(boxes, contents, random_points, RADII))


class TestInnerSumTwo:
    """Pair counting inside one box."""

    def test_counts_each_pair_once(self):
        data = np.array([[0.0], [1.0], [2.5]])
        idx = np.array([0, 1, 2])
        counts = inner_correlationsum_2(idx, idx, data, [1.1, 1.6, 3.0])
        # distances 1.0, 2.5, 1.5
        np.testing.assert_array_equal(counts, [1, 2, 3])

    def test_theiler_window_excludes_close_indices(self):
        data = np.array([[0.0], [0.1], [0.2], [0.3]])
        idx = np.arange(4)
        counts = inner_correlationsum_2(idx, idx, data, [1.0], w=1)
        # only pairs (0, 2), (0, 3), (1, 3) are far enough apart in time
        np.testing.assert_array_equal(counts, [3])

    def test_distance_equal_to_radius_not_counted(self):
        data = np.array([[0.0], [1.0]])
        idx = np.array([0, 1])
        np.testing.assert_array_equal(inner_correlationsum_2(idx, idx, data, [1.0, 1.5]), [0, 1])

    def test_unsorted_radii_rejected(self):
        data = np.zeros((3, 1))
        with pytest.raises(ValueError):
            inner_correlationsum_2([0, 1], [0, 1, 2], data, [2.0, 1.0])


class TestBoxedSumQ:
    """General q-order sum."""

    @pytest.mark.parametrize("q", [1.5, 3, 4])
    @pytest.mark.parametrize("w", [0, 3])
    def test_matches_brute_force(self, random_points, q, w):
        boxed = boxed_correlationsum(random_points, RADII, q=q, w=w)
        brute = correlationsum(random_points, RADII, q=q, w=w)
        np.testing.assert_allclose(boxed, brute, rtol=1e-10, atol=1e-15)

    def test_monotone(self, random_points):
        Cs = boxed_correlationsum(random_points, np.geomspace(0.01, 0.5, 12), q=3)
        assert np.all(np.diff(Cs) >= -1e-15)
        assert np.all(Cs >= 0)

    def test_from_precomputed_boxes(self, random_points):
        boxes, contents = data_boxing(random_points, RADII[-1], 3)
        Cs = boxed_correlationsum_q(boxes, contents, random_points, RADII, 3)
        np.testing.assert_allclose(Cs, correlationsum(random_points, RADII, q=3), rtol=1e-10)

    def test_inner_skips_boundary_centres(self):
        data = np.array([[0.0], [0.1], [0.2], [0.3], [0.4]])
        idx = np.arange(5)
        # w = 1: centres 1, 2, 3; neighbours with |i - j| > 1
        counts = inner_correlationsum_q(idx, idx, data, [1.0], 2, w=1)
        # centre 1 -> {3, 4}, centre 2 -> {0, 4}, centre 3 -> {0, 1}
        np.testing.assert_array_equal(counts, [6])

    def test_q_below_one_warns(self, random_points):
        with pytest.warns(UserWarning, match="q <= 1"):
            Cs = boxed_correlationsum(random_points, RADII[5:], q=0.5)
        assert len(Cs) == 5


class TestArgumentChecks:
    """Theiler window and radii are validated at every entry point."""

    @pytest.mark.parametrize("q", [2, 3])
    def test_negative_theiler_window_rejected(self, random_points, q):
        with pytest.raises(ValueError, match="Theiler window"):
            boxed_correlationsum(random_points, RADII, q=q, w=-1)

    def test_negative_theiler_window_rejected_from_boxes(self, random_points):
        boxes, contents = data_boxing(random_points, RADII[-1], 2)
        with pytest.raises(ValueError, match="Theiler window"):
            boxed_correlationsum_2(boxes, contents, random_points, RADII, w=-1)
        with pytest.raises(ValueError, match="Theiler window"):
            boxed_correlationsum_q(boxes, contents, random_points, RADII, 3, w=-1)

    def test_negative_theiler_window_rejected_by_inner_sums(self):
        data = np.array([[0.0], [0.1], [0.2]])
        idx = np.arange(3)
        with pytest.raises(ValueError, match="Theiler window"):
            inner_correlationsum_2(idx, idx, data, [1.0], w=-1)
        with pytest.raises(ValueError, match="Theiler window"):
            inner_correlationsum_q(idx, idx, data, [1.0], 3, w=-1)

    def test_fractional_theiler_window_rejected(self, random_points):
        with pytest.raises(ValueError, match="Theiler window"):
            boxed_correlationsum(random_points, RADII, w=1.5)

    def test_integer_like_theiler_window_accepted(self, random_points):
        np.testing.assert_array_equal(boxed_correlationsum(random_points, RADII, w=np.int64(2)),
                                      boxed_correlationsum(random_points, RADII, w=2))

    @pytest.mark.parametrize("eps", [[-1.0, 0.2], [0.0, 0.2]])
    def test_non_positive_radii_rejected(self, random_points, eps):
        with pytest.raises(ValueError, match="Radii must be positive"):
            boxed_correlationsum(random_points, eps)

    def test_non_positive_radii_rejected_by_inner_sum(self):
        data = np.zeros((3, 1))
        with pytest.raises(ValueError, match="Radii must be positive"):
            inner_correlationsum_2([0, 1], [0, 1, 2], data, [0.0, 1.0])
