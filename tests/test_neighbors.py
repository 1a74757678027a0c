"""
Tests for box adjacency and neighbour-box search.
"""

import numpy as np
import pytest

from boxcorr import (
    boxes_adjacent,
    chebyshev_distance,
    data_boxing,
    find_neighborboxes_2,
    find_neighborboxes_q,
)


class TestAdjacency:
    """Chebyshev classification of box coordinates."""

    def test_same_box_is_adjacent(self):
        assert boxes_adjacent([3, 4], [3, 4])

    @pytest.mark.parametrize("other", [[4, 4], [2, 4], [3, 5], [3, 3], [4, 5], [2, 3]])
    def test_off_by_one_is_adjacent(self, other):
        assert boxes_adjacent([3, 4], other)

    @pytest.mark.parametrize("other", [[5, 4], [1, 4], [3, 6], [3, 2], [5, 5]])
    def test_off_by_two_is_not_adjacent(self, other):
        assert not boxes_adjacent([3, 4], other)

    def test_chebyshev_distance(self):
        assert chebyshev_distance([0, 0, 0], [1, -3, 2]) == 3
        assert chebyshev_distance([7], [7]) == 0

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError):
            chebyshev_distance([0, 0], [0, 0, 0])


class TestNeighborSearch:
    """Forward-only and full neighbour scans."""

    @pytest.fixture
    def boxed(self, random_points):
        return data_boxing(random_points, 0.2, 2)

    def _expected(self, index, boxes, contents, first):
        parts = [contents[k] for k in range(first, len(boxes))
                 if np.max(np.abs(boxes[k] - boxes[index])) < 2]
        return np.concatenate(parts)

    def test_forward_scan(self, boxed):
        boxes, contents = boxed
        for index in range(len(boxes)):
            found = find_neighborboxes_2(index, boxes, contents)
            np.testing.assert_array_equal(found, self._expected(index, boxes, contents, index))
            # own contents come first
            np.testing.assert_array_equal(found[:len(contents[index])], contents[index])

    def test_full_scan(self, boxed):
        boxes, contents = boxed
        for index in range(len(boxes)):
            found = find_neighborboxes_q(index, boxes, contents)
            np.testing.assert_array_equal(found, self._expected(index, boxes, contents, 0))

    def test_forward_scans_visit_each_box_pair_once(self, boxed):
        boxes, contents = boxed
        box_of = {}
        for k, c in enumerate(contents):
            for i in c:
                box_of[int(i)] = k

        visited = set()
        for index in range(len(boxes)):
            found = find_neighborboxes_2(index, boxes, contents)
            for k in {box_of[int(i)] for i in found}:
                pair = (min(index, k), max(index, k))
                assert pair not in visited or index == k
                visited.add(pair)

        adjacent_pairs = {(a, b) for a in range(len(boxes)) for b in range(a, len(boxes))
                          if np.max(np.abs(boxes[a] - boxes[b])) < 2}
        assert visited == adjacent_pairs

    def test_full_scan_is_symmetric(self, boxed):
        boxes, contents = boxed
        neighbors = [set(find_neighborboxes_q(k, boxes, contents).tolist()) for k in range(len(boxes))]
        for a in range(len(boxes)):
            for b in range(len(boxes)):
                a_sees_b = set(contents[b].tolist()) <= neighbors[a]
                b_sees_a = set(contents[a].tolist()) <= neighbors[b]
                assert a_sees_b == b_sees_a

    def test_deterministic(self, boxed):
        boxes, contents = boxed
        first = find_neighborboxes_q(3, boxes, contents)
        second = find_neighborboxes_q(3, boxes, contents)
        np.testing.assert_array_equal(first, second)
