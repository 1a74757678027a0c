import numpy as np
from numba import njit


@njit(nogil=True, cache=True)
def _chebyshev(a, b):
    acc = 0
    for d in range(a.shape[0]):
        diff = abs(a[d] - b[d])
        if diff > acc:
            acc = diff
    return acc


def chebyshev_distance(box_a, box_b):
    """Largest coordinate difference between two box coordinates."""
    a = np.asarray(box_a, dtype=np.int64).ravel()
    b = np.asarray(box_b, dtype=np.int64).ravel()
    if a.shape != b.shape:
        raise ValueError(f"Box coordinates must have the same length, got {a.shape} and {b.shape}")
    return int(_chebyshev(a, b))


def boxes_adjacent(box_a, box_b):
    """
    Whether two boxes are neighbours: they differ by at most one in every coordinate.

    A box counts as its own neighbour.
    """
    return chebyshev_distance(box_a, box_b) < 2


@njit(nogil=True, cache=True)
def neighbor_indices(index, boxes, permutation, bounds, forward_only):
    """
    Dataset indices of all points in box `index` and its adjacent boxes.

    Parameters
    ----------
    index : int
        Position of the target box in `boxes`
    boxes : (M, P) int64
        Box coordinates in lexicographic order
    permutation : (N,) int64
        Dataset indices sorted by box
    bounds : (M + 1,) int64
        Box k holds permutation[bounds[k]:bounds[k+1]]
    forward_only : bool
        Scan only boxes index..M-1 (q = 2) instead of all boxes (general q)

    Returns
    -------
    np.ndarray
        Concatenated contents of the adjacent boxes, in box order
    """
    M = boxes.shape[0]
    box = boxes[index]
    first = index if forward_only else 0

    adjacent = np.zeros(M, dtype=np.bool_)
    total = 0
    for k in range(first, M):
        # Boxes are sorted on their first coordinate
        lead = boxes[k, 0] - box[0]
        if lead >= 2:
            break
        if lead <= -2:
            continue
        if _chebyshev(box, boxes[k]) < 2:
            adjacent[k] = True
            total += bounds[k + 1] - bounds[k]

    out = np.empty(total, dtype=np.int64)
    pos = 0
    for k in range(first, M):
        if adjacent[k]:
            for m in range(bounds[k], bounds[k + 1]):
                out[pos] = permutation[m]
                pos += 1
    return out


def _layout_from_contents(boxes, contents):
    boxes = np.ascontiguousarray(np.asarray(boxes, dtype=np.int64))
    if boxes.ndim == 1:
        boxes = boxes.reshape(-1, 1)
    lengths = np.array([len(c) for c in contents], dtype=np.int64)
    bounds = np.concatenate((np.zeros(1, dtype=np.int64), np.cumsum(lengths)))
    permutation = np.concatenate([np.asarray(c, dtype=np.int64) for c in contents])
    return boxes, permutation, bounds


def find_neighborboxes_2(index, boxes, contents):
    """
    Indices of the points in box `index` and its adjacent boxes, scanning forward only.

    Only boxes from `index` onwards are considered. Because `boxes` is sorted,
    every pair of adjacent boxes is visited exactly once over all values of
    `index`, which is what keeps the q = 2 pair count free of double counting.
    The target box's own contents come first.

    Parameters
    ----------
    index : int
        Position of the target box
    boxes : array-like
        (M, P) box coordinates, as returned by data_boxing
    contents : list of np.ndarray
        Dataset indices per box, as returned by data_boxing

    Returns
    -------
    np.ndarray
        int64 dataset indices
    """
    boxes, permutation, bounds = _layout_from_contents(boxes, contents)
    return neighbor_indices(index, boxes, permutation, bounds, True)


def find_neighborboxes_q(index, boxes, contents):
    """
    Indices of the points in box `index` and all its adjacent boxes.

    Every box is scanned, because each point needs its complete neighbour count
    for the q-order sum.
    """
    boxes, permutation, bounds = _layout_from_contents(boxes, contents)
    return neighbor_indices(index, boxes, permutation, bounds, False)
