import warnings

import numpy as np
from numba import njit
from tqdm.auto import tqdm

from .correlationsum import check_theiler_window, root_exponent
from .datasets import as_dataset
from .neighbors import _layout_from_contents, neighbor_indices
from .norms import norm_code, point_distance


def check_radii(eps):
    """Validate radii as an ascending 1-D float64 array of positive values."""
    eps = np.ascontiguousarray(np.atleast_1d(np.asarray(eps, dtype=np.float64)))
    if eps.ndim != 1 or len(eps) == 0:
        raise ValueError("Radii must be a non-empty one-dimensional sequence.")
    if np.any(np.diff(eps) < 0):
        raise ValueError("Sorted radii (ascending) are required for the boxed correlation sum.")
    if not eps[0] > 0:
        raise ValueError(f"Radii must be positive, got {eps[0]}.")
    return eps


@njit(nogil=True, cache=True)
def _inner_correlationsum_2(indices_X, indices_Y, data, eps, w, code):
    Ne = eps.shape[0]
    Ny = indices_Y.shape[0]
    Cs = np.zeros(Ne)
    for i in range(indices_X.shape[0]):
        index_X = indices_X[i]
        for j in range(i + 1, Ny):
            index_Y = indices_Y[j]
            if abs(index_Y - index_X) > w:
                dist = point_distance(data, index_X, index_Y, code)
                for k in range(Ne - 1, -1, -1):
                    if dist < eps[k]:
                        Cs[k] += 1.0
                    else:
                        break
    return Cs


@njit(nogil=True, cache=True)
def _inner_correlationsum_q(indices_X, indices_Y, data, eps, q, w, code):
    N = data.shape[0]
    Ne = eps.shape[0]
    Cs = np.zeros(Ne)
    C_current = np.zeros(Ne)
    power = q - 1.0
    for i in indices_X:
        # Centres near either end would see a truncated neighbourhood
        if i < w or i >= N - w:
            continue
        C_current[:] = 0.0
        for j in indices_Y:
            if abs(i - j) > w:
                dist = point_distance(data, i, j, code)
                for k in range(Ne - 1, -1, -1):
                    if dist < eps[k]:
                        C_current[k] += 1.0
                    else:
                        break
        for k in range(Ne):
            c = C_current[k]
            if c > 0.0:
                Cs[k] += c ** power
            elif power < 0.0:
                Cs[k] += np.inf
            elif power == 0.0:
                Cs[k] += 1.0
    return Cs


def inner_correlationsum_2(indices_X, indices_Y, data, eps, w=0, norm='euclidean'):
    """
    Pair counts of one box for the classic (q = 2) correlation sum.

    `indices_X` are the points of the box and `indices_Y` the points of the box
    followed by those of its forward neighbours (see find_neighborboxes_2). The
    point at position i of `indices_X` is paired only with positions j > i of
    `indices_Y`, so pairs inside the box are counted once and the box never
    meets itself.

    Parameters
    ----------
    indices_X, indices_Y : array-like of int
        Dataset indices
    data : array-like
        Dataset of shape (N, D)
    eps : array-like
        Ascending radii
    w : int, default 0
        Theiler window; pairs with |i - j| <= w are skipped
    norm : str, default 'euclidean'
        Distance norm

    Returns
    -------
    np.ndarray
        Unnormalised pair count for every radius

    Notes
    -----
    Radii are scanned from the largest down and the scan stops at the first
    radius the distance does not fall below: with ascending radii every smaller
    one fails as well.
    """
    eps = check_radii(eps)
    X = as_dataset(data)
    w = check_theiler_window(w)
    return _inner_correlationsum_2(np.asarray(indices_X, dtype=np.int64),
                                   np.asarray(indices_Y, dtype=np.int64),
                                   X, eps, w, norm_code(norm))


def inner_correlationsum_q(indices_X, indices_Y, data, eps, q, w=0, norm='euclidean'):
    """
    Accumulated neighbour counts of one box for the q-order correlation sum.

    For every centre in `indices_X` the neighbours in `indices_Y` (the box and
    all its adjacent boxes) closer than each radius are counted, the counts are
    raised to the power q - 1 and summed. Centres within `w` of either end of
    the dataset are skipped and neighbours with |i - j| <= w are not counted.

    Returns
    -------
    np.ndarray
        Σ_i C_i(ε)^(q-1) for every radius
    """
    eps = check_radii(eps)
    X = as_dataset(data)
    w = check_theiler_window(w)
    return _inner_correlationsum_q(np.asarray(indices_X, dtype=np.int64),
                                   np.asarray(indices_Y, dtype=np.int64),
                                   X, eps, float(q), w, norm_code(norm))


def _iterate_boxes(M, show_progress, progress_callback):
    for index in tqdm(range(M), desc="Boxed correlation sum", mininterval=1.0,
                      disable=not show_progress):
        yield index
        if progress_callback is not None:
            progress_callback(index, M)


def _sum_boxes_2(X, eps, boxes, permutation, bounds, w, code,
                 show_progress=False, progress_callback=None):
    N = len(X)
    if N - w - 1 <= 0:
        raise ValueError(f"Theiler window w={w} leaves no pairs among {N} points.")
    Cs = np.zeros(len(eps))
    for index in _iterate_boxes(len(boxes), show_progress, progress_callback):
        indices_neighbors = neighbor_indices(index, boxes, permutation, bounds, True)
        indices_box = permutation[bounds[index]:bounds[index + 1]]
        Cs += _inner_correlationsum_2(indices_box, indices_neighbors, X, eps, w, code)
    return Cs * (2.0 / ((N - w) * (N - w - 1)))


def _sum_boxes_q(X, eps, q, boxes, permutation, bounds, w, code,
                 show_progress=False, progress_callback=None):
    if q <= 1:
        warnings.warn("The boxed correlation sum is not specialized for q <= 1 and may "
                      "show unexpected behaviour for these values.", UserWarning)
    N = len(X)
    if N - 2 * w - 1 <= 0:
        raise ValueError(f"Theiler window w={w} leaves no centres among {N} points.")
    Cs = np.zeros(len(eps))
    for index in _iterate_boxes(len(boxes), show_progress, progress_callback):
        indices_neighbors = neighbor_indices(index, boxes, permutation, bounds, False)
        indices_box = permutation[bounds[index]:bounds[index + 1]]
        Cs += _inner_correlationsum_q(indices_box, indices_neighbors, X, eps, float(q), w, code)
    normed = Cs / ((N - 2 * w) * (N - 2 * w - 1) ** (q - 1))
    return np.clip(normed, 0, np.inf) ** root_exponent(q)


def boxed_correlationsum_2(boxes, contents, data, eps, w=0, norm='euclidean',
                           show_progress=False, progress_callback=None):
    """
    Classic (q = 2) correlation sum from data already distributed into boxes.

    Parameters
    ----------
    boxes, contents : as returned by data_boxing
    data : array-like
        Dataset of shape (N, D)
    eps : array-like
        Ascending radii
    w : int, default 0
        Theiler window
    norm : str, default 'euclidean'
        Distance norm
    show_progress : bool, default False
        Show a tqdm progress bar over boxes
    progress_callback : callable, optional
        Called as progress_callback(index, n_boxes) after each box

    Returns
    -------
    np.ndarray
        C_2(ε) for every radius, normalised by 2 / ((N - w)(N - w - 1)).
        Results are exact for radii not larger than the box size.
    """
    X = as_dataset(data)
    eps = check_radii(eps)
    code = norm_code(norm)
    w = check_theiler_window(w)
    boxes, permutation, bounds = _layout_from_contents(boxes, contents)
    return _sum_boxes_2(X, eps, boxes, permutation, bounds, w, code,
                        show_progress, progress_callback)


def boxed_correlationsum_q(boxes, contents, data, eps, q, w=0, norm='euclidean',
                           show_progress=False, progress_callback=None):
    """
    q-order correlation sum from data already distributed into boxes.

    The per-centre sums are normalised by (N - 2w)(N - 2w - 1)^(q-1), clipped
    at zero against rounding and raised to 1/(q - 1). q <= 1 emits a warning;
    results in that regime are advisory only.
    """
    X = as_dataset(data)
    eps = check_radii(eps)
    code = norm_code(norm)
    w = check_theiler_window(w)
    boxes, permutation, bounds = _layout_from_contents(boxes, contents)
    return _sum_boxes_q(X, eps, q, boxes, permutation, bounds, w, code,
                        show_progress, progress_callback)
