import operator
import warnings

import numpy as np
from scipy.spatial import cKDTree
from scipy.spatial.distance import pdist, squareform

from .datasets import as_dataset
from .norms import KDTREE_P, norm_code


def correlationsum(data, eps, q=2, w=0, norm='euclidean'):
    """
    Brute-force q-order correlation sum over all point pairs.

    Every pair of points is compared, so memory and time grow as N². This is the
    reference the boxed algorithm must agree with and is meant for small
    datasets, such as the subsamples drawn while estimating a box size.

    Parameters
    ----------
    data : array-like
        Dataset of shape (N, D), rows in temporal order
    eps : array-like
        Radii at which the sum is evaluated
    q : float, default 2
        Order of the correlation sum
    w : int, default 0
        Theiler window. Pairs with |i - j| <= w are not counted; for q != 2 the
        first and last w points are also skipped as centres.
    norm : str, default 'euclidean'
        Distance norm: 'euclidean', 'chebyshev' or 'cityblock'

    Returns
    -------
    np.ndarray
        Correlation sum for every radius in `eps`

    Notes
    -----
    For q = 2 the sum is

        C_2(ε) = 2 / ((N - w)(N - w - 1)) · #{i < j : j - i > w, d(x_i, x_j) < ε}

    and for general q

        C_q(ε) = [ 1/(N - 2w) Σ_i ( 1/(N - 2w - 1) Σ_{|i-j|>w} Θ(ε - d_ij) )^(q-1) ]^(1/(q-1))

    with i running over w <= i < N - w.
    """
    X = as_dataset(data)
    eps = np.atleast_1d(np.asarray(eps, dtype=np.float64))
    norm_code(norm)
    w = check_theiler_window(w)
    N = len(X)
    if N < 2:
        raise ValueError("At least two points are required for a correlation sum.")
    if q == 2:
        return _correlationsum_2(X, eps, w, norm)
    return _correlationsum_q(X, eps, q, w, norm)


def _correlationsum_2(X, eps, w, norm):
    N = len(X)
    if N - w - 1 <= 0:
        raise ValueError(f"Theiler window w={w} leaves no pairs among {N} points.")
    D = squareform(pdist(X, metric=norm))
    iu = np.triu_indices(N, k=w + 1)
    dists = np.sort(D[iu])
    # side='left' counts distances strictly below each radius
    counts = np.searchsorted(dists, eps, side='left').astype(np.float64)
    return counts * (2.0 / ((N - w) * (N - w - 1)))


def _correlationsum_q(X, eps, q, w, norm):
    if q <= 1:
        warnings.warn("The correlation sum is not specialized for q <= 1 and may "
                      "show unexpected behaviour for these values.", UserWarning)
    N = len(X)
    if N - 2 * w - 1 <= 0:
        raise ValueError(f"Theiler window w={w} leaves no centres among {N} points.")
    D = squareform(pdist(X, metric=norm))
    idx = np.arange(N)
    centres = idx[w:N - w]
    outside = np.abs(centres[:, None] - idx[None, :]) > w
    rows = D[centres]

    S = np.zeros(len(eps))
    for k, e in enumerate(eps):
        counts = np.sum((rows < e) & outside, axis=1).astype(np.float64)
        S[k] = np.sum(counts ** (q - 1))

    normed = S / ((N - 2 * w) * (N - 2 * w - 1) ** (q - 1))
    return np.clip(normed, 0, np.inf) ** root_exponent(q)


def check_theiler_window(w):
    """Validate the Theiler window as a non-negative integer."""
    try:
        w = operator.index(w)
    except TypeError:
        raise ValueError(f"Theiler window must be a non-negative integer, got w={w!r}.") from None
    if w < 0:
        raise ValueError(f"Theiler window must be a non-negative integer, got w={w}.")
    return w


def root_exponent(q):
    """1/(q - 1), infinite at q = 1 instead of raising."""
    with np.errstate(divide='ignore'):
        return np.divide(1.0, np.float64(q) - 1.0)


def minimum_pairwise_distance(data, norm='euclidean'):
    """
    Smallest distance between two distinct points of the dataset.

    Uses a k-d tree nearest-neighbour query, so it scales to the full dataset.

    Returns
    -------
    tuple
        (distance, (i, j)) with the indices of one closest pair
    """
    X = as_dataset(data)
    norm_code(norm)
    if len(X) < 2:
        raise ValueError("At least two points are required for a pairwise distance.")
    tree = cKDTree(X)
    dists, neighbors = tree.query(X, k=2, p=KDTREE_P[norm])
    i = int(np.argmin(dists[:, 1]))
    return float(dists[i, 1]), (i, int(neighbors[i, 1]))
