import math
import operator

import numpy as np

from .datasets import as_dataset


def check_prism_dimension(P, D):
    """Validate the prism dimension as an integer in [1, D]."""
    try:
        P = operator.index(P)
    except TypeError:
        raise ValueError(f"Prism dimension must be an integer, got P={P!r}.") from None
    if P < 1 or P > D:
        raise ValueError(f"Prism dimension has to be between 1 and the data dimension "
                         f"({D}), got P={P}.")
    return P


def _check_boxing_args(X, r0, P):
    if len(X) == 0:
        raise ValueError("Cannot distribute an empty dataset into boxes.")
    if not r0 > 0:
        raise ValueError(f"Box size must be positive, got r0={r0}.")
    return check_prism_dimension(P, X.shape[1])


def box_layout(data, r0, P):
    """
    Sort the points of a dataset into boxes of side `r0` over the first `P` coordinates.

    Parameters
    ----------
    data : array-like
        Dataset of shape (N, D)
    r0 : float
        Box side length, > 0
    P : int
        Prism dimension, 1 <= P <= D

    Returns
    -------
    tuple
        (boxes, permutation, bounds) where:
        - boxes : (M, P) int64 - distinct box coordinates in lexicographic order
        - permutation : (N,) int64 - dataset indices sorted by box coordinate
        - bounds : (M + 1,) int64 - box k holds permutation[bounds[k]:bounds[k+1]]

    Notes
    -----
    A point x lands in box floor((x[:P] - min[:P]) / r0) where min is taken over
    the whole dataset, so coordinates are non-negative. The sort is a stable
    lexicographic sort, so indices inside a box stay ascending and the box order
    is reproducible. The forward-only neighbour scan of the q = 2 sum relies on
    that order.
    """
    X = as_dataset(data)
    P = _check_boxing_args(X, r0, P)

    mini = X[:, :P].min(axis=0)
    bins = np.floor((X[:, :P] - mini) / r0).astype(np.int64)

    # lexsort uses the last key as primary; reverse so column 0 leads
    permutation = np.lexsort(bins.T[::-1]).astype(np.int64)
    sorted_bins = bins[permutation]

    change = np.any(sorted_bins[1:] != sorted_bins[:-1], axis=1)
    starts = np.concatenate(([0], np.flatnonzero(change) + 1)).astype(np.int64)
    bounds = np.append(starts, len(X)).astype(np.int64)
    boxes = np.ascontiguousarray(sorted_bins[starts])
    return boxes, permutation, bounds


def data_boxing(data, r0, P):
    """
    Distribute the data points into boxes of size `r0`.

    Implemented after Theiler (1987), improving the all-pairs algorithm of
    Grassberger and Procaccia (1983). If `P` is smaller than the data dimension
    only the first `P` coordinates are used (prism-assisted boxing).

    Parameters
    ----------
    data : array-like
        Dataset of shape (N, D)
    r0 : float
        Box side length
    P : int
        Prism dimension

    Returns
    -------
    tuple
        (boxes, contents) where boxes is an (M, P) int64 array of box
        coordinates and contents a list of M index arrays, contents[k] holding
        the dataset indices in boxes[k]. Every index 0..N-1 appears in exactly
        one box.
    """
    boxes, permutation, bounds = box_layout(data, r0, P)
    contents = [permutation[bounds[k]:bounds[k + 1]] for k in range(len(boxes))]
    return boxes, contents


def autoprismdim(data, version='bueno'):
    """
    Choose a prism dimension for the boxed correlation sum.

    Parameters
    ----------
    data : array-like
        Dataset of shape (N, D)
    version : str, default 'bueno'
        - 'bueno': P = min(D, 2), after Bueno-Orovio and Pérez-García
        - 'theiler': Theiler's suggestion, P = max(2, ceil(log2(N) / 2)) if
          D > 0.75 log2(N), else P = D

    Returns
    -------
    int
        Prism dimension in [1, D]
    """
    X = as_dataset(data)
    N, D = X.shape
    if version == 'bueno':
        return int(min(D, 2))
    elif version == 'theiler':
        if N > 1 and D > 0.75 * math.log2(N):
            P = max(2, math.ceil(0.5 * math.log2(N)))
        else:
            P = D
        return int(min(max(P, 1), D))
    else:
        raise ValueError(f"Unknown prism dimension version: {version}. Use 'bueno' or 'theiler'")
