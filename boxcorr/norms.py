import numpy as np
from numba import njit

# Codes understood by the compiled kernels
EUCLIDEAN = 0
CHEBYSHEV = 1
CITYBLOCK = 2

NORMS = {
    'euclidean': EUCLIDEAN,
    'chebyshev': CHEBYSHEV,
    'cityblock': CITYBLOCK,
}

# Minkowski exponents for scipy.spatial.cKDTree
KDTREE_P = {
    'euclidean': 2,
    'chebyshev': np.inf,
    'cityblock': 1,
}


def norm_code(norm):
    """Map a norm name to the integer code used inside numba kernels."""
    try:
        return NORMS[norm]
    except KeyError:
        raise ValueError(f"Unknown norm: {norm}. Use 'euclidean', 'chebyshev', or 'cityblock'") from None


@njit(nogil=True, cache=True)
def point_distance(data, i, j, code):
    """Distance between rows i and j of `data` under the norm `code`."""
    acc = 0.0
    for d in range(data.shape[1]):
        diff = abs(data[i, d] - data[j, d])
        if code == CHEBYSHEV:
            if diff > acc:
                acc = diff
        elif code == CITYBLOCK:
            acc += diff
        else:
            acc += diff * diff
    if code == EUCLIDEAN:
        return np.sqrt(acc)
    return acc
