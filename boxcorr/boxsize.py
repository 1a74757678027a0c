import math
import warnings

import numpy as np

from .boxing import autoprismdim, box_layout, check_prism_dimension
from .correlationsum import correlationsum, minimum_pairwise_distance
from .datasets import as_dataset, attractor_size, random_subsample
from .scaling import linear_region

THEILER_NUM_RADII = 12
BUENO_NUM_RADII = 16
SLOPE_TOLERANCE = 0.5
DEFAULT_MAX_ATTEMPTS = 1000


def _minimum_distance(X, R):
    if not R > 0:
        raise ValueError("The dataset has zero extent; a box size cannot be estimated.")
    min_d, _ = minimum_pairwise_distance(X)
    if min_d == 0:
        warnings.warn("Minimum distance in the dataset is zero! Probably because of having "
                      "data with low resolution, or duplicate data points. Setting to R/1000 "
                      "for now.", UserWarning)
        min_d = R / 1e3
    return min_d


def _rough_dimension(X, min_d, R, num_radii, rng):
    """Slope of the correlation sum of a √N subsample (Grassberger-Procaccia)."""
    sample = random_subsample(X, math.ceil(math.sqrt(len(X))), rng)
    if len(sample) < 2:
        return np.nan
    eps = np.geomspace(min_d, R, num_radii)
    cm = correlationsum(sample, eps)
    with np.errstate(divide='ignore'):
        _, nu = linear_region(np.log(eps), np.log(cm), tol=SLOPE_TOLERANCE)
    return np.float64(nu)


def estimate_r0_theiler(data, rng=None, verbose=False):
    """
    Estimate a box size for the boxed correlation sum as proposed by Theiler (1987).

    The dimension ν is estimated with the Grassberger-Procaccia algorithm on
    ⌈√N⌉ randomly drawn points, over 12 logarithmically spaced radii between the
    minimum inter-point distance and the attractor size. The optimal box size is

        r0 = R (2/N)^(1/ν)

    where R is the mean extent of the data over all dimensions.

    Parameters
    ----------
    data : array-like
        Dataset of shape (N, D)
    rng : np.random.Generator, int or None
        Source of randomness for the subsample
    verbose : bool, default False
        Print the estimate

    Returns
    -------
    tuple
        (r0, eps0): box size and minimum inter-point distance. If the dataset
        contains duplicate points (zero minimum distance) eps0 falls back to
        R/1000 and a warning is emitted. r0 is NaN if no slope could be fit.
    """
    X = as_dataset(data)
    if len(X) < 2:
        raise ValueError("At least two points are required to estimate a box size.")
    rng = np.random.default_rng(rng)
    N = len(X)
    R = attractor_size(X)
    min_d = _minimum_distance(X, R)

    nu = _rough_dimension(X, min_d, R, THEILER_NUM_RADII, rng)
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        r0 = R * (2 / N) ** (1 / nu)
    if verbose:
        print(f"Theiler box size: r0={r0:.4g}, eps0={min_d:.4g}, nu={nu:.3f}")
    return float(r0), min_d


def estimate_r0_buenoorovio(data, P=None, rng=None, max_attempts=DEFAULT_MAX_ATTEMPTS,
                            verbose=False):
    """
    Estimate a box size for the boxed correlation sum after Bueno-Orovio and Pérez-García (2007).

    Parameters
    ----------
    data : array-like
        Dataset of shape (N, D)
    P : int, optional
        Prism dimension; defaults to autoprismdim(data)
    rng : np.random.Generator, int or None
        Source of randomness for the subsamples
    max_attempts : int or None, default DEFAULT_MAX_ATTEMPTS
        Number of dimension estimates tried before giving up. None retries
        until a valid box size is found.
    verbose : bool, default False
        Print the estimate and the number of attempts

    Returns
    -------
    tuple
        (r0, eps0): box size and minimum inter-point distance (R/1000 with a
        warning if the minimum distance is zero)

    Raises
    ------
    RuntimeError
        If `max_attempts` estimates all fail to give a finite positive r0

    Notes
    -----
    An effective attractor size ℓ is measured by boxing N/10 random points into
    boxes of side r_ℓ = R/10 and counting the occupied boxes η_ℓ:

        ℓ = r_ℓ η_ℓ^(1/ν)

    The number of filled boxes that minimises the number of distance
    computations is

        η_opt = N^(2/3) ((3^ν - 1/2) / (3^P - 1))^(1/2)

    and the box size follows as r0 = ℓ / η_opt^(1/ν). The dimension ν comes
    from the Grassberger-Procaccia slope of ⌈√N⌉ random points over 16 radii.
    A degenerate slope fit gives an invalid r0; the estimate is then repeated
    with fresh subsamples.
    """
    X = as_dataset(data)
    if len(X) < 2:
        raise ValueError("At least two points are required to estimate a box size.")
    if P is None:
        P = autoprismdim(X)
    P = check_prism_dimension(P, X.shape[1])
    rng = np.random.default_rng(rng)
    N = len(X)
    R = attractor_size(X)
    min_d = _minimum_distance(X, R)

    sample = random_subsample(X, N // 10, rng)
    r_l = R / 10
    eta_l = len(box_layout(sample, r_l, P)[0])

    attempt = 0
    while max_attempts is None or attempt < max_attempts:
        attempt += 1
        nu = _rough_dimension(X, min_d, R, BUENO_NUM_RADII, rng)
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            l_eff = r_l * eta_l ** (1 / nu)
            eta_opt = N ** (2 / 3) * ((3 ** nu - 1 / 2) / (3 ** P - 1)) ** (1 / 2)
            r0 = l_eff / eta_opt ** (1 / nu)
        if np.isfinite(r0) and r0 > 0:
            if verbose:
                print(f"Bueno-Orovio box size: r0={r0:.4g}, eps0={min_d:.4g}, "
                      f"nu={nu:.3f} after {attempt} attempt(s)")
            return float(r0), min_d

    raise RuntimeError(f"No valid box size found after {max_attempts} attempts. "
                       "Choose the box size and radii manually.")
