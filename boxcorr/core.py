import warnings

import numpy as np
from sklearn.metrics import r2_score

from .boxing import autoprismdim, box_layout, check_prism_dimension
from .boxsize import DEFAULT_MAX_ATTEMPTS, estimate_r0_buenoorovio
from .correlationsum import check_theiler_window
from .counting import _sum_boxes_2, _sum_boxes_q, check_radii
from .datasets import as_dataset
from .norms import norm_code
from .scaling import linear_region

AUTO_NUM_RADII = 16


def boxed_correlationsum(data,
                         eps=None,
                         r0=None,
                         q=2,
                         P=None,
                         w=0,
                         show_progress=False,
                         progress_callback=None,
                         norm='euclidean',
                         rng=None,
                         max_attempts=DEFAULT_MAX_ATTEMPTS,
                         verbose=False):
    """
    Box-assisted q-order correlation sum of a dataset.

    The data are split into boxes of size `r0` first, so that distances are only
    computed between points in the same or neighbouring boxes. This is much
    faster than the brute-force correlationsum provided that `r0` is
    significantly smaller than the attractor size, and exact for every radius
    up to `r0`.

    Parameters
    ----------
    data : array-like
        Dataset of shape (N, D), rows in temporal order
    eps : array-like, optional
        Ascending radii. If omitted, the box size is estimated with
        estimate_r0_buenoorovio and 16 radii are spaced logarithmically between
        the minimum inter-point distance and that box size.
    r0 : float, optional
        Box size. Defaults to max(eps); only allowed together with `eps`.
    q : float, default 2
        Order of the correlation sum. q = 2 uses a specialised counter that
        visits every pair once; any other q counts full neighbourhoods per
        point and is considerably slower.
    P : int, optional
        Prism dimension: only the first P coordinates are used for boxing.
        Defaults to autoprismdim(data).
    w : int, default 0
        Theiler window, a non-negative integer
    show_progress : bool, default False
        Show a tqdm progress bar over boxes
    progress_callback : callable, optional
        Called as progress_callback(index, n_boxes) after each box. It does
        not affect the result.
    norm : str, default 'euclidean'
        Distance norm: 'euclidean', 'chebyshev' or 'cityblock'
    rng : np.random.Generator, int or None
        Randomness for the box size estimate (only used without `eps`)
    max_attempts : int or None
        Retry cap for the box size estimate (only used without `eps`)
    verbose : bool, default False
        Print the chosen box size and number of boxes

    Returns
    -------
    np.ndarray or tuple
        Cs when `eps` is given, otherwise (eps, Cs)

    Raises
    ------
    ValueError
        If P is not an integer in [1, D], w is negative, the radii are not
        ascending and positive, r0 is given without eps, or the estimated box
        size is not larger than the minimum inter-point distance

    Notes
    -----
    The boxing follows Theiler (1987); prism-assisted boxing and the default
    box size follow Bueno-Orovio and Pérez-García (2007).

    Examples
    --------
    >>> from boxcorr import boxed_correlationsum, lorenz_trajectory
    >>> X = lorenz_trajectory(10000)
    >>> eps, Cs = boxed_correlationsum(X, rng=42)
    >>> Cs = boxed_correlationsum(X, np.geomspace(0.5, 5, 12), w=10)
    """
    X = as_dataset(data)
    if P is None:
        P = autoprismdim(X)
    P = check_prism_dimension(P, X.shape[1])
    w = check_theiler_window(w)

    if eps is None:
        if r0 is not None:
            raise ValueError("A box size r0 requires explicit radii eps.")
        r0, eps0 = estimate_r0_buenoorovio(X, P, rng=rng, max_attempts=max_attempts,
                                           verbose=verbose)
        if not r0 > eps0:
            raise ValueError(f"The calculated box size r0={r0:.4g} is not larger than the minimum "
                             f"interpoint distance {eps0:.4g}. Please choose radii manually.")
        eps = np.geomspace(eps0, r0, AUTO_NUM_RADII)
        return eps, _boxed_sum(X, eps, r0, q, P, w, norm, show_progress,
                               progress_callback, verbose)

    eps = check_radii(eps)
    if r0 is None:
        r0 = float(eps[-1])
    elif r0 < eps[-1]:
        warnings.warn(f"Box size r0={r0:.4g} is smaller than the largest radius {eps[-1]:.4g}; "
                      "pairs farther apart than r0 may be missed.", UserWarning)
    return _boxed_sum(X, eps, r0, q, P, w, norm, show_progress, progress_callback, verbose)


def _boxed_sum(X, eps, r0, q, P, w, norm, show_progress, progress_callback, verbose):
    code = norm_code(norm)
    boxes, permutation, bounds = box_layout(X, r0, P)
    if verbose:
        print(f"Boxed correlation sum: {len(X)} points in {len(boxes)} boxes "
              f"(r0={r0:.4g}, P={P}, q={q}, w={w})")
    if q == 2:
        return _sum_boxes_2(X, eps, boxes, permutation, bounds, w, code,
                            show_progress, progress_callback)
    return _sum_boxes_q(X, eps, q, boxes, permutation, bounds, w, code,
                        show_progress, progress_callback)


def boxed_correlation_dimension(data, eps=None, r0=None, tol=0.25, **kwargs):
    """
    Estimate the correlation dimension from the slope of the boxed correlation sum.

    Runs boxed_correlationsum and fits the largest linear region of
    log C(ε) against log ε.

    Parameters
    ----------
    data : array-like
        Dataset of shape (N, D)
    eps : array-like, optional
        Ascending radii; estimated automatically if omitted
    r0 : float, optional
        Box size, used together with `eps`
    tol : float, default 0.25
        Relative slope tolerance of the linear region
    **kwargs
        Passed on to boxed_correlationsum (q, P, w, norm, rng, ...)

    Returns
    -------
    dict
        - 'D' : float - slope of the linear region
        - 'eps' : np.ndarray - radii
        - 'Cs' : np.ndarray - correlation sums
        - 'region' : tuple - (start, stop) indices of the linear region
        - 'R2' : float - R-squared of a straight line through the region
    """
    if eps is None:
        eps, Cs = boxed_correlationsum(data, r0=r0, **kwargs)
    else:
        eps = check_radii(eps)
        Cs = boxed_correlationsum(data, eps, r0, **kwargs)

    with np.errstate(divide='ignore'):
        x = np.log(eps)
        y = np.log(Cs)
    (start, stop), slope = linear_region(x, y, tol=tol)

    r2 = np.nan
    if stop - start > 2:
        xs, ys = x[start:stop], y[start:stop]
        fit = np.polyfit(xs, ys, 1)
        r2 = r2_score(ys, fit[0] * xs + fit[1])

    return {'D': slope, 'eps': eps, 'Cs': Cs, 'region': (start, stop), 'R2': r2}
