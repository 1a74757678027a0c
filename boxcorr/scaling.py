import numpy as np


def get_pairwise_slopes(sizes, measures):
    """
    Calculate pairwise slopes between consecutive points in log-log scaling data.

    Parameters
    ----------
    sizes : array-like
        Scale parameters (radii) in ascending order
    measures : array-like
        Corresponding measures (correlation sums)

    Returns
    -------
    np.ndarray
        slopes[i] = (log(measures[i+1]) - log(measures[i])) / (log(sizes[i+1]) - log(sizes[i])),
        length n - 1. Zero measures give non-finite slopes.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        log_eps = np.log(np.asarray(sizes, dtype=np.float64))
        log_C = np.log(np.asarray(measures, dtype=np.float64))
        return np.diff(log_C) / np.diff(log_eps)


def _usable_points(x, y, ignore_saturation):
    """Indices of finite points, with a trailing saturated plateau cut to its first point."""
    valid_idx = np.flatnonzero(np.isfinite(x) & np.isfinite(y))
    if ignore_saturation and len(valid_idx) > 1:
        yv = y[valid_idx]
        last = len(yv) - 1
        while last > 0 and yv[last] == yv[last - 1]:
            last -= 1
        valid_idx = valid_idx[:last + 1]
    return valid_idx


def linear_regions(x, y, tol=0.25):
    """
    Split a curve into regions of approximately constant slope.

    Walking from left to right, each new segment joins the current region when
    its slope lies within relative tolerance `tol` of the region's fitted slope;
    otherwise a new region starts at the shared point.

    Parameters
    ----------
    x, y : array-like
        Curve coordinates, typically log(ε) and log(C(ε)). Must be finite.
    tol : float, default 0.25
        Relative slope tolerance

    Returns
    -------
    tuple
        (regions, tangents) where regions is a list of (start, stop) index pairs
        (stop exclusive) and tangents the fitted slope of each region
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if len(x) < 2:
        return [], []

    slopes = np.diff(y) / np.diff(x)
    regions, tangents = [], []
    start = 0
    tangent = slopes[0]
    for i in range(1, len(slopes)):
        if np.isclose(slopes[i], tangent, rtol=tol, atol=0):
            tangent = np.polyfit(x[start:i + 2], y[start:i + 2], 1)[0]
        else:
            regions.append((start, i + 1))
            tangents.append(tangent)
            start = i
            tangent = slopes[i]
    regions.append((start, len(x)))
    tangents.append(tangent)
    return regions, tangents


def linear_region(x, y, tol=0.25, ignore_saturation=True):
    """
    Find the longest region of constant slope and return it with its slope.

    This is how a dimension is read off a log-log correlation sum: the slope of
    the largest linear scaling range.

    Parameters
    ----------
    x, y : array-like
        Curve coordinates, typically log(ε) and log(C(ε))
    tol : float, default 0.25
        Relative slope tolerance passed to linear_regions
    ignore_saturation : bool, default True
        Drop the trailing plateau where y stops changing (C(ε) = 1 at large ε),
        keeping only its first point

    Returns
    -------
    tuple
        ((start, stop), slope) with indices into the original arrays (stop
        exclusive). Non-finite points (log of a zero sum) are ignored. If fewer
        than two usable points remain the slope is NaN and the region empty.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.shape != y.shape:
        raise ValueError(f"x and y must have the same shape, got {x.shape} and {y.shape}")

    valid_idx = _usable_points(x, y, ignore_saturation)
    if len(valid_idx) < 2:
        return (0, 0), np.nan

    regions, tangents = linear_regions(x[valid_idx], y[valid_idx], tol=tol)
    lengths = [stop - start for start, stop in regions]
    best = int(np.argmax(lengths))
    start, stop = regions[best]
    return (int(valid_idx[start]), int(valid_idx[stop - 1]) + 1), float(tangents[best])
