import numpy as np
from numba import njit


def as_dataset(data):
    """
    Convert input data to a contiguous float64 point array of shape (N, D).

    One-dimensional input is treated as N points in one dimension. The input is
    never modified; a copy is made only when the dtype or layout requires it.

    Parameters
    ----------
    data : array-like
        Sequence of points, shape (N,) or (N, D). Row order is the temporal order
        of the points.

    Returns
    -------
    np.ndarray
        C-contiguous float64 array of shape (N, D)
    """
    X = np.asarray(data, dtype=np.float64)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if X.ndim != 2:
        raise ValueError(f"Dataset must be one- or two-dimensional, got shape {X.shape}.")
    return np.ascontiguousarray(X)


def minmaxima(data):
    """Per-dimension minima and maxima of a dataset."""
    X = as_dataset(data)
    return X.min(axis=0), X.max(axis=0)


def attractor_size(data):
    """Mean extent over dimensions, R = mean(max - min)."""
    mini, maxi = minmaxima(data)
    return float(np.mean(maxi - mini))


def random_subsample(data, n, rng=None):
    """
    Draw n indices with replacement and keep the distinct ones.

    Parameters
    ----------
    data : np.ndarray
        Dataset of shape (N, D)
    n : int
        Number of draws. The subsample can be smaller because duplicate draws
        are removed.
    rng : np.random.Generator, int or None
        Source of randomness. Seeds and None are passed to np.random.default_rng.

    Returns
    -------
    np.ndarray
        Points of the subsample in ascending index order
    """
    X = as_dataset(data)
    rng = np.random.default_rng(rng)
    idx = np.unique(rng.integers(0, len(X), size=max(int(n), 1)))
    return X[idx]


@njit(nogil=True, cache=True)
def _lorenz_deriv(x, y, z, sigma, rho, beta):
    return sigma * (y - x), x * (rho - z) - y, x * y - beta * z


@njit(nogil=True, cache=True)
def _rk4_lorenz(x0, n_samples, dt, substeps, sigma, rho, beta):
    out = np.empty((n_samples, 3))
    x, y, z = x0[0], x0[1], x0[2]
    h = dt / substeps
    for n in range(n_samples):
        for _ in range(substeps):
            k1x, k1y, k1z = _lorenz_deriv(x, y, z, sigma, rho, beta)
            k2x, k2y, k2z = _lorenz_deriv(x + 0.5 * h * k1x, y + 0.5 * h * k1y,
                                          z + 0.5 * h * k1z, sigma, rho, beta)
            k3x, k3y, k3z = _lorenz_deriv(x + 0.5 * h * k2x, y + 0.5 * h * k2y,
                                          z + 0.5 * h * k2z, sigma, rho, beta)
            k4x, k4y, k4z = _lorenz_deriv(x + h * k3x, y + h * k3y, z + h * k3z,
                                          sigma, rho, beta)
            x += (h / 6.0) * (k1x + 2 * k2x + 2 * k3x + k4x)
            y += (h / 6.0) * (k1y + 2 * k2y + 2 * k3y + k4y)
            z += (h / 6.0) * (k1z + 2 * k2z + 2 * k3z + k4z)
        out[n, 0] = x
        out[n, 1] = y
        out[n, 2] = z
    return out


def lorenz_trajectory(n_points=10000, dt=0.1, transient=500,
                      initial_state=(1.0, 1.0, 1.0),
                      sigma=10.0, rho=28.0, beta=8.0 / 3.0, substeps=20):
    """
    Sample a trajectory on the Lorenz attractor.

    The system is integrated with a fixed-step fourth-order Runge-Kutta scheme,
    `substeps` steps per sample, and sampled every `dt` time units after
    discarding `transient` samples. With the classical parameters the
    correlation dimension of the attractor is about 2.05.

    Parameters
    ----------
    n_points : int, default 10000
        Number of returned samples
    dt : float, default 0.1
        Sampling interval
    transient : int, default 500
        Number of initial samples discarded so the state settles on the attractor
    initial_state : tuple of float
        Starting point (x, y, z)
    sigma, rho, beta : float
        Lorenz parameters
    substeps : int, default 20
        Runge-Kutta steps per sampling interval

    Returns
    -------
    np.ndarray
        Array of shape (n_points, 3)
    """
    x0 = np.asarray(initial_state, dtype=np.float64)
    traj = _rk4_lorenz(x0, n_points + transient, float(dt), int(substeps),
                       float(sigma), float(rho), float(beta))
    return np.ascontiguousarray(traj[transient:])
