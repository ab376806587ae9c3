"""Multivariate normal density evaluation."""

from __future__ import annotations

import math

import numpy as np

from stereomath.fixed_linalg import mat22_det, mat22_inv, mat33_det, mat33_inv
from stereomath.linalg import mat_det, mat_inv

__all__ = ["normpdf2", "normpdf3", "normpdf_const", "normpdf_expval", "normpdf"]


def _vector(x, dim: int | None = None) -> np.ndarray:
    v = np.asarray(x, dtype=float).ravel()
    if dim is not None and v.size != dim:
        raise ValueError(f"expected a vector of {dim} elements, got {v.size}")
    return v


def _square(a, dim: int | None = None) -> np.ndarray:
    arr = np.asarray(a, dtype=float)
    k = math.isqrt(arr.size)
    if k * k != arr.size or (dim is not None and k != dim):
        want = f"{dim}x{dim}" if dim is not None else "square"
        raise ValueError(f"expected a {want} matrix, got {arr.size} elements")
    return arr.reshape(k, k)


def _cov_inner(weight: np.ndarray, x: np.ndarray) -> float:
    return float(x @ weight @ x)


def _inv_sqrt_det(det: float) -> float:
    if det <= 0:
        raise ValueError("covariance must be positive definite")
    return 1.0 / math.sqrt(det)


def normpdf2(x, sigma, mu=None) -> float:
    """Return the 2-D normal density at ``x`` with covariance ``sigma`` and mean ``mu``."""
    dx = _vector(x, 2)
    if mu is not None:
        dx = dx - _vector(mu, 2)
    s = _square(sigma, 2)
    scale = _inv_sqrt_det(mat22_det(s))
    dist = _cov_inner(mat22_inv(s), dx)
    return 1.0 / (2 * math.pi) * scale * math.exp(-0.5 * dist)


def normpdf3(x, sigma) -> float:
    """Return the zero-mean 3-D normal density at ``x`` with covariance ``sigma``."""
    dx = _vector(x, 3)
    s = _square(sigma, 3)
    scale = _inv_sqrt_det(mat33_det(s))
    dist = _cov_inner(mat33_inv(s), dx)
    return (2 * math.pi) ** -1.5 * scale * math.exp(-0.5 * dist)


def normpdf_const(invsigma) -> float:
    """Return ``(2*pi)^(-dim/2) * sqrt(det(invsigma))``."""
    w = _square(invsigma)
    det = mat_det(w)
    if det <= 0:
        raise ValueError("inverse covariance must be positive definite")
    return math.sqrt(det) * (2 * math.pi) ** (-w.shape[0] / 2)


def normpdf_expval(x, invsigma) -> float:
    """Return ``exp(-0.5 * x' * invsigma * x)``."""
    v = _vector(x)
    w = _square(invsigma, v.size)
    return math.exp(-0.5 * _cov_inner(w, v))


def normpdf(x, sigma) -> float:
    """Return the zero-mean normal density at ``x`` in any dimension."""
    v = _vector(x)
    inv = mat_inv(_square(sigma, v.size))
    return normpdf_const(inv) * normpdf_expval(v, inv)