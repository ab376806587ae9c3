"""General dense linear algebra: products, inverses and decompositions."""

from __future__ import annotations

import math

import numpy as np

__all__ = [
    "LinAlgError",
    "mat_det",
    "mat_ab",
    "mat_atb",
    "mat_abt",
    "mat_axpy",
    "mat_inv",
    "least_squares",
    "svd",
    "svd_values",
    "eig_real",
    "qr",
]


class LinAlgError(ArithmeticError):
    """Raised when an inverse or a decomposition cannot be computed."""


def _matrix(a) -> np.ndarray:
    arr = np.atleast_2d(np.asarray(a, dtype=float))
    if arr.ndim != 2:
        raise ValueError("expected a two-dimensional matrix")
    return arr


def _square(a) -> np.ndarray:
    """Return ``a`` as a square matrix; a flat input of k*k values is reshaped."""
    arr = np.asarray(a, dtype=float)
    if arr.ndim == 1:
        k = math.isqrt(arr.size)
        if k * k != arr.size:
            raise ValueError(f"{arr.size} values do not form a square matrix")
        arr = arr.reshape(k, k)
    arr = _matrix(arr)
    if arr.shape[0] != arr.shape[1]:
        raise ValueError(f"expected a square matrix, got {arr.shape[0]}x{arr.shape[1]}")
    return arr


def mat_det(a) -> float:
    """Return the determinant of a square matrix."""
    return float(np.linalg.det(_square(a)))


def mat_ab(a, b) -> np.ndarray:
    """Return ``A @ B``."""
    A, B = _matrix(a), _matrix(b)
    if A.shape[1] != B.shape[0]:
        raise ValueError(
            "the number of columns of A and the number of rows of B must be equal"
        )
    return A @ B


def mat_atb(a, b) -> np.ndarray:
    """Return ``A.T @ B``."""
    A, B = _matrix(a), _matrix(b)
    if A.shape[0] != B.shape[0]:
        raise ValueError("the number of rows of A and the number of rows of B must be equal")
    return A.T @ B


def mat_abt(a, b) -> np.ndarray:
    """Return ``A @ B.T``."""
    A, B = _matrix(a), _matrix(b)
    if A.shape[1] != B.shape[1]:
        raise ValueError(
            "the number of columns of A and the number of columns of B must be equal"
        )
    return A @ B.T


def mat_axpy(alpha: float, a, x, beta: float = 0.0, y=None) -> np.ndarray:
    """Return ``alpha * A @ x + beta * y``; ``y`` defaults to zero."""
    A = _matrix(a)
    xv = np.asarray(x, dtype=float).ravel()
    if xv.size != A.shape[1]:
        raise ValueError(f"x has {xv.size} elements, A has {A.shape[1]} columns")
    z = alpha * (A @ xv)
    if y is not None:
        yv = np.asarray(y, dtype=float).ravel()
        if yv.size != A.shape[0]:
            raise ValueError(f"y has {yv.size} elements, A has {A.shape[0]} rows")
        z = z + beta * yv
    return z


def mat_inv(a) -> np.ndarray:
    """Return the inverse of a square matrix; raises LinAlgError if singular."""
    A = _square(a)
    try:
        inv = np.linalg.inv(A)
    except np.linalg.LinAlgError as exc:
        raise LinAlgError(f"mat_inv: {exc}") from exc
    if not np.all(np.isfinite(inv)):
        raise LinAlgError("mat_inv: matrix is singular")
    return inv


def least_squares(a, b) -> np.ndarray:
    """Solve ``A x = b`` in the least-squares sense; requires rows >= columns.

    ``b`` may be a vector or a matrix of several right-hand sides; the result
    has the matching shape.
    """
    A = _matrix(a)
    m, n = A.shape
    if m < n:
        raise ValueError(f"least_squares: only works when m ({m}) >= n ({n})")
    B = np.asarray(b, dtype=float)
    if B.shape[0] != m:
        raise ValueError(f"b has {B.shape[0]} rows, A has {m}")
    try:
        x, *_ = np.linalg.lstsq(A, B, rcond=None)
    except np.linalg.LinAlgError as exc:
        raise LinAlgError(f"least_squares: {exc}") from exc
    return x


def svd(a) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(U, S, VT)`` with full square U (m x m) and VT (n x n)."""
    A = _matrix(a)
    try:
        u, s, vt = np.linalg.svd(A, full_matrices=True)
    except np.linalg.LinAlgError as exc:
        raise LinAlgError(f"svd: {exc}") from exc
    return u, s, vt


def svd_values(a) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(S, VT)`` of the singular value decomposition, without U."""
    _, s, vt = svd(a)
    return s, vt


def eig_real(a) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(values, vectors)`` for the real eigenvalues of a square matrix.

    Eigenvalues with a non-zero imaginary part are left out; each row of
    ``vectors`` is the right eigenvector of the value at the same position.
    """
    A = _square(a)
    try:
        w, v = np.linalg.eig(A)
    except np.linalg.LinAlgError as exc:
        raise LinAlgError(f"eig_real: {exc}") from exc
    real = np.imag(w) == 0
    values = np.real(w[real])
    vectors = np.real(v[:, real]).T.copy()
    return values, vectors


def qr(a) -> tuple[np.ndarray, np.ndarray]:
    """Return the complete QR decomposition: Q is m x m, R is m x n."""
    A = _matrix(a)
    if A.size == 0:
        raise ValueError("qr: matrix cannot be empty")
    q, r = np.linalg.qr(A, mode="complete")
    return q, r