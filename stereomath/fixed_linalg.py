"""Fixed-size vector and matrix routines for 2x2, 3x3 and 4x4 problems."""

from __future__ import annotations

import numpy as np

__all__ = [
    "diff_sqr_sum",
    "inner_prod3",
    "inner_prod2",
    "vec3_len",
    "copy_sub_mat",
    "mat33_trans",
    "mat44_trans",
    "mat22_inv",
    "mat33_inv",
    "mat33_prod_vec",
    "mat33_prod_vec_affine",
    "mat33_trans_prod_vec",
    "mat33_ab",
    "mat33_atb",
    "mat33_abt",
    "mat33_tr",
    "mat22_det",
    "mat33_det",
    "mat44_det",
    "contain_nan",
]


def _square(a, n: int) -> np.ndarray:
    """Return ``a`` as an n x n float matrix; accepts flat row-major input."""
    arr = np.asarray(a, dtype=float)
    if arr.size != n * n:
        raise ValueError(f"expected {n * n} elements for a {n}x{n} matrix, got {arr.size}")
    return arr.reshape(n, n)


def _vector(v, n: int) -> np.ndarray:
    arr = np.asarray(v, dtype=float).ravel()
    if arr.size < n:
        raise ValueError(f"expected a vector of at least {n} elements, got {arr.size}")
    return arr[:n]


def diff_sqr_sum(v1, v2) -> float:
    """Return the sum of squared differences between two vectors."""
    a = np.asarray(v1, dtype=float).ravel()
    b = np.asarray(v2, dtype=float).ravel()
    if a.size != b.size:
        raise ValueError("diff_sqr_sum: vectors must have the same length")
    d = b - a
    return float(np.dot(d, d))


def inner_prod3(v1, v2, w=None) -> float:
    """Return ``v1' * W * v2`` for 3-vectors, or the plain dot product if ``w`` is None."""
    a = _vector(v1, 3)
    b = _vector(v2, 3)
    if w is None:
        return float(a @ b)
    return float(a @ (_square(w, 3) @ b))


def inner_prod2(v1, v2, w=None) -> float:
    """Return a weighted inner product of 2-vectors.

    ``w`` holds the three distinct entries ``(w00, w01, w11)`` of a symmetric
    weight; without it the plain dot product is returned.
    """
    a = _vector(v1, 2)
    b = _vector(v2, 2)
    if w is None:
        return float(a[0] * b[0] + a[1] * b[1])
    wt = _vector(w, 3)
    return float(a[0] * b[0] * wt[0] + 2 * a[0] * b[1] * wt[1] + a[1] * b[1] * wt[2])


def vec3_len(v) -> float:
    """Return the Euclidean length of a 3-vector."""
    a = _vector(v, 3)
    return float(np.sqrt(a @ a))


def copy_sub_mat(a, i1: int, i2: int, j1: int, j2: int) -> np.ndarray:
    """Return a copy of rows ``i1..i2`` and columns ``j1..j2`` (inclusive)."""
    arr = np.atleast_2d(np.asarray(a, dtype=float))
    m, n = arr.shape
    if i1 < 0 or i2 >= m or j1 < 0 or j2 >= n or i1 > i2 or j1 > j2:
        raise ValueError(
            f"copy_sub_mat: block [{i1}:{i2}, {j1}:{j2}] outside a {m}x{n} matrix"
        )
    return arr[i1 : i2 + 1, j1 : j2 + 1].copy()


def mat33_trans(a) -> np.ndarray:
    """Return the transpose of a 3x3 matrix."""
    return _square(a, 3).T.copy()


def mat44_trans(a) -> np.ndarray:
    """Return the transpose of a 4x4 matrix."""
    return _square(a, 4).T.copy()


def mat22_inv(a) -> np.ndarray:
    """Return the inverse of a 2x2 matrix by the adjugate formula."""
    m = _square(a, 2)
    s = m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0]
    if s == 0:
        raise ZeroDivisionError("mat22_inv: matrix is singular")
    return np.array([[m[1, 1], -m[0, 1]], [-m[1, 0], m[0, 0]]]) / s


def mat33_inv(a) -> np.ndarray:
    """Return the inverse of a 3x3 matrix by the adjugate formula."""
    A = _square(a, 3).ravel()
    m1 = A[8] * A[4] - A[7] * A[5]
    m2 = A[8] * A[1] - A[7] * A[2]
    m3 = A[5] * A[1] - A[4] * A[2]
    d = A[0] * m1 - A[3] * m2 + A[6] * m3
    if d == 0:
        raise ZeroDivisionError("mat33_inv: matrix is singular")
    adj = np.array(
        [
            [m1, -m2, m3],
            [-A[8] * A[3] + A[6] * A[5], A[8] * A[0] - A[6] * A[2], -A[5] * A[0] + A[3] * A[2]],
            [A[7] * A[3] - A[6] * A[4], -A[7] * A[0] + A[6] * A[1], A[4] * A[0] - A[3] * A[1]],
        ]
    )
    return adj / d


def mat33_prod_vec(a, b) -> np.ndarray:
    """Return ``A @ b`` for a 3x3 matrix and a 3-vector."""
    return _square(a, 3) @ _vector(b, 3)


def mat33_prod_vec_affine(a, b, c, alpha: float, beta: float) -> np.ndarray:
    """Return ``alpha * A @ b + beta * c``."""
    return alpha * (_square(a, 3) @ _vector(b, 3)) + beta * _vector(c, 3)


def mat33_trans_prod_vec(a, b) -> np.ndarray:
    """Return ``A.T @ b`` for a 3x3 matrix and a 3-vector."""
    return _square(a, 3).T @ _vector(b, 3)


def mat33_ab(a, b) -> np.ndarray:
    """Return ``A @ B`` for 3x3 matrices."""
    return _square(a, 3) @ _square(b, 3)


def mat33_atb(a, b) -> np.ndarray:
    """Return ``A.T @ B`` for 3x3 matrices."""
    return _square(a, 3).T @ _square(b, 3)


def mat33_abt(a, b) -> np.ndarray:
    """Return ``A @ B.T`` for 3x3 matrices."""
    return _square(a, 3) @ _square(b, 3).T


def mat33_tr(a) -> float:
    """Return the trace of a 3x3 matrix."""
    m = _square(a, 3)
    return float(m[0, 0] + m[1, 1] + m[2, 2])


def mat22_det(a) -> float:
    """Return the determinant of a 2x2 matrix."""
    m = _square(a, 2)
    return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])


def _det33(m: np.ndarray) -> float:
    return float(
        m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
        - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
        + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
    )


def mat33_det(a) -> float:
    """Return the determinant of a 3x3 matrix."""
    return _det33(_square(a, 3))


def mat44_det(a) -> float:
    """Return the determinant of a 4x4 matrix by cofactor expansion."""
    m = _square(a, 4)
    total = 0.0
    for j, pivot in enumerate(m[0]):
        minor = np.delete(m[1:], j, axis=1)
        total += (-1) ** j * pivot * _det33(minor)
    return float(total)


def contain_nan(a) -> bool:
    """Return True if any element of ``a`` is NaN."""
    return bool(np.isnan(np.asarray(a, dtype=float)).any())