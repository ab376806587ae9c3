"""Solving sparse linear systems and multiplying sparse matrices."""

from __future__ import annotations

import numpy as np

from stereomath.linalg import LinAlgError
from stereomath.sparse import SparseMat, Triplets, sparse_to_triplets

__all__ = ["sparse_solve_lin", "sparse_solve_lin_pair", "sparse_mat_mul"]


def _as_triplets(a: SparseMat | Triplets) -> Triplets:
    if isinstance(a, Triplets):
        return a
    if isinstance(a, SparseMat):
        return sparse_to_triplets(a)
    raise TypeError(f"expected SparseMat or Triplets, got {type(a).__name__}")


def _scatter(out: np.ndarray, trips: Triplets, col_offset: int = 0) -> None:
    """Add the entries into ``out``; repeated entries are summed."""
    if trips.nnz:
        cols = np.asarray(trips.cols, dtype=np.int64) + col_offset
        np.add.at(out, (np.asarray(trips.rows, dtype=np.int64), cols), trips.vals)


def _solve(mat: np.ndarray, rhs) -> np.ndarray:
    b = np.asarray(rhs, dtype=float).ravel()
    if b.size != mat.shape[0]:
        raise ValueError(f"right-hand side has {b.size} values, matrix has {mat.shape[0]} rows")
    try:
        x, *_ = np.linalg.lstsq(mat, b, rcond=None)
    except np.linalg.LinAlgError as exc:
        raise LinAlgError(f"sparse solve failed: {exc}") from exc
    if not np.all(np.isfinite(x)):
        raise LinAlgError("sparse solve failed: non-finite solution")
    return x


def sparse_solve_lin(a: SparseMat | Triplets, b) -> np.ndarray:
    """Solve ``A x = b`` in the least-squares sense and return ``x``.

    Triplet input must have at least as many rows as columns.
    """
    if isinstance(a, Triplets) and a.m < a.n:
        raise ValueError(f"sparse_solve_lin: needs m ({a.m}) >= n ({a.n})")
    trips = _as_triplets(a)
    mat = np.zeros((trips.m, trips.n))
    _scatter(mat, trips)
    return _solve(mat, b)


def sparse_solve_lin_pair(
    a: SparseMat | Triplets, b_mat: SparseMat | Triplets, rhs
) -> tuple[np.ndarray, np.ndarray]:
    """Solve ``[A B] [x; y] = rhs`` and return ``(x, y)``."""
    ta, tb = _as_triplets(a), _as_triplets(b_mat)
    if ta.m != tb.m:
        raise ValueError(f"A has {ta.m} rows but B has {tb.m}")
    n1, n2 = ta.n, tb.n
    if ta.m < n1 + n2:
        raise ValueError(f"sparse_solve_lin_pair: needs m ({ta.m}) >= n ({n1 + n2})")
    mat = np.zeros((ta.m, n1 + n2))
    _scatter(mat, ta)
    _scatter(mat, tb, n1)
    sol = _solve(mat, rhs)
    return sol[:n1], sol[n1:]


def sparse_mat_mul(a: SparseMat, b: SparseMat) -> SparseMat:
    """Return ``A @ B`` as a sparse matrix, keeping every structural entry."""
    if a.n != b.m:
        raise ValueError(f"cannot multiply {a.m}x{a.n} by {b.m}x{b.n}")
    pointers = [0]
    rows: list[int] = []
    vals: list[float] = []
    for j in range(b.n):
        acc: dict[int, float] = {}
        for k, bkj in zip(*b.column(j)):
            for r, aik in zip(*a.column(int(k))):
                acc[int(r)] = acc.get(int(r), 0.0) + float(aik) * float(bkj)
        for r in sorted(acc):
            rows.append(r)
            vals.append(acc[r])
        pointers.append(len(rows))
    return SparseMat(a.m, b.n, pointers, rows, vals)