"""Sparse matrices in compressed-column and triplet form."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import pairwise
from os import PathLike
from typing import IO, Iterator, Sequence

import numpy as np

__all__ = [
    "SparseFormatError",
    "SparseMat",
    "Triplets",
    "check_triplets",
    "is_triplets_sorted",
    "triplets_to_sparse",
    "triplets_to_dense",
    "sparse_to_triplets",
    "dense_to_sparse",
    "sparse_to_dense",
    "format_css",
    "sparse_sub_mat",
    "triplets_sub_mat",
    "sparse_split_col",
    "triplets_split_col",
    "sparse_split_col_side",
    "triplets_split_col_side",
    "sparse_split_row",
    "triplets_split_row",
    "write_triplets",
    "read_triplets",
]

log = logging.getLogger(__name__)


class SparseFormatError(ValueError):
    """Raised for invalid triplets or malformed sparse data."""


@dataclass
class SparseMat:
    """An m x n matrix in compressed column storage.

    ``p`` holds n+1 column pointers, ``i`` the row index of each stored value
    and ``x`` the stored values.
    """

    m: int
    n: int
    p: np.ndarray
    i: np.ndarray
    x: np.ndarray

    def __post_init__(self) -> None:
        self.p = np.asarray(self.p, dtype=np.int64).ravel()
        self.i = np.asarray(self.i, dtype=np.int64).ravel()
        self.x = np.asarray(self.x, dtype=float).ravel()
        if self.p.size != self.n + 1:
            raise SparseFormatError(
                f"expected {self.n + 1} column pointers, got {self.p.size}"
            )
        if self.i.size != self.x.size:
            raise SparseFormatError("row indices and values differ in length")

    @property
    def shape(self) -> tuple[int, int]:
        return self.m, self.n

    @property
    def nnz(self) -> int:
        return int(self.p[-1]) if self.p.size else 0

    @property
    def nzmax(self) -> int:
        return int(self.x.size)

    def column(self, c: int) -> tuple[np.ndarray, np.ndarray]:
        """Return the row indices and values stored in column ``c``."""
        start, end = self.p[c], self.p[c + 1]
        return self.i[start:end], self.x[start:end]


class Triplets:
    """A bounded list of ``(row, col, value)`` entries of an m x n matrix."""

    def __init__(self, m: int = -1, n: int = -1, capacity: int = 0) -> None:
        self.m = m
        self.n = n
        self.capacity = capacity
        self.rows: list[int] = []
        self.cols: list[int] = []
        self.vals: list[float] = []

    @property
    def nnz(self) -> int:
        return len(self.vals)

    def add(self, r: int, c: int, val: float) -> None:
        """Append an entry; raises IndexError when the capacity is reached."""
        if self.nnz >= self.capacity:
            raise IndexError("Triplets.add - the maximum number of elements reached")
        self.rows.append(int(r))
        self.cols.append(int(c))
        self.vals.append(float(val))

    def __iter__(self) -> Iterator[tuple[int, int, float]]:
        return iter(zip(self.rows, self.cols, self.vals))

    def __len__(self) -> int:
        return self.nnz

    def __repr__(self) -> str:
        return f"Triplets(m={self.m}, n={self.n}, entries={list(self)!r})"

    def save(self, fp: IO[str]) -> None:
        """Write capacity, count, size and one ``row col value`` line per entry."""
        fp.write(f"{self.capacity}\n{self.nnz}\n{self.m} {self.n}\n")
        for r, c, v in self:
            fp.write(f"{r} {c} {v!r}\n")

    @classmethod
    def load(cls, fp: IO[str]) -> "Triplets":
        """Read triplets in the form written by ``save``."""
        tokens = fp.read().split()
        try:
            maxnum, num, rows, cols = (int(t) for t in tokens[:4])
        except ValueError as exc:
            raise SparseFormatError(f"bad triplet header: {exc}") from exc
        if len(tokens) < 4:
            raise SparseFormatError("triplet header is incomplete")
        if not (maxnum >= num and rows > 0 and cols > 0 and num > 0):
            raise SparseFormatError(
                f"invalid triplet header: capacity {maxnum}, count {num}, size {rows}x{cols}"
            )
        body = tokens[4 : 4 + 3 * num]
        if len(body) < 3 * num:
            raise SparseFormatError(f"expected {num} entries, data ends early")
        trips = cls(rows, cols, maxnum)
        try:
            for k in range(0, 3 * num, 3):
                trips.add(int(body[k]), int(body[k + 1]), float(body[k + 2]))
        except ValueError as exc:
            raise SparseFormatError(f"bad triplet entry: {exc}") from exc
        return trips


def check_triplets(m: int, n: int, rows: Sequence[int], cols: Sequence[int]) -> bool:
    """Return True if every entry lies inside an m x n matrix; raise otherwise."""
    for r, c in zip(rows, cols):
        if r < 0 or r >= m or c < 0 or c >= n:
            raise SparseFormatError(f"invalid element ({r},{c}) for a matrix {m}x{n}")
    return True


def is_triplets_sorted(m: int, rows: Sequence[int], cols: Sequence[int]) -> bool:
    """Return True if the entries are in column-major order."""
    keys = (c * m + r for r, c in zip(rows, cols))
    return all(a <= b for a, b in pairwise(keys))


def triplets_to_sparse(trips: Triplets) -> SparseMat:
    """Convert triplets to compressed column storage, sorting them if needed."""
    m, n = trips.m, trips.n
    if m < 0 or n < 0:
        raise SparseFormatError(f"triplets have no valid size ({m}x{n})")
    check_triplets(m, n, trips.rows, trips.cols)
    order = list(range(trips.nnz))
    if not is_triplets_sorted(m, trips.rows, trips.cols):
        order.sort(key=lambda k: trips.cols[k] * m + trips.rows[k])
    counts = np.bincount(np.asarray(trips.cols, dtype=np.int64), minlength=n)
    p = np.concatenate(([0], np.cumsum(counts)))
    rows = [trips.rows[k] for k in order]
    vals = [trips.vals[k] for k in order]
    return SparseMat(m, n, p, rows, vals)


def triplets_to_dense(trips: Triplets) -> np.ndarray:
    """Return the dense matrix of the triplets; later entries overwrite earlier ones."""
    mat = np.zeros((max(trips.m, 0), max(trips.n, 0)))
    for r, c, v in trips:
        mat[r, c] = v
    return mat


def sparse_to_triplets(sp: SparseMat) -> Triplets:
    """Return the stored entries of a sparse matrix as triplets, column by column."""
    trips = Triplets(sp.m, sp.n, sp.nnz)
    for c in range(sp.n):
        for r, v in zip(*sp.column(c)):
            trips.add(int(r), c, float(v))
    return trips


def dense_to_sparse(mat) -> SparseMat:
    """Convert a dense matrix to compressed column storage, keeping non-zeros."""
    arr = np.atleast_2d(np.asarray(mat, dtype=float))
    m, n = arr.shape
    cols, rows = np.nonzero(arr.T)
    counts = np.bincount(cols, minlength=n)
    p = np.concatenate(([0], np.cumsum(counts)))
    return SparseMat(m, n, p, rows, arr[rows, cols])


def sparse_to_dense(sp: SparseMat) -> np.ndarray:
    """Return the dense form of a sparse matrix."""
    mat = np.zeros((sp.m, sp.n))
    nnz = sp.nnz
    cols = np.repeat(np.arange(sp.n), np.diff(sp.p))
    mat[sp.i[:nnz], cols] = sp.x[:nnz]
    return mat


def format_css(sp: SparseMat) -> str:
    """Return a printable summary of the compressed column arrays."""
    nnz = sp.nnz
    rows = "".join(f"{int(r)} " for r in sp.i[:nnz])
    vals = "".join(f"{float(v):f} " for v in sp.x[:nnz])
    ptrs = "".join(f"{int(c)} " for c in sp.p)
    return (
        f"{sp.m}x{sp.n}\n"
        f"number of nonzeros:{nnz}\n"
        f"row indices:{rows}\n"
        f"non zero elements:{vals}\n"
        f"column pointers:{ptrs}\n"
    )


def _check_range(lo: int, hi: int, size: int, what: str) -> None:
    if not (0 <= lo <= hi < size):
        raise ValueError(f"{what} range [{lo}, {hi}] outside 0..{size - 1}")


def triplets_sub_mat(ta: Triplets, r1: int, r2: int, c1: int, c2: int) -> Triplets:
    """Return the entries in rows ``r1..r2`` and columns ``c1..c2`` (inclusive)."""
    _check_range(r1, r2, ta.m, "row")
    _check_range(c1, c2, ta.n, "column")
    inside = [(r, c, v) for r, c, v in ta if r1 <= r <= r2 and c1 <= c <= c2]
    tb = Triplets(r2 - r1 + 1, c2 - c1 + 1, max(len(inside), 1))
    for r, c, v in inside:
        tb.add(r - r1, c - c1, v)
    return tb


def sparse_sub_mat(a: SparseMat, r1: int, r2: int, c1: int, c2: int) -> SparseMat:
    """Return the sub-matrix in rows ``r1..r2`` and columns ``c1..c2`` (inclusive)."""
    _check_range(r1, r2, a.m, "row")
    _check_range(c1, c2, a.n, "column")
    return triplets_to_sparse(triplets_sub_mat(sparse_to_triplets(a), r1, r2, c1, c2))


def _check_split(at: int, size: int, what: str) -> None:
    if not (0 <= at <= size):
        raise ValueError(f"{what} split {at} outside 0..{size}")


def triplets_split_col(tt: Triplets, c0: int) -> tuple[Triplets, Triplets]:
    """Split into the columns before ``c0`` and the columns from ``c0`` on."""
    _check_split(c0, tt.n, "column")
    left = Triplets(tt.m, c0, tt.nnz)
    right = Triplets(tt.m, tt.n - c0, tt.nnz)
    for r, c, v in tt:
        if c < c0:
            left.add(r, c, v)
        else:
            right.add(r, c - c0, v)
    return left, right


def sparse_split_col(t: SparseMat, c0: int) -> tuple[SparseMat, SparseMat]:
    """Split into the columns before ``c0`` and the columns from ``c0`` on."""
    _check_split(c0, t.n, "column")
    left, right = triplets_split_col(sparse_to_triplets(t), c0)
    return triplets_to_sparse(left), triplets_to_sparse(right)


def triplets_split_col_side(tt: Triplets, c0: int, left: bool) -> Triplets:
    """Return the columns before ``c0`` if ``left``, else the columns from ``c0`` on."""
    pair = triplets_split_col(tt, c0)
    return pair[0] if left else pair[1]


def sparse_split_col_side(t: SparseMat, c0: int, left: bool) -> SparseMat:
    """Return the columns before ``c0`` if ``left``, else the columns from ``c0`` on."""
    _check_split(c0, t.n, "column")
    return triplets_to_sparse(triplets_split_col_side(sparse_to_triplets(t), c0, left))


def triplets_split_row(tt: Triplets, r0: int, upper: bool) -> Triplets:
    """Return the rows before ``r0`` if ``upper``, else the rows from ``r0`` on."""
    _check_split(r0, tt.m, "row")
    if upper:
        out = Triplets(r0, tt.n, tt.nnz)
        for r, c, v in tt:
            if r < r0:
                out.add(r, c, v)
    else:
        out = Triplets(tt.m - r0, tt.n, tt.nnz)
        for r, c, v in tt:
            if r >= r0:
                out.add(r - r0, c, v)
    return out


def sparse_split_row(t: SparseMat, r0: int, upper: bool) -> SparseMat:
    """Return the rows before ``r0`` if ``upper``, else the rows from ``r0`` on."""
    _check_split(r0, t.m, "row")
    return triplets_to_sparse(triplets_split_row(sparse_to_triplets(t), r0, upper))


def write_triplets(trips: Triplets, path: str | PathLike[str]) -> None:
    """Save triplets to a text file."""
    with open(path, "w", encoding="utf-8") as fp:
        trips.save(fp)
    log.info("write '%s' OK", path)


def read_triplets(path: str | PathLike[str]) -> Triplets:
    """Load triplets from a text file written by ``write_triplets``."""
    with open(path, encoding="utf-8") as fp:
        trips = Triplets.load(fp)
    log.info("read '%s' OK", path)
    return trips