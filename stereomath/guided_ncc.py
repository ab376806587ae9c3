"""Greedy correspondence search over NCC score matrices, optionally guided by seeds."""

from __future__ import annotations

import numpy as np

from stereomath.matching import Matching
from stereomath.stereo_helper import search_nearest_point

__all__ = [
    "get_seed_disparities",
    "get_nearest_seeds",
    "greedy_ncc_match",
    "greedy_ncc_match_index",
    "greedy_guided_ncc_match",
]


def _points(pts) -> np.ndarray:
    arr = np.asarray(pts, dtype=float)
    if arr.size % 2:
        raise ValueError(f"expected 2-D points, got {arr.size} values")
    return arr.reshape(-1, 2)


def _score_matrix(mat) -> np.ndarray:
    arr = np.atleast_2d(np.asarray(mat, dtype=float))
    if arr.ndim != 2:
        raise ValueError("expected a two-dimensional score matrix")
    return arr


def _best(scores: np.ndarray, valid: np.ndarray) -> int | None:
    """Return the index of the first largest valid score, or None if none is valid."""
    if not valid.any():
        return None
    return int(np.argmax(np.where(valid, scores, -np.inf)))


def get_seed_disparities(seed1, seed2) -> tuple[np.ndarray, np.ndarray]:
    """Return the displacement of each seed pair seen from each view.

    The first array holds ``seed2 - seed1``, the second its negation.
    """
    s1, s2 = _points(seed1), _points(seed2)
    if s1.shape != s2.shape:
        raise ValueError(f"seed sets differ in size: {len(s1)} and {len(s2)}")
    disp = s2 - s1
    return disp, -disp


def get_nearest_seeds(corners, seed) -> np.ndarray:
    """Return, for each corner, the index of its nearest seed point."""
    seeds = _points(seed)
    return np.array(
        [search_nearest_point(seeds, x, y) for x, y in _points(corners)], dtype=np.intp
    )


def greedy_ncc_match(ncc_mat) -> Matching:
    """Match greedily along the shorter side of the score matrix.

    With fewer rows than columns, each row takes its highest non-negative
    score; otherwise each column takes its highest non-negative score.
    Negative scores mark pairs that may not match.
    """
    ncc = _score_matrix(ncc_mat)
    m, n = ncc.shape
    matches = Matching()
    if m < n:
        matches.reserve(m)
        for i, row in enumerate(ncc):
            j = _best(row, row >= 0)
            if j is not None:
                matches.add(i, j, float(row[j]))
    else:
        matches.reserve(n)
        for j, col in enumerate(ncc.T):
            i = _best(col, col >= 0)
            if i is not None:
                matches.add(i, j, float(col[i]))
    return matches


def greedy_ncc_match_index(ncc_mat) -> tuple[np.ndarray, int]:
    """Return ``(j_index, count)``: the matched column of each row (-1 if none).

    In column-driven mode a later column overwrites an earlier one that chose
    the same row, while ``count`` still counts every column that found a row.
    """
    ncc = _score_matrix(ncc_mat)
    m, n = ncc.shape
    j_ind = np.full(m, -1, dtype=np.intp)
    matched = 0
    if m < n:
        for i, row in enumerate(ncc):
            j = _best(row, row >= 0)
            if j is not None:
                j_ind[i] = j
                matched += 1
    else:
        for j, col in enumerate(ncc.T):
            i = _best(col, col >= 0)
            if i is not None:
                j_ind[i] = j
                matched += 1
    return j_ind, matched


def _resolve(
    ncc: np.ndarray, disp: np.ndarray, by_rows: bool
) -> dict[int, list[int]]:
    """Collect, for each chosen target, the sources that picked it, in order."""
    scores = ncc if by_rows else ncc.T
    guide = disp if by_rows else disp.T
    chosen: dict[int, list[int]] = {}
    for src, (row, drow) in enumerate(zip(scores, guide)):
        tgt = _best(row, (row >= 0) & (drow >= 0))
        if tgt is not None:
            chosen.setdefault(tgt, []).append(src)
    return chosen


def greedy_guided_ncc_match(ncc_mat, disp_mat) -> Matching:
    """Greedy matching restricted to pairs with a non-negative disparity cost.

    Each element of the shorter side picks its best allowed partner; where
    several pick the same partner, only the one with the highest score is
    kept. Matches are listed in the order of the longer side.
    """
    ncc = _score_matrix(ncc_mat)
    disp = _score_matrix(disp_mat)
    if ncc.shape != disp.shape:
        raise ValueError(
            f"score matrix is {ncc.shape[0]}x{ncc.shape[1]} "
            f"but disparity matrix is {disp.shape[0]}x{disp.shape[1]}"
        )
    m, n = ncc.shape
    matches = Matching()
    matches.reserve(m)
    if m < n:
        chosen = _resolve(ncc, disp, by_rows=True)
        for j in sorted(chosen):
            rows = chosen[j]
            i = max(rows, key=lambda r: (ncc[r, j], -rows.index(r)))
            matches.add(i, j, float(ncc[i, j]))
    else:
        chosen = _resolve(ncc, disp, by_rows=False)
        for i in sorted(chosen):
            cols = chosen[i]
            j = max(cols, key=lambda c: (ncc[i, c], -cols.index(c)))
            matches.add(i, j, float(ncc[i, j]))
    return matches