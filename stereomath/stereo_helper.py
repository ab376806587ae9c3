"""Helpers shared by the stereo matchers: point selection, distances and searches."""

from __future__ import annotations

import numpy as np

from stereomath.matching import Matching

__all__ = [
    "get_matched_pts",
    "get_dist_mat",
    "compute_asd",
    "compute_desc_dist",
    "search_nearest_point",
    "search_nearest_point_within",
    "find_best_match",
    "get_flaged_2d_points",
]


def _points(pts) -> np.ndarray:
    """Return ``pts`` as an n x 2 float array; flat x, y, x, y ... input is accepted."""
    arr = np.asarray(pts, dtype=float)
    if arr.size % 2:
        raise ValueError(f"expected 2-D points, got {arr.size} values")
    return arr.reshape(-1, 2)


def _pair(a, b) -> tuple[np.ndarray, np.ndarray]:
    va = np.asarray(a, dtype=float).ravel()
    vb = np.asarray(b, dtype=float).ravel()
    if va.size != vb.size:
        raise ValueError(f"vectors differ in length: {va.size} and {vb.size}")
    if va.size == 0:
        raise ValueError("vectors cannot be empty")
    return va, vb


def get_matched_pts(matches: Matching, pts1, pts2) -> tuple[np.ndarray, np.ndarray]:
    """Return the coordinates of the matched points in each view, in match order.

    Matches with a negative index on either side are skipped.
    """
    if len(matches) == 0:
        raise ValueError("no matched points!")
    p1, p2 = _points(pts1), _points(pts2)
    pairs = [(m.idx1, m.idx2) for m in matches if m.idx1 >= 0 and m.idx2 >= 0]
    idx1 = np.fromiter((a for a, _ in pairs), dtype=np.intp, count=len(pairs))
    idx2 = np.fromiter((b for _, b in pairs), dtype=np.intp, count=len(pairs))
    return p1[idx1].copy(), p2[idx2].copy()


def get_dist_mat(pts) -> np.ndarray:
    """Return the matrix of Euclidean distances between every pair of points."""
    p = _points(pts)
    diff = p[:, None, :] - p[None, :, :]
    return np.sqrt((diff * diff).sum(axis=-1))


def compute_asd(blk1, blk2) -> float:
    """Return the average squared difference of two image blocks."""
    a, b = _pair(blk1, blk2)
    d = a - b
    return float(np.mean(d * d))


def compute_desc_dist(ds1, ds2) -> float:
    """Return the average absolute difference of two descriptors."""
    a, b = _pair(ds1, ds2)
    return float(np.mean(np.abs(a - b)))


def search_nearest_point(pts, x0: float, y0: float) -> int:
    """Return the index of the point nearest to ``(x0, y0)``; the first one on ties."""
    p = _points(pts)
    if len(p) == 0:
        raise ValueError("search_nearest_point: no points given")
    d = (p[:, 0] - x0) ** 2 + (p[:, 1] - y0) ** 2
    return int(np.argmin(d))


def search_nearest_point_within(
    pts, x0: float, y0: float, max_dist: float
) -> tuple[int | None, float]:
    """Return ``(index, distance)`` of the nearest point closer than ``max_dist``.

    When no point is closer, the index is None and the distance is ``max_dist``.
    """
    p = _points(pts)
    if len(p) == 0:
        return None, max_dist
    d = np.hypot(p[:, 0] - x0, p[:, 1] - y0)
    best = int(np.argmin(d))
    if d[best] < max_dist:
        return best, float(d[best])
    return None, max_dist


def find_best_match(
    desc1,
    desc2,
    idx1: int,
    idx2: int,
    desc,
    pts,
    x0: float,
    y0: float,
    max_dist_thres: float,
    max_desc_thres: float,
) -> int | None:
    """Return the candidate whose descriptor best agrees with two reference descriptors.

    Candidates farther than ``max_dist_thres`` from ``(x0, y0)`` are ignored.
    A candidate is accepted when half its summed descriptor distance is below
    the current bound; the bound then becomes the full sum. Returns None if
    no candidate is accepted.
    """
    d1 = np.atleast_2d(np.asarray(desc1, dtype=float))
    d2 = np.atleast_2d(np.asarray(desc2, dtype=float))
    cand = np.atleast_2d(np.asarray(desc, dtype=float))
    p = _points(pts)
    ref1, ref2 = d1[idx1], d2[idx2]

    min_desc = max_desc_thres
    best = None
    for i, (x, y) in enumerate(p):
        if np.hypot(x - x0, y - y0) > max_dist_thres:
            continue
        dist_desc = compute_desc_dist(ref1, cand[i]) + compute_desc_dist(ref2, cand[i])
        if dist_desc * 0.5 < min_desc:
            min_desc = dist_desc
            best = i
    return best


def get_flaged_2d_points(pts, flag) -> np.ndarray:
    """Return the points whose flag is non-zero, keeping their order."""
    p = _points(pts)
    f = np.asarray(flag).ravel()
    if f.size != len(p):
        raise ValueError(f"get_flaged_2d_points: {len(p)} points but {f.size} flags")
    return p[f.astype(bool)].copy()