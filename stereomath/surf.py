"""Matching of SURF-style descriptors by nearest-neighbour ratio."""

from __future__ import annotations

import math

import numpy as np

from stereomath.fixed_linalg import mat22_inv
from stereomath.matching import Matching

__all__ = [
    "compute_surf_desc_dist",
    "match_surf",
    "match_surf_flat",
    "refine_matched_points",
]

FLT_MAX = float(np.finfo(np.float32).max)


def compute_surf_desc_dist(desc0, desc1) -> float:
    """Return the Euclidean distance between two descriptors."""
    a = np.asarray(desc0, dtype=float).ravel()
    b = np.asarray(desc1, dtype=float).ravel()
    if a.size != b.size:
        raise ValueError(f"descriptors differ in length: {a.size} and {b.size}")
    d = a - b
    return math.sqrt(float(d @ d))


def _ratio_match(
    desc0: np.ndarray, desc1: np.ndarray, ratio: float, max_dist: float = math.inf
) -> Matching:
    matches = Matching()
    matches.reserve(max(len(desc0), len(desc1)))
    for i, query in enumerate(desc0):
        d1 = d2 = FLT_MAX
        j_min = -1
        for j, cand in enumerate(desc1):
            dist = compute_surf_desc_dist(query, cand)
            if dist < d1:
                d2, d1, j_min = d1, dist, j
            elif dist < d2:
                d2 = dist
        score = d1 / d2 if d2 else math.nan
        if d1 < max_dist and score < ratio:
            matches.add(i, j_min, d1)
    return matches


def match_surf(kdesc0, kdesc1, ratio: float) -> Matching:
    """Match each row of ``kdesc0`` to its nearest row of ``kdesc1``.

    A match is kept when the nearest distance divided by the second nearest
    is below ``ratio``.
    """
    k0 = np.atleast_2d(np.asarray(kdesc0, dtype=float))
    k1 = np.atleast_2d(np.asarray(kdesc1, dtype=float))
    if k0.shape[0] == 0:
        raise ValueError("match_surf: no descriptors in the first set")
    if k0.shape[1] != k1.shape[1]:
        raise ValueError(
            f"match_surf: descriptor sizes differ ({k0.shape[1]} and {k1.shape[1]})"
        )
    return _ratio_match(k0, k1, ratio)


def match_surf_flat(dim_desc: int, desc0, desc1, ratio: float, max_dist: float) -> Matching:
    """Match descriptors stored back to back in flat sequences of ``dim_desc`` values.

    A match must also be nearer than ``max_dist``.
    """
    if dim_desc <= 0:
        raise ValueError("match_surf_flat: descriptor size must be positive")
    a = np.asarray(desc0, dtype=float).ravel()
    b = np.asarray(desc1, dtype=float).ravel()
    if a.size % dim_desc or b.size % dim_desc:
        raise ValueError(
            f"match_surf_flat: lengths {a.size} and {b.size} are not multiples of {dim_desc}"
        )
    return _ratio_match(a.reshape(-1, dim_desc), b.reshape(-1, dim_desc), ratio, max_dist)


def refine_matched_points(pts1, pts2, matches: Matching, ratio: float) -> Matching:
    """Keep the matches whose displacement agrees with the majority.

    The displacement covariance is scaled by ``ratio**2`` and each match is
    kept when its quadratic form against the inverse falls below one; the
    ``dy**2`` term is weighted by the off-diagonal inverse entry. Kept matches
    carry a distance of 0.
    """
    num = len(matches)
    if num == 0:
        raise ValueError("refine_matched_points: no matches given")
    p1 = np.asarray(pts1, dtype=float).reshape(-1, 2)
    p2 = np.asarray(pts2, dtype=float).reshape(-1, 2)
    idx1 = np.array([m.idx1 for m in matches], dtype=np.intp)
    idx2 = np.array([m.idx2 for m in matches], dtype=np.intp)
    disp = p2[idx2] - p1[idx1]
    dev = disp - disp.mean(axis=0)
    dx, dy = dev[:, 0], dev[:, 1]

    scale = ratio * ratio / num
    cxx = float(dx @ dx) * scale
    cxy = float(dx @ dy) * scale
    cyy = float(dy @ dy) * scale
    icov = mat22_inv([[cxx, cxy], [cxy, cyy]]).ravel()

    dist = dx * dx * icov[0] + 2 * dx * dy * icov[1] + dy * dy * icov[2]
    refined = Matching()
    refined.reserve(num)
    for item, d in zip(matches, dist):
        if d < 1.0:
            refined.add(item.idx1, item.idx2, 0)
    return refined