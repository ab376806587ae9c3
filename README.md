# stereomath

Numerical building blocks for two-view stereo work, built on NumPy.

## Modules

- `stereomath.points`: the dataclasses `Point2`, `Point3` and `Point3Id` (a `Point3` with an `id`, `-1` when unassigned). It also has `point2_compare_less`, which orders points by y and then by x and counts equal points as less.
- `stereomath.matching`: `MatchItem` (`idx1`, `idx2`, `dist`) and `Matching`, a bounded list of matches. `reserve(n)` clears the list and allows up to `n` matches. `add(i, j, dist)` raises `IndexError` once that limit is reached. `clear()` empties the list and its capacity.
- `stereomath.fixed_linalg`: closed-form routines for 2x2, 3x3 and 4x4 matrices. These cover inverses (`mat22_inv`, `mat33_inv`, which raise `ZeroDivisionError` when the matrix is singular), determinants, trace, products (`mat33_ab`, `mat33_atb`, `mat33_abt`, `mat33_prod_vec`, `mat33_prod_vec_affine`, `mat33_trans_prod_vec`) and transposes. It also has `inner_prod2`, `inner_prod3`, `vec3_len`, `diff_sqr_sum`, `copy_sub_mat` and `contain_nan`.
- `stereomath.linalg`: general dense routines. It has `mat_det`, the products `mat_ab`, `mat_atb` and `mat_abt`, `mat_axpy` and `mat_inv`. It also has `least_squares`, which needs rows >= columns. The decompositions are `svd` (full `U`, `S`, `VT`), `svd_values` (`S`, `VT`), `eig_real` (real eigenvalues only, with one eigenvector per row) and `qr` (complete `Q`, `R`). Failures raise `LinAlgError`. Mismatched shapes raise `ValueError`.
- `stereomath.probfuncs`: multivariate normal densities. `normpdf2(x, sigma, mu=None)` is the 2-D density and `normpdf3(x, sigma)` the zero-mean 3-D one. `normpdf(x, sigma)` works in any dimension. The helpers `normpdf_const(invsigma)` and `normpdf_expval(x, invsigma)` return its two factors.
- `stereomath.sparse`: `SparseMat` in compressed column storage (`m`, `n`, `p`, `i`, `x`) and `Triplets`, a bounded list of `(row, col, value)` entries.
  - Conversions: `triplets_to_sparse`, `sparse_to_triplets`, `dense_to_sparse`, `sparse_to_dense`, `triplets_to_dense`.
  - Sub-matrices and splits: `sparse_sub_mat` and `triplets_sub_mat`, `sparse_split_col` and `triplets_split_col`, `sparse_split_col_side` and `triplets_split_col_side`, `sparse_split_row` and `triplets_split_row`.
  - Checks and display: `check_triplets`, `is_triplets_sorted`, `format_css`.
  - Text I/O: `Triplets.save`, `Triplets.load`, `write_triplets`, `read_triplets`.
  - Invalid data raises `SparseFormatError`.
- `stereomath.sparse_solve`: `sparse_solve_lin(a, b)` solves `A x = b` in the least-squares sense. `sparse_solve_lin_pair(a, b_mat, rhs)` solves `[A B] [x; y] = rhs` and returns `(x, y)`. `sparse_mat_mul(a, b)` multiplies two `SparseMat`s.
- `stereomath.stereo_helper`: helpers shared by the matchers.
  - Point selection: `get_matched_pts` and `get_flaged_2d_points`.
  - Distances: the pairwise distance matrix `get_dist_mat`, plus the block and descriptor distances `compute_asd` and `compute_desc_dist`.
  - Searches: `search_nearest_point`; `search_nearest_point_within`, which returns `(None, max_dist)` when nothing is close enough; and `find_best_match`, which returns `None` when no candidate is accepted.
- `stereomath.surf`: `compute_surf_desc_dist` and ratio-test matching of descriptors with `match_surf` (rows of two arrays) and `match_surf_flat` (flat sequences plus a distance limit). `refine_matched_points` keeps the matches whose displacement agrees with the majority.
- `stereomath.guided_ncc`: seed helpers `get_seed_disparities` and `get_nearest_seeds`. It also has greedy matching over an NCC score matrix with `greedy_ncc_match` (returns a `Matching`) and `greedy_ncc_match_index` (returns the matched column of each row and a count). `greedy_guided_ncc_match` keeps only pairs with a non-negative disparity cost and resolves conflicting choices by the highest score. Negative scores mark pairs that may not match.

Fixed-size matrices may be passed as flat, row-major sequences. Point sets are `(n, 2)` arrays, or flat `x, y, x, y, ...` sequences.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
import numpy as np
from stereomath.fixed_linalg import mat33_inv, mat33_det
from stereomath.surf import match_surf

a = np.array([2.0, 0, 0, 0, 3, 0, 0, 0, 4])
print(mat33_det(a))   # 24.0
print(mat33_inv(a))   # 3x3 array with 0.5, 1/3, 0.25 on the diagonal

d0 = np.array([[0.0, 0.0], [5.0, 5.0]])
d1 = np.array([[5.1, 5.0], [0.1, 0.0], [9.0, 9.0]])
matches = match_surf(d0, d1, 0.65)
for item in matches:
    print(item.idx1, item.idx2, item.dist)   # 0 1 ~0.1, then 1 0 ~0.1
```

## What it does not do

The package works on points, descriptors and score matrices that you supply. It does not read images, cut patches out of images or detect feature points. It does not build epipolar-error matrices or solve assignment problems. It has no command-line tool.