import math

import numpy as np
import pytest

from stereomath import fixed_linalg as fl


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def _well_conditioned(rng, n):
    return rng.random((n, n)) + n * np.eye(n)


def test_diff_sqr_sum_zero_for_equal_vectors():
    assert fl.diff_sqr_sum([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == 0.0


def test_diff_sqr_sum_symmetric(rng):
    a, b = rng.random(5), rng.random(5)
    assert fl.diff_sqr_sum(a, b) == pytest.approx(fl.diff_sqr_sum(b, a))
    assert fl.diff_sqr_sum(a, b) == pytest.approx(float(np.sum((a - b) ** 2)))


def test_diff_sqr_sum_length_mismatch():
    with pytest.raises(ValueError):
        fl.diff_sqr_sum([1.0, 2.0], [1.0])


def test_inner_prod3_identity_weight_matches_plain(rng):
    a, b = rng.random(3), rng.random(3)
    assert fl.inner_prod3(a, b, np.eye(3)) == pytest.approx(fl.inner_prod3(a, b))
    assert fl.inner_prod3(a, b) == pytest.approx(float(np.dot(a, b)))


def test_inner_prod3_weighted(rng):
    a, b = rng.random(3), rng.random(3)
    w = rng.random((3, 3))
    assert fl.inner_prod3(a, b, w.ravel()) == pytest.approx(float(a @ w @ b))


def test_inner_prod2_identity_weight_matches_plain(rng):
    a, b = rng.random(2), rng.random(2)
    assert fl.inner_prod2(a, b, [1.0, 0.0, 1.0]) == pytest.approx(fl.inner_prod2(a, b))
    assert fl.inner_prod2(a, b) == pytest.approx(float(np.dot(a, b)))


def test_vec3_len_unit_axes():
    assert fl.vec3_len([0.0, 0.0, 1.0]) == 1.0
    v = np.array([1.0, 2.0, 2.0])
    assert fl.vec3_len(v) == pytest.approx(math.sqrt(float(v @ v)))


def test_copy_sub_mat_extracts_block():
    a = np.arange(12.0).reshape(3, 4)
    sub = fl.copy_sub_mat(a, 1, 2, 1, 3)
    np.testing.assert_array_equal(sub, a[1:3, 1:4])
    sub[0, 0] = -100.0
    assert a[1, 1] != -100.0


@pytest.mark.parametrize(
    "bounds",
    [(-1, 1, 0, 1), (0, 3, 0, 1), (0, 1, -1, 1), (0, 1, 0, 4), (2, 1, 0, 1), (0, 1, 2, 1)],
)
def test_copy_sub_mat_rejects_bad_bounds(bounds):
    with pytest.raises(ValueError):
        fl.copy_sub_mat(np.zeros((3, 4)), *bounds)


def test_mat33_trans_involution(rng):
    a = rng.random((3, 3))
    np.testing.assert_allclose(fl.mat33_trans(fl.mat33_trans(a)), a)
    np.testing.assert_allclose(fl.mat33_trans(a.ravel()), a.T)


def test_mat44_trans_involution(rng):
    a = rng.random((4, 4))
    np.testing.assert_allclose(fl.mat44_trans(fl.mat44_trans(a)), a)
    np.testing.assert_allclose(fl.mat44_trans(a), a.T)


def test_wrong_size_rejected():
    with pytest.raises(ValueError):
        fl.mat33_trans([1.0, 2.0, 3.0, 4.0])


def test_mat22_inv_round_trip(rng):
    a = _well_conditioned(rng, 2)
    np.testing.assert_allclose(fl.mat22_inv(a) @ a, np.eye(2), atol=1e-12)


def test_mat22_inv_singular():
    with pytest.raises(ZeroDivisionError):
        fl.mat22_inv([1.0, 2.0, 2.0, 4.0])


def test_mat33_inv_round_trip(rng):
    a = _well_conditioned(rng, 3)
    np.testing.assert_allclose(fl.mat33_inv(a.ravel()) @ a, np.eye(3), atol=1e-12)


def test_mat33_inv_singular():
    with pytest.raises(ZeroDivisionError):
        fl.mat33_inv(np.ones((3, 3)))


def test_mat33_prod_vec_and_affine(rng):
    a, b, c = rng.random((3, 3)), rng.random(3), rng.random(3)
    np.testing.assert_allclose(fl.mat33_prod_vec(a, b), a @ b)
    np.testing.assert_allclose(
        fl.mat33_prod_vec_affine(a, b, c, 2.0, -0.5), 2.0 * (a @ b) - 0.5 * c
    )
    np.testing.assert_allclose(
        fl.mat33_prod_vec_affine(a, b, c, 1.0, 0.0), fl.mat33_prod_vec(a, b)
    )


def test_mat33_trans_prod_vec(rng):
    a, b = rng.random((3, 3)), rng.random(3)
    np.testing.assert_allclose(
        fl.mat33_trans_prod_vec(a, b), fl.mat33_prod_vec(fl.mat33_trans(a), b)
    )


def test_mat33_products_consistent(rng):
    a, b = rng.random((3, 3)), rng.random((3, 3))
    ab = fl.mat33_ab(a, b)
    np.testing.assert_allclose(ab, a @ b)
    np.testing.assert_allclose(fl.mat33_atb(a, b), fl.mat33_ab(a.T, b))
    np.testing.assert_allclose(fl.mat33_abt(a, b), fl.mat33_ab(a, b.T))
    np.testing.assert_allclose(fl.mat33_ab(a, np.eye(3)), a)


def test_mat33_tr(rng):
    a, b = rng.random((3, 3)), rng.random((3, 3))
    assert fl.mat33_tr(np.eye(3)) == 3.0
    assert fl.mat33_tr(fl.mat33_ab(a, b)) == pytest.approx(fl.mat33_tr(fl.mat33_ab(b, a)))


def test_mat22_det():
    assert fl.mat22_det([1.0, 2.0, 3.0, 4.0]) == -2.0
    assert fl.mat22_det(np.eye(2)) == 1.0


def test_mat33_det_properties(rng):
    a, b = rng.random((3, 3)), rng.random((3, 3))
    assert fl.mat33_det(np.eye(3)) == 1.0
    assert fl.mat33_det(fl.mat33_ab(a, b)) == pytest.approx(
        fl.mat33_det(a) * fl.mat33_det(b)
    )
    assert fl.mat33_det(a) == pytest.approx(fl.mat33_det(fl.mat33_trans(a)))
    assert fl.mat33_det(a) == pytest.approx(float(np.linalg.det(a)))


def test_mat33_det_inverse(rng):
    a = _well_conditioned(rng, 3)
    assert fl.mat33_det(fl.mat33_inv(a)) == pytest.approx(1.0 / fl.mat33_det(a))


def test_mat44_det_properties(rng):
    a, b = rng.random((4, 4)), rng.random((4, 4))
    assert fl.mat44_det(np.eye(4)) == 1.0
    assert fl.mat44_det(a @ b) == pytest.approx(fl.mat44_det(a) * fl.mat44_det(b))
    assert fl.mat44_det(a) == pytest.approx(fl.mat44_det(fl.mat44_trans(a)))
    assert fl.mat44_det(a.ravel()) == pytest.approx(float(np.linalg.det(a)))


def test_mat44_det_singular_rows():
    a = np.arange(16.0).reshape(4, 4)
    a[3] = a[0]
    assert fl.mat44_det(a) == pytest.approx(0.0, abs=1e-9)


def test_contain_nan():
    assert fl.contain_nan([1.0, float("nan"), 3.0]) is True
    assert fl.contain_nan([1.0, 2.0, float("inf")]) is False
    assert fl.contain_nan([]) is False