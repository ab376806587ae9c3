import numpy as np
import pytest

from stereomath.linalg import (
    LinAlgError,
    eig_real,
    least_squares,
    mat_ab,
    mat_abt,
    mat_atb,
    mat_axpy,
    mat_det,
    mat_inv,
    qr,
    svd,
    svd_values,
)


@pytest.fixture
def rng():
    return np.random.default_rng(7)


def test_det_of_triangular_matrix():
    a = [[2.0, 5.0, 1.0], [0.0, 3.0, 7.0], [0.0, 0.0, 4.0]]
    assert mat_det(a) == pytest.approx(24.0)


def test_det_accepts_flat_input():
    a = np.array([[1.0, 2.0], [3.0, 4.0]])
    assert mat_det(a.ravel()) == pytest.approx(mat_det(a))


def test_det_sign_with_row_swap():
    a = np.array([[0.0, 1.0], [1.0, 0.0]])
    assert mat_det(a) == pytest.approx(-1.0)


def test_det_multiplicative(rng):
    a = rng.random((4, 4))
    b = rng.random((4, 4))
    assert mat_det(mat_ab(a, b)) == pytest.approx(mat_det(a) * mat_det(b))


def test_det_non_square_raises():
    with pytest.raises(ValueError):
        mat_det(np.ones((2, 3)))


def test_ab_identity(rng):
    a = rng.random((3, 5))
    np.testing.assert_allclose(mat_ab(a, np.eye(5)), a)


def test_ab_dimension_mismatch():
    with pytest.raises(ValueError):
        mat_ab(np.ones((2, 3)), np.ones((2, 3)))


def test_atb_and_abt_agree_with_ab(rng):
    a = rng.random((4, 3))
    b = rng.random((4, 2))
    c = rng.random((5, 3))
    np.testing.assert_allclose(mat_atb(a, b), mat_ab(a.T, b))
    np.testing.assert_allclose(mat_abt(a, c), mat_ab(a, c.T))


def test_atb_and_abt_mismatch():
    with pytest.raises(ValueError):
        mat_atb(np.ones((2, 3)), np.ones((3, 3)))
    with pytest.raises(ValueError):
        mat_abt(np.ones((2, 3)), np.ones((2, 4)))


def test_axpy_without_y_is_product(rng):
    a = rng.random((3, 4))
    x = rng.random(4)
    np.testing.assert_allclose(mat_axpy(1.0, a, x), mat_ab(a, x.reshape(4, 1)).ravel())


def test_axpy_with_y(rng):
    a = rng.random((3, 4))
    x = rng.random(4)
    y = rng.random(3)
    z = mat_axpy(2.0, a, x, 3.0, y)
    np.testing.assert_allclose(z, 2.0 * mat_axpy(1.0, a, x) + 3.0 * y)


def test_axpy_size_mismatch():
    with pytest.raises(ValueError):
        mat_axpy(1.0, np.ones((3, 4)), np.ones(3))
    with pytest.raises(ValueError):
        mat_axpy(1.0, np.ones((3, 4)), np.ones(4), 1.0, np.ones(4))


def test_inverse_round_trip(rng):
    a = rng.random((5, 5)) + 5 * np.eye(5)
    np.testing.assert_allclose(mat_ab(a, mat_inv(a)), np.eye(5), atol=1e-12)


def test_inverse_singular_raises():
    with pytest.raises(LinAlgError):
        mat_inv([[1.0, 2.0], [2.0, 4.0]])


def test_least_squares_exact_system(rng):
    a = rng.random((7, 3))
    x_true = np.array([1.0, -2.0, 0.5])
    x = least_squares(a, a @ x_true)
    np.testing.assert_allclose(x, x_true, atol=1e-10)


def test_least_squares_residual_orthogonal(rng):
    a = rng.random((8, 3))
    b = rng.random((8, 2))
    x = least_squares(a, b)
    assert x.shape == (3, 2)
    np.testing.assert_allclose(a.T @ (b - a @ x), np.zeros((3, 2)), atol=1e-10)


def test_least_squares_underdetermined_raises():
    with pytest.raises(ValueError):
        least_squares(np.ones((2, 3)), np.ones(2))


def test_svd_reconstructs(rng):
    a = rng.random((7, 5))
    u, s, vt = svd(a)
    assert u.shape == (7, 7) and vt.shape == (5, 5)
    sigma = np.zeros((7, 5))
    sigma[:5, :5] = np.diag(s)
    np.testing.assert_allclose(u @ sigma @ vt, a, atol=1e-12)
    np.testing.assert_allclose(u.T @ u, np.eye(7), atol=1e-12)
    assert np.all(np.diff(s) <= 0)


def test_svd_values_match_full(rng):
    a = rng.random((4, 6))
    s_full, vt_full = svd(a)[1:]
    s, vt = svd_values(a)
    np.testing.assert_allclose(s, s_full)
    np.testing.assert_allclose(np.abs(vt), np.abs(vt_full))


def test_eig_real_satisfies_definition():
    a = np.array([[2.0, 1.0], [1.0, 3.0]])
    values, vectors = eig_real(a)
    assert values.size == 2
    for lam, v in zip(values, vectors):
        np.testing.assert_allclose(a @ v, lam * v, atol=1e-12)


def test_eig_real_skips_complex_values():
    rotation = np.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 2.0]])
    values, vectors = eig_real(rotation)
    assert values.tolist() == pytest.approx([2.0])
    assert vectors.shape == (1, 3)


def test_qr_decomposition(rng):
    a = rng.random((6, 4))
    q, r = qr(a)
    assert q.shape == (6, 6) and r.shape == (6, 4)
    np.testing.assert_allclose(q @ r, a, atol=1e-12)
    np.testing.assert_allclose(q.T @ q, np.eye(6), atol=1e-12)
    np.testing.assert_allclose(np.tril(r, -1), np.zeros((6, 4)), atol=1e-12)