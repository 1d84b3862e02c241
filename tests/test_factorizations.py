import io

import numpy as np
import pytest

from polykernels.factorizations import (
    init_cholesky,
    init_lu,
    init_ludcmp,
    kernel_cholesky,
    kernel_lu,
    kernel_ludcmp,
    make_spd_matrix,
    print_cholesky,
    print_lu,
    print_ludcmp,
    run_cholesky,
    run_lu,
    run_ludcmp,
)


def _unit_lower(n):
    i = np.arange(n)[:, None]
    j = np.arange(n)[None, :]
    lower = np.where(j < i, 1.0 - j / n, 0.0)
    np.fill_diagonal(lower, 1.0)
    return lower


def test_make_spd_matrix_single():
    assert make_spd_matrix(1).tolist() == [[1.0]]


@pytest.mark.parametrize("n", [2, 5, 9])
def test_make_spd_matrix_symmetric_positive_definite(n):
    A = make_spd_matrix(n)
    assert np.allclose(A, A.T)
    assert np.all(np.linalg.eigvalsh(A) > 0)


def test_init_cholesky_and_lu_share_matrix():
    assert np.array_equal(init_cholesky(6), init_lu(6))


@pytest.mark.parametrize("n", [3, 8])
def test_cholesky_recovers_factor(n):
    A = init_cholesky(n)
    result = kernel_cholesky(A)
    assert np.allclose(np.tril(result), _unit_lower(n))
    # the strict upper triangle is untouched
    assert np.array_equal(np.triu(result, 1), np.triu(A, 1))


def test_cholesky_reconstructs_input():
    A = make_spd_matrix(7)
    L = np.tril(kernel_cholesky(A))
    assert np.allclose(L @ L.T, A)


def test_cholesky_does_not_modify_input():
    A = make_spd_matrix(4)
    copy = A.copy()
    kernel_cholesky(A)
    assert np.array_equal(A, copy)


def test_cholesky_rejects_non_square():
    with pytest.raises(ValueError):
        kernel_cholesky(np.ones((2, 3)))


def test_print_cholesky_lower_only():
    buf = io.StringIO()
    print_cholesky(np.array([[4.0, 9.0], [2.0, 3.0]]), buf)
    assert buf.getvalue() == "begin dump: A\n4.00 2.00 3.00 \nend dump: A\n"


@pytest.mark.parametrize("n", [4, 10])
def test_lu_reconstructs_input(n):
    A = init_lu(n)
    LU = kernel_lu(A)
    L = np.tril(LU, -1) + np.eye(n)
    U = np.triu(LU)
    assert np.allclose(L @ U, A)
    assert np.allclose(L, _unit_lower(n))


def test_lu_rejects_non_square():
    with pytest.raises(ValueError):
        kernel_lu([[1.0, 2.0]])


def test_print_lu_counts_values():
    buf = io.StringIO()
    print_lu(make_spd_matrix(5), buf)
    body = buf.getvalue().split("\n", 1)[1].rsplit("end dump", 1)[0]
    assert len(body.split()) == 25


def test_init_ludcmp_right_hand_side():
    A, b = init_ludcmp(4)
    assert np.allclose(A, make_spd_matrix(4))
    assert b[-1] == pytest.approx(4.5)


@pytest.mark.parametrize("n", [1, 6, 12])
def test_ludcmp_solves_system(n):
    A, b = init_ludcmp(n)
    x = kernel_ludcmp(A, b)
    assert np.allclose(A @ x, b)


def test_ludcmp_rejects_bad_vector():
    with pytest.raises(ValueError):
        kernel_ludcmp(make_spd_matrix(3), [1.0, 2.0])


def test_print_ludcmp_header():
    buf = io.StringIO()
    print_ludcmp(np.array([1.0, 2.5]), buf)
    assert buf.getvalue() == "begin dump: x\n1.00 2.50 \nend dump: x\n"


def test_run_cholesky_mini():
    buf = io.StringIO()
    elapsed = run_cholesky("mini", buf)
    text = buf.getvalue()
    assert elapsed >= 0.0
    assert text.startswith("begin dump: A")
    body = text.split("\n", 1)[1].rsplit("end dump", 1)[0]
    assert len(body.split()) == 40 * 41 // 2


def test_run_lu_mini():
    buf = io.StringIO()
    run_lu("mini", buf)
    body = buf.getvalue().split("\n", 1)[1].rsplit("end dump", 1)[0]
    assert len(body.split()) == 40 * 40


def test_run_ludcmp_mini():
    buf = io.StringIO()
    run_ludcmp("MINI_DATASET", buf)
    text = buf.getvalue()
    assert text.startswith("begin dump: x")
    assert text.endswith("end dump: x\n")