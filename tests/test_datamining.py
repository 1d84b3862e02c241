import io

import numpy as np
import pytest

from polykernels.datamining import (
    init_correlation,
    init_covariance,
    kernel_correlation,
    kernel_covariance,
    print_correlation,
    print_covariance,
    run_correlation,
    run_covariance,
)


def _dump_values(text, name):
    body = text.split(f"begin dump: {name}", 1)[1].split(f"end dump: {name}", 1)[0]
    return [float(token) for token in body.split()]


def test_init_correlation_shape_and_value():
    float_n, data = init_correlation(4, 3)
    assert float_n == 3.0
    assert data.shape == (3, 4)
    assert data[2, 3] == pytest.approx(3.5)
    assert list(data[:, 0]) == [0.0, 1.0, 2.0]


def test_correlation_matches_corrcoef():
    float_n, data = init_correlation(5, 8)
    corr = kernel_correlation(float_n, data)
    assert np.allclose(corr, np.corrcoef(data, rowvar=False))


def test_correlation_symmetric_unit_diagonal():
    float_n, data = init_correlation(6, 9)
    corr = kernel_correlation(float_n, data)
    assert np.array_equal(corr, corr.T)
    assert np.all(np.diag(corr) == 1.0)
    assert np.all(np.abs(corr) <= 1.0 + 1e-9)


def test_correlation_constant_column():
    data = np.array([[1.0, 7.0], [2.0, 7.0], [4.0, 7.0]])
    corr = kernel_correlation(3.0, data)
    assert corr[0, 1] == pytest.approx(0.0)
    assert corr[1, 0] == pytest.approx(0.0)
    assert corr[1, 1] == 1.0


def test_correlation_leaves_input_unchanged():
    float_n, data = init_correlation(4, 5)
    before = data.copy()
    kernel_correlation(float_n, data)
    assert np.array_equal(data, before)


def test_correlation_rejects_empty():
    with pytest.raises(ValueError):
        kernel_correlation(3.0, np.empty((3, 0)))


def test_init_covariance_first_row_and_column_zero():
    float_n, data = init_covariance(3, 4)
    assert float_n == 4.0
    assert data.shape == (4, 3)
    assert np.all(data[0] == 0.0)
    assert np.all(data[:, 0] == 0.0)


def test_covariance_matches_numpy():
    float_n, data = init_covariance(5, 7)
    cov = kernel_covariance(float_n, data)
    assert np.allclose(cov, np.cov(data, rowvar=False))
    assert np.array_equal(cov, cov.T)


def test_covariance_rejects_one_dimensional():
    with pytest.raises(ValueError):
        kernel_covariance(3.0, [1.0, 2.0, 3.0])


def test_print_correlation_counts():
    corr = kernel_correlation(*init_correlation(5, 6))
    out = io.StringIO()
    print_correlation(corr, out)
    values = _dump_values(out.getvalue(), "corr")
    assert len(values) == 25
    assert np.allclose(values, corr.ravel(), atol=0.005)


def test_print_covariance_line_lengths():
    cov = kernel_covariance(*init_covariance(5, 6))
    out = io.StringIO()
    print_covariance(cov, out)
    lines = out.getvalue().splitlines()
    assert [len(line.split()) for line in lines[1:-1]] == [20, 5]


def test_run_correlation_mini():
    out = io.StringIO()
    elapsed = run_correlation("mini", out)
    assert elapsed >= 0.0
    assert len(_dump_values(out.getvalue(), "corr")) == 28 * 28


def test_run_covariance_mini():
    out = io.StringIO()
    run_covariance("MINI_DATASET", out)
    assert len(_dump_values(out.getvalue(), "cov")) == 28 * 28


def test_run_unknown_dataset():
    with pytest.raises(ValueError):
        run_covariance("gigantic", io.StringIO())