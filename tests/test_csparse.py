import numpy as np
import pytest

from quadcone.csparse import CscMatrix, KktMatrix, compress, cumsum, form_kkt


def qp_data():
    P = CscMatrix(2, 2, [0, 1, 3], [0, 0, 1], [3.0, -1.0, 2.0])
    A = CscMatrix(3, 2, [0, 2, 4], [0, 1, 0, 2], [-1.0, 1.0, 1.0, 1.0])
    return A, P


def full_kkt(A, P, diag_r):
    n, m = A.n, A.m
    top = np.diag(diag_r[:n])
    if P is not None:
        up = P.to_dense()
        top = top + np.triu(up) + np.triu(up, 1).T
    a = A.to_dense()
    return np.block([[top, a.T], [a, -np.diag(diag_r[n:])]])


def test_dense_round_trip():
    dense = np.array([[1.0, 0.0, 2.0], [0.0, 0.0, -3.0]])
    mat = CscMatrix.from_dense(dense)
    assert mat.nnz == 3
    assert np.array_equal(mat.to_dense(), dense)


def test_transpose_matches_dense():
    dense = np.array([[1.0, 0.0, 2.0], [4.0, 0.0, -3.0]])
    t = CscMatrix.from_dense(dense).transpose()
    assert t.shape == (3, 2)
    assert np.array_equal(t.to_dense(), dense.T)
    for j in range(t.n):
        col = t.indices[t.indptr[j] : t.indptr[j + 1]]
        assert list(col) == sorted(col)


def test_matvec_and_rmatvec():
    A, _ = qp_data()
    dense = A.to_dense()
    x = np.array([0.5, -2.0])
    y = np.array([1.0, 2.0, 3.0])
    assert np.allclose(A.matvec(x), dense @ x)
    assert np.allclose(A.rmatvec(y), dense.T @ y)


def test_matvec_wrong_length():
    A, _ = qp_data()
    with pytest.raises(ValueError):
        A.matvec([1.0, 2.0, 3.0])


def test_sym_upper_matvec():
    _, P = qp_data()
    full = np.array([[3.0, -1.0], [-1.0, 2.0]])
    x = np.array([1.5, -0.5])
    assert np.allclose(P.sym_upper_matvec(x), full @ x)


def test_cumsum_invariants():
    counts = [2, 0, 3, 1]
    ptr = cumsum(counts)
    assert ptr[0] == 0
    assert list(np.diff(ptr)) == counts
    assert ptr[-1] == sum(counts)


def test_compress_and_mapping():
    rows = [2, 0, 1, 0]
    cols = [1, 0, 1, 1]
    values = [5.0, 6.0, 7.0, 8.0]
    mat, mapping = compress(3, 2, rows, cols, values)
    expected = np.zeros((3, 2))
    np.add.at(expected, (rows, cols), values)
    assert np.array_equal(mat.to_dense(), expected)
    assert np.array_equal(mat.data[mapping], values)
    assert np.array_equal(mat.indices[mapping], rows)


def test_compress_rejects_out_of_range():
    with pytest.raises(ValueError):
        compress(2, 2, [0, 2], [0, 1], [1.0, 1.0])


def test_invalid_indptr():
    with pytest.raises(ValueError):
        CscMatrix(2, 2, [0, 2, 1], [0, 1], [1.0, 1.0])


@pytest.mark.parametrize("upper", [True, False])
def test_form_kkt_with_p(upper):
    A, P = qp_data()
    diag_r = np.array([0.1, 0.2, 1.0, 2.0, 3.0])
    kkt = form_kkt(A, P, diag_r, upper)
    assert isinstance(kkt, KktMatrix)
    full = full_kkt(A, P, diag_r)
    expected = np.triu(full) if upper else np.tril(full)
    assert np.allclose(kkt.matrix.to_dense(), expected)
    assert np.allclose(kkt.diag_p, [3.0, 2.0])


def test_form_kkt_diag_indices_point_to_diagonal():
    A, P = qp_data()
    diag_r = np.array([0.1, 0.2, 1.0, 2.0, 3.0])
    kkt = form_kkt(A, P, diag_r, True)
    mat = kkt.matrix
    cols = np.repeat(np.arange(mat.n), np.diff(mat.indptr))
    idx = kkt.diag_r_idxs
    assert np.array_equal(mat.indices[idx], np.arange(5))
    assert np.array_equal(cols[idx], np.arange(5))
    assert np.allclose(mat.data[idx[:2]], kkt.diag_p + diag_r[:2])
    assert np.allclose(mat.data[idx[2:]], -diag_r[2:])


def test_form_kkt_without_p_and_missing_diagonal():
    A, _ = qp_data()
    diag_r = np.ones(5)
    kkt = form_kkt(A, None, diag_r, True)
    assert np.allclose(kkt.matrix.to_dense(), np.triu(full_kkt(A, None, diag_r)))
    assert np.array_equal(kkt.diag_p, np.zeros(2))
    strict = CscMatrix(2, 2, [0, 0, 1], [0], [4.0])
    kkt2 = form_kkt(A, strict, diag_r, True)
    assert np.allclose(kkt2.matrix.to_dense(), np.triu(full_kkt(A, strict, diag_r)))


def test_form_kkt_bad_diag_length():
    A, P = qp_data()
    with pytest.raises(ValueError):
        form_kkt(A, P, np.ones(4), True)