import numpy as np
import pytest

from quadcone.csparse import CscMatrix
from quadcone.indirect import IndirectSolver
from quadcone.linsys import LinearSystemError, LinearSystemSolver


class _Minimal(LinearSystemSolver):
    def solve(self, b, warm_start=None, tol=0.0):
        return self._rhs(b)

    def update_diag_r(self, diag_r):
        self.diag_r = self._diag_r(diag_r)

    def method_name(self):
        return "minimal"


def _concrete():
    A = CscMatrix.from_dense(np.array([[1.0, 0.0], [0.0, 2.0], [1.0, 1.0]]))
    return IndirectSolver(A, None, np.ones(5))


def test_abstract_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        LinearSystemSolver(1, 1)


def test_size_is_n_plus_m():
    solver = IndirectSolver(
        CscMatrix.from_dense(np.array([[1.0, 2.0], [3.0, 4.0], [0.0, 1.0]])),
        None,
        np.ones(5),
    )
    assert solver.size == solver.n + solver.m == 5


def test_solve_validates_rhs_length():
    solver = _concrete()
    with pytest.raises(ValueError):
        solver.solve(np.ones(2), None, 1e-10)


def test_rhs_is_copied():
    solver = _concrete()
    b = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
    out = solver.solve(b, None, 1e-10)
    out[0] = 99.0
    assert b.tolist() == [1.0, 2.0, 3.0, 4.0, 5.0]


def test_diag_r_validated_on_update():
    solver = _concrete()
    with pytest.raises(ValueError):
        solver.update_diag_r(np.ones(1))


def test_negative_dimensions_rejected():
    instance = object.__new__(_Minimal)
    with pytest.raises(ValueError):
        LinearSystemSolver.__init__(instance, -1, 2)


def test_error_is_runtime_error():
    err = LinearSystemError("singular")
    assert isinstance(err, RuntimeError)
    assert str(err) == "singular"