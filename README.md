# quadcone

Core pieces of a splitting solver for quadratic cone programs:

    minimize    (1/2) x' P x + c' x
    subject to  A x + s = b,  s in K

The package provides the problem and settings types, dense vector helpers,
compressed sparse column matrices, assembly of the quasi-definite KKT matrix

    [ R_x + P    A'  ]
    [   A      -R_y  ]

and an iterative solver for that system, `IndirectSolver`, which runs
preconditioned conjugate gradient on the reduced system

    (R_x + P + A' R_y^{-1} A) x = r_x + A' R_y^{-1} r_y

and then recovers `y = R_y^{-1} (A x - r_y)`.

## Installation

    pip install quadcone

The only runtime dependency is numpy.

## Example

```python
import numpy as np

from quadcone.csparse import CscMatrix
from quadcone.indirect import IndirectSolver

# P is given by its upper triangle only; entries below the diagonal are ignored.
P = CscMatrix.from_dense(np.array([[3.0, -1.0], [0.0, 2.0]]))
A = CscMatrix.from_dense(np.array([[-1.0, 1.0], [1.0, 0.0], [0.0, 1.0]]))

n, m = 2, 3
diag_r = np.concatenate([np.full(n, 1e-6), np.full(m, 0.1)])
rhs = np.array([1.0, -1.0, 0.5, 0.2, -0.3])

solver = IndirectSolver(A, P, diag_r)
xy = solver.solve(rhs, None, 1e-10)   # returns [x; y] as one array
print(solver.method_name(), xy)       # "sparse-indirect-scs"
print(solver.tot_cg_its)              # conjugate gradient steps taken so far
```

Notes on `IndirectSolver`:

- `solve(b, warm_start, tol)` returns a new array; `b` is not modified.
  `warm_start` seeds the `x` part of the iteration and may have length `n` or
  `n + m` (only the first `n` entries are used).
- A tolerance `tol <= 0` issues a `RuntimeWarning`.
- A right-hand side whose largest absolute entry is at most `1e-12` gives a
  zero solution without iterating.
- Conjugate gradient runs for at most `10 * n` steps.
- `update_diag_r(diag_r)` replaces `R` and rebuilds the Jacobi preconditioner;
  `preconditioner()` returns a copy of its inverse diagonal.

## Other pieces

- `quadcone.types`: `Settings` (with the default tolerances and parameters),
  `Cone` with `total_rows()`, `Solution`, `SolveInfo`, `Scaling`, the
  `ExitStatus` enumeration, `version()` and `safe_div_pos(x, y)`.
- `quadcone.linalg`: `dot`, `norm_sq`, `norm_2`, `norm_inf`, `norm_diff`,
  `norm_inf_diff`, `mean` and `add_scaled` (which returns `a + scale * b`).
- `quadcone.csparse`: `CscMatrix` (`from_dense`, `to_dense`, `transpose`,
  `matvec` for `A @ x`, `rmatvec` for `A.T @ x`, `sym_upper_matvec`), `cumsum`,
  `compress` for triplet to CSC conversion (returning the matrix and the
  position mapping), and `form_kkt(A, P, diag_r, upper)`, which returns a
  `KktMatrix` holding the triangular matrix, the diagonal of `P`, and the
  positions of the `R` entries in the matrix data.
- `quadcone.linsys`: the abstract `LinearSystemSolver` interface
  (`solve`, `update_diag_r`, `method_name`) and `LinearSystemError`.

## What this package does not do

- It has no sparse direct (factorization-based) solver for the KKT system;
  `IndirectSolver` is the only implementation of `LinearSystemSolver`.
  `form_kkt` assembles the matrix such a solver would factor.
- It does not solve cone programs end to end: there are no cone projections,
  no data normalization, no acceleration and no main iteration loop. The
  `Settings`, `Cone`, `Solution` and `SolveInfo` types describe such a solve
  but nothing here runs one.
- There is no command-line tool and no reading or writing of problem files.

## Running the tests

    pip install "quadcone[test]"
    pytest