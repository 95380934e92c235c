"""Core data types, solver defaults and tuning constants."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Sequence

import numpy as np

VERSION = "3.2.2"

# Default solver settings.
MAX_ITERS = 100000
EPS_REL = 1e-4
EPS_ABS = 1e-4
EPS_INFEAS = 1e-7
ALPHA = 1.5
RHO_X = 1e-6
SCALE = 0.1
VERBOSE = True
NORMALIZE = True
WARM_START = False
ACCELERATION_LOOKBACK = 10
ACCELERATION_INTERVAL = 10
ADAPTIVE_SCALE = True
TIME_LIMIT_SECS = 0.0

# Iterations during which the problem is treated as feasible.
FEASIBLE_ITERS = 1
# Minimum iterations between heuristic residual rescalings.
RESCALING_MIN_ITERS = 100

DIV_EPS_TOL = 1e-18

PRINT_INTERVAL = 250
CONVERGED_INTERVAL = 25

# Iterates are kept at L2 norm ITERATE_NORM * sqrt(n + m + 1).
ITERATE_NORM = 1.0
# Scales tau in the linear system update.
TAU_FACTOR = 10.0

# Anderson acceleration.
AA_RELAXATION = 1.0
AA_REGULARIZATION_TYPE_1 = 1e-6
AA_REGULARIZATION_TYPE_2 = 1e-10
AA_SAFEGUARD_FACTOR = 1.0
AA_MAX_WEIGHT_NORM = 1e10

# Dual scale updating.
MAX_SCALE_VALUE = 1e6
MIN_SCALE_VALUE = 1e-6

# Conjugate gradient tolerances (indirect solver only).
CG_BEST_TOL = 1e-12
CG_TOL_FACTOR = 0.2
CG_RATE = 1.5


def version() -> str:
    """Return the solver version string."""
    return VERSION


def safe_div_pos(x: float, y: float) -> float:
    """Divide ``x`` by a non-negative ``y``, clamping tiny divisors."""
    if y < DIV_EPS_TOL:
        return x / DIV_EPS_TOL
    return x / y


class ExitStatus(IntEnum):
    """Exit flag of a solve."""

    INFEASIBLE_INACCURATE = -7
    UNBOUNDED_INACCURATE = -6
    SIGINT = -5
    FAILED = -4
    INDETERMINATE = -3
    INFEASIBLE = -2  # primal infeasible, dual unbounded
    UNBOUNDED = -1  # primal unbounded, dual infeasible
    UNFINISHED = 0  # placeholder, never returned
    SOLVED = 1
    SOLVED_INACCURATE = 2


@dataclass
class Settings:
    """Solver settings."""

    normalize: bool = NORMALIZE
    scale: float = SCALE
    adaptive_scale: bool = ADAPTIVE_SCALE
    rho_x: float = RHO_X
    max_iters: int = MAX_ITERS
    eps_abs: float = EPS_ABS
    eps_rel: float = EPS_REL
    eps_infeas: float = EPS_INFEAS
    alpha: float = ALPHA
    time_limit_secs: float = TIME_LIMIT_SECS
    verbose: bool = VERBOSE
    warm_start: bool = WARM_START
    acceleration_lookback: int = ACCELERATION_LOOKBACK
    acceleration_interval: int = ACCELERATION_INTERVAL
    write_data_filename: Optional[str] = None
    log_csv_filename: Optional[str] = None


def _float_array(values: Optional[Sequence[float]]) -> np.ndarray:
    if values is None:
        return np.zeros(0, dtype=float)
    return np.asarray(values, dtype=float).reshape(-1)


@dataclass
class Cone:
    """Cone description; rows of ``A`` follow this exact order."""

    z: int = 0
    l: int = 0
    bu: np.ndarray = field(default_factory=lambda: np.zeros(0))
    bl: np.ndarray = field(default_factory=lambda: np.zeros(0))
    bsize: int = 0
    q: list[int] = field(default_factory=list)
    s: list[int] = field(default_factory=list)
    ep: int = 0
    ed: int = 0
    p: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def __post_init__(self) -> None:
        self.bu = _float_array(self.bu)
        self.bl = _float_array(self.bl)
        self.p = _float_array(self.p)
        self.q = [int(v) for v in self.q]
        self.s = [int(v) for v in self.s]
        for name in ("z", "l", "bsize", "ep", "ed"):
            if getattr(self, name) < 0:
                raise ValueError(f"cone size {name} must be non-negative")
        if any(v < 0 for v in self.q) or any(v < 0 for v in self.s):
            raise ValueError("cone sizes must be non-negative")
        box_len = max(self.bsize - 1, 0)
        if len(self.bu) != box_len or len(self.bl) != box_len:
            raise ValueError(
                f"box bounds must have length {box_len}, "
                f"got {len(self.bu)} and {len(self.bl)}"
            )
        if np.any(np.abs(self.p) > 1.0):
            raise ValueError("power cone parameters must lie in [-1, 1]")

    @property
    def qsize(self) -> int:
        return len(self.q)

    @property
    def ssize(self) -> int:
        return len(self.s)

    @property
    def psize(self) -> int:
        return len(self.p)

    def total_rows(self) -> int:
        """Number of rows of ``A`` covered by this cone."""
        return (
            self.z
            + self.l
            + self.bsize
            + sum(self.q)
            + sum(d * (d + 1) // 2 for d in self.s)
            + 3 * (self.ep + self.ed + self.psize)
        )


@dataclass
class Solution:
    """Primal-dual solution or certificate of infeasibility."""

    x: Optional[np.ndarray] = None
    y: Optional[np.ndarray] = None
    s: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        for name in ("x", "y", "s"):
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, np.asarray(value, dtype=float).reshape(-1))


@dataclass
class SolveInfo:
    """Information about a finished solve."""

    iter: int = 0
    status: str = ""
    lin_sys_solver: str = ""
    status_val: ExitStatus = ExitStatus.UNFINISHED
    scale_updates: int = 0
    pobj: float = float("nan")
    dobj: float = float("nan")
    res_pri: float = float("nan")
    res_dual: float = float("nan")
    gap: float = float("nan")
    res_infeas: float = float("nan")
    res_unbdd_a: float = float("nan")
    res_unbdd_p: float = float("nan")
    setup_time: float = 0.0
    solve_time: float = 0.0
    scale: float = float("nan")
    comp_slack: float = float("nan")
    rejected_accel_steps: int = 0
    accepted_accel_steps: int = 0
    lin_sys_time: float = 0.0
    cone_time: float = 0.0
    accel_time: float = 0.0


@dataclass
class Scaling:
    """Normalization data: row scaling ``D`` and column scaling ``E``."""

    D: np.ndarray
    E: np.ndarray
    primal_scale: float = 1.0
    dual_scale: float = 1.0

    def __post_init__(self) -> None:
        self.D = _float_array(self.D)
        self.E = _float_array(self.E)

    @property
    def m(self) -> int:
        return len(self.D)

    @property
    def n(self) -> int:
        return len(self.E)