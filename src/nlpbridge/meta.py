"""
NLP Model Metadata

Defines the problem metadata record attached to every NLP model:
- Problem sizes and initial point
- Variable and constraint bounds
- Objective sense and linearity information
- Variable category counts (AMPL ordering convention)

The category counts partition the variables into ordered blocks:

    nlvb   nonlinear in both objective and constraints (nlvbi integer)
    nlvc   nonlinear in constraints, includes nlvb      (nlvci integer)
    nlvo   nonlinear in objective, includes nlvc        (nlvoi integer)
    nwv    arc (network) variables
    (linear continuous variables)
    nbv    binary variables
    niv    integer variables
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import numpy as np


def _vector(value, size: int, fill: float, name: str) -> np.ndarray:
    if value is None:
        return np.full(size, fill, dtype=np.float64)
    arr = np.asarray(value, dtype=np.float64).flatten()
    if len(arr) != size:
        raise ValueError(f"{name} has length {len(arr)}, expected {size}")
    return arr


@dataclass
class NLPModelMeta:
    """
    Metadata of a nonlinear program

        min/max  f(x)
        s.t.     lcon <= c(x) <= ucon
                 lvar <=  x   <= uvar

    Attributes:
        nvar: Number of variables
        ncon: Number of general constraints
        x0: Initial point (default: zeros)
        y0: Initial multipliers (default: zeros)
        lvar, uvar: Variable bounds (default: -inf / +inf)
        lcon, ucon: Constraint bounds (default: -inf / +inf)
        minimize: Objective sense
        nlo: Number of nonlinear objectives (0 means linear objective)
        lin: Indices of linear constraints
        nnzj, nnzh: Jacobian / Hessian nonzeros (-1 when unknown)
        nlvb ... niv: Variable category counts
    """
    nvar: int
    ncon: int = 0
    x0: Optional[np.ndarray] = None
    y0: Optional[np.ndarray] = None
    lvar: Optional[np.ndarray] = None
    uvar: Optional[np.ndarray] = None
    lcon: Optional[np.ndarray] = None
    ucon: Optional[np.ndarray] = None
    minimize: bool = True
    nlo: int = 1
    lin: List[int] = field(default_factory=list)
    nnzj: int = -1
    nnzh: int = -1
    name: str = "Generic"

    # Category counts; None means "all variables" for the nonlinear blocks
    nlvb: Optional[int] = None
    nlvbi: int = 0
    nlvc: Optional[int] = None
    nlvci: int = 0
    nlvo: Optional[int] = None
    nlvoi: int = 0
    nwv: int = 0
    nbv: int = 0
    niv: int = 0

    def __post_init__(self):
        if self.nvar < 0 or self.ncon < 0:
            raise ValueError("nvar and ncon must be non-negative")

        self.x0 = _vector(self.x0, self.nvar, 0.0, "x0")
        self.y0 = _vector(self.y0, self.ncon, 0.0, "y0")
        self.lvar = _vector(self.lvar, self.nvar, -np.inf, "lvar")
        self.uvar = _vector(self.uvar, self.nvar, np.inf, "uvar")
        self.lcon = _vector(self.lcon, self.ncon, -np.inf, "lcon")
        self.ucon = _vector(self.ucon, self.ncon, np.inf, "ucon")

        if self.nlvb is None:
            self.nlvb = self.nvar
        if self.nlvc is None:
            self.nlvc = self.nvar
        if self.nlvo is None:
            self.nlvo = self.nvar

        self.lin = sorted(int(j) for j in self.lin)

    @property
    def nln(self) -> List[int]:
        """Indices of nonlinear constraints."""
        linear = set(self.lin)
        return [j for j in range(self.ncon) if j not in linear]

    @property
    def ifix(self) -> List[int]:
        return _fixed(self.lvar, self.uvar)

    @property
    def ilow(self) -> List[int]:
        return _lower(self.lvar, self.uvar)

    @property
    def iupp(self) -> List[int]:
        return _upper(self.lvar, self.uvar)

    @property
    def irng(self) -> List[int]:
        return _range(self.lvar, self.uvar)

    @property
    def ifree(self) -> List[int]:
        return _free(self.lvar, self.uvar)

    @property
    def jfix(self) -> List[int]:
        return _fixed(self.lcon, self.ucon)

    @property
    def jlow(self) -> List[int]:
        return _lower(self.lcon, self.ucon)

    @property
    def jupp(self) -> List[int]:
        return _upper(self.lcon, self.ucon)

    @property
    def jrng(self) -> List[int]:
        return _range(self.lcon, self.ucon)

    @property
    def jfree(self) -> List[int]:
        return _free(self.lcon, self.ucon)

    def to_canonical(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "nvar": self.nvar,
            "ncon": self.ncon,
            "minimize": self.minimize,
            "nlo": self.nlo,
            "lin": [int(j) for j in self.lin],
            "counts": {
                "nlvb": self.nlvb,
                "nlvbi": self.nlvbi,
                "nlvc": self.nlvc,
                "nlvci": self.nlvci,
                "nlvo": self.nlvo,
                "nlvoi": self.nlvoi,
                "nwv": self.nwv,
                "nbv": self.nbv,
                "niv": self.niv,
            },
        }


def _fixed(lower: np.ndarray, upper: np.ndarray) -> List[int]:
    return np.where(lower == upper)[0].tolist()


def _lower(lower: np.ndarray, upper: np.ndarray) -> List[int]:
    return np.where(np.isfinite(lower) & ~np.isfinite(upper))[0].tolist()


def _upper(lower: np.ndarray, upper: np.ndarray) -> List[int]:
    return np.where(~np.isfinite(lower) & np.isfinite(upper))[0].tolist()


def _range(lower: np.ndarray, upper: np.ndarray) -> List[int]:
    both = np.isfinite(lower) & np.isfinite(upper) & (lower != upper)
    return np.where(both)[0].tolist()


def _free(lower: np.ndarray, upper: np.ndarray) -> List[int]:
    return np.where(~np.isfinite(lower) & ~np.isfinite(upper))[0].tolist()
