"""
CasADi NLP Model

Builds an AbstractNLPModel from CasADi symbolic expressions. Gradient,
sparse Jacobian and lower-triangular Lagrangian Hessian are generated by
CasADi automatic differentiation.
"""

from typing import Any, Dict, Optional, Sequence, Tuple
import numpy as np

import casadi as ca

from ..meta import NLPModelMeta
from ..model import AbstractNLPModel


def _triplet(sp: 'ca.Sparsity') -> Tuple[np.ndarray, np.ndarray]:
    rows, cols = sp.get_triplet()
    return np.asarray(rows, dtype=np.int64), np.asarray(cols, dtype=np.int64)


def _flat(value) -> np.ndarray:
    return np.asarray(ca.DM(value).full(), dtype=np.float64).flatten()


def _nonzeros(value) -> np.ndarray:
    return np.asarray(ca.DM(value).nonzeros(), dtype=np.float64)


def _column(value) -> "ca.DM":
    return ca.DM(np.asarray(value, dtype=np.float64).reshape(-1, 1))


class CasADiNLPModel(AbstractNLPModel):
    """
    NLP model defined by CasADi symbols.

        min/max  f(x)
        s.t.     lbg <= g(x) <= ubg
                 lbx <=  x   <= ubx

    Args:
        x: Decision variables (SX or MX column vector)
        f: Objective expression
        g: Constraint expressions (optional)
        lbx, ubx, lbg, ubg: Bounds (default: unbounded)
        x0: Initial point (default: zeros)
        discrete: Per-variable integrality flags. Discrete variables must
                  come last; they form the integer part of the nonlinear
                  variable block.
        minimize: Objective sense
        name: Problem name
    """

    def __init__(
        self,
        x,
        f,
        g=None,
        lbx: Optional[Sequence[float]] = None,
        ubx: Optional[Sequence[float]] = None,
        lbg: Optional[Sequence[float]] = None,
        ubg: Optional[Sequence[float]] = None,
        x0: Optional[Sequence[float]] = None,
        discrete: Optional[Sequence[bool]] = None,
        minimize: bool = True,
        name: str = "CasADiNLP",
    ):
        sym = ca.MX.sym if isinstance(x, ca.MX) else ca.SX.sym
        if g is None:
            g = sym('g', 0)

        self.x_sym = x
        self.f_sym = f
        self.g_sym = g

        nvar = x.numel()
        ncon = g.numel()
        self.discrete = [bool(d) for d in discrete] if discrete is not None else [False] * nvar
        nint = self._check_discrete(nvar)

        self._build_functions(sym, nvar, ncon)

        meta = NLPModelMeta(
            nvar=nvar,
            ncon=ncon,
            x0=x0,
            lvar=lbx,
            uvar=ubx,
            lcon=lbg,
            ucon=ubg,
            minimize=minimize,
            nlo=0 if ca.is_linear(f, x) else 1,
            lin=[j for j in range(ncon) if ca.is_linear(g[j], x)],
            nnzj=len(self._jrows),
            nnzh=len(self._hrows),
            name=name,
            nlvbi=nint,
        )
        super().__init__(meta)

    def _check_discrete(self, nvar: int) -> int:
        if len(self.discrete) != nvar:
            raise ValueError(
                f"discrete has length {len(self.discrete)}, expected {nvar}")
        nint = sum(self.discrete)
        if any(self.discrete[:nvar - nint]):
            raise ValueError("Discrete variables must be ordered last")
        return nint

    def _build_functions(self, sym, nvar: int, ncon: int):
        """Build CasADi Functions for all evaluations."""
        x, f, g = self.x_sym, self.f_sym, self.g_sym

        y = sym('y', ncon)
        sigma = sym('sigma')
        v = sym('v', nvar)
        w = sym('w', ncon)

        lagrangian = sigma * f
        if ncon > 0:
            lagrangian = lagrangian + ca.dot(y, g)

        hess_L = ca.tril(ca.hessian(lagrangian, x)[0])

        self._f = ca.Function('f', [x], [f])
        self._grad_f = ca.Function('grad_f', [x], [ca.gradient(f, x)])
        self._hess_L = ca.Function('hess_L', [x, y, sigma], [hess_L])
        self._hprod = ca.Function(
            'hprod', [x, y, sigma, v],
            [ca.jtimes(ca.gradient(lagrangian, x), x, v)])
        self._hrows, self._hcols = _triplet(self._hess_L.sparsity_out(0))

        if ncon > 0:
            self._g = ca.Function('g', [x], [g])
            self._jac_g = ca.Function('jac_g', [x], [ca.jacobian(g, x)])
            self._jprod = ca.Function('jprod', [x, v], [ca.jtimes(g, x, v)])
            self._jtprod = ca.Function('jtprod', [x, w], [ca.jtimes(g, x, w, True)])
            self._jrows, self._jcols = _triplet(self._jac_g.sparsity_out(0))
        else:
            self._jrows = np.zeros(0, dtype=np.int64)
            self._jcols = np.zeros(0, dtype=np.int64)

    def obj(self, x: np.ndarray) -> float:
        return float(self._f(x))

    def grad(self, x: np.ndarray) -> np.ndarray:
        return _flat(self._grad_f(x))

    def cons(self, x: np.ndarray) -> np.ndarray:
        if self.meta.ncon == 0:
            return np.zeros(0)
        return _flat(self._g(x))

    def jac_structure(self) -> Tuple[np.ndarray, np.ndarray]:
        return self._jrows, self._jcols

    def jac_coord(self, x: np.ndarray) -> np.ndarray:
        if len(self._jrows) == 0:
            return np.zeros(0)
        return _nonzeros(self._jac_g(x))

    def hess_structure(self) -> Tuple[np.ndarray, np.ndarray]:
        return self._hrows, self._hcols

    def hess_coord(self, x: np.ndarray, y: np.ndarray,
                   obj_weight: float = 1.0) -> np.ndarray:
        if len(self._hrows) == 0:
            return np.zeros(0)
        return _nonzeros(self._hess_L(x, _column(y), obj_weight))

    def jprod(self, x: np.ndarray, v: np.ndarray) -> np.ndarray:
        if self.meta.ncon == 0:
            return np.zeros(0)
        return _flat(self._jprod(x, v))

    def jtprod(self, x: np.ndarray, w: np.ndarray) -> np.ndarray:
        if self.meta.ncon == 0:
            return np.zeros(self.meta.nvar)
        return _flat(self._jtprod(x, w))

    def hprod(self, x: np.ndarray, y: np.ndarray, v: np.ndarray,
              obj_weight: float = 1.0) -> np.ndarray:
        return _flat(self._hprod(x, _column(y), obj_weight, v))

    def get_nlp_dict(self) -> Dict[str, Any]:
        """Get NLP dictionary for CasADi nlpsol."""
        return {
            'x': self.x_sym,
            'f': self.f_sym,
            'g': self.g_sym,
        }
