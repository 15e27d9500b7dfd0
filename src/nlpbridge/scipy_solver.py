"""
SciPy Solver Backend

Solves continuous problems loaded through the generic solver interface with
scipy.optimize.minimize. All function, derivative and sparsity information
comes from the evaluator callbacks.

Supported methods:
- trust-constr: sparse Jacobian and exact Lagrangian Hessian
- SLSQP: dense Jacobian, constraints split by bound type
"""

from dataclasses import dataclass
import logging
import time
from typing import Any, Dict, List, Optional
import numpy as np
from scipy import optimize, sparse

from .exceptions import SolverCapabilityError
from .mathprog import (
    AbstractNonlinearModel,
    AbstractSolver,
    Feature,
    Sense,
    SolveStatus,
    SolverResult,
)
from .model import symmetric_coo
from .vartypes import has_discrete

logger = logging.getLogger(__name__)


METHODS = ('trust-constr', 'SLSQP')


@dataclass
class _Callbacks:
    """Objective and constraint callables in scipy's conventions."""
    fun: Any
    grad: Any
    hess: Any
    cons: Any
    jac: Any
    cons_hess: Any


class ScipyNonlinearModel(AbstractNonlinearModel):
    """Nonlinear model solved by scipy.optimize.minimize."""

    # Fixed options per method for reproducible runs
    DEFAULT_OPTIONS = {
        'trust-constr': {
            'maxiter': 3000,
            'gtol': 1e-8,
            'xtol': 1e-10,
            'verbose': 0,
        },
        'SLSQP': {
            'maxiter': 3000,
            'ftol': 1e-10,
            'disp': False,
        },
    }

    # Constraint violation above which a converged run is reported infeasible
    FEASIBILITY_TOL = 1e-6

    def __init__(self, method: str = 'trust-constr',
                 options: Optional[Dict[str, Any]] = None):
        super().__init__()
        if method not in METHODS:
            raise ValueError(f"Unknown method {method!r}, expected one of {METHODS}")
        self.method = method
        self.options = {**self.DEFAULT_OPTIONS[method], **(options or {})}

    def requested_features(self) -> List[Feature]:
        if self.method == 'trust-constr':
            return [Feature.GRAD, Feature.JAC, Feature.HESS]
        return [Feature.GRAD, Feature.JAC]

    def optimize(self) -> SolverResult:
        """
        Solve the loaded problem from the warm start.

        Returns:
            SolverResult, also stored in self.result

        Raises:
            SolverCapabilityError: if integer or binary variables were set
        """
        self._require_loaded()
        if self.vartypes is not None and has_discrete(self.vartypes):
            raise SolverCapabilityError(
                "scipy backend only solves continuous problems")

        start_time = time.time()
        try:
            self.result = self._solve()
        except (ValueError, ArithmeticError, np.linalg.LinAlgError) as e:
            logger.warning("scipy %s failed: %s", self.method, e)
            self.result = SolverResult.failure(
                self.x0, self.ncon, time.time() - start_time, str(e))
        self.result.time = time.time() - start_time

        logger.info("scipy %s finished: %s (f=%g, %d iterations)",
                    self.method, self.result.status.value,
                    self.result.f, self.result.iterations)
        return self.result

    def _callbacks(self) -> _Callbacks:
        ev = self.evaluator
        n, m = self.nvar, self.ncon
        sign = 1.0 if self.sense == Sense.MIN else -1.0

        jrows, jcols = ev.jac_structure()
        hrows, hcols = ev.hesslag_structure()
        no_mult = np.zeros(m)

        def fun(x):
            return sign * ev.eval_f(x)

        def grad(x):
            return sign * ev.eval_grad_f(np.zeros(n), x)

        def hess(x):
            vals = ev.eval_hesslag(np.zeros(len(hrows)), x, sign, no_mult)
            return symmetric_coo(hrows, hcols, vals, n).tocsr()

        def cons(x):
            return ev.eval_g(np.zeros(m), x)

        def jac(x):
            vals = ev.eval_jac_g(np.zeros(len(jrows)), x)
            return sparse.coo_matrix((vals, (jrows, jcols)), shape=(m, n)).tocsr()

        def cons_hess(x, v):
            vals = ev.eval_hesslag(np.zeros(len(hrows)), x, 0.0, v)
            return symmetric_coo(hrows, hcols, vals, n).tocsr()

        return _Callbacks(fun, grad, hess, cons, jac, cons_hess)

    def _solve(self) -> SolverResult:
        cb = self._callbacks()
        if self.method == 'trust-constr':
            res = self._minimize_trust_constr(cb)
        else:
            res = self._minimize_slsqp(cb)

        x = np.asarray(res.x, dtype=np.float64)
        g = cb.cons(x) if self.ncon else np.zeros(0)
        lam_g, lam_x = self._multipliers(res)
        return SolverResult(
            x=x,
            f=self.evaluator.eval_f(x),
            g=g,
            lam_g=lam_g,
            lam_x=lam_x,
            status=self._status(res, g),
            iterations=int(getattr(res, 'nit', 0)),
            time=0.0,
            return_status=str(res.message),
        )

    def _has_finite_bounds(self) -> bool:
        return bool(np.any(np.isfinite(self.lvar)) or np.any(np.isfinite(self.uvar)))

    def _minimize_trust_constr(self, cb: _Callbacks):
        constraints = []
        if self.ncon:
            constraints.append(optimize.NonlinearConstraint(
                cb.cons, self.lcon, self.ucon, jac=cb.jac, hess=cb.cons_hess))
        bounds = optimize.Bounds(self.lvar, self.uvar) if self._has_finite_bounds() else None
        return optimize.minimize(
            cb.fun, self.x0, method='trust-constr', jac=cb.grad, hess=cb.hess,
            bounds=bounds, constraints=constraints, options=self.options)

    def _minimize_slsqp(self, cb: _Callbacks):
        constraints = []
        for kind, idx, target, scale in self._slsqp_blocks():
            constraints.append({
                'type': kind,
                'fun': lambda x, idx=idx, t=target, s=scale: s * (cb.cons(x)[idx] - t),
                'jac': lambda x, idx=idx, s=scale: s * cb.jac(x).toarray()[idx],
            })
        bounds = [
            (lo if np.isfinite(lo) else None, up if np.isfinite(up) else None)
            for lo, up in zip(self.lvar, self.uvar)
        ]
        return optimize.minimize(
            cb.fun, self.x0, method='SLSQP', jac=cb.grad,
            bounds=bounds, constraints=constraints, options=self.options)

    def _slsqp_blocks(self):
        """(type, indices, target, scale) blocks of lcon <= c(x) <= ucon."""
        lcon, ucon = self.lcon, self.ucon
        eq = np.where(lcon == ucon)[0]
        lower = np.where(np.isfinite(lcon) & (lcon != ucon))[0]
        upper = np.where(np.isfinite(ucon) & (lcon != ucon))[0]
        blocks = []
        if len(eq):
            blocks.append(('eq', eq, lcon[eq], 1.0))
        if len(lower):
            blocks.append(('ineq', lower, lcon[lower], 1.0))
        if len(upper):
            blocks.append(('ineq', upper, ucon[upper], -1.0))
        return blocks

    def _multipliers(self, res):
        lam_g = np.zeros(self.ncon)
        lam_x = np.zeros(self.nvar)
        v = getattr(res, 'v', None)
        if self.method == 'trust-constr' and v:
            if self.ncon:
                lam_g = np.asarray(v[0], dtype=np.float64)
            if self._has_finite_bounds():
                lam_x = np.asarray(v[-1], dtype=np.float64)
        if self.sense == Sense.MAX:
            lam_g, lam_x = -lam_g, -lam_x
        return lam_g, lam_x

    def _status(self, res, g: np.ndarray) -> SolveStatus:
        if res.success:
            violation = 0.0
            if self.ncon:
                violation = float(np.max(np.maximum(
                    np.maximum(self.lcon - g, g - self.ucon), 0.0)))
            if violation > self.FEASIBILITY_TOL:
                return SolveStatus.INFEASIBLE
            return SolveStatus.OPTIMAL
        message = str(res.message).lower()
        if 'iteration' in message or 'maximum' in message:
            return SolveStatus.USER_LIMIT
        if 'infeasible' in message or 'incompatible' in message:
            return SolveStatus.INFEASIBLE
        return SolveStatus.ERROR


class ScipySolver(AbstractSolver):
    """
    Solver factory for scipy.optimize.

    Args:
        method: 'trust-constr' (default) or 'SLSQP'
        options: Overrides of the method's default options
    """

    def __init__(self, method: str = 'trust-constr',
                 options: Optional[Dict[str, Any]] = None):
        if method not in METHODS:
            raise ValueError(f"Unknown method {method!r}, expected one of {METHODS}")
        self.method = method
        self.options = options

    def nonlinear_model(self) -> ScipyNonlinearModel:
        return ScipyNonlinearModel(self.method, self.options)
