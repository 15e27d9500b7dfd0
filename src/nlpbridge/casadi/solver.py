"""
CasADi Solver Backend

Deterministic IPOPT / Bonmin solves through CasADi nlpsol with fixed
options for reproducible optimization. Continuous problems go to IPOPT;
problems with integer or binary variables set go to Bonmin.

CasADi solvers need the symbolic problem, so the loaded evaluator must
wrap a CasADiNLPModel.
"""

import logging
import time
from typing import Any, Dict, List, Optional
import numpy as np

import casadi as ca

from ..exceptions import SolverCapabilityError
from ..mathprog import (
    AbstractNonlinearModel,
    AbstractSolver,
    Feature,
    Sense,
    SolveStatus,
    SolverResult,
)
from ..vartypes import VarType, has_discrete

logger = logging.getLogger(__name__)


# Solver return statuses that are not failures of the run itself
_STATUS_MAP = {
    'Solve_Succeeded': SolveStatus.OPTIMAL,
    'Solved_To_Acceptable_Level': SolveStatus.OPTIMAL,
    'SUCCESS': SolveStatus.OPTIMAL,
    'Infeasible_Problem_Detected': SolveStatus.INFEASIBLE,
    'INFEASIBLE': SolveStatus.INFEASIBLE,
    'Diverging_Iterates': SolveStatus.UNBOUNDED,
    'UNBOUNDED': SolveStatus.UNBOUNDED,
    'Maximum_Iterations_Exceeded': SolveStatus.USER_LIMIT,
    'Maximum_CpuTime_Exceeded': SolveStatus.USER_LIMIT,
    'LIMIT_EXCEEDED': SolveStatus.USER_LIMIT,
}


class CasADiNonlinearModel(AbstractNonlinearModel):
    """Nonlinear model solved by IPOPT or Bonmin through CasADi."""

    # Fixed options for deterministic behavior
    IPOPT_OPTIONS = {
        # Output
        'ipopt.print_level': 0,
        'print_time': False,

        # Convergence tolerances
        'ipopt.tol': 1e-8,
        'ipopt.acceptable_tol': 1e-6,
        'ipopt.max_iter': 3000,
        'ipopt.acceptable_iter': 15,

        # Linear solver (MUMPS is deterministic)
        'ipopt.linear_solver': 'mumps',

        # Barrier parameter strategy
        'ipopt.mu_strategy': 'adaptive',

        # Bound handling
        'ipopt.honor_original_bounds': 'yes',
        'ipopt.check_derivatives_for_naninf': 'yes',
        'ipopt.hessian_approximation': 'exact',
    }

    BONMIN_OPTIONS = {
        'print_time': False,
        'bonmin.bb_log_level': 0,
        'bonmin.nlp_log_level': 0,
        'bonmin.algorithm': 'B-BB',  # Branch-and-bound
        'bonmin.time_limit': 300,
        'bonmin.node_limit': 10000,
        'bonmin.integer_tolerance': 1e-6,
        'bonmin.allowable_gap': 1e-6,
        'bonmin.allowable_fraction_gap': 1e-6,
    }

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.user_options = dict(options or {})

    def requested_features(self) -> List[Feature]:
        return []

    @property
    def plugin(self) -> str:
        if self.vartypes is not None and has_discrete(self.vartypes):
            return 'bonmin'
        return 'ipopt'

    def solver_options(self) -> Dict[str, Any]:
        base = self.BONMIN_OPTIONS if self.plugin == 'bonmin' else self.IPOPT_OPTIONS
        return {**base, **self.user_options}

    def _nlp_dict(self) -> Dict[str, Any]:
        nlp = self.evaluator.nlp
        if not hasattr(nlp, 'get_nlp_dict'):
            raise SolverCapabilityError(
                f"CasADi backend needs a symbolic model, got {type(nlp).__name__}")
        nlp_dict = dict(nlp.get_nlp_dict())
        if self.sense == Sense.MAX:
            nlp_dict['f'] = -nlp_dict['f']
        return nlp_dict

    def build_solver(self):
        """Build CasADi nlpsol for the loaded problem."""
        self._require_loaded()
        options = self.solver_options()
        if self.plugin == 'bonmin':
            options['discrete'] = [v is not VarType.CONTINUOUS for v in self.vartypes]
        return ca.nlpsol(f'{self.plugin}_solver', self.plugin,
                         self._nlp_dict(), options)

    def optimize(self) -> SolverResult:
        """
        Solve the loaded problem from the warm start.

        Returns:
            SolverResult, also stored in self.result

        Raises:
            SolverCapabilityError: if the loaded model is not symbolic
        """
        solver = self.build_solver()
        start_time = time.time()

        try:
            result = solver(
                x0=self.x0,
                lbx=self.lvar,
                ubx=self.uvar,
                lbg=self.lcon,
                ubg=self.ucon,
            )
            elapsed = time.time() - start_time

            # Extract solution
            x = np.array(result['x']).flatten()
            f = float(result['f'])
            g = np.array(result['g']).flatten()
            lam_g = np.array(result['lam_g']).flatten()
            lam_x = np.array(result['lam_x']).flatten()
            if self.sense == Sense.MAX:
                f, lam_g, lam_x = -f, -lam_g, -lam_x

            # Get solver stats
            stats = solver.stats()
            return_status = stats.get('return_status', 'unknown')
            status = _STATUS_MAP.get(return_status)
            if status is None:
                status = SolveStatus.OPTIMAL if stats.get('success', False) else SolveStatus.ERROR

            self.result = SolverResult(
                x=x,
                f=f,
                g=g,
                lam_g=lam_g,
                lam_x=lam_x,
                status=status,
                iterations=int(stats.get('iter_count', 0)),
                time=elapsed,
                return_status=return_status,
            )

        except RuntimeError as e:
            logger.warning("%s failed: %s", self.plugin, e)
            self.result = SolverResult.failure(
                self.x0, self.ncon, time.time() - start_time, str(e))

        logger.info("%s finished: %s (f=%g)", self.plugin,
                    self.result.status.value, self.result.f)
        return self.result


class CasADiSolver(AbstractSolver):
    """
    Solver factory for CasADi nlpsol plugins.

    Args:
        options: Overrides of the plugin's default options (use carefully)
    """

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        self.options = options

    def nonlinear_model(self) -> CasADiNonlinearModel:
        return CasADiNonlinearModel(self.options)
