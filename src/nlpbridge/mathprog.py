"""
Generic Solver Interface

The calling convention nonlinear solver backends implement:

    model = solver.nonlinear_model()
    model.loadproblem(nvar, ncon, lvar, uvar, lcon, ucon, sense, evaluator)
    model.setwarmstart(x0)
    model.setvartype(vtypes)        # only for mixed-integer problems
    model.optimize()
    model.status(), model.getsolution(), model.getobjval()

The evaluator passed to loadproblem follows the NLPModelEvaluator contract.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Dict, List, Optional, Sequence
import numpy as np

from .exceptions import ModelNotLoadedError
from .vartypes import VarType

logger = logging.getLogger(__name__)


class Sense(Enum):
    """Objective sense."""
    MIN = "Min"
    MAX = "Max"


class SolveStatus(Enum):
    """Termination status reported by a solver model."""
    OPTIMAL = "Optimal"
    INFEASIBLE = "Infeasible"
    UNBOUNDED = "Unbounded"
    USER_LIMIT = "UserLimit"
    ERROR = "Error"
    NOT_SOLVED = "NotSolved"


class Feature(Enum):
    """Evaluator features a solver may request."""
    GRAD = "Grad"
    JAC = "Jac"
    JAC_VEC = "JacVec"
    HESS_VEC = "HessVec"
    HESS = "Hess"


@dataclass
class SolverResult:
    """
    Result from solver execution.

    Multipliers refer to the objective as stated, whatever the sense:
    grad f(x) + J(x)^T lam_g + lam_x = 0 at a stationary point. For a
    maximization the solver's multipliers of -f are negated back.
    """
    x: np.ndarray                    # Primal solution
    f: float                         # Objective value
    g: np.ndarray                    # Constraint values
    lam_g: np.ndarray                # Constraint multipliers
    lam_x: np.ndarray                # Bound multipliers

    # Solver statistics
    status: SolveStatus
    iterations: int
    time: float
    return_status: str

    @property
    def success(self) -> bool:
        return self.status == SolveStatus.OPTIMAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            'x': self.x.tolist(),
            'f': self.f,
            'g': self.g.tolist(),
            'lam_g': self.lam_g.tolist(),
            'lam_x': self.lam_x.tolist(),
            'success': self.success,
            'status': self.status.value,
            'iterations': self.iterations,
            'time': self.time,
            'return_status': self.return_status,
        }

    @classmethod
    def failure(cls, x0: np.ndarray, ncon: int, elapsed: float,
                message: str) -> 'SolverResult':
        """Result for a solve that raised before producing a solution."""
        return cls(
            x=np.asarray(x0, dtype=np.float64),
            f=float('inf'),
            g=np.zeros(ncon),
            lam_g=np.zeros(ncon),
            lam_x=np.zeros(len(x0)),
            status=SolveStatus.ERROR,
            iterations=0,
            time=elapsed,
            return_status=f'exception: {message}',
        )


class AbstractSolver(ABC):
    """A solver factory producing nonlinear solver models."""

    @abstractmethod
    def nonlinear_model(self) -> 'AbstractNonlinearModel':
        """Create an empty nonlinear model bound to this solver."""


class AbstractNonlinearModel(ABC):
    """
    A nonlinear problem loaded into a solver.

    Stores the problem data handed over by loadproblem; backends implement
    optimize() and fill self.result.
    """

    def __init__(self):
        self.nvar = 0
        self.ncon = 0
        self.lvar: Optional[np.ndarray] = None
        self.uvar: Optional[np.ndarray] = None
        self.lcon: Optional[np.ndarray] = None
        self.ucon: Optional[np.ndarray] = None
        self.sense = Sense.MIN
        self.evaluator = None
        self.x0: Optional[np.ndarray] = None
        self.vartypes: Optional[List[VarType]] = None
        self.result: Optional[SolverResult] = None

    @property
    def loaded(self) -> bool:
        return self.evaluator is not None

    def loadproblem(self, nvar: int, ncon: int,
                    lvar: Sequence[float], uvar: Sequence[float],
                    lcon: Sequence[float], ucon: Sequence[float],
                    sense: Sense, evaluator) -> None:
        """Load problem dimensions, bounds, sense and the evaluator."""
        lvar = np.asarray(lvar, dtype=np.float64).flatten()
        uvar = np.asarray(uvar, dtype=np.float64).flatten()
        lcon = np.asarray(lcon, dtype=np.float64).flatten()
        ucon = np.asarray(ucon, dtype=np.float64).flatten()

        if len(lvar) != nvar or len(uvar) != nvar:
            raise ValueError("Variable bounds must have length nvar")
        if len(lcon) != ncon or len(ucon) != ncon:
            raise ValueError("Constraint bounds must have length ncon")
        if not isinstance(sense, Sense):
            raise ValueError(f"Unknown objective sense: {sense!r}")

        self.nvar = nvar
        self.ncon = ncon
        self.lvar, self.uvar = lvar, uvar
        self.lcon, self.ucon = lcon, ucon
        self.sense = sense
        self.evaluator = evaluator
        self.x0 = np.clip(np.zeros(nvar), lvar, uvar)
        self.vartypes = None
        self.result = None

        evaluator.initialize(self.requested_features())
        logger.debug("loaded problem: nvar=%d ncon=%d sense=%s",
                     nvar, ncon, sense.value)

    def requested_features(self) -> List[Feature]:
        """Evaluator features this backend needs."""
        return [Feature.GRAD, Feature.JAC, Feature.HESS]

    def setwarmstart(self, x: Sequence[float]) -> None:
        self._require_loaded()
        x = np.asarray(x, dtype=np.float64).flatten()
        if len(x) != self.nvar:
            raise ValueError(
                f"Warm start has length {len(x)}, expected {self.nvar}")
        self.x0 = x.copy()

    def setvartype(self, vtypes: Sequence[VarType]) -> None:
        self._require_loaded()
        vtypes = list(vtypes)
        if len(vtypes) != self.nvar:
            raise ValueError(
                f"Variable types have length {len(vtypes)}, expected {self.nvar}")
        for v in vtypes:
            if not isinstance(v, VarType):
                raise ValueError(f"Unknown variable type: {v!r}")
        self.vartypes = vtypes

    def getvartype(self) -> List[VarType]:
        self._require_loaded()
        if self.vartypes is None:
            return [VarType.CONTINUOUS] * self.nvar
        return list(self.vartypes)

    @abstractmethod
    def optimize(self) -> SolverResult:
        """Solve the loaded problem and store the result."""

    def status(self) -> SolveStatus:
        if self.result is None:
            return SolveStatus.NOT_SOLVED
        return self.result.status

    def getsolution(self) -> np.ndarray:
        return self._require_result().x

    def getobjval(self) -> float:
        return self._require_result().f

    def getconstrsolution(self) -> np.ndarray:
        return self._require_result().g

    def _require_loaded(self) -> None:
        if not self.loaded:
            raise ModelNotLoadedError("No problem loaded")

    def _require_result(self) -> SolverResult:
        self._require_loaded()
        if self.result is None:
            raise ModelNotLoadedError("Model has not been solved")
        return self.result
