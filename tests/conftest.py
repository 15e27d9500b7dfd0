"""
Shared fixtures: a hand-coded HS071 model and a recording solver model.
"""

import numpy as np
import pytest

from nlpbridge import (
    AbstractNLPModel,
    AbstractNonlinearModel,
    AbstractSolver,
    NLPModelMeta,
    SolveStatus,
    SolverResult,
)


class HS071(AbstractNLPModel):
    """Hock-Schittkowski 71 with analytic derivatives."""

    HROWS = np.array([0, 1, 1, 2, 2, 2, 3, 3, 3, 3])
    HCOLS = np.array([0, 0, 1, 0, 1, 2, 0, 1, 2, 3])

    def __init__(self, **meta_kwargs):
        kwargs = dict(
            nvar=4, ncon=2,
            x0=[1.0, 5.0, 5.0, 1.0],
            lvar=[1.0] * 4, uvar=[5.0] * 4,
            lcon=[25.0, 40.0], ucon=[np.inf, 40.0],
            name="hs071",
        )
        kwargs.update(meta_kwargs)
        super().__init__(NLPModelMeta(**kwargs))

    def obj(self, x):
        return x[0] * x[3] * (x[0] + x[1] + x[2]) + x[2]

    def grad(self, x):
        return np.array([
            x[3] * (2 * x[0] + x[1] + x[2]),
            x[0] * x[3],
            x[0] * x[3] + 1.0,
            x[0] * (x[0] + x[1] + x[2]),
        ])

    def cons(self, x):
        return np.array([np.prod(x), np.dot(x, x)])

    def jac_structure(self):
        return np.repeat([0, 1], 4), np.tile(np.arange(4), 2)

    def jac_coord(self, x):
        return np.concatenate([
            [x[1] * x[2] * x[3], x[0] * x[2] * x[3],
             x[0] * x[1] * x[3], x[0] * x[1] * x[2]],
            2 * x,
        ])

    def hess_structure(self):
        return self.HROWS, self.HCOLS

    def hess_coord(self, x, y, obj_weight=1.0):
        s = obj_weight
        return np.array([
            s * 2 * x[3] + 2 * y[1],
            s * x[3] + y[0] * x[2] * x[3],
            2 * y[1],
            s * x[3] + y[0] * x[1] * x[3],
            y[0] * x[0] * x[3],
            2 * y[1],
            s * (2 * x[0] + x[1] + x[2]) + y[0] * x[1] * x[2],
            s * x[0] + y[0] * x[0] * x[2],
            s * x[0] + y[0] * x[0] * x[1],
            2 * y[1],
        ])


class RecordingModel(AbstractNonlinearModel):
    """Solver model recording the calls made while loading."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def loadproblem(self, *args, **kwargs):
        self.calls.append('loadproblem')
        super().loadproblem(*args, **kwargs)

    def setwarmstart(self, x):
        self.calls.append('setwarmstart')
        super().setwarmstart(x)

    def setvartype(self, vtypes):
        self.calls.append('setvartype')
        super().setvartype(vtypes)

    def optimize(self):
        self.result = SolverResult(
            x=self.x0.copy(),
            f=self.evaluator.eval_f(self.x0),
            g=np.zeros(self.ncon),
            lam_g=np.zeros(self.ncon),
            lam_x=np.zeros(self.nvar),
            status=SolveStatus.OPTIMAL,
            iterations=0,
            time=0.0,
            return_status='recorded',
        )
        return self.result


class RecordingSolver(AbstractSolver):
    def nonlinear_model(self):
        return RecordingModel()


@pytest.fixture
def hs071_model():
    return HS071()


@pytest.fixture
def recording_solver():
    return RecordingSolver()
