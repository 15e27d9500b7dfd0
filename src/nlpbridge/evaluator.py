"""
NLP Model Evaluator

Exposes an AbstractNLPModel through the evaluator contract of the generic
solver interface. Values are forwarded unchanged; output arrays supplied by
the solver are filled in place.
"""

from dataclasses import dataclass, fields
import logging
from typing import Dict, Iterable, List, Optional, Tuple
import numpy as np

from .mathprog import Feature
from .model import AbstractNLPModel

logger = logging.getLogger(__name__)


@dataclass
class Counters:
    """Number of evaluations forwarded to the model."""
    neval_obj: int = 0
    neval_grad: int = 0
    neval_cons: int = 0
    neval_jac: int = 0
    neval_jprod: int = 0
    neval_jtprod: int = 0
    neval_hess: int = 0
    neval_hprod: int = 0

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, 0)

    def to_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class NLPModelEvaluator:
    """
    Evaluator wrapping an NLP model.

    Sparsity structures are fetched once from the model and cached; value
    routines return entries in the cached order.
    """

    def __init__(self, nlp: AbstractNLPModel):
        self.nlp = nlp
        self.counters = Counters()
        self.requested: List[Feature] = []
        self.jrows: Optional[np.ndarray] = None
        self.jcols: Optional[np.ndarray] = None
        self.hrows: Optional[np.ndarray] = None
        self.hcols: Optional[np.ndarray] = None

    def initialize(self, requested_features: Iterable) -> None:
        """Record the features the solver will use."""
        available = self.features_available()
        requested = [Feature(f) if not isinstance(f, Feature) else f
                     for f in requested_features]
        missing = [f.value for f in requested if f not in available]
        if missing:
            raise ValueError(
                f"Model {self.nlp.name!r} does not provide features: {missing}")
        self.requested = requested
        logger.debug("evaluator for %r initialized with %s",
                     self.nlp.name, [f.value for f in requested])

    def features_available(self) -> List[Feature]:
        offered = set(self.nlp.features)
        return [f for f in Feature if f.value in offered]

    # Objective

    def eval_f(self, x: np.ndarray) -> float:
        self.counters.neval_obj += 1
        return float(self.nlp.obj(x))

    def eval_grad_f(self, g: np.ndarray, x: np.ndarray) -> np.ndarray:
        self.counters.neval_grad += 1
        g[:] = self.nlp.grad(x)
        return g

    # Constraints

    def eval_g(self, g: np.ndarray, x: np.ndarray) -> np.ndarray:
        self.counters.neval_cons += 1
        g[:] = self.nlp.cons(x)
        return g

    def jac_structure(self) -> Tuple[np.ndarray, np.ndarray]:
        if self.jrows is None:
            rows, cols = self.nlp.jac_structure()
            self.jrows = np.asarray(rows, dtype=np.int64)
            self.jcols = np.asarray(cols, dtype=np.int64)
        return self.jrows, self.jcols

    def eval_jac_g(self, J: np.ndarray, x: np.ndarray) -> np.ndarray:
        self.jac_structure()
        self.counters.neval_jac += 1
        J[:] = self.nlp.jac_coord(x)
        return J

    def eval_jac_prod(self, y: np.ndarray, x: np.ndarray,
                      w: np.ndarray) -> np.ndarray:
        """y = J(x) w"""
        self.counters.neval_jprod += 1
        y[:] = self.nlp.jprod(x, w)
        return y

    def eval_jac_prod_t(self, y: np.ndarray, x: np.ndarray,
                        w: np.ndarray) -> np.ndarray:
        """y = J(x)' w"""
        self.counters.neval_jtprod += 1
        y[:] = self.nlp.jtprod(x, w)
        return y

    # Lagrangian Hessian: sigma * f(x) + mu' c(x)

    def hesslag_structure(self) -> Tuple[np.ndarray, np.ndarray]:
        if self.hrows is None:
            rows, cols = self.nlp.hess_structure()
            self.hrows = np.asarray(rows, dtype=np.int64)
            self.hcols = np.asarray(cols, dtype=np.int64)
        return self.hrows, self.hcols

    def eval_hesslag(self, H: np.ndarray, x: np.ndarray, sigma: float,
                     mu: np.ndarray) -> np.ndarray:
        self.hesslag_structure()
        self.counters.neval_hess += 1
        H[:] = self.nlp.hess_coord(x, mu, obj_weight=sigma)
        return H

    def eval_hesslag_prod(self, h: np.ndarray, x: np.ndarray, v: np.ndarray,
                          sigma: float, mu: np.ndarray) -> np.ndarray:
        self.counters.neval_hprod += 1
        h[:] = self.nlp.hprod(x, mu, v, obj_weight=sigma)
        return h

    # Problem classification

    def isobjlinear(self) -> bool:
        return self.nlp.meta.nlo == 0

    def isobjquadratic(self) -> bool:
        return False

    def isconstrlinear(self, i: int) -> bool:
        return i in self.nlp.meta.lin
