"""
NLP Model Abstraction

Defines the model-side contract: any object able to evaluate

    f(x), grad f(x), c(x), J(x), H(x, y, obj_weight)

together with an NLPModelMeta record. Indices are 0-based and the Hessian
structure covers the lower triangle only.
"""

from abc import ABC, abstractmethod
from typing import Tuple
import numpy as np
from scipy import sparse

from .meta import NLPModelMeta


ALL_FEATURES = ("Grad", "Jac", "JacVec", "HessVec", "Hess")


class AbstractNLPModel(ABC):
    """
    Abstract nonlinear program.

    Subclasses implement the coordinate (sparse triplet) evaluations.
    Dense matrices and matrix-vector products have defaults assembled from
    them with scipy.sparse; override them when a cheaper route exists.
    """

    # Evaluator features this model offers
    features: Tuple[str, ...] = ALL_FEATURES

    def __init__(self, meta: NLPModelMeta):
        self.meta = meta

    @property
    def name(self) -> str:
        return self.meta.name

    @abstractmethod
    def obj(self, x: np.ndarray) -> float:
        """Objective value f(x)."""

    @abstractmethod
    def grad(self, x: np.ndarray) -> np.ndarray:
        """Objective gradient."""

    @abstractmethod
    def cons(self, x: np.ndarray) -> np.ndarray:
        """Constraint values c(x)."""

    @abstractmethod
    def jac_structure(self) -> Tuple[np.ndarray, np.ndarray]:
        """Row and column indices of the Jacobian nonzeros."""

    @abstractmethod
    def jac_coord(self, x: np.ndarray) -> np.ndarray:
        """Jacobian values in jac_structure() order."""

    @abstractmethod
    def hess_structure(self) -> Tuple[np.ndarray, np.ndarray]:
        """Row and column indices of the lower-triangular Lagrangian Hessian."""

    @abstractmethod
    def hess_coord(self, x: np.ndarray, y: np.ndarray,
                   obj_weight: float = 1.0) -> np.ndarray:
        """
        Lagrangian Hessian values in hess_structure() order.

        The Lagrangian is obj_weight * f(x) + y' c(x).
        """

    def jac(self, x: np.ndarray) -> sparse.coo_matrix:
        """Sparse constraint Jacobian."""
        rows, cols = self.jac_structure()
        vals = self.jac_coord(x)
        return sparse.coo_matrix(
            (vals, (rows, cols)), shape=(self.meta.ncon, self.meta.nvar)
        )

    def hess(self, x: np.ndarray, y: np.ndarray,
             obj_weight: float = 1.0) -> sparse.coo_matrix:
        """Sparse symmetric Lagrangian Hessian."""
        rows, cols = self.hess_structure()
        vals = self.hess_coord(x, y, obj_weight=obj_weight)
        return symmetric_coo(rows, cols, vals, self.meta.nvar)

    def jprod(self, x: np.ndarray, v: np.ndarray) -> np.ndarray:
        """Jacobian-vector product J(x) v."""
        return self.jac(x).dot(v)

    def jtprod(self, x: np.ndarray, w: np.ndarray) -> np.ndarray:
        """Transposed Jacobian-vector product J(x)' w."""
        return self.jac(x).T.dot(w)

    def hprod(self, x: np.ndarray, y: np.ndarray, v: np.ndarray,
              obj_weight: float = 1.0) -> np.ndarray:
        """Lagrangian Hessian-vector product."""
        return self.hess(x, y, obj_weight=obj_weight).dot(v)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(name={self.meta.name!r}, "
                f"nvar={self.meta.nvar}, ncon={self.meta.ncon})")


def symmetric_coo(rows, cols, vals, n: int) -> sparse.coo_matrix:
    """Expand a lower-triangular triplet into a full symmetric matrix."""
    rows = np.asarray(rows, dtype=np.int64)
    cols = np.asarray(cols, dtype=np.int64)
    vals = np.asarray(vals, dtype=np.float64)
    off = rows != cols
    return sparse.coo_matrix(
        (np.concatenate([vals, vals[off]]),
         (np.concatenate([rows, cols[off]]), np.concatenate([cols, rows[off]]))),
        shape=(n, n),
    )
