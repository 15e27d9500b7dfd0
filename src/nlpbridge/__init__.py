"""
nlpbridge - NLP Models for Generic Nonlinear Solver Interfaces

Adapts an NLP model (objective, gradient, constraints, Jacobian and
Lagrangian Hessian evaluations plus problem metadata) to the evaluator
contract of a generic nonlinear solver interface, and loads it into a
solver model with bounds, variable types and a warm start.

Key Features:
- NLPModelEvaluator forwarding every evaluation to the wrapped model
- Decoding of packed variable category counts into variable types
- SciPy backend (trust-constr / SLSQP) driven by evaluator callbacks
- CasADi backend (IPOPT / Bonmin) for symbolic models
"""

from .exceptions import (
    NLPBridgeError,
    VariableClassificationError,
    SolverCapabilityError,
    ModelNotLoadedError,
)
from .meta import NLPModelMeta
from .model import AbstractNLPModel, symmetric_coo
from .vartypes import VarType, classify_variables, has_discrete
from .mathprog import (
    Sense,
    SolveStatus,
    Feature,
    SolverResult,
    AbstractSolver,
    AbstractNonlinearModel,
)
from .evaluator import NLPModelEvaluator, Counters
from .convert import load_nlp_model, nlp_to_solver
from .scipy_solver import ScipySolver, ScipyNonlinearModel

__version__ = "0.1.0"

__all__ = [
    # Errors
    "NLPBridgeError",
    "VariableClassificationError",
    "SolverCapabilityError",
    "ModelNotLoadedError",
    # Model
    "NLPModelMeta",
    "AbstractNLPModel",
    "symmetric_coo",
    # Variable types
    "VarType",
    "classify_variables",
    "has_discrete",
    # Solver interface
    "Sense",
    "SolveStatus",
    "Feature",
    "SolverResult",
    "AbstractSolver",
    "AbstractNonlinearModel",
    # Adapter
    "NLPModelEvaluator",
    "Counters",
    "load_nlp_model",
    "nlp_to_solver",
    # Backends
    "ScipySolver",
    "ScipyNonlinearModel",
]
