"""
CasADi Integration Module

Bridges CasADi symbolic NLP formulations and the generic solver interface:
- CasADiNLPModel: NLP model with CasADi automatic differentiation
- CasADiSolver: deterministic IPOPT / Bonmin backend
"""

from .model import CasADiNLPModel
from .solver import CasADiNonlinearModel, CasADiSolver

__all__ = [
    # Model
    'CasADiNLPModel',
    # Solvers
    'CasADiNonlinearModel',
    'CasADiSolver',
]
