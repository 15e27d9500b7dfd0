"""
NLP Model to Solver Conversion

Loads an NLP model into a solver model of the generic solver interface:
bounds and sense from the metadata, an NLPModelEvaluator for the
callbacks, the model's initial point as warm start, and the decoded
variable types for mixed-integer models.
"""

import logging

from .evaluator import NLPModelEvaluator
from .mathprog import AbstractNonlinearModel, AbstractSolver, Sense
from .model import AbstractNLPModel
from .vartypes import classify_variables, has_discrete

logger = logging.getLogger(__name__)


def load_nlp_model(model: AbstractNonlinearModel,
                   nlp: AbstractNLPModel) -> AbstractNonlinearModel:
    """
    Load an NLP model into an existing solver model.

    Args:
        model: Empty solver model
        nlp: Model providing evaluations and metadata

    Returns:
        The same solver model, ready for optimize()

    Raises:
        VariableClassificationError: if the category counts are inconsistent
    """
    meta = nlp.meta
    model.loadproblem(
        meta.nvar, meta.ncon,
        meta.lvar, meta.uvar,
        meta.lcon, meta.ucon,
        Sense.MIN if meta.minimize else Sense.MAX,
        NLPModelEvaluator(nlp),
    )
    model.setwarmstart(meta.x0)

    vtypes = classify_variables(meta)
    # Continuous is the solver's default
    if has_discrete(vtypes):
        model.setvartype(vtypes)

    logger.info("loaded %r into %s (nvar=%d, ncon=%d)",
                meta.name, type(model).__name__, meta.nvar, meta.ncon)
    return model


def nlp_to_solver(nlp: AbstractNLPModel,
                  solver: AbstractSolver) -> AbstractNonlinearModel:
    """
    Return a solver model corresponding to an NLP model.

    The result can be solved directly:

        model = nlp_to_solver(nlp, ScipySolver())
        model.optimize()
    """
    return load_nlp_model(solver.nonlinear_model(), nlp)
