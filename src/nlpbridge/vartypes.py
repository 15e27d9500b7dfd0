"""
Variable Type Classification

Decodes the packed variable category counts of an NLP model into one type
tag per variable, in the variable order the solver interface expects.

Layout of the variables (AMPL ordering convention):

    [ nonlinear both | nonlinear constraints | nonlinear objective ]
        each split as continuous prefix + integer suffix
    [ arc | linear continuous ]
    [ binary | integer ]
"""

from enum import Enum
import logging
from typing import Iterable, List

from .exceptions import VariableClassificationError

logger = logging.getLogger(__name__)


class VarType(Enum):
    """Variable type tags understood by the solver interface."""
    CONTINUOUS = "Cont"
    INTEGER = "Int"
    BINARY = "Bin"


def classify_variables(meta) -> List[VarType]:
    """
    Build the variable-type vector of a model.

    Args:
        meta: Metadata record exposing nvar and the category counts
              nlvb, nlvbi, nlvc, nlvci, nlvo, nlvoi, nwv, nbv, niv

    Returns:
        List of nvar tags, CONTINUOUS unless placed otherwise

    Raises:
        VariableClassificationError: if the counts do not walk exactly
            over the nvar variables
    """
    nvar = meta.nvar
    nnlvar = max(meta.nlvc, meta.nlvo)
    nlinvar = nvar - (nnlvar + meta.nwv + meta.nbv + meta.niv)
    if nlinvar < 0:
        raise VariableClassificationError(
            f"negative linear variable count {nlinvar} "
            f"(nvar={nvar}, nonlinear={nnlvar}, nwv={meta.nwv}, "
            f"nbv={meta.nbv}, niv={meta.niv})"
        )

    vtypes = [VarType.CONTINUOUS] * nvar
    varidx = 0

    def mark(count: int, vtype: VarType) -> int:
        if varidx + count > nvar:
            raise VariableClassificationError(
                f"{vtype.name.lower()} block of {count} variables at index "
                f"{varidx} overruns nvar={nvar}"
            )
        for i in range(varidx, varidx + count):
            vtypes[i] = vtype
        return varidx + count

    # Nonlinear variables
    varidx += max(meta.nlvb - meta.nlvbi, 0)
    varidx = mark(meta.nlvbi, VarType.INTEGER)
    varidx += max(meta.nlvc - (meta.nlvb + meta.nlvci), 0)
    varidx = mark(meta.nlvci, VarType.INTEGER)
    varidx += max(meta.nlvo - (meta.nlvc + meta.nlvoi), 0)
    varidx = mark(meta.nlvoi, VarType.INTEGER)

    # Linear variables
    varidx += meta.nwv + nlinvar
    varidx = mark(meta.nbv, VarType.BINARY)
    varidx = mark(meta.niv, VarType.INTEGER)

    if varidx != nvar:
        raise VariableClassificationError(
            f"category counts cover {varidx} variables, expected {nvar}"
        )

    logger.debug(
        "classified %d variables: %d integer, %d binary",
        nvar,
        vtypes.count(VarType.INTEGER),
        vtypes.count(VarType.BINARY),
    )
    return vtypes


def has_discrete(vtypes: Iterable[VarType]) -> bool:
    """True if any tag is INTEGER or BINARY."""
    return any(v is not VarType.CONTINUOUS for v in vtypes)
