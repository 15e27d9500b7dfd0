"""
Error types raised by nlpbridge.
"""


class NLPBridgeError(Exception):
    """Base class for nlpbridge errors."""


class VariableClassificationError(NLPBridgeError):
    """
    Variable category counts are inconsistent.

    Raised when decoding the packed category counts of a model does not walk
    exactly over its variables. The metadata violates its own invariants and
    no variable-type vector can be produced from it.
    """


class SolverCapabilityError(NLPBridgeError):
    """The selected solver backend cannot handle the loaded problem."""


class ModelNotLoadedError(NLPBridgeError):
    """A solver model was queried before a problem was loaded or solved."""
