# qsim/errors.py


class QsimError(Exception):
    """Base class for simulator errors."""


class DimensionMismatch(QsimError, ValueError):
    pass


class InvalidIndex(QsimError, IndexError):
    pass


class InvalidGateConstruction(QsimError, ValueError):
    pass


class UnsupportedOperation(QsimError, ValueError):
    pass


class DegenerateState(QsimError, ZeroDivisionError):
    """Raised when normalizing a state vector whose norm is zero."""
