"""Errors raised by ladrules.

Every error is unrecoverable for the call that raised it. Each class also
derives from the closest builtin (or scikit-learn) exception so callers that
only know about ``ValueError`` or ``TypeError`` still catch them.
"""
from sklearn.exceptions import NotFittedError as _SklearnNotFittedError


class LADError(Exception):
    """Base class of all ladrules errors"""


class RowCountMismatchError(LADError, ValueError):
    """Data and label columns have different lengths"""

    def __init__(self, n_rows: int, n_labels: int):
        super().__init__(
            f"Data has {n_rows} rows but label column has {n_labels} values"
        )
        self.n_rows: int = n_rows
        self.n_labels: int = n_labels


class InsufficientClassesError(LADError, ValueError):
    """Fewer than two distinct labels where a separation score needs at least two"""


class SchemaMismatchError(LADError, ValueError):
    """A column referenced by a stored encoding is missing or has incompatible type"""


class NotFittedError(LADError, _SklearnNotFittedError):
    """transform, predict or get_rules called before fit"""


class ColumnTypeUnsupportedError(LADError, TypeError):
    """Column dtype has no defined boolean encoding"""
