"""
Exception hierarchy for pydesignmatrix.

All exceptions inherit from PyDesignMatrixError so that callers can catch
any library-specific error in one place. Input problems derive from
ValidationError, problems discovered while solving derive from
NumericalError.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyDesignMatrixError(Exception):
    """Base exception for all pydesignmatrix errors."""
    pass


class ValidationError(PyDesignMatrixError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect.

    Raised when an array has the wrong number of dimensions.
    """
    pass


class DimensionMismatchError(DimensionError):
    """
    Predictor and response vectors have inconsistent lengths.

    Attributes:
        lengths: Mapping of variable name to its length
    """

    def __init__(self, message: str, lengths: dict[str, int] | None = None):
        super().__init__(message)
        self.lengths = dict(lengths) if lengths is not None else {}


class InvalidFactorError(ValidationError):
    """
    Categorical predictor cannot be encoded.

    Raised when a factor has fewer than two observed levels (a constant
    factor is not identifiable next to the intercept), when a value falls
    outside the declared levels, or when the requested reference level
    is not one of the levels.

    Attributes:
        factor: Name of the offending factor
        levels: Levels that were observed or declared
    """

    def __init__(
        self,
        message: str,
        factor: str | None = None,
        levels: tuple[str, ...] | None = None,
    ):
        super().__init__(message)
        self.factor = factor
        self.levels = levels


class NumericalError(PyDesignMatrixError):
    """
    Numerical computation failed.

    Base class for errors arising while solving the least squares problem.
    """
    pass


class UnderdeterminedModelError(NumericalError):
    """
    Not enough observations for the number of model columns.

    OLS inference needs at least one residual degree of freedom (n > p).

    Attributes:
        n_observations: Number of rows in the design matrix
        n_columns: Number of columns in the design matrix
    """

    def __init__(
        self,
        message: str,
        n_observations: int | None = None,
        n_columns: int | None = None,
    ):
        super().__init__(message)
        self.n_observations = n_observations
        self.n_columns = n_columns


class CollinearPredictorsError(NumericalError):
    """
    Design matrix is rank-deficient.

    Raised when columns of X are linearly dependent, e.g. two factors that
    are perfectly confounded.

    Attributes:
        rank: Numerical rank of the design matrix
        expected_rank: Number of columns (full column rank)
        aliased: Names (or indices) of columns that were found dependent
    """

    def __init__(
        self,
        message: str,
        rank: int | None = None,
        expected_rank: int | None = None,
        aliased: tuple[str, ...] = (),
    ):
        super().__init__(message)
        self.rank = rank
        self.expected_rank = expected_rank
        self.aliased = aliased
