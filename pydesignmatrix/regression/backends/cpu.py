"""
CPU backends for linear regression.

CPUQRBackend is the reference implementation: Householder QR with column
pivoting via LAPACK, the decomposition R's lm() uses. CPUSVDBackend solves
the same problem through the thin SVD and also reports the condition number.
Neither forms or inverts X'X.

Both run the same pipeline; every stage except the rank check is timed:

    decomposition  ->  rank check  ->  solve  ->  covariance  ->  statistics
"""

from typing import Any

from pydesignmatrix.core.compute.linalg.qr import (
    QRResult,
    qr_cpu,
    qr_solve_cpu,
    qr_unscaled_covariance,
)
from pydesignmatrix.core.compute.linalg.svd import (
    SVDResult,
    svd_cpu,
    svd_solve_cpu,
    svd_unscaled_covariance,
)
from pydesignmatrix.core.compute.timing import Timer
from pydesignmatrix.core.result import Result
from pydesignmatrix.regression.backends._common import linear_params, raise_if_rank_deficient
from pydesignmatrix.regression.design import RegressionDesign
from pydesignmatrix.regression.solution import LinearParams


class _DecompositionBackend:
    """Shared solve pipeline; subclasses supply the factorization."""

    name: str
    _stage: str

    def _decompose(self, design: RegressionDesign):
        raise NotImplementedError

    def _solve(self, decomposition, design: RegressionDesign):
        raise NotImplementedError

    def _covariance(self, decomposition):
        raise NotImplementedError

    def _info(self, decomposition) -> dict[str, Any]:
        raise NotImplementedError

    def solve(self, design: RegressionDesign) -> Result[LinearParams]:
        """
        Fit OLS on a validated design.

        Raises:
            CollinearPredictorsError: If X is rank-deficient
        """
        with Timer() as timer:
            with timer.section(self._stage):
                decomposition = self._decompose(design)

            raise_if_rank_deficient(design, decomposition.rank, decomposition.aliased)

            with timer.section('solve'):
                coefficients = self._solve(decomposition, design)
            with timer.section('covariance'):
                unscaled_covariance = self._covariance(decomposition)
            with timer.section('statistics'):
                params, notes = linear_params(
                    design, coefficients, unscaled_covariance, decomposition.rank
                )

        return Result(
            params=params,
            info=self._info(decomposition),
            timing=timer.result(),
            backend_name=self.name,
            warnings=notes,
        )


class CPUQRBackend(_DecompositionBackend):
    """
    Pivoted QR: X P = Q R, β[P] = R⁻¹ Q'y, (X'X)⁻¹ = P R⁻¹ R⁻ᵀ P'.

    The rank comes from the diagonal of R; columns pivoted past the rank
    are reported as aliased.
    """

    name = 'cpu_qr'
    _stage = 'qr_decomposition'

    def _decompose(self, design: RegressionDesign) -> QRResult:
        return qr_cpu(design.X)

    def _solve(self, decomposition: QRResult, design: RegressionDesign):
        return qr_solve_cpu(decomposition, design.y)

    def _covariance(self, decomposition: QRResult):
        return qr_unscaled_covariance(decomposition)

    def _info(self, decomposition: QRResult) -> dict[str, Any]:
        return {
            'method': 'qr',
            'rank': decomposition.rank,
            'tol': decomposition.tol,
            'pivot': decomposition.pivot.tolist(),
        }


class CPUSVDBackend(_DecompositionBackend):
    """Thin SVD: X = U S V', β = V S⁻¹ U'y, (X'X)⁻¹ = V S⁻² V'."""

    name = 'cpu_svd'
    _stage = 'svd'

    def _decompose(self, design: RegressionDesign) -> SVDResult:
        return svd_cpu(design.X)

    def _solve(self, decomposition: SVDResult, design: RegressionDesign):
        return svd_solve_cpu(decomposition, design.y)

    def _covariance(self, decomposition: SVDResult):
        return svd_unscaled_covariance(decomposition)

    def _info(self, decomposition: SVDResult) -> dict[str, Any]:
        return {
            'method': 'svd',
            'rank': decomposition.rank,
            'tol': decomposition.tol,
            'condition_number': decomposition.condition_number,
            'singular_values': decomposition.s.tolist(),
        }
