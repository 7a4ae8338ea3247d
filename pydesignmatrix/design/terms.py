"""
Model terms: predictor specifications, level ordering and formula parsing.

A term is either a Factor (categorical predictor, treatment coded against
its reference level) or a Continuous predictor (one column, verbatim).
Bare variable names are also accepted by the builder, which then infers the
kind from the ModelFrame column type.

Level ordering is an explicit policy because it decides the reference level
and therefore the meaning and sign of every factor coefficient:

    'sorted'      alphabetical on the label text (R's factor() default)
    'first_seen'  order of first appearance in the data

A Factor's own `levels` and `reference` take precedence over the policy.
"""

from __future__ import annotations

import re
import warnings
from dataclasses import dataclass
from typing import Literal, Union

from numpy.typing import ArrayLike

from pydesignmatrix.core.exceptions import InvalidFactorError, ValidationError
from pydesignmatrix.core.validation import check_labels, format_label


LevelOrder = Literal['sorted', 'first_seen']
LEVEL_ORDERS: tuple[str, ...] = ('sorted', 'first_seen')

INTERCEPT_NAME = '(Intercept)'

_NAME_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_.]*$')


@dataclass(frozen=True)
class Factor:
    """
    Categorical predictor.

    Attributes:
        name: Variable name in the ModelFrame
        levels: Explicit level order (first = reference unless `reference`
            is given). None means use the builder's level-order policy.
        reference: Level to absorb into the intercept. Moved to the front
            of the level order.
    """
    name: str
    levels: tuple[str, ...] | None = None
    reference: str | None = None

    def __post_init__(self):
        if self.levels is not None:
            levels = tuple(check_labels(list(self.levels), self.name).tolist())
            if len(set(levels)) != len(levels):
                raise InvalidFactorError(
                    f"{self.name}: duplicate levels in {list(levels)}",
                    factor=self.name,
                    levels=levels,
                )
            object.__setattr__(self, 'levels', levels)
        if self.reference is not None:
            object.__setattr__(self, 'reference', format_label(self.reference))


@dataclass(frozen=True)
class Continuous:
    """Numeric predictor, entered as a single column."""
    name: str


Term = Union[Factor, Continuous, str]


def resolve_levels(
    values: ArrayLike,
    policy: str = 'sorted',
    *,
    declared: tuple[str, ...] | list[str] | None = None,
    reference: str | None = None,
    name: str = 'factor',
) -> list[str]:
    """
    Decide the ordered level set of a factor; the first level is the reference.

    Args:
        values: Observed labels; numbers are formatted by format_label
        policy: 'sorted' or 'first_seen'; ignored when `declared` is given
        declared: Explicit level order
        reference: Level to move to the front
        name: Factor name for error messages

    Returns:
        Observed levels in model order

    Raises:
        ValidationError: Unknown policy
        InvalidFactorError: Value outside the declared levels, or a reference
            level that is not an observed level
    """
    if policy not in LEVEL_ORDERS:
        raise ValidationError(
            f"level_order: expected one of {list(LEVEL_ORDERS)}, got {policy!r}"
        )

    labels = check_labels(values, name)
    first_seen = list(dict.fromkeys(labels.tolist()))

    if declared is not None:
        declared = check_labels(list(declared), name).tolist()
        unexpected = [v for v in first_seen if v not in declared]
        if unexpected:
            raise InvalidFactorError(
                f"{name}: values {unexpected} are not among the declared levels {declared}",
                factor=name,
                levels=tuple(declared),
            )
        levels = [level for level in declared if level in first_seen]
        unused = [level for level in declared if level not in first_seen]
        if unused:
            warnings.warn(
                f"{name}: dropping declared levels with no observations: {unused}",
                UserWarning,
                stacklevel=2,
            )
    elif policy == 'sorted':
        levels = sorted(first_seen)
    else:
        levels = first_seen

    if reference is not None:
        reference = format_label(reference)
        if reference not in levels:
            raise InvalidFactorError(
                f"{name}: reference level {reference!r} is not an observed level {levels}",
                factor=name,
                levels=tuple(levels),
            )
        levels = [reference] + [level for level in levels if level != reference]

    return levels


def parse_formula(formula: str) -> tuple[str, list[str]]:
    """
    Parse an additive model formula 'response ~ a + b + c'.

    Only main effects are supported. '1' is accepted and ignored (the
    intercept is always in the model); '0' and every other operator
    (interactions, powers, removal, nesting, '.') raise.

    Returns:
        (response name, list of term names in order)

    Raises:
        ValidationError: If the formula is not of the supported form
    """
    if not isinstance(formula, str) or formula.count('~') != 1:
        raise ValidationError(
            f"formula: expected 'response ~ term + term', got {formula!r}"
        )

    lhs, rhs = (part.strip() for part in formula.split('~'))
    if not _NAME_RE.match(lhs):
        raise ValidationError(f"formula: invalid response {lhs!r}")

    terms: list[str] = []
    for token in (t.strip() for t in rhs.split('+')):
        if token == '1':
            continue
        if token == '0':
            raise ValidationError("formula: models without an intercept are not supported")
        if not _NAME_RE.match(token):
            raise ValidationError(
                f"formula: unsupported term {token!r}; only additive main effects are allowed"
            )
        if token in terms:
            raise ValidationError(f"formula: term {token!r} given twice")
        terms.append(token)

    if lhs in terms:
        raise ValidationError(f"formula: response {lhs!r} also appears as a predictor")

    return lhs, terms
