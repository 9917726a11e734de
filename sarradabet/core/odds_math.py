"""Decimal-odds arithmetic and the pricing sanity check for new markets.

Every function here is **pure**: no I/O, no logging, no side effects.

A market is accepted when

1. every price lies in ``[MIN_ODD_VALUE, MAX_ODD_VALUE]``, and
2. the summed implied probability ``Σ 1/value`` (the book's overround)
   lies in ``[MIN_TOTAL_PROBABILITY, MAX_TOTAL_PROBABILITY]``.

The bounds check runs first so that a single absurd price produces the
more specific error.  Examples::

    validate_odds_values([2.0, 3.0])   # Σ ≈ 0.833, accepted
    validate_odds_values([1.1, 1.1])   # Σ ≈ 1.818, rejected
"""

from __future__ import annotations

from typing import Final, Iterable

from sarradabet.errors import BadRequestError

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

MIN_ODD_VALUE: Final[float] = 1.01
MAX_ODD_VALUE: Final[float] = 1000.0

#: Below 0.8 the book pays out far more than it takes in; above 1.2 the
#: margin is unrealistic for a fair market.
MIN_TOTAL_PROBABILITY: Final[float] = 0.8
MAX_TOTAL_PROBABILITY: Final[float] = 1.2

ODDS_OUT_OF_RANGE: Final[str] = "Odds values must be between 1.01 and 1000"
ODDS_UNREALISTIC: Final[str] = "Odds values do not represent realistic probabilities"


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def implied_probability(value: float) -> float:
    """Implied probability of a decimal price (``2.0`` → ``0.5``)."""
    if value <= 0:
        raise ValueError(f"Decimal odds {value!r} must be positive")
    return 1.0 / value


def total_implied_probability(values: Iterable[float]) -> float:
    """Sum of implied probabilities across every outcome of a market."""
    return sum(implied_probability(v) for v in values)


def potential_payout(stake: float, value: float) -> float:
    """Gross return of ``stake`` at decimal price ``value``."""
    return round(stake * value, 2)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def is_value_in_range(value: float) -> bool:
    return MIN_ODD_VALUE <= value <= MAX_ODD_VALUE


def validate_odds_values(values: Iterable[float]) -> float:
    """Reject a price list that is out of bounds or unrealistic.

    Returns:
        The total implied probability of the accepted market.

    Raises:
        BadRequestError: If the list is empty, any value is outside
            ``[1.01, 1000]``, or ``Σ 1/value`` is outside ``[0.8, 1.2]``.
    """
    values = list(values)
    if not values:
        raise BadRequestError("At least one odd is required")

    if any(not is_value_in_range(v) for v in values):
        raise BadRequestError(ODDS_OUT_OF_RANGE)

    total = total_implied_probability(values)
    if total < MIN_TOTAL_PROBABILITY or total > MAX_TOTAL_PROBABILITY:
        raise BadRequestError(ODDS_UNREALISTIC)

    return total
