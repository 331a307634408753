"""Rounding and number formatting for exported summary tables.

Every summary declares the role of each output column (see
`AggregationSpec.output_roles`); `apply_rounding` turns those roles into
rounding rules as the last step before a table is written. Rounding is
half-to-even at the configured precision (numpy semantics), so published
figures are reproducible.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping

import numpy as np
import pandas as pd

from contract_summaries.config import Settings
from contract_summaries.models import ColumnRole

# Short-scale suffixes, smallest first
SHORT_SCALE: tuple[tuple[float, str], ...] = (
    (1.0, ""),
    (1e3, "K"),
    (1e6, "M"),
    (1e9, "B"),
    (1e12, "T"),
)


def round_half_even(value: float, digits: int) -> float:
    """Round to `digits` decimals, ties to even. Negative zero becomes 0.0."""
    return float(np.round(float(value), digits)) + 0.0


def round_total(value: Any, digits: int = 2) -> str | None:
    """Round a monetary value and render it with fixed decimal padding.

    >>> round_total(5)
    '5.00'
    """
    if value is None or pd.isna(value):
        return None
    return f"{round_half_even(value, digits):.{digits}f}"


def role_digits(role: ColumnRole, settings: Settings) -> int | None:
    """Return the decimal places configured for a column role."""
    return {
        ColumnRole.MONETARY: settings.round_totals_digits,
        ColumnRole.PERCENTAGE: settings.round_percentages_digits,
        ColumnRole.DURATION: settings.round_years_digits,
        ColumnRole.MEAN: settings.round_mean_digits,
    }.get(role)


def apply_rounding(
    pdf: pd.DataFrame,
    roles: Mapping[str, ColumnRole | None],
    settings: Settings,
) -> pd.DataFrame:
    """Round each column of `pdf` according to its declared role.

    Monetary columns become fixed-decimal strings; percentage, duration and
    mean columns stay numeric. Columns without a role, and columns missing
    from `pdf`, are left alone.

    Args:
        pdf: Summary table (not modified).
        roles: Output column name -> role.
        settings: Source of the configured precisions.

    Returns:
        A rounded copy of `pdf`.
    """
    out = pdf.copy()
    for column, role in roles.items():
        if role is None or column not in out.columns:
            continue
        digits = role_digits(role, settings)
        if digits is None:
            continue
        if role is ColumnRole.MONETARY:
            out[column] = out[column].map(lambda v, d=digits: round_total(v, d)).astype(object)
        else:
            out[column] = out[column].astype(float).round(digits)
    return out


def _accuracy_decimals(accuracy: float) -> int:
    exponent = Decimal(str(accuracy)).normalize().as_tuple().exponent
    return max(0, -int(exponent))


def _round_to_accuracy(value: float, accuracy: float) -> float:
    return float(np.round(value / accuracy)) * accuracy


def fancy_round(number: Any, accuracy: float = 0.1) -> str | None:
    """Abbreviate a value with a short-scale suffix (K, M, B, T).

    Args:
        number: Value to format; missing values map to None.
        accuracy: Rounding step of the scaled value (0.1 -> one decimal).

    Returns:
        Display string such as ``"1.2M"`` or ``"950.0"``.
    """
    if number is None or pd.isna(number):
        return None
    value = float(number)

    index = 0
    for i, (scale, _) in enumerate(SHORT_SCALE):
        if abs(value) >= scale:
            index = i

    scaled = _round_to_accuracy(value / SHORT_SCALE[index][0], accuracy)
    # 999_960 rounds to 1000.0K; report it as 1.0M instead
    if abs(scaled) >= 1000 and index < len(SHORT_SCALE) - 1:
        index += 1
        scaled = _round_to_accuracy(value / SHORT_SCALE[index][0], accuracy)

    decimals = _accuracy_decimals(accuracy)
    return f"{scaled + 0.0:.{decimals}f}{SHORT_SCALE[index][1]}"


def fancy_totals(
    pdf: pd.DataFrame,
    roles: Mapping[str, ColumnRole | None],
    accuracy: float = 0.1,
) -> pd.DataFrame:
    """Return a copy of `pdf` with every monetary column abbreviated."""
    out = pdf.copy()
    for column, role in roles.items():
        if role is ColumnRole.MONETARY and column in out.columns:
            out[column] = out[column].map(lambda v: fancy_round(v, accuracy)).astype(object)
    return out
