"""Fiscal year labels.

Government of Canada fiscal years run April to March, so the short code
2021 stands for the 2021-2022 fiscal year.
"""

from __future__ import annotations

from typing import Any

import pandas as pd


def convert_start_year_to_fiscal_year(start_year: Any) -> str | None:
    """Return the display label for a fiscal year short code.

    Args:
        start_year: Integer start year (e.g. 2021). Missing values map to None.

    Returns:
        Label such as ``"2021-2022"``.
    """
    if start_year is None or pd.isna(start_year):
        return None
    year = int(start_year)
    return f"{year}-{year + 1}"
