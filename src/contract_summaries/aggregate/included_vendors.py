"""Included vendor set: the vendors large enough to get their own summaries.

A vendor is included when its average yearly spending reaches
`vendor_annual_total_threshold`, either over the whole coverage window or
over the most recent `vendor_recent_threshold_years` fiscal years. The second
pass picks up vendors that have grown recently but whose long-run average is
still below the bar.

Only "by vendor" summaries use this set; top-line totals never do.
"""

from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from contract_summaries.config import Settings
from contract_summaries.models import (
    FISCAL_YEAR_SHORT_COLUMN,
    OVERALL_TOTAL_COLUMN,
    VALUE_COLUMN,
    VENDOR_COLUMN,
    ColumnRole,
)

log = logging.getLogger(__name__)

MEAN_ANNUAL_TOTAL_COLUMN = "mean_annual_total"

INCLUDED_VENDORS_ROLES: dict[str, ColumnRole | None] = {
    VENDOR_COLUMN: None,
    OVERALL_TOTAL_COLUMN: ColumnRole.MONETARY,
    MEAN_ANNUAL_TOTAL_COLUMN: ColumnRole.MEAN,
}


def vendor_totals_between(ddf: Any, first_year: int, last_year: int) -> pd.Series:
    """Sum contract value per vendor for fiscal years in [first_year, last_year].

    Returns:
        pandas Series indexed by vendor name.
    """
    fy = ddf[FISCAL_YEAR_SHORT_COLUMN]
    window = ddf[(fy >= first_year) & (fy <= last_year)]
    return window.groupby(VENDOR_COLUMN)[VALUE_COLUMN].sum().compute()


def get_summary_included_vendors(ddf: Any, settings: Settings) -> frozenset[str]:
    """Compute the included vendor set for this run.

    Args:
        ddf: Full daily spending table (no summary type filter).
        settings: Threshold, coverage window and recent window length.

    Returns:
        Union of the full-window and recent-window vendor sets.
    """
    threshold = settings.vendor_annual_total_threshold
    start = settings.start_fiscal_year_short
    end = settings.end_fiscal_year_short

    overall = vendor_totals_between(ddf, start, end)
    top_vendors = overall[overall >= threshold * settings.summary_total_years].index

    recent_years = settings.vendor_recent_threshold_years
    recent = vendor_totals_between(ddf, end - recent_years + 1, end)
    recent_top_vendors = recent[recent >= threshold * recent_years].index

    included = frozenset(top_vendors) | frozenset(recent_top_vendors)
    log.info(
        "Included vendors: %d (%d over %d-%d, %d from the last %d years)",
        len(included),
        len(top_vendors),
        start,
        end,
        len(recent_top_vendors),
        recent_years,
    )
    return included


def summarize_included_vendors(
    ddf: Any,
    settings: Settings,
    included_vendors: frozenset[str],
) -> pd.DataFrame:
    """Return coverage-window totals for the included vendors.

    Returns:
        DataFrame with columns `d_vendor_name`, `overall_total`,
        `mean_annual_total`, sorted by descending total (unrounded).
    """
    totals = vendor_totals_between(
        ddf, settings.start_fiscal_year_short, settings.end_fiscal_year_short
    )
    totals = totals.reindex(sorted(included_vendors), fill_value=0.0)

    out = totals.rename(OVERALL_TOTAL_COLUMN).rename_axis(VENDOR_COLUMN).reset_index()
    out[MEAN_ANNUAL_TOTAL_COLUMN] = out[OVERALL_TOTAL_COLUMN] / settings.summary_total_years
    out = out.sort_values(OVERALL_TOTAL_COLUMN, ascending=False, kind="mergesort")
    return out.reset_index(drop=True)[list(INCLUDED_VENDORS_ROLES)]
