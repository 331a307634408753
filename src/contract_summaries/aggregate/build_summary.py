"""Generic summary pipeline.

Every exported table is produced by `build_summary`, parameterized by an
`AggregationSpec`:

    filter (summary type, entity, included vendors)
    -> group (0-2 dimensions, optionally + fiscal year)
    -> sum / count
    -> percentages, ordering, column selection
    -> rounding

Filtering and grouping run on the Dask DataFrame; the grouped result is
small and is materialized to pandas for the remaining steps.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from contract_summaries.aggregate.filters import (
    drop_missing_it_subcategory,
    filter_by_summary_type,
    filter_to_entity,
    filter_vendors_if_required,
)
from contract_summaries.config import Settings
from contract_summaries.fiscal import convert_start_year_to_fiscal_year
from contract_summaries.formatting import apply_rounding
from contract_summaries.models import (
    CONSTANT_TOTAL_COLUMN,
    CONSTANT_VALUE_COLUMN,
    COUNT_COLUMN,
    COUNT_PERCENTAGE_COLUMN,
    FISCAL_YEAR_COLUMN,
    FISCAL_YEAR_SHORT_COLUMN,
    PERCENTAGE_COLUMN,
    TOTAL_COLUMN,
    VALUE_COLUMN,
    AggregationSpec,
)


@dataclass(frozen=True)
class SummaryContext:
    """Everything a summary needs for one run.

    Attributes:
        spending: Dask DataFrame of `contract_spending_by_date`.
        owner_org_types: Validated owner org reference table (pandas).
        included_vendors: Vendors that get "by vendor" breakdowns.
        settings: Run configuration (precisions, paths, thresholds).
        entries: Optional Dask DataFrame of individual contract entries.
    """
    spending: Any
    owner_org_types: pd.DataFrame
    included_vendors: frozenset[str]
    settings: Settings
    entries: Any | None = None


# =========================================================
# SUMMARIZERS
# =========================================================

def summarize_fiscal_year_totals(ddf: Any, keys: list[str]) -> pd.DataFrame:
    """Sum nominal and constant-dollar values per group.

    Missing values contribute nothing to the sums. Groups with a missing key
    are kept.

    Returns:
        pandas DataFrame with the `keys` columns, `total` and
        `total_constant_2019_dollars`.
    """
    grouped = (
        ddf.groupby(keys, dropna=False)[[VALUE_COLUMN, CONSTANT_VALUE_COLUMN]]
        .sum()
        .compute()
    )
    return grouped.reset_index().rename(
        columns={VALUE_COLUMN: TOTAL_COLUMN, CONSTANT_VALUE_COLUMN: CONSTANT_TOTAL_COLUMN}
    )


def summarize_totals(ddf: Any, keys: list[str], total_column: str = TOTAL_COLUMN) -> pd.DataFrame:
    """Sum nominal values per group into a single `total_column`."""
    grouped = ddf.groupby(keys, dropna=False)[VALUE_COLUMN].sum().compute()
    return grouped.reset_index().rename(columns={VALUE_COLUMN: total_column})


def summarize_counts(ddf: Any, keys: list[str]) -> pd.DataFrame:
    """Count rows per group."""
    grouped = ddf.groupby(keys, dropna=False).size().compute()
    return grouped.reset_index(name=COUNT_COLUMN)


def _share(values: pd.Series) -> pd.Series:
    denominator = values.sum()
    if denominator == 0:
        return pd.Series(np.nan, index=values.index, dtype="float64")
    return values / denominator


def add_total_percentage(pdf: pd.DataFrame, total_column: str = TOTAL_COLUMN) -> pd.DataFrame:
    """Add each group's share of the summed total of the result set.

    When the totals sum to zero no share is defined; every percentage is
    missing (written as `NA`) rather than infinite.
    """
    out = pdf.copy()
    out[PERCENTAGE_COLUMN] = _share(out[total_column])
    return out


def add_count_percentage(pdf: pd.DataFrame) -> pd.DataFrame:
    """Add each group's share of the summed row count of the result set."""
    out = pdf.copy()
    out[COUNT_PERCENTAGE_COLUMN] = _share(out[COUNT_COLUMN])
    return out


def _rank(pdf: pd.DataFrame, keys: list[str], value_column: str) -> pd.DataFrame:
    # Largest first; ties keep ascending key order
    ordered = pdf.sort_values(keys, kind="mergesort")
    return ordered.sort_values(value_column, ascending=False, kind="mergesort")


# =========================================================
# PIPELINE
# =========================================================

def _source_frame(ctx: SummaryContext, spec: AggregationSpec) -> Any:
    if spec.source == "entries":
        if ctx.entries is None:
            raise ValueError("this summary needs the individual contract entries table")
        return ctx.entries
    return ctx.spending


def _filtered_rows(ctx: SummaryContext, spec: AggregationSpec) -> Any:
    ddf = filter_by_summary_type(_source_frame(ctx, spec), spec.summary_type, ctx.owner_org_types)
    ddf = filter_vendors_if_required(ddf, ctx.included_vendors, spec.filter_vendors)
    if "it_subcategory" in spec.dimensions:
        ddf = drop_missing_it_subcategory(ddf)
    return ddf


def _aggregate(ddf: Any, spec: AggregationSpec, leading_keys: list[str]) -> pd.DataFrame:
    keys = leading_keys + [c for c in spec.group_columns if c not in leading_keys]
    if spec.include_fiscal_year:
        return summarize_fiscal_year_totals(ddf, keys + [FISCAL_YEAR_SHORT_COLUMN])
    if spec.measure == "count":
        return summarize_counts(ddf, keys)
    return summarize_totals(ddf, keys, spec.total_column)


def _finish(pdf: pd.DataFrame, spec: AggregationSpec, settings: Settings) -> pd.DataFrame:
    keys = spec.group_columns

    if spec.include_fiscal_year:
        fy_keys = keys + [FISCAL_YEAR_SHORT_COLUMN]
        pdf = pdf.sort_values(fy_keys, kind="mergesort")
        pdf[FISCAL_YEAR_COLUMN] = pdf[FISCAL_YEAR_SHORT_COLUMN].map(
            convert_start_year_to_fiscal_year
        )
    elif spec.measure == "count":
        pdf = _rank(pdf, keys, COUNT_COLUMN)
        if spec.add_percentage:
            pdf = add_count_percentage(pdf)
    else:
        pdf = _rank(pdf, keys, spec.total_column)
        if spec.add_percentage:
            pdf = add_total_percentage(pdf, spec.total_column)

    pdf = pdf.reset_index(drop=True)[spec.output_columns]
    return apply_rounding(pdf, spec.output_roles(), settings)


def build_summary(
    ctx: SummaryContext,
    spec: AggregationSpec,
    entity: tuple[str, Any] | None = None,
) -> pd.DataFrame:
    """Run one summary pipeline.

    Args:
        ctx: Input tables and settings for the run.
        spec: Filters, grouping dimensions and output shape.
        entity: Optional `(column, value)` pair scoping the summary to a single
            vendor, org, category or IT subcategory. The column may also be a
            grouping dimension; it is then kept as a constant column.

    Returns:
        Rounded pandas DataFrame with exactly `spec.output_columns`. An entity
        without matching rows yields an empty frame with those columns.
    """
    ddf = _filtered_rows(ctx, spec)
    if entity is not None:
        ddf = filter_to_entity(ddf, *entity)
    return _finish(_aggregate(ddf, spec, []), spec, ctx.settings)


def build_summaries_by_entity(
    ctx: SummaryContext,
    spec: AggregationSpec,
    column: str,
    entities: list[Any],
) -> list[pd.DataFrame]:
    """Run one summary pipeline for many entities with a single compute.

    Rows are grouped by `column` plus the spec's own keys in one Dask pass; the
    small result is then split per entity and finished in pandas, so each
    table matches `build_summary(ctx, spec, (column, entity))`.

    Returns:
        One DataFrame per entity, in `entities` order.
    """
    if not entities:
        return []

    ddf = _filtered_rows(ctx, spec)
    ddf = ddf[ddf[column].isin(list(entities))]
    grouped = _aggregate(ddf, spec, [column])

    parts = {value: part for value, part in grouped.groupby(column, sort=False)}
    empty = grouped.iloc[0:0]
    return [
        _finish(parts.get(entity, empty).copy(), spec, ctx.settings) for entity in entities
    ]
