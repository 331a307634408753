"""Row filters applied before grouping.

All filters take and return a Dask (or pandas) DataFrame and stay lazy.
"""

from __future__ import annotations

from typing import Any, Iterable

import pandas as pd

from contract_summaries.models import IT_SUBCATEGORY_COLUMN, OWNER_ORG_COLUMN, VENDOR_COLUMN

COHORT_FLAGS = {"core": "is_core", "dnd": "is_dnd"}


def included_orgs_for_summary_type(
    owner_org_types: pd.DataFrame,
    summary_type: str,
) -> list[str] | None:
    """Return the owner org codes that make up a summary type cohort.

    Returns:
        Sorted org codes for `core` and `dnd`. None for any other value,
        meaning no cohort restriction (orgs that are new since the reference
        file was last updated are kept).
    """
    flag = COHORT_FLAGS.get(summary_type)
    if flag is None:
        return None
    orgs = owner_org_types.loc[owner_org_types[flag].astype(bool), "owner_org"]
    return sorted(set(orgs))


def filter_by_summary_type(ddf: Any, summary_type: str, owner_org_types: pd.DataFrame) -> Any:
    """Keep rows whose owner org belongs to the `summary_type` cohort.

    Args:
        ddf: Spending rows with an `owner_org` column.
        summary_type: `core` or `dnd`; any other value keeps every row.
        owner_org_types: Validated owner org reference table.
    """
    orgs = included_orgs_for_summary_type(owner_org_types, summary_type)
    if orgs is None:
        return ddf
    return ddf[ddf[OWNER_ORG_COLUMN].isin(orgs)]


def filter_vendors_if_required(
    ddf: Any,
    included_vendors: Iterable[str],
    filter_vendors: bool = False,
) -> Any:
    """Restrict rows to the included vendor set when `filter_vendors` is set."""
    if not filter_vendors:
        return ddf
    return ddf[ddf[VENDOR_COLUMN].isin(sorted(included_vendors))]


def filter_to_entity(ddf: Any, column: str, value: Any) -> Any:
    """Keep rows where `column` equals `value` (missing values never match)."""
    return ddf[ddf[column] == value]


def drop_missing_it_subcategory(ddf: Any) -> Any:
    """Drop non-IT rows (those without an IT subcategory)."""
    return ddf[ddf[IT_SUBCATEGORY_COLUMN].notnull()]
