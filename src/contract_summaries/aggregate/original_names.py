"""Original vendor name spellings behind a normalized vendor name."""

from __future__ import annotations

from typing import Any

import pandas as pd

from contract_summaries.aggregate.filters import filter_to_entity
from contract_summaries.models import CONTRACT_VALUE_COLUMN, ORIGINAL_VENDOR_COLUMN, VENDOR_COLUMN

NORMALIZED_NAME_COLUMN = "normalized_vendor_name"
ORIGINAL_NAME_COLUMN = "original_vendor_name"


def get_original_vendor_names(entries: Any, vendor: str, sort_by_value: bool = True) -> pd.DataFrame:
    """List the distinct original spellings of a normalized vendor name.

    Args:
        entries: Individual contract entries (Dask or pandas DataFrame).
        vendor: Normalized vendor name (`d_vendor_name`).
        sort_by_value: Order names by their largest contract first; when
            False, order alphabetically.

    Returns:
        DataFrame with columns `normalized_vendor_name`, `original_vendor_name`.
    """
    rows = filter_to_entity(entries, VENDOR_COLUMN, vendor)[
        [VENDOR_COLUMN, ORIGINAL_VENDOR_COLUMN, CONTRACT_VALUE_COLUMN]
    ]
    if hasattr(rows, "compute"):
        rows = rows.compute()

    out = (
        rows.sort_values(CONTRACT_VALUE_COLUMN, ascending=False, kind="mergesort")
        [[VENDOR_COLUMN, ORIGINAL_VENDOR_COLUMN]]
        .drop_duplicates()
        .rename(
            columns={
                VENDOR_COLUMN: NORMALIZED_NAME_COLUMN,
                ORIGINAL_VENDOR_COLUMN: ORIGINAL_NAME_COLUMN,
            }
        )
    )
    if not sort_by_value:
        out = out.sort_values(ORIGINAL_NAME_COLUMN, kind="mergesort")
    return out.reset_index(drop=True)
