"""Load the spending table, individual entries and owner org reference file.

The large tables are read lazily into Dask DataFrames. The owner org
reference file is small; it is read with pandas and every row is validated
with the `OwnerOrgType` model. Any schema problem is fatal for the run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, cast

import pandas as pd
import dask.dataframe as dd

from contract_summaries.models import (
    CATEGORY_COLUMN,
    CONSTANT_VALUE_COLUMN,
    CONTRACT_VALUE_COLUMN,
    ENTRIES_COLUMNS,
    FISCAL_YEAR_SHORT_COLUMN,
    IT_SUBCATEGORY_COLUMN,
    ORIGINAL_VENDOR_COLUMN,
    OWNER_ORG_COLUMN,
    SPENDING_COLUMNS,
    VALUE_COLUMN,
    VENDOR_COLUMN,
    OwnerOrgType,
)

log = logging.getLogger(__name__)

# An all-blank text column would otherwise be inferred as float
TEXT_DTYPES = {
    OWNER_ORG_COLUMN: "object",
    VENDOR_COLUMN: "object",
    CATEGORY_COLUMN: "object",
    IT_SUBCATEGORY_COLUMN: "object",
    ORIGINAL_VENDOR_COLUMN: "object",
}

# Dask infers dtypes from the head of the file; a blank after the sample
# would not fit an inferred int64
NUMERIC_DTYPES = {
    FISCAL_YEAR_SHORT_COLUMN: "float64",
    VALUE_COLUMN: "float64",
    CONSTANT_VALUE_COLUMN: "float64",
    CONTRACT_VALUE_COLUMN: "float64",
}


def require_columns(columns: Any, required: list[str], label: str) -> None:
    """Raise ValueError when any of `required` is missing from `columns`."""
    missing = [c for c in required if c not in set(columns)]
    if missing:
        raise ValueError(f"{label} is missing required columns: {', '.join(missing)}")


def _read_csv_ddf(path: Path, required: list[str], label: str) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"{label} not found: {path}")

    header = pd.read_csv(path, nrows=0).columns
    require_columns(header, required, label)

    dtypes = {
        c: t for c, t in {**TEXT_DTYPES, **NUMERIC_DTYPES}.items() if c in required
    }
    dd_mod = cast(Any, dd)
    ddf = dd_mod.read_csv(str(path), usecols=required, dtype=dtypes, blocksize="64MB")
    log.info("Opened %s (%s) in %d partitions", label, path, ddf.npartitions)
    return ddf


def load_spending_by_date(path: Path) -> Any:
    """Open the daily contract spending table.

    Args:
        path: CSV with one row per contract-day allocation.

    Returns:
        Dask DataFrame restricted to the columns the summaries use.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if a required column is missing.
    """
    return _read_csv_ddf(path, SPENDING_COLUMNS, "contract_spending_by_date")


def load_individual_entries(path: Path | None) -> Any | None:
    """Open the individual contract entries table, if one is configured."""
    if path is None:
        log.info("No individual entries file configured.")
        return None
    return _read_csv_ddf(path, ENTRIES_COLUMNS, "contracts_individual_entries")


def validate_owner_org_types(pdf: pd.DataFrame) -> pd.DataFrame:
    """Validate reference rows with Pydantic and return a normalized frame.

    Args:
        pdf: Raw reference rows (`owner_org`, `is_core`, `is_dnd`).

    Returns:
        DataFrame with string `owner_org` and boolean flag columns.

    Raises:
        ValueError: if the `owner_org` column is missing.
        pydantic.ValidationError: if a row is malformed.
    """
    require_columns(pdf.columns, [OWNER_ORG_COLUMN], "owner org reference")

    rows = []
    for rec in pdf.to_dict(orient="records"):
        m = OwnerOrgType.model_validate(rec)
        rows.append(m.model_dump(mode="python"))

    return pd.DataFrame(rows, columns=["owner_org", "is_core", "is_dnd"])


def load_owner_org_types(path: Path) -> pd.DataFrame:
    """Read and validate the owner org reference CSV.

    Column names are normalized to snake_case first (the file is maintained
    by hand and headers have drifted over time).
    """
    if not path.exists():
        raise FileNotFoundError(f"owner org reference file not found: {path}")

    pdf = pd.read_csv(path, dtype=str, keep_default_na=True)
    pdf.columns = [
        "_".join(str(c).strip().lower().replace("-", " ").split()) for c in pdf.columns
    ]
    out = validate_owner_org_types(pdf)
    log.info(
        "Loaded %d owner orgs (%d core, %d dnd)",
        len(out),
        int(out["is_core"].sum()),
        int(out["is_dnd"].sum()),
    )
    return out
