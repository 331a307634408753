"""Pydantic models and column names shared by the summary pipelines.

`OwnerOrgType` validates rows of the owner org reference file.
`AggregationSpec` describes one summary table (filters, grouping dimensions
and output shape) and knows the rounding role of each of its output columns.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Input columns of contract_spending_by_date
OWNER_ORG_COLUMN = "owner_org"
VENDOR_COLUMN = "d_vendor_name"
CATEGORY_COLUMN = "d_most_recent_category"
IT_SUBCATEGORY_COLUMN = "d_most_recent_it_subcategory"
FISCAL_YEAR_SHORT_COLUMN = "d_fiscal_year_short"
VALUE_COLUMN = "d_daily_contract_value"
CONSTANT_VALUE_COLUMN = "d_daily_contract_value_constant_2019_dollars"

SPENDING_COLUMNS = [
    OWNER_ORG_COLUMN,
    VENDOR_COLUMN,
    CATEGORY_COLUMN,
    IT_SUBCATEGORY_COLUMN,
    FISCAL_YEAR_SHORT_COLUMN,
    VALUE_COLUMN,
    CONSTANT_VALUE_COLUMN,
]

# Input columns of contracts_individual_entries
ORIGINAL_VENDOR_COLUMN = "vendor_name"
CONTRACT_VALUE_COLUMN = "d_contract_value"

ENTRIES_COLUMNS = [
    OWNER_ORG_COLUMN,
    VENDOR_COLUMN,
    ORIGINAL_VENDOR_COLUMN,
    CATEGORY_COLUMN,
    CONTRACT_VALUE_COLUMN,
]

# Output columns
FISCAL_YEAR_COLUMN = "d_fiscal_year"
TOTAL_COLUMN = "total"
OVERALL_TOTAL_COLUMN = "overall_total"
CONSTANT_TOTAL_COLUMN = "total_constant_2019_dollars"
PERCENTAGE_COLUMN = "percentage"
COUNT_COLUMN = "count"
COUNT_PERCENTAGE_COLUMN = "count_percentage"

DimensionName = Literal["vendor", "owner_org", "category", "it_subcategory"]

DIMENSION_COLUMNS: dict[str, str] = {
    "vendor": VENDOR_COLUMN,
    "owner_org": OWNER_ORG_COLUMN,
    "category": CATEGORY_COLUMN,
    "it_subcategory": IT_SUBCATEGORY_COLUMN,
}


class ColumnRole(str, Enum):
    """How an output column is rounded before it is written."""
    MONETARY = "monetary"
    PERCENTAGE = "percentage"
    DURATION = "duration"
    MEAN = "mean"
    COUNT = "count"


def _flag_present(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    try:
        return not bool(pd.isna(value))
    except (TypeError, ValueError):
        return True


class OwnerOrgType(BaseModel):
    """Schema for one row of the owner org reference file.

    The reference file marks cohort membership by filling in the flag
    column; any non-blank value counts as a member.
    """
    model_config = ConfigDict(extra="ignore")
    owner_org: str = Field(..., min_length=1)
    is_core: bool = False
    is_dnd: bool = False

    @field_validator("is_core", "is_dnd", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return _flag_present(value)

    @field_validator("owner_org", mode="before")
    @classmethod
    def _strip_org(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class AggregationSpec(BaseModel):
    """Resolved configuration of one summary table.

    Attributes:
        summary_type: Owner org cohort (`core`, `dnd`; any other value keeps
            every row).
        dimensions: Zero to two grouping dimensions, in output order.
        include_fiscal_year: Add the fiscal year as an extra grouping column
            and report nominal and constant-dollar totals.
        filter_vendors: Restrict rows to the included vendor set first.
        total_column: Name of the total column for ranking tables.
        add_percentage: Add a share-of-result-set column (ranking tables only).
        measure: Sum contract values, or count rows.
        source: Which input table the summary reads.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")
    summary_type: str = "all"
    dimensions: tuple[DimensionName, ...] = ()
    include_fiscal_year: bool = True
    filter_vendors: bool = False
    total_column: Literal["total", "overall_total"] = TOTAL_COLUMN
    add_percentage: bool = False
    measure: Literal["value", "count"] = "value"
    source: Literal["spending", "entries"] = "spending"

    @field_validator("dimensions")
    @classmethod
    def _check_dimensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(value) > 2:
            raise ValueError("at most two grouping dimensions are supported")
        if len(set(value)) != len(value):
            raise ValueError("grouping dimensions must not repeat")
        return value

    @model_validator(mode="after")
    def _check_shape(self) -> "AggregationSpec":
        if not self.include_fiscal_year and not self.dimensions:
            raise ValueError("ranking summaries need at least one grouping dimension")
        if self.include_fiscal_year and (self.add_percentage or self.measure == "count"):
            raise ValueError("percentages and counts are only available without fiscal years")
        if self.measure == "count" and self.source != "entries":
            raise ValueError("counts are computed on individual contract entries")
        return self

    @property
    def group_columns(self) -> list[str]:
        """Input column names of the grouping dimensions, in call order."""
        return [DIMENSION_COLUMNS[d] for d in self.dimensions]

    def output_roles(self) -> dict[str, ColumnRole | None]:
        """Return the ordered output columns mapped to their rounding role.

        Grouping columns map to ``None`` (left untouched).
        """
        roles: dict[str, ColumnRole | None] = {c: None for c in self.group_columns}
        if self.include_fiscal_year:
            roles[FISCAL_YEAR_COLUMN] = None
            roles[TOTAL_COLUMN] = ColumnRole.MONETARY
            roles[CONSTANT_TOTAL_COLUMN] = ColumnRole.MONETARY
        elif self.measure == "count":
            roles[COUNT_COLUMN] = ColumnRole.COUNT
            if self.add_percentage:
                roles[COUNT_PERCENTAGE_COLUMN] = ColumnRole.PERCENTAGE
        else:
            roles[self.total_column] = ColumnRole.MONETARY
            if self.add_percentage:
                roles[PERCENTAGE_COLUMN] = ColumnRole.PERCENTAGE
        return roles

    @property
    def output_columns(self) -> list[str]:
        return list(self.output_roles())
