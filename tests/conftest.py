from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd
import dask.dataframe as dd
import pytest

from contract_summaries.aggregate.build_summary import SummaryContext
from contract_summaries.aggregate.included_vendors import get_summary_included_vendors
from contract_summaries.config import Settings

SPENDING_ROWS: list[dict[str, Any]] = [
    {"owner_org": "tc", "d_vendor_name": "ACME", "d_most_recent_category": "2_professional_services",
     "d_most_recent_it_subcategory": None, "d_fiscal_year_short": 2019,
     "d_daily_contract_value": 300.0, "d_daily_contract_value_constant_2019_dollars": 330.0},
    {"owner_org": "tc", "d_vendor_name": "ACME", "d_most_recent_category": "3_information_technology",
     "d_most_recent_it_subcategory": "software", "d_fiscal_year_short": 2020,
     "d_daily_contract_value": 200.0, "d_daily_contract_value_constant_2019_dollars": 210.0},
    {"owner_org": "ssc", "d_vendor_name": "ACME", "d_most_recent_category": "3_information_technology",
     "d_most_recent_it_subcategory": "hardware", "d_fiscal_year_short": 2021,
     "d_daily_contract_value": 100.0, "d_daily_contract_value_constant_2019_dollars": 100.0},
    {"owner_org": "ssc", "d_vendor_name": "GLOBEX", "d_most_recent_category": "3_information_technology",
     "d_most_recent_it_subcategory": "software", "d_fiscal_year_short": 2022,
     "d_daily_contract_value": 250.0, "d_daily_contract_value_constant_2019_dollars": 250.0},
    {"owner_org": "dnd-mdn", "d_vendor_name": "INITECH", "d_most_recent_category": "1_goods",
     "d_most_recent_it_subcategory": None, "d_fiscal_year_short": 2019,
     "d_daily_contract_value": 50.0, "d_daily_contract_value_constant_2019_dollars": 55.0},
    {"owner_org": "dnd-mdn", "d_vendor_name": "INITECH", "d_most_recent_category": "1_goods",
     "d_most_recent_it_subcategory": None, "d_fiscal_year_short": 2022,
     "d_daily_contract_value": None, "d_daily_contract_value_constant_2019_dollars": 10.0},
    # org missing from the reference file
    {"owner_org": "xyz", "d_vendor_name": "ACME", "d_most_recent_category": "1_goods",
     "d_most_recent_it_subcategory": None, "d_fiscal_year_short": 2020,
     "d_daily_contract_value": 1000.0, "d_daily_contract_value_constant_2019_dollars": 1000.0},
]

OWNER_ORG_ROWS: list[dict[str, Any]] = [
    {"owner_org": "tc", "is_core": True, "is_dnd": False},
    {"owner_org": "ssc", "is_core": True, "is_dnd": False},
    {"owner_org": "dnd-mdn", "is_core": False, "is_dnd": True},
]

ENTRIES_ROWS: list[dict[str, Any]] = [
    {"owner_org": "tc", "d_vendor_name": "ACME", "vendor_name": "Acme Inc.",
     "d_most_recent_category": "2_professional_services", "d_contract_value": 5000.0},
    {"owner_org": "tc", "d_vendor_name": "ACME", "vendor_name": "The Acme Company",
     "d_most_recent_category": "3_information_technology", "d_contract_value": 9000.0},
    {"owner_org": "tc", "d_vendor_name": "ACME", "vendor_name": "Acme Inc.",
     "d_most_recent_category": "3_information_technology", "d_contract_value": 1000.0},
    {"owner_org": "tc", "d_vendor_name": "GLOBEX", "vendor_name": "Globex Corp",
     "d_most_recent_category": "3_information_technology", "d_contract_value": 700.0},
]


def to_ddf(rows: list[dict[str, Any]]) -> Any:
    return dd.from_pandas(pd.DataFrame(rows), npartitions=1)


def make_context(
    settings: Settings,
    rows: list[dict[str, Any]] | None = None,
    entries: list[dict[str, Any]] | None = None,
) -> SummaryContext:
    spending = to_ddf(rows if rows is not None else SPENDING_ROWS)
    return SummaryContext(
        spending=spending,
        owner_org_types=pd.DataFrame(OWNER_ORG_ROWS),
        included_vendors=get_summary_included_vendors(spending, settings),
        settings=settings,
        entries=to_ddf(entries) if entries is not None else None,
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    # 2019-2022 window: a vendor needs 400 overall, or 200 over 2021-2022
    return Settings(
        spending_path=tmp_path / "contract_spending_by_date.csv",
        owner_org_types_path=tmp_path / "owner_orgs.csv",
        output_dir=tmp_path / "out",
        vendor_annual_total_threshold=100.0,
        vendor_recent_threshold_years=2,
        start_fiscal_year_short=2019,
        end_fiscal_year_short=2022,
    )


@pytest.fixture
def ctx(settings: Settings) -> SummaryContext:
    return make_context(settings)


@pytest.fixture
def ctx_with_entries(settings: Settings) -> SummaryContext:
    return make_context(settings, entries=ENTRIES_ROWS)
