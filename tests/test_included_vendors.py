from __future__ import annotations

from typing import Any

import pytest

from contract_summaries.aggregate.build_summary import SummaryContext
from contract_summaries.aggregate.included_vendors import (
    get_summary_included_vendors,
    summarize_included_vendors,
)
from contract_summaries.config import Settings
from tests.conftest import to_ddf


def _row(vendor: str, year: int, value: float) -> dict[str, Any]:
    return {
        "owner_org": "tc",
        "d_vendor_name": vendor,
        "d_most_recent_category": "1_goods",
        "d_most_recent_it_subcategory": None,
        "d_fiscal_year_short": year,
        "d_daily_contract_value": value,
        "d_daily_contract_value_constant_2019_dollars": value,
    }


BOUNDARY_ROWS = [
    # exactly threshold x 4 years over 2019-2022
    *[_row("AT_THRESHOLD", y, 100.0) for y in (2019, 2020, 2021, 2022)],
    # one cent short, all of it before the recent window
    _row("CENT_SHORT", 2019, 399.99),
    # recent window only: exactly threshold x 2 years
    _row("RECENT_GROWTH", 2022, 200.0),
    _row("RECENT_SHORT", 2022, 199.99),
    # outside the coverage window
    _row("OLD_GIANT", 2015, 10_000.0),
]


def test_threshold_is_inclusive(settings: Settings) -> None:
    included = get_summary_included_vendors(to_ddf(BOUNDARY_ROWS), settings)
    assert "AT_THRESHOLD" in included
    assert "CENT_SHORT" not in included


def test_recent_pass_adds_growing_vendors(settings: Settings) -> None:
    included = get_summary_included_vendors(to_ddf(BOUNDARY_ROWS), settings)
    assert "RECENT_GROWTH" in included
    assert "RECENT_SHORT" not in included


def test_spending_outside_window_is_ignored(settings: Settings) -> None:
    included = get_summary_included_vendors(to_ddf(BOUNDARY_ROWS), settings)
    assert "OLD_GIANT" not in included
    assert included == frozenset({"AT_THRESHOLD", "RECENT_GROWTH"})


def test_included_vendors_on_shared_fixture(ctx: SummaryContext) -> None:
    # ACME clears the full window, GLOBEX only the last two years
    assert ctx.included_vendors == frozenset({"ACME", "GLOBEX"})


def test_summarize_included_vendors(settings: Settings) -> None:
    ddf = to_ddf(BOUNDARY_ROWS)
    included = get_summary_included_vendors(ddf, settings)
    out = summarize_included_vendors(ddf, settings, included)

    assert list(out.columns) == ["d_vendor_name", "overall_total", "mean_annual_total"]
    assert list(out["d_vendor_name"]) == ["AT_THRESHOLD", "RECENT_GROWTH"]
    assert out.loc[0, "overall_total"] == pytest.approx(400.0)
    assert out.loc[0, "mean_annual_total"] == pytest.approx(100.0)
    assert out.loc[1, "mean_annual_total"] == pytest.approx(50.0)
