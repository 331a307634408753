"""Run orchestration: load inputs once, then build and export every summary."""

from __future__ import annotations

import logging
from typing import Iterable

import pandas as pd

from contract_summaries.aggregate.build_summary import SummaryContext
from contract_summaries.aggregate.catalog import ENTITY_TYPES, build_entity_summaries
from contract_summaries.aggregate.included_vendors import (
    INCLUDED_VENDORS_ROLES,
    get_summary_included_vendors,
    summarize_included_vendors,
)
from contract_summaries.config import Settings
from contract_summaries.export.folders import remove_existing_summary_folders
from contract_summaries.export.write_csv import export_summary, write_csv_if_enabled
from contract_summaries.formatting import apply_rounding
from contract_summaries.ingest.load_inputs import (
    load_individual_entries,
    load_owner_org_types,
    load_spending_by_date,
)
from contract_summaries.models import ColumnRole

log = logging.getLogger(__name__)

COVERAGE_ROLES: dict[str, ColumnRole | None] = {
    "start_fiscal_year_short": None,
    "end_fiscal_year_short": None,
    "summary_total_years": ColumnRole.DURATION,
}


def build_context(settings: Settings) -> SummaryContext:
    """Load the input tables and compute the included vendor set.

    Raises:
        FileNotFoundError / ValueError / pydantic.ValidationError: when an
            input is missing or malformed. Nothing is written in that case.
    """
    owner_org_types = load_owner_org_types(settings.owner_org_types_path)
    spending = load_spending_by_date(settings.spending_path).persist()
    entries = load_individual_entries(settings.individual_entries_path)

    return SummaryContext(
        spending=spending,
        owner_org_types=owner_org_types,
        included_vendors=get_summary_included_vendors(spending, settings),
        settings=settings,
        entries=entries,
    )


def export_meta(ctx: SummaryContext) -> int:
    """Write run-level metadata: included vendors and the coverage window."""
    settings = ctx.settings
    if settings.update_summary_csv_files:
        settings.meta_path.mkdir(parents=True, exist_ok=True)

    vendors = apply_rounding(
        summarize_included_vendors(ctx.spending, settings, ctx.included_vendors),
        INCLUDED_VENDORS_ROLES,
        settings,
    )
    coverage = apply_rounding(
        pd.DataFrame(
            [
                {
                    "start_fiscal_year_short": settings.start_fiscal_year_short,
                    "end_fiscal_year_short": settings.end_fiscal_year_short,
                    "summary_total_years": settings.summary_total_years,
                }
            ]
        ),
        COVERAGE_ROLES,
        settings,
    )

    written = int(write_csv_if_enabled(vendors, settings.meta_path / "included_vendors.csv", settings))
    written += int(
        write_csv_if_enabled(coverage, settings.meta_path / "summary_coverage.csv", settings)
    )
    return written


def run_summary_exports(
    ctx: SummaryContext,
    entity_type_names: Iterable[str] | None = None,
) -> dict[str, int]:
    """Build and export the summaries for the requested entity types.

    Args:
        ctx: Loaded run context.
        entity_type_names: Subset of `ENTITY_TYPES` keys; all when None.

    Returns:
        Mapping of entity type (and `meta`) to the number of files written.

    Raises:
        KeyError: for an unknown entity type name.
    """
    names = list(entity_type_names) if entity_type_names is not None else list(ENTITY_TYPES)
    unknown = [n for n in names if n not in ENTITY_TYPES]
    if unknown:
        raise KeyError(f"Unknown entity types: {', '.join(unknown)}")

    remove_existing_summary_folders(
        ctx.settings, [ENTITY_TYPES[n].output_path(ctx.settings) for n in names]
    )

    written: dict[str, int] = {}
    for name in names:
        entity_type = ENTITY_TYPES[name]
        summary_df = build_entity_summaries(ctx, entity_type)
        written[name] = export_summary(summary_df, entity_type.output_path(ctx.settings), ctx.settings)

    written["meta"] = export_meta(ctx)
    log.info("Summary exports complete: %s", written)
    return written
