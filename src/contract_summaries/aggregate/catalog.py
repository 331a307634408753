"""Declarative catalog of per-entity summary breakdowns.

Each entity type (vendors, departments, categories, IT subcategories and the
overall summary types) maps breakdown names to the `AggregationSpec` that
produces them. A breakdown name is also the CSV file name written into each
entity's folder.

For most entity types the entity value is an equality filter on one column.
For `overall` the entity value is the summary type itself.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

import numpy as np
import pandas as pd

from contract_summaries.aggregate.build_summary import (
    SummaryContext,
    build_summaries_by_entity,
    build_summary,
)
from contract_summaries.aggregate.original_names import get_original_vendor_names
from contract_summaries.config import Settings
from contract_summaries.models import (
    CATEGORY_COLUMN,
    IT_SUBCATEGORY_COLUMN,
    OVERALL_TOTAL_COLUMN,
    OWNER_ORG_COLUMN,
    VENDOR_COLUMN,
    AggregationSpec,
)

log = logging.getLogger(__name__)

SUMMARY_TYPES = ("core", "dnd", "all")
SUMMARY_TYPE_COLUMN = "summary_type"


@dataclass(frozen=True)
class CustomBreakdown:
    """A breakdown that is not a plain aggregation.

    Attributes:
        build: Called with the run context and one entity value.
        source: Input table it reads (`spending` or `entries`).
    """
    build: Callable[[SummaryContext, Any], pd.DataFrame]
    source: str = "spending"


Breakdown = AggregationSpec | CustomBreakdown


@dataclass(frozen=True)
class EntityType:
    """One family of summary folders.

    Attributes:
        name: Entity type name (CLI `--only` value).
        entity_column: First column of the list-column summary frame.
        filter_column: Column the entity value filters on, or None when the
            entity value is a summary type.
        path_attr: `Settings` property holding the output root.
        list_entities: Returns the entity values to summarize.
        breakdowns: Breakdown name -> spec.
    """
    name: str
    entity_column: str
    filter_column: str | None
    path_attr: str
    list_entities: Callable[[SummaryContext], list[Any]]
    breakdowns: Mapping[str, Breakdown] = field(default_factory=dict)

    def output_path(self, settings: Settings) -> Path:
        return getattr(settings, self.path_attr)


def _spec(*dimensions: str, **kwargs: Any) -> AggregationSpec:
    return AggregationSpec(dimensions=dimensions, **kwargs)


def _ranking(*dimensions: str, **kwargs: Any) -> AggregationSpec:
    return AggregationSpec(dimensions=dimensions, include_fiscal_year=False, **kwargs)


# =========================================================
# ENTITY LISTS
# =========================================================

def _included_vendors(ctx: SummaryContext) -> list[Any]:
    return sorted(ctx.included_vendors)


def _distinct_values(column: str) -> Callable[[SummaryContext], list[Any]]:
    def _list(ctx: SummaryContext) -> list[Any]:
        return sorted(ctx.spending[column].dropna().unique().compute())
    return _list


def _summary_types(_: SummaryContext) -> list[Any]:
    return list(SUMMARY_TYPES)


# =========================================================
# CATALOG
# =========================================================

VENDORS = EntityType(
    name="vendors",
    entity_column=VENDOR_COLUMN,
    filter_column=VENDOR_COLUMN,
    path_attr="vendor_path",
    list_entities=_included_vendors,
    breakdowns={
        "fiscal_year_totals": _spec(),
        "owner_org_fiscal_year_totals": _spec("owner_org"),
        "category_fiscal_year_totals": _spec("category"),
        "it_subcategory_fiscal_year_totals": _spec("it_subcategory"),
        "category_breakdown": _ranking("category", add_percentage=True),
        "it_subcategory_breakdown": _ranking("it_subcategory", add_percentage=True),
        "original_vendor_names": CustomBreakdown(
            build=lambda ctx, vendor: get_original_vendor_names(ctx.entries, vendor),
            source="entries",
        ),
    },
)

DEPARTMENTS = EntityType(
    name="departments",
    entity_column=OWNER_ORG_COLUMN,
    filter_column=OWNER_ORG_COLUMN,
    path_attr="department_path",
    list_entities=_distinct_values(OWNER_ORG_COLUMN),
    breakdowns={
        "fiscal_year_totals": _spec(),
        "vendor_fiscal_year_totals": _spec("vendor", filter_vendors=True),
        "category_fiscal_year_totals": _spec("category"),
        "it_subcategory_fiscal_year_totals": _spec("it_subcategory"),
        "vendor_totals": _ranking(
            "vendor", filter_vendors=True, total_column=OVERALL_TOTAL_COLUMN
        ),
        "category_breakdown": _ranking("category", add_percentage=True),
        "it_subcategory_breakdown": _ranking("it_subcategory", add_percentage=True),
        "category_contract_counts": _ranking(
            "category", measure="count", source="entries", add_percentage=True
        ),
    },
)

CATEGORIES = EntityType(
    name="categories",
    entity_column=CATEGORY_COLUMN,
    filter_column=CATEGORY_COLUMN,
    path_attr="category_path",
    list_entities=_distinct_values(CATEGORY_COLUMN),
    breakdowns={
        "fiscal_year_totals": _spec(),
        "vendor_fiscal_year_totals": _spec("vendor", filter_vendors=True),
        "owner_org_fiscal_year_totals": _spec("owner_org"),
        "vendor_totals": _ranking(
            "vendor", filter_vendors=True, total_column=OVERALL_TOTAL_COLUMN
        ),
        "owner_org_totals": _ranking("owner_org", total_column=OVERALL_TOTAL_COLUMN),
    },
)

IT_SUBCATEGORIES = EntityType(
    name="it_subcategories",
    entity_column=IT_SUBCATEGORY_COLUMN,
    filter_column=IT_SUBCATEGORY_COLUMN,
    path_attr="it_subcategory_path",
    list_entities=_distinct_values(IT_SUBCATEGORY_COLUMN),
    breakdowns={
        **CATEGORIES.breakdowns,
        "owner_org_vendor_fiscal_year_totals": _spec("owner_org", "vendor"),
    },
)

OVERALL = EntityType(
    name="overall",
    entity_column=SUMMARY_TYPE_COLUMN,
    filter_column=None,
    path_attr="overall_path",
    list_entities=_summary_types,
    breakdowns={
        "fiscal_year_totals": _spec(),
        "vendor_fiscal_year_totals": _spec("vendor", filter_vendors=True),
        "category_fiscal_year_totals": _spec("category"),
        "it_subcategory_fiscal_year_totals": _spec("it_subcategory"),
        "owner_org_fiscal_year_totals": _spec("owner_org"),
        "vendor_totals": _ranking("vendor", filter_vendors=True),
        "category_totals": _ranking("category"),
        "it_subcategory_totals": _ranking("it_subcategory"),
        "owner_org_totals": _ranking("owner_org"),
    },
)

ENTITY_TYPES: dict[str, EntityType] = {
    t.name: t for t in (VENDORS, DEPARTMENTS, CATEGORIES, IT_SUBCATEGORIES, OVERALL)
}


# =========================================================
# BUILDERS
# =========================================================

def available_breakdowns(ctx: SummaryContext, entity_type: EntityType) -> dict[str, Breakdown]:
    """Return the breakdowns of `entity_type` that this run can build."""
    out: dict[str, Breakdown] = {}
    for name, breakdown in entity_type.breakdowns.items():
        if breakdown.source == "entries" and ctx.entries is None:
            log.warning(
                "No individual entries loaded. Skipping %s/%s.", entity_type.name, name
            )
            continue
        out[name] = breakdown
    return out


def summarize_entity(
    ctx: SummaryContext,
    entity_type: EntityType,
    breakdown_name: str,
    entity: Any,
) -> pd.DataFrame:
    """Build one breakdown table for one entity.

    Args:
        ctx: Run context.
        entity_type: Catalog entry (e.g. `VENDORS`).
        breakdown_name: Key of `entity_type.breakdowns`.
        entity: Vendor name, owner org, category, IT subcategory or summary type.

    Raises:
        KeyError: if `breakdown_name` is not part of the entity type.
    """
    breakdown = entity_type.breakdowns[breakdown_name]
    if isinstance(breakdown, CustomBreakdown):
        return breakdown.build(ctx, entity)
    if entity_type.filter_column is None:
        return build_summary(ctx, breakdown.model_copy(update={"summary_type": entity}))
    return build_summary(ctx, breakdown, (entity_type.filter_column, entity))


def _object_column(values: list[Any]) -> pd.Series:
    # Build the ndarray by hand so pandas does not unpack nested DataFrames
    arr = np.empty(len(values), dtype=object)
    for i, v in enumerate(values):
        arr[i] = v
    return pd.Series(arr, dtype=object)


def _breakdown_tables(
    ctx: SummaryContext,
    entity_type: EntityType,
    breakdown_name: str,
    entities: list[Any],
) -> list[pd.DataFrame]:
    breakdown = entity_type.breakdowns[breakdown_name]
    if isinstance(breakdown, AggregationSpec) and entity_type.filter_column is not None:
        return build_summaries_by_entity(
            ctx, breakdown, entity_type.filter_column, list(entities)
        )
    return [summarize_entity(ctx, entity_type, breakdown_name, e) for e in entities]


def build_entity_summaries(
    ctx: SummaryContext,
    entity_type: EntityType,
    entities: list[Any] | None = None,
) -> pd.DataFrame:
    """Build every breakdown for every entity of a type.

    Args:
        ctx: Run context.
        entity_type: Catalog entry.
        entities: Entity values to summarize; defaults to
            `entity_type.list_entities(ctx)`.

    Returns:
        List-column DataFrame: the first column holds the entity values, each
        further column (named after a breakdown) holds one DataFrame per entity.
    """
    if entities is None:
        entities = entity_type.list_entities(ctx)
    breakdowns = available_breakdowns(ctx, entity_type)

    log.info(
        "Building %d %s breakdowns for %d entities",
        len(breakdowns),
        entity_type.name,
        len(entities),
    )

    columns: dict[str, pd.Series] = {
        entity_type.entity_column: pd.Series(list(entities), dtype=object)
    }
    for name in breakdowns:
        columns[name] = _object_column(_breakdown_tables(ctx, entity_type, name, entities))
    return pd.DataFrame(columns)
