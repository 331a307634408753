from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from contract_summaries.models import AggregationSpec, ColumnRole, OwnerOrgType


def test_owner_org_type_flags() -> None:
    m = OwnerOrgType.model_validate({"owner_org": " tc ", "is_core": "1", "is_dnd": ""})
    assert m.owner_org == "tc"
    assert m.is_core is True
    assert m.is_dnd is False


def test_owner_org_type_missing_flags_are_false() -> None:
    m = OwnerOrgType.model_validate({"owner_org": "dnd-mdn", "is_core": math.nan, "is_dnd": "x"})
    assert m.is_core is False
    assert m.is_dnd is True

    bare = OwnerOrgType.model_validate({"owner_org": "ssc", "notes": "ignored"})
    assert (bare.is_core, bare.is_dnd) == (False, False)


def test_owner_org_type_keeps_bools() -> None:
    m = OwnerOrgType.model_validate({"owner_org": "ssc", "is_core": False, "is_dnd": True})
    assert (m.is_core, m.is_dnd) == (False, True)


def test_owner_org_type_rejects_blank_org() -> None:
    with pytest.raises(ValidationError):
        OwnerOrgType.model_validate({"owner_org": "", "is_core": "1"})


def test_default_spec_is_fiscal_year_totals() -> None:
    spec = AggregationSpec()
    assert spec.output_columns == ["d_fiscal_year", "total", "total_constant_2019_dollars"]
    assert spec.output_roles()["total"] is ColumnRole.MONETARY


def test_ranking_output_columns() -> None:
    spec = AggregationSpec(
        dimensions=("vendor",),
        include_fiscal_year=False,
        total_column="overall_total",
        add_percentage=True,
    )
    assert spec.output_columns == ["d_vendor_name", "overall_total", "percentage"]
    assert spec.output_roles()["percentage"] is ColumnRole.PERCENTAGE


def test_count_output_columns() -> None:
    spec = AggregationSpec(
        dimensions=("category",),
        include_fiscal_year=False,
        measure="count",
        source="entries",
        add_percentage=True,
    )
    assert spec.output_columns == ["d_most_recent_category", "count", "count_percentage"]
    assert spec.output_roles()["count"] is ColumnRole.COUNT


def test_two_dimensions_keep_call_order() -> None:
    spec = AggregationSpec(dimensions=("vendor", "owner_org"))
    assert spec.group_columns == ["d_vendor_name", "owner_org"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"dimensions": ("vendor", "owner_org", "category")},
        {"dimensions": ("vendor", "vendor")},
        {"dimensions": ("supplier",)},
        {"include_fiscal_year": False},
        {"add_percentage": True},
        {"dimensions": ("category",), "include_fiscal_year": False, "measure": "count"},
        {"total_column": "grand_total"},
        {"unexpected": 1},
    ],
)
def test_invalid_specs_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ValidationError):
        AggregationSpec(**kwargs)


def test_spec_is_frozen() -> None:
    spec = AggregationSpec()
    with pytest.raises(ValidationError):
        spec.summary_type = "core"  # type: ignore[misc]
    assert spec.model_copy(update={"summary_type": "core"}).summary_type == "core"
