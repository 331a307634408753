"""Summary aggregation helpers.

This package turns the daily spending table into the summary tables that are
exported as CSV files: filters (summary type, included vendors), the generic
group-and-sum pipeline, and the declarative catalog of per-entity breakdowns.
"""
