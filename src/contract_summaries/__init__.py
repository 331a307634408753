"""contract_summaries package.

Builds the summary CSV exports for the Government of Canada proactive
disclosure of contracts data: totals by vendor, department, category,
IT subcategory and fiscal year, written as one folder per entity.

Architecture:
- Inputs (daily spending table, owner org reference) are read from CSV
- Dask is used for the partitioned filter/group-by steps
- Pydantic models validate the reference rows and the aggregation specs
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
