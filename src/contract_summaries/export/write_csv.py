"""Write summary tables to CSV.

`export_summary` takes a list-column frame (see
`aggregate.catalog.build_entity_summaries`): the first column holds entity
values and every other column holds one DataFrame per entity. Each
DataFrame is written to `<output_path>/<entity slug>/<column name>.csv`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from contract_summaries.config import Settings
from contract_summaries.export.folders import create_summary_folders, entity_slug

log = logging.getLogger(__name__)

NA_REP = "NA"


def write_csv_if_enabled(pdf: pd.DataFrame, path: Path, settings: Settings) -> bool:
    """Write `pdf` to `path` unless CSV updates are disabled.

    Existing files are overwritten. Filesystem errors propagate.

    Returns:
        True if the file was written.
    """
    if not settings.update_summary_csv_files:
        log.info(
            "update_summary_csv_files is disabled; would have exported a CSV to: %s", path
        )
        return False

    pdf.to_csv(path, index=False, na_rep=NA_REP, lineterminator="\n")
    return True


def export_individual_breakdown(
    breakdown_name: str,
    tables: Iterable[pd.DataFrame],
    output_path: Path,
    entities: Iterable[Any],
    settings: Settings,
) -> int:
    """Write one breakdown for every entity.

    Args:
        breakdown_name: File name (without `.csv`).
        tables: One DataFrame per entity, aligned with `entities`.
        output_path: Root folder of the entity type.
        entities: Entity values used to name the folders.
        settings: Run settings (dry-run switch).

    Returns:
        Number of files written.
    """
    written = 0
    for table, entity in zip(tables, entities):
        path = output_path / entity_slug(entity) / f"{breakdown_name}.csv"
        written += int(write_csv_if_enabled(table, path, settings))
    return written


def export_summary(summary_df: pd.DataFrame, output_path: Path, settings: Settings) -> int:
    """Export every breakdown column of a list-column summary frame.

    Args:
        summary_df: First column = entity values, other columns = DataFrames.
        output_path: Root folder for this entity type.
        settings: Run settings.

    Returns:
        Number of files written.
    """
    entity_column = summary_df.columns[0]
    entities = list(summary_df[entity_column])

    if settings.update_summary_csv_files:
        create_summary_folders(output_path, entities)

    written = 0
    for breakdown_name in summary_df.columns[1:]:
        written += export_individual_breakdown(
            breakdown_name,
            list(summary_df[breakdown_name]),
            output_path,
            entities,
            settings,
        )

    log.info("Exported %d files under %s", written, output_path)
    return written
