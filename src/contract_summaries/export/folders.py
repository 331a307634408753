"""Folder naming, creation and cleanup for summary exports."""

from __future__ import annotations

import logging
import re
import shutil
import unicodedata
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from contract_summaries.config import Settings

log = logging.getLogger(__name__)

SLUG_SEPARATOR = "-"
EMPTY_SLUG = "unnamed"

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def entity_slug(name: Any) -> str:
    """Return a filesystem-safe folder name for an entity.

    Accents are stripped, the name is lowercased, and every run of other
    characters becomes a single separator. Distinct names may map to the
    same slug; they then share a folder.

    >>> entity_slug("Société Ltd. (Canada)")
    'societe-ltd-canada'
    """
    if name is None or (not isinstance(name, str) and pd.isna(name)):
        return EMPTY_SLUG
    text = unicodedata.normalize("NFKD", str(name))
    text = "".join(ch for ch in text if not unicodedata.combining(ch)).lower()
    slug = _NON_ALNUM_RE.sub(SLUG_SEPARATOR, text).strip(SLUG_SEPARATOR)
    return slug or EMPTY_SLUG


def create_summary_folders(output_path: Path, entities: Iterable[Any]) -> list[Path]:
    """Create (if needed) one folder per entity under `output_path`.

    Returns:
        The entity folder paths, in `entities` order.
    """
    log.info("Generating summary folders in: %s", output_path)
    paths = [output_path / entity_slug(e) for e in entities]
    for p in paths:
        p.mkdir(parents=True, exist_ok=True)
    return paths


def removable_summary_roots(settings: Settings) -> tuple[Path, ...]:
    """Output roots that a cleanup may delete."""
    return (
        settings.vendor_path,
        settings.department_path,
        settings.overall_path,
        settings.category_path,
    )


def remove_existing_summary_folders(
    settings: Settings,
    output_paths: Iterable[Path] | None = None,
) -> list[Path]:
    """Delete the vendor, department, overall and category output roots.

    Only runs when both `update_summary_csv_files` and
    `remove_existing_summary_folders` are enabled; old entities would
    otherwise linger in those folders between runs.

    Args:
        settings: Run settings (switches and output roots).
        output_paths: Roots about to be regenerated. When given, only those
            of them that are removable are deleted; other trees are kept.

    Returns:
        The folders that were removed.
    """
    if not (settings.update_summary_csv_files and settings.remove_existing_summary_folders):
        log.info("Not removing existing summary folders.")
        return []

    log.info("Removing existing summary folders.")
    removed: list[Path] = []
    roots = removable_summary_roots(settings)
    if output_paths is not None:
        requested = set(output_paths)
        roots = tuple(p for p in roots if p in requested)

    for path in roots:
        if path.is_dir():
            shutil.rmtree(path)
            removed.append(path)
    return removed
