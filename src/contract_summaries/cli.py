"""Command-line interface for the summary exports.

Provides subcommands: `export` and `included-vendors`. Each command is
implemented as a `cmd_*` function that accepts an argparse namespace.
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
from pathlib import Path

from dotenv import load_dotenv

from contract_summaries.aggregate.catalog import ENTITY_TYPES
from contract_summaries.aggregate.included_vendors import (
    MEAN_ANNUAL_TOTAL_COLUMN,
    summarize_included_vendors,
)
from contract_summaries.config import Settings, get_settings
from contract_summaries.formatting import fancy_totals
from contract_summaries.logging_config import configure_logging
from contract_summaries.models import OVERALL_TOTAL_COLUMN, ColumnRole
from contract_summaries.pipeline import build_context, run_summary_exports

log = logging.getLogger(__name__)

# Both vendor amounts are shown abbreviated on the console
DISPLAY_ROLES = {
    OVERALL_TOTAL_COLUMN: ColumnRole.MONETARY,
    MEAN_ANNUAL_TOTAL_COLUMN: ColumnRole.MONETARY,
}


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _settings_from_args(args: argparse.Namespace) -> Settings:
    """Apply command-line overrides on top of the environment settings."""
    s = get_settings()
    overrides = {}
    if getattr(args, "dry_run", False):
        overrides["update_summary_csv_files"] = False
    if getattr(args, "remove_existing", False):
        overrides["remove_existing_summary_folders"] = True
    return dataclasses.replace(s, **overrides) if overrides else s


# --------------------------------------------------
# EXPORT
# --------------------------------------------------
def cmd_export(args: argparse.Namespace) -> None:
    """Build every requested summary and write the CSV folders.

    Args:
        args: argparse namespace with `only`, `dry_run`, `remove_existing`.
    """
    s = _settings_from_args(args)
    ctx = build_context(s)
    written = run_summary_exports(ctx, args.only)
    log.info("Wrote %d files.", sum(written.values()))


# --------------------------------------------------
# INCLUDED VENDORS
# --------------------------------------------------
def cmd_included_vendors(args: argparse.Namespace) -> None:
    """Log the largest included vendors with abbreviated totals."""
    s = _settings_from_args(args)
    ctx = build_context(s)

    pdf = summarize_included_vendors(ctx.spending, s, ctx.included_vendors).head(args.top_n)
    pdf = fancy_totals(pdf, DISPLAY_ROLES, s.fancy_round_accuracy)

    log.info(
        "%d included vendors (threshold %s per year, %d-%d)",
        len(ctx.included_vendors),
        s.vendor_annual_total_threshold,
        s.start_fiscal_year_short,
        s.end_fiscal_year_short,
    )
    for row in pdf.itertuples(index=False):
        log.info("  %s: %s (%s per year)", row[0], row[1], row[2])


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="contract-summaries")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_export = sub.add_parser("export")
    p_export.add_argument(
        "--only",
        nargs="+",
        choices=sorted(ENTITY_TYPES),
        default=None,
        help="Entity types to export (default: all).",
    )
    p_export.add_argument("--dry-run", action="store_true")
    p_export.add_argument(
        "--remove-existing",
        action="store_true",
        help="Delete the output folders of the exported entity types first.",
    )

    p_vendors = sub.add_parser("included-vendors")
    p_vendors.add_argument("--top-n", type=int, default=25)

    return p


def main() -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    configure_logging(Path("logs/summaries.log"))

    args = build_parser().parse_args()

    if args.cmd == "export":
        cmd_export(args)
    elif args.cmd == "included-vendors":
        cmd_included_vendors(args)
    else:
        raise SystemExit(2)


if __name__ == "__main__":
    main()
