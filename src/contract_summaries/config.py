"""Configuration helpers and Settings container.

This module provides a frozen `Settings` dataclass and `get_settings`, which
reads the summary export options from environment variables (a `.env` file at
the project root is loaded first).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Container for summary export configuration.

    Attributes:
        spending_path: CSV of daily contract spending (`contract_spending_by_date`).
        owner_org_types_path: Reference CSV flagging core / DND owner orgs.
        output_dir: Root folder for all summary exports.
        individual_entries_path: Optional CSV of individual contract entries.
        update_summary_csv_files: When False, exports only log their target paths.
        remove_existing_summary_folders: Allow deleting stale entity folders.
        vendor_annual_total_threshold: Average yearly value a vendor needs to
            get its own summary folder.
        vendor_recent_threshold_years: Length of the recent window used for
            the second vendor inclusion pass.
        start_fiscal_year_short: First fiscal year of the coverage window.
        end_fiscal_year_short: Last fiscal year of the coverage window.
        round_totals_digits: Decimal places for monetary columns.
        round_percentages_digits: Decimal places for percentage columns.
        round_years_digits: Decimal places for duration columns.
        round_mean_digits: Decimal places for mean columns.
        fancy_round_accuracy: Step size used for abbreviated display values.
    """
    spending_path: Path
    owner_org_types_path: Path
    output_dir: Path
    individual_entries_path: Path | None = None
    update_summary_csv_files: bool = True
    remove_existing_summary_folders: bool = False
    vendor_annual_total_threshold: float = 1_000_000.0
    vendor_recent_threshold_years: int = 2
    start_fiscal_year_short: int = 2017
    end_fiscal_year_short: int = 2022
    round_totals_digits: int = 2
    round_percentages_digits: int = 4
    round_years_digits: int = 2
    round_mean_digits: int = 2
    fancy_round_accuracy: float = 0.1

    @property
    def summary_total_years(self) -> int:
        """Number of fiscal years in the coverage window (inclusive)."""
        return self.end_fiscal_year_short - self.start_fiscal_year_short + 1

    @property
    def vendor_path(self) -> Path:
        return self.output_dir / "vendors"

    @property
    def department_path(self) -> Path:
        return self.output_dir / "departments"

    @property
    def category_path(self) -> Path:
        return self.output_dir / "categories"

    @property
    def it_subcategory_path(self) -> Path:
        return self.output_dir / "it_subcategories"

    @property
    def overall_path(self) -> Path:
        return self.output_dir / "overall"

    @property
    def meta_path(self) -> Path:
        return self.output_dir / "meta"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise RuntimeError(f"{name} must be a boolean (true/false), got {raw!r}.")


def _env_number(name: str, default: float, cast: type = float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a {cast.__name__}, got {raw!r}.") from exc


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if a value cannot be parsed, or if the coverage window
            or the recent-years window is empty.
    """
    entries = os.getenv("INDIVIDUAL_ENTRIES_PATH", "").strip()

    settings = Settings(
        spending_path=Path(
            os.getenv("SPENDING_BY_DATE_PATH", "data/source/contract_spending_by_date.csv")
        ),
        owner_org_types_path=Path(
            os.getenv("OWNER_ORG_TYPES_PATH", "data/owner_orgs/owner_orgs.csv")
        ),
        output_dir=Path(os.getenv("SUMMARY_OUTPUT_DIR", "data/out")),
        individual_entries_path=Path(entries) if entries else None,
        update_summary_csv_files=_env_bool("UPDATE_SUMMARY_CSV_FILES", True),
        remove_existing_summary_folders=_env_bool("REMOVE_EXISTING_SUMMARY_FOLDERS", False),
        vendor_annual_total_threshold=_env_number(
            "SUMMARY_VENDOR_ANNUAL_TOTAL_THRESHOLD", 1_000_000.0
        ),
        vendor_recent_threshold_years=int(
            _env_number("SUMMARY_VENDOR_RECENT_THRESHOLD_YEARS", 2, int)
        ),
        start_fiscal_year_short=int(_env_number("SUMMARY_START_FISCAL_YEAR_SHORT", 2017, int)),
        end_fiscal_year_short=int(_env_number("SUMMARY_END_FISCAL_YEAR_SHORT", 2022, int)),
        round_totals_digits=int(_env_number("ROUND_TOTALS_DIGITS", 2, int)),
        round_percentages_digits=int(_env_number("ROUND_PERCENTAGES_DIGITS", 4, int)),
        round_years_digits=int(_env_number("ROUND_YEARS_DIGITS", 2, int)),
        round_mean_digits=int(_env_number("ROUND_MEAN_DIGITS", 2, int)),
        fancy_round_accuracy=_env_number("FANCY_ROUND_ACCURACY", 0.1),
    )

    if settings.summary_total_years < 1:
        raise RuntimeError(
            "SUMMARY_START_FISCAL_YEAR_SHORT must not be after "
            "SUMMARY_END_FISCAL_YEAR_SHORT."
        )
    if settings.vendor_recent_threshold_years < 1:
        raise RuntimeError("SUMMARY_VENDOR_RECENT_THRESHOLD_YEARS must be at least 1.")

    return settings
