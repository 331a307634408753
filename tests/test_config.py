from __future__ import annotations

from pathlib import Path

import pytest

from contract_summaries.config import Settings, get_settings

ENV_VARS = (
    "SPENDING_BY_DATE_PATH",
    "OWNER_ORG_TYPES_PATH",
    "SUMMARY_OUTPUT_DIR",
    "INDIVIDUAL_ENTRIES_PATH",
    "UPDATE_SUMMARY_CSV_FILES",
    "REMOVE_EXISTING_SUMMARY_FOLDERS",
    "SUMMARY_VENDOR_ANNUAL_TOTAL_THRESHOLD",
    "SUMMARY_VENDOR_RECENT_THRESHOLD_YEARS",
    "SUMMARY_START_FISCAL_YEAR_SHORT",
    "SUMMARY_END_FISCAL_YEAR_SHORT",
    "ROUND_TOTALS_DIGITS",
    "ROUND_PERCENTAGES_DIGITS",
    "ROUND_YEARS_DIGITS",
    "ROUND_MEAN_DIGITS",
    "FANCY_ROUND_ACCURACY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = get_settings()
    assert s.update_summary_csv_files is True
    assert s.remove_existing_summary_folders is False
    assert s.individual_entries_path is None
    assert s.vendor_annual_total_threshold == 1_000_000.0
    assert s.summary_total_years == 6
    assert s.round_percentages_digits == 4


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SUMMARY_OUTPUT_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("INDIVIDUAL_ENTRIES_PATH", "data/source/contracts_individual_entries.csv")
    monkeypatch.setenv("UPDATE_SUMMARY_CSV_FILES", "false")
    monkeypatch.setenv("REMOVE_EXISTING_SUMMARY_FOLDERS", "Yes")
    monkeypatch.setenv("SUMMARY_VENDOR_ANNUAL_TOTAL_THRESHOLD", "250000")
    monkeypatch.setenv("SUMMARY_START_FISCAL_YEAR_SHORT", "2019")
    monkeypatch.setenv("SUMMARY_END_FISCAL_YEAR_SHORT", "2021")

    s = get_settings()
    assert s.output_dir == tmp_path / "out"
    assert s.vendor_path == tmp_path / "out" / "vendors"
    assert s.meta_path == tmp_path / "out" / "meta"
    assert s.individual_entries_path == Path("data/source/contracts_individual_entries.csv")
    assert s.update_summary_csv_files is False
    assert s.remove_existing_summary_folders is True
    assert s.vendor_annual_total_threshold == 250_000.0
    assert s.summary_total_years == 3


def test_bad_boolean_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UPDATE_SUMMARY_CSV_FILES", "sometimes")
    with pytest.raises(RuntimeError, match="UPDATE_SUMMARY_CSV_FILES"):
        get_settings()


def test_bad_number_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROUND_TOTALS_DIGITS", "two")
    with pytest.raises(RuntimeError, match="ROUND_TOTALS_DIGITS"):
        get_settings()


def test_empty_window_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUMMARY_START_FISCAL_YEAR_SHORT", "2023")
    monkeypatch.setenv("SUMMARY_END_FISCAL_YEAR_SHORT", "2022")
    with pytest.raises(RuntimeError):
        get_settings()


def test_empty_recent_window_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUMMARY_VENDOR_RECENT_THRESHOLD_YEARS", "0")
    with pytest.raises(RuntimeError):
        get_settings()


def test_settings_is_frozen(tmp_path: Path) -> None:
    s = Settings(spending_path=tmp_path, owner_org_types_path=tmp_path, output_dir=tmp_path)
    with pytest.raises(AttributeError):
        s.output_dir = tmp_path / "elsewhere"  # type: ignore[misc]
