from __future__ import annotations

import logging
from pathlib import Path

from contract_summaries.logging_config import configure_logging


def test_configure_logging_adds_stream_handler() -> None:
    # Ensure configuring logging doesn't raise and attaches a StreamHandler
    configure_logging(None)
    root = logging.getLogger()
    assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)


def test_configure_logging_writes_log_file(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "summaries.log"
    configure_logging(log_path)
    try:
        logging.getLogger("contract_summaries.test").info("exported %d files", 3)
        text = log_path.read_text(encoding="utf-8")
        assert " | INFO | contract_summaries.test | exported 3 files" in text
    finally:
        configure_logging(None)


def test_configure_logging_quiets_dask_io() -> None:
    configure_logging(None, level=logging.DEBUG)
    assert logging.getLogger("fsspec").level == logging.WARNING
    configure_logging(None)
