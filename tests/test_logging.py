"""Tests for the logging setup and the -v mapping."""

from __future__ import annotations

import logging

import pytest

from artemis_cli.utils.logging import SILENT, get_logger, setup_logging, verbosity_to_level


@pytest.mark.parametrize(
    "verbosity, level",
    [
        (0, SILENT),
        (1, logging.ERROR),
        (2, logging.WARNING),
        (3, logging.INFO),
        (4, logging.DEBUG),
        (5, logging.DEBUG),
    ],
)
def test_verbosity_to_level(verbosity, level):
    assert verbosity_to_level(verbosity) == level


def test_silent_is_above_every_level():
    assert SILENT > logging.CRITICAL


def test_log_file_receives_records(tmp_path):
    log_file = tmp_path / "logs" / "artemis-cli.log"

    setup_logging(level=logging.INFO, log_file=log_file)
    get_logger("artemis_cli.test").info("Successfully pushed to remote")
    get_logger("artemis_cli.test").debug("Indexing files...")

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert lines[0].endswith("| INFO     | artemis_cli.test | Successfully pushed to remote")


def test_silent_level_writes_nothing(tmp_path):
    log_file = tmp_path / "artemis-cli.log"

    setup_logging(level=SILENT, log_file=log_file)
    get_logger("artemis_cli.test").critical("Push failed")

    assert log_file.read_text(encoding="utf-8") == ""
