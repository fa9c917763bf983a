import logging

import pytest

from infra.logging_config import LOG_FILE, configure_logging


def installed(root):
    return [h for h in root.handlers if getattr(h, "_ga4audit_handler", False)]


@pytest.fixture
def root():
    root = logging.getLogger()
    saved_level = root.level
    yield root
    for h in installed(root):
        root.removeHandler(h)
        h.close()
    root.setLevel(saved_level)


def test_installs_console_and_file_handler_once(root, tmp_path):
    path = configure_logging("DEBUG", tmp_path)
    configure_logging("WARNING", tmp_path)
    assert path == tmp_path / LOG_FILE
    assert len(installed(root)) == 2
    assert root.level == logging.WARNING
    assert all(h.level == logging.WARNING for h in installed(root))


def test_file_receives_records(root, tmp_path):
    path = configure_logging("INFO", tmp_path)
    logging.getLogger("services.history").info("Score saved")
    for h in installed(root):
        h.flush()
    assert "Score saved" in path.read_text(encoding="utf-8")


def test_browser_loggers_stay_quiet(root, tmp_path):
    configure_logging("DEBUG", tmp_path)
    assert logging.getLogger("playwright").level == logging.WARNING
