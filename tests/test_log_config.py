from __future__ import annotations

import logging

import pytest

import log_config


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def console_handlers(root):
    return [h for h in root.handlers if h.get_name() == log_config.HANDLER_NAME]


def test_configure_logging_twice_installs_one_handler(root_logger):
    log_config.configure_logging()
    log_config.configure_logging()

    assert len(console_handlers(root_logger)) == 1


def test_level_from_argument_and_environment(root_logger, monkeypatch):
    log_config.configure_logging("debug")
    assert root_logger.level == logging.DEBUG

    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    log_config.configure_logging()
    assert root_logger.level == logging.WARNING


def test_unknown_level_falls_back_to_info(root_logger):
    log_config.configure_logging("chatty")
    assert root_logger.level == logging.INFO
