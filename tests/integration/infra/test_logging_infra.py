from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, and log file rotation logic.
"""

import logging
import time
from logging.handlers import QueueHandler
from pathlib import Path

import pytest

from memoguard.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    shutdown_logging,
)
from memoguard.infra.logging.core import _CONFIGURED_FLAG_ATTR, _QUEUE_LISTENER_ATTR
from memoguard.infra.logging.handlers import _HANDLER_TAG_ATTR


@pytest.fixture(autouse=True)
def reset_logging():
    """Detach our handlers before and after each test."""
    shutdown_logging()
    yield
    shutdown_logging()


def _our_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_TAG_ATTR, False)]


def test_logging_idempotency() -> None:
    """Multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    initial = len(_our_handlers())
    configure_logging(cfg)

    assert initial == 1
    assert len(_our_handlers()) == initial
    assert isinstance(_our_handlers()[0], QueueHandler)


def test_force_reconfigures_level() -> None:
    configure_logging(LoggingConfig(level="INFO"))
    configure_logging(LoggingConfig(level="DEBUG"), force=True)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(_our_handlers()) == 1


def test_shutdown_detaches_everything() -> None:
    configure_logging(LoggingConfig(level="INFO"))
    shutdown_logging()

    root = logging.getLogger()
    assert _our_handlers() == []
    assert getattr(root, _QUEUE_LISTENER_ATTR, None) is None
    assert getattr(root, _CONFIGURED_FLAG_ATTR) is False


def test_cli_profile_levels() -> None:
    assert LoggingConfig.for_cli().level == "WARNING"
    assert LoggingConfig.for_cli(debug=True, log_file="/tmp/x.log").log_file == "/tmp/x.log"


def test_log_rotation(tmp_path: Path) -> None:
    """Files rotate once the size limit is exceeded."""
    log_file = tmp_path / "test_rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    configure_logging(cfg)
    logger = logging.getLogger("memoguard.test_rotate")
    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    # Draining the queue flushes every pending record.
    shutdown_logging()
    time.sleep(0.1)

    assert log_file.exists()
    assert (tmp_path / "test_rotate.log.1").exists()


def test_default_log_path_location() -> None:
    path = get_default_log_path()
    assert path.endswith("memoguard.log")
    assert "logs" in path
