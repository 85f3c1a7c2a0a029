from __future__ import annotations

import logging

from wrapgrid.runtime.errors import (
    RECOVERABLE_FETCH_ERRORS,
    FetchError,
    FetchFailedError,
    FetchTimeoutError,
    WrapGridError,
    log_recoverable,
)


def test_fetch_errors_carry_url_and_reason() -> None:
    error = FetchTimeoutError("https://example.test/a.jpg", "read timeout")

    assert isinstance(error, FetchError)
    assert isinstance(error, WrapGridError)
    assert error.url == "https://example.test/a.jpg"
    assert error.reason == "read timeout"
    assert "read timeout" in str(error)


def test_recoverable_fetch_errors_cover_fetch_and_os_failures() -> None:
    assert issubclass(FetchFailedError, RECOVERABLE_FETCH_ERRORS)
    assert issubclass(ConnectionResetError, RECOVERABLE_FETCH_ERRORS)
    assert not issubclass(KeyError, RECOVERABLE_FETCH_ERRORS)


def test_log_recoverable_attaches_exception(caplog) -> None:
    logger = logging.getLogger("wrapgrid.test.errors")
    with caplog.at_level(logging.DEBUG, logger="wrapgrid.test.errors"):
        try:
            raise FetchFailedError("mem://x", "empty body")
        except RECOVERABLE_FETCH_ERRORS:
            log_recoverable(logger, "fetch_failed key=%d", 7)

    record = caplog.records[-1]
    assert record.getMessage() == "fetch_failed key=7"
    assert record.levelno == logging.DEBUG
    assert record.exc_info is not None
