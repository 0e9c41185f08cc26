"""Tests for the shutdown coordinator."""

import asyncio
import io
import os
import signal
from unittest.mock import Mock

import pytest

from gemproxy.core.shutdown import CTRL_C_BYTE, ShutdownCoordinator


pytestmark = [pytest.mark.unit, pytest.mark.usefixtures("restore_signals")]


def _coordinator(**kwargs) -> tuple[ShutdownCoordinator, list[int]]:
    exits: list[int] = []
    coordinator = ShutdownCoordinator(exit_func=exits.append, **kwargs)
    return coordinator, exits


def _foreign_handler(signum, frame) -> None:
    raise AssertionError("foreign handler should have been replaced")


def test_request_shutdown_is_idempotent() -> None:
    coordinator, exits = _coordinator()

    coordinator.request_shutdown("SIGINT")
    coordinator.request_shutdown("SIGTERM")
    coordinator.request_shutdown("CTRL+C-stdin")

    assert exits == [0]
    assert coordinator.shutdown_requested is True
    assert coordinator.shutdown_source == "SIGINT"


def test_signal_handler_requests_shutdown() -> None:
    coordinator, exits = _coordinator()

    coordinator._handle_signal(signal.SIGTERM, None)

    assert exits == [0]
    assert coordinator.shutdown_source == "SIGTERM"


def test_assert_handlers_replaces_foreign_handlers() -> None:
    coordinator, _ = _coordinator()
    signal.signal(signal.SIGTERM, _foreign_handler)

    displaced = coordinator.assert_handlers()

    assert displaced >= 1
    for sig in (signal.SIGINT, signal.SIGTERM):
        assert signal.getsignal(sig) == coordinator._handle_signal
    assert coordinator.assert_handlers() == 0


async def test_handlers_are_reasserted_periodically() -> None:
    coordinator, _ = _coordinator(interval=0.01, stdin_interrupt=False)
    coordinator.start(asyncio.get_running_loop())
    try:
        signal.signal(signal.SIGINT, _foreign_handler)
        await asyncio.sleep(0.1)
        assert signal.getsignal(signal.SIGINT) == coordinator._handle_signal
    finally:
        coordinator.stop()


def test_stdin_watch_skipped_without_tty() -> None:
    coordinator, _ = _coordinator(stdin=io.StringIO())
    loop = Mock()

    coordinator._watch_stdin(loop)

    loop.add_reader.assert_not_called()
    assert coordinator._stdin_fd is None


def test_ctrl_c_byte_requests_shutdown() -> None:
    coordinator, exits = _coordinator()
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, bytes([CTRL_C_BYTE]))
        coordinator._on_stdin_ready(read_fd)
    finally:
        os.close(read_fd)
        os.close(write_fd)

    assert exits == [0]
    assert coordinator.shutdown_source == "CTRL+C-stdin"


def test_other_stdin_bytes_are_ignored() -> None:
    coordinator, exits = _coordinator()
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, b"q")
        coordinator._on_stdin_ready(read_fd)
    finally:
        os.close(read_fd)
        os.close(write_fd)

    assert exits == []
    assert coordinator.shutdown_requested is False
