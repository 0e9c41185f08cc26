"""Process shutdown coordination.

Other parts of the hosting process (uvicorn among them) install their own
SIGINT/SIGTERM handlers, some of which wait for in-flight connections to
drain. The coordinator takes exclusive ownership of those signals: every
assertion replaces the whole handler set, and a periodic task re-asserts it in
case something re-registered in the meantime. Shutdown is immediate; open
connections are abandoned.
"""

import asyncio
import contextlib
import os
import signal
import sys
from collections.abc import Callable
from types import FrameType
from typing import Any, TextIO

from gemproxy.core.logging import flush_logging, get_logger


logger = get_logger(__name__)

CTRL_C_BYTE = 0x03
SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)
_DEFAULT_HANDLERS: tuple[Any, ...] = (
    signal.SIG_DFL,
    signal.SIG_IGN,
    signal.default_int_handler,
    None,
)


class ShutdownCoordinator:
    """Owns the shutdown signals and exposes an idempotent shutdown request."""

    def __init__(
        self,
        interval: float = 5.0,
        stdin_interrupt: bool = True,
        exit_func: Callable[[int], Any] = os._exit,
        stdin: TextIO | None = None,
    ) -> None:
        self.interval = interval
        self.stdin_interrupt = stdin_interrupt
        self._exit_func = exit_func
        self._stdin = stdin
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None
        self._stdin_fd: int | None = None
        self._saved_tty: list[Any] | None = None
        self.shutdown_requested = False
        self.shutdown_source: str | None = None

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        self.request_shutdown(signal.Signals(signum).name)

    def assert_handlers(self) -> int:
        """Replace every handler for the shutdown signals with our own.

        Returns:
            Number of foreign handlers that were displaced
        """
        displaced = 0
        for sig in SHUTDOWN_SIGNALS:
            if self._loop is not None:
                # Handlers registered through the event loop live outside
                # signal.getsignal(); drop them first.
                with contextlib.suppress(RuntimeError, ValueError, NotImplementedError):
                    if self._loop.remove_signal_handler(sig):
                        displaced += 1

            current = signal.getsignal(sig)
            if current != self._handle_signal and current not in _DEFAULT_HANDLERS:
                displaced += 1
            signal.signal(sig, self._handle_signal)

        if displaced:
            logger.info(
                "signal_handlers_replaced", displaced=displaced, category="lifecycle"
            )
        return displaced

    async def _reassert_periodically(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.assert_handlers()

    def start(self, loop: asyncio.AbstractEventLoop) -> None:
        """Assert handlers now, keep re-asserting, and watch stdin for Ctrl+C."""
        self._loop = loop
        before = {sig.name: repr(signal.getsignal(sig)) for sig in SHUTDOWN_SIGNALS}
        logger.debug("signal_handlers_before_cleanup", handlers=before)
        self.assert_handlers()
        self._task = loop.create_task(self._reassert_periodically())

        if self.stdin_interrupt:
            self._watch_stdin(loop)

    def _watch_stdin(self, loop: asyncio.AbstractEventLoop) -> None:
        stream = self._stdin or sys.stdin
        if stream is None or not stream.isatty():
            logger.info("stdin_interrupt_skipped", reason="not a TTY")
            return

        try:
            import termios
        except ImportError:
            logger.info("stdin_interrupt_skipped", reason="termios unavailable")
            return

        try:
            fd = stream.fileno()
            saved = termios.tcgetattr(fd)
            attrs = termios.tcgetattr(fd)
            # Non-canonical, no echo, and Ctrl+C delivered as a byte.
            attrs[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG)
            termios.tcsetattr(fd, termios.TCSANOW, attrs)
            loop.add_reader(fd, self._on_stdin_ready, fd)
        except (termios.error, OSError, ValueError, NotImplementedError) as e:
            logger.warning("stdin_interrupt_unavailable", error=str(e))
            return

        self._stdin_fd = fd
        self._saved_tty = saved
        logger.info("stdin_interrupt_active")

    def _on_stdin_ready(self, fd: int) -> None:
        try:
            data = os.read(fd, 64)
        except OSError:
            data = b""
        if not data:
            self._stop_watching_stdin()
            return
        if data[0] == CTRL_C_BYTE:
            self.request_shutdown("CTRL+C-stdin")

    def _stop_watching_stdin(self) -> None:
        if self._stdin_fd is None:
            return
        if self._loop is not None:
            with contextlib.suppress(RuntimeError, ValueError):
                self._loop.remove_reader(self._stdin_fd)
        self._restore_terminal()
        self._stdin_fd = None

    def _restore_terminal(self) -> None:
        if self._stdin_fd is None or self._saved_tty is None:
            return
        import termios

        try:
            termios.tcsetattr(self._stdin_fd, termios.TCSADRAIN, self._saved_tty)
        except (termios.error, OSError) as e:
            logger.debug("terminal_restore_failed", error=str(e))
        self._saved_tty = None

    def request_shutdown(self, source: str = "explicit") -> None:
        """Exit the process now. Later calls, from any trigger, are no-ops."""
        if self.shutdown_requested:
            return
        self.shutdown_requested = True
        self.shutdown_source = source

        logger.info("server_shutting_down", source=source, category="lifecycle")
        self._restore_terminal()
        flush_logging()
        self._exit_func(0)

    def stop(self) -> None:
        """Cancel the re-assertion task and give the terminal back."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._stop_watching_stdin()
