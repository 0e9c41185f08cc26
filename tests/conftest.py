"""Shared test fixtures and configuration for gemproxy tests.

Fixtures build real application components; only the upstream content
generator is replaced, by a scripted fake.
"""

import logging
import signal
from collections.abc import Generator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from gemproxy.api.app import create_app
from gemproxy.config import BackendSettings, LoggingSettings, ServerSettings, Settings
from gemproxy.config.backend import API_KEY_ENV_VARS
from gemproxy.core.logging import setup_logging
from gemproxy.services.chat_completion import ChatCompletionService
from tests.helpers import FakeContentGenerator, text_response


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom settings."""
    config.option.asyncio_mode = "auto"

    # Same logging pipeline as the server, without the file sink.
    setup_logging(level="DEBUG", log_file=None, console=True, colors=False)


@pytest.fixture
def isolated_env(
    tmp_path: Any, monkeypatch: pytest.MonkeyPatch
) -> Generator[Any, None, None]:
    """Run in an empty directory with no config files or backend keys around."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("CONFIG_FILE", raising=False)
    for name in API_KEY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield tmp_path


@pytest.fixture
def test_settings(isolated_env: Any) -> Settings:
    return Settings(
        server=ServerSettings(install_signal_handlers=False, stdin_interrupt=False),
        logging=LoggingSettings(file=None, colors=False),
        backend=BackendSettings(model="auto"),
    )


@pytest.fixture
def fake_generator() -> FakeContentGenerator:
    return FakeContentGenerator(
        response=text_response("hello"),
        stream_events=[text_response("hel"), text_response("lo")],
    )


@pytest.fixture
def chat_service(fake_generator: FakeContentGenerator) -> ChatCompletionService:
    return ChatCompletionService(fake_generator, model="auto")


@pytest.fixture
def app(test_settings: Settings, fake_generator: FakeContentGenerator) -> FastAPI:
    return create_app(test_settings, content_generator=fake_generator)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    # pytest swaps its own capture handlers in and out around every phase.
    saved_handlers = [
        h for h in root.handlers if not type(h).__module__.startswith("_pytest")
    ]
    saved_level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


@pytest.fixture
def restore_signals() -> Generator[None, None, None]:
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    yield
    for sig, handler in saved.items():
        signal.signal(sig, handler)
