"""Shared pytest fixtures for all tests."""

import logging
import os

import pytest
from fastapi.testclient import TestClient

from cli.config import Config
from common.constants import KIB, MIB
from server.config import TransferSettings, get_transfer_settings
from server.main import app
from server.services.chunk_generator import ChunkGenerator, get_chunk_generator


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .speedtest directory
    """
    config_dir = tmp_path / '.speedtest'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def default_settings():
    """Transfer settings with the shipped bounds (1 KiB / 10 MiB / 250 MiB, 64 KiB chunks)."""
    return TransferSettings().validate()


@pytest.fixture
def small_settings():
    """
    Transfer settings with small bounds so boundary tests stay fast.
    """
    return TransferSettings(
        min_size=1 * KIB,
        default_size=64 * KIB,
        max_size=2 * MIB,
        chunk_size=16 * KIB,
        max_upload=1 * MIB,
    ).validate()


@pytest.fixture
def make_client():
    """
    Build a TestClient with overridden transfer settings and chunk generator.

    Overrides are removed after the test.
    """
    def factory(settings=None, generator=None, **kwargs):
        if settings is not None:
            app.dependency_overrides[get_transfer_settings] = lambda: settings
        if generator is not None:
            app.dependency_overrides[get_chunk_generator] = lambda: generator
        return TestClient(app, **kwargs)

    yield factory
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, default_settings):
    """TestClient using the shipped size bounds."""
    return make_client(settings=default_settings)


@pytest.fixture
def small_client(make_client, small_settings):
    """TestClient using the small size bounds."""
    return make_client(settings=small_settings)


class CountingSource:
    """Random source that records how many bytes were requested."""

    def __init__(self, fail_after_calls=None):
        self.calls = 0
        self.bytes_generated = 0
        self.fail_after_calls = fail_after_calls

    def __call__(self, size):
        if self.fail_after_calls is not None and self.calls >= self.fail_after_calls:
            raise OSError("entropy source unavailable")
        self.calls += 1
        self.bytes_generated += size
        return os.urandom(size)


@pytest.fixture
def counting_source():
    return CountingSource()


@pytest.fixture
def failing_source_factory():
    """Return a factory for sources that raise OSError after N successful calls."""
    return lambda fail_after_calls: CountingSource(fail_after_calls=fail_after_calls)


@pytest.fixture
def counting_generator(counting_source):
    return ChunkGenerator(random_source=counting_source)


@pytest.fixture
def server_caplog(caplog, monkeypatch):
    """caplog that also sees records from the non-propagating 'server' logger."""
    monkeypatch.setattr(logging.getLogger("server"), "propagate", True)
    return caplog
