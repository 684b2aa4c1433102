"""
Pytest configuration and shared fixtures for copyplane tests.

No test touches the network: storage clients come from a recording
builder, secrets from an in-memory vault.
"""

import logging
import threading

import pytest
from prometheus_client import CollectorRegistry

from copyplane.core import config as config_module
from copyplane.core import env as env_module
from copyplane.core.logger import set_logger
from copyplane.monitoring.prometheus import AccessMetrics
from copyplane.secrets.tokens import StaticSecretToken, TemporarySecretToken
from copyplane.secrets.vault import InMemoryVault
from copyplane.storage.clients import ClientCache
from copyplane.storage.schema import LocationDescriptor, S3BucketSchema

# ============================================
# AUTO-USE FIXTURES
# ============================================


@pytest.fixture(autouse=True)
def reset_globals():
    """Isolate the global settings, env manager and custom logger per test."""
    yield
    config_module._global_settings = None
    env_module._global_env = None
    set_logger(None)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop COPYPLANE_* variables leaking in from the host environment."""
    import os

    for name in list(os.environ):
        if name.startswith("COPYPLANE_"):
            monkeypatch.delenv(name, raising=False)
    yield


# ============================================
# CLIENT FIXTURES
# ============================================


class FakeClient:
    """Stand-in for a boto3 client."""

    def __init__(self, kind, config):
        self.kind = kind
        self.config = config
        self.closed = False

    def close(self):
        self.closed = True


class RecordingBuilder:
    """Client builder that records every build it performs."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.builds = []
        self._lock = threading.Lock()

    def __call__(self, kind, config):
        if self.delay:
            # widen the race window between concurrent first requests
            threading.Event().wait(self.delay)
        client = FakeClient(kind, config)
        with self._lock:
            self.builds.append((kind, config))
        return client


@pytest.fixture
def builder():
    return RecordingBuilder()


@pytest.fixture
def cache(builder):
    return ClientCache(builder=builder)


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def metrics(registry):
    return AccessMetrics(registry=registry)


# ============================================
# SECRET FIXTURES
# ============================================


@pytest.fixture
def static_token():
    return StaticSecretToken("AKIASTATIC", "static-secret")


@pytest.fixture
def temporary_token():
    return TemporarySecretToken("ASIATEMP", "temp-secret", "session-token", 1767225600000)


@pytest.fixture
def vault():
    return InMemoryVault()


# ============================================
# LOCATION FIXTURES
# ============================================


@pytest.fixture
def s3_location():
    def _make(**properties):
        defaults = {
            S3BucketSchema.BUCKET_NAME: "bucket",
            S3BucketSchema.REGION: "eu-central-1",
        }
        defaults.update(properties)
        return LocationDescriptor(S3BucketSchema.TYPE, {k: v for k, v in defaults.items() if v is not None})

    return _make


@pytest.fixture
def caplog_warning(caplog):
    caplog.set_level(logging.WARNING, logger="copyplane")
    return caplog
