"""Shared test fixtures for venafi-issuer."""

import pytest

import venafi_issuer.secretstore.keyvault as _keyvault
from venafi_issuer.events import EventSink


def pytest_runtest_setup(item):
    """Reset module-level caches between tests."""
    _keyvault._credential = None


class RecordingEventSink(EventSink):
    """Keeps recorded events as (event_type, reason, rendered message) tuples."""

    def __init__(self):
        self.events = []

    def record(self, event_type, reason, message_template, *args):
        message = message_template % args if args else message_template
        self.events.append((event_type, reason, message))


@pytest.fixture
def event_sink():
    return RecordingEventSink()
