"""Pytest configuration and fixtures."""

import os

import pytest
from prometheus_client import CollectorRegistry

from polyview.adapters import AdapterRegistry, RenderCoordinator
from polyview.core.config import Settings
from polyview.declaration import parse_document
from polyview.monitoring.metrics import MetricsCollector
from polyview.styles import StyleResolver


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["POLYVIEW_LOG_LEVEL"] = "DEBUG"
    os.environ["POLYVIEW_RENDER_TIMEOUT"] = "2.0"


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings (never the process-wide cached instance)."""
    return Settings(default_platform=None, render_timeout=2.0)


@pytest.fixture
def metrics():
    """Metrics collector on its own registry."""
    return MetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def coordinator(settings, metrics):
    """Coordinator with the built-in adapters."""
    return RenderCoordinator(registry=AdapterRegistry(), settings=settings, metrics=metrics)


# ============================================================================
# Document Fixtures
# ============================================================================

LOGIN_FORM = {
    "app": {"name": "login"},
    "state": {"email": "", "submitted": False},
    "styles": {
        "base": {"fg": "white", "padding": 1},
        "title": {"extends": "base", "fg": "cyan", "attrs": ["bold"]},
    },
    "ui": [
        {
            "vbox#root": {
                "spacing": 1,
                "children": [
                    {"text#heading": {"content": "Sign in", "style": "title"}},
                    {"label#email_label": {"for": "email", "text": "Email"}},
                    {
                        "text_input#email": {
                            "placeholder": "you@example.com",
                            "form_id": "login_form",
                            "@submit": ["submit_login", {"submitted": True}],
                        }
                    },
                    {"button#go": {"label": "Sign in", "@click": "submit_login"}},
                ],
            }
        }
    ],
}


@pytest.fixture
def login_document():
    """Parsed login form."""
    return parse_document(LOGIN_FORM)


@pytest.fixture
def resolver(login_document):
    """Style resolver over the login form styles."""
    return StyleResolver(login_document)


@pytest.fixture
def login_form():
    """Raw login form declaration."""
    return LOGIN_FORM
