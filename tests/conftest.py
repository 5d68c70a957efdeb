"""Shared fixtures: published reference hashes."""

import base64

import pytest

# Hashes of the reference images shipped with the format's demo page
SUNRISE = base64.b64decode("1QcSHQRnh493V4dIh4eXh1h4kJUI")
FIREFOX = base64.b64decode("X5qGNQw7oElslqhGWfSE+Q6oJ1h2iHB2Rw==")
SUNRISE_LARGE = base64.b64decode("VvYRNQRod313B4h3eHhYiHeAiQUo")


@pytest.fixture
def sunrise_hash() -> bytes:
    """Opaque portrait photo."""
    return SUNRISE


@pytest.fixture
def firefox_hash() -> bytes:
    """Square logo with transparency."""
    return FIREFOX


@pytest.fixture
def sunrise_large_hash() -> bytes:
    """Opaque portrait photo at a larger source size."""
    return SUNRISE_LARGE


@pytest.fixture(params=["sunrise", "firefox", "sunrise_large"])
def reference_hash(request: pytest.FixtureRequest) -> bytes:
    """Each reference hash in turn."""
    return {"sunrise": SUNRISE, "firefox": FIREFOX, "sunrise_large": SUNRISE_LARGE}[
        request.param
    ]
