"""
Focus Frenzy Capture Service — Test Configuration (conftest.py)
=================================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every test gets its own captures directory and its own app, so
       nothing touches ./captures and tests cannot see each other's files.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── captures_dir: Path of a captures directory that does NOT exist yet
    ├── capture_store: CaptureStore rooted at captures_dir
    ├── sample_image_bytes: Minimal JPEG bytes
    ├── test_settings: Settings pointing at captures_dir
    └── test_client: HTTPX AsyncClient bound to create_app(test_settings)
"""

import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any focusfrenzy import builds the module-level settings
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.setdefault("CAPTURES_DIR", "./test-captures-unused")

from focusfrenzy.config import Settings  # noqa: E402
from focusfrenzy.main import create_app  # noqa: E402
from focusfrenzy.services.capture_store import CaptureStore  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def captures_dir(tmp_path):
    """
    Path of a captures directory that has not been created.

    Why not created: "no directory yet" is a distinct state the listing
    endpoints must handle, and the first upload must create it.
    """
    return tmp_path / "captures"


@pytest.fixture
def capture_store(captures_dir):
    """A CaptureStore with the default 10MB ceiling and the real clock."""
    return CaptureStore(root=str(captures_dir))


@pytest.fixture
def sample_image_bytes():
    """
    Minimal JPEG bytes: SOI marker + JFIF header + EOI marker.

    Not a real photograph; the service never decodes the image.
    """
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def test_settings(captures_dir):
    """Settings pointing at the per-test captures directory."""
    return Settings(captures_dir=str(captures_dir), log_level="WARNING")


@pytest_asyncio.fixture
async def test_client(test_settings):
    """
    HTTPX AsyncClient talking to a fresh app built from test_settings.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(test_settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
