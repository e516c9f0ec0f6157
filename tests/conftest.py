"""
Root test configuration and fixtures for the attendance reconciler.

Provides small directories shared by the unit tests and makes sure every
test sees freshly loaded settings.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Add project root to path to allow imports without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from reconciler.core.models import DirectoryPerson  # noqa: E402
from reconciler.settings import ReconcilerSettings, get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def reset_settings_cache(monkeypatch):
    """Clear cached settings and RECONCILER_* variables around each test."""
    for key in [k for k in os.environ if k.startswith("RECONCILER_")]:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> ReconcilerSettings:
    """Default settings, independent of any .env file in the working directory."""
    return ReconcilerSettings(_env_file=None)


@pytest.fixture
def mario_rossi() -> DirectoryPerson:
    return DirectoryPerson(id=1, firstname="Mario", lastname="Rossi", email="m.rossi@x.com")


@pytest.fixture
def small_directory(mario_rossi) -> list[DirectoryPerson]:
    """Three unrelated people"""
    return [
        mario_rossi,
        DirectoryPerson(id=2, firstname="Giulia", lastname="Bianchi"),
        DirectoryPerson(id=3, firstname="Luca", lastname="Verdi"),
    ]


@pytest.fixture
def rossi_family() -> list[DirectoryPerson]:
    """Two people sharing lastname and firstname initial"""
    return [
        DirectoryPerson(id=1, firstname="Mario", lastname="Rossi"),
        DirectoryPerson(id=2, firstname="Marco", lastname="Rossi"),
    ]
