"""
Pytest Configuration File

This module provides fixtures and configuration for all tests.
"""

import pytest
import os
import sys
from fastapi.testclient import TestClient

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from logdrop.app import create_app


@pytest.fixture
def storage_root(tmp_path):
    """Fixture for an isolated storage root (not created yet)"""
    return tmp_path / "eotw_data"


@pytest.fixture
def test_app(storage_root):
    """Fixture for an application bound to the temporary storage root"""
    return create_app(storage_root=storage_root)


@pytest.fixture
def test_client(test_app):
    """Fixture for FastAPI test client with startup/shutdown run"""
    with TestClient(test_app) as client:
        yield client


@pytest.fixture
def stored_files(storage_root):
    """Fixture returning a callable that lists files under the storage root"""
    def _list():
        if not storage_root.exists():
            return []
        return sorted(p for p in storage_root.rglob("*") if p.is_file())
    return _list
