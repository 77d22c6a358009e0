"""
Shared pytest fixtures for key-value store tests.
"""

import os
import tempfile

import pytest

from kafi.engine.store import Store


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def db_path(temp_dir):
    """Provide a path for a store file that does not exist yet."""
    return os.path.join(temp_dir, "test.db")


@pytest.fixture
def store(db_path):
    """Provide an open string-to-string Store, closed after the test."""
    st = Store.open(db_path)
    yield st
    st.close()


@pytest.fixture
def sample_entries():
    """Provide sample key-value entries for testing."""
    return [
        ("satu", "111"),
        ("dua", "222"),
        ("tiga", "333"),
    ]
