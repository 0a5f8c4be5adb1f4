# File: tests/conftest.py

import os
import sys
import logging

import pytest

# 1. Add project root to path
sys.path.append(os.getcwd())

# 2. Import Settings
from app.core.config.settings import settings


@pytest.fixture(scope="session", autouse=True)
def global_setup():
    """
    Runs once per test session.
    Keeps library logs visible at INFO for failing tests.
    """
    logging.getLogger("app").setLevel(logging.INFO)
    yield


@pytest.fixture(scope="function", autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """
    Runs before EVERY test.
    Points staging and output folders at the test's tmp_path so nothing
    touches the real temp or documents folders.
    """
    staging = tmp_path / "audio_converter_temp"
    output = tmp_path / "Output"
    monkeypatch.setattr(settings, "STAGING_DIR", staging)
    monkeypatch.setattr(settings, "OUTPUT_DIR", output)
    yield
