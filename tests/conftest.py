"""Shared fixtures: app/ on the import path, fresh demo stores, a default config."""

import os
import sys

import pytest

APP_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "app"))
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

from config import AppConfig  # noqa: E402
from data.mock_data import MemoryStore, seed_demo_store  # noqa: E402


@pytest.fixture
def store() -> MemoryStore:
    """A freshly seeded demo store; safe to mutate."""
    return seed_demo_store(MemoryStore())


@pytest.fixture
def empty_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cfg() -> AppConfig:
    return AppConfig(
        supabase_url="",
        supabase_key="",
        supabase_service_key=None,
        assets_bucket="assets",
        public_base_url="https://meet.example.org",
        college_name="GOVERNMENT ENGINEERING COLLEGE WAYANAD",
        hod_name="Dr. Joly Thomas",
        principal_name="Dr. Pradeep V",
        issuing_department="DEPARTMENT OF PHYSICAL EDUCATION",
        meet_title="ANNUAL SPORTS MEET 2025-26",
        meet_dates="10th & 11th February 2026",
        log_level="INFO",
        log_json=False,
        default_use_mock=True,
    )
